from __future__ import annotations

from abc import ABC, abstractmethod
from decimal import Decimal
from pathlib import Path
from typing import Any

from werkzeug.utils import secure_filename

from ...core.constants import CURRENCY_SYMBOL
from ...payroll.model import ReportPayload


class ReportExporter(ABC):
    """Renders a computed report to a file and returns where it was written.

    Every export gets its own file: the name carries the report id, so regenerating
    a range never overwrites a file an archived report still points at.
    """

    extension: str = ""
    mimetype: str = "application/octet-stream"

    @abstractmethod
    def export(self, payload: ReportPayload, *, directory: Path, report_id: str) -> Path:
        raise NotImplementedError

    def target_path(self, payload: ReportPayload, directory: Path, report_id: str) -> Path:
        directory = Path(directory)
        directory.mkdir(parents=True, exist_ok=True)
        return directory / report_filename(payload, self.extension, report_id)


def report_filename(payload: ReportPayload, extension: str, report_id: str) -> str:
    stem = f"{payload.folder_name}_{payload.start_date.isoformat()}_{payload.end_date.isoformat()}_{report_id}"
    return secure_filename(f"{stem}.{extension}") or f"report_{report_id}.{extension}"


def table_header(payload: ReportPayload) -> list[str]:
    return (
        ["Worker Name"]
        + [d.strftime("%a %d/%m") for d in payload.dates]
        + [
            "Present Days",
            "Half Days",
            f"Total Payment ({CURRENCY_SYMBOL})",
            f"Advance Deducted ({CURRENCY_SYMBOL})",
            f"Net Payment ({CURRENCY_SYMBOL})",
            "Advance Details",
        ]
    )


def table_rows(payload: ReportPayload) -> list[list[Any]]:
    """Worker rows, then a Total row and a Note Distribution row; money stays Decimal."""
    blanks = [""] * len(payload.dates)
    rows: list[list[Any]] = [
        [r.name, *r.codes, r.present_count, r.half_day_count, r.total_payment, r.advance_deducted, r.net_payment, r.advance_remarks]
        for r in payload.rows
    ]
    t = payload.totals
    rows.append(["Total", *blanks, "", "", t.total_payment, t.advance_deducted, t.net_payment, ""])
    rows.append(["Note Distribution", *blanks, "", "", "", "", payload.denomination.describe(), ""])
    return rows


def format_money(value: Decimal) -> str:
    return f"{CURRENCY_SYMBOL}{value:,.2f}".replace(".00", "")
