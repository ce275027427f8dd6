from __future__ import annotations

from decimal import Decimal
from pathlib import Path

import pandas as pd

from ...payroll.model import ReportPayload
from .base import ReportExporter, table_header, table_rows


class XlsxReportExporter(ReportExporter):
    extension = "xlsx"
    mimetype = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
    sheet_name = "Attendance Report"

    def export(self, payload: ReportPayload, *, directory: Path, report_id: str) -> Path:
        path = self.target_path(payload, directory, report_id)
        rows = [[float(v) if isinstance(v, Decimal) else v for v in row] for row in table_rows(payload)]
        df = pd.DataFrame(rows, columns=table_header(payload))

        with pd.ExcelWriter(path, engine="openpyxl") as writer:
            df.to_excel(writer, index=False, sheet_name=self.sheet_name)
            sheet = writer.sheets[self.sheet_name]
            sheet.column_dimensions["A"].width = 24
            sheet.freeze_panes = "B2"
        return path
