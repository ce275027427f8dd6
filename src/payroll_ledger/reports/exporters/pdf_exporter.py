from __future__ import annotations

import os
from decimal import Decimal
from pathlib import Path

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4, landscape
from reportlab.lib.styles import getSampleStyleSheet
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from ...payroll.model import ReportPayload
from .base import ReportExporter, format_money, table_header, table_rows


class PdfReportExporter(ReportExporter):
    extension = "pdf"
    mimetype = "application/pdf"

    def export(self, payload: ReportPayload, *, directory: Path, report_id: str) -> Path:
        path = self.target_path(payload, directory, report_id)
        tmp_path = path.with_name(path.name + ".tmp")

        styles = getSampleStyleSheet()
        styles["BodyText"].fontSize = 8
        styles["BodyText"].leading = 9.5

        doc = SimpleDocTemplate(
            str(tmp_path),
            pagesize=landscape(A4),
            leftMargin=18, rightMargin=18, topMargin=24, bottomMargin=18,
            title=f"Attendance Report {payload.folder_name}",
        )
        subtitle = f"{payload.folder_name}: {payload.start_date.isoformat()} to {payload.end_date.isoformat()}"
        content = [Paragraph("Attendance Report", styles["Title"]), Paragraph(subtitle, styles["Normal"]), Spacer(1, 8)]

        def cell(value) -> Paragraph:
            text = format_money(value) if isinstance(value, Decimal) else str(value)
            text = text.replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;")
            return Paragraph(text, styles["BodyText"])

        data = [[cell(h) for h in table_header(payload)]]
        data += [[cell(v) for v in row] for row in table_rows(payload)]

        tbl = Table(data, repeatRows=1, hAlign="LEFT")
        tbl.setStyle(TableStyle([
            ("BACKGROUND", (0, 0), (-1, 0), colors.HexColor("#f0f9ff")),
            ("GRID", (0, 0), (-1, -1), 0.25, colors.grey),
            ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
            ("BACKGROUND", (0, -2), (-1, -2), colors.HexColor("#f9fafb")),
            ("BACKGROUND", (0, -1), (-1, -1), colors.HexColor("#f0f9ff")),
        ]))
        content.append(tbl)

        doc.build(content)
        os.replace(tmp_path, path)
        return path
