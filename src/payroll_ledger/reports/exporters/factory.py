from __future__ import annotations

from dataclasses import dataclass, field

from ...core.enums import ExportFormat
from ...core.exceptions import ValidationError
from .base import ReportExporter
from .pdf_exporter import PdfReportExporter
from .xlsx_exporter import XlsxReportExporter


@dataclass
class ExporterFactory:
    """Factory Pattern: choose the exporter for a requested format."""

    exporters: dict[ExportFormat, ReportExporter] = field(
        default_factory=lambda: {
            ExportFormat.XLSX: XlsxReportExporter(),
            ExportFormat.PDF: PdfReportExporter(),
        }
    )

    def for_format(self, export_format: ExportFormat) -> ReportExporter:
        try:
            exporter = self.exporters.get(ExportFormat(export_format))
        except ValueError:
            exporter = None
        if exporter is None:
            raise ValidationError(f"Unsupported export format: {export_format}")
        return exporter
