from __future__ import annotations

from pathlib import Path

from flask import Flask, jsonify, request, send_file

from ..common.datetime_utils import parse_date_arg
from ..core.enums import ExportFormat, QuickRange
from ..core.exceptions import NotFoundError, ValidationError
from ..container import Container
from .model import ReportPayload, ReportRequest
from .rates import PaymentRates


def register(app: Flask, container: Container) -> None:
    @app.route("/api/rates", methods=["GET"], endpoint="get_rates")
    def get_rates():
        return jsonify({name: r.to_dict() for name, r in container.rate_book.get_all().items()})

    @app.route("/api/rates", methods=["PUT"], endpoint="update_rates")
    def update_rates():
        """Body: {folders: [...], fullDay, halfDay}."""
        data = request.get_json(silent=True) or {}
        folders = data.get("folders") or []
        if isinstance(folders, str):
            folders = [folders]
        rates = PaymentRates.parse(data)
        updated = container.rate_book.update_rates(folders, rates)
        return jsonify({name: r.to_dict() for name, r in updated.items()})

    @app.route("/api/reports/preview", methods=["POST"], endpoint="preview_report")
    def preview_report():
        draft = container.settlement_service.preview_report(_report_request())
        return jsonify(
            {
                **_payload_json(draft.payload),
                "consumedAdvances": [a.to_dict() for a in draft.consumed_advances],
            }
        )

    @app.route("/api/reports", methods=["POST"], endpoint="generate_report")
    def generate_report():
        report = container.settlement_service.generate_report(_report_request())
        return (
            jsonify(
                {
                    "report": report.meta.to_dict(),
                    "payload": _payload_json(report.payload),
                    "settledAdvanceIds": list(report.settled_advance_ids),
                }
            ),
            201,
        )

    @app.route("/api/reports", methods=["GET"], endpoint="list_reports")
    def list_reports():
        return jsonify([m.to_dict() for m in container.report_archive.list_reports()])

    @app.route("/api/reports/<report_id>/download", methods=["GET"], endpoint="download_report")
    def download_report(report_id: str):
        meta = container.report_archive.get(report_id)
        if not meta:
            raise NotFoundError("Report not found")
        path = Path(meta.storage_path)
        if not path.is_file():
            raise NotFoundError("Report file is missing")

        exporter = container.exporters.for_format(path.suffix.lstrip("."))
        return send_file(path, mimetype=exporter.mimetype, as_attachment=True, download_name=meta.filename)

    @app.route("/api/reports/<report_id>", methods=["DELETE"], endpoint="delete_report")
    def delete_report(report_id: str):
        container.report_archive.delete(report_id)
        return jsonify({"success": True})

    @app.route("/api/reports", methods=["DELETE"], endpoint="delete_reports")
    def delete_reports():
        """Body: {ids: [...]} deletes those; no ids clears the archive."""
        data = request.get_json(silent=True) or {}
        ids = data.get("ids")
        if ids:
            deleted = container.report_archive.delete_many(ids)
        else:
            deleted = container.report_archive.delete_all()
        return jsonify({"deleted": deleted})

    def _report_request() -> ReportRequest:
        """Body: {folder, startDate, endDate | range, format?, settleAdvances?, advanceWorkerIds?}."""
        data = request.get_json(silent=True) or {}
        folder = (data.get("folder") or "").strip()
        if not folder:
            raise ValidationError("folder is required")

        if data.get("range"):
            try:
                kind = QuickRange(data["range"])
            except ValueError:
                raise ValidationError(f"Unknown range: {data['range']!r}") from None
            start_date, end_date = container.settlement_service.quick_range(kind)
        else:
            start_date = parse_date_arg(data.get("startDate"), "startDate")
            end_date = parse_date_arg(data.get("endDate"), "endDate")

        try:
            export_format = ExportFormat(data.get("format") or container.default_export_format.value)
        except ValueError:
            raise ValidationError(f"Unsupported export format: {data.get('format')}") from None

        return ReportRequest(
            folder_name=folder,
            start_date=start_date,
            end_date=end_date,
            export_format=export_format,
            settle_advances=bool(data.get("settleAdvances", True)),
            selected_advance_worker_ids=frozenset(data.get("advanceWorkerIds") or []),
        )


def _payload_json(payload: ReportPayload) -> dict:
    return {
        "folder": payload.folder_name,
        "startDate": payload.start_date.isoformat(),
        "endDate": payload.end_date.isoformat(),
        "dates": [d.isoformat() for d in payload.dates],
        "rows": [
            {
                "workerId": r.worker_id,
                "name": r.name,
                "statuses": r.codes,
                "presentDays": r.present_count,
                "halfDays": r.half_day_count,
                "fullDayRate": str(r.full_day_rate),
                "halfDayRate": str(r.half_day_rate),
                "totalPayment": str(r.total_payment),
                "advanceDeducted": str(r.advance_deducted),
                "advanceRemarks": r.advance_remarks,
                "netPayment": str(r.net_payment),
            }
            for r in payload.rows
        ],
        "totals": {
            "totalPayment": str(payload.totals.total_payment),
            "advanceDeducted": str(payload.totals.advance_deducted),
            "netPayment": str(payload.totals.net_payment),
        },
        "notes": {
            "high": payload.denomination.count_high,
            "low": payload.denomination.count_low,
            "text": payload.denomination.describe(),
        },
    }
