from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.datetime_utils import parse_date_arg
from ..core.enums import AttendanceStatus, WriteMode
from ..core.exceptions import ValidationError
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/attendance", methods=["POST"], endpoint="mark_attendance")
    def mark_attendance():
        """Body: {date, statuses: {workerId: status}, folders: [...], mode?: replace|merge}."""
        data = request.get_json(silent=True) or {}
        work_date = parse_date_arg(data.get("date"), "date")

        raw_statuses = data.get("statuses") or {}
        if not isinstance(raw_statuses, dict):
            raise ValidationError("statuses must map worker ids to a status")
        statuses = {worker_id: _parse_status(value) for worker_id, value in raw_statuses.items()}

        folders = data.get("folders") or []
        if isinstance(folders, str):
            folders = [folders]

        try:
            mode = WriteMode(data.get("mode") or WriteMode.REPLACE.value)
        except ValueError:
            raise ValidationError("mode must be 'replace' or 'merge'")

        records = container.attendance_service.mark_attendance(
            work_date=work_date,
            statuses=statuses,
            target_folders=folders,
            mode=mode,
        )
        return jsonify({"success": True, "saved": len(records)}), 201

    @app.route("/api/attendance/<folder_name>", methods=["GET"], endpoint="get_attendance_day")
    def get_attendance_day(folder_name: str):
        work_date = parse_date_arg(request.args.get("date"), "date")
        rows = container.attendance_service.get_day(folder_name, work_date)
        return jsonify(
            {
                "folder": folder_name,
                "date": work_date.isoformat(),
                "workers": [
                    {"workerId": r.worker_id, "name": r.name, "status": r.status.value, "recorded": r.recorded}
                    for r in rows
                ],
            }
        )

    @app.route("/api/attendance/<folder_name>", methods=["DELETE"], endpoint="delete_attendance")
    def delete_attendance(folder_name: str):
        if request.args.get("date"):
            container.attendance_service.delete_day(folder_name, parse_date_arg(request.args["date"], "date"))
        else:
            container.attendance_service.delete_folder_history(folder_name)
        return jsonify({"success": True})

    @app.route("/api/attendance/<folder_name>/dates", methods=["GET"], endpoint="attendance_dates")
    def attendance_dates(folder_name: str):
        dates = container.attendance_service.available_dates(folder_name)
        return jsonify({"folder": folder_name, "dates": [d.isoformat() for d in dates]})

    def _parse_status(value) -> AttendanceStatus:
        try:
            return AttendanceStatus(value)
        except ValueError:
            raise ValidationError(f"Invalid attendance status: {value!r}") from None
