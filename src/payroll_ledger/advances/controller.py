from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.datetime_utils import now_local, parse_date_arg
from ..core.exceptions import ValidationError
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/advances", methods=["GET"], endpoint="list_advances")
    def list_advances():
        """All advances, or with ?folder=&asOf= only those a report for that folder would deduct."""
        folder = request.args.get("folder")
        if folder:
            as_of = parse_date_arg(request.args.get("asOf") or now_local().date().isoformat(), "asOf")
            advances = container.settlement_service.pending_advances(folder, as_of)
        else:
            advances = container.advance_ledger.list_all()
        return jsonify(
            {
                "advances": [a.to_dict() for a in advances],
                "totalPending": str(container.advance_ledger.total_pending()),
            }
        )

    @app.route("/api/advances", methods=["POST"], endpoint="create_advances")
    def create_advances():
        """Body: {workerIds: [...], amount, date, remarks?}; one advance per worker."""
        data = request.get_json(silent=True) or {}
        advance_date = parse_date_arg(data.get("date"), "date")

        worker_ids = data.get("workerIds") or ([data["workerId"]] if data.get("workerId") else [])
        workers = []
        for worker_id in worker_ids:
            worker = container.worker_service.get(worker_id)
            if not worker:
                raise ValidationError(f"Unknown worker {worker_id}")
            workers.append(worker)

        advances = container.advance_ledger.create_group(
            workers, data.get("amount"), advance_date, data.get("remarks")
        )
        return jsonify([a.to_dict() for a in advances]), 201

    @app.route("/api/advances", methods=["DELETE"], endpoint="delete_advances")
    def delete_advances():
        """Body: {ids: [...]} deletes those; {all: true} clears the ledger."""
        data = request.get_json(silent=True) or {}
        if data.get("all"):
            count = len(container.advance_ledger.list_all())
            container.advance_ledger.delete_all()
            return jsonify({"deleted": count})

        ids = data.get("ids") or []
        if not ids:
            raise ValidationError("Select at least one advance")
        return jsonify({"deleted": container.advance_ledger.delete_many(ids)})

    @app.route("/api/advances/<advance_id>", methods=["DELETE"], endpoint="delete_advance")
    def delete_advance(advance_id: str):
        container.advance_ledger.delete(advance_id)
        return jsonify({"success": True})
