from __future__ import annotations

from flask import Flask, jsonify, request

from ..core.exceptions import NotFoundError
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/workers", methods=["GET"], endpoint="list_workers")
    def list_workers():
        folder = request.args.get("folder")
        if folder:
            workers = container.worker_service.get_workers_by_folder(folder)
        else:
            workers = container.worker_service.list_workers()
        return jsonify([w.to_dict() for w in workers])

    @app.route("/api/workers", methods=["POST"], endpoint="add_worker")
    def add_worker():
        data = request.get_json(silent=True) or {}
        folders = data.get("folders") or []
        if isinstance(folders, str):
            folders = [folders]
        worker = container.worker_service.add_worker(data.get("name", ""), folders)
        return jsonify(worker.to_dict()), 201

    @app.route("/api/workers/<worker_id>", methods=["PATCH"], endpoint="rename_worker")
    def rename_worker(worker_id: str):
        data = request.get_json(silent=True) or {}
        worker = container.worker_service.rename_worker(worker_id, data.get("name", ""))
        return jsonify(worker.to_dict())

    @app.route("/api/workers/<worker_id>", methods=["DELETE"], endpoint="delete_worker")
    def delete_worker(worker_id: str):
        if not container.worker_service.get(worker_id):
            raise NotFoundError("Worker not found")
        container.worker_service.delete_worker(worker_id)
        return jsonify({"success": True})

    @app.route("/api/workers/<worker_id>/summary", methods=["GET"], endpoint="worker_summary")
    def worker_summary(worker_id: str):
        return jsonify(container.worker_summary_service.summarize(worker_id).to_dict())
