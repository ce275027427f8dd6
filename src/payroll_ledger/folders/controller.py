from __future__ import annotations

from flask import Flask, jsonify, request

from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/folders", methods=["GET"], endpoint="list_folders")
    def list_folders():
        return jsonify([f.to_dict() for f in container.folder_service.list_folders()])

    @app.route("/api/folders", methods=["POST"], endpoint="create_folder")
    def create_folder():
        data = request.get_json(silent=True) or {}
        folder = container.folder_service.create_folder(data.get("name", ""))
        return jsonify(folder.to_dict()), 201

    @app.route("/api/folders/<folder_id>", methods=["PATCH"], endpoint="rename_folder")
    def rename_folder(folder_id: str):
        data = request.get_json(silent=True) or {}
        folder = container.folder_service.rename_folder(folder_id, data.get("name", ""))
        return jsonify(folder.to_dict())

    @app.route("/api/folders/<folder_id>", methods=["DELETE"], endpoint="delete_folder")
    def delete_folder(folder_id: str):
        container.folder_service.delete_folder(folder_id)
        return jsonify({"success": True})
