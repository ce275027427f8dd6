from __future__ import annotations

import logging
import uuid
from typing import Iterable, Optional, Sequence

from ..common.validators import is_same_name, require_non_empty
from ..core.constants import WORKERS_KEY
from ..core.exceptions import CorruptRecordError, NotFoundError, ValidationError
from ..database.kv_store import KeyValueStore
from .model import Worker
from .repository import WorkerDirectory

logger = logging.getLogger(__name__)


class WorkerService(WorkerDirectory):
    """Use case: manage the worker registry stored under `workers`."""

    def __init__(self, store: KeyValueStore):
        self._store = store

    def list_workers(self) -> list[Worker]:
        raw = self._store.get(WORKERS_KEY) or []
        workers = []
        for item in raw:
            try:
                workers.append(Worker.from_dict(item))
            except CorruptRecordError as e:
                logger.warning("Skipping malformed worker: %s", e)
        return workers

    def get(self, worker_id: str) -> Optional[Worker]:
        return next((w for w in self.list_workers() if w.id == worker_id), None)

    def get_workers_by_folder(self, folder_name: str) -> Sequence[Worker]:
        return [w for w in self.list_workers() if w.in_folder(folder_name)]

    def add_worker(self, name: str, folders: Iterable[str]) -> Worker:
        name = require_non_empty(name, "Worker name")
        folders = tuple(dict.fromkeys(require_non_empty(f, "Folder") for f in folders))
        if not folders:
            raise ValidationError("Select at least one folder")

        workers = self.list_workers()
        for folder in folders:
            if any(w.in_folder(folder) and is_same_name(w.name, name) for w in workers):
                raise ValidationError(f'Worker "{name}" already exists in folder "{folder}"')

        worker = Worker(id=uuid.uuid4().hex, name=name, folders=folders)
        self._save(workers + [worker])
        return worker

    def rename_worker(self, worker_id: str, new_name: str) -> Worker:
        new_name = require_non_empty(new_name, "Worker name")
        workers = self.list_workers()
        worker = next((w for w in workers if w.id == worker_id), None)
        if not worker:
            raise NotFoundError("Worker not found")

        for other in workers:
            if other.id != worker_id and is_same_name(other.name, new_name) and set(other.folders) & set(worker.folders):
                raise ValidationError(f'Worker "{new_name}" already exists in this folder')

        renamed = Worker(id=worker.id, name=new_name, folders=worker.folders)
        self._save([renamed if w.id == worker_id else w for w in workers])
        return renamed

    def move_folder(self, old_name: str, new_name: str) -> None:
        """Point memberships of a renamed folder at its new name."""
        workers = self.list_workers()
        updated = [
            Worker(id=w.id, name=w.name, folders=tuple(new_name if f == old_name else f for f in w.folders))
            for w in workers
        ]
        self._save(updated)

    def delete_worker(self, worker_id: str) -> None:
        self.delete_workers([worker_id])

    def delete_workers(self, worker_ids: Iterable[str]) -> int:
        ids = set(worker_ids)
        workers = self.list_workers()
        remaining = [w for w in workers if w.id not in ids]
        self._save(remaining)
        return len(workers) - len(remaining)

    def _save(self, workers: list[Worker]) -> None:
        self._store.set(WORKERS_KEY, [w.to_dict() for w in workers])
