from __future__ import annotations

import logging
import uuid
from datetime import datetime
from typing import Callable

from ..attendance.ledger import AttendanceLedger
from ..common.datetime_utils import now_local
from ..common.validators import is_same_name, require_non_empty
from ..core.constants import DEFAULT_FOLDER, FOLDERS_KEY
from ..core.exceptions import CorruptRecordError, NotFoundError, ValidationError
from ..database.kv_store import KeyValueStore
from ..workers.service import WorkerService
from .model import WorkFolder

logger = logging.getLogger(__name__)


class FolderService:
    """Use case: manage work folders. The Default folder always exists and cannot be deleted."""

    def __init__(
        self,
        store: KeyValueStore,
        attendance: AttendanceLedger,
        workers: WorkerService,
        *,
        clock: Callable[[], datetime] = now_local,
    ):
        self._store = store
        self._attendance = attendance
        self._workers = workers
        self._clock = clock

    def list_folders(self) -> list[WorkFolder]:
        folders = []
        for item in self._store.get(FOLDERS_KEY) or []:
            try:
                folders.append(WorkFolder.from_dict(item))
            except CorruptRecordError as e:
                logger.warning("Skipping malformed folder: %s", e)

        if not any(f.is_default for f in folders):
            folders.insert(0, WorkFolder(id="default", name=DEFAULT_FOLDER, created_at=self._clock(), is_default=True))
        return folders

    def create_folder(self, name: str) -> WorkFolder:
        name = require_non_empty(name, "Folder name")
        folders = self.list_folders()
        self._ensure_unique(folders, name)

        folder = WorkFolder(id=uuid.uuid4().hex, name=name, created_at=self._clock())
        self._save(folders + [folder])
        return folder

    def rename_folder(self, folder_id: str, new_name: str) -> WorkFolder:
        new_name = require_non_empty(new_name, "Folder name")
        folders = self.list_folders()
        folder = self._find(folders, folder_id)
        self._ensure_unique(folders, new_name, exclude_id=folder_id)

        renamed = WorkFolder(id=folder.id, name=new_name, created_at=folder.created_at, is_default=folder.is_default)
        self._save([renamed if f.id == folder_id else f for f in folders])
        self._workers.move_folder(folder.name, new_name)
        return renamed

    def delete_folder(self, folder_id: str) -> None:
        folders = self.list_folders()
        folder = self._find(folders, folder_id)
        if folder.is_default:
            raise ValidationError("Default folder cannot be deleted")

        self._save([f for f in folders if f.id != folder_id])
        self._attendance.delete_by_folder(folder.name)
        logger.info("Deleted folder %r and its attendance", folder.name)

    @staticmethod
    def _find(folders: list[WorkFolder], folder_id: str) -> WorkFolder:
        folder = next((f for f in folders if f.id == folder_id), None)
        if not folder:
            raise NotFoundError("Folder not found")
        return folder

    @staticmethod
    def _ensure_unique(folders: list[WorkFolder], name: str, *, exclude_id: str | None = None) -> None:
        if any(is_same_name(f.name, name) and f.id != exclude_id for f in folders):
            raise ValidationError(f'A folder with name "{name}" already exists')

    def _save(self, folders: list[WorkFolder]) -> None:
        self._store.set(FOLDERS_KEY, [f.to_dict() for f in folders])
