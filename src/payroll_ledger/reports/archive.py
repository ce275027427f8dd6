from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, Optional

from ..core.constants import SAVED_REPORTS_KEY
from ..core.exceptions import CorruptRecordError, NotFoundError, StorageError
from ..database.kv_store import KeyValueStore
from .model import ReportArtifactMeta

logger = logging.getLogger(__name__)


class ReportArchive:
    """Append-only list of generated reports. Deleting an entry also deletes its file."""

    def __init__(self, store: KeyValueStore):
        self._store = store

    def list_reports(self) -> list[ReportArtifactMeta]:
        try:
            return self._load()
        except StorageError:
            logger.exception("Failed to load saved reports")
            return []

    def get(self, report_id: str) -> Optional[ReportArtifactMeta]:
        return next((m for m in self.list_reports() if m.id == report_id), None)

    def record(self, meta: ReportArtifactMeta) -> None:
        self._save(self._load() + [meta])

    def delete(self, report_id: str) -> None:
        if not self.delete_many([report_id]):
            raise NotFoundError("Report not found")

    def delete_many(self, report_ids: Iterable[str]) -> int:
        ids = set(report_ids)
        reports = self._load()
        doomed = [m for m in reports if m.id in ids]
        for meta in doomed:
            _remove_file(meta)
        if doomed:
            self._save([m for m in reports if m.id not in ids])
        return len(doomed)

    def delete_all(self) -> int:
        reports = self._load()
        for meta in reports:
            _remove_file(meta)
        self._save([])
        return len(reports)

    def _load(self) -> list[ReportArtifactMeta]:
        reports = []
        for item in self._store.get(SAVED_REPORTS_KEY) or []:
            try:
                reports.append(ReportArtifactMeta.from_dict(item))
            except CorruptRecordError as e:
                logger.warning("Skipping malformed report entry: %s", e)
        return reports

    def _save(self, reports: list[ReportArtifactMeta]) -> None:
        self._store.set(SAVED_REPORTS_KEY, [m.to_dict() for m in reports])


def _remove_file(meta: ReportArtifactMeta) -> None:
    Path(meta.storage_path).unlink(missing_ok=True)
