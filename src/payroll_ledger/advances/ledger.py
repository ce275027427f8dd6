from __future__ import annotations

import logging
import uuid
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Callable, Iterable, Optional, Sequence

from ..common.datetime_utils import now_local
from ..common.validators import require_amount
from ..core.constants import ADVANCES_KEY
from ..core.exceptions import CorruptRecordError, NotFoundError, StorageError, ValidationError
from ..database.kv_store import KeyValueStore
from ..workers.model import Worker
from ..workers.repository import WorkerDirectory
from .model import Advance

logger = logging.getLogger(__name__)


class AdvanceLedger:
    """Cash advances and their one-way settlement flag."""

    def __init__(
        self,
        store: KeyValueStore,
        workers: WorkerDirectory,
        *,
        clock: Callable[[], datetime] = now_local,
    ):
        self._store = store
        self._workers = workers
        self._clock = clock

    def list_all(self) -> list[Advance]:
        try:
            return self._load()
        except StorageError:
            logger.exception("Failed to load advances")
            return []

    def get(self, advance_id: str) -> Optional[Advance]:
        return next((a for a in self.list_all() if a.id == advance_id), None)

    def total_pending(self) -> Decimal:
        return sum((a.amount for a in self.list_all() if not a.deducted), Decimal("0"))

    def create(
        self,
        worker_id: str,
        worker_name: str,
        amount: Any,
        advance_date: date,
        remarks: Optional[str] = None,
    ) -> Advance:
        return self._append([self._new(worker_id, worker_name, amount, advance_date, remarks)])[0]

    def create_group(
        self,
        workers: Sequence[Worker],
        amount: Any,
        advance_date: date,
        remarks: Optional[str] = None,
    ) -> list[Advance]:
        """One independent advance per selected worker."""
        if not workers:
            raise ValidationError("Select at least one worker")
        return self._append([self._new(w.id, w.name, amount, advance_date, remarks) for w in workers])

    def list_unsettled_for_folder(self, folder_name: str, as_of: date) -> list[Advance]:
        members = {w.id for w in self._workers.get_workers_by_folder(folder_name)}
        return [a for a in self.list_all() if not a.deducted and a.date <= as_of and a.worker_id in members]

    def settle(
        self,
        advance_ids: Iterable[str],
        as_of: date,
        *,
        now: Optional[datetime] = None,
    ) -> list[Advance]:
        """Mark eligible advances deducted; returns only those that changed.

        Advances already deducted, dated after `as_of`, or not in `advance_ids` are left as they are.
        """
        ids = set(advance_ids)
        if not ids:
            return []

        now = now or self._clock()
        advances = self._load()
        settled: list[Advance] = []
        updated: list[Advance] = []
        for a in advances:
            if a.id in ids and not a.deducted and a.date <= as_of:
                a = a.settled(now)
                settled.append(a)
            updated.append(a)

        if settled:
            self._save(updated)
            logger.info("Settled %d advance(s) up to %s", len(settled), as_of.isoformat())
        return settled

    def delete(self, advance_id: str) -> None:
        if not self.delete_many([advance_id]):
            raise NotFoundError("Advance not found")

    def delete_many(self, advance_ids: Iterable[str]) -> int:
        ids = set(advance_ids)
        advances = self._load()
        remaining = [a for a in advances if a.id not in ids]
        if len(remaining) != len(advances):
            self._save(remaining)
        return len(advances) - len(remaining)

    def delete_all(self) -> None:
        self._save([])

    def _new(self, worker_id: str, worker_name: str, amount: Any, advance_date: date, remarks: Optional[str]) -> Advance:
        if not worker_id:
            raise ValidationError("Worker is required")
        return Advance(
            id=uuid.uuid4().hex,
            worker_id=worker_id,
            worker_name=worker_name or "Unknown",
            amount=require_amount(amount, "Advance amount"),
            date=advance_date,
            remarks=(remarks or "").strip() or None,
        )

    def _append(self, new: list[Advance]) -> list[Advance]:
        self._save(self._load() + new)
        return new

    def _load(self) -> list[Advance]:
        raw = self._store.get(ADVANCES_KEY)
        if raw is None:
            return []
        if not isinstance(raw, list):
            raise CorruptRecordError(f"{ADVANCES_KEY!r} must hold a list, got {type(raw).__name__}")

        advances = []
        for item in raw:
            try:
                advances.append(Advance.from_dict(item))
            except CorruptRecordError as e:
                logger.warning("Skipping malformed advance: %s", e)
        return advances

    def _save(self, advances: list[Advance]) -> None:
        self._store.set(ADVANCES_KEY, [a.to_dict() for a in advances])
