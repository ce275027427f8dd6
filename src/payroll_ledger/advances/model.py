from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Optional

from ..common.datetime_utils import parse_iso_date
from ..common.validators import require_amount
from ..core.exceptions import CorruptRecordError, ValidationError


@dataclass(frozen=True)
class Advance:
    """Domain entity: cash paid to a worker ahead of payroll.

    `worker_name` is a snapshot taken at creation; renaming the worker later does not update it.
    """

    id: str
    worker_id: str
    worker_name: str
    amount: Decimal
    date: date
    remarks: Optional[str] = None
    deducted: bool = False
    deducted_on: Optional[datetime] = None

    def settled(self, at: datetime) -> "Advance":
        return replace(self, deducted=True, deducted_on=at)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "workerId": self.worker_id,
            "workerName": self.worker_name,
            "amount": str(self.amount),
            "date": self.date.isoformat(),
            "remarks": self.remarks or "",
            "deducted": self.deducted,
            "deductedOn": self.deducted_on.isoformat() if self.deducted_on else None,
        }

    @classmethod
    def from_dict(cls, raw: Any) -> "Advance":
        """Parse a stored advance.

        Older rows keep `amount` as a string and omit `deducted`; both are accepted.
        """
        if not isinstance(raw, dict):
            raise CorruptRecordError(f"Advance must be an object, got {type(raw).__name__}")
        try:
            deducted = bool(raw.get("deducted", False))
            deducted_on_raw = raw.get("deductedOn")
            deducted_on = (
                datetime.fromisoformat(str(deducted_on_raw).replace("Z", "+00:00")) if deducted_on_raw else None
            )
            advance = cls(
                id=str(raw["id"]),
                worker_id=str(raw["workerId"]),
                worker_name=str(raw.get("workerName") or "Unknown"),
                amount=require_amount(raw["amount"], "amount"),
                date=parse_iso_date(str(raw["date"])[:10]),
                remarks=raw.get("remarks") or None,
                deducted=deducted,
                deducted_on=deducted_on,
            )
        except (KeyError, ValueError, ValidationError) as e:
            raise CorruptRecordError(f"Invalid advance {raw!r}: {e}") from e

        if advance.deducted != (advance.deducted_on is not None):
            raise CorruptRecordError(f"Advance {advance.id} has inconsistent settlement fields")
        return advance
