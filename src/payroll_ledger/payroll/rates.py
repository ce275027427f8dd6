from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Iterable

from ..common.validators import require_amount, require_non_empty
from ..core.constants import DEFAULT_FOLDER, DEFAULT_FULL_DAY_RATE, DEFAULT_HALF_DAY_RATE, FOLDER_RATES_KEY
from ..core.exceptions import CorruptRecordError, ValidationError
from ..database.kv_store import KeyValueStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PaymentRates:
    full_day: Decimal
    half_day: Decimal

    def to_dict(self) -> dict:
        return {"fullDay": str(self.full_day), "halfDay": str(self.half_day)}

    @classmethod
    def parse(cls, raw: Any) -> "PaymentRates":
        """Build from user input; raises ValidationError."""
        if not isinstance(raw, dict):
            raise ValidationError("Rates must be an object with fullDay and halfDay")
        return cls(
            full_day=require_amount(raw.get("fullDay"), "Full day rate"),
            half_day=require_amount(raw.get("halfDay"), "Half day rate"),
        )

    @classmethod
    def from_dict(cls, raw: Any) -> "PaymentRates":
        """Build from stored data; raises CorruptRecordError."""
        try:
            return cls.parse(raw)
        except ValidationError as e:
            raise CorruptRecordError(f"Invalid rates {raw!r}: {e}") from e


DEFAULT_RATES = PaymentRates(full_day=DEFAULT_FULL_DAY_RATE, half_day=DEFAULT_HALF_DAY_RATE)


class RateBook:
    """Per-folder wage rates stored under `folderRates`; `Default` is always resolvable."""

    def __init__(self, store: KeyValueStore):
        self._store = store

    def get_all(self) -> dict[str, PaymentRates]:
        raw = self._store.get(FOLDER_RATES_KEY) or {}
        if not isinstance(raw, dict):
            raise CorruptRecordError(f"{FOLDER_RATES_KEY!r} must hold an object")

        rates: dict[str, PaymentRates] = {}
        for folder_name, value in raw.items():
            try:
                rates[folder_name] = PaymentRates.from_dict(value)
            except CorruptRecordError as e:
                logger.warning("Ignoring rates for %r: %s", folder_name, e)
        rates.setdefault(DEFAULT_FOLDER, DEFAULT_RATES)
        return rates

    def rates_for(self, folder_name: str) -> PaymentRates:
        rates = self.get_all()
        return rates.get(folder_name) or rates[DEFAULT_FOLDER]

    def update_rates(self, folder_names: Iterable[str], rates: PaymentRates) -> dict[str, PaymentRates]:
        folder_names = [require_non_empty(f, "Folder") for f in folder_names]
        if not folder_names:
            raise ValidationError("Select at least one folder")

        all_rates = self.get_all()
        for folder_name in folder_names:
            all_rates[folder_name] = rates
        self._store.set(FOLDER_RATES_KEY, {k: v.to_dict() for k, v in all_rates.items()})
        return all_rates
