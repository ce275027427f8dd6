from __future__ import annotations

from decimal import Decimal

from ..rates import PaymentRates
from .base import WageCalculator


class StandardWageCalculator(WageCalculator):
    """Standard rule: present days at the full-day rate plus half days at the half-day rate."""

    def total_payment(self, *, present_days: int, half_days: int, rates: PaymentRates) -> Decimal:
        return present_days * rates.full_day + half_days * rates.half_day
