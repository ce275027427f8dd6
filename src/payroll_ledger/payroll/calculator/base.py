from __future__ import annotations

from abc import ABC, abstractmethod
from decimal import Decimal

from ..rates import PaymentRates


class WageCalculator(ABC):
    """Calculator interface (Strategy Pattern for payroll)."""

    @abstractmethod
    def total_payment(self, *, present_days: int, half_days: int, rates: PaymentRates) -> Decimal:
        raise NotImplementedError
