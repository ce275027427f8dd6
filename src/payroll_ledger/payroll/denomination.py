"""Cash payout breakdown into two note values.

The target is the amount rounded half-up to the nearest NOTE_LOW (850 -> 900,
849 -> 800). Among all exact combinations the one with the most even split
between the two note counts wins; ties go to the combination with fewer notes.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Union

from ..core.constants import CURRENCY_SYMBOL, NOTE_HIGH, NOTE_LOW
from ..core.exceptions import ValidationError

Number = Union[int, float, Decimal, str]


@dataclass(frozen=True)
class NoteBreakdown:
    count_high: int
    count_low: int

    @property
    def total(self) -> int:
        return self.count_high * NOTE_HIGH + self.count_low * NOTE_LOW

    def describe(self) -> str:
        if not self.count_high and not self.count_low:
            return f"{CURRENCY_SYMBOL}0"
        return (
            f"{CURRENCY_SYMBOL}{NOTE_HIGH} x {self.count_high} + "
            f"{CURRENCY_SYMBOL}{NOTE_LOW} x {self.count_low}"
        )


def round_to_low_note(amount: Number) -> int:
    try:
        value = Decimal(str(amount))
    except InvalidOperation:
        raise ValidationError("Amount must be a non-negative number") from None
    if not value.is_finite() or value < 0:
        raise ValidationError("Amount must be a non-negative number")
    hundreds = (value / NOTE_LOW).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
    return int(hundreds) * NOTE_LOW


def optimize_notes(amount: Number) -> NoteBreakdown:
    target = round_to_low_note(amount)

    best = NoteBreakdown(0, 0)
    best_key = None
    for count_high in range(target // NOTE_HIGH + 1):
        remaining = target - count_high * NOTE_HIGH
        if remaining % NOTE_LOW:
            continue
        count_low = remaining // NOTE_LOW
        key = (abs(count_high - count_low), count_high + count_low)
        if best_key is None or key < best_key:
            best, best_key = NoteBreakdown(count_high, count_low), key
    return best
