from __future__ import annotations

from decimal import Decimal

from ...common.money import floor2, round2
from ...core.enums import RemainderPlacement
from .base import InstallmentSplitter


class EvenSplitter(InstallmentSplitter):
    """Equal shares rounded down to the cent; the leftover cents go on one slot.

    900.00 / 3 -> 300.00, 300.00, 300.00
    100.00 / 3 -> 33.33, 33.33, 33.34 (LAST) or 33.34, 33.33, 33.33 (FIRST)
    """

    def __init__(self, placement: RemainderPlacement = RemainderPlacement.LAST):
        self.placement = placement

    def split(self, amount: Decimal, slots: int) -> list[Decimal]:
        if slots <= 0:
            return []
        total = round2(amount)
        share = floor2(total / slots)
        parts = [share] * slots
        carry = total - share * slots
        target = -1 if self.placement == RemainderPlacement.LAST else 0
        parts[target] = parts[target] + carry
        return parts
