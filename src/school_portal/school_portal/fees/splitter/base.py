from __future__ import annotations

from abc import ABC, abstractmethod
from decimal import Decimal


class InstallmentSplitter(ABC):
    """Splitter interface (Strategy Pattern for installment amounts)."""

    @abstractmethod
    def split(self, amount: Decimal, slots: int) -> list[Decimal]:
        """Return ``slots`` amounts, each to the cent, summing to ``amount``."""
        raise NotImplementedError
