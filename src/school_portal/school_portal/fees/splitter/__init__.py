from __future__ import annotations

from ...core.enums import RemainderPlacement
from .base import InstallmentSplitter
from .even_splitter import EvenSplitter


def splitter_for(placement: RemainderPlacement | str) -> InstallmentSplitter:
    return EvenSplitter(placement=RemainderPlacement(placement))


__all__ = ["InstallmentSplitter", "EvenSplitter", "splitter_for"]
