from __future__ import annotations

from typing import Protocol

from .state import StoreState


class EntityStore(Protocol):
    """Single source of truth for every persisted collection.

    ``read`` returns an independent copy; ``write`` replaces the whole
    document. Services do read-modify-write and only write on success.
    """

    def read(self) -> StoreState:
        raise NotImplementedError

    def write(self, state: StoreState) -> None:
        raise NotImplementedError
