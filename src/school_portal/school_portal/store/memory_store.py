from __future__ import annotations

import copy
from typing import Optional

from .document import dump_state, load_state
from .repository import EntityStore
from .state import StoreState


class InMemoryStore(EntityStore):
    """Keeps the serialized document in memory (fixtures, the ``memory`` backend).

    Going through the document codec on every call gives each ``read`` an
    independent copy, same as the persistent backends.
    """

    def __init__(self, document: Optional[dict] = None):
        self._document: dict = copy.deepcopy(document) if document is not None else {}
        self.writes = 0

    def read(self) -> StoreState:
        return load_state(copy.deepcopy(self._document))

    def write(self, state: StoreState) -> None:
        self._document = dump_state(state)
        self.writes += 1

    def document(self) -> dict:
        return copy.deepcopy(self._document)
