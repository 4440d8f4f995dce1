from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path

from .document import dump_state, load_state
from .repository import EntityStore
from .seed import seed_document
from .state import StoreState

logger = logging.getLogger(__name__)


class JsonFileStore(EntityStore):
    """Whole-document store in a local JSON file.

    A missing or unreadable file is replaced by the seed document. Writes go
    to a temp file in the same directory and are renamed over the original,
    so a reader never sees half a document.
    """

    def __init__(self, path: str | Path):
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def read(self) -> StoreState:
        if not self._path.exists():
            logger.info("Store file %s not found, writing seed document", self._path)
            return self._reseed()
        try:
            raw = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.warning("Store file %s unreadable (%s), writing seed document", self._path, e)
            return self._reseed()
        return load_state(raw)

    def write(self, state: StoreState) -> None:
        self._write_document(dump_state(state))

    def _reseed(self) -> StoreState:
        doc = seed_document()
        self._write_document(doc)
        return load_state(doc)

    def _write_document(self, doc: dict) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(prefix=self._path.name, suffix=".tmp", dir=self._path.parent)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(doc, fh, ensure_ascii=False, indent=2)
            os.replace(tmp_name, self._path)
        except BaseException:
            if os.path.exists(tmp_name):
                os.remove(tmp_name)
            raise
