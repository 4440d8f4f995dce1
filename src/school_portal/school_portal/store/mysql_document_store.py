from __future__ import annotations

import json
import logging

from ..core.constants import DEFAULT_STORE_KEY
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone
from .document import dump_state, load_state
from .repository import EntityStore
from .seed import seed_document
from .state import StoreState

logger = logging.getLogger(__name__)


class MySQLDocumentStore(EntityStore):
    """Whole-document store kept as one row of ``app_documents``."""

    def __init__(self, conn_factory: DatabaseConnection, *, doc_key: str = DEFAULT_STORE_KEY):
        self._conn_factory = conn_factory
        self._doc_key = doc_key

    def read(self) -> StoreState:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT body FROM app_documents WHERE doc_key=%s", (self._doc_key,))
            row = fetchone(cur)

        if row:
            try:
                return load_state(json.loads(row["body"]))
            except ValueError as e:
                logger.warning("Document %s unreadable (%s), writing seed document", self._doc_key, e)
        else:
            logger.info("Document %s not found, writing seed document", self._doc_key)

        doc = seed_document()
        self._write_document(doc)
        return load_state(doc)

    def write(self, state: StoreState) -> None:
        self._write_document(dump_state(state))

    def _write_document(self, doc: dict) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO app_documents(doc_key, body)
                VALUES(%s,%s)
                ON DUPLICATE KEY UPDATE body=VALUES(body)
                """,
                (self._doc_key, json.dumps(doc, ensure_ascii=False)),
            )
