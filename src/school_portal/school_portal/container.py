from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Optional

from .core.constants import DEFAULT_STORE_FILENAME, DEFAULT_STORE_KEY
from .database.bootstrap import apply_schema
from .database.connection import DBConfig, DatabaseConnection
from .fees.service import FeeService
from .fees.splitter import splitter_for
from .leaves.service import LeaveService
from .store.json_file_store import JsonFileStore
from .store.memory_store import InMemoryStore
from .store.mysql_document_store import MySQLDocumentStore
from .store.repository import EntityStore
from .store.seed import seed_document

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Container:
    store: EntityStore

    leave_service: LeaveService
    fee_service: FeeService


def build_store(settings: Any) -> EntityStore:
    backend = str(getattr(settings, "STORE_BACKEND", "json")).lower()

    if backend == "memory":
        return InMemoryStore(seed_document())

    if backend == "mysql":
        conn = DatabaseConnection.get_instance(DBConfig.from_mapping(getattr(settings, "DB_CONFIG")))
        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            apply_schema(conn)
        return MySQLDocumentStore(conn, doc_key=getattr(settings, "STORE_KEY", DEFAULT_STORE_KEY))

    if backend == "json":
        return JsonFileStore(getattr(settings, "STORE_PATH", "") or DEFAULT_STORE_FILENAME)

    raise ValueError(f"Unknown STORE_BACKEND: {backend!r}")


def build_container(*, settings: Any = None, store: Optional[EntityStore] = None) -> Container:
    if store is None:
        store = build_store(settings)
    placement = getattr(settings, "FEE_REMAINDER_PLACEMENT", "last")

    leave_service = LeaveService(store)
    fee_service = FeeService(store, splitter=splitter_for(placement))

    logger.debug("Container built with %s", type(store).__name__)
    return Container(store=store, leave_service=leave_service, fee_service=fee_service)
