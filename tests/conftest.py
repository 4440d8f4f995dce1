from __future__ import annotations

from datetime import datetime

import pytest

from school_portal.store.memory_store import InMemoryStore
from school_portal.store.seed import seed_document


def school_document() -> dict:
    doc = seed_document()
    doc["teachers"].append(
        {"id": "teacher3", "name": "Mrs. Rao", "email": "rao@school.com", "classId": "8B", "isClassTeacher": True}
    )
    doc["students"] = [
        {"id": "s1", "name": "Asha Verma", "classId": "8A", "rollNo": "1", "email": "asha@school.com"},
        {"id": "s2", "name": "Ben Carter", "classId": "8B", "rollNo": "1", "email": "ben@school.com"},
        {"id": "s3", "name": "Chen Li", "classId": "8A", "rollNo": "2", "email": "chen@school.com"},
    ]
    return doc


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2024, 1, 9, 9, 0, 0)


@pytest.fixture
def document() -> dict:
    return school_document()


@pytest.fixture
def store(document) -> InMemoryStore:
    return InMemoryStore(document)
