from __future__ import annotations

from school_portal.store.document import load_state
from school_portal.store.mysql_document_store import MySQLDocumentStore


class FakeCursor:
    def __init__(self, db):
        self._db = db
        self._row = None

    def execute(self, sql, params=()):
        self._db.statements.append(" ".join(sql.split()))
        if sql.strip().upper().startswith("SELECT"):
            body = self._db.rows.get(params[0])
            self._row = {"body": body} if body is not None else None
        elif sql.strip().upper().startswith("INSERT"):
            self._db.rows[params[0]] = params[1]

    def fetchone(self):
        return self._row

    def close(self):
        pass


class FakeConnection:
    def __init__(self, db):
        self._db = db

    def cursor(self, dictionary=False):
        return FakeCursor(self._db)

    def commit(self):
        self._db.commits += 1

    def rollback(self):
        pass

    def close(self):
        pass


class FakeConnFactory:
    def __init__(self):
        self.rows: dict[str, str] = {}
        self.statements: list[str] = []
        self.commits = 0

    def connect(self):
        return FakeConnection(self)


def test_first_read_writes_seed_row():
    db = FakeConnFactory()
    store = MySQLDocumentStore(db, doc_key="k1")

    state = store.read()

    assert len(state.teachers) == 2
    assert "k1" in db.rows
    assert any(s.startswith("INSERT INTO app_documents") for s in db.statements)


def test_write_replaces_whole_document():
    db = FakeConnFactory()
    store = MySQLDocumentStore(db, doc_key="k1")
    store.write(load_state({"classes": [{"id": "9C", "name": "Grade 9C"}]}))

    state = store.read()

    assert [c.class_id for c in state.classes] == ["9C"]
    assert state.teachers == []
