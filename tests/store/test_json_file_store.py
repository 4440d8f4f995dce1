from __future__ import annotations

import json

from school_portal.core.enums import Role
from school_portal.leaves.service import LeaveService
from school_portal.store.json_file_store import JsonFileStore


def test_missing_file_is_seeded(tmp_path):
    store = JsonFileStore(tmp_path / "data" / "store.json")

    state = store.read()

    assert store.path.exists()
    assert [t.teacher_id for t in state.teachers] == ["teacher1", "teacher2"]
    assert [c.class_id for c in state.classes] == ["8A", "8B", "10B"]


def test_corrupted_file_is_reseeded(tmp_path):
    path = tmp_path / "store.json"
    path.write_text("{not json", encoding="utf-8")

    state = JsonFileStore(path).read()

    assert len(state.teachers) == 2
    assert json.loads(path.read_text(encoding="utf-8"))["classes"][0]["id"] == "8A"


def test_writes_are_visible_to_a_new_store_instance(tmp_path):
    path = tmp_path / "store.json"
    leave = LeaveService(JsonFileStore(path)).request_leave(
        requester_role=Role.TEACHER,
        requester_id="teacher1",
        leave_type="Annual",
        start_date="2024-02-01",
        end_date="2024-02-03",
        reason="Family trip",
    )

    reloaded = JsonFileStore(path).read()

    assert reloaded.find_leave(leave.request_id).reason == "Family trip"
    assert not list(tmp_path.glob("*.tmp"))
