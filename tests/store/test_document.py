from __future__ import annotations

from datetime import date
from decimal import Decimal

from school_portal.core.enums import LeaveStatus, Role
from school_portal.store.document import dump_state, load_state


def test_missing_or_broken_collections_load_empty():
    state = load_state({"classes": "oops", "teachers": None})

    assert state.classes == []
    assert state.teachers == []
    assert state.leaves == []
    assert state.fee_configs == []


def test_non_dict_document_loads_empty():
    assert load_state(None).students == []
    assert load_state([1, 2]).students == []


def test_unparsed_rows_are_written_back_unchanged():
    legacy_leave = {"id": "old1", "requesterRole": "teacher", "type": "Maternity", "status": "approved"}
    orphan = {"id": "s9", "name": "No Class", "classId": None}
    doc = {
        "students": [orphan],
        "leaves": [
            legacy_leave,
            {
                "id": "l1",
                "requesterRole": "teacher",
                "requesterId": "teacher1",
                "requesterName": "Ms. Johnson",
                "type": "Sick",
                "startDate": "2024-01-10",
                "endDate": "2024-01-12",
                "reason": "Medical",
                "status": "approved",
                "approverRole": "admin",
                "approverId": "admin",
                "createdAt": "2024-01-09T08:30:00.000Z",
                "decidedAt": "2024-01-09T10:00:00.000Z",
            },
        ]
    }

    state = load_state(doc)

    assert state.students == []
    assert len(state.leaves) == 1
    leave = state.leaves[0]
    assert leave.status == LeaveStatus.APPROVED
    assert leave.approver_role == Role.ADMIN
    assert leave.decided_by == "admin"
    assert leave.start_date == date(2024, 1, 10)

    out = dump_state(state)
    assert out["students"] == [orphan]
    assert out["leaves"][0] == legacy_leave
    assert out["leaves"][1]["id"] == "l1"
    assert load_state(out).unparsed == {"students": [orphan], "leaves": [legacy_leave]}


def test_unmodeled_collections_and_fields_survive_a_write():
    doc = {
        "teachers": [{"id": "t1", "name": "T", "classId": "8A", "phone": "123", "password": "pw"}],
        "students": [{"id": "s1", "name": "S", "classId": "8A", "parentName": "P"}],
        "notices": [{"id": "n1", "title": "Holiday"}],
        "studentFees": [
            {
                "studentId": "s1",
                "classId": "8A",
                "extraFees": {"transport": 120},
                "installments": [{"index": 1, "amount": 450.5, "dueDate": "", "paid": True, "paidAt": None}],
            }
        ],
    }

    state = load_state(doc)
    out = dump_state(state)

    assert state.teachers[0].is_class_teacher is True
    assert out["notices"] == [{"id": "n1", "title": "Holiday"}]
    assert out["teachers"][0]["phone"] == "123"
    assert out["students"][0]["parentName"] == "P"
    assert state.student_fees[0].installments[0].amount == Decimal("450.50")
    assert out["studentFees"][0]["installments"][0]["amount"] == 450.5
    assert out["studentFees"][0]["extraFees"] == {"transport": 120.0}
