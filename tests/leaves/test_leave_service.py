from __future__ import annotations

from dataclasses import replace

import pytest

from school_portal.core.enums import LeaveStatus, LeaveType, Role
from school_portal.core.exceptions import (
    AuthorizationError,
    InvalidTransitionError,
    NotFoundError,
    ValidationError,
)
from school_portal.leaves.service import LeaveService
from school_portal.store.memory_store import InMemoryStore


@pytest.fixture
def svc(store, fixed_now):
    return LeaveService(store, clock=lambda: fixed_now)


def _student_leave(svc, student_id="s1", **overrides):
    params = dict(
        requester_role=Role.STUDENT,
        requester_id=student_id,
        leave_type="Sick",
        start_date="2024-01-15",
        end_date="2024-01-16",
        reason="Fever",
    )
    params.update(overrides)
    return svc.request_leave(**params)


def _teacher_leave(svc, teacher_id="teacher1", **overrides):
    params = dict(
        requester_role=Role.TEACHER,
        requester_id=teacher_id,
        leave_type="Casual",
        start_date="2024-01-10",
        end_date="2024-01-12",
        reason="Medical",
    )
    params.update(overrides)
    return svc.request_leave(**params)


def test_student_request_is_pending_and_denormalized(svc, fixed_now):
    leave = _student_leave(svc, reason="  Fever  ")

    assert leave.status == LeaveStatus.PENDING
    assert leave.requester_name == "Asha Verma"
    assert leave.class_id == "8A"
    assert leave.approver_role == Role.TEACHER
    assert leave.leave_type == LeaveType.SICK
    assert leave.reason == "Fever"
    assert leave.created_at == fixed_now
    assert leave.decided_by is None


def test_teacher_leave_approved_by_admin_shows_in_history(svc, fixed_now):
    leave = _teacher_leave(svc)

    pending = svc.get_leaves_pending_for_approver(approver_role=Role.ADMIN)
    assert [lv.request_id for lv in pending] == [leave.request_id]

    svc.decide_leave(request_id=leave.request_id, approve=True, decider_id="admin", decider_role=Role.ADMIN)

    history = svc.get_leaves_for_requester(role=Role.TEACHER, requester_id="teacher1")
    assert len(history) == 1
    assert history[0].status == LeaveStatus.APPROVED
    assert history[0].decided_by == "admin"
    assert history[0].decided_at == fixed_now
    assert svc.get_leaves_pending_for_approver(approver_role=Role.ADMIN) == []


def test_admin_sees_only_pending_teacher_requests(svc):
    first = _teacher_leave(svc, "teacher1")
    _student_leave(svc, "s1")
    second = _teacher_leave(svc, "teacher2")
    svc.decide_leave(request_id=first.request_id, approve=False, decider_id="admin", decider_role=Role.ADMIN)

    pending = svc.get_leaves_pending_for_approver(approver_role=Role.ADMIN)

    assert [lv.request_id for lv in pending] == [second.request_id]
    assert all(lv.requester_role == Role.TEACHER and lv.is_pending for lv in pending)


def test_class_teacher_sees_only_own_class_students_in_insertion_order(svc):
    a = _student_leave(svc, "s1")
    _student_leave(svc, "s2")
    c = _student_leave(svc, "s3")
    _teacher_leave(svc, "teacher1")

    pending = svc.get_leaves_pending_for_approver(approver_role=Role.TEACHER, approver_id="teacher1")
    assert [lv.request_id for lv in pending] == [a.request_id, c.request_id]

    other = svc.get_leaves_pending_for_approver(approver_role=Role.TEACHER, approver_id="teacher3")
    assert [lv.requester_id for lv in other] == ["s2"]


def test_teacher_without_class_teacher_role_sees_nothing(svc):
    _student_leave(svc, "s1")

    assert svc.get_leaves_pending_for_approver(approver_role=Role.TEACHER, approver_id="teacher2") == []
    assert svc.get_leaves_pending_for_approver(approver_role=Role.TEACHER, approver_id="nobody") == []
    assert svc.get_leaves_pending_for_approver(approver_role=Role.STUDENT, approver_id="s1") == []


def test_second_decision_is_rejected_and_status_unchanged(svc, store):
    leave = _student_leave(svc)
    svc.decide_leave(request_id=leave.request_id, approve=True, decider_id="teacher1", decider_role=Role.TEACHER)
    writes = store.writes

    with pytest.raises(InvalidTransitionError):
        svc.decide_leave(request_id=leave.request_id, approve=False, decider_id="teacher1", decider_role=Role.TEACHER)

    assert store.writes == writes
    assert svc.get_leaves_for_requester(role=Role.STUDENT, requester_id="s1")[0].status == LeaveStatus.APPROVED


def test_other_class_teacher_cannot_decide_student_leave(svc):
    leave = _student_leave(svc, "s1")

    with pytest.raises(AuthorizationError):
        svc.decide_leave(request_id=leave.request_id, approve=True, decider_id="teacher3", decider_role=Role.TEACHER)
    with pytest.raises(AuthorizationError):
        svc.decide_leave(request_id=leave.request_id, approve=True, decider_id="admin", decider_role=Role.ADMIN)

    assert svc.get_leaves_for_requester(role=Role.STUDENT, requester_id="s1")[0].is_pending


def test_student_leave_without_class_cannot_be_decided_by_any_teacher(svc, store):
    leave = _student_leave(svc, "s1")
    state = store.read()
    state.replace_leave(replace(leave, class_id=None))
    store.write(state)

    for teacher_id in ("teacher1", "teacher2", "teacher3"):
        with pytest.raises(AuthorizationError):
            svc.decide_leave(request_id=leave.request_id, approve=True, decider_id=teacher_id, decider_role=Role.TEACHER)

    assert svc.get_leaves_for_requester(role=Role.STUDENT, requester_id="s1")[0].is_pending


def test_teacher_cannot_decide_teacher_leave(svc):
    leave = _teacher_leave(svc, "teacher2")

    with pytest.raises(AuthorizationError):
        svc.decide_leave(request_id=leave.request_id, approve=True, decider_id="teacher1", decider_role=Role.TEACHER)


def test_decide_requires_known_request_and_decider(svc):
    leave = _teacher_leave(svc)

    with pytest.raises(NotFoundError):
        svc.decide_leave(request_id="missing", approve=True, decider_id="admin", decider_role=Role.ADMIN)
    with pytest.raises(ValidationError):
        svc.decide_leave(request_id=leave.request_id, approve=True, decider_id="  ", decider_role=Role.ADMIN)


@pytest.mark.parametrize(
    "overrides",
    [
        {"reason": "   "},
        {"start_date": ""},
        {"end_date": "2024-13-01"},
        {"start_date": "2024-01-16", "end_date": "2024-01-15"},
        {"leave_type": "Holiday"},
        {"start_time": "9am"},
        {"start_date": "2024-01-15", "end_date": "2024-01-15", "start_time": "14:00", "end_time": "10:00"},
    ],
)
def test_invalid_request_is_rejected_without_writing(svc, store, overrides):
    with pytest.raises(ValidationError):
        _student_leave(svc, **overrides)

    assert store.writes == 0
    assert store.read().leaves == []


def test_unknown_requester_is_not_found(svc):
    with pytest.raises(NotFoundError):
        _student_leave(svc, "ghost")
    with pytest.raises(NotFoundError):
        _teacher_leave(svc, "ghost")


def test_admin_cannot_request_leave(svc):
    with pytest.raises(ValidationError):
        svc.request_leave(
            requester_role=Role.ADMIN,
            requester_id="admin",
            leave_type="Casual",
            start_date="2024-01-10",
            end_date="2024-01-10",
            reason="x",
        )


def test_single_day_partial_leave_keeps_times(svc):
    leave = _student_leave(svc, start_date="2024-01-15", end_date="2024-01-15", start_time="09:00", end_time="12:30")

    stored = svc.get_leaves_for_requester(role=Role.STUDENT, requester_id="s1")[0]
    assert stored.start_time.strftime("%H:%M") == "09:00"
    assert stored.end_time.strftime("%H:%M") == "12:30"
    assert stored.request_id == leave.request_id


def test_unreadable_legacy_leave_survives_new_request(document, fixed_now):
    legacy = {"id": "old1", "requesterRole": "teacher", "requesterId": "teacher1", "type": "Maternity", "status": "approved"}
    document["leaves"] = [legacy]
    store = InMemoryStore(document)
    svc = LeaveService(store, clock=lambda: fixed_now)

    leave = _teacher_leave(svc)

    stored = store.document()["leaves"]
    assert stored[0] == legacy
    assert [row["id"] for row in stored] == ["old1", leave.request_id]
