from __future__ import annotations

import logging
import uuid
from dataclasses import replace
from datetime import datetime
from typing import Callable, Optional

from ..common.datetime_utils import now_local, parse_optional_time, require_iso_date
from ..common.validators import optional_text, require_non_empty
from ..core.enums import LeaveStatus, LeaveType, Role
from ..core.exceptions import AuthorizationError, InvalidTransitionError, NotFoundError, ValidationError
from ..store.repository import EntityStore
from ..store.state import StoreState
from .model import LeaveRequest

logger = logging.getLogger(__name__)

REQUESTER_ROLES = {Role.STUDENT, Role.TEACHER}


def approver_role_for(requester_role: Role) -> Role:
    """Student leave goes to the class teacher, teacher leave to admin."""
    return Role.TEACHER if requester_role == Role.STUDENT else Role.ADMIN


def class_teacher_class_id(state: StoreState, teacher_id: Optional[str]) -> Optional[str]:
    teacher = state.find_teacher(teacher_id) if teacher_id else None
    if not teacher or not teacher.is_class_teacher:
        return None
    return teacher.class_id


class LeaveService:
    """Leave approval workflow over the entity store.

    A request is created PENDING and decided exactly once. Who may decide is
    enforced here, not left to the caller.
    """

    def __init__(self, store: EntityStore, *, clock: Callable[[], datetime] = now_local):
        self._store = store
        self._clock = clock

    @staticmethod
    def _parse_leave_type(value) -> LeaveType:
        try:
            return LeaveType(value)
        except ValueError:
            allowed = ", ".join(t.value for t in LeaveType)
            raise ValidationError(f"Leave type must be one of: {allowed}")

    def request_leave(
        self,
        *,
        requester_role: Role,
        requester_id: str,
        leave_type: str,
        start_date: str,
        end_date: str,
        reason: str,
        start_time: Optional[str] = None,
        end_time: Optional[str] = None,
        emergency_contact: Optional[str] = None,
        substitute_teacher_name: Optional[str] = None,
    ) -> LeaveRequest:
        if requester_role not in REQUESTER_ROLES:
            raise ValidationError("Only students and teachers can request leave")

        kind = self._parse_leave_type(leave_type)
        start = require_iso_date(start_date, "Start date")
        end = require_iso_date(end_date, "End date")
        if end < start:
            raise ValidationError("End date must be on or after start date")

        start_t = parse_optional_time(start_time, "Start time")
        end_t = parse_optional_time(end_time, "End time")
        if start == end and start_t and end_t and end_t <= start_t:
            raise ValidationError("End time must be after start time")

        reason = require_non_empty(reason, "Reason")

        state = self._store.read()
        class_id: Optional[str] = None
        if requester_role == Role.STUDENT:
            student = state.find_student(requester_id)
            if not student:
                raise NotFoundError(f"Student {requester_id} not found")
            name = student.name
            class_id = student.class_id
        else:
            teacher = state.find_teacher(requester_id)
            if not teacher:
                raise NotFoundError(f"Teacher {requester_id} not found")
            name = teacher.name

        leave = LeaveRequest(
            request_id=uuid.uuid4().hex,
            requester_role=requester_role,
            requester_id=requester_id,
            requester_name=name,
            leave_type=kind,
            start_date=start,
            end_date=end,
            reason=reason,
            status=LeaveStatus.PENDING,
            approver_role=approver_role_for(requester_role),
            created_at=self._clock(),
            class_id=class_id,
            start_time=start_t,
            end_time=end_t,
            emergency_contact=optional_text(emergency_contact),
            substitute_teacher_name=optional_text(substitute_teacher_name),
        )
        state.leaves.append(leave)
        self._store.write(state)

        logger.info(
            "Leave %s requested by %s %s (%s to %s)",
            leave.request_id, requester_role.value, requester_id, start, end,
        )
        return leave

    def get_leaves_for_requester(self, *, role: Role, requester_id: str) -> list[LeaveRequest]:
        return [
            lv
            for lv in self._store.read().leaves
            if lv.requester_role == role and lv.requester_id == requester_id
        ]

    def get_leaves_pending_for_approver(
        self,
        *,
        approver_role: Role,
        approver_id: Optional[str] = None,
    ) -> list[LeaveRequest]:
        state = self._store.read()
        pending = [lv for lv in state.leaves if lv.is_pending]

        if approver_role == Role.ADMIN:
            return [lv for lv in pending if lv.requester_role == Role.TEACHER]

        if approver_role == Role.TEACHER:
            class_id = class_teacher_class_id(state, approver_id)
            if not class_id:
                return []
            return [lv for lv in pending if lv.requester_role == Role.STUDENT and lv.class_id == class_id]

        return []

    @staticmethod
    def _check_decider(state: StoreState, leave: LeaveRequest, decider_role: Role, decider_id: str) -> None:
        if leave.requester_role == Role.TEACHER:
            if decider_role != Role.ADMIN:
                raise AuthorizationError("Only an admin can decide teacher leave")
            return

        if decider_role != Role.TEACHER:
            raise AuthorizationError("Only the class teacher can decide student leave")
        teacher_class = class_teacher_class_id(state, decider_id)
        if not leave.class_id or not teacher_class or teacher_class != leave.class_id:
            raise AuthorizationError("You are not the class teacher for this student")

    def decide_leave(
        self,
        *,
        request_id: str,
        approve: bool,
        decider_id: str,
        decider_role: Role,
    ) -> LeaveRequest:
        decider_id = require_non_empty(decider_id, "Decider")

        state = self._store.read()
        leave = state.find_leave(request_id)
        if not leave:
            raise NotFoundError(f"Leave request {request_id} not found")
        if not leave.is_pending:
            raise InvalidTransitionError(f"Leave request is already {leave.status.value}")

        self._check_decider(state, leave, decider_role, decider_id)

        decided = replace(
            leave,
            status=LeaveStatus.APPROVED if approve else LeaveStatus.REJECTED,
            decided_by=decider_id,
            decided_at=self._clock(),
        )
        state.replace_leave(decided)
        self._store.write(state)

        logger.info("Leave %s %s by %s %s", request_id, decided.status.value, decider_role.value, decider_id)
        return decided

    def approve_leave(self, *, request_id: str, decider_id: str, decider_role: Role) -> LeaveRequest:
        return self.decide_leave(request_id=request_id, approve=True, decider_id=decider_id, decider_role=decider_role)

    def reject_leave(self, *, request_id: str, decider_id: str, decider_role: Role) -> LeaveRequest:
        return self.decide_leave(request_id=request_id, approve=False, decider_id=decider_id, decider_role=decider_role)
