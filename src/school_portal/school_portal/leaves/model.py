from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time
from typing import Optional

from ..core.enums import LeaveStatus, LeaveType, Role


@dataclass(frozen=True)
class LeaveRequest:
    request_id: str
    requester_role: Role
    requester_id: str
    requester_name: str
    leave_type: LeaveType
    start_date: date
    end_date: date
    reason: str
    status: LeaveStatus
    approver_role: Role
    created_at: datetime
    class_id: Optional[str] = None
    start_time: Optional[time] = None
    end_time: Optional[time] = None
    emergency_contact: Optional[str] = None
    substitute_teacher_name: Optional[str] = None
    decided_by: Optional[str] = None
    decided_at: Optional[datetime] = None

    @property
    def is_pending(self) -> bool:
        return self.status == LeaveStatus.PENDING
