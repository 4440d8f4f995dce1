from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Portal roles used for routing and authorization."""

    ADMIN = "admin"
    TEACHER = "teacher"
    STUDENT = "student"


class LeaveType(str, Enum):
    CASUAL = "Casual"
    SICK = "Sick"
    ANNUAL = "Annual"
    OTHER = "Other"


class LeaveStatus(str, Enum):
    """Leave approval states. PENDING moves once to APPROVED or REJECTED."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class RemainderPlacement(str, Enum):
    """Which unpaid installment absorbs the cent remainder of a split."""

    LAST = "last"
    FIRST = "first"
