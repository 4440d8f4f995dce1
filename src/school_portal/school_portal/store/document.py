"""Mapping between the persisted JSON document and :class:`StoreState`.

The document keeps the original camelCase collection layout so a blob saved
by the browser portal loads unchanged. Reading migrates: a missing or
non-list collection loads as empty. A record that cannot be parsed is
logged, kept raw in ``StoreState.unparsed`` and written back ahead of the
parsed records of its collection, so no stored row is ever lost.
"""

from __future__ import annotations

import logging
from datetime import date, datetime, time
from decimal import Decimal
from typing import Any, Callable, Optional, TypeVar

from ..common.money import to_money
from ..core.enums import LeaveStatus, LeaveType, Role
from ..fees.model import ClassFeeConfig, FeeInstallment, StudentFeeState
from ..leaves.model import LeaveRequest
from ..roster.model import ClassRoom, Student, Teacher
from .state import StoreState

logger = logging.getLogger(__name__)

T = TypeVar("T")

MODELED_COLLECTIONS = ("classes", "teachers", "students", "leaves", "feeConfigs", "studentFees")

_CLASS_KEYS = {"id", "name", "subjects"}
_TEACHER_KEYS = {"id", "name", "email", "classId", "isClassTeacher"}
_STUDENT_KEYS = {"id", "name", "email", "rollNo", "classId"}


def _ensure_list(value: Any) -> list:
    return list(value) if isinstance(value, list) else []


def _load_each(collection: str, raw: Any, loader: Callable[[dict], T], unparsed: dict[str, list]) -> list[T]:
    items: list[T] = []
    for position, row in enumerate(_ensure_list(raw)):
        try:
            items.append(loader(row))
        except (AttributeError, KeyError, TypeError, ValueError, ArithmeticError) as e:
            logger.warning("Keeping unparsed %s[%d] as stored: %s", collection, position, e)
            unparsed.setdefault(collection, []).append(row)
    return items


def _opt_str(value: Any) -> Optional[str]:
    return str(value) if value not in (None, "") else None


def _opt_date(value: Any) -> Optional[date]:
    return date.fromisoformat(str(value)) if value else None


def _opt_time(value: Any) -> Optional[time]:
    return datetime.strptime(str(value)[:5], "%H:%M").time() if value else None


def _opt_datetime(value: Any) -> Optional[datetime]:
    if not value:
        return None
    # Browser timestamps end in "Z"; fromisoformat needs an explicit offset.
    return datetime.fromisoformat(str(value).replace("Z", "+00:00"))


def _fmt_date(value: Optional[date]) -> str:
    return value.isoformat() if value else ""


def _fmt_time(value: Optional[time]) -> Optional[str]:
    return value.strftime("%H:%M") if value else None


def _fmt_datetime(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


def _money_out(value: Decimal) -> float:
    return float(value)


def _extra(row: dict, known: set[str]) -> dict[str, Any]:
    return {k: v for k, v in row.items() if k not in known}


# -------- Roster --------
def load_class(row: dict) -> ClassRoom:
    return ClassRoom(
        class_id=str(row["id"]),
        name=str(row.get("name") or "Unnamed"),
        subjects=tuple(str(s) for s in _ensure_list(row.get("subjects"))),
        attributes=_extra(row, _CLASS_KEYS),
    )


def dump_class(c: ClassRoom) -> dict:
    return {**c.attributes, "id": c.class_id, "name": c.name, "subjects": list(c.subjects)}


def load_teacher(row: dict) -> Teacher:
    class_id = _opt_str(row.get("classId"))
    return Teacher(
        teacher_id=str(row["id"]),
        name=str(row.get("name") or ""),
        email=str(row.get("email") or ""),
        class_id=class_id,
        # Older documents omit the flag; a class assignment then implies it.
        is_class_teacher=bool(row.get("isClassTeacher", class_id is not None)),
        attributes=_extra(row, _TEACHER_KEYS),
    )


def dump_teacher(t: Teacher) -> dict:
    return {
        **t.attributes,
        "id": t.teacher_id,
        "name": t.name,
        "email": t.email,
        "classId": t.class_id,
        "isClassTeacher": t.is_class_teacher,
    }


def load_student(row: dict) -> Student:
    class_id = _opt_str(row.get("classId"))
    if class_id is None:
        raise ValueError("student has no classId")
    return Student(
        student_id=str(row["id"]),
        name=str(row.get("name") or ""),
        class_id=class_id,
        email=str(row.get("email") or ""),
        roll_no=str(row.get("rollNo") or ""),
        attributes=_extra(row, _STUDENT_KEYS),
    )


def dump_student(s: Student) -> dict:
    return {
        **s.attributes,
        "id": s.student_id,
        "name": s.name,
        "email": s.email,
        "rollNo": s.roll_no,
        "classId": s.class_id,
    }


# -------- Leaves --------
def load_leave(row: dict) -> LeaveRequest:
    requester_role = Role(row["requesterRole"])
    default_approver = Role.TEACHER if requester_role == Role.STUDENT else Role.ADMIN
    return LeaveRequest(
        request_id=str(row["id"]),
        requester_role=requester_role,
        requester_id=str(row["requesterId"]),
        requester_name=str(row.get("requesterName") or ""),
        leave_type=LeaveType(row.get("type") or LeaveType.OTHER.value),
        start_date=date.fromisoformat(row["startDate"]),
        end_date=date.fromisoformat(row["endDate"]),
        reason=str(row.get("reason") or ""),
        status=LeaveStatus(row.get("status") or LeaveStatus.PENDING.value),
        approver_role=Role(row.get("approverRole") or default_approver.value),
        created_at=_opt_datetime(row.get("createdAt")) or datetime.min,
        class_id=_opt_str(row.get("classId")),
        start_time=_opt_time(row.get("startTime")),
        end_time=_opt_time(row.get("endTime")),
        emergency_contact=_opt_str(row.get("emergencyContact")),
        substitute_teacher_name=_opt_str(row.get("substituteTeacherName")),
        # Older documents stored the decider under approverId.
        decided_by=_opt_str(row.get("decidedBy") or row.get("approverId")),
        decided_at=_opt_datetime(row.get("decidedAt")),
    )


def dump_leave(lv: LeaveRequest) -> dict:
    return {
        "id": lv.request_id,
        "requesterRole": lv.requester_role.value,
        "requesterId": lv.requester_id,
        "requesterName": lv.requester_name,
        "classId": lv.class_id,
        "type": lv.leave_type.value,
        "startDate": lv.start_date.isoformat(),
        "endDate": lv.end_date.isoformat(),
        "startTime": _fmt_time(lv.start_time),
        "endTime": _fmt_time(lv.end_time),
        "reason": lv.reason,
        "emergencyContact": lv.emergency_contact,
        "substituteTeacherName": lv.substitute_teacher_name,
        "status": lv.status.value,
        "approverRole": lv.approver_role.value,
        "decidedBy": lv.decided_by,
        "createdAt": _fmt_datetime(lv.created_at),
        "decidedAt": _fmt_datetime(lv.decided_at),
    }


# -------- Fees --------
def load_fee_config(row: dict) -> ClassFeeConfig:
    created_at = _opt_datetime(row.get("createdAt")) or datetime.min
    return ClassFeeConfig(
        class_id=str(row["classId"]),
        base_fee_amount=to_money(row["baseFeeAmount"]),
        num_installments=max(1, int(row.get("numInstallments") or 1)),
        installment_dates=tuple(_opt_date(d) for d in _ensure_list(row.get("installmentDates"))),
        created_at=created_at,
        updated_at=_opt_datetime(row.get("updatedAt")) or created_at,
    )


def dump_fee_config(c: ClassFeeConfig) -> dict:
    return {
        "classId": c.class_id,
        "baseFeeAmount": _money_out(c.base_fee_amount),
        "numInstallments": c.num_installments,
        "installmentDates": [_fmt_date(d) for d in c.installment_dates],
        "createdAt": _fmt_datetime(c.created_at),
        "updatedAt": _fmt_datetime(c.updated_at),
    }


def load_installment(row: dict) -> FeeInstallment:
    return FeeInstallment(
        index=int(row["index"]),
        amount=to_money(row["amount"]),
        due_date=_opt_date(row.get("dueDate")),
        paid=bool(row.get("paid", False)),
        paid_at=_opt_datetime(row.get("paidAt")),
    )


def dump_installment(i: FeeInstallment) -> dict:
    return {
        "index": i.index,
        "amount": _money_out(i.amount),
        "dueDate": _fmt_date(i.due_date),
        "paid": i.paid,
        "paidAt": _fmt_datetime(i.paid_at),
    }


def load_student_fees(row: dict) -> StudentFeeState:
    extras = row.get("extraFees") or {}
    return StudentFeeState(
        student_id=str(row["studentId"]),
        class_id=str(row.get("classId") or ""),
        installments=tuple(load_installment(i) for i in _ensure_list(row.get("installments"))),
        extra_fees={str(k): to_money(v) for k, v in dict(extras).items()},
    )


def dump_student_fees(f: StudentFeeState) -> dict:
    return {
        "studentId": f.student_id,
        "classId": f.class_id,
        "extraFees": {k: _money_out(v) for k, v in f.extra_fees.items()},
        "installments": [dump_installment(i) for i in f.installments],
    }


# -------- Whole document --------
def load_state(raw: Any) -> StoreState:
    doc = raw if isinstance(raw, dict) else {}
    unparsed: dict[str, list] = {}
    return StoreState(
        classes=_load_each("classes", doc.get("classes"), load_class, unparsed),
        teachers=_load_each("teachers", doc.get("teachers"), load_teacher, unparsed),
        students=_load_each("students", doc.get("students"), load_student, unparsed),
        leaves=_load_each("leaves", doc.get("leaves"), load_leave, unparsed),
        fee_configs=_load_each("feeConfigs", doc.get("feeConfigs"), load_fee_config, unparsed),
        student_fees=_load_each("studentFees", doc.get("studentFees"), load_student_fees, unparsed),
        other={k: v for k, v in doc.items() if k not in MODELED_COLLECTIONS},
        unparsed=unparsed,
    )


def dump_state(state: StoreState) -> dict:
    def rows(collection: str, dumped: list) -> list:
        return [*state.unparsed.get(collection, ()), *dumped]

    return {
        **state.other,
        "classes": rows("classes", [dump_class(c) for c in state.classes]),
        "teachers": rows("teachers", [dump_teacher(t) for t in state.teachers]),
        "students": rows("students", [dump_student(s) for s in state.students]),
        "leaves": rows("leaves", [dump_leave(lv) for lv in state.leaves]),
        "feeConfigs": rows("feeConfigs", [dump_fee_config(c) for c in state.fee_configs]),
        "studentFees": rows("studentFees", [dump_student_fees(f) for f in state.student_fees]),
    }
