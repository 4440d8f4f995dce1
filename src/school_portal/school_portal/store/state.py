from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional

from ..fees.model import ClassFeeConfig, StudentFeeState
from ..leaves.model import LeaveRequest
from ..roster.model import ClassRoom, Student, Teacher


@dataclass
class StoreState:
    """In-memory view of the persisted document.

    Collections this package does not model (notices, timetables, marks, ...)
    ride along in ``other`` so a write never drops them. Rows of a modelled
    collection that could not be parsed are kept raw in ``unparsed``, keyed by
    collection name, and written back unchanged.
    """

    classes: list[ClassRoom] = field(default_factory=list)
    teachers: list[Teacher] = field(default_factory=list)
    students: list[Student] = field(default_factory=list)
    leaves: list[LeaveRequest] = field(default_factory=list)
    fee_configs: list[ClassFeeConfig] = field(default_factory=list)
    student_fees: list[StudentFeeState] = field(default_factory=list)
    other: dict[str, Any] = field(default_factory=dict)
    unparsed: dict[str, list[Any]] = field(default_factory=dict)

    def find_student(self, student_id: str) -> Optional[Student]:
        return next((s for s in self.students if s.student_id == student_id), None)

    def find_teacher(self, teacher_id: str) -> Optional[Teacher]:
        return next((t for t in self.teachers if t.teacher_id == teacher_id), None)

    def students_in_class(self, class_id: str) -> list[Student]:
        return [s for s in self.students if s.class_id == class_id]

    def find_leave(self, request_id: str) -> Optional[LeaveRequest]:
        return next((lv for lv in self.leaves if lv.request_id == request_id), None)

    def replace_leave(self, updated: LeaveRequest) -> None:
        self.leaves = [updated if lv.request_id == updated.request_id else lv for lv in self.leaves]

    def find_fee_config(self, class_id: str) -> Optional[ClassFeeConfig]:
        return next((c for c in self.fee_configs if c.class_id == class_id), None)

    def upsert_fee_config(self, config: ClassFeeConfig) -> None:
        if self.find_fee_config(config.class_id):
            self.fee_configs = [config if c.class_id == config.class_id else c for c in self.fee_configs]
        else:
            self.fee_configs.append(config)

    def find_student_fees(self, student_id: str) -> Optional[StudentFeeState]:
        return next((f for f in self.student_fees if f.student_id == student_id), None)

    def upsert_student_fees(self, fee_state: StudentFeeState) -> None:
        if self.find_student_fees(fee_state.student_id):
            self.student_fees = [
                fee_state if f.student_id == fee_state.student_id else f for f in self.student_fees
            ]
        else:
            self.student_fees.append(fee_state)
