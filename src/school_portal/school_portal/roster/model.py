from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional


# ``attributes`` keeps document keys this package does not model (phone,
# password, subject assignments, ...) so they are written back unchanged.


@dataclass(frozen=True)
class ClassRoom:
    class_id: str
    name: str
    subjects: tuple[str, ...] = ()
    attributes: dict[str, Any] = field(default_factory=dict, compare=False)


@dataclass(frozen=True)
class Teacher:
    teacher_id: str
    name: str
    email: str = ""
    class_id: Optional[str] = None
    is_class_teacher: bool = False
    attributes: dict[str, Any] = field(default_factory=dict, compare=False)


@dataclass(frozen=True)
class Student:
    student_id: str
    name: str
    class_id: str
    email: str = ""
    roll_no: str = ""
    attributes: dict[str, Any] = field(default_factory=dict, compare=False)
