from __future__ import annotations

import logging
from dataclasses import replace
from datetime import datetime
from decimal import Decimal
from typing import Callable, Mapping, Optional, Sequence

from ..common.datetime_utils import now_local, parse_iso_date
from ..common.money import round2
from ..common.validators import require_non_empty, require_non_negative_amount, require_positive_int
from ..core.exceptions import FeeNotConfiguredError, NotFoundError, ValidationError
from ..roster.model import Student
from ..store.repository import EntityStore
from ..store.state import StoreState
from .model import ClassFeeConfig, FeeInstallment, FeeStatus, FeeSummary, StudentFeeState
from .splitter.base import InstallmentSplitter
from .splitter.even_splitter import EvenSplitter

logger = logging.getLogger(__name__)


def derive_installments(
    config: ClassFeeConfig,
    existing: Sequence[FeeInstallment],
    splitter: InstallmentSplitter,
) -> tuple[FeeInstallment, ...]:
    """Rebuild a schedule from ``config`` keeping every paid installment as is.

    Each paid installment holds the schedule slot carrying its due date, or
    the earliest free slot when its date is no longer on the schedule. The
    unpaid balance is split over the free slots and takes their dates in
    schedule order. If paid installments already fill the schedule but money
    is still owed, one extra undated installment carries it.
    """
    paid = [i for i in existing if i.paid]
    paid_sum = sum((i.amount for i in paid), Decimal("0"))
    remaining = max(Decimal("0"), round2(config.base_fee_amount - paid_sum))

    free_dates = list(config.installment_dates)
    unmatched = 0
    for inst in paid:
        if inst.due_date in free_dates:
            free_dates.remove(inst.due_date)
        else:
            unmatched += 1
    free_dates = free_dates[unmatched:]

    slots = 0
    if remaining > 0:
        slots = max(config.num_installments - len(paid), 1)

    unpaid = [
        FeeInstallment(index=0, amount=amount, due_date=free_dates[k] if k < len(free_dates) else None)
        for k, amount in enumerate(splitter.split(remaining, slots))
    ]

    merged = [*paid, *unpaid]
    return tuple(replace(inst, index=pos) for pos, inst in enumerate(merged, start=1))


class FeeService:
    """Class fee configuration and per-student installment schedules."""

    def __init__(
        self,
        store: EntityStore,
        *,
        splitter: Optional[InstallmentSplitter] = None,
        clock: Callable[[], datetime] = now_local,
    ):
        self._store = store
        self._splitter = splitter or EvenSplitter()
        self._clock = clock

    # -------- Lookups --------
    def get_class_fee_config(self, class_id: str) -> Optional[ClassFeeConfig]:
        return self._store.read().find_fee_config(class_id)

    def get_student_fee_state(self, student_id: str) -> Optional[StudentFeeState]:
        return self._store.read().find_student_fees(student_id)

    @staticmethod
    def _require_student(state: StoreState, student_id: str) -> Student:
        student = state.find_student(student_id)
        if not student:
            raise NotFoundError(f"Student {student_id} not found")
        return student

    # -------- Admin configuration --------
    def set_class_fee_config(self, *, class_id: str, base_fee_amount, num_installments) -> ClassFeeConfig:
        class_id = require_non_empty(class_id, "Class")
        amount = round2(require_non_negative_amount(base_fee_amount, "Base fee"))
        count = require_positive_int(num_installments, "Number of installments")

        state = self._store.read()
        now = self._clock()
        existing = state.find_fee_config(class_id)
        if existing:
            dates = existing.installment_dates
            if len(dates) != count:
                # A different schedule length invalidates every date.
                dates = (None,) * count
            config = replace(
                existing,
                base_fee_amount=amount,
                num_installments=count,
                installment_dates=dates,
                updated_at=now,
            )
        else:
            config = ClassFeeConfig(
                class_id=class_id,
                base_fee_amount=amount,
                num_installments=count,
                installment_dates=(None,) * count,
                created_at=now,
                updated_at=now,
            )

        state.upsert_fee_config(config)
        self._store.write(state)
        logger.info("Fee config for class %s set: %s in %d installments", class_id, amount, count)
        return config

    def set_installment_dates(self, *, class_id: str, dates: Sequence[Optional[str]]) -> ClassFeeConfig:
        state = self._store.read()
        config = state.find_fee_config(class_id)
        if not config:
            raise FeeNotConfiguredError(f"No fee configuration for class {class_id}")
        if len(dates) != config.num_installments:
            raise ValidationError(f"Expected {config.num_installments} installment dates, got {len(dates)}")

        parsed = []
        for position, value in enumerate(dates, start=1):
            v = (value or "").strip()
            try:
                parsed.append(parse_iso_date(v) if v else None)
            except ValueError:
                raise ValidationError(f"Installment {position} date must be YYYY-MM-DD")

        config = replace(config, installment_dates=tuple(parsed), updated_at=self._clock())
        state.upsert_fee_config(config)
        self._store.write(state)
        return config

    def upsert_student_extra_fees(self, *, student_id: str, extra: Mapping[str, object]) -> StudentFeeState:
        cleaned: dict[str, Decimal] = {}
        for category, amount in extra.items():
            name = require_non_empty(category, "Fee category").lower()
            cleaned[name] = round2(require_non_negative_amount(amount, f"{name} fee"))

        state = self._store.read()
        student = self._require_student(state, student_id)
        current = state.find_student_fees(student_id) or StudentFeeState(student_id=student_id, class_id=student.class_id)
        updated = replace(current, extra_fees={**current.extra_fees, **cleaned})

        state.upsert_student_fees(updated)
        self._store.write(state)
        return updated

    def mark_installment_paid(self, *, student_id: str, index: int, paid: bool = True) -> StudentFeeState:
        state = self._store.read()
        current = state.find_student_fees(student_id)
        if not current:
            raise NotFoundError(f"No fee schedule for student {student_id}")

        target = next((i for i in current.installments if i.index == int(index)), None)
        if not target:
            raise NotFoundError(f"Installment {index} not found for student {student_id}")
        if target.paid == bool(paid):
            return current

        changed = replace(target, paid=bool(paid), paid_at=self._clock() if paid else None)
        updated = replace(
            current,
            installments=tuple(changed if i.index == target.index else i for i in current.installments),
        )
        state.upsert_student_fees(updated)
        self._store.write(state)
        logger.info("Installment %s for student %s marked %s", index, student_id, "paid" if paid else "unpaid")
        return updated

    # -------- Derivation --------
    def recompute_student_installments(self, student_id: str) -> StudentFeeState:
        state = self._store.read()
        updated = self._recompute_in(state, student_id)
        if updated is not None:
            self._store.write(state)
        return state.find_student_fees(student_id)

    def _recompute_in(self, state: StoreState, student_id: str) -> Optional[StudentFeeState]:
        """Recompute inside ``state``; return the new state or None when unchanged."""
        student = self._require_student(state, student_id)
        config = state.find_fee_config(student.class_id)
        if not config:
            raise FeeNotConfiguredError(f"No fee configuration for class {student.class_id}")

        existing = state.find_student_fees(student_id)
        current = existing or StudentFeeState(student_id=student_id, class_id=student.class_id)

        installments = derive_installments(config, current.installments, self._splitter)
        if existing is not None and existing.installments == installments and existing.class_id == student.class_id:
            logger.debug("Installments for student %s already in sync", student_id)
            return None

        updated = replace(current, class_id=student.class_id, installments=installments)
        state.upsert_student_fees(updated)
        logger.info("Installments for student %s recomputed (%d installments)", student_id, len(installments))
        return updated

    def recompute_class(self, class_id: str) -> int:
        """Recompute every student of a class in one write; return how many changed."""
        state = self._store.read()
        if not state.find_fee_config(class_id):
            raise FeeNotConfiguredError(f"No fee configuration for class {class_id}")

        changed = sum(1 for s in state.students_in_class(class_id) if self._recompute_in(state, s.student_id))
        if changed:
            self._store.write(state)
        return changed

    # -------- Views --------
    def fee_status(self, student_id: str) -> FeeStatus:
        """Keep the student's schedule in sync with the class config, then summarise."""
        state = self._store.read()
        student = self._require_student(state, student_id)
        config = state.find_fee_config(student.class_id)
        if not config:
            return FeeStatus(configured=False)

        fee_state = self.recompute_student_installments(student_id)
        return FeeStatus(configured=True, config=config, state=fee_state, summary=FeeSummary.of(fee_state))

    def class_fee_overview(self, class_id: str) -> list[tuple[Student, Optional[StudentFeeState], FeeSummary]]:
        """Per-student schedules as the class config implies them. Nothing is written."""
        state = self._store.read()
        config = state.find_fee_config(class_id)
        rows = []
        for student in state.students_in_class(class_id):
            fee_state = state.find_student_fees(student.student_id)
            if config:
                current = fee_state or StudentFeeState(student_id=student.student_id, class_id=class_id)
                fee_state = replace(
                    current,
                    class_id=class_id,
                    installments=derive_installments(config, current.installments, self._splitter),
                )
            rows.append((student, fee_state, FeeSummary.of(fee_state)))
        return rows
