from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from ..common.money import round2


@dataclass(frozen=True)
class FeeInstallment:
    index: int
    amount: Decimal
    due_date: Optional[date] = None
    paid: bool = False
    paid_at: Optional[datetime] = None


@dataclass(frozen=True)
class ClassFeeConfig:
    class_id: str
    base_fee_amount: Decimal
    num_installments: int
    installment_dates: tuple[Optional[date], ...]
    created_at: datetime
    updated_at: datetime


@dataclass(frozen=True)
class StudentFeeState:
    student_id: str
    class_id: str
    installments: tuple[FeeInstallment, ...] = ()
    extra_fees: dict[str, Decimal] = field(default_factory=dict)


@dataclass(frozen=True)
class FeeSummary:
    """Read-side totals shown on fee views. Never persisted."""

    total: Decimal
    paid: Decimal
    remaining: Decimal
    extras_total: Decimal

    @classmethod
    def of(cls, state: Optional[StudentFeeState]) -> "FeeSummary":
        installments = state.installments if state else ()
        extras = state.extra_fees if state else {}
        total = sum((i.amount for i in installments), Decimal("0"))
        paid = sum((i.amount for i in installments if i.paid), Decimal("0"))
        return cls(
            total=round2(total),
            paid=round2(paid),
            remaining=max(Decimal("0.00"), round2(total - paid)),
            extras_total=round2(sum(extras.values(), Decimal("0"))),
        )


@dataclass(frozen=True)
class FeeStatus:
    """What the student fee-status view renders."""

    configured: bool
    config: Optional[ClassFeeConfig] = None
    state: Optional[StudentFeeState] = None
    summary: Optional[FeeSummary] = None
