from decimal import Decimal

from school_portal.core.enums import RemainderPlacement
from school_portal.fees.splitter import splitter_for
from school_portal.fees.splitter.even_splitter import EvenSplitter


def test_even_amount_splits_equally():
    assert EvenSplitter().split(Decimal("900"), 3) == [Decimal("300.00")] * 3


def test_remainder_goes_on_last_slot_by_default():
    parts = EvenSplitter().split(Decimal("100"), 3)

    assert parts == [Decimal("33.33"), Decimal("33.33"), Decimal("33.34")]
    assert sum(parts) == Decimal("100.00")


def test_remainder_can_go_on_first_slot():
    parts = splitter_for("first").split(Decimal("100"), 3)

    assert parts == [Decimal("33.34"), Decimal("33.33"), Decimal("33.33")]


def test_no_slots_gives_no_parts():
    assert EvenSplitter(RemainderPlacement.LAST).split(Decimal("10"), 0) == []
