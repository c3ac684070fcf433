"""Root conftest for all tests - setup sys.path and shared trade fixtures."""

import sys
from decimal import Decimal
from pathlib import Path

import pytest

# Add src/ to sys.path so tests run without an editable install
src_root = Path(__file__).parent.parent / "src"
if str(src_root) not in sys.path:
    sys.path.insert(0, str(src_root))

from rjournal.libraries.performance.models import TradeRecord  # noqa: E402


@pytest.fixture
def journal_trades() -> list[TradeRecord]:
    """A small journal: two winners, one expense, one chicken-out, one open trade."""
    return [
        TradeRecord(
            entry=Decimal("100"),
            stop=Decimal("95"),
            target=Decimal("110"),
            exit=Decimal("110"),
            status="Winner",
            result=Decimal("2"),
            date="2025-01-06",
            session="ODR",
            stop_ticks=Decimal("20"),
            average=Decimal("8"),
        ),
        TradeRecord(
            entry=Decimal("100"),
            stop=Decimal("95"),
            target=Decimal("110"),
            exit=Decimal("95"),
            status="Expense",
            result=Decimal("-1"),
            stopped_out=True,
            date="2025-01-07",
            session="RDR",
            stop_ticks=Decimal("4"),
            average=Decimal("6"),
        ),
        TradeRecord(
            entry=Decimal("90"),
            stop=Decimal("85"),
            target=Decimal("100"),
            exit=Decimal("95"),
            status="Winner",
            result=Decimal("1"),
            date="2025-01-14",
            session="ODR",
            stop_ticks=Decimal("20"),
        ),
        TradeRecord(
            entry=Decimal("100"),
            stop=Decimal("98"),
            target=Decimal("104"),
            exit=Decimal("100.1"),
            status="Break Even",
            result=Decimal("0.05"),
            date="2025-01-15",
            session="ODR",
            stop_ticks=Decimal("8"),
            average=Decimal("7"),
        ),
        TradeRecord(
            entry=Decimal("100"),
            stop=Decimal("95"),
            target=Decimal("110"),
            status="Open",
        ),
    ]
