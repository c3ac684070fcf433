"""Trade journal data models.

Pydantic models for trade records and the report structures built from them.
Metric functions accept these models or plain mappings with the same keys.
"""

import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field


class TradeRecord(BaseModel):
    """
    A journaled discretionary trade.

    Only the price fields, ``status``, ``result`` and ``stopped_out`` feed the
    R metrics. The remaining fields are used by report breakdowns. Unknown
    keys are kept so records loaded from storage round-trip untouched.
    """

    model_config = ConfigDict(frozen=True, extra="allow")

    entry: Decimal | None = None
    stop: Decimal | None = None
    target: Decimal | None = None
    exit: Decimal | None = None
    status: str | None = None  # "Winner", "Expense", ... (open set)
    result: Decimal | None = None  # Realized R-multiple
    stopped_out: bool = False

    date: datetime.date | None = None
    confirmation_time: str | None = None  # HH:MM
    session: str | None = None
    direction: str | None = None
    instrument: str | None = None
    entry_method: str | None = None
    stop_ticks: Decimal | None = None

    # Self-assessment scores (1-10) and their average
    preparation: Decimal | None = None
    entry_score: Decimal | None = None
    stop_loss: Decimal | None = None
    target_score: Decimal | None = None
    management: Decimal | None = None
    rules: Decimal | None = None
    average: Decimal | None = None


class GroupMetrics(BaseModel):
    """
    Outcome breakdown for one group of trades.

    Used for per-session, per-instrument, per-month and stop-size tables.
    """

    label: str
    trades: int
    winners: int
    expenses: int
    break_even: int
    win_rate: Decimal  # Percentage (0-100)
    result: Decimal  # Sum of R


class StreakStats(BaseModel):
    """Longest runs of consecutive outcomes."""

    max_win_streak: int = 0
    max_expense_streak: int = 0
    max_break_even_streak: int = 0


class WeeklyScore(BaseModel):
    """Average self-assessment score for one ISO week."""

    week: str  # "2025-W03"
    count: int
    average: Decimal


class TradeSummary(BaseModel):
    """
    Dashboard KPI block for a set of trades.

    All values are computed by the pure functions in ``metrics`` and
    ``stats``; this model only groups them.
    """

    total_trades: int
    total_r: Decimal
    winners: int
    expenses: int
    break_evens: int
    chicken_out_count: int
    missed_r: Decimal
    win_rate: Decimal
    average_win: Decimal
    average_metrics_score: Decimal
    metrics_based_on: int = Field(description="Number of trades with an average score")
