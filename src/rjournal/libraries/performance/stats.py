"""Report aggregates for the journal dashboard and performance report.

Pure functions that break a trade collection down by outcome: status
counts, break-even detection, streaks, grouped tables, weekly score
averages and the KPI summary. They build on the R metrics in ``metrics``
and never modify the records they read.

Outcome Classification:
- Winner: ``status == winner_status``
- Expense: ``status == expense_status``
- Break-even: ``result`` present and ``abs(result) < break_even_threshold``

Status values and the threshold default to ``MetricsConfig``; pass them
explicitly or hand a config to ``build_summary``.
"""

import datetime
from collections.abc import Callable, Iterable, Sequence
from decimal import Decimal
from typing import Any

import structlog

from rjournal.libraries.numeric import ZERO, get_field, is_number, to_decimal
from rjournal.libraries.performance.metrics import (
    calculate_missed_r,
    calculate_total_r,
    is_chicken_out,
)
from rjournal.libraries.performance.models import GroupMetrics, StreakStats, TradeSummary, WeeklyScore
from rjournal.system.config import MetricsConfig, get_system_config

logger = structlog.get_logger(__name__)

_DEFAULTS = MetricsConfig()

# (lower, upper, label); upper None means unbounded
DEFAULT_STOP_TICK_RANGES: tuple[tuple[int, int | None, str], ...] = (
    (0, 5, "0-5"),
    (6, 10, "6-10"),
    (11, 15, "11-15"),
    (16, 20, "16-20"),
    (21, 25, "21-25"),
    (26, 30, "26-30"),
    (31, None, "31+"),
)


def count_status(trades: Iterable[Any] | None, status: str) -> int:
    """Count trades whose status matches exactly."""
    if not trades:
        return 0
    return sum(1 for t in trades if get_field(t, "status") == status)


def is_break_even(trade: Any, threshold: Decimal = _DEFAULTS.break_even_threshold) -> bool:
    """True if the trade has a numeric result within threshold of zero."""
    result = get_field(trade, "result")
    return is_number(result) and abs(to_decimal(result)) < threshold


def count_break_even(trades: Iterable[Any] | None, threshold: Decimal = _DEFAULTS.break_even_threshold) -> int:
    """Count trades whose realized R is within threshold of zero."""
    if not trades:
        return 0
    return sum(1 for t in trades if is_break_even(t, threshold))


def calculate_average_win(trades: Iterable[Any] | None, winner_status: str = _DEFAULTS.winner_status) -> Decimal:
    """
    Average realized R of winning trades.

    Winners without a numeric result count as 0R.

    Returns:
        Mean R of winners, 0 if there are none
    """
    winners = [t for t in trades or () if get_field(t, "status") == winner_status]
    if not winners:
        return ZERO

    return calculate_total_r(winners) / Decimal(len(winners))


def calculate_streaks(
    trades: Iterable[Any] | None,
    winner_status: str = _DEFAULTS.winner_status,
    expense_status: str = _DEFAULTS.expense_status,
    threshold: Decimal = _DEFAULTS.break_even_threshold,
    chronological: bool = True,
) -> StreakStats:
    """
    Find the longest runs of winners, expenses and break-even trades.

    Trades are ordered by ``date`` then ``confirmation_time`` (missing time
    counts as 00:00); undated trades keep their order after the dated ones.
    Pass ``chronological=False`` to read trades in the order given. Each
    outcome resets the other two runs. A trade that is none of the three
    (e.g. still open) leaves every run untouched.

    Raises:
        ValueError: If a trade date string is not an ISO date

    Example:
        >>> trades = [{"status": "Winner"}, {"status": "Winner"}, {"status": "Expense"}]
        >>> calculate_streaks(trades).max_win_streak
        2
    """
    win = expense = even = 0
    max_win = max_expense = max_even = 0

    ordered = sorted(trades or (), key=_chronological_key) if chronological else (trades or ())

    for trade in ordered:
        status = get_field(trade, "status")
        if status == winner_status:
            win, expense, even = win + 1, 0, 0
            max_win = max(max_win, win)
        elif status == expense_status:
            win, expense, even = 0, expense + 1, 0
            max_expense = max(max_expense, expense)
        elif is_break_even(trade, threshold):
            win, expense, even = 0, 0, even + 1
            max_even = max(max_even, even)

    return StreakStats(
        max_win_streak=max_win,
        max_expense_streak=max_expense,
        max_break_even_streak=max_even,
    )


def count_chicken_outs(trades: Iterable[Any] | None) -> int:
    """Count trades exited before target without being stopped out."""
    if not trades:
        return 0
    return sum(
        1
        for t in trades
        if is_chicken_out(get_field(t, "exit"), get_field(t, "target"), get_field(t, "stopped_out"))
    )


def calculate_average_metrics_score(trades: Iterable[Any] | None) -> Decimal:
    """
    Mean of the per-trade ``average`` score across scored trades.

    Returns:
        Mean score, 0 if no trade carries an average
    """
    scores = [to_decimal(s) for s in (get_field(t, "average") for t in trades or ()) if is_number(s)]
    if not scores:
        return ZERO

    return sum(scores, ZERO) / Decimal(len(scores))


def _percent(count: int, total: int) -> Decimal:
    if total == 0:
        return ZERO
    return Decimal(count) * Decimal("100") / Decimal(total)


def _group_metrics(
    label: str,
    trades: Sequence[Any],
    winner_status: str,
    expense_status: str,
    threshold: Decimal,
) -> GroupMetrics:
    winners = count_status(trades, winner_status)
    expenses = count_status(trades, expense_status)
    break_even = count_break_even(trades, threshold)
    win_rate = _percent(winners, len(trades))

    return GroupMetrics(
        label=label,
        trades=len(trades),
        winners=winners,
        expenses=expenses,
        break_even=break_even,
        win_rate=win_rate,
        result=calculate_total_r(trades),
    )


def summarize_by(
    trades: Iterable[Any] | None,
    key: str | Callable[[Any], Any],
    winner_status: str = _DEFAULTS.winner_status,
    expense_status: str = _DEFAULTS.expense_status,
    threshold: Decimal = _DEFAULTS.break_even_threshold,
) -> list[GroupMetrics]:
    """
    Break trades down by a field or a key function.

    Groups appear in first-seen order. Trades whose key is None are skipped.

    Args:
        trades: TradeRecord objects or mappings
        key: Field name (e.g. "session", "instrument") or callable
        winner_status: Status counted as a win
        expense_status: Status counted as a loss
        threshold: Break-even threshold in R

    Example:
        >>> trades = [{"session": "ODR", "status": "Winner"}, {"session": "RDR", "status": "Expense"}]
        >>> [(r.label, r.trades, r.win_rate) for r in summarize_by(trades, "session")]
        [('ODR', 1, Decimal('100')), ('RDR', 1, Decimal('0'))]
    """
    key_func: Callable[[Any], Any] = key if callable(key) else (lambda t: get_field(t, key))

    groups: dict[Any, list[Any]] = {}
    for trade in trades or ():
        group_key = key_func(trade)
        if group_key is None:
            continue
        groups.setdefault(group_key, []).append(trade)

    return [
        _group_metrics(str(label), members, winner_status, expense_status, threshold)
        for label, members in groups.items()
    ]


def bucket_by_stop_ticks(
    trades: Iterable[Any] | None,
    ranges: Sequence[tuple[int, int | None, str]] = DEFAULT_STOP_TICK_RANGES,
    winner_status: str = _DEFAULTS.winner_status,
    expense_status: str = _DEFAULTS.expense_status,
    threshold: Decimal = _DEFAULTS.break_even_threshold,
) -> list[GroupMetrics]:
    """
    Break trades down by stop size in ticks.

    A trade belongs to the first range whose upper bound is >= its
    ``stop_ticks`` (so 5.5 ticks lands in "6-10"). Trades below the first
    lower bound or without numeric stop ticks are skipped. Empty ranges are
    omitted.

    Raises:
        ValueError: If ranges are empty, not ascending, or an unbounded range
            is not last
    """
    _validate_ranges(ranges)

    buckets: list[list[Any]] = [[] for _ in ranges]
    for trade in trades or ():
        stop_ticks = get_field(trade, "stop_ticks")
        if not is_number(stop_ticks):
            continue
        ticks = to_decimal(stop_ticks)
        if ticks < ranges[0][0]:
            continue
        for index, (_, upper, _) in enumerate(ranges):
            if upper is None or ticks <= upper:
                buckets[index].append(trade)
                break

    return [
        _group_metrics(label, members, winner_status, expense_status, threshold)
        for (_, _, label), members in zip(ranges, buckets)
        if members
    ]


def _validate_ranges(ranges: Sequence[tuple[int, int | None, str]]) -> None:
    if not ranges:
        raise ValueError("ranges cannot be empty")

    previous_upper: int | None = None
    for position, (lower, upper, label) in enumerate(ranges):
        if upper is None:
            if position != len(ranges) - 1:
                raise ValueError(f"unbounded range {label!r} must be last")
        elif upper < lower:
            raise ValueError(f"range {label!r} has upper bound {upper} below lower bound {lower}")
        if previous_upper is not None and lower <= previous_upper:
            raise ValueError(f"range {label!r} overlaps the previous range")
        previous_upper = upper


def _to_date(value: Any) -> datetime.date | None:
    if value is None:
        return None
    if isinstance(value, datetime.datetime):
        return value.date()
    if isinstance(value, datetime.date):
        return value
    if isinstance(value, str):
        try:
            return datetime.date.fromisoformat(value[:10])
        except ValueError as e:
            raise ValueError(f"trade date must be an ISO date (YYYY-MM-DD), got {value!r}") from e
    raise ValueError(f"trade date must be a date or ISO string, got {type(value).__name__}")


def _chronological_key(trade: Any) -> tuple[bool, datetime.date, str]:
    trade_date = _to_date(get_field(trade, "date"))
    if trade_date is None:
        return (True, datetime.date.min, "")
    return (False, trade_date, str(get_field(trade, "confirmation_time") or "00:00"))


def calculate_weekly_scores(trades: Iterable[Any] | None) -> list[WeeklyScore]:
    """
    Average the per-trade ``average`` score per ISO week.

    Only trades with both a date and a numeric average take part.

    Returns:
        WeeklyScore rows sorted by week ("2025-W03" < "2025-W10")

    Raises:
        ValueError: If a trade date string is not an ISO date
    """
    weeks: dict[str, list[Decimal]] = {}
    for trade in trades or ():
        score = get_field(trade, "average")
        trade_date = _to_date(get_field(trade, "date"))
        if trade_date is None or not is_number(score):
            continue
        iso_year, iso_week, _ = trade_date.isocalendar()
        weeks.setdefault(f"{iso_year}-W{iso_week:02d}", []).append(to_decimal(score))

    return [
        WeeklyScore(week=week, count=len(scores), average=sum(scores, ZERO) / Decimal(len(scores)))
        for week, scores in sorted(weeks.items())
    ]


def build_summary(trades: Iterable[Any] | None, config: MetricsConfig | None = None) -> TradeSummary:
    """
    Build the dashboard KPI block for a set of trades.

    Args:
        trades: TradeRecord objects or mappings
        config: Status vocabulary and break-even threshold. If None, uses
            the system config.

    Returns:
        TradeSummary with every KPI computed over the same trades
    """
    if config is None:
        config = get_system_config().metrics

    trades = list(trades or ())
    scored = sum(1 for t in trades if is_number(get_field(t, "average")))

    summary = TradeSummary(
        total_trades=len(trades),
        total_r=calculate_total_r(trades),
        winners=count_status(trades, config.winner_status),
        expenses=count_status(trades, config.expense_status),
        break_evens=count_break_even(trades, config.break_even_threshold),
        chicken_out_count=count_chicken_outs(trades),
        missed_r=calculate_missed_r(trades),
        win_rate=_percent(count_status(trades, config.winner_status), len(trades)),
        average_win=calculate_average_win(trades, config.winner_status),
        average_metrics_score=calculate_average_metrics_score(trades),
        metrics_based_on=scored,
    )

    logger.debug(
        "stats.summary.built",
        trades=summary.total_trades,
        total_r=str(summary.total_r),
        win_rate=str(summary.win_rate),
    )
    return summary

