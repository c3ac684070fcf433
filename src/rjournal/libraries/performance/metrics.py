"""R-multiple metric calculation functions.

Pure functions for per-trade risk/reward figures and the aggregate R
statistics shown on the journal dashboard. All functions are stateless and
total: degenerate input maps to a defined sentinel, never an exception.

Philosophy:
- Pure functions: same inputs always produce same outputs
- No side effects: records are read, never modified
- Denominators are guarded explicitly (no Infinity/NaN leaks into sums)
- ``None`` means "not computable", ``0`` means "computed, nothing there"

Guard Policy:
    Price, tick and size inputs pass through ``is_usable``: ``None``,
    placeholders, NaN and zero all count as "not provided". Scores and the
    entry/stop of a chicken-out pass through ``is_number`` instead, so zero
    is kept as a real value.

Usage:
    >>> from rjournal.libraries.performance import metrics
    >>> metrics.calculate_potential_r(4500, 4490, 4530)
    Decimal('3')
    >>> metrics.calculate_result(4500, 4490, 4485)
    Decimal('-1.5')
"""

from collections.abc import Iterable
from decimal import Decimal
from typing import Any

import structlog

from rjournal.libraries.numeric import ZERO, Number, get_field, is_number, is_usable, to_decimal

logger = structlog.get_logger(__name__)

WINNER_STATUS = "Winner"


def calculate_stop_ticks(entry: Number | None, stop: Number | None, tick_value: Number | None) -> Decimal:
    """
    Calculate the stop distance in ticks.

    Args:
        entry: Entry price
        stop: Stop price
        tick_value: Price increment of one tick for the instrument

    Returns:
        ``abs(entry - stop) / tick_value``, or 0 if any input is unusable

    Example:
        >>> calculate_stop_ticks(4500, 4490, 2)
        Decimal('5')
    """
    if not (is_usable(entry) and is_usable(stop) and is_usable(tick_value)):
        return ZERO

    return abs(to_decimal(entry) - to_decimal(stop)) / to_decimal(tick_value)


def calculate_potential_r(entry: Number | None, stop: Number | None, target: Number | None) -> Decimal:
    """
    Calculate the planned reward-to-risk ratio.

    Args:
        entry: Entry price
        stop: Stop price
        target: Target price

    Returns:
        ``abs(target - entry) / abs(entry - stop)``; 0 if any input is
        unusable or the risk distance is zero

    Example:
        >>> calculate_potential_r(100, 95, 110)
        Decimal('2')
    """
    if not (is_usable(entry) and is_usable(stop) and is_usable(target)):
        return ZERO

    risk = abs(to_decimal(entry) - to_decimal(stop))
    if risk == ZERO:
        return ZERO

    return abs(to_decimal(target) - to_decimal(entry)) / risk


def calculate_result(entry: Number | None, stop: Number | None, exit: Number | None) -> Decimal | None:
    """
    Calculate the realized outcome in R.

    Signed: positive when exit is above entry, negative below. Unusable
    input returns None ("no result yet") which is distinct from a
    break-even 0.

    Args:
        entry: Entry price
        stop: Stop price
        exit: Exit price

    Returns:
        ``(exit - entry) / abs(entry - stop)``; None if any input is
        unusable; 0 if the risk distance is zero

    Example:
        >>> calculate_result(100, 95, 110)
        Decimal('2')
        >>> calculate_result(100, 95, None) is None
        True
    """
    if not (is_usable(entry) and is_usable(stop) and is_usable(exit)):
        return None

    risk = abs(to_decimal(entry) - to_decimal(stop))
    if risk == ZERO:
        return ZERO

    return (to_decimal(exit) - to_decimal(entry)) / risk


def calculate_average_score(
    preparation: Number | None = None,
    entry_score: Number | None = None,
    stop_loss: Number | None = None,
    target_score: Number | None = None,
    management: Number | None = None,
    rules: Number | None = None,
) -> Decimal | None:
    """
    Average the self-assessment scores that were filled in.

    ``None``, placeholders (e.g. ``""``) and NaN are skipped; a score of 0
    is kept.

    Returns:
        Mean of the provided scores, or None if no score was provided

    Example:
        >>> calculate_average_score(8, 6, None, None, None, None)
        Decimal('7')
    """
    scores = [
        to_decimal(score)
        for score in (preparation, entry_score, stop_loss, target_score, management, rules)
        if is_number(score)
    ]

    if not scores:
        return None

    return sum(scores, ZERO) / Decimal(len(scores))


def calculate_win_rate(trades: Iterable[Any] | None) -> Decimal:
    """
    Calculate win rate (percentage of trades journaled as "Winner").

    Status matching is exact and case-sensitive.

    Args:
        trades: TradeRecord objects or mappings

    Returns:
        Win rate as percentage (0-100), 0 for an empty collection

    Example:
        >>> calculate_win_rate([{"status": "Winner"}, {"status": "Expense"}])
        Decimal('50')
    """
    trades = list(trades or ())
    if not trades:
        return ZERO

    winners = sum(1 for t in trades if get_field(t, "status") == WINNER_STATUS)
    return Decimal(winners) * Decimal("100") / Decimal(len(trades))


def calculate_total_r(trades: Iterable[Any] | None) -> Decimal:
    """
    Sum the realized R of all trades.

    Trades without a numeric ``result`` (open trades) contribute 0.

    Example:
        >>> calculate_total_r([{"result": 2}, {"result": -1}, {"result": None}])
        Decimal('1')
    """
    if not trades:
        return ZERO

    total = ZERO
    for trade in trades:
        result = get_field(trade, "result")
        if is_number(result):
            total += to_decimal(result)

    return total


def is_chicken_out(exit: Number | None, target: Number | None, stopped_out: bool | None) -> bool:
    """
    Determine whether a trade was closed before target without being stopped.

    Example:
        >>> is_chicken_out(95, 100, False)
        True
        >>> is_chicken_out(95, 100, True)
        False
    """
    if not (is_usable(exit) and is_usable(target)):
        return False

    return to_decimal(exit) < to_decimal(target) and not stopped_out


def calculate_missed_r(trades: Iterable[Any] | None) -> Decimal:
    """
    Sum the R left on the table by chicken-out trades.

    For every trade that exited below target without being stopped out,
    adds ``(target - exit) / abs(entry - stop)``. A zero entry or stop is a
    real price; a trade whose entry or stop is missing or non-numeric, or
    whose risk distance is zero, contributes 0.

    Args:
        trades: TradeRecord objects or mappings

    Returns:
        Total missed R (>= 0 for long-style trades), 0 for an empty collection

    Example:
        >>> calculate_missed_r([{"entry": 90, "stop": 85, "target": 100, "exit": 95}])
        Decimal('1')
    """
    if not trades:
        return ZERO

    missed = ZERO
    for trade in trades:
        exit_price = get_field(trade, "exit")
        target = get_field(trade, "target")
        if not is_chicken_out(exit_price, target, get_field(trade, "stopped_out")):
            continue

        entry = get_field(trade, "entry")
        stop = get_field(trade, "stop")
        if not (is_number(entry) and is_number(stop)):
            logger.debug("metrics.missed_r.skipped", reason="missing_risk", entry=entry, stop=stop)
            continue

        risk = abs(to_decimal(entry) - to_decimal(stop))
        if risk == ZERO:
            logger.debug("metrics.missed_r.skipped", reason="zero_risk", entry=entry, stop=stop)
            continue

        missed += (to_decimal(target) - to_decimal(exit_price)) / risk

    return missed
