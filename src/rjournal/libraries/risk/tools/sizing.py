"""Position sizing tools for futures-style trade planning.

Pure functions for turning an account risk budget and a stop distance into
a contract count, plus the helpers the trade planner uses around it.
All functions are stateless and thread-safe.

Design Principles:
- Pure functions (no side effects, no global state)
- Decimal precision for financial calculations
- Floor, never round: fractional contracts cannot be held
- Unusable inputs (missing, zero, non-numeric) size to zero

Supported Models:
- Fixed Risk: risk a fixed % of the account per trade

Thread Safety:
- All functions are pure and thread-safe
- No shared mutable state
"""

import math
from decimal import Decimal

from rjournal.libraries.numeric import ZERO, Number, is_usable, to_decimal


def calculate_risk_amount(account_size: Number | None, risk_percent: Number | None) -> Decimal:
    """Calculate the currency amount at risk for one trade.

    Formula:
        risk_amount = account_size * risk_percent / 100

    Returns:
        Risk amount, or 0 if either input is unusable

    Example:
        >>> calculate_risk_amount(50000, 0.5)
        Decimal('250.000')
    """
    if not (is_usable(account_size) and is_usable(risk_percent)):
        return ZERO

    return to_decimal(account_size) * (to_decimal(risk_percent) / Decimal("100"))


def calculate_position_size(
    account_size: Number | None,
    risk_percent: Number | None,
    stop_ticks: Number | None,
    tick_value: Number | None,
) -> int:
    """Calculate the number of contracts for a fixed-risk trade.

    Formula:
        risk_amount = account_size * risk_percent / 100
        contract_risk = stop_ticks * tick_value
        contracts = floor(risk_amount / contract_risk)

    Args:
        account_size: Account equity in currency units
        risk_percent: Percent of the account to risk (1 = 1%)
        stop_ticks: Stop distance in ticks
        tick_value: Currency value of one tick per contract

    Returns:
        Contract count. Returns 0 if:
        - any input is unusable (missing, zero, non-numeric)
        - the per-contract risk is zero

    Examples:
        >>> # 1% of $100k = $1000 / (10 ticks * $12.50) = 8 contracts
        >>> calculate_position_size(100000, 1, 10, 12.5)
        8

        >>> # $1000 / (30 ticks * $12.50) = 2.67 → 2 contracts
        >>> calculate_position_size(100000, 1, 30, 12.5)
        2
    """
    if not (
        is_usable(account_size) and is_usable(risk_percent) and is_usable(stop_ticks) and is_usable(tick_value)
    ):
        return 0

    risk_amount = calculate_risk_amount(account_size, risk_percent)
    contract_risk = to_decimal(stop_ticks) * to_decimal(tick_value)

    if contract_risk == ZERO:
        return 0

    return math.floor(risk_amount / contract_risk)


def calculate_stop_price(
    entry: Number | None,
    stop_ticks: Number | None,
    tick_size: Number | None,
    target: Number | None = None,
) -> Decimal | None:
    """Place a stop a given number of ticks away from entry.

    Direction is inferred from the target: a target above entry means a
    long, so the stop goes below entry; otherwise the stop goes above.

    Args:
        entry: Entry price
        stop_ticks: Stop distance in ticks
        tick_size: Price increment of one tick
        target: Target price used to infer direction (optional)

    Returns:
        Stop price, or None if entry, stop_ticks or tick_size is unusable

    Examples:
        >>> calculate_stop_price(4500, 8, 0.25, target=4520)
        Decimal('4498.00')
        >>> calculate_stop_price(4500, 8, 0.25, target=4480)
        Decimal('4502.00')
    """
    if not (is_usable(entry) and is_usable(stop_ticks) and is_usable(tick_size)):
        return None

    entry_dec = to_decimal(entry)
    distance = to_decimal(stop_ticks) * to_decimal(tick_size)
    is_long = is_usable(target) and to_decimal(target) > entry_dec

    return entry_dec - distance if is_long else entry_dec + distance
