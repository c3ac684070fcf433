"""Numeric input helpers shared by the metric and sizing libraries.

Trade fields reach this layer as whatever the caller stored: ints, floats,
Decimals, ``None``, or occasionally a placeholder such as an empty string.
These helpers decide which values are usable and convert them to Decimal so
every calculation runs with the same precision.

Usability Rule:
- ``None``, booleans, strings and other non-numbers are not usable
- NaN and infinities are not usable
- Zero is not usable (a zero price, tick value or account size carries no
  information for the ratio calculations)

Thread Safety:
- All functions are pure and thread-safe
"""

import math
from collections.abc import Mapping
from decimal import Decimal
from typing import Any

Number = int | float | Decimal

ZERO = Decimal("0")


def is_number(value: Any) -> bool:
    """Return True for finite int/float/Decimal values (booleans excluded)."""
    if isinstance(value, bool) or not isinstance(value, (int, float, Decimal)):
        return False
    if isinstance(value, float):
        return math.isfinite(value)
    if isinstance(value, Decimal):
        return value.is_finite()
    return True


def is_usable(value: Any) -> bool:
    """Return True if value is a finite, non-zero number."""
    return is_number(value) and value != 0


def to_decimal(value: Number) -> Decimal:
    """
    Convert a number to Decimal.

    Floats go through ``str()`` so ``12.5`` becomes ``Decimal("12.5")`` rather
    than the binary expansion of the float.

    Example:
        >>> to_decimal(0.1)
        Decimal('0.1')
    """
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        return Decimal(str(value))
    return Decimal(value)


def get_field(trade: Any, name: str) -> Any:
    """Read a field from a trade given as a mapping or an object (None if absent)."""
    if isinstance(trade, Mapping):
        return trade.get(name)
    return getattr(trade, name, None)
