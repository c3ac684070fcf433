"""
Risk Management Library.

Pure function-based tools for sizing trades from an account risk budget.
All tools are stateless, composable, and easy to test.

Architecture:
- tools/sizing.py: Position sizing and stop placement functions

Usage:
    >>> from rjournal.libraries.risk import calculate_position_size
    >>>
    >>> # Risk 1% of $100k with a 10-tick stop at $12.50/tick
    >>> calculate_position_size(100000, 1, 10, 12.5)
    8
"""

from rjournal.libraries.risk.tools.sizing import calculate_position_size, calculate_risk_amount, calculate_stop_price

__all__ = [
    "calculate_position_size",
    "calculate_risk_amount",
    "calculate_stop_price",
]
