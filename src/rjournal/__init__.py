"""
rjournal - Trade Journal Metrics

Public API: pure functions computing R-multiple performance and risk
metrics for discretionary trading records.
"""

from importlib.metadata import PackageNotFoundError, version

from rjournal.libraries.performance import (
    TradeRecord,
    calculate_average_score,
    calculate_missed_r,
    calculate_potential_r,
    calculate_result,
    calculate_stop_ticks,
    calculate_total_r,
    calculate_win_rate,
    is_chicken_out,
)
from rjournal.libraries.risk import calculate_position_size

try:
    __version__ = version("rjournal")
except PackageNotFoundError:
    __version__ = "0.0.0.dev"  # Fallback for development


__all__ = [
    "__version__",
    "TradeRecord",
    "calculate_stop_ticks",
    "calculate_potential_r",
    "calculate_result",
    "calculate_average_score",
    "calculate_win_rate",
    "calculate_total_r",
    "calculate_position_size",
    "is_chicken_out",
    "calculate_missed_r",
]
