"""Performance metrics library for trade journal analysis.

This library provides R-multiple based performance analysis:

1. **Models** (`models.py`): Pydantic data structures
   - TradeRecord: A journaled trade (prices, status, result, scores)
   - GroupMetrics: Outcome breakdown for a group of trades
   - StreakStats: Longest winner/expense/break-even runs
   - WeeklyScore: Average self-assessment score per ISO week
   - TradeSummary: Dashboard KPI block

2. **Metrics** (`metrics.py`): Pure per-trade and aggregate R functions
   - Per-trade: stop ticks, potential R, realized result, average score
   - Aggregate: win rate, total R, missed R
   - Behaviour: chicken-out detection

3. **Stats** (`stats.py`): Report aggregates built on the metrics
   - Status and break-even counts, average win, streaks
   - Grouped breakdowns (by field, by stop size), weekly scores
   - build_summary: the full KPI block

Usage:
    >>> from rjournal.libraries.performance import calculate_result, calculate_total_r
    >>> calculate_result(4500, 4490, 4520)
    Decimal('2')

Design Principles:
    - Decimal precision for financial calculations
    - Explicit edge case handling (empty collections, zero risk, open trades)
    - Records may be TradeRecord models or plain mappings
"""

from rjournal.libraries.performance.metrics import (
    calculate_average_score,
    calculate_missed_r,
    calculate_potential_r,
    calculate_result,
    calculate_stop_ticks,
    calculate_total_r,
    calculate_win_rate,
    is_chicken_out,
)
from rjournal.libraries.performance.models import (
    GroupMetrics,
    StreakStats,
    TradeRecord,
    TradeSummary,
    WeeklyScore,
)
from rjournal.libraries.performance.stats import (
    DEFAULT_STOP_TICK_RANGES,
    bucket_by_stop_ticks,
    build_summary,
    calculate_average_metrics_score,
    calculate_average_win,
    calculate_streaks,
    calculate_weekly_scores,
    count_break_even,
    count_chicken_outs,
    count_status,
    is_break_even,
    summarize_by,
)

__all__ = [
    # Models
    "TradeRecord",
    "GroupMetrics",
    "StreakStats",
    "WeeklyScore",
    "TradeSummary",
    # Metrics (pure functions)
    "calculate_stop_ticks",
    "calculate_potential_r",
    "calculate_result",
    "calculate_average_score",
    "calculate_win_rate",
    "calculate_total_r",
    "is_chicken_out",
    "calculate_missed_r",
    # Report aggregates
    "DEFAULT_STOP_TICK_RANGES",
    "count_status",
    "is_break_even",
    "count_break_even",
    "calculate_average_win",
    "calculate_streaks",
    "count_chicken_outs",
    "calculate_average_metrics_score",
    "summarize_by",
    "bucket_by_stop_ticks",
    "calculate_weekly_scores",
    "build_summary",
]
