"""Tests for journal report aggregates."""

import datetime
from decimal import Decimal

import pytest

from rjournal.libraries.performance.models import GroupMetrics, TradeSummary
from rjournal.libraries.performance.stats import (
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
from rjournal.system.config import MetricsConfig, reload_system_config


class TestOutcomeCounts:
    """Test status, break-even and chicken-out counts."""

    def test_count_status(self, journal_trades):
        """Test exact status counting."""
        assert count_status(journal_trades, "Winner") == 2
        assert count_status(journal_trades, "Expense") == 1
        assert count_status(journal_trades, "winner") == 0

    def test_count_status_empty(self):
        """Test empty and missing collections count zero."""
        assert count_status([], "Winner") == 0
        assert count_status(None, "Winner") == 0

    @pytest.mark.parametrize(
        "result,expected",
        [(0, True), (0.05, True), (-0.099, True), (0.1, False), (-0.1, False), (2, False), (None, False)],
    )
    def test_is_break_even(self, result, expected):
        """Test break-even is |result| strictly below 0.1R."""
        assert is_break_even({"result": result}) is expected

    def test_is_break_even_custom_threshold(self):
        """Test a wider threshold."""
        assert is_break_even({"result": 0.2}, threshold=Decimal("0.25")) is True

    def test_count_break_even(self, journal_trades):
        """Test only the scratch trade is break-even."""
        assert count_break_even(journal_trades) == 1
        assert count_break_even(None) == 0

    def test_count_chicken_outs(self, journal_trades):
        """Test early exits that were not stopped out."""
        assert count_chicken_outs(journal_trades) == 2
        assert count_chicken_outs([]) == 0


class TestAverages:
    """Test average win and average metrics score."""

    def test_average_win(self, journal_trades):
        """Test mean R of winners."""
        assert calculate_average_win(journal_trades) == Decimal("1.5")

    def test_average_win_without_winners(self):
        """Test no winners gives 0."""
        assert calculate_average_win([{"status": "Expense", "result": -1}]) == Decimal("0")
        assert calculate_average_win(None) == Decimal("0")

    def test_average_win_missing_result_counts_zero(self):
        """Test a winner without result drags the mean down."""
        trades = [{"status": "Winner", "result": 3}, {"status": "Winner"}]
        assert calculate_average_win(trades) == Decimal("1.5")

    def test_average_metrics_score(self, journal_trades):
        """Test mean of trades carrying an average score."""
        assert calculate_average_metrics_score(journal_trades) == Decimal("7")

    def test_average_metrics_score_none_scored(self):
        """Test 0 when no trade was scored."""
        assert calculate_average_metrics_score([{"average": None}, {}]) == Decimal("0")


class TestStreaks:
    """Test calculate_streaks."""

    def test_fixture_streaks(self, journal_trades):
        """Test alternating outcomes give runs of one."""
        streaks = calculate_streaks(journal_trades)

        assert streaks.max_win_streak == 1
        assert streaks.max_expense_streak == 1
        assert streaks.max_break_even_streak == 1

    def test_longest_runs(self):
        """Test each outcome resets the other runs."""
        trades = [
            {"status": "Winner"},
            {"status": "Winner"},
            {"status": "Winner"},
            {"status": "Expense"},
            {"status": "Expense"},
            {"status": "Winner"},
            {"status": "Scratch", "result": 0},
            {"status": "Scratch", "result": 0.02},
            {"status": "Expense"},
        ]

        streaks = calculate_streaks(trades)

        assert streaks.max_win_streak == 3
        assert streaks.max_expense_streak == 2
        assert streaks.max_break_even_streak == 2

    def test_unclassified_trades_do_not_break_runs(self):
        """Test open trades leave runs untouched."""
        trades = [{"status": "Winner"}, {"status": "Open"}, {"status": "Winner"}]
        assert calculate_streaks(trades).max_win_streak == 2

    def test_sorted_by_date_and_time(self):
        """Test runs are counted in journal order, not list order."""
        # Arrange: entered out of order; chronologically W W W E
        trades = [
            {"status": "Winner", "date": "2025-01-07", "confirmation_time": "10:15"},
            {"status": "Expense", "date": "2025-01-08"},
            {"status": "Winner", "date": "2025-01-06"},
            {"status": "Winner", "date": "2025-01-07", "confirmation_time": "09:30"},
        ]

        # Act
        streaks = calculate_streaks(trades)

        # Assert
        assert streaks.max_win_streak == 3
        assert streaks.max_expense_streak == 1

    def test_missing_time_counts_as_midnight(self):
        """Test a trade without confirmation time sorts first on its day."""
        trades = [
            {"status": "Winner", "date": "2025-01-06", "confirmation_time": "09:30"},
            {"status": "Expense", "date": "2025-01-06"},
            {"status": "Winner", "date": "2025-01-06", "confirmation_time": "11:00"},
        ]

        assert calculate_streaks(trades).max_win_streak == 2

    def test_given_order_when_not_chronological(self):
        """Test chronological=False keeps the caller's order."""
        trades = [
            {"status": "Winner", "date": "2025-01-07"},
            {"status": "Expense", "date": "2025-01-08"},
            {"status": "Winner", "date": "2025-01-06"},
        ]

        assert calculate_streaks(trades, chronological=False).max_win_streak == 1
        assert calculate_streaks(trades).max_win_streak == 2

    def test_undated_trades_follow_dated_ones(self):
        """Test trades without a date are counted after dated trades."""
        trades = [
            {"status": "Winner"},
            {"status": "Expense", "date": "2025-01-06"},
            {"status": "Winner", "date": "2025-01-07"},
        ]

        assert calculate_streaks(trades).max_win_streak == 2

    def test_empty(self):
        """Test empty collection gives zero runs."""
        streaks = calculate_streaks([])
        assert (streaks.max_win_streak, streaks.max_expense_streak, streaks.max_break_even_streak) == (0, 0, 0)


class TestSummarizeBy:
    """Test grouped breakdowns."""

    def test_by_session(self, journal_trades):
        """Test groups in first-seen order, trades without key skipped."""
        rows = summarize_by(journal_trades, "session")

        assert [row.label for row in rows] == ["ODR", "RDR"]

        odr, rdr = rows
        assert odr.trades == 3
        assert odr.winners == 2
        assert odr.expenses == 0
        assert odr.break_even == 1
        assert odr.result == Decimal("3.05")
        assert odr.win_rate == Decimal("200") / Decimal("3")

        assert rdr == GroupMetrics(
            label="RDR",
            trades=1,
            winners=0,
            expenses=1,
            break_even=0,
            win_rate=Decimal("0"),
            result=Decimal("-1"),
        )

    def test_by_callable_month(self, journal_trades):
        """Test a key function grouping by month."""
        rows = summarize_by(journal_trades, lambda t: t.date.strftime("%Y-%m") if t.date else None)

        assert len(rows) == 1
        assert rows[0].label == "2025-01"
        assert rows[0].trades == 4

    def test_empty(self):
        """Test no trades gives no groups."""
        assert summarize_by([], "session") == []


class TestBucketByStopTicks:
    """Test stop-size breakdown."""

    def test_default_ranges(self, journal_trades):
        """Test trades land in their range; empty ranges are omitted."""
        rows = bucket_by_stop_ticks(journal_trades)

        assert [(row.label, row.trades) for row in rows] == [("0-5", 1), ("6-10", 1), ("16-20", 2)]

    def test_fractional_ticks_use_next_range(self):
        """Test values between integer ranges go to the next range up."""
        rows = bucket_by_stop_ticks([{"stop_ticks": 5.5}, {"stop_ticks": 45}])

        assert [row.label for row in rows] == ["6-10", "31+"]

    def test_trades_without_stop_ticks_skipped(self):
        """Test missing stop ticks are ignored."""
        assert bucket_by_stop_ticks([{"stop_ticks": None}, {}]) == []

    def test_custom_ranges(self):
        """Test caller-provided ranges."""
        ranges = [(0, 10, "tight"), (11, None, "wide")]
        rows = bucket_by_stop_ticks([{"stop_ticks": 4}, {"stop_ticks": 12}, {"stop_ticks": 30}], ranges=ranges)

        assert [(row.label, row.trades) for row in rows] == [("tight", 1), ("wide", 2)]

    @pytest.mark.parametrize(
        "ranges,match",
        [
            ([], "cannot be empty"),
            ([(0, None, "all"), (5, 10, "late")], "must be last"),
            ([(10, 5, "bad")], "below lower bound"),
            ([(0, 10, "a"), (10, 20, "b")], "overlaps"),
        ],
    )
    def test_invalid_ranges_raise(self, ranges, match):
        """Test malformed ranges are rejected."""
        with pytest.raises(ValueError, match=match):
            bucket_by_stop_ticks([], ranges=ranges)


class TestWeeklyScores:
    """Test calculate_weekly_scores."""

    def test_grouped_by_iso_week(self, journal_trades):
        """Test averages per ISO week, sorted."""
        weeks = calculate_weekly_scores(journal_trades)

        assert [(w.week, w.count, w.average) for w in weeks] == [
            ("2025-W02", 2, Decimal("7")),
            ("2025-W03", 1, Decimal("7")),
        ]

    def test_accepts_strings_and_datetimes(self):
        """Test date given as ISO string, date or datetime."""
        trades = [
            {"date": "2025-03-03", "average": 6},
            {"date": datetime.date(2025, 3, 4), "average": 8},
            {"date": datetime.datetime(2025, 3, 5, 9, 30), "average": 10},
        ]

        weeks = calculate_weekly_scores(trades)

        assert len(weeks) == 1
        assert weeks[0].week == "2025-W10"
        assert weeks[0].average == Decimal("8")

    def test_weeks_sort_numerically(self):
        """Test zero-padded weeks sort W09 before W10."""
        trades = [{"date": "2025-03-03", "average": 5}, {"date": "2025-02-24", "average": 5}]

        assert [w.week for w in calculate_weekly_scores(trades)] == ["2025-W09", "2025-W10"]

    def test_iso_year_boundary(self):
        """Test 2024-12-30 belongs to 2025-W01."""
        weeks = calculate_weekly_scores([{"date": "2024-12-30", "average": 5}])

        assert weeks[0].week == "2025-W01"

    def test_invalid_date_raises(self):
        """Test unparsable date strings are rejected."""
        with pytest.raises(ValueError, match="ISO date"):
            calculate_weekly_scores([{"date": "03/03/2025", "average": 5}])


class TestBuildSummary:
    """Test the KPI summary."""

    def test_fixture_summary(self, journal_trades):
        """Test every KPI over the shared journal."""
        summary = build_summary(journal_trades, MetricsConfig())

        assert summary == TradeSummary(
            total_trades=5,
            total_r=Decimal("2.05"),
            winners=2,
            expenses=1,
            break_evens=1,
            chicken_out_count=2,
            missed_r=Decimal("2.95"),
            win_rate=Decimal("40"),
            average_win=Decimal("1.5"),
            average_metrics_score=Decimal("7"),
            metrics_based_on=3,
        )

    def test_empty_summary(self):
        """Test an empty journal produces zeros."""
        summary = build_summary([], MetricsConfig())

        assert summary.total_trades == 0
        assert summary.total_r == Decimal("0")
        assert summary.win_rate == Decimal("0")
        assert summary.missed_r == Decimal("0")

    def test_custom_vocabulary(self):
        """Test config status names drive the counts."""
        config = MetricsConfig(winner_status="Win", expense_status="Loss")
        trades = [{"status": "Win", "result": 2}, {"status": "Loss", "result": -1}, {"status": "Winner"}]

        summary = build_summary(trades, config)

        assert summary.winners == 1
        assert summary.expenses == 1
        assert summary.win_rate == Decimal("100") / Decimal("3")
        assert summary.average_win == Decimal("2")

    def test_defaults_to_system_config(self, journal_trades, monkeypatch, tmp_path):
        """Test the system config is used when no config is given."""
        config_file = tmp_path / "rjournal.yaml"
        config_file.write_text("metrics:\n  winner_status: Expense\n  expense_status: Winner\n")
        monkeypatch.setenv("RJOURNAL_CONFIG", str(config_file))

        reload_system_config()
        try:
            summary = build_summary(journal_trades)
        finally:
            monkeypatch.delenv("RJOURNAL_CONFIG")
            reload_system_config()

        assert summary.winners == 1
        assert summary.expenses == 2
