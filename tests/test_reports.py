"""Tests for projection summaries, pandas views and display formatting."""

from __future__ import annotations

from datetime import date
from decimal import Decimal

import pandas as pd
import pytest

from engine.projection import project
from models.projection import ProjectionResult
from models.rules import (
    BiweeklyRule,
    DailyRule,
    DaysOfMonth,
    LastDayOfMonth,
    MonthlyRule,
    NthWeekday,
    WeeklyRule,
    YearlyRule,
)
from reports.formatting import (
    describe_rule,
    describe_rule_short,
    format_compact_currency,
    format_currency,
    format_ordinal_day,
    format_signed_currency,
)
from reports.frames import aggregate_by_period, warnings_frame
from reports.summary import summarize

TODAY = date(2024, 1, 1)  # a Monday


@pytest.fixture
def dipping_result(account_factory, checkpoint_factory, transaction_factory):
    """Checking drains 100/day for 5 days then gets paid; savings is flat."""
    accounts = [account_factory(id="chk", name="Checking"), account_factory(id="sav", name="Savings")]
    checkpoints = [
        checkpoint_factory("chk", TODAY, "600.00"),
        checkpoint_factory("sav", TODAY, "1000.00"),
    ]
    transactions = [
        transaction_factory("chk", "2024-01-02", "-100.00", rule=DailyRule(), end="2024-01-06"),
        transaction_factory("chk", "2024-01-08", "900.00"),
    ]
    return project(accounts, checkpoints, transactions, 13, 500, today=TODAY)


class TestSummarize:
    def test_headline_numbers(self, dipping_result):
        summary = summarize(dipping_result)

        assert summary.starting_total == Decimal("1600.00")
        assert summary.lowest_total == Decimal("1100.00")
        assert summary.lowest_total_date == date(2024, 1, 6)
        assert summary.highest_total == Decimal("2000.00")
        assert summary.highest_total_date == date(2024, 1, 8)
        assert summary.ending_total == Decimal("2000.00")

    def test_warnings(self, dipping_result):
        summary = summarize(dipping_result)
        # checking is below 500 from Jan 3 through Jan 7
        assert summary.warning_count == 5
        assert summary.accounts_with_warnings == ("Checking",)
        assert summary.days_below_threshold == {"chk": 5, "sav": 0}

    def test_custom_threshold(self, dipping_result):
        summary = summarize(dipping_result, threshold=1500)
        assert summary.days_below_threshold == {"chk": 14, "sav": 14}

    def test_empty_result(self):
        summary = summarize(ProjectionResult())
        assert summary.starting_total == Decimal("0.00")
        assert summary.lowest_total_date is None
        assert summary.highest_total_date is None
        assert summary.warning_count == 0
        assert summary.accounts_with_warnings == ()

    def test_ties_resolve_to_earliest_date(self, account_factory):
        result = project([account_factory()], [], [], 5, 0, today=TODAY)
        summary = summarize(result)
        assert summary.lowest_total_date == TODAY
        assert summary.highest_total_date == TODAY

    def test_defaults_to_projection_threshold_without_warnings(
        self, account_factory, checkpoint_factory
    ):
        result = project(
            [account_factory(id="a")],
            [checkpoint_factory("a", "2024-01-01", "300.00")],
            [],
            3,
            100,
            today="2024-01-05",
        )
        assert result.warning_threshold == Decimal("100.00")
        assert result.warnings == ()

        summary = summarize(result)
        assert summary.warning_count == 0
        assert summary.days_below_threshold == {"a": 0}


class TestFrames:
    def test_to_frame(self, dipping_result):
        frame = dipping_result.to_frame()
        assert list(frame.columns) == ["chk", "sav", "total"]
        assert isinstance(frame.index, pd.DatetimeIndex)
        assert frame.index.name == "date"
        assert len(frame) == 14
        assert frame.loc["2024-01-06", "chk"] == pytest.approx(100.0)

    def test_to_frame_by_name_keeps_decimals(self, dipping_result):
        frame = dipping_result.to_frame(by_name=True, as_float=False)
        assert list(frame.columns) == ["Checking", "Savings", "total"]
        assert frame.iloc[0]["total"] == Decimal("1600.00")

    def test_by_name_keeps_shared_names_apart(self, account_factory, checkpoint_factory):
        accounts = [account_factory(id="a", name="Same"), account_factory(id="b", name="Same")]
        checkpoints = [
            checkpoint_factory("a", TODAY, "100.00"),
            checkpoint_factory("b", TODAY, "900.00"),
        ]
        frame = project(accounts, checkpoints, [], 0, 0, today=TODAY).to_frame(by_name=True)

        assert list(frame.columns) == ["Same (a)", "Same (b)", "total"]
        row = frame.iloc[0]
        assert row["Same (a)"] == pytest.approx(100.0)
        assert row["Same (b)"] == pytest.approx(900.0)
        assert row["Same (a)"] + row["Same (b)"] == pytest.approx(row["total"])

    def test_warnings_frame(self, dipping_result):
        frame = warnings_frame(dipping_result)
        assert list(frame.columns) == ["date", "account_id", "account_name", "balance", "threshold"]
        assert len(frame) == 5
        assert frame["account_name"].unique().tolist() == ["Checking"]
        assert frame["balance"].min() == pytest.approx(100.0)

    def test_warnings_frame_empty(self):
        frame = warnings_frame(ProjectionResult())
        assert frame.empty
        assert "balance" in frame.columns

    def test_weekly_aggregation(self, dipping_result):
        weekly = aggregate_by_period(dipping_result, "W")
        # weeks ending Sunday Jan 7 and Jan 14
        assert list(weekly.index) == [pd.Timestamp("2024-01-07"), pd.Timestamp("2024-01-14")]
        assert weekly[("chk", "min")].tolist() == pytest.approx([100.0, 1000.0])
        assert weekly[("chk", "end")].tolist() == pytest.approx([100.0, 1000.0])
        assert weekly[("total", "end")].iloc[-1] == pytest.approx(2000.0)

    def test_aggregation_of_empty_result(self):
        out = aggregate_by_period(ProjectionResult(), "W")
        assert out.empty
        assert ("total", "min") in out.columns


class TestCurrencyFormatting:
    @pytest.mark.parametrize(
        "amount, expected",
        [(1234.56, "$1,234.56"), (0, "$0.00"), ("-50", "-$50.00"), (Decimal("1000000"), "$1,000,000.00")],
    )
    def test_format_currency(self, amount, expected):
        assert format_currency(amount) == expected

    @pytest.mark.parametrize(
        "amount, expected", [(100, "+$100.00"), (-100, "-$100.00"), (0, "$0.00")]
    )
    def test_format_signed_currency(self, amount, expected):
        assert format_signed_currency(amount) == expected

    @pytest.mark.parametrize(
        "amount, expected",
        [
            (1234, "$1.2K"),
            (1250, "$1.3K"),
            (999.99, "$999.99"),
            (2_500_000, "$2.5M"),
            (-1500, "-$1.5K"),
        ],
    )
    def test_format_compact_currency(self, amount, expected):
        assert format_compact_currency(amount) == expected

    @pytest.mark.parametrize(
        "day, expected",
        [(1, "1st"), (2, "2nd"), (3, "3rd"), (4, "4th"), (11, "11th"), (12, "12th"),
         (13, "13th"), (21, "21st"), (22, "22nd"), (23, "23rd"), (31, "31st")],
    )
    def test_format_ordinal_day(self, day, expected):
        assert format_ordinal_day(day) == expected


class TestDescribeRule:
    @pytest.mark.parametrize(
        "rule, expected",
        [
            (None, "One-time"),
            (DailyRule(), "Daily"),
            (DailyRule(interval=3), "Every 3 days"),
            (WeeklyRule(), "Weekly"),
            (WeeklyRule(interval=2), "Every 2 weeks"),
            (BiweeklyRule(), "Bi-weekly"),
            (YearlyRule(interval=2), "Every 2 years"),
            (MonthlyRule(DaysOfMonth((15,))), "Monthly on the 15th"),
            (MonthlyRule(DaysOfMonth((1, 15, 28))), "Monthly on the 1st, 15th and 28th"),
            (MonthlyRule(DaysOfMonth((1, 15))), "Monthly on the 1st and 15th"),
            (MonthlyRule(LastDayOfMonth(), interval=2), "Every 2 months on the last day"),
            (MonthlyRule(NthWeekday(weekday=5, week=1)), "Monthly on the 1st Friday"),
            (MonthlyRule(NthWeekday(weekday=5, week=-1)), "Monthly on the last Friday"),
        ],
    )
    def test_describe_rule(self, rule, expected):
        assert describe_rule(rule) == expected

    @pytest.mark.parametrize(
        "rule, expected",
        [
            (None, "Once"),
            (MonthlyRule(DaysOfMonth((15,))), "Monthly"),
            (BiweeklyRule(), "Bi-weekly"),
            (WeeklyRule(interval=2), "2x Weekly"),
            (YearlyRule(), "Yearly"),
        ],
    )
    def test_describe_rule_short(self, rule, expected):
        assert describe_rule_short(rule) == expected
