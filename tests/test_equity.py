"""
Unit tests for journal_analytics.equity.
"""

import logging
from datetime import date, datetime, timezone

import pytest

from journal_analytics.equity import EquityCalculator


def test_equity_curve_starts_with_initial_balance(make_series) -> None:
    trades = make_series([100.0, -50.0, 25.0])
    curve = EquityCalculator.equity_curve(trades, 1000.0)
    assert list(curve) == [1000.0, 1100.0, 1050.0, 1075.0]


def test_drawdown_of_curve_ending_below_peak() -> None:
    stats = EquityCalculator.drawdown([1000.0, 1100.0, 1050.0])
    assert stats.max_drawdown == pytest.approx(-50.0 / 1100.0 * 100)
    # Ongoing drawdown counts to the last point
    assert stats.max_drawdown_duration == 1


def test_drawdown_duration_is_longest_period() -> None:
    curve = [1000.0, 900.0, 950.0, 1100.0, 1000.0]
    stats = EquityCalculator.drawdown(curve)
    assert stats.max_drawdown == pytest.approx(-10.0)
    assert stats.max_drawdown_duration == 2
    assert EquityCalculator.drawdown_durations(curve) == [2, 1]


def test_flat_curve_has_no_drawdown() -> None:
    stats = EquityCalculator.drawdown([1000.0, 1000.0, 1000.0])
    assert stats.max_drawdown == 0.0
    assert stats.max_drawdown_duration == 0


def test_single_point_curve_is_empty() -> None:
    stats = EquityCalculator.drawdown([1000.0])
    assert stats.max_drawdown == 0.0
    assert stats.max_drawdown_duration == 0
    assert EquityCalculator.drawdown_durations([1000.0]) == []


def test_non_positive_peak_is_skipped() -> None:
    stats = EquityCalculator.drawdown([0.0, -10.0, 5.0])
    assert stats.max_drawdown == 0.0
    assert stats.max_drawdown_duration == 1


def test_drawdown_series() -> None:
    series = EquityCalculator.drawdown_series([100.0, 120.0, 90.0, 130.0])
    assert list(series) == pytest.approx([0.0, 0.0, -25.0, 0.0])


def test_rolling_drawdown_is_dated_by_trade(make_series) -> None:
    trades = make_series([100.0, -50.0])
    curve = EquityCalculator.equity_curve(trades, 1000.0)

    points = EquityCalculator.rolling_drawdown(trades, curve)

    assert [p.date for p in points] == [date(2024, 1, 1), date(2024, 1, 1), date(2024, 1, 2)]
    assert points[0].drawdown == 0.0
    assert points[1].drawdown == 0.0
    assert points[2].drawdown == pytest.approx(-50.0 / 1100.0 * 100)
    assert EquityCalculator.rolling_drawdown([], curve) == ()


def test_monthly_returns_use_balance_at_month_start(make_trade) -> None:
    trades = [
        make_trade(100.0, datetime(2024, 1, 10, 9, tzinfo=timezone.utc)),
        make_trade(-50.0, datetime(2024, 1, 20, 9, tzinfo=timezone.utc)),
        make_trade(105.0, datetime(2024, 2, 5, 9, tzinfo=timezone.utc)),
    ]

    months = EquityCalculator.monthly_returns(trades, 1000.0)

    assert [m.month for m in months] == ["2024-01", "2024-02"]
    assert months[0].return_pct == pytest.approx(5.0)
    assert months[0].drawdown == pytest.approx(-50.0 / 1100.0 * 100)
    # February starts from 1050
    assert months[1].return_pct == pytest.approx(10.0)
    assert months[1].drawdown == 0.0


def test_max_drawdown_bounds_every_sub_interval() -> None:
    curve = [1000.0, 1080.0, 990.0, 1020.0, 940.0, 1100.0, 1050.0, 1120.0]
    full = EquityCalculator.drawdown(curve).max_drawdown
    assert full <= 0
    for start in range(len(curve)):
        for end in range(start + 2, len(curve) + 1):
            assert full <= EquityCalculator.drawdown(curve[start:end]).max_drawdown


def test_monthly_returns_after_balance_turns_negative(make_trade, caplog) -> None:
    trades = [
        make_trade(-150.0, datetime(2024, 1, 10, 9, tzinfo=timezone.utc)),
        make_trade(20.0, datetime(2024, 2, 3, 9, tzinfo=timezone.utc)),
    ]

    with caplog.at_level(logging.WARNING):
        months = EquityCalculator.monthly_returns(trades, 100.0)

    assert months[0].return_pct == pytest.approx(-150.0)
    assert months[0].drawdown == pytest.approx(-150.0)
    # February opens at -50: no return and no positive peak to measure from
    assert months[1].return_pct == 0.0
    assert months[1].drawdown == 0.0
    assert "Non-positive balance at start of 2024-02" in caplog.text


def test_monthly_drawdown_starts_from_opening_balance(make_trade) -> None:
    trades = [
        make_trade(200.0, datetime(2023, 12, 28, 9, tzinfo=timezone.utc)),
        make_trade(-60.0, datetime(2024, 1, 3, 9, tzinfo=timezone.utc)),
        make_trade(90.0, datetime(2024, 1, 4, 9, tzinfo=timezone.utc)),
        make_trade(-46.0, datetime(2024, 1, 5, 9, tzinfo=timezone.utc)),
    ]

    months = EquityCalculator.monthly_returns(trades, 1000.0)

    assert [m.month for m in months] == ["2023-12", "2024-01"]
    # January opens at 1200, dips to 1140, peaks at 1230, ends at 1184
    assert months[1].return_pct == pytest.approx(-16.0 / 1200 * 100)
    assert months[1].drawdown == pytest.approx(-60.0 / 1200 * 100)
    assert EquityCalculator.monthly_returns([], 1000.0) == ()
