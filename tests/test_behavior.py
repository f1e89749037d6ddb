"""
Unit tests for journal_analytics.behavior.
"""

import math
from datetime import datetime, timedelta, timezone

import pytest

from journal_analytics.behavior import (
    BehaviorAnalyzer,
    CurrentStreak,
    TimeAnalysis,
    classify_market_condition,
    estimate_trade_risk,
    risk_bucket_for,
    session_for_hour,
)
from journal_analytics.config import (
    MarketCondition,
    RiskBucket,
    StreakType,
    TradingSession,
    WEEKDAY_NAMES,
)
from journal_analytics.trades import TradeDirection


def utc(*args) -> datetime:
    return datetime(*args, tzinfo=timezone.utc)


# =============================================================================
# Frequency
# =============================================================================

def test_trading_frequency_over_elapsed_span(make_series) -> None:
    freq = BehaviorAnalyzer.trading_frequency(make_series([1.0, 1.0, 1.0]))

    # First open to last close: 2 days and 1 hour
    days = 49 / 24
    assert freq.trades_per_day == pytest.approx(3 / days)
    assert freq.trades_per_week == pytest.approx(3 / (days / 7))
    assert freq.trades_per_month == pytest.approx(3 / (days / 30.44))
    assert freq.avg_time_between_trades == pytest.approx(23.0)


def test_trading_frequency_span_is_at_least_one_day(make_trade) -> None:
    freq = BehaviorAnalyzer.trading_frequency([make_trade(1.0)])
    assert freq.trades_per_day == pytest.approx(1.0)
    assert freq.trades_per_week == pytest.approx(7.0)
    assert freq.trades_per_month == pytest.approx(30.44)
    assert freq.avg_time_between_trades == 0.0


# =============================================================================
# Time analysis
# =============================================================================

def test_session_boundaries() -> None:
    assert session_for_hour(0) is TradingSession.ASIAN
    assert session_for_hour(7) is TradingSession.ASIAN
    assert session_for_hour(8) is TradingSession.EUROPEAN
    assert session_for_hour(15) is TradingSession.EUROPEAN
    assert session_for_hour(16) is TradingSession.AMERICAN
    assert session_for_hour(23) is TradingSession.AMERICAN


def test_time_analysis_by_hour_day_and_session(make_trade) -> None:
    trades = [
        make_trade(10.0, utc(2024, 1, 1, 9)),    # Monday
        make_trade(-20.0, utc(2024, 1, 2, 9)),   # Tuesday
        make_trade(5.0, utc(2024, 1, 3, 2)),     # Wednesday
        make_trade(-5.0, utc(2024, 1, 4, 20)),   # Thursday
        make_trade(30.0, utc(2024, 1, 8, 14)),   # Monday
    ]

    analysis = BehaviorAnalyzer.time_analysis(trades)

    assert [h.hour for h in analysis.best_performing_hours] == [14, 2, 9, 20]
    assert analysis.best_performing_hours[2].avg_return == pytest.approx(-5.0)
    assert analysis.best_performing_hours[2].trade_count == 2

    assert [d.day for d in analysis.best_performing_days] == [
        "Monday", "Wednesday", "Thursday", "Tuesday"
    ]
    assert analysis.best_performing_days[0].avg_return == pytest.approx(20.0)

    european = analysis.get(TradingSession.EUROPEAN)
    assert european is analysis.european
    assert european.trade_count == 3
    assert european.avg_return == pytest.approx(20.0 / 3)
    assert european.win_rate == pytest.approx(200.0 / 3)
    assert analysis.asian.win_rate == 100.0
    assert analysis.american.win_rate == 0.0


def test_only_top_six_hours_are_kept(make_trade) -> None:
    trades = [make_trade(float(h), utc(2024, 1, 1, h)) for h in range(8)]
    hours = BehaviorAnalyzer.time_analysis(trades).best_performing_hours
    assert [h.hour for h in hours] == [7, 6, 5, 4, 3, 2]


def test_time_analysis_empty() -> None:
    analysis = BehaviorAnalyzer.time_analysis([])
    assert analysis == TimeAnalysis.empty()
    assert all(analysis.get(s).trade_count == 0 for s in TradingSession)


def test_weekday_names_come_from_fixed_table(make_trade) -> None:
    trades = [
        make_trade(10.0, utc(2024, 1, 6, 9)),    # Saturday
        make_trade(-10.0, utc(2024, 1, 7, 9)),   # Sunday
    ]

    days = BehaviorAnalyzer.time_analysis(trades).best_performing_days

    assert [d.day for d in days] == ["Saturday", "Sunday"]
    assert {d.day for d in days} <= set(WEEKDAY_NAMES)


def test_time_analysis_is_hashable(make_series) -> None:
    analysis = BehaviorAnalyzer.time_analysis(make_series([10.0, -5.0]))
    assert hash(analysis) == hash(BehaviorAnalyzer.time_analysis(make_series([10.0, -5.0])))
    with pytest.raises(AttributeError):
        analysis.asian = analysis.european


# =============================================================================
# Risk management
# =============================================================================

def test_risk_bucket_edges_are_inclusive() -> None:
    assert risk_bucket_for(0.0) is RiskBucket.LOW
    assert risk_bucket_for(1.0) is RiskBucket.LOW
    assert risk_bucket_for(1.01) is RiskBucket.MEDIUM
    assert risk_bucket_for(3.0) is RiskBucket.MEDIUM
    assert risk_bucket_for(5.0) is RiskBucket.HIGH
    assert risk_bucket_for(5.01) is RiskBucket.VERY_HIGH


def test_estimate_trade_risk_from_stop_loss(make_trade) -> None:
    buy = make_trade(10.0, open_price=1.1, stop_loss=1.095, size=10000.0)
    sell = make_trade(
        10.0, open_price=1.1, stop_loss=1.105, size=10000.0,
        direction=TradeDirection.SELL,
    )
    assert estimate_trade_risk(buy) == pytest.approx(50.0)
    assert estimate_trade_risk(sell) == pytest.approx(50.0)


def test_estimate_trade_risk_fallbacks(make_trade) -> None:
    # Zero stop is treated as no stop
    loser = make_trade(-30.0, stop_loss=0.0)
    winner = make_trade(25.0, open_price=100.0, size=2.0)
    assert estimate_trade_risk(loser) == pytest.approx(30.0)
    assert estimate_trade_risk(winner) == pytest.approx(4.0)


def test_risk_management_tracks_running_balance(make_trade) -> None:
    base = utc(2024, 1, 1, 9)
    trades = [
        make_trade(-20.0, base, size=2.0),
        make_trade(49.0, base + timedelta(days=1), open_price=100.0, size=1.0),
        make_trade(-60.0, base + timedelta(days=2), size=3.0),
    ]

    risk = BehaviorAnalyzer.risk_management(trades, 1000.0)

    expected = [2.0, 2.0 / 980 * 100, 60.0 / 1029 * 100]
    assert risk.avg_risk_per_trade == pytest.approx(sum(expected) / 3)
    assert risk.max_risk_per_trade == pytest.approx(expected[2])

    levels = {row.risk_level: row for row in risk.risk_distribution}
    assert [row.risk_level for row in risk.risk_distribution] == list(RiskBucket)
    assert levels[RiskBucket.LOW].count == 1
    assert levels[RiskBucket.LOW].avg_return == 49.0
    assert levels[RiskBucket.MEDIUM].avg_return == -20.0
    assert levels[RiskBucket.HIGH].count == 0
    assert levels[RiskBucket.VERY_HIGH].avg_return == -60.0

    sizing = risk.position_sizing
    assert sizing.avg_position_size == pytest.approx(2.0)
    assert sizing.max_position_size == 3.0
    assert sizing.position_size_std_dev == pytest.approx(math.sqrt(2 / 3))


# =============================================================================
# Trade quality
# =============================================================================

def test_trade_quality(make_trade) -> None:
    trades = [
        make_trade(10.0, duration=3.0),
        make_trade(10.0, duration=60.0),
        make_trade(10.0, duration=2000.0),
        make_trade(10.0, duration=None),
        make_trade(-10.0, duration=120.0),
    ]

    quality = BehaviorAnalyzer.trade_quality(trades)

    assert quality.average_hold_time == pytest.approx((3 + 60 + 2000 + 120) / 4 / 60)
    assert quality.shortest_trade == 3.0
    assert quality.longest_trade == pytest.approx(2000 / 60)
    assert quality.premature_trades == 1
    assert quality.over_held_trades == 1
    # Only the 60-minute winner is efficient; all five trades count
    assert quality.trade_efficiency == pytest.approx(20.0)


# =============================================================================
# Streaks
# =============================================================================

def test_streak_analysis(make_series) -> None:
    streaks = BehaviorAnalyzer.streak_analysis(
        make_series([10.0, 10.0, -5.0, -5.0, -5.0, 20.0])
    )

    assert streaks.max_win_streak == 2
    assert streaks.max_loss_streak == 3
    assert streaks.avg_win_streak == pytest.approx(1.5)
    assert streaks.avg_loss_streak == pytest.approx(3.0)
    assert streaks.current_streak == CurrentStreak(StreakType.WIN, 1)
    assert streaks.streak_recovery == pytest.approx(3.0)


def test_breakeven_does_not_break_a_streak(make_series) -> None:
    streaks = BehaviorAnalyzer.streak_analysis(make_series([1.0, 0.0, 1.0]))
    assert streaks.max_win_streak == 2
    assert streaks.current_streak == CurrentStreak(StreakType.WIN, 2)


def test_breakeven_last_trade_has_no_current_streak(make_series) -> None:
    streaks = BehaviorAnalyzer.streak_analysis(make_series([-1.0, 0.0]))
    assert streaks.max_loss_streak == 1
    assert streaks.current_streak == CurrentStreak.none()
    assert streaks.streak_recovery == 0.0


# =============================================================================
# Market conditions
# =============================================================================

@pytest.mark.parametrize(
    "open_price, close_price, duration, expected",
    [
        (100.0, 104.0, 600.0, MarketCondition.VOLATILE),
        (100.0, 101.0, 60.0, MarketCondition.VOLATILE),
        (100.0, 101.0, 180.0, MarketCondition.TRENDING),
        (100.0, 100.5, 120.0, MarketCondition.SIDEWAYS),
        (100.0, 100.4, 0.0, MarketCondition.SIDEWAYS),
        (100.0, 100.4, None, MarketCondition.SIDEWAYS),
        (0.0, 5.0, 60.0, MarketCondition.SIDEWAYS),
    ],
)
def test_classify_market_condition(make_trade, open_price, close_price, duration, expected) -> None:
    trade = make_trade(1.0, open_price=open_price, close_price=close_price, duration=duration)
    assert classify_market_condition(trade) is expected


def test_market_conditions(make_trade) -> None:
    trades = [
        make_trade(10.0, close_price=104.0, duration=60.0),
        make_trade(20.0, close_price=101.0, duration=180.0),
        make_trade(-5.0, duration=60.0),
        make_trade(5.0, duration=60.0),
    ]

    conditions = BehaviorAnalyzer.market_conditions(trades)

    assert conditions.volatile.trade_count == 1
    assert conditions.trending.avg_return == 20.0
    assert conditions.get(MarketCondition.SIDEWAYS).trade_count == 2
    assert conditions.sideways.avg_return == 0.0
    assert conditions.sideways.win_rate == 50.0


# =============================================================================
# Symbols
# =============================================================================

def test_symbol_analysis_sorted_by_total(make_trade) -> None:
    trades = [
        make_trade(10.0, symbol="EURUSD", duration=60.0),
        make_trade(-5.0, symbol="EURUSD", duration=120.0),
        make_trade(30.0, symbol="XAUUSD"),
        make_trade(-20.0, symbol="BTCUSD"),
    ]

    rows = BehaviorAnalyzer.symbol_analysis(trades)

    assert [r.symbol for r in rows] == ["XAUUSD", "EURUSD", "BTCUSD"]
    assert rows[0].profit_factor == 999.0
    eurusd = rows[1]
    assert eurusd.trade_count == 2
    assert eurusd.total_return == 5.0
    assert eurusd.win_rate == 50.0
    assert eurusd.avg_return == 2.5
    assert eurusd.avg_hold_time == pytest.approx(1.5)
    assert eurusd.profit_factor == pytest.approx(2.0)
    assert rows[2].profit_factor == 0.0
