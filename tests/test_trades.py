"""
Unit tests for journal_analytics.trades.
"""

from datetime import datetime, timedelta, timezone

from journal_analytics.trades import (
    Trade,
    TradeDirection,
    as_utc,
    net_pnls,
    pnl_series,
    sort_trades,
)


def test_net_pnl_includes_commission_and_swap(make_trade) -> None:
    trade = make_trade(100.0, commission=-7.5, swap=-2.5)
    assert trade.net_pnl == 90.0
    assert trade.is_winner
    assert not trade.is_loser


def test_costs_can_turn_a_winner_into_a_loser(make_trade) -> None:
    trade = make_trade(5.0, commission=-10.0)
    assert trade.net_pnl == -5.0
    assert trade.is_loser


def test_naive_times_are_read_as_utc() -> None:
    trade = Trade(
        id="1", symbol="EURUSD", type=TradeDirection.BUY, size=1.0,
        open_price=1.1, close_price=1.2,
        open_time=datetime(2024, 3, 1, 12, 0),
        close_time=datetime(2024, 3, 1, 13, 0),
        profit=10.0,
    )
    assert trade.open_time.tzinfo == timezone.utc
    assert trade.close_time == datetime(2024, 3, 1, 13, 0, tzinfo=timezone.utc)


def test_aware_times_are_converted_to_utc() -> None:
    plus_three = timezone(timedelta(hours=3))
    converted = as_utc(datetime(2024, 1, 2, 1, 30, tzinfo=plus_three))
    # 01:30 at UTC+3 is the previous UTC day
    assert converted == datetime(2024, 1, 1, 22, 30, tzinfo=timezone.utc)
    assert converted.date().day == 1


def test_open_trade_is_placed_by_open_time(make_trade) -> None:
    trade = make_trade(0.0, closed=False)
    assert trade.close_time is None
    assert trade.trade_time == trade.open_time
    assert trade.trade_date == trade.open_time.date()


def test_duration_hours_defaults_to_zero(make_trade) -> None:
    assert make_trade(1.0, duration=90.0).duration_hours == 1.5
    assert make_trade(1.0, duration=None).duration_hours == 0.0


def test_sort_trades_orders_by_close_time_without_mutating(make_trade) -> None:
    base = datetime(2024, 1, 1, tzinfo=timezone.utc)
    late = make_trade(1.0, base, base + timedelta(days=3), trade_id="late")
    early = make_trade(2.0, base + timedelta(days=1), base + timedelta(days=2), trade_id="early")
    trades = [late, early]

    ordered = sort_trades(trades)

    assert [t.id for t in ordered] == ["early", "late"]
    assert [t.id for t in trades] == ["late", "early"]
    assert net_pnls(ordered) == [2.0, 1.0]


def test_pnl_series_is_indexed_by_trade_time(make_trade) -> None:
    base = datetime(2024, 1, 1, 9, tzinfo=timezone.utc)
    trades = [
        make_trade(10.0, base, commission=-1.0),
        make_trade(-5.0, base + timedelta(days=1), closed=False),
    ]

    series = pnl_series(trades)

    assert list(series) == [9.0, -5.0]
    assert list(series.index) == [trades[0].trade_time, trades[1].trade_time]
    assert str(series.index.tz) == "UTC"
    assert pnl_series([]).empty
