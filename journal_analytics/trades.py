"""
Trade Records
=============

Closed (or still open) journal trades as consumed by the analytics passes.

A trade's result is always its net P&L:

    net_pnl = profit + commission + swap

Prices are never used to re-derive P&L; journal entries recorded in R/R
terms may carry placeholder prices.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timezone
from enum import Enum
from typing import Iterable, List, Optional

import pandas as pd


class TradeDirection(Enum):
    """Trade direction."""
    BUY = "buy"
    SELL = "sell"


@dataclass(frozen=True)
class Trade:
    """
    Individual journal trade.

    Timestamps are timezone-aware UTC datetimes. `close_time` is None for
    trades that are still open; those are placed by their open time.
    `duration` is the trade lifetime in minutes when known.
    """
    id: str
    symbol: str
    type: TradeDirection
    size: float
    open_price: float
    close_price: float
    open_time: datetime
    profit: float
    close_time: Optional[datetime] = None
    commission: float = 0.0
    swap: float = 0.0
    stop_loss: Optional[float] = None
    take_profit: Optional[float] = None
    duration: Optional[float] = None
    ticket: Optional[str] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "open_time", as_utc(self.open_time))
        if self.close_time is not None:
            object.__setattr__(self, "close_time", as_utc(self.close_time))

    @property
    def net_pnl(self) -> float:
        """Profit including commission and swap."""
        return self.profit + self.commission + self.swap

    @property
    def trade_time(self) -> datetime:
        """Close time, or open time for trades without one."""
        return self.close_time if self.close_time is not None else self.open_time

    @property
    def trade_date(self) -> date:
        """UTC calendar day the trade is booked on."""
        return self.trade_time.date()

    @property
    def duration_hours(self) -> float:
        """Duration in hours, 0 when unknown."""
        return (self.duration or 0.0) / 60.0

    @property
    def is_winner(self) -> bool:
        return self.net_pnl > 0

    @property
    def is_loser(self) -> bool:
        return self.net_pnl < 0


def as_utc(value: datetime) -> datetime:
    """Interpret naive datetimes as UTC and convert aware ones to UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def sort_trades(trades: Iterable[Trade]) -> List[Trade]:
    """Chronological copy ordered by close time (open time fallback)."""
    return sorted(trades, key=lambda t: t.trade_time)


def net_pnls(trades: Iterable[Trade]) -> List[float]:
    return [t.net_pnl for t in trades]


def pnl_series(trades: Iterable[Trade]) -> pd.Series:
    """
    Net P&L per trade as a Series indexed by UTC trade time.

    Order follows the input, so pass a sorted list for calendar grouping.
    """
    trades = list(trades)
    index = pd.DatetimeIndex([t.trade_time for t in trades], tz="UTC", name="trade_time")
    return pd.Series([t.net_pnl for t in trades], index=index, dtype=float, name="net_pnl")
