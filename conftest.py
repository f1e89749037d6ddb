# Root conftest: puts the repository root on sys.path and provides trade builders
from datetime import datetime, timedelta, timezone
from typing import Iterable, List, Optional

import pytest

from journal_analytics.trades import Trade, TradeDirection

# 2024-01-01 is a Monday
BASE_TIME = datetime(2024, 1, 1, 9, 0, tzinfo=timezone.utc)


def build_trade(
    profit: float = 0.0,
    open_time: Optional[datetime] = None,
    close_time: Optional[datetime] = None,
    *,
    trade_id: str = "1",
    symbol: str = "EURUSD",
    direction: TradeDirection = TradeDirection.BUY,
    size: float = 1.0,
    open_price: float = 100.0,
    close_price: Optional[float] = None,
    commission: float = 0.0,
    swap: float = 0.0,
    stop_loss: Optional[float] = None,
    duration: Optional[float] = 60.0,
    closed: bool = True,
) -> Trade:
    """Trade with sensible defaults; closes `duration` minutes after opening."""
    if open_time is None:
        open_time = BASE_TIME
    if close_time is None and closed:
        close_time = open_time + timedelta(minutes=duration or 0.0)
    return Trade(
        id=trade_id,
        symbol=symbol,
        type=direction,
        size=size,
        open_price=open_price,
        close_price=open_price if close_price is None else close_price,
        open_time=open_time,
        close_time=close_time,
        profit=profit,
        commission=commission,
        swap=swap,
        stop_loss=stop_loss,
        duration=duration,
    )


def build_series(
    pnls: Iterable[float],
    start: datetime = BASE_TIME,
    step: timedelta = timedelta(days=1),
    **kwargs
) -> List[Trade]:
    """One trade per `step`, in order, with the given net P&L values."""
    return [
        build_trade(pnl, start + i * step, trade_id=str(i + 1), **kwargs)
        for i, pnl in enumerate(pnls)
    ]


@pytest.fixture
def make_trade():
    return build_trade


@pytest.fixture
def make_series():
    return build_series
