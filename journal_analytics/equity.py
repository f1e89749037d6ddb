"""
Equity & Drawdown
=================

Running-balance bookkeeping over a chronologically sorted trade list.

Drawdown Formula:
    DD% = (Peak - Equity) / Peak * 100
    Max DD = most negative -DD% across the curve (stored as a negative number)

Drawdown duration counts curve points from the first point below the prior
peak until a new peak is made; a drawdown still open at the end of the
series counts up to the last point.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import List, Sequence, Tuple

import numpy as np
import pandas as pd

from journal_analytics.trades import Trade, pnl_series

logger = logging.getLogger(__name__)


# =============================================================================
# DATA STRUCTURES
# =============================================================================

@dataclass(frozen=True)
class DrawdownStats:
    """Maximum drawdown and its duration."""
    max_drawdown: float           # percent, <= 0
    max_drawdown_duration: int    # curve points

    @classmethod
    def empty(cls) -> "DrawdownStats":
        return cls(max_drawdown=0.0, max_drawdown_duration=0)


@dataclass(frozen=True)
class DrawdownPoint:
    """Drawdown of one equity-curve point."""
    date: date
    drawdown: float               # percent, <= 0


@dataclass(frozen=True)
class MonthlyReturn:
    """Return and intra-month drawdown of a calendar month."""
    month: str                    # YYYY-MM
    return_pct: float
    drawdown: float               # percent, <= 0


# =============================================================================
# EQUITY CALCULATOR
# =============================================================================

class EquityCalculator:
    """Equity curve and drawdown analysis."""

    @staticmethod
    def equity_curve(trades: Sequence[Trade], initial_balance: float) -> np.ndarray:
        """
        Running balance: the initial point plus one point per trade.

        Args:
            trades: Chronologically sorted trades
            initial_balance: Starting balance

        Returns:
            Array of length len(trades) + 1
        """
        steps = np.array([initial_balance] + [t.net_pnl for t in trades], dtype=float)
        return np.cumsum(steps)

    @staticmethod
    def _scan(curve: np.ndarray) -> Tuple[float, List[int]]:
        """Single pass: (max drawdown percent, duration of every drawdown period)."""
        peak = curve[0]
        max_drawdown = 0.0
        durations: List[int] = []
        drawdown_start = -1

        for i in range(1, len(curve)):
            equity = curve[i]
            if equity > peak:
                peak = equity
                if drawdown_start >= 0:
                    durations.append(i - drawdown_start)
                    drawdown_start = -1
            elif equity < peak:
                if drawdown_start < 0:
                    drawdown_start = i
                if peak > 0:
                    dd = (peak - equity) / peak * 100
                    max_drawdown = min(max_drawdown, -dd)

        # Ongoing drawdown
        if drawdown_start >= 0:
            durations.append(len(curve) - drawdown_start)

        return max_drawdown, durations

    @staticmethod
    def drawdown(equity_curve: Sequence[float]) -> DrawdownStats:
        """
        Maximum drawdown (negative percent) and its duration in curve points.
        """
        curve = np.asarray(equity_curve, dtype=float)
        if len(curve) < 2:
            return DrawdownStats.empty()

        max_drawdown, durations = EquityCalculator._scan(curve)
        return DrawdownStats(
            max_drawdown=float(max_drawdown),
            max_drawdown_duration=int(max(durations, default=0)),
        )

    @staticmethod
    def drawdown_durations(equity_curve: Sequence[float]) -> List[int]:
        """Length in curve points of each drawdown period, in order."""
        curve = np.asarray(equity_curve, dtype=float)
        if len(curve) < 2:
            return []
        return EquityCalculator._scan(curve)[1]

    @staticmethod
    def drawdown_series(equity_curve: Sequence[float]) -> np.ndarray:
        """Drawdown percent (<= 0) at every curve point; 0 where the peak is not positive."""
        curve = np.asarray(equity_curve, dtype=float)
        if len(curve) == 0:
            return curve
        peaks = np.maximum.accumulate(curve)
        with np.errstate(divide="ignore", invalid="ignore"):
            series = np.where(peaks > 0, -(peaks - curve) / peaks * 100, 0.0)
        return series + 0.0  # normalize -0.0

    @staticmethod
    def rolling_drawdown(
        trades: Sequence[Trade],
        equity_curve: Sequence[float]
    ) -> Tuple[DrawdownPoint, ...]:
        """
        Dated drawdown series.

        The initial point is dated with the first trade's open date, every
        following point with its trade's booking date.
        """
        if not trades:
            return ()
        series = EquityCalculator.drawdown_series(equity_curve)
        dates = [trades[0].open_time.date()] + [t.trade_date for t in trades]
        return tuple(
            DrawdownPoint(date=d, drawdown=float(dd))
            for d, dd in zip(dates, series)
        )

    @staticmethod
    def monthly_returns(
        trades: Sequence[Trade],
        initial_balance: float
    ) -> Tuple[MonthlyReturn, ...]:
        """
        Per-month return against the balance at the start of that month,
        with the worst intra-month drawdown from that starting balance.
        """
        if not trades:
            return ()

        pnl = pnl_series(trades)
        months = pnl.index.strftime("%Y-%m").to_numpy()

        monthly_pnl = pnl.groupby(months).sum()
        opening = initial_balance + monthly_pnl.cumsum().shift(1, fill_value=0.0)

        # Balance after each trade; the peak never starts below the month's opening balance
        start = opening.reindex(months).to_numpy()
        balance = start + pnl.groupby(months).cumsum().to_numpy()
        peak = np.maximum(pd.Series(balance).groupby(months).cummax().to_numpy(), start)
        positive = peak > 0
        drawdown = np.zeros_like(balance)
        drawdown[positive] = (peak[positive] - balance[positive]) / peak[positive] * 100
        worst = pd.Series(drawdown).groupby(months).max()

        results: List[MonthlyReturn] = []
        for month, month_pnl in monthly_pnl.items():
            start_balance = opening[month]
            if start_balance > 0:
                return_pct = month_pnl / start_balance * 100
            else:
                logger.warning(f"Non-positive balance at start of {month}; return set to 0")
                return_pct = 0.0

            results.append(MonthlyReturn(
                month=month,
                return_pct=float(return_pct),
                drawdown=float(-worst[month]) + 0.0,
            ))

        return tuple(results)
