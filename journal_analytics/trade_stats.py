"""
Trade Outcome Statistics
========================

Per-trade outcome analysis: hit rate, profit factor, expectancy, payoff,
streaks, Kelly sizing and tail ratio.

A trade wins when its net P&L is strictly positive and loses when it is
strictly negative; exact breakevens are neither.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

import numpy as np

from journal_analytics.config import Config
from journal_analytics.trades import Trade, pnl_series


# =============================================================================
# DATA STRUCTURES
# =============================================================================

@dataclass(frozen=True)
class TradeStatistics:
    """
    Trade analysis statistics.

    Percent fields are plain percentages (55.0 means 55%).
    """
    # Counts
    total_trades: int
    winning_trades: int
    losing_trades: int

    # Outcome
    win_rate: float               # percent
    profit_factor: float          # gross profit / gross loss, inf without losses
    average_rrr: float            # avg win / avg |loss|
    expectancy: float             # net P&L per trade
    avg_win: float
    avg_loss: float               # magnitude
    largest_win: float            # max net P&L
    largest_loss: float           # min net P&L

    # Consistency
    max_consecutive_losses: int
    max_consecutive_wins: int
    monthly_win_rate: float       # percent

    # Advanced
    tail_ratio: float
    kelly_percent: float          # percent, capped at 25

    # Time
    avg_trade_duration: float     # hours

    @classmethod
    def empty(cls) -> "TradeStatistics":
        return cls(
            total_trades=0, winning_trades=0, losing_trades=0,
            win_rate=0.0, profit_factor=0.0, average_rrr=0.0, expectancy=0.0,
            avg_win=0.0, avg_loss=0.0, largest_win=0.0, largest_loss=0.0,
            max_consecutive_losses=0, max_consecutive_wins=0, monthly_win_rate=0.0,
            tail_ratio=0.0, kelly_percent=0.0, avg_trade_duration=0.0
        )


# =============================================================================
# TRADE ANALYZER
# =============================================================================

class TradeAnalyzer:
    """
    Analyze trade outcomes.

    Profit Factor Formula:
        PF = Sum(winning P&L) / |Sum(losing P&L)|

    Kelly Formula:
        f* = p - (1 - p) / b
    where:
        p = winners / (winners + losers)
        b = avg_win / avg_loss
    """

    @staticmethod
    def profit_factor(pnls: Sequence[float]) -> float:
        """Gross profit over gross loss; inf with profit and no loss, 0 with neither."""
        gross_profit = sum(p for p in pnls if p > 0)
        gross_loss = abs(sum(p for p in pnls if p < 0))
        if gross_loss > 0:
            return gross_profit / gross_loss
        return float("inf") if gross_profit > 0 else 0.0

    @staticmethod
    def average_rrr(pnls: Sequence[float]) -> float:
        """Average win over average loss magnitude, breakevens excluded."""
        winners = [p for p in pnls if p > 0]
        losers = [p for p in pnls if p < 0]
        if not winners and not losers:
            return 0.0
        if not losers:
            return float("inf")
        if not winners:
            return 0.0
        avg_win = float(np.mean(winners))
        avg_loss = abs(float(np.mean(losers)))
        return avg_win / avg_loss if avg_loss > 0 else 0.0

    @staticmethod
    def expectancy(pnls: Sequence[float]) -> float:
        """Plain average net P&L per trade."""
        if len(pnls) == 0:
            return 0.0
        return sum(pnls) / len(pnls)

    @staticmethod
    def max_consecutive(pnls: Sequence[float], losses: bool = True) -> int:
        """
        Longest run of strictly negative (or positive) trades.

        Any other outcome, breakevens included, resets the run.
        """
        longest = 0
        current = 0
        for pnl in pnls:
            hit = pnl < 0 if losses else pnl > 0
            if hit:
                current += 1
                longest = max(longest, current)
            else:
                current = 0
        return longest

    @staticmethod
    def monthly_win_rate(trades: Sequence[Trade]) -> float:
        """Mean of the per-month win rates over months with trades."""
        if not trades:
            return 0.0
        pnl = pnl_series(trades)
        monthly = (pnl > 0).groupby([pnl.index.year, pnl.index.month]).mean() * 100
        return float(monthly.mean())

    @staticmethod
    def tail_ratio(pnls: Sequence[float]) -> float:
        """
        Mean of the best 10% trades over the mean magnitude of the worst 10%.

        Requires at least ten trades.
        """
        if len(pnls) < Config.TAIL_MIN_TRADES:
            return 0.0
        ordered = sorted(pnls, reverse=True)
        count = max(1, int(len(ordered) * Config.TAIL_FRACTION))

        avg_top = sum(ordered[:count]) / count
        avg_bottom = abs(sum(ordered[-count:]) / count)
        return avg_top / avg_bottom if avg_bottom > 0 else 0.0

    @staticmethod
    def kelly_percent(pnls: Sequence[float]) -> float:
        """Kelly fraction clamped to [0, 25%], in percent."""
        winners = [p for p in pnls if p > 0]
        losers = [p for p in pnls if p < 0]
        if not winners or not losers:
            return 0.0

        win_rate = len(winners) / (len(winners) + len(losers))
        avg_win = sum(winners) / len(winners)
        avg_loss = abs(sum(losers) / len(losers))
        if avg_loss == 0:
            return 0.0

        payoff = avg_win / avg_loss
        kelly = win_rate - (1 - win_rate) / payoff
        return float(np.clip(kelly, 0.0, Config.KELLY_CAP)) * 100

    @staticmethod
    def avg_trade_duration(trades: Sequence[Trade]) -> float:
        """Mean known, positive duration in hours."""
        durations = [t.duration for t in trades if t.duration is not None and t.duration > 0]
        if not durations:
            return 0.0
        return float(np.mean(durations)) / 60

    @staticmethod
    def analyze(trades: Sequence[Trade]) -> TradeStatistics:
        """
        Calculate trade statistics.

        Args:
            trades: Chronologically sorted trades

        Returns:
            TradeStatistics
        """
        if not trades:
            return TradeStatistics.empty()

        pnls = [t.net_pnl for t in trades]
        winners = [p for p in pnls if p > 0]
        losers = [p for p in pnls if p < 0]

        return TradeStatistics(
            total_trades=len(pnls),
            winning_trades=len(winners),
            losing_trades=len(losers),
            win_rate=len(winners) / len(pnls) * 100,
            profit_factor=TradeAnalyzer.profit_factor(pnls),
            average_rrr=TradeAnalyzer.average_rrr(pnls),
            expectancy=TradeAnalyzer.expectancy(pnls),
            avg_win=float(np.mean(winners)) if winners else 0.0,
            avg_loss=abs(float(np.mean(losers))) if losers else 0.0,
            largest_win=max(pnls),
            largest_loss=min(pnls),
            max_consecutive_losses=TradeAnalyzer.max_consecutive(pnls, losses=True),
            max_consecutive_wins=TradeAnalyzer.max_consecutive(pnls, losses=False),
            monthly_win_rate=TradeAnalyzer.monthly_win_rate(trades),
            tail_ratio=TradeAnalyzer.tail_ratio(pnls),
            kelly_percent=TradeAnalyzer.kelly_percent(pnls),
            avg_trade_duration=TradeAnalyzer.avg_trade_duration(trades),
        )
