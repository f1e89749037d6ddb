"""
Behavioral Analysis
===================

How the account is traded rather than how much it made: trading frequency,
time-of-day and session performance, per-trade risk, hold-time quality,
streak structure, market-condition buckets and per-symbol rollups.

All clock-based buckets use UTC. Every analysis expects a chronologically
sorted trade list (see `trades.sort_trades`).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple

import numpy as np

from journal_analytics.config import (
    Config,
    MarketCondition,
    RiskBucket,
    StreakType,
    TradingSession,
    WEEKDAY_NAMES,
)
from journal_analytics.trade_stats import TradeAnalyzer
from journal_analytics.trades import Trade, TradeDirection

logger = logging.getLogger(__name__)


# =============================================================================
# DATA STRUCTURES
# =============================================================================

@dataclass(frozen=True)
class TradingFrequency:
    """Trade counts per calendar period."""
    trades_per_day: float
    trades_per_week: float
    trades_per_month: float
    avg_time_between_trades: float   # hours

    @classmethod
    def empty(cls) -> "TradingFrequency":
        return cls(0.0, 0.0, 0.0, 0.0)


@dataclass(frozen=True)
class HourPerformance:
    hour: int                        # UTC hour of open time
    avg_return: float
    trade_count: int


@dataclass(frozen=True)
class DayPerformance:
    day: str                         # weekday name, e.g. "Monday"
    avg_return: float
    trade_count: int


@dataclass(frozen=True)
class SessionStats:
    avg_return: float
    trade_count: int
    win_rate: float                  # percent

    @classmethod
    def empty(cls) -> "SessionStats":
        return cls(0.0, 0, 0.0)


@dataclass(frozen=True)
class TimeAnalysis:
    """Performance by hour, weekday and trading session."""
    best_performing_hours: Tuple[HourPerformance, ...]
    best_performing_days: Tuple[DayPerformance, ...]
    asian: SessionStats
    european: SessionStats
    american: SessionStats

    @classmethod
    def empty(cls) -> "TimeAnalysis":
        return cls(
            best_performing_hours=(),
            best_performing_days=(),
            asian=SessionStats.empty(),
            european=SessionStats.empty(),
            american=SessionStats.empty(),
        )

    def get(self, session: TradingSession) -> SessionStats:
        return getattr(self, session.value)


@dataclass(frozen=True)
class RiskLevelStats:
    risk_level: RiskBucket
    count: int
    avg_return: float


@dataclass(frozen=True)
class PositionSizing:
    avg_position_size: float
    max_position_size: float
    position_size_std_dev: float

    @classmethod
    def empty(cls) -> "PositionSizing":
        return cls(0.0, 0.0, 0.0)


@dataclass(frozen=True)
class RiskManagement:
    """Per-trade risk as a percent of the running balance."""
    avg_risk_per_trade: float        # percent
    max_risk_per_trade: float        # percent
    risk_distribution: Tuple[RiskLevelStats, ...]
    position_sizing: PositionSizing

    @classmethod
    def empty(cls) -> "RiskManagement":
        return cls(0.0, 0.0, (), PositionSizing.empty())


@dataclass(frozen=True)
class TradeQuality:
    """Hold-time quality."""
    average_hold_time: float         # hours
    shortest_trade: float            # minutes
    longest_trade: float             # hours
    premature_trades: int            # under 5 minutes
    over_held_trades: int            # over 24 hours
    trade_efficiency: float          # percent

    @classmethod
    def empty(cls) -> "TradeQuality":
        return cls(0.0, 0.0, 0.0, 0, 0, 0.0)


@dataclass(frozen=True)
class CurrentStreak:
    type: StreakType
    count: int

    @classmethod
    def none(cls) -> "CurrentStreak":
        return cls(type=StreakType.NONE, count=0)


@dataclass(frozen=True)
class StreakAnalysis:
    max_win_streak: int
    max_loss_streak: int
    avg_win_streak: float
    avg_loss_streak: float
    current_streak: CurrentStreak
    streak_recovery: float           # mean trades from loss-streak start to the next win

    @classmethod
    def empty(cls) -> "StreakAnalysis":
        return cls(0, 0, 0.0, 0.0, CurrentStreak.none(), 0.0)


@dataclass(frozen=True)
class ConditionStats:
    trade_count: int
    avg_return: float
    win_rate: float                  # percent

    @classmethod
    def empty(cls) -> "ConditionStats":
        return cls(0, 0.0, 0.0)


@dataclass(frozen=True)
class MarketConditions:
    """Trade outcomes per inferred market condition."""
    trending: ConditionStats
    sideways: ConditionStats
    volatile: ConditionStats

    @classmethod
    def empty(cls) -> "MarketConditions":
        return cls(ConditionStats.empty(), ConditionStats.empty(), ConditionStats.empty())

    def get(self, condition: MarketCondition) -> ConditionStats:
        return getattr(self, condition.value)


@dataclass(frozen=True)
class SymbolPerformance:
    symbol: str
    trade_count: int
    total_return: float
    win_rate: float                  # percent
    avg_return: float
    avg_hold_time: float             # hours
    profit_factor: float             # capped at 999


# =============================================================================
# HELPERS
# =============================================================================

def _win_rate(pnls: Sequence[float]) -> float:
    if len(pnls) == 0:
        return 0.0
    return sum(1 for p in pnls if p > 0) / len(pnls) * 100


def _mean(values: Sequence[float]) -> float:
    return sum(values) / len(values) if len(values) > 0 else 0.0


def session_for_hour(hour: int) -> TradingSession:
    """UTC hour -> trading session."""
    for upper, session in Config.SESSION_BOUNDS:
        if hour < upper:
            return session
    return TradingSession.AMERICAN


def risk_bucket_for(risk_percent: float) -> RiskBucket:
    """Risk percent -> bucket; each upper edge is inclusive."""
    for upper, bucket in Config.RISK_BUCKET_EDGES:
        if risk_percent <= upper:
            return bucket
    return RiskBucket.VERY_HIGH


def classify_market_condition(trade: Trade) -> MarketCondition:
    """
    Infer the market condition from the trade's own price path.

        move%      = |close - open| / open * 100
        move/hour  = move% / duration_hours   (move% when duration is 0)

    Volatile:  move/hour > 0.5 or move% > 3
    Trending:  move% > 0.8 and duration > 2h
    Sideways:  otherwise
    """
    if trade.open_price > 0:
        movement = abs(trade.close_price - trade.open_price) / trade.open_price * 100
    else:
        logger.warning(f"Trade {trade.id} has non-positive open price; price movement set to 0")
        movement = 0.0

    hours = trade.duration_hours
    per_hour = movement / hours if hours > 0 else movement

    if per_hour > Config.VOLATILE_MOVE_PER_HOUR or movement > Config.VOLATILE_MOVE:
        return MarketCondition.VOLATILE
    if movement > Config.TRENDING_MOVE and hours > Config.TRENDING_MIN_HOURS:
        return MarketCondition.TRENDING
    return MarketCondition.SIDEWAYS


def estimate_trade_risk(trade: Trade) -> float:
    """
    Money at risk on a trade.

    With a stop-loss the distance from entry to stop times size is used.
    Without one, a losing trade's realized loss stands in for its risk and a
    winning trade is assigned a synthetic 2% of entry notional. Neither
    fallback is a measurement.
    """
    if trade.stop_loss is not None and trade.stop_loss > 0:
        if trade.type is TradeDirection.BUY:
            return abs((trade.open_price - trade.stop_loss) * trade.size)
        return abs((trade.stop_loss - trade.open_price) * trade.size)

    pnl = trade.net_pnl
    if pnl < 0:
        return abs(pnl)
    return trade.open_price * trade.size * Config.SYNTHETIC_RISK_FRACTION


# =============================================================================
# BEHAVIOR ANALYZER
# =============================================================================

class BehaviorAnalyzer:
    """Behavioral analytics over a sorted trade list."""

    @staticmethod
    def trading_frequency(trades: Sequence[Trade]) -> TradingFrequency:
        """
        Trades per day/week/month over the elapsed span (at least one day),
        and the mean idle time between consecutive trades in hours.
        """
        if not trades:
            return TradingFrequency.empty()

        span = trades[-1].trade_time - trades[0].open_time
        total_days = max(Config.MIN_PERIOD_DAYS, span.total_seconds() / 86400)
        count = len(trades)

        gaps = [
            (trades[i].open_time - trades[i - 1].trade_time).total_seconds() / 3600
            for i in range(1, count)
        ]

        return TradingFrequency(
            trades_per_day=count / total_days,
            trades_per_week=count / (total_days / Config.DAYS_PER_WEEK),
            trades_per_month=count / (total_days / Config.DAYS_PER_MONTH),
            avg_time_between_trades=_mean(gaps),
        )

    @staticmethod
    def time_analysis(trades: Sequence[Trade]) -> TimeAnalysis:
        """Mean net P&L by UTC open hour, weekday and session."""
        if not trades:
            return TimeAnalysis.empty()

        hours: Dict[int, List[float]] = {}
        days: Dict[int, List[float]] = {}
        sessions: Dict[TradingSession, List[float]] = {s: [] for s in TradingSession}

        for trade in trades:
            pnl = trade.net_pnl
            hour = trade.open_time.hour
            hours.setdefault(hour, []).append(pnl)
            days.setdefault(trade.open_time.weekday(), []).append(pnl)
            sessions[session_for_hour(hour)].append(pnl)

        # Stable sorts: ties keep ascending hour / first-seen weekday order
        hour_rows = sorted(
            (HourPerformance(hour=h, avg_return=_mean(p), trade_count=len(p))
             for h, p in sorted(hours.items())),
            key=lambda row: row.avg_return,
            reverse=True,
        )
        day_rows = sorted(
            (DayPerformance(day=WEEKDAY_NAMES[d], avg_return=_mean(p), trade_count=len(p))
             for d, p in days.items()),
            key=lambda row: row.avg_return,
            reverse=True,
        )
        stats = {
            session: SessionStats(avg_return=_mean(pnls), trade_count=len(pnls), win_rate=_win_rate(pnls))
            for session, pnls in sessions.items()
        }

        return TimeAnalysis(
            best_performing_hours=tuple(hour_rows[:Config.TOP_HOURS]),
            best_performing_days=tuple(day_rows),
            asian=stats[TradingSession.ASIAN],
            european=stats[TradingSession.EUROPEAN],
            american=stats[TradingSession.AMERICAN],
        )

    @staticmethod
    def risk_management(trades: Sequence[Trade], initial_balance: float) -> RiskManagement:
        """Per-trade risk against the balance before the trade, bucketed."""
        if not trades:
            return RiskManagement.empty()

        balance = initial_balance
        risks: List[float] = []
        buckets: Dict[RiskBucket, List[float]] = {b: [] for b in RiskBucket}

        for trade in trades:
            risk = estimate_trade_risk(trade)
            if balance > 0:
                risk_percent = risk / balance * 100
            else:
                logger.warning(f"Non-positive balance before trade {trade.id}; risk set to 0")
                risk_percent = 0.0

            risks.append(risk_percent)
            buckets[risk_bucket_for(risk_percent)].append(trade.net_pnl)
            balance += trade.net_pnl

        sizes = np.array([t.size for t in trades], dtype=float)

        return RiskManagement(
            avg_risk_per_trade=float(np.mean(risks)),
            max_risk_per_trade=float(np.max(risks)),
            risk_distribution=tuple(
                RiskLevelStats(risk_level=bucket, count=len(pnls), avg_return=_mean(pnls))
                for bucket, pnls in buckets.items()
            ),
            position_sizing=PositionSizing(
                avg_position_size=float(np.mean(sizes)),
                max_position_size=float(np.max(sizes)),
                position_size_std_dev=float(np.std(sizes)),
            ),
        )

    @staticmethod
    def trade_quality(trades: Sequence[Trade]) -> TradeQuality:
        """
        Hold-time statistics from `duration` (minutes).

        Trades without a known duration are left out of the hold-time and
        premature/over-held counts but still count toward the efficiency
        denominator.
        """
        if not trades:
            return TradeQuality.empty()

        # A missing duration is unknown, not zero; reading it as 0 would
        # count every such trade as premature.
        known = [t for t in trades if t.duration is not None]
        positive = [t.duration for t in known if t.duration > 0]

        premature = sum(1 for t in known if t.duration < Config.PREMATURE_MINUTES)
        over_held = sum(1 for t in known if t.duration > Config.OVERHELD_MINUTES)
        efficient = sum(
            1 for t in known
            if t.net_pnl > 0
            and Config.PREMATURE_MINUTES <= t.duration <= Config.OVERHELD_MINUTES
        )

        return TradeQuality(
            average_hold_time=_mean(positive) / 60,
            shortest_trade=min(positive) if positive else 0.0,
            longest_trade=(max(positive) if positive else 0.0) / 60,
            premature_trades=premature,
            over_held_trades=over_held,
            trade_efficiency=efficient / len(trades) * 100,
        )

    @staticmethod
    def streak_analysis(trades: Sequence[Trade]) -> StreakAnalysis:
        """
        Win/loss streak structure.

        Breakeven trades neither extend nor end a streak. Recovery time is
        the number of trades from the first loss of a streak to the win
        that ends it.
        """
        if not trades:
            return StreakAnalysis.empty()

        win_streaks: List[int] = []
        loss_streaks: List[int] = []
        recoveries: List[int] = []
        current_win = 0
        current_loss = 0
        loss_start: Optional[int] = None

        for index, trade in enumerate(trades):
            pnl = trade.net_pnl
            if pnl > 0:
                current_win += 1
                if current_loss > 0:
                    loss_streaks.append(current_loss)
                    if loss_start is not None:
                        recoveries.append(index - loss_start)
                    current_loss = 0
                    loss_start = None
            elif pnl < 0:
                current_loss += 1
                if loss_start is None:
                    loss_start = index
                if current_win > 0:
                    win_streaks.append(current_win)
                    current_win = 0

        if current_win > 0:
            win_streaks.append(current_win)
        if current_loss > 0:
            loss_streaks.append(current_loss)

        last_pnl = trades[-1].net_pnl
        if last_pnl > 0:
            current = CurrentStreak(type=StreakType.WIN, count=current_win)
        elif last_pnl < 0:
            current = CurrentStreak(type=StreakType.LOSS, count=current_loss)
        else:
            current = CurrentStreak.none()

        return StreakAnalysis(
            max_win_streak=max(win_streaks, default=0),
            max_loss_streak=max(loss_streaks, default=0),
            avg_win_streak=_mean(win_streaks),
            avg_loss_streak=_mean(loss_streaks),
            current_streak=current,
            streak_recovery=_mean(recoveries),
        )

    @staticmethod
    def market_conditions(trades: Sequence[Trade]) -> MarketConditions:
        """Count, mean net P&L and win rate per market condition."""
        if not trades:
            return MarketConditions.empty()

        grouped: Dict[MarketCondition, List[float]] = {c: [] for c in MarketCondition}
        for trade in trades:
            grouped[classify_market_condition(trade)].append(trade.net_pnl)

        def stats(pnls: List[float]) -> ConditionStats:
            return ConditionStats(
                trade_count=len(pnls),
                avg_return=_mean(pnls),
                win_rate=_win_rate(pnls),
            )

        return MarketConditions(
            trending=stats(grouped[MarketCondition.TRENDING]),
            sideways=stats(grouped[MarketCondition.SIDEWAYS]),
            volatile=stats(grouped[MarketCondition.VOLATILE]),
        )

    @staticmethod
    def symbol_analysis(trades: Sequence[Trade]) -> Tuple[SymbolPerformance, ...]:
        """Per-symbol rollup, best total return first."""
        if not trades:
            return ()

        by_symbol: Dict[str, List[Trade]] = {}
        for trade in trades:
            by_symbol.setdefault(trade.symbol, []).append(trade)

        rows: List[SymbolPerformance] = []
        for symbol, symbol_trades in by_symbol.items():
            pnls = [t.net_pnl for t in symbol_trades]
            durations = [t.duration for t in symbol_trades if t.duration is not None and t.duration > 0]
            profit_factor = TradeAnalyzer.profit_factor(pnls)

            rows.append(SymbolPerformance(
                symbol=symbol,
                trade_count=len(pnls),
                total_return=sum(pnls),
                win_rate=_win_rate(pnls),
                avg_return=_mean(pnls),
                avg_hold_time=_mean(durations) / 60,
                profit_factor=min(profit_factor, Config.PROFIT_FACTOR_DISPLAY_CAP),
            ))

        rows.sort(key=lambda row: row.total_return, reverse=True)
        return tuple(rows)
