"""
Trading Performance Engine
==========================

Turns a list of journal trades and a starting balance into one immutable
`Metrics` value: risk-adjusted ratios, drawdown, tail risk, trade outcome
statistics, behavioral breakdowns and a buy-and-hold comparison.

PIPELINE
    1. Sort trades by close time (open time fallback)
    2. Equity curve and drawdown
    3. Daily returns, volatility, VaR / Expected Shortfall
    4. Sharpe / Sortino / Calmar
    5. Trade outcome statistics
    6. Behavioral analysis
    7. Buy & hold comparison
    8. Advanced metrics

An empty trade list short-circuits to `Metrics.empty()` before any of the
passes run. The engine never mutates the caller's list.

Usage:
    >>> metrics = compute_metrics(trades, initial_balance=10_000)
    >>> print(f"Sharpe: {metrics.sharpe_ratio:.3f}")
    >>> print(format_metrics_report(metrics))
"""

from __future__ import annotations

import logging
import math
from dataclasses import asdict, dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Any, Dict, Iterable, Tuple

from journal_analytics.advanced_metrics import AdvancedCalculator, AdvancedMetrics
from journal_analytics.behavior import (
    BehaviorAnalyzer,
    MarketConditions,
    RiskManagement,
    StreakAnalysis,
    SymbolPerformance,
    TimeAnalysis,
    TradeQuality,
    TradingFrequency,
)
from journal_analytics.benchmark import BenchmarkCalculator, BenchmarkComparison
from journal_analytics.config import BenchmarkSampling, Config, TradingSession
from journal_analytics.equity import DrawdownPoint, EquityCalculator, MonthlyReturn
from journal_analytics.return_stats import RiskAdjustedCalculator, ReturnCalculator
from journal_analytics.trade_stats import TradeAnalyzer
from journal_analytics.trades import Trade, sort_trades

logger = logging.getLogger(__name__)

VERSION = "1.0.0"


# =============================================================================
# METRICS AGGREGATE
# =============================================================================

@dataclass(frozen=True)
class Metrics:
    """
    Complete performance metrics of a trade list.

    Percent fields are plain percentages (12.5 means 12.5%).
    `max_drawdown` is negative or zero.
    """
    # Core ratios
    sharpe_ratio: float
    sortino_ratio: float
    calmar_ratio: float

    # Risk
    max_drawdown: float
    max_drawdown_duration: int
    value_at_risk_95: float
    expected_shortfall: float

    # Trade analysis
    total_trades: int
    winning_trades: int
    losing_trades: int
    win_rate: float
    profit_factor: float
    average_rrr: float
    expectancy: float
    largest_win: float
    largest_loss: float

    # Consistency
    max_consecutive_losses: int
    max_consecutive_wins: int
    recovery_factor: float
    monthly_win_rate: float

    # Advanced risk
    tail_ratio: float
    kelly_percent: float

    # Time performance
    avg_trade_duration: float        # hours
    avg_daily_return: float          # percent

    # Returns
    total_return: float              # percent
    annual_return: float             # percent, compound

    # Series
    equity_curve: Tuple[float, ...] = ()
    monthly_returns: Tuple[MonthlyReturn, ...] = ()
    rolling_drawdown: Tuple[DrawdownPoint, ...] = ()

    # Sub-analyses
    buy_and_hold: BenchmarkComparison = field(default_factory=BenchmarkComparison.empty)
    trading_frequency: TradingFrequency = field(default_factory=TradingFrequency.empty)
    time_analysis: TimeAnalysis = field(default_factory=TimeAnalysis.empty)
    risk_management: RiskManagement = field(default_factory=RiskManagement.empty)
    trade_quality: TradeQuality = field(default_factory=TradeQuality.empty)
    streak_analysis: StreakAnalysis = field(default_factory=StreakAnalysis.empty)
    market_conditions: MarketConditions = field(default_factory=MarketConditions.empty)
    symbol_analysis: Tuple[SymbolPerformance, ...] = ()
    advanced: AdvancedMetrics = field(default_factory=AdvancedMetrics.empty)

    @classmethod
    def empty(cls) -> "Metrics":
        """All-zero metrics for an empty trade list."""
        return cls(
            sharpe_ratio=0.0, sortino_ratio=0.0, calmar_ratio=0.0,
            max_drawdown=0.0, max_drawdown_duration=0,
            value_at_risk_95=0.0, expected_shortfall=0.0,
            total_trades=0, winning_trades=0, losing_trades=0,
            win_rate=0.0, profit_factor=0.0, average_rrr=0.0, expectancy=0.0,
            largest_win=0.0, largest_loss=0.0,
            max_consecutive_losses=0, max_consecutive_wins=0,
            recovery_factor=0.0, monthly_win_rate=0.0,
            tail_ratio=0.0, kelly_percent=0.0,
            avg_trade_duration=0.0, avg_daily_return=0.0,
            total_return=0.0, annual_return=0.0,
        )


# =============================================================================
# PERFORMANCE ENGINE
# =============================================================================

class PerformanceEngine:
    """
    Stateless metrics engine.

    Options are fixed at construction; `compute` may be called any number of
    times, from any thread, with different trade lists.
    """

    def __init__(
        self,
        initial_balance: float = Config.DEFAULT_INITIAL_BALANCE,
        risk_free_rate: float = Config.DEFAULT_RISK_FREE_RATE,
        annualize_volatility: bool = False,
        benchmark_sampling: BenchmarkSampling = BenchmarkSampling.WEEKLY
    ):
        """
        Initialize performance engine.

        Args:
            initial_balance: Starting account balance (must be > 0)
            risk_free_rate: Annual risk-free rate as a decimal (0.02 = 2%)
            annualize_volatility: Unit-consistent Sharpe/Sortino variant
            benchmark_sampling: Sundays (weekly) or every day for winning periods

        Raises:
            ValueError: non-positive or non-finite balance, non-finite rate
        """
        if not math.isfinite(initial_balance) or initial_balance <= 0:
            raise ValueError(f"initial_balance must be a positive finite number, got {initial_balance}")
        if not math.isfinite(risk_free_rate):
            raise ValueError(f"risk_free_rate must be finite, got {risk_free_rate}")

        self.initial_balance = float(initial_balance)
        self.risk_free_rate = float(risk_free_rate)
        self.annualize_volatility = annualize_volatility
        self.benchmark_sampling = BenchmarkSampling(benchmark_sampling)

    def compute(self, trades: Iterable[Trade]) -> Metrics:
        """
        Compute all metrics for a trade list.

        Args:
            trades: Journal trades in any order

        Returns:
            Metrics
        """
        ordered = sort_trades(trades)
        if not ordered:
            logger.warning("No trades supplied; returning empty metrics")
            return Metrics.empty()

        balance = self.initial_balance
        logger.info(f"Computing metrics for {len(ordered)} trades (initial balance {balance:,.2f})")

        # 1. Equity & drawdown
        curve = EquityCalculator.equity_curve(ordered, balance)
        drawdown = EquityCalculator.drawdown(curve)
        logger.debug(f"Equity curve: {len(curve)} points, max DD {drawdown.max_drawdown:.2f}%")

        # 2. Returns
        returns = ReturnCalculator.calculate(ordered, balance)
        logger.debug(f"Daily returns: {len(returns.daily_returns)} days over {returns.years:.3f} years")

        # 3. Risk-adjusted
        ratios = RiskAdjustedCalculator.calculate(
            returns, drawdown.max_drawdown, self.risk_free_rate, self.annualize_volatility
        )

        # 4. Trade outcomes
        trade_stats = TradeAnalyzer.analyze(ordered)
        logger.debug(f"Trade stats: {trade_stats.winning_trades}W / {trade_stats.losing_trades}L")

        # 5. Behavior
        logger.debug("Running behavioral analysis")
        frequency = BehaviorAnalyzer.trading_frequency(ordered)
        time_analysis = BehaviorAnalyzer.time_analysis(ordered)
        risk_management = BehaviorAnalyzer.risk_management(ordered, balance)
        trade_quality = BehaviorAnalyzer.trade_quality(ordered)
        streaks = BehaviorAnalyzer.streak_analysis(ordered)
        conditions = BehaviorAnalyzer.market_conditions(ordered)
        symbols = BehaviorAnalyzer.symbol_analysis(ordered)

        # 6. Benchmark
        benchmark = BenchmarkCalculator.compare(ordered, balance, self.benchmark_sampling)

        # 7. Advanced
        advanced = AdvancedCalculator.calculate(
            ordered, curve, returns, drawdown.max_drawdown,
            self.risk_free_rate, self.annualize_volatility
        )

        recovery_drawdown = drawdown.max_drawdown or Config.RECOVERY_FALLBACK_DRAWDOWN
        recovery_factor = abs((returns.total_return / 100) / recovery_drawdown)

        metrics = Metrics(
            sharpe_ratio=ratios.sharpe_ratio,
            sortino_ratio=ratios.sortino_ratio,
            calmar_ratio=ratios.calmar_ratio,
            max_drawdown=drawdown.max_drawdown,
            max_drawdown_duration=drawdown.max_drawdown_duration,
            value_at_risk_95=returns.var_95,
            expected_shortfall=returns.expected_shortfall,
            total_trades=trade_stats.total_trades,
            winning_trades=trade_stats.winning_trades,
            losing_trades=trade_stats.losing_trades,
            win_rate=trade_stats.win_rate,
            profit_factor=trade_stats.profit_factor,
            average_rrr=trade_stats.average_rrr,
            expectancy=trade_stats.expectancy,
            largest_win=trade_stats.largest_win,
            largest_loss=trade_stats.largest_loss,
            max_consecutive_losses=trade_stats.max_consecutive_losses,
            max_consecutive_wins=trade_stats.max_consecutive_wins,
            recovery_factor=recovery_factor,
            monthly_win_rate=trade_stats.monthly_win_rate,
            tail_ratio=trade_stats.tail_ratio,
            kelly_percent=trade_stats.kelly_percent,
            avg_trade_duration=trade_stats.avg_trade_duration,
            avg_daily_return=returns.mean_return,
            total_return=returns.total_return,
            annual_return=returns.annual_return,
            equity_curve=tuple(float(v) for v in curve),
            monthly_returns=EquityCalculator.monthly_returns(ordered, balance),
            rolling_drawdown=EquityCalculator.rolling_drawdown(ordered, curve),
            buy_and_hold=benchmark,
            trading_frequency=frequency,
            time_analysis=time_analysis,
            risk_management=risk_management,
            trade_quality=trade_quality,
            streak_analysis=streaks,
            market_conditions=conditions,
            symbol_analysis=symbols,
            advanced=advanced,
        )

        logger.info(
            f"Metrics ready: return {metrics.total_return:+.2f}%, "
            f"Sharpe {metrics.sharpe_ratio:.3f}, max DD {metrics.max_drawdown:.2f}%, "
            f"win rate {metrics.win_rate:.1f}%"
        )
        return metrics


# =============================================================================
# CONVENIENCE FUNCTIONS
# =============================================================================

def compute_metrics(
    trades: Iterable[Trade],
    initial_balance: float = Config.DEFAULT_INITIAL_BALANCE,
    risk_free_rate: float = Config.DEFAULT_RISK_FREE_RATE,
    annualize_volatility: bool = False,
    benchmark_sampling: BenchmarkSampling = BenchmarkSampling.WEEKLY
) -> Metrics:
    """
    Convenience function for a one-off computation.

    Args:
        trades: Journal trades in any order
        initial_balance: Starting balance (must be > 0)
        risk_free_rate: Annual risk-free rate as a decimal
        annualize_volatility: Unit-consistent Sharpe/Sortino variant
        benchmark_sampling: Winning-period sampling for the benchmark

    Returns:
        Metrics

    Example:
        >>> trades = load_trades("journal.csv")
        >>> metrics = compute_metrics(trades, initial_balance=25_000)
        >>> print(f"Win rate: {metrics.win_rate:.1f}%")
    """
    engine = PerformanceEngine(
        initial_balance=initial_balance,
        risk_free_rate=risk_free_rate,
        annualize_volatility=annualize_volatility,
        benchmark_sampling=benchmark_sampling,
    )
    return engine.compute(trades)


def _jsonable(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, dict):
        return {k: _jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_jsonable(v) for v in value]
    return value


def metrics_to_dict(metrics: Metrics) -> Dict[str, Any]:
    """
    JSON-ready dict of a Metrics value.

    Enums become their values, dates ISO strings; infinities stay floats.
    """
    return _jsonable(asdict(metrics))


# =============================================================================
# REPORT FORMATTING
# =============================================================================

def format_metrics_report(metrics: Metrics) -> str:
    """
    Format metrics as a human-readable text report.

    Args:
        metrics: Metrics from `compute_metrics`

    Returns:
        Formatted string report
    """
    bh = metrics.buy_and_hold
    lines = [
        "=" * 70,
        "TRADING PERFORMANCE REPORT",
        "=" * 70,
        f"Trades:              {metrics.total_trades} "
        f"({metrics.winning_trades} won / {metrics.losing_trades} lost)",
        f"Total Return:        {metrics.total_return:+.2f}%",
        f"Annual Return:       {metrics.annual_return:+.2f}%",
        f"Avg Daily Return:    {metrics.avg_daily_return:+.3f}%",
        "",
        "-" * 70,
        "RISK-ADJUSTED METRICS",
        "-" * 70,
        f"Sharpe Ratio:        {metrics.sharpe_ratio:.3f}",
        f"Sortino Ratio:       {metrics.sortino_ratio:.3f}",
        f"Calmar Ratio:        {metrics.calmar_ratio:.3f}",
        f"Recovery Factor:     {metrics.recovery_factor:.3f}",
        f"Martin Ratio:        {metrics.advanced.martin_ratio:.3f}",
        f"Pain Ratio:          {metrics.advanced.pain_ratio:.3f}",
        f"Information Ratio:   {metrics.advanced.information_ratio:.3f}",
        f"Risk Parity Score:   {metrics.advanced.risk_parity_score:.3f}",
        "",
        "-" * 70,
        "RISK ANALYSIS",
        "-" * 70,
        f"Max Drawdown:        {metrics.max_drawdown:.2f}%",
        f"Max DD Duration:     {metrics.max_drawdown_duration} points",
        f"VaR (95%):           {metrics.value_at_risk_95:.2f}%",
        f"Expected Shortfall:  {metrics.expected_shortfall:.2f}%",
        f"VaR (99%):           {metrics.advanced.value_at_risk_99:.2f}%",
        f"Ulcer Index:         {metrics.advanced.ulcer_index:.3f}",
        f"Skewness:            {metrics.advanced.skewness:+.3f}",
        f"Kurtosis:            {metrics.advanced.kurtosis:.3f}",
        "",
        "-" * 70,
        "TRADE STATISTICS",
        "-" * 70,
        f"Win Rate:            {metrics.win_rate:.1f}%",
        f"Monthly Win Rate:    {metrics.monthly_win_rate:.1f}%",
        f"Profit Factor:       {metrics.profit_factor:.2f}",
        f"Avg Risk/Reward:     {metrics.average_rrr:.2f}",
        f"Expectancy:          {metrics.expectancy:,.2f}",
        f"Largest Win:         {metrics.largest_win:,.2f}",
        f"Largest Loss:        {metrics.largest_loss:,.2f}",
        f"Max Consec. Wins:    {metrics.max_consecutive_wins}",
        f"Max Consec. Losses:  {metrics.max_consecutive_losses}",
        f"Tail Ratio:          {metrics.tail_ratio:.2f}",
        f"Kelly:               {metrics.kelly_percent:.1f}%",
        f"Avg Duration:        {metrics.avg_trade_duration:.2f} hours",
        "",
        "-" * 70,
        "SESSIONS (UTC)",
        "-" * 70,
    ]

    for session in TradingSession:
        stats = metrics.time_analysis.get(session)
        lines.append(
            f"{session.value.title():<12} {stats.trade_count:>5} trades  "
            f"avg {stats.avg_return:>+10,.2f}  win {stats.win_rate:5.1f}%"
        )

    if metrics.symbol_analysis:
        lines.extend([
            "",
            "-" * 70,
            "SYMBOLS",
            "-" * 70,
        ])
        for row in metrics.symbol_analysis:
            lines.append(
                f"{row.symbol:<12} {row.trade_count:>5} trades  "
                f"total {row.total_return:>+12,.2f}  win {row.win_rate:5.1f}%  "
                f"PF {row.profit_factor:.2f}"
            )

    streak = metrics.streak_analysis.current_streak
    lines.extend([
        "",
        "-" * 70,
        "BEHAVIOR",
        "-" * 70,
        f"Trades / Week:       {metrics.trading_frequency.trades_per_week:.2f}",
        f"Avg Risk / Trade:    {metrics.risk_management.avg_risk_per_trade:.2f}%",
        f"Trade Efficiency:    {metrics.trade_quality.trade_efficiency:.1f}%",
        f"Current Streak:      {streak.count} ({streak.type.value})",
        "",
        "-" * 70,
        "BUY & HOLD COMPARISON",
        "-" * 70,
    ])

    if bh.primary_symbol:
        lines.append(f"Benchmark:           {bh.primary_symbol} @ {bh.benchmark_annual_return:.0%} / year")
    lines.extend([
        f"Outperformance:      {bh.outperformance:+.2f}%",
        f"Winning Periods:     {bh.winning_periods} / {bh.total_periods}",
        "=" * 70,
    ])

    return "\n".join(lines)


# =============================================================================
# MODULE EXPORTS
# =============================================================================

__all__ = [
    'VERSION',

    # Data structures
    'Metrics',

    # Engine
    'PerformanceEngine',

    # Functions
    'compute_metrics',
    'metrics_to_dict',
    'format_metrics_report',
]
