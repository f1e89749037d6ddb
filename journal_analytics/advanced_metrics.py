"""
Advanced Metrics
================

Distribution, tail, drawdown-shape and timing extras computed from the same
daily return series and equity curve as the headline numbers.

Ulcer Index Formula:
    UI = sqrt( Sum(DD_i^2) / N )
    where DD_i is the percent drawdown at curve point i and N the curve length

Omega Ratio Formula (threshold 0):
    Omega = 1 + Sum(gains) / Sum(|losses|)

Sterling Ratio Formula:
    Sterling = (Total Return% / Years) / (|Max DD%| + 10)

Drawdown-adjusted returns:
    Burke  = Total Return% / DD deviation
    Martin = (Total Return% / Years) / UI
    Pain   = Total Return% / |Average DD%|

Volatility-adjusted returns (sigma = std of daily returns):
    Information = (Total Return% / Years) / sigma
    Efficiency  = |Total Return%| / sigma

A zero divisor in the Burke, Pain, Information, Efficiency and
volatility-adjusted ratios is replaced by 1.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Sequence, Tuple, Union

import numpy as np
import pandas as pd
from scipy import stats

from journal_analytics.config import MONTH_ABBREVIATIONS, WEEKDAY_NAMES, Config
from journal_analytics.equity import EquityCalculator
from journal_analytics.return_stats import ReturnCalculator, ReturnStatistics
from journal_analytics.trades import Trade, pnl_series

logger = logging.getLogger(__name__)


# =============================================================================
# DATA STRUCTURES
# =============================================================================

@dataclass(frozen=True)
class PeriodPnL:
    """Net P&L of the trades booked in one hour, weekday or month."""
    period: Union[int, str]                # UTC hour, weekday name or month abbreviation
    pnls: Tuple[float, ...]

    @property
    def average(self) -> float:
        return sum(self.pnls) / len(self.pnls)


@dataclass(frozen=True)
class AdvancedMetrics:
    """Extended risk and distribution metrics."""
    # Tail risk
    value_at_risk_99: float                # percent
    conditional_value_at_risk_99: float    # percent

    # Distribution
    skewness: float
    kurtosis: float                        # excess
    upside_deviation: float
    omega_ratio: float

    # Drawdown shape
    ulcer_index: float
    average_drawdown: float                # percent, <= 0
    average_drawdown_duration: float       # curve points
    drawdown_deviation: float
    sterling_ratio: float

    # Drawdown-adjusted returns
    burke_ratio: float
    martin_ratio: float
    pain_index: float                      # percent, <= 0
    pain_ratio: float

    # Volatility-adjusted returns
    information_ratio: float
    efficiency_ratio: float
    volatility_adjusted_return: float
    risk_parity_score: float               # 1 when average gain equals average loss

    # Trades
    gain_loss_ratio: float
    trend_strength: float                  # signed R^2 of the equity curve

    # Timing (UTC, by trade time)
    best_hour: int
    worst_hour: int
    best_weekday: str
    worst_weekday: str
    best_month: str
    worst_month: str
    hourly_pnl: Tuple[PeriodPnL, ...]      # ascending hour
    daily_pnl: Tuple[PeriodPnL, ...]       # Monday first
    monthly_pnl: Tuple[PeriodPnL, ...]     # first-seen month order

    # Rolling
    rolling_sharpe: Tuple[float, ...]

    @classmethod
    def empty(cls) -> "AdvancedMetrics":
        return cls(
            value_at_risk_99=0.0, conditional_value_at_risk_99=0.0,
            skewness=0.0, kurtosis=0.0, upside_deviation=0.0, omega_ratio=0.0,
            ulcer_index=0.0, average_drawdown=0.0, average_drawdown_duration=0.0,
            drawdown_deviation=0.0, sterling_ratio=0.0,
            burke_ratio=0.0, martin_ratio=0.0, pain_index=0.0, pain_ratio=0.0,
            information_ratio=0.0, efficiency_ratio=0.0, volatility_adjusted_return=0.0,
            risk_parity_score=0.0,
            gain_loss_ratio=0.0, trend_strength=0.0,
            best_hour=0, worst_hour=0, best_weekday="", worst_weekday="",
            best_month="", worst_month="",
            hourly_pnl=(), daily_pnl=(), monthly_pnl=(),
            rolling_sharpe=()
        )


# =============================================================================
# ADVANCED CALCULATOR
# =============================================================================

class AdvancedCalculator:
    """Extended statistics over returns, the equity curve and trade timing."""

    # -------------------------------------------------------------------------
    # Distribution
    # -------------------------------------------------------------------------

    @staticmethod
    def skewness(returns: Sequence[float]) -> float:
        values = np.asarray(returns, dtype=float)
        if len(values) < Config.MIN_SKEW_SAMPLES or np.ptp(values) == 0:
            return 0.0
        return float(stats.skew(values))

    @staticmethod
    def kurtosis(returns: Sequence[float]) -> float:
        """Excess (Fisher) kurtosis from population moments."""
        values = np.asarray(returns, dtype=float)
        if len(values) < Config.MIN_KURTOSIS_SAMPLES or np.ptp(values) == 0:
            return 0.0
        return float(stats.kurtosis(values))

    @staticmethod
    def upside_deviation(returns: Sequence[float]) -> float:
        """Root mean square of the positive returns."""
        values = np.asarray(returns, dtype=float)
        upside = values[values > 0]
        if len(upside) == 0:
            return 0.0
        return float(np.sqrt(np.mean(upside ** 2)))

    @staticmethod
    def omega_ratio(returns: Sequence[float]) -> float:
        values = np.asarray(returns, dtype=float)
        gains = float(values[values > 0].sum())
        losses = float(-values[values < 0].sum())
        if losses == 0:
            return float("inf") if gains > 0 else 1.0
        return 1 + gains / losses

    # -------------------------------------------------------------------------
    # Drawdown shape
    # -------------------------------------------------------------------------

    @staticmethod
    def ulcer_index(equity_curve: Sequence[float]) -> float:
        curve = np.asarray(equity_curve, dtype=float)
        if len(curve) < 2:
            return 0.0
        series = EquityCalculator.drawdown_series(curve)
        return float(np.sqrt(np.sum(series ** 2) / len(curve)))

    @staticmethod
    def drawdown_profile(equity_curve: Sequence[float]) -> Tuple[float, float, float]:
        """
        (average drawdown %, average drawdown duration, drawdown deviation).

        Averages are taken over the curve points that sit below their peak.
        """
        series = EquityCalculator.drawdown_series(equity_curve)
        depths = -series[series < 0]
        durations = EquityCalculator.drawdown_durations(equity_curve)

        average = -float(np.mean(depths)) if len(depths) else 0.0
        deviation = float(np.std(depths)) if len(depths) else 0.0
        average_duration = float(np.mean(durations)) if durations else 0.0
        return average + 0.0, average_duration, deviation

    @staticmethod
    def sterling_ratio(total_return: float, max_drawdown: float, years: float) -> float:
        if years <= 0:
            return 0.0
        return (total_return / years) / (abs(max_drawdown) + Config.STERLING_DRAWDOWN_ADJUSTMENT)

    # -------------------------------------------------------------------------
    # Drawdown-adjusted returns
    # -------------------------------------------------------------------------

    @staticmethod
    def burke_ratio(total_return: float, drawdown_deviation: float) -> float:
        return total_return / (drawdown_deviation or 1.0)

    @staticmethod
    def martin_ratio(total_return: float, years: float, ulcer_index: float) -> float:
        """Annualized return per unit of Ulcer Index; 0 without any drawdown."""
        if years <= 0 or ulcer_index <= 0:
            return 0.0
        return (total_return / years) / ulcer_index

    @staticmethod
    def pain_ratio(total_return: float, average_drawdown: float) -> float:
        return total_return / abs(average_drawdown or 1.0)

    # -------------------------------------------------------------------------
    # Volatility-adjusted returns
    # -------------------------------------------------------------------------

    @staticmethod
    def information_ratio(total_return: float, years: float, std_dev: float) -> float:
        if years <= 0:
            return 0.0
        return (total_return / years) / (std_dev or 1.0)

    @staticmethod
    def efficiency_ratio(total_return: float, std_dev: float) -> float:
        return abs(total_return) / (std_dev or 1.0)

    @staticmethod
    def volatility_adjusted_return(total_return: float, std_dev: float) -> float:
        return total_return / (std_dev or 1.0)

    @staticmethod
    def risk_parity_score(returns: Sequence[float]) -> float:
        """
        Balance between the average gaining and the average losing day.

        1 when both have the same size, falling toward 0 as one dominates;
        0 when there are no gains or no losses.
        """
        values = np.asarray(returns, dtype=float)
        gains = values[values > 0]
        losses = -values[values < 0]
        if len(gains) == 0 or len(losses) == 0:
            return 0.0
        avg_gain = float(np.mean(gains))
        avg_loss = float(np.mean(losses))
        return 1 - abs(avg_gain - avg_loss) / (avg_gain + avg_loss)

    # -------------------------------------------------------------------------
    # Trades
    # -------------------------------------------------------------------------

    @staticmethod
    def gain_loss_ratio(trades: Sequence[Trade]) -> float:
        """Average gross profit over average gross loss, before costs."""
        gains = [t.profit for t in trades if t.profit > 0]
        losses = [abs(t.profit) for t in trades if t.profit < 0]
        avg_gain = float(np.mean(gains)) if gains else 0.0
        avg_loss = float(np.mean(losses)) if losses else 0.0
        if avg_loss > 0:
            return avg_gain / avg_loss
        return float("inf") if avg_gain > 0 else 0.0

    @staticmethod
    def trend_strength(equity_curve: Sequence[float]) -> float:
        """R^2 of a linear fit of the curve, negative for a falling fit."""
        curve = np.asarray(equity_curve, dtype=float)
        if len(curve) < 2 or np.ptp(curve) == 0:
            return 0.0
        slope, intercept, r_value, p_value, std_err = stats.linregress(
            np.arange(len(curve)), curve
        )
        r_squared = float(r_value ** 2)
        return r_squared if slope > 0 else -r_squared

    # -------------------------------------------------------------------------
    # Timing
    # -------------------------------------------------------------------------

    @staticmethod
    def pnl_by_period(
        trades: Sequence[Trade]
    ) -> Tuple[Tuple[PeriodPnL, ...], Tuple[PeriodPnL, ...], Tuple[PeriodPnL, ...]]:
        """
        Net P&L grouped by UTC hour, weekday and calendar month of trade time.

        Hours and weekdays come in calendar order; months in the order they
        first appear, with the same month of different years merged.
        """
        if not trades:
            return (), (), ()

        pnl = pnl_series(trades)
        hourly = tuple(
            PeriodPnL(period=int(hour), pnls=tuple(group.tolist()))
            for hour, group in pnl.groupby(pnl.index.hour)
        )
        daily = tuple(
            PeriodPnL(period=WEEKDAY_NAMES[day], pnls=tuple(group.tolist()))
            for day, group in pnl.groupby(pnl.index.weekday)
        )
        monthly = tuple(
            PeriodPnL(period=MONTH_ABBREVIATIONS[month - 1], pnls=tuple(group.tolist()))
            for month, group in pnl.groupby(pnl.index.month, sort=False)
        )
        return hourly, daily, monthly

    @staticmethod
    def _best_and_worst(periods: Sequence[PeriodPnL]) -> Tuple:
        """Periods with the highest and lowest mean; the first one wins ties."""
        best = worst = None
        best_avg = -math.inf
        worst_avg = math.inf
        for bucket in periods:
            avg = bucket.average
            if avg > best_avg:
                best_avg, best = avg, bucket.period
            if avg < worst_avg:
                worst_avg, worst = avg, bucket.period
        return best, worst

    @staticmethod
    def timing(trades: Sequence[Trade]) -> Tuple[int, int, str, str, str, str]:
        """Best/worst hour, weekday and month by mean net P&L of trade time."""
        hourly, daily, monthly = AdvancedCalculator.pnl_by_period(trades)

        best_hour, worst_hour = AdvancedCalculator._best_and_worst(hourly)
        best_day, worst_day = AdvancedCalculator._best_and_worst(daily)
        best_month, worst_month = AdvancedCalculator._best_and_worst(monthly)

        return (
            best_hour if best_hour is not None else 0,
            worst_hour if worst_hour is not None else 0,
            best_day or "",
            worst_day or "",
            best_month or "",
            worst_month or "",
        )

    # -------------------------------------------------------------------------
    # Rolling
    # -------------------------------------------------------------------------

    @staticmethod
    def rolling_sharpe(
        returns: Sequence[float],
        risk_free_rate: float = Config.DEFAULT_RISK_FREE_RATE,
        window: int = Config.ROLLING_SHARPE_WINDOW,
        annualize_volatility: bool = False
    ) -> Tuple[float, ...]:
        """
        Sharpe ratio of each trailing window of daily returns.

        One value per window ending at day `window - 1` onward; empty when
        there are fewer days than the window. A flat window scores 0.
        """
        values = pd.Series(np.asarray(returns, dtype=float))
        if window <= 0 or len(values) < window:
            return ()

        days = Config.TRADING_DAYS_YEAR
        rolling = values.rolling(window)
        rolling_mean = rolling.mean().dropna()
        rolling_std = rolling.std(ddof=0).dropna()

        if annualize_volatility:
            sharpe = (rolling_mean / 100 * days - risk_free_rate) / (rolling_std / 100 * math.sqrt(days))
        else:
            sharpe = (rolling_mean - risk_free_rate / days) / rolling_std
        sharpe = sharpe.where(rolling_std > 0, 0.0)

        return tuple(float(v) for v in sharpe)

    # -------------------------------------------------------------------------
    # Aggregate
    # -------------------------------------------------------------------------

    @staticmethod
    def calculate(
        trades: Sequence[Trade],
        equity_curve: Sequence[float],
        return_stats: ReturnStatistics,
        max_drawdown: float,
        risk_free_rate: float = Config.DEFAULT_RISK_FREE_RATE,
        annualize_volatility: bool = False
    ) -> AdvancedMetrics:
        """
        Calculate the extended metrics.

        Args:
            trades: Chronologically sorted trades
            equity_curve: Running balance including the initial point
            return_stats: Daily return statistics of the same trades
            max_drawdown: Maximum drawdown in percent (<= 0)
            risk_free_rate: Annual risk-free rate as a decimal
            annualize_volatility: Rolling Sharpe in the unit-consistent form

        Returns:
            AdvancedMetrics
        """
        if not trades:
            return AdvancedMetrics.empty()

        returns = return_stats.daily_returns
        total_return = return_stats.total_return
        years = return_stats.years
        std_dev = return_stats.std_dev
        logger.debug(f"Advanced metrics over {len(returns)} daily returns, {len(equity_curve)} curve points")

        ulcer = AdvancedCalculator.ulcer_index(equity_curve)
        average_dd, average_duration, dd_deviation = AdvancedCalculator.drawdown_profile(equity_curve)
        hourly, daily, monthly = AdvancedCalculator.pnl_by_period(trades)
        best_hour, worst_hour, best_day, worst_day, best_month, worst_month = (
            AdvancedCalculator.timing(trades)
        )

        return AdvancedMetrics(
            value_at_risk_99=ReturnCalculator.value_at_risk(returns, Config.VAR_CONFIDENCE_EXTREME),
            conditional_value_at_risk_99=ReturnCalculator.expected_shortfall(
                returns, Config.VAR_CONFIDENCE_EXTREME
            ),
            skewness=AdvancedCalculator.skewness(returns),
            kurtosis=AdvancedCalculator.kurtosis(returns),
            upside_deviation=AdvancedCalculator.upside_deviation(returns),
            omega_ratio=AdvancedCalculator.omega_ratio(returns),
            ulcer_index=ulcer,
            average_drawdown=average_dd,
            average_drawdown_duration=average_duration,
            drawdown_deviation=dd_deviation,
            sterling_ratio=AdvancedCalculator.sterling_ratio(total_return, max_drawdown, years),
            burke_ratio=AdvancedCalculator.burke_ratio(total_return, dd_deviation),
            martin_ratio=AdvancedCalculator.martin_ratio(total_return, years, ulcer),
            pain_index=average_dd,
            pain_ratio=AdvancedCalculator.pain_ratio(total_return, average_dd),
            information_ratio=AdvancedCalculator.information_ratio(total_return, years, std_dev),
            efficiency_ratio=AdvancedCalculator.efficiency_ratio(total_return, std_dev),
            volatility_adjusted_return=AdvancedCalculator.volatility_adjusted_return(total_return, std_dev),
            risk_parity_score=AdvancedCalculator.risk_parity_score(returns),
            gain_loss_ratio=AdvancedCalculator.gain_loss_ratio(trades),
            trend_strength=AdvancedCalculator.trend_strength(equity_curve),
            best_hour=best_hour,
            worst_hour=worst_hour,
            best_weekday=best_day,
            worst_weekday=worst_day,
            best_month=best_month,
            worst_month=worst_month,
            hourly_pnl=hourly,
            daily_pnl=daily,
            monthly_pnl=monthly,
            rolling_sharpe=AdvancedCalculator.rolling_sharpe(
                returns, risk_free_rate, annualize_volatility=annualize_volatility
            ),
        )
