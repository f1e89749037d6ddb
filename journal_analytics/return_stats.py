"""
Return Statistics
=================

Daily return series and the risk-adjusted ratios built on it.

Returns are computed per distinct trading day (UTC calendar day of the
trade's close time), not per trade:

    r_d = PnL_d / Balance_before_d * 100

Annualization (compound):
    Annual = (Final / Initial)^(1 / Years) - 1
    Years  = (last close - first open) / 365.25 days, floored at one day

Sharpe / Sortino:
    (Annual - Rf) / sigma_daily

The numerator is an annualized decimal while sigma is the standard deviation
of daily percent returns. Passing `annualize_volatility=True` selects the
unit-consistent variant (decimal daily sigma scaled by sqrt(252)).
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Sequence, Tuple

import numpy as np

from journal_analytics.config import Config
from journal_analytics.trades import Trade, pnl_series

logger = logging.getLogger(__name__)


# =============================================================================
# DATA STRUCTURES
# =============================================================================

@dataclass(frozen=True)
class ReturnStatistics:
    """Daily-return based statistics."""
    daily_returns: Tuple[float, ...]   # percent, chronological
    total_return: float                # percent of initial balance
    annual_return: float               # percent, compound
    years: float                       # floored time span
    mean_return: float                 # mean daily return, percent
    std_dev: float                     # population std of daily returns
    downside_deviation: float          # population std of negative days
    var_95: float                      # percent
    expected_shortfall: float          # percent

    @classmethod
    def empty(cls) -> "ReturnStatistics":
        return cls(
            daily_returns=(), total_return=0.0, annual_return=0.0, years=0.0,
            mean_return=0.0, std_dev=0.0, downside_deviation=0.0,
            var_95=0.0, expected_shortfall=0.0
        )


@dataclass(frozen=True)
class RiskAdjustedMetrics:
    """Risk-adjusted ratios."""
    sharpe_ratio: float
    sortino_ratio: float
    calmar_ratio: float

    @classmethod
    def empty(cls) -> "RiskAdjustedMetrics":
        return cls(sharpe_ratio=0.0, sortino_ratio=0.0, calmar_ratio=0.0)


# =============================================================================
# RETURN CALCULATOR
# =============================================================================

class ReturnCalculator:
    """Daily returns, annualization and tail risk."""

    @staticmethod
    def daily_returns(trades: Sequence[Trade], initial_balance: float) -> np.ndarray:
        """
        One percent return per distinct trading day, in chronological order.

        Args:
            trades: Chronologically sorted trades
            initial_balance: Starting balance
        """
        if not trades:
            return np.array([], dtype=float)

        pnl = pnl_series(trades)
        daily_pnl = pnl.groupby(pnl.index.date, sort=False).sum()
        balance_before = initial_balance + daily_pnl.cumsum().shift(1, fill_value=0.0)

        non_positive = (balance_before <= 0).to_numpy()
        for day in daily_pnl.index[non_positive]:
            logger.warning(f"Non-positive balance before {day}; daily return set to 0")

        returns = daily_pnl / balance_before.where(~non_positive) * 100
        return returns.fillna(0.0).to_numpy(dtype=float)

    @staticmethod
    def raw_period_years(trades: Sequence[Trade]) -> float:
        """Years from the first trade's open to the last trade's close."""
        if not trades:
            return 0.0
        span = trades[-1].trade_time - trades[0].open_time
        return span.total_seconds() / (Config.DAYS_PER_YEAR * 86400)

    @staticmethod
    def period_years(trades: Sequence[Trade]) -> float:
        """Time span in years, never shorter than one day."""
        if not trades:
            return 1.0
        return max(
            ReturnCalculator.raw_period_years(trades),
            Config.MIN_PERIOD_DAYS / Config.DAYS_PER_YEAR
        )

    @staticmethod
    def annualized_return(
        trades: Sequence[Trade],
        initial_balance: float
    ) -> Tuple[float, float]:
        """
        Total and compound annual return, both in percent.

        Falls back to the total return when no time elapsed between the
        first open and the last close. A final balance at or below zero
        annualizes to -100%; overflow of the compound power yields inf.
        """
        if not trades:
            return 0.0, 0.0

        total_pnl = sum(t.net_pnl for t in trades)
        total_return = total_pnl / initial_balance * 100

        if ReturnCalculator.raw_period_years(trades) <= 0:
            return total_return, total_return

        years = ReturnCalculator.period_years(trades)
        ratio = (initial_balance + total_pnl) / initial_balance
        if ratio <= 0:
            return total_return, -100.0

        with np.errstate(over="ignore"):
            growth = float(np.power(ratio, 1.0 / years))
        return total_return, (growth - 1) * 100

    @staticmethod
    def std_dev(values: Sequence[float]) -> float:
        """Population standard deviation; 0 for an empty sample."""
        if len(values) == 0:
            return 0.0
        return float(np.std(np.asarray(values, dtype=float)))

    @staticmethod
    def value_at_risk(returns: Sequence[float], confidence: float = Config.VAR_CONFIDENCE) -> float:
        """Historical VaR: the sorted return at index floor((1 - c) * n)."""
        if len(returns) == 0:
            return 0.0
        ordered = np.sort(np.asarray(returns, dtype=float))
        index = int(math.floor((1 - confidence) * len(ordered)))
        if index >= len(ordered):
            return 0.0
        value = float(ordered[index])
        return value if np.isfinite(value) else 0.0

    @staticmethod
    def expected_shortfall(returns: Sequence[float], confidence: float = Config.VAR_CONFIDENCE) -> float:
        """Mean of the returns at or below the VaR threshold."""
        if len(returns) == 0:
            return 0.0
        var = ReturnCalculator.value_at_risk(returns, confidence)
        values = np.asarray(returns, dtype=float)
        tail = values[values <= var]
        if len(tail) == 0:
            return var
        return float(np.mean(tail))

    @staticmethod
    def calculate(trades: Sequence[Trade], initial_balance: float) -> ReturnStatistics:
        """
        Calculate all return statistics.

        Args:
            trades: Chronologically sorted trades
            initial_balance: Starting balance

        Returns:
            ReturnStatistics
        """
        if not trades:
            return ReturnStatistics.empty()

        returns = ReturnCalculator.daily_returns(trades, initial_balance)
        total_return, annual_return = ReturnCalculator.annualized_return(trades, initial_balance)
        downside = returns[returns < 0]

        return ReturnStatistics(
            daily_returns=tuple(float(r) for r in returns),
            total_return=float(total_return),
            annual_return=float(annual_return),
            years=ReturnCalculator.period_years(trades),
            mean_return=float(np.mean(returns)) if len(returns) else 0.0,
            std_dev=ReturnCalculator.std_dev(returns),
            downside_deviation=ReturnCalculator.std_dev(downside),
            var_95=ReturnCalculator.value_at_risk(returns, Config.VAR_CONFIDENCE),
            expected_shortfall=ReturnCalculator.expected_shortfall(returns, Config.VAR_CONFIDENCE),
        )


# =============================================================================
# RISK-ADJUSTED CALCULATOR
# =============================================================================

class RiskAdjustedCalculator:
    """
    Sharpe, Sortino and Calmar ratios.

    Sharpe Ratio Formula:
        SR = (Annual Return - Risk Free Rate) / Volatility
    """

    @staticmethod
    def _ratio(excess: float, deviation: float) -> float:
        return excess / deviation if deviation > 0 else 0.0

    @staticmethod
    def _annualized_deviation(deviation: float) -> float:
        """Daily percent deviation -> annualized decimal deviation."""
        return deviation / 100 * math.sqrt(Config.TRADING_DAYS_YEAR)

    @staticmethod
    def calculate(
        stats: ReturnStatistics,
        max_drawdown: float,
        risk_free_rate: float = Config.DEFAULT_RISK_FREE_RATE,
        annualize_volatility: bool = False
    ) -> RiskAdjustedMetrics:
        """
        Calculate risk-adjusted metrics.

        Args:
            stats: Return statistics of the trade series
            max_drawdown: Maximum drawdown in percent (<= 0)
            risk_free_rate: Annual risk-free rate as a decimal
            annualize_volatility: Use the unit-consistent deviation

        Returns:
            RiskAdjustedMetrics
        """
        annual = stats.annual_return / 100
        excess = annual - risk_free_rate

        std_dev = stats.std_dev
        downside = stats.downside_deviation
        if annualize_volatility:
            std_dev = RiskAdjustedCalculator._annualized_deviation(std_dev)
            downside = RiskAdjustedCalculator._annualized_deviation(downside)

        drawdown = abs(max_drawdown) / 100
        if drawdown == 0:
            drawdown = Config.CALMAR_MIN_DRAWDOWN

        return RiskAdjustedMetrics(
            sharpe_ratio=float(RiskAdjustedCalculator._ratio(excess, std_dev)),
            sortino_ratio=float(RiskAdjustedCalculator._ratio(excess, downside)),
            calmar_ratio=float(annual / drawdown),
        )
