"""
Metric Ratings
==============

Qualitative interpretation of headline metrics: a rating tier, a short
title, a one-line description, what the value implies and what to do
about it, plus a combined strategy profile.

Tier boundaries live in `config.RATINGS` and `config.TRADING_STYLE`.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Callable, Dict, Tuple

from journal_analytics.config import RATINGS, TRADING_STYLE, MetricRating


# =============================================================================
# DATA STRUCTURES
# =============================================================================

@dataclass(frozen=True)
class MetricAnalysis:
    """Rating of one metric value."""
    rating: MetricRating
    title: str
    description: str
    implications: Tuple[str, ...]
    recommendations: Tuple[str, ...]


@dataclass(frozen=True)
class StrategyProfile:
    """Combined reading of win rate, profit factor, Sharpe and drawdown."""
    profile: str
    trading_style: str
    strengths: Tuple[str, ...]
    weaknesses: Tuple[str, ...]
    overall_assessment: str


def _fmt(value: float, spec: str) -> str:
    if math.isinf(value):
        return "∞" if value > 0 else "-∞"
    return format(value, spec)


# =============================================================================
# SINGLE-METRIC RATINGS
# =============================================================================

def analyze_sharpe_ratio(sharpe_ratio: float) -> MetricAnalysis:
    """Rate a Sharpe ratio."""
    s = _fmt(sharpe_ratio, ".2f")
    if sharpe_ratio >= RATINGS.sharpe_exceptional:
        return MetricAnalysis(
            MetricRating.EXCELLENT, "Exceptional Risk-Adjusted Return",
            f"A Sharpe ratio of {s} is well above hedge-fund standards and rare even among professionals.",
            (
                "Return per unit of risk is exceptionally high",
                "High returns with low, steady volatility",
                "Attractive to institutional capital",
                "Performance holds up across market conditions",
            ),
            (
                "Keep the current risk parameters",
                "Position size can be raised gradually",
                "Avoid system changes that could disturb this performance",
            ),
        )
    elif sharpe_ratio >= RATINGS.sharpe_excellent:
        return MetricAnalysis(
            MetricRating.EXCELLENT, "Very Good Risk-Adjusted Return",
            f"A Sharpe ratio of {s} is excellent by professional standards.",
            (
                "Strong balance of risk and return",
                "Performance at professional trading standards",
                "Consistent gains with low volatility",
                "Suitable for scaling up",
            ),
            (
                "Keep refining the risk parameters",
                "Work on shortening drawdown periods",
                "Modest leverage is sustainable at this level",
            ),
        )
    elif sharpe_ratio >= RATINGS.sharpe_good:
        return MetricAnalysis(
            MetricRating.GOOD, "Good Risk-Adjusted Return",
            f"A Sharpe ratio of {s} shows well managed risk and consistent returns.",
            (
                "Positive risk/return balance",
                "Upper-middle performance",
                "Reasonable volatility",
                "Room for improvement remains",
            ),
            (
                "Improve the win rate or the average win/loss ratio",
                "Add filters that reduce volatility",
                "Optimize entry and exit timing",
            ),
        )
    elif sharpe_ratio >= RATINGS.sharpe_average:
        return MetricAnalysis(
            MetricRating.AVERAGE, "Average Risk-Adjusted Return",
            f"A Sharpe ratio of {s} is the minimum acceptable level; return per unit of risk needs work.",
            (
                "Weak risk/return balance",
                "Volatility is high relative to returns",
                "Periods of inconsistent performance",
                "Below professional standards",
            ),
            (
                "Tighten the risk management rules",
                "Review stop-loss placement",
                "Apply stricter trade filters",
                "Revisit the position sizing method",
            ),
        )
    elif sharpe_ratio >= RATINGS.sharpe_poor:
        return MetricAnalysis(
            MetricRating.POOR, "Weak Risk-Adjusted Return",
            f"A Sharpe ratio of {s} means returns do not pay for the risk taken.",
            (
                "Risk and return are out of balance",
                "Excessive volatility",
                "Unreliable performance",
                "High risk of capital loss",
            ),
            (
                "Re-evaluate the strategy from the ground up",
                "Cut risk limits substantially",
                "Re-run the backtests",
                "Validate changes with paper trading",
            ),
        )
    return MetricAnalysis(
        MetricRating.CRITICAL, "Critical Risk/Return Imbalance",
        f"A Sharpe ratio of {s} is unacceptable; the strategy is not producing value for its risk.",
        (
            "Very high risk for little or no return",
            "Capital loss is close to certain",
            "The strategy is fundamentally flawed",
            "Immediate action is needed",
        ),
        (
            "Stop trading the strategy now",
            "Redesign the strategy completely",
            "Seek an outside review",
            "Restart with a simpler approach",
        ),
    )


def analyze_win_rate(win_rate: float) -> MetricAnalysis:
    """Rate a win rate given in percent."""
    w = _fmt(win_rate, ".1f")
    if win_rate >= RATINGS.win_rate_excellent:
        return MetricAnalysis(
            MetricRating.EXCELLENT, "Exceptionally High Win Rate",
            f"A {w}% win rate is very high, typical of scalping or high-frequency styles.",
            (
                "Very strong trade selection",
                "Excellent market timing",
                "Low risk tolerance per trade",
                "Steady stream of small gains",
            ),
            (
                "Check the average win/loss ratio",
                "Avoid overtrading",
                "Optimize profit targets",
                "Review the reward/risk balance",
            ),
        )
    elif win_rate >= RATINGS.win_rate_good:
        return MetricAnalysis(
            MetricRating.GOOD, "High Win Rate",
            f"A {w}% win rate is at a professional level and supports steady profitability.",
            (
                "Good trade filtering",
                "Effective risk management",
                "Reliable signal quality",
                "Sustainable performance",
            ),
            (
                "Keep the current strategy",
                "Optimize the reward/risk ratio",
                "Make the most of winning streaks",
                "Prepare a plan for recovering from losses",
            ),
        )
    elif win_rate >= RATINGS.win_rate_average:
        return MetricAnalysis(
            MetricRating.AVERAGE, "Average Win Rate",
            f"A {w}% win rate is typical; profitability depends on the reward/risk ratio.",
            (
                "Standard performance",
                "Profitability hinges on the reward/risk ratio",
                "Average trade quality",
                "Room for improvement",
            ),
            (
                "Strengthen the trade filters",
                "Refine entry signals",
                "Cut down false signals",
                "Keep average wins larger than average losses",
            ),
        )
    elif win_rate >= RATINGS.win_rate_poor:
        return MetricAnalysis(
            MetricRating.POOR, "Low Win Rate",
            f"A {w}% win rate is low; profits require a high reward/risk ratio.",
            (
                "Weak trade selection",
                "Many false signals",
                "Heavy psychological pressure",
                "Elevated capital risk",
            ),
            (
                "Tighten the trade criteria",
                "Add confirmation filters",
                "Trade more liquid markets",
                "Focus on stop-loss discipline",
            ),
        )
    return MetricAnalysis(
        MetricRating.CRITICAL, "Critically Low Win Rate",
        f"A {w}% win rate points to weak trade selection.",
        (
            "The strategy is not working",
            "Capital is steadily lost",
            "The trade logic is flawed",
            "Immediate action is needed",
        ),
        (
            "Stop trading",
            "Analyze the strategy from scratch",
            "Test changes with paper trading",
            "Get training or mentoring",
        ),
    )


def analyze_max_drawdown(max_drawdown: float) -> MetricAnalysis:
    """Rate a maximum drawdown; the sign is ignored."""
    dd = abs(max_drawdown)
    d = _fmt(dd, ".1f")
    if dd <= RATINGS.drawdown_excellent:
        return MetricAnalysis(
            MetricRating.EXCELLENT, "Minimal Drawdown",
            f"A {d}% maximum drawdown shows institutional-grade capital protection.",
            (
                "Outstanding capital preservation",
                "Very low volatility",
                "Psychologically comfortable to trade",
                "Ideal base for compounding",
            ),
            (
                "Focus on holding this level",
                "Position size can be raised gradually",
                "Leave the risk parameters unchanged",
            ),
        )
    elif dd <= RATINGS.drawdown_good:
        return MetricAnalysis(
            MetricRating.GOOD, "Low Drawdown",
            f"A {d}% maximum drawdown reflects good risk management.",
            (
                "Healthy risk management",
                "Reasonable volatility",
                "Quick recovery is likely",
                "Acceptable to outside investors",
            ),
            (
                "Shorten drawdown periods",
                "Strengthen recovery rules",
                "Watch correlation between open positions",
            ),
        )
    elif dd <= RATINGS.drawdown_average:
        return MetricAnalysis(
            MetricRating.AVERAGE, "Moderate Drawdown",
            f"A {d}% maximum drawdown is acceptable but leaves room to tighten risk.",
            (
                "Standard level of risk",
                "Moderate volatility",
                "Drawdowns start to weigh on discipline",
                "Recovery can take a while",
            ),
            (
                "Optimize position sizing",
                "Review stop-loss levels",
                "Add a volatility filter",
                "Lower the risk per trade",
            ),
        )
    elif dd <= RATINGS.drawdown_poor:
        return MetricAnalysis(
            MetricRating.POOR, "High Drawdown",
            f"A {d}% maximum drawdown is risky and slows compounding.",
            (
                "Too much risk is being taken",
                "High risk of capital loss",
                "Heavy psychological pressure",
                "Recovery is slow and difficult",
            ),
            (
                "Redesign the risk management rules",
                "Lower the maximum position limits",
                "Avoid aggressive trades",
                "Diversify across instruments",
            ),
        )
    return MetricAnalysis(
        MetricRating.CRITICAL, "Critical Drawdown",
        f"A {d}% maximum drawdown puts the account at serious risk.",
        (
            "Destructive capital loss",
            "Risk is out of control",
            "Recovery is close to impossible",
            "Very high risk of blowing up the account",
        ),
        (
            "Stop trading immediately",
            "Replace the risk management rules entirely",
            "Restart with much smaller positions",
            "Study professional risk management",
        ),
    )


def analyze_profit_factor(profit_factor: float) -> MetricAnalysis:
    """Rate a profit factor."""
    p = _fmt(profit_factor, ".2f")
    if profit_factor >= RATINGS.profit_factor_excellent:
        return MetricAnalysis(
            MetricRating.EXCELLENT, "Outstanding Profit Factor",
            f"A profit factor of {p} means gross profit far exceeds gross loss.",
            (
                "Excellent profit/loss ratio",
                "Very strong edge",
                "Sustainable profitability",
                "Minimal capital risk",
            ),
            (
                "Focus on preserving this performance",
                "Avoid over-optimization",
                "Raise position size gradually",
            ),
        )
    elif profit_factor >= RATINGS.profit_factor_good:
        return MetricAnalysis(
            MetricRating.GOOD, "Very Good Profit Factor",
            f"A profit factor of {p} reflects a solid trading edge.",
            (
                "Healthy profit/loss balance",
                "Good risk control",
                "Consistent performance",
                "Reliable system",
            ),
            (
                "Keep losing trades small",
                "Hold winners longer",
                "Consider partial profit taking",
            ),
        )
    elif profit_factor >= RATINGS.profit_factor_average:
        return MetricAnalysis(
            MetricRating.AVERAGE, "Adequate Profit Factor",
            f"A profit factor of {p} is profitable with a modest edge.",
            (
                "Reasonable profitability",
                "Middling performance",
                "Potential for improvement",
                "Sensitive to commissions",
            ),
            (
                "Raise the average win/loss ratio",
                "Cut losses quickly and let profits run",
                "Focus on trade quality",
            ),
        )
    elif profit_factor >= RATINGS.profit_factor_poor:
        return MetricAnalysis(
            MetricRating.POOR, "Low Profit Factor",
            f"A profit factor of {p} leaves little margin for costs.",
            (
                "Thin profit margin",
                "High risk",
                "Sensitive to commissions",
                "Unreliable profitability",
            ),
            (
                "Improve stop-loss discipline",
                "Optimize take-profit levels",
                "Be more selective with trades",
                "Reduce spread and commission costs",
            ),
        )
    return MetricAnalysis(
        MetricRating.CRITICAL, "Negative Edge",
        f"A profit factor of {p} means the system is not making money.",
        (
            "The system is losing money",
            "There is no trading edge",
            "The strategy is not working",
            "Capital is eroding",
        ),
        (
            "Stop trading",
            "Replace the strategy",
            "Study and analyze before resuming",
            "Test on a demo account",
        ),
    )


def analyze_trade_duration(avg_duration: float) -> MetricAnalysis:
    """Rate an average trade duration given in hours."""
    h = _fmt(avg_duration, ".1f")
    if avg_duration < RATINGS.duration_scalp:
        return MetricAnalysis(
            MetricRating.AVERAGE, "Scalping",
            f"Trades last {h} hours on average; costs weigh heavily at this horizon.",
            (
                "High transaction costs",
                "Requires fast decisions",
                "Spread and commission are critical",
                "Needs constant monitoring",
            ),
            (
                "Use an ECN broker",
                "Minimize spread costs",
                "Consider automated execution",
                "Keep slippage under control",
            ),
        )
    elif avg_duration < RATINGS.duration_intraday:
        return MetricAnalysis(
            MetricRating.GOOD, "Day Trading",
            f"Trades last {h} hours on average, within a single session.",
            (
                "Balanced risk/reward",
                "Reasonable transaction costs",
                "Good at catching opportunities",
                "Needs active monitoring",
            ),
            (
                "Concentrate on high-volatility hours",
                "Filter out news releases",
                "Use partial closes",
            ),
        )
    elif avg_duration < RATINGS.duration_session:
        return MetricAnalysis(
            MetricRating.EXCELLENT, "Intraday Swing",
            f"Trades last {h} hours on average, long enough to let moves develop.",
            (
                "Ideal risk/reward balance",
                "Low transaction costs",
                "Captures trends well",
                "Flexible trade management",
            ),
            (
                "Use trailing stops",
                "Add a trend strength indicator",
                "Confirm entries on several timeframes",
            ),
        )
    elif avg_duration < RATINGS.duration_day:
        return MetricAnalysis(
            MetricRating.GOOD, "Short-term Swing",
            f"Trades last {h} hours on average and may carry overnight.",
            (
                "Overnight risk exposure",
                "Swap costs apply",
                "Can capture larger trends",
                "Exposed to price gaps",
            ),
            (
                "Consider a swap-free account",
                "Plan for gap protection",
                "Add a fundamental filter",
                "Watch position sizing",
            ),
        )
    return MetricAnalysis(
        MetricRating.AVERAGE, "Position Trading",
        f"Trades last {h} hours on average; swap costs and gap risk apply.",
        (
            "High swap costs",
            "Large price swings while positions are open",
            "Strong influence of fundamentals",
            "Low trading frequency",
        ),
        (
            "Use a swap-free account",
            "Add fundamental analysis",
            "Use wider stop-losses",
            "Follow long-term trends",
        ),
    )


def analyze_kelly_percentage(kelly_percent: float) -> MetricAnalysis:
    """Rate a Kelly percentage."""
    k = _fmt(kelly_percent, ".1f")
    if kelly_percent >= RATINGS.kelly_excellent:
        return MetricAnalysis(
            MetricRating.EXCELLENT, "Strong Edge",
            f"A Kelly value of {k}% indicates a strong edge; fractional Kelly sizing is advised.",
            (
                "Exceptionally strong edge",
                "High compounding potential",
                "Aggressive sizing is supportable",
                "Fast capital growth",
            ),
            (
                "Size at half Kelly",
                "Adjust for volatility",
                "Keep drawdown limits in place",
            ),
        )
    elif kelly_percent >= RATINGS.kelly_good:
        return MetricAnalysis(
            MetricRating.GOOD, "Solid Edge",
            f"A Kelly value of {k}% indicates a solid, sizeable edge.",
            (
                "Reliable trading edge",
                "Good growth potential",
                "Balanced risk/reward",
                "Sustainable sizing",
            ),
            (
                "Size at 50-75% of Kelly",
                "Adapt sizing to market conditions",
                "Rebalance regularly",
            ),
        )
    elif kelly_percent >= RATINGS.kelly_average:
        return MetricAnalysis(
            MetricRating.AVERAGE, "Modest Edge",
            f"A Kelly value of {k}% indicates a modest edge.",
            (
                "Limited edge",
                "Slow growth",
                "A conservative approach is needed",
                "Risk control matters",
            ),
            (
                "Risk at most 2-3% per trade",
                "Use fixed fractional sizing",
                "Work on strengthening the edge",
            ),
        )
    elif kelly_percent > 0:
        return MetricAnalysis(
            MetricRating.POOR, "Weak Edge",
            f"A Kelly value of {k}% indicates a thin edge; keep risk small.",
            (
                "Minimal edge",
                "High uncertainty",
                "Sensitive to commissions",
                "Sizing must be careful",
            ),
            (
                "Risk at most 1% per trade",
                "Improve the strategy",
                "Paper trade changes first",
                "Focus on growing the edge",
            ),
        )
    return MetricAnalysis(
        MetricRating.CRITICAL, "No Edge",
        f"A Kelly value of {k}% indicates no positive expectancy.",
        (
            "There is no trading edge",
            "Expectancy is negative",
            "Losses are all but certain",
            "Position sizing cannot fix it",
        ),
        (
            "Do not trade this system",
            "Redesign the strategy",
            "Invest in training",
            "Practice on a demo account",
        ),
    )


_ANALYZERS: Dict[str, Callable[[float], MetricAnalysis]] = {
    "sharpe_ratio": analyze_sharpe_ratio,
    "win_rate": analyze_win_rate,
    "max_drawdown": analyze_max_drawdown,
    "profit_factor": analyze_profit_factor,
    "avg_trade_duration": analyze_trade_duration,
    "kelly_percent": analyze_kelly_percentage,
}


def get_metric_analysis(metric: str, value: float) -> MetricAnalysis:
    """
    Rate `value` as the named metric.

    Unknown metric names get a neutral "not available" analysis with no
    implications or recommendations.
    """
    analyzer = _ANALYZERS.get(metric)
    if analyzer is None:
        return MetricAnalysis(
            MetricRating.AVERAGE, "Analysis Not Available",
            "No detailed analysis exists for this metric yet.",
            (),
            (),
        )
    return analyzer(value)


# =============================================================================
# STRATEGY PROFILE
# =============================================================================

def trading_style(avg_trade_duration: float) -> str:
    """Style label from average hold time in hours."""
    if avg_trade_duration < TRADING_STYLE.scalping:
        return "Scalping"
    elif avg_trade_duration < TRADING_STYLE.day_trading:
        return "Day Trading"
    elif avg_trade_duration < TRADING_STYLE.swing_trading:
        return "Swing Trading"
    return "Position Trading"


def analyze_strategy_profile(
    win_rate: float,
    profit_factor: float,
    sharpe_ratio: float,
    max_drawdown: float,
    avg_trade_duration: float
) -> StrategyProfile:
    """
    Classify the strategy from a combination of metrics.

    Profiles are checked in order; the first match wins.
    """
    style = trading_style(avg_trade_duration)
    dd = abs(max_drawdown)

    if win_rate > 65 and profit_factor > 2 and sharpe_ratio > 2:
        return StrategyProfile(
            profile="Elite Performer",
            trading_style=style,
            strengths=(
                "Excellent trade selection and timing",
                "Superior risk management",
                "Consistent, reliable performance",
            ),
            weaknesses=(
                "Risk of over-optimization",
                "Sensitivity to regime changes",
            ),
            overall_assessment="Elite performance; protecting it should be the main focus.",
        )
    elif win_rate > 55 and profit_factor > 1.5 and dd < 20:
        return StrategyProfile(
            profile="Solid Performer",
            trading_style=style,
            strengths=(
                "Balanced risk/reward",
                "Good win rate and profit factor",
                "Controlled drawdown",
            ),
            weaknesses=(
                "Sharpe ratio can improve",
                "Edge can be strengthened",
            ),
            overall_assessment="Reliable and balanced; small refinements could lift it to elite level.",
        )
    elif win_rate < 45 and profit_factor > 2:
        return StrategyProfile(
            profile="High RR Specialist",
            trading_style=style,
            strengths=(
                "Excellent reward/risk ratio",
                "Captures large moves",
                "Lets profits run",
            ),
            weaknesses=(
                "Low win rate is psychologically demanding",
                "Losing streaks are likely",
                "Long drawdown periods",
            ),
            overall_assessment="Classic trend-following profile: low win rate, high reward/risk.",
        )
    elif win_rate > 70 and profit_factor < 1.5:
        return StrategyProfile(
            profile="High Frequency Grinder",
            trading_style=style,
            strengths=(
                "Very high win rate",
                "Steady small gains",
            ),
            weaknesses=(
                "Low profit factor",
                "Highly sensitive to commissions",
                "One large loss can be devastating",
            ),
            overall_assessment="Typical scalping or grid profile; strict risk control is critical.",
        )
    elif dd > 30:
        return StrategyProfile(
            profile="High Risk Gambler",
            trading_style=style,
            strengths=(
                "High return potential",
                "Aggressive opportunity capture",
            ),
            weaknesses=(
                "Excessive risk",
                "Uncontrolled drawdown",
                "Unsustainable",
            ),
            overall_assessment="Dangerous risk profile; risk management needs urgent revision.",
        )
    return StrategyProfile(
        profile="Developing Strategy",
        trading_style=style,
        strengths=(
            "Basic structure in place",
            "Room to develop",
        ),
        weaknesses=(
            "Inconsistent performance",
            "Unclear edge",
            "Risk management needs work",
        ),
        overall_assessment="Not yet mature; more testing and optimization are needed.",
    )
