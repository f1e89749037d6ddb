"""
Unit tests for journal_analytics.metric_analysis.
"""

import pytest

from journal_analytics.config import MetricRating
from journal_analytics.metric_analysis import (
    analyze_kelly_percentage,
    analyze_max_drawdown,
    analyze_profit_factor,
    analyze_sharpe_ratio,
    analyze_strategy_profile,
    analyze_trade_duration,
    analyze_win_rate,
    get_metric_analysis,
    trading_style,
)


@pytest.mark.parametrize(
    "value, rating",
    [
        (3.5, MetricRating.EXCELLENT),
        (2.5, MetricRating.EXCELLENT),
        (1.7, MetricRating.GOOD),
        (1.2, MetricRating.AVERAGE),
        (0.7, MetricRating.POOR),
        (0.1, MetricRating.CRITICAL),
        (-1.0, MetricRating.CRITICAL),
    ],
)
def test_sharpe_tiers(value, rating) -> None:
    assert analyze_sharpe_ratio(value).rating is rating


def test_exceptional_sharpe_has_its_own_title() -> None:
    assert analyze_sharpe_ratio(3.0).title == "Exceptional Risk-Adjusted Return"
    assert analyze_sharpe_ratio(2.99).title == "Very Good Risk-Adjusted Return"


def test_win_rate_boundaries_are_inclusive() -> None:
    assert analyze_win_rate(70.0).rating is MetricRating.EXCELLENT
    assert analyze_win_rate(69.9).rating is MetricRating.GOOD
    assert analyze_win_rate(50.0).rating is MetricRating.AVERAGE
    assert analyze_win_rate(39.9).rating is MetricRating.CRITICAL


def test_drawdown_rating_ignores_sign() -> None:
    assert analyze_max_drawdown(-5.0).rating is MetricRating.EXCELLENT
    assert analyze_max_drawdown(5.0).rating is MetricRating.EXCELLENT
    assert analyze_max_drawdown(-15.0).rating is MetricRating.AVERAGE
    assert analyze_max_drawdown(-35.0).rating is MetricRating.CRITICAL


@pytest.mark.parametrize(
    "value, rating",
    [
        (float("inf"), MetricRating.EXCELLENT),
        (3.0, MetricRating.EXCELLENT),
        (2.0, MetricRating.GOOD),
        (1.5, MetricRating.AVERAGE),
        (1.2, MetricRating.POOR),
        (1.0, MetricRating.CRITICAL),
    ],
)
def test_profit_factor_tiers(value, rating) -> None:
    assert analyze_profit_factor(value).rating is rating


def test_infinite_profit_factor_is_described() -> None:
    assert "∞" in analyze_profit_factor(float("inf")).description


def test_duration_tiers() -> None:
    assert analyze_trade_duration(0.2).title == "Scalping"
    assert analyze_trade_duration(1.0).rating is MetricRating.GOOD
    assert analyze_trade_duration(5.0).rating is MetricRating.EXCELLENT
    assert analyze_trade_duration(12.0).title == "Short-term Swing"
    assert analyze_trade_duration(30.0).rating is MetricRating.AVERAGE


def test_kelly_tiers() -> None:
    assert analyze_kelly_percentage(25.0).rating is MetricRating.EXCELLENT
    assert analyze_kelly_percentage(12.0).rating is MetricRating.GOOD
    assert analyze_kelly_percentage(6.0).rating is MetricRating.AVERAGE
    assert analyze_kelly_percentage(0.5).rating is MetricRating.POOR
    assert analyze_kelly_percentage(0.0).rating is MetricRating.CRITICAL


def test_get_metric_analysis_dispatch() -> None:
    assert get_metric_analysis("win_rate", 75.0) == analyze_win_rate(75.0)
    unknown = get_metric_analysis("ulcer_index", 1.0)
    assert unknown.rating is MetricRating.AVERAGE
    assert unknown.title == "Analysis Not Available"


def test_trading_style() -> None:
    assert trading_style(0.5) == "Scalping"
    assert trading_style(3.0) == "Day Trading"
    assert trading_style(10.0) == "Swing Trading"
    assert trading_style(48.0) == "Position Trading"


@pytest.mark.parametrize(
    "win_rate, profit_factor, sharpe, drawdown, duration, profile",
    [
        (70.0, 2.5, 2.5, -5.0, 3.0, "Elite Performer"),
        (60.0, 1.8, 1.0, -10.0, 3.0, "Solid Performer"),
        (40.0, 2.5, 1.0, -25.0, 0.5, "High RR Specialist"),
        (75.0, 1.2, 1.0, -10.0, 0.5, "High Frequency Grinder"),
        (50.0, 1.2, 0.3, -40.0, 30.0, "High Risk Gambler"),
        (50.0, 1.2, 0.3, -15.0, 30.0, "Developing Strategy"),
    ],
)
def test_strategy_profiles(win_rate, profit_factor, sharpe, drawdown, duration, profile) -> None:
    result = analyze_strategy_profile(win_rate, profit_factor, sharpe, drawdown, duration)
    assert result.profile == profile
    assert result.strengths
    assert result.weaknesses


def test_strategy_profile_carries_style() -> None:
    result = analyze_strategy_profile(70.0, 2.5, 2.5, -5.0, 3.0)
    assert result.trading_style == "Day Trading"


@pytest.mark.parametrize(
    "metric, values",
    [
        ("sharpe_ratio", [3.5, 2.5, 1.7, 1.2, 0.7, 0.1]),
        ("win_rate", [75.0, 65.0, 55.0, 45.0, 30.0]),
        ("max_drawdown", [-3.0, -8.0, -15.0, -25.0, -40.0]),
        ("profit_factor", [3.5, 2.5, 1.7, 1.3, 0.8]),
        ("avg_trade_duration", [0.2, 1.0, 5.0, 12.0, 30.0]),
        ("kelly_percent", [25.0, 12.0, 6.0, 2.0, -5.0]),
    ],
)
def test_every_tier_carries_implications_and_recommendations(metric, values) -> None:
    analyses = [get_metric_analysis(metric, v) for v in values]

    assert len({a.title for a in analyses}) == len(values)
    for analysis in analyses:
        assert analysis.implications
        assert analysis.recommendations
        assert isinstance(analysis.implications, tuple)
        assert isinstance(analysis.recommendations, tuple)
        assert all(isinstance(item, str) and item for item in analysis.implications)
        assert all(isinstance(item, str) and item for item in analysis.recommendations)


def test_critical_tiers_advise_stopping() -> None:
    assert "Stop trading the strategy now" in analyze_sharpe_ratio(0.0).recommendations
    assert "Stop trading" in analyze_win_rate(20.0).recommendations
    assert "Stop trading immediately" in analyze_max_drawdown(-50.0).recommendations


def test_unknown_metric_has_no_guidance() -> None:
    unknown = get_metric_analysis("ulcer_index", 1.0)
    assert unknown.implications == ()
    assert unknown.recommendations == ()


def test_analysis_is_hashable() -> None:
    assert hash(analyze_kelly_percentage(12.0)) == hash(analyze_kelly_percentage(12.0))
