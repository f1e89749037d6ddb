#!/usr/bin/env python3
"""
Trade Journal Analytics - Command-Line Runner

Loads a journal export, computes the full performance metrics and prints a
text report with metric ratings and the strategy profile.

EXECUTION
    python run_analysis.py --trades journal.csv
    python run_analysis.py --trades journal.json --balance 25000
    python run_analysis.py --trades journal.csv --annualize-volatility --json metrics.json

INPUT
    CSV or JSON with at least symbol, open time and profit columns.
    Column names are matched through journal_analytics.config.TRADE_FIELDS.

OUTPUT
    stdout          Performance report, ratings, strategy profile
    --json FILE     All metrics as JSON
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from journal_analytics.config import BenchmarkSampling, Config
from journal_analytics.engine import (
    VERSION,
    Metrics,
    compute_metrics,
    format_metrics_report,
    metrics_to_dict,
)
from journal_analytics.metric_analysis import analyze_strategy_profile, get_metric_analysis
from journal_analytics.trade_loader import load_trades


# =============================================================================
# DISPLAY COMPONENTS
# =============================================================================

RATED_METRICS = [
    ("Sharpe Ratio", "sharpe_ratio"),
    ("Win Rate", "win_rate"),
    ("Max Drawdown", "max_drawdown"),
    ("Profit Factor", "profit_factor"),
    ("Avg Trade Duration", "avg_trade_duration"),
    ("Kelly", "kelly_percent"),
]


def print_section_header(title: str) -> None:
    """Print a section header."""
    print()
    print("=" * 70)
    print(f"  {title}")
    print("=" * 70)


def print_ratings(metrics: Metrics) -> None:
    """Print the rating of each headline metric and the strategy profile."""
    print_section_header("METRIC RATINGS")
    for label, name in RATED_METRICS:
        analysis = get_metric_analysis(name, getattr(metrics, name))
        print(f"  {label:<20} {analysis.rating.value.upper():<10} {analysis.title}")
        print(f"  {'':<20} {analysis.description}")
        for item in analysis.implications:
            print(f"  {'':<20} * {item}")
        for item in analysis.recommendations:
            print(f"  {'':<20} > {item}")

    profile = analyze_strategy_profile(
        win_rate=metrics.win_rate,
        profit_factor=metrics.profit_factor,
        sharpe_ratio=metrics.sharpe_ratio,
        max_drawdown=metrics.max_drawdown,
        avg_trade_duration=metrics.avg_trade_duration,
    )

    print_section_header(f"STRATEGY PROFILE: {profile.profile.upper()}")
    print(f"  Trading Style: {profile.trading_style}")
    print(f"  {profile.overall_assessment}")
    print()
    print("  Strengths:")
    for item in profile.strengths:
        print(f"    + {item}")
    print("  Weaknesses:")
    for item in profile.weaknesses:
        print(f"    - {item}")


# =============================================================================
# MAIN ENTRY POINT
# =============================================================================

def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point.

    Returns
    -------
    int
        Exit code (0 for success, 1 for failure)
    """
    parser = argparse.ArgumentParser(
        description="Trade Journal Analytics - performance metrics for a trade list",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python run_analysis.py --trades journal.csv
  python run_analysis.py --trades journal.json --balance 25000 --risk-free 0.04
  python run_analysis.py --trades journal.csv --daily-benchmark --json out.json
        """
    )

    parser.add_argument(
        "--trades", "-t",
        type=Path,
        required=True,
        help="Trade file (.csv or .json)"
    )

    parser.add_argument(
        "--balance", "-b",
        type=float,
        default=Config.DEFAULT_INITIAL_BALANCE,
        help=f"Initial account balance (default: {Config.DEFAULT_INITIAL_BALANCE:,.0f})"
    )

    parser.add_argument(
        "--risk-free", "-r",
        type=float,
        default=Config.DEFAULT_RISK_FREE_RATE,
        help=f"Annual risk-free rate as a decimal (default: {Config.DEFAULT_RISK_FREE_RATE})"
    )

    parser.add_argument(
        "--annualize-volatility",
        action="store_true",
        help="Use annualized volatility in Sharpe/Sortino"
    )

    parser.add_argument(
        "--daily-benchmark",
        action="store_true",
        help="Compare against buy & hold every day instead of every Sunday"
    )

    parser.add_argument(
        "--json", "-j",
        type=Path,
        default=None,
        help="Write all metrics to this JSON file"
    )

    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose logging"
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {VERSION}"
    )

    args = parser.parse_args(argv)

    # Configure logging
    log_level = logging.DEBUG if args.verbose else logging.INFO
    logging.basicConfig(
        level=log_level,
        format="  %(asctime)s │ %(levelname)s │ %(message)s",
        datefmt="%H:%M:%S"
    )
    logger = logging.getLogger(__name__)

    sampling = BenchmarkSampling.DAILY if args.daily_benchmark else BenchmarkSampling.WEEKLY

    try:
        trades = load_trades(args.trades)
        metrics = compute_metrics(
            trades,
            initial_balance=args.balance,
            risk_free_rate=args.risk_free,
            annualize_volatility=args.annualize_volatility,
            benchmark_sampling=sampling,
        )
    except (ValueError, OSError) as e:
        logger.error(f"Analysis failed: {e}")
        return 1

    print()
    print(format_metrics_report(metrics))
    if metrics.total_trades > 0:
        print_ratings(metrics)

    if args.json is not None:
        try:
            with open(args.json, "w", encoding="utf-8") as f:
                json.dump(metrics_to_dict(metrics), f, indent=2, default=str)
        except OSError as e:
            logger.error(f"Could not write {args.json}: {e}")
            return 1
        logger.info(f"Generated: {args.json}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
