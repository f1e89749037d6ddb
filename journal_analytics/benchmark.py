"""
Buy & Hold Benchmark
====================

Head-to-head comparison of the strategy's balance against a synthetic
buy-and-hold balance on the most traded symbol.

The benchmark does not use market data. It compounds an assumed annual
growth rate, chosen from the symbol name (see `config.benchmark_growth_for`),
at the daily rate:

    r_daily = (1 + r_annual)^(1/365) - 1

The strategy balance only moves on days a trade closes.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Dict, List, Sequence, Tuple

from journal_analytics.config import BenchmarkSampling, Config, benchmark_growth_for
from journal_analytics.trades import Trade

logger = logging.getLogger(__name__)


EquityPoint = Tuple[date, float]


@dataclass(frozen=True)
class BenchmarkComparison:
    """Strategy vs. buy-and-hold daily balances."""
    strategy_equity: Tuple[EquityPoint, ...]
    buy_hold_equity: Tuple[EquityPoint, ...]
    outperformance: float            # strategy % - benchmark %, percentage points
    winning_periods: int
    total_periods: int
    primary_symbol: str = ""
    benchmark_annual_return: float = 0.0   # decimal

    @classmethod
    def empty(cls) -> "BenchmarkComparison":
        return cls((), (), 0.0, 0, 0)


class BenchmarkCalculator:
    """Synthetic buy-and-hold comparison."""

    @staticmethod
    def primary_symbol(trades: Sequence[Trade]) -> str:
        """
        Most traded symbol. On a tie the symbol first seen later wins.
        """
        counts: Dict[str, int] = {}
        for trade in trades:
            counts[trade.symbol] = counts.get(trade.symbol, 0) + 1

        best = ""
        for symbol, count in counts.items():
            if not best or count >= counts[best]:
                best = symbol
        return best

    @staticmethod
    def daily_growth(annual_return: float) -> float:
        return (1 + annual_return) ** (1 / Config.BENCHMARK_DAYS_PER_YEAR) - 1

    @staticmethod
    def compare(
        trades: Sequence[Trade],
        initial_balance: float,
        sampling: BenchmarkSampling = BenchmarkSampling.WEEKLY
    ) -> BenchmarkComparison:
        """
        Simulate both balances day by day.

        Walks calendar days (UTC) from the first trade's open date until every
        trade has been booked. Each day the benchmark compounds once, then
        the strategy books the net P&L of trades closing that day. A period is
        sampled on Sundays (weekly) or on every day (daily) and counts as
        won when the strategy balance is strictly above the benchmark.

        Args:
            trades: Chronologically sorted trades
            initial_balance: Starting balance for both curves
            sampling: Period sampling mode

        Returns:
            BenchmarkComparison
        """
        if not trades:
            return BenchmarkComparison.empty()

        symbol = BenchmarkCalculator.primary_symbol(trades)
        annual = benchmark_growth_for(symbol)
        daily = BenchmarkCalculator.daily_growth(annual)

        start = trades[0].open_time.date()
        end = trades[-1].trade_date

        strategy_balance = initial_balance
        buy_hold_balance = initial_balance
        strategy_equity: List[EquityPoint] = [(start, strategy_balance)]
        buy_hold_equity: List[EquityPoint] = [(start, buy_hold_balance)]

        winning_periods = 0
        total_periods = 0
        index = 0
        day = start

        while day <= end and index < len(trades):
            buy_hold_balance *= (1 + daily)

            while index < len(trades) and trades[index].trade_date == day:
                strategy_balance += trades[index].net_pnl
                index += 1

            strategy_equity.append((day, strategy_balance))
            buy_hold_equity.append((day, buy_hold_balance))

            if sampling is BenchmarkSampling.DAILY or day.weekday() == 6:
                total_periods += 1
                if strategy_balance > buy_hold_balance:
                    winning_periods += 1

            day += timedelta(days=1)

        strategy_return = (strategy_balance - initial_balance) / initial_balance * 100
        buy_hold_return = (buy_hold_balance - initial_balance) / initial_balance * 100

        logger.debug(
            f"Benchmark {symbol} @ {annual:.0%}: strategy {strategy_return:+.2f}% "
            f"vs buy & hold {buy_hold_return:+.2f}%"
        )

        return BenchmarkComparison(
            strategy_equity=tuple(strategy_equity),
            buy_hold_equity=tuple(buy_hold_equity),
            outperformance=strategy_return - buy_hold_return,
            winning_periods=winning_periods,
            total_periods=max(total_periods, 1),
            primary_symbol=symbol,
            benchmark_annual_return=annual,
        )
