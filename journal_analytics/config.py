"""
Configuration Module for the Trade Journal Analytics Engine

Constants, enumerations, journal column aliases and rating thresholds used by
the metrics pipeline. Analysis modules read every threshold from here; none
hard-code their own.
"""

from dataclasses import dataclass
from typing import Dict, List, Tuple
from enum import Enum


# =============================================================================
# ENUMERATIONS
# =============================================================================

class StreakType(Enum):
    """Type of the streak in progress at the end of a trade series."""
    WIN = "win"
    LOSS = "loss"
    NONE = "none"


class MarketCondition(Enum):
    """Market condition a trade was taken in, inferred from its price path."""
    TRENDING = "trending"
    SIDEWAYS = "sideways"
    VOLATILE = "volatile"


class TradingSession(Enum):
    """UTC trading session buckets."""
    ASIAN = "asian"            # 00:00 - 08:00 UTC
    EUROPEAN = "european"      # 08:00 - 16:00 UTC
    AMERICAN = "american"      # 16:00 - 24:00 UTC


class RiskBucket(Enum):
    """Per-trade risk as a percentage of the running balance."""
    LOW = "Low (0-1%)"
    MEDIUM = "Medium (1-3%)"
    HIGH = "High (3-5%)"
    VERY_HIGH = "Very High (5%+)"


class BenchmarkSampling(Enum):
    """How often strategy and buy-and-hold balances are compared."""
    WEEKLY = "weekly"          # Sundays (UTC)
    DAILY = "daily"            # every simulated day


class MetricRating(Enum):
    """Qualitative rating attached to a single metric value."""
    EXCELLENT = "excellent"
    GOOD = "good"
    AVERAGE = "average"
    POOR = "poor"
    CRITICAL = "critical"


# =============================================================================
# ENGINE CONSTANTS
# =============================================================================

class Config:
    """
    Centralized constants for the analytics passes.

    Values reproduce the conventions of the journal application the
    metrics are displayed in; changing them changes reported numbers.
    """

    # -------------------------------------------------------------------------
    # Defaults
    # -------------------------------------------------------------------------
    DEFAULT_INITIAL_BALANCE: float = 10000.0
    DEFAULT_RISK_FREE_RATE: float = 0.02   # 2% annual

    # -------------------------------------------------------------------------
    # Calendar
    # -------------------------------------------------------------------------
    DAYS_PER_YEAR: float = 365.25
    DAYS_PER_MONTH: float = 30.44
    DAYS_PER_WEEK: int = 7
    BENCHMARK_DAYS_PER_YEAR: int = 365
    TRADING_DAYS_YEAR: int = 252       # corrected Sharpe variant only
    MIN_PERIOD_DAYS: float = 1.0

    # -------------------------------------------------------------------------
    # Risk
    # -------------------------------------------------------------------------
    VAR_CONFIDENCE: float = 0.95
    VAR_CONFIDENCE_EXTREME: float = 0.99
    KELLY_CAP: float = 0.25
    TAIL_MIN_TRADES: int = 10
    TAIL_FRACTION: float = 0.10
    CALMAR_MIN_DRAWDOWN: float = 0.0001        # decimal
    RECOVERY_FALLBACK_DRAWDOWN: float = -0.01  # percent
    SYNTHETIC_RISK_FRACTION: float = 0.02      # of entry notional
    STERLING_DRAWDOWN_ADJUSTMENT: float = 10.0

    RISK_BUCKET_EDGES: Tuple[Tuple[float, RiskBucket], ...] = (
        (1.0, RiskBucket.LOW),
        (3.0, RiskBucket.MEDIUM),
        (5.0, RiskBucket.HIGH),
    )

    # -------------------------------------------------------------------------
    # Trade Quality (minutes)
    # -------------------------------------------------------------------------
    PREMATURE_MINUTES: float = 5.0
    OVERHELD_MINUTES: float = 1440.0

    # -------------------------------------------------------------------------
    # Market Condition Classification
    # -------------------------------------------------------------------------
    VOLATILE_MOVE_PER_HOUR: float = 0.5
    VOLATILE_MOVE: float = 3.0
    TRENDING_MOVE: float = 0.8
    TRENDING_MIN_HOURS: float = 2.0

    # -------------------------------------------------------------------------
    # Sessions (UTC hour, exclusive upper bound)
    # -------------------------------------------------------------------------
    SESSION_BOUNDS: Tuple[Tuple[int, TradingSession], ...] = (
        (8, TradingSession.ASIAN),
        (16, TradingSession.EUROPEAN),
        (24, TradingSession.AMERICAN),
    )

    # -------------------------------------------------------------------------
    # Display
    # -------------------------------------------------------------------------
    TOP_HOURS: int = 6
    PROFIT_FACTOR_DISPLAY_CAP: float = 999.0

    # -------------------------------------------------------------------------
    # Advanced Metrics
    # -------------------------------------------------------------------------
    ROLLING_SHARPE_WINDOW: int = 20
    MIN_SKEW_SAMPLES: int = 3
    MIN_KURTOSIS_SAMPLES: int = 4


# =============================================================================
# BENCHMARK GROWTH ASSUMPTIONS
# =============================================================================

# Checked in order; the first group whose marker appears in the symbol wins.
BENCHMARK_GROWTH_RATES: List[Tuple[Tuple[str, ...], float]] = [
    (("USD", "EUR", "GBP"), 0.08),   # major currency pairs
    (("BTC", "ETH"), 0.15),          # crypto
    (("GOLD", "XAU"), 0.07),         # gold
]

DEFAULT_BENCHMARK_GROWTH: float = 0.10  # stocks / other


# =============================================================================
# FIELD NAME MAPPINGS
# =============================================================================

# Journal exports and broker statements name columns differently. These
# mappings provide alternatives to try when reading trade files.

TRADE_FIELDS: Dict[str, List[str]] = {
    "id": ["id", "trade_id", "tradeId", "ID"],
    "symbol": ["symbol", "Symbol", "instrument", "Instrument", "Item", "pair"],
    "ticket": ["ticket", "Ticket", "order", "Order", "position_id"],
    "type": ["type", "Type", "side", "Side", "direction", "Direction"],
    "size": ["size", "Size", "volume", "Volume", "lots", "Lots", "quantity"],
    "open_price": ["open_price", "openPrice", "Open Price", "entry_price", "entryPrice", "Entry"],
    "close_price": ["close_price", "closePrice", "Close Price", "exit_price", "exitPrice", "Exit"],
    "stop_loss": ["stop_loss", "stopLoss", "S / L", "S/L", "SL", "sl"],
    "take_profit": ["take_profit", "takeProfit", "T / P", "T/P", "TP", "tp"],
    "open_time": ["open_time", "openTime", "Open Time", "entry_time", "entryTime", "Time"],
    "close_time": ["close_time", "closeTime", "Close Time", "exit_time", "exitTime"],
    "commission": ["commission", "Commission", "fee", "fees"],
    "swap": ["swap", "Swap", "rollover"],
    "profit": ["profit", "Profit", "pnl", "PnL", "P&L"],
    "duration": ["duration", "Duration", "duration_minutes"],
}

REQUIRED_TRADE_FIELDS: List[str] = ["symbol", "open_time", "profit"]

BUY_ALIASES: Tuple[str, ...] = ("buy", "long", "b", "0")
SELL_ALIASES: Tuple[str, ...] = ("sell", "short", "s", "1")


# =============================================================================
# CALENDAR LABELS
# =============================================================================

# Fixed English labels indexed by datetime.weekday() and month - 1, so
# reports do not change with the process locale.
WEEKDAY_NAMES: Tuple[str, ...] = (
    "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday",
)

MONTH_ABBREVIATIONS: Tuple[str, ...] = (
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
)


# =============================================================================
# RATING THRESHOLDS
# =============================================================================

@dataclass(frozen=True)
class RatingThresholds:
    """Tier boundaries used by the metric ratings."""

    # Sharpe ratio (higher is better)
    sharpe_exceptional: float = 3.0
    sharpe_excellent: float = 2.0
    sharpe_good: float = 1.5
    sharpe_average: float = 1.0
    sharpe_poor: float = 0.5

    # Win rate, percent
    win_rate_excellent: float = 70.0
    win_rate_good: float = 60.0
    win_rate_average: float = 50.0
    win_rate_poor: float = 40.0

    # Max drawdown magnitude, percent (lower is better)
    drawdown_excellent: float = 5.0
    drawdown_good: float = 10.0
    drawdown_average: float = 20.0
    drawdown_poor: float = 30.0

    # Profit factor
    profit_factor_excellent: float = 3.0
    profit_factor_good: float = 2.0
    profit_factor_average: float = 1.5
    profit_factor_poor: float = 1.2

    # Average trade duration, hours
    duration_scalp: float = 0.5
    duration_intraday: float = 2.0
    duration_session: float = 8.0
    duration_day: float = 24.0

    # Kelly percent
    kelly_excellent: float = 20.0
    kelly_good: float = 10.0
    kelly_average: float = 5.0


@dataclass(frozen=True)
class TradingStyleThresholds:
    """Average hold time (hours) boundaries for the trading style label."""
    scalping: float = 1.0
    day_trading: float = 4.0
    swing_trading: float = 24.0


# =============================================================================
# GLOBAL CONFIGURATION INSTANCES
# =============================================================================

RATINGS = RatingThresholds()
TRADING_STYLE = TradingStyleThresholds()


# =============================================================================
# HELPER FUNCTIONS
# =============================================================================

def get_field_alternatives(field_name: str) -> List[str]:
    """
    Get list of alternative column names for a canonical trade field.

    Args:
        field_name: Canonical field name (e.g., 'open_time')

    Returns:
        List of alternative column names to try
    """
    return TRADE_FIELDS.get(field_name, [field_name])


def benchmark_growth_for(symbol: str) -> float:
    """Assumed annual buy-and-hold growth for a symbol, by name heuristic."""
    upper = symbol.upper()
    for markers, rate in BENCHMARK_GROWTH_RATES:
        if any(marker in upper for marker in markers):
            return rate
    return DEFAULT_BENCHMARK_GROWTH
