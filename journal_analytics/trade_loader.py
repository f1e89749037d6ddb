"""
Trade Ingestion
===============

Reads journal exports (CSV or JSON) into `Trade` records.

Column names are resolved through `config.TRADE_FIELDS`, so exports using
camelCase (`openTime`), snake_case (`open_time`) or statement headers
(`Open Time`) load alike. Timestamps are parsed as UTC.

Usage:
    trades = load_trades("journal.csv")
    trades = trades_from_records([{"symbol": "EURUSD", "openTime": ..., ...}])
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional, Union

import numpy as np
import pandas as pd

from journal_analytics.config import (
    BUY_ALIASES,
    REQUIRED_TRADE_FIELDS,
    SELL_ALIASES,
    TRADE_FIELDS,
    get_field_alternatives,
)
from journal_analytics.trades import Trade, TradeDirection

logger = logging.getLogger(__name__)


# =============================================================================
# PUBLIC API
# =============================================================================

def load_trades(path: Union[str, Path]) -> List[Trade]:
    """
    Load trades from a `.csv` or `.json` file.

    JSON may be an array of trade objects or an object with a `trades` array.

    Raises:
        ValueError: unsupported extension, missing required columns or
            a trade closing before it opened
        OSError: file cannot be read
    """
    path = Path(path)
    suffix = path.suffix.lower()

    if suffix == ".csv":
        df = pd.read_csv(path)
    elif suffix == ".json":
        with open(path, "r", encoding="utf-8") as f:
            payload = json.load(f)
        if isinstance(payload, dict):
            payload = payload.get("trades", [])
        df = pd.DataFrame(payload)
    else:
        raise ValueError(f"Unsupported trade file type: {path.suffix or path.name}")

    trades = trades_from_frame(df)
    logger.info(f"Loaded {len(trades)} trades from {path}")
    return trades


def trades_from_records(records: Iterable[Mapping[str, Any]]) -> List[Trade]:
    """Build trades from in-memory dicts (API payloads, database rows)."""
    return trades_from_frame(pd.DataFrame(list(records)))


def trades_from_frame(df: pd.DataFrame) -> List[Trade]:
    """
    Convert a DataFrame of trade rows into `Trade` records.

    Rows whose open time cannot be parsed are dropped with a warning.
    """
    if df is None or len(df) == 0:
        return []

    columns = _resolve_columns(df)
    missing = [name for name in REQUIRED_TRADE_FIELDS if columns.get(name) is None]
    if missing:
        raise ValueError(f"Missing required trade columns: {missing}")

    open_times = pd.to_datetime(df[columns["open_time"]], utc=True, errors="coerce")
    if columns.get("close_time") is not None:
        close_times = pd.to_datetime(df[columns["close_time"]], utc=True, errors="coerce")
    else:
        close_times = pd.Series(pd.NaT, index=df.index, dtype="datetime64[ns, UTC]")

    trades: List[Trade] = []
    dropped = 0

    for position, (idx, row) in enumerate(df.iterrows()):
        open_ts = open_times.loc[idx]
        if pd.isna(open_ts):
            dropped += 1
            continue
        close_ts = close_times.loc[idx]
        close_time = None if pd.isna(close_ts) else close_ts.to_pydatetime()
        open_time = open_ts.to_pydatetime()

        if close_time is not None and close_time < open_time:
            raise ValueError(
                f"Trade at row {position} closes before it opens "
                f"({close_time.isoformat()} < {open_time.isoformat()})"
            )

        duration = _safe_float(_value(row, columns, "duration"))
        if duration is None and close_time is not None:
            duration = (close_time - open_time).total_seconds() / 60.0

        raw_id = _value(row, columns, "id")
        raw_ticket = _value(row, columns, "ticket")

        trades.append(Trade(
            id=str(raw_id) if raw_id is not None else str(position + 1),
            symbol=str(_value(row, columns, "symbol")),
            type=_parse_direction(_value(row, columns, "type")),
            size=_safe_float(_value(row, columns, "size")) or 0.0,
            open_price=_safe_float(_value(row, columns, "open_price")) or 0.0,
            close_price=_safe_float(_value(row, columns, "close_price")) or 0.0,
            open_time=open_time,
            close_time=close_time,
            profit=_safe_float(_value(row, columns, "profit")) or 0.0,
            commission=_safe_float(_value(row, columns, "commission")) or 0.0,
            swap=_safe_float(_value(row, columns, "swap")) or 0.0,
            stop_loss=_safe_float(_value(row, columns, "stop_loss")),
            take_profit=_safe_float(_value(row, columns, "take_profit")),
            duration=duration,
            ticket=str(raw_ticket) if raw_ticket is not None else None,
        ))

    if dropped:
        logger.warning(f"Dropped {dropped} rows with unparseable open time")

    return trades


def trades_to_frame(trades: Iterable[Trade]) -> pd.DataFrame:
    """Tabular view of trades with canonical column names plus `net_pnl`."""
    rows = [
        {
            "id": t.id,
            "symbol": t.symbol,
            "ticket": t.ticket,
            "type": t.type.value,
            "size": t.size,
            "open_price": t.open_price,
            "close_price": t.close_price,
            "stop_loss": t.stop_loss,
            "take_profit": t.take_profit,
            "open_time": t.open_time,
            "close_time": t.close_time,
            "commission": t.commission,
            "swap": t.swap,
            "profit": t.profit,
            "duration": t.duration,
            "net_pnl": t.net_pnl,
        }
        for t in trades
    ]
    return pd.DataFrame(rows, columns=list(TRADE_FIELDS.keys()) + ["net_pnl"])


# =============================================================================
# HELPERS
# =============================================================================

def _resolve_columns(df: pd.DataFrame) -> Dict[str, Optional[str]]:
    """Map each canonical field to the first matching column in the frame."""
    available = set(df.columns)
    resolved: Dict[str, Optional[str]] = {}
    for field_name in TRADE_FIELDS:
        resolved[field_name] = next(
            (alt for alt in get_field_alternatives(field_name) if alt in available),
            None,
        )
    return resolved


def _value(row: pd.Series, columns: Dict[str, Optional[str]], field_name: str) -> Any:
    column = columns.get(field_name)
    if column is None:
        return None
    value = row[column]
    if value is None or (not isinstance(value, str) and pd.isna(value)):
        return None
    return value


def _safe_float(value: Any) -> Optional[float]:
    """Safely convert value to float."""
    if value is None:
        return None
    try:
        result = float(value)
    except (ValueError, TypeError):
        return None
    return result if np.isfinite(result) else None


def _parse_direction(value: Any) -> TradeDirection:
    """Normalize broker/journal direction labels; missing means buy."""
    if value is None:
        return TradeDirection.BUY
    if isinstance(value, (int, float, np.number)) and not isinstance(value, bool):
        label = str(int(value))
    else:
        label = str(value).strip().lower()
    if label in BUY_ALIASES:
        return TradeDirection.BUY
    if label in SELL_ALIASES:
        return TradeDirection.SELL
    raise ValueError(f"Unknown trade direction: {value!r}")
