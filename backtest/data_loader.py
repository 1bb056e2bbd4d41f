"""Load OHLCV series from CSV or JSON files into Candle models.

CSV columns are matched case-insensitively: a time column (`time`,
`timestamp` or `date`), `open`, `high`, `low`, `close` and an optional
`volume`. Numeric times are epoch seconds; anything else is parsed as a
date string (UTC). JSON may be a list of bar objects or the export
envelope written by backtest.export (bars under "data").

Rows must already be oldest-first; out-of-order input is rejected rather
than re-sorted.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

import pandas as pd

from marketcore.models.candle import Candle, validate_series

logger = logging.getLogger(__name__)

TIME_COLUMNS = ("time", "timestamp", "date")
PRICE_COLUMNS = ("open", "high", "low", "close")


def _to_epoch_seconds(column: pd.Series) -> pd.Series:
    """Convert a time column to integer epoch seconds."""
    if pd.api.types.is_numeric_dtype(column):
        return column.astype("int64")
    parsed = pd.to_datetime(column, utc=True)
    return (parsed - pd.Timestamp(0, tz="UTC")) // pd.Timedelta(seconds=1)


def frame_to_candles(df: pd.DataFrame) -> list[Candle]:
    """Convert an OHLCV DataFrame to validated candles.

    Raises:
        ValueError: If required columns are missing or a bar is invalid.
        InvalidSeriesError: If timestamps are not strictly increasing.
    """
    df = df.rename(columns={c: str(c).strip().lower() for c in df.columns})

    time_col = next((c for c in TIME_COLUMNS if c in df.columns), None)
    missing = [c for c in PRICE_COLUMNS if c not in df.columns]
    if time_col is None:
        missing.insert(0, "time")
    if missing:
        raise ValueError(f"Missing OHLCV columns: {', '.join(missing)}")

    times = _to_epoch_seconds(df[time_col])
    has_volume = "volume" in df.columns

    candles = []
    for i in range(len(df)):
        volume = None
        if has_volume and not pd.isna(df["volume"].iloc[i]):
            volume = float(df["volume"].iloc[i])
        candles.append(
            Candle(
                time=int(times.iloc[i]),
                open=float(df["open"].iloc[i]),
                high=float(df["high"].iloc[i]),
                low=float(df["low"].iloc[i]),
                close=float(df["close"].iloc[i]),
                volume=volume,
            )
        )

    validate_series(candles)
    return candles


def load_csv(path: str | Path) -> list[Candle]:
    df = pd.read_csv(path)
    candles = frame_to_candles(df)
    logger.info("Loaded %d candles from %s", len(candles), path)
    return candles


def load_json(path: str | Path) -> list[Candle]:
    with open(path, encoding="utf-8") as f:
        payload = json.load(f)

    rows = payload["data"] if isinstance(payload, dict) else payload
    if not isinstance(rows, list):
        raise ValueError(f"Expected a list of bars in {path}")

    candles = frame_to_candles(pd.DataFrame(rows))
    logger.info("Loaded %d candles from %s", len(candles), path)
    return candles


def load_candles(path: str | Path) -> list[Candle]:
    """Load candles from a .csv or .json file, chosen by extension."""
    suffix = Path(path).suffix.lower()
    if suffix == ".csv":
        return load_csv(path)
    if suffix == ".json":
        return load_json(path)
    raise ValueError(f"Unsupported data file type '{suffix}' (expected .csv or .json)")
