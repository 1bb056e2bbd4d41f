"""Export candle series to CSV or JSON.

CSV: header `Date,Open,High,Low,Close,Volume`, ISO-8601 UTC dates and
prices with two decimals. JSON: an envelope with symbol, timeframe,
export time and the bars under "data" (readable by backtest.data_loader).
"""

from __future__ import annotations

import csv
import io
import json
import logging
from datetime import date, datetime, timezone
from pathlib import Path
from typing import Sequence

from marketcore.models.candle import Candle

logger = logging.getLogger(__name__)

CSV_HEADER = ["Date", "Open", "High", "Low", "Close", "Volume"]


def _iso(timestamp: int) -> str:
    dt = datetime.fromtimestamp(timestamp, tz=timezone.utc)
    return dt.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def default_filename(symbol: str, timeframe: str, ext: str, today: date | None = None) -> str:
    """Build `chartwise_{symbol}_{timeframe}_{YYYY-MM-DD}.{ext}`."""
    today = today or datetime.now(timezone.utc).date()
    return f"chartwise_{symbol}_{timeframe}_{today.isoformat()}.{ext}"


def to_csv(candles: Sequence[Candle]) -> str:
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(CSV_HEADER)
    for c in candles:
        writer.writerow(
            [
                _iso(c.time),
                f"{c.open:.2f}",
                f"{c.high:.2f}",
                f"{c.low:.2f}",
                f"{c.close:.2f}",
                f"{c.volume:.2f}" if c.volume else "0",
            ]
        )
    return buffer.getvalue().rstrip("\n")


def to_json(
    candles: Sequence[Candle],
    symbol: str,
    timeframe: str,
    exported_at: datetime | None = None,
) -> str:
    exported_at = exported_at or datetime.now(timezone.utc)
    payload = {
        "symbol": symbol,
        "timeframe": timeframe,
        "exportedAt": exported_at.isoformat(timespec="milliseconds").replace("+00:00", "Z"),
        "dataPoints": len(candles),
        "data": [
            {
                "date": _iso(c.time),
                "open": c.open,
                "high": c.high,
                "low": c.low,
                "close": c.close,
                "volume": c.volume or 0,
            }
            for c in candles
        ],
    }
    return json.dumps(payload, indent=2)


def save_csv(candles: Sequence[Candle], filepath: str | Path) -> None:
    Path(filepath).write_text(to_csv(candles), encoding="utf-8")
    logger.info("Exported %d candles to %s", len(candles), filepath)


def save_json(candles: Sequence[Candle], filepath: str | Path, symbol: str, timeframe: str) -> None:
    Path(filepath).write_text(to_json(candles, symbol, timeframe), encoding="utf-8")
    logger.info("Exported %d candles to %s", len(candles), filepath)


def save(candles: Sequence[Candle], filepath: str | Path, symbol: str, timeframe: str) -> None:
    """Export to CSV or JSON, chosen by the file extension."""
    suffix = Path(filepath).suffix.lower()
    if suffix == ".csv":
        save_csv(candles, filepath)
    elif suffix == ".json":
        save_json(candles, filepath, symbol, timeframe)
    else:
        raise ValueError(f"Unsupported export type '{suffix}' (expected .csv or .json)")
