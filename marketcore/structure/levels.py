"""Support and resistance levels from clustered pivots.

Pivot prices on the same side that lie within a tolerance band of an
existing level are merged into it; the level price becomes the
touch-weighted mean of everything merged so far.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from marketcore.models.analysis import LevelKind, SupportResistance
from marketcore.models.candle import Candle, highs, lows
from marketcore.structure.pivots import Pivots, find_pivots

TOUCH_STRENGTH = 25


@dataclass
class _Cluster:
    price: float
    kind: LevelKind
    touches: int


def _add_touch(clusters: list[_Cluster], price: float, kind: LevelKind, threshold: float) -> None:
    for idx, cluster in enumerate(clusters):
        if cluster.kind == kind and abs(cluster.price - price) < threshold:
            merged = _Cluster(
                price=(cluster.price * cluster.touches + price) / (cluster.touches + 1),
                kind=kind,
                touches=cluster.touches + 1,
            )
            # An updated level moves to the back of the list
            del clusters[idx]
            clusters.append(merged)
            return

    clusters.append(_Cluster(price=price, kind=kind, touches=1))


def detect_support_resistance(
    candles: Sequence[Candle],
    sensitivity: float = 0.02,
    lookback: int = 5,
    min_touches: int = 2,
    max_levels: int = 6,
    pivots: Pivots | None = None,
) -> list[SupportResistance]:
    """
    Cluster pivot highs into resistance and pivot lows into support.

    Args:
        candles: Candle series, oldest first
        sensitivity: Merge tolerance as a fraction of the series price range
        lookback: Pivot lookback, used when `pivots` is not supplied
        min_touches: Levels touched fewer times are dropped
        max_levels: Maximum number of levels returned

    Returns:
        Strongest levels first; strength = min(100, touches * 25)
    """
    if not candles:
        return []
    if pivots is None:
        pivots = find_pivots(candles, lookback)

    price_range = float(highs(candles).max() - lows(candles).min())
    threshold = price_range * sensitivity

    clusters: list[_Cluster] = []
    for idx in pivots.peaks:
        _add_touch(clusters, candles[idx].high, LevelKind.RESISTANCE, threshold)
    for idx in pivots.troughs:
        _add_touch(clusters, candles[idx].low, LevelKind.SUPPORT, threshold)

    levels = [
        SupportResistance(
            price=cluster.price,
            kind=cluster.kind,
            strength=min(100, cluster.touches * TOUCH_STRENGTH),
            touches=cluster.touches,
        )
        for cluster in clusters
        if cluster.touches >= min_touches
    ]

    # sorted() is stable: equal strengths keep list order
    levels = sorted(levels, key=lambda level: level.strength, reverse=True)
    return levels[:max_levels]
