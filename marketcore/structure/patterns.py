"""Chart pattern recognition on pivot sequences."""

from __future__ import annotations

from typing import Sequence

from marketcore.models.analysis import Bias, Pattern
from marketcore.models.candle import Candle
from marketcore.numeric import round_half_up
from marketcore.structure.pivots import Pivots, find_pivots

TREND_PATTERN_CONFIDENCE = 80


def _double_pattern(
    indices: list[int],
    prices: list[float],
    name: str,
    bias: Bias,
    description: str,
    tolerance: float,
    min_separation: int,
) -> Pattern | None:
    if len(indices) < 2:
        return None

    first_idx, second_idx = indices[-2], indices[-1]
    first, second = prices[-2], prices[-1]
    price_diff = abs(first - second) / first

    if price_diff < tolerance and second_idx - first_idx >= min_separation:
        return Pattern(
            name=name,
            bias=bias,
            confidence=round_half_up((1 - price_diff) * 100),
            start_index=first_idx,
            end_index=second_idx,
            description=description,
        )
    return None


def detect_patterns(
    candles: Sequence[Candle],
    lookback: int = 5,
    min_bars: int = 20,
    tolerance: float = 0.02,
    min_separation: int = 5,
    pivots: Pivots | None = None,
) -> list[Pattern]:
    """
    Detect double tops/bottoms and higher/lower highs.

    - Double Top: last two peaks within `tolerance` of each other and at
      least `min_separation` bars apart (bearish).
    - Double Bottom: the same on the last two troughs (bullish).
    - Higher Highs / Lower Highs: last three peaks strictly rising (bullish)
      or strictly falling (bearish), confidence 80.

    Series shorter than `min_bars` yield no patterns.
    """
    if len(candles) < min_bars:
        return []
    if pivots is None:
        pivots = find_pivots(candles, lookback)

    patterns: list[Pattern] = []

    double_top = _double_pattern(
        pivots.peaks,
        [candles[i].high for i in pivots.peaks],
        name="Double Top",
        bias=Bias.BEARISH,
        description="Two peaks at similar levels indicating potential reversal",
        tolerance=tolerance,
        min_separation=min_separation,
    )
    if double_top is not None:
        patterns.append(double_top)

    double_bottom = _double_pattern(
        pivots.troughs,
        [candles[i].low for i in pivots.troughs],
        name="Double Bottom",
        bias=Bias.BULLISH,
        description="Two troughs at similar levels indicating potential reversal",
        tolerance=tolerance,
        min_separation=min_separation,
    )
    if double_bottom is not None:
        patterns.append(double_bottom)

    if len(pivots.peaks) >= 3:
        recent = pivots.peaks[-3:]
        h0, h1, h2 = (candles[i].high for i in recent)

        if h0 < h1 < h2:
            patterns.append(
                Pattern(
                    name="Higher Highs",
                    bias=Bias.BULLISH,
                    confidence=TREND_PATTERN_CONFIDENCE,
                    start_index=recent[0],
                    end_index=recent[2],
                    description="Consecutive higher highs indicating uptrend",
                )
            )
        elif h0 > h1 > h2:
            patterns.append(
                Pattern(
                    name="Lower Highs",
                    bias=Bias.BEARISH,
                    confidence=TREND_PATTERN_CONFIDENCE,
                    start_index=recent[0],
                    end_index=recent[2],
                    description="Consecutive lower highs indicating downtrend",
                )
            )

    return patterns
