"""Tests for close-series technical indicators."""

import math

import numpy as np
import pytest

from marketcore.indicators import (
    bollinger_bands,
    ema,
    macd,
    rsi,
    sma,
    stochastic_rsi,
)


def _rising(n: int = 252, start: float = 100.0, end: float = 200.0) -> list[float]:
    """Monotonic closes from start to end."""
    step = (end - start) / (n - 1)
    return [start + i * step for i in range(n)]


def _zigzag(n: int = 80) -> list[float]:
    """Noisy closes with both gains and losses in every window."""
    return [100 + 5 * math.sin(i * 0.7) + 0.3 * i for i in range(n)]


class TestSMA:
    """Tests for SMA calculation."""

    def test_sma_basic(self):
        values = [float(i) for i in range(1, 11)]  # 1-10
        result = sma(values, 3)

        # First 2 values should be NaN
        assert np.isnan(result[0])
        assert np.isnan(result[1])

        # (1+2+3)/3 = 2, (2+3+4)/3 = 3
        assert result[2] == 2.0
        assert result[3] == 3.0
        assert len(result) == 10

    def test_sma_constant_series(self):
        result = sma([42.0] * 30, 7)
        assert all(v == 42.0 for v in result[6:])

    def test_sma_insufficient_data(self):
        result = sma([100.0, 101.0, 102.0], 10)
        assert len(result) == 3
        assert np.isnan(result).all()

    def test_sma_invalid_period(self):
        with pytest.raises(ValueError):
            sma([1.0, 2.0], 0)

    @pytest.mark.parametrize("period", [1, 5, 20])
    def test_sma_warmup_then_finite(self, period):
        result = sma(_zigzag(), period)
        assert np.isnan(result[: period - 1]).all()
        assert np.isfinite(result[period - 1 :]).all()


class TestEMA:
    """Tests for EMA calculation."""

    def test_ema_basic(self):
        values = [float(i) for i in range(1, 11)]  # 1-10
        result = ema(values, 5)

        # First 4 values should be NaN
        assert np.isnan(result[0])
        assert np.isnan(result[3])

        # 5th value should be SMA of first 5 = (1+2+3+4+5)/5 = 3
        assert result[4] == 3.0

        # (6 - 3) * 2/6 + 3 = 4
        assert result[5] == pytest.approx(4.0)
        assert result[5] > result[4]

    @pytest.mark.parametrize("period", [2, 9, 12, 26])
    def test_ema_seed_equals_sma(self, period):
        values = _zigzag()
        assert ema(values, period)[period - 1] == sma(values, period)[period - 1]

    def test_ema_insufficient_data(self):
        result = ema([100.0, 101.0, 102.0], 10)

        assert len(result) == 3
        assert np.isnan(result).all()


class TestRSI:
    """Tests for RSI calculation (trailing mean of gains/losses)."""

    def test_rsi_balanced_window(self):
        # Deltas +1, -1, +1, -1 -> equal average gain and loss
        result = rsi([10.0, 11.0, 10.0, 11.0, 10.0], 2)

        assert np.isnan(result[0])
        assert np.isnan(result[1])
        assert result[2] == pytest.approx(50.0)
        assert result[3] == pytest.approx(50.0)

    def test_rsi_no_losses_is_100(self):
        result = rsi([1.0, 2.0, 3.0, 4.0, 5.0, 6.0], 3)
        assert all(v == 100.0 for v in result[3:])

    def test_rsi_flat_window_is_100(self):
        # No losses at all, including no gains
        result = rsi([42.0] * 20, 14)
        assert all(v == 100.0 for v in result[14:])

    def test_rsi_only_losses_is_0(self):
        result = rsi([10.0, 9.0, 8.0, 7.0, 6.0], 3)
        assert result[3] == 0.0
        assert result[4] == 0.0

    def test_rsi_uses_simple_mean(self):
        # Window deltas: +2, -1, +3 -> avg gain 5/3, avg loss 1/3, RS 5
        result = rsi([10.0, 12.0, 11.0, 14.0], 3)
        assert result[3] == pytest.approx(100 - 100 / 6)

    def test_rsi_bounds(self):
        result = rsi(_zigzag(200), 14)
        valid = result[14:]
        assert np.isnan(result[:14]).all()
        assert ((valid >= 0) & (valid <= 100)).all()


class TestMACD:
    """Tests for MACD line, signal and histogram."""

    def test_macd_alignment(self):
        closes = _zigzag(80)
        result = macd(closes)

        assert len(result.macd) == len(result.signal) == len(result.histogram) == 80
        # MACD defined once the slow EMA is (index 25)
        assert np.isnan(result.macd[:25]).all()
        assert np.isfinite(result.macd[25:]).all()
        # Signal needs 9 MACD values (index 25 + 8)
        assert np.isnan(result.signal[:33]).all()
        assert np.isfinite(result.signal[33:]).all()

    def test_macd_line_is_ema_difference(self):
        closes = _zigzag(60)
        result = macd(closes, 12, 26, 9)
        expected = ema(closes, 12)[40] - ema(closes, 26)[40]
        assert result.macd[40] == expected

    def test_signal_is_ema_of_defined_macd(self):
        closes = _zigzag(60)
        result = macd(closes)
        compact = ema(result.macd[25:], 9)
        assert result.signal[33] == compact[8]
        assert result.signal[59] == compact[-1]

    def test_histogram(self):
        result = macd(_zigzag(60))
        assert result.histogram[50] == pytest.approx(result.macd[50] - result.signal[50])

    def test_constant_series_histogram_zero(self):
        result = macd([42.0] * 50)
        assert all(v == 0.0 for v in result.histogram[33:])
        assert all(v == 0.0 for v in result.signal[33:])

    def test_short_series(self):
        result = macd([100.0] * 10)
        assert np.isnan(result.macd).all()
        assert np.isnan(result.signal).all()


class TestBollingerBands:
    """Tests for Bollinger Bands."""

    def test_constant_series_collapses(self):
        bands = bollinger_bands([42.0] * 50)
        for i in range(19, 50):
            assert bands.upper[i] == bands.middle[i] == bands.lower[i] == 42.0

    def test_population_std(self):
        # window [1, 2, 3]: mean 2, population variance 2/3
        bands = bollinger_bands([1.0, 2.0, 3.0], period=3, std_dev=1.0)
        assert bands.middle[2] == 2.0
        assert bands.upper[2] == pytest.approx(2 + math.sqrt(2 / 3))
        assert bands.lower[2] == pytest.approx(2 - math.sqrt(2 / 3))

    def test_band_ordering(self):
        bands = bollinger_bands(_zigzag(100))
        assert np.isnan(bands.upper[:19]).all()
        for i in range(19, 100):
            assert bands.upper[i] >= bands.middle[i] >= bands.lower[i]


class TestStochasticRSI:
    """Tests for Stochastic RSI."""

    def test_warmup_propagates_through_smoothing(self):
        result = stochastic_rsi(_zigzag(80))

        # raw %K at 27, smoothed %K at 27 + 2, %D at 29 + 2
        assert np.isnan(result.k[:29]).all()
        assert np.isfinite(result.k[29:]).all()
        assert np.isnan(result.d[:31]).all()
        assert np.isfinite(result.d[31:]).all()

    def test_flat_rsi_is_50(self):
        # Strictly rising closes keep RSI pinned at 100, so max == min
        result = stochastic_rsi(_rising(60))
        assert all(v == 50.0 for v in result.k[29:])
        assert all(v == 50.0 for v in result.d[31:])

    def test_range(self):
        result = stochastic_rsi(_zigzag(150))
        valid = result.k[~np.isnan(result.k)]
        assert ((valid >= 0) & (valid <= 100)).all()


class TestScenarios:
    """End-to-end indicator scenarios."""

    def test_rising_year(self):
        closes = _rising(252)
        sma20 = sma(closes, 20)
        sma50 = sma(closes, 50)

        assert all(sma20[i] > sma20[i - 1] for i in range(20, 252))
        assert all(sma50[i] > sma50[i - 1] for i in range(50, 252))
        assert sma20[-1] > sma50[-1]

        rsi_values = rsi(closes, 14)
        assert all(v == 100.0 for v in rsi_values[14:])

    def test_constant_42(self):
        closes = [42.0] * 50
        bands = bollinger_bands(closes)
        assert bands.upper[-1] == bands.middle[-1] == bands.lower[-1] == 42.0
        assert all(v == 100.0 for v in rsi(closes)[14:])
        assert all(v == 0.0 for v in macd(closes).histogram[33:])
