"""Tests for the backtest engine simulation."""

import pytest

from backtest.engine import END_OF_PERIOD_REASON, BacktestEngine, run_backtest
from backtest.stats import TradeSide
from marketcore.models import Candle, InvalidSeriesError, StrategyConfig, StrategyType
from marketcore.strategy import Signal

DAY = 86400


def _candles(closes: list[float]) -> list[Candle]:
    return [
        Candle(time=1_700_000_000 + i * DAY, open=c, high=c + 1, low=c - 1, close=c, volume=500.0)
        for i, c in enumerate(closes)
    ]


def _cross_scenario() -> list[float]:
    """SMA 10/30 golden cross at bar 40 and death cross at bar 120.

    Flat at 100, jump to 110 and climb to 148, hold 150 until both
    averages meet, then drop to 140 and keep falling.
    """
    closes = [100.0] * 40
    closes += [110.0 + 2 * k for k in range(20)]  # bars 40-59
    closes += [150.0] * 60  # bars 60-119
    closes += [140.0 - k for k in range(31)]  # bars 120-150
    return closes


def _sma_config(**kwargs) -> StrategyConfig:
    return StrategyConfig(type=StrategyType.SMA_CROSSOVER, **kwargs)


class TestCrossScenario:
    def test_single_round_trip(self):
        candles = _candles(_cross_scenario())
        result = run_backtest(candles, _sma_config())

        assert [t.side for t in result.trades] == [TradeSide.BUY, TradeSide.SELL]
        buy, sell = result.trades
        assert buy.time == candles[40].time
        assert buy.price == 110.0
        assert buy.reason == "SMA Golden Cross"
        assert sell.time == candles[120].time
        assert sell.price == 140.0
        assert sell.reason == "SMA Death Cross"

        assert result.strategy == "SMA Crossover"
        assert result.total_trades == 1
        assert result.winning_trades == 1
        assert result.win_rate == 100.0
        assert result.total_return == pytest.approx((140 - 110) / 110 * 100)
        assert result.final_equity == pytest.approx(10000 * 140 / 110)

    def test_equity_curve(self):
        candles = _candles(_cross_scenario())
        result = run_backtest(candles, _sma_config(initial_capital=1000.0))

        assert len(result.equity) == len(candles)
        assert [p.time for p in result.equity] == [c.time for c in candles]
        # Flat before the entry, marked to market while long, flat after the exit
        assert result.equity[39].value == 1000.0
        assert result.equity[60].value == pytest.approx(1000.0 / 110 * 150)
        assert result.equity[-1].value == result.equity[120].value

    def test_drawdown_while_long(self):
        result = run_backtest(_candles(_cross_scenario()), _sma_config())
        # Peak 150 -> exit 140
        assert result.max_drawdown == pytest.approx((150 - 140) / 150 * 100)


class TestSimulate:
    def _engine(self, capital: float = 1000.0) -> BacktestEngine:
        return BacktestEngine(_sma_config(initial_capital=capital))

    def test_redundant_signals_ignored(self):
        candles = _candles([10.0, 11.0, 12.0, 13.0, 14.0])
        signals = [Signal.SELL, Signal.BUY, Signal.BUY, Signal.SELL, Signal.SELL]
        trades, equity = self._engine().simulate(candles, signals)

        assert [(t.side, t.price) for t in trades] == [
            (TradeSide.BUY, 11.0),
            (TradeSide.SELL, 13.0),
        ]
        assert equity[0].value == 1000.0
        assert equity[2].value == pytest.approx(1000.0 / 11 * 12)
        assert equity[4].value == pytest.approx(1000.0 / 11 * 13)

    def test_trades_alternate(self):
        candles = _candles([10.0, 12.0, 11.0, 13.0, 12.0, 14.0])
        signals = [Signal.BUY, Signal.SELL] * 3
        trades, _ = self._engine().simulate(candles, signals)

        sides = [t.side for t in trades]
        assert sides == [TradeSide.BUY, TradeSide.SELL] * 3

    def test_open_position_closed_at_end(self):
        candles = _candles([10.0, 11.0, 12.0])
        trades, equity = self._engine().simulate(candles, [Signal.BUY, Signal.HOLD, Signal.HOLD])

        assert len(trades) == 2
        assert trades[-1].side == TradeSide.SELL
        assert trades[-1].price == 12.0
        assert trades[-1].time == candles[-1].time
        assert trades[-1].reason == END_OF_PERIOD_REASON
        assert len(equity) == 3

    def test_signal_length_mismatch(self):
        with pytest.raises(ValueError):
            self._engine().simulate(_candles([10.0, 11.0]), [Signal.HOLD])

    def test_no_signals_keeps_cash(self):
        candles = _candles([10.0, 5.0, 20.0])
        trades, equity = self._engine().simulate(candles, [Signal.HOLD] * 3)
        assert trades == []
        assert all(p.value == 1000.0 for p in equity)


class TestBacktestEngine:
    def test_defaults_resolved(self):
        engine = BacktestEngine(StrategyConfig(type=StrategyType.RSI_REVERSAL))
        assert engine.initial_capital == 10000.0
        assert engine.strategy.rsi_period == 14
        assert engine.strategy.display_name == "RSI Reversal"

    def test_force_close_in_run(self):
        closes = [100.0] * 40 + [110.0 + k for k in range(20)]
        result = run_backtest(_candles(closes), _sma_config())

        assert result.trades[-1].reason == END_OF_PERIOD_REASON
        assert result.total_trades == 1
        assert result.total_return == pytest.approx((129 - 110) / 110 * 100)

    def test_rejects_unordered_series(self):
        candles = _candles([100.0] * 40)
        candles[3], candles[4] = candles[4], candles[3]
        with pytest.raises(InvalidSeriesError):
            run_backtest(candles, _sma_config())

    def test_flat_series_no_trades(self):
        result = run_backtest(_candles([100.0] * 60), _sma_config())

        assert result.trades == []
        assert result.total_trades == 0
        assert result.total_return == 0.0
        assert result.max_drawdown == 0.0
        assert result.win_rate == 0.0
        assert result.profit_factor == 0.0

    def test_bollinger_round_trip(self):
        closes = [100.0] * 25 + [90.0, 110.0] + [100.0] * 9
        result = run_backtest(
            _candles(closes), StrategyConfig(type=StrategyType.BOLLINGER_BOUNCE)
        )

        buy, sell = result.trades
        assert (buy.price, buy.reason) == (100.0, "Price at lower BB")
        assert (sell.price, sell.reason) == (110.0, "Price at upper BB")
        assert result.total_return == pytest.approx(10.0)
