"""Tests for the command-line entry point."""

import json

import pytest

import backtest.config
from backtest import export
from backtest.__main__ import main
from backtest.config import BacktestSettings
from marketcore.models import Candle

DAY = 86400


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch):
    """Use default settings regardless of the environment or a local .env."""
    monkeypatch.setattr(backtest.config, "_settings", BacktestSettings(_env_file=None))


@pytest.fixture
def data_file(tmp_path):
    closes = [100.0] * 40 + [110.0 + 2 * k for k in range(20)] + [150.0] * 60 + [140.0 - k for k in range(31)]
    candles = [
        Candle(time=1_700_000_000 + i * DAY, open=c, high=c + 1, low=c - 1, close=c, volume=100.0)
        for i, c in enumerate(closes)
    ]
    path = tmp_path / "prices.csv"
    export.save_csv(candles, path)
    return path


class TestCLI:
    def test_list_strategies(self, capsys):
        assert main(["--list-strategies"]) == 0
        out = capsys.readouterr().out

        for name in ("sma_crossover", "ema_crossover", "rsi_reversal", "bollinger_bounce"):
            assert name in out
        assert "Bollinger Bounce" in out
        assert "sma10, sma30" in out

    def test_data_required(self):
        with pytest.raises(SystemExit) as exc_info:
            main([])
        assert exc_info.value.code == 2

    def test_single_backtest(self, data_file, tmp_path, capsys):
        output = tmp_path / "result.json"
        assert main(["--data", str(data_file), "--strategy", "sma_crossover", "--output", str(output)]) == 0

        assert "BACKTEST RESULTS: SMA Crossover" in capsys.readouterr().out
        report = json.loads(output.read_text())
        assert report["metrics"]["total_trades"] == 1
        assert [t["side"] for t in report["trades"]] == ["buy", "sell"]

    def test_strategy_parameters(self, data_file, tmp_path):
        output = tmp_path / "result.json"
        args = ["--data", str(data_file), "--strategy", "ema_crossover", "--fast", "5", "--slow", "15",
                "--capital", "2000", "--output", str(output)]
        assert main(args) == 0

        report = json.loads(output.read_text())
        assert report["strategy"] == "EMA Crossover"
        assert report["initial_capital"] == 2000.0

    def test_compare_all(self, data_file, tmp_path, capsys):
        output = tmp_path / "all.json"
        assert main(["--data", str(data_file), "--all", "--output", str(output)]) == 0

        assert "STRATEGY COMPARISON" in capsys.readouterr().out
        assert len(json.loads(output.read_text())["results"]) == 4

    def test_analyze(self, data_file, tmp_path, capsys):
        output = tmp_path / "analysis.json"
        assert main(["--data", str(data_file), "--analyze", "--output", str(output)]) == 0

        assert "MARKET STRUCTURE ANALYSIS" in capsys.readouterr().out
        analysis = json.loads(output.read_text())
        assert analysis["trend"] in ("bullish", "bearish", "sideways")
        assert -100 <= analysis["sentiment_score"] <= 100

    def test_export(self, data_file, tmp_path):
        output = tmp_path / "prices.json"
        assert main(["--data", str(data_file), "--export", str(output), "--symbol", "BTCUSDT",
                     "--timeframe", "1d"]) == 0

        payload = json.loads(output.read_text())
        assert payload["symbol"] == "BTCUSDT"
        assert payload["dataPoints"] == 151

    @pytest.mark.parametrize("fmt", ["csv", "json"])
    def test_export_into_directory(self, data_file, tmp_path, fmt):
        out_dir = tmp_path / "exports"
        out_dir.mkdir()
        args = ["--data", str(data_file), "--export", str(out_dir), "--export-format", fmt,
                "--symbol", "ETHUSDT", "--timeframe", "4h"]
        assert main(args) == 0

        written = list(out_dir.iterdir())
        assert len(written) == 1
        assert written[0].name.startswith("chartwise_ETHUSDT_4h_")
        assert written[0].suffix == f".{fmt}"

    def test_export_directory_defaults_to_csv(self, data_file, tmp_path):
        assert main(["--data", str(data_file), "--export", str(tmp_path)]) == 0

        written = list(tmp_path.glob("chartwise_*"))
        assert [p.name.split("_")[1:3] for p in written] == [["UNKNOWN", "1d"]]
        assert written[0].read_text().startswith("Date,Open,High,Low,Close,Volume")

    def test_unknown_strategy_fails(self, data_file):
        assert main(["--data", str(data_file), "--strategy", "does_not_exist"]) == 1

    def test_missing_file_fails(self, tmp_path):
        assert main(["--data", str(tmp_path / "missing.csv")]) == 1

    def test_too_few_bars_fails(self, tmp_path):
        path = tmp_path / "short.csv"
        candles = [
            Candle(time=1_700_000_000 + i * DAY, open=100.0, high=101.0, low=99.0, close=100.0)
            for i in range(10)
        ]
        export.save_csv(candles, path)
        assert main(["--data", str(path)]) == 1
