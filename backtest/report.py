"""Report formatting for backtest and analysis results.

Outputs results to console (formatted tables) and JSON files.
"""

from __future__ import annotations

import json
import math
from datetime import datetime, timezone

from marketcore.models.analysis import MarketAnalysis

from backtest.stats import BacktestResult


def _json_float(value: float) -> float | str | None:
    """JSON has no NaN/Infinity: NaN -> null, inf -> "inf"."""
    if math.isnan(value):
        return None
    if math.isinf(value):
        return "inf" if value > 0 else "-inf"
    return value


def _fmt_time(timestamp: int) -> str:
    return f"{datetime.fromtimestamp(timestamp, tz=timezone.utc):%Y-%m-%d %H:%M}"


class ReportFormatter:
    """Format backtest and analysis results for display and export."""

    @staticmethod
    def print_console(result: BacktestResult) -> None:
        """Print formatted backtest report to console."""
        print("\n" + "=" * 70)
        print(f"  BACKTEST RESULTS: {result.strategy}")
        print("=" * 70)
        if result.equity:
            print(
                f"  Period: {_fmt_time(result.equity[0].time)} → {_fmt_time(result.equity[-1].time)}"
                f" ({len(result.equity)} bars)"
            )
        print(f"  Initial capital: {result.initial_capital:,.2f}")

        print("\n" + "-" * 70)
        print("  PERFORMANCE")
        print("-" * 70)
        print(f"  Final equity:   {result.final_equity:,.2f}")
        print(f"  Total return:   {result.total_return:+.2f}%")
        print(f"  Max drawdown:   {result.max_drawdown:.2f}%")
        print(f"  Sharpe ratio:   {result.sharpe_ratio:.2f}")
        print(f"  Profit factor:  {result.profit_factor:.2f}")
        print(f"  Trades:         {result.total_trades}")
        print(f"  Wins / Losses:  {result.winning_trades} / {result.losing_trades}")
        print(f"  Win rate:       {result.win_rate:.1f}%")

        if result.trades:
            print("\n" + "-" * 70)
            print("  TRADES")
            print("-" * 70)
            print(f"  {'Side':<6} {'Time':<17} {'Price':>12}  Reason")
            for t in result.trades:
                print(f"  {t.side.value.upper():<6} {_fmt_time(t.time):<17} {t.price:>12.2f}  {t.reason}")

        print("\n" + "=" * 70)

    @staticmethod
    def print_comparison(results: list[BacktestResult]) -> None:
        """Print one summary row per strategy."""
        print("\n" + "=" * 70)
        print("  STRATEGY COMPARISON")
        print("=" * 70)
        print(f"  {'Strategy':<18} {'Return%':>9} {'MaxDD%':>8} {'Trades':>7} {'Win%':>7} {'Sharpe':>7}")
        for r in results:
            print(
                f"  {r.strategy:<18} {r.total_return:>+9.2f} {r.max_drawdown:>8.2f}"
                f" {r.total_trades:>7} {r.win_rate:>6.1f}% {r.sharpe_ratio:>7.2f}"
            )
        print("=" * 70)

    @staticmethod
    def print_analysis(analysis: MarketAnalysis) -> None:
        """Print formatted market structure analysis."""
        print("\n" + "=" * 70)
        print("  MARKET STRUCTURE ANALYSIS")
        print("=" * 70)
        print(f"  Trend:          {analysis.trend.value} (strength {analysis.trend_strength})")
        print(f"  Sentiment:      {analysis.sentiment_score:+d}")
        print(f"  Recommendation: {analysis.recommendation.value}")
        print(f"  {analysis.summary}")

        if analysis.support_resistance:
            print("\n" + "-" * 70)
            print("  SUPPORT / RESISTANCE")
            print("-" * 70)
            print(f"  {'Type':<12} {'Price':>12} {'Touches':>8} {'Strength':>9}")
            for lvl in analysis.support_resistance:
                print(f"  {lvl.kind.value:<12} {lvl.price:>12.2f} {lvl.touches:>8} {lvl.strength:>9}")

        if analysis.trendlines:
            print("\n" + "-" * 70)
            print("  TRENDLINES")
            print("-" * 70)
            for line in analysis.trendlines:
                print(
                    f"  {line.kind.value:<12} {line.start_price:.2f} → {line.end_price:.2f}"
                    f"  (R² {line.strength}%)"
                )

        if analysis.patterns:
            print("\n" + "-" * 70)
            print("  PATTERNS")
            print("-" * 70)
            for p in analysis.patterns:
                print(f"  {p.name:<16} {p.bias.value:<8} {p.confidence:>3}%  bars {p.start_index}-{p.end_index}")

        print("\n" + "=" * 70)

    @staticmethod
    def to_dict(result: BacktestResult) -> dict:
        """Convert backtest results to JSON-serializable dict."""
        return {
            "strategy": result.strategy,
            "initial_capital": result.initial_capital,
            "metrics": {
                "final_equity": round(result.final_equity, 2),
                "total_return": round(result.total_return, 4),
                "max_drawdown": round(result.max_drawdown, 4),
                "sharpe_ratio": round(result.sharpe_ratio, 4),
                "profit_factor": _json_float(result.profit_factor),
                "total_trades": result.total_trades,
                "winning_trades": result.winning_trades,
                "losing_trades": result.losing_trades,
                "win_rate": round(result.win_rate, 2),
            },
            "trades": [
                {
                    "side": t.side.value,
                    "time": t.time,
                    "price": t.price,
                    "reason": t.reason,
                }
                for t in result.trades
            ],
            "equity": [{"time": p.time, "value": p.value} for p in result.equity],
        }

    @staticmethod
    def analysis_to_dict(analysis: MarketAnalysis) -> dict:
        """Convert market analysis to JSON-serializable dict."""
        return {
            "trend": analysis.trend.value,
            "trend_strength": analysis.trend_strength,
            "sentiment_score": analysis.sentiment_score,
            "recommendation": analysis.recommendation.value,
            "summary": analysis.summary,
            "trendlines": [
                {
                    "kind": line.kind.value,
                    "start_time": line.start_time,
                    "start_price": line.start_price,
                    "end_time": line.end_time,
                    "end_price": line.end_price,
                    "strength": line.strength,
                }
                for line in analysis.trendlines
            ],
            "support_resistance": [
                {
                    "kind": lvl.kind.value,
                    "price": lvl.price,
                    "touches": lvl.touches,
                    "strength": lvl.strength,
                }
                for lvl in analysis.support_resistance
            ],
            "patterns": [
                {
                    "name": p.name,
                    "bias": p.bias.value,
                    "confidence": p.confidence,
                    "start_index": p.start_index,
                    "end_index": p.end_index,
                    "description": p.description,
                }
                for p in analysis.patterns
            ],
        }

    @staticmethod
    def save_json(data: dict, filepath: str) -> None:
        """Save a report dict to a JSON file."""
        with open(filepath, "w") as f:
            json.dump(data, f, indent=2)
        print(f"\nResults saved to {filepath}")
