"""CLI entry point for backtesting and market structure analysis.

Usage:
    python -m backtest --data prices.csv
    python -m backtest --data prices.csv --strategy rsi_reversal --rsi-buy 25
    python -m backtest --data prices.csv --all
    python -m backtest --data prices.csv --analyze --output analysis.json
    python -m backtest --data prices.csv --export prices.json --symbol BTCUSDT
    python -m backtest --data prices.csv --export exports/ --export-format json
    python -m backtest --list-strategies
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from marketcore.models.config import StrategyConfig, StrategyType
from marketcore.strategy import describe_strategies
from marketcore.structure import run_analysis

from backtest import export
from backtest.config import get_backtest_settings
from backtest.data_loader import load_candles
from backtest.report import ReportFormatter
from backtest.runner import BacktestRunner

logger = logging.getLogger("backtest")


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="python -m backtest",
        description="Backtest trading strategies and analyze market structure on OHLCV data",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m backtest --data prices.csv
  python -m backtest --data prices.csv --strategy ema_crossover --fast 9 --slow 21
  python -m backtest --data prices.csv --all
  python -m backtest --data prices.csv --analyze
  python -m backtest --list-strategies
        """,
    )

    parser.add_argument(
        "--list-strategies",
        action="store_true",
        help="List available strategies and exit",
    )
    parser.add_argument(
        "--data",
        type=str,
        default=None,
        help="OHLCV input file (.csv or .json)",
    )

    # Strategy parameters
    parser.add_argument(
        "--strategy",
        type=str,
        default=None,
        help="Strategy name (default: BACKTEST_STRATEGY or sma_crossover)",
    )
    parser.add_argument("--fast", type=int, default=None, help="Fast period / band period")
    parser.add_argument("--slow", type=int, default=None, help="Slow period")
    parser.add_argument("--rsi-period", type=int, default=None, help="RSI period")
    parser.add_argument("--rsi-buy", type=float, default=None, help="RSI buy threshold")
    parser.add_argument("--rsi-sell", type=float, default=None, help="RSI sell threshold")
    parser.add_argument("--capital", type=float, default=None, help="Initial capital")

    # Modes
    parser.add_argument(
        "--all",
        action="store_true",
        help="Run every strategy with defaults and print a comparison",
    )
    parser.add_argument(
        "--analyze",
        action="store_true",
        help="Print market structure analysis instead of a backtest",
    )
    parser.add_argument(
        "--export",
        type=str,
        default=None,
        help="Re-export the loaded series to a .csv or .json file, or into a directory",
    )
    parser.add_argument(
        "--export-format",
        choices=["csv", "json"],
        default="csv",
        help="File type when --export names a directory (default: csv)",
    )
    parser.add_argument("--symbol", type=str, default=None, help="Symbol label for exports")
    parser.add_argument("--timeframe", type=str, default=None, help="Timeframe label for exports")

    parser.add_argument(
        "--output",
        type=str,
        default=None,
        help="Save JSON report to file",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )

    args = parser.parse_args(argv)
    if not args.list_strategies and not args.data:
        parser.error("--data is required unless --list-strategies is given")
    return args


def cmd_list_strategies() -> None:
    print(f"\n{'Name':<20} {'Display name':<18} {'Indicators':<14} Description")
    print("-" * 85)
    for name, display_name, description, indicators in describe_strategies():
        print(f"{name:<20} {display_name:<18} {', '.join(indicators):<14} {description}")


def build_config(args: argparse.Namespace, default_strategy: str) -> StrategyConfig:
    return StrategyConfig(
        type=StrategyType(args.strategy or default_strategy),
        fast_period=args.fast,
        slow_period=args.slow,
        rsi_period=args.rsi_period,
        rsi_buy_threshold=args.rsi_buy,
        rsi_sell_threshold=args.rsi_sell,
        initial_capital=args.capital,
    )


def run(args: argparse.Namespace) -> None:
    settings = get_backtest_settings()

    if args.list_strategies:
        cmd_list_strategies()
        return

    candles = load_candles(args.data)

    if args.export:
        symbol = args.symbol or settings.symbol
        timeframe = args.timeframe or settings.timeframe
        target = Path(args.export)
        if target.is_dir():
            target = target / export.default_filename(symbol, timeframe, args.export_format)
        export.save(candles, target, symbol=symbol, timeframe=timeframe)
        return

    if args.analyze:
        analysis = run_analysis(candles)
        ReportFormatter.print_analysis(analysis)
        if args.output:
            ReportFormatter.save_json(ReportFormatter.analysis_to_dict(analysis), args.output)
        return

    runner = BacktestRunner(settings)

    if args.all:
        results = runner.run_all(candles, initial_capital=args.capital)
        ReportFormatter.print_comparison(results)
        if args.output:
            ReportFormatter.save_json(
                {"results": [ReportFormatter.to_dict(r) for r in results]}, args.output
            )
        return

    result = runner.run(candles, build_config(args, settings.strategy))
    ReportFormatter.print_console(result)
    if args.output:
        ReportFormatter.save_json(ReportFormatter.to_dict(result), args.output)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    settings = get_backtest_settings()

    # Configure logging
    level = logging.DEBUG if args.verbose else getattr(logging, settings.log_level.upper(), logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )

    try:
        run(args)
    except (ValueError, KeyError, OSError) as e:
        logger.error("%s", e)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
