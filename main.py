#!/usr/bin/env python3
"""
StockReport - Window statistics for a set of stocks as CSV

Usage:
    python main.py --from 2024-01-01                    # Default symbols
    python main.py --from 2024-01-01 -s NVDA,AAPL,MSFT
    python main.py --from 2024-01-01T00:00:00Z -w 50    # 50-day trailing average
    python main.py --from 2024-01-01 --provider fmp     # Financial Modeling Prep

Set ALPHA_VANTAGE_API_KEY or FMP_API_KEY env vars, or use --api-key.
"""

import argparse
import logging
import os
from datetime import datetime

from config import DEFAULT_SYMBOLS, ConfigError, ReportConfig, parse_period_start, parse_symbols
from providers import PROVIDERS, get_provider
from report import ReportPipeline

__version__ = "1.0"

API_KEY_ENV = {
    "alphavantage": "ALPHA_VANTAGE_API_KEY",
    "fmp": "FMP_API_KEY",
}


def configure_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(level=level, format="%(levelname)s: %(message)s")


def period_start(value: str) -> datetime:
    """Argparse type for the --from timestamp."""
    try:
        return parse_period_start(value)
    except ConfigError as e:
        raise argparse.ArgumentTypeError(str(e)) from e


def sma_window(value: str) -> int:
    """Argparse type for the moving average window, at least 2 days."""
    window = int(value)
    if window < 2:
        raise argparse.ArgumentTypeError(f"window must be at least 2 days, got {window}")
    return window


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="stockreport",
        description="Price change, range and trailing average per stock, as CSV",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  stockreport --from 2024-01-01                 # Default symbols
  stockreport --from 2024-01-01 -s NVDA,AAPL    # Custom symbols
  stockreport --from 2024-01-01 -w 50           # 50-day trailing average
  stockreport --from 2024-01-01 --provider fmp --api-key KEY
        """
    )
    parser.add_argument('--version', action='version', version=f"%(prog)s {__version__}")
    parser.add_argument(
        '-s', '--symbols',
        type=parse_symbols,
        default=list(DEFAULT_SYMBOLS),
        help=f"Comma-separated stock symbols (default: {','.join(DEFAULT_SYMBOLS)})"
    )
    parser.add_argument(
        '-f', '--from',
        dest='period_start',
        type=period_start,
        required=True,
        help='Start of the period, ISO-8601 (e.g. 2024-01-01 or 2024-01-01T00:00:00Z)'
    )
    parser.add_argument(
        '-w', '--window',
        type=sma_window,
        default=30,
        help='Trailing moving average window in days (default: 30)'
    )
    parser.add_argument(
        '--provider',
        choices=sorted(PROVIDERS),
        default='yahoo',
        help='Quote provider (default: yahoo)'
    )
    parser.add_argument(
        '--api-key',
        type=str,
        default=None,
        help='Provider API key (or set ALPHA_VANTAGE_API_KEY / FMP_API_KEY)'
    )
    parser.add_argument(
        '-v', '--verbose',
        action='store_true',
        help='Log fetch progress to stderr'
    )
    return parser


def load_config(args: argparse.Namespace) -> ReportConfig:
    """Build the report configuration from parsed arguments and the environment."""
    api_key = args.api_key
    if api_key is None and args.provider in API_KEY_ENV:
        api_key = os.environ.get(API_KEY_ENV[args.provider])

    return ReportConfig(
        period_start=args.period_start,
        symbols=args.symbols,
        sma_window=args.window,
        provider=args.provider,
        api_key=api_key
    )


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.verbose)

    config = load_config(args)
    try:
        provider = get_provider(config.provider, config.api_key)
    except ConfigError as e:
        parser.error(str(e))

    pipeline = ReportPipeline(provider, sma_window=config.sma_window)
    pipeline.run(config.symbols, config.period_start)
    return 0


if __name__ == '__main__':
    raise SystemExit(main())
