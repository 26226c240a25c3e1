"""Command-line interface for chartbars."""

from __future__ import annotations

import argparse
import sys

from chartbars.config import Settings, parse_symbols
from chartbars.domain.models import Granularity
from chartbars.runtime import run


def build_parser() -> argparse.ArgumentParser:
    """Build CLI parser."""
    parser = argparse.ArgumentParser(
        description="Build daily, weekly or monthly OHLCV chart series from daily history"
    )
    parser.add_argument("--symbols", type=str, help="Comma-separated symbols")
    parser.add_argument(
        "--granularity",
        choices=[member.value for member in Granularity],
        help="Chart bucket size",
    )
    parser.add_argument(
        "--data-source",
        choices=["auto", "csv", "yfinance"],
        help="History source; auto reads CSV and downloads missing symbols",
    )
    parser.add_argument("--historical-dir", type=str, help="CSV historical data directory")
    parser.add_argument("--output-dir", type=str, help="Directory for series CSVs and events")
    parser.add_argument("--log-level", type=str, help="Console log level")
    parser.add_argument(
        "--no-persist-downloads",
        action="store_true",
        help="Do not save downloaded history under the historical data directory",
    )
    return parser


def apply_cli_overrides(settings: Settings, args: argparse.Namespace) -> Settings:
    """Apply CLI values onto environment-derived settings."""
    overrides: dict[str, object] = {}
    if args.symbols:
        overrides["symbols"] = parse_symbols(args.symbols, settings.symbols)
    if args.granularity:
        overrides["granularity"] = args.granularity
    if args.data_source:
        overrides["data_source"] = args.data_source
    if args.historical_dir:
        overrides["historical_data_dir"] = args.historical_dir
    if args.output_dir:
        overrides["output_dir"] = args.output_dir
    if args.log_level:
        overrides["log_level"] = args.log_level.strip().upper()
    if args.no_persist_downloads:
        overrides["persist_downloaded_bars"] = False
    return settings.with_overrides(**overrides)


def main(argv: list[str] | None = None) -> int:
    """CLI entrypoint."""
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        settings = apply_cli_overrides(Settings.from_env(), args)
    except ValueError as exc:
        print(f"Configuration error: {exc}")
        return 2
    return run(settings)


if __name__ == "__main__":
    sys.exit(main())
