"""Runtime wiring: load histories, build chart series and export them."""

from __future__ import annotations

from pathlib import Path
from uuid import uuid4

from chartbars.aggregation import build_series, series_to_frame
from chartbars.config import Settings
from chartbars.data.base import HistoryDataProvider
from chartbars.data.csv_data import CsvDataProvider
from chartbars.data.symbols import split_market_symbol
from chartbars.data.yfinance_data import YFinanceDataProvider
from chartbars.history.frame_history import FrameHistory
from chartbars.logging.event_sink import JsonlEventSink
from chartbars.logging.logger import HumanLogger


def build_data_provider(settings: Settings) -> HistoryDataProvider:
    """Create the history provider selected by settings."""
    if settings.data_source == "yfinance":
        return YFinanceDataProvider()
    if settings.data_source == "csv":
        return CsvDataProvider(data_dir=settings.historical_data_dir)
    return CsvDataProvider(
        data_dir=settings.historical_data_dir,
        missing_data_fetcher=YFinanceDataProvider().get_bars,
        persist_downloaded_bars=settings.persist_downloaded_bars,
    )


def series_output_path(settings: Settings, symbol: str) -> Path:
    """Return the CSV path for a symbol's chart series."""
    market, bare_symbol = split_market_symbol(symbol)
    parts = [bare_symbol] if market is None else [market, bare_symbol]
    stem = "_".join(part.replace("/", "_").upper() for part in parts)
    return Path(settings.output_dir) / f"{stem}_{settings.granularity.value}.csv"


def run(settings: Settings, data_provider: HistoryDataProvider | None = None) -> int:
    """Build and export chart series for every configured symbol."""
    provider = data_provider or build_data_provider(settings)
    run_id = uuid4().hex
    output_dir = Path(settings.output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    granularity = settings.granularity.value
    event_sink = JsonlEventSink(str(output_dir / "events.jsonl"), run_id, granularity)
    human_logger = HumanLogger(level=settings.log_level)

    human_logger.run_started(run_id, granularity, settings.symbols)
    event_sink.emit("run_started", symbols=settings.symbols)

    exit_code = 0
    for symbol in settings.symbols:
        try:
            export_symbol(
                settings=settings,
                symbol=symbol,
                data_provider=provider,
                event_sink=event_sink,
                human_logger=human_logger,
            )
        except (ValueError, KeyError, OSError) as exc:
            human_logger.error(f"{symbol}: {exc}")
            event_sink.emit("error", symbol=symbol, message=str(exc))
            exit_code = 1
    return exit_code


def export_symbol(
    settings: Settings,
    symbol: str,
    data_provider: HistoryDataProvider,
    event_sink: JsonlEventSink,
    human_logger: HumanLogger,
) -> Path:
    """Load one symbol's history, build its series and write it as CSV."""
    granularity = settings.granularity.value
    history = FrameHistory(data_provider.get_bars(symbol))
    days = history.num_days()
    if days:
        first = history.record_at(history.date_at(0))
        last = history.record_at(history.date_at(days - 1))
        human_logger.history_loaded(symbol, days, first.timestamp_millis, last.timestamp_millis)
    else:
        human_logger.history_loaded(symbol, days)

    records = build_series(history, settings.granularity)
    human_logger.series_built(symbol, granularity, days, len(records))

    path = series_output_path(settings, symbol)
    series_to_frame(records).to_csv(path)
    human_logger.series_written(symbol, str(path))
    event_sink.emit("series_written", symbol=symbol, days=days, points=len(records), path=str(path))
    return path
