"""CSV-backed daily history provider."""

from __future__ import annotations

import logging
from collections.abc import Callable
from pathlib import Path

import pandas as pd

from chartbars.data.symbols import split_market_symbol

logger = logging.getLogger(__name__)

OHLCV_COLUMNS = ("open", "high", "low", "close", "volume")
DATE_COLUMNS = ("date", "datetime", "timestamp")
PREVIOUS_CLOSE_COLUMNS = ("previous_close", "prev_close", "prevclose")


def normalize_history(frame: pd.DataFrame, symbol: str) -> pd.DataFrame:
    """Return ``frame`` as sorted numeric daily bars indexed by ``date``.

    Column names are matched case-insensitively. The dates come from the
    frame's ``DatetimeIndex`` or else from a date column; timezone offsets are
    kept so exchange-local dates survive. Rows without a full set of OHLC
    prices are dropped and missing volumes count as zero.
    """
    by_name = {str(column).strip().lower(): column for column in frame.columns}
    if isinstance(frame.index, pd.DatetimeIndex):
        index = frame.index
    else:
        date_column = next((by_name[name] for name in DATE_COLUMNS if name in by_name), None)
        if date_column is None:
            expected = ", ".join(DATE_COLUMNS)
            raise ValueError(f"{symbol}: CSV missing date column. Expected one of: {expected}")
        index = pd.DatetimeIndex(pd.to_datetime(frame[date_column]))

    sources: dict[str, object] = {}
    for name in OHLCV_COLUMNS:
        if name not in by_name:
            raise ValueError(f"{symbol}: CSV missing required column '{name}'")
        sources[name] = by_name[name]
    previous_close = next(
        (by_name[name] for name in PREVIOUS_CLOSE_COLUMNS if name in by_name), None
    )
    if previous_close is not None:
        sources["previous_close"] = previous_close

    bars = pd.DataFrame(
        {
            name: pd.to_numeric(frame[source], errors="coerce").to_numpy()
            for name, source in sources.items()
        },
        index=index.rename("date"),
    )
    bars = bars.sort_index().dropna(subset=["open", "high", "low", "close"])
    bars["volume"] = bars["volume"].fillna(0.0)
    if bars.empty:
        raise ValueError(f"{symbol}: data has no valid OHLCV rows")
    return bars


class CsvDataProvider:
    """Read daily history from ``<data_dir>/[MARKET/]SYMBOL.csv`` files.

    Symbols without a file go through ``missing_data_fetcher`` when one is
    given. Downloaded bars are normalized like CSV rows and, unless disabled,
    saved where the next run finds them. A failed download is not retried.
    """

    def __init__(
        self,
        data_dir: str,
        missing_data_fetcher: Callable[[str], pd.DataFrame] | None = None,
        persist_downloaded_bars: bool = True,
    ) -> None:
        self.data_dir = Path(data_dir)
        self.missing_data_fetcher = missing_data_fetcher
        self.persist_downloaded_bars = persist_downloaded_bars
        self._history: dict[str, pd.DataFrame] = {}
        self._failed_downloads: dict[str, str] = {}

    def get_bars(self, symbol: str) -> pd.DataFrame:
        if symbol not in self._history:
            self._history[symbol] = self._read(symbol)
        return self._history[symbol].copy()

    def find_file(self, symbol: str) -> Path | None:
        """Return the CSV holding ``symbol``, trying upper- and lower-case names."""
        market, bare_symbol = split_market_symbol(symbol)
        folders = [self.data_dir]
        if market is not None:
            folders = [self.data_dir / market, self.data_dir / market.lower(), self.data_dir]
        for folder in folders:
            for name in (bare_symbol.upper(), bare_symbol.lower()):
                candidate = folder / f"{name}.csv"
                if candidate.exists():
                    return candidate
        return None

    def save_path(self, symbol: str) -> Path:
        """Return where downloaded history for ``symbol`` is written."""
        market, bare_symbol = split_market_symbol(symbol)
        folder = self.data_dir if market is None else self.data_dir / market
        return folder / f"{bare_symbol.upper()}.csv"

    def _read(self, symbol: str) -> pd.DataFrame:
        path = self.find_file(symbol)
        if path is not None:
            logger.debug("Reading %s history from %s", symbol, path)
            return normalize_history(pd.read_csv(path), symbol)
        if self.missing_data_fetcher is None:
            raise ValueError(f"No CSV found for {symbol} under {self.data_dir}")
        return self._download(symbol)

    def _download(self, symbol: str) -> pd.DataFrame:
        earlier_failure = self._failed_downloads.get(symbol)
        if earlier_failure is not None:
            raise ValueError(earlier_failure)

        try:
            frame = self.missing_data_fetcher(symbol)
            if not isinstance(frame, pd.DataFrame):
                raise TypeError("fetcher returned a non-DataFrame result")
            bars = normalize_history(frame, symbol)
        except Exception as exc:
            message = (
                f"No CSV found for {symbol} under {self.data_dir}; fallback fetch failed: {exc}"
            )
            self._failed_downloads[symbol] = message
            raise ValueError(message) from exc

        if self.persist_downloaded_bars:
            path = self.save_path(symbol)
            path.parent.mkdir(parents=True, exist_ok=True)
            saved = bars
            if bars.index.tz is not None:
                # Offsets change across DST; local wall-clock dates reload cleanly.
                saved = bars.set_axis(bars.index.tz_localize(None))
            saved.to_csv(path, index_label="date")
            logger.debug("Saved downloaded %s history to %s", symbol, path)
        return bars
