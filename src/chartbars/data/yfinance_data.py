"""Yahoo Finance daily history provider."""

from __future__ import annotations

import logging
import re
from typing import Any

import pandas as pd

from chartbars.data.symbols import yahoo_ticker

logger = logging.getLogger(__name__)


def price_field(column: Any) -> str:
    """Return the field a yfinance column holds, e.g. ``('Adj Close', 'SPY')`` -> ``adj_close``."""
    label = column[0] if isinstance(column, tuple) else column
    return re.sub(r"[^a-z0-9]+", "_", str(label).strip().lower()).strip("_")


class YFinanceDataProvider:
    """Download full daily histories from Yahoo Finance.

    Bars keep the exchange timezone yfinance stamps them with, so a Tokyo or
    Kuala Lumpur session is still dated by its local trading day downstream.
    """

    interval = "1d"
    period = "max"

    def get_bars(self, symbol: str) -> pd.DataFrame:
        ticker = yahoo_ticker(symbol)
        try:
            import yfinance as yf
        except ImportError as exc:
            raise ValueError(
                "yfinance is required for downloading history. "
                "Install it with `pip install yfinance`."
            ) from exc

        logger.debug("Downloading %s daily history as %s", symbol, ticker)
        try:
            history = yf.Ticker(ticker).history(
                period=self.period,
                interval=self.interval,
                auto_adjust=False,
                actions=False,
            )
        except Exception as exc:
            raise ValueError(f"yfinance request failed for {symbol} ({ticker}): {exc}") from exc
        return self._normalize_history(history, symbol, ticker)

    @staticmethod
    def _normalize_history(history: Any, symbol: str, ticker: str) -> pd.DataFrame:
        frame = pd.DataFrame() if history is None else pd.DataFrame(history)
        if frame.empty:
            raise ValueError(f"yfinance returned no rows for {symbol} ({ticker})")

        fields: dict[str, Any] = {}
        for column in frame.columns:
            fields.setdefault(price_field(column), column)
        if "close" not in fields and "adj_close" in fields:
            fields["close"] = fields["adj_close"]
        missing = [name for name in ("open", "high", "low", "close") if name not in fields]
        if missing:
            raise ValueError(
                f"yfinance payload missing {', '.join(missing)} for {symbol} ({ticker})"
            )

        if isinstance(frame.index, pd.DatetimeIndex):
            index = frame.index
        else:
            # Strings with mixed offsets only line up as UTC instants.
            index = pd.to_datetime(frame.index, utc=True)
        bars = pd.DataFrame(index=pd.DatetimeIndex(index, name="date"))
        for name in ("open", "high", "low", "close", "volume"):
            source = fields.get(name)
            if source is None:
                bars[name] = 0.0
            else:
                bars[name] = pd.to_numeric(frame[source], errors="coerce").to_numpy()
        bars["volume"] = bars["volume"].fillna(0.0)
        bars = bars.sort_index().dropna(subset=["open", "high", "low", "close"])
        if bars.empty:
            raise ValueError(f"yfinance returned no rows for {symbol} ({ticker})")
        return bars
