"""Daily history data provider contract."""

from __future__ import annotations

from typing import Protocol

import pandas as pd


class HistoryDataProvider(Protocol):
    """Interface for daily bar retrieval."""

    def get_bars(self, symbol: str) -> pd.DataFrame:
        """Return daily OHLCV bars with a sorted datetime index."""
