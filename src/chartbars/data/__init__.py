"""Daily history data providers."""

from .base import HistoryDataProvider
from .csv_data import CsvDataProvider
from .yfinance_data import YFinanceDataProvider

__all__ = [
    "CsvDataProvider",
    "HistoryDataProvider",
    "YFinanceDataProvider",
]
