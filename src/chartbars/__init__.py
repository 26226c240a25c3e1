"""OHLCV chart series from daily price history."""

from .aggregation import build_series, daily_series, monthly_series, series_to_frame, weekly_series
from .domain.models import AggregateRecord, DailyRecord, Granularity

__all__ = [
    "AggregateRecord",
    "DailyRecord",
    "Granularity",
    "build_series",
    "daily_series",
    "monthly_series",
    "series_to_frame",
    "weekly_series",
]
