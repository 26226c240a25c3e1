"""Chart series aggregation."""

from .frames import series_to_frame
from .series import (
    build_series,
    bucket_series,
    daily_series,
    iso_week_of_year,
    month_of_year,
    monthly_series,
    weekly_series,
)

__all__ = [
    "build_series",
    "bucket_series",
    "daily_series",
    "iso_week_of_year",
    "month_of_year",
    "monthly_series",
    "series_to_frame",
    "weekly_series",
]
