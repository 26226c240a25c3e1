"""Tabular views of chart series."""

from __future__ import annotations

from collections.abc import Sequence

import pandas as pd

from chartbars.domain.models import AggregateRecord

SERIES_COLUMNS = ["previous_close", "open", "high", "low", "close", "volume", "day_count"]


def series_to_frame(records: Sequence[AggregateRecord]) -> pd.DataFrame:
    """Return a series as a frame indexed by UTC timestamp."""
    if not records:
        empty = pd.DataFrame(columns=SERIES_COLUMNS)
        empty.index = pd.DatetimeIndex([], tz="UTC", name="date")
        return empty

    rows = [record.to_dict() for record in records]
    frame = pd.DataFrame(rows)
    frame.index = pd.DatetimeIndex(
        pd.to_datetime(frame["timestamp_millis"], unit="ms", utc=True),
        name="date",
    )
    return frame[SERIES_COLUMNS].copy()
