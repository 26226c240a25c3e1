"""History adapter over normalized OHLCV DataFrames."""

from __future__ import annotations

import logging
from datetime import date

import pandas as pd

from chartbars.domain.models import DailyRecord

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS = ("open", "high", "low", "close", "volume")


class FrameHistory:
    """Expose a daily OHLCV frame through the ``StockHistory`` contract.

    The frame must carry a ``DatetimeIndex`` and the lower-case columns
    ``open``, ``high``, ``low``, ``close`` and ``volume``. A ``previous_close``
    column is used when present; otherwise each day's previous close is the
    prior row's close, and the first row falls back to its own open.

    Each row is dated by its wall-clock date in the index's own timezone, so
    bars stamped at local midnight by an exchange east of UTC keep their
    trading date. ``timestamp_millis`` is the real instant; naive indexes are
    read as UTC. When several rows share a date the first one is kept.
    """

    def __init__(self, frame: pd.DataFrame) -> None:
        missing = [name for name in REQUIRED_COLUMNS if name not in frame.columns]
        if missing:
            raise ValueError(f"History frame missing columns: {', '.join(missing)}")
        if not isinstance(frame.index, pd.DatetimeIndex):
            raise ValueError("History frame must have a DatetimeIndex")

        ordered = frame.sort_index()
        index = ordered.index
        if index.tz is None:
            local_index = index
            instants = index.tz_localize("UTC")
        else:
            local_index = index.tz_localize(None)
            instants = index

        if "previous_close" in ordered.columns:
            previous_close = ordered["previous_close"].astype(float)
        else:
            previous_close = ordered["close"].astype(float).shift(1)
        previous_close = previous_close.fillna(ordered["open"].astype(float))
        volume = ordered["volume"].fillna(0.0).clip(lower=0).astype("int64")

        self._dates: list[date] = []
        self._records: dict[date, DailyRecord] = {}
        for position, (wall_clock, instant) in enumerate(zip(local_index, instants)):
            # Buckets follow the exchange's own calendar, not UTC.
            day = wall_clock.date()
            if day in self._records:
                logger.debug("Skipping duplicate history row for %s", day.isoformat())
                continue
            self._dates.append(day)
            self._records[day] = DailyRecord(
                previous_close=float(previous_close.iloc[position]),
                open=float(ordered["open"].iloc[position]),
                close=float(ordered["close"].iloc[position]),
                high=float(ordered["high"].iloc[position]),
                low=float(ordered["low"].iloc[position]),
                volume=int(volume.iloc[position]),
                timestamp_millis=int(instant.value // 1_000_000),
            )

    def num_days(self) -> int:
        return len(self._dates)

    def date_at(self, index: int) -> date:
        return self._dates[index]

    def record_at(self, day: date) -> DailyRecord:
        try:
            return self._records[day]
        except KeyError:
            raise KeyError(f"No record for {day.isoformat()}") from None
