"""Daily, weekly and monthly chart series built from a daily history."""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import date

from chartbars.domain.models import AggregateRecord, DailyRecord, Granularity
from chartbars.history.base import StockHistory

logger = logging.getLogger(__name__)

BucketKey = Callable[[date], int]


class _Bucket:
    """Running totals for one contiguous week or month of daily records."""

    def __init__(self, first: DailyRecord) -> None:
        self.previous_close = first.previous_close
        self.open = first.open
        self.close_total = first.close
        self.high = first.high
        self.low = first.low
        self.volume_total = first.volume
        self.timestamp_millis = first.timestamp_millis
        self.count = 1

    def add(self, record: DailyRecord) -> None:
        # previous_close and open stay at the first day of the bucket.
        self.close_total += record.close
        self.high = max(self.high, record.high)
        self.low = min(self.low, record.low)
        self.volume_total += record.volume
        self.timestamp_millis = record.timestamp_millis
        self.count += 1

    def close(self) -> AggregateRecord:
        return AggregateRecord(
            previous_close=self.previous_close,
            open=self.open,
            close=self.close_total / self.count,
            high=self.high,
            low=self.low,
            volume=int(self.volume_total // self.count),
            timestamp_millis=self.timestamp_millis,
            day_count=self.count,
        )


def iso_week_of_year(day: date) -> int:
    """Return the ISO week number of ``day``."""
    return day.isocalendar()[1]


def month_of_year(day: date) -> int:
    """Return the calendar month number of ``day``."""
    return day.month


def daily_series(history: StockHistory) -> list[AggregateRecord]:
    """Copy each daily record into the chart shape, without filtering."""
    records: list[AggregateRecord] = []
    for index in range(history.num_days()):
        record = history.record_at(history.date_at(index))
        records.append(AggregateRecord.from_daily(record))
    return records


def bucket_series(history: StockHistory, key: BucketKey) -> list[AggregateRecord]:
    """Fold consecutive days sharing the same ``key`` value into one record each.

    A bucket is closed whenever the key differs from the previous day's key.
    Only the key value is compared, so two runs of days with the same week or
    month number in different years merge when nothing lies between them.
    """
    records: list[AggregateRecord] = []
    bucket: _Bucket | None = None
    previous_key: int | None = None
    for index in range(history.num_days()):
        day = history.date_at(index)
        record = history.record_at(day)
        current_key = key(day)
        if bucket is None:
            bucket = _Bucket(record)
        elif current_key != previous_key:
            records.append(bucket.close())
            bucket = _Bucket(record)
        else:
            bucket.add(record)
        previous_key = current_key

    if bucket is not None:
        records.append(bucket.close())
    return records


def weekly_series(history: StockHistory) -> list[AggregateRecord]:
    """Roll daily records up into ISO-week buckets."""
    return bucket_series(history, iso_week_of_year)


def monthly_series(history: StockHistory) -> list[AggregateRecord]:
    """Roll daily records up into calendar-month buckets."""
    return bucket_series(history, month_of_year)


_BUILDERS: dict[Granularity, Callable[[StockHistory], list[AggregateRecord]]] = {
    Granularity.DAILY: daily_series,
    Granularity.WEEKLY: weekly_series,
    Granularity.MONTHLY: monthly_series,
}


def build_series(history: StockHistory, granularity: str | Granularity) -> list[AggregateRecord]:
    """Build the chart series for ``granularity``."""
    resolved = Granularity.parse(granularity)
    records = _BUILDERS[resolved](history)
    logger.debug(
        "Built %s series: %d days -> %d records",
        resolved.value,
        history.num_days(),
        len(records),
    )
    return records
