"""In-memory history backed by a sequence of daily records."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from datetime import date, datetime
from zoneinfo import ZoneInfo

from chartbars.domain.models import DailyRecord

logger = logging.getLogger(__name__)


def millis_to_date(timestamp_millis: int, tz: str = "UTC") -> date:
    """Return the calendar date of an epoch-millisecond timestamp in ``tz``."""
    return datetime.fromtimestamp(timestamp_millis / 1000.0, tz=ZoneInfo(tz)).date()


class SequenceHistory:
    """Wrap ordered ``DailyRecord`` values, dating each one in the exchange timezone.

    When several records fall on the same date the first one is kept, matching
    ``FrameHistory``.
    """

    def __init__(self, records: Sequence[DailyRecord], tz: str = "UTC") -> None:
        self._dates: list[date] = []
        self._by_date: dict[date, DailyRecord] = {}
        for record in records:
            day = millis_to_date(record.timestamp_millis, tz)
            if day in self._by_date:
                logger.debug("Skipping duplicate history record for %s", day.isoformat())
                continue
            self._dates.append(day)
            self._by_date[day] = record

    def num_days(self) -> int:
        return len(self._dates)

    def date_at(self, index: int) -> date:
        return self._dates[index]

    def record_at(self, day: date) -> DailyRecord:
        try:
            return self._by_date[day]
        except KeyError:
            raise KeyError(f"No record for {day.isoformat()}") from None
