"""Ordered daily history contract."""

from __future__ import annotations

from datetime import date
from typing import Protocol

from chartbars.domain.models import DailyRecord


class StockHistory(Protocol):
    """Read-only view over daily records in ascending date order."""

    def num_days(self) -> int:
        """Return the number of trading days."""

    def date_at(self, index: int) -> date:
        """Return the calendar date of day ``index``."""

    def record_at(self, day: date) -> DailyRecord:
        """Return the record for a calendar date."""
