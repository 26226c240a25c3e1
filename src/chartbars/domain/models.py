"""Core chart data models."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from enum import StrEnum
from typing import Any, Self


class Granularity(StrEnum):
    """Supported chart bucket sizes."""

    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"

    @classmethod
    def parse(cls, value: str | Granularity) -> Self:
        """Resolve a granularity name or alias."""
        if isinstance(value, cls):
            return value
        mapping = {
            "d": "daily",
            "day": "daily",
            "1d": "daily",
            "daily": "daily",
            "w": "weekly",
            "week": "weekly",
            "1wk": "weekly",
            "weekly": "weekly",
            "m": "monthly",
            "month": "monthly",
            "1mo": "monthly",
            "monthly": "monthly",
        }
        candidate = mapping.get(str(value).strip().lower())
        if candidate is None:
            supported = ", ".join(member.value for member in cls)
            raise ValueError(f"Unknown granularity '{value}'. Supported: {supported}")
        return cls(candidate)


@dataclass(frozen=True)
class DailyRecord:
    """One trading day of price history."""

    previous_close: float
    open: float
    close: float
    high: float
    low: float
    volume: int
    timestamp_millis: int


@dataclass(frozen=True)
class AggregateRecord:
    """One chart point at a chosen granularity."""

    previous_close: float
    open: float
    close: float
    high: float
    low: float
    volume: int
    timestamp_millis: int
    day_count: int = 1

    @classmethod
    def from_daily(cls, record: DailyRecord) -> Self:
        """Build a single-day chart point from a daily record."""
        return cls(
            previous_close=record.previous_close,
            open=record.open,
            close=record.close,
            high=record.high,
            low=record.low,
            volume=record.volume,
            timestamp_millis=record.timestamp_millis,
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to a plain dict for export."""
        return asdict(self)
