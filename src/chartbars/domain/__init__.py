"""Domain models and event types."""

from .events import RunEvent
from .models import AggregateRecord, DailyRecord, Granularity

__all__ = [
    "AggregateRecord",
    "DailyRecord",
    "Granularity",
    "RunEvent",
]
