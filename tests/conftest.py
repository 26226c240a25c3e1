from __future__ import annotations

from datetime import UTC, date, datetime

import pytest

from chartbars.domain.models import DailyRecord


def millis(day: date) -> int:
    return int(datetime(day.year, day.month, day.day, tzinfo=UTC).timestamp() * 1000)


def make_day(
    day: str,
    close: float,
    *,
    open_price: float | None = None,
    high: float | None = None,
    low: float | None = None,
    volume: int = 100,
    previous_close: float | None = None,
) -> DailyRecord:
    parsed = date.fromisoformat(day)
    open_value = close if open_price is None else open_price
    return DailyRecord(
        previous_close=open_value if previous_close is None else previous_close,
        open=open_value,
        close=close,
        high=max(open_value, close) + 1.0 if high is None else high,
        low=min(open_value, close) - 1.0 if low is None else low,
        volume=volume,
        timestamp_millis=millis(parsed),
    )


@pytest.fixture
def clear_chartbars_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr("chartbars.config.load_dotenv", lambda *args, **kwargs: None)
    for key in (
        "SYMBOLS",
        "GRANULARITY",
        "DATA_SOURCE",
        "HISTORICAL_DATA_DIR",
        "OUTPUT_DIR",
        "LOG_LEVEL",
        "PERSIST_DOWNLOADED_BARS",
    ):
        monkeypatch.delenv(key, raising=False)
