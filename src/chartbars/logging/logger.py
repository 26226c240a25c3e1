"""Concise human-readable run logger."""

from __future__ import annotations

import logging
from datetime import UTC, datetime


class HumanLogger:
    """Console logger with fixed line types."""

    def __init__(self, level: str = "INFO") -> None:
        self._logger = logging.getLogger("chartbars")
        self._logger.setLevel(getattr(logging, level.upper(), logging.INFO))
        self._logger.propagate = False
        if not self._logger.handlers:
            handler = logging.StreamHandler()
            formatter = logging.Formatter("%(asctime)s | %(message)s", "%Y-%m-%d %H:%M:%S")
            handler.setFormatter(formatter)
            self._logger.addHandler(handler)

    def run_started(self, run_id: str, granularity: str, symbols: list[str]) -> None:
        self._logger.info(
            "run | %s | %s | %s",
            self._short_id(run_id),
            granularity,
            ",".join(symbols),
        )

    def history_loaded(
        self,
        symbol: str,
        days: int,
        first_millis: int | None = None,
        last_millis: int | None = None,
    ) -> None:
        parts = [f"history | {symbol} | days {days}"]
        if first_millis is not None and last_millis is not None:
            parts.append(f"{self._short_date(first_millis)} -> {self._short_date(last_millis)}")
        self._logger.info(" | ".join(parts))

    def series_built(self, symbol: str, granularity: str, days: int, records: int) -> None:
        self._logger.info(
            "series | %s | %s | days %d | points %d",
            symbol,
            granularity,
            days,
            records,
        )

    def series_written(self, symbol: str, path: str) -> None:
        self._logger.info("written | %s | %s", symbol, path)

    def error(self, message: str) -> None:
        self._logger.error("error | %s", message)

    @staticmethod
    def _short_id(value: str | None, head: int = 10, tail: int = 6) -> str:
        if not value:
            return ""
        text = str(value)
        if len(text) <= head + tail + 1:
            return text
        return f"{text[:head]}...{text[-tail:]}"

    @staticmethod
    def _short_date(timestamp_millis: int) -> str:
        return datetime.fromtimestamp(timestamp_millis / 1000.0, tz=UTC).strftime("%Y-%m-%d")
