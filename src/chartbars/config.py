"""Environment and CLI runtime configuration."""

from __future__ import annotations

import os
from dataclasses import dataclass, field, replace
from typing import Self

from dotenv import load_dotenv

from chartbars.domain.models import Granularity

DEFAULT_SYMBOLS = ["SPY"]
DATA_SOURCES = {"auto", "csv", "yfinance"}


def parse_bool(value: str | None, default: bool) -> bool:
    """Parse truthy environment strings."""
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "y", "on"}


def parse_symbols(value: str | None, default: list[str] | None = None) -> list[str]:
    """Parse comma-separated symbols."""
    fallback = default or DEFAULT_SYMBOLS
    if not value:
        return list(fallback)
    symbols = [item.strip().upper() for item in value.split(",") if item.strip()]
    return dedupe_symbols(symbols) or list(fallback)


def dedupe_symbols(symbols: list[str]) -> list[str]:
    """Remove duplicate symbols while preserving order."""
    deduped: list[str] = []
    seen: set[str] = set()
    for symbol in symbols:
        if symbol in seen:
            continue
        seen.add(symbol)
        deduped.append(symbol)
    return deduped


@dataclass(frozen=True)
class Settings:
    """Immutable runtime settings."""

    symbols: list[str] = field(default_factory=lambda: list(DEFAULT_SYMBOLS))
    granularity: Granularity = Granularity.DAILY
    data_source: str = "auto"
    historical_data_dir: str = "historical_data"
    output_dir: str = "charts"
    log_level: str = "INFO"
    persist_downloaded_bars: bool = True

    @classmethod
    def from_env(cls) -> Self:
        """Create settings from environment variables."""
        load_dotenv()
        raw = cls(
            symbols=parse_symbols(os.getenv("SYMBOLS")),
            granularity=Granularity.parse(os.getenv("GRANULARITY", "daily")),
            data_source=str(os.getenv("DATA_SOURCE", "auto")).strip().lower(),
            historical_data_dir=str(os.getenv("HISTORICAL_DATA_DIR", "historical_data")).strip(),
            output_dir=str(os.getenv("OUTPUT_DIR", "charts")).strip(),
            log_level=str(os.getenv("LOG_LEVEL", "INFO")).strip().upper(),
            persist_downloaded_bars=parse_bool(os.getenv("PERSIST_DOWNLOADED_BARS"), True),
        )
        return raw.validate()

    def with_overrides(self, **kwargs: object) -> Self:
        """Return a new settings object with updated values."""
        overrides = dict(kwargs)
        granularity_override = overrides.get("granularity")
        if isinstance(granularity_override, str):
            overrides["granularity"] = Granularity.parse(granularity_override)
        data_source_override = overrides.get("data_source")
        if isinstance(data_source_override, str):
            overrides["data_source"] = data_source_override.strip().lower()
        updated = replace(self, **overrides)
        return updated.validate()

    def validate(self) -> Self:
        """Validate settings fields."""
        if not self.symbols:
            raise ValueError("symbols must not be empty")
        if self.data_source not in DATA_SOURCES:
            supported = ", ".join(sorted(DATA_SOURCES))
            raise ValueError(f"data_source must be one of {supported}")
        if not self.historical_data_dir:
            raise ValueError("historical_data_dir must not be empty")
        if not self.output_dir:
            raise ValueError("output_dir must not be empty")
        return self
