from __future__ import annotations

from datetime import date
from pathlib import Path

import pandas as pd
import pytest

from chartbars.data.csv_data import CsvDataProvider


def _write_csv(path: Path, **extra: list[float]) -> None:
    data = {
        "Date": ["2025-01-03", "2025-01-02", "2025-01-06", "2025-01-07"],
        "Open": [101.0, 100.0, 102.0, 103.0],
        "High": [102.0, 101.0, 103.0, 104.0],
        "Low": [100.0, 99.0, 101.0, 102.0],
        "Close": [101.5, 100.5, "bad", 103.5],
        "Volume": [1100.0, 1000.0, 1200.0, None],
    }
    data.update(extra)
    pd.DataFrame(data).to_csv(path, index=False)


def test_csv_provider_normalizes_and_sorts_history(tmp_path: Path) -> None:
    _write_csv(tmp_path / "SPY.csv")
    provider = CsvDataProvider(data_dir=str(tmp_path))

    bars = provider.get_bars("spy")

    assert list(bars.columns) == ["open", "high", "low", "close", "volume"]
    assert bars.index.name == "date"
    assert list(bars.index) == list(pd.to_datetime(["2025-01-02", "2025-01-03", "2025-01-07"]))
    assert float(bars["close"].iloc[0]) == 100.5
    assert float(bars["volume"].iloc[-1]) == 0.0


def test_csv_provider_keeps_previous_close_column(tmp_path: Path) -> None:
    _write_csv(tmp_path / "SPY.csv", prev_close=[100.5, 99.0, 101.5, 101.5])
    provider = CsvDataProvider(data_dir=str(tmp_path))

    bars = provider.get_bars("SPY")

    assert list(bars.columns) == ["open", "high", "low", "close", "volume", "previous_close"]
    assert float(bars["previous_close"].iloc[0]) == 99.0


def test_csv_provider_resolves_market_directory(tmp_path: Path) -> None:
    (tmp_path / "KLSE").mkdir()
    _write_csv(tmp_path / "KLSE" / "maybank.csv")
    provider = CsvDataProvider(data_dir=str(tmp_path))

    bars = provider.get_bars("klse:MAYBANK")

    assert len(bars) == 3


def test_csv_provider_returns_copies_from_cache(tmp_path: Path) -> None:
    path = tmp_path / "SPY.csv"
    _write_csv(path)
    provider = CsvDataProvider(data_dir=str(tmp_path))

    first = provider.get_bars("SPY")
    first["close"] = 0.0
    path.unlink()
    second = provider.get_bars("SPY")

    assert float(second["close"].iloc[-1]) == 103.5


def test_csv_provider_missing_file_without_fallback_raises(tmp_path: Path) -> None:
    provider = CsvDataProvider(data_dir=str(tmp_path))

    with pytest.raises(ValueError, match="No CSV found for QQQ"):
        provider.get_bars("QQQ")


def test_csv_provider_rejects_csv_without_date_column(tmp_path: Path) -> None:
    pd.DataFrame(
        {"open": [1.0], "high": [1.0], "low": [1.0], "close": [1.0], "volume": [1.0]}
    ).to_csv(tmp_path / "SPY.csv", index=False)
    provider = CsvDataProvider(data_dir=str(tmp_path))

    with pytest.raises(ValueError, match="missing date column"):
        provider.get_bars("SPY")


def test_csv_provider_rejects_csv_without_volume_column(tmp_path: Path) -> None:
    pd.DataFrame(
        {"date": ["2025-01-02"], "open": [1.0], "high": [1.0], "low": [1.0], "close": [1.0]}
    ).to_csv(tmp_path / "SPY.csv", index=False)
    provider = CsvDataProvider(data_dir=str(tmp_path))

    with pytest.raises(ValueError, match="missing required column 'volume'"):
        provider.get_bars("SPY")


def test_csv_provider_persists_fallback_download(tmp_path: Path) -> None:
    calls: list[str] = []

    def fetcher(symbol: str) -> pd.DataFrame:
        calls.append(symbol)
        return pd.DataFrame(
            {
                "Open": [10.0, 11.0],
                "High": [11.0, 12.0],
                "Low": [9.0, 10.0],
                "Close": [10.5, 11.5],
                "Volume": [100.0, 200.0],
            },
            index=pd.to_datetime(["2025-01-02", "2025-01-03"]),
        )

    provider = CsvDataProvider(data_dir=str(tmp_path), missing_data_fetcher=fetcher)

    bars = provider.get_bars("AAPL")
    provider.get_bars("AAPL")

    assert calls == ["AAPL"]
    assert len(bars) == 2
    saved = pd.read_csv(tmp_path / "AAPL.csv")
    assert list(saved.columns) == ["date", "open", "high", "low", "close", "volume"]
    reloaded = CsvDataProvider(data_dir=str(tmp_path)).get_bars("AAPL")
    assert float(reloaded["close"].iloc[-1]) == 11.5


def test_csv_provider_skips_persist_when_disabled(tmp_path: Path) -> None:
    def fetcher(_symbol: str) -> pd.DataFrame:
        return pd.DataFrame(
            {
                "date": ["2025-01-02"],
                "open": [10.0],
                "high": [11.0],
                "low": [9.0],
                "close": [10.5],
                "volume": [100.0],
            }
        )

    provider = CsvDataProvider(
        data_dir=str(tmp_path),
        missing_data_fetcher=fetcher,
        persist_downloaded_bars=False,
    )

    bars = provider.get_bars("AAPL")

    assert len(bars) == 1
    assert not (tmp_path / "AAPL.csv").exists()


def test_csv_provider_remembers_failed_fallback(tmp_path: Path) -> None:
    calls: list[str] = []

    def fetcher(symbol: str) -> pd.DataFrame:
        calls.append(symbol)
        raise RuntimeError("network down")

    provider = CsvDataProvider(data_dir=str(tmp_path), missing_data_fetcher=fetcher)

    with pytest.raises(ValueError, match="fallback fetch failed: network down"):
        provider.get_bars("AAPL")
    with pytest.raises(ValueError, match="fallback fetch failed: network down"):
        provider.get_bars("AAPL")
    assert calls == ["AAPL"]


def test_csv_provider_saves_downloads_on_exchange_dates(tmp_path: Path) -> None:
    def fetcher(_symbol: str) -> pd.DataFrame:
        return pd.DataFrame(
            {
                "open": [10.0, 11.0],
                "high": [11.0, 12.0],
                "low": [9.0, 10.0],
                "close": [10.5, 11.5],
                "volume": [100.0, 200.0],
            },
            index=pd.DatetimeIndex(pd.to_datetime(["2025-01-06", "2025-01-07"])).tz_localize(
                "Asia/Tokyo"
            ),
        )

    provider = CsvDataProvider(data_dir=str(tmp_path), missing_data_fetcher=fetcher)

    downloaded = provider.get_bars("TSE:7203")
    reloaded = CsvDataProvider(data_dir=str(tmp_path)).get_bars("TSE:7203")

    assert str(downloaded.index.tz) == "Asia/Tokyo"
    assert (tmp_path / "TSE" / "7203.csv").exists()
    assert [day.date() for day in reloaded.index] == [date(2025, 1, 6), date(2025, 1, 7)]
