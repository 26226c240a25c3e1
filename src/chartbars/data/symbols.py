"""Exchange-qualified symbol helpers shared by the history providers."""

from __future__ import annotations

# Yahoo Finance ticker suffix per exchange prefix; US listings carry none.
YAHOO_SUFFIXES = {
    "NYSE": "",
    "NASDAQ": "",
    "US": "",
    "KLSE": ".KL",
    "MYX": ".KL",
    "SGX": ".SI",
    "HKEX": ".HK",
    "TSE": ".T",
    "TYO": ".T",
    "ASX": ".AX",
    "LSE": ".L",
}


def split_market_symbol(symbol: str) -> tuple[str | None, str]:
    """Split ``MARKET:SYMBOL`` into its parts; plain symbols have no market."""
    value = symbol.strip()
    market, separator, bare_symbol = value.partition(":")
    if not separator or not market.strip() or not bare_symbol.strip():
        return None, value
    return market.strip().upper(), bare_symbol.strip()


def yahoo_ticker(symbol: str) -> str:
    """Map ``KLSE:1155`` style symbols onto Yahoo tickers such as ``1155.KL``."""
    market, bare_symbol = split_market_symbol(symbol)
    ticker = bare_symbol.upper()
    if market is None:
        return ticker
    suffix = YAHOO_SUFFIXES.get(market)
    if suffix is None:
        supported = ", ".join(sorted(YAHOO_SUFFIXES))
        raise ValueError(f"{symbol}: unknown market '{market}'. Supported: {supported}")
    return f"{ticker}{suffix}"
