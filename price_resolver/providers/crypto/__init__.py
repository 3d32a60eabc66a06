"""Crypto price providers and the CoinGecko ticker-to-id resolver."""
from __future__ import annotations

from .coinbase import CoinbaseSpotProvider
from .coingecko import COINGECKO_IDS, CoinGeckoPriceProvider, CoinGeckoSymbolResolver

__all__ = [
    "COINGECKO_IDS",
    "CoinbaseSpotProvider",
    "CoinGeckoPriceProvider",
    "CoinGeckoSymbolResolver",
]
