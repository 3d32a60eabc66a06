"""
CoinGecko crypto price provider and ticker-to-id resolver.

Uses the public CoinGecko API (no authentication required):
  GET https://api.coingecko.com/api/v3/search?query={symbol}
  GET https://api.coingecko.com/api/v3/simple/price?ids={id}&vs_currencies=usd
"""
from __future__ import annotations

import logging
from typing import Dict, Mapping, Optional

from ..base import finite_price
from ..resilience import HttpConfig, get_json

logger = logging.getLogger(__name__)

COINGECKO_BASE_URL = "https://api.coingecko.com/api/v3"

# Common tickers resolved without a search round-trip.
COINGECKO_IDS: Mapping[str, str] = {
    "BTC": "bitcoin",
    "ETH": "ethereum",
    "SOL": "solana",
    "ADA": "cardano",
    "DOGE": "dogecoin",
    "XRP": "ripple",
    "LTC": "litecoin",
}


class CoinGeckoSymbolResolver:
    """
    Map a ticker (BTC) to a CoinGecko coin id (bitcoin).

    The static table is consulted first. Unlisted tickers fall back to the
    search endpoint, taking the first coin whose own symbol matches the input
    case-insensitively. A failed or empty search resolves to None.
    """

    def __init__(
        self,
        extra_ids: Optional[Mapping[str, str]] = None,
        http: Optional[HttpConfig] = None,
    ) -> None:
        table: Dict[str, str] = dict(COINGECKO_IDS)
        for sym, coin_id in (extra_ids or {}).items():
            table[sym.upper()] = coin_id
        self._ids = table
        self._http = http or HttpConfig()

    def static_id(self, symbol: str) -> Optional[str]:
        return self._ids.get(symbol.upper())

    def resolve_id(self, symbol: str) -> Optional[str]:
        coin_id = self.static_id(symbol)
        if coin_id is not None:
            return coin_id
        return self.search_id(symbol)

    def search_id(self, symbol: str) -> Optional[str]:
        try:
            data = get_json(
                f"{COINGECKO_BASE_URL}/search",
                self._http,
                params={"query": symbol},
                provider_name="coingecko",
            )
        except Exception as exc:
            logger.debug("coingecko search failed for %s: %s", symbol, exc)
            return None

        coins = data.get("coins") if isinstance(data, dict) else None
        if not isinstance(coins, list):
            return None
        wanted = symbol.upper()
        for coin in coins:
            if not isinstance(coin, dict):
                continue
            if str(coin.get("symbol", "")).upper() == wanted and coin.get("id"):
                return str(coin["id"])
        logger.debug("coingecko search found no coin with symbol %s", symbol)
        return None


class CoinGeckoPriceProvider:
    """Resolve the coin id, then read its USD price from /simple/price."""

    def __init__(
        self,
        resolver: Optional[CoinGeckoSymbolResolver] = None,
        http: Optional[HttpConfig] = None,
    ) -> None:
        self._http = http or HttpConfig()
        self._resolver = resolver or CoinGeckoSymbolResolver(http=self._http)

    @property
    def provider_name(self) -> str:
        return "coingecko"

    @property
    def resolver(self) -> CoinGeckoSymbolResolver:
        return self._resolver

    def fetch_price(self, symbol: str) -> Optional[float]:
        coin_id = self._resolver.resolve_id(symbol)
        if coin_id is None:
            return None
        try:
            data = get_json(
                f"{COINGECKO_BASE_URL}/simple/price",
                self._http,
                params={"ids": coin_id, "vs_currencies": "usd"},
                provider_name=self.provider_name,
            )
        except Exception as exc:
            logger.debug("coingecko price failed for %s (%s): %s", symbol, coin_id, exc)
            return None
        entry = data.get(coin_id) if isinstance(data, dict) else None
        if not isinstance(entry, dict):
            return None
        return finite_price(entry.get("usd"))
