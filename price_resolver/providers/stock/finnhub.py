"""
Finnhub stock quote provider.

Requires an API key (FINNHUB_API_KEY or providers.finnhub_api_key):
  GET https://finnhub.io/api/v1/quote?symbol={symbol}&token={key}

Without a key the provider is inert: it reports no price and makes no request.
"""
from __future__ import annotations

import logging
from typing import Optional

from ..base import first_finite
from ..resilience import HttpConfig, get_json, guarded_fetch

logger = logging.getLogger(__name__)

FINNHUB_QUOTE_URL = "https://finnhub.io/api/v1/quote"


class FinnhubQuoteProvider:
    """Current price 'c', falling back to previous close 'pc'."""

    def __init__(self, api_key: Optional[str] = None, http: Optional[HttpConfig] = None) -> None:
        self._api_key = api_key or None
        self._http = http or HttpConfig()

    @property
    def provider_name(self) -> str:
        return "finnhub"

    @property
    def has_key(self) -> bool:
        return self._api_key is not None

    def fetch_price(self, symbol: str) -> Optional[float]:
        if not self.has_key:
            logger.debug("finnhub skipped for %s: no API key configured", symbol)
            return None
        return guarded_fetch(self._fetch, symbol, self.provider_name)

    def _fetch(self, symbol: str) -> Optional[float]:
        payload = get_json(
            FINNHUB_QUOTE_URL,
            self._http,
            params={"symbol": symbol, "token": self._api_key},
            provider_name=self.provider_name,
        )
        if not isinstance(payload, dict):
            return None
        # Unknown symbols come back as all-zero quotes.
        for field in ("c", "pc"):
            price = first_finite(payload.get(field))
            if price is not None and price > 0:
                return price
        return None
