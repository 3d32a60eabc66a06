"""
Coinbase crypto spot price provider.

Uses the public Coinbase API (no authentication required):
  GET https://api.coinbase.com/v2/prices/{symbol}-USD/spot
"""
from __future__ import annotations

from typing import Optional

from ..resilience import HttpConfig, ProviderHttpError, get_json, guarded_fetch

COINBASE_BASE_URL = "https://api.coinbase.com"


class CoinbaseSpotProvider:
    """Fetch USD spot prices from the Coinbase public API."""

    def __init__(self, http: Optional[HttpConfig] = None) -> None:
        self._http = http or HttpConfig()

    @property
    def provider_name(self) -> str:
        return "coinbase"

    def fetch_price(self, symbol: str) -> Optional[float]:
        return guarded_fetch(self._fetch, symbol, self.provider_name)

    def _fetch(self, symbol: str) -> Optional[float]:
        product = f"{symbol.upper()}-USD"
        data = get_json(
            f"{COINBASE_BASE_URL}/v2/prices/{product}/spot",
            self._http,
            provider_name=self.provider_name,
        )
        amount = data.get("data", {}).get("amount")
        if amount is None:
            raise ProviderHttpError("Coinbase response missing data.amount")

        price = float(amount)
        if price <= 0:
            return None
        return price
