"""
Yahoo Finance stock price providers.

Three independent response shapes from the public (unauthenticated) endpoints,
each usable as a separate fallback:
  GET https://query2.finance.yahoo.com/v7/finance/quote?symbols={symbol}
  GET https://query1.finance.yahoo.com/v10/finance/quoteSummary/{symbol}?modules=price
  GET https://query1.finance.yahoo.com/v8/finance/chart/{symbol}?range=1d&interval=1m
"""
from __future__ import annotations

from typing import Any, Optional
from urllib.parse import quote

from ..base import finite_price, first_finite, safe_get
from ..resilience import HttpConfig, ProviderHttpError, get_json, guarded_fetch

YAHOO_QUOTE_URL = "https://query2.finance.yahoo.com/v7/finance/quote"
YAHOO_SUMMARY_URL = "https://query1.finance.yahoo.com/v10/finance/quoteSummary"
YAHOO_CHART_URL = "https://query1.finance.yahoo.com/v8/finance/chart"

# Checked in order on a quote record.
_QUOTE_PRICE_FIELDS = (
    "regularMarketPrice",
    "postMarketPrice",
    "preMarketPrice",
    "ask",
    "bid",
    "previousClose",
)


class YahooQuoteProvider:
    """Direct quote endpoint: first usable market price field of the first result."""

    def __init__(self, http: Optional[HttpConfig] = None) -> None:
        self._http = http or HttpConfig()

    @property
    def provider_name(self) -> str:
        return "yahoo_quote"

    def fetch_price(self, symbol: str) -> Optional[float]:
        return guarded_fetch(self._fetch, symbol, self.provider_name)

    def _fetch(self, symbol: str) -> Optional[float]:
        data = get_json(
            YAHOO_QUOTE_URL,
            self._http,
            params={"symbols": symbol, "region": "US", "lang": "en-US"},
            provider_name=self.provider_name,
        )
        record = safe_get(data, "quoteResponse.result.0")
        if not isinstance(record, dict):
            return None
        return first_finite(*(record.get(f) for f in _QUOTE_PRICE_FIELDS))


class YahooQuoteSummaryProvider:
    """quoteSummary 'price' module: regular, then post-, then pre-market raw price."""

    def __init__(self, http: Optional[HttpConfig] = None) -> None:
        self._http = http or HttpConfig()

    @property
    def provider_name(self) -> str:
        return "yahoo_summary"

    def fetch_price(self, symbol: str) -> Optional[float]:
        return guarded_fetch(self._fetch, symbol, self.provider_name)

    def _fetch(self, symbol: str) -> Optional[float]:
        data = get_json(
            f"{YAHOO_SUMMARY_URL}/{quote(symbol, safe='')}",
            self._http,
            params={"modules": "price"},
            provider_name=self.provider_name,
        )
        price = safe_get(data, "quoteSummary.result.0.price")
        if not isinstance(price, dict):
            return None
        return first_finite(
            safe_get(price, "regularMarketPrice.raw"),
            safe_get(price, "postMarketPrice.raw"),
            safe_get(price, "preMarketPrice.raw"),
        )


def last_finite_close(closes: Any) -> Optional[float]:
    """Scan a close series from the most recent entry backward; nulls are skipped."""
    if not isinstance(closes, list):
        raise ProviderHttpError("chart response missing close series")
    for value in reversed(closes):
        price = finite_price(value)
        if price is not None:
            return price
    return None


class YahooChartProvider:
    """Intraday time series: the most recent non-null one-minute close."""

    def __init__(self, http: Optional[HttpConfig] = None) -> None:
        self._http = http or HttpConfig()

    @property
    def provider_name(self) -> str:
        return "yahoo_chart"

    def fetch_price(self, symbol: str) -> Optional[float]:
        return guarded_fetch(self._fetch, symbol, self.provider_name)

    def _fetch(self, symbol: str) -> Optional[float]:
        data = get_json(
            f"{YAHOO_CHART_URL}/{quote(symbol, safe='')}",
            self._http,
            params={"range": "1d", "interval": "1m"},
            provider_name=self.provider_name,
        )
        closes = safe_get(data, "chart.result.0.indicators.quote.0.close")
        return last_finite_close(closes)
