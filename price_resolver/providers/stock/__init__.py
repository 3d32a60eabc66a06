"""Stock price providers (Yahoo Finance shapes, Finnhub)."""
from __future__ import annotations

from .finnhub import FinnhubQuoteProvider
from .yahoo import YahooChartProvider, YahooQuoteProvider, YahooQuoteSummaryProvider

__all__ = [
    "FinnhubQuoteProvider",
    "YahooChartProvider",
    "YahooQuoteProvider",
    "YahooQuoteSummaryProvider",
]
