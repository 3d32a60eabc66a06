"""
Provider architecture for stock and crypto price lookups.

Each upstream source is a PriceProvider returning a finite USD price or None.
Providers are registered per asset class and tried through a config-driven
priority chain with first-success fallback.
"""

from __future__ import annotations

from .base import PriceProvider, ProviderHealth, finite_price
from .chain import AssetChains, FallbackChain
from .registry import ProviderRegistry
from .resilience import HttpConfig, guarded_fetch

__all__ = [
    "AssetChains",
    "FallbackChain",
    "HttpConfig",
    "PriceProvider",
    "ProviderHealth",
    "ProviderRegistry",
    "finite_price",
    "guarded_fetch",
]
