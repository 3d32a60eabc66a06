"""
Default provider registry configuration.

Registers built-in providers and builds chains from config.yaml settings.
To add a new provider, register it here and add it to the priority list.
"""
from __future__ import annotations

import logging
from typing import Dict, List, Mapping, Optional

from ..core.types import AssetClass
from .chain import AssetChains, FallbackChain
from .crypto.coinbase import CoinbaseSpotProvider
from .crypto.coingecko import CoinGeckoPriceProvider, CoinGeckoSymbolResolver
from .registry import ProviderRegistry
from .resilience import HttpConfig
from .stock.finnhub import FinnhubQuoteProvider
from .stock.yahoo import YahooChartProvider, YahooQuoteProvider, YahooQuoteSummaryProvider

logger = logging.getLogger(__name__)

# Default provider priority (config.yaml can override these)
DEFAULT_STOCK_PRIORITY = ["yahoo_quote", "yahoo_summary", "yahoo_chart", "finnhub"]
DEFAULT_CRYPTO_PRIORITY = ["coingecko"]


def create_default_registry(
    http: Optional[HttpConfig] = None,
    finnhub_api_key: Optional[str] = None,
    coingecko_ids: Optional[Mapping[str, str]] = None,
) -> ProviderRegistry:
    """Create a registry with all built-in providers."""
    http = http or HttpConfig()
    resolver = CoinGeckoSymbolResolver(extra_ids=coingecko_ids, http=http)

    registry = ProviderRegistry()
    registry.register(AssetClass.STOCK, "yahoo_quote", lambda: YahooQuoteProvider(http))
    registry.register(AssetClass.STOCK, "yahoo_summary", lambda: YahooQuoteSummaryProvider(http))
    registry.register(AssetClass.STOCK, "yahoo_chart", lambda: YahooChartProvider(http))
    registry.register(
        AssetClass.STOCK, "finnhub", lambda: FinnhubQuoteProvider(finnhub_api_key, http)
    )
    registry.register(
        AssetClass.CRYPTO, "coingecko", lambda: CoinGeckoPriceProvider(resolver, http)
    )
    registry.register(AssetClass.CRYPTO, "coinbase", lambda: CoinbaseSpotProvider(http))
    return registry


def load_provider_config() -> Dict[str, List[str]]:
    """
    Load provider priority lists from config.yaml.

    Expected YAML structure:
        providers:
          stock_priority: ["yahoo_quote", "yahoo_summary", "yahoo_chart", "finnhub"]
          crypto_priority: ["coingecko"]

    An explicit empty list disables that asset class's chain; a null entry
    falls back to the built-in default.
    """
    from .. import config

    stock = config.stock_priority()
    crypto = config.crypto_priority()
    return {
        "stock_priority": list(DEFAULT_STOCK_PRIORITY) if stock is None else stock,
        "crypto_priority": list(DEFAULT_CRYPTO_PRIORITY) if crypto is None else crypto,
    }


def create_asset_chains(
    registry: Optional[ProviderRegistry] = None,
    stock_priority: Optional[List[str]] = None,
    crypto_priority: Optional[List[str]] = None,
) -> AssetChains:
    """Build the stock and crypto fallback chains."""
    if registry is None:
        from .. import config

        registry = create_default_registry(
            http=HttpConfig(timeout_s=config.http_timeout_s(), user_agent=config.http_user_agent()),
            finnhub_api_key=config.finnhub_api_key(),
            coingecko_ids=config.coingecko_extra_ids(),
        )
    if stock_priority is None or crypto_priority is None:
        cfg = load_provider_config()
        if stock_priority is None:
            stock_priority = cfg["stock_priority"]
        if crypto_priority is None:
            crypto_priority = cfg["crypto_priority"]

    stock = FallbackChain(registry.build_chain(AssetClass.STOCK, stock_priority))
    crypto = FallbackChain(registry.build_chain(AssetClass.CRYPTO, crypto_priority))
    logger.debug(
        "Provider chains: stock=%s crypto=%s", stock.provider_names, crypto.provider_names
    )
    return AssetChains({AssetClass.STOCK: stock, AssetClass.CRYPTO: crypto})
