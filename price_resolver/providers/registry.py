"""
Provider registry: central catalog of available providers.

Providers are registered per asset class under a short name. A config-driven
priority list (config.yaml) determines which of them a chain tries, and in
what order.
"""
from __future__ import annotations

import logging
from typing import Any, Callable, Dict, List, Optional, Union

from ..core.types import AssetClass
from .base import PriceProvider

logger = logging.getLogger(__name__)

ProviderFactory = Union[Callable[[], PriceProvider], PriceProvider]


class ProviderRegistry:
    """
    Registry mapping (asset class, provider name) to factories/instances.

    Usage:
        registry = ProviderRegistry()
        registry.register(AssetClass.STOCK, "yahoo_quote", YahooQuoteProvider)
        registry.register(AssetClass.STOCK, "yahoo_chart", YahooChartProvider)

        providers = registry.build_chain(AssetClass.STOCK, ["yahoo_quote", "yahoo_chart"])
    """

    def __init__(self) -> None:
        self._factories: Dict[AssetClass, Dict[str, Any]] = {ac: {} for ac in AssetClass}
        self._instances: Dict[AssetClass, Dict[str, PriceProvider]] = {ac: {} for ac in AssetClass}

    def register(self, asset_class: AssetClass, name: str, factory: ProviderFactory) -> None:
        """Register a provider class, zero-arg factory, or ready instance by name."""
        self._factories[asset_class][name] = factory
        self._instances[asset_class].pop(name, None)
        logger.debug("Registered %s provider: %s", asset_class.value, name)

    def get(self, asset_class: AssetClass, name: str) -> PriceProvider:
        """Get or instantiate a provider by name."""
        instances = self._instances[asset_class]
        if name not in instances:
            factory = self._factories[asset_class].get(name)
            if factory is None:
                raise KeyError(
                    f"Unknown {asset_class.value} provider '{name}'. "
                    f"Available: {list(self._factories[asset_class])}"
                )
            if isinstance(factory, type) or not hasattr(factory, "fetch_price"):
                instances[name] = factory()
            else:
                instances[name] = factory
        return instances[name]

    def names(self, asset_class: AssetClass) -> List[str]:
        return list(self._factories[asset_class])

    def build_chain(
        self, asset_class: AssetClass, priority: Optional[List[str]] = None
    ) -> List[PriceProvider]:
        """
        Build an ordered list of providers from a priority list.

        None means every registered provider in registration order; an empty
        list means an empty chain.
        """
        known = self._factories[asset_class]
        names = list(known) if priority is None else list(priority)
        unknown = [n for n in names if n not in known]
        if unknown:
            logger.warning(
                "Ignoring unknown %s providers in priority list: %s",
                asset_class.value, ", ".join(unknown),
            )
        return [self.get(asset_class, n) for n in names if n in known]
