"""
Provider chains: ordered fallback over price providers.

A chain tries providers in priority order and stops at the first finite
price. A provider is only called when every higher-priority provider came back
empty; there are no retries and no racing, so each provider is hit at most
once per resolution. When nobody has a price the chain answers None.
"""
from __future__ import annotations

import logging
from typing import Dict, List, Mapping, Optional, Sequence

from ..core.types import AssetClass
from .base import PriceProvider, ProviderHealth, finite_price

logger = logging.getLogger(__name__)


class FallbackChain:
    """Ordered chain of price providers with first-success short-circuit."""

    def __init__(self, providers: Sequence[PriceProvider]) -> None:
        self._providers: List[PriceProvider] = list(providers)
        self._health: Dict[str, ProviderHealth] = {
            p.provider_name: ProviderHealth(provider_name=p.provider_name)
            for p in self._providers
        }

    @property
    def provider_names(self) -> List[str]:
        return [p.provider_name for p in self._providers]

    def resolve(self, symbol: str) -> Optional[float]:
        """
        Return the first finite price from the providers, in order.

        A provider that raises, or answers anything other than a finite number
        (None, NaN, inf, strings), counts as "try the next one".
        """
        for provider in self._providers:
            name = provider.provider_name
            health = self._health[name]
            try:
                raw = provider.fetch_price(symbol)
            except Exception as exc:
                logger.warning(
                    "%s failed for %s: %s: %s", name, symbol, type(exc).__name__, exc
                )
                health.record_failure(f"{type(exc).__name__}: {exc}")
                continue
            price = finite_price(raw)
            if price is not None:
                health.record_success()
                logger.debug("%s answered %s = %s", name, symbol, price)
                return price
            health.record_absent()

        logger.info(
            "No provider had a price for %s (tried: %s)",
            symbol, ", ".join(self.provider_names) or "none",
        )
        return None

    def get_health(self) -> Dict[str, ProviderHealth]:
        """Return hit/miss counters for all providers in the chain."""
        return dict(self._health)


class AssetChains:
    """Dispatch a resolution to the chain registered for its asset class."""

    def __init__(self, chains: Mapping[AssetClass, FallbackChain]) -> None:
        self._chains = dict(chains)

    def chain_for(self, asset_class: AssetClass) -> FallbackChain:
        chain = self._chains.get(asset_class)
        if chain is None:
            raise KeyError(f"No provider chain configured for {asset_class.value}")
        return chain

    def resolve(self, asset_class: AssetClass, symbol: str) -> Optional[float]:
        return self.chain_for(asset_class).resolve(symbol)

    def get_health(self) -> Dict[str, Dict[str, dict]]:
        return {
            ac.value: {name: h.to_dict() for name, h in chain.get_health().items()}
            for ac, chain in self._chains.items()
        }
