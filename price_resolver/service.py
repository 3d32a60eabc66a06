"""
Price resolution service: the public entry point.

Flow per request:
  validate -> cache lookup -> hit: respond
                           -> miss: provider chain -> cache write -> respond

A missing symbol is rejected with ValidationError before any cache or
provider activity. "No price" is a normal result and is cached like any
other so that delisted or mistyped symbols do not hammer the providers.
Only this service writes to the cache.
"""
from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional, Tuple

from .cache import MISS, CacheKey, TTLCache
from .core.errors import ValidationError
from .core.types import AssetClass, normalize_symbol
from .providers.chain import AssetChains

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PriceResolution:
    """Outcome of one price lookup; price None means no provider had data."""

    symbol: str
    asset_class: AssetClass
    price: Optional[float]
    cached: bool = False

    def to_payload(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "symbol": self.symbol,
            "type": self.asset_class.value,
            "price": self.price,
        }
        if self.cached:
            payload["cached"] = True
        return payload


class _SingleFlight:
    """
    Per-key in-flight marker: concurrent misses for one key share the leader's
    resolution instead of each walking the provider chain.

    The internal lock only guards the in-flight table; it is never held while
    the leader talks to providers.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._inflight: Dict[CacheKey, threading.Event] = {}

    def claim(self, key: CacheKey) -> Tuple[bool, threading.Event]:
        with self._lock:
            event = self._inflight.get(key)
            if event is not None:
                return False, event
            event = threading.Event()
            self._inflight[key] = event
            return True, event

    def release(self, key: CacheKey) -> None:
        with self._lock:
            event = self._inflight.pop(key, None)
        if event is not None:
            event.set()


class PriceService:
    """Validate, consult the TTL cache, fall back to provider chains on a miss."""

    def __init__(
        self,
        cache: TTLCache,
        chains: AssetChains,
        single_flight: bool = True,
    ) -> None:
        self._cache = cache
        self._chains = chains
        self._flights = _SingleFlight() if single_flight else None

    @property
    def cache(self) -> TTLCache:
        return self._cache

    @property
    def chains(self) -> AssetChains:
        return self._chains

    def get_price(
        self, asset_class_raw: Optional[str], symbol_raw: Optional[str]
    ) -> PriceResolution:
        symbol = normalize_symbol(symbol_raw)
        if not symbol:
            raise ValidationError("missing symbol")
        asset_class = AssetClass.parse(asset_class_raw)
        key: CacheKey = (asset_class, symbol)

        cached = self._cache.get(key)
        if cached is not MISS:
            logger.debug("cache hit %s:%s", asset_class.value, symbol)
            return PriceResolution(symbol, asset_class, cached, cached=True)

        if self._flights is None:
            return PriceResolution(symbol, asset_class, self._resolve_and_store(key))

        leader, event = self._flights.claim(key)
        if not leader:
            event.wait()
            shared = self._cache.get(key)
            if shared is not MISS:
                return PriceResolution(symbol, asset_class, shared, cached=True)
            # Leader failed before writing; resolve on our own.
            return PriceResolution(symbol, asset_class, self._resolve_and_store(key))
        try:
            # Another leader may have finished between our read and the claim.
            settled = self._cache.get(key)
            if settled is not MISS:
                return PriceResolution(symbol, asset_class, settled, cached=True)
            price = self._resolve_and_store(key)
        finally:
            self._flights.release(key)
        return PriceResolution(symbol, asset_class, price)

    def _resolve_and_store(self, key: CacheKey) -> Optional[float]:
        asset_class, symbol = key
        price = self._chains.resolve(asset_class, symbol)
        self._cache.put(key, price)
        return price

    def get_prices(
        self,
        requests: Iterable[Tuple[Optional[str], Optional[str]]],
        pause_s: float = 0.0,
    ) -> List[PriceResolution]:
        """
        Resolve (asset_class, symbol) pairs one at a time.

        Sleeps pause_s between lookups that went to the providers, so a batch
        of fresh symbols stays under upstream rate limits; cache hits are not
        paced. Invalid entries are logged and skipped.
        """
        results: List[PriceResolution] = []
        went_upstream = False
        for asset_class_raw, symbol_raw in requests:
            if not normalize_symbol(symbol_raw):
                logger.warning("Skipping batch entry %r: missing symbol", symbol_raw)
                continue
            if went_upstream and pause_s > 0:
                time.sleep(pause_s)
            result = self.get_price(asset_class_raw, symbol_raw)
            results.append(result)
            went_upstream = not result.cached
        return results


def create_default_service() -> PriceService:
    """Build a service from config.yaml / environment settings."""
    from . import config
    from .providers.defaults import create_asset_chains

    cache = TTLCache(
        ttl_seconds=config.cache_ttl_seconds(),
        max_entries=config.cache_max_entries(),
    )
    return PriceService(
        cache=cache,
        chains=create_asset_chains(),
        single_flight=config.cache_single_flight(),
    )
