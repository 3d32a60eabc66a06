"""
Short-lived price cache keyed by (asset class, symbol).

Entries are valid while their age is below the TTL. Expired entries are
treated as missing on read and simply overwritten by the next put; nothing is
deleted proactively unless a max_entries cap is configured, in which case the
least recently used entries are evicted.

A cached None is a real value ("no provider had a price"), so reads return
the MISS sentinel rather than None when nothing usable is stored.
"""
from __future__ import annotations

import threading
import time
from collections import OrderedDict
from typing import Callable, Optional, Tuple, Union

from .core.types import AssetClass

CacheKey = Tuple[AssetClass, str]

DEFAULT_TTL_SECONDS = 60.0


class _Miss:
    def __repr__(self) -> str:
        return "MISS"

    def __bool__(self) -> bool:
        return False


MISS = _Miss()


class TTLCache:
    """Thread-safe TTL map from CacheKey to Optional[float]."""

    def __init__(
        self,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        max_entries: Optional[int] = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if ttl_seconds <= 0:
            raise ValueError(f"ttl_seconds must be positive, got {ttl_seconds}")
        if max_entries is not None and max_entries < 1:
            raise ValueError(f"max_entries must be >= 1, got {max_entries}")
        self._ttl_s = float(ttl_seconds)
        self._max_entries = max_entries
        self._clock = clock
        self._store: "OrderedDict[CacheKey, Tuple[Optional[float], float]]" = OrderedDict()
        self._lock = threading.Lock()

    @property
    def ttl_seconds(self) -> float:
        return self._ttl_s

    def get(self, key: CacheKey) -> Union[Optional[float], _Miss]:
        with self._lock:
            entry = self._store.get(key)
            if entry is None:
                return MISS
            value, stored_at = entry
            if self._clock() - stored_at >= self._ttl_s:
                return MISS
            if self._max_entries is not None:
                self._store.move_to_end(key)
            return value

    def put(self, key: CacheKey, value: Optional[float]) -> None:
        with self._lock:
            self._store[key] = (value, self._clock())
            self._store.move_to_end(key)
            if self._max_entries is not None:
                while len(self._store) > self._max_entries:
                    self._store.popitem(last=False)

    def __len__(self) -> int:
        with self._lock:
            return len(self._store)
