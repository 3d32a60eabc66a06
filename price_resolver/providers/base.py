"""
Provider interfaces and data contracts.

Every upstream price source implements PriceProvider: a name plus a single
fetch_price(symbol) capability that returns a finite USD price or None.
Built-in providers never raise; transport and parsing failures are reported
as None. The fallback chain still treats a raising provider as absent, so it
can always move on to the next source.
"""

from __future__ import annotations

import math
import threading
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Optional, Protocol, runtime_checkable


def safe_get(d: Any, path: str, default: Any = None) -> Any:
    """Walk a dotted path through nested dicts; numeric parts index into lists."""
    cur: Any = d
    for key in path.split("."):
        if isinstance(cur, list) and key.isdigit():
            idx = int(key)
            if idx >= len(cur):
                return default
            cur = cur[idx]
        elif isinstance(cur, dict) and key in cur:
            cur = cur[key]
        else:
            return default
    return cur


def finite_price(value: Any) -> Optional[float]:
    """Return value as a float if it is a real, finite number; otherwise None."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    price = float(value)
    if not math.isfinite(price):
        return None
    return price


def first_finite(*values: Any) -> Optional[float]:
    for value in values:
        price = finite_price(value)
        if price is not None:
            return price
    return None


def _utc_now() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="seconds")


@dataclass
class ProviderHealth:
    """Hit/miss/failure counters for a single provider instance; safe to share across threads."""

    provider_name: str
    ok_count: int = 0
    absent_count: int = 0
    failure_count: int = 0
    last_ok_at: Optional[str] = None
    last_absent_at: Optional[str] = None
    last_error: Optional[str] = None
    _lock: threading.Lock = field(
        default_factory=threading.Lock, init=False, repr=False, compare=False
    )

    def record_success(self) -> None:
        with self._lock:
            self.ok_count += 1
            self.last_ok_at = _utc_now()

    def record_absent(self) -> None:
        with self._lock:
            self.absent_count += 1
            self.last_absent_at = _utc_now()

    def record_failure(self, error: str) -> None:
        with self._lock:
            self.failure_count += 1
            self.last_error = error

    def to_dict(self) -> dict:
        with self._lock:
            return {
                "ok_count": self.ok_count,
                "absent_count": self.absent_count,
                "failure_count": self.failure_count,
                "last_ok_at": self.last_ok_at,
                "last_absent_at": self.last_absent_at,
                "last_error": self.last_error,
            }


@runtime_checkable
class PriceProvider(Protocol):
    """Protocol for stock and crypto price providers."""

    @property
    def provider_name(self) -> str: ...

    def fetch_price(self, symbol: str) -> Optional[float]:
        """Fetch the current USD price for a symbol (e.g. 'AAPL', 'BTC'), or None."""
        ...
