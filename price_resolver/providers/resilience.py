"""
Resilience primitives for provider clients: bounded-timeout JSON fetches and
the guard that turns any provider failure into an absent price.

Upstream outages, rate limits and malformed payloads must never escape a
client, so that a chain can always proceed to its next provider.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

import requests

from .base import finite_price

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_S = 5.0
DEFAULT_USER_AGENT = "Mozilla/5.0"


@dataclass(frozen=True)
class HttpConfig:
    """Per-request settings shared by every HTTP provider client."""

    timeout_s: float = DEFAULT_TIMEOUT_S
    user_agent: str = DEFAULT_USER_AGENT

    @property
    def headers(self) -> Dict[str, str]:
        return {"User-Agent": self.user_agent, "Accept": "application/json"}


class ProviderHttpError(RuntimeError):
    """Raised inside a client when the upstream answered with an unusable response."""


def get_json(
    url: str,
    http: HttpConfig,
    params: Optional[Dict[str, Any]] = None,
    provider_name: str = "provider",
) -> Any:
    """GET url and decode JSON; raises on rate limits, HTTP errors and bad bodies."""
    resp = requests.get(url, params=params, headers=http.headers, timeout=http.timeout_s)
    if resp.status_code == 429:
        raise ProviderHttpError(f"{provider_name} rate limit (HTTP 429)")
    resp.raise_for_status()
    return resp.json()


def guarded_fetch(
    func: Callable[[str], Any],
    symbol: str,
    provider_name: str,
) -> Optional[float]:
    """
    Call a raw provider fetch and convert its outcome to a finite price or None.

    Any exception (network, HTTP status, JSON decoding, missing keys) is logged
    at DEBUG and swallowed; non-numeric or non-finite results become None.
    """
    try:
        raw = func(symbol)
    except Exception as exc:
        logger.debug(
            "%s failed for %s: %s: %s", provider_name, symbol, type(exc).__name__, exc
        )
        return None
    price = finite_price(raw)
    if raw is not None and price is None:
        logger.debug("%s returned a non-finite price for %s: %r", provider_name, symbol, raw)
    return price
