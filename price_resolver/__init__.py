"""
Top-level public API surface.
Resolve best-effort current prices for stock and crypto tickers through ordered
provider fallback chains behind a short-TTL cache.
"""

from __future__ import annotations

from ._version import __version__
from .cache import MISS, TTLCache
from .core import AssetClass, PriceResolverError, ValidationError
from .service import PriceResolution, PriceService, create_default_service

# Do not add exports without updating __all__.
__all__ = [
    "__version__",
    "AssetClass",
    "MISS",
    "PriceResolution",
    "PriceResolverError",
    "PriceService",
    "TTLCache",
    "ValidationError",
    "create_default_service",
]
