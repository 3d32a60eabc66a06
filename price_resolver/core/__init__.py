"""Shared primitives for price_resolver: error types and asset-class parsing."""

from __future__ import annotations

from .errors import PriceResolverError, ValidationError
from .types import AssetClass, normalize_symbol

__all__ = ["AssetClass", "PriceResolverError", "ValidationError", "normalize_symbol"]
