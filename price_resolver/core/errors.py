"""
Shared exception types for price_resolver.
Provider failures are never raised; they become absent prices inside the clients.
"""

from __future__ import annotations


class PriceResolverError(Exception):
    """Base exception for price_resolver; catch this for any package-raised error."""

    pass


class ValidationError(PriceResolverError):
    """Caller input was rejected before any cache or provider activity."""

    pass


__all__ = ["PriceResolverError", "ValidationError"]
