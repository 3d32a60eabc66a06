"""Fake providers and fixtures for provider, service and API tests (no live network)."""

from .providers import FakeAbsentProvider, FakeClock, FakeExplodingProvider, FakePriceProvider

__all__ = [
    "FakeAbsentProvider",
    "FakeClock",
    "FakeExplodingProvider",
    "FakePriceProvider",
]
