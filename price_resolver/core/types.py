"""Asset class and symbol normalization applied at the service boundary."""

from __future__ import annotations

import enum
from typing import Optional


class AssetClass(enum.Enum):
    """Which provider chain a symbol is resolved against."""

    STOCK = "stock"
    CRYPTO = "crypto"

    @classmethod
    def parse(cls, raw: Optional[str]) -> "AssetClass":
        """Lowercase the token; anything unrecognized (or missing) is a stock."""
        token = (raw or "").strip().lower()
        for member in cls:
            if member.value == token:
                return member
        return cls.STOCK


def normalize_symbol(raw: Optional[str]) -> str:
    return (raw or "").strip().upper()
