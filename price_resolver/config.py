"""
Load config from config.yaml with optional env overrides.
Single source of truth for cache freshness, HTTP timeouts, provider priority and keys.
"""
from __future__ import annotations

import copy
import os
from pathlib import Path
from typing import Any, Dict, List, Optional

# Defaults if no YAML or env
_DEFAULTS = {
    "cache": {
        "ttl_seconds": 60.0,
        "max_entries": None,
        "single_flight": True,
    },
    "http": {
        "timeout_s": 5.0,
        "user_agent": "Mozilla/5.0",
    },
    "providers": {
        "stock_priority": ["yahoo_quote", "yahoo_summary", "yahoo_chart", "finnhub"],
        "crypto_priority": ["coingecko"],
        "finnhub_api_key": None,
    },
    "symbols": {"coingecko_ids": {}},
    "batch": {"pause_s": 0.6},
}


def _config_yaml_path() -> Path:
    """config.yaml lives at repo root (parent of package dir) unless PRICE_RESOLVER_CONFIG is set."""
    override = os.environ.get("PRICE_RESOLVER_CONFIG")
    if override:
        return Path(override)
    return Path(__file__).resolve().parent.parent / "config.yaml"


def _load_yaml() -> dict:
    import yaml

    config_path = _config_yaml_path()
    if not config_path.exists():
        return {}
    with open(config_path, encoding="utf-8") as f:
        data = yaml.safe_load(f)
    return data if isinstance(data, dict) else {}


def _deep_merge(base: dict, override: dict) -> dict:
    out = dict(base)
    for k, v in override.items():
        if k in out and isinstance(out[k], dict) and isinstance(v, dict):
            out[k] = _deep_merge(out[k], v)
        else:
            out[k] = v
    return out


def _env_overrides() -> dict:
    overrides: dict = {}
    ttl = os.environ.get("PRICE_CACHE_TTL_SECONDS")
    if ttl:
        overrides.setdefault("cache", {})["ttl_seconds"] = float(ttl)
    max_entries = os.environ.get("PRICE_CACHE_MAX_ENTRIES")
    if max_entries:
        overrides.setdefault("cache", {})["max_entries"] = int(max_entries)
    timeout = os.environ.get("PRICE_HTTP_TIMEOUT_S")
    if timeout:
        overrides.setdefault("http", {})["timeout_s"] = float(timeout)
    finnhub_key = os.environ.get("FINNHUB_API_KEY")
    if finnhub_key:
        overrides.setdefault("providers", {})["finnhub_api_key"] = finnhub_key
    return overrides


def get_config() -> dict:
    """Return merged config: defaults <- config.yaml <- env."""
    merged = _deep_merge(copy.deepcopy(_DEFAULTS), _load_yaml())
    merged = _deep_merge(merged, _env_overrides())
    return merged


# Convenience accessors
def cache_ttl_seconds() -> float:
    return float(get_config()["cache"]["ttl_seconds"])


def cache_max_entries() -> Optional[int]:
    value = get_config()["cache"]["max_entries"]
    return None if value is None else int(value)


def cache_single_flight() -> bool:
    return bool(get_config()["cache"]["single_flight"])


def http_timeout_s() -> float:
    return float(get_config()["http"]["timeout_s"])


def http_user_agent() -> str:
    return str(get_config()["http"]["user_agent"])


def stock_priority() -> Optional[List[str]]:
    value = get_config()["providers"].get("stock_priority")
    return None if value is None else list(value)


def crypto_priority() -> Optional[List[str]]:
    value = get_config()["providers"].get("crypto_priority")
    return None if value is None else list(value)


def finnhub_api_key() -> Optional[str]:
    return get_config()["providers"].get("finnhub_api_key") or None


def coingecko_extra_ids() -> Dict[str, str]:
    raw: Any = get_config()["symbols"].get("coingecko_ids") or {}
    return {str(k).upper(): str(v) for k, v in raw.items()}


def batch_pause_s() -> float:
    return float(get_config()["batch"]["pause_s"])
