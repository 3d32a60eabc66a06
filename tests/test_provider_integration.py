"""
Provider clients against mocked HTTP, plus registry wiring.

Every client must turn upstream trouble (timeouts, 429s, odd payloads) into
None instead of raising. No live network calls.
"""

from __future__ import annotations

from unittest.mock import MagicMock, patch

import pytest
import requests

from price_resolver.core.types import AssetClass
from price_resolver.providers.crypto.coinbase import CoinbaseSpotProvider
from price_resolver.providers.crypto.coingecko import (
    CoinGeckoPriceProvider,
    CoinGeckoSymbolResolver,
)
from price_resolver.providers.defaults import create_asset_chains, create_default_registry
from price_resolver.providers.registry import ProviderRegistry
from price_resolver.providers.resilience import HttpConfig
from price_resolver.providers.stock.finnhub import FinnhubQuoteProvider
from price_resolver.providers.stock.yahoo import (
    YahooChartProvider,
    YahooQuoteProvider,
    YahooQuoteSummaryProvider,
    last_finite_close,
)
from tests.fakes.providers import FakePriceProvider

REQUESTS_GET = "price_resolver.providers.resilience.requests.get"


def _resp(payload, status_code=200):
    mock_resp = MagicMock()
    mock_resp.status_code = status_code
    mock_resp.json.return_value = payload
    if status_code >= 400:
        mock_resp.raise_for_status.side_effect = requests.HTTPError(f"HTTP {status_code}")
    else:
        mock_resp.raise_for_status = MagicMock()
    return mock_resp


class TestYahooQuoteProvider:
    @patch(REQUESTS_GET)
    def test_regular_market_price(self, mock_get):
        mock_get.return_value = _resp(
            {"quoteResponse": {"result": [{"symbol": "AAPL", "regularMarketPrice": 190.12}]}}
        )
        assert YahooQuoteProvider().fetch_price("AAPL") == 190.12

        _, kwargs = mock_get.call_args
        assert kwargs["params"]["symbols"] == "AAPL"
        assert kwargs["timeout"] == 5.0
        assert kwargs["headers"]["User-Agent"] == "Mozilla/5.0"

    @patch(REQUESTS_GET)
    def test_falls_through_price_fields(self, mock_get):
        mock_get.return_value = _resp(
            {"quoteResponse": {"result": [{"regularMarketPrice": None, "bid": 10.5, "previousClose": 9.0}]}}
        )
        assert YahooQuoteProvider().fetch_price("RXRX") == 10.5

    @patch(REQUESTS_GET)
    def test_empty_result_is_absent(self, mock_get):
        mock_get.return_value = _resp({"quoteResponse": {"result": []}})
        assert YahooQuoteProvider().fetch_price("ZZZZ") is None

    @patch(REQUESTS_GET)
    def test_timeout_is_absent(self, mock_get):
        mock_get.side_effect = requests.Timeout("slow")
        assert YahooQuoteProvider().fetch_price("AAPL") is None

    @patch(REQUESTS_GET)
    def test_rate_limit_is_absent(self, mock_get):
        mock_get.return_value = _resp({}, status_code=429)
        assert YahooQuoteProvider().fetch_price("AAPL") is None

    @patch(REQUESTS_GET)
    def test_http_error_is_absent(self, mock_get):
        mock_get.return_value = _resp({}, status_code=401)
        assert YahooQuoteProvider().fetch_price("AAPL") is None

    @patch(REQUESTS_GET)
    def test_non_json_body_is_absent(self, mock_get):
        resp = _resp(None)
        resp.json.side_effect = ValueError("not json")
        mock_get.return_value = resp
        assert YahooQuoteProvider().fetch_price("AAPL") is None

    @patch(REQUESTS_GET)
    def test_custom_timeout_is_passed(self, mock_get):
        mock_get.return_value = _resp({"quoteResponse": {"result": [{"regularMarketPrice": 1.0}]}})
        YahooQuoteProvider(HttpConfig(timeout_s=2.0)).fetch_price("AAPL")
        assert mock_get.call_args.kwargs["timeout"] == 2.0


class TestYahooQuoteSummaryProvider:
    @patch(REQUESTS_GET)
    def test_regular_then_post_market(self, mock_get):
        mock_get.return_value = _resp(
            {
                "quoteSummary": {
                    "result": [
                        {"price": {"regularMarketPrice": {}, "postMarketPrice": {"raw": 101.5}}}
                    ]
                }
            }
        )
        assert YahooQuoteSummaryProvider().fetch_price("MSFT") == 101.5
        url = mock_get.call_args.args[0]
        assert url.endswith("/quoteSummary/MSFT")

    @patch(REQUESTS_GET)
    def test_error_payload_is_absent(self, mock_get):
        mock_get.return_value = _resp({"quoteSummary": {"result": None, "error": {"code": "Not Found"}}})
        assert YahooQuoteSummaryProvider().fetch_price("ZZZZ") is None


class TestYahooChartProvider:
    @patch(REQUESTS_GET)
    def test_most_recent_non_null_close(self, mock_get):
        mock_get.return_value = _resp(
            {
                "chart": {
                    "result": [
                        {"indicators": {"quote": [{"close": [10.0, 10.5, 11.25, None, None]}]}}
                    ]
                }
            }
        )
        assert YahooChartProvider().fetch_price("AAPL") == 11.25
        assert mock_get.call_args.kwargs["params"] == {"range": "1d", "interval": "1m"}

    @patch(REQUESTS_GET)
    def test_missing_series_is_absent(self, mock_get):
        mock_get.return_value = _resp({"chart": {"result": None}})
        assert YahooChartProvider().fetch_price("AAPL") is None

    def test_last_finite_close_scans_backwards(self):
        assert last_finite_close([1.0, float("nan"), 3.0, None, float("inf")]) == 3.0
        assert last_finite_close([None, None]) is None
        assert last_finite_close([]) is None


class TestFinnhubQuoteProvider:
    @patch(REQUESTS_GET)
    def test_without_key_makes_no_request(self, mock_get):
        provider = FinnhubQuoteProvider(api_key=None)
        assert not provider.has_key
        assert provider.fetch_price("AAPL") is None
        mock_get.assert_not_called()

    @patch(REQUESTS_GET)
    def test_current_price(self, mock_get):
        mock_get.return_value = _resp({"c": 190.5, "pc": 188.0})
        assert FinnhubQuoteProvider(api_key="k").fetch_price("AAPL") == 190.5
        assert mock_get.call_args.kwargs["params"] == {"symbol": "AAPL", "token": "k"}

    @patch(REQUESTS_GET)
    def test_previous_close_when_current_is_zero(self, mock_get):
        mock_get.return_value = _resp({"c": 0, "pc": 188.0})
        assert FinnhubQuoteProvider(api_key="k").fetch_price("AAPL") == 188.0

    @patch(REQUESTS_GET)
    def test_all_zero_quote_is_absent(self, mock_get):
        mock_get.return_value = _resp({"c": 0, "d": None, "pc": 0})
        assert FinnhubQuoteProvider(api_key="k").fetch_price("ZZZZ") is None


def _coingecko_router(search_coins=None, prices=None):
    def fake_get(url, params=None, headers=None, timeout=None):
        if url.endswith("/search"):
            return _resp({"coins": search_coins or []})
        if url.endswith("/simple/price"):
            return _resp(prices or {})
        raise AssertionError(f"unexpected url {url}")

    return fake_get


class TestCoinGeckoSymbolResolver:
    @patch(REQUESTS_GET)
    def test_static_table_skips_search(self, mock_get):
        resolver = CoinGeckoSymbolResolver()
        assert resolver.resolve_id("btc") == "bitcoin"
        assert resolver.resolve_id("ETH") == "ethereum"
        mock_get.assert_not_called()

    @patch(REQUESTS_GET)
    def test_unlisted_symbol_uses_search_match(self, mock_get):
        mock_get.side_effect = _coingecko_router(
            search_coins=[
                {"id": "pepe-wrapped", "symbol": "wpepe"},
                {"id": "pepe", "symbol": "pepe"},
            ]
        )
        assert CoinGeckoSymbolResolver().resolve_id("PEPE") == "pepe"
        assert mock_get.call_args.kwargs["params"] == {"query": "PEPE"}

    @patch(REQUESTS_GET)
    def test_search_without_match_is_absent(self, mock_get):
        mock_get.side_effect = _coingecko_router(search_coins=[{"id": "zzz", "symbol": "zzz"}])
        assert CoinGeckoSymbolResolver().resolve_id("ZXQ") is None
        assert mock_get.call_count == 1

    @patch(REQUESTS_GET)
    def test_search_failure_is_absent(self, mock_get):
        mock_get.side_effect = requests.ConnectionError("down")
        assert CoinGeckoSymbolResolver().resolve_id("ZXQ") is None

    @patch(REQUESTS_GET)
    def test_extra_ids_extend_static_table(self, mock_get):
        resolver = CoinGeckoSymbolResolver(extra_ids={"pepe": "pepe"})
        assert resolver.static_id("PEPE") == "pepe"
        assert resolver.resolve_id("PEPE") == "pepe"
        mock_get.assert_not_called()


class TestCoinGeckoPriceProvider:
    @patch(REQUESTS_GET)
    def test_btc_resolves_statically_then_prices(self, mock_get):
        mock_get.side_effect = _coingecko_router(prices={"bitcoin": {"usd": 64000.5}})
        assert CoinGeckoPriceProvider().fetch_price("BTC") == 64000.5
        urls = [c.args[0] for c in mock_get.call_args_list]
        assert len(urls) == 1
        assert urls[0].endswith("/simple/price")
        assert mock_get.call_args.kwargs["params"] == {"ids": "bitcoin", "vs_currencies": "usd"}

    @patch(REQUESTS_GET)
    def test_unresolved_symbol_skips_price_call(self, mock_get):
        mock_get.side_effect = _coingecko_router(search_coins=[])
        assert CoinGeckoPriceProvider().fetch_price("ZXQ") is None
        urls = [c.args[0] for c in mock_get.call_args_list]
        assert len(urls) == 1
        assert urls[0].endswith("/search")

    @patch(REQUESTS_GET)
    def test_missing_usd_field_is_absent(self, mock_get):
        mock_get.side_effect = _coingecko_router(prices={"bitcoin": {}})
        assert CoinGeckoPriceProvider().fetch_price("BTC") is None

    @patch(REQUESTS_GET)
    def test_price_call_failure_is_absent(self, mock_get):
        mock_get.side_effect = requests.Timeout("slow")
        assert CoinGeckoPriceProvider().fetch_price("BTC") is None


class TestCoinbaseSpotProvider:
    @patch(REQUESTS_GET)
    def test_spot_amount(self, mock_get):
        mock_get.return_value = _resp({"data": {"amount": "50000.00", "currency": "USD"}})
        assert CoinbaseSpotProvider().fetch_price("btc") == 50000.0
        assert mock_get.call_args.args[0].endswith("/v2/prices/BTC-USD/spot")

    @patch(REQUESTS_GET)
    def test_missing_amount_is_absent(self, mock_get):
        mock_get.return_value = _resp({"errors": [{"id": "not_found"}]})
        assert CoinbaseSpotProvider().fetch_price("ZXQ") is None


class TestRegistryIntegration:
    def test_default_registry_names(self):
        registry = create_default_registry()
        assert registry.names(AssetClass.STOCK) == [
            "yahoo_quote",
            "yahoo_summary",
            "yahoo_chart",
            "finnhub",
        ]
        assert registry.names(AssetClass.CRYPTO) == ["coingecko", "coinbase"]

    def test_build_chain_follows_priority_and_skips_unknown(self):
        registry = create_default_registry()
        providers = registry.build_chain(AssetClass.STOCK, ["yahoo_chart", "nope", "yahoo_quote"])
        assert [p.provider_name for p in providers] == ["yahoo_chart", "yahoo_quote"]

    def test_instances_are_reused(self):
        registry = create_default_registry()
        assert registry.get(AssetClass.CRYPTO, "coingecko") is registry.get(
            AssetClass.CRYPTO, "coingecko"
        )

    def test_unknown_provider_raises(self):
        with pytest.raises(KeyError, match="Unknown crypto provider"):
            ProviderRegistry().get(AssetClass.CRYPTO, "kraken")

    def test_registered_instances_and_classes(self):
        registry = ProviderRegistry()
        fake = FakePriceProvider("fake", {"AAPL": 1.0})
        registry.register(AssetClass.STOCK, "fake", fake)
        registry.register(AssetClass.STOCK, "chart", YahooChartProvider)
        assert registry.get(AssetClass.STOCK, "fake") is fake
        assert isinstance(registry.get(AssetClass.STOCK, "chart"), YahooChartProvider)

    def test_create_asset_chains_from_registry(self):
        registry = ProviderRegistry()
        stock = FakePriceProvider("s", {"AAPL": 190.0})
        crypto = FakePriceProvider("c", {"BTC": 64000.0})
        registry.register(AssetClass.STOCK, "s", stock)
        registry.register(AssetClass.CRYPTO, "c", crypto)

        chains = create_asset_chains(registry, stock_priority=["s"], crypto_priority=["c"])
        assert chains.resolve(AssetClass.STOCK, "AAPL") == 190.0
        assert chains.resolve(AssetClass.CRYPTO, "BTC") == 64000.0
        assert chains.chain_for(AssetClass.STOCK).provider_names == ["s"]

    def test_empty_priority_builds_an_empty_chain(self):
        registry = create_default_registry()
        assert registry.build_chain(AssetClass.STOCK, []) == []
        assert len(registry.build_chain(AssetClass.STOCK, None)) == 4

    def test_create_asset_chains_keeps_explicit_empty_priority(self):
        registry = ProviderRegistry()
        registry.register(AssetClass.STOCK, "s", FakePriceProvider("s", {"AAPL": 190.0}))
        registry.register(AssetClass.CRYPTO, "c", FakePriceProvider("c", {"BTC": 64000.0}))

        chains = create_asset_chains(registry, stock_priority=[], crypto_priority=["c"])
        assert chains.chain_for(AssetClass.STOCK).provider_names == []
        assert chains.resolve(AssetClass.STOCK, "AAPL") is None
