"""
Formatter Tests - Unit Tests for the Response Payload and Cache Headers

Files that this module USES:
- tomanrate.adapters.formatting.formatter (functions under test)
- tomanrate.domain.models (ExchangeRateResult for test data)
- pytest (testing framework)
"""
import pytest  # Testing framework for writing and running tests

from datetime import timedelta

from tomanrate.adapters.formatting.formatter import (
    cache_control_header,
    format_exchange_rate,
    format_usage,
)
from tomanrate.domain.models import ExchangeRateResult, Freshness, RateRecord, RateSource

from conftest import NOW, make_record, make_usage


class TestFormatExchangeRate:
    def test_full_payload(self):
        record = make_record(timedelta(hours=3))
        result = ExchangeRateResult(record, RateSource.CACHED, Freshness.CACHED, make_usage(118))

        body = format_exchange_rate(result, monthly_limit=120, now=NOW)

        assert body == {
            "usd": {
                "value": "108400",
                "change": -250.0,
                "timestamp": 1768000000,
                "date": "1404-10-20 10:00:00",
            },
            "_meta": {
                "fetchedAt": "2026-01-10T09:00:00.000Z",
                "freshness": "cached",
                "source": "cached",
                "usage": {"monthly": 118, "remaining": 2, "limit": 120},
            },
        }

    def test_usage_omitted_when_unknown(self):
        result = ExchangeRateResult(make_record(timedelta(0)), RateSource.NAVASAN, Freshness.FRESH)

        body = format_exchange_rate(result, monthly_limit=120, now=NOW)

        assert "usage" not in body["_meta"]
        assert body["_meta"]["source"] == "navasan"
        assert body["_meta"]["freshness"] == "fresh"

    def test_missing_provider_fields_fall_back_to_now(self):
        record = RateRecord(
            rate_value=108400, change_value=0.0,
            provider_timestamp=None, provider_date=None,
            fetched_at=NOW - timedelta(hours=2),
        )
        result = ExchangeRateResult(record, RateSource.CACHED, Freshness.CACHED)

        body = format_exchange_rate(result, monthly_limit=120, now=NOW)

        assert body["usd"]["timestamp"] == int(NOW.timestamp() * 1000)
        assert body["usd"]["date"] == "2026-01-10"


class TestFormatUsage:
    def test_none(self):
        assert format_usage(None, 120) is None

    def test_remaining_can_be_negative(self):
        assert format_usage(make_usage(125), 120) == {"monthly": 125, "remaining": -5, "limit": 120}


class TestCacheControl:
    @pytest.mark.parametrize("freshness,expected", [
        (Freshness.FRESH, "public, s-maxage=3600, stale-while-revalidate=7200"),
        (Freshness.CACHED, "public, s-maxage=300, stale-while-revalidate=600"),
        (Freshness.STALE, "public, s-maxage=300, stale-while-revalidate=600"),
    ])
    def test_header(self, freshness, expected):
        assert cache_control_header(freshness) == expected
