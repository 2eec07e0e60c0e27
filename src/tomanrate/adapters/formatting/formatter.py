"""
Response Formatter - Exchange Rate Payload and Cache Headers

This module turns an ExchangeRateResult into the JSON body served at
/api/exchange-rate and computes the matching Cache-Control header.

Body shape:
  {"usd": {"value": "108400", "change": 1100, "timestamp": ..., "date": ...},
   "_meta": {"fetchedAt": ..., "freshness": ..., "source": ...,
             "usage": {"monthly": ..., "remaining": ..., "limit": ...}}}

Files that USE this module:
- tomanrate.adapters.http.api (format_exchange_rate, cache_control_header)
- tests.test_formatter (unit tests)

Files that this module USES:
- tomanrate.domain.models (ExchangeRateResult, Freshness, UsageSnapshot)
"""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, Optional

from tomanrate.domain.models import ExchangeRateResult, Freshness, UsageSnapshot

FRESH_CACHE_SECONDS = 3600
DEFAULT_CACHE_SECONDS = 300


def _iso(ts: datetime) -> str:
    """ISO-8601 in UTC with millisecond precision and a Z suffix."""
    return ts.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def format_usage(usage: Optional[UsageSnapshot], monthly_limit: int) -> Optional[Dict[str, int]]:
    """
    Format the usage block of _meta.

    Args:
        usage: Latest usage snapshot (None when never recorded)
        monthly_limit: Configured monthly call budget

    Returns:
        {"monthly", "remaining", "limit"} or None if usage is unknown
    """
    if usage is None:
        return None
    return {
        "monthly": usage.monthly_usage,
        "remaining": monthly_limit - usage.monthly_usage,
        "limit": monthly_limit,
    }


def format_exchange_rate(
    result: ExchangeRateResult,
    monthly_limit: int,
    now: Optional[datetime] = None,
) -> Dict[str, Any]:
    """
    Build the public JSON body for a rate result.

    A record without provider timestamp/date gets the current time (epoch
    milliseconds) and today's ISO date instead.

    Args:
        result: Orchestrator result
        monthly_limit: Configured monthly call budget for the usage block
        now: Current time (defaults to UTC now)

    Returns:
        JSON-serializable dictionary
    """
    if now is None:
        now = datetime.now(timezone.utc)
    record = result.record

    meta: Dict[str, Any] = {
        "fetchedAt": _iso(record.fetched_at),
        "freshness": result.freshness.value,
        "source": result.source.value,
    }
    usage = format_usage(result.usage, monthly_limit)
    if usage is not None:
        meta["usage"] = usage

    return {
        "usd": {
            "value": str(record.rate_value),
            "change": record.change_value,
            "timestamp": record.provider_timestamp or int(now.timestamp() * 1000),
            "date": record.provider_date or now.astimezone(timezone.utc).date().isoformat(),
        },
        "_meta": meta,
    }


def cache_max_age(freshness: Freshness) -> int:
    """Edge cache lifetime in seconds: an hour when fresh, five minutes otherwise."""
    return FRESH_CACHE_SECONDS if freshness == Freshness.FRESH else DEFAULT_CACHE_SECONDS


def cache_control_header(freshness: Freshness) -> str:
    """
    Cache-Control value for a response with the given freshness.

    Returns:
        "public, s-maxage=X, stale-while-revalidate=2X"
    """
    seconds = cache_max_age(freshness)
    return f"public, s-maxage={seconds}, stale-while-revalidate={seconds * 2}"
