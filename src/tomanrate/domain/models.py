"""
Domain Models - Pure Business Objects

This module contains domain models representing core business concepts:
- Persisted rate records and quota usage snapshots
- Upstream (Navasan) payloads after parsing
- The classification enums exposed to callers
- The orchestrator's result

Files that USE this module:
- tomanrate.domain.freshness, tomanrate.domain.policy (pure rules)
- tomanrate.application.* (services build and return these models)
- tomanrate.adapters.* (adapters create, persist and format these models)
- tests.* (tests use domain models for test data)

Files that this module USES:
- None (pure domain layer, no external dependencies)
"""

from __future__ import annotations  # Enable postponed evaluation of annotations

from dataclasses import dataclass  # Decorator for creating data classes
from datetime import datetime  # Date/time utilities for timestamps
from enum import Enum
from typing import Optional  # Type hints for optional values


class Freshness(str, Enum):
    """Age bucket of a rate record, derived from time since fetch."""
    FRESH = "fresh"
    CACHED = "cached"
    STALE = "stale"


class RateSource(str, Enum):
    """Where the returned rate came from."""
    NAVASAN = "navasan"
    CACHED = "cached"
    FALLBACK = "fallback"


@dataclass(frozen=True)
class RateRecord:
    """
    One successful USD fetch, as persisted in the rate log.

    Attributes:
        rate_value: Toman per 1 USD
        change_value: Signed delta from the provider's previous published value
        provider_timestamp: Provider timestamp (informational)
        provider_date: Provider date string (informational)
        fetched_at: When this process obtained the value (UTC, drives freshness)
    """
    rate_value: int
    change_value: float
    provider_timestamp: Optional[int]
    provider_date: Optional[str]
    fetched_at: datetime


@dataclass(frozen=True)
class UsageSnapshot:
    """
    Upstream-reported quota consumption at a point in time.

    The counters come from Navasan itself and may lag; monthly_usage can
    exceed monthly_limit.
    """
    monthly_usage: int
    daily_usage: int
    monthly_limit: int
    checked_at: datetime

    @property
    def remaining(self) -> int:
        """Calls left this month according to this snapshot (may be negative)."""
        return self.monthly_limit - self.monthly_usage


@dataclass(frozen=True)
class NavasanRate:
    """USD node of the Navasan /latest response."""
    value: str
    change: float
    timestamp: Optional[int] = None
    date: Optional[str] = None


@dataclass(frozen=True)
class UsageReport:
    """Parsed Navasan /usage response."""
    monthly_usage: int
    daily_usage: int
    hourly_usage: int


@dataclass(frozen=True)
class ExchangeRateResult:
    """
    What the orchestrator hands back to callers.

    Attributes:
        record: The rate record being served
        source: navasan when fetched during this call, cached otherwise
        freshness: Age bucket of the record at response time
        usage: Latest known usage snapshot, if any
    """
    record: RateRecord
    source: RateSource
    freshness: Freshness
    usage: Optional[UsageSnapshot] = None
