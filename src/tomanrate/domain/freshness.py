"""
Freshness Classifier - Age Buckets for Cached Rates

Pure functions mapping the age of a rate record to fresh / cached / stale.
The result depends only on (now - fetched_at) and the thresholds.

Files that USE this module:
- tomanrate.domain.policy (hours_since)
- tomanrate.application.rates_service (classify_freshness for cached responses)
- tomanrate.application.health (status report)

Files that this module USES:
- tomanrate.domain.models (Freshness enum)
"""
from __future__ import annotations

from datetime import datetime, timezone
from typing import TYPE_CHECKING

from tomanrate.domain.models import Freshness

if TYPE_CHECKING:
    from tomanrate.domain.policy import RefreshThresholds


def _as_utc(ts: datetime) -> datetime:
    # Naive timestamps are treated as UTC
    if ts.tzinfo is None:
        return ts.replace(tzinfo=timezone.utc)
    return ts.astimezone(timezone.utc)


def hours_since(ts: datetime, now: datetime) -> float:
    """
    Hours elapsed between ts and now.

    Args:
        ts: Earlier timestamp
        now: Current time

    Returns:
        Elapsed hours as float (negative if ts is in the future)
    """
    return (_as_utc(now) - _as_utc(ts)).total_seconds() / 3600


def classify_freshness(fetched_at: datetime, now: datetime, thresholds: RefreshThresholds) -> Freshness:
    """
    Classify a record by its age.

    Args:
        fetched_at: When the record was fetched
        now: Current time
        thresholds: Fresh and stale boundaries in hours

    Returns:
        FRESH below the fresh threshold, STALE at or above the stale
        threshold, CACHED in between
    """
    hours = hours_since(fetched_at, now)
    if hours < thresholds.fresh_hours:
        return Freshness.FRESH
    if hours < thresholds.stale_hours:
        return Freshness.CACHED
    return Freshness.STALE
