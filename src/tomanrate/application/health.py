"""
Health Checker - Cache and Quota Status

This module reports the state of the exchange-rate cache without spending
any upstream quota: how old the current record is, what the refresh policy
would do right now, and what Navasan last reported about usage.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Optional

from tomanrate.application.rates_service import ExchangeRateService
from tomanrate.domain.freshness import classify_freshness, hours_since

logger = logging.getLogger(__name__)


@dataclass
class StatusReport:
    """Snapshot of cache and quota state at a point in time."""
    api_key_configured: bool
    records_stored: int
    would_refresh: bool
    checked_at: datetime
    fetched_at: Optional[datetime] = None
    age_hours: Optional[float] = None
    freshness: Optional[str] = None
    rate_value: Optional[int] = None
    usage: Optional[Dict[str, Any]] = None

    @property
    def is_healthy(self) -> bool:
        """Healthy when a rate can be served and it is not stale."""
        return self.rate_value is not None and self.freshness != "stale"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "healthy": self.is_healthy,
            "apiKeyConfigured": self.api_key_configured,
            "recordsStored": self.records_stored,
            "wouldRefresh": self.would_refresh,
            "checkedAt": self.checked_at.isoformat(),
            "rate": None if self.rate_value is None else {
                "value": self.rate_value,
                "fetchedAt": self.fetched_at.isoformat() if self.fetched_at else None,
                "ageHours": round(self.age_hours, 2) if self.age_hours is not None else None,
                "freshness": self.freshness,
            },
            "usage": self.usage,
        }


def build_status(service: ExchangeRateService, api_key_configured: bool) -> StatusReport:
    """
    Describe the cache and quota state.

    Args:
        service: Exchange rate service whose stores and policy are inspected
        api_key_configured: Whether a Navasan key is available

    Returns:
        StatusReport (never calls Navasan)
    """
    now = service.now()
    record = service.latest_rate()
    usage = service.latest_usage()

    report = StatusReport(
        api_key_configured=api_key_configured,
        records_stored=service.rate_store.count(),
        would_refresh=api_key_configured and service.policy.should_refresh(record, usage, now),
        checked_at=now,
    )

    if record is not None:
        report.fetched_at = record.fetched_at
        report.age_hours = hours_since(record.fetched_at, now)
        report.freshness = classify_freshness(record.fetched_at, now, service.policy.thresholds).value
        report.rate_value = record.rate_value

    if usage is not None:
        report.usage = {
            "monthly": usage.monthly_usage,
            "daily": usage.daily_usage,
            "remaining": service.policy.estimated_remaining(usage),
            "limit": service.monthly_limit,
            "checkedAt": usage.checked_at.isoformat(),
        }

    logger.debug("Status: healthy=%s freshness=%s", report.is_healthy, report.freshness)
    return report
