"""
Refresh Policy - When Is an Upstream Call Worth Its Quota

Decides, from the current rate record and the last known usage snapshot,
whether the service should spend one of its monthly Navasan calls.

Rules, in order:
1. No record: refresh (cold start).
2. Younger than the fresh threshold: never refresh.
3. Older than the stale threshold: always refresh, even under quota pressure.
4. In between, with fewer than conservation_threshold calls left: refresh
   only once the record is at least conservation_interval_hours old.
5. Otherwise refresh.

The usage snapshot is advisory and may be a cycle behind; a missing snapshot
means "assume full quota".

Files that USE this module:
- tomanrate.config.settings (builds RefreshThresholds)
- tomanrate.application.rates_service (should_refresh, estimated_remaining)
- tomanrate.application.health (status report)

Files that this module USES:
- tomanrate.domain.models (RateRecord, UsageSnapshot)
- tomanrate.domain.freshness (hours_since)
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from tomanrate.domain.freshness import hours_since
from tomanrate.domain.models import RateRecord, UsageSnapshot

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RefreshThresholds:
    """
    Tunables for freshness and quota conservation.

    Attributes:
        fresh_hours: Below this age a record is fresh and never refreshed
        stale_hours: Above this age a refresh is forced
        conservation_threshold: Remaining-call count that triggers conservation
        conservation_interval_hours: Minimum age before refreshing under conservation
        monthly_limit: Monthly call budget of the upstream plan
    """
    fresh_hours: float = 1
    stale_hours: float = 24
    conservation_threshold: int = 5
    conservation_interval_hours: float = 12
    monthly_limit: int = 120


class RefreshPolicy:
    """Tiered refresh decision trading freshness against the monthly budget."""

    def __init__(self, thresholds: Optional[RefreshThresholds] = None):
        self.thresholds = thresholds or RefreshThresholds()

    def estimated_remaining(self, usage: Optional[UsageSnapshot]) -> int:
        """
        Calls left this month as far as we know.

        Args:
            usage: Last usage snapshot, or None if never recorded

        Returns:
            monthly_limit - monthly_usage, or the full monthly limit when unknown
        """
        if usage is None:
            return self.thresholds.monthly_limit
        return self.thresholds.monthly_limit - usage.monthly_usage

    def should_refresh(
        self,
        current: Optional[RateRecord],
        usage: Optional[UsageSnapshot],
        now: datetime,
    ) -> bool:
        """
        Decide whether a new upstream call is warranted.

        Args:
            current: Latest persisted rate record
            usage: Latest usage snapshot
            now: Current time

        Returns:
            True if the caller should try to fetch a new rate
        """
        t = self.thresholds
        if current is None:
            return True

        hours = hours_since(current.fetched_at, now)

        if hours < t.fresh_hours:
            return False
        if hours > t.stale_hours:
            return True

        if usage is not None:
            remaining = self.estimated_remaining(usage)
            if remaining < t.conservation_threshold:
                allowed = hours >= t.conservation_interval_hours
                logger.debug(
                    "Conservation mode: %d calls left, record %.1fh old, refresh=%s",
                    remaining, hours, allowed,
                )
                return allowed

        return True
