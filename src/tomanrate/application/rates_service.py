"""
Rates Service - Exchange Rate Acquisition and Conservation Cache

This module contains the request/response cycle that stands between the
application and the rate-limited Navasan API:

1. Read the latest rate record and usage snapshot.
2. Ask the refresh policy whether a new upstream call is warranted.
3. If so, and an API key is present and quota remains, fetch. On success,
   persist the new record, refresh usage in the background and return it
   as fresh data from navasan. On failure fall through.
4. Serve the cached record (if any) with its current freshness.
5. Otherwise report that no data is available.

Each call is stateless given the persisted logs; the only background work
is the usage refresh, which is submitted to an executor and never awaited.

Files that USE this module:
- tomanrate.adapters.http.api (ExchangeRateService for GET /api/exchange-rate)
- tomanrate.application.health (status report)
- tests.test_rates_service (unit tests)

Files that this module USES:
- tomanrate.adapters.persistence.file_store (RateStore, UsageStore)
- tomanrate.adapters.providers (RateProvider, NavasanProvider)
- tomanrate.domain (models, errors, freshness, policy)
"""
from __future__ import annotations

import logging
from concurrent.futures import Executor, Future, ThreadPoolExecutor
from datetime import datetime, timezone
from typing import Callable, Optional

from tomanrate.adapters.persistence.file_store import RateStore, UsageStore
from tomanrate.adapters.providers.base import RateProvider
from tomanrate.adapters.providers.navasan import NavasanProvider
from tomanrate.domain.errors import ConfigurationError, RateUnavailableError
from tomanrate.domain.freshness import classify_freshness
from tomanrate.domain.models import (
    ExchangeRateResult,
    Freshness,
    RateRecord,
    RateSource,
    UsageSnapshot,
)
from tomanrate.domain.policy import RefreshPolicy
from tomanrate.shared.validators import to_int, validate_api_key

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ExchangeRateService:
    """
    Orchestrates stores, refresh policy and provider for one rate request.

    Args:
        rate_store: Append-only rate log
        usage_store: Append-only usage log
        provider: Upstream client (best-effort, returns None on failure)
        policy: Refresh policy; its thresholds also carry the monthly limit
        clock: Callable returning the current UTC time
        executor: Where background usage refreshes run (a private
            single-thread pool when omitted)
    """

    def __init__(
        self,
        rate_store: RateStore,
        usage_store: UsageStore,
        provider: RateProvider,
        policy: Optional[RefreshPolicy] = None,
        clock: Optional[Callable[[], datetime]] = None,
        executor: Optional[Executor] = None,
    ):
        self.rate_store = rate_store
        self.usage_store = usage_store
        self.provider = provider
        self.policy = policy or RefreshPolicy()
        self._clock = clock or _utcnow
        self._owns_executor = executor is None
        self._executor = executor or ThreadPoolExecutor(max_workers=1, thread_name_prefix="usage-refresh")

    @property
    def monthly_limit(self) -> int:
        return self.policy.thresholds.monthly_limit

    def now(self) -> datetime:
        return self._clock()

    def latest_rate(self) -> Optional[RateRecord]:
        """Latest persisted record; read errors count as no cache."""
        try:
            return self.rate_store.get_latest()
        except Exception as e:
            logger.error("Failed to get cached rate: %s", e)
            return None

    def latest_usage(self) -> Optional[UsageSnapshot]:
        """Latest usage snapshot; read errors count as unknown usage."""
        try:
            return self.usage_store.get_latest()
        except Exception as e:
            logger.error("Failed to get cached usage: %s", e)
            return None

    def _save_rate(self, record: RateRecord) -> None:
        try:
            self.rate_store.append(record)
        except Exception as e:
            logger.error("Failed to save rate: %s", e)

    def refresh_usage(self, api_key: str) -> Optional[UsageSnapshot]:
        """
        Fetch quota usage from Navasan and append it to the usage log.

        Runs in the background after a successful rate fetch. Every failure
        is logged and dropped.

        Args:
            api_key: Navasan API key

        Returns:
            The recorded snapshot, or None if the fetch failed
        """
        try:
            report = self.provider.fetch_usage(api_key)
        except Exception as e:
            logger.warning("Failed to fetch usage: %s", e)
            return None
        if report is None:
            return None

        snapshot = UsageSnapshot(
            monthly_usage=report.monthly_usage,
            daily_usage=report.daily_usage,
            monthly_limit=self.monthly_limit,
            checked_at=self.now(),
        )
        try:
            self.usage_store.append(snapshot)
        except Exception as e:
            logger.error("Failed to save usage: %s", e)
        logger.info("Usage: %d/%d monthly", snapshot.monthly_usage, self.monthly_limit)
        return snapshot

    def _dispatch_usage_refresh(self, api_key: str) -> Optional[Future]:
        try:
            future = self._executor.submit(self.refresh_usage, api_key)
        except RuntimeError as e:
            # Executor already shut down
            logger.warning("Usage refresh not scheduled: %s", e)
            return None
        future.add_done_callback(_log_background_failure)
        return future

    def _fetch_and_store(self, api_key: str, usage: Optional[UsageSnapshot]) -> Optional[ExchangeRateResult]:
        try:
            rate = self.provider.fetch_rate(api_key)
        except Exception as e:
            logger.error("Failed to fetch from Navasan: %s", e)
            return None
        if rate is None:
            return None
        try:
            rate_value = to_int(rate.value)
        except ValueError as e:
            logger.error("Navasan returned a non-numeric rate %r: %s", rate.value, e)
            return None

        record = RateRecord(
            rate_value=rate_value,
            change_value=rate.change,
            provider_timestamp=rate.timestamp,
            provider_date=rate.date,
            fetched_at=self.now(),
        )
        self._save_rate(record)
        self._dispatch_usage_refresh(api_key)

        return ExchangeRateResult(
            record=record,
            source=RateSource.NAVASAN,
            freshness=Freshness.FRESH,
            usage=self.latest_usage() or usage,
        )

    def get_exchange_rate(self, api_key: Optional[str]) -> Optional[ExchangeRateResult]:
        """
        Return the best rate available right now.

        Args:
            api_key: Navasan API key (no upstream call is made without one)

        Returns:
            ExchangeRateResult, or None when there is no cached record and
            no fetch succeeded
        """
        cached_rate = self.latest_rate()
        cached_usage = self.latest_usage()
        now = self.now()

        if self.policy.should_refresh(cached_rate, cached_usage, now) and validate_api_key(api_key):
            remaining = self.policy.estimated_remaining(cached_usage)
            if remaining > 0:
                logger.info("Fetching fresh data from Navasan (%d calls remaining)", remaining)
                result = self._fetch_and_store(api_key, cached_usage)
                if result is not None:
                    return result
            else:
                logger.warning("Monthly API limit reached, using cached data")

        if cached_rate is not None:
            freshness = classify_freshness(cached_rate.fetched_at, now, self.policy.thresholds)
            logger.info(
                "Returning %s cached data from %s",
                freshness.value,
                cached_rate.fetched_at.isoformat(),
            )
            return ExchangeRateResult(
                record=cached_rate,
                source=RateSource.CACHED,
                freshness=freshness,
                usage=cached_usage,
            )

        logger.error("No exchange rate data available")
        return None

    def require_exchange_rate(self, api_key: Optional[str]) -> ExchangeRateResult:
        """
        Like get_exchange_rate, but raising on the two hard failures.

        Raises:
            ConfigurationError: If no API key is configured
            RateUnavailableError: If there is no cache and no fetch succeeded
        """
        if not validate_api_key(api_key):
            raise ConfigurationError("API key not configured")
        result = self.get_exchange_rate(api_key)
        if result is None:
            raise RateUnavailableError("No exchange rate data available")
        return result

    def close(self) -> None:
        """Stop the private usage-refresh pool without waiting for it."""
        if self._owns_executor:
            self._executor.shutdown(wait=False)


def _log_background_failure(future: Future) -> None:
    if future.cancelled():
        return
    exc = future.exception()
    if exc is not None:
        logger.warning("Background usage refresh failed: %s", exc)


def build_service(config=None) -> ExchangeRateService:
    """
    Wire the service from settings.

    Args:
        config: Settings instance (defaults to the global settings)

    Returns:
        ExchangeRateService backed by the configured log files and Navasan
    """
    if config is None:
        from tomanrate.config import settings as config

    return ExchangeRateService(
        rate_store=RateStore(config.rate_log_file),
        usage_store=UsageStore(config.usage_log_file),
        provider=NavasanProvider(
            base_url=config.navasan_base_url,
            timeout=config.http_timeout_seconds,
        ),
        policy=RefreshPolicy(config.thresholds()),
    )
