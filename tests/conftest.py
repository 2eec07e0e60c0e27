"""
Shared Test Fixtures

Fixed clock, inline executor and tmp_path-backed stores used across the
service, status and API tests.
"""
from concurrent.futures import Executor, Future
from datetime import datetime, timedelta, timezone
from unittest.mock import Mock

import pytest

from tomanrate.adapters.persistence.file_store import RateStore, UsageStore
from tomanrate.adapters.providers.base import RateProvider
from tomanrate.application.rates_service import ExchangeRateService
from tomanrate.domain.models import NavasanRate, RateRecord, UsageReport, UsageSnapshot
from tomanrate.domain.policy import RefreshPolicy, RefreshThresholds

NOW = datetime(2026, 1, 10, 12, 0, tzinfo=timezone.utc)


class FakeClock:
    """Callable clock whose time only moves when a test moves it."""

    def __init__(self, now: datetime = NOW):
        self.current = now

    def __call__(self) -> datetime:
        return self.current

    def advance(self, **kwargs) -> None:
        self.current += timedelta(**kwargs)


class InlineExecutor(Executor):
    """Runs submitted work immediately so background effects are observable."""

    def submit(self, fn, *args, **kwargs):
        future = Future()
        try:
            future.set_result(fn(*args, **kwargs))
        except Exception as e:
            future.set_exception(e)
        return future


def make_record(age: timedelta, rate_value: int = 108400, now: datetime = NOW) -> RateRecord:
    return RateRecord(
        rate_value=rate_value,
        change_value=-250.0,
        provider_timestamp=1768000000,
        provider_date="1404-10-20 10:00:00",
        fetched_at=now - age,
    )


def make_usage(monthly_usage: int, limit: int = 120, now: datetime = NOW) -> UsageSnapshot:
    return UsageSnapshot(
        monthly_usage=monthly_usage,
        daily_usage=2,
        monthly_limit=limit,
        checked_at=now - timedelta(hours=1),
    )


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def rate_store(tmp_path):
    return RateStore(tmp_path / "exchange_rates.jsonl")


@pytest.fixture
def usage_store(tmp_path):
    return UsageStore(tmp_path / "api_usage.jsonl")


@pytest.fixture
def provider():
    mock_provider = Mock(spec=RateProvider)
    mock_provider.fetch_rate.return_value = NavasanRate(
        value="109500", change=1100, timestamp=1768040000, date="1404-10-20 12:00:00"
    )
    mock_provider.fetch_usage.return_value = UsageReport(monthly_usage=57, daily_usage=3, hourly_usage=1)
    return mock_provider


@pytest.fixture
def service(rate_store, usage_store, provider, clock):
    return ExchangeRateService(
        rate_store=rate_store,
        usage_store=usage_store,
        provider=provider,
        policy=RefreshPolicy(RefreshThresholds()),
        clock=clock,
        executor=InlineExecutor(),
    )
