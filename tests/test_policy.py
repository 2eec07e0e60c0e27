"""
Policy Tests - Freshness Classification and Refresh Decisions

Files that this module USES:
- tomanrate.domain.freshness (classify_freshness, hours_since)
- tomanrate.domain.policy (RefreshPolicy, RefreshThresholds)
- pytest (testing framework)
"""
from datetime import datetime, timedelta, timezone

import pytest

from tomanrate.domain.freshness import classify_freshness, hours_since
from tomanrate.domain.models import Freshness
from tomanrate.domain.policy import RefreshPolicy, RefreshThresholds

from conftest import NOW, make_record, make_usage

DEFAULTS = RefreshThresholds()


class TestHoursSince:
    def test_hours(self):
        assert hours_since(NOW - timedelta(hours=5, minutes=30), NOW) == 5.5

    def test_naive_timestamp_treated_as_utc(self):
        naive = datetime(2026, 1, 10, 10, 0)
        assert hours_since(naive, NOW) == 2

    def test_other_timezone(self):
        tehran = timezone(timedelta(hours=3, minutes=30))
        ts = datetime(2026, 1, 10, 14, 30, tzinfo=tehran)  # 11:00 UTC
        assert hours_since(ts, NOW) == 1


class TestClassifyFreshness:
    @pytest.mark.parametrize("age,expected", [
        (timedelta(0), Freshness.FRESH),
        (timedelta(minutes=59), Freshness.FRESH),
        (timedelta(hours=1), Freshness.CACHED),
        (timedelta(hours=23, minutes=59), Freshness.CACHED),
        (timedelta(hours=24), Freshness.STALE),
        (timedelta(days=30), Freshness.STALE),
    ])
    def test_buckets(self, age, expected):
        assert classify_freshness(NOW - age, NOW, DEFAULTS) == expected

    def test_same_age_same_result(self):
        # Only the age matters, not the wall-clock time
        results = set()
        for shift in range(5):
            now = NOW + timedelta(days=shift)
            results.add(classify_freshness(now - timedelta(hours=3), now, DEFAULTS))
        assert results == {Freshness.CACHED}

    def test_custom_thresholds(self):
        t = RefreshThresholds(fresh_hours=0.5, stale_hours=2)
        assert classify_freshness(NOW - timedelta(minutes=45), NOW, t) == Freshness.CACHED
        assert classify_freshness(NOW - timedelta(hours=2), NOW, t) == Freshness.STALE


class TestRefreshPolicy:
    def setup_method(self):
        self.policy = RefreshPolicy()

    def test_cold_start(self):
        assert self.policy.should_refresh(None, None, NOW)
        assert self.policy.should_refresh(None, make_usage(119), NOW)

    def test_fresh_record_never_refreshes(self):
        record = make_record(timedelta(minutes=10))
        assert not self.policy.should_refresh(record, None, NOW)
        assert not self.policy.should_refresh(record, make_usage(0), NOW)

    def test_stale_record_always_refreshes(self):
        record = make_record(timedelta(hours=25))
        assert self.policy.should_refresh(record, make_usage(119), NOW)
        assert self.policy.should_refresh(record, make_usage(200), NOW)

    def test_cached_band_without_usage_refreshes(self):
        assert self.policy.should_refresh(make_record(timedelta(hours=5)), None, NOW)

    def test_cached_band_with_plenty_of_quota_refreshes(self):
        assert self.policy.should_refresh(make_record(timedelta(hours=5)), make_usage(50), NOW)

    def test_conservation_suppresses_young_records(self):
        usage = make_usage(118)  # 2 left
        assert not self.policy.should_refresh(make_record(timedelta(hours=5)), usage, NOW)
        assert not self.policy.should_refresh(make_record(timedelta(hours=11, minutes=59)), usage, NOW)

    def test_conservation_allows_at_interval(self):
        usage = make_usage(118)
        assert self.policy.should_refresh(make_record(timedelta(hours=12)), usage, NOW)
        assert self.policy.should_refresh(make_record(timedelta(hours=13)), usage, NOW)

    def test_conservation_boundary(self):
        # remaining == threshold is not under pressure
        assert self.policy.should_refresh(make_record(timedelta(hours=5)), make_usage(115), NOW)
        assert not self.policy.should_refresh(make_record(timedelta(hours=5)), make_usage(116), NOW)

    def test_custom_thresholds(self):
        policy = RefreshPolicy(RefreshThresholds(
            fresh_hours=2, stale_hours=6, conservation_threshold=10,
            conservation_interval_hours=4, monthly_limit=30,
        ))
        usage = make_usage(25, limit=30)
        assert not policy.should_refresh(make_record(timedelta(hours=1)), None, NOW)
        assert not policy.should_refresh(make_record(timedelta(hours=3)), usage, NOW)
        assert policy.should_refresh(make_record(timedelta(hours=4)), usage, NOW)
        assert policy.should_refresh(make_record(timedelta(hours=7)), usage, NOW)


class TestEstimatedRemaining:
    def test_unknown_usage_assumes_full_quota(self):
        assert RefreshPolicy().estimated_remaining(None) == 120

    def test_from_snapshot(self):
        assert RefreshPolicy().estimated_remaining(make_usage(118)) == 2

    def test_can_go_negative(self):
        assert RefreshPolicy().estimated_remaining(make_usage(125)) == -5

    def test_uses_configured_limit(self):
        policy = RefreshPolicy(RefreshThresholds(monthly_limit=200))
        assert policy.estimated_remaining(make_usage(118)) == 82
