"""
Domain Layer - Pure Business Objects

This package contains domain models and business rules.
No dependencies on infrastructure or external systems.
"""

from tomanrate.domain.models import (
    ExchangeRateResult,
    Freshness,
    NavasanRate,
    RateRecord,
    RateSource,
    UsageReport,
    UsageSnapshot,
)
from tomanrate.domain.errors import (
    ConfigurationError,
    DomainError,
    RateUnavailableError,
    UpstreamError,
)
from tomanrate.domain.freshness import classify_freshness, hours_since
from tomanrate.domain.policy import RefreshPolicy, RefreshThresholds

__all__ = [
    "RateRecord",
    "UsageSnapshot",
    "NavasanRate",
    "UsageReport",
    "ExchangeRateResult",
    "Freshness",
    "RateSource",
    "DomainError",
    "ConfigurationError",
    "RateUnavailableError",
    "UpstreamError",
    "classify_freshness",
    "hours_since",
    "RefreshPolicy",
    "RefreshThresholds",
]
