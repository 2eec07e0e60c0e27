"""
Base Provider Interface for the Rate Provider

This module defines the contract the exchange-rate service expects from an
upstream client. Both calls are best-effort and must return None instead of
raising.

Files that USE this module:
- tomanrate.adapters.providers.navasan (NavasanProvider implements RateProvider)
- tomanrate.application.rates_service (type of the injected provider)

Files that this module USES:
- tomanrate.domain.models (NavasanRate, UsageReport)
"""
from abc import ABC, abstractmethod
from typing import Optional

from tomanrate.domain.models import NavasanRate, UsageReport


class RateProvider(ABC):
    @abstractmethod
    def fetch_rate(self, api_key: str) -> Optional[NavasanRate]:
        """Return the latest USD rate, or None on failure."""
        raise NotImplementedError

    @abstractmethod
    def fetch_usage(self, api_key: str) -> Optional[UsageReport]:
        """Return the provider-reported quota usage, or None on failure."""
        raise NotImplementedError
