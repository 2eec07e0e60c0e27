"""
Provider Adapters - External API Clients

This package contains the adapter for the Navasan currency API.
"""

from tomanrate.adapters.providers.base import RateProvider
from tomanrate.adapters.providers.navasan import NavasanProvider

__all__ = [
    "RateProvider",
    "NavasanProvider",
]
