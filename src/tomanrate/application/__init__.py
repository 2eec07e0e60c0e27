"""
Application Layer - Use Cases and Services

This package contains application services that orchestrate domain logic.
No direct I/O dependencies - uses adapters through interfaces.
"""

from tomanrate.application.rates_service import ExchangeRateService, build_service
from tomanrate.application.health import StatusReport, build_status

__all__ = [
    "ExchangeRateService",
    "build_service",
    "StatusReport",
    "build_status",
]
