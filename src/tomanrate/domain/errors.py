"""
Domain Errors - Business Logic Exceptions

This module defines domain-specific exceptions that represent
business rule violations and domain errors.
"""


class DomainError(Exception):
    """Base exception for domain errors."""
    pass


class ConfigurationError(DomainError):
    """Raised when the Navasan API key is not configured."""
    pass


class RateUnavailableError(DomainError):
    """Raised when there is no cached rate and no fetch succeeded."""
    pass


class UpstreamError(DomainError):
    """Raised inside the Navasan adapter when a request or its payload fails."""
    pass
