"""
Shared Utilities - Cross-cutting Concerns

This package contains shared utilities used across all layers:
- Validation
- Logging configuration
"""

from tomanrate.shared.validators import to_int, validate_api_key
from tomanrate.shared.logging_conf import setup_logging

__all__ = [
    "validate_api_key",
    "to_int",
    "setup_logging",
]
