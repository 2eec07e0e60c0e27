"""
Formatting Adapters - Output Presentation

This package contains functions for shaping service results into the
public JSON payload and HTTP cache headers.
"""

from tomanrate.adapters.formatting.formatter import (
    cache_control_header,
    cache_max_age,
    format_exchange_rate,
    format_usage,
)

__all__ = [
    "format_exchange_rate",
    "format_usage",
    "cache_control_header",
    "cache_max_age",
]
