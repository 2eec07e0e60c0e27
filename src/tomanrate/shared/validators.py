"""
Input Validation Utilities - Configuration and Upstream Data Validation

This module provides small validation and parsing helpers shared by the
configuration layer and the Navasan adapter. Upstream numbers arrive as
strings ("108400", "10,948,570", "57") and are normalized here.

Files that USE this module:
- tomanrate.config.settings (validate_api_key)
- tomanrate.adapters.providers.navasan (to_int for rate values and usage counters)

Files that this module USES:
- None (pure utility functions)
"""
import re
from typing import Any, Optional


def validate_api_key(api_key: Optional[str]) -> bool:
    """
    Validate API key presence.

    Navasan keys have no documented format, so only emptiness and
    whitespace are rejected.

    Args:
        api_key: API key to validate

    Returns:
        True if usable, False otherwise
    """
    if not api_key:
        return False

    return not api_key.isspace()


def to_int(value: Any) -> int:
    """
    Convert an upstream numeric value to integer, handling commas and decimals.

    Args:
        value: Value to convert (e.g., '108400', '10,948,570', '123.45', 57)

    Returns:
        Integer value (decimals are truncated, not rounded)

    Raises:
        ValueError: If the value is not numeric
    """
    if isinstance(value, bool):
        raise ValueError(f"Not a number: {value!r}")
    if isinstance(value, (int, float)):
        return int(value)
    s = str(value if value is not None else "").replace(",", "").strip()
    if not re.match(r"^-?\d+(\.\d+)?$", s):
        raise ValueError(f"Not a number: {value!r}")
    return int(float(s))
