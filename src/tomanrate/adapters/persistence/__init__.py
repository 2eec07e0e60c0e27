"""
Persistence Adapters - Data Storage

This package contains adapters for persisting data:
- Append-only JSON Lines logs for rate records and usage snapshots
"""

from tomanrate.adapters.persistence.file_store import AppendOnlyLog, RateStore, UsageStore

__all__ = [
    "AppendOnlyLog",
    "RateStore",
    "UsageStore",
]
