"""
File Store - Append-Only Rate and Usage Logs

This module persists rate records and usage snapshots as JSON Lines files.
Every write appends exactly one line; nothing is updated or deleted. Reads
return the entry with the latest timestamp, so the newest record wins even
if lines were appended out of order by concurrent writers.

Failures never escape: a read failure is reported as "no data" (None) and a
write failure is logged and dropped, because the caller may already hold a
rate to return.

Files that USE this module:
- tomanrate.application.rates_service (RateStore, UsageStore)
- tomanrate.application.health (record counts)

Files that this module USES:
- tomanrate.domain.models (RateRecord, UsageSnapshot)
"""
from __future__ import annotations

import json
import logging
import threading
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable, Dict, Generic, Iterator, Optional, TypeVar, Union

from tomanrate.domain.models import RateRecord, UsageSnapshot

logger = logging.getLogger(__name__)

T = TypeVar("T")

# One lock per log file, shared by every store instance in the process
_locks: Dict[Path, threading.Lock] = {}
_locks_guard = threading.Lock()


def _lock_for(path: Path) -> threading.Lock:
    with _locks_guard:
        return _locks.setdefault(path.resolve(), threading.Lock())


def _parse_ts(raw: Any) -> datetime:
    """Parse an ISO timestamp, accepting both "...Z" and "+00:00"."""
    if not isinstance(raw, str):
        raise ValueError(f"timestamp must be a string, got {type(raw).__name__}")
    ts = datetime.fromisoformat(raw.replace("Z", "+00:00"))
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=timezone.utc)
    return ts.astimezone(timezone.utc)


def rate_to_json(record: RateRecord) -> dict:
    """
    Convert a RateRecord to a JSON-serializable dictionary.

    Returns:
        Dictionary with ISO-formatted fetched_at
    """
    return {
        "rate_value": record.rate_value,
        "change_value": record.change_value,
        "navasan_timestamp": record.provider_timestamp,
        "navasan_date": record.provider_date,
        "fetched_at": record.fetched_at.isoformat(),
    }


def rate_from_json(data: dict) -> RateRecord:
    """
    Create a RateRecord from a JSON dictionary.

    Raises:
        KeyError, ValueError, TypeError: If the entry does not match the schema
    """
    ts = data.get("navasan_timestamp")
    return RateRecord(
        rate_value=int(data["rate_value"]),
        change_value=float(data.get("change_value") or 0),
        provider_timestamp=int(ts) if ts is not None else None,
        provider_date=data.get("navasan_date"),
        fetched_at=_parse_ts(data["fetched_at"]),
    )


def usage_to_json(snapshot: UsageSnapshot) -> dict:
    return {
        "api_name": "navasan",
        "monthly_usage": snapshot.monthly_usage,
        "daily_usage": snapshot.daily_usage,
        "monthly_limit": snapshot.monthly_limit,
        "checked_at": snapshot.checked_at.isoformat(),
    }


def usage_from_json(data: dict) -> UsageSnapshot:
    return UsageSnapshot(
        monthly_usage=int(data["monthly_usage"]),
        daily_usage=int(data.get("daily_usage", 0)),
        monthly_limit=int(data["monthly_limit"]),
        checked_at=_parse_ts(data["checked_at"]),
    )


class AppendOnlyLog(Generic[T]):
    """
    JSON Lines log with append and latest-wins reads.

    Args:
        path: Log file location (parent directories are created on first write)
        encode: Entry -> dict
        decode: dict -> entry (may raise on schema mismatch)
        sort_key: Entry -> timestamp used to pick the latest entry
    """

    def __init__(
        self,
        path: Union[str, Path],
        encode: Callable[[T], dict],
        decode: Callable[[dict], T],
        sort_key: Callable[[T], datetime],
    ):
        self.path = Path(path)
        self._encode = encode
        self._decode = decode
        self._sort_key = sort_key

    def _iter_entries(self) -> Iterator[T]:
        with self.path.open("r", encoding="utf-8") as f:
            for lineno, line in enumerate(f, start=1):
                line = line.strip()
                if not line:
                    continue
                try:
                    yield self._decode(json.loads(line))
                except (json.JSONDecodeError, KeyError, ValueError, TypeError) as e:
                    # A torn or hand-edited line must not hide the rest of the log
                    logger.warning("Skipping corrupt entry %s:%d: %s", self.path, lineno, e)

    def append(self, entry: T) -> None:
        """
        Append one entry. Errors are logged, never raised.

        Args:
            entry: Entry to persist
        """
        try:
            line = json.dumps(self._encode(entry), ensure_ascii=False) + "\n"
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with _lock_for(self.path):
                with self.path.open("a", encoding="utf-8") as f:
                    f.write(line)
                    f.flush()
        except Exception as e:
            logger.error("Failed to append to %s: %s", self.path, e)

    def get_latest(self) -> Optional[T]:
        """
        Return the entry with the greatest timestamp.

        Returns:
            Latest entry, or None if the log is missing, empty or unreadable
        """
        if not self.path.exists():
            return None
        try:
            latest: Optional[T] = None
            for entry in self._iter_entries():
                if latest is None or self._sort_key(entry) >= self._sort_key(latest):
                    latest = entry
            return latest
        except Exception as e:
            logger.error("Failed to read %s: %s", self.path, e, exc_info=True)
            return None

    def count(self) -> int:
        """Number of readable entries (0 if the log cannot be read)."""
        if not self.path.exists():
            return 0
        try:
            return sum(1 for _ in self._iter_entries())
        except Exception as e:
            logger.error("Failed to count %s: %s", self.path, e)
            return 0


class RateStore(AppendOnlyLog[RateRecord]):
    """Append-only history of fetched rates; the newest fetched_at is current."""

    def __init__(self, path: Union[str, Path]):
        super().__init__(path, rate_to_json, rate_from_json, lambda r: r.fetched_at)


class UsageStore(AppendOnlyLog[UsageSnapshot]):
    """Append-only history of upstream-reported quota usage."""

    def __init__(self, path: Union[str, Path]):
        super().__init__(path, usage_to_json, usage_from_json, lambda u: u.checked_at)
