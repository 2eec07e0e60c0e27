"""
Navasan API Provider for the USD/Toman Rate and Quota Usage

This module implements the Navasan API client used by the exchange-rate
service. It exposes two best-effort calls:

- fetch_rate:  GET {base}/latest/?item=usd&api_key={key}
- fetch_usage: GET {base}/usage/?api_key={key}

Both return None on any failure (timeout, transport error, non-2xx status,
invalid JSON, unexpected shape) and log the cause; they never raise.

Files that USE this module:
- tomanrate.application.rates_service (ExchangeRateService uses NavasanProvider)
- tests.test_providers (unit tests)

Files that this module USES:
- tomanrate.config (settings for base URL and timeout)
- tomanrate.domain.models (NavasanRate, UsageReport)
- tomanrate.shared.validators (to_int)
"""
import logging
from typing import Any, Dict, Optional

import requests

from tomanrate.adapters.providers.base import RateProvider
from tomanrate.config import settings
from tomanrate.domain.errors import UpstreamError
from tomanrate.domain.models import NavasanRate, UsageReport
from tomanrate.shared.validators import to_int

log = logging.getLogger(__name__)


class NavasanProvider(RateProvider):
    """
    Lightweight client for the Navasan 'latest' and 'usage' endpoints.

    The USD node of /latest looks like:
      {"value": "108400", "change": 1100, "timestamp": 1700000000, "date": "1402-08-23 12:00:00"}
    The /usage response carries numeric strings:
      {"monthly_usage": "57", "daily_usage": "3", "hourly_usage": "1"}
    """

    def __init__(self, base_url: Optional[str] = None, timeout: Optional[int] = None):
        """
        Initialize Navasan API provider.

        Args:
            base_url: Optional API root (defaults to settings.navasan_base_url)
            timeout: Optional HTTP timeout in seconds (defaults to settings.http_timeout_seconds)
        """
        self.base_url = (base_url or settings.navasan_base_url).rstrip("/")
        self.timeout = timeout or settings.http_timeout_seconds

    def get_json(self, path: str, api_key: str, **params: str) -> Dict[str, Any]:
        """
        GET a Navasan endpoint and return its JSON object.

        Args:
            path: Endpoint path, e.g. "latest"
            api_key: Navasan API key
            **params: Extra query parameters

        Returns:
            Decoded JSON dictionary

        Raises:
            UpstreamError: On timeout, transport error, non-2xx status or bad JSON
        """
        url = f"{self.base_url}/{path.strip('/')}/"
        query = dict(params, api_key=api_key)
        try:
            resp = requests.get(url, params=query, timeout=self.timeout)
            resp.raise_for_status()
        except requests.exceptions.Timeout:
            raise UpstreamError(f"Navasan API timeout after {self.timeout}s ({path})")
        except requests.exceptions.RequestException as e:
            # The URL carries the key, so only the status or error type is reported
            status = getattr(e.response, "status_code", None)
            if status is not None:
                raise UpstreamError(f"Navasan API returned HTTP {status} ({path})") from e
            raise UpstreamError(f"Navasan API request failed ({path}): {type(e).__name__}") from e

        try:
            data = resp.json()
        except ValueError as e:
            raise UpstreamError(f"Navasan API returned invalid JSON ({path}): {e}") from e

        if not isinstance(data, dict):
            raise UpstreamError(f"Navasan returned non-dict JSON ({path}): {type(data).__name__}")
        return data

    @staticmethod
    def _parse_rate(data: Dict[str, Any]) -> NavasanRate:
        node = data.get("usd")
        if not isinstance(node, dict) or node.get("value") in (None, ""):
            raise UpstreamError("Navasan response missing usd.value")
        try:
            value = str(node["value"])
            to_int(value)
            change = float(node.get("change") or 0)
            ts = node.get("timestamp")
            timestamp = int(ts) if ts not in (None, "") else None
        except (TypeError, ValueError) as e:
            raise UpstreamError(f"Navasan usd node has invalid fields: {e}") from e
        date = node.get("date")
        return NavasanRate(
            value=value,
            change=change,
            timestamp=timestamp,
            date=str(date) if date else None,
        )

    @staticmethod
    def _parse_usage(data: Dict[str, Any]) -> UsageReport:
        try:
            return UsageReport(
                monthly_usage=to_int(data["monthly_usage"]),
                daily_usage=to_int(data.get("daily_usage", 0)),
                hourly_usage=to_int(data.get("hourly_usage", 0)),
            )
        except (KeyError, TypeError, ValueError) as e:
            raise UpstreamError(f"Navasan usage response has invalid fields: {e}") from e

    def fetch_rate(self, api_key: str) -> Optional[NavasanRate]:
        """
        Fetch the latest USD rate.

        Args:
            api_key: Navasan API key

        Returns:
            NavasanRate, or None if the call failed for any reason
        """
        try:
            log.info("Fetching USD rate from Navasan API")
            return self._parse_rate(self.get_json("latest", api_key, item="usd"))
        except UpstreamError as e:
            log.error("Navasan rate fetch failed: %s", e)
            return None

    def fetch_usage(self, api_key: str) -> Optional[UsageReport]:
        """
        Fetch the quota usage Navasan reports for this key.

        Args:
            api_key: Navasan API key

        Returns:
            UsageReport, or None if the call failed for any reason
        """
        try:
            return self._parse_usage(self.get_json("usage", api_key))
        except UpstreamError as e:
            log.warning("Navasan usage fetch failed: %s", e)
            return None
