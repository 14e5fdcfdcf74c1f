"""HTTP client for the OSRM table service."""

from __future__ import annotations

import logging
import time
from typing import Sequence

import httpx

from ...config import settings
from .errors import UpstreamServiceFailure

logger = logging.getLogger(__name__)


class OSRMClient:
    def __init__(
        self,
        base_url: str | None = None,
        profile: str | None = None,
        timeout: float | None = None,
        max_retries: int | None = None,
        backoff_seconds: float | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.base_url = base_url or settings.osrm_base_url
        if not self.base_url:
            raise ValueError("OSRM base URL is not configured.")
        self.base_url = self.base_url.rstrip("/")
        self.profile = profile or settings.osrm_profile
        self.timeout = timeout if timeout is not None else settings.osrm_timeout_seconds
        self.max_retries = max_retries if max_retries is not None else settings.osrm_max_retries
        self.backoff_seconds = backoff_seconds if backoff_seconds is not None else settings.osrm_backoff_seconds
        self._transport = transport

    def _get_client(self) -> httpx.Client:
        return httpx.Client(
            timeout=httpx.Timeout(self.timeout, connect=10.0),
            transport=self._transport,
        )

    def _backoff(self, attempt: int) -> float:
        """Seconds to wait before retry number ``attempt`` (1-based), doubling each time."""
        return self.backoff_seconds * (2 ** (attempt - 1))

    def _get_json(self, url: str, params: dict | None = None) -> dict:
        """GET ``url`` and decode the body, retrying transient failures with backoff."""
        client = self._get_client()
        try:
            attempt = 0
            while True:
                try:
                    response = client.get(url, params=params)
                    response.raise_for_status()
                    return response.json()
                except httpx.HTTPStatusError as exc:
                    # 4xx responses will not improve on retry
                    if exc.response.status_code < 500:
                        raise UpstreamServiceFailure(
                            f"OSRM rejected the request with status {exc.response.status_code}."
                        ) from exc
                    attempt += 1
                    if attempt > self.max_retries:
                        raise UpstreamServiceFailure(
                            f"OSRM returned status {exc.response.status_code} after {self.max_retries} retries."
                        ) from exc
                    wait_time = self._backoff(attempt)
                    logger.debug(f"OSRM returned status {exc.response.status_code}, retrying in {wait_time:.1f}s (attempt {attempt}/{self.max_retries})")
                    time.sleep(wait_time)
                except httpx.TimeoutException as exc:
                    attempt += 1
                    if attempt > self.max_retries:
                        logger.warning(f"OSRM request timed out after {self.max_retries} attempts: {exc}")
                        raise UpstreamServiceFailure(f"OSRM request timed out: {exc}") from exc
                    wait_time = self._backoff(attempt)
                    logger.debug(f"OSRM request timeout, retrying in {wait_time:.1f}s (attempt {attempt}/{self.max_retries})")
                    time.sleep(wait_time)
                except httpx.TransportError as exc:
                    attempt += 1
                    if attempt > self.max_retries:
                        raise UpstreamServiceFailure(
                            f"Failed to connect to OSRM service at {self.base_url}: {exc}"
                        ) from exc
                    wait_time = self._backoff(attempt)
                    logger.debug(f"OSRM network error, retrying in {wait_time:.1f}s (attempt {attempt}/{self.max_retries}): {exc}")
                    time.sleep(wait_time)
                except ValueError as exc:
                    raise UpstreamServiceFailure(f"OSRM returned a malformed response: {exc}") from exc
        finally:
            client.close()

    def table(self, coordinates: Sequence[tuple[float, float]]) -> dict:
        """Get the full distance/duration matrix for ``(lat, lon)`` coordinates.

        Distances are in metres and durations in seconds, as OSRM reports them.
        """
        if len(coordinates) < 2:
            raise ValueError("At least two coordinates are required for OSRM table.")

        coordinate_str = ";".join(f"{lon},{lat}" for lat, lon in coordinates)
        url = f"{self.base_url}/table/v1/{self.profile}/{coordinate_str}"
        data = self._get_json(url, params={"annotations": "duration,distance"})

        if data.get("code") != "Ok":
            message = data.get("message", "Unknown OSRM table error")
            raise UpstreamServiceFailure(f"OSRM table request failed ({data.get('code')}): {message}")
        if "durations" not in data or "distances" not in data:
            raise UpstreamServiceFailure("OSRM response missing durations/distances.")
        return data


def check_health(client: OSRMClient | None = None) -> bool:
    """Return True when the configured OSRM service answers a trivial table request."""
    try:
        client = client or OSRMClient(max_retries=0)
        client.table([(0.0, 0.0), (0.0, 0.001)])
        return True
    except (ValueError, UpstreamServiceFailure) as exc:
        logger.warning(f"OSRM health check failed: {exc}")
        return False
