"""HTTP utilities for making network requests."""
from __future__ import annotations

import time

import httpx
import structlog

LOGGER = structlog.get_logger(__name__)

_RETRYABLE_STATUS_CODES = {429, 500, 502, 503, 504}


class HttpClient:
    """Simple wrapper around httpx for reusable configuration."""

    def __init__(self, timeout: float = 10.0, user_agent: str | None = None) -> None:
        headers = {"User-Agent": user_agent or "jobrank/0.1"}
        self.timeout = timeout
        self._client = httpx.Client(timeout=timeout, headers=headers, follow_redirects=True)

    def __enter__(self) -> "HttpClient":
        """Enter context manager and return self."""

        return self

    def __exit__(self, exc_type, exc, tb) -> None:  # type: ignore[override]
        """Close the client when exiting context manager."""

        self.close()

    def get(
        self,
        url: str,
        *,
        headers: dict[str, str] | None = None,
        max_retries: int = 3,
        raise_for_status: bool = True,
    ) -> httpx.Response:
        """Perform a GET request with simple exponential backoff.

        Transient statuses and transport errors are retried. With
        ``raise_for_status=False`` a final non-success response is returned
        to the caller instead of raised, which liveness probing relies on.
        """

        delay = 0.5
        for attempt in range(max_retries):
            last_attempt = attempt >= max_retries - 1
            try:
                response = self._client.get(url, headers=headers)
            except httpx.TransportError as exc:
                if last_attempt:
                    raise
                LOGGER.debug("http.retry", url=url, attempt=attempt, error=str(exc))
                time.sleep(delay)
                delay *= 2
                continue
            if response.status_code in _RETRYABLE_STATUS_CODES and not last_attempt:
                LOGGER.debug("http.retry", url=url, attempt=attempt, status=response.status_code)
                time.sleep(delay)
                delay *= 2
                continue
            if raise_for_status:
                response.raise_for_status()
            return response
        raise RuntimeError("GET request failed without raising an exception")

    def close(self) -> None:
        """Close the underlying HTTP client."""

        self._client.close()
