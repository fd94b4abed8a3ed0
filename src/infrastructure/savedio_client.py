from __future__ import annotations

import random
import time
from typing import Any, Mapping, Optional, Protocol, cast

import requests

from src.config.settings import settings
from src.logging_config import get_logger


class _HasHeaders(Protocol):
    headers: Mapping[str, str]


class APIError(RuntimeError):
    """Raised when the saved.io API returns an error response."""

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class SavedIoClient:
    """Minimal saved.io client with key auth, timeout, and retries.

    Features:
    - Auth via ``devkey`` and ``key`` query parameters (from settings).
    - Configurable timeout, retry count and exponential backoff with jitter.
    - Retries HTTP 429, 5xx responses and connection failures.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        api_key: Optional[str] = None,
        dev_key: Optional[str] = None,
        timeout: Optional[float] = None,
        max_retries: int = 3,
        backoff_factor: float = 0.5,
    ) -> None:
        self.base_url = (base_url or settings.base_url).rstrip("/")
        self.timeout = float(timeout if timeout is not None else settings.timeout)
        self.max_retries = int(max_retries)
        self.backoff_factor = float(backoff_factor)
        self._auth: dict[str, str] = {}
        key = api_key if api_key is not None else settings.api_key
        devkey = dev_key if dev_key is not None else settings.dev_key
        if key:
            self._auth["key"] = key
        if devkey:
            self._auth["devkey"] = devkey

        self._session = requests.Session()
        self._logger = get_logger("client")

    def _full_url(self, path: str) -> str:
        return f"{self.base_url}/{path.lstrip('/')}"

    def get(self, path: str, params: Optional[Mapping[str, Any]] = None) -> Any:
        """Perform a GET request and return decoded JSON.

        Retries on 429 and 5xx responses with exponential backoff.
        Raises APIError on persistent failures, non-retriable 4xx, other
        request errors and undecodable JSON bodies.
        """

        url = self._full_url(path)
        attempt = 0
        last_error: Optional[Exception] = None
        query = {**self._auth, **{str(k): str(v) for k, v in (params or {}).items()}}

        while attempt <= self.max_retries:
            try:
                resp = self._session.request(
                    method="GET", url=url, params=query, timeout=self.timeout
                )

                if 200 <= resp.status_code < 300:
                    if resp.headers.get("Content-Type", "").startswith("application/json"):
                        try:
                            return resp.json()
                        except ValueError as exc:
                            raise APIError(
                                f"Invalid JSON in response: {exc}", status_code=resp.status_code
                            ) from exc
                    return resp.text

                # Rate limited or server error -> retry
                if resp.status_code == 429 or 500 <= resp.status_code < 600:
                    retry_after = self._compute_sleep_seconds(attempt, resp)
                    self._logger.warning(
                        "SavedIoClient GET %s failed with %s. Retrying in %.2fs (attempt %d/%d)",
                        url,
                        resp.status_code,
                        retry_after,
                        attempt + 1,
                        self.max_retries,
                    )
                    attempt += 1
                    if attempt > self.max_retries:
                        break
                    time.sleep(retry_after)
                    continue

                raise APIError(
                    f"API error {resp.status_code}: {resp.text[:200]}",
                    status_code=resp.status_code,
                )

            except (requests.Timeout, requests.ConnectionError) as exc:
                last_error = exc
                retry_after = self._compute_sleep_seconds(attempt)
                self._logger.warning(
                    "SavedIoClient GET %s exception: %s. Retrying in %.2fs (attempt %d/%d)",
                    url,
                    type(exc).__name__,
                    retry_after,
                    attempt + 1,
                    self.max_retries,
                )
                attempt += 1
                if attempt > self.max_retries:
                    break
                time.sleep(retry_after)

            except requests.RequestException as exc:
                raise APIError(f"Request failed: {exc}") from exc

        if last_error is not None:
            raise APIError(f"Request failed after retries: {last_error}")
        raise APIError("Request failed after retries", status_code=None)

    def list_bookmarks(self) -> Any:
        """GET /bookmarks for the configured user."""
        return self.get("bookmarks")

    def _compute_sleep_seconds(self, attempt: int, response: Optional[_HasHeaders] = None) -> float:
        """Compute sleep duration for retries.

        - Respect Retry-After header if provided and valid.
        - Otherwise exponential backoff: backoff_factor * (2**attempt) + jitter.
        """
        if response is not None:
            headers = cast(Mapping[str, str], response.headers)
            ra = headers.get("Retry-After")
            if ra:
                try:
                    return max(0.0, float(int(ra)))
                except (TypeError, ValueError):
                    pass

        base: float = float(self.backoff_factor) * float(2**attempt)
        jitter: float = float(random.uniform(0.0, 0.1))
        return float(base + jitter)
