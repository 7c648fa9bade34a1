"""
HTTP client for code review platform APIs.

Session management, retry logic and error conversion shared by the GitHub
and GitLab platforms. Transient failures (connection errors, timeouts, 429
and 5xx responses) are retried with Fibonacci backoff; permission, lookup
and validation failures are raised immediately.
"""

import logging
import time
from typing import Any, Dict, Mapping, Optional

import requests
from requests.adapters import HTTPAdapter

from ..exceptions.platform_exceptions import (
    PlatformAuthenticationError,
    PlatformError,
    PlatformNotFoundError,
    PlatformRateLimitError,
)
from ..version import USER_AGENT

logger = logging.getLogger(__name__)


def fibonacci_delay(attempt: int, base_delay: float) -> float:
    """Delay before retry number ``attempt`` (0-based): base * 1, 1, 2, 3, 5, ..."""
    previous, current = 0, 1
    for _ in range(attempt):
        previous, current = current, previous + current
    return base_delay * current


class PlatformHTTPClient:
    """
    HTTP client for platform REST APIs with retry and error handling.

    Features:
        - HTTP session reuse with connection pooling
        - Bounded retries with Fibonacci backoff for transient failures
        - Conversion of HTTP failures into PlatformError subclasses
    """

    def __init__(
        self,
        base_url: str,
        headers: Optional[Mapping[str, str]] = None,
        max_retries: int = 3,
        retry_delay: float = 1.0,
        timeout: int = 30,
        session: Optional[requests.Session] = None,
    ) -> None:
        """
        Args:
            base_url: API root, e.g. https://api.github.com
            headers: Extra headers, typically authentication
            max_retries: Retries after the first attempt for transient failures
            retry_delay: Base delay in seconds for the backoff
            timeout: Per-request timeout in seconds
            session: Session to use instead of a new one
        """
        self.base_url = base_url.rstrip("/")
        self.max_retries = max_retries
        self.retry_delay = retry_delay
        self.timeout = timeout

        self._session = session or requests.Session()
        self._session.headers.update({
            "User-Agent": USER_AGENT,
            "Accept": "application/json",
        })
        if headers:
            self._session.headers.update(headers)

        if session is None:
            adapter = HTTPAdapter(
                pool_connections=2,
                pool_maxsize=4,
                max_retries=0,  # retries are handled in make_request_with_retry
            )
            self._session.mount("http://", adapter)
            self._session.mount("https://", adapter)

    def get_json(self, path: str, **kwargs: Any) -> Dict[str, Any]:
        """
        GET a path below base_url and decode the JSON object it returns.

        Raises:
            PlatformError: If the request fails or the body is not a JSON object
        """
        url = f"{self.base_url}/{path.lstrip('/')}"
        response = self.make_request_with_retry("GET", url, **kwargs)
        try:
            data = response.json()
        except ValueError as e:
            raise PlatformError(f"invalid JSON response from {url}: {e}", response.status_code) from e
        if not isinstance(data, dict):
            raise PlatformError(f"unexpected response from {url}: expected a JSON object", response.status_code)
        return data

    def make_request_with_retry(self, method: str, url: str, **kwargs: Any) -> requests.Response:
        """
        Make an HTTP request, retrying transient failures.

        Returns:
            Response object for a 2xx response

        Raises:
            PlatformAuthenticationError: For 401 and 403 responses
            PlatformNotFoundError: For 404 responses
            PlatformRateLimitError: For 429 responses after all retries
            PlatformError: For other failures, or after all retries are exhausted
        """
        kwargs.setdefault("timeout", self.timeout)
        last_exception: Optional[PlatformError] = None

        for attempt in range(self.max_retries + 1):
            retry_after: Optional[int] = None
            try:
                response = self._session.request(method, url, **kwargs)
                self._raise_for_status(response)
                return response
            except PlatformRateLimitError as e:
                last_exception = e
                retry_after = e.retry_after
            except PlatformError as e:
                if e.status_code is not None and e.status_code < 500:
                    raise
                last_exception = e
            except (requests.ConnectionError, requests.Timeout) as e:
                last_exception = PlatformError(f"request to {url} failed: {e}")

            if attempt < self.max_retries:
                delay = fibonacci_delay(attempt, self.retry_delay)
                if retry_after is not None:
                    delay = max(delay, float(retry_after))
                logger.debug(
                    f"Retrying {method} {url} in {delay:.1f}s "
                    f"(attempt {attempt + 1} of {self.max_retries}): {last_exception}"
                )
                time.sleep(delay)

        if last_exception:
            raise last_exception
        raise PlatformError(f"request to {url} failed after all retry attempts")

    def _raise_for_status(self, response: requests.Response) -> None:
        status = response.status_code
        if 200 <= status < 300:
            return

        message = self._extract_error_message(response) or f"request failed with status {status}"

        if status == 429 or (status == 403 and response.headers.get("X-RateLimit-Remaining") == "0"):
            raise PlatformRateLimitError(message, retry_after=self._retry_after(response))
        if status in (401, 403):
            raise PlatformAuthenticationError(message, status_code=status)
        if status == 404:
            raise PlatformNotFoundError(message)
        raise PlatformError(message, status_code=status)

    @staticmethod
    def _retry_after(response: requests.Response) -> Optional[int]:
        value = response.headers.get("Retry-After")
        try:
            return int(value) if value else None
        except (TypeError, ValueError):
            return None

    @staticmethod
    def _extract_error_message(response: requests.Response) -> Optional[str]:
        """Pull a human readable message out of a GitHub or GitLab error body."""
        try:
            error_data = response.json()
        except ValueError:
            return None
        if not isinstance(error_data, dict):
            return None
        for key in ("message", "error_description", "error"):
            value = error_data.get(key)
            if isinstance(value, str) and value:
                return value
        return None
