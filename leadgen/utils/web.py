"""HTTP API client with retry, rate limiting and error mapping."""
import logging
import threading
import time
from contextlib import contextmanager
from typing import Any, Dict, Iterator, Optional

import requests
from tenacity import (
    Retrying,
    before_sleep_log,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)

from leadgen.config import settings

logger = logging.getLogger(__name__)


class ApiError(Exception):
    """Error returned by (or while talking to) a third-party API."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class RateLimitError(ApiError):
    """429: rate limit exceeded."""


class AuthenticationError(ApiError):
    """401/403: invalid API key or unauthorized access."""


class NotFoundError(ApiError):
    """404: resource not found."""


class ApiConnectionError(ApiError):
    """No response received (connection error, timeout)."""


def translate_error(error: requests.RequestException) -> ApiError:
    """
    Map a requests exception onto the ApiError hierarchy.

    Args:
        error: Exception raised by requests

    Returns:
        ApiError subclass describing the failure
    """
    response = getattr(error, "response", None)
    if response is None:
        return ApiConnectionError(f"Network Error: {error}")

    status = response.status_code
    if status == 429:
        return RateLimitError("Rate limit exceeded. Please try again later.", status)
    if status in (401, 403):
        return AuthenticationError("Invalid API key or unauthorized access.", status)
    if status == 404:
        return NotFoundError("Resource not found.", status)
    return ApiError(f"API Error: {status} {response.reason or ''}".strip(), status)


def is_retryable(error: BaseException) -> bool:
    """Retry on network failures, rate limiting and server errors."""
    if isinstance(error, (ApiConnectionError, RateLimitError)):
        return True
    if isinstance(error, ApiError) and error.status_code is not None:
        return error.status_code >= 500
    return False


class RateLimiter:
    """
    Caps concurrent requests and spaces out request starts.

    One limiter can be shared by several clients so that they draw from the
    same budget.
    """

    def __init__(self, min_interval: float = 0.333, max_concurrent: int = 5):
        self.min_interval = min_interval
        self.max_concurrent = max_concurrent
        self._semaphore = threading.BoundedSemaphore(max_concurrent)
        self._lock = threading.Lock()
        self._next_start = 0.0

    @contextmanager
    def slot(self) -> Iterator[None]:
        """Hold one concurrency slot for the duration of a request."""
        with self._semaphore:
            with self._lock:
                now = time.monotonic()
                delay = self._next_start - now
                self._next_start = max(now, self._next_start) + self.min_interval
            if delay > 0:
                time.sleep(delay)
            yield


def default_rate_limiter() -> RateLimiter:
    """Rate limiter built from settings."""
    return RateLimiter(settings.http_min_interval, settings.http_max_concurrent)


class ApiClient:
    """JSON REST client for one third-party API."""

    def __init__(
        self,
        base_url: str,
        api_key: Optional[str] = None,
        auth_header: str = "Authorization",
        auth_scheme: Optional[str] = "Bearer",
        timeout: Optional[float] = None,
        max_retries: Optional[int] = None,
        retry_min_wait: Optional[float] = None,
        retry_max_wait: Optional[float] = None,
        rate_limiter: Optional[RateLimiter] = None,
        session: Optional[requests.Session] = None,
        extra_headers: Optional[Dict[str, str]] = None
    ):
        """
        Initialize API client.

        Args:
            base_url: API base URL; request paths are appended to it
            api_key: Credential sent in auth_header (omitted when empty)
            auth_header: Header carrying the credential
            auth_scheme: Prefix for the credential ("Bearer"), or None for a raw key
            timeout: Request timeout in seconds (uses settings if not provided)
            max_retries: Retries after the first attempt (uses settings if not provided)
            retry_min_wait: Minimum backoff in seconds (uses settings if not provided)
            retry_max_wait: Maximum backoff in seconds (uses settings if not provided)
            rate_limiter: Shared limiter (a private one is built from settings if not provided)
            session: requests session (a new one if not provided)
            extra_headers: Additional headers sent with every request
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout if timeout is not None else settings.http_timeout
        self.max_retries = max_retries if max_retries is not None else settings.http_max_retries
        self.retry_min_wait = retry_min_wait if retry_min_wait is not None else settings.http_retry_min_wait
        self.retry_max_wait = retry_max_wait if retry_max_wait is not None else settings.http_retry_max_wait
        self.rate_limiter = rate_limiter or default_rate_limiter()
        self.session = session or requests.Session()

        self.headers = {
            "Content-Type": "application/json",
            "Accept": "application/json",
        }
        if api_key:
            self.headers[auth_header] = f"{auth_scheme} {api_key}" if auth_scheme else api_key
        if extra_headers:
            self.headers.update(extra_headers)

    def url_for(self, path: str) -> str:
        """Absolute URL for a path (absolute URLs pass through)."""
        if path.startswith("http://") or path.startswith("https://"):
            return path
        if not path:
            return self.base_url
        return f"{self.base_url}/{path.lstrip('/')}"

    def _retrying(self) -> Retrying:
        return Retrying(
            stop=stop_after_attempt(self.max_retries + 1),
            wait=wait_exponential(multiplier=1, min=self.retry_min_wait, max=self.retry_max_wait),
            retry=retry_if_exception(is_retryable),
            before_sleep=before_sleep_log(logger, logging.WARNING),
            reraise=True,
        )

    def _send(
        self,
        method: str,
        url: str,
        params: Optional[Dict[str, Any]] = None,
        json: Optional[Any] = None
    ) -> Any:
        with self.rate_limiter.slot():
            try:
                response = self.session.request(
                    method,
                    url,
                    params=params,
                    json=json,
                    headers=self.headers,
                    timeout=self.timeout,
                )
                response.raise_for_status()
            except requests.RequestException as e:
                api_error = translate_error(e)
                logger.warning(f"{method} {url} failed: {api_error}")
                raise api_error from e

        if not response.content:
            return {}
        try:
            return response.json()
        except ValueError as e:
            raise ApiError(f"Invalid JSON from {url}", response.status_code) from e

    def request(
        self,
        method: str,
        path: str = "",
        params: Optional[Dict[str, Any]] = None,
        json: Optional[Any] = None
    ) -> Any:
        """
        Make API request with retry logic.

        Args:
            method: HTTP method (GET, POST, PUT, PATCH, DELETE)
            path: Endpoint path relative to base_url, or an absolute URL
            params: Query parameters
            json: JSON request body

        Returns:
            Decoded JSON response ({} for an empty body)

        Raises:
            ApiError: If the request fails after retries
        """
        url = self.url_for(path)
        for attempt in self._retrying():
            with attempt:
                return self._send(method.upper(), url, params=params, json=json)

    def get(self, path: str = "", params: Optional[Dict[str, Any]] = None) -> Any:
        return self.request("GET", path, params=params)

    def post(self, path: str = "", json: Optional[Any] = None, params: Optional[Dict[str, Any]] = None) -> Any:
        return self.request("POST", path, params=params, json=json)

    def put(self, path: str = "", json: Optional[Any] = None) -> Any:
        return self.request("PUT", path, json=json)

    def patch(self, path: str = "", json: Optional[Any] = None) -> Any:
        return self.request("PATCH", path, json=json)


def jigsawstack_client(rate_limiter: Optional[RateLimiter] = None, **kwargs) -> ApiClient:
    """JigsawStack client (web search, AI scrape, enrichment)."""
    return ApiClient(
        settings.jigsawstack_base_url,
        api_key=settings.jigsawstack_api_key,
        auth_header="x-api-key",
        auth_scheme=None,
        rate_limiter=rate_limiter,
        **kwargs
    )


def crunchbase_client(rate_limiter: Optional[RateLimiter] = None, **kwargs) -> ApiClient:
    """Crunchbase organization lookup client."""
    return ApiClient(
        settings.crunchbase_base_url,
        api_key=settings.crunchbase_api_key,
        rate_limiter=rate_limiter,
        **kwargs
    )


def linkedin_client(rate_limiter: Optional[RateLimiter] = None, **kwargs) -> ApiClient:
    """LinkedIn people search client."""
    return ApiClient(
        settings.linkedin_base_url,
        api_key=settings.linkedin_api_key,
        rate_limiter=rate_limiter,
        **kwargs
    )


def builtwith_client(rate_limiter: Optional[RateLimiter] = None, **kwargs) -> ApiClient:
    """BuiltWith free technology lookup client (no credential)."""
    return ApiClient(settings.builtwith_base_url, rate_limiter=rate_limiter, **kwargs)


def apollo_client(rate_limiter: Optional[RateLimiter] = None, **kwargs) -> ApiClient:
    """Apollo.io people-match client."""
    return ApiClient(
        settings.apollo_base_url,
        api_key=settings.apollo_api_key,
        auth_header="x-api-key",
        auth_scheme=None,
        rate_limiter=rate_limiter,
        extra_headers={"Cache-Control": "no-cache"},
        **kwargs
    )
