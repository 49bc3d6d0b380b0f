"""Tests for the HTTP API client."""
import time

import pytest
import requests

from conftest import make_response
from leadgen.utils.web import (
    ApiConnectionError,
    ApiError,
    AuthenticationError,
    NotFoundError,
    RateLimiter,
    RateLimitError,
    is_retryable,
    translate_error,
)


class TestErrorTranslation:
    """Test mapping requests failures onto ApiError."""

    @pytest.mark.parametrize("status,error_type", [
        (429, RateLimitError),
        (401, AuthenticationError),
        (403, AuthenticationError),
        (404, NotFoundError),
        (500, ApiError),
    ])
    def test_status_codes(self, status, error_type):
        """Test HTTP statuses map to the right error type."""
        error = requests.HTTPError(response=make_response(status))
        translated = translate_error(error)
        assert type(translated) is error_type
        assert translated.status_code == status

    def test_no_response(self):
        """Test network failures become connection errors."""
        translated = translate_error(requests.ConnectionError("refused"))
        assert isinstance(translated, ApiConnectionError)
        assert translated.status_code is None

    def test_retryable(self):
        """Test which errors are retried."""
        assert is_retryable(ApiConnectionError("down"))
        assert is_retryable(RateLimitError("slow down", 429))
        assert is_retryable(ApiError("boom", 503))
        assert not is_retryable(ApiError("bad request", 400))
        assert not is_retryable(NotFoundError("missing", 404))
        assert not is_retryable(ValueError("unrelated"))


class TestApiClient:
    """Test requests, retries and headers."""

    def test_get_json(self, make_client):
        """Test a GET returns decoded JSON."""
        client, session = make_client([make_response(200, {"ok": True})])

        assert client.get("web/search", {"query": "acme"}) == {"ok": True}
        call = session.calls[0]
        assert call["method"] == "GET"
        assert call["url"] == "https://api.test/v1/web/search"
        assert call["params"] == {"query": "acme"}
        assert call["headers"]["Authorization"] == "Bearer secret"

    def test_raw_key_header(self, make_client):
        """Test raw API keys in a custom header."""
        client, session = make_client(
            [make_response(200, {})],
            auth_header="x-api-key",
            auth_scheme=None,
        )
        client.post("ai/scrape", json={"url": "https://acme.io"})
        call = session.calls[0]
        assert call["headers"]["x-api-key"] == "secret"
        assert call["json"] == {"url": "https://acme.io"}

    def test_empty_body(self, make_client):
        """Test an empty body decodes to an empty dict."""
        client, _ = make_client([make_response(204)])
        assert client.patch("contacts/1", json={}) == {}

    def test_retries_server_errors(self, make_client):
        """Test 5xx responses are retried."""
        client, session = make_client([make_response(502), make_response(200, {"ok": 1})])
        assert client.get("thing") == {"ok": 1}
        assert len(session.calls) == 2

    def test_retries_connection_errors(self, make_client):
        """Test network failures are retried."""
        client, session = make_client([requests.ConnectionError("reset"), make_response(200, [1, 2])])
        assert client.get("thing") == [1, 2]
        assert len(session.calls) == 2

    def test_gives_up_after_max_retries(self, make_client):
        """Test persistent rate limiting raises after the last attempt."""
        client, session = make_client([make_response(429)] * 3, max_retries=2)
        with pytest.raises(RateLimitError):
            client.get("thing")
        assert len(session.calls) == 3

    def test_client_errors_are_not_retried(self, make_client):
        """Test 4xx responses raise immediately."""
        client, session = make_client([make_response(404)])
        with pytest.raises(NotFoundError):
            client.get("missing")
        assert len(session.calls) == 1

    def test_absolute_url(self, make_client):
        """Test absolute URLs bypass the base URL."""
        client, session = make_client([make_response(200, {})])
        client.get("https://other.test/thing")
        assert session.calls[0]["url"] == "https://other.test/thing"


class TestRateLimiter:
    """Test request spacing."""

    def test_spaces_request_starts(self):
        """Test consecutive slots are at least min_interval apart."""
        limiter = RateLimiter(min_interval=0.05, max_concurrent=2)
        start = time.monotonic()
        for _ in range(3):
            with limiter.slot():
                pass
        assert time.monotonic() - start >= 0.1
