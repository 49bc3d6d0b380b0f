"""Shared test doubles for HTTP clients."""
import json
from typing import Any, Dict, List, Optional

import pytest
import requests

from leadgen.utils.web import ApiClient, RateLimiter


def make_response(status_code: int, payload: Any = None, url: str = "https://api.test/") -> requests.Response:
    """Build a real requests.Response with a JSON body."""
    response = requests.Response()
    response.status_code = status_code
    response.reason = "OK" if status_code < 400 else "Error"
    response.url = url
    response._content = json.dumps(payload).encode("utf-8") if payload is not None else b""
    response.headers["Content-Type"] = "application/json"
    return response


class FakeSession:
    """Replays queued responses (or raises queued exceptions) and records calls."""

    def __init__(self, responses: List[Any]):
        self.responses = list(responses)
        self.calls: List[Dict] = []

    def request(self, method, url, **kwargs):
        self.calls.append({"method": method, "url": url, **kwargs})
        outcome = self.responses.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


class FakeApi:
    """
    Stands in for ApiClient.

    results maps (method, path) to a fixed result; sequences maps it to a
    list of results returned one per call. Exceptions are raised.
    """

    def __init__(self, results: Optional[Dict] = None, sequences: Optional[Dict] = None):
        self.results = results or {}
        self.sequences = sequences or {}
        self.calls: List[tuple] = []

    def _respond(self, method, path, body):
        self.calls.append((method, path, body))
        key = (method, path)
        if key in self.sequences:
            result = self.sequences[key].pop(0)
        else:
            result = self.results.get(key, {})
        if isinstance(result, Exception):
            raise result
        return result

    def get(self, path="", params=None):
        return self._respond("GET", path, params)

    def post(self, path="", json=None, params=None):
        return self._respond("POST", path, json)

    def patch(self, path="", json=None):
        return self._respond("PATCH", path, json)


@pytest.fixture
def make_client():
    """ApiClient factory over a FakeSession, with no retry waits or spacing."""
    def _make(responses, **kwargs):
        session = FakeSession(responses)
        client = ApiClient(
            "https://api.test/v1",
            api_key=kwargs.pop("api_key", "secret"),
            session=session,
            max_retries=kwargs.pop("max_retries", 2),
            retry_min_wait=0,
            retry_max_wait=0,
            rate_limiter=RateLimiter(min_interval=0, max_concurrent=5),
            **kwargs
        )
        return client, session
    return _make

