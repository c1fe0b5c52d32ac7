"""
Pytest configuration and core fixtures.

Provider APIs are stubbed with ``httpx.MockTransport``: tests register
responses on a ``MockProviderAPI`` and hand the resulting client to the code
under test. All fixtures are function-scoped for complete test isolation.
"""

import json
import os
from typing import Any, AsyncGenerator

import httpx
import pytest


def pytest_configure(config):
    """Configure pytest with custom settings."""
    os.environ.setdefault("UNIOAUTH_ENVIRONMENT", "test")


class MockProviderAPI:
    """
    Route table for ``httpx.MockTransport``.

    Routes are keyed by method and URL without the query string. A route
    holds a list of responses served in order; the last one repeats.
    Every request is recorded in ``calls``.
    """

    def __init__(self):
        self.routes: dict[tuple[str, str], list[Any]] = {}
        self.calls: list[httpx.Request] = []

    @staticmethod
    def _key(method: str, url: str | httpx.URL) -> tuple[str, str]:
        url = httpx.URL(url)
        return method.upper(), f"{url.scheme}://{url.host}{url.path}"

    def add(
        self,
        method: str,
        url: str,
        *,
        json_body: Any = None,
        text: str | None = None,
        status_code: int = 200,
        headers: dict[str, str] | None = None,
        exc: Exception | None = None,
    ) -> "MockProviderAPI":
        if exc is not None:
            entry: Any = exc
        else:
            if text is None:
                text = json.dumps(json_body) if json_body is not None else ""
            entry = (status_code, text, headers or {})
        self.routes.setdefault(self._key(method, url), []).append(entry)
        return self

    def calls_to(self, method: str, url: str) -> list[httpx.Request]:
        key = self._key(method, url)
        return [c for c in self.calls if self._key(c.method, c.url) == key]

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.calls.append(request)
        entries = self.routes.get(self._key(request.method, request.url))
        if not entries:
            return httpx.Response(404, json={"message": "Not Found"})

        entry = entries.pop(0) if len(entries) > 1 else entries[0]
        if isinstance(entry, Exception):
            raise entry

        status_code, text, headers = entry
        return httpx.Response(status_code, text=text, headers=headers)


@pytest.fixture
def provider_api() -> MockProviderAPI:
    """Empty provider API stub."""
    return MockProviderAPI()


@pytest.fixture
async def http_client(
    provider_api: MockProviderAPI,
) -> AsyncGenerator[httpx.AsyncClient, None]:
    """``httpx.AsyncClient`` wired to the provider API stub."""
    client = httpx.AsyncClient(transport=httpx.MockTransport(provider_api.handler))
    yield client
    await client.aclose()


@pytest.fixture
def provider_config() -> dict[str, str]:
    """Valid config values shared by every provider."""
    return {
        "client_id": "test_client_id",
        "client_secret": "test_client_secret",
        "redirect_uri": "https://app.com/auth/callback",
    }
