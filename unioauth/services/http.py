"""
HTTP request helper shared by every OAuth provider.

Issues a single request against a provider endpoint, decodes the body as JSON
or form-encoded text, and turns failures into OAuth exceptions attributed to
the provider that made the call.

Example usage:
    from unioauth.services.http import HttpRequestor

    async with HttpRequestor(provider="github") as requestor:
        profile = await requestor.request(
            "https://api.github.com/user",
            headers={"Authorization": "Bearer gho_xxx"},
        )
"""

import json
from typing import Any, Mapping
from urllib.parse import parse_qsl

import httpx

from unioauth.core.config import http_logger, settings
from unioauth.core.exceptions.types import HttpException, NetworkException


__all__ = ["HttpRequestor"]

# Provider error fields, most descriptive first
_ERROR_MESSAGE_FIELDS = ("error_description", "message", "error")


class HttpRequestor:
    """
    Thin wrapper over ``httpx.AsyncClient`` for provider API calls.

    The requestor either uses an injected client (owned by the host) or lazily
    creates its own, which ``aclose()`` releases. No retries are performed and,
    unless configured, no timeout is applied.

    Attributes:
        provider: Provider name used to attribute raised exceptions.
        user_agent: Default ``User-Agent`` header merged into every request.
    """

    def __init__(
        self,
        provider: str | None = None,
        client: httpx.AsyncClient | None = None,
        user_agent: str | None = None,
        timeout: float | None = None,
    ):
        self.provider = provider
        self.user_agent = user_agent or settings.USER_AGENT
        self._timeout = timeout if timeout is not None else settings.HTTP_TIMEOUT
        self._client = client
        self._owns_client = client is None

    async def __aenter__(self) -> "HttpRequestor":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=httpx.Timeout(self._timeout))
            self._owns_client = True
        return self._client

    async def aclose(self) -> None:
        """
        Close the HTTP client if this requestor created it.

        Returns:
            None
        """
        if self._client is not None and self._owns_client:
            try:
                await self._client.aclose()
            finally:
                self._client = None

    async def request(
        self,
        url: str,
        *,
        method: str = "GET",
        headers: Mapping[str, str] | None = None,
        data: Mapping[str, str] | None = None,
    ) -> Any:
        """
        Send a request and return the decoded response body.

        Args:
            url: The URL to request.
            method: HTTP method. Defaults to "GET".
            headers: Extra headers; these override the default ``User-Agent``.
            data: Form fields, sent as ``application/x-www-form-urlencoded``.

        Returns:
            The decoded body: usually a dict, a list for endpoints such as
            GitHub's ``/user/emails``.

        Raises:
            NetworkException: On DNS, connection or timeout failures.
            HttpException: When the provider responds with a non-2xx status.
        """
        merged_headers = {"User-Agent": self.user_agent, **(headers or {})}

        try:
            response = await self._get_client().request(
                method, url, headers=merged_headers, data=data
            )
        except httpx.RequestError as e:
            http_logger.error(f"Network request to {url} failed: {type(e).__name__}: {e}")
            raise NetworkException(
                message=f"Network request to {url} failed: {e}",
                provider=self.provider,
                cause=e,
            ) from e

        body = self._decode_body(response)

        if not response.is_success:
            message = self._error_message(body, response.status_code)
            http_logger.error(
                f"Request to {url} failed: status={response.status_code}, message={message}"
            )
            raise HttpException(
                message=message,
                upstream_status=response.status_code,
                provider=self.provider,
                body=body,
            )

        return body

    @staticmethod
    def _decode_body(response: httpx.Response) -> Any:
        """Decode JSON first, then fall back to form-encoded text."""
        text = response.text
        if not text.strip():
            return {}
        try:
            return json.loads(text)
        except ValueError:
            # e.g. GitHub's token endpoint without an Accept header
            return dict(parse_qsl(text, keep_blank_values=True))

    @staticmethod
    def _error_message(body: Any, status_code: int) -> str:
        if isinstance(body, dict):
            for field in _ERROR_MESSAGE_FIELDS:
                if body.get(field):
                    return str(body[field])
        return f"HTTP {status_code}"
