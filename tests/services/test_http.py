"""
Test suite for HttpRequestor.

- Body decoding (JSON, form-encoded, empty)
- Default User-Agent header merging
- Error classification for non-2xx responses and transport failures
- Client lifecycle

Run tests:
    pytest tests/services/test_http.py -v
"""

import httpx
import pytest

from unioauth.core.exceptions.types import HttpException, NetworkException
from unioauth.services.http import HttpRequestor

URL = "https://provider.example.com/api/resource"


class TestHttpRequestorDecoding:

    @pytest.mark.asyncio
    async def test_json_body(self, provider_api, http_client):
        provider_api.add("GET", URL, json_body={"id": 1, "name": "Ada"})
        requestor = HttpRequestor(client=http_client)

        assert await requestor.request(URL) == {"id": 1, "name": "Ada"}

    @pytest.mark.asyncio
    async def test_json_list_body(self, provider_api, http_client):
        provider_api.add("GET", URL, json_body=[{"email": "a@example.com"}])
        requestor = HttpRequestor(client=http_client)

        assert await requestor.request(URL) == [{"email": "a@example.com"}]

    @pytest.mark.asyncio
    async def test_json_without_json_content_type(self, provider_api, http_client):
        provider_api.add(
            "GET", URL, text='{"ok": true}', headers={"content-type": "text/plain"}
        )
        requestor = HttpRequestor(client=http_client)

        assert await requestor.request(URL) == {"ok": True}

    @pytest.mark.asyncio
    async def test_form_encoded_fallback(self, provider_api, http_client):
        provider_api.add(
            "POST",
            URL,
            text="access_token=gho_123&scope=read%3Auser&token_type=bearer",
            headers={"content-type": "application/x-www-form-urlencoded"},
        )
        requestor = HttpRequestor(client=http_client)

        data = await requestor.request(URL, method="POST")

        assert data == {
            "access_token": "gho_123",
            "scope": "read:user",
            "token_type": "bearer",
        }

    @pytest.mark.asyncio
    async def test_empty_body(self, provider_api, http_client):
        provider_api.add("GET", URL, text="")
        requestor = HttpRequestor(client=http_client)

        assert await requestor.request(URL) == {}


class TestHttpRequestorHeaders:

    @pytest.mark.asyncio
    async def test_default_user_agent(self, provider_api, http_client):
        provider_api.add("GET", URL, json_body={})
        requestor = HttpRequestor(client=http_client)

        await requestor.request(URL, headers={"Authorization": "Bearer t"})

        sent = provider_api.calls[0]
        assert sent.headers["User-Agent"] == "unioauth"
        assert sent.headers["Authorization"] == "Bearer t"

    @pytest.mark.asyncio
    async def test_caller_user_agent_wins(self, provider_api, http_client):
        provider_api.add("GET", URL, json_body={})
        requestor = HttpRequestor(client=http_client)

        await requestor.request(URL, headers={"User-Agent": "custom/1.0"})

        assert provider_api.calls[0].headers["User-Agent"] == "custom/1.0"

    @pytest.mark.asyncio
    async def test_form_data_is_url_encoded(self, provider_api, http_client):
        provider_api.add("POST", URL, json_body={})
        requestor = HttpRequestor(client=http_client)

        await requestor.request(URL, method="POST", data={"code": "a b", "grant_type": "authorization_code"})

        sent = provider_api.calls[0]
        assert sent.headers["Content-Type"] == "application/x-www-form-urlencoded"
        assert sent.content == b"code=a+b&grant_type=authorization_code"


class TestHttpRequestorErrors:

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "body, expected",
        [
            ({"error": "invalid_grant", "error_description": "Code expired"}, "Code expired"),
            ({"message": "Bad credentials"}, "Bad credentials"),
            ({"error": "invalid_client"}, "invalid_client"),
            ({}, "HTTP 401"),
        ],
    )
    async def test_non_success_status(self, provider_api, http_client, body, expected):
        provider_api.add("GET", URL, json_body=body, status_code=401)
        requestor = HttpRequestor(provider="github", client=http_client)

        with pytest.raises(HttpException) as exc_info:
            await requestor.request(URL)

        assert exc_info.value.message == expected
        assert exc_info.value.code == "HTTP_ERROR"
        assert exc_info.value.upstream_status == 401
        assert exc_info.value.provider == "github"

    @pytest.mark.asyncio
    async def test_non_json_error_body(self, provider_api, http_client):
        provider_api.add("GET", URL, text="<html>Bad Gateway</html>", status_code=502)
        requestor = HttpRequestor(client=http_client)

        with pytest.raises(HttpException) as exc_info:
            await requestor.request(URL)

        assert exc_info.value.message == "HTTP 502"

    @pytest.mark.asyncio
    async def test_network_error(self, provider_api, http_client):
        cause = httpx.ConnectError("Connection refused")
        provider_api.add("GET", URL, exc=cause)
        requestor = HttpRequestor(provider="google", client=http_client)

        with pytest.raises(NetworkException) as exc_info:
            await requestor.request(URL)

        assert exc_info.value.code == "NETWORK_ERROR"
        assert exc_info.value.provider == "google"
        assert exc_info.value.cause is cause
        assert exc_info.value.__cause__ is cause
        assert URL in exc_info.value.message

    @pytest.mark.asyncio
    async def test_timeout_is_network_error(self, provider_api, http_client):
        provider_api.add("GET", URL, exc=httpx.ReadTimeout("timed out"))
        requestor = HttpRequestor(client=http_client)

        with pytest.raises(NetworkException):
            await requestor.request(URL)


class TestHttpRequestorLifecycle:

    @pytest.mark.asyncio
    async def test_injected_client_is_not_closed(self, http_client):
        requestor = HttpRequestor(client=http_client)

        await requestor.aclose()

        assert not http_client.is_closed

    @pytest.mark.asyncio
    async def test_owned_client_is_created_lazily_and_closed(self):
        async with HttpRequestor() as requestor:
            assert requestor._client is None
            client = requestor._get_client()
            assert isinstance(client, httpx.AsyncClient)

        assert requestor._client is None
        assert client.is_closed
