"""
Test suite for GoogleProvider.

- Authorization URL generation and Google-specific options
- User info mapping
- Full callback through the token endpoint

Run all tests:
    pytest tests/services/oauth/test_google.py -v
"""

from urllib.parse import parse_qs, urlparse

import pytest

from unioauth.core.exceptions.types import HttpException, ProfileException
from unioauth.services.http import HttpRequestor
from unioauth.services.oauth import GoogleProvider, OAuthClient

TOKEN_URL = "https://oauth2.googleapis.com/token"
USERINFO_URL = "https://www.googleapis.com/oauth2/v2/userinfo"

GOOGLE_USER = {
    "id": "108234567890123456789",
    "email": "user@gmail.com",
    "verified_email": True,
    "name": "Test User",
    "picture": "https://lh3.googleusercontent.com/a/photo.jpg",
}


@pytest.fixture
def google(provider_config, http_client):
    return OAuthClient(GoogleProvider(), provider_config, http_client=http_client)


@pytest.fixture
def requestor(http_client):
    return HttpRequestor(provider="google", client=http_client)


class TestGoogleAuthorizationUrl:

    def test_default_scopes(self, google):
        url = google.get_redirect_url()

        assert url.startswith("https://accounts.google.com/o/oauth2/v2/auth?")
        assert parse_qs(urlparse(url).query)["scope"] == ["openid email profile"]

    def test_offline_access(self, google):
        """Test that access_type=offline and prompt=consent are forwarded."""
        params = parse_qs(
            urlparse(google.get_redirect_url(access_type="offline", prompt="consent")).query
        )

        assert params["access_type"] == ["offline"]
        assert params["prompt"] == ["consent"]

    def test_boolean_options_are_lowercased(self, google):
        params = parse_qs(
            urlparse(
                google.get_redirect_url(include_granted_scopes=True, login_hint="a@b.com", hd="b.com")
            ).query
        )

        assert params["include_granted_scopes"] == ["true"]
        assert params["login_hint"] == ["a@b.com"]
        assert params["hd"] == ["b.com"]

    def test_no_options_by_default(self, google):
        params = parse_qs(urlparse(google.get_redirect_url()).query)

        assert set(params) == {"client_id", "redirect_uri", "response_type", "scope"}


class TestGoogleFetchUser:

    @pytest.mark.asyncio
    async def test_maps_userinfo(self, provider_api, requestor):
        provider_api.add("GET", USERINFO_URL, json_body=GOOGLE_USER)

        profile = await GoogleProvider().fetch_user("ya29.token", requestor)

        assert profile.provider == "google"
        assert profile.id == "108234567890123456789"
        assert profile.email == "user@gmail.com"
        assert profile.name == "Test User"
        assert profile.avatar == "https://lh3.googleusercontent.com/a/photo.jpg"
        assert profile.raw == GOOGLE_USER
        assert provider_api.calls[0].headers["Authorization"] == "Bearer ya29.token"

    @pytest.mark.asyncio
    async def test_sub_used_when_id_missing(self, provider_api, requestor):
        """Test the OpenID Connect ``sub`` claim as an id fallback."""
        provider_api.add("GET", USERINFO_URL, json_body={"sub": "1082", "email": "u@gmail.com"})

        profile = await GoogleProvider().fetch_user("ya29.token", requestor)

        assert profile.id == "1082"
        assert profile.name == ""
        assert profile.avatar is None

    @pytest.mark.asyncio
    async def test_missing_id(self, provider_api, requestor):
        provider_api.add("GET", USERINFO_URL, json_body={"email": "u@gmail.com"})

        with pytest.raises(ProfileException) as exc_info:
            await GoogleProvider().fetch_user("ya29.token", requestor)

        assert exc_info.value.code == "PROFILE_ERROR"


class TestGoogleCallback:

    @pytest.mark.asyncio
    async def test_full_callback(self, google, provider_api):
        provider_api.add(
            "POST",
            TOKEN_URL,
            json_body={
                "access_token": "ya29.token",
                "expires_in": 3599,
                "token_type": "Bearer",
                "scope": "openid email profile",
                "id_token": "eyJ...",
            },
        )
        provider_api.add("GET", USERINFO_URL, json_body=GOOGLE_USER)

        user = await google.handle_callback({"code": "4/0Adeu5B", "state": "st"}, state="st")

        assert user.to_dict() == {
            "provider": "google",
            "id": "108234567890123456789",
            "email": "user@gmail.com",
            "name": "Test User",
            "avatar": "https://lh3.googleusercontent.com/a/photo.jpg",
            "access_token": "ya29.token",
            "raw": GOOGLE_USER,
        }

    @pytest.mark.asyncio
    async def test_invalid_grant(self, google, provider_api):
        provider_api.add(
            "POST",
            TOKEN_URL,
            json_body={"error": "invalid_grant", "error_description": "Bad Request"},
            status_code=400,
        )

        with pytest.raises(HttpException) as exc_info:
            await google.handle_callback({"code": "used"})

        assert exc_info.value.code == "HTTP_ERROR"
        assert exc_info.value.upstream_status == 400
