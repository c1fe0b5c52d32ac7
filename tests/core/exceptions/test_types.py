"""
Test suite for OAuth exception types.

Run tests:
    pytest tests/core/exceptions/test_types.py -v

Run with coverage:
    pytest tests/core/exceptions/test_types.py --cov=unioauth.core.exceptions.types --cov-report=term-missing -v
"""

import pytest
from fastapi import status

from unioauth.core.exceptions.types import (
    AppException,
    AuthorizationDeniedException,
    ConfigException,
    HttpException,
    InvalidStateException,
    MissingCodeException,
    NetworkException,
    OAuthException,
    ProfileException,
    StateMismatchException,
    StateMissingException,
    TokenException,
    UnknownProviderException,
    UnsupportedRequestShapeException,
)


class TestAppException:

    def test_app_exception_with_message_only(self):
        exc = AppException("Test error")

        assert exc.message == "Test error"
        assert exc.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
        assert str(exc) == "Test error"

    def test_app_exception_with_custom_status_code(self):
        exc = AppException("Test error", status_code=status.HTTP_400_BAD_REQUEST)

        assert exc.status_code == status.HTTP_400_BAD_REQUEST


class TestOAuthException:

    def test_defaults(self):
        exc = OAuthException()

        assert exc.message == "OAuth authentication failed."
        assert exc.provider is None
        assert exc.code == "OAUTH_ERROR"
        assert exc.status_code == status.HTTP_400_BAD_REQUEST
        assert isinstance(exc, AppException)

    def test_empty_provider_normalizes_to_none(self):
        assert OAuthException("x", provider="").provider is None

    def test_to_dict(self):
        exc = TokenException("bad code", provider="github")

        assert exc.to_dict() == {
            "provider": "github",
            "code": "TOKEN_ERROR",
            "message": "bad code",
        }

    def test_repr_contains_code(self):
        assert "MISSING_CODE" in repr(MissingCodeException(provider="google"))


class TestErrorCodes:

    @pytest.mark.parametrize(
        "exc, code, status_code",
        [
            (ConfigException(provider="github"), "CONFIG_ERROR", 500),
            (UnsupportedRequestShapeException(), "INVALID_REQUEST", 400),
            (MissingCodeException(), "MISSING_CODE", 400),
            (StateMissingException(), "STATE_MISSING", 400),
            (StateMismatchException(), "STATE_MISMATCH", 400),
            (TokenException(), "TOKEN_ERROR", 400),
            (ProfileException(), "PROFILE_ERROR", 502),
            (HttpException("HTTP 500", upstream_status=500), "HTTP_ERROR", 502),
            (NetworkException("down"), "NETWORK_ERROR", 502),
        ],
    )
    def test_code_and_status(self, exc, code, status_code):
        assert exc.code == code
        assert exc.status_code == status_code
        assert isinstance(exc, OAuthException)

    def test_state_exceptions_share_base(self):
        assert isinstance(StateMissingException(), InvalidStateException)
        assert isinstance(StateMismatchException(), InvalidStateException)


class TestAuthorizationDeniedException:

    def test_code_is_provider_error_token(self):
        exc = AuthorizationDeniedException(
            "access_denied", "The user denied access", provider="discord"
        )

        assert exc.code == "access_denied"
        assert exc.message == "The user denied access"
        assert exc.provider == "discord"
        assert exc.status_code == status.HTTP_403_FORBIDDEN

    def test_generated_message_without_description(self):
        exc = AuthorizationDeniedException("access_denied")

        assert exc.message == "Authorization denied: access_denied"


class TestUnknownProviderException:

    def test_lists_supported_providers(self):
        exc = UnknownProviderException("gitlab", ["discord", "github", "google"])

        assert exc.code == "UNKNOWN_PROVIDER"
        assert exc.provider is None
        assert 'Unknown provider "gitlab"' in exc.message
        assert "discord, github, google" in exc.message
        assert isinstance(exc, ConfigException)


class TestTransportExceptions:

    def test_http_exception_keeps_upstream_status_and_body(self):
        exc = HttpException("Bad credentials", 401, provider="github", body={"message": "Bad credentials"})

        assert exc.upstream_status == 401
        assert exc.body == {"message": "Bad credentials"}
        assert exc.status_code == status.HTTP_502_BAD_GATEWAY

    def test_network_exception_keeps_cause(self):
        cause = ConnectionError("refused")
        exc = NetworkException("failed", provider="google", cause=cause)

        assert exc.cause is cause
