from fastapi import status

from unioauth.core.enums import OAuthErrorCode


class AppException(Exception):
    """Base library exception."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        details: dict | None = None,
    ):
        self.message = message
        self.status_code = status_code or status.HTTP_500_INTERNAL_SERVER_ERROR
        self.details = details
        super().__init__(message)


class OAuthException(AppException):
    """
    Exception raised for OAuth-related errors.

    Every OAuth failure carries the provider that produced it and a stable
    machine-readable ``code``. Callers should branch on ``code``, never on
    the message text.

    Attributes:
        provider: Provider name (e.g. "github"), or None when the failure
            happened before a provider was resolved.
        code: Machine-readable error code (see OAuthErrorCode).
    """

    default_code: str = OAuthErrorCode.OAUTH_ERROR.value
    default_status: int = status.HTTP_400_BAD_REQUEST

    def __init__(
        self,
        message: str = "OAuth authentication failed.",
        provider: str | None = None,
        code: str | None = None,
        status_code: int | None = None,
        details: dict | None = None,
    ):
        super().__init__(message, status_code or self.default_status, details)
        self.provider = provider or None
        self.code = code or self.default_code

    def to_dict(self) -> dict:
        """
        Convert the error to a JSON-serializable dictionary.

        Returns:
            dict: The provider, code and message of the error.
        """
        return {
            "provider": self.provider,
            "code": self.code,
            "message": self.message,
        }

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(message={self.message!r}, "
            f"provider={self.provider!r}, code={self.code!r})"
        )


class ConfigException(OAuthException):
    """Exception raised when a provider configuration is invalid."""

    default_code = OAuthErrorCode.CONFIG_ERROR.value
    default_status = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(
        self, message: str = "Invalid OAuth configuration.", provider: str | None = None
    ):
        super().__init__(message, provider)


class UnknownProviderException(ConfigException):
    """Exception raised when a configured provider name is not supported."""

    default_code = OAuthErrorCode.UNKNOWN_PROVIDER.value

    def __init__(self, name: str, supported: list[str]):
        super().__init__(
            f'Unknown provider "{name}". Supported providers: {", ".join(supported)}'
        )
        self.name = name
        self.supported = supported


class UnsupportedRequestShapeException(OAuthException):
    """Exception raised when callback parameters cannot be read from a request."""

    default_code = OAuthErrorCode.INVALID_REQUEST.value

    def __init__(
        self,
        message: str = (
            "Unable to extract query parameters from the request object. "
            "Pass a framework request, an object with a URL, or a custom extractor."
        ),
        provider: str | None = None,
    ):
        super().__init__(message, provider)


class AuthorizationDeniedException(OAuthException):
    """
    Exception raised when the provider redirects back with an ``error``.

    The ``code`` is the provider's own error token (e.g. "access_denied").
    """

    default_status = status.HTTP_403_FORBIDDEN

    def __init__(
        self,
        error: str,
        description: str | None = None,
        provider: str | None = None,
    ):
        super().__init__(
            description or f"Authorization denied: {error}", provider, code=error
        )


class MissingCodeException(OAuthException):
    """Exception raised when the callback carries no authorization code."""

    default_code = OAuthErrorCode.MISSING_CODE.value

    def __init__(
        self,
        message: str = "No authorization code received in callback",
        provider: str | None = None,
    ):
        super().__init__(message, provider)


class InvalidStateException(OAuthException):
    """Exception raised when the OAuth state parameter is invalid."""

    def __init__(
        self, message: str = "Invalid state parameter.", provider: str | None = None
    ):
        super().__init__(message, provider)


class StateMissingException(InvalidStateException):
    """Exception raised when the expected or received state is absent."""

    default_code = OAuthErrorCode.STATE_MISSING.value

    def __init__(
        self,
        message: str = "State parameter missing, potential CSRF attack",
        provider: str | None = None,
    ):
        super().__init__(message, provider)


class StateMismatchException(InvalidStateException):
    """Exception raised when the received state does not match the expected one."""

    default_code = OAuthErrorCode.STATE_MISMATCH.value

    def __init__(
        self,
        message: str = "State mismatch, potential CSRF attack",
        provider: str | None = None,
    ):
        super().__init__(message, provider)


class TokenException(OAuthException):
    """Exception raised when the token endpoint returns an error or no token."""

    default_code = OAuthErrorCode.TOKEN_ERROR.value

    def __init__(
        self,
        message: str = "No access token received from provider",
        provider: str | None = None,
    ):
        super().__init__(message, provider)


class ProfileException(OAuthException):
    """Exception raised when a provider profile cannot be normalized."""

    default_code = OAuthErrorCode.PROFILE_ERROR.value
    default_status = status.HTTP_502_BAD_GATEWAY

    def __init__(
        self,
        message: str = "Provider returned an unusable profile",
        provider: str | None = None,
    ):
        super().__init__(message, provider)


class HttpException(OAuthException):
    """Exception raised when a provider responds with a non-success status."""

    default_code = OAuthErrorCode.HTTP_ERROR.value
    default_status = status.HTTP_502_BAD_GATEWAY

    def __init__(
        self,
        message: str,
        upstream_status: int,
        provider: str | None = None,
        body: object = None,
    ):
        super().__init__(message, provider)
        self.upstream_status = upstream_status
        self.body = body


class NetworkException(OAuthException):
    """Exception raised when a request to a provider fails at the transport level."""

    default_code = OAuthErrorCode.NETWORK_ERROR.value
    default_status = status.HTTP_502_BAD_GATEWAY

    def __init__(
        self,
        message: str,
        provider: str | None = None,
        cause: BaseException | None = None,
    ):
        super().__init__(message, provider)
        self.cause = cause


__all__ = [
    "AppException",
    "OAuthException",
    "ConfigException",
    "UnknownProviderException",
    "UnsupportedRequestShapeException",
    "AuthorizationDeniedException",
    "MissingCodeException",
    "InvalidStateException",
    "StateMissingException",
    "StateMismatchException",
    "TokenException",
    "ProfileException",
    "HttpException",
    "NetworkException",
]
