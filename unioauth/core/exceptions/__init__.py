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
