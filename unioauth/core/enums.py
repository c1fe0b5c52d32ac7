from enum import Enum


class OAuthProviders(str, Enum):
    """Built-in OAuth providers."""

    GITHUB = "github"
    GOOGLE = "google"
    DISCORD = "discord"


class OAuthErrorCode(str, Enum):
    """Machine-readable error codes carried by OAuthException."""

    OAUTH_ERROR = "OAUTH_ERROR"
    CONFIG_ERROR = "CONFIG_ERROR"
    UNKNOWN_PROVIDER = "UNKNOWN_PROVIDER"
    INVALID_REQUEST = "INVALID_REQUEST"  # Unsupported callback request shape
    MISSING_CODE = "MISSING_CODE"
    STATE_MISSING = "STATE_MISSING"
    STATE_MISMATCH = "STATE_MISMATCH"
    TOKEN_ERROR = "TOKEN_ERROR"
    PROFILE_ERROR = "PROFILE_ERROR"
    HTTP_ERROR = "HTTP_ERROR"
    NETWORK_ERROR = "NETWORK_ERROR"
