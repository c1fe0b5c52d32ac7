"""
unioauth: one interface for the OAuth 2.0 authorization-code flow.

Example usage:
    from unioauth import create_oauth, generate_state

    oauth = create_oauth({
        "github": {
            "client_id": "...",
            "client_secret": "...",
            "redirect_uri": "https://app.com/auth/github/callback",
        },
    })

    state = generate_state()
    url = oauth["github"].get_redirect_url(state=state)

    user = await oauth["github"].handle_callback(request, state=state)
"""

from unioauth.core.enums import OAuthErrorCode, OAuthProviders
from unioauth.core.exceptions.types import (
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
from unioauth.factory import create_oauth, create_oauth_from_settings, default_providers
from unioauth.services.http import HttpRequestor
from unioauth.services.oauth import (
    CallbackParams,
    DiscordProvider,
    GitHubProvider,
    GoogleProvider,
    NormalizedUser,
    OAuthClient,
    OAuthProvider,
    OAuthTokens,
    ProviderConfig,
    ProviderProfile,
    extract_callback_params,
)
from unioauth.services.state import SignedStateManager, generate_state, validate_state

__version__ = "1.0.0"

__all__ = [
    "create_oauth",
    "create_oauth_from_settings",
    "default_providers",
    "generate_state",
    "validate_state",
    "SignedStateManager",
    "HttpRequestor",
    "extract_callback_params",
    "CallbackParams",
    "NormalizedUser",
    "OAuthClient",
    "OAuthProvider",
    "OAuthTokens",
    "ProviderConfig",
    "ProviderProfile",
    "GitHubProvider",
    "GoogleProvider",
    "DiscordProvider",
    "OAuthErrorCode",
    "OAuthProviders",
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
