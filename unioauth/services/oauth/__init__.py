"""
OAuth provider services.

This package contains the provider-agnostic OAuth flow and its providers:
- OAuthProvider: Capability interface every provider implements
- OAuthClient: One configured provider exposing the flow
- GitHubProvider, GoogleProvider, DiscordProvider: Built-in providers
- extract_callback_params: Reads callback parameters from request objects

Example usage:
    from unioauth.services.oauth import GitHubProvider, OAuthClient

    async with OAuthClient(GitHubProvider(), config) as github:
        url = github.get_redirect_url(state=state)
        ...
        user = await github.handle_callback(request, state=state)
"""

from unioauth.services.oauth.base import (
    CallbackParams,
    NormalizedUser,
    OAuthProvider,
    OAuthTokens,
    ProviderConfig,
    ProviderProfile,
)
from unioauth.services.oauth.discord import DiscordProvider
from unioauth.services.oauth.flow import (
    OAuthClient,
    build_redirect_url,
    exchange_code,
    run_callback,
)
from unioauth.services.oauth.github import GitHubProvider
from unioauth.services.oauth.google import GoogleProvider
from unioauth.services.oauth.request import (
    CallbackParamsExtractor,
    extract_callback_params,
)

__all__ = [
    "CallbackParams",
    "CallbackParamsExtractor",
    "NormalizedUser",
    "OAuthProvider",
    "OAuthTokens",
    "ProviderConfig",
    "ProviderProfile",
    "OAuthClient",
    "build_redirect_url",
    "exchange_code",
    "run_callback",
    "extract_callback_params",
    "GitHubProvider",
    "GoogleProvider",
    "DiscordProvider",
]
