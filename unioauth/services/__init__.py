from unioauth.services.http import HttpRequestor
from unioauth.services.state import (
    SignedStateManager,
    generate_state,
    validate_state,
)

# OAuth providers
from unioauth.services.oauth import (
    DiscordProvider,
    GitHubProvider,
    GoogleProvider,
    OAuthClient,
)

__all__ = [
    "HttpRequestor",
    "SignedStateManager",
    "generate_state",
    "validate_state",
    "DiscordProvider",
    "GitHubProvider",
    "GoogleProvider",
    "OAuthClient",
]
