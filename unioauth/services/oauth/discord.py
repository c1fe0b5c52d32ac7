"""
Discord OAuth 2.0 provider implementation.

Avatar URL format: https://cdn.discordapp.com/avatars/{user_id}/{hash}.png
Animated avatars (hash starts with "a_") use .gif instead.
"""

from typing import Any, Mapping

from unioauth.services.http import HttpRequestor
from unioauth.services.oauth.base import (
    ProviderProfile,
    bearer_headers,
    first_non_empty,
    require_profile_id,
)


__all__ = ["DiscordProvider", "avatar_url"]

AVATAR_CDN_URL = "https://cdn.discordapp.com/avatars/{user_id}/{avatar_hash}.{ext}"
ANIMATED_AVATAR_PREFIX = "a_"


def avatar_url(user_id: str, avatar_hash: str | None) -> str | None:
    """Build the CDN URL for a Discord avatar hash, or None when unset."""
    if not avatar_hash:
        return None
    ext = "gif" if avatar_hash.startswith(ANIMATED_AVATAR_PREFIX) else "png"
    return AVATAR_CDN_URL.format(user_id=user_id, avatar_hash=avatar_hash, ext=ext)


class DiscordProvider:
    """
    Discord OAuth 2.0 provider.

    Discord API Endpoints:
        - Authorization: https://discord.com/api/oauth2/authorize
        - Token: https://discord.com/api/oauth2/token
        - User: https://discord.com/api/v10/users/@me

    Scopes requested:
        - identify: Username, avatar, global display name
        - email: User's email address

    Extra authorization options:
        - prompt: "consent" forces the authorization screen, "none" skips it.
    """

    name: str = "discord"
    authorization_endpoint: str = "https://discord.com/api/oauth2/authorize"
    token_endpoint: str = "https://discord.com/api/oauth2/token"
    default_scopes: tuple[str, ...] = ("identify", "email")

    USER_URL: str = "https://discord.com/api/v10/users/@me"

    def add_auth_params(self, params: dict[str, str], options: Mapping[str, Any]) -> None:
        if options.get("prompt") is not None:
            params["prompt"] = str(options["prompt"])

    async def fetch_user(
        self, access_token: str, requestor: HttpRequestor
    ) -> ProviderProfile:
        user_data = await requestor.request(
            self.USER_URL, headers=bearer_headers(access_token)
        )
        user_id = require_profile_id(user_data, self.name)

        return ProviderProfile(
            provider=self.name,
            id=user_id,
            email=user_data.get("email") or None,
            name=first_non_empty(user_data.get("global_name"), user_data.get("username")),
            avatar=avatar_url(user_id, user_data.get("avatar")),
            raw=user_data,
        )
