"""
Google OAuth 2.0 provider implementation.

Example usage:
    from unioauth.services.oauth import GoogleProvider, OAuthClient

    google = OAuthClient(GoogleProvider(), config)
    url = google.get_redirect_url(state="random_state_token", prompt="select_account")
"""

from typing import Any, Mapping

from unioauth.services.http import HttpRequestor
from unioauth.services.oauth.base import (
    ProviderProfile,
    bearer_headers,
    first_non_empty,
    require_profile_id,
)


__all__ = ["GoogleProvider"]


class GoogleProvider:
    """
    Google OAuth 2.0 provider.

    Google API Endpoints:
        - Authorization: https://accounts.google.com/o/oauth2/v2/auth
        - Token: https://oauth2.googleapis.com/token
        - User Info: https://www.googleapis.com/oauth2/v2/userinfo

    Scopes requested:
        - openid: OpenID Connect authentication
        - email: User's email address
        - profile: User's basic profile information

    Extra authorization options:
        - access_type: "offline" asks Google for a refresh token.
        - prompt: e.g. "consent" or "select_account".
        - login_hint: Pre-fill the account email.
        - include_granted_scopes: Incremental authorization.
        - hd: Restrict sign-in to a Workspace domain.
    """

    name: str = "google"
    authorization_endpoint: str = "https://accounts.google.com/o/oauth2/v2/auth"
    token_endpoint: str = "https://oauth2.googleapis.com/token"
    default_scopes: tuple[str, ...] = ("openid", "email", "profile")

    USERINFO_URL: str = "https://www.googleapis.com/oauth2/v2/userinfo"

    _AUTH_OPTIONS: tuple[str, ...] = (
        "access_type",
        "prompt",
        "login_hint",
        "include_granted_scopes",
        "hd",
    )

    def add_auth_params(self, params: dict[str, str], options: Mapping[str, Any]) -> None:
        for key in self._AUTH_OPTIONS:
            value = options.get(key)
            if value is None:
                continue
            if isinstance(value, bool):
                value = "true" if value else "false"
            params[key] = str(value)

    async def fetch_user(
        self, access_token: str, requestor: HttpRequestor
    ) -> ProviderProfile:
        """
        Retrieve and normalize the authenticated Google user.

        Args:
            access_token: A valid access token from token exchange.
            requestor: HTTP helper for the request.

        Returns:
            ProviderProfile: The user mapped from ``id``, ``email``, ``name``, ``picture``.
        """
        user_data = await requestor.request(
            self.USERINFO_URL, headers=bearer_headers(access_token)
        )

        return ProviderProfile(
            provider=self.name,
            id=require_profile_id(user_data, self.name, "id", "sub"),
            email=user_data.get("email") or None,
            name=first_non_empty(user_data.get("name")),
            avatar=user_data.get("picture") or None,
            raw=user_data,
        )
