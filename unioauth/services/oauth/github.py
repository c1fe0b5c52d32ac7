"""
GitHub OAuth provider implementation.

GitHub may omit the email from ``/user`` when the user keeps it private, so
the provider falls back to ``/user/emails`` to find a verified address.

Example usage:
    from unioauth.services.oauth import GitHubProvider, OAuthClient

    github = OAuthClient(GitHubProvider(), config)
    url = github.get_redirect_url(state="random_state_token", allow_signup="false")
"""

from typing import Any, Mapping

from unioauth.core.config import auth_logger
from unioauth.core.exceptions.types import OAuthException
from unioauth.services.http import HttpRequestor
from unioauth.services.oauth.base import (
    ProviderProfile,
    bearer_headers,
    first_non_empty,
    require_profile_id,
)


__all__ = ["GitHubProvider"]


class GitHubProvider:
    """
    GitHub OAuth provider.

    GitHub API Endpoints:
        - Authorization: https://github.com/login/oauth/authorize
        - Token: https://github.com/login/oauth/access_token
        - User: https://api.github.com/user
        - Emails: https://api.github.com/user/emails

    Scopes requested:
        - read:user: Read user profile data
        - user:email: Access user email addresses

    Extra authorization options:
        - login: Suggest a specific account to sign in with.
        - allow_signup: "false" hides the sign-up option.
    """

    name: str = "github"
    authorization_endpoint: str = "https://github.com/login/oauth/authorize"
    token_endpoint: str = "https://github.com/login/oauth/access_token"
    default_scopes: tuple[str, ...] = ("read:user", "user:email")

    USER_URL: str = "https://api.github.com/user"
    EMAILS_URL: str = "https://api.github.com/user/emails"

    _AUTH_OPTIONS: tuple[str, ...] = ("login", "allow_signup")

    def add_auth_params(self, params: dict[str, str], options: Mapping[str, Any]) -> None:
        for key in self._AUTH_OPTIONS:
            if options.get(key) is not None:
                params[key] = str(options[key])

    @staticmethod
    def _headers(access_token: str) -> dict[str, str]:
        return {
            **bearer_headers(access_token),
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": "2022-11-28",
        }

    async def _get_primary_email(
        self, access_token: str, requestor: HttpRequestor
    ) -> str | None:
        """
        Fetch the user's best email address from GitHub.

        Picks the primary verified email, else any verified email, else None.
        A failed request degrades to None instead of failing the callback,
        since the granted scopes may not cover ``/user/emails``.

        Args:
            access_token: A valid access token.
            requestor: HTTP helper for the request.

        Returns:
            str | None: The selected email address.
        """
        try:
            emails = await requestor.request(
                self.EMAILS_URL, headers=self._headers(access_token)
            )
        except OAuthException as e:
            auth_logger.warning(f"Error fetching GitHub emails: {e.code}: {e}")
            return None

        if not isinstance(emails, list):
            auth_logger.warning("Unexpected GitHub emails response, ignoring")
            return None

        entries = [entry for entry in emails if isinstance(entry, Mapping)]

        for entry in entries:
            if entry.get("primary") and entry.get("verified") and entry.get("email"):
                return entry["email"]

        for entry in entries:
            if entry.get("verified") and entry.get("email"):
                return entry["email"]

        return None

    async def fetch_user(
        self, access_token: str, requestor: HttpRequestor
    ) -> ProviderProfile:
        """
        Retrieve and normalize the authenticated GitHub user.

        Args:
            access_token: A valid access token from token exchange.
            requestor: HTTP helper for the requests.

        Returns:
            ProviderProfile: The user; ``name`` falls back to the login handle.

        Raises:
            HttpException: If the ``/user`` request is rejected.
            NetworkException: If GitHub cannot be reached.
            ProfileException: If the profile has no id.
        """
        user_data = await requestor.request(
            self.USER_URL, headers=self._headers(access_token)
        )
        user_id = require_profile_id(user_data, self.name)

        email = user_data.get("email") or None
        if not email:
            email = await self._get_primary_email(access_token, requestor)

        return ProviderProfile(
            provider=self.name,
            id=user_id,
            email=email,
            name=first_non_empty(user_data.get("name"), user_data.get("login")),
            avatar=user_data.get("avatar_url") or None,
            raw=user_data,
        )
