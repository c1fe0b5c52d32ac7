"""
OAuth data model and the provider capability interface.

A provider is any object satisfying ``OAuthProvider``: it names its endpoints
and default scopes, and knows how to turn an access token into a
``ProviderProfile``. The flow itself lives in ``unioauth.services.oauth.flow``
and never depends on a concrete provider.

Example usage:
    from unioauth.services.oauth.base import OAuthProvider, ProviderProfile

    class GitLabProvider:
        name = "gitlab"
        authorization_endpoint = "https://gitlab.com/oauth/authorize"
        token_endpoint = "https://gitlab.com/oauth/token"
        default_scopes = ("read_user",)

        def add_auth_params(self, params, options):
            pass

        async def fetch_user(self, access_token, requestor):
            ...
"""

from dataclasses import dataclass, field
from typing import Any, Mapping, Protocol, runtime_checkable

from unioauth.core.exceptions.types import ConfigException, ProfileException
from unioauth.services.http import HttpRequestor


__all__ = [
    "OAuthProvider",
    "ProviderConfig",
    "CallbackParams",
    "OAuthTokens",
    "ProviderProfile",
    "NormalizedUser",
    "bearer_headers",
    "require_profile_id",
    "first_non_empty",
]

# camelCase aliases accepted in config mappings
_CONFIG_ALIASES = {
    "clientId": "client_id",
    "clientSecret": "client_secret",
    "redirectUri": "redirect_uri",
}
_REQUIRED_CONFIG_FIELDS = ("client_id", "client_secret", "redirect_uri")


@runtime_checkable
class OAuthProvider(Protocol):
    """
    Capability interface every OAuth provider implements.

    Attributes:
        name: Provider identifier (e.g. "github").
        authorization_endpoint: URL the user's browser is sent to.
        token_endpoint: URL the authorization code is exchanged at.
        default_scopes: Scopes requested when none are configured.
    """

    name: str
    authorization_endpoint: str
    token_endpoint: str
    default_scopes: tuple[str, ...]

    def add_auth_params(self, params: dict[str, str], options: Mapping[str, Any]) -> None:
        """Append provider-specific query parameters to the authorization URL."""
        ...

    async def fetch_user(
        self, access_token: str, requestor: HttpRequestor
    ) -> "ProviderProfile":
        """Fetch the authenticated user's profile and normalize it."""
        ...


@dataclass(frozen=True)
class ProviderConfig:
    """
    Credentials and scopes for one provider.

    Attributes:
        client_id: OAuth application client ID.
        client_secret: OAuth application client secret.
        redirect_uri: Registered callback URL.
        scopes: Scopes to request, or None for the provider's defaults.
    """

    client_id: str
    client_secret: str
    redirect_uri: str
    scopes: tuple[str, ...] | None = None

    @classmethod
    def from_value(
        cls, provider: str, value: "ProviderConfig | Mapping[str, Any] | None"
    ) -> "ProviderConfig":
        """
        Validate and build a config for ``provider``.

        Args:
            provider: Provider name, used to attribute errors.
            value: An existing ProviderConfig or a mapping of its fields.
                camelCase keys (``clientId``...) are accepted as aliases.

        Returns:
            ProviderConfig: The validated, immutable config.

        Raises:
            ConfigException: If the value is not a mapping or a required
                field is missing or empty.
        """
        if isinstance(value, ProviderConfig):
            data: dict[str, Any] = {
                "client_id": value.client_id,
                "client_secret": value.client_secret,
                "redirect_uri": value.redirect_uri,
                "scopes": value.scopes,
            }
        elif isinstance(value, Mapping):
            data = {_CONFIG_ALIASES.get(key, key): val for key, val in value.items()}
        else:
            raise ConfigException(
                f"Configuration for {provider} must be a mapping", provider
            )

        for field_name in _REQUIRED_CONFIG_FIELDS:
            field_value = data.get(field_name)
            if not field_value or not isinstance(field_value, str):
                raise ConfigException(f"{field_name} is required", provider)

        scopes = data.get("scopes")
        if isinstance(scopes, str):
            scopes = scopes.split()

        return cls(
            client_id=data["client_id"],
            client_secret=data["client_secret"],
            redirect_uri=data["redirect_uri"],
            scopes=tuple(scopes) if scopes else None,
        )


@dataclass(frozen=True)
class CallbackParams:
    """OAuth parameters read from a callback request."""

    code: str | None = None
    state: str | None = None
    error: str | None = None
    error_description: str | None = None

    @classmethod
    def from_getter(cls, get) -> "CallbackParams":
        """
        Build params from a ``get(key)`` callable, normalizing empty values to None.

        Args:
            get: Callable returning the value for a query key, or None.
        """
        return cls(
            code=get("code") or None,
            state=get("state") or None,
            error=get("error") or None,
            error_description=get("error_description") or None,
        )


@dataclass
class OAuthTokens:
    """
    Container for the token endpoint response.

    Attributes:
        access_token: The access token for API calls.
        token_type: The type of token (usually "Bearer").
        scope: Optional list of granted scopes, as returned by the provider.
        expires_in: Optional token expiration time in seconds.
        raw: The complete token response.
    """

    access_token: str
    token_type: str = "bearer"
    scope: str | None = None
    expires_in: int | None = None
    raw: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_response(cls, data: Mapping[str, Any]) -> "OAuthTokens":
        try:
            expires_in = int(data["expires_in"])
        except (KeyError, TypeError, ValueError):
            expires_in = None
        return cls(
            access_token=data["access_token"],
            token_type=data.get("token_type") or "bearer",
            scope=data.get("scope"),
            expires_in=expires_in,
            raw=dict(data),
        )


@dataclass
class ProviderProfile:
    """Normalized user information as returned by a provider, before the token is attached."""

    provider: str
    id: str
    email: str | None
    name: str
    avatar: str | None
    raw: dict[str, Any] = field(default_factory=dict)


@dataclass
class NormalizedUser:
    """
    Provider-agnostic user returned by a successful OAuth callback.

    Attributes:
        provider: The provider name (e.g. "github").
        id: The user's ID at the provider, always a string.
        email: The user's email address, if the provider shared one.
        name: Display name.
        avatar: Absolute URL to the profile picture, if any.
        access_token: Provider access token for further API calls.
        raw: The provider's original profile response.

    Example:
        >>> user = NormalizedUser(
        ...     provider="github",
        ...     id="583231",
        ...     email="octocat@github.com",
        ...     name="The Octocat",
        ...     avatar=None,
        ...     access_token="gho_xxx",
        ... )
        >>> user.to_dict()["id"]
        '583231'
    """

    provider: str
    id: str
    email: str | None
    name: str
    avatar: str | None
    access_token: str
    raw: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_profile(cls, profile: ProviderProfile, access_token: str) -> "NormalizedUser":
        return cls(
            provider=profile.provider,
            id=str(profile.id),
            email=profile.email,
            name=profile.name,
            avatar=profile.avatar,
            access_token=access_token,
            raw=profile.raw,
        )

    def to_dict(self) -> dict[str, Any]:
        """
        Convert the user to a dictionary.

        Returns:
            dict: Dictionary representation of the user.
        """
        return {
            "provider": self.provider,
            "id": self.id,
            "email": self.email,
            "name": self.name,
            "avatar": self.avatar,
            "access_token": self.access_token,
            "raw": self.raw,
        }


def bearer_headers(access_token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {access_token}"}


def require_profile_id(profile: Any, provider: str, *keys: str) -> str:
    """
    Return the first present id field of a profile, as a string.

    Raises:
        ProfileException: If the profile is not a mapping or has no id.
    """
    if isinstance(profile, Mapping):
        for key in keys or ("id",):
            value = profile.get(key)
            if value is not None and value != "":
                return str(value)
    raise ProfileException(f"{provider} profile response has no user id", provider)


def first_non_empty(*values: str | None) -> str:
    """Return the first truthy value, or an empty string."""
    for value in values:
        if value:
            return value
    return ""
