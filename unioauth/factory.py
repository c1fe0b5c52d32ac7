"""
Create OAuth clients for every configured provider.

Example usage:
    from unioauth import create_oauth

    oauth = create_oauth({
        "github": {"client_id": "...", "client_secret": "...", "redirect_uri": "..."},
        "google": {"client_id": "...", "client_secret": "...", "redirect_uri": "..."},
    })

    oauth["github"].get_redirect_url(state=state)
    user = await oauth["github"].handle_callback(request, state=state)
"""

from typing import Any, Callable, Mapping

import httpx

from unioauth.core.config import Settings, auth_logger, get_settings
from unioauth.core.enums import OAuthProviders
from unioauth.core.exceptions.types import ConfigException, UnknownProviderException
from unioauth.services.oauth import (
    DiscordProvider,
    GitHubProvider,
    GoogleProvider,
    OAuthClient,
    OAuthProvider,
    ProviderConfig,
)


__all__ = ["ProviderFactory", "default_providers", "create_oauth", "create_oauth_from_settings"]

ProviderFactory = Callable[[], OAuthProvider]


def default_providers() -> dict[str, ProviderFactory]:
    """
    Return a fresh mapping of the built-in provider names to their classes.

    To add a provider, copy this mapping, add an entry, and pass it to
    ``create_oauth(providers=...)``.
    """
    return {
        OAuthProviders.GITHUB.value: GitHubProvider,
        OAuthProviders.GOOGLE.value: GoogleProvider,
        OAuthProviders.DISCORD.value: DiscordProvider,
    }


def create_oauth(
    config: Mapping[str, ProviderConfig | Mapping[str, Any]],
    *,
    providers: Mapping[str, ProviderFactory] | None = None,
    http_client: httpx.AsyncClient | None = None,
) -> dict[str, OAuthClient]:
    """
    Create an OAuth client for each configured provider.

    Args:
        config: Provider name to provider config (a ProviderConfig or a mapping
            with ``client_id``, ``client_secret``, ``redirect_uri`` and
            optional ``scopes``).
        providers: Provider name to provider factory. Defaults to
            ``default_providers()``.
        http_client: Optional shared ``httpx.AsyncClient``; when given, the
            host owns its lifecycle.

    Returns:
        dict: Provider name to OAuthClient, in config order.

    Raises:
        ConfigException: If ``config`` is not a non-empty mapping, or a
            provider config is missing a required field.
        UnknownProviderException: If a provider name is not supported.
    """
    if not isinstance(config, Mapping):
        raise ConfigException("create_oauth() requires a configuration mapping")

    if not config:
        raise ConfigException(
            "At least one provider must be configured (github, google, discord)"
        )

    registry = providers if providers is not None else default_providers()

    clients: dict[str, OAuthClient] = {}
    for name, provider_config in config.items():
        provider_factory = registry.get(name)
        if provider_factory is None:
            raise UnknownProviderException(name, sorted(registry))
        clients[name] = OAuthClient(
            provider_factory(), provider_config, http_client=http_client
        )

    auth_logger.info(f"OAuth clients created: {', '.join(clients)}")
    return clients


def create_oauth_from_settings(
    settings: Settings | None = None, **kwargs: Any
) -> dict[str, OAuthClient]:
    """
    Create OAuth clients from ``UNIOAUTH_*`` settings.

    Providers are enabled by setting their client id (e.g.
    ``UNIOAUTH_GITHUB_CLIENT_ID``); see ``Settings.provider_configs``.

    Args:
        settings: Settings to read. Defaults to ``get_settings()``.
        **kwargs: Passed through to ``create_oauth``.

    Returns:
        dict: Provider name to OAuthClient.
    """
    settings = settings or get_settings()
    return create_oauth(settings.provider_configs(), **kwargs)
