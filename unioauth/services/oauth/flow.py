"""
The OAuth 2.0 authorization-code flow, generic over providers.

The functions in this module take any ``OAuthProvider`` plus its
``ProviderConfig``; ``OAuthClient`` binds the two (and an ``HttpRequestor``)
into the object hosts normally use.

Example usage:
    from unioauth.services.oauth import GitHubProvider, OAuthClient, generate_state

    client = OAuthClient(
        GitHubProvider(),
        {"client_id": "...", "client_secret": "...", "redirect_uri": "https://app.com/cb"},
    )

    state = generate_state()
    url = client.get_redirect_url(state=state)

    # In the callback route
    user = await client.handle_callback(request, state=stored_state)
    print(user.id, user.email, user.access_token)
"""

from typing import Any, Mapping, Sequence
from urllib.parse import urlencode

import httpx

from unioauth.core.config import auth_logger
from unioauth.core.exceptions.types import (
    AuthorizationDeniedException,
    MissingCodeException,
    OAuthException,
    TokenException,
)
from unioauth.services.http import HttpRequestor
from unioauth.services.oauth.base import (
    CallbackParams,
    NormalizedUser,
    OAuthProvider,
    OAuthTokens,
    ProviderConfig,
)
from unioauth.services.oauth.request import (
    CallbackParamsExtractor,
    extract_callback_params,
)
from unioauth.services.state import validate_state


__all__ = [
    "OAuthClient",
    "resolve_scopes",
    "build_redirect_url",
    "exchange_code",
    "run_callback",
]


def resolve_scopes(
    provider: OAuthProvider,
    config: ProviderConfig,
    scopes: Sequence[str] | None = None,
) -> tuple[str, ...]:
    """Return the per-call scopes, else the configured ones, else the provider defaults."""
    return tuple(scopes or config.scopes or provider.default_scopes)


def build_redirect_url(
    provider: OAuthProvider,
    config: ProviderConfig,
    *,
    scopes: Sequence[str] | None = None,
    state: str | None = None,
    **options: Any,
) -> str:
    """
    Build the URL the user's browser should be redirected to.

    Args:
        provider: The provider to authorize against.
        config: The provider's credentials.
        scopes: Override the configured scopes for this URL only.
        state: CSRF state value (see ``generate_state``).
        **options: Provider-specific extras (e.g. Google's ``access_type``).

    Returns:
        str: The full authorization URL with query parameters.
    """
    params = {
        "client_id": config.client_id,
        "redirect_uri": config.redirect_uri,
        "response_type": "code",
        "scope": " ".join(resolve_scopes(provider, config, scopes)),
    }
    if state:
        params["state"] = state

    provider.add_auth_params(params, options)

    return f"{provider.authorization_endpoint}?{urlencode(params)}"


async def exchange_code(
    provider: OAuthProvider,
    config: ProviderConfig,
    requestor: HttpRequestor,
    code: str,
) -> OAuthTokens:
    """
    Exchange an authorization code for an access token.

    Sends a form-encoded POST to the provider's token endpoint and asks for
    a JSON response.

    Args:
        provider: The provider that issued the code.
        config: The provider's credentials.
        requestor: HTTP helper used for the request.
        code: The authorization code from the OAuth callback.

    Returns:
        OAuthTokens: The access token and the full token response.

    Raises:
        TokenException: If the response carries an ``error`` (even with
            HTTP 200) or no ``access_token``.
        HttpException: If the token endpoint answers with a non-2xx status.
        NetworkException: If the token endpoint cannot be reached.
    """
    auth_logger.info(f"Exchanging {provider.name} authorization code")
    data = await requestor.request(
        provider.token_endpoint,
        method="POST",
        headers={"Accept": "application/json"},
        data={
            "client_id": config.client_id,
            "client_secret": config.client_secret,
            "code": code,
            "redirect_uri": config.redirect_uri,
            "grant_type": "authorization_code",
        },
    )

    if not isinstance(data, Mapping):
        raise TokenException("Unexpected token response from provider", provider.name)

    # Some providers return 200 with an error body instead of a 4xx
    if data.get("error"):
        error_msg = data.get("error_description") or f"Token exchange failed: {data['error']}"
        auth_logger.error(f"{provider.name} token exchange error: {error_msg}")
        raise TokenException(error_msg, provider.name)

    if not data.get("access_token"):
        auth_logger.error(f"{provider.name} token response has no access_token")
        raise TokenException(provider=provider.name)

    auth_logger.info(f"{provider.name} token exchange successful")
    return OAuthTokens.from_response(data)


async def run_callback(
    provider: OAuthProvider,
    config: ProviderConfig,
    requestor: HttpRequestor,
    request: Any,
    *,
    state: str | None = None,
    extractor: CallbackParamsExtractor | None = None,
) -> NormalizedUser:
    """
    Handle the OAuth callback and return the normalized user.

    Steps, in order: read the callback parameters, surface a provider
    ``error``, require a ``code``, validate ``state`` when one is expected,
    exchange the code, fetch the profile. Every validation runs before any
    network call, and the result is either complete or an exception.

    Args:
        provider: The provider the callback came from.
        config: The provider's credentials.
        requestor: HTTP helper for token exchange and profile requests.
        request: The incoming callback request (see ``extract_callback_params``).
        state: Expected state value for CSRF validation. None skips the
            check; an empty string (e.g. a lost session) fails it.
        extractor: Custom callable turning ``request`` into ``CallbackParams``.

    Returns:
        NormalizedUser: The user, with ``access_token`` attached.

    Raises:
        OAuthException: Any failure, attributed to ``provider.name``.
    """
    try:
        params: CallbackParams = (extractor or extract_callback_params)(request)

        # The provider redirected back with an error (e.g. user denied access)
        if params.error:
            raise AuthorizationDeniedException(
                params.error, params.error_description, provider.name
            )

        if not params.code:
            raise MissingCodeException(provider=provider.name)

        if state is not None:
            validate_state(state, params.state, provider=provider.name)

        tokens = await exchange_code(provider, config, requestor, params.code)
        profile = await provider.fetch_user(tokens.access_token, requestor)

    except OAuthException as e:
        if e.provider is None:
            e.provider = provider.name
        auth_logger.warning(
            f"{provider.name} OAuth callback failed: code={e.code}, message={e.message}"
        )
        raise

    auth_logger.info(f"{provider.name} user authenticated: user_id={profile.id}")
    return NormalizedUser.from_profile(profile, tokens.access_token)


class OAuthClient:
    """
    One configured provider, exposing the OAuth flow.

    Configuration is validated on construction and read-only afterwards, so a
    client can serve concurrent callbacks.

    Attributes:
        provider: The provider implementation.
        name: The provider name (e.g. "github").
        config: The validated provider config.
        requestor: HTTP helper used for provider calls.

    Example:
        >>> client = OAuthClient(GoogleProvider(), google_config)
        >>> client.get_redirect_url(state="abc", access_type="offline")
        'https://accounts.google.com/o/oauth2/v2/auth?client_id=...'
    """

    def __init__(
        self,
        provider: OAuthProvider,
        config: ProviderConfig | Mapping[str, Any],
        requestor: HttpRequestor | None = None,
        http_client: httpx.AsyncClient | None = None,
    ):
        self.provider = provider
        self.name = provider.name
        self.config = ProviderConfig.from_value(provider.name, config)
        self.requestor = requestor or HttpRequestor(
            provider=provider.name, client=http_client
        )

    def __repr__(self) -> str:
        return f"OAuthClient(name={self.name!r}, redirect_uri={self.config.redirect_uri!r})"

    async def __aenter__(self) -> "OAuthClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    @property
    def scopes(self) -> tuple[str, ...]:
        """The scopes requested when no per-call override is given."""
        return resolve_scopes(self.provider, self.config)

    def get_redirect_url(
        self,
        *,
        scopes: Sequence[str] | None = None,
        state: str | None = None,
        **options: Any,
    ) -> str:
        """See ``build_redirect_url``."""
        return build_redirect_url(
            self.provider, self.config, scopes=scopes, state=state, **options
        )

    async def exchange_code(self, code: str) -> OAuthTokens:
        """See ``exchange_code``."""
        return await exchange_code(self.provider, self.config, self.requestor, code)

    async def handle_callback(
        self,
        request: Any,
        *,
        state: str | None = None,
        extractor: CallbackParamsExtractor | None = None,
    ) -> NormalizedUser:
        """See ``run_callback``."""
        return await run_callback(
            self.provider,
            self.config,
            self.requestor,
            request,
            state=state,
            extractor=extractor,
        )

    async def aclose(self) -> None:
        """Release the HTTP client if this client created it."""
        await self.requestor.aclose()
