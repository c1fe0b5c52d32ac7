"""
CSRF state tokens for the OAuth authorization-code flow.

Two ways to round-trip state through the provider:

- ``generate_state()`` / ``validate_state()``: a random token the host stores
  in its session and hands back to ``handle_callback(state=...)``.
- ``SignedStateManager``: a signed, expiring token carrying a small payload
  (e.g. the frontend URL to return to) for hosts that keep state in a cookie.

Example usage:
    from unioauth.services.state import generate_state, validate_state

    state = generate_state()
    session["oauth_state"] = state
    ...
    validate_state(session.pop("oauth_state", None), request.query_params.get("state"))
"""

import hmac
import secrets
from typing import Any

from itsdangerous import BadSignature, SignatureExpired, URLSafeTimedSerializer

from unioauth.core.config import settings
from unioauth.core.exceptions.types import (
    ConfigException,
    StateMismatchException,
    StateMissingException,
)


__all__ = [
    "generate_state",
    "validate_state",
    "SignedStateManager",
]


def generate_state(length: int = 32) -> str:
    """
    Generate a cryptographically secure random state token.

    The state token is used to prevent CSRF attacks in OAuth flows.
    It should be stored in the user's session and verified when the
    OAuth callback is received.

    Args:
        length: Number of random bytes to generate. Default is 32 bytes
                which produces a 64-character hex string.

    Returns:
        str: A hex-encoded random string of length * 2 characters.

    Example:
        >>> state = generate_state()
        >>> len(state)
        64
        >>> state = generate_state(length=16)
        >>> len(state)
        32
    """
    return secrets.token_hex(length)


def validate_state(
    expected: str | None,
    received: str | None,
    provider: str | None = None,
) -> None:
    """
    Compare the stored state with the one returned by the provider.

    The comparison checks the byte length first and then uses
    ``hmac.compare_digest``, whose running time does not depend on where
    the first differing byte is.

    Args:
        expected: The state value stored by the host before redirecting.
        received: The state value returned in the callback.
        provider: Provider name to attribute errors to.

    Raises:
        StateMissingException: If either value is absent or empty.
        StateMismatchException: If the values differ in length or content.
    """
    if not expected or not received:
        raise StateMissingException(provider=provider)

    expected_bytes = str(expected).encode("utf-8")
    received_bytes = str(received).encode("utf-8")

    if len(expected_bytes) != len(received_bytes) or not hmac.compare_digest(
        expected_bytes, received_bytes
    ):
        raise StateMismatchException(provider=provider)


class SignedStateManager:
    """
    Manager for encoding/decoding signed OAuth state parameters.

    Uses itsdangerous to sign and serialize state data, ensuring
    it hasn't been tampered with and hasn't expired. Every token carries a
    random nonce, so two encodings of the same payload differ.

    Example:
        >>> manager = SignedStateManager(secret_key="s3cret")
        >>> state = manager.encode_state(callback_url="https://app.com/done")
        >>> manager.decode_state(state)["callback_url"]
        'https://app.com/done'
    """

    # State expires after 10 minutes
    STATE_MAX_AGE_SECONDS: int = 600

    def __init__(
        self,
        secret_key: str | None = None,
        max_age_seconds: int | None = None,
    ):
        secret_key = secret_key or settings.STATE_SECRET_KEY
        if settings.is_insecure_state_secret(secret_key):
            raise ConfigException(
                "ENVIRONMENT is 'production' but STATE_SECRET_KEY still has its "
                "insecure default value. Set UNIOAUTH_STATE_SECRET_KEY or pass secret_key."
            )

        self.max_age_seconds = (
            max_age_seconds
            if max_age_seconds is not None
            else settings.STATE_MAX_AGE_SECONDS or self.STATE_MAX_AGE_SECONDS
        )
        self._serializer = URLSafeTimedSerializer(
            secret_key=secret_key,
            salt="oauth-state",
        )

    def encode_state(self, **data: Any) -> str:
        """
        Encode state data into a signed, URL-safe string.

        Args:
            **data: JSON-serializable values to carry through the flow.

        Returns:
            str: Signed, URL-safe state string.
        """
        payload = dict(data)
        payload["nonce"] = secrets.token_hex(16)
        return self._serializer.dumps(payload)

    def decode_state(self, state: str | None, provider: str | None = None) -> dict:
        """
        Decode and verify a signed state parameter.

        Args:
            state: The signed state string from the OAuth callback.
            provider: Provider name to attribute errors to.

        Returns:
            dict: The payload passed to ``encode_state``, plus its ``nonce``.

        Raises:
            StateMissingException: If ``state`` is empty.
            StateMismatchException: If the signature is invalid or expired.
        """
        if not state:
            raise StateMissingException(provider=provider)

        try:
            return self._serializer.loads(state, max_age=self.max_age_seconds)
        except SignatureExpired as e:
            raise StateMismatchException(
                "State expired, restart the authorization flow", provider
            ) from e
        except BadSignature as e:
            raise StateMismatchException(provider=provider) from e
