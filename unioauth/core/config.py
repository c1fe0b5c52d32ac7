from functools import lru_cache
from typing import Any

from pydantic_settings import BaseSettings, SettingsConfigDict

from unioauth.core.logger import setup_logger, init_sentry


INSECURE_STATE_SECRET_KEY = "supersecretkey"


class Settings(BaseSettings):
    # Library settings
    ENVIRONMENT: str = "development"  # Options: development, production
    USER_AGENT: str = "unioauth"
    DEFAULT_CALLBACK_HOST: str = "localhost"
    HTTP_TIMEOUT: float | None = None  # Host owns deadlines

    # Logging settings
    LOG_LEVEL: str = "INFO"
    LOG_FILE: str | None = None
    LOG_CONSOLE: bool = False  # Otherwise records only reach the host's handlers

    # Sentry settings
    SENTRY_DSN: str = ""
    SENTRY_ENVIRONMENT: str = "development"
    SENTRY_TRACES_SAMPLE_RATE: float = 0.1

    # Signed state settings
    STATE_SECRET_KEY: str = INSECURE_STATE_SECRET_KEY
    STATE_MAX_AGE_SECONDS: int = 600

    # OAuth settings
    GITHUB_CLIENT_ID: str = ""
    GITHUB_CLIENT_SECRET: str = ""
    GOOGLE_CLIENT_ID: str = ""
    GOOGLE_CLIENT_SECRET: str = ""
    DISCORD_CLIENT_ID: str = ""
    DISCORD_CLIENT_SECRET: str = ""
    OAUTH_REDIRECT_BASE_URI: str = "http://localhost:8000/auth"
    OAUTH_SCOPES: dict[str, list[str]] = {}

    model_config: SettingsConfigDict = SettingsConfigDict(  # type: ignore
        env_prefix="UNIOAUTH_",
        env_file=".env",
        extra="ignore",
    )

    def is_insecure_state_secret(self, secret_key: str) -> bool:
        """Whether ``secret_key`` is the default state secret while running in production."""
        return (
            self.ENVIRONMENT == "production"
            and secret_key == INSECURE_STATE_SECRET_KEY
        )

    def provider_configs(self) -> dict[str, dict[str, Any]]:
        """
        Build a provider config map from the ``*_CLIENT_ID`` settings.

        Only providers with a client id are included. The redirect URI for
        each provider is ``{OAUTH_REDIRECT_BASE_URI}/oauth/{provider}/callback``.

        Returns:
            dict: Mapping of provider name to provider config values.
        """
        credentials = {
            "github": (self.GITHUB_CLIENT_ID, self.GITHUB_CLIENT_SECRET),
            "google": (self.GOOGLE_CLIENT_ID, self.GOOGLE_CLIENT_SECRET),
            "discord": (self.DISCORD_CLIENT_ID, self.DISCORD_CLIENT_SECRET),
        }
        base_uri = self.OAUTH_REDIRECT_BASE_URI.rstrip("/")

        configs: dict[str, dict[str, Any]] = {}
        for name, (client_id, client_secret) in credentials.items():
            if not client_id:
                continue
            configs[name] = {
                "client_id": client_id,
                "client_secret": client_secret,
                "redirect_uri": f"{base_uri}/oauth/{name}/callback",
                "scopes": self.OAUTH_SCOPES.get(name),
            }
        return configs


@lru_cache()
def get_settings() -> Settings:
    return Settings()


settings = get_settings()

if settings.SENTRY_DSN:
    init_sentry(
        dsn=settings.SENTRY_DSN,
        environment=settings.SENTRY_ENVIRONMENT,
        traces_sample_rate=settings.SENTRY_TRACES_SAMPLE_RATE,
    )

auth_logger = setup_logger(
    name="unioauth.auth",
    log_file=settings.LOG_FILE,
    console=settings.LOG_CONSOLE,
    level=settings.LOG_LEVEL,
    sentry_tag="auth",
)
http_logger = setup_logger(
    name="unioauth.http",
    log_file=settings.LOG_FILE,
    console=settings.LOG_CONSOLE,
    level=settings.LOG_LEVEL,
    sentry_tag="http",
)

__all__ = [
    "Settings",
    "get_settings",
    "settings",
    "auth_logger",
    "http_logger",
]
