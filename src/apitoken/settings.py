"""Token settings loaded from environment variables."""

import functools

from pydantic_settings import BaseSettings

from apitoken.constants import DEFAULT_EXPIRATION_DELAY_SECONDS, DEFAULT_LOG_LEVEL


class TokenSettings(BaseSettings):
    """Server-side token configuration."""

    TOKEN_KEY_SALT: str = ""
    TOKEN_EXPIRATION_DELAY_SECONDS: int = DEFAULT_EXPIRATION_DELAY_SECONDS

    LOG_LEVEL: str = DEFAULT_LOG_LEVEL

    model_config = {"env_prefix": ""}


@functools.lru_cache(maxsize=1)
def get_settings() -> TokenSettings:
    """Return cached token settings singleton."""
    return TokenSettings()
