"""Client configuration and environment lookup.

Core services take explicit parameters. Environment variables are read
only here, by bootstrap code that wants them.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field

from tiktok_open_api.models.errors import ConfigurationError

DEFAULT_BASE_URL = "https://open.tiktokapis.com"
DEFAULT_TIMEOUT = 30.0

CLIENT_KEY_ENV = "TIKTOK_CLIENT_KEY"
CLIENT_SECRET_ENV = "TIKTOK_CLIENT_SECRET"
API_TOKEN_ENV = "TIKTOK_API_TOKEN"


@dataclass(frozen=True)
class ClientConfig:
    """App credentials and HTTP settings shared by all services."""

    client_key: str
    client_secret: str = field(repr=False)
    base_url: str = DEFAULT_BASE_URL
    timeout: float = DEFAULT_TIMEOUT

    @classmethod
    def from_env(
        cls, base_url: str = DEFAULT_BASE_URL, timeout: float = DEFAULT_TIMEOUT
    ) -> ClientConfig:
        """Read app credentials from the environment.

        Raises:
            ConfigurationError: If TIKTOK_CLIENT_KEY or TIKTOK_CLIENT_SECRET
                is unset or empty
        """
        return cls(
            client_key=_require_env(CLIENT_KEY_ENV),
            client_secret=_require_env(CLIENT_SECRET_ENV),
            base_url=base_url,
            timeout=timeout,
        )


def access_token_from_env() -> str:
    """Read a user access token from TIKTOK_API_TOKEN."""
    return _require_env(API_TOKEN_ENV)


def _require_env(name: str) -> str:
    value = os.environ.get(name)
    if not value:
        raise ConfigurationError(f"{name} must be set")
    return value
