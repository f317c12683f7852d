"""High-level TikTok Open API client.

Bundles every service over one shared HTTP connection pool.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

import httpx

from tiktok_open_api.config import ClientConfig
from tiktok_open_api.models.auth import AuthorizationConfig, Scope
from tiktok_open_api.services.auth import AuthorizationFlow
from tiktok_open_api.services.client_credentials import ClientCredentialsService
from tiktok_open_api.services.publish import MediaPublishFlow
from tiktok_open_api.services.research import ResearchService
from tiktok_open_api.services.users import UserService
from tiktok_open_api.services.videos import VideoService

logger = logging.getLogger(__name__)


class TikTokClient:
    """Entry point to the TikTok Open API.

    Example:
        async with TikTokClient(ClientConfig.from_env()) as client:
            config = client.new_authorization(redirect_uri, [Scope.VIDEO_PUBLISH])
            url = client.auth.build_authorization_url(config)
    """

    def __init__(
        self, config: ClientConfig, http_client: httpx.AsyncClient | None = None
    ):
        """Initialize the client.

        Args:
            config: App credentials and HTTP settings
            http_client: Optional client to share; created and owned when omitted
        """
        self.config = config
        self._owns_http_client = http_client is None
        self._http_client = http_client or httpx.AsyncClient(timeout=config.timeout)

        service_kwargs = {
            "base_url": config.base_url,
            "timeout": config.timeout,
            "http_client": self._http_client,
        }
        self.auth = AuthorizationFlow(**service_kwargs)
        self.client_credentials = ClientCredentialsService(
            config.client_key, config.client_secret, **service_kwargs
        )
        self.publish = MediaPublishFlow(**service_kwargs)
        self.users = UserService(**service_kwargs)
        self.videos = VideoService(**service_kwargs)
        self.research = ResearchService(**service_kwargs)

    @classmethod
    def from_env(cls, http_client: httpx.AsyncClient | None = None) -> TikTokClient:
        return cls(ClientConfig.from_env(), http_client=http_client)

    def new_authorization(
        self, redirect_uri: str, scopes: Iterable[Scope | str]
    ) -> AuthorizationConfig:
        """Start a new authorization attempt with fresh CSRF and PKCE values."""
        logger.debug(f"Creating authorization config for {redirect_uri}")
        return AuthorizationConfig.create(
            self.config.client_key,
            self.config.client_secret,
            redirect_uri,
            scopes,
        )

    async def close(self) -> None:
        """Close the shared HTTP client if this client created it."""
        if self._owns_http_client:
            await self._http_client.aclose()

    async def __aenter__(self) -> TikTokClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()
