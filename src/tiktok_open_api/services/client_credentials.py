"""App-level tokens via the client credentials grant."""

from __future__ import annotations

import httpx

from tiktok_open_api.config import DEFAULT_BASE_URL, DEFAULT_TIMEOUT, ClientConfig
from tiktok_open_api.models.auth import ClientAccessToken
from tiktok_open_api.services.auth import TokenEndpointService


class ClientCredentialsService(TokenEndpointService):
    """Fetches client access tokens, e.g. for the Research API."""

    def __init__(
        self,
        client_key: str,
        client_secret: str,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT,
        http_client: httpx.AsyncClient | None = None,
    ):
        super().__init__(base_url=base_url, timeout=timeout, http_client=http_client)
        self.client_key = client_key
        self._client_secret = client_secret

    @classmethod
    def from_config(
        cls, config: ClientConfig, http_client: httpx.AsyncClient | None = None
    ) -> ClientCredentialsService:
        return cls(
            config.client_key,
            config.client_secret,
            base_url=config.base_url,
            timeout=config.timeout,
            http_client=http_client,
        )

    async def get_access_token(self) -> ClientAccessToken:
        form_data = {
            "client_key": self.client_key,
            "client_secret": self._client_secret,
            "grant_type": "client_credentials",
        }
        return await self._request_token(form_data, ClientAccessToken)
