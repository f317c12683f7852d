"""Shared HTTP plumbing for TikTok Open API services.

Every service sends one request per call, separates send, read, and parse
failures, and decodes the ``{data, error}`` envelope. Business success
requires both a 2xx status and ``error.code == "ok"``.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from enum import Enum
from typing import Any, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from tiktok_open_api.config import DEFAULT_BASE_URL, DEFAULT_TIMEOUT
from tiktok_open_api.models.envelope import Envelope, ErrorEnvelope
from tiktok_open_api.models.errors import (
    RequestFailedError,
    ResponseParseError,
    ResponseReadError,
    error_from_envelope,
)

logger = logging.getLogger(__name__)

DataT = TypeVar("DataT", bound=BaseModel)

JSON_CONTENT_TYPE = "application/json; charset=UTF-8"


def join_fields(fields: Iterable[Enum | str]) -> str:
    """Join a field selection into the comma-separated ``fields`` parameter."""
    return ",".join(f.value if isinstance(f, Enum) else str(f) for f in fields)


def bearer_headers(access_token: str) -> dict[str, str]:
    return {
        "Authorization": f"Bearer {access_token}",
        "Content-Type": JSON_CONTENT_TYPE,
    }


class BaseService:
    """Base class owning the HTTP client and response decoding."""

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT,
        http_client: httpx.AsyncClient | None = None,
    ):
        """Initialize the service.

        Args:
            base_url: API root, overridable for testing or proxies
            timeout: HTTP request timeout in seconds
            http_client: Optional shared client; one is created when omitted
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._owns_http_client = http_client is None
        self._http_client = http_client or httpx.AsyncClient(timeout=timeout)

    def _url(self, path: str) -> str:
        return f"{self.base_url}{path}"

    async def _send(
        self,
        method: str,
        url: str,
        *,
        headers: dict[str, str] | None = None,
        params: dict[str, Any] | None = None,
        json: Any = None,
        data: dict[str, str] | None = None,
        content: bytes | None = None,
    ) -> httpx.Response:
        """Send one request and read its body.

        Raises:
            RequestFailedError: If the request could not be sent
            ResponseReadError: If the response body could not be read
        """
        # Query strings can carry upload tokens.
        display_url = url.split("?", 1)[0]
        logger.debug(f"{method} {display_url}")

        try:
            request = self._http_client.build_request(
                method,
                url,
                headers=headers,
                params=params,
                json=json,
                data=data,
                content=content,
            )
            response = await self._http_client.send(request, stream=True)
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise RequestFailedError(f"{method} {display_url} failed: {e}") from e

        try:
            await response.aread()
        except httpx.HTTPError as e:
            raise ResponseReadError(
                f"Failed to read response from {display_url}: {e}"
            ) from e
        finally:
            await response.aclose()

        logger.debug(f"{method} {display_url} -> {response.status_code}")
        return response

    def _decode_json(self, response: httpx.Response) -> Any:
        try:
            return response.json()
        except ValueError as e:
            raise ResponseParseError(f"Invalid JSON response: {e}") from e

    def _decode_envelope(
        self, response: httpx.Response, data_model: type[DataT]
    ) -> DataT:
        """Decode an envelope and return its data on business success.

        The error block is decoded first; ``data`` is validated only on
        success.

        Raises:
            ResponseParseError: If the body is not a valid envelope
            ApiError: If the status is not 2xx or the error code is not "ok"
        """
        body = self._decode_json(response)
        if not isinstance(body, dict):
            raise ResponseParseError("Response envelope is not a JSON object")

        try:
            error = ErrorEnvelope.model_validate(body.get("error"))
        except ValidationError as e:
            raise ResponseParseError(f"Invalid response error block: {e}") from e

        if not (response.is_success and error.is_ok()):
            logger.warning(
                f"TikTok API error {error.code} "
                f"(HTTP {response.status_code}, log_id={error.log_id}): "
                f"{error.message}"
            )
            raise error_from_envelope(error)

        try:
            envelope = Envelope[data_model].model_validate(body)
        except ValidationError as e:
            raise ResponseParseError(f"Invalid response envelope: {e}") from e
        return envelope.data

    async def _post_envelope(
        self,
        path: str,
        access_token: str,
        data_model: type[DataT],
        *,
        json: Any = None,
        params: dict[str, Any] | None = None,
    ) -> DataT:
        response = await self._send(
            "POST",
            self._url(path),
            headers=bearer_headers(access_token),
            params=params,
            json=json,
        )
        return self._decode_envelope(response, data_model)

    async def _get_envelope(
        self,
        path: str,
        access_token: str,
        data_model: type[DataT],
        *,
        params: dict[str, Any] | None = None,
    ) -> DataT:
        response = await self._send(
            "GET",
            self._url(path),
            headers={"Authorization": f"Bearer {access_token}"},
            params=params,
        )
        return self._decode_envelope(response, data_model)

    async def close(self) -> None:
        """Close the HTTP client if this service created it."""
        if self._owns_http_client:
            await self._http_client.aclose()
