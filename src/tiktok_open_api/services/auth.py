"""TikTok Login Kit authorization flow service.

Builds the authorization URL, validates the redirect callback, and talks
to the token endpoint for code exchange and refresh. Token requests are
form encoded (RFC 6749 Section 4.1.3).
"""

from __future__ import annotations

import logging
from typing import Any, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from tiktok_open_api.models.auth import (
    AccessToken,
    AuthorizationCallback,
    AuthorizationConfig,
    AuthorizationConfirmation,
)
from tiktok_open_api.models.envelope import ErrorEnvelope
from tiktok_open_api.models.errors import (
    AuthorizationDeniedError,
    CsrfMismatchError,
    MalformedCallbackError,
    ResponseParseError,
    error_from_envelope,
)
from tiktok_open_api.primitives.pkce import states_match
from tiktok_open_api.services.base import BaseService

logger = logging.getLogger(__name__)

TOKEN_PATH = "/v2/oauth/token/"

TokenT = TypeVar("TokenT", bound=BaseModel)

FORM_HEADERS = {
    "Content-Type": "application/x-www-form-urlencoded",
    "Accept": "application/json",
}


class TokenEndpointService(BaseService):
    """Base for services that request tokens from the token endpoint."""

    async def _request_token(
        self, form_data: dict[str, str], token_model: type[TokenT]
    ) -> TokenT:
        logger.debug(f"Token request: grant_type={form_data['grant_type']}")

        response = await self._send(
            "POST",
            self._url(TOKEN_PATH),
            headers=FORM_HEADERS,
            data=form_data,
        )
        return self._parse_token_response(response, token_model)

    def _parse_token_response(
        self, response: httpx.Response, token_model: type[TokenT]
    ) -> TokenT:
        """Parse a token endpoint response.

        The endpoint reports failures either with an error status or with a
        200 body that has no access token. Both are mapped through the error
        taxonomy.

        Raises:
            ResponseParseError: If the body is not JSON or misses token fields
            ApiError: If the endpoint returned an error body
        """
        response_data = self._decode_json(response)
        if not isinstance(response_data, dict):
            raise ResponseParseError("Token response is not a JSON object")

        if response.is_success and "access_token" in response_data:
            try:
                token = token_model.model_validate(response_data)
            except ValidationError as e:
                raise ResponseParseError(f"Invalid token response: {e}") from e
            logger.info("Token request successful")
            return token

        envelope = token_error_envelope(response_data)
        logger.warning(
            f"Token request failed with {response.status_code}: "
            f"{envelope.code} (log_id={envelope.log_id})"
        )
        raise error_from_envelope(envelope)


def token_error_envelope(response_data: dict[str, Any]) -> ErrorEnvelope:
    """Normalize the error shapes the token endpoint can return.

    Accepts a nested ``{"error": {...}}`` envelope, a flat
    ``{"code", "message", "log_id"}`` body, or an OAuth-style
    ``{"error", "error_description", "log_id"}`` body.
    """
    error = response_data.get("error")
    try:
        if isinstance(error, dict):
            return ErrorEnvelope.model_validate(error)
        if isinstance(error, str):
            return ErrorEnvelope(
                code=error,
                message=response_data.get("error_description", ""),
                log_id=response_data.get("log_id", ""),
            )
        if "code" in response_data:
            return ErrorEnvelope.model_validate(response_data)
    except ValidationError as e:
        raise ResponseParseError(f"Invalid token error response: {e}") from e
    raise ResponseParseError("Token response carries neither a token nor an error")


class AuthorizationFlow(TokenEndpointService):
    """Orchestrates the PKCE authorization code flow for TikTok Login Kit.

    Handles the flow from URL generation through token issuance:
    - Authorization URL construction
    - Callback validation (CSRF state check before anything else)
    - Authorization code to access token exchange
    - Access token refresh

    The service holds no per-user state; every call takes the
    ``AuthorizationConfig`` of the attempt it belongs to.
    """

    def build_authorization_url(self, config: AuthorizationConfig) -> str:
        """Build the authorization URL for ``config``.

        Pure construction; the randomness was consumed when ``config`` was
        created.
        """
        logger.debug(f"Building authorization URL for client {config.client_key}")
        return config.build_authorization_url()

    def validate_callback(
        self, config: AuthorizationConfig, callback: AuthorizationCallback
    ) -> AuthorizationConfirmation:
        """Validate the redirect callback for ``config``.

        Returns:
            AuthorizationConfirmation: The code to exchange and granted scopes

        Raises:
            CsrfMismatchError: If the state is missing or does not match
            AuthorizationDeniedError: If the callback reports an error
            MalformedCallbackError: If the callback has neither a code nor an
                error, or has both
        """
        if not states_match(config.csrf_state, callback.state):
            raise CsrfMismatchError("Invalid CSRF state - possible CSRF attack")

        if callback.is_success():
            logger.info("Authorization callback successful - received code")
            return AuthorizationConfirmation(code=callback.code, scopes=callback.scopes)

        if callback.is_error() and callback.code is None:
            logger.warning(
                f"Authorization callback contained error: {callback.error} - "
                f"{callback.error_description}"
            )
            raise AuthorizationDeniedError(callback.error, callback.error_description)

        raise MalformedCallbackError("Invalid callback parameters")

    async def exchange_code(
        self,
        config: AuthorizationConfig,
        code: str,
        redirect_uri: str | None = None,
        code_verifier: str | None = None,
    ) -> AccessToken:
        """Exchange an authorization code for an access token.

        Args:
            config: Config of the authorization attempt
            code: Code from the validated callback
            redirect_uri: Redirect URI used for the request, defaults to
                ``config.redirect_uri``
            code_verifier: PKCE verifier, usually ``config.code_verifier``;
                omitted from the request when None

        Raises:
            TransportError: If the request, read, or parse fails
            ApiError: If the token endpoint rejects the exchange
        """
        form_data = {
            "client_key": config.client_key,
            "client_secret": config.client_secret,
            "code": code,
            "grant_type": "authorization_code",
            "redirect_uri": redirect_uri or config.redirect_uri,
        }
        if code_verifier is not None:
            form_data["code_verifier"] = code_verifier

        return await self._request_token(form_data, AccessToken)

    async def refresh_token(
        self, config: AuthorizationConfig, refresh_token: str
    ) -> AccessToken:
        """Obtain a new access token with a refresh token."""
        form_data = {
            "client_key": config.client_key,
            "client_secret": config.client_secret,
            "grant_type": "refresh_token",
            "refresh_token": refresh_token,
        }
        return await self._request_token(form_data, AccessToken)
