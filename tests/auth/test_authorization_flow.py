"""Tests for the Login Kit authorization flow.

Covers callback validation ordering, code exchange, and token refresh,
including the error shapes the token endpoint returns.
"""

import httpx
import pytest

from tiktok_open_api.models.auth import (
    AuthorizationCallback,
    AuthorizationConfig,
    Scope,
)
from tiktok_open_api.models.errors import (
    AccessTokenInvalidError,
    AuthorizationDeniedError,
    CsrfMismatchError,
    InvalidParamsError,
    MalformedCallbackError,
    RequestFailedError,
    ResponseParseError,
    UnknownApiError,
)
from tiktok_open_api.services.auth import AuthorizationFlow

TOKEN_RESPONSE = {
    "access_token": "act.example12345",
    "expires_in": 86400,
    "open_id": "open-id-1",
    "refresh_token": "rft.example12345",
    "refresh_expires_in": 31536000,
    "scope": "user.info.basic,video.publish",
    "token_type": "Bearer",
}


def make_config() -> AuthorizationConfig:
    return AuthorizationConfig.create(
        client_key="client-key-123",
        client_secret="secret-456",
        redirect_uri="https://myapp.com/auth/callback",
        scopes=[Scope.USER_INFO_BASIC, Scope.VIDEO_PUBLISH],
    )


class TestValidateCallback:
    """Callback validation checks the CSRF state before anything else."""

    @pytest.fixture(autouse=True)
    def setup_flow(self, fake_api):
        # Arrange
        self.flow = AuthorizationFlow(http_client=fake_api.client)
        self.config = make_config()

    def test_matching_state_with_code_returns_confirmation(self):
        # Arrange
        callback = AuthorizationCallback(
            code="auth-code", scopes="user.info.basic", state=self.config.csrf_state
        )

        # Act
        confirmation = self.flow.validate_callback(self.config, callback)

        # Assert
        assert confirmation.code == "auth-code"
        assert confirmation.scopes == "user.info.basic"

    def test_mismatched_state_with_code_is_rejected(self):
        callback = AuthorizationCallback(code="auth-code", state="attacker-state")

        with pytest.raises(CsrfMismatchError):
            self.flow.validate_callback(self.config, callback)

    def test_missing_state_is_rejected(self):
        callback = AuthorizationCallback(code="auth-code")

        with pytest.raises(CsrfMismatchError):
            self.flow.validate_callback(self.config, callback)

    def test_mismatched_state_wins_over_reported_error(self):
        callback = AuthorizationCallback(error="access_denied", state="other")

        with pytest.raises(CsrfMismatchError):
            self.flow.validate_callback(self.config, callback)

    def test_access_denied_raises_denied_error(self):
        # Arrange
        callback = AuthorizationCallback(
            error="access_denied",
            error_description="User denied access",
            state=self.config.csrf_state,
        )

        # Act & Assert
        with pytest.raises(AuthorizationDeniedError) as exc_info:
            self.flow.validate_callback(self.config, callback)

        assert exc_info.value.error == "access_denied"
        assert exc_info.value.description == "User denied access"

    def test_callback_without_code_or_error_is_malformed(self):
        callback = AuthorizationCallback(state=self.config.csrf_state)

        with pytest.raises(MalformedCallbackError):
            self.flow.validate_callback(self.config, callback)

    def test_callback_with_code_and_error_is_malformed(self):
        callback = AuthorizationCallback(
            code="auth-code", error="server_error", state=self.config.csrf_state
        )

        with pytest.raises(MalformedCallbackError):
            self.flow.validate_callback(self.config, callback)


class TestExchangeCode:
    @pytest.fixture(autouse=True)
    def setup_flow(self, fake_api):
        # Arrange
        self.api = fake_api
        self.flow = AuthorizationFlow(http_client=fake_api.client)
        self.config = make_config()

    async def test_successful_exchange_sends_form_with_verifier(self):
        # Arrange
        self.api.respond(200, json=TOKEN_RESPONSE)

        # Act
        token = await self.flow.exchange_code(
            self.config, "auth-code", code_verifier=self.config.code_verifier
        )

        # Assert
        assert token.access_token == "act.example12345"
        assert token.open_id == "open-id-1"
        assert token.refresh_expires_in == 31536000

        request = self.api.last_request
        assert request.method == "POST"
        assert str(request.url) == "https://open.tiktokapis.com/v2/oauth/token/"
        assert request.headers["Content-Type"] == "application/x-www-form-urlencoded"
        assert self.api.form_body() == {
            "client_key": "client-key-123",
            "client_secret": "secret-456",
            "code": "auth-code",
            "grant_type": "authorization_code",
            "redirect_uri": "https://myapp.com/auth/callback",
            "code_verifier": self.config.code_verifier,
        }

    async def test_verifier_is_omitted_when_not_given(self):
        # Arrange
        self.api.respond(200, json=TOKEN_RESPONSE)

        # Act
        await self.flow.exchange_code(
            self.config, "auth-code", redirect_uri="https://other.app/cb"
        )

        # Assert
        form = self.api.form_body()
        assert "code_verifier" not in form
        assert form["redirect_uri"] == "https://other.app/cb"

    async def test_oauth_style_error_maps_to_taxonomy(self):
        # Arrange
        self.api.respond(
            400,
            json={
                "error": "invalid_params",
                "error_description": "Authorization code is expired.",
                "log_id": "20230101-abc",
            },
        )

        # Act & Assert
        with pytest.raises(InvalidParamsError) as exc_info:
            await self.flow.exchange_code(self.config, "expired-code")

        assert exc_info.value.log_id == "20230101-abc"
        assert exc_info.value.message == "Authorization code is expired."

    async def test_unrecognized_oauth_error_is_unknown(self):
        # Arrange
        self.api.respond(
            200, json={"error": "invalid_grant", "error_description": "bad code"}
        )

        # Act & Assert
        with pytest.raises(UnknownApiError) as exc_info:
            await self.flow.exchange_code(self.config, "bad")

        assert "invalid_grant" in str(exc_info.value)

    async def test_envelope_style_error_is_mapped(self):
        # Arrange
        self.api.respond_error(401, "access_token_invalid", log_id="X")

        # Act & Assert
        with pytest.raises(AccessTokenInvalidError) as exc_info:
            await self.flow.exchange_code(self.config, "auth-code")

        assert exc_info.value.log_id == "X"

    async def test_success_body_missing_token_fields_is_parse_error(self):
        self.api.respond(200, json={"access_token": "act.only"})

        with pytest.raises(ResponseParseError):
            await self.flow.exchange_code(self.config, "auth-code")

    async def test_body_without_token_or_error_is_parse_error(self):
        self.api.respond(200, json={"message": "hello"})

        with pytest.raises(ResponseParseError):
            await self.flow.exchange_code(self.config, "auth-code")

    async def test_non_json_body_is_parse_error(self):
        self.api.respond(502, content=b"<html>Bad Gateway</html>")

        with pytest.raises(ResponseParseError):
            await self.flow.exchange_code(self.config, "auth-code")

    async def test_connection_failure_is_request_error(self):
        self.api.fail_with(httpx.ConnectError("Connection refused"))

        with pytest.raises(RequestFailedError):
            await self.flow.exchange_code(self.config, "auth-code")


class TestRefreshToken:
    @pytest.fixture(autouse=True)
    def setup_flow(self, fake_api):
        self.api = fake_api
        self.flow = AuthorizationFlow(http_client=fake_api.client)
        self.config = make_config()

    async def test_refresh_sends_refresh_grant(self):
        # Arrange
        self.api.respond(200, json={**TOKEN_RESPONSE, "access_token": "act.new"})

        # Act
        token = await self.flow.refresh_token(self.config, "rft.example12345")

        # Assert
        assert token.access_token == "act.new"
        assert self.api.form_body() == {
            "client_key": "client-key-123",
            "client_secret": "secret-456",
            "grant_type": "refresh_token",
            "refresh_token": "rft.example12345",
        }

    async def test_refresh_failure_raises(self):
        self.api.respond_error(400, "invalid_params", message="refresh token expired")

        with pytest.raises(InvalidParamsError):
            await self.flow.refresh_token(self.config, "rft.stale")


class TestBuildAuthorizationUrl:
    def test_delegates_to_config(self, fake_api):
        # Arrange
        flow = AuthorizationFlow(http_client=fake_api.client)
        config = make_config()

        # Act & Assert
        assert flow.build_authorization_url(config) == config.build_authorization_url()
