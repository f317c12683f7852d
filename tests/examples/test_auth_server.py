"""End-to-end check of the example Login Kit server against a faked token endpoint."""

from urllib.parse import parse_qs, urlparse

import pytest
from starlette.testclient import TestClient

from tiktok_open_api.client import TikTokClient
from tiktok_open_api.config import ClientConfig
from tiktok_open_api.examples.auth_server import create_app

REDIRECT_URI = "http://localhost:8080/auth/callback"


class TestAuthServer:
    @pytest.fixture(autouse=True)
    def setup_app(self, fake_api):
        # Arrange
        self.api = fake_api
        client = TikTokClient(
            ClientConfig(client_key="key-1", client_secret="secret-1"),
            http_client=fake_api.client,
        )
        self.web = TestClient(create_app(client, REDIRECT_URI, max_pending=2))

    def _start(self) -> dict[str, str]:
        response = self.web.get("/oauth", follow_redirects=False)
        assert response.status_code == 307
        location = urlparse(response.headers["location"])
        return {k: v[0] for k, v in parse_qs(location.query).items()}

    def test_oauth_redirects_to_tiktok(self):
        # Act
        params = self._start()

        # Assert
        assert params["client_key"] == "key-1"
        assert params["redirect_uri"] == REDIRECT_URI
        assert params["code_challenge_method"] == "S256"

    def test_callback_exchanges_code_with_verifier(self):
        # Arrange
        params = self._start()
        self.api.respond(
            200,
            json={
                "access_token": "act.1",
                "expires_in": 86400,
                "open_id": "open-1",
                "refresh_token": "rft.1",
                "refresh_expires_in": 31536000,
                "scope": "video.publish",
                "token_type": "Bearer",
            },
        )

        # Act
        response = self.web.get(
            "/auth/callback", params={"code": "auth-code", "state": params["state"]}
        )

        # Assert
        assert response.status_code == 200
        assert "open-1" in response.text
        form = self.api.form_body()
        assert form["code"] == "auth-code"
        assert len(form["code_verifier"]) == 128

    def test_callback_with_unknown_state_is_rejected(self):
        # Arrange
        self._start()

        # Act
        response = self.web.get(
            "/auth/callback", params={"code": "auth-code", "state": "forged"}
        )

        # Assert
        assert response.status_code == 400
        assert self.api.requests == []

    def test_denied_callback_is_rejected(self):
        # Arrange
        params = self._start()

        # Act
        response = self.web.get(
            "/auth/callback",
            params={"error": "access_denied", "state": params["state"]},
        )

        # Assert
        assert response.status_code == 400
        assert "access_denied" in response.text
        assert self.api.requests == []

    def test_oldest_pending_attempt_is_dropped_past_the_limit(self):
        # Arrange
        first = self._start()
        self._start()
        third = self._start()

        # Act
        stale = self.web.get(
            "/auth/callback", params={"code": "auth-code", "state": first["state"]}
        )
        denied = self.web.get(
            "/auth/callback",
            params={"error": "access_denied", "state": third["state"]},
        )

        # Assert
        assert stale.status_code == 400
        assert "Unknown or expired state" in stale.text
        assert denied.status_code == 400
        assert "access_denied" in denied.text
        assert self.api.requests == []
