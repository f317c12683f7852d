"""Authorization models for TikTok Login Kit (OAuth 2.0 + PKCE).

Contains the per-attempt authorization config, callback parsing, and the
token responses issued by the token endpoint.
"""

from __future__ import annotations

import time
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from enum import Enum
from urllib.parse import parse_qs, urlencode, urlparse

from pydantic import BaseModel

from tiktok_open_api.primitives.pkce import (
    CODE_CHALLENGE_METHOD,
    generate_code_challenge,
    generate_code_verifier,
    generate_csrf_state,
)

AUTHORIZE_ENDPOINT = "https://www.tiktok.com/v2/auth/authorize/"


class Scope(str, Enum):
    """Permission scopes a user can grant to the app."""

    ARTIST_CERTIFICATION_READ = "artist.certification.read"
    ARTIST_CERTIFICATION_UPDATE = "artist.certification.update"
    USER_INFO_BASIC = "user.info.basic"
    USER_INFO_PROFILE = "user.info.profile"
    USER_INFO_STATS = "user.info.stats"
    VIDEO_LIST = "video.list"
    VIDEO_UPLOAD = "video.upload"
    VIDEO_PUBLISH = "video.publish"
    RESEARCH_DATA_BASIC = "research.data.basic"


@dataclass(frozen=True)
class AuthorizationConfig:
    """Parameters for one authorization attempt.

    Use ``AuthorizationConfig.create`` so the CSRF state and PKCE pair are
    freshly generated. Keep the instance until the code exchange; the
    verifier must be sent back to prove possession of the challenge.
    """

    client_key: str
    client_secret: str = field(repr=False)
    redirect_uri: str
    scopes: frozenset[Scope]
    csrf_state: str
    code_verifier: str = field(repr=False)
    code_challenge: str
    authorize_endpoint: str = AUTHORIZE_ENDPOINT

    @classmethod
    def create(
        cls,
        client_key: str,
        client_secret: str,
        redirect_uri: str,
        scopes: Iterable[Scope | str],
        authorize_endpoint: str = AUTHORIZE_ENDPOINT,
    ) -> AuthorizationConfig:
        """Build a config with a new CSRF state and PKCE verifier/challenge."""
        code_verifier = generate_code_verifier()
        return cls(
            client_key=client_key,
            client_secret=client_secret,
            redirect_uri=redirect_uri,
            scopes=frozenset(Scope(s) for s in scopes),
            csrf_state=generate_csrf_state(),
            code_verifier=code_verifier,
            code_challenge=generate_code_challenge(code_verifier),
            authorize_endpoint=authorize_endpoint,
        )

    @property
    def scope_string(self) -> str:
        """Comma-joined scope list, sorted so the output is deterministic."""
        return ",".join(sorted(scope.value for scope in self.scopes))

    def build_authorization_url(self) -> str:
        """Build the URL the user visits to grant access."""
        params = {
            "client_key": self.client_key,
            "scope": self.scope_string,
            "response_type": "code",
            "redirect_uri": self.redirect_uri,
            "state": self.csrf_state,
            "code_challenge": self.code_challenge,
            "code_challenge_method": CODE_CHALLENGE_METHOD,
        }
        return f"{self.authorize_endpoint}?{urlencode(params)}"


@dataclass(frozen=True)
class AuthorizationCallback:
    """Query parameters TikTok appends to the redirect URI."""

    code: str | None = None
    scopes: str | None = None
    state: str | None = None
    error: str | None = None
    error_description: str | None = None

    @classmethod
    def from_params(cls, params: Mapping[str, str]) -> AuthorizationCallback:
        return cls(
            code=params.get("code"),
            scopes=params.get("scopes"),
            state=params.get("state"),
            error=params.get("error"),
            error_description=params.get("error_description"),
        )

    @classmethod
    def from_url(cls, callback_url: str) -> AuthorizationCallback:
        """Parse a full callback URL, keeping the first value of each key."""
        query_params = parse_qs(urlparse(callback_url).query)
        return cls.from_params({k: v[0] for k, v in query_params.items() if v})

    def is_success(self) -> bool:
        return self.error is None and self.code is not None

    def is_error(self) -> bool:
        return self.error is not None


@dataclass(frozen=True)
class AuthorizationConfirmation:
    """A validated callback, ready for code exchange."""

    code: str
    scopes: str | None = None


class AccessToken(BaseModel):
    """User access token issued by ``/v2/oauth/token/``."""

    access_token: str
    expires_in: int
    open_id: str
    refresh_token: str
    refresh_expires_in: int
    scope: str
    token_type: str

    @property
    def scopes(self) -> frozenset[str]:
        """Granted scopes as a set of scope strings."""
        return frozenset(s for s in self.scope.split(",") if s)

    def expires_at(self, issued_at: float | None = None) -> float:
        """Unix timestamp when the access token expires.

        Args:
            issued_at: When the token was received, defaults to now
        """
        if issued_at is None:
            issued_at = time.time()
        return issued_at + self.expires_in

    def refresh_expires_at(self, issued_at: float | None = None) -> float:
        if issued_at is None:
            issued_at = time.time()
        return issued_at + self.refresh_expires_in


class ClientAccessToken(BaseModel):
    """App-level token from the client credentials grant."""

    access_token: str
    expires_in: int
    token_type: str
