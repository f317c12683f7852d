"""
Local web server demonstrating the TikTok Login Kit PKCE flow.

Visit http://localhost:8080/oauth to be redirected to TikTok. After you grant
access, TikTok redirects to /auth/callback, where the code is exchanged for an
access token.

You'll need TIKTOK_CLIENT_KEY and TIKTOK_CLIENT_SECRET set (a .env file works),
and TIKTOK_REDIRECT_URI registered for your app.
"""

import logging
import os
from collections import OrderedDict
from contextlib import asynccontextmanager

import uvicorn
from dotenv import load_dotenv
from starlette.applications import Starlette
from starlette.requests import Request
from starlette.responses import PlainTextResponse, RedirectResponse, Response
from starlette.routing import Route

from tiktok_open_api.client import TikTokClient
from tiktok_open_api.models.auth import (
    AuthorizationCallback,
    AuthorizationConfig,
    Scope,
)
from tiktok_open_api.models.errors import ApiError, AuthorizationError, TransportError

logger = logging.getLogger(__name__)

SCOPES = [
    Scope.USER_INFO_BASIC,
    Scope.USER_INFO_PROFILE,
    Scope.USER_INFO_STATS,
    Scope.VIDEO_LIST,
    Scope.VIDEO_UPLOAD,
    Scope.VIDEO_PUBLISH,
]

# Oldest unfinished attempts are dropped beyond this many.
MAX_PENDING_AUTHORIZATIONS = 100


def create_app(
    client: TikTokClient,
    redirect_uri: str,
    max_pending: int = MAX_PENDING_AUTHORIZATIONS,
) -> Starlette:
    # Configs of in-flight attempts, keyed by CSRF state, oldest first.
    pending: OrderedDict[str, AuthorizationConfig] = OrderedDict()

    @asynccontextmanager
    async def lifespan(app: Starlette):
        yield
        await client.close()

    async def oauth(request: Request) -> Response:
        config = client.new_authorization(redirect_uri, SCOPES)
        pending[config.csrf_state] = config
        while len(pending) > max_pending:
            pending.popitem(last=False)
        return RedirectResponse(client.auth.build_authorization_url(config))

    async def callback(request: Request) -> Response:
        auth_callback = AuthorizationCallback.from_params(request.query_params)
        config = pending.pop(auth_callback.state or "", None)
        if config is None:
            return PlainTextResponse("Unknown or expired state", status_code=400)

        try:
            confirmation = client.auth.validate_callback(config, auth_callback)
            token = await client.auth.exchange_code(
                config, confirmation.code, code_verifier=config.code_verifier
            )
        except AuthorizationError as e:
            return PlainTextResponse(str(e), status_code=400)
        except (ApiError, TransportError) as e:
            logger.error(f"Failed to obtain access token: {e}")
            return PlainTextResponse(
                f"Failed to obtain access token: {e}", status_code=502
            )

        # Store the token securely in a real application.
        return PlainTextResponse(
            f"Authorized open_id {token.open_id} with scopes {token.scope}"
        )

    return Starlette(
        routes=[
            Route("/oauth", oauth, methods=["GET"]),
            Route("/auth/callback", callback, methods=["GET"]),
        ],
        lifespan=lifespan,
    )


def main() -> None:
    load_dotenv()
    logging.basicConfig(level=logging.INFO)

    redirect_uri = os.getenv(
        "TIKTOK_REDIRECT_URI", "http://localhost:8080/auth/callback"
    )
    app = create_app(TikTokClient.from_env(), redirect_uri)
    uvicorn.run(app, host="127.0.0.1", port=8080, log_level="info")


if __name__ == "__main__":
    main()
