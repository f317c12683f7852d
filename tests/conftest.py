from __future__ import annotations

import json
from typing import Any
from urllib.parse import parse_qs

import httpx
import pytest


class FakeTikTokApi:
    """Records outgoing requests and replays queued responses in order."""

    def __init__(self):
        self.requests: list[httpx.Request] = []
        self._responses: list[httpx.Response | Exception] = []
        self.client = httpx.AsyncClient(transport=httpx.MockTransport(self._handle))

    def _handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        response = self._responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response

    def respond(self, status_code: int = 200, **kwargs: Any) -> None:
        self._responses.append(httpx.Response(status_code, **kwargs))

    def respond_ok(self, data: dict[str, Any] | None = None) -> None:
        self.respond(
            200,
            json={
                "data": data or {},
                "error": {"code": "ok", "message": "", "log_id": "log-ok"},
            },
        )

    def respond_error(
        self, status_code: int, code: str, message: str = "", log_id: str = "log-err"
    ) -> None:
        self.respond(
            status_code,
            json={"error": {"code": code, "message": message, "log_id": log_id}},
        )

    def fail_with(self, exc: Exception) -> None:
        self._responses.append(exc)

    @property
    def last_request(self) -> httpx.Request:
        return self.requests[-1]

    def json_body(self, index: int = -1) -> Any:
        return json.loads(self.requests[index].content)

    def form_body(self, index: int = -1) -> dict[str, str]:
        parsed = parse_qs(self.requests[index].content.decode())
        return {k: v[0] for k, v in parsed.items()}


@pytest.fixture
def fake_api() -> FakeTikTokApi:
    return FakeTikTokApi()
