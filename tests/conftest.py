"""
Global pytest configuration and fixtures.
"""

import functools
from typing import Any
from urllib.parse import parse_qsl

import httpx
import pytest
from authlib.integrations.httpx_client import AsyncOAuth2Client

from squareauth.provider import SquareProvider

CALLBACK_URL = "https://app.example.com/auth/square/callback"

SQUARE_TOKEN_PAYLOAD = {
    "access_token": "tok_abc",
    "token_type": "bearer",
    "expires_at": "2099-01-01T00:00:00Z",
    "merchant_id": "u1",
    "refresh_token": "ref_xyz",
}


class FakeTokenEndpoint:
    """Square token endpoint served through `httpx.MockTransport`.

    Every request gets a fresh response built from `status_code` and `payload`.
    Requests are recorded for assertions.
    """

    def __init__(self, status_code: int = 200, payload: Any = None) -> None:
        self.status_code = status_code
        self.payload = dict(SQUARE_TOKEN_PAYLOAD) if payload is None else payload
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return httpx.Response(self.status_code, json=self.payload)

    def form(self, index: int = -1) -> dict[str, str]:
        return dict(parse_qsl(self.requests[index].content.decode()))


@pytest.fixture
def token_endpoint(monkeypatch: pytest.MonkeyPatch) -> FakeTokenEndpoint:
    """Route token requests to an in-process fake.

    Covers both Authlib's client (refresh) and the shared fallback client
    (code exchange for providers without an injected client).
    """
    endpoint = FakeTokenEndpoint()
    transport = httpx.MockTransport(endpoint)
    monkeypatch.setattr(
        "squareauth.config.AsyncOAuth2Client",
        functools.partial(AsyncOAuth2Client, transport=transport),
    )
    monkeypatch.setattr("squareauth.http._default_client", httpx.AsyncClient(transport=transport))
    return endpoint


@pytest.fixture
def provider() -> SquareProvider:
    return SquareProvider("cid", "secret", CALLBACK_URL)
