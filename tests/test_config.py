"""Tests for the OAuth2 config builder and token source."""

from urllib.parse import parse_qs, urlsplit

import httpx
import pytest
from authlib.integrations.base_client import OAuthError

from squareauth import scopes
from squareauth.config import (
    PRODUCTION_AUTH_URL,
    PRODUCTION_TOKEN_URL,
    SANDBOX_AUTH_URL,
    SANDBOX_TOKEN_URL,
    new_config,
)
from squareauth.contracts import ProviderError

from conftest import FakeTokenEndpoint

CALLBACK_URL = "https://app.example.com/auth/square/callback"


class TestScopeMerging:
    def test_no_extra_scopes_yields_default_only(self) -> None:
        config = new_config("cid", "secret", CALLBACK_URL)
        assert config.scopes == (scopes.MERCHANT_PROFILE_READ,)

    def test_default_scope_comes_first(self) -> None:
        config = new_config(
            "cid", "secret", CALLBACK_URL, [scopes.ITEMS_READ, scopes.ORDERS_WRITE]
        )
        assert config.scopes == (
            scopes.MERCHANT_PROFILE_READ,
            scopes.ITEMS_READ,
            scopes.ORDERS_WRITE,
        )

    def test_default_scope_is_not_duplicated(self) -> None:
        config = new_config(
            "cid",
            "secret",
            CALLBACK_URL,
            [scopes.PAYMENTS_READ, scopes.MERCHANT_PROFILE_READ, scopes.CUSTOMERS_READ],
        )
        assert config.scopes == (
            scopes.MERCHANT_PROFILE_READ,
            scopes.PAYMENTS_READ,
            scopes.CUSTOMERS_READ,
        )
        assert config.scopes.count(scopes.MERCHANT_PROFILE_READ) == 1

    def test_repeated_non_default_scope_is_kept_twice(self) -> None:
        # Current behavior: only the default scope is deduplicated.
        config = new_config("cid", "secret", CALLBACK_URL, [scopes.ITEMS_READ, scopes.ITEMS_READ])
        assert config.scopes == (
            scopes.MERCHANT_PROFILE_READ,
            scopes.ITEMS_READ,
            scopes.ITEMS_READ,
        )


class TestEndpoints:
    def test_sandbox_is_the_default_environment(self) -> None:
        config = new_config("cid", "secret", CALLBACK_URL)
        assert config.endpoint.auth_url == SANDBOX_AUTH_URL
        assert config.endpoint.token_url == SANDBOX_TOKEN_URL

    def test_production_environment(self) -> None:
        config = new_config("cid", "secret", CALLBACK_URL, environment="production")
        assert config.endpoint.auth_url == PRODUCTION_AUTH_URL
        assert config.endpoint.token_url == PRODUCTION_TOKEN_URL

    def test_credentials_and_redirect_are_stored(self) -> None:
        config = new_config("cid", "secret", CALLBACK_URL)
        assert config.client_id == "cid"
        assert config.client_secret == "secret"
        assert config.redirect_url == CALLBACK_URL


def test_auth_code_url_includes_required_params() -> None:
    config = new_config("cid", "secret", CALLBACK_URL, [scopes.ITEMS_READ])
    url = config.auth_code_url("abc", session="false")

    parts = urlsplit(url)
    assert f"{parts.scheme}://{parts.netloc}{parts.path}" == SANDBOX_AUTH_URL
    query = parse_qs(parts.query)
    assert query["client_id"] == ["cid"]
    assert query["redirect_uri"] == [CALLBACK_URL]
    assert query["response_type"] == ["code"]
    assert query["scope"] == ["MERCHANT_PROFILE_READ ITEMS_READ"]
    assert query["state"] == ["abc"]
    assert query["session"] == ["false"]


@pytest.mark.asyncio
async def test_exchange_posts_code_with_client_credentials(token_endpoint) -> None:
    config = new_config("cid", "secret", CALLBACK_URL)
    token = await config.exchange("code-1")

    assert token["access_token"] == "tok_abc"
    assert token["merchant_id"] == "u1"
    assert str(token_endpoint.requests[0].url) == SANDBOX_TOKEN_URL
    form = token_endpoint.form()
    assert form["grant_type"] == "authorization_code"
    assert form["code"] == "code-1"
    assert form["redirect_uri"] == CALLBACK_URL
    assert form["client_id"] == "cid"
    assert form["client_secret"] == "secret"


@pytest.mark.asyncio
async def test_exchange_converts_square_expiry_to_epoch(token_endpoint) -> None:
    config = new_config("cid", "secret", CALLBACK_URL)
    token = await config.exchange("code-1")
    # 2099-01-01T00:00:00Z
    assert token["expires_at"] == 4070908800


@pytest.mark.asyncio
async def test_exchange_oauth_error_propagates(token_endpoint) -> None:
    token_endpoint.status_code = 400
    token_endpoint.payload = {"error": "invalid_grant", "error_description": "bad code"}
    config = new_config("cid", "secret", CALLBACK_URL)

    with pytest.raises(OAuthError) as exc:
        await config.exchange("code-1")
    assert exc.value.error == "invalid_grant"


@pytest.mark.asyncio
async def test_exchange_uses_given_client(token_endpoint) -> None:
    own = FakeTokenEndpoint(payload={"access_token": "tok_own"})
    config = new_config("cid", "secret", CALLBACK_URL)

    async with httpx.AsyncClient(transport=httpx.MockTransport(own)) as client:
        token = await config.exchange("code-1", client)

    assert token["access_token"] == "tok_own"
    assert len(own.requests) == 1
    assert own.form()["code"] == "code-1"
    assert token_endpoint.requests == []


@pytest.mark.asyncio
async def test_exchange_square_error_body_raises_http_error(token_endpoint) -> None:
    token_endpoint.status_code = 401
    token_endpoint.payload = {"message": "Not Authorized", "type": "service.not_authorized"}
    config = new_config("cid", "secret", CALLBACK_URL)

    with pytest.raises(httpx.HTTPStatusError):
        await config.exchange("code-1")


@pytest.mark.asyncio
async def test_exchange_non_object_response_is_rejected(token_endpoint) -> None:
    token_endpoint.payload = ["tok_abc"]
    config = new_config("cid", "secret", CALLBACK_URL)

    with pytest.raises(OAuthError) as exc:
        await config.exchange("code-1")
    assert exc.value.error == "invalid_response"


class TestOAuthClient:
    def test_no_timeout_by_default(self) -> None:
        client = new_config("cid", "secret", CALLBACK_URL).oauth_client()
        assert client.timeout.connect is None
        assert client.timeout.read is None

    def test_caller_timeout_is_kept(self) -> None:
        client = new_config("cid", "secret", CALLBACK_URL).oauth_client(timeout=3.0)
        assert client.timeout.read == 3.0


class TestTokenSource:
    @pytest.mark.asyncio
    async def test_valid_token_is_returned_without_refresh(self, token_endpoint) -> None:
        config = new_config("cid", "secret", CALLBACK_URL)
        source = config.token_source({"access_token": "live", "refresh_token": "r"})

        token = await source.token()

        assert token["access_token"] == "live"
        assert token_endpoint.requests == []

    @pytest.mark.asyncio
    async def test_refresh_token_only_triggers_refresh(self, token_endpoint) -> None:
        config = new_config("cid", "secret", CALLBACK_URL)
        source = config.token_source({"refresh_token": "ref_xyz"})

        token = await source.token()

        assert token["access_token"] == "tok_abc"
        form = token_endpoint.form()
        assert form["grant_type"] == "refresh_token"
        assert form["refresh_token"] == "ref_xyz"
        assert "scope" not in form

    @pytest.mark.asyncio
    async def test_refreshed_token_is_reused(self, token_endpoint) -> None:
        config = new_config("cid", "secret", CALLBACK_URL)
        source = config.token_source({"refresh_token": "ref_xyz"})

        await source.token()
        await source.token()

        assert len(token_endpoint.requests) == 1

    @pytest.mark.asyncio
    async def test_missing_refresh_token_raises(self, token_endpoint) -> None:
        config = new_config("cid", "secret", CALLBACK_URL)
        source = config.token_source({})

        with pytest.raises(ProviderError) as exc:
            await source.token()
        assert exc.value.error == "invalid_grant"
        assert token_endpoint.requests == []
