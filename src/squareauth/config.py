"""OAuth2 client configuration for Square.

`new_config` merges caller scopes with the mandatory default scope and attaches
the Square endpoints. The resulting `OAuth2Config` builds authorization URLs,
posts the code exchange through the provider's HTTP client using Authlib's
request helpers, and drives Authlib's httpx client for token refresh.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from datetime import datetime
from typing import Any, Literal

import httpx
from authlib.integrations.base_client import OAuthError
from authlib.integrations.httpx_client import AsyncOAuth2Client
from authlib.oauth2.rfc6749 import OAuth2Token
from authlib.oauth2.rfc6749.parameters import prepare_grant_uri, prepare_token_request

from .contracts import ProviderError
from .http import http_client_with_fallback
from .models import SquareAuthBaseModel
from .scopes import DEFAULT_SCOPE

logger = logging.getLogger(__name__)

SANDBOX_AUTH_URL = "https://connect.squareupsandbox.com/oauth2/authorize"
SANDBOX_TOKEN_URL = "https://connect.squareupsandbox.com/oauth2/token"
PRODUCTION_AUTH_URL = "https://connect.squareup.com/oauth2/authorize"
PRODUCTION_TOKEN_URL = "https://connect.squareup.com/oauth2/token"

Environment = Literal["sandbox", "production"]


class Endpoint(SquareAuthBaseModel):
    """Authorization and token endpoint pair."""

    auth_url: str
    token_url: str


ENDPOINTS: dict[str, Endpoint] = {
    "sandbox": Endpoint(auth_url=SANDBOX_AUTH_URL, token_url=SANDBOX_TOKEN_URL),
    "production": Endpoint(auth_url=PRODUCTION_AUTH_URL, token_url=PRODUCTION_TOKEN_URL),
}


class OAuth2Config(SquareAuthBaseModel):
    """Client credentials, redirect URL, endpoints and scopes for one provider."""

    client_id: str
    client_secret: str
    redirect_url: str
    endpoint: Endpoint
    scopes: tuple[str, ...]

    def auth_code_url(self, state: str, **extra_params: str) -> str:
        """Authorization URL carrying client id, redirect URI, scopes and state."""
        return prepare_grant_uri(
            self.endpoint.auth_url,
            client_id=self.client_id,
            response_type="code",
            redirect_uri=self.redirect_url,
            scope=list(self.scopes),
            state=state,
            **extra_params,
        )

    def oauth_client(self, **kwargs: Any) -> AsyncOAuth2Client:
        """Create an Authlib client bound to this configuration.

        Extra keyword arguments are forwarded to Authlib (and through it to
        `httpx.AsyncClient`). No timeout is set unless the caller passes one.
        The caller owns the client and must close it.
        """
        kwargs.setdefault("timeout", None)
        client = AsyncOAuth2Client(
            client_id=self.client_id,
            client_secret=self.client_secret,
            token_endpoint_auth_method="client_secret_post",
            redirect_uri=self.redirect_url,
            token_endpoint=self.endpoint.token_url,
            **kwargs,
        )
        client.register_compliance_hook("access_token_response", normalize_token_response)
        client.register_compliance_hook("refresh_token_response", normalize_token_response)
        return client

    async def exchange(
        self, code: str, http_client: httpx.AsyncClient | None = None
    ) -> OAuth2Token:
        """Exchange an authorization code for a token.

        The request goes through `http_client`, or the shared fallback client
        when none is given.

        Raises:
            OAuthError: If Square answers with an OAuth error
            httpx.HTTPError: On transport failures and non-OAuth error responses
        """
        client = http_client_with_fallback(http_client)
        body = prepare_token_request(
            "authorization_code",
            code=code,
            redirect_uri=self.redirect_url,
            client_id=self.client_id,
            client_secret=self.client_secret,
        )
        logger.debug(
            "Exchanging authorization code",
            extra={"endpoint": "token", "context": "exchange_code"},
        )
        resp = await client.post(
            self.endpoint.token_url,
            content=body,
            headers={
                "Content-Type": "application/x-www-form-urlencoded",
                "Accept": "application/json",
            },
        )
        return parse_token_response(normalize_token_response(resp))

    def token_source(self, token: Mapping[str, Any]) -> TokenSource:
        """Token source that refreshes `token` through this configuration."""
        return TokenSource(self, token)


class TokenSource:
    """Hands out a valid access token, refreshing it when needed."""

    def __init__(self, config: OAuth2Config, token: Mapping[str, Any]):
        self._config = config
        self._token = OAuth2Token.from_dict(dict(token))

    async def token(self) -> OAuth2Token:
        current = self._token
        if current.get("access_token") and not current.is_expired():
            return current

        refresh_token = current.get("refresh_token")
        if not refresh_token:
            raise ProviderError("invalid_grant", "Token expired and refresh token is not set")

        logger.debug(
            "Refreshing access token",
            extra={"endpoint": "token", "context": "refresh_token"},
        )
        async with self._config.oauth_client() as client:
            self._token = await client.refresh_token(
                self._config.endpoint.token_url,
                refresh_token=refresh_token,
            )
        return self._token


def new_config(
    client_key: str,
    client_secret: str,
    callback_url: str,
    scopes: Sequence[str] = (),
    *,
    environment: Environment = "sandbox",
) -> OAuth2Config:
    """Build the OAuth2 configuration for a Square provider.

    The scope list always starts with MERCHANT_PROFILE_READ. Caller scopes are
    appended in order; only copies of the default scope are dropped.
    """
    merged = [DEFAULT_SCOPE]
    for scope in scopes:
        if scope != DEFAULT_SCOPE:
            merged.append(scope)

    return OAuth2Config(
        client_id=client_key,
        client_secret=client_secret,
        redirect_url=callback_url,
        endpoint=ENDPOINTS[environment],
        scopes=tuple(merged),
    )


def normalize_token_response(resp: httpx.Response) -> httpx.Response:
    """Authlib compliance hook for Square token endpoint responses.

    Square reports `expires_at` as an RFC 3339 timestamp while Authlib expects
    epoch seconds. Square error bodies do not carry the OAuth `error` field, so
    4xx responses without it are raised as HTTP errors.
    """
    try:
        payload = resp.json()
    except ValueError:
        resp.raise_for_status()
        return resp

    if not isinstance(payload, dict):
        return resp

    if resp.status_code >= 400 and "error" not in payload:
        logger.warning(
            "Square token endpoint returned an error",
            extra={"endpoint": "token", "status_code": resp.status_code},
        )
        resp.raise_for_status()

    expires_at = payload.get("expires_at")
    if not isinstance(expires_at, str):
        return resp

    try:
        parsed = datetime.fromisoformat(expires_at.replace("Z", "+00:00"))
    except ValueError:
        # Unparseable expiry means no expiry information.
        payload.pop("expires_at")
    else:
        payload["expires_at"] = int(parsed.timestamp())

    return httpx.Response(resp.status_code, json=payload, request=resp.request)


def parse_token_response(resp: httpx.Response) -> OAuth2Token:
    """Build an `OAuth2Token` from a token endpoint response, as Authlib's clients do."""
    if resp.status_code >= 500:
        resp.raise_for_status()
    payload = resp.json()
    if not isinstance(payload, dict):
        raise OAuthError(error="invalid_response", description="Token response was not an object")
    if "error" in payload:
        logger.warning(
            "Square token endpoint returned OAuth error",
            extra={
                "endpoint": "token",
                "status_code": resp.status_code,
                "provider_error": payload["error"],
            },
        )
        raise OAuthError(error=payload["error"], description=payload.get("error_description"))
    return OAuth2Token.from_dict(payload)
