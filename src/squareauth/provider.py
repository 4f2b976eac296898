"""Square OAuth provider adapter.

Implements the host's `Provider` contract on top of `OAuth2Config`. The
adapter supplies endpoints, scopes and field mapping; the OAuth2 protocol work
is done by Authlib.
"""

from __future__ import annotations

import logging

import httpx
from authlib.oauth2.rfc6749 import OAuth2Token
from pydantic import ValidationError

from .config import Environment, OAuth2Config, new_config
from .contracts import IncompleteSessionError, Provider, ProviderError, SessionTypeError
from .http import http_client_with_fallback
from .models import SquareAuthConfigModel, User
from .session import Session

logger = logging.getLogger(__name__)


class SquareProvider(Provider):
    """Square implementation of the host provider contract.

    Always construct through `SquareProvider(...)` or `from_settings`; the
    constructor merges in the default scope.
    """

    default_name = "square"

    def __init__(
        self,
        client_key: str,
        secret: str,
        callback_url: str,
        *scopes: str,
        http_client: httpx.AsyncClient | None = None,
        environment: Environment = "sandbox",
    ):
        self.client_key = client_key
        self.secret = secret
        self.callback_url = callback_url
        self.http_client = http_client
        self._provider_name = self.default_name
        self._config = new_config(
            client_key, secret, callback_url, scopes, environment=environment
        )

    @classmethod
    def from_settings(
        cls,
        settings: SquareAuthConfigModel,
        *,
        http_client: httpx.AsyncClient | None = None,
    ) -> SquareProvider:
        provider = cls(
            settings.client_id,
            settings.client_secret,
            settings.callback_url,
            *settings.scopes,
            http_client=http_client,
            environment=settings.environment,
        )
        provider.set_name(settings.name)
        return provider

    @property
    def name(self) -> str:
        return self._provider_name

    def set_name(self, name: str) -> None:
        # Needed when one provider type is registered under several names.
        self._provider_name = name

    @property
    def config(self) -> OAuth2Config:
        return self._config

    def client(self) -> httpx.AsyncClient:
        return http_client_with_fallback(self.http_client)

    def debug(self, debug: bool) -> None:
        """No-op; this provider has no debug mode."""

    def begin_auth(self, state: str) -> Session:
        """Start an attempt; the session carries the Square authorization URL."""
        session = Session(auth_url=self._config.auth_code_url(state))
        logger.debug(
            "Issued authorization URL",
            extra={"provider": self.name, "endpoint": "authorize"},
        )
        return session

    def fetch_user(self, session: object) -> User:
        """Map a completed session into a `User`.

        Square is not queried; the record is built from the session's tokens.

        Raises:
            SessionTypeError: If `session` was not produced by `begin_auth`
            IncompleteSessionError: If the code exchange has not happened yet
        """
        if not isinstance(session, Session):
            raise SessionTypeError(self.name, session)

        if not session.access_token:
            raise IncompleteSessionError(self.name)

        return User(
            provider=self.name,
            user_id=session.user_id,
            access_token=session.access_token,
            refresh_token=session.refresh_token,
            expires_at=session.expires_at,
            raw_data=dict(session.raw_data),
        )

    def unmarshal_session(self, data: str) -> Session:
        try:
            return Session.model_validate_json(data)
        except ValidationError as exc:
            raise ProviderError("invalid_session", "Stored session data was invalid") from exc

    async def refresh_token(self, refresh_token: str) -> OAuth2Token:
        """Get a new access token for `refresh_token`.

        Errors from the token endpoint propagate unchanged.
        """
        source = self._config.token_source({"refresh_token": refresh_token})
        try:
            return await source.token()
        except Exception:
            logger.warning(
                "Square token refresh failed",
                extra={"provider": self.name, "endpoint": "token", "context": "refresh_token"},
            )
            raise

    def refresh_token_available(self) -> bool:
        """Square always issues refresh tokens."""
        return True
