"""Per-attempt Square authentication session."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ConfigDict, Field

from .contracts import ProviderError

if TYPE_CHECKING:
    from .contracts import Provider

logger = logging.getLogger(__name__)


class Session(BaseModel):
    """Authorization URL and, after the code exchange, the issued tokens.

    Token fields stay empty until `authorize` completes. A session is used for
    one authentication attempt only.
    """

    # Mutated in place by authorize()
    model_config = ConfigDict(extra="forbid", frozen=False)

    auth_url: str = ""
    access_token: str = ""
    refresh_token: str = ""
    expires_at: datetime | None = None
    user_id: str = ""
    # Token response fields other than the tokens themselves
    raw_data: dict[str, Any] = Field(default_factory=dict)

    def get_auth_url(self) -> str:
        if not self.auth_url:
            raise ProviderError("missing_auth_url", "An auth_url has not been set")
        return self.auth_url

    async def authorize(self, provider: Provider, params: Mapping[str, str]) -> str:
        """Exchange the callback's authorization code for tokens.

        The token request goes through `provider.client()`.

        Args:
            provider: The SquareProvider that issued this session
            params: Query parameters of the callback request

        Returns:
            The new access token

        Raises:
            ProviderError: If the callback carries no code or `provider` is not a
                SquareProvider
            OAuthError: If Square rejects the exchange (propagated unchanged)
        """
        from .provider import SquareProvider

        if not isinstance(provider, SquareProvider):
            raise ProviderError(
                "invalid_provider",
                f"Square session cannot be authorized by {type(provider).__name__}",
                status_code=500,
            )

        code = params.get("code")
        if not code:
            raise ProviderError("invalid_request", "Callback is missing the authorization code")

        token = await provider.config.exchange(code, provider.client())

        self.access_token = token.get("access_token") or ""
        self.refresh_token = token.get("refresh_token") or ""
        self.user_id = token.get("merchant_id") or ""
        self.raw_data = {
            key: value
            for key, value in token.items()
            if key not in ("access_token", "refresh_token")
        }
        expires_at = token.get("expires_at")
        self.expires_at = (
            datetime.fromtimestamp(expires_at, tz=timezone.utc) if expires_at else None
        )

        logger.debug(
            "Authorization code exchanged",
            extra={"provider": provider.name, "has_refresh_token": bool(self.refresh_token)},
        )
        return self.access_token

    def marshal(self) -> str:
        return self.model_dump_json()

    def __str__(self) -> str:
        return self.marshal()
