"""Contracts and shared error types for the Square auth adapter."""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    import httpx
    from authlib.oauth2.rfc6749 import OAuth2Token

    from .models import User


class ProviderError(Exception):
    """Standardized provider error with HTTP-style status information."""

    def __init__(self, error: str, description: str | None = None, status_code: int = 400):
        super().__init__(description or error)
        self.error = error
        self.description = description
        self.status_code = status_code


class IncompleteSessionError(ProviderError):
    """Raised when user data is requested before the code exchange has happened."""

    def __init__(self, provider_name: str):
        super().__init__(
            "incomplete_session",
            f"{provider_name} cannot get user information without access token",
            status_code=400,
        )
        self.provider_name = provider_name


class SessionTypeError(ProviderError, TypeError):
    """Raised when a provider is handed a session it did not create."""

    def __init__(self, provider_name: str, session: object):
        super().__init__(
            "invalid_session",
            f"{provider_name} expected a squareauth Session, got {type(session).__name__}",
            status_code=500,
        )
        self.provider_name = provider_name


@runtime_checkable
class AuthSession(Protocol):
    """Per-attempt session carrier produced by `Provider.begin_auth`."""

    def get_auth_url(self) -> str:
        """Return the authorization URL issued for this attempt."""

    async def authorize(self, provider: Provider, params: Mapping[str, str]) -> str:
        """Complete the code exchange and return the access token."""

    def marshal(self) -> str:
        """Serialize the session so the host can persist it between requests."""


@runtime_checkable
class Provider(Protocol):
    """Interface the host expects from every identity provider adapter."""

    @property
    def name(self) -> str:
        """Name the provider is registered under."""

    def set_name(self, name: str) -> None:
        """Change the registration name (one type may be registered several times)."""

    def begin_auth(self, state: str) -> AuthSession:
        """Start an authentication attempt for the given state nonce."""

    def fetch_user(self, session: Any) -> User:
        """Map a completed session into a normalized user record."""

    def unmarshal_session(self, data: str) -> AuthSession:
        """Rebuild a session from `AuthSession.marshal` output."""

    def client(self) -> httpx.AsyncClient:
        """HTTP client for provider-bound requests."""

    def debug(self, debug: bool) -> None:
        """Toggle provider debug mode."""

    async def refresh_token(self, refresh_token: str) -> OAuth2Token:
        """Obtain a new access token from a refresh token."""

    def refresh_token_available(self) -> bool:
        """Whether the provider issues refresh tokens."""


__all__ = [
    "AuthSession",
    "IncompleteSessionError",
    "Provider",
    "ProviderError",
    "SessionTypeError",
]
