"""Shared fallback HTTP client for provider-bound requests.

Providers use an explicitly injected client when they have one. Otherwise they
fall back to the client set for the current context, and finally to a single
lazily created process-wide client.
"""

import contextvars

import httpx

# Context override, typically set by host middleware for the duration of a request
http_client_var = contextvars.ContextVar[httpx.AsyncClient | None]("http_client", default=None)

_default_client: httpx.AsyncClient | None = None


def default_http_client() -> httpx.AsyncClient:
    """Return the shared default client, creating it on first use.

    The client imposes no timeout; deadlines come from the caller.
    """
    global _default_client
    if _default_client is None or _default_client.is_closed:
        _default_client = httpx.AsyncClient(timeout=None)
    return _default_client


async def aclose_default_http_client() -> None:
    """Close the shared default client if it was created."""
    global _default_client
    if _default_client is not None:
        await _default_client.aclose()
        _default_client = None


def set_http_client(
    client: httpx.AsyncClient | None,
) -> "contextvars.Token[httpx.AsyncClient | None]":
    """Use `client` as the fallback for the current context.

    Returns:
        A token that can be passed to `reset_http_client`
    """
    return http_client_var.set(client)


def reset_http_client(token: "contextvars.Token[httpx.AsyncClient | None]") -> None:
    http_client_var.reset(token)


def http_client_with_fallback(client: httpx.AsyncClient | None) -> httpx.AsyncClient:
    if client is not None:
        return client
    context_client = http_client_var.get()
    if context_client is not None:
        return context_client
    return default_http_client()
