"""Square OAuth2 provider adapter.

Lets a host web application delegate user authentication to Square using the
authorization code flow. The OAuth2 protocol work is done by Authlib; this
package supplies Square's endpoints, scopes and the mapping into a normalized
`User` record.

## Quick Example

```python
from squareauth import SquareProvider, scopes

provider = SquareProvider(
    "client-id",
    "client-secret",
    "https://app.example.com/auth/square/callback",
    scopes.ITEMS_READ,
    scopes.ORDERS_READ,
)

# Start route: redirect the browser
session = provider.begin_auth(state)
redirect_to(session.get_auth_url())

# Callback route: exchange the code, then read the user
await session.authorize(provider, request.query_params)
user = provider.fetch_user(session)
```
"""

from . import scopes
from .config import ENDPOINTS, Endpoint, OAuth2Config, TokenSource, new_config
from .contracts import (
    AuthSession,
    IncompleteSessionError,
    Provider,
    ProviderError,
    SessionTypeError,
)
from .http import (
    aclose_default_http_client,
    default_http_client,
    http_client_with_fallback,
    reset_http_client,
    set_http_client,
)
from .models import SquareAuthConfigModel, User
from .provider import SquareProvider
from .registry import ProviderRegistry
from .session import Session
from .settings import load_provider_config

__all__ = [
    # Scope catalog
    "scopes",
    # Configuration
    "ENDPOINTS",
    "Endpoint",
    "OAuth2Config",
    "SquareAuthConfigModel",
    "TokenSource",
    "load_provider_config",
    "new_config",
    # Contracts
    "AuthSession",
    "IncompleteSessionError",
    "Provider",
    "ProviderError",
    "SessionTypeError",
    # Core classes
    "ProviderRegistry",
    "Session",
    "SquareProvider",
    "User",
    # HTTP client fallback
    "aclose_default_http_client",
    "default_http_client",
    "http_client_with_fallback",
    "reset_http_client",
    "set_http_client",
]
