"""Pydantic models for the Square auth adapter.

These types are used for provider configuration and the normalized user record
handed to the host application.

## Security-relevant configuration fields

- `callback_url`: the redirect URI registered in the Square developer console;
  affects redirect binding and open-redirect risk.
- `scopes`: affect what permissions are requested from Square.
- `environment`: selects sandbox or production endpoints.

Treat changes to these fields as security-sensitive and ensure they are covered by
tests and documented behavior.
"""

from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field


class SquareAuthBaseModel(BaseModel):
    """Base model for all squareauth Pydantic models.

    - extra="forbid": Rejects any fields not defined in the model
    - frozen=True: Makes instances immutable so they can be shared across requests

    Models that must be mutated in place (e.g. Session) override model_config.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)


class SquareAuthConfigModel(SquareAuthBaseModel):
    """Square OAuth provider configuration.

    Credentials come from the Square developer console. `scopes` are requested
    in addition to MERCHANT_PROFILE_READ, which is always requested.
    """

    client_id: str
    client_secret: str
    callback_url: str
    scopes: list[str] = Field(default_factory=list)
    environment: Literal["sandbox", "production"] = "sandbox"
    name: str = "square"


class User(SquareAuthBaseModel):
    """Normalized user record exposed to the host application."""

    provider: str
    user_id: str = ""
    access_token: str
    refresh_token: str = ""
    expires_at: datetime | None = None
    # Token response fields such as merchant_id and token_type
    raw_data: dict[str, Any] = Field(default_factory=dict)
