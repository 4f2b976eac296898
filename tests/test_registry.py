import pytest

from squareauth.contracts import ProviderError
from squareauth.provider import SquareProvider
from squareauth.registry import ProviderRegistry

CALLBACK_URL = "https://app.example.com/auth/square/callback"


def test_register_and_get_by_name() -> None:
    provider = SquareProvider("cid", "secret", CALLBACK_URL)
    registry = ProviderRegistry([provider])

    assert registry.get("square") is provider
    assert registry.available_providers() == ["square"]


def test_same_type_under_several_names() -> None:
    us = SquareProvider("cid-us", "secret", CALLBACK_URL)
    us.set_name("square-us")
    eu = SquareProvider("cid-eu", "secret", CALLBACK_URL)
    eu.set_name("square-eu")

    registry = ProviderRegistry()
    registry.register(us)
    registry.register(eu)

    assert registry.get("square-us") is us
    assert registry.get("square-eu") is eu


def test_unknown_provider_raises() -> None:
    registry = ProviderRegistry()
    with pytest.raises(ProviderError) as exc:
        registry.get("square")
    assert exc.value.error == "unknown_provider"
    assert exc.value.status_code == 404


def test_clear() -> None:
    registry = ProviderRegistry([SquareProvider("cid", "secret", CALLBACK_URL)])
    registry.clear()
    assert registry.available_providers() == []
