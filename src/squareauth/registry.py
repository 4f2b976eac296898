"""Host-side provider registry."""

from .contracts import Provider, ProviderError


class ProviderRegistry:
    """In-memory mapping of provider names to provider instances.

    The host owns the registry and fills it at application startup. One provider
    type may be registered several times under different names (see
    `Provider.set_name`).
    """

    def __init__(self, providers: list[Provider] | None = None) -> None:
        self._providers: dict[str, Provider] = {}
        for provider in providers or []:
            self.register(provider)

    def register(self, provider: Provider) -> None:
        """Register a provider under its current name, replacing any previous one."""
        self._providers[provider.name] = provider

    def get(self, name: str) -> Provider:
        """Get a provider by name.

        Raises:
            ProviderError: If no provider is registered under `name`
        """
        try:
            return self._providers[name]
        except KeyError:
            raise ProviderError(
                "unknown_provider", f"no provider for {name} exists", status_code=404
            ) from None

    def available_providers(self) -> list[str]:
        return list(self._providers.keys())

    def clear(self) -> None:
        self._providers.clear()
