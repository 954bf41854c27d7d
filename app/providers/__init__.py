"""Provider registry for the show catalog adapters."""

from typing import Dict, List

from app.core.config import get_settings
from app.core.exceptions import UpstreamError
from app.providers.base import MetadataProvider


class ProviderRegistry:
    """Registry for managing metadata providers."""

    _providers: Dict[str, MetadataProvider] = {}

    @classmethod
    def register(cls, provider: MetadataProvider) -> None:
        """Register a provider instance."""
        cls._providers[provider.name] = provider

    @classmethod
    def get(cls, name: str) -> MetadataProvider | None:
        """Get a provider by name."""
        return cls._providers.get(name)

    @classmethod
    def all(cls) -> List[MetadataProvider]:
        """Get all registered providers."""
        return list(cls._providers.values())


# Convenience function for registration
def register_provider(provider: MetadataProvider) -> None:
    """Register a provider with the global registry."""
    ProviderRegistry.register(provider)


def get_metadata_provider() -> MetadataProvider:
    """FastAPI dependency returning the configured provider."""
    name = get_settings().metadata_provider
    provider = ProviderRegistry.get(name)
    if provider is None:
        raise UpstreamError(f"Metadata provider '{name}' is not registered")
    return provider
