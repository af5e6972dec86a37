"""Build storage backends from provider configuration."""

from objectstorage.config import ProviderConfig
from objectstorage.errors import ConfigError
from objectstorage.storage import LocalStorage, ObjectStorage, SpacesStorage


def get_storage(provider: ProviderConfig) -> ObjectStorage:
    """Get storage backend based on provider configuration."""
    if not provider.enabled:
        raise ConfigError(f"Provider '{provider.name}' is disabled")
    provider.validate()
    if provider.type == "spaces":
        return SpacesStorage(provider.spaces_config(), provider.spaces_options())
    else:
        return LocalStorage(base_path=provider.base_path)
