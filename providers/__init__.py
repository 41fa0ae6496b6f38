"""Contact database provider registry.

Provider classes are registered by name and instantiated on first use, so
importing this package reads no credentials.

To add a new provider:
1. Create providers/yourapi.py with a class inheriting BaseProvider
2. Add it to _PROVIDER_CLASSES below
"""

from providers.base import BaseProvider
from providers.tripolis import TripolisProvider

DEFAULT_PROVIDER = TripolisProvider.name

_PROVIDER_CLASSES = {cls.name: cls for cls in (TripolisProvider,)}
_instances = {}


def get_provider(name: str):
    """Get the shared provider instance for a name, or None if unknown."""
    if name not in _PROVIDER_CLASSES:
        return None
    if name not in _instances:
        _instances[name] = _PROVIDER_CLASSES[name]()
    return _instances[name]


def get_configured_providers():
    """Get the providers that have credentials configured."""
    providers = (get_provider(name) for name in _PROVIDER_CLASSES)
    return [p for p in providers if p.is_configured]


def resolve_provider(provider=None) -> BaseProvider:
    """Turn a provider instance, name or None into a provider instance.

    None picks the first configured provider, falling back to DEFAULT_PROVIDER.
    Raises: ValueError for an unknown provider name.
    """
    if isinstance(provider, BaseProvider):
        return provider
    if provider is None:
        configured = get_configured_providers()
        return configured[0] if configured else get_provider(DEFAULT_PROVIDER)
    resolved = get_provider(provider)
    if resolved is None:
        raise ValueError(f"Unknown provider {provider}")
    return resolved
