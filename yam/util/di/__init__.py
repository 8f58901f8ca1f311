"""Dependency injection module.

Every provider base listed in PROVIDERS ends up in the container. Bases
with subclasses are mockable components: production containers pick the
subclass with `__is_mock__ = False`, test containers may pick the mock.
"""

from typing import Type

from yam.util.di.application import ProdApplicationProvider
from yam.util.di.base import Component, ProviderBase
from yam.util.di.core import ProdConfigProvider
from yam.util.di.domain import ProdDomainProvider
from yam.util.di.infrastructure import (
    PersistenceProvider,
    ProdPersistenceProvider,
    ProdSupabaseProvider,
    SupabaseProvider,
)

PROVIDERS: list[Type[ProviderBase]] = [
    ProdConfigProvider,
    ProdDomainProvider,
    ProdApplicationProvider,
    # Mockable
    SupabaseProvider,
    PersistenceProvider,
]


def get_provider(base: Type[ProviderBase], use_mock: bool = False) -> Type[ProviderBase]:
    """Resolve a provider base to the class to instantiate.

    Raises:
        ValueError: If a mockable component lacks the requested implementation
    """
    implementations = base.__subclasses__()
    if not implementations:
        return base

    for impl in implementations:
        if impl.__is_mock__ == use_mock:
            return impl

    kind = "mock" if use_mock else "production"
    raise ValueError(f"No {kind} implementation for {base.__mock_component__}")


__all__ = [
    "Component",
    "PROVIDERS",
    "PersistenceProvider",
    "ProdApplicationProvider",
    "ProdConfigProvider",
    "ProdDomainProvider",
    "ProdPersistenceProvider",
    "ProdSupabaseProvider",
    "ProviderBase",
    "SupabaseProvider",
    "get_provider",
]
