"""Base classes for dependency injection providers."""

from typing import ClassVar, Literal

from dishka import Provider

# Infrastructure that tests swap for in-memory versions
Component = Literal["supabase", "persistence"]


class ProviderBase(Provider):
    """Base for all DI providers.

    A mockable component declares `__mock_component__` on its base
    provider; each implementation sets `__is_mock__`. Providers without
    a component (config, domain, application) always run for real.
    """

    __mock_component__: ClassVar[Component | None] = None
    __is_mock__: ClassVar[bool] = False
