"""Configuration providers."""

from dishka import Scope, provide

from yam.config import RegistrationSettings, Settings
from yam.util.di.base import ProviderBase


class ProdConfigProvider(ProviderBase):
    """Settings from the environment and `.env`, read once per container."""

    scope = Scope.APP

    @provide
    def provide_settings(self) -> Settings:
        return Settings()

    @provide
    def provide_registration_settings(self, settings: Settings) -> RegistrationSettings:
        """Registration flows only see their own section."""
        return settings.registration
