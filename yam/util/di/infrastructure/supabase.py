"""Supabase Auth infrastructure providers."""

from dishka import Scope, provide

from yam.adapter.supabase import SupabaseAuthClient, SupabaseIdentityProviderFactory
from yam.config import Settings
from yam.domain.service import IdentityProviderFactory
from yam.util.di.base import ProviderBase
from yam.util.error import ConfigurationError
from yam.util.observability import instrument_httpx


class SupabaseProvider(ProviderBase):
    """Supabase component base."""

    __mock_component__ = "supabase"


class ProdSupabaseProvider(SupabaseProvider):
    """Production Supabase provider."""

    __is_mock__ = False

    @provide(scope=Scope.APP)
    def get_supabase_auth_client(self, settings: Settings) -> SupabaseAuthClient:
        """Provide Supabase Auth client.

        Raises:
            ConfigurationError: If the anon key is not configured in production
        """
        if (
            settings.environment == "production"
            and settings.supabase.anon_key == "CHANGE_ME_IN_PRODUCTION"
        ):
            raise ConfigurationError("SUPABASE__ANON_KEY", settings.environment)

        instrument_httpx()
        return SupabaseAuthClient(
            url=settings.supabase.url,
            anon_key=settings.supabase.anon_key,
            timeout=settings.supabase.timeout_seconds,
        )

    @provide(scope=Scope.APP)
    def get_identity_provider_factory(
        self, client: SupabaseAuthClient
    ) -> IdentityProviderFactory:
        """Provide per-flow Supabase session managers."""
        return SupabaseIdentityProviderFactory(client)
