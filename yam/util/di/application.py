"""Application layer DI providers."""

from collections.abc import AsyncIterator

from dishka import Scope, provide

from yam.application.registration import (
    RegistrationFlowFactory,
    RegistrationFlowRegistry,
)
from yam.application.usecase.registration import (
    CloseRegistrationUseCase,
    ConfirmSignupUseCase,
    GetRegistrationUseCase,
    SignOutUseCase,
    StartRegistrationUseCase,
    SubmitPasswordUseCase,
)
from yam.config import RegistrationSettings, Settings
from yam.domain.service import (
    DirectoryService,
    IdentityProviderFactory,
    InvitationService,
    ProfileService,
)
from yam.util.di.base import ProviderBase


class ProdApplicationProvider(ProviderBase):
    """Production application provider - concrete, no mocks needed."""

    # Registration flows
    @provide(scope=Scope.APP)
    def get_flow_factory(
        self,
        settings: RegistrationSettings,
        invitation_service: InvitationService,
        profile_service: ProfileService,
        directory_service: DirectoryService,
        identity_provider_factory: IdentityProviderFactory,
    ) -> RegistrationFlowFactory:
        """Provide registration flow factory."""
        return RegistrationFlowFactory(
            settings=settings,
            invitation_service=invitation_service,
            profile_service=profile_service,
            directory_service=directory_service,
            identity_provider_factory=identity_provider_factory,
        )

    @provide(scope=Scope.APP)
    async def get_flow_registry(
        self, factory: RegistrationFlowFactory, settings: RegistrationSettings
    ) -> AsyncIterator[RegistrationFlowRegistry]:
        """Provide the process-wide flow registry.

        Every live flow is closed when the container shuts down.
        """
        registry = RegistrationFlowRegistry(
            factory=factory, ttl_seconds=settings.flow_ttl_seconds
        )
        yield registry
        registry.close_all()

    # Registration use cases
    @provide(scope=Scope.REQUEST)
    def get_start_registration_use_case(
        self, flow_registry: RegistrationFlowRegistry, settings: Settings
    ) -> StartRegistrationUseCase:
        """Provide start registration use case."""
        return StartRegistrationUseCase(flow_registry=flow_registry, settings=settings)

    @provide(scope=Scope.REQUEST)
    def get_get_registration_use_case(
        self, flow_registry: RegistrationFlowRegistry, settings: Settings
    ) -> GetRegistrationUseCase:
        """Provide get registration use case."""
        return GetRegistrationUseCase(flow_registry=flow_registry, settings=settings)

    @provide(scope=Scope.REQUEST)
    def get_submit_password_use_case(
        self, flow_registry: RegistrationFlowRegistry, settings: Settings
    ) -> SubmitPasswordUseCase:
        """Provide submit password use case."""
        return SubmitPasswordUseCase(flow_registry=flow_registry, settings=settings)

    @provide(scope=Scope.REQUEST)
    def get_close_registration_use_case(
        self, flow_registry: RegistrationFlowRegistry, settings: Settings
    ) -> CloseRegistrationUseCase:
        """Provide close registration use case."""
        return CloseRegistrationUseCase(flow_registry=flow_registry, settings=settings)

    @provide(scope=Scope.REQUEST)
    def get_sign_out_use_case(
        self, flow_registry: RegistrationFlowRegistry, settings: Settings
    ) -> SignOutUseCase:
        """Provide sign out use case."""
        return SignOutUseCase(flow_registry=flow_registry, settings=settings)

    @provide(scope=Scope.REQUEST)
    def get_confirm_signup_use_case(self, settings: Settings) -> ConfirmSignupUseCase:
        """Provide confirm signup use case."""
        return ConfirmSignupUseCase(settings=settings)
