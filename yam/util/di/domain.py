"""Domain layer DI providers."""

from dishka import Scope, provide

from yam.domain.repository import (
    InvitationRepository,
    MailroomRepository,
    OrganizationRepository,
    ProfileRepository,
)
from yam.domain.service import DirectoryService, InvitationService, ProfileService
from yam.util.di.base import ProviderBase


class ProdDomainProvider(ProviderBase):
    """Production domain services provider - concrete, no mocks needed.

    Domain services are APP-scoped: registration flows outlive the request
    that started them, and repositories open their own short transactions.
    """

    scope = Scope.APP

    @provide
    def get_invitation_service(
        self, invitation_repository: InvitationRepository
    ) -> InvitationService:
        """Provide invitation domain service."""
        return InvitationService(invitation_repository=invitation_repository)

    @provide
    def get_profile_service(self, profile_repository: ProfileRepository) -> ProfileService:
        """Provide profile domain service."""
        return ProfileService(profile_repository=profile_repository)

    @provide
    def get_directory_service(
        self,
        organization_repository: OrganizationRepository,
        mailroom_repository: MailroomRepository,
    ) -> DirectoryService:
        """Provide organization/mailroom lookup service."""
        return DirectoryService(
            organization_repository=organization_repository,
            mailroom_repository=mailroom_repository,
        )
