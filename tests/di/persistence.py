"""Mock persistence providers for testing."""

from dishka import Scope, provide

from yam.domain.repository import (
    InvitationRepository,
    MailroomRepository,
    OrganizationRepository,
    ProfileRepository,
)
from yam.persistence.repository.inmemory import (
    InMemoryInvitationRepository,
    InMemoryMailroomRepository,
    InMemoryOrganizationRepository,
    InMemoryProfileRepository,
)
from yam.util.di.infrastructure.persistence import PersistenceProvider


class MockPersistenceProvider(PersistenceProvider):
    """Mock persistence provider using in-memory repositories.

    Uses APP scope because domain services are APP-scoped; each test builds
    its own container, so every test still gets fresh repositories.
    """

    __is_mock__ = True

    scope = Scope.APP

    @provide
    def get_invitation_repository(self) -> InvitationRepository:
        """Provide in-memory invitation repository."""
        return InMemoryInvitationRepository()

    @provide
    def get_profile_repository(self) -> ProfileRepository:
        """Provide in-memory profile repository."""
        return InMemoryProfileRepository()

    @provide
    def get_organization_repository(self) -> OrganizationRepository:
        """Provide in-memory organization repository."""
        return InMemoryOrganizationRepository()

    @provide
    def get_mailroom_repository(self) -> MailroomRepository:
        """Provide in-memory mailroom repository."""
        return InMemoryMailroomRepository()
