"""In-memory organization and mailroom repositories for testing."""

from typing import Optional

from yam.domain.model.organization import Mailroom, Organization
from yam.domain.repository.directory import MailroomRepository, OrganizationRepository
from yam.domain.value import MailroomId, OrganizationId


class InMemoryOrganizationRepository(OrganizationRepository):
    """In-memory implementation of OrganizationRepository for testing."""

    def __init__(self) -> None:
        self._organizations: dict[OrganizationId, Organization] = {}

    async def find_by_id(self, organization_id: OrganizationId) -> Optional[Organization]:
        return self._organizations.get(organization_id)

    async def save(self, organization: Organization) -> Organization:
        """Store an organization (test setup only)."""
        self._organizations[organization.id] = organization
        return organization


class InMemoryMailroomRepository(MailroomRepository):
    """In-memory implementation of MailroomRepository for testing."""

    def __init__(self) -> None:
        self._mailrooms: dict[MailroomId, Mailroom] = {}

    async def find_by_id(self, mailroom_id: MailroomId) -> Optional[Mailroom]:
        return self._mailrooms.get(mailroom_id)

    async def save(self, mailroom: Mailroom) -> Mailroom:
        """Store a mailroom (test setup only)."""
        self._mailrooms[mailroom.id] = mailroom
        return mailroom
