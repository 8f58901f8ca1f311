"""Organization and mailroom repository interfaces."""

from abc import ABC, abstractmethod

from yam.domain.model.organization import Mailroom, Organization
from yam.domain.value import MailroomId, OrganizationId


class OrganizationRepository(ABC):
    """Read access to organizations."""

    @abstractmethod
    async def find_by_id(self, organization_id: OrganizationId) -> Organization | None:
        """Find an organization by ID."""
        pass


class MailroomRepository(ABC):
    """Read access to mailrooms."""

    @abstractmethod
    async def find_by_id(self, mailroom_id: MailroomId) -> Mailroom | None:
        """Find a mailroom by ID."""
        pass
