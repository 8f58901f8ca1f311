"""Directory domain service for organizations and mailrooms."""

import logfire

from yam.domain.model.organization import Mailroom, Organization
from yam.domain.repository import MailroomRepository, OrganizationRepository
from yam.domain.value import MailroomId, OrganizationId

from .base import Service


class DirectoryService(Service):
    """Looks up where an invitation points: organization and mailroom."""

    def __init__(
        self,
        organization_repository: OrganizationRepository,
        mailroom_repository: MailroomRepository,
    ) -> None:
        """Initialize directory service.

        Args:
            organization_repository: Organization repository
            mailroom_repository: Mailroom repository
        """
        self.organization_repository = organization_repository
        self.mailroom_repository = mailroom_repository

    async def get_organization(
        self, organization_id: OrganizationId
    ) -> Organization | None:
        organization = await self.organization_repository.find_by_id(organization_id)
        if not organization:
            logfire.warn("Organization not found", organization_id=str(organization_id))
        return organization

    async def get_mailroom(self, mailroom_id: MailroomId) -> Mailroom | None:
        mailroom = await self.mailroom_repository.find_by_id(mailroom_id)
        if not mailroom:
            logfire.warn("Mailroom not found", mailroom_id=str(mailroom_id))
        return mailroom

    async def get_dashboard_path(
        self, organization_id: OrganizationId, mailroom_id: MailroomId
    ) -> str | None:
        """Build the mailroom dashboard path.

        Returns:
            `/{organization_slug}/{mailroom_slug}/`, or None when either
            slug is unknown
        """
        organization = await self.get_organization(organization_id)
        mailroom = await self.get_mailroom(mailroom_id)
        if not organization or not organization.slug:
            return None
        if not mailroom or not mailroom.slug:
            return None
        return f"/{organization.slug.root}/{mailroom.slug.root}/"
