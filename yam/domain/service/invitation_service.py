"""Invitation domain service."""

from datetime import datetime, timezone

import logfire

from yam.domain.error import NotFoundError
from yam.domain.model.invitation import Invitation
from yam.domain.repository import InvitationRepository
from yam.domain.value import InvitationId, InvitationToken

from .base import Service


class InvitationService(Service):
    """Domain service for reading and settling invitations."""

    def __init__(self, invitation_repository: InvitationRepository) -> None:
        """Initialize invitation service.

        Args:
            invitation_repository: Invitation repository
        """
        self.invitation_repository = invitation_repository

    async def get_invitation_by_token(
        self, token: InvitationToken
    ) -> Invitation | None:
        """Get invitation by token.

        Args:
            token: Invitation token

        Returns:
            Invitation if found, None otherwise
        """
        with logfire.span(
            "invitation_service.get_invitation_by_token", token=token.masked
        ):
            invitation = await self.invitation_repository.find_by_token(token)
            if invitation:
                logfire.info(
                    "Invitation found",
                    invitation_id=str(invitation.id),
                    status=invitation.status.value,
                )
            else:
                logfire.warn("Invitation not found", token=token.masked)
            return invitation

    async def resolve_invitation(
        self, invitation_id: InvitationId, now: datetime | None = None
    ) -> Invitation:
        """Mark an invitation as redeemed.

        Args:
            invitation_id: ID of the invitation
            now: Redemption time (defaults to the current time)

        Returns:
            Updated invitation

        Raises:
            NotFoundError: If the invitation does not exist
            BusinessRuleViolationError: If the invitation is no longer pending
        """
        with logfire.span(
            "invitation_service.resolve_invitation", invitation_id=str(invitation_id)
        ):
            invitation = await self._get(invitation_id)
            resolved = invitation.resolve(now or datetime.now(timezone.utc))
            saved = await self.invitation_repository.save(resolved)
            logfire.info("Invitation resolved", invitation_id=str(invitation_id))
            return saved

    async def fail_invitation(self, invitation_id: InvitationId) -> Invitation:
        """Mark an invitation as failed.

        Raises:
            NotFoundError: If the invitation does not exist
            BusinessRuleViolationError: If the invitation is no longer pending
        """
        with logfire.span(
            "invitation_service.fail_invitation", invitation_id=str(invitation_id)
        ):
            invitation = await self._get(invitation_id)
            saved = await self.invitation_repository.save(invitation.fail())
            logfire.info("Invitation marked failed", invitation_id=str(invitation_id))
            return saved

    async def _get(self, invitation_id: InvitationId) -> Invitation:
        invitation = await self.invitation_repository.find_by_id(invitation_id)
        if not invitation:
            logfire.error("Invitation not found", invitation_id=str(invitation_id))
            raise NotFoundError("Invitation", str(invitation_id))
        return invitation
