"""Invitation repository interface."""

from abc import ABC, abstractmethod

from yam.domain.model.invitation import Invitation
from yam.domain.value import InvitationId, InvitationToken


class InvitationRepository(ABC):
    """Repository for Invitation entity.

    Invitations are created by the issuing side of the product; redemption
    only reads them and updates their status.
    """

    @abstractmethod
    async def find_by_id(self, invitation_id: InvitationId) -> Invitation | None:
        """Find an invitation by ID.

        Args:
            invitation_id: The invitation's unique identifier

        Returns:
            The invitation if found, None otherwise
        """
        pass

    @abstractmethod
    async def find_by_token(self, token: InvitationToken) -> Invitation | None:
        """Find an invitation by token.

        Used when a user opens an invitation link.

        Args:
            token: The invitation token

        Returns:
            The invitation if found, None otherwise
        """
        pass

    @abstractmethod
    async def save(self, invitation: Invitation) -> Invitation:
        """Persist an invitation leaving PENDING.

        The write only applies while the stored invitation is still
        PENDING, so concurrent redemptions settle it exactly once.

        Args:
            invitation: The invitation to save

        Returns:
            The saved invitation

        Raises:
            BusinessRuleViolationError: If the stored invitation already left PENDING
        """
        pass
