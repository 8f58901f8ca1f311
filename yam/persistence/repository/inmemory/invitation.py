"""In-memory invitation repository for testing."""

from typing import Optional

from yam.domain.error import BusinessRuleViolationError
from yam.domain.model.invitation import Invitation
from yam.domain.repository.invitation import InvitationRepository
from yam.domain.value import InvitationId, InvitationStatus, InvitationToken


class InMemoryInvitationRepository(InvitationRepository):
    """In-memory implementation of InvitationRepository for testing.

    Unknown invitations are added (test setup); known ones are only
    updated while still PENDING, like the conditional UPDATE in Postgres.
    """

    def __init__(self) -> None:
        self._invitations: list[Invitation] = []

    async def find_by_id(self, invitation_id: InvitationId) -> Optional[Invitation]:
        """Find an invitation by ID."""
        for invitation in self._invitations:
            if invitation.id == invitation_id:
                return invitation
        return None

    async def find_by_token(self, token: InvitationToken) -> Optional[Invitation]:
        """Find an invitation by its token."""
        for invitation in self._invitations:
            if invitation.token == token:
                return invitation
        return None

    async def save(self, invitation: Invitation) -> Invitation:
        """Save an invitation (create, or update while PENDING)."""
        for i, existing in enumerate(self._invitations):
            if existing.id == invitation.id:
                if existing.status != InvitationStatus.PENDING:
                    raise BusinessRuleViolationError(
                        f"Invitation {invitation.id} is already {existing.status.value}"
                    )
                self._invitations[i] = invitation
                return invitation

        self._invitations.append(invitation)
        return invitation
