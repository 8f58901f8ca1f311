"""Invitation entity.

An invitation grants one email address the right to activate an account
with a specific role in an organization's mailroom. Invitations are issued
elsewhere; this service only redeems them.
"""

from datetime import datetime, timezone
from typing import Optional

from pydantic import Field

from yam.domain.error import BusinessRuleViolationError
from yam.domain.model.common import DomainModel
from yam.domain.value import (
    Email,
    InvitationId,
    InvitationStatus,
    InvitationToken,
    MailroomId,
    OrganizationId,
    ProfileId,
    UserRole,
)


def _utc(value: datetime) -> datetime:
    # Naive timestamps from the store are UTC
    return value if value.tzinfo else value.replace(tzinfo=timezone.utc)


class Invitation(DomainModel):
    """Invitation entity.

    Business rules:
    - Status only ever leaves PENDING, exactly once
    - Expiry is derived from expires_at, independently of the stored status
    - Invitations are never deleted by redemption
    """

    id: InvitationId
    token: InvitationToken
    email: Email
    role: UserRole = UserRole.USER
    organization_id: OrganizationId
    mailroom_id: MailroomId
    invited_by: Optional[ProfileId] = None
    status: InvitationStatus = InvitationStatus.PENDING
    expires_at: datetime
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    used_at: Optional[datetime] = None

    @property
    def is_pending(self) -> bool:
        return self.status == InvitationStatus.PENDING

    def is_expired(self, now: datetime | None = None) -> bool:
        """Check whether the invitation is past its expiry time."""
        now = _utc(now) if now else datetime.now(timezone.utc)
        return now > _utc(self.expires_at)

    def resolve(self, now: datetime | None = None) -> "Invitation":
        """Mark the invitation as redeemed."""
        return self._leave_pending(
            InvitationStatus.RESOLVED,
            used_at=now or datetime.now(timezone.utc),
        )

    def fail(self) -> "Invitation":
        return self._leave_pending(InvitationStatus.FAILED)

    def expire(self) -> "Invitation":
        return self._leave_pending(InvitationStatus.EXPIRED)

    def cancel(self) -> "Invitation":
        return self._leave_pending(InvitationStatus.CANCELLED)

    def _leave_pending(self, status: InvitationStatus, **changes) -> "Invitation":
        if not self.is_pending:
            raise BusinessRuleViolationError(
                f"Invitation {self.id} is {self.status.value}; cannot move to {status.value}"
            )
        return self.model_copy(update={"status": status, **changes})
