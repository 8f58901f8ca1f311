"""Registration flow state.

The state of one redemption attempt. It is rebuilt from scratch for every
flow and never persisted or partially restored.
"""

from datetime import datetime
from enum import Enum
from typing import Optional

from yam.domain.model.common import DomainModel
from yam.domain.model.session import AuthSession
from yam.domain.value import (
    Email,
    InvitationId,
    InvitationToken,
    MailroomId,
    OrganizationId,
    UserRole,
)


class RegistrationStatus(str, Enum):
    """Status of a registration flow.

    checking_session -> validating_invite -> invalid_invite | ready_for_password
    ready_for_password -> submitting -> ready_for_password | error | redirected
    """

    CHECKING_SESSION = "checking_session"
    VALIDATING_INVITE = "validating_invite"
    INVALID_INVITE = "invalid_invite"
    READY_FOR_PASSWORD = "ready_for_password"
    SUBMITTING = "submitting"
    ERROR = "error"
    REDIRECTED = "redirected"


class ResolvedInvitation(DomainModel):
    """A fully validated invitation with display context."""

    invitation_id: InvitationId
    token: InvitationToken
    email: Email
    role: UserRole
    organization_id: OrganizationId
    mailroom_id: MailroomId
    organization_name: str
    mailroom_name: str
    expires_at: datetime


class RegistrationState(DomainModel):
    """Single authoritative state of a registration flow."""

    status: RegistrationStatus = RegistrationStatus.CHECKING_SESSION
    resolved_invitation: Optional[ResolvedInvitation] = None
    resolved_identity: Optional[AuthSession] = None
    error_message: Optional[str] = None
    error_code: Optional[str] = None
    redirect_path: Optional[str] = None

    @property
    def is_pending(self) -> bool:
        """Whether the flow is still working without user input."""
        return self.status in (
            RegistrationStatus.CHECKING_SESSION,
            RegistrationStatus.VALIDATING_INVITE,
            RegistrationStatus.SUBMITTING,
        )

    @property
    def is_terminal(self) -> bool:
        """Whether the flow can only be left by starting over.

        An error is recoverable while a resolved invitation exists.
        """
        if self.status in (
            RegistrationStatus.INVALID_INVITE,
            RegistrationStatus.REDIRECTED,
        ):
            return True
        if self.status == RegistrationStatus.ERROR:
            return self.resolved_invitation is None
        return False
