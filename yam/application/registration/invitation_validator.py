"""Invitation validator.

Checks, in order, short-circuiting at the first failure:
1. the invitation exists for the token
2. it is still PENDING
3. it has not expired (derived from expires_at, whatever the stored status)
4. the authenticated identity's email matches the invited email

Display names are then resolved best-effort.
"""

from collections.abc import Callable
from datetime import datetime, timezone

import logfire

from yam.domain.error import (
    EmailMismatchError,
    InvitationExpiredError,
    InvitationLookupFailedError,
    InvitationNotFoundError,
    InvitationNotPendingError,
)
from yam.domain.model import AuthSession, Invitation, ResolvedInvitation
from yam.domain.service import DirectoryService, InvitationService
from yam.domain.value import InvitationToken


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class InvitationValidator:
    """Validates an invitation token against the record store."""

    def __init__(
        self,
        invitation_service: InvitationService,
        directory_service: DirectoryService,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        """Initialize validator.

        Args:
            invitation_service: Invitation domain service
            directory_service: Organization/mailroom lookups
            clock: Current time source
        """
        self.invitation_service = invitation_service
        self.directory_service = directory_service
        self.clock = clock

    async def check_invitation(self, token: InvitationToken) -> Invitation:
        """Run the checks that need no identity (lookup, status, expiry).

        Raises:
            InvitationNotFoundError: No invitation for this token
            InvitationNotPendingError: The invitation already left PENDING
            InvitationExpiredError: The invitation is past expires_at
            InvitationLookupFailedError: The record store could not be read
        """
        with logfire.span("invitation_validator.check_invitation", token=token.masked):
            try:
                invitation = await self.invitation_service.get_invitation_by_token(
                    token
                )
            except Exception as e:
                logfire.error(
                    "Invitation lookup failed", token=token.masked, error=str(e)
                )
                raise InvitationLookupFailedError() from e

            if invitation is None:
                raise InvitationNotFoundError()

            if not invitation.is_pending:
                logfire.info(
                    "Invitation not pending",
                    invitation_id=str(invitation.id),
                    status=invitation.status.value,
                )
                raise InvitationNotPendingError(invitation.status)

            if invitation.is_expired(self.clock()):
                logfire.info(
                    "Invitation expired",
                    invitation_id=str(invitation.id),
                    expires_at=invitation.expires_at.isoformat(),
                )
                raise InvitationExpiredError()

            return invitation

    async def validate(
        self, token: InvitationToken, identity: AuthSession
    ) -> ResolvedInvitation:
        """Fully validate an invitation for an authenticated identity.

        Args:
            token: Invitation token from the link
            identity: Current authenticated session

        Returns:
            The resolved invitation with display names

        Raises:
            EmailMismatchError: The identity is not the invited party
            (plus everything check_invitation raises)
        """
        with logfire.span(
            "invitation_validator.validate",
            token=token.masked,
            user_id=str(identity.user_id),
        ):
            invitation = await self.check_invitation(token)

            if not invitation.email.matches(identity.email):
                logfire.warn(
                    "Invitation email mismatch",
                    invitation_id=str(invitation.id),
                    user_id=str(identity.user_id),
                )
                raise EmailMismatchError()

            organization_name, mailroom_name = await self._display_names(invitation)

            logfire.info("Invitation validated", invitation_id=str(invitation.id))
            return ResolvedInvitation(
                invitation_id=invitation.id,
                token=invitation.token,
                email=invitation.email,
                role=invitation.role,
                organization_id=invitation.organization_id,
                mailroom_id=invitation.mailroom_id,
                organization_name=organization_name,
                mailroom_name=mailroom_name,
                expires_at=invitation.expires_at,
            )

    async def _display_names(self, invitation: Invitation) -> tuple[str, str]:
        # Names are cosmetic; never block redemption on them
        organization_name = f"Unknown Organization ({invitation.organization_id})"
        mailroom_name = f"Unknown Mailroom ({invitation.mailroom_id})"

        try:
            organization = await self.directory_service.get_organization(
                invitation.organization_id
            )
            if organization and organization.name:
                organization_name = organization.name
        except Exception as e:
            logfire.warn("Organization name lookup failed", error=str(e))

        try:
            mailroom = await self.directory_service.get_mailroom(invitation.mailroom_id)
            if mailroom and mailroom.name:
                mailroom_name = mailroom.name
        except Exception as e:
            logfire.warn("Mailroom name lookup failed", error=str(e))

        return organization_name, mailroom_name
