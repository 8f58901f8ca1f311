"""Activation committer.

Sets the password, then settles the bookkeeping and computes the
dashboard redirect. Only the password step can block the user; the
invitation and profile updates are best-effort once the password is set.
"""

from collections.abc import Awaitable, Callable

import logfire

from yam.domain.error import (
    BookkeepingFailedError,
    EmailMismatchError,
    PasswordUpdateFailedError,
    RedirectDataMissingError,
)
from yam.domain.model import AuthSession, ResolvedInvitation
from yam.domain.service import (
    DirectoryService,
    IdentityProvider,
    IdentityProviderError,
    InvitationService,
    ProfileService,
)


class ActivationCommitter:
    """Commits a validated redemption."""

    def __init__(
        self,
        invitation_service: InvitationService,
        profile_service: ProfileService,
        directory_service: DirectoryService,
        mark_failed_on_password_error: bool = False,
    ) -> None:
        """Initialize committer.

        Args:
            invitation_service: Invitation domain service
            profile_service: Profile domain service
            directory_service: Organization/mailroom lookups for the redirect
            mark_failed_on_password_error: Mark the invitation FAILED when the
                password cannot be set
        """
        self.invitation_service = invitation_service
        self.profile_service = profile_service
        self.directory_service = directory_service
        self.mark_failed_on_password_error = mark_failed_on_password_error

    async def commit(
        self,
        invitation: ResolvedInvitation,
        identity: AuthSession,
        identity_provider: IdentityProvider,
        password: str,
    ) -> str:
        """Activate the account.

        Args:
            invitation: Validated invitation
            identity: Current authenticated session
            identity_provider: Provider owning the session
            password: New password

        Returns:
            Dashboard path to redirect to

        Raises:
            EmailMismatchError: The identity is not the invited party
            PasswordUpdateFailedError: The provider rejected the password
            RedirectDataMissingError: The dashboard location is unknown
        """
        with logfire.span(
            "activation_committer.commit",
            invitation_id=str(invitation.invitation_id),
            user_id=str(identity.user_id),
        ):
            # Re-checked here, never assumed from the validation phase
            if not invitation.email.matches(identity.email):
                logfire.warn(
                    "Commit refused: session email does not match invitation",
                    invitation_id=str(invitation.invitation_id),
                )
                raise EmailMismatchError()

            try:
                await identity_provider.set_password(password)
            except IdentityProviderError as e:
                logfire.error("Password update failed", error=str(e))
                if self.mark_failed_on_password_error:
                    await self._best_effort(
                        "mark invitation failed",
                        lambda: self.invitation_service.fail_invitation(
                            invitation.invitation_id
                        ),
                    )
                raise PasswordUpdateFailedError(f"Password update failed: {e}") from e

            await self._best_effort(
                "resolve invitation",
                lambda: self.invitation_service.resolve_invitation(
                    invitation.invitation_id
                ),
            )
            await self._best_effort(
                "activate profile",
                lambda: self.profile_service.activate_profile(identity.user_id),
            )

            try:
                path = await self.directory_service.get_dashboard_path(
                    invitation.organization_id, invitation.mailroom_id
                )
            except Exception as e:
                logfire.error("Redirect lookup failed", error=str(e))
                raise RedirectDataMissingError() from e

            if path is None:
                logfire.error(
                    "Redirect data missing",
                    organization_id=str(invitation.organization_id),
                    mailroom_id=str(invitation.mailroom_id),
                )
                raise RedirectDataMissingError()

            logfire.info(
                "Account activated",
                invitation_id=str(invitation.invitation_id),
                redirect_path=path,
            )
            return path

    async def _best_effort(
        self, step: str, action: Callable[[], Awaitable[object]]
    ) -> BookkeepingFailedError | None:
        """Run a step whose failure must not abort activation."""
        try:
            await action()
        except Exception as e:
            error = BookkeepingFailedError(step, e)
            logfire.warn(
                "Bookkeeping step failed",
                step=step,
                code=error.code,
                error=str(e),
            )
            return error
        return None
