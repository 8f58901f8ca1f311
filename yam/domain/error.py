"""Domain layer errors."""

from typing import ClassVar

from yam.domain.value import InvitationStatus


class DomainError(Exception):
    """Base domain error."""

    pass


class BusinessRuleViolationError(DomainError):
    """Business rule violation error."""

    pass


class NotFoundError(DomainError):
    """Raised when a requested resource is not found."""

    def __init__(self, resource: str, identifier: str):
        self.resource = resource
        self.identifier = identifier
        super().__init__(f"{resource} not found: {identifier}")


# ============================================================================
# Invitation redemption
# ============================================================================


class RegistrationError(DomainError):
    """Base error for invitation redemption.

    Attributes:
        code: Stable machine-readable identifier
        message: Concise user-facing message
        terminal: Whether the flow can only be restarted from login
    """

    code: ClassVar[str] = "registration_error"
    default_message: ClassVar[str] = "Something went wrong with your invitation."
    terminal: ClassVar[bool] = True

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class TokenMissingError(RegistrationError):
    code = "token_missing"
    default_message = "Invalid invitation link: No token found."


class MissingSessionError(RegistrationError):
    code = "missing_session"
    default_message = (
        "We could not confirm your session for this invitation. "
        "Please open the link from your invitation email again."
    )


class SessionCheckTimeoutError(MissingSessionError):
    """The session never settled within the bounded wait."""

    code = "session_timeout"
    default_message = (
        "Timed out while confirming your session. Please sign in to continue."
    )


class InvitationNotFoundError(RegistrationError):
    code = "invitation_not_found"
    default_message = "Invitation not found or already used/invalid."


class InvitationNotPendingError(RegistrationError):
    """The invitation already left PENDING."""

    code = "invitation_not_pending"

    MESSAGES: ClassVar[dict[InvitationStatus, str]] = {
        InvitationStatus.RESOLVED: "This invitation has already been used.",
        InvitationStatus.EXPIRED: "This invitation has expired.",
        InvitationStatus.CANCELLED: "This invitation has been cancelled.",
    }

    def __init__(self, status: InvitationStatus):
        self.status = status
        super().__init__(
            self.MESSAGES.get(
                status,
                f"This invitation is no longer valid (status: {status.value.lower()}).",
            )
        )


class InvitationExpiredError(RegistrationError):
    code = "invitation_expired"
    default_message = "This invitation has expired."


class EmailMismatchError(RegistrationError):
    code = "email_mismatch"
    default_message = (
        "Your current session email does not match the invited email. "
        "Please ensure you are using the correct link or try in an incognito window."
    )


class SessionEndedError(RegistrationError):
    code = "session_ended"
    default_message = "Your session ended. Please use your invitation link again."


class InvitationLookupFailedError(RegistrationError):
    """The record store could not be read while validating."""

    code = "invitation_lookup_failed"
    default_message = "Validation failed: the invitation could not be loaded."


class PasswordUpdateFailedError(RegistrationError):
    """Setting the password failed. The form can be submitted again."""

    code = "password_update_failed"
    default_message = "Password update failed. Please try again."
    terminal = False


class BookkeepingFailedError(RegistrationError):
    """A follow-up record update failed after the password was set.

    Logged only, never surfaced to the user.
    """

    code = "bookkeeping_failed"
    default_message = "Post-activation bookkeeping failed."
    terminal = False

    def __init__(self, step: str, cause: Exception):
        self.step = step
        self.cause = cause
        super().__init__(f"{step} failed: {cause}")


class RedirectDataMissingError(RegistrationError):
    """Activation succeeded but the dashboard location is unknown."""

    code = "redirect_data_missing"
    default_message = (
        "Your account is active, but we could not find your mailroom. "
        "Please contact support."
    )
