"""Response models shared by the registration use cases."""

import asyncio
from datetime import datetime

import logfire
from pydantic import BaseModel

from yam.application.registration import RegistrationFlow
from yam.domain.model import RegistrationState, RegistrationStatus
from yam.domain.value import UserRole

STATUS_MESSAGES: dict[RegistrationStatus, str] = {
    RegistrationStatus.CHECKING_SESSION: "Checking your session...",
    RegistrationStatus.VALIDATING_INVITE: "Validating your invitation...",
    RegistrationStatus.INVALID_INVITE: "This invitation link is not valid.",
    RegistrationStatus.READY_FOR_PASSWORD: "Choose a password to activate your account.",
    RegistrationStatus.SUBMITTING: "Activating your account...",
    RegistrationStatus.ERROR: "Something went wrong. Please try again.",
    RegistrationStatus.REDIRECTED: "Your account is active.",
}


class InvitationSummary(BaseModel):
    """What the invited person is joining."""

    email: str
    role: UserRole
    organization_name: str
    mailroom_name: str
    expires_at: datetime


class RegistrationResponse(BaseModel):
    """State of a registration flow as shown to the client.

    `action` is set for terminal states only and points back to login.
    """

    flow_id: str
    status: RegistrationStatus
    message: str
    error_code: str | None = None
    invitation: InvitationSummary | None = None
    redirect_path: str | None = None
    is_terminal: bool
    action: str | None = None

    @classmethod
    def from_state(
        cls, flow_id: str, state: RegistrationState, login_path: str
    ) -> "RegistrationResponse":
        invitation = state.resolved_invitation
        return cls(
            flow_id=flow_id,
            status=state.status,
            message=state.error_message or STATUS_MESSAGES[state.status],
            error_code=state.error_code,
            invitation=InvitationSummary(
                email=invitation.email.root,
                role=invitation.role,
                organization_name=invitation.organization_name,
                mailroom_name=invitation.mailroom_name,
                expires_at=invitation.expires_at,
            )
            if invitation
            else None,
            redirect_path=state.redirect_path,
            is_terminal=state.is_terminal,
            action=login_path
            if state.is_terminal and state.status != RegistrationStatus.REDIRECTED
            else None,
        )


async def settle(flow: RegistrationFlow, timeout: float) -> RegistrationState:
    """Wait (bounded) for a flow to leave its transient states."""
    try:
        return await flow.machine.wait_for(
            lambda state: not state.is_pending, timeout=timeout
        )
    except asyncio.TimeoutError:
        logfire.info(
            "Registration flow still pending",
            flow_id=flow.id,
            status=flow.machine.state.status.value,
        )
        return flow.machine.state
