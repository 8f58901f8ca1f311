"""Domain model entities for Yam."""

from yam.domain.model.invitation import Invitation
from yam.domain.model.organization import Mailroom, Organization
from yam.domain.model.profile import Profile
from yam.domain.model.registration import (
    RegistrationState,
    RegistrationStatus,
    ResolvedInvitation,
)
from yam.domain.model.session import AuthSession, SessionEvent, SessionEventType

__all__ = [
    "AuthSession",
    "Invitation",
    "Mailroom",
    "Organization",
    "Profile",
    "RegistrationState",
    "RegistrationStatus",
    "ResolvedInvitation",
    "SessionEvent",
    "SessionEventType",
]
