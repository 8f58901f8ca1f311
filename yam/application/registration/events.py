"""Events driving the registration state machine.

Every asynchronous completion carries the inputs it was computed for, so
the state machine can drop results that no longer match.
"""

from enum import Enum
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from yam.application.registration.token_resolver import TokenSource
from yam.domain.error import RegistrationError
from yam.domain.model import AuthSession, ResolvedInvitation
from yam.domain.value import InvitationToken, ProfileId


class Event(BaseModel):
    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)


class IdentityKey(Event):
    """The comparable part of a session: who, not which credential."""

    user_id: ProfileId
    email: Optional[str] = None

    @classmethod
    def of(cls, session: AuthSession) -> "IdentityKey":
        return cls(
            user_id=session.user_id,
            email=session.email.normalized if session.email else None,
        )


class ValidationInputs(Event):
    """The (token, identity) pair a validation or commit ran against."""

    token: InvitationToken
    identity: Optional[IdentityKey] = None


class IdentityChangeKind(str, Enum):
    INITIAL = "initial"
    SIGNED_IN = "signed_in"
    UPDATED = "updated"
    SIGNED_OUT = "signed_out"
    ABSENT = "absent"


class TokenResolved(Event):
    token: InvitationToken
    source: TokenSource


class TokenRejected(Event):
    error: RegistrationError


class IdentityChanged(Event):
    identity: Optional[AuthSession] = None
    kind: IdentityChangeKind


class SessionWaitExpired(Event):
    pass


class PrefetchCompleted(Event):
    """Invitation checks that need no identity finished."""

    for_token: InvitationToken
    error: Optional[RegistrationError] = None


class ValidationCompleted(Event):
    for_inputs: ValidationInputs
    invitation: Optional[ResolvedInvitation] = None
    error: Optional[RegistrationError] = None


class SubmitRequested(Event):
    password: str = Field(repr=False)


class CommitCompleted(Event):
    for_inputs: ValidationInputs
    redirect_path: Optional[str] = None
    error: Optional[Exception] = None


RegistrationEvent = Union[
    TokenResolved,
    TokenRejected,
    IdentityChanged,
    SessionWaitExpired,
    PrefetchCompleted,
    ValidationCompleted,
    SubmitRequested,
    CommitCompleted,
]
