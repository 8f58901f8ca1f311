"""Authentication session as observed from the identity provider.

Sessions are owned by the provider. They live only as long as a
registration flow and are never persisted.
"""

from enum import Enum
from typing import Optional

from pydantic import Field

from yam.domain.model.common import DomainModel
from yam.domain.value import Email, ProfileId


class AuthSession(DomainModel):
    """The authenticated principal."""

    user_id: ProfileId
    email: Optional[Email] = None
    access_token: str = Field(repr=False)

    def same_identity(self, other: "AuthSession | None") -> bool:
        """Compare principals, ignoring credential refreshes."""
        if other is None:
            return False
        if self.user_id != other.user_id:
            return False
        if self.email is None or other.email is None:
            return self.email is other.email
        return self.email.matches(other.email)


class SessionEventType(str, Enum):
    """Session change notifications pushed by the identity provider."""

    INITIAL_SESSION = "INITIAL_SESSION"
    SIGNED_IN = "SIGNED_IN"
    SIGNED_OUT = "SIGNED_OUT"
    USER_UPDATED = "USER_UPDATED"
    TOKEN_REFRESHED = "TOKEN_REFRESHED"


class SessionEvent(DomainModel):
    type: SessionEventType
    session: Optional[AuthSession] = None
