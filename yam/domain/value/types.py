"""Domain value objects for Yam.

Value objects are immutable and defined by their values, not identity.
"""

import re
from enum import Enum

from pydantic import field_validator

from yam.domain.value.common import RootValueObject


class InvitationStatus(str, Enum):
    """Lifecycle status of an invitation.

    PENDING is the only non-terminal status.
    """

    PENDING = "PENDING"
    RESOLVED = "RESOLVED"
    FAILED = "FAILED"
    EXPIRED = "EXPIRED"
    CANCELLED = "CANCELLED"


class ProfileStatus(str, Enum):
    """Status of a user profile. REMOVED is a permanent sink."""

    INVITED = "INVITED"
    ACTIVE = "ACTIVE"
    REMOVED = "REMOVED"


class UserRole(str, Enum):
    """Roles a profile can hold within an organization."""

    USER = "user"
    MANAGER = "manager"
    ADMIN = "admin"
    SUPER_ADMIN = "super-admin"


class InvitationToken(RootValueObject[str]):
    """Opaque invitation token carried in invitation links."""

    @field_validator("root")
    @classmethod
    def validate_token_format(cls, v: str) -> str:
        """Validate token is not empty."""
        if len(v) < 1 or len(v) > 2048:
            raise ValueError("Token must be 1-2048 characters")
        return v

    @property
    def masked(self) -> str:
        """Token prefix safe for logs."""
        return self.root[:8] + "..."


class Email(RootValueObject[str]):
    """Email address.

    Stored as given; comparisons ignore case and surrounding whitespace.
    """

    @field_validator("root")
    @classmethod
    def validate_email_format(cls, v: str) -> str:
        """Validate the address has a local part and a domain."""
        v = v.strip()
        if "@" not in v or v.startswith("@") or v.endswith("@"):
            raise ValueError("Email must contain a local part and a domain")
        return v

    @property
    def normalized(self) -> str:
        return self.root.casefold()

    def matches(self, other: "Email | str | None") -> bool:
        """Check whether two addresses refer to the same mailbox."""
        if other is None:
            return False
        other_value = other.root if isinstance(other, Email) else other
        return self.normalized == other_value.strip().casefold()


class Slug(RootValueObject[str]):
    """URL path segment identifying an organization or mailroom.

    Examples: 'tufts', 'carmichael-hall'
    """

    @field_validator("root")
    @classmethod
    def validate_slug_format(cls, v: str) -> str:
        """Validate the slug is a single non-empty path segment."""
        if not re.match(r"^[^\s/?#]{1,100}$", v):
            raise ValueError(
                "Slug must be 1-100 characters without whitespace, '/', '?' or '#'"
            )
        return v
