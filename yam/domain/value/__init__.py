"""Domain value objects for Yam."""

from yam.domain.value.identifiers import (
    InvitationId,
    MailroomId,
    OrganizationId,
    ProfileId,
)
from yam.domain.value.types import (
    Email,
    InvitationStatus,
    InvitationToken,
    ProfileStatus,
    Slug,
    UserRole,
)

__all__ = [
    # Identifiers
    "InvitationId",
    "ProfileId",
    "OrganizationId",
    "MailroomId",
    # Types
    "Email",
    "InvitationStatus",
    "InvitationToken",
    "ProfileStatus",
    "Slug",
    "UserRole",
]
