"""Mappers for converting between database rows and domain models.

Domain models are immutable pydantic models, so rows are mapped by hand
rather than through SQLAlchemy's ORM.
"""

from datetime import datetime, timezone
from typing import Any, Dict, Optional
from uuid import UUID

from yam.domain.model import Invitation, Mailroom, Organization, Profile
from yam.domain.value import (
    Email,
    InvitationId,
    InvitationStatus,
    InvitationToken,
    MailroomId,
    OrganizationId,
    ProfileId,
    ProfileStatus,
    Slug,
    UserRole,
)


def _uuid(value: Any) -> Optional[UUID]:
    if value is None:
        return None
    return UUID(value) if isinstance(value, str) else value


def _slug(value: Optional[str]) -> Optional[Slug]:
    # Rows created before slugs existed carry blanks
    if not value or not value.strip():
        return None
    return Slug(value)


def row_to_invitation(row: Dict[str, Any]) -> Invitation:
    """Convert database row to Invitation domain model.

    Args:
        row: Database row as dict

    Returns:
        Invitation domain model
    """
    status = InvitationStatus(row["status"])
    invited_by = _uuid(row.get("invited_by"))
    return Invitation(
        id=InvitationId(_uuid(row["id"])),
        token=InvitationToken(root=row["token"]),
        email=Email(row["email"]),
        role=UserRole(row["role"]),
        organization_id=OrganizationId(_uuid(row["organization_id"])),
        mailroom_id=MailroomId(_uuid(row["mailroom_id"])),
        invited_by=ProfileId(invited_by) if invited_by else None,
        status=status,
        expires_at=row["expires_at"],
        created_at=row["created_at"],
        used_at=row.get("updated_at") if status == InvitationStatus.RESOLVED else None,
    )


def invitation_to_dict(invitation: Invitation) -> Dict[str, Any]:
    """Convert Invitation domain model to database dict.

    Only the columns redemption is allowed to change are included.

    Args:
        invitation: Invitation domain model

    Returns:
        Dict suitable for a database update
    """
    return {
        "status": invitation.status.value,
        "used": invitation.status == InvitationStatus.RESOLVED,
        "updated_at": invitation.used_at or datetime.now(timezone.utc),
    }


def row_to_profile(row: Dict[str, Any]) -> Profile:
    """Convert database row to Profile domain model."""
    organization_id = _uuid(row.get("organization_id"))
    mailroom_id = _uuid(row.get("mailroom_id"))
    return Profile(
        id=ProfileId(_uuid(row["id"])),
        role=UserRole(row["role"]),
        status=ProfileStatus(row.get("status") or ProfileStatus.INVITED.value),
        organization_id=OrganizationId(organization_id) if organization_id else None,
        mailroom_id=MailroomId(mailroom_id) if mailroom_id else None,
        email=Email(row["email"]) if row.get("email") else None,
    )


def profile_to_dict(profile: Profile) -> Dict[str, Any]:
    """Convert Profile domain model to database dict."""
    return {
        "role": profile.role.value,
        "status": profile.status.value,
        "organization_id": profile.organization_id,
        "mailroom_id": profile.mailroom_id,
        "email": profile.email.root if profile.email else None,
        "updated_at": datetime.now(timezone.utc),
    }


def row_to_organization(row: Dict[str, Any]) -> Organization:
    return Organization(
        id=OrganizationId(_uuid(row["id"])),
        name=row["name"],
        slug=_slug(row.get("slug")),
    )


def row_to_mailroom(row: Dict[str, Any]) -> Mailroom:
    return Mailroom(
        id=MailroomId(_uuid(row["id"])),
        organization_id=OrganizationId(_uuid(row["organization_id"])),
        name=row["name"],
        slug=_slug(row.get("slug")),
    )
