"""Test configuration and fixtures."""

from datetime import datetime, timedelta, timezone
from uuid import uuid4

import logfire

from yam.domain.model import AuthSession, Invitation, Mailroom, Organization, Profile
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

# Spans and logs stay local during tests
logfire.configure(send_to_logfire=False, console=False)


def make_invitation(
    token: str = "invite-token-123",
    email: str = "alice@example.com",
    status: InvitationStatus = InvitationStatus.PENDING,
    expires_in: timedelta = timedelta(days=7),
    organization_id: OrganizationId | None = None,
    mailroom_id: MailroomId | None = None,
    role: UserRole = UserRole.USER,
) -> Invitation:
    """Build an invitation; negative `expires_in` gives an expired one."""
    return Invitation(
        id=InvitationId(uuid4()),
        token=InvitationToken(root=token),
        email=Email(email),
        role=role,
        organization_id=organization_id or OrganizationId(uuid4()),
        mailroom_id=mailroom_id or MailroomId(uuid4()),
        status=status,
        expires_at=datetime.now(timezone.utc) + expires_in,
    )


def make_session(
    email: str | None = "alice@example.com",
    user_id: ProfileId | None = None,
    access_token: str = "access-token-abc",
) -> AuthSession:
    return AuthSession(
        user_id=user_id or ProfileId(uuid4()),
        email=Email(email) if email else None,
        access_token=access_token,
    )


def make_profile(
    profile_id: ProfileId,
    status: ProfileStatus = ProfileStatus.INVITED,
) -> Profile:
    return Profile(id=profile_id, status=status)


def make_organization(
    name: str = "Tufts University", slug: str | None = "tufts"
) -> Organization:
    return Organization(
        id=OrganizationId(uuid4()),
        name=name,
        slug=Slug(slug) if slug else None,
    )


def make_mailroom(
    organization_id: OrganizationId,
    name: str = "Carmichael Hall",
    slug: str | None = "carmichael",
) -> Mailroom:
    return Mailroom(
        id=MailroomId(uuid4()),
        organization_id=organization_id,
        name=name,
        slug=Slug(slug) if slug else None,
    )
