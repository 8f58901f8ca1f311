"""Strongly typed identifiers for Yam domain entities."""

from typing import NewType
from uuid import UUID

InvitationId = NewType("InvitationId", UUID)
# Profiles share their id with the identity provider's user id
ProfileId = NewType("ProfileId", UUID)
OrganizationId = NewType("OrganizationId", UUID)
MailroomId = NewType("MailroomId", UUID)
