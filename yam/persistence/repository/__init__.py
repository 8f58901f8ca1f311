"""PostgreSQL repository implementations."""

from yam.persistence.repository.directory import (
    PostgresMailroomRepository,
    PostgresOrganizationRepository,
)
from yam.persistence.repository.invitation import PostgresInvitationRepository
from yam.persistence.repository.profile import PostgresProfileRepository

__all__ = [
    "PostgresInvitationRepository",
    "PostgresMailroomRepository",
    "PostgresOrganizationRepository",
    "PostgresProfileRepository",
]
