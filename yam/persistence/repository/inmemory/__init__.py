"""In-memory repository implementations for testing."""

from .directory import InMemoryMailroomRepository, InMemoryOrganizationRepository
from .invitation import InMemoryInvitationRepository
from .profile import InMemoryProfileRepository

__all__ = [
    "InMemoryInvitationRepository",
    "InMemoryMailroomRepository",
    "InMemoryOrganizationRepository",
    "InMemoryProfileRepository",
]
