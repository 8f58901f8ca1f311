"""Repository interfaces for the Yam domain.

Repository interfaces are defined in the domain layer (dependency inversion).
Implementations live in the persistence layer.
"""

from yam.domain.repository.directory import MailroomRepository, OrganizationRepository
from yam.domain.repository.invitation import InvitationRepository
from yam.domain.repository.profile import ProfileRepository

__all__ = [
    "InvitationRepository",
    "MailroomRepository",
    "OrganizationRepository",
    "ProfileRepository",
]
