"""Profile entity.

A profile holds the role and mailroom assignment of an identity-provider
user. Profiles start INVITED and become ACTIVE through redemption.
"""

from typing import Optional

from yam.domain.error import BusinessRuleViolationError
from yam.domain.model.common import DomainModel
from yam.domain.value import (
    Email,
    MailroomId,
    OrganizationId,
    ProfileId,
    ProfileStatus,
    UserRole,
)


class Profile(DomainModel):
    """Profile entity.

    Business rules:
    - REMOVED is permanent; a removed profile is never reactivated
    """

    id: ProfileId
    role: UserRole = UserRole.USER
    status: ProfileStatus = ProfileStatus.INVITED
    organization_id: Optional[OrganizationId] = None
    mailroom_id: Optional[MailroomId] = None
    email: Optional[Email] = None

    def activate(self) -> "Profile":
        """Return the ACTIVE version of this profile.

        Raises:
            BusinessRuleViolationError: If the profile was removed
        """
        if self.status == ProfileStatus.REMOVED:
            raise BusinessRuleViolationError(
                f"Profile {self.id} was removed and cannot be activated"
            )
        if self.status == ProfileStatus.ACTIVE:
            return self
        return self.model_copy(update={"status": ProfileStatus.ACTIVE})
