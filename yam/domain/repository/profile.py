"""Profile repository interface."""

from abc import ABC, abstractmethod

from yam.domain.model.profile import Profile
from yam.domain.value import ProfileId


class ProfileRepository(ABC):
    """Repository for Profile entity."""

    @abstractmethod
    async def find_by_id(self, profile_id: ProfileId) -> Profile | None:
        """Find a profile by ID.

        Args:
            profile_id: Profile ID (the identity provider's user id)

        Returns:
            The profile if found, None otherwise
        """
        pass

    @abstractmethod
    async def save(self, profile: Profile) -> Profile:
        """Persist changes to an existing profile.

        Args:
            profile: The profile to save

        Returns:
            The saved profile

        Raises:
            LookupError: If the profile does not exist
        """
        pass
