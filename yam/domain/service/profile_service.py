"""Profile domain service."""

import logfire

from yam.domain.error import NotFoundError
from yam.domain.model.profile import Profile
from yam.domain.repository import ProfileRepository
from yam.domain.value import ProfileId

from .base import Service


class ProfileService(Service):
    """Domain service for profile operations."""

    def __init__(self, profile_repository: ProfileRepository) -> None:
        """Initialize profile service.

        Args:
            profile_repository: Profile repository
        """
        self.profile_repository = profile_repository

    async def get_by_id(self, profile_id: ProfileId) -> Profile:
        """Get profile by ID.

        Raises:
            NotFoundError: If the profile does not exist
        """
        profile = await self.profile_repository.find_by_id(profile_id)
        if not profile:
            raise NotFoundError("Profile", str(profile_id))
        return profile

    async def activate_profile(self, profile_id: ProfileId) -> Profile:
        """Move a profile to ACTIVE.

        Args:
            profile_id: Profile to activate

        Returns:
            The active profile

        Raises:
            NotFoundError: If the profile does not exist
            BusinessRuleViolationError: If the profile was removed
        """
        with logfire.span(
            "profile_service.activate_profile", profile_id=str(profile_id)
        ):
            profile = await self.get_by_id(profile_id)
            active = profile.activate()
            if active is profile:
                logfire.info("Profile already active", profile_id=str(profile_id))
                return profile

            saved = await self.profile_repository.save(active)
            logfire.info("Profile activated", profile_id=str(profile_id))
            return saved
