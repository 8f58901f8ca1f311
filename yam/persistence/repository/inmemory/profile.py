"""In-memory profile repository for testing."""

from typing import Optional

from yam.domain.model.profile import Profile
from yam.domain.repository.profile import ProfileRepository
from yam.domain.value import ProfileId


class InMemoryProfileRepository(ProfileRepository):
    """In-memory implementation of ProfileRepository for testing."""

    def __init__(self) -> None:
        self._profiles: dict[ProfileId, Profile] = {}

    async def find_by_id(self, profile_id: ProfileId) -> Optional[Profile]:
        return self._profiles.get(profile_id)

    async def save(self, profile: Profile) -> Profile:
        # Unknown ids are stored so tests can seed profiles
        self._profiles[profile.id] = profile
        return profile
