"""PostgreSQL implementation of Profile repository."""

from typing import Optional

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from yam.domain.model import Profile
from yam.domain.repository import ProfileRepository
from yam.domain.value import ProfileId
from yam.persistence.database import transaction
from yam.persistence.mappers import profile_to_dict, row_to_profile
from yam.persistence.tables import profiles_table


class PostgresProfileRepository(ProfileRepository):
    """PostgreSQL implementation of ProfileRepository."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self.session_factory = session_factory

    async def find_by_id(self, profile_id: ProfileId) -> Optional[Profile]:
        """Find a profile by ID."""
        stmt = select(profiles_table).where(profiles_table.c.id == profile_id)
        async with transaction(self.session_factory) as session:
            result = await session.execute(stmt)
            row = result.mappings().first()
        return row_to_profile(dict(row)) if row else None

    async def save(self, profile: Profile) -> Profile:
        """Persist a profile's status change.

        Profiles are created by the invitation flow that issued them, so
        only updates are supported.

        Raises:
            LookupError: If the profile row does not exist
        """
        stmt = (
            update(profiles_table)
            .where(profiles_table.c.id == profile.id)
            .values(**profile_to_dict(profile))
        )
        async with transaction(self.session_factory) as session:
            result = await session.execute(stmt)
            if result.rowcount == 0:
                raise LookupError(f"Profile {profile.id} does not exist")
        return profile
