"""PostgreSQL implementations of the organization and mailroom repositories."""

from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from yam.domain.model import Mailroom, Organization
from yam.domain.repository import MailroomRepository, OrganizationRepository
from yam.domain.value import MailroomId, OrganizationId
from yam.persistence.database import transaction
from yam.persistence.mappers import row_to_mailroom, row_to_organization
from yam.persistence.tables import mailrooms_table, organizations_table


class PostgresOrganizationRepository(OrganizationRepository):
    """PostgreSQL implementation of OrganizationRepository."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self.session_factory = session_factory

    async def find_by_id(self, organization_id: OrganizationId) -> Optional[Organization]:
        stmt = select(organizations_table).where(
            organizations_table.c.id == organization_id
        )
        async with transaction(self.session_factory) as session:
            result = await session.execute(stmt)
            row = result.mappings().first()
        return row_to_organization(dict(row)) if row else None


class PostgresMailroomRepository(MailroomRepository):
    """PostgreSQL implementation of MailroomRepository."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self.session_factory = session_factory

    async def find_by_id(self, mailroom_id: MailroomId) -> Optional[Mailroom]:
        stmt = select(mailrooms_table).where(mailrooms_table.c.id == mailroom_id)
        async with transaction(self.session_factory) as session:
            result = await session.execute(stmt)
            row = result.mappings().first()
        return row_to_mailroom(dict(row)) if row else None
