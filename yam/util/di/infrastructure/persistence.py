"""Persistence infrastructure providers."""

from collections.abc import AsyncIterator

from dishka import Scope, provide
import logfire
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from yam.config import Settings
from yam.domain.repository import (
    InvitationRepository,
    MailroomRepository,
    OrganizationRepository,
    ProfileRepository,
)
from yam.persistence.database import create_engine, create_session_factory
from yam.persistence.repository import (
    PostgresInvitationRepository,
    PostgresMailroomRepository,
    PostgresOrganizationRepository,
    PostgresProfileRepository,
)
from yam.util.di.base import ProviderBase
from yam.util.observability import instrument_sqlalchemy


class PersistenceProvider(ProviderBase):
    """Persistence component base."""

    __mock_component__ = "persistence"


class ProdPersistenceProvider(PersistenceProvider):
    """Production persistence provider using PostgreSQL.

    Repositories are APP-scoped and open one short transaction per
    operation, since registration flows outlive the request that
    started them.
    """

    __is_mock__ = False

    scope = Scope.APP

    @provide
    async def get_engine(self, settings: Settings) -> AsyncIterator[AsyncEngine]:
        """Provide database engine, disposed on shutdown."""
        engine = create_engine(settings)
        instrument_sqlalchemy(engine)
        yield engine
        await engine.dispose()
        logfire.info("Database engine disposed")

    @provide
    def get_session_factory(
        self, engine: AsyncEngine
    ) -> async_sessionmaker[AsyncSession]:
        """Provide session factory."""
        return create_session_factory(engine)

    @provide
    def get_invitation_repository(
        self, session_factory: async_sessionmaker[AsyncSession]
    ) -> InvitationRepository:
        """Provide Invitation repository."""
        return PostgresInvitationRepository(session_factory)

    @provide
    def get_profile_repository(
        self, session_factory: async_sessionmaker[AsyncSession]
    ) -> ProfileRepository:
        """Provide Profile repository."""
        return PostgresProfileRepository(session_factory)

    @provide
    def get_organization_repository(
        self, session_factory: async_sessionmaker[AsyncSession]
    ) -> OrganizationRepository:
        """Provide Organization repository."""
        return PostgresOrganizationRepository(session_factory)

    @provide
    def get_mailroom_repository(
        self, session_factory: async_sessionmaker[AsyncSession]
    ) -> MailroomRepository:
        """Provide Mailroom repository."""
        return PostgresMailroomRepository(session_factory)
