"""Session managers implementing the identity provider port.

One session manager observes one principal for the lifetime of a
registration flow. The Supabase manager derives its session from the
access token carried by the invitation link (or the caller's bearer
token); the mock manager is fully in-memory and deterministic.
"""

import asyncio
from typing import Any
from uuid import UUID

import logfire

from yam.adapter.supabase.auth import SupabaseAuthClient, SupabaseAuthError
from yam.domain.model.session import AuthSession, SessionEvent, SessionEventType
from yam.domain.service.identity_provider import (
    IdentityProvider,
    IdentityProviderError,
    IdentityProviderFactory,
)
from yam.domain.value import Email, ProfileId


def user_to_session(user: dict[str, Any], access_token: str) -> AuthSession:
    """Build an AuthSession from a Supabase user object.

    Raises:
        SupabaseAuthError: If the user object lacks a valid id or email
    """
    try:
        email = user.get("email")
        return AuthSession(
            user_id=ProfileId(UUID(str(user["id"]))),
            email=Email(email) if email else None,
            access_token=access_token,
        )
    except (KeyError, TypeError, ValueError) as e:
        # pydantic.ValidationError is a ValueError
        raise SupabaseAuthError(f"Malformed user payload: {e}") from e


class SupabaseSessionManager(IdentityProvider):
    """Identity provider backed by Supabase Auth.

    The session is looked up once and cached; concurrent callers share
    the same lookup.
    """

    def __init__(self, client: SupabaseAuthClient, access_token: str | None) -> None:
        """Initialize session manager.

        Args:
            client: Supabase Auth client
            access_token: Credential establishing the session, if any
        """
        super().__init__()
        self.client = client
        self._access_token = access_token
        self._session: AuthSession | None = None
        self._loaded = False
        self._lock = asyncio.Lock()

    async def get_session(self) -> AuthSession | None:
        async with self._lock:
            if not self._loaded:
                self._session = await self._load_session()
                self._loaded = True
            return self._session

    async def _load_session(self) -> AuthSession | None:
        if not self._access_token:
            return None
        try:
            user = await self.client.get_user(self._access_token)
        except SupabaseAuthError as e:
            if e.is_unauthorized:
                logfire.info("Supabase session rejected", status_code=e.status_code)
                return None
            raise
        return user_to_session(user, self._access_token)

    async def set_password(self, password: str) -> AuthSession:
        session = await self.get_session()
        if session is None:
            raise SupabaseAuthError("Auth session missing!", status_code=401)

        user = await self.client.update_password(session.access_token, password)
        updated = user_to_session(user, session.access_token)
        self._session = updated
        self._emit(SessionEvent(type=SessionEventType.USER_UPDATED, session=updated))
        return updated

    async def sign_out(self) -> None:
        session = self._session
        self._session = None
        self._loaded = True
        try:
            if session is not None:
                await self.client.sign_out(session.access_token)
        finally:
            self._emit(SessionEvent(type=SessionEventType.SIGNED_OUT))


class MockSessionManager(IdentityProvider):
    """In-memory identity provider for tests and local development.

    Args:
        session: Session present from the start, if any
        stall: Never answer the initial session lookup
        password_error: Raised by every set_password call when set
    """

    def __init__(
        self,
        session: AuthSession | None = None,
        *,
        stall: bool = False,
        password_error: IdentityProviderError | None = None,
    ) -> None:
        super().__init__()
        self.session = session
        self.stall = stall
        self.password_error = password_error
        self.password_calls: list[str] = []
        self.session_lookups = 0

    async def get_session(self) -> AuthSession | None:
        self.session_lookups += 1
        if self.stall:
            # Blocks until cancelled
            await asyncio.Event().wait()
        return self.session

    async def set_password(self, password: str) -> AuthSession:
        self.password_calls.append(password)
        if self.password_error is not None:
            raise self.password_error
        if self.session is None:
            raise IdentityProviderError("Auth session missing!")
        self._emit(
            SessionEvent(type=SessionEventType.USER_UPDATED, session=self.session)
        )
        return self.session

    async def sign_out(self) -> None:
        self.session = None
        self._emit(SessionEvent(type=SessionEventType.SIGNED_OUT))

    def sign_in(self, session: AuthSession) -> None:
        """Simulate a sign-in pushed by the provider."""
        self.session = session
        self._emit(SessionEvent(type=SessionEventType.SIGNED_IN, session=session))

    def refresh(self, access_token: str) -> None:
        """Simulate a token refresh for the same principal."""
        if self.session is None:
            return
        self.session = self.session.model_copy(update={"access_token": access_token})
        self._emit(
            SessionEvent(type=SessionEventType.TOKEN_REFRESHED, session=self.session)
        )


class SupabaseIdentityProviderFactory(IdentityProviderFactory):
    """Creates Supabase-backed session managers sharing one auth client."""

    def __init__(self, client: SupabaseAuthClient) -> None:
        self.client = client

    def create(self, credential: str | None) -> IdentityProvider:
        return SupabaseSessionManager(self.client, credential)


class MockIdentityProviderFactory(IdentityProviderFactory):
    """Creates mock session managers keyed by credential.

    Unknown credentials (and None) produce a manager without a session.
    Every manager created is kept in `created` for assertions.
    """

    def __init__(self) -> None:
        self.sessions: dict[str, AuthSession] = {}
        self.created: list[MockSessionManager] = []

    def register(self, credential: str, session: AuthSession) -> None:
        """Make a credential resolve to a session."""
        self.sessions[credential] = session

    def create(self, credential: str | None) -> IdentityProvider:
        session = self.sessions.get(credential) if credential else None
        manager = MockSessionManager(session)
        self.created.append(manager)
        return manager
