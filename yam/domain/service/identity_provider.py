"""Identity provider port.

The identity provider owns authentication sessions. Redemption only
observes them (pull + push) and asks the provider to set a password.
"""

import asyncio
from collections.abc import Callable

import logfire

from yam.domain.error import DomainError
from yam.domain.model.session import AuthSession, SessionEvent, SessionEventType

SessionListener = Callable[[SessionEvent], None]


class IdentityProviderError(DomainError):
    """Raised when the identity provider rejects or fails a request."""

    pass


class Subscription:
    """Handle for a session-change subscription.

    `unsubscribe()` is idempotent.
    """

    def __init__(self, release: Callable[[], None]) -> None:
        self._release: Callable[[], None] | None = release

    @property
    def active(self) -> bool:
        return self._release is not None

    def unsubscribe(self) -> None:
        release, self._release = self._release, None
        if release is not None:
            release()


class IdentityProvider:
    """Session manager for a single principal.

    Implementations deliver an INITIAL_SESSION event to every new
    subscriber once the current session is known, then SIGNED_IN,
    SIGNED_OUT, USER_UPDATED and TOKEN_REFRESHED as they happen.
    """

    def __init__(self) -> None:
        self._listeners: dict[int, SessionListener] = {}
        self._initial_tasks: dict[int, asyncio.Task] = {}
        self._next_id = 0

    async def get_session(self) -> AuthSession | None:
        """Return the current session, if any (one-shot pull)."""
        raise NotImplementedError

    async def set_password(self, password: str) -> AuthSession:
        """Set a new password for the current principal.

        Raises:
            IdentityProviderError: If there is no session or the provider rejects it
        """
        raise NotImplementedError

    async def sign_out(self) -> None:
        """End the current session."""
        raise NotImplementedError

    def subscribe(self, listener: SessionListener) -> Subscription:
        """Subscribe to session changes.

        Must be called from a running event loop; the initial snapshot is
        delivered asynchronously.
        """
        listener_id = self._next_id
        self._next_id += 1
        self._listeners[listener_id] = listener
        task = asyncio.get_running_loop().create_task(
            self._deliver_initial(listener_id)
        )
        self._initial_tasks[listener_id] = task
        task.add_done_callback(lambda _: self._initial_tasks.pop(listener_id, None))
        return Subscription(lambda: self._release(listener_id))

    @property
    def listener_count(self) -> int:
        return len(self._listeners)

    def _emit(self, event: SessionEvent) -> None:
        for listener in list(self._listeners.values()):
            listener(event)

    async def _deliver_initial(self, listener_id: int) -> None:
        try:
            session = await self.get_session()
        except IdentityProviderError as e:
            # An unreadable session is reported as no session
            logfire.warn("Initial session lookup failed", error=str(e))
            session = None
        listener = self._listeners.get(listener_id)
        if listener is not None:
            listener(
                SessionEvent(type=SessionEventType.INITIAL_SESSION, session=session)
            )

    def _release(self, listener_id: int) -> None:
        self._listeners.pop(listener_id, None)
        task = self._initial_tasks.pop(listener_id, None)
        if task is not None and not task.done():
            task.cancel()


class IdentityProviderFactory:
    """Builds one identity provider per registration flow.

    Each flow observes exactly one principal, established from the
    credential carried by the invitation link or the caller.
    """

    def create(self, credential: str | None) -> IdentityProvider:
        """Create a session manager for a credential (None means anonymous)."""
        raise NotImplementedError
