"""Session watcher.

Collapses the identity provider's push channel and its one-shot session
pull into a single stream of identity changes.
"""

import asyncio
from collections.abc import Callable

import logfire

from yam.application.registration.events import IdentityChanged, IdentityChangeKind
from yam.domain.model import AuthSession, SessionEvent, SessionEventType
from yam.domain.service import IdentityProvider, IdentityProviderError, Subscription

IdentityListener = Callable[[IdentityChanged], None]


class SessionWatcher:
    """Observes the session of one identity provider.

    The first definitive answer, pushed or pulled, is the initial snapshot;
    any later initial snapshot is ignored. `close()` releases the
    subscription and cancels the pull, and is safe to call repeatedly.
    """

    def __init__(self, identity_provider: IdentityProvider) -> None:
        self.identity_provider = identity_provider
        self.identity: AuthSession | None = None
        self._on_change: IdentityListener | None = None
        self._subscription: Subscription | None = None
        self._pull_task: asyncio.Task | None = None
        self._settled = False
        self._closed = False

    @property
    def settled(self) -> bool:
        """Whether a definitive identity-or-absence answer has arrived."""
        return self._settled

    @property
    def closed(self) -> bool:
        return self._closed

    def start(self, on_change: IdentityListener) -> None:
        """Start watching. Must be called from a running event loop.

        Raises:
            RuntimeError: If the watcher was already started or closed
        """
        if self._on_change is not None or self._closed:
            raise RuntimeError("SessionWatcher can only be started once")

        self._on_change = on_change
        self._subscription = self.identity_provider.subscribe(self._handle_event)
        self._pull_task = asyncio.get_running_loop().create_task(self._pull())

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        if self._subscription is not None:
            self._subscription.unsubscribe()
        if self._pull_task is not None and not self._pull_task.done():
            self._pull_task.cancel()
        logfire.debug("Session watcher closed")

    async def _pull(self) -> None:
        try:
            session = await self.identity_provider.get_session()
        except IdentityProviderError as e:
            logfire.warn("Session lookup failed, treating as signed out", error=str(e))
            session = None
        self._settle(session)

    def _handle_event(self, event: SessionEvent) -> None:
        if self._closed:
            return

        if event.type == SessionEventType.INITIAL_SESSION:
            self._settle(event.session)
        elif event.type == SessionEventType.SIGNED_OUT:
            self._settled = True
            self._publish(None, IdentityChangeKind.SIGNED_OUT)
        elif event.session is None:
            logfire.warn("Session event without a session", event_type=event.type.value)
        elif event.type == SessionEventType.SIGNED_IN:
            self._settled = True
            self._publish(event.session, IdentityChangeKind.SIGNED_IN)
        else:
            # USER_UPDATED, TOKEN_REFRESHED
            self._settled = True
            self._publish(event.session, IdentityChangeKind.UPDATED)

    def _settle(self, session: AuthSession | None) -> None:
        if self._closed or self._settled:
            return
        self._settled = True
        kind = IdentityChangeKind.INITIAL if session else IdentityChangeKind.ABSENT
        self._publish(session, kind)

    def _publish(self, session: AuthSession | None, kind: IdentityChangeKind) -> None:
        self.identity = session
        logfire.info(
            "Identity changed",
            kind=kind.value,
            user_id=str(session.user_id) if session else None,
        )
        if self._on_change is not None:
            self._on_change(IdentityChanged(identity=session, kind=kind))
