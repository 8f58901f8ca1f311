"""Registration state machine.

One instance drives one redemption attempt. It combines the token from
the link, the identity pushed or pulled from the identity provider and the
invitation record into a single authoritative RegistrationState.

All changes go through `dispatch()`, a reducer over tagged events.
Asynchronous work (prefetch, validation, commit) runs in tasks that report
back with events carrying the inputs they were computed for; results for
inputs that are no longer current are dropped.
"""

import asyncio
from collections.abc import Callable, Coroutine
from typing import Any

import logfire

from yam.application.registration.activation_committer import ActivationCommitter
from yam.application.registration.events import (
    CommitCompleted,
    IdentityChanged,
    IdentityChangeKind,
    IdentityKey,
    PrefetchCompleted,
    RegistrationEvent,
    SessionWaitExpired,
    SubmitRequested,
    TokenRejected,
    TokenResolved,
    ValidationCompleted,
    ValidationInputs,
)
from yam.application.registration.invitation_validator import InvitationValidator
from yam.application.registration.session_watcher import SessionWatcher
from yam.application.registration.token_resolver import TokenResolver
from yam.domain.error import (
    EmailMismatchError,
    InvitationLookupFailedError,
    MissingSessionError,
    PasswordUpdateFailedError,
    RedirectDataMissingError,
    RegistrationError,
    SessionCheckTimeoutError,
    SessionEndedError,
    TokenMissingError,
)
from yam.domain.model import (
    AuthSession,
    RegistrationState,
    RegistrationStatus,
    ResolvedInvitation,
)
from yam.domain.service import IdentityProvider, IdentityProviderError
from yam.domain.value import InvitationToken

StateListener = Callable[[RegistrationState], None]
StatePredicate = Callable[[RegistrationState], bool]

UNEXPECTED_ERROR_CODE = "unexpected_error"
UNEXPECTED_ERROR_MESSAGE = "An unexpected error occurred. Please try again."

# Identity changes in these states are recorded but never restart validation
IDENTITY_FROZEN_STATUSES = (
    RegistrationStatus.INVALID_INVITE,
    RegistrationStatus.SUBMITTING,
    RegistrationStatus.ERROR,
    RegistrationStatus.REDIRECTED,
)


class RegistrationStateMachine:
    """Orchestrates one invitation redemption."""

    def __init__(
        self,
        token_resolver: TokenResolver,
        validator: InvitationValidator,
        committer: ActivationCommitter,
        identity_provider: IdentityProvider,
        *,
        session_wait_seconds: float = 2.0,
        prefetch_invitation: bool = True,
        flow_id: str | None = None,
    ) -> None:
        """Initialize state machine.

        Args:
            token_resolver: Extracts the token from the link
            validator: Invitation checks
            committer: Final password set and bookkeeping
            identity_provider: Session manager for this flow's principal
            session_wait_seconds: Bounded wait for the first session answer
            prefetch_invitation: Check the invitation before the session settles
            flow_id: Identifier used in logs
        """
        self.token_resolver = token_resolver
        self.validator = validator
        self.committer = committer
        self.identity_provider = identity_provider
        self.session_wait_seconds = session_wait_seconds
        self.prefetch_invitation = prefetch_invitation
        self.flow_id = flow_id

        self._state = RegistrationState()
        self._watcher = SessionWatcher(identity_provider)
        self._token: InvitationToken | None = None
        self._identity: AuthSession | None = None
        self._prefetch_error: RegistrationError | None = None
        self._validating_for: ValidationInputs | None = None
        self._committing_for: ValidationInputs | None = None
        self._session_timer: asyncio.TimerHandle | None = None
        self._tasks: set[asyncio.Task] = set()
        # Commits run to completion even after teardown; only their result is dropped
        self._commit_tasks: set[asyncio.Task] = set()
        self._listeners: list[StateListener] = []
        self._waiters: list[tuple[StatePredicate, asyncio.Future]] = []
        self._started = False
        self._closed = False

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    @property
    def state(self) -> RegistrationState:
        return self._state

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def inputs(self) -> ValidationInputs | None:
        """The current (token, identity) pair, once a token is known."""
        if self._token is None:
            return None
        return ValidationInputs(
            token=self._token,
            identity=IdentityKey.of(self._identity) if self._identity else None,
        )

    async def start(self, url: str) -> RegistrationState:
        """Start the flow for an invitation link.

        A link without a token fails immediately, without touching the
        identity provider or the record store.

        Raises:
            RuntimeError: If the flow was already started
        """
        if self._started:
            raise RuntimeError("Registration flow already started")
        self._started = True

        try:
            resolved = self.token_resolver.resolve(url)
        except TokenMissingError as e:
            self.dispatch(TokenRejected(error=e))
        else:
            self.dispatch(TokenResolved(token=resolved.token, source=resolved.source))
        return self._state

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        """Observe every state change. Returns an unsubscribe callable."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    async def wait_for(
        self, predicate: StatePredicate, timeout: float | None = None
    ) -> RegistrationState:
        """Wait until the state satisfies a predicate.

        Raises:
            asyncio.TimeoutError: If the timeout elapses first
        """
        if predicate(self._state) or self._closed:
            return self._state

        future: asyncio.Future = asyncio.get_running_loop().create_future()
        waiter = (predicate, future)
        self._waiters.append(waiter)
        try:
            return await asyncio.wait_for(future, timeout)
        finally:
            if waiter in self._waiters:
                self._waiters.remove(waiter)

    async def submit(self, password: str) -> RegistrationState:
        """Submit the new password and wait for the commit to finish.

        Ignored unless the flow is ready for a password (or in a
        recoverable error); a duplicate submit waits for the running commit.
        """
        self.dispatch(SubmitRequested(password=password))
        return await self.wait_for(
            lambda state: state.status != RegistrationStatus.SUBMITTING
        )

    async def sign_out(self) -> RegistrationState:
        """End the identity session for this flow.

        The provider pushes SIGNED_OUT, which ends the flow with the
        session-ended message. A failed remote logout is logged; the
        session is dropped locally either way.
        """
        try:
            await self.identity_provider.sign_out()
        except IdentityProviderError as e:
            logfire.warn("Remote sign-out failed", flow_id=self.flow_id, error=str(e))
        return self._state

    def revalidate(self) -> None:
        """Re-run validation for the current (token, identity) pair.

        Idempotent: a validation already running for the same pair is not
        restarted, and final states are left alone.
        """
        if self._closed or self._identity is None or self._token is None:
            return
        if self._state.status == RegistrationStatus.VALIDATING_INVITE:
            if self._validating_for == self.inputs:
                return
        elif self._state.status != RegistrationStatus.READY_FOR_PASSWORD:
            return
        self._begin_validation()

    def close(self) -> None:
        """Tear the flow down. Safe to call repeatedly."""
        if self._closed:
            return
        self._teardown()
        self._closed = True
        for _, future in self._waiters:
            if not future.done():
                future.set_result(self._state)
        self._waiters.clear()
        self._listeners.clear()
        logfire.info(
            "Registration flow closed",
            flow_id=self.flow_id,
            status=self._state.status.value,
        )

    # ------------------------------------------------------------------
    # Reducer
    # ------------------------------------------------------------------

    def dispatch(self, event: RegistrationEvent) -> None:
        """Apply an event to the current state."""
        if self._closed:
            logfire.debug(
                "Event after close dropped",
                flow_id=self.flow_id,
                event=type(event).__name__,
            )
            return

        if isinstance(event, TokenResolved):
            self._on_token_resolved(event)
        elif isinstance(event, TokenRejected):
            self._fail(event.error)
        elif isinstance(event, IdentityChanged):
            self._on_identity_changed(event)
        elif isinstance(event, SessionWaitExpired):
            self._on_session_wait_expired()
        elif isinstance(event, PrefetchCompleted):
            self._on_prefetch_completed(event)
        elif isinstance(event, ValidationCompleted):
            self._on_validation_completed(event)
        elif isinstance(event, SubmitRequested):
            self._on_submit_requested(event)
        elif isinstance(event, CommitCompleted):
            self._on_commit_completed(event)
        else:
            raise TypeError(f"Unknown registration event: {event!r}")

    def _on_token_resolved(self, event: TokenResolved) -> None:
        self._token = event.token
        logfire.info(
            "Invitation token resolved",
            flow_id=self.flow_id,
            token=event.token.masked,
            source=event.source.value,
        )

        self._watcher.start(self.dispatch)
        self._session_timer = asyncio.get_running_loop().call_later(
            self.session_wait_seconds, self.dispatch, SessionWaitExpired()
        )
        if self.prefetch_invitation:
            self._spawn(self._prefetch(event.token))

    def _on_identity_changed(self, event: IdentityChanged) -> None:
        self._cancel_session_timer()
        status = self._state.status
        previous = self._identity
        self._identity = event.identity

        if event.kind == IdentityChangeKind.SIGNED_OUT:
            if status in (
                RegistrationStatus.INVALID_INVITE,
                RegistrationStatus.REDIRECTED,
            ):
                return
            logfire.warn("Session ended during registration", flow_id=self.flow_id)
            self._fail(SessionEndedError())
            return

        if event.identity is None:
            # Initial snapshot without a session
            if status in (
                RegistrationStatus.CHECKING_SESSION,
                RegistrationStatus.VALIDATING_INVITE,
            ):
                self._fail(MissingSessionError())
            return

        if status in IDENTITY_FROZEN_STATUSES:
            if status != RegistrationStatus.INVALID_INVITE:
                self._set(resolved_identity=event.identity)
            return

        if event.identity.same_identity(previous):
            if status == RegistrationStatus.READY_FOR_PASSWORD:
                # Token refresh or profile update: nothing to re-check
                self._set(resolved_identity=event.identity)
                return
            if (
                status == RegistrationStatus.VALIDATING_INVITE
                and self._validating_for == self.inputs
            ):
                return

        self._begin_validation()

    def _on_session_wait_expired(self) -> None:
        self._session_timer = None
        if self._state.status != RegistrationStatus.CHECKING_SESSION:
            return
        logfire.warn(
            "Timed out waiting for session",
            flow_id=self.flow_id,
            wait_seconds=self.session_wait_seconds,
        )
        self._fail(SessionCheckTimeoutError())

    def _on_prefetch_completed(self, event: PrefetchCompleted) -> None:
        if event.for_token != self._token or event.error is None:
            return
        self._prefetch_error = event.error
        if self._state.status in (
            RegistrationStatus.CHECKING_SESSION,
            RegistrationStatus.VALIDATING_INVITE,
        ):
            self._fail(event.error)

    def _on_validation_completed(self, event: ValidationCompleted) -> None:
        if (
            self._state.status != RegistrationStatus.VALIDATING_INVITE
            or event.for_inputs != self.inputs
        ):
            logfire.info("Stale validation result dropped", flow_id=self.flow_id)
            return

        self._validating_for = None
        if event.error is not None:
            self._fail(event.error)
            return

        self._set(
            status=RegistrationStatus.READY_FOR_PASSWORD,
            resolved_invitation=event.invitation,
            resolved_identity=self._identity,
            error_message=None,
            error_code=None,
        )

    def _on_submit_requested(self, event: SubmitRequested) -> None:
        state = self._state
        can_submit = state.status == RegistrationStatus.READY_FOR_PASSWORD or (
            state.status == RegistrationStatus.ERROR and not state.is_terminal
        )
        if not can_submit:
            logfire.info(
                "Submit ignored",
                flow_id=self.flow_id,
                status=state.status.value,
            )
            return

        invitation = state.resolved_invitation
        identity = self._identity
        if invitation is None or identity is None:
            self._fail(MissingSessionError())
            return

        self._committing_for = self.inputs
        self._set(
            status=RegistrationStatus.SUBMITTING,
            error_message=None,
            error_code=None,
        )
        self._spawn(
            self._commit(self._committing_for, invitation, identity, event.password),
            tasks=self._commit_tasks,
        )

    def _on_commit_completed(self, event: CommitCompleted) -> None:
        if (
            self._state.status != RegistrationStatus.SUBMITTING
            or event.for_inputs != self._committing_for
        ):
            logfire.info("Stale commit result dropped", flow_id=self.flow_id)
            return

        self._committing_for = None
        error = event.error
        if error is None:
            self._set(
                status=RegistrationStatus.REDIRECTED,
                redirect_path=event.redirect_path,
                error_message=None,
                error_code=None,
            )
            self._teardown()
        elif isinstance(error, PasswordUpdateFailedError):
            self._set(
                status=RegistrationStatus.READY_FOR_PASSWORD,
                error_message=error.message,
                error_code=error.code,
            )
        elif isinstance(error, EmailMismatchError):
            self._fail(error)
        elif isinstance(error, RedirectDataMissingError):
            # Fatal: clearing the invitation makes the error terminal
            self._set(
                status=RegistrationStatus.ERROR,
                resolved_invitation=None,
                error_message=error.message,
                error_code=error.code,
            )
            self._teardown()
        else:
            self._set(
                status=RegistrationStatus.ERROR,
                error_message=UNEXPECTED_ERROR_MESSAGE,
                error_code=UNEXPECTED_ERROR_CODE,
            )

    # ------------------------------------------------------------------
    # Effects
    # ------------------------------------------------------------------

    def _begin_validation(self) -> None:
        if self._prefetch_error is not None:
            self._fail(self._prefetch_error)
            return

        inputs = self.inputs
        identity = self._identity
        self._validating_for = inputs
        self._set(
            status=RegistrationStatus.VALIDATING_INVITE,
            resolved_invitation=None,
            resolved_identity=identity,
            error_message=None,
            error_code=None,
        )
        self._spawn(self._validate(inputs, identity))

    async def _prefetch(self, token: InvitationToken) -> None:
        try:
            await self.validator.check_invitation(token)
        except RegistrationError as e:
            self.dispatch(PrefetchCompleted(for_token=token, error=e))
            return
        except Exception as e:
            logfire.error("Invitation prefetch failed", flow_id=self.flow_id, error=str(e))
            self.dispatch(
                PrefetchCompleted(for_token=token, error=InvitationLookupFailedError())
            )
            return
        self.dispatch(PrefetchCompleted(for_token=token))

    async def _validate(self, inputs: ValidationInputs, identity: AuthSession) -> None:
        try:
            invitation = await self.validator.validate(inputs.token, identity)
        except RegistrationError as e:
            self.dispatch(ValidationCompleted(for_inputs=inputs, error=e))
            return
        except Exception as e:
            logfire.error("Invitation validation failed", flow_id=self.flow_id, error=str(e))
            self.dispatch(
                ValidationCompleted(
                    for_inputs=inputs, error=InvitationLookupFailedError()
                )
            )
            return
        self.dispatch(ValidationCompleted(for_inputs=inputs, invitation=invitation))

    async def _commit(
        self,
        inputs: ValidationInputs,
        invitation: ResolvedInvitation,
        identity: AuthSession,
        password: str,
    ) -> None:
        try:
            redirect_path = await self.committer.commit(
                invitation, identity, self.identity_provider, password
            )
        except Exception as e:
            if not isinstance(e, RegistrationError):
                logfire.exception(
                    "Unexpected error during activation", flow_id=self.flow_id
                )
            self.dispatch(CommitCompleted(for_inputs=inputs, error=e))
            return
        self.dispatch(CommitCompleted(for_inputs=inputs, redirect_path=redirect_path))

    def _spawn(
        self,
        coro: Coroutine[Any, Any, None],
        tasks: set[asyncio.Task] | None = None,
    ) -> None:
        tasks = self._tasks if tasks is None else tasks
        task = asyncio.get_running_loop().create_task(coro)
        tasks.add(task)
        task.add_done_callback(tasks.discard)

    # ------------------------------------------------------------------
    # State helpers
    # ------------------------------------------------------------------

    def _fail(self, error: RegistrationError) -> None:
        logfire.info(
            "Invitation rejected",
            flow_id=self.flow_id,
            code=error.code,
        )
        changes: dict[str, Any] = {
            "status": RegistrationStatus.INVALID_INVITE,
            "resolved_invitation": None,
            "error_message": error.message,
            "error_code": error.code,
        }
        if isinstance(error, SessionEndedError):
            changes["resolved_identity"] = None
        self._set(**changes)
        self._teardown()

    def _set(self, **changes: Any) -> None:
        previous = self._state
        self._state = previous.model_copy(update=changes)
        if previous.status != self._state.status:
            logfire.info(
                "Registration status changed",
                flow_id=self.flow_id,
                previous=previous.status.value,
                current=self._state.status.value,
            )

        for listener in list(self._listeners):
            listener(self._state)

        for predicate, future in list(self._waiters):
            if not future.done() and predicate(self._state):
                future.set_result(self._state)

    def _cancel_session_timer(self) -> None:
        if self._session_timer is not None:
            self._session_timer.cancel()
            self._session_timer = None

    def _teardown(self) -> None:
        self._cancel_session_timer()
        self._watcher.close()
        current = asyncio.current_task()
        for task in list(self._tasks):
            if task is not current and not task.done():
                task.cancel()
