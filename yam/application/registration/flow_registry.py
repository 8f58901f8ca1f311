"""Registration flows: construction and in-process registry.

A flow is one state machine plus its identity provider. Flows outlive
HTTP requests, so they are kept here until closed or evicted.
"""

import time
from collections.abc import Callable
from dataclasses import dataclass, field
from uuid import uuid4

import logfire

from yam.application.registration.activation_committer import ActivationCommitter
from yam.application.registration.invitation_validator import InvitationValidator
from yam.application.registration.state_machine import RegistrationStateMachine
from yam.application.registration.token_resolver import TokenResolver
from yam.config import RegistrationSettings
from yam.domain.error import NotFoundError
from yam.domain.service import (
    DirectoryService,
    IdentityProviderFactory,
    InvitationService,
    ProfileService,
)


class RegistrationFlowFactory:
    """Builds state machines wired to shared, stateless collaborators."""

    def __init__(
        self,
        settings: RegistrationSettings,
        invitation_service: InvitationService,
        profile_service: ProfileService,
        directory_service: DirectoryService,
        identity_provider_factory: IdentityProviderFactory,
    ) -> None:
        self.settings = settings
        self.identity_provider_factory = identity_provider_factory
        self.token_resolver = TokenResolver(
            query_param=settings.query_param,
            route_suffixes=settings.route_suffixes,
        )
        self.validator = InvitationValidator(invitation_service, directory_service)
        self.committer = ActivationCommitter(
            invitation_service,
            profile_service,
            directory_service,
            mark_failed_on_password_error=settings.mark_failed_on_password_error,
        )

    def create(
        self, url: str, access_token: str | None = None, flow_id: str | None = None
    ) -> RegistrationStateMachine:
        """Create a state machine for an invitation link.

        Args:
            url: Invitation link
            access_token: Caller's bearer token; defaults to the access
                token carried in the link fragment
            flow_id: Identifier used in logs
        """
        credential = access_token or self.token_resolver.session_credential(url)
        identity_provider = self.identity_provider_factory.create(credential)
        return RegistrationStateMachine(
            self.token_resolver,
            self.validator,
            self.committer,
            identity_provider,
            session_wait_seconds=self.settings.session_wait_seconds,
            prefetch_invitation=self.settings.prefetch_invitation,
            flow_id=flow_id,
        )


@dataclass
class RegistrationFlow:
    id: str
    machine: RegistrationStateMachine
    last_seen: float = field(default_factory=time.monotonic)


class RegistrationFlowRegistry:
    """Keeps live registration flows by id.

    Flows untouched for `ttl_seconds` are closed and dropped so abandoned
    attempts never leak subscriptions or tasks.
    """

    def __init__(
        self,
        factory: RegistrationFlowFactory,
        ttl_seconds: float,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.factory = factory
        self.ttl_seconds = ttl_seconds
        self.clock = clock
        self._flows: dict[str, RegistrationFlow] = {}

    def __len__(self) -> int:
        return len(self._flows)

    async def start(self, url: str, access_token: str | None = None) -> RegistrationFlow:
        """Create, register and start a new flow."""
        self.evict_expired()

        flow_id = str(uuid4())
        machine = self.factory.create(url, access_token, flow_id=flow_id)
        flow = RegistrationFlow(id=flow_id, machine=machine, last_seen=self.clock())
        self._flows[flow_id] = flow

        with logfire.span("registration_flow.start", flow_id=flow_id):
            await machine.start(url)
        return flow

    def get(self, flow_id: str) -> RegistrationFlow:
        """Get a live flow and mark it as used.

        Raises:
            NotFoundError: If the flow is unknown or was evicted
        """
        self.evict_expired()
        flow = self._flows.get(flow_id)
        if flow is None:
            raise NotFoundError("Registration flow", flow_id)
        flow.last_seen = self.clock()
        return flow

    def close(self, flow_id: str) -> RegistrationFlow:
        """Close and forget a flow.

        Raises:
            NotFoundError: If the flow is unknown
        """
        flow = self._flows.pop(flow_id, None)
        if flow is None:
            raise NotFoundError("Registration flow", flow_id)
        flow.machine.close()
        return flow

    def evict_expired(self) -> int:
        """Close flows idle for longer than the TTL. Returns how many."""
        cutoff = self.clock() - self.ttl_seconds
        expired = [fid for fid, flow in self._flows.items() if flow.last_seen < cutoff]
        for flow_id in expired:
            self._flows.pop(flow_id).machine.close()
        if expired:
            logfire.info("Registration flows evicted", count=len(expired))
        return len(expired)

    def close_all(self) -> None:
        """Close every flow (application shutdown)."""
        flows = list(self._flows.values())
        self._flows.clear()
        for flow in flows:
            flow.machine.close()
        logfire.info("Registration flows closed", count=len(flows))
