"""Invitation redemption components."""

from yam.application.registration.activation_committer import ActivationCommitter
from yam.application.registration.flow_registry import (
    RegistrationFlow,
    RegistrationFlowFactory,
    RegistrationFlowRegistry,
)
from yam.application.registration.invitation_validator import InvitationValidator
from yam.application.registration.session_watcher import SessionWatcher
from yam.application.registration.state_machine import RegistrationStateMachine
from yam.application.registration.token_resolver import (
    ResolvedToken,
    TokenResolver,
    TokenSource,
)

__all__ = [
    "ActivationCommitter",
    "InvitationValidator",
    "RegistrationFlow",
    "RegistrationFlowFactory",
    "RegistrationFlowRegistry",
    "RegistrationStateMachine",
    "ResolvedToken",
    "SessionWatcher",
    "TokenResolver",
    "TokenSource",
]
