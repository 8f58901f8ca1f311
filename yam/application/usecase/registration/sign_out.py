"""Sign out use case."""

import logfire
from pydantic import BaseModel

from yam.application.registration import RegistrationFlowRegistry
from yam.application.usecase.base import BaseUseCase
from yam.application.usecase.registration.common import RegistrationResponse
from yam.config import Settings


class SignOutRequest(BaseModel):
    flow_id: str


class SignOutUseCase(BaseUseCase[SignOutRequest, RegistrationResponse]):
    """Use case for signing out of the session a flow observes.

    Used when the invited person is signed in as someone else and wants
    to switch accounts. The flow ends with the session-ended message.
    """

    def __init__(
        self, flow_registry: RegistrationFlowRegistry, settings: Settings
    ) -> None:
        self.flow_registry = flow_registry
        self.settings = settings

    async def execute(self, request: SignOutRequest) -> RegistrationResponse:
        """Sign out and return the flow's resulting state.

        Raises:
            NotFoundError: If the flow is unknown or expired
        """
        with logfire.span("sign_out.execute", flow_id=request.flow_id):
            flow = self.flow_registry.get(request.flow_id)
            state = await flow.machine.sign_out()
            logfire.info("Signed out", flow_id=flow.id, status=state.status.value)
            return RegistrationResponse.from_state(
                flow.id, state, self.settings.registration.login_path
            )
