"""Close registration use case."""

import logfire
from pydantic import BaseModel

from yam.application.registration import RegistrationFlowRegistry
from yam.application.usecase.base import BaseUseCase
from yam.application.usecase.registration.common import RegistrationResponse
from yam.config import Settings


class CloseRegistrationRequest(BaseModel):
    flow_id: str


class CloseRegistrationUseCase(
    BaseUseCase[CloseRegistrationRequest, RegistrationResponse]
):
    """Use case for abandoning a flow (page closed, user navigated away)."""

    def __init__(self, flow_registry: RegistrationFlowRegistry, settings: Settings) -> None:
        self.flow_registry = flow_registry
        self.settings = settings

    async def execute(self, request: CloseRegistrationRequest) -> RegistrationResponse:
        """Tear the flow down and return its last state.

        Raises:
            NotFoundError: If the flow is unknown or expired
        """
        flow = self.flow_registry.close(request.flow_id)
        logfire.info("Registration closed", flow_id=flow.id)
        return RegistrationResponse.from_state(
            flow.id, flow.machine.state, self.settings.registration.login_path
        )
