"""Get registration use case."""

from pydantic import BaseModel

from yam.application.registration import RegistrationFlowRegistry
from yam.application.usecase.base import BaseUseCase
from yam.application.usecase.registration.common import RegistrationResponse
from yam.config import Settings


class GetRegistrationRequest(BaseModel):
    flow_id: str


class GetRegistrationUseCase(BaseUseCase[GetRegistrationRequest, RegistrationResponse]):
    """Use case for reading the current state of a flow."""

    def __init__(self, flow_registry: RegistrationFlowRegistry, settings: Settings) -> None:
        self.flow_registry = flow_registry
        self.settings = settings

    async def execute(self, request: GetRegistrationRequest) -> RegistrationResponse:
        """Get the flow's current state.

        Raises:
            NotFoundError: If the flow is unknown or expired
        """
        flow = self.flow_registry.get(request.flow_id)
        return RegistrationResponse.from_state(
            flow.id, flow.machine.state, self.settings.registration.login_path
        )
