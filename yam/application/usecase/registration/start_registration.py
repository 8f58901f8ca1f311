"""Start registration use case."""

import logfire
from pydantic import BaseModel, Field

from yam.application.registration import RegistrationFlowRegistry
from yam.application.usecase.base import BaseUseCase
from yam.application.usecase.registration.common import RegistrationResponse, settle
from yam.config import Settings


class StartRegistrationRequest(BaseModel):
    """Start registration request."""

    # Full invitation link as opened by the user, fragment included
    url: str = Field(min_length=1, max_length=8192)

    # Bearer token of an already signed-in caller, if any
    access_token: str | None = Field(default=None, repr=False)


class StartRegistrationUseCase(
    BaseUseCase[StartRegistrationRequest, RegistrationResponse]
):
    """Use case for opening an invitation link.

    Starts a new registration flow and waits, up to the settle timeout,
    for it to reach a state the client can act on.
    """

    def __init__(self, flow_registry: RegistrationFlowRegistry, settings: Settings) -> None:
        """Initialize start registration use case.

        Args:
            flow_registry: Registry of live registration flows
            settings: Application settings
        """
        self.flow_registry = flow_registry
        self.settings = settings

    async def execute(self, request: StartRegistrationRequest) -> RegistrationResponse:
        """Start a registration flow.

        Args:
            request: Invitation link and optional bearer token

        Returns:
            The flow's state once settled (or still pending on timeout)
        """
        with logfire.span("start_registration.execute"):
            flow = await self.flow_registry.start(request.url, request.access_token)
            state = await settle(flow, self.settings.registration.settle_timeout_seconds)

            logfire.info(
                "Registration started",
                flow_id=flow.id,
                status=state.status.value,
            )
            return RegistrationResponse.from_state(
                flow.id, state, self.settings.registration.login_path
            )
