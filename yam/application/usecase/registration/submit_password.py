"""Submit password use case."""

import logfire
from pydantic import BaseModel, Field, model_validator

from yam.application.registration import RegistrationFlowRegistry
from yam.application.usecase.base import BaseUseCase
from yam.application.usecase.registration.common import RegistrationResponse
from yam.config import Settings


class PasswordForm(BaseModel):
    """New password, typed twice.

    Passwords are 8-64 characters.
    """

    password: str = Field(min_length=8, max_length=64, repr=False)
    confirm_password: str = Field(repr=False)

    @model_validator(mode="after")
    def passwords_match(self) -> "PasswordForm":
        if self.password != self.confirm_password:
            raise ValueError("Passwords don't match")
        return self


class SubmitPasswordRequest(PasswordForm):
    """Submit password request."""

    flow_id: str


class SubmitPasswordUseCase(BaseUseCase[SubmitPasswordRequest, RegistrationResponse]):
    """Use case for setting the password and activating the account."""

    def __init__(self, flow_registry: RegistrationFlowRegistry, settings: Settings) -> None:
        """Initialize submit password use case.

        Args:
            flow_registry: Registry of live registration flows
            settings: Application settings
        """
        self.flow_registry = flow_registry
        self.settings = settings

    async def execute(self, request: SubmitPasswordRequest) -> RegistrationResponse:
        """Submit the password for a flow.

        A flow that is not ready for a password is left unchanged and its
        current state returned.

        Raises:
            NotFoundError: If the flow is unknown or expired
        """
        with logfire.span("submit_password.execute", flow_id=request.flow_id):
            flow = self.flow_registry.get(request.flow_id)
            state = await flow.machine.submit(request.password)

            logfire.info(
                "Password submitted",
                flow_id=flow.id,
                status=state.status.value,
            )
            return RegistrationResponse.from_state(
                flow.id, state, self.settings.registration.login_path
            )
