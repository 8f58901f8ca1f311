"""Registration use cases."""

from yam.application.usecase.registration.close_registration import (
    CloseRegistrationRequest,
    CloseRegistrationUseCase,
)
from yam.application.usecase.registration.common import (
    InvitationSummary,
    RegistrationResponse,
)
from yam.application.usecase.registration.confirm_signup import (
    ConfirmSignupRequest,
    ConfirmSignupResponse,
    ConfirmSignupUseCase,
)
from yam.application.usecase.registration.get_registration import (
    GetRegistrationRequest,
    GetRegistrationUseCase,
)
from yam.application.usecase.registration.sign_out import (
    SignOutRequest,
    SignOutUseCase,
)
from yam.application.usecase.registration.start_registration import (
    StartRegistrationRequest,
    StartRegistrationUseCase,
)
from yam.application.usecase.registration.submit_password import (
    PasswordForm,
    SubmitPasswordRequest,
    SubmitPasswordUseCase,
)

__all__ = [
    "CloseRegistrationRequest",
    "CloseRegistrationUseCase",
    "ConfirmSignupRequest",
    "ConfirmSignupResponse",
    "ConfirmSignupUseCase",
    "GetRegistrationRequest",
    "GetRegistrationUseCase",
    "InvitationSummary",
    "PasswordForm",
    "RegistrationResponse",
    "SignOutRequest",
    "SignOutUseCase",
    "StartRegistrationRequest",
    "StartRegistrationUseCase",
    "SubmitPasswordRequest",
    "SubmitPasswordUseCase",
]
