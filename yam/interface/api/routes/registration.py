"""Registration routes.

A registration flow is created when the invited person opens their link
and lives on the server until it redirects, fails, or expires.
"""

from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter, Header, HTTPException, status
from pydantic import BaseModel, Field

from yam.application.usecase.registration import (
    CloseRegistrationRequest,
    CloseRegistrationUseCase,
    GetRegistrationRequest,
    GetRegistrationUseCase,
    PasswordForm,
    RegistrationResponse,
    SignOutRequest,
    SignOutUseCase,
    StartRegistrationRequest,
    StartRegistrationUseCase,
    SubmitPasswordRequest,
    SubmitPasswordUseCase,
)
from yam.domain.error import NotFoundError

router = APIRouter(
    prefix="/registrations", tags=["registrations"], route_class=DishkaRoute
)


class StartRegistrationAPIRequest(BaseModel):
    """API request for opening an invitation link."""

    url: str = Field(min_length=1, max_length=8192)
    access_token: str | None = Field(default=None, repr=False)


def _bearer_token(authorization: str | None) -> str | None:
    if not authorization:
        return None
    scheme, _, credentials = authorization.partition(" ")
    if scheme.lower() != "bearer" or not credentials.strip():
        return None
    return credentials.strip()


@router.post(
    "", response_model=RegistrationResponse, status_code=status.HTTP_201_CREATED
)
async def start_registration(
    request: StartRegistrationAPIRequest,
    start_registration_use_case: FromDishka[StartRegistrationUseCase],
    authorization: str | None = Header(default=None),
) -> RegistrationResponse:
    """Start a registration flow for an invitation link.

    The session credential is taken from the request body, then the
    Authorization header, then the link's fragment.

    Args:
        request: Invitation link as opened by the user
        start_registration_use_case: Start registration use case from DI
        authorization: Optional bearer token of the signed-in caller

    Returns:
        The flow's state once it has settled
    """
    return await start_registration_use_case.execute(
        StartRegistrationRequest(
            url=request.url,
            access_token=request.access_token or _bearer_token(authorization),
        )
    )


@router.get("/{flow_id}", response_model=RegistrationResponse)
async def get_registration(
    flow_id: str,
    get_registration_use_case: FromDishka[GetRegistrationUseCase],
) -> RegistrationResponse:
    """Get the current state of a registration flow.

    Raises:
        HTTPException: 404 if the flow is unknown or expired
    """
    try:
        return await get_registration_use_case.execute(
            GetRegistrationRequest(flow_id=flow_id)
        )
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))


@router.post("/{flow_id}/password", response_model=RegistrationResponse)
async def submit_password(
    flow_id: str,
    request: PasswordForm,
    submit_password_use_case: FromDishka[SubmitPasswordUseCase],
) -> RegistrationResponse:
    """Set the password and activate the account.

    A failed password update leaves the flow ready for another attempt;
    the response carries the error message.

    Raises:
        HTTPException: 404 if the flow is unknown or expired
    """
    try:
        return await submit_password_use_case.execute(
            SubmitPasswordRequest(
                flow_id=flow_id,
                password=request.password,
                confirm_password=request.confirm_password,
            )
        )
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))


@router.post("/{flow_id}/sign-out", response_model=RegistrationResponse)
async def sign_out(
    flow_id: str,
    sign_out_use_case: FromDishka[SignOutUseCase],
) -> RegistrationResponse:
    """Sign out of the session the flow observes, e.g. to switch accounts.

    Raises:
        HTTPException: 404 if the flow is unknown or expired
    """
    try:
        return await sign_out_use_case.execute(SignOutRequest(flow_id=flow_id))
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))


@router.delete("/{flow_id}", response_model=RegistrationResponse)
async def close_registration(
    flow_id: str,
    close_registration_use_case: FromDishka[CloseRegistrationUseCase],
) -> RegistrationResponse:
    """Abandon a registration flow.

    Raises:
        HTTPException: 404 if the flow is unknown or expired
    """
    try:
        return await close_registration_use_case.execute(
            CloseRegistrationRequest(flow_id=flow_id)
        )
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
