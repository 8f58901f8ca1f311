"""Signup confirmation routes."""

from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter, HTTPException, status

from yam.application.usecase.registration import (
    ConfirmSignupRequest,
    ConfirmSignupResponse,
    ConfirmSignupUseCase,
)

router = APIRouter(tags=["registrations"], route_class=DishkaRoute)


@router.post("/confirm-signup", response_model=ConfirmSignupResponse)
async def confirm_signup(
    request: ConfirmSignupRequest,
    confirm_signup_use_case: FromDishka[ConfirmSignupUseCase],
) -> ConfirmSignupResponse:
    """Build the verification link for an emailed invitation.

    Args:
        request: Token from the email link and the typed email address
        confirm_signup_use_case: Confirm signup use case from DI

    Returns:
        URL the browser should navigate to

    Raises:
        HTTPException: 400 if the token is missing or the email is invalid
    """
    try:
        return await confirm_signup_use_case.execute(request)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
