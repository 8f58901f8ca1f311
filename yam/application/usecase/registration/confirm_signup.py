"""Confirm signup use case.

Some mail scanners pre-open links and burn one-time verification tokens.
Invitation emails therefore point at a confirmation step that only builds
the Supabase verification link once a person has typed their email.
"""

import re
from urllib.parse import urlencode

import logfire
from pydantic import BaseModel

from yam.application.usecase.base import BaseUseCase
from yam.config import Settings

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


class ConfirmSignupRequest(BaseModel):
    """Confirm signup request."""

    token: str | None = None
    email: str


class ConfirmSignupResponse(BaseModel):
    """Confirm signup response."""

    confirmation_url: str


class ConfirmSignupUseCase(BaseUseCase[ConfirmSignupRequest, ConfirmSignupResponse]):
    """Use case for building the verification link of an invitation."""

    def __init__(self, settings: Settings) -> None:
        self.settings = settings

    async def execute(self, request: ConfirmSignupRequest) -> ConfirmSignupResponse:
        """Build the Supabase verification URL.

        Args:
            request: Token from the confirmation link and the typed email

        Returns:
            URL that verifies the invitation and lands on the register page

        Raises:
            ValueError: If the token is missing or the email is malformed
        """
        token = (request.token or "").strip()
        if not token:
            raise ValueError(
                "Confirmation token not found in the link. "
                "Please check the link and try again."
            )
        if not EMAIL_PATTERN.match(request.email.strip()):
            raise ValueError("Please enter a valid email address.")

        redirect_to = self.settings.site_url + self.settings.registration.register_path
        query = urlencode({"token": token, "type": "invite", "redirect_to": redirect_to})
        confirmation_url = (
            f"{self.settings.supabase.url.rstrip('/')}/auth/v1/verify?{query}"
        )

        logfire.info("Signup confirmation link built", token=token[:8] + "...")
        return ConfirmSignupResponse(confirmation_url=confirmation_url)
