"""Supabase Auth (GoTrue) HTTP client.

Only the three user-scoped endpoints redemption needs are wrapped:
reading the current user, updating its password, and logging out.
"""

from typing import Any

import httpx
import logfire

from yam.domain.service.identity_provider import IdentityProviderError


class SupabaseAuthError(IdentityProviderError):
    """Supabase Auth rejected or failed a request."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.message = message
        self.status_code = status_code
        super().__init__(message)

    @property
    def is_unauthorized(self) -> bool:
        """Whether the credential was missing, invalid or expired."""
        return self.status_code in (401, 403)


class SupabaseAuthClient:
    """Thin async client for the Supabase Auth REST API."""

    def __init__(self, url: str, anon_key: str, timeout: float = 30.0) -> None:
        """Initialize Supabase Auth client.

        Args:
            url: Supabase project URL (e.g. https://<project>.supabase.co)
            anon_key: Public anon key sent as the `apikey` header
            timeout: Request timeout in seconds
        """
        self.url = url.rstrip("/")
        self.anon_key = anon_key
        self.timeout = timeout

        self.user_url = f"{self.url}/auth/v1/user"
        self.logout_url = f"{self.url}/auth/v1/logout"

    def _headers(self, access_token: str) -> dict[str, str]:
        return {
            "apikey": self.anon_key,
            "Authorization": f"Bearer {access_token}",
        }

    async def get_user(self, access_token: str) -> dict[str, Any]:
        """Get the user owning an access token.

        Args:
            access_token: User access token

        Returns:
            Supabase user object

        Raises:
            SupabaseAuthError: If the token is rejected or the request fails
        """
        try:
            async with httpx.AsyncClient() as client:
                response = await client.get(
                    self.user_url,
                    headers=self._headers(access_token),
                    timeout=self.timeout,
                )
        except httpx.HTTPError as e:
            logfire.error("Supabase get user HTTP error", error=str(e))
            raise SupabaseAuthError(f"HTTP error fetching user: {e}")

        self._raise_for_status(response, "get user")
        return response.json()

    async def update_password(self, access_token: str, password: str) -> dict[str, Any]:
        """Set a new password for the user owning an access token.

        Args:
            access_token: User access token
            password: New password (never logged)

        Returns:
            Updated Supabase user object

        Raises:
            SupabaseAuthError: If the update is rejected or the request fails
        """
        try:
            async with httpx.AsyncClient() as client:
                response = await client.put(
                    self.user_url,
                    json={"password": password},
                    headers=self._headers(access_token),
                    timeout=self.timeout,
                )
        except httpx.HTTPError as e:
            logfire.error("Supabase password update HTTP error", error=str(e))
            raise SupabaseAuthError(f"HTTP error updating password: {e}")

        self._raise_for_status(response, "update password")
        logfire.info("Supabase password updated")
        return response.json()

    async def sign_out(self, access_token: str) -> None:
        """Revoke the session behind an access token.

        Raises:
            SupabaseAuthError: If the request fails
        """
        try:
            async with httpx.AsyncClient() as client:
                response = await client.post(
                    self.logout_url,
                    headers=self._headers(access_token),
                    timeout=self.timeout,
                )
        except httpx.HTTPError as e:
            logfire.error("Supabase logout HTTP error", error=str(e))
            raise SupabaseAuthError(f"HTTP error during logout: {e}")

        self._raise_for_status(response, "logout")

    def _raise_for_status(self, response: httpx.Response, action: str) -> None:
        if response.is_success:
            return

        message = _error_message(response)
        logfire.error(
            f"Supabase {action} failed",
            status_code=response.status_code,
            error=message,
        )
        raise SupabaseAuthError(message, status_code=response.status_code)


def _error_message(response: httpx.Response) -> str:
    # GoTrue has used all three keys across versions
    try:
        body = response.json()
    except ValueError:
        return response.text or f"HTTP {response.status_code}"
    if isinstance(body, dict):
        for key in ("msg", "error_description", "message"):
            if body.get(key):
                return str(body[key])
    return f"HTTP {response.status_code}"
