"""Invitation token extraction from invitation links."""

from collections.abc import Iterable
from enum import Enum
from typing import NamedTuple
from urllib.parse import parse_qs, urlsplit

from yam.domain.error import TokenMissingError
from yam.domain.value import InvitationToken


class TokenSource(str, Enum):
    """Where in the link the token was found."""

    QUERY = "query"
    HASH_INVITE = "hash_invite"
    HASH_ACCESS_TOKEN = "hash_access_token"
    HASH_ALTERNATE = "hash_alternate"


class ResolvedToken(NamedTuple):
    token: InvitationToken
    source: TokenSource


ALTERNATE_HASH_KEYS = ("token", "invite_token")


class TokenResolver:
    """Extracts the invitation token from a link.

    Candidates, in priority order:
    1. query parameter (`?token=...`)
    2. fragment `access_token` with `type=invite`
    3. fragment `access_token` alone
    4. fragment `token` or `invite_token`

    Email clients sometimes glue a route segment onto the token
    (`abc/register`); known suffixes are stripped. Pure and synchronous.
    """

    def __init__(
        self,
        query_param: str = "token",
        route_suffixes: Iterable[str] = ("/register",),
    ) -> None:
        self.query_param = query_param
        self.route_suffixes = tuple(s for s in route_suffixes if s)

    def resolve(self, url: str) -> ResolvedToken:
        """Resolve the invitation token from a URL.

        Args:
            url: Full invitation link, or just its query/fragment part

        Returns:
            The normalized token and where it was found

        Raises:
            TokenMissingError: If no usable token is present
        """
        parts = urlsplit(url)
        query = parse_qs(parts.query)
        fragment = parse_qs(parts.fragment)

        token = self._first(query, self.query_param)
        if token:
            return self._build(token, TokenSource.QUERY)

        access_token = self._first(fragment, "access_token")
        if access_token:
            source = (
                TokenSource.HASH_INVITE
                if self._clean(self._first(fragment, "type") or "") == "invite"
                else TokenSource.HASH_ACCESS_TOKEN
            )
            return self._build(access_token, source)

        for key in ALTERNATE_HASH_KEYS:
            token = self._first(fragment, key)
            if token:
                return self._build(token, TokenSource.HASH_ALTERNATE)

        raise TokenMissingError()

    def session_credential(self, url: str) -> str | None:
        """Return the fragment access token an identity provider can use to
        establish the session, if the link carries one."""
        fragment = parse_qs(urlsplit(url).fragment)
        return self._first(fragment, "access_token")

    def _first(self, params: dict[str, list[str]], key: str) -> str | None:
        for value in params.get(key, []):
            cleaned = self._clean(value)
            if cleaned:
                return cleaned
        return None

    def _clean(self, value: str) -> str:
        value = value.strip()
        for suffix in self.route_suffixes:
            if value.endswith(suffix):
                value = value[: -len(suffix)]
        return value.strip()

    def _build(self, token: str, source: TokenSource) -> ResolvedToken:
        try:
            return ResolvedToken(InvitationToken(root=token), source)
        except ValueError:
            # Over-long garbage is no token at all
            raise TokenMissingError()
