"""Credential selection for outgoing requests.

This module defines the two foundational types of the auth subsystem:

- :class:`AuthMode` -- the three states an invocation can be in:
  unauthenticated, bearer token, or session cookie.
- :class:`AuthResult` -- a plain container for the HTTP headers and
  cookies produced for the selected mode.

The mode is decided once per invocation by :func:`resolve_auth` from the
already-merged :class:`~fizzy_cli.models.Settings` (flag > env > config).

See Also:
    :class:`~fizzy_cli.client.sync_client.FizzyClient`, which merges the
    result into every request.
"""

from __future__ import annotations

import enum
from typing import Optional

SESSION_COOKIE = "session_token"


class AuthMode(str, enum.Enum):
    """Which credential an invocation authenticates with."""

    NONE = "none"
    BEARER = "bearer"
    SESSION = "session"


class AuthResult:
    """Container for authentication artifacts to inject into HTTP requests.

    Args:
        mode: The credential kind these artifacts belong to.
        headers: HTTP headers to add (e.g. ``{"Authorization": "Bearer ..."}``).
        cookies: Cookies to add (serialised into a ``Cookie`` header by the
            client unless the caller supplies its own).

    Example::

        result = AuthResult(AuthMode.BEARER, headers={"Authorization": "Bearer tok123"})
        assert result.headers["Authorization"] == "Bearer tok123"
    """

    def __init__(
        self,
        mode: AuthMode = AuthMode.NONE,
        headers: dict[str, str] | None = None,
        cookies: dict[str, str] | None = None,
    ):
        self.mode = mode
        self.headers = headers or {}
        self.cookies = cookies or {}

    @property
    def is_authenticated(self) -> bool:
        return self.mode is not AuthMode.NONE

    def __repr__(self) -> str:
        return f"AuthResult(mode={self.mode.value!r})"


def resolve_auth(token: Optional[str], session_token: Optional[str]) -> AuthResult:
    """Select the credential to use.

    A bearer token always wins, even when a session token is also
    configured. Blank values count as absent.

    Args:
        token: Personal access token.
        session_token: Session token from a magic-link login.

    Returns:
        An :class:`AuthResult` for the selected mode.
    """
    token = (token or "").strip()
    session_token = (session_token or "").strip()
    if token:
        return AuthResult(AuthMode.BEARER, headers={"Authorization": f"Bearer {token}"})
    if session_token:
        return AuthResult(AuthMode.SESSION, cookies={SESSION_COOKIE: session_token})
    return AuthResult()
