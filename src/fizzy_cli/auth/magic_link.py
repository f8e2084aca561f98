"""Magic-link (email code) login.

The handshake is two requests against an unauthenticated client:

1. ``POST /session`` with ``{"email_address": ...}`` returns a
   ``pending_authentication_token``.
2. ``POST /session/magic_link`` with ``{"code": ...}`` and the pending token
   in a ``Cookie`` header returns the ``session_token`` to persist.

Prompting for the code is left to the caller so this module stays free of
terminal I/O.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from pydantic import BaseModel, ValidationError

from fizzy_cli.exceptions import DecodeError, FizzyError

if TYPE_CHECKING:
    from fizzy_cli.client.sync_client import FizzyClient


class _PendingAuthentication(BaseModel):
    pending_authentication_token: str = ""


class _SessionAuthentication(BaseModel):
    session_token: str = ""


def request_magic_link(client: FizzyClient, email: str) -> str:
    """Ask the server to email a login code and return the pending token.

    Raises:
        DecodeError: If the response is not the expected JSON object.
        FizzyError: If the response does not carry a pending token.
    """
    response = client.request("POST", "/session", json_body={"email_address": email})
    try:
        pending = _PendingAuthentication.model_validate_json(response.content)
    except ValidationError as exc:
        raise DecodeError(f"invalid JSON response: {exc}") from exc
    token = pending.pending_authentication_token.strip()
    if not token:
        raise FizzyError("missing pending_authentication_token in response")
    return token


def verify_magic_link(client: FizzyClient, pending_token: str, code: str) -> str:
    """Exchange the emailed code for a session token.

    Raises:
        DecodeError: If the response is not the expected JSON object.
        FizzyError: If the response does not carry a session token.
    """
    response = client.request(
        "POST",
        "/session/magic_link",
        json_body={"code": code.strip()},
        headers={"Cookie": f"pending_authentication_token={pending_token}"},
    )
    try:
        session = _SessionAuthentication.model_validate_json(response.content)
    except ValidationError as exc:
        raise DecodeError(f"invalid JSON response: {exc}") from exc
    token = session.session_token.strip()
    if not token:
        raise FizzyError("missing session_token in response")
    return token
