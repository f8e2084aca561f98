"""Authentication for fizzy-cli.

Fizzy accepts two mutually exclusive credentials: a personal access token
sent as a bearer ``Authorization`` header, and a session token obtained
through the magic-link handshake and sent as a ``session_token`` cookie.

Public API:

- :class:`AuthMode` -- which credential (if any) an invocation uses.
- :class:`AuthResult` -- headers and cookies to inject into requests.
- :func:`resolve_auth` -- picks the credential, bearer token first.
- :func:`request_magic_link` / :func:`verify_magic_link` -- the two-step
  email login.

Example::

    from fizzy_cli.auth import resolve_auth

    result = resolve_auth(settings.token, settings.session_token)
    result.mode  # AuthMode.BEARER
"""

from fizzy_cli.auth.base import AuthMode, AuthResult, resolve_auth
from fizzy_cli.auth.magic_link import request_magic_link, verify_magic_link

__all__ = [
    "AuthMode",
    "AuthResult",
    "request_magic_link",
    "resolve_auth",
    "verify_magic_link",
]
