"""Auth commands -- store, clear and check credentials.

Provides the ``fizzy-cli auth`` sub-command group. Two kinds of credential
are supported:

* a **personal access token**, sent as ``Authorization: Bearer ...``;
* a **session token** obtained through the emailed magic-link code,
  sent as the ``session_token`` cookie.

Storing one kind always clears the other, so the config file never holds
both. Typical workflow::

    fizzy-cli auth login --token "$FIZZY_PAT"
    fizzy-cli auth login --email me@example.com
    fizzy-cli auth status
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer

from fizzy_cli.commands._common import get_settings, read_secret, stdin_is_tty, usage_error
from fizzy_cli.output import get_output


auth_app = typer.Typer(no_args_is_help=True)


@auth_app.command("login")
def auth_login(
    ctx: typer.Context,
    token: Optional[str] = typer.Option(None, "--token", help="Personal access token."),
    email: Optional[str] = typer.Option(None, "--email", help="Email address for magic-link login."),
    code: Optional[str] = typer.Option(None, "--code", help="Magic-link code from the email."),
) -> None:
    """Save credentials to the config file.

    Without ``--email`` a personal access token is stored. It is taken from
    ``--token``, or read from a hidden prompt on a terminal, or from stdin
    when piped.

    With ``--email`` a login code is emailed and exchanged for a session
    token. The code is taken from ``--code`` or prompted for; when stdin is
    not a terminal ``--code`` is required.

    Raises:
        UsageError: When ``--token`` and ``--email`` are combined, or no
            token or code is supplied.

    Example::

        fizzy-cli auth login --token abc123
        echo abc123 | fizzy-cli auth login
        fizzy-cli auth login --email me@example.com --code 123456
    """
    from fizzy_cli.config import save_config

    settings = get_settings(ctx)
    token = (token or "").strip()
    email = (email or "").strip()

    if token and email:
        raise usage_error(ctx, "--token and --email cannot be used together")

    if email:
        session_token = _magic_link_login(ctx, email, (code or "").strip())
        config = settings.config.model_copy(update={"session_token": session_token, "token": ""})
        save_config(Path(settings.config_path), config)
        get_output().print_data(f"Session saved to {settings.config_path}")
        return

    if not token:
        token = read_secret("Token")
    if not token:
        raise usage_error(ctx, "token is required")

    config = settings.config.model_copy(update={"token": token, "session_token": ""})
    save_config(Path(settings.config_path), config)
    get_output().print_data(f"Token saved to {settings.config_path}")


def _magic_link_login(ctx: typer.Context, email: str, code: str) -> str:
    """Run the two-step magic-link handshake and return the session token."""
    from fizzy_cli.auth import AuthResult, request_magic_link, verify_magic_link
    from fizzy_cli.client import FizzyClient

    settings = get_settings(ctx)
    with FizzyClient(settings, auth=AuthResult()) as client:
        pending = request_magic_link(client, email)
        get_output().info(f"A login code was sent to {email}.")

        if not code:
            if not stdin_is_tty():
                raise usage_error(ctx, "--code is required when not running in a TTY")
            code = read_secret("Magic link code")
        if not code:
            raise usage_error(ctx, "magic link code is required")

        return verify_magic_link(client, pending, code)


@auth_app.command("logout")
def auth_logout(ctx: typer.Context) -> None:
    """Remove the stored token and session token.

    The base URL and default account are kept.
    """
    from fizzy_cli.config import save_config

    settings = get_settings(ctx)
    config = settings.config.model_copy(update={"token": "", "session_token": ""})
    save_config(Path(settings.config_path), config)
    get_output().print_data("Credentials cleared.")


@auth_app.command("status")
def auth_status(ctx: typer.Context) -> None:
    """Show which credential is in use and the accounts it can reach.

    Calls ``GET /my/identity``. With no credential configured this is not an
    error: the command reports that you are not logged in and exits 0.
    """
    from fizzy_cli.auth import AuthMode, resolve_auth
    from fizzy_cli.client import FizzyClient
    from fizzy_cli.resources import get_view

    settings = get_settings(ctx)
    output = get_output()
    auth = resolve_auth(settings.token, settings.session_token)
    if not auth.is_authenticated:
        output.print_data("Not logged in (no credentials configured).")
        return

    with FizzyClient(settings, auth=auth) as client:
        response = client.request("GET", "/my/identity")

    if output.is_json:
        output.print_json_body(response.content, response.status_code)
        return

    view = get_view("account")
    rows = view.rows(response.content)
    kind = "personal access token" if auth.mode is AuthMode.BEARER else "session token"
    output.print_data(f"Authenticated using {kind}. Accessible accounts:")
    output.print_table(view.headers, rows)
