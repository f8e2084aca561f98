"""Helpers shared by the command modules.

Every account-scoped command follows the same shape::

    client, prefix = open_account_client(ctx)
    with client:
        response = client.request("GET", f"{prefix}/boards/{board_id}")
    print_detail(response, format_board)

Validation failures are raised as :class:`~fizzy_cli.exceptions.UsageError`
through :func:`usage_error`, which attaches the usage line of the command
being run so the error handler in :mod:`fizzy_cli.app` can print it.
"""

from __future__ import annotations

import mimetypes
import sys
from pathlib import Path
from typing import Any, Iterable, Optional

import typer

from fizzy_cli.auth import resolve_auth
from fizzy_cli.client import FizzyClient
from fizzy_cli.exceptions import FizzyError, UsageError
from fizzy_cli.models import Settings


def usage_error(ctx: typer.Context, message: str) -> UsageError:
    """Build a :class:`UsageError` carrying the usage line of *ctx*'s command."""
    return UsageError(message, usage=ctx.get_usage())


def get_settings(ctx: typer.Context) -> Settings:
    """Return the settings resolved by the root callback."""
    return ctx.obj["settings"]


def require_credentials(ctx: typer.Context) -> Settings:
    settings = get_settings(ctx)
    if not resolve_auth(settings.token, settings.session_token).is_authenticated:
        raise usage_error(
            ctx,
            "missing credentials; set --token or FIZZY_TOKEN, or run 'fizzy-cli auth login'",
        )
    return settings


def require_account(ctx: typer.Context) -> str:
    settings = get_settings(ctx)
    if not settings.account:
        raise usage_error(
            ctx,
            "missing account slug; set --account or FIZZY_ACCOUNT, or run 'fizzy-cli account set'",
        )
    return settings.account


def open_account_client(ctx: typer.Context) -> tuple[FizzyClient, str]:
    """Check credentials and account, then return a client and the ``/<account>`` prefix.

    The client is not yet entered; use it in a ``with`` block.

    Raises:
        UsageError: If no credential or no account is configured.
    """
    settings = require_credentials(ctx)
    account = require_account(ctx)
    return FizzyClient(settings), f"/{account}"


def require_text(ctx: typer.Context, value: Optional[str], flag: str) -> str:
    """Return *value* stripped, or raise a usage error naming *flag*."""
    text = (value or "").strip()
    if not text:
        raise usage_error(ctx, f"{flag} is required")
    return text


def list_params(key: str, values: Optional[Iterable[str]]) -> list[tuple[str, str]]:
    """Repeat *key* once per non-blank value, e.g. ``board_ids[]``."""
    return [(key, v.strip()) for v in values or [] if v.strip()]


# --- Multipart bodies ---


def multipart_fields(root: str, fields: dict[str, Any]) -> dict[str, Any]:
    """Nest form fields under *root*: ``title`` becomes ``card[title]``.

    Keys ending in ``[]`` keep the suffix outside the brackets
    (``tag_ids[]`` becomes ``card[tag_ids][]``) and take a list value.
    """
    nested: dict[str, Any] = {}
    for key, value in fields.items():
        if key.endswith("[]"):
            nested[f"{root}[{key[:-2]}][]"] = list(value)
        else:
            nested[f"{root}[{key}]"] = value
    return nested


def multipart_file(root: str, field: str, path: str) -> dict[str, tuple[str, bytes, str]]:
    """Read *path* into an httpx ``files`` mapping under ``root[field]``.

    Raises:
        FizzyError: If the file cannot be read.
    """
    file_path = Path(path).expanduser()
    try:
        content = file_path.read_bytes()
    except OSError as exc:
        raise FizzyError(f"cannot read {path}: {exc}") from exc
    content_type = mimetypes.guess_type(file_path.name)[0] or "application/octet-stream"
    return {f"{root}[{field}]": (file_path.name, content, content_type)}


# --- Secrets ---


def stdin_is_tty() -> bool:
    return sys.stdin.isatty()


def read_secret(label: str) -> str:
    """Prompt for a hidden value on a terminal, otherwise read all of stdin."""
    if stdin_is_tty():
        value = typer.prompt(label, hide_input=True, default="", show_default=False)
        return value.strip()
    return sys.stdin.read().strip()
