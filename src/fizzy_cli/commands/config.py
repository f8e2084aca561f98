"""Config commands -- view and modify the persisted configuration.

Provides the ``fizzy-cli config`` sub-command group. Only the values stored
in the config file are shown; secrets are reported as set or unset, never
printed.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer

from fizzy_cli.commands._common import get_settings, usage_error
from fizzy_cli.output import get_output


config_app = typer.Typer(no_args_is_help=True)


@config_app.command("show")
def config_show(ctx: typer.Context) -> None:
    """Show the config file path and its contents.

    Example::

        fizzy-cli config show
        fizzy-cli config show --json
    """
    from fizzy_cli.config import first_non_empty

    settings = get_settings(ctx)
    config = settings.config
    base_url = first_non_empty(config.base_url, settings.base_url)
    output = get_output()

    if output.is_json:
        output.print_json(
            {
                "base_url": base_url,
                "account": config.account,
                "token_set": bool(config.token),
                "session_token_set": bool(config.session_token),
                "config_path": settings.config_path,
            }
        )
        return

    lines = [f"Config path: {settings.config_path}", f"Base URL: {base_url}"]
    if config.account:
        lines.append(f"Account: {config.account}")
    lines.append(f"Token set: {str(bool(config.token)).lower()}")
    lines.append(f"Session token set: {str(bool(config.session_token)).lower()}")
    output.print_data("\n".join(lines))


@config_app.command("set")
def config_set(
    ctx: typer.Context,
    base_url: Optional[str] = typer.Option(None, "--base-url", help="API base URL to save."),
    account: Optional[str] = typer.Option(None, "--account", help="Default account slug to save."),
) -> None:
    """Update the base URL and/or default account.

    At least one option is required; otherwise the file is left untouched
    and the command exits with status 2.

    Example::

        fizzy-cli config set --base-url https://fizzy.example.com
        fizzy-cli config set --account 897362094
    """
    from fizzy_cli.config import normalize_account, save_config

    settings = get_settings(ctx)
    base_url = (base_url or "").strip()
    account = (account or "").strip()
    if not base_url and not account:
        raise usage_error(ctx, "at least one of --base-url or --account is required")

    updates = {}
    if base_url:
        updates["base_url"] = base_url
    if account:
        updates["account"] = normalize_account(account)

    save_config(Path(settings.config_path), settings.config.model_copy(update=updates))
    get_output().print_data("Config updated.")
