"""Account commands -- list reachable accounts and pick the default one."""

from __future__ import annotations

from pathlib import Path

import typer

from fizzy_cli.commands._common import get_settings, require_credentials, usage_error
from fizzy_cli.output import get_output


account_app = typer.Typer(no_args_is_help=True)


@account_app.command("list")
def account_list(ctx: typer.Context) -> None:
    """List the accounts the current credential can access.

    Example::

        fizzy-cli account list --plain
    """
    from fizzy_cli.client import FizzyClient
    from fizzy_cli.resources import get_view

    settings = require_credentials(ctx)
    with FizzyClient(settings) as client:
        response = client.request("GET", "/my/identity")

    output = get_output()
    if output.is_json:
        output.print_json_body(response.content, response.status_code)
        return
    view = get_view("account")
    output.print_table(view.headers, view.rows(response.content))


@account_app.command("set")
def account_set(
    ctx: typer.Context,
    slug: str = typer.Argument(help="Account slug, e.g. 897362094 or /897362094."),
) -> None:
    """Save the default account slug to the config file."""
    from fizzy_cli.config import normalize_account, save_config

    settings = get_settings(ctx)
    account = normalize_account(slug)
    if not account:
        raise usage_error(ctx, "account slug is required")

    save_config(Path(settings.config_path), settings.config.model_copy(update={"account": account}))
    get_output().print_data(f"Default account set to {account}")
