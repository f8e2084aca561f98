"""Tag commands."""

from __future__ import annotations

import typer

from fizzy_cli.client import walk
from fizzy_cli.commands._common import open_account_client
from fizzy_cli.resources import get_view


tag_app = typer.Typer(no_args_is_help=True)


@tag_app.command("list")
def tag_list(
    ctx: typer.Context,
    all_pages: bool = typer.Option(False, "--all", help="Fetch every page."),
) -> None:
    """List the tags defined in the account."""
    client, prefix = open_account_client(ctx)
    with client:
        walk(client, f"{prefix}/tags", None, get_view("tag"), follow_all=all_pages)
