"""Column commands -- manage the workflow columns of a board.

Columns belong to a board, so every command takes ``--board-id``.
"""

from __future__ import annotations

from typing import Any, Optional

import typer

from fizzy_cli.client import walk
from fizzy_cli.client.response import print_created, print_detail, print_done
from fizzy_cli.commands._common import open_account_client, require_text, usage_error
from fizzy_cli.resources import format_column, get_view


column_app = typer.Typer(no_args_is_help=True)

_BOARD_HELP = "Board ID (required)."


@column_app.command("list")
def column_list(
    ctx: typer.Context,
    board_id: Optional[str] = typer.Option(None, "--board-id", help=_BOARD_HELP),
) -> None:
    """List the columns of a board."""
    client, prefix = open_account_client(ctx)
    board = require_text(ctx, board_id, "--board-id")
    with client:
        walk(client, f"{prefix}/boards/{board}/columns", None, get_view("column"))


@column_app.command("get")
def column_get(
    ctx: typer.Context,
    column_id: str = typer.Argument(help="Column ID."),
    board_id: Optional[str] = typer.Option(None, "--board-id", help=_BOARD_HELP),
) -> None:
    """Show one column."""
    client, prefix = open_account_client(ctx)
    board = require_text(ctx, board_id, "--board-id")
    with client:
        response = client.request("GET", f"{prefix}/boards/{board}/columns/{column_id}")
    print_detail(response, format_column)


@column_app.command("create")
def column_create(
    ctx: typer.Context,
    board_id: Optional[str] = typer.Option(None, "--board-id", help=_BOARD_HELP),
    name: Optional[str] = typer.Option(None, "--name", help="Column name (required)."),
    color: Optional[str] = typer.Option(None, "--color", help="Column colour, e.g. var(--color-card-4)."),
) -> None:
    """Add a column to a board."""
    client, prefix = open_account_client(ctx)
    if not (board_id or "").strip() or not (name or "").strip():
        raise usage_error(ctx, "--board-id and --name are required")

    column: dict[str, Any] = {"name": name.strip()}
    if color and color.strip():
        column["color"] = color.strip()
    with client:
        response = client.request(
            "POST", f"{prefix}/boards/{board_id.strip()}/columns", json_body={"column": column}
        )
    print_created(response, "Column created")


@column_app.command("update")
def column_update(
    ctx: typer.Context,
    column_id: str = typer.Argument(help="Column ID."),
    board_id: Optional[str] = typer.Option(None, "--board-id", help=_BOARD_HELP),
    name: Optional[str] = typer.Option(None, "--name", help="New name."),
    color: Optional[str] = typer.Option(None, "--color", help="New colour."),
) -> None:
    """Rename or recolour a column."""
    client, prefix = open_account_client(ctx)
    board = require_text(ctx, board_id, "--board-id")

    column: dict[str, Any] = {}
    if name and name.strip():
        column["name"] = name.strip()
    if color and color.strip():
        column["color"] = color.strip()
    if not column:
        raise usage_error(ctx, "no fields to update")

    with client:
        response = client.request(
            "PUT", f"{prefix}/boards/{board}/columns/{column_id}", json_body={"column": column}
        )
    print_done(response, "Column updated")


@column_app.command("delete")
def column_delete(
    ctx: typer.Context,
    column_id: str = typer.Argument(help="Column ID."),
    board_id: Optional[str] = typer.Option(None, "--board-id", help=_BOARD_HELP),
) -> None:
    """Delete a column."""
    client, prefix = open_account_client(ctx)
    board = require_text(ctx, board_id, "--board-id")
    with client:
        response = client.request("DELETE", f"{prefix}/boards/{board}/columns/{column_id}")
    print_done(response, "Column deleted")
