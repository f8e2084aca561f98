"""Board commands -- list, show, create, update and delete boards."""

from __future__ import annotations

from typing import Any, Optional

import typer

from fizzy_cli.client import walk
from fizzy_cli.client.response import print_created, print_detail, print_done
from fizzy_cli.commands._common import open_account_client, require_text, usage_error
from fizzy_cli.resources import format_board, get_view


board_app = typer.Typer(no_args_is_help=True)


@board_app.command("list")
def board_list(
    ctx: typer.Context,
    all_pages: bool = typer.Option(False, "--all", help="Fetch every page."),
) -> None:
    """List boards in the account."""
    client, prefix = open_account_client(ctx)
    with client:
        walk(client, f"{prefix}/boards", None, get_view("board"), follow_all=all_pages)


@board_app.command("get")
def board_get(
    ctx: typer.Context,
    board_id: str = typer.Argument(help="Board ID."),
) -> None:
    """Show one board."""
    client, prefix = open_account_client(ctx)
    with client:
        response = client.request("GET", f"{prefix}/boards/{board_id}")
    print_detail(response, format_board)


@board_app.command("create")
def board_create(
    ctx: typer.Context,
    name: Optional[str] = typer.Option(None, "--name", help="Board name (required)."),
    all_access: bool = typer.Option(
        True, "--all-access/--no-all-access", help="Give every account user access."
    ),
    auto_postpone_days: int = typer.Option(
        0, "--auto-postpone-days", help="Move idle cards to Not Now after N days."
    ),
    public_description: Optional[str] = typer.Option(
        None, "--public-description", help="Description shown on the public page."
    ),
) -> None:
    """Create a board and print its location.

    Example::

        fizzy-cli board create --name Roadmap --no-all-access
    """
    client, prefix = open_account_client(ctx)
    board: dict[str, Any] = {"name": require_text(ctx, name, "--name"), "all_access": all_access}
    if auto_postpone_days > 0:
        board["auto_postpone_period"] = auto_postpone_days
    if public_description and public_description.strip():
        board["public_description"] = public_description

    with client:
        response = client.request("POST", f"{prefix}/boards", json_body={"board": board})
    print_created(response, "Board created")


@board_app.command("update")
def board_update(
    ctx: typer.Context,
    board_id: str = typer.Argument(help="Board ID."),
    name: Optional[str] = typer.Option(None, "--name", help="New board name."),
    all_access: Optional[bool] = typer.Option(
        None, "--all-access/--no-all-access", help="Grant or revoke access for every user."
    ),
    auto_postpone_days: int = typer.Option(
        0, "--auto-postpone-days", help="Move idle cards to Not Now after N days."
    ),
    public_description: Optional[str] = typer.Option(
        None, "--public-description", help="Description shown on the public page."
    ),
    user_ids: Optional[list[str]] = typer.Option(
        None, "--user-id", help="User with access (repeatable)."
    ),
) -> None:
    """Update the given fields of a board.

    Raises:
        UsageError: If no field is given.
    """
    client, prefix = open_account_client(ctx)
    board: dict[str, Any] = {}
    if name and name.strip():
        board["name"] = name.strip()
    if all_access is not None:
        board["all_access"] = all_access
    if auto_postpone_days > 0:
        board["auto_postpone_period"] = auto_postpone_days
    if public_description and public_description.strip():
        board["public_description"] = public_description
    if user_ids:
        board["user_ids"] = list(user_ids)
    if not board:
        raise usage_error(ctx, "no fields to update")

    with client:
        response = client.request("PUT", f"{prefix}/boards/{board_id}", json_body={"board": board})
    print_done(response, "Board updated")


@board_app.command("delete")
def board_delete(
    ctx: typer.Context,
    board_id: str = typer.Argument(help="Board ID."),
) -> None:
    """Delete a board."""
    client, prefix = open_account_client(ctx)
    with client:
        response = client.request("DELETE", f"{prefix}/boards/{board_id}")
    print_done(response, "Board deleted")
