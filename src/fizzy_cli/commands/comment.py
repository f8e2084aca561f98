"""Comment commands -- read and write the comments on a card."""

from __future__ import annotations

from typing import Optional

import typer

from fizzy_cli.client import walk
from fizzy_cli.client.response import print_body_or_done, print_created, print_detail, print_done
from fizzy_cli.commands._common import open_account_client, usage_error
from fizzy_cli.resources import format_comment, get_view


comment_app = typer.Typer(no_args_is_help=True)


def _require_body(ctx: typer.Context, body: Optional[str]) -> str:
    if not (body or "").strip():
        raise usage_error(ctx, "--body is required")
    return body


@comment_app.command("list")
def comment_list(
    ctx: typer.Context,
    number: str = typer.Argument(help="Card number."),
    all_pages: bool = typer.Option(False, "--all", help="Fetch every page."),
) -> None:
    """List the comments on a card."""
    client, prefix = open_account_client(ctx)
    with client:
        walk(
            client,
            f"{prefix}/cards/{number}/comments",
            None,
            get_view("comment"),
            follow_all=all_pages,
        )


@comment_app.command("get")
def comment_get(
    ctx: typer.Context,
    number: str = typer.Argument(help="Card number."),
    comment_id: str = typer.Argument(help="Comment ID."),
) -> None:
    """Show one comment."""
    client, prefix = open_account_client(ctx)
    with client:
        response = client.request("GET", f"{prefix}/cards/{number}/comments/{comment_id}")
    print_detail(response, format_comment)


@comment_app.command("create")
def comment_create(
    ctx: typer.Context,
    number: str = typer.Argument(help="Card number."),
    body: Optional[str] = typer.Option(None, "--body", help="Comment text (required)."),
) -> None:
    """Add a comment to a card."""
    client, prefix = open_account_client(ctx)
    payload = {"comment": {"body": _require_body(ctx, body)}}
    with client:
        response = client.request("POST", f"{prefix}/cards/{number}/comments", json_body=payload)
    print_created(response, "Comment created")


@comment_app.command("update")
def comment_update(
    ctx: typer.Context,
    number: str = typer.Argument(help="Card number."),
    comment_id: str = typer.Argument(help="Comment ID."),
    body: Optional[str] = typer.Option(None, "--body", help="New comment text (required)."),
) -> None:
    """Replace the text of a comment."""
    client, prefix = open_account_client(ctx)
    payload = {"comment": {"body": _require_body(ctx, body)}}
    with client:
        response = client.request(
            "PUT", f"{prefix}/cards/{number}/comments/{comment_id}", json_body=payload
        )
    print_body_or_done(response, "Comment updated")


@comment_app.command("delete")
def comment_delete(
    ctx: typer.Context,
    number: str = typer.Argument(help="Card number."),
    comment_id: str = typer.Argument(help="Comment ID."),
) -> None:
    """Delete a comment."""
    client, prefix = open_account_client(ctx)
    with client:
        response = client.request("DELETE", f"{prefix}/cards/{number}/comments/{comment_id}")
    print_done(response, "Comment deleted")
