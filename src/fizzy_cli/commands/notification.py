"""Notification commands -- the inbox."""

from __future__ import annotations

import typer

from fizzy_cli.client import walk
from fizzy_cli.client.response import print_done
from fizzy_cli.commands._common import open_account_client
from fizzy_cli.resources import get_view


notification_app = typer.Typer(no_args_is_help=True)


@notification_app.command("list")
def notification_list(
    ctx: typer.Context,
    unread: bool = typer.Option(False, "--unread", help="Only unread notifications."),
    all_pages: bool = typer.Option(False, "--all", help="Fetch every page."),
) -> None:
    """List notifications, newest first."""
    client, prefix = open_account_client(ctx)
    params = [("unread", "true")] if unread else None
    with client:
        walk(
            client,
            f"{prefix}/notifications",
            params,
            get_view("notification"),
            follow_all=all_pages,
        )


@notification_app.command("read")
def notification_read(
    ctx: typer.Context,
    notification_id: str = typer.Argument(help="Notification ID."),
) -> None:
    """Mark a notification as read."""
    client, prefix = open_account_client(ctx)
    with client:
        response = client.request("POST", f"{prefix}/notifications/{notification_id}/reading")
    print_done(response, "Notification marked read")


@notification_app.command("unread")
def notification_unread(
    ctx: typer.Context,
    notification_id: str = typer.Argument(help="Notification ID."),
) -> None:
    """Mark a notification as unread."""
    client, prefix = open_account_client(ctx)
    with client:
        response = client.request("DELETE", f"{prefix}/notifications/{notification_id}/reading")
    print_done(response, "Notification marked unread")


@notification_app.command("read-all")
def notification_read_all(ctx: typer.Context) -> None:
    """Mark every notification as read."""
    client, prefix = open_account_client(ctx)
    with client:
        response = client.request("POST", f"{prefix}/notifications/bulk_reading")
    print_done(response, "Notifications marked read")
