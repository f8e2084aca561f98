"""User commands -- people in the account."""

from __future__ import annotations

from typing import Optional

import typer

from fizzy_cli.client import walk
from fizzy_cli.client.response import print_detail, print_done
from fizzy_cli.commands._common import (
    multipart_fields,
    multipart_file,
    open_account_client,
    usage_error,
)
from fizzy_cli.resources import format_user, get_view


user_app = typer.Typer(no_args_is_help=True)


@user_app.command("list")
def user_list(
    ctx: typer.Context,
    all_pages: bool = typer.Option(False, "--all", help="Fetch every page."),
) -> None:
    """List the users of the account."""
    client, prefix = open_account_client(ctx)
    with client:
        walk(client, f"{prefix}/users", None, get_view("user"), follow_all=all_pages)


@user_app.command("get")
def user_get(
    ctx: typer.Context,
    user_id: str = typer.Argument(help="User ID."),
) -> None:
    """Show one user."""
    client, prefix = open_account_client(ctx)
    with client:
        response = client.request("GET", f"{prefix}/users/{user_id}")
    print_detail(response, format_user)


@user_app.command("update")
def user_update(
    ctx: typer.Context,
    user_id: str = typer.Argument(help="User ID."),
    name: Optional[str] = typer.Option(None, "--name", help="New display name."),
    avatar: Optional[str] = typer.Option(None, "--avatar", help="Avatar image file to upload."),
) -> None:
    """Change a user's name and/or avatar.

    With ``--avatar`` the request is sent as ``multipart/form-data``.
    """
    client, prefix = open_account_client(ctx)
    name = (name or "").strip()
    avatar = (avatar or "").strip()
    if not name and not avatar:
        raise usage_error(ctx, "--name or --avatar is required")

    path = f"{prefix}/users/{user_id}"
    with client:
        if avatar:
            response = client.request(
                "PUT",
                path,
                data=multipart_fields("user", {"name": name}),
                files=multipart_file("user", "avatar", avatar),
            )
        else:
            response = client.request("PUT", path, json_body={"user": {"name": name}})
    print_done(response, "User updated")


@user_app.command("deactivate")
def user_deactivate(
    ctx: typer.Context,
    user_id: str = typer.Argument(help="User ID."),
) -> None:
    """Deactivate a user."""
    client, prefix = open_account_client(ctx)
    with client:
        response = client.request("DELETE", f"{prefix}/users/{user_id}")
    print_done(response, "User deactivated")
