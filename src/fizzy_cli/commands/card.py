"""Card commands -- the main workflow of fizzy-cli.

Provides the ``fizzy-cli card`` sub-command group: listing with filters and
pagination, CRUD, and the single-request actions that move a card through
its lifecycle (close, reopen, not now, triage, tagging, assignment and
watching).

Cards are addressed by their per-account **number**, not their ID.

Typical workflow::

    fizzy-cli card list --board-id 03f5v9zkft --all --plain
    fizzy-cli card create --board-id 03f5v9zkft --title "Fix login"
    fizzy-cli card triage 42 --column-id 03f5w1ab2c
    fizzy-cli card close 42
"""

from __future__ import annotations

from typing import Any, Optional

import typer

from fizzy_cli.client import walk
from fizzy_cli.client.response import print_body_or_done, print_created, print_detail, print_done
from fizzy_cli.commands._common import (
    list_params,
    multipart_fields,
    multipart_file,
    open_account_client,
    require_text,
    usage_error,
)
from fizzy_cli.resources import format_card, get_view


card_app = typer.Typer(no_args_is_help=True)

_NUMBER_HELP = "Card number."


@card_app.command("list")
def card_list(
    ctx: typer.Context,
    board_ids: Optional[list[str]] = typer.Option(None, "--board-id", help="Board ID (repeatable)."),
    tag_ids: Optional[list[str]] = typer.Option(None, "--tag-id", help="Tag ID (repeatable)."),
    assignee_ids: Optional[list[str]] = typer.Option(
        None, "--assignee-id", help="Assignee user ID (repeatable)."
    ),
    creator_ids: Optional[list[str]] = typer.Option(
        None, "--creator-id", help="Creator user ID (repeatable)."
    ),
    closer_ids: Optional[list[str]] = typer.Option(
        None, "--closer-id", help="Closer user ID (repeatable)."
    ),
    card_ids: Optional[list[str]] = typer.Option(None, "--card-id", help="Card ID (repeatable)."),
    terms: Optional[list[str]] = typer.Option(None, "--term", help="Search term (repeatable)."),
    indexed_by: Optional[str] = typer.Option(
        None, "--indexed-by", help="Index, e.g. all, closed, not_now, golden."
    ),
    sorted_by: Optional[str] = typer.Option(None, "--sorted-by", help="Sort order, e.g. newest."),
    assignment_status: Optional[str] = typer.Option(
        None, "--assignment-status", help="Assignment status, e.g. unassigned."
    ),
    creation: Optional[str] = typer.Option(None, "--creation", help="Creation window, e.g. thisweek."),
    closure: Optional[str] = typer.Option(None, "--closure", help="Closure window, e.g. lastmonth."),
    all_pages: bool = typer.Option(False, "--all", help="Fetch every page."),
) -> None:
    """List cards matching the given filters.

    Repeatable filters become array query parameters (``board_ids[]`` and
    so on). With ``--all`` every page is fetched: table output is printed
    page by page, JSON output is printed once as a single array.

    Example::

        fizzy-cli card list --board-id 03f5v9zkft --term login --all
    """
    client, prefix = open_account_client(ctx)

    params: list[tuple[str, str]] = []
    params += list_params("board_ids[]", board_ids)
    params += list_params("tag_ids[]", tag_ids)
    params += list_params("assignee_ids[]", assignee_ids)
    params += list_params("creator_ids[]", creator_ids)
    params += list_params("closer_ids[]", closer_ids)
    params += list_params("card_ids[]", card_ids)
    params += list_params("terms[]", terms)
    for key, value in (
        ("indexed_by", indexed_by),
        ("sorted_by", sorted_by),
        ("assignment_status", assignment_status),
        ("creation", creation),
        ("closure", closure),
    ):
        if value and value.strip():
            params.append((key, value.strip()))

    with client:
        walk(client, f"{prefix}/cards", params, get_view("card"), follow_all=all_pages)


@card_app.command("get")
def card_get(
    ctx: typer.Context,
    number: str = typer.Argument(help=_NUMBER_HELP),
) -> None:
    """Show one card with its description and steps."""
    client, prefix = open_account_client(ctx)
    with client:
        response = client.request("GET", f"{prefix}/cards/{number}")
    print_detail(response, format_card)


def _card_fields(
    title: Optional[str],
    description: Optional[str],
    status: Optional[str],
    tag_ids: Optional[list[str]],
) -> dict[str, Any]:
    card: dict[str, Any] = {}
    if title and title.strip():
        card["title"] = title.strip()
    if description and description.strip():
        card["description"] = description
    if status and status.strip():
        card["status"] = status
    if tag_ids:
        card["tag_ids"] = list(tag_ids)
    return card


def _multipart_card(card: dict[str, Any], image: str) -> tuple[dict[str, Any], dict[str, Any]]:
    fields = {("tag_ids[]" if key == "tag_ids" else key): value for key, value in card.items()}
    return multipart_fields("card", fields), multipart_file("card", "image", image)


@card_app.command("create")
def card_create(
    ctx: typer.Context,
    board_id: Optional[str] = typer.Option(None, "--board-id", help="Board ID (required)."),
    title: Optional[str] = typer.Option(None, "--title", help="Card title (required)."),
    description: Optional[str] = typer.Option(None, "--description", help="Card description."),
    status: Optional[str] = typer.Option(None, "--status", help="Initial status, e.g. drafted."),
    tag_ids: Optional[list[str]] = typer.Option(None, "--tag-id", help="Tag ID (repeatable)."),
    image: Optional[str] = typer.Option(None, "--image", help="Header image file to upload."),
) -> None:
    """Create a card on a board and print its location.

    With ``--image`` the card is sent as ``multipart/form-data``.
    """
    client, prefix = open_account_client(ctx)
    if not (board_id or "").strip() or not (title or "").strip():
        raise usage_error(ctx, "--board-id and --title are required")

    path = f"{prefix}/boards/{board_id.strip()}/cards"
    card = _card_fields(title, description, status, tag_ids)

    with client:
        if image and image.strip():
            data, files = _multipart_card(card, image.strip())
            response = client.request("POST", path, data=data, files=files)
        else:
            response = client.request("POST", path, json_body={"card": card})
    print_created(response, "Card created")


@card_app.command("update")
def card_update(
    ctx: typer.Context,
    number: str = typer.Argument(help=_NUMBER_HELP),
    title: Optional[str] = typer.Option(None, "--title", help="New title."),
    description: Optional[str] = typer.Option(None, "--description", help="New description."),
    status: Optional[str] = typer.Option(None, "--status", help="New status."),
    tag_ids: Optional[list[str]] = typer.Option(None, "--tag-id", help="Tag ID (repeatable)."),
    image: Optional[str] = typer.Option(None, "--image", help="Header image file to upload."),
) -> None:
    """Update the given fields of a card.

    Raises:
        UsageError: If no field and no image is given.
    """
    client, prefix = open_account_client(ctx)
    path = f"{prefix}/cards/{number}"
    card = _card_fields(title, description, status, tag_ids)

    if image and image.strip():
        data, files = _multipart_card(card, image.strip())
        with client:
            response = client.request("PUT", path, data=data, files=files)
    else:
        if not card:
            raise usage_error(ctx, "no fields to update")
        with client:
            response = client.request("PUT", path, json_body={"card": card})
    print_body_or_done(response, "Card updated")


@card_app.command("delete")
def card_delete(
    ctx: typer.Context,
    number: str = typer.Argument(help=_NUMBER_HELP),
) -> None:
    """Delete a card."""
    _card_action(ctx, number, "DELETE", "", "Card deleted")


def _card_action(
    ctx: typer.Context,
    number: str,
    method: str,
    suffix: str,
    message: str,
    json_body: Optional[dict[str, Any]] = None,
) -> None:
    client, prefix = open_account_client(ctx)
    with client:
        response = client.request(method, f"{prefix}/cards/{number}{suffix}", json_body=json_body)
    print_done(response, message)


@card_app.command("close")
def card_close(ctx: typer.Context, number: str = typer.Argument(help=_NUMBER_HELP)) -> None:
    """Close a card."""
    _card_action(ctx, number, "POST", "/closure", "Card closed")


@card_app.command("reopen")
def card_reopen(ctx: typer.Context, number: str = typer.Argument(help=_NUMBER_HELP)) -> None:
    """Reopen a closed card."""
    _card_action(ctx, number, "DELETE", "/closure", "Card reopened")


@card_app.command("not-now")
def card_not_now(ctx: typer.Context, number: str = typer.Argument(help=_NUMBER_HELP)) -> None:
    """Move a card to Not Now."""
    _card_action(ctx, number, "POST", "/not_now", "Card moved to Not Now")


@card_app.command("triage")
def card_triage(
    ctx: typer.Context,
    number: str = typer.Argument(help=_NUMBER_HELP),
    column_id: Optional[str] = typer.Option(None, "--column-id", help="Target column ID (required)."),
) -> None:
    """Move a card into a column."""
    column = require_text(ctx, column_id, "--column-id")
    _card_action(
        ctx, number, "POST", "/triage", "Card moved into column", json_body={"column_id": column}
    )


@card_app.command("untriage")
def card_untriage(ctx: typer.Context, number: str = typer.Argument(help=_NUMBER_HELP)) -> None:
    """Send a card back to triage."""
    _card_action(ctx, number, "DELETE", "/triage", "Card moved back to triage")


@card_app.command("tag")
def card_tag(
    ctx: typer.Context,
    number: str = typer.Argument(help=_NUMBER_HELP),
    title: Optional[str] = typer.Option(None, "--title", help="Tag title; a leading # is dropped."),
) -> None:
    """Toggle a tag on a card."""
    tag_title = require_text(ctx, title, "--title").removeprefix("#")
    _card_action(
        ctx, number, "POST", "/taggings", "Tag toggled", json_body={"tag_title": tag_title}
    )


@card_app.command("assign")
def card_assign(
    ctx: typer.Context,
    number: str = typer.Argument(help=_NUMBER_HELP),
    assignee_id: Optional[str] = typer.Option(None, "--assignee-id", help="User ID (required)."),
) -> None:
    """Toggle an assignee on a card."""
    assignee = require_text(ctx, assignee_id, "--assignee-id")
    _card_action(
        ctx,
        number,
        "POST",
        "/assignments",
        "Assignment toggled",
        json_body={"assignee_id": assignee},
    )


@card_app.command("watch")
def card_watch(ctx: typer.Context, number: str = typer.Argument(help=_NUMBER_HELP)) -> None:
    """Subscribe to a card."""
    _card_action(ctx, number, "POST", "/watch", "Subscribed to card")


@card_app.command("unwatch")
def card_unwatch(ctx: typer.Context, number: str = typer.Argument(help=_NUMBER_HELP)) -> None:
    """Unsubscribe from a card."""
    _card_action(ctx, number, "DELETE", "/watch", "Unsubscribed from card")
