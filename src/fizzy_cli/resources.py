"""Row and detail formatters for every Fizzy resource kind.

Each resource kind maps to a :class:`ResourceView` holding:

* ``headers`` -- the column headers of its list table;
* ``rows`` -- ``bytes -> list[list[str]]``, decoding a list response into
  fixed-width rows;
* ``detail`` -- ``bytes -> str`` for single-resource ``get`` views, or
  ``None`` when the API has no such view.

Bodies are decoded into the records of :mod:`fizzy_cli.models` with
:class:`pydantic.TypeAdapter`, so malformed JSON and type mismatches both
surface as :class:`~fizzy_cli.exceptions.DecodeError`. Absent or ``null``
fields never fail: every column reads its value through one of the
``_text`` / ``_flag`` / ``_number`` helpers, which spell out the default.

Example::

    view = get_view("card")
    rows = view.rows(response.content)
    get_output().print_table(view.headers, rows)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Optional, TypeVar

from pydantic import TypeAdapter, ValidationError

from fizzy_cli.exceptions import DecodeError
from fizzy_cli.models import (
    Board,
    Card,
    Column,
    Comment,
    Identity,
    Notification,
    Tag,
    User,
)

T = TypeVar("T")

Rows = list[list[str]]


@dataclass(frozen=True)
class ResourceView:
    """How one resource kind is shown as a table and as a detail view."""

    headers: tuple[str, ...]
    rows: Callable[[bytes], Rows]
    detail: Optional[Callable[[bytes], str]] = None


# ------------------------------------------------------------------ #
# Decoding and field defaults
# ------------------------------------------------------------------ #


def _decode(adapter: TypeAdapter[T], body: bytes) -> T:
    try:
        return adapter.validate_json(body)
    except ValidationError as exc:
        raise DecodeError(f"invalid JSON response: {exc}") from exc


def _records(adapter: TypeAdapter[Optional[list[T]]], body: bytes) -> list[T]:
    """Decode a list page; a JSON ``null`` page holds no records."""
    return _decode(adapter, body) or []


def _text(value: Optional[str]) -> str:
    return value if value is not None else ""


def _flag(value: Optional[bool]) -> str:
    return "true" if value else "false"


def _yes_no(value: Optional[bool]) -> str:
    return "yes" if value else "no"


def _number(value: Optional[int]) -> str:
    return str(value if value is not None else 0)


def _name(record: Any) -> str:
    """Display name of a nested user/board, empty when the relation is absent."""
    if record is None:
        return ""
    return _text(record.name)


# ------------------------------------------------------------------ #
# List rows
# ------------------------------------------------------------------ #

_boards = TypeAdapter(Optional[list[Board]])
_cards = TypeAdapter(Optional[list[Card]])
_comments = TypeAdapter(Optional[list[Comment]])
_tags = TypeAdapter(Optional[list[Tag]])
_columns = TypeAdapter(Optional[list[Column]])
_users = TypeAdapter(Optional[list[User]])
_notifications = TypeAdapter(Optional[list[Notification]])
_identity = TypeAdapter(Identity)


def board_rows(body: bytes) -> Rows:
    return [
        [_text(b.id), _text(b.name), _flag(b.all_access), _text(b.created_at)]
        for b in _records(_boards, body)
    ]


def card_rows(body: bytes) -> Rows:
    return [
        [_number(c.number), _text(c.title), _text(c.status), _name(c.board), _text(c.last_active_at)]
        for c in _records(_cards, body)
    ]


def comment_rows(body: bytes) -> Rows:
    rows = []
    for c in _records(_comments, body):
        text = c.body.plain_text if c.body is not None else None
        rows.append([_text(c.id), _name(c.creator), _text(text), _text(c.created_at)])
    return rows


def tag_rows(body: bytes) -> Rows:
    return [[_text(t.id), _text(t.title)] for t in _records(_tags, body)]


def column_rows(body: bytes) -> Rows:
    return [[_text(c.id), _text(c.name), _text(c.color)] for c in _records(_columns, body)]


def user_rows(body: bytes) -> Rows:
    return [
        [_text(u.id), _text(u.name), _text(u.role), _text(u.email_address)]
        for u in _records(_users, body)
    ]


def notification_rows(body: bytes) -> Rows:
    rows = []
    for n in _records(_notifications, body):
        card_title = n.card.title if n.card is not None else None
        rows.append(
            [_text(n.id), _yes_no(n.read), _text(n.title), _text(card_title), _text(n.created_at)]
        )
    return rows


def account_rows(body: bytes) -> Rows:
    """Rows for the accounts listed in a ``/my/identity`` document."""
    identity = _decode(_identity, body)
    return [
        [_text(a.slug).removeprefix("/"), _text(a.name), _name(a.user)]
        for a in identity.accounts or []
    ]


# ------------------------------------------------------------------ #
# Detail views
# ------------------------------------------------------------------ #

_board = TypeAdapter(Board)
_card = TypeAdapter(Card)
_comment = TypeAdapter(Comment)
_column = TypeAdapter(Column)
_user = TypeAdapter(User)


def format_board(body: bytes) -> str:
    b = _decode(_board, body)
    return "\n".join(
        [
            f"ID: {_text(b.id)}",
            f"Name: {_text(b.name)}",
            f"All access: {_flag(b.all_access)}",
            f"Created: {_text(b.created_at)}",
            f"Creator: {_name(b.creator)}",
            f"URL: {_text(b.url)}",
        ]
    )


def format_card(body: bytes) -> str:
    """Full card view: fixed fields, then optional tags, dates, description and steps."""
    c = _decode(_card, body)
    lines = [
        f"ID: {_text(c.id)}",
        f"Number: {_number(c.number)}",
        f"Title: {_text(c.title)}",
        f"Status: {_text(c.status)}",
        f"Board: {_name(c.board)}",
        f"Creator: {_name(c.creator)}",
    ]
    if c.tags:
        lines.append(f"Tags: {', '.join(c.tags)}")
    if c.golden:
        lines.append("Golden: true")
    if c.last_active_at:
        lines.append(f"Last active: {c.last_active_at}")
    if c.created_at:
        lines.append(f"Created: {c.created_at}")
    if c.description:
        lines.extend(["", "Description:", c.description])
    if c.steps:
        lines.extend(["", "Steps:"])
        for step in c.steps:
            mark = "x" if step.completed else " "
            lines.append(f"- [{mark}] {_text(step.content)}")
    return "\n".join(lines).strip()


def format_comment(body: bytes) -> str:
    c = _decode(_comment, body)
    text = c.body.plain_text if c.body is not None else None
    return "\n".join(
        [
            f"ID: {_text(c.id)}",
            f"Creator: {_name(c.creator)}",
            f"Created: {_text(c.created_at)}",
            f"Body: {_text(text)}",
        ]
    )


def format_column(body: bytes) -> str:
    c = _decode(_column, body)
    return "\n".join(
        [
            f"ID: {_text(c.id)}",
            f"Name: {_text(c.name)}",
            f"Color: {_text(c.color)}",
            f"Created: {_text(c.created_at)}",
        ]
    )


def format_user(body: bytes) -> str:
    u = _decode(_user, body)
    return "\n".join(
        [
            f"ID: {_text(u.id)}",
            f"Name: {_text(u.name)}",
            f"Role: {_text(u.role)}",
            f"Email: {_text(u.email_address)}",
        ]
    )


# ------------------------------------------------------------------ #
# Dispatch table
# ------------------------------------------------------------------ #

RESOURCES: dict[str, ResourceView] = {
    "board": ResourceView(("ID", "NAME", "ALL_ACCESS", "CREATED"), board_rows, format_board),
    "card": ResourceView(("#", "TITLE", "STATUS", "BOARD", "LAST_ACTIVE"), card_rows, format_card),
    "comment": ResourceView(("ID", "CREATOR", "BODY", "CREATED"), comment_rows, format_comment),
    "tag": ResourceView(("ID", "TITLE"), tag_rows),
    "column": ResourceView(("ID", "NAME", "COLOR"), column_rows, format_column),
    "user": ResourceView(("ID", "NAME", "ROLE", "EMAIL"), user_rows, format_user),
    "notification": ResourceView(
        ("ID", "READ", "TITLE", "CARD", "CREATED"), notification_rows
    ),
    "account": ResourceView(("SLUG", "NAME", "USER"), account_rows),
}


def get_view(kind: str) -> ResourceView:
    """Look up the view for a resource kind.

    Raises:
        KeyError: If *kind* is not a known resource.
    """
    return RESOURCES[kind]
