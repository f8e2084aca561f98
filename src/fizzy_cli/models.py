"""Canonical Pydantic models shared across all fizzy-cli modules.

The models fall into two groups:

**Configuration models** -- the persisted :class:`Config` file and the
:class:`Settings` resolved from it once per invocation.

**Resource records** -- read-only projections of API documents:
:class:`Board`, :class:`Card`, :class:`Comment`, :class:`Tag`,
:class:`Column`, :class:`User`, :class:`Notification` and
:class:`Identity`. Every field is optional and defaults to ``None``, so
partially populated documents (and explicit ``null`` values) decode; the row
formatters in :mod:`fizzy_cli.resources` choose the display value for an
absent field. Unknown keys are ignored.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_BASE_URL = "https://app.fizzy.do"


# --- Configuration ---


class Config(BaseModel):
    """The on-disk configuration file.

    Example::

        {
          "base_url": "https://app.fizzy.do",
          "token": "",
          "session_token": "",
          "account": "897362094"
        }
    """

    base_url: str = Field(default="", description="API base URL")
    token: str = Field(default="", description="Personal access token")
    session_token: str = Field(default="", description="Magic-link session token")
    account: str = Field(default="", description="Default account slug")


class Settings(BaseModel):
    """Effective settings for one invocation, merged from flags, env and config.

    Built by :func:`~fizzy_cli.config.resolve_settings` and never mutated
    afterwards.
    """

    model_config = ConfigDict(frozen=True)

    base_url: str = DEFAULT_BASE_URL
    token: str = ""
    session_token: str = ""
    account: str = ""
    config_path: str = ""
    config: Config = Field(default_factory=Config)


# --- Resource records ---


class _Record(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")


class User(_Record):
    id: Optional[str] = None
    name: Optional[str] = None
    role: Optional[str] = None
    email_address: Optional[str] = None


class Board(_Record):
    id: Optional[str] = None
    name: Optional[str] = None
    all_access: Optional[bool] = None
    created_at: Optional[str] = None
    creator: Optional[User] = None
    url: Optional[str] = None


class Step(_Record):
    id: Optional[str] = None
    content: Optional[str] = None
    completed: Optional[bool] = None


class Card(_Record):
    id: Optional[str] = None
    number: Optional[int] = None
    title: Optional[str] = None
    status: Optional[str] = None
    description: Optional[str] = None
    tags: Optional[list[str]] = None
    golden: Optional[bool] = None
    last_active_at: Optional[str] = None
    created_at: Optional[str] = None
    board: Optional[Board] = None
    creator: Optional[User] = None
    steps: Optional[list[Step]] = None


class CommentBody(_Record):
    plain_text: Optional[str] = None


class Comment(_Record):
    id: Optional[str] = None
    created_at: Optional[str] = None
    body: Optional[CommentBody] = None
    creator: Optional[User] = None


class Tag(_Record):
    id: Optional[str] = None
    title: Optional[str] = None


class Column(_Record):
    id: Optional[str] = None
    name: Optional[str] = None
    color: Optional[str] = None
    created_at: Optional[str] = None


class NotificationCard(_Record):
    title: Optional[str] = None


class Notification(_Record):
    id: Optional[str] = None
    read: Optional[bool] = None
    created_at: Optional[str] = None
    title: Optional[str] = None
    body: Optional[str] = None
    card: Optional[NotificationCard] = None


class IdentityAccount(_Record):
    name: Optional[str] = None
    slug: Optional[str] = None
    user: Optional[User] = None


class Identity(_Record):
    """The ``/my/identity`` document listing every account the caller can reach."""

    accounts: Optional[list[IdentityAccount]] = None
