"""Cursor pagination over ``Link: <url>; rel="next"`` response headers.

List endpoints return a JSON array and, when more results exist, a ``Link``
header pointing at the next page. The cursor is a full URL: once followed it
replaces both the path and the query of the original request.

:func:`walk` renders a listing in one of three ways:

* a single page (``follow_all=False``);
* **buffered JSON** -- every page is decoded and concatenated, then printed
  as one array. Nothing is printed if any page fails;
* **row-streamed** -- each page is rendered as soon as it arrives, the
  header only once. Pages already printed stay on stdout if a later page
  fails.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Iterator, Optional

import httpx

from fizzy_cli.client.sync_client import FizzyClient, QueryParams
from fizzy_cli.exceptions import DecodeError, PaginationError
from fizzy_cli.output import get_output
from fizzy_cli.resources import ResourceView

logger = logging.getLogger(__name__)


def next_link(headers: httpx.Headers) -> Optional[str]:
    """Return the URL of the ``rel="next"`` entry of the ``Link`` header.

    Entries are split on commas; each must have a ``<url>`` part followed by
    parameters. Relations other than ``next`` are ignored.

    Example::

        >>> next_link(httpx.Headers({"Link": '<https://x/y?page=2>; rel="next"'}))
        'https://x/y?page=2'
    """
    link_header = headers.get("link", "")
    if not link_header:
        return None
    for part in link_header.split(","):
        sections = [s.strip() for s in part.strip().split(";")]
        if len(sections) < 2:
            continue
        if any(param == 'rel="next"' for param in sections[1:]):
            return sections[0].strip("<>")
    return None


def iter_pages(
    client: FizzyClient,
    path: str,
    params: Optional[QueryParams] = None,
) -> Iterator[httpx.Response]:
    """Yield every page of a listing, following ``next`` cursors.

    The first request uses *path* and *params*; later requests use the
    cursor alone.

    Raises:
        PaginationError: If a cursor points at a URL already fetched.
    """
    response = client.request("GET", path, params=params)
    seen = {str(response.request.url)}
    yield response

    cursor = next_link(response.headers)
    while cursor is not None:
        if cursor in seen:
            raise PaginationError(f"pagination loop: next page {cursor} was already fetched")
        logger.debug("Following next page %s", cursor)
        response = client.request("GET", cursor)
        seen.add(cursor)
        seen.add(str(response.request.url))
        yield response
        cursor = next_link(response.headers)


def _decode_page(body: bytes) -> list[Any]:
    try:
        page = json.loads(body)
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise DecodeError(f"invalid JSON response: {exc}") from exc
    if page is None:
        return []
    if not isinstance(page, list):
        raise DecodeError(f"expected a JSON array page, got {type(page).__name__}")
    return page


def collect_all(
    client: FizzyClient,
    path: str,
    params: Optional[QueryParams] = None,
) -> list[Any]:
    """Concatenate the JSON arrays of every page, in page order."""
    combined: list[Any] = []
    for response in iter_pages(client, path, params):
        combined.extend(_decode_page(response.content))
    return combined


def walk(
    client: FizzyClient,
    path: str,
    params: Optional[QueryParams],
    view: ResourceView,
    follow_all: bool = False,
) -> None:
    """Fetch a listing and render it in the active output format.

    Args:
        client: An open :class:`FizzyClient`.
        path: Listing path, relative to the base URL.
        params: Query parameters for the first page only.
        view: Headers and row decoder for the listed resource.
        follow_all: Follow ``next`` cursors until the last page.

    Raises:
        APIError, NetworkError, DecodeError, PaginationError: On the first
            failing page.
    """
    output = get_output()

    if not follow_all:
        response = client.request("GET", path, params=params)
        if output.is_json:
            output.print_json_body(response.content, response.status_code)
        else:
            output.print_table(view.headers, view.rows(response.content))
        return

    if output.is_json:
        output.print_json(collect_all(client, path, params))
        return

    for number, response in enumerate(iter_pages(client, path, params)):
        output.print_table(view.headers, view.rows(response.content), show_header=number == 0)
