"""Response formatting bridge -- maps :class:`httpx.Response` to the output system.

Commands that do not list resources end with one of these helpers:

* :func:`print_detail` -- ``get`` views: the re-indented JSON body in JSON
  mode, otherwise the resource's text detail view.
* :func:`print_created` -- ``create`` commands: the ``Location`` header of
  the new resource.
* :func:`print_done` -- updates, deletes and actions that answer with no
  content.
* :func:`print_body_or_done` -- updates that may echo the resource back.

See Also:
    :mod:`fizzy_cli.output` -- the output manager that renders data.
"""

from __future__ import annotations

from typing import Callable

import httpx

from fizzy_cli.output import get_output


def print_detail(response: httpx.Response, formatter: Callable[[bytes], str]) -> None:
    """Render a single resource.

    Args:
        response: The ``get`` response.
        formatter: Detail formatter from :mod:`fizzy_cli.resources`.

    Raises:
        DecodeError: If the body cannot be decoded.
    """
    output = get_output()
    if output.is_json:
        output.print_json_body(response.content, response.status_code)
        return
    output.print_data(formatter(response.content))


def print_created(response: httpx.Response, message: str) -> None:
    """Report a created resource and where it lives.

    JSON mode prints ``{"status": ..., "location": ...}``; otherwise
    ``<message>: <location>``, or ``<message>.`` when the server sent no
    ``Location`` header.
    """
    output = get_output()
    location = response.headers.get("location", "")
    if output.is_json:
        output.print_json({"status": response.status_code, "location": location})
        return
    if location:
        output.print_data(f"{message}: {location}")
        return
    output.print_data(f"{message}.")


def print_done(response: httpx.Response, message: str) -> None:
    """Report a request whose response carries no useful body."""
    output = get_output()
    if output.is_json:
        output.print_json({"status": response.status_code})
        return
    output.print_data(f"{message}.")


def print_body_or_done(response: httpx.Response, message: str) -> None:
    """Print the response body in JSON mode, otherwise *message*."""
    output = get_output()
    if output.is_json:
        output.print_json_body(response.content, response.status_code)
        return
    output.print_data(f"{message}.")
