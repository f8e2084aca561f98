"""HTTP client module for fizzy-cli.

Provides the synchronous client that wraps :mod:`httpx` with URL
resolution, auth injection and error mapping, plus the pagination walker
and the helpers that render responses.

Classes and functions:
    :class:`FizzyClient` -- blocking client backed by :class:`httpx.Client`.
    :func:`walk` -- render a (possibly multi-page) listing.
    :func:`next_link` -- extract the ``rel="next"`` cursor from headers.

Example::

    from fizzy_cli.client import FizzyClient, walk

    with FizzyClient(settings) as client:
        walk(client, "/897362094/cards", None, get_view("card"), follow_all=True)
"""

from fizzy_cli.client.pagination import collect_all, iter_pages, next_link, walk
from fizzy_cli.client.sync_client import FizzyClient, build_url

__all__ = ["FizzyClient", "build_url", "collect_all", "iter_pages", "next_link", "walk"]
