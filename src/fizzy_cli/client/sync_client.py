"""Synchronous HTTP client with auth injection and error normalisation.

This module provides :class:`FizzyClient`, the blocking HTTP client used by
every fizzy-cli command. It wraps :class:`httpx.Client` and layers on:

- **URL resolution** -- relative paths are resolved against the configured
  base URL; absolute ``http(s)://`` URLs (pagination cursors) are used
  verbatim.
- **Auth injection** -- the :class:`~fizzy_cli.auth.base.AuthResult` chosen
  for the invocation is merged under the caller's headers.
- **Error mapping** -- any status of 400 or above raises
  :class:`~fizzy_cli.exceptions.APIError` carrying the raw body; transport
  failures raise :class:`~fizzy_cli.exceptions.NetworkError`.

Each call is exactly one HTTP exchange: no retry, caching or rate
limiting.
"""

from __future__ import annotations

from typing import Any, Optional, Sequence, Union

import httpx

from fizzy_cli import __version__
from fizzy_cli.auth.base import AuthResult, resolve_auth
from fizzy_cli.exceptions import APIError, ConfigError, NetworkError
from fizzy_cli.models import Settings
from fizzy_cli.output import get_output

QueryParams = Sequence[tuple[str, str]]
FileSpec = tuple[str, Any]


def build_url(base_url: str, path: str, params: Optional[QueryParams] = None) -> httpx.URL:
    """Resolve *path* into an absolute URL.

    Args:
        base_url: The API root, e.g. ``https://app.fizzy.do``.
        path: A path relative to *base_url*, or an absolute URL.
        params: When not ``None``, replaces the query string of the result.

    Raises:
        ConfigError: If the base URL or path cannot be parsed.
    """
    try:
        if path.startswith(("http://", "https://")):
            url = httpx.URL(path)
        else:
            url = httpx.URL(base_url.rstrip("/")).join(path)
        if params is not None:
            url = url.copy_with(params=list(params))
    except httpx.InvalidURL as exc:
        raise ConfigError(f"invalid URL {path!r}: {exc}") from exc
    return url


class FizzyClient:
    """Synchronous HTTP client for the Fizzy API.

    Wraps :class:`httpx.Client` with URL resolution, auth injection and
    error mapping. Must be used as a context manager so that the underlying
    transport is properly opened and closed.

    Args:
        settings: Resolved settings providing the base URL and credentials.
        timeout: Per-request timeout in seconds.
        auth: Override the credential derived from *settings*; pass an empty
            :class:`AuthResult` for unauthenticated calls such as login.

    Example::

        with FizzyClient(settings) as client:
            response = client.request("GET", "/897362094/boards")
    """

    def __init__(
        self,
        settings: Settings,
        timeout: float = 30.0,
        auth: Optional[AuthResult] = None,
    ) -> None:
        self._settings = settings
        self._timeout = timeout
        self._auth = auth if auth is not None else resolve_auth(
            settings.token, settings.session_token
        )
        self._client: Optional[httpx.Client] = None

    @property
    def auth(self) -> AuthResult:
        return self._auth

    # ------------------------------------------------------------------ #
    # Context manager
    # ------------------------------------------------------------------ #

    def __enter__(self) -> FizzyClient:
        self._client = httpx.Client(timeout=self._timeout, follow_redirects=True)
        return self

    def __exit__(self, *args: object) -> None:
        if self._client:
            self._client.close()
            self._client = None

    # ------------------------------------------------------------------ #
    # Public request method
    # ------------------------------------------------------------------ #

    def request(
        self,
        method: str,
        path: str,
        params: Optional[QueryParams] = None,
        json_body: Optional[Any] = None,
        content: Optional[Union[bytes, str]] = None,
        content_type: Optional[str] = None,
        data: Optional[dict[str, Any]] = None,
        files: Optional[dict[str, FileSpec]] = None,
        headers: Optional[dict[str, str]] = None,
    ) -> httpx.Response:
        """Send one HTTP request and return the response.

        Args:
            method: HTTP method (GET, POST, PUT, DELETE).
            path: Path relative to the base URL, or an absolute URL.
            params: Ordered query parameters; repeated keys are allowed.
            json_body: JSON-serialisable body (sets ``Content-Type``).
            content: Raw body, sent with *content_type*.
            content_type: ``Content-Type`` for a raw body.
            data: Form fields; with *files* the body is ``multipart/form-data``.
            files: Files to upload, ``{field: (filename, fileobj)}``.
            headers: Extra headers. They override every default, and a
                ``Cookie`` here suppresses the session cookie.

        Returns:
            The :class:`httpx.Response` for a status below 400.

        Raises:
            APIError: On a status of 400 or above.
            NetworkError: On DNS, connection, timeout, protocol, redirect-loop
                or content-decoding failures.
            ConfigError: If the URL cannot be built.
        """
        assert self._client is not None, "Client not initialised -- use as context manager"

        url = build_url(self._settings.base_url, path, params)

        merged_headers: dict[str, str] = {
            "Accept": "application/json",
            "User-Agent": f"fizzy-cli/{__version__}",
        }
        if content_type:
            merged_headers["Content-Type"] = content_type
        merged_headers = self._inject_auth(merged_headers, headers or {})

        kwargs: dict[str, Any] = {"method": method, "url": url, "headers": merged_headers}
        if files is not None:
            kwargs["data"] = data or {}
            kwargs["files"] = files
        elif data is not None:
            kwargs["data"] = data
        elif json_body is not None:
            kwargs["json"] = json_body
        elif content is not None:
            kwargs["content"] = content

        output = get_output()
        try:
            response = self._client.request(**kwargs)
        except httpx.RequestError as exc:
            output.debug(f"{method.upper()} {url} failed: {exc}")
            raise NetworkError(f"{method.upper()} {url}: {exc}") from exc

        output.debug(f"{method.upper()} {url} -> {response.status_code}")
        self._map_response_error(response)
        return response

    # ------------------------------------------------------------------ #
    # Private helpers
    # ------------------------------------------------------------------ #

    def _inject_auth(
        self,
        defaults: dict[str, str],
        explicit: dict[str, str],
    ) -> dict[str, str]:
        """Merge defaults, auth artifacts and caller headers, in that order."""
        merged = {**defaults, **self._auth.headers}

        explicit_names = {name.lower() for name in explicit}
        if self._auth.cookies and "cookie" not in explicit_names:
            merged["Cookie"] = "; ".join(f"{k}={v}" for k, v in self._auth.cookies.items())

        for name in list(merged):
            if name.lower() in explicit_names:
                del merged[name]
        merged.update(explicit)
        return merged

    def _map_response_error(self, response: httpx.Response) -> None:
        """Raise :class:`APIError` for error HTTP status codes."""
        if response.status_code < 400:
            return
        raise APIError(response.status_code, response.content)
