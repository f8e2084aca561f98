"""Output formatting system with strict stdout/stderr discipline.

Follows `clig.dev <https://clig.dev/>`_ conventions:

* **stdout** -- primary data only (tables, detail views, JSON). This is
  what downstream tools pipe and parse.
* **stderr** -- all diagnostics (status, warnings, errors, suggestions).
  Never contaminates the data stream.
* **TTY detection** -- Rich tables when stdout is an interactive terminal,
  aligned plain-text tables when piped to another process.
* **Colour control** -- respects ``NO_COLOR``, ``TERM=dumb``, and the
  ``--no-color`` CLI flag.

The module exposes three layers:

1. Pure renderers (:func:`render_table`, :func:`render_json`,
   :func:`render_json_bytes`) that turn rows and JSON values into text.
2. :class:`OutputManager` -- a stateful object holding format preferences,
   Rich consoles, and quiet/verbose flags. Created once in
   :func:`~fizzy_cli.app.main_callback` and installed via :func:`set_output`.
3. :func:`error`, a module-level shortcut to the global ``OutputManager``
   used by the error boundary in :mod:`fizzy_cli.app`.
"""

from __future__ import annotations

import json
import os
import sys
from enum import Enum
from typing import Any, Optional, Sequence

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from fizzy_cli.exceptions import DecodeError

_COLUMN_PADDING = 2


class OutputFormat(str, Enum):
    """Enumeration of supported output formats.

    ``AUTO`` resolves to ``RICH`` when stdout is an interactive TTY and colour
    is not disabled, or to ``TABLE`` otherwise. ``--json`` forces ``JSON``
    and ``--plain`` forces ``PLAIN`` (tab-separated rows, no header).
    """

    AUTO = "auto"
    JSON = "json"
    PLAIN = "plain"
    TABLE = "table"
    RICH = "rich"


# ------------------------------------------------------------------ #
# Pure renderers
# ------------------------------------------------------------------ #


def render_table(
    headers: Sequence[str],
    rows: Sequence[Sequence[str]],
    plain: bool = False,
) -> str:
    """Render rows as text.

    In table mode every column but the last is padded to its widest cell
    plus two spaces, and the header (when given) is the first line. Plain
    mode drops the header and does no alignment at all: each row is its
    cells joined by a single tab, so a column holding an empty string still
    produces its separator.

    Args:
        headers: Column headers. Empty to render rows only.
        rows: Cell strings, one sequence per row.
        plain: Suppress the header and skip alignment.

    Returns:
        The rendered lines joined by newlines, without a trailing newline.
        An empty string when there is nothing to print.
    """
    if plain:
        return "\n".join("\t".join(row) for row in rows)

    lines: list[Sequence[str]] = []
    if headers:
        lines.append(headers)
    lines.extend(rows)
    if not lines:
        return ""

    widths: dict[int, int] = {}
    for line in lines:
        for idx, cell in enumerate(line[:-1]):
            widths[idx] = max(widths.get(idx, 0), len(cell))

    rendered = []
    for line in lines:
        cells = [
            cell.ljust(widths[idx] + _COLUMN_PADDING) for idx, cell in enumerate(line[:-1])
        ]
        if line:
            cells.append(line[-1])
        rendered.append("".join(cells))
    return "\n".join(rendered)


def render_json(value: Any) -> str:
    """Serialise *value* as JSON with two-space indentation."""
    return json.dumps(value, indent=2, ensure_ascii=False)


def render_json_bytes(body: bytes) -> str:
    """Re-parse and re-indent a JSON response body.

    Parsing first validates the body and normalises its formatting.

    Returns:
        The indented JSON, or an empty string for an empty body.

    Raises:
        DecodeError: If the body is not valid JSON.
    """
    if not body:
        return ""
    try:
        value = json.loads(body)
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise DecodeError(f"invalid JSON response: {exc}") from exc
    return render_json(value)


class OutputManager:
    """Central manager for all CLI output with stdout/stderr discipline.

    Maintains two Rich :class:`~rich.console.Console` instances -- one for
    stdout (data) and one for stderr (diagnostics) -- and routes every
    output call to the correct stream with appropriate formatting.

    Args:
        format: Desired output format. ``AUTO`` resolves based on TTY
            detection.
        no_color: Disable all colour and Rich markup.
        quiet: Suppress non-essential informational messages on stderr.
        verbose: Enable debug-level messages on stderr.
    """

    def __init__(
        self,
        format: OutputFormat = OutputFormat.AUTO,
        no_color: bool = False,
        quiet: bool = False,
        verbose: bool = False,
    ) -> None:
        self._no_color = no_color or _should_disable_color()
        self._quiet = quiet
        self._verbose = verbose

        # Resolve format: AUTO picks RICH for interactive TTY, TABLE otherwise
        if format == OutputFormat.AUTO:
            self._format = (
                OutputFormat.RICH if _is_tty() and not self._no_color else OutputFormat.TABLE
            )
        else:
            self._format = format

        self._stdout = Console(
            file=sys.stdout,
            no_color=self._no_color,
            force_terminal=(self._format == OutputFormat.RICH),
        )
        self._stderr = Console(
            file=sys.stderr,
            no_color=self._no_color,
            stderr=True,
        )

    @property
    def format(self) -> OutputFormat:
        """The resolved output format."""
        return self._format

    @property
    def is_json(self) -> bool:
        return self._format == OutputFormat.JSON

    @property
    def is_plain(self) -> bool:
        return self._format == OutputFormat.PLAIN

    # ------------------------------------------------------------------ #
    # Data output (stdout)
    # ------------------------------------------------------------------ #

    def print_data(self, text: str) -> None:
        """Print raw text to stdout, flushing immediately.

        Args:
            text: The string to write. A trailing newline is appended.
        """
        print(text, file=sys.stdout, flush=True)

    def print_json(self, value: Any) -> None:
        """Print *value* as indented JSON to stdout."""
        self.print_data(render_json(value))

    def print_json_body(self, body: bytes, status: int) -> None:
        """Print a response body as indented JSON.

        An empty body prints ``{"status": <status>}`` instead.

        Raises:
            DecodeError: If the body is not valid JSON.
        """
        if not body:
            self.print_json({"status": status})
            return
        self.print_data(render_json_bytes(body))

    def print_table(
        self,
        headers: Sequence[str],
        rows: Sequence[Sequence[str]],
        show_header: bool = True,
    ) -> None:
        """Print tabular data to stdout in the active format.

        * **Rich mode** -- borderless :class:`~rich.table.Table`.
        * **Plain mode** -- tab-separated values, one row per line, never a
          header.
        * **Table mode** -- space-aligned columns with a header line.

        Args:
            headers: Column header strings.
            rows: List of rows, where each row is a list of cell strings.
            show_header: Print the header row. Ignored in plain mode.
        """
        if self._format == OutputFormat.RICH:
            table = Table(
                box=None,
                show_header=show_header,
                header_style="bold cyan",
                pad_edge=False,
                padding=(0, 1),
            )
            for h in headers:
                table.add_column(h)
            for row in rows:
                table.add_row(*(escape(cell) for cell in row))
            self._stdout.print(table)
            return

        text = render_table(
            headers if show_header else (),
            rows,
            plain=self._format == OutputFormat.PLAIN,
        )
        if text:
            self.print_data(text)

    # ------------------------------------------------------------------ #
    # Diagnostics (stderr)
    # ------------------------------------------------------------------ #

    def info(self, message: str) -> None:
        """Print an informational message to stderr. Suppressed by ``--quiet``."""
        if not self._quiet:
            if self._no_color:
                print(message, file=sys.stderr, flush=True)
            else:
                self._stderr.print(message, markup=False, highlight=False)

    def error(self, message: str) -> None:
        """Print a bold-red error to stderr. Never suppressed."""
        if self._no_color:
            print(f"Error: {message}", file=sys.stderr, flush=True)
        else:
            self._stderr.print(f"[bold red]Error:[/bold red] {escape(message)}", soft_wrap=True)

    def debug(self, message: str) -> None:
        """Print a debug message to stderr. Only shown when ``--verbose`` is active."""
        if self._verbose:
            if self._no_color:
                print(f"[debug] {message}", file=sys.stderr, flush=True)
            else:
                self._stderr.print(f"[debug] {message}", style="dim", markup=False, highlight=False)


# ------------------------------------------------------------------ #
# Module-level helpers
# ------------------------------------------------------------------ #


def _is_tty() -> bool:
    """Check if stdout is a TTY."""
    return hasattr(sys.stdout, "isatty") and sys.stdout.isatty()


def _should_disable_color() -> bool:
    """Check if color should be disabled per clig.dev.

    Returns True when NO_COLOR env var is set (any value) or TERM=dumb.
    """
    if os.environ.get("NO_COLOR") is not None:
        return True
    if os.environ.get("TERM") == "dumb":
        return True
    return False


# ------------------------------------------------------------------ #
# Global output instance (set during app startup)
# ------------------------------------------------------------------ #

_output: Optional[OutputManager] = None


def get_output() -> OutputManager:
    """Return the global :class:`OutputManager` instance.

    If no instance has been installed via :func:`set_output`, a default
    ``OutputManager`` with ``AUTO`` format is created lazily.
    """
    global _output
    if _output is None:
        _output = OutputManager()
    return _output


def set_output(output: OutputManager) -> None:
    """Install *output* as the global :class:`OutputManager` instance."""
    global _output
    _output = output


def reset_output() -> None:
    """Reset the global :class:`OutputManager` to ``None``.

    Primarily useful in test suites to ensure a clean state between tests.
    """
    global _output
    _output = None


# ------------------------------------------------------------------ #
# Convenience functions that use the global instance
# ------------------------------------------------------------------ #


def error(message: str) -> None:
    """Print error to stderr via the global OutputManager."""
    get_output().error(message)
