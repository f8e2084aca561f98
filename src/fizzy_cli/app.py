"""Typer application factory and CLI entry point for fizzy-cli.

This module wires together the top-level Typer application: the global
options shared by every command, the sub-command groups from
:mod:`fizzy_cli.commands`, and the error boundary that turns
:class:`~fizzy_cli.exceptions.FizzyError` into an ``Error: ...`` line on
stderr and the matching exit code.

The :func:`main` function is the console-script entry point declared in
``pyproject.toml``. It installs signal handlers and invokes the Typer app.
Unexpected exceptions are written to a crash log under the data directory.

See Also:
    :mod:`fizzy_cli.config`: Settings resolution done in :func:`main_callback`.
    :mod:`fizzy_cli.output`: Output formatting initialised in :func:`main_callback`.
"""

from __future__ import annotations

import logging
import signal
import sys
import traceback
from datetime import datetime
from typing import Any, Optional

import typer
from typer.core import TyperGroup

from fizzy_cli import __version__
from fizzy_cli.exceptions import FizzyError, UsageError
from fizzy_cli.exit_codes import EXIT_GENERIC_FAILURE, EXIT_INTERRUPTED


class FizzyGroup(TyperGroup):
    """Root command group that reports :class:`FizzyError` instead of crashing.

    The error message goes to stderr prefixed with ``Error:``; a
    :class:`UsageError` is followed by the usage line of the failing
    command. The process exits with the error's ``exit_code``.
    """

    def invoke(self, ctx: typer.Context) -> Any:
        try:
            return super().invoke(ctx)
        except FizzyError as exc:
            from fizzy_cli.output import error

            error(str(exc))
            if isinstance(exc, UsageError) and exc.usage:
                typer.echo(exc.usage, err=True)
            ctx.exit(exc.exit_code)


app = typer.Typer(
    name="fizzy-cli",
    cls=FizzyGroup,
    help="Command-line client for the Fizzy kanban API.",
    no_args_is_help=True,
    add_completion=False,
    rich_markup_mode="rich",
)


def _version_callback(value: bool) -> None:
    """Print version and exit when --version is passed."""
    if value:
        typer.echo(f"fizzy-cli {__version__}")
        raise typer.Exit()


_log_handler: Optional[logging.Handler] = None


def _configure_logging(verbose: bool) -> None:
    """Route ``fizzy_cli`` log records to stderr through Rich when verbose."""
    global _log_handler
    logger = logging.getLogger("fizzy_cli")
    if _log_handler is not None:
        logger.removeHandler(_log_handler)
        _log_handler = None

    if not verbose:
        logger.setLevel(logging.WARNING)
        return

    from rich.console import Console
    from rich.logging import RichHandler

    _log_handler = RichHandler(console=Console(stderr=True), show_path=False)
    logger.addHandler(_log_handler)
    logger.setLevel(logging.DEBUG)


@app.callback()
def main_callback(
    ctx: typer.Context,
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    base_url: Optional[str] = typer.Option(
        None, "--base-url", help="API base URL (env: FIZZY_BASE_URL)."
    ),
    token: Optional[str] = typer.Option(
        None, "--token", help="Personal access token (env: FIZZY_TOKEN)."
    ),
    account: Optional[str] = typer.Option(
        None, "--account", help="Account slug (env: FIZZY_ACCOUNT)."
    ),
    config_path: Optional[str] = typer.Option(
        None, "--config", help="Config file path (env: FIZZY_CONFIG)."
    ),
    json_output: bool = typer.Option(
        False, "--json", help="JSON output format."
    ),
    plain_output: bool = typer.Option(
        False, "--plain", help="Plain tab-separated output without headers."
    ),
    no_color: bool = typer.Option(
        False, "--no-color", help="Disable color output."
    ),
    quiet: bool = typer.Option(
        False, "--quiet", "-q", help="Suppress non-essential output."
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Enable debug output."
    ),
) -> None:
    """Root callback executed before every sub-command.

    Initialises the global :class:`~fizzy_cli.output.OutputManager` from
    CLI flags, resolves the effective settings (flag > env > config file >
    default) and stores them in ``ctx.obj["settings"]`` for sub-commands.

    Raises:
        UsageError: If ``--json`` and ``--plain`` are both given.
        ConfigError: If the config file exists but cannot be loaded.
    """
    from fizzy_cli.commands._common import usage_error
    from fizzy_cli.config import resolve_settings
    from fizzy_cli.output import OutputFormat, OutputManager, set_output

    if json_output and plain_output:
        raise usage_error(ctx, "--json and --plain cannot be used together")

    fmt = OutputFormat.AUTO
    if json_output:
        fmt = OutputFormat.JSON
    elif plain_output:
        fmt = OutputFormat.PLAIN

    set_output(OutputManager(format=fmt, no_color=no_color, quiet=quiet, verbose=verbose))
    _configure_logging(verbose)

    ctx.ensure_object(dict)
    ctx.obj["settings"] = resolve_settings(
        cli_base_url=base_url,
        cli_token=token,
        cli_account=account,
        cli_config=config_path,
    )


@app.command("help")
def help_command(
    ctx: typer.Context,
    command: Optional[list[str]] = typer.Argument(None, help="Command to describe, e.g. 'card list'."),
) -> None:
    """Show help for fizzy-cli or one of its commands.

    Example::

        fizzy-cli help
        fizzy-cli help card list
    """
    from fizzy_cli.commands._common import usage_error

    target_ctx = ctx.find_root()
    target = target_ctx.command
    for name in command or []:
        sub = target.get_command(target_ctx, name) if isinstance(target, TyperGroup) else None
        if sub is None:
            raise usage_error(ctx, f"unknown command: {' '.join(command or [])}")
        target_ctx = type(target_ctx)(sub, info_name=name, parent=target_ctx)
        target = sub

    text = target.get_help(target_ctx)
    if text:
        typer.echo(text)


def register_commands(root: typer.Typer) -> None:
    """Attach the built-in sub-command groups to *root*."""
    from fizzy_cli.commands.account import account_app
    from fizzy_cli.commands.auth import auth_app
    from fizzy_cli.commands.board import board_app
    from fizzy_cli.commands.card import card_app
    from fizzy_cli.commands.column import column_app
    from fizzy_cli.commands.comment import comment_app
    from fizzy_cli.commands.config import config_app
    from fizzy_cli.commands.notification import notification_app
    from fizzy_cli.commands.tag import tag_app
    from fizzy_cli.commands.user import user_app

    root.add_typer(auth_app, name="auth", help="Log in, log out and check credentials.")
    root.add_typer(account_app, name="account", help="List accounts and set the default one.")
    root.add_typer(config_app, name="config", help="Show or change the config file.")
    root.add_typer(board_app, name="board", help="Manage boards.")
    root.add_typer(card_app, name="card", help="Manage cards.")
    root.add_typer(comment_app, name="comment", help="Manage card comments.")
    root.add_typer(tag_app, name="tag", help="List tags.")
    root.add_typer(column_app, name="column", help="Manage board columns.")
    root.add_typer(user_app, name="user", help="Manage users.")
    root.add_typer(notification_app, name="notification", help="Read and clear notifications.")


register_commands(app)


def _setup_signal_handlers() -> None:
    """Install a SIGINT handler so Ctrl-C exits cleanly."""

    def _handler(signum: int, frame: Any) -> None:  # noqa: ANN401
        sys.stderr.write("\nCancelled.\n")
        sys.exit(EXIT_INTERRUPTED)

    signal.signal(signal.SIGINT, _handler)


def _write_crash_log(exc: Exception) -> str:
    """Write a crash traceback to disk and return the log file path.

    Args:
        exc: The unhandled exception to log.

    Returns:
        Absolute path to the written crash log file.
    """
    from fizzy_cli.config import get_data_dir

    logs_dir = get_data_dir() / "logs"
    logs_dir.mkdir(parents=True, exist_ok=True)
    timestamp = datetime.now().strftime("%Y%m%d-%H%M%S")
    log_path = logs_dir / f"crash-{timestamp}.log"
    log_path.write_text("".join(traceback.format_exception(exc)))
    return str(log_path)


def main() -> None:
    """CLI entry point invoked by the ``fizzy-cli`` console script.

    :class:`~fizzy_cli.exceptions.FizzyError` is handled inside the command
    group. Anything else that escapes produces a crash log and a generic
    failure exit.

    Raises:
        SystemExit: Always raised (either by Typer or explicitly).
    """
    _setup_signal_handlers()
    try:
        app(standalone_mode=True)
    except SystemExit:
        raise
    except KeyboardInterrupt:
        sys.stderr.write("\nCancelled.\n")
        sys.exit(EXIT_INTERRUPTED)
    except Exception as exc:
        from fizzy_cli.output import error

        log_path = _write_crash_log(exc)
        error(f"Unexpected error. Debug log: {log_path}")
        sys.exit(EXIT_GENERIC_FAILURE)
