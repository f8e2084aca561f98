"""fizzy-cli -- Command-line client for the Fizzy kanban board.

This package wraps the Fizzy JSON REST API in a Typer CLI. Users log in once
(personal access token or magic-link session), pick a default account, and
then list, inspect, and modify boards, cards, comments, columns, tags, users
and notifications from the terminal.

Typical workflow::

    fizzy-cli auth login --token $FIZZY_TOKEN
    fizzy-cli account set 897362094
    fizzy-cli card list --board-id 03f5v9zkft4hj9qq0lsn9ohcm --all

Modules:
    app: Typer application, global options and CLI entry point.
    models: Pydantic models for config, settings and API resources.
    config: Config file location, atomic persistence and precedence resolution.
    exceptions: Exception hierarchy with exit-code mapping.
    exit_codes: Numeric exit codes.
    output: stdout/stderr rendering of tables, JSON and diagnostics.
    resources: Row and detail formatters for every resource kind.
"""

__version__ = "0.3.0"
