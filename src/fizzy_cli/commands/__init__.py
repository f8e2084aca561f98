"""Built-in sub-command groups for fizzy-cli.

Each module defines one :class:`typer.Typer` group that
:func:`fizzy_cli.app.register_commands` attaches to the root application.
"""
