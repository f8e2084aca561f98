"""Numeric process exit codes.

Each constant maps to an error category and is referenced by the
corresponding :class:`~fizzy_cli.exceptions.FizzyError` subclass. Shell
wrappers can tell a malformed invocation apart from a failed request
without parsing stderr.

Example::

    $ fizzy-cli card get
    $ echo $?
    2   # EXIT_INVALID_USAGE -- the card number is missing
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""The request failed: network error, API error, undecodable response, bad config."""

EXIT_INVALID_USAGE = 2
"""The command was invoked with invalid arguments, flags or missing credentials."""

EXIT_INTERRUPTED = 130
"""The user pressed Ctrl-C."""
