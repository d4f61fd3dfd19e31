"""Numeric process exit codes following `clig.dev <https://clig.dev/>`_ conventions.

Each constant maps to a specific error category. CLI commands exit with
them through ``typer.Exit`` and :class:`~rwcache.exceptions.RWCacheError`
carries one as its ``exit_code``.
Shell scripts can inspect the exit code to tell a cache miss apart from a
real failure without parsing stderr.

Example::

    $ rwcache get session.token
    $ echo $?
    4   # EXIT_NOT_FOUND -- no live entry for the key
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred."""

EXIT_INVALID_USAGE = 2
"""The command was invoked with invalid arguments or missing required parameters."""

EXIT_NOT_FOUND = 4
"""The requested key has no live entry (missing, expired, or unreadable)."""

EXIT_WRITE_FAILURE = 5
"""A cache entry could not be written, replaced, or removed."""
