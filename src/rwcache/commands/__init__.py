"""Built-in CLI sub-commands for rwcache.

* :mod:`~rwcache.commands.entries` -- ``set``, ``get``, ``replace``,
  ``delete`` and ``path`` for single keys.
* :mod:`~rwcache.commands.maintenance` -- ``clean`` and ``flush`` for the
  whole cache tree.
* :mod:`~rwcache.commands.config` -- view and modify persisted settings.

Single-key and maintenance commands are plain callbacks registered on the
root app; ``config`` is a :class:`typer.Typer` sub-application.
"""

from __future__ import annotations

import typer

from rwcache.cache import FileCache
from rwcache.exceptions import ConfigError
from rwcache.output import debug, error


def open_cache(ctx: typer.Context) -> FileCache:
    """Build a :class:`FileCache` from the resolved configuration.

    Reads the ``--dir`` and ``--gzip/--no-gzip`` overrides stored in
    ``ctx.obj`` by the root callback.

    Raises:
        typer.Exit: With the :class:`ConfigError` exit code when the
            settings file or an environment override is invalid.
    """
    from rwcache.config import resolve_config

    obj = ctx.obj or {}
    try:
        config = resolve_config(
            cli_directory=obj.get("directory"),
            cli_compression=obj.get("gzip"),
        )
    except ConfigError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None

    debug(f"Cache directory: {config.cache_directory}")
    return FileCache(config)
