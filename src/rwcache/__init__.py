"""rwcache -- a small filesystem-backed key/value cache.

Values are serialised, optionally gzip-compressed, and written to a file
whose path is derived deterministically from the key. Reads check the
stored expiry timestamp; expired entries stay on disk until :meth:`clean`
or :meth:`flush` removes them, and remain reachable through
:meth:`~rwcache.cache.FileCache.get_last`.

Typical usage::

    from rwcache import FileCache

    cache = FileCache()
    cache.change_config({"cache_directory": "/tmp/my-cache/"})
    cache.set("user.42.profile", {"name": "Ada"}, 3600)
    cache.get("user.42.profile")

Modules:
    cache: The :class:`FileCache` engine, key mapping, and codecs.
    models: Pydantic models for configuration and on-disk records.
    config: XDG-aware settings persistence for the command line.
    exceptions: Exception hierarchy with exit-code mapping.
    exit_codes: Numeric exit codes following clig.dev conventions.
    output: stdout/stderr formatting system with Rich support.
    app: Typer application and CLI entry point.
"""

__version__ = "0.3.0"

from rwcache.cache import FileCache, read, store  # noqa: E402

__all__ = ["FileCache", "read", "store", "__version__"]
