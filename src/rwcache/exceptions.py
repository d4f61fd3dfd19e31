"""Exception hierarchy for rwcache.

All exceptions inherit from :class:`RWCacheError`, which carries an
``exit_code`` attribute mapped to a constant from :mod:`rwcache.exit_codes`.

The public :class:`~rwcache.cache.FileCache` operations never let these
escape: codec failures are raised internally and converted to a ``False``
result at the operation boundary. The command line entry point in
:func:`rwcache.app.main` catches ``RWCacheError`` and exits with the
matching code.

Subclass hierarchy::

    RWCacheError (exit 1)
    +-- ConfigError         (exit 1)
    +-- EncodeError         (exit 1)
    +-- DecodeError         (exit 1)
"""

from rwcache.exit_codes import EXIT_GENERIC_FAILURE


class RWCacheError(Exception):
    """Base exception for all rwcache errors.

    Args:
        message: Human-readable error description printed to stderr.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class ConfigError(RWCacheError):
    """Raised for configuration problems (invalid settings file, bad override)."""


class EncodeError(RWCacheError):
    """Raised when content cannot be represented in the record format."""


class DecodeError(RWCacheError):
    """Raised when a cache file cannot be decompressed or decoded into a record."""
