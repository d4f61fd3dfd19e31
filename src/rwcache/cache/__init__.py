"""Filesystem-backed key/value caching.

This package provides :class:`FileCache`, which stores one file per key
under a configurable directory, plus the :func:`store` and :func:`read`
one-shot helpers. Supporting modules:

* :mod:`~rwcache.cache.keys` -- key to file path mapping.
* :mod:`~rwcache.cache.serializer` -- serialisation of non-string content.
* :mod:`~rwcache.cache.record` -- JSON record encoding and gzip detection.
"""

from rwcache.cache.file_cache import FileCache, read, resolve_expiry, store

__all__ = ["FileCache", "read", "resolve_expiry", "store"]
