"""Filesystem-backed key/value cache.

Each key is stored in its own file under the configured cache directory
(see :mod:`rwcache.cache.keys` for the path mapping). A file holds one
JSON record carrying the content and an absolute expiry timestamp,
optionally gzip-compressed (see :mod:`rwcache.cache.record`).

There is no in-memory index and no locking: the directory tree is the
index. Writes go through a temp file and ``os.replace`` so readers never
observe a half-written entry, but concurrent writers to the same key still
race and the last rename wins.

All public operations report failure through their return value
(``False``) and log the cause; they never raise to the caller.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Callable, Iterator, Optional, Union

from pydantic import ValidationError

from rwcache.cache.keys import key_to_path
from rwcache.cache.record import decode_record, encode_record
from rwcache.cache.serializer import decode_content, serialize
from rwcache.config import atomic_write
from rwcache.exceptions import DecodeError, EncodeError
from rwcache.models import CacheConfig, CacheRecord

logger = logging.getLogger(__name__)

NEVER_EXPIRES_SECONDS = 315360000
"""Lifetime given to entries stored without an expiry (10 years)."""

MAX_RELATIVE_EXPIRY = 2592000
"""Expiry values above this (30 days) are absolute Unix timestamps."""

KEEP_FILE = ".keep"


def resolve_expiry(expiry: Union[int, float, None], now: int) -> int:
    """Turn an expiry argument into an absolute Unix timestamp.

    * ``0`` (or ``None``) -- never expires, i.e. ``now`` + 10 years.
    * greater than 30 days in seconds -- already an absolute timestamp.
    * anything else -- seconds relative to ``now``.
    """
    if not expiry:
        return now + NEVER_EXPIRES_SECONDS
    expiry = int(expiry)
    if expiry > MAX_RELATIVE_EXPIRY:
        return expiry
    return now + expiry


class FileCache:
    """Key/value cache persisted as one file per key.

    Args:
        config: Initial configuration. Defaults to :class:`CacheConfig`'s
            defaults (gzip on, ``<tmp>/rwFileCacheStorage``, ``.cache``).
        clock: Callable returning the current Unix time. Injected by tests.

    Example::

        cache = FileCache()
        cache.change_config({"cacheDirectory": "/tmp/app-cache/"})
        cache.set("session.abc", {"user": 42}, 600)
        cache.get("session.abc")       # {'user': 42}
        cache.get_last("session.abc")  # '{"user":42}' even once expired
    """

    def __init__(
        self,
        config: Optional[CacheConfig] = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._config = config if config is not None else CacheConfig()
        self._clock = clock

    @property
    def config(self) -> CacheConfig:
        """The active configuration (replaced wholesale by :meth:`change_config`)."""
        return self._config

    def change_config(self, options: Any) -> bool:  # noqa: ANN401
        """Merge *options* into the current configuration.

        Accepts Python field names (``cache_directory``) and the legacy
        option names (``cacheDirectory``). Nothing is applied unless every
        key is recognised and the merged configuration validates.

        Returns:
            ``True`` if the configuration was updated, ``False`` otherwise.
        """
        if not isinstance(options, Mapping):
            logger.warning("Rejected configuration: expected a mapping, got %s", type(options).__name__)
            return False

        names = CacheConfig.option_names()
        unknown = sorted(str(k) for k in options if k not in names)
        if unknown:
            logger.warning("Rejected configuration: unknown option(s) %s", ", ".join(unknown))
            return False

        merged = self._config.model_dump()
        merged.update({names[k]: v for k, v in options.items()})
        try:
            self._config = CacheConfig.model_validate(merged)
        except ValidationError as exc:
            logger.warning("Rejected configuration: %s", exc)
            return False
        return True

    def path_for(self, key: Any) -> Path:  # noqa: ANN401
        """Return the file path *key* is stored at (without creating anything)."""
        return key_to_path(key, self._config.cache_directory, self._config.file_extension)

    # ------------------------------------------------------------------ #
    # Entry operations
    # ------------------------------------------------------------------ #

    def set(self, key: Any, content: Any, expiry: Union[int, float] = 0) -> bool:  # noqa: ANN401
        """Store *content* under *key*, replacing any existing entry.

        Args:
            key: Cache key; punctuation becomes directory structure.
            content: A string (stored verbatim) or any JSON-serialisable value.
            expiry: ``0`` for no expiry, seconds from now (up to 30 days),
                or an absolute Unix timestamp.

        Returns:
            ``True`` if the entry was written. ``False`` if the expiry is
            already in the past, the content cannot be encoded, or the
            write failed.
        """
        now = self._now()
        try:
            expiry_timestamp = resolve_expiry(expiry, now)
        except (TypeError, ValueError, OverflowError):
            logger.warning("Invalid expiry %r for key %r", expiry, key)
            return False

        if expiry_timestamp < now:
            logger.debug("Not storing %r: expiry %d is in the past", key, expiry_timestamp)
            return False

        try:
            if not isinstance(content, str):
                content = serialize(content)
            record = CacheRecord(content=content, expiry_timestamp=expiry_timestamp)
            data = encode_record(record, self._config.gzip_compression)
        except (EncodeError, ValidationError) as exc:
            logger.warning("Cannot store %r: %s", key, exc)
            return False

        path = self.path_for(key)
        try:
            atomic_write(path, data)
        except (OSError, ValueError) as exc:
            logger.warning("Cannot write cache file %s: %s", path, exc)
            return False

        logger.debug("Stored %r at %s (expires %d)", key, path, expiry_timestamp)
        return True

    def get_object(self, key: Any, absolute: bool = False) -> Union[CacheRecord, bool]:  # noqa: ANN401
        """Read and decode the record stored for *key*.

        Args:
            key: Cache key, or a file path when *absolute* is ``True``.
            absolute: Treat *key* as the path of the cache file itself.

        Returns:
            The decoded :class:`~rwcache.models.CacheRecord` (expired or
            not), or ``False`` if the file is missing, unreadable, or not a
            record.
        """
        path = Path(key) if absolute else self.path_for(key)
        try:
            data = path.read_bytes()
        except FileNotFoundError:
            return False
        except (OSError, ValueError) as exc:
            logger.warning("Cannot read cache file %s: %s", path, exc)
            return False

        try:
            return decode_record(data)
        except DecodeError as exc:
            logger.warning("Cannot decode cache file %s: %s", path, exc)
            return False

    def get(self, key: Any) -> Any:  # noqa: ANN401
        """Return the live value for *key*, or ``False``.

        Stored strings that parse as serialised values come back parsed
        (see :func:`~rwcache.cache.serializer.decode_content`).
        """
        record = self.get_object(key)
        if record is False or record.content is None:
            return False
        if record.is_expired(self._now()):
            logger.debug("Entry %r expired at %s", key, record.expiry_timestamp)
            return False
        return decode_content(record.content)

    def get_last(self, key: Any) -> Union[str, bool]:  # noqa: ANN401
        """Return the raw stored content for *key*, ignoring expiry.

        Unlike :meth:`get` the content is not deserialised. Returns
        ``False`` only when no decodable record exists.
        """
        record = self.get_object(key)
        if record is False or record.content is None:
            return False
        return record.content

    def delete(self, key: Any) -> bool:  # noqa: ANN401
        """Remove the entry for *key*. ``False`` if it did not exist or removal failed."""
        path = self.path_for(key)
        if not path.is_file():
            return False
        try:
            path.unlink()
        except OSError as exc:
            logger.warning("Cannot delete cache file %s: %s", path, exc)
            return False
        return True

    def replace(self, key: Any, content: Any, expiry: Union[int, float] = 0) -> bool:  # noqa: ANN401
        """Overwrite *key* only if it currently holds a truthy live value."""
        if not self.get(key):
            return False
        return self.set(key, content, expiry)

    # ------------------------------------------------------------------ #
    # Tree maintenance
    # ------------------------------------------------------------------ #

    def clean(self) -> int:
        """Delete every entry whose expiry is at or before now.

        Files that do not decode as records (``.keep`` markers, foreign
        files) are left alone. Stops at the first deletion that fails.

        Returns:
            The number of entries removed.
        """
        now = self._now()
        removed = 0
        for path in self._entry_files():
            record = self.get_object(path, absolute=True)
            if record is False or record.expiry_timestamp is None:
                continue
            if record.expiry_timestamp > now:
                continue
            try:
                path.unlink()
            except OSError as exc:
                logger.warning("Clean stopped, cannot delete %s: %s", path, exc)
                return removed
            removed += 1
            logger.debug("Removed expired entry %s", path)
        return removed

    def flush(self) -> bool:
        """Delete everything under the cache directory except ``.keep`` files.

        Directories emptied by the flush are removed; directories still
        holding a ``.keep`` file stay. Stops at the first deletion that
        fails, leaving whatever was already removed removed.

        Returns:
            ``True`` if the tree was emptied (a missing cache directory
            counts as empty), ``False`` on the first failure.
        """
        root = self._config.cache_directory
        if not root.is_dir():
            return True
        try:
            _delete_tree(root)
        except OSError as exc:
            logger.warning("Flush of %s stopped: %s", root, exc)
            return False
        return True

    # ------------------------------------------------------------------ #
    # Private helpers
    # ------------------------------------------------------------------ #

    def _now(self) -> int:
        return int(self._clock())

    def _entry_files(self) -> Iterator[Path]:
        root = self._config.cache_directory
        if not root.is_dir():
            return iter(())
        files = sorted(
            p for p in root.rglob("*") if p.is_file() and p.name != KEEP_FILE
        )
        return iter(files)


def _delete_tree(directory: Path) -> None:
    """Remove the contents of *directory*, keeping ``.keep`` files and their parents."""
    for entry in sorted(directory.iterdir()):
        if entry.is_dir() and not entry.is_symlink():
            _delete_tree(entry)
            if not any(entry.iterdir()):
                entry.rmdir()
        elif entry.name != KEEP_FILE:
            entry.unlink()


# ------------------------------------------------------------------ #
# One-shot helpers
# ------------------------------------------------------------------ #


def store(
    key: Any,  # noqa: ANN401
    data: Any,  # noqa: ANN401
    expiry: Union[int, float] = 0,
    config: Optional[Mapping[str, Any]] = None,
) -> bool:
    """Store *data* with a fresh :class:`FileCache`, optionally configured by *config*.

    Returns ``False`` without writing if *config* is rejected.
    """
    cache = FileCache()
    if config is not None and not cache.change_config(config):
        return False
    return cache.set(key, data, expiry)


def read(key: Any, config: Optional[Mapping[str, Any]] = None) -> Any:  # noqa: ANN401
    """Read *key* with a fresh :class:`FileCache`, optionally configured by *config*."""
    cache = FileCache()
    if config is not None and not cache.change_config(config):
        return False
    return cache.get(key)
