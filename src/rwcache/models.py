"""Canonical Pydantic models shared across rwcache modules.

**Configuration** -- :class:`CacheConfig` is held by every
:class:`~rwcache.cache.FileCache` instance and persisted by the command line
in the user's config directory. Fields accept both their Python names and
the legacy camelCase option names (``gzipCompression``, ``cacheDirectory``,
``fileExtension``); any other key is rejected.

**On-disk record** -- :class:`CacheRecord` is the decoded unit stored per
key: a string payload plus an absolute expiry timestamp.
"""

from __future__ import annotations

import tempfile
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


def _default_cache_directory() -> Path:
    return Path(tempfile.gettempdir()) / "rwFileCacheStorage"


class CacheConfig(BaseModel):
    """Per-instance cache configuration.

    Updates are applied by :meth:`~rwcache.cache.FileCache.change_config`,
    which merges the provided options into the current values and validates
    the result as a whole before swapping it in.

    Example::

        CacheConfig(cache_directory="/var/cache/app", gzip_compression=False)
        CacheConfig.model_validate({"fileExtension": "dat"})
    """

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    gzip_compression: bool = Field(
        default=True,
        alias="gzipCompression",
        description="Wrap written records in a gzip envelope (reads auto-detect)",
    )
    cache_directory: Path = Field(
        default_factory=_default_cache_directory,
        alias="cacheDirectory",
        description="Root directory for all cache files",
    )
    file_extension: str = Field(
        default="cache",
        alias="fileExtension",
        description="Suffix appended to generated cache file names",
    )

    @classmethod
    def option_names(cls) -> dict[str, str]:
        """Map every accepted option name (field name or alias) to its field name."""
        names: dict[str, str] = {}
        for name, field in cls.model_fields.items():
            names[name] = name
            if field.alias:
                names[field.alias] = name
        return names


class CacheRecord(BaseModel):
    """A single decoded cache entry.

    Serialised as ``{"content": ..., "expiryTimestamp": ...}``. Both fields
    are optional on read so that a damaged record still decodes far enough
    for :meth:`~rwcache.cache.FileCache.get` to reject it and for
    :meth:`~rwcache.cache.FileCache.get_last` to recover its content.

    Attributes:
        content: The stored payload. Non-string values were serialised to a
            string before storage.
        expiry_timestamp: Absolute Unix time (seconds) after which the
            record is treated as expired.
    """

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    content: Optional[str] = None
    expiry_timestamp: Optional[int] = Field(default=None, alias="expiryTimestamp")

    def is_expired(self, now: float) -> bool:
        """Return ``True`` when the record has no expiry or it is at or before *now*."""
        return self.expiry_timestamp is None or self.expiry_timestamp <= now
