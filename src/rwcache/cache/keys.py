"""Key to file path mapping.

Keys are turned into relative paths by treating punctuation as a directory
separator, so ``"user.42.profile"`` is stored at ``user/42/profile.cache``
under the cache root. The mapping is deterministic and must stay stable:
changing it orphans every entry already on disk.
"""

from __future__ import annotations

import re
from pathlib import Path

SEPARATOR_CHARS = "-._\\*\"?[]:;|=,"

_TO_SEPARATOR = str.maketrans({char: "/" for char in SEPARATOR_CHARS})
_REPEATED_SEPARATORS = re.compile(r"/{2,}")


def key_basename(key: str) -> str:
    """Return the last ``/``-separated component of *key*.

    Trailing separators are ignored, so ``"a/b/"`` yields ``"b"``.
    """
    return key.rstrip("/").rsplit("/", 1)[-1]


def transform_key(key: object) -> str:
    """Apply the separator substitution to a key and collapse repeated separators.

    Example::

        >>> transform_key("deep.directory-creation_test")
        'deep/directory/creation/test'
        >>> transform_key("prefix/a..b")
        'a/b'
    """
    transformed = key_basename(str(key)).translate(_TO_SEPARATOR)
    return _REPEATED_SEPARATORS.sub("/", transformed)


def split_key(transformed: str) -> tuple[str, str]:
    """Split a transformed key into ``(subdirectory, base_name)``.

    The subdirectory is relative (never starts with ``/``) and is empty when
    the key holds no separator.
    """
    directory, _, name = transformed.rpartition("/")
    return directory.strip("/"), name


def key_to_path(key: object, cache_directory: Path, file_extension: str) -> Path:
    """Return the absolute file path for *key* under *cache_directory*.

    Directories are not created here; writers create them on demand.
    """
    directory, name = split_key(transform_key(key))
    base = Path(cache_directory)
    if directory:
        base = base / directory
    return base / f"{name}.{file_extension}"
