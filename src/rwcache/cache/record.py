"""On-disk record encoding.

A record is the JSON object ``{"content": str, "expiryTimestamp": int}``,
optionally wrapped in a gzip envelope (level 9). Decoding inspects the
first bytes instead of trusting the current configuration, so files written
before the compression setting changed stay readable.
"""

from __future__ import annotations

import gzip
import zlib

from pydantic import ValidationError

from rwcache.exceptions import DecodeError, EncodeError
from rwcache.models import CacheRecord

GZIP_MAGIC = b"\x1f\x8b\x08"
GZIP_LEVEL = 9


def is_gzip(data: bytes) -> bool:
    """Return ``True`` if *data* starts with the gzip/deflate magic bytes."""
    return data.startswith(GZIP_MAGIC)


def encode_record(record: CacheRecord, compress: bool) -> bytes:
    """Encode *record* to the bytes written to disk.

    Raises:
        EncodeError: If the content cannot be encoded as UTF-8 JSON.
    """
    try:
        data = record.model_dump_json(by_alias=True).encode("utf-8")
    except ValueError as exc:
        raise EncodeError(f"Cannot encode cache record: {exc}") from exc
    if compress:
        data = gzip.compress(data, compresslevel=GZIP_LEVEL)
    return data


def decode_record(data: bytes) -> CacheRecord:
    """Decode file bytes into a :class:`~rwcache.models.CacheRecord`.

    Raises:
        DecodeError: If the gzip envelope is corrupt or the payload is not a
            JSON object with the record's shape.
    """
    if is_gzip(data):
        try:
            data = gzip.decompress(data)
        except (OSError, EOFError, zlib.error) as exc:
            raise DecodeError(f"Corrupt gzip envelope: {exc}") from exc
    try:
        return CacheRecord.model_validate_json(data)
    except ValidationError as exc:
        raise DecodeError(f"Not a cache record: {exc.error_count()} validation error(s)") from exc
