"""Serialisation of non-string cache content.

String content is stored verbatim. Anything else is serialised to JSON
before it is wrapped in a record. On the way back :func:`decode_content`
is deliberately lenient: any stored string that parses as JSON is returned
as the parsed value, so a plain string such as ``"123"`` or ``"false"``
comes back as ``123`` or ``False``. Entries written by older releases rely
on this, so it is kept as is.
"""

from __future__ import annotations

import json
from typing import Any

from rwcache.exceptions import EncodeError


def serialize(value: Any) -> str:  # noqa: ANN401
    """Serialise *value* to its stored string form.

    Only values that read back equal are accepted: JSON turns tuples into
    lists and non-string mapping keys into strings, so those are refused
    rather than stored altered.

    Raises:
        EncodeError: If the value has no JSON representation (sets, bytes,
            arbitrary objects, circular structures) or would not survive
            the round trip unchanged.
    """
    try:
        text = json.dumps(value, ensure_ascii=False, separators=(",", ":"))
    except (TypeError, ValueError) as exc:
        raise EncodeError(f"Cannot serialise {type(value).__name__}: {exc}") from exc
    if json.loads(text) != value:
        raise EncodeError(f"{type(value).__name__} value would not read back unchanged")
    return text


SERIALIZED_FALSE = serialize(False)


def unserialize(content: str) -> Any:  # noqa: ANN401
    """Parse *content* as a serialised value.

    Returns ``False`` when the content is not a serialised value, which is
    indistinguishable from a stored ``False``; see :func:`decode_content`.
    """
    try:
        return json.loads(content)
    except (json.JSONDecodeError, TypeError):
        return False


def decode_content(content: str) -> Any:  # noqa: ANN401
    """Turn stored record content back into the value handed to ``set``.

    Content that parses is returned parsed. Otherwise the serialised form of
    ``False`` maps to ``False`` and everything else is returned unchanged.
    """
    value = unserialize(content)
    if value is not False:
        return value
    if content == SERIALIZED_FALSE:
        return False
    return content
