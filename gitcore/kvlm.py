"""Key-value list with message (KVLM): the text body of commit and tag objects.

Format::

    key value\\n
    key first line\\n
     continuation line\\n
    \\n
    free-form message

Continuation lines carry exactly one leading space. The first empty line ends
the header block; everything after it is the message, stored under the empty
key.
"""

from __future__ import annotations

import logging
from typing import List, Optional

from .errors import SerializeInputError, UnsupportedValueTypeError
from .ordereddict import OrderedMap

logger = logging.getLogger(__name__)

MESSAGE_KEY = ""


def _strip_final_newline(data: bytes) -> bytes:
    return data[:-1] if data.endswith(b"\n") else data


def kvlm_parse(raw: bytes, start: int = 0, kvlm: Optional[OrderedMap] = None) -> OrderedMap:
    """Parse raw KVLM bytes from offset start into kvlm (a new map when None).

    Repeated keys accumulate in order. The message loses the single newline
    kvlm_serialize appends after it.
    """
    if kvlm is None:
        kvlm = OrderedMap()
    pos = start
    size = len(raw)
    while pos < size:
        spc = raw.find(b" ", pos)
        nl = raw.find(b"\n", pos)

        # Blank line (or a line with no key) ends the headers.
        if nl == pos or spc < 0 or (0 <= nl < spc):
            if nl < 0:
                logger.debug("kvlm: trailing bytes without key at offset %d ignored", pos)
                break
            kvlm.set(MESSAGE_KEY, _strip_final_newline(raw[nl + 1 :]))
            break

        key = raw[pos:spc].decode("utf-8", "surrogateescape")

        # Value ends at the first newline not followed by a continuation space.
        end = spc
        while True:
            end = raw.find(b"\n", end + 1)
            if end < 0 or end + 1 >= size or raw[end + 1] != 0x20:
                break
        if end < 0:
            end = size

        value = raw[spc + 1 : end].replace(b"\n ", b"\n")
        kvlm.set(key, value)
        pos = end + 1
    return kvlm


def _values_for(key: str, value: object) -> List[bytes]:
    if isinstance(value, bytes):
        return [value]
    if isinstance(value, list) and all(isinstance(v, bytes) for v in value):
        return value
    raise UnsupportedValueTypeError(key, type(value))


def kvlm_serialize(kvlm: Optional[OrderedMap]) -> bytes:
    """Serialize kvlm back to bytes: fields in insertion order, then the message."""
    if kvlm is None:
        raise SerializeInputError()
    parts: List[bytes] = []
    for key, value in kvlm.items():
        if key == MESSAGE_KEY:
            continue
        encoded_key = key.encode("utf-8", "surrogateescape")
        for v in _values_for(key, value):
            parts.append(encoded_key + b" " + v.replace(b"\n", b"\n ") + b"\n")
    if MESSAGE_KEY in kvlm:
        message = kvlm[MESSAGE_KEY]
        if not isinstance(message, bytes):
            raise UnsupportedValueTypeError(MESSAGE_KEY, type(message))
        parts.append(b"\n" + message + b"\n")
    return b"".join(parts)
