"""Object database: loose objects stored zlib-compressed under objects/<aa>/<bb...>."""

from __future__ import annotations

import logging
import zlib
from pathlib import Path
from typing import List, Tuple

from .constants import MIN_PREFIX_LEN, SHA1_HEX_LEN
from .errors import (
    InvalidObjectHeaderError,
    ObjectNotFoundError,
    ObjectSizeMismatchError,
)
from .objects import GitObject, object_class
from .util import is_hex, sha1_hash, write_bytes_atomic

logger = logging.getLogger(__name__)


def parse_object(raw: bytes) -> Tuple[str, bytes]:
    """Split decompressed '<type> <size>\\0<payload>' into (type, payload), checking the size."""
    null_idx = raw.find(b"\0")
    if null_idx == -1:
        raise InvalidObjectHeaderError("no NUL byte after header")
    parts = raw[:null_idx].split(b" ")
    if len(parts) != 2:
        raise InvalidObjectHeaderError(f"expected '<type> <size>', got {raw[:null_idx]!r}")
    type_bytes, size_bytes = parts
    if not size_bytes.isdigit():
        raise InvalidObjectHeaderError(f"invalid size {size_bytes!r}")
    size = int(size_bytes)
    payload = raw[null_idx + 1 :]
    if len(payload) != size:
        raise ObjectSizeMismatchError(size, len(payload))
    return type_bytes.decode("ascii", "replace"), payload


class ObjectDB:
    """Loose object storage under .git/objects/<aa>/<bb...>."""

    def __init__(self, objects_dir: Path) -> None:
        self.objects_dir = Path(objects_dir)

    def _object_path(self, sha: str) -> Path:
        """Path to loose object file. sha must be full 40-char hex."""
        if len(sha) != SHA1_HEX_LEN or not is_hex(sha):
            raise ObjectNotFoundError(f"invalid object name: {sha}")
        sha = sha.lower()
        return self.objects_dir / sha[:2] / sha[2:]

    def exists(self, sha: str) -> bool:
        """Return True if object exists (sha must be full 40-char)."""
        return self._object_path(sha).exists()

    def write(self, obj: GitObject, persist: bool = True) -> str:
        """Hash obj (header + payload); when persist is set, compress and store it. Return full hash."""
        raw = obj.raw()
        sha = sha1_hash(raw)
        if not persist:
            return sha
        path = self._object_path(sha)
        if path.exists():
            logger.debug("object %s already stored", sha)
            return sha
        write_bytes_atomic(path, zlib.compress(raw))
        logger.debug("wrote %s %s (%d bytes)", obj.type, sha, len(raw))
        return sha

    def read(self, sha: str) -> GitObject:
        """Load object by full 40-char hash. Raises ObjectNotFoundError or a format error."""
        path = self._object_path(sha)
        if not path.is_file():
            raise ObjectNotFoundError(f"object {sha} not found")
        try:
            raw = zlib.decompress(path.read_bytes())
        except zlib.error as e:
            raise InvalidObjectHeaderError(f"cannot decompress object {sha}: {e}") from e
        obj_type, payload = parse_object(raw)
        obj = object_class(obj_type).deserialize(payload)
        logger.debug("read %s %s", obj_type, sha)
        return obj

    def prefix_lookup(self, prefix: str) -> List[str]:
        """Return list of full 40-char hashes that start with prefix. Prefix min 4 chars."""
        if len(prefix) < MIN_PREFIX_LEN or not is_hex(prefix):
            return []
        prefix = prefix.lower()
        if len(prefix) == SHA1_HEX_LEN:
            return [prefix] if self.exists(prefix) else []
        pre_dir = self.objects_dir / prefix[:2]
        if not pre_dir.is_dir():
            return []
        suffix = prefix[2:]
        return sorted(
            prefix[:2] + f.name
            for f in pre_dir.iterdir()
            if f.is_file() and f.name.startswith(suffix) and len(f.name) == SHA1_HEX_LEN - 2
        )
