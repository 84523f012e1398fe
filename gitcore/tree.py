"""Tree objects: binary directory snapshots.

Each entry is ``<mode> <path>\\0<20 raw hash bytes>``, entries concatenated
with no separator, sorted by path with directories compared as ``path/``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Tuple

from .constants import OBJ_BLOB, OBJ_COMMIT, OBJ_TREE, SHA1_RAW_LEN
from .errors import MalformedTreeEntryError, UnknownObjectTypeError
from .objects import GitObject

# Leading two digits of the normalized mode -> object type
_MODE_TYPES = {
    "10": OBJ_BLOB,
    "12": OBJ_BLOB,  # symlink: target path stored as blob content
    "04": OBJ_TREE,
    "16": OBJ_COMMIT,  # gitlink (submodule commit)
}


@dataclass
class TreeEntry:
    """Single tree entry: mode as stored (5 or 6 digits), path, 40-char hex hash."""

    mode: str
    path: str
    sha: str

    @property
    def normalized_mode(self) -> str:
        """Six-character mode ('40000' -> '040000')."""
        return self.mode.rjust(6, "0")

    @property
    def object_type(self) -> str:
        prefix = self.normalized_mode[:2]
        try:
            return _MODE_TYPES[prefix]
        except KeyError:
            raise UnknownObjectTypeError(prefix) from None

    @property
    def is_tree(self) -> bool:
        return self.normalized_mode.startswith("04")

    def sort_key(self) -> bytes:
        name = self.path.encode("utf-8", "surrogateescape")
        return name + b"/" if self.is_tree else name

    def to_bytes(self) -> bytes:
        """Format: b'{mode} {path}\\0' + 20-byte binary sha."""
        try:
            raw_sha = bytes.fromhex(self.sha)
        except ValueError:
            raise MalformedTreeEntryError(f"invalid hash {self.sha!r} for {self.path!r}") from None
        if len(raw_sha) != SHA1_RAW_LEN:
            raise MalformedTreeEntryError(f"hash for {self.path!r} is {len(raw_sha)} bytes")
        head = self.mode.encode("ascii") + b" " + self.path.encode("utf-8", "surrogateescape") + b"\0"
        return head + raw_sha


def parse_tree_entry(raw: bytes, start: int = 0) -> Tuple[int, TreeEntry]:
    """Parse one entry at start; return (offset after entry, entry)."""
    sp = raw.find(b" ", start)
    if sp < 0:
        raise MalformedTreeEntryError("missing space after mode", start)
    if sp - start not in (5, 6):
        raise MalformedTreeEntryError(f"invalid mode length {sp - start}", start)
    mode_bytes = raw[start:sp]
    if not mode_bytes.isdigit():
        raise MalformedTreeEntryError(f"mode {mode_bytes!r} is not numeric", start)
    mode = mode_bytes.decode("ascii")

    nul = raw.find(b"\0", sp + 1)
    if nul < 0:
        raise MalformedTreeEntryError("missing NUL terminator after path", sp + 1)
    path = raw[sp + 1 : nul].decode("utf-8", "surrogateescape")

    sha_start = nul + 1
    if len(raw) - sha_start < SHA1_RAW_LEN:
        raise MalformedTreeEntryError(
            f"expected {SHA1_RAW_LEN} hash bytes, found {len(raw) - sha_start}", sha_start
        )
    sha = raw[sha_start : sha_start + SHA1_RAW_LEN].hex()
    return sha_start + SHA1_RAW_LEN, TreeEntry(mode, path, sha)


def parse_tree(raw: bytes) -> List[TreeEntry]:
    entries: List[TreeEntry] = []
    pos = 0
    while pos < len(raw):
        pos, entry = parse_tree_entry(raw, pos)
        entries.append(entry)
    return entries


def serialize_tree(entries: List[TreeEntry]) -> bytes:
    """Sort entries canonically (file 'a' before directory 'a/') and concatenate them."""
    return b"".join(e.to_bytes() for e in sorted(entries, key=TreeEntry.sort_key))


class Tree(GitObject):
    """Tree object: list of TreeEntry, serialized in canonical order."""

    type = OBJ_TREE

    def __init__(self, entries: Optional[List[TreeEntry]] = None) -> None:
        self.entries: List[TreeEntry] = list(entries or [])

    def serialize(self) -> bytes:
        return serialize_tree(self.entries)

    @classmethod
    def deserialize(cls, data: bytes) -> "Tree":
        return cls(parse_tree(data))
