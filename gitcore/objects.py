"""Git objects: GitObject base, Blob, Commit, Tag with payload serialization/parsing.

Each object type serializes to its payload only; the '<type> <size>\\0' header,
hashing and compression are applied by the object database.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime
from typing import Dict, List, Optional, Type, Union

from .constants import OBJ_BLOB, OBJ_COMMIT, OBJ_TAG, OBJ_TREE
from .errors import MalformedSignatureError, MissingRequiredFieldError, UnknownObjectTypeError
from .kvlm import MESSAGE_KEY, kvlm_parse, kvlm_serialize
from .ordereddict import OrderedMap
from .util import parse_tz_offset, sha1_hash, timestamp_with_tz


def object_header(obj_type: str, size: int) -> bytes:
    """Header: '<type> <size>\\0'."""
    return f"{obj_type} {size}\0".encode()


class GitObject:
    """Base git object. Subclasses set `type` and implement serialize/deserialize."""

    type: str = ""

    def serialize(self) -> bytes:
        raise NotImplementedError

    @classmethod
    def deserialize(cls, data: bytes) -> "GitObject":
        raise NotImplementedError

    def header(self) -> bytes:
        return object_header(self.type, len(self.serialize()))

    def raw(self) -> bytes:
        """Uncompressed stored form: header + payload."""
        payload = self.serialize()
        return object_header(self.type, len(payload)) + payload

    def hash_id(self) -> str:
        """SHA-1 of header + payload."""
        return sha1_hash(self.raw())


class Blob(GitObject):
    """Blob object: raw file content."""

    type = OBJ_BLOB

    def __init__(self, data: bytes = b"") -> None:
        self.data = data

    def serialize(self) -> bytes:
        return self.data

    @classmethod
    def deserialize(cls, data: bytes) -> "Blob":
        return cls(data)


_TIMESTAMP_RE = re.compile(r"[+-]?[0-9]+")


def _text(value: Union[bytes, str]) -> str:
    # Bytes that are not UTF-8 come back as lone surrogates and re-encode unchanged.
    return value.decode("utf-8", "surrogateescape") if isinstance(value, bytes) else value


def _bytes(value: str) -> bytes:
    return value.encode("utf-8", "surrogateescape")


def _parse_timestamp(field_name: str, line: str, token: str) -> int:
    if not _TIMESTAMP_RE.fullmatch(token):
        raise MalformedSignatureError(field_name, line, f"invalid timestamp {token!r}")
    return int(token)


@dataclass
class Signature:
    """Author/committer identity: 'Name <email> 1700000000 +0000'."""

    name: str
    email: str
    timestamp: int
    timezone: str = "+0000"

    @classmethod
    def parse(cls, raw: Union[bytes, str], field_name: str = "signature") -> "Signature":
        """Split on spaces: the last two tokens are timestamp and timezone, the rest is 'name <email>'."""
        text = _text(raw)
        tokens = text.split(" ")
        if len(tokens) < 4:
            raise MalformedSignatureError(field_name, text, "expected 'name <email> timestamp timezone'")
        tz = tokens[-1]
        ident = " ".join(tokens[:-2])
        ts = _parse_timestamp(field_name, text, tokens[-2])
        lt = ident.find("<")
        gt = ident.find(">", lt + 1)
        if lt < 0 or gt < 0:
            raise MalformedSignatureError(field_name, text, "email must be enclosed in '<' '>'")
        return cls(name=ident[:lt].strip(), email=ident[lt + 1 : gt], timestamp=ts, timezone=tz)

    @property
    def when(self) -> datetime:
        return datetime.fromtimestamp(self.timestamp, parse_tz_offset(self.timezone))

    def format(self) -> str:
        return f"{self.name} <{self.email}> {self.timestamp} {self.timezone}"

    def __str__(self) -> str:
        return self.format()


def _required(kvlm: OrderedMap, key: str) -> bytes:
    values = kvlm.values_of(key)
    if not values:
        raise MissingRequiredFieldError(key)
    return values[0]


def _optional(kvlm: OrderedMap, key: str) -> str:
    values = kvlm.values_of(key)
    return _text(values[0]) if values else ""


@dataclass
class CommitInfo:
    """Typed view of a commit's KVLM body."""

    tree: str
    parents: List[str]
    author: Signature
    committer: Signature
    message: str

    @classmethod
    def from_kvlm(cls, kvlm: OrderedMap) -> "CommitInfo":
        # author is checked first so a missing author is always reported as such
        author = Signature.parse(_required(kvlm, "author"), "author")
        committer = Signature.parse(_required(kvlm, "committer"), "committer")
        tree = _text(_required(kvlm, "tree"))
        message = _text(_required(kvlm, MESSAGE_KEY))
        parents = [_text(p) for p in kvlm.values_of("parent")]
        return cls(tree=tree, parents=parents, author=author, committer=committer, message=message)

    def to_kvlm(self) -> OrderedMap:
        kvlm = OrderedMap()
        kvlm.set("tree", _bytes(self.tree))
        for parent in self.parents:
            kvlm.set("parent", _bytes(parent))
        kvlm.set("author", _bytes(self.author.format()))
        kvlm.set("committer", _bytes(self.committer.format()))
        kvlm.set(MESSAGE_KEY, _bytes(self.message))
        return kvlm


class Commit(GitObject):
    """Commit object: KVLM payload (tree, parents, author, committer, message).

    The raw KVLM map is kept so extra headers (gpgsig, encoding, ...) survive
    a parse/serialize cycle byte for byte.
    """

    type = OBJ_COMMIT

    def __init__(self, kvlm: Optional[OrderedMap] = None) -> None:
        self.kvlm = kvlm if kvlm is not None else OrderedMap()
        self._info: Optional[CommitInfo] = None

    @classmethod
    def create(
        cls,
        tree_hash: str,
        parent_hashes: List[str],
        author: Signature,
        committer: Signature,
        message: str,
    ) -> "Commit":
        info = CommitInfo(tree_hash, list(parent_hashes), author, committer, message)
        commit = cls(info.to_kvlm())
        commit._info = info
        return commit

    def serialize(self) -> bytes:
        return kvlm_serialize(self.kvlm)

    @classmethod
    def deserialize(cls, data: bytes) -> "Commit":
        commit = cls(kvlm_parse(data))
        commit._info = CommitInfo.from_kvlm(commit.kvlm)
        return commit

    @property
    def info(self) -> CommitInfo:
        if self._info is None:
            self._info = CommitInfo.from_kvlm(self.kvlm)
        return self._info

    @property
    def tree_hash(self) -> str:
        return self.info.tree

    @property
    def parent_hashes(self) -> List[str]:
        return self.info.parents

    @property
    def message(self) -> str:
        return self.info.message


@dataclass
class TagInfo:
    """A tag: lightweight (name + object only) or annotated (all fields)."""

    name: str
    object: str
    object_type: str = ""
    tagger: str = ""
    timestamp: Optional[int] = None
    timezone: str = "+0000"
    message: str = ""

    @classmethod
    def annotated(
        cls,
        name: str,
        object_hash: str,
        tagger: str,
        message: str,
        object_type: str = OBJ_COMMIT,
        timestamp: Optional[int] = None,
    ) -> "TagInfo":
        ts, tz = timestamp_with_tz(timestamp)
        return cls(name, object_hash, object_type, tagger, ts, tz, message)

    @property
    def is_annotated(self) -> bool:
        """True only for a tag object that names a commit."""
        return self.object_type == OBJ_COMMIT

    def to_kvlm(self) -> OrderedMap:
        """Tag objects map to object/type/tag/tagger + message; lightweight tags to an empty map."""
        kvlm = OrderedMap()
        if self.object_type:
            kvlm.set("object", _bytes(self.object))
            kvlm.set("type", _bytes(self.object_type))
            kvlm.set("tag", _bytes(self.name))
            kvlm.set("tagger", _bytes(f"{self.tagger} {self.timestamp} {self.timezone}"))
            kvlm.set(MESSAGE_KEY, _bytes(self.message))
        return kvlm

    @classmethod
    def from_kvlm(cls, kvlm: OrderedMap) -> "TagInfo":
        object_type = _optional(kvlm, "type")
        if not object_type:
            return cls(name=_optional(kvlm, "tag"), object=_optional(kvlm, "object"))
        object_hash = _text(_required(kvlm, "object"))
        name = _text(_required(kvlm, "tag"))
        tagger_line = _text(_required(kvlm, "tagger"))
        message = _text(_required(kvlm, MESSAGE_KEY))
        # Only the trailing timestamp is parsed; 'name <email>' is kept verbatim.
        parts = tagger_line.rsplit(" ", 2)
        if len(parts) != 3:
            raise MalformedSignatureError("tagger", tagger_line, "expected 'name <email> timestamp timezone'")
        ts = _parse_timestamp("tagger", tagger_line, parts[1])
        return cls(name, object_hash, object_type, parts[0], ts, parts[2], message)


class Tag(GitObject):
    """Annotated tag object: KVLM payload (object, type, tag, tagger, message)."""

    type = OBJ_TAG

    def __init__(self, kvlm: Optional[OrderedMap] = None) -> None:
        self.kvlm = kvlm if kvlm is not None else OrderedMap()
        self._info: Optional[TagInfo] = None

    @classmethod
    def from_info(cls, info: TagInfo) -> "Tag":
        tag = cls(info.to_kvlm())
        tag._info = info
        return tag

    def serialize(self) -> bytes:
        return kvlm_serialize(self.kvlm)

    @classmethod
    def deserialize(cls, data: bytes) -> "Tag":
        tag = cls(kvlm_parse(data))
        tag._info = TagInfo.from_kvlm(tag.kvlm)
        return tag

    @property
    def info(self) -> TagInfo:
        if self._info is None:
            self._info = TagInfo.from_kvlm(self.kvlm)
        return self._info


def object_class(type_name: str) -> Type[GitObject]:
    """Map a type name to its object class; only blob, commit, tree and tag exist."""
    from .tree import Tree

    classes: Dict[str, Type[GitObject]] = {
        OBJ_BLOB: Blob,
        OBJ_COMMIT: Commit,
        OBJ_TREE: Tree,
        OBJ_TAG: Tag,
    }
    try:
        return classes[type_name]
    except KeyError:
        raise UnknownObjectTypeError(type_name) from None


def object_from_payload(type_name: str, data: bytes) -> GitObject:
    return object_class(type_name).deserialize(data)
