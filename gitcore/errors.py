"""Custom exceptions for gitcore.

Every format violation found while decoding or encoding stored data raises a
subclass of GitcoreError carrying the context needed to report it.
"""

from __future__ import annotations

from typing import List, Optional


class GitcoreError(Exception):
    """Base exception for gitcore."""

    pass


class NotARepositoryError(GitcoreError):
    """Raised when no repository metadata directory is found."""

    pass


class UnsupportedRepositoryFormatError(GitcoreError):
    """Raised when core.repositoryformatversion is not understood."""

    def __init__(self, version: str) -> None:
        self.version = version
        super().__init__(f"unsupported repositoryformatversion {version}")


class ObjectNotFoundError(GitcoreError):
    """Raised when an object is not found in the ODB."""

    pass


class AmbiguousRefError(GitcoreError):
    """Raised when a name or hash prefix matches multiple objects."""

    def __init__(self, name: str, candidates: List[str]) -> None:
        self.name = name
        self.candidates = list(candidates)
        super().__init__(f"ambiguous reference {name!r}: candidates are {', '.join(self.candidates)}")


class InvalidRefError(GitcoreError):
    """Raised when a ref name or rev cannot be resolved."""

    pass


class InvalidConfigKeyError(GitcoreError):
    """Raised when a config key is invalid (e.g. not section.option)."""

    pass


class CyclicReferenceError(GitcoreError):
    """Raised when symbolic refs point back at a ref already being resolved."""

    def __init__(self, chain: List[str]) -> None:
        self.chain = list(chain)
        super().__init__("reference cycle: " + " -> ".join(self.chain))


class MalformedSignatureError(GitcoreError):
    """Raised when an author/committer/tagger line breaks the 'name <email> ts tz' shape."""

    def __init__(self, field: str, value: str, reason: str) -> None:
        self.field = field
        self.value = value
        self.reason = reason
        super().__init__(f"malformed {field} signature {value!r}: {reason}")


class MissingRequiredFieldError(GitcoreError):
    """Raised when a mandatory commit/tag field is absent."""

    def __init__(self, field: str) -> None:
        self.field = field
        name = "message" if field == "" else field
        super().__init__(f"missing required field: {name}")


class UnsupportedValueTypeError(GitcoreError):
    """Raised when a KVLM value is neither bytes nor a list of bytes."""

    def __init__(self, key: str, value_type: type) -> None:
        self.key = key
        self.value_type = value_type
        super().__init__(f"unsupported type for key {key!r}: {value_type.__name__}")


class SerializeInputError(GitcoreError):
    """Raised when asked to serialize a missing metadata map."""

    def __init__(self) -> None:
        super().__init__("cannot serialize: metadata map is None")


class InvalidObjectHeaderError(GitcoreError):
    """Raised when an object header is not '<type> <size>\\0'."""

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(f"invalid object header: {reason}")


class ObjectSizeMismatchError(GitcoreError):
    """Raised when the payload length disagrees with the header."""

    def __init__(self, expected: int, actual: int) -> None:
        self.expected = expected
        self.actual = actual
        super().__init__(f"object size mismatch: header says {expected}, payload has {actual}")


class UnknownObjectTypeError(GitcoreError):
    """Raised when a header or tree mode names a type outside blob/commit/tree/tag."""

    def __init__(self, type_name: str) -> None:
        self.type_name = type_name
        super().__init__(f"unknown object type: {type_name!r}")


class MalformedTreeEntryError(GitcoreError):
    """Raised when a binary tree entry cannot be decoded."""

    def __init__(self, reason: str, offset: Optional[int] = None) -> None:
        self.reason = reason
        self.offset = offset
        where = f" at offset {offset}" if offset is not None else ""
        super().__init__(f"invalid tree entry{where}: {reason}")
