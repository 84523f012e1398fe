"""References: small text files under .git holding a hash or 'ref: <other ref>'."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterator, List, Optional, Tuple

from .constants import HEAD_FILE, REF_HEADS_PREFIX, REFS_DIR, SHA1_HEX_LEN, SYMREF_PREFIX
from .errors import CyclicReferenceError, InvalidRefError
from .ordereddict import OrderedMap
from .util import is_hex, write_text_atomic

logger = logging.getLogger(__name__)


def _is_hex_sha(s: str) -> bool:
    return len(s) == SHA1_HEX_LEN and is_hex(s)


def resolve_ref(repo_git: Path, refname: str) -> Optional[str]:
    """Follow 'ref: ' indirection from refname to a terminal value.

    Returns None when a ref file along the way does not exist. Raises
    CyclicReferenceError when a ref is reached twice.
    """
    chain: List[str] = []
    while True:
        if refname in chain:
            raise CyclicReferenceError(chain + [refname])
        chain.append(refname)
        path = repo_git / refname
        if not path.is_file():
            logger.debug("ref %s does not exist", refname)
            return None
        data = path.read_text(encoding="utf-8")
        if data.endswith("\n"):
            data = data[:-1]
        if not data.startswith(SYMREF_PREFIX):
            return data
        refname = data[len(SYMREF_PREFIX) :]


def _is_ref_file_name(name: str) -> bool:
    # skip temp files left by atomic writes and lock files
    return not name.startswith(".") and not name.endswith(".lock")


def list_refs(repo_git: Path, refname: str = REFS_DIR) -> OrderedMap:
    """Mirror the ref directory refname as nested OrderedMaps (name-sorted); leaves are resolved hashes."""
    refs = OrderedMap()
    directory = repo_git / refname
    if not directory.is_dir():
        return refs
    for entry in sorted(directory.iterdir(), key=lambda p: p.name):
        if not _is_ref_file_name(entry.name):
            continue
        child = f"{refname}/{entry.name}"
        if entry.is_dir():
            refs.set(entry.name, list_refs(repo_git, child))
        else:
            refs.set(entry.name, resolve_ref(repo_git, child))
    return refs


def iter_refs(refs: OrderedMap, prefix: str = REFS_DIR) -> Iterator[Tuple[str, Optional[str]]]:
    """Flatten a list_refs tree into (full refname, hash) pairs in listing order."""
    for name, value in refs.items():
        full = f"{prefix}/{name}" if prefix else name
        if isinstance(value, OrderedMap):
            yield from iter_refs(value, full)
        else:
            yield full, value


def head_commit(repo_git: Path) -> Optional[str]:
    """Hash HEAD resolves to; None on an unborn branch."""
    return resolve_ref(repo_git, HEAD_FILE)


def update_ref(repo_git: Path, refname: str, new_hash: str) -> None:
    """Write ref to point to new_hash (40 hex)."""
    if not _is_hex_sha(new_hash):
        raise InvalidRefError(f"invalid hash: {new_hash}")
    write_text_atomic(repo_git / refname, new_hash.lower() + "\n")
    logger.debug("updated %s -> %s", refname, new_hash)


def write_head_ref(repo_git: Path, refname: str) -> None:
    """Set HEAD to symbolic ref (e.g. refs/heads/main)."""
    if not refname.startswith(REF_HEADS_PREFIX):
        raise InvalidRefError(f"symbolic ref must be refs/heads/... (got {refname})")
    write_text_atomic(repo_git / HEAD_FILE, f"{SYMREF_PREFIX}{refname}\n")


# Characters disallowed in tag names (git refname rules)
_TAG_FORBIDDEN = set(" ~^:?*[]\\")


def validate_tag_name(name: str) -> None:
    """Raise InvalidRefError if tag name is invalid (spaces, .., leading /, ~^:?*[], etc.)."""
    if not name or name.startswith("/") or name.endswith("/") or name.startswith("."):
        raise InvalidRefError(f"invalid tag name: {name!r}")
    if ".." in name or "//" in name or name.endswith(".lock"):
        raise InvalidRefError(f"invalid tag name: {name!r}")
    if any(c in _TAG_FORBIDDEN for c in name):
        raise InvalidRefError(f"invalid tag name: {name!r}")
