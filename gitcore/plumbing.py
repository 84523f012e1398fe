"""Plumbing commands: name resolution, cat-file, hash-object, ls-tree, show-ref."""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional

from .constants import (
    OBJ_BLOB,
    OBJ_COMMIT,
    OBJ_TAG,
    OBJ_TREE,
    REF_HEADS_PREFIX,
    REF_TAGS_PREFIX,
    REFS_DIR,
    SHA1_HEX_LEN,
)
from .errors import AmbiguousRefError, GitcoreError, InvalidRefError
from .objects import object_from_payload
from .refs import head_commit, iter_refs, list_refs, resolve_ref
from .repo import Repository
from .tree import Tree
from .util import is_hex


def object_resolve(repo: Repository, name: str) -> List[str]:
    """All hashes name could mean: HEAD, a (short) hash, a tag, a branch or a full ref path."""
    name = name.strip()
    if not name:
        return []
    if name == "HEAD":
        sha = head_commit(repo.git_dir)
        return [sha] if sha else []

    candidates: List[str] = []
    if len(name) <= SHA1_HEX_LEN and is_hex(name):
        candidates.extend(repo.odb.prefix_lookup(name))
    refnames = [REF_TAGS_PREFIX + name, REF_HEADS_PREFIX + name]
    if name.startswith(REFS_DIR + "/"):
        refnames.insert(0, name)
    for refname in refnames:
        sha = resolve_ref(repo.git_dir, refname)
        if sha and sha not in candidates:
            candidates.append(sha)
    return candidates


def find_object(repo: Repository, name: str, object_type: Optional[str] = None, follow: bool = True) -> str:
    """Resolve name to one hash. With object_type and follow, peel tags to their
    object and commits to their tree until an object of that type is reached."""
    candidates = object_resolve(repo, name)
    if not candidates:
        raise InvalidRefError(f"no such reference: {name}")
    if len(candidates) > 1:
        raise AmbiguousRefError(name, candidates)
    sha = candidates[0]
    if object_type is None:
        return sha

    while True:
        obj = repo.read_object(sha)
        if obj.type == object_type:
            return sha
        if not follow:
            raise InvalidRefError(f"{name} is a {obj.type}, not a {object_type}")
        if obj.type == OBJ_TAG:
            sha = obj.info.object
        elif obj.type == OBJ_COMMIT and object_type == OBJ_TREE:
            sha = obj.tree_hash
        else:
            raise InvalidRefError(f"{name} cannot be peeled to a {object_type}")


def cat_file_type(repo: Repository, name: str) -> str:
    """Return object type (blob, tree, commit, tag)."""
    return repo.read_object(find_object(repo, name)).type


def cat_file(repo: Repository, name: str, object_type: Optional[str] = None) -> bytes:
    """Return the object's payload, peeling to object_type when one is given."""
    sha = find_object(repo, name, object_type)
    return repo.read_object(sha).serialize()


def hash_object(
    path: str | Path,
    type_name: str = OBJ_BLOB,
    repo: Optional[Repository] = None,
    write: bool = False,
) -> str:
    """Hash file content as an object of type_name; optionally store it in repo."""
    data = Path(path).read_bytes()
    obj = object_from_payload(type_name, data)
    if not write:
        return obj.hash_id()
    if repo is None:
        raise GitcoreError("hash-object -w needs a repository")
    return repo.write_object(obj)


def _ls_tree_rec(repo: Repository, tree: Tree, prefix: str, recursive: bool) -> None:
    for entry in tree.entries:
        path = prefix + entry.path
        kind = entry.object_type
        if recursive and kind == OBJ_TREE:
            _ls_tree_rec(repo, repo.read_object(entry.sha), path + "/", recursive)
        else:
            print(f"{entry.normalized_mode} {kind}\t{entry.sha}\t{path}")


def ls_tree(repo: Repository, tree_ish: str, recursive: bool = False) -> None:
    """List tree; tree_ish can be a tree, a commit, a tag, a branch or HEAD."""
    sha = find_object(repo, tree_ish, OBJ_TREE)
    _ls_tree_rec(repo, repo.read_object(sha), "", recursive)


def show_ref(repo: Repository, with_hash: bool = True) -> None:
    """Print '<hash> <refname>' for every ref under refs/, sorted by path."""
    for refname, sha in iter_refs(list_refs(repo.git_dir)):
        if sha is None:
            continue
        print(f"{sha} {refname}" if with_hash else refname)
