"""Porcelain commands: tag and checkout."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import List, Optional

from .config import get_user_identity
from .constants import DEFAULT_IDENTITY, MODE_FILE_EXECUTABLE, OBJ_BLOB, OBJ_COMMIT, OBJ_TREE, REF_TAGS_PREFIX
from .errors import GitcoreError, InvalidRefError
from .objects import Tag, TagInfo
from .plumbing import find_object
from .refs import iter_refs, list_refs, update_ref, validate_tag_name
from .repo import Repository
from .tree import Tree

logger = logging.getLogger(__name__)


def create_tag(
    repo: Repository,
    name: str,
    target: str = "HEAD",
    annotated: bool = False,
    tagger: Optional[str] = None,
    message: str = "",
    force: bool = False,
) -> str:
    """Create refs/tags/<name>. Annotated tags store a tag object and point the ref at it.
    Returns the hash written to the ref."""
    validate_tag_name(name)
    refname = REF_TAGS_PREFIX + name
    if repo.repo_path(refname).exists() and not force:
        raise InvalidRefError(f"tag '{name}' already exists")
    sha = find_object(repo, target)
    if annotated:
        target_type = repo.read_object(sha).type
        tagger = tagger or get_user_identity(repo) or DEFAULT_IDENTITY
        info = TagInfo.annotated(name, sha, tagger, message, object_type=target_type)
        sha = repo.write_object(Tag.from_info(info))
    update_ref(repo.git_dir, refname, sha)
    logger.info("created %s tag %s -> %s", "annotated" if annotated else "lightweight", name, sha)
    return sha


def list_tags(repo: Repository) -> List[str]:
    """Tag names (refs/tags/*, nested names joined with '/'), sorted."""
    refs = list_refs(repo.git_dir, REF_TAGS_PREFIX.rstrip("/"))
    return [name for name, _ in iter_refs(refs, "")]


def _checkout_tree(repo: Repository, tree: Tree, base_path: Path) -> None:
    for entry in tree.entries:
        dest = base_path / entry.path
        kind = entry.object_type
        if kind == OBJ_COMMIT:
            # submodule commits are not stored here
            logger.debug("skipping gitlink %s", dest)
            continue
        obj = repo.read_object(entry.sha)
        if kind == OBJ_TREE:
            dest.mkdir()
            _checkout_tree(repo, obj, dest)
        elif kind == OBJ_BLOB:
            dest.write_bytes(obj.serialize())
            if entry.normalized_mode == MODE_FILE_EXECUTABLE:
                os.chmod(dest, 0o755)


def checkout(repo: Repository, name: str, path: str | Path) -> None:
    """Write the tree of commit (or tree) name into path, which must be missing or empty."""
    tree_sha = find_object(repo, name, OBJ_TREE)
    dest = Path(path)
    if dest.exists():
        if not dest.is_dir():
            raise NotADirectoryError(f"not a directory: {dest}")
        if any(dest.iterdir()):
            raise GitcoreError(f"{dest} is not empty")
    else:
        dest.mkdir(parents=True)
    _checkout_tree(repo, repo.read_object(tree_sha), dest)
