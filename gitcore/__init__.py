"""gitcore: a Git-compatible loose object store (objects, trees, refs, tags, checkout)."""

from .repo import Repository, find_repository
from .errors import GitcoreError, NotARepositoryError

__all__ = ["Repository", "find_repository", "GitcoreError", "NotARepositoryError"]
