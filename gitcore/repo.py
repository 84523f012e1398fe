"""Repository: maps path segments to locations under .git and ties the ODB to them."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from .config import check_format_version, config_path, default_config, load_config, save_config
from .constants import DEFAULT_BRANCH, GIT_DIR_NAME, OBJECTS_DIR, REF_HEADS_PREFIX
from .errors import GitcoreError, NotARepositoryError
from .objects import GitObject
from .odb import ObjectDB
from .refs import write_head_ref
from .util import write_text_atomic

logger = logging.getLogger(__name__)

DESCRIPTION = "Unnamed repository; edit this file 'description' to name the repository.\n"


class Repository:
    """A worktree and its .git metadata directory."""

    def __init__(self, path: str | Path = ".", force: bool = False) -> None:
        self.worktree = Path(path).resolve()
        self.git_dir = self.worktree / GIT_DIR_NAME
        self.odb = ObjectDB(self.git_dir / OBJECTS_DIR)
        if force:
            return
        if not self.git_dir.is_dir():
            raise NotARepositoryError(f"not a git repository: {self.worktree}")
        if not config_path(self.git_dir).is_file():
            raise NotARepositoryError(f"configuration file missing in {self.git_dir}")
        check_format_version(load_config(self.git_dir))

    def repo_path(self, *segments: str) -> Path:
        """Path under .git; nothing is created."""
        return self.git_dir.joinpath(*segments)

    def repo_dir(self, *segments: str, mkdir: bool = False) -> Optional[Path]:
        """Directory under .git, created when mkdir is set. None if absent and not created."""
        path = self.repo_path(*segments)
        if path.exists():
            if not path.is_dir():
                raise NotADirectoryError(f"not a directory: {path}")
            return path
        if mkdir:
            path.mkdir(parents=True, exist_ok=True)
            return path
        return None

    def repo_file(self, *segments: str, mkdir: bool = False) -> Path:
        """File path under .git; with mkdir the parent directories are created."""
        if mkdir and len(segments) > 1:
            self.repo_dir(*segments[:-1], mkdir=True)
        return self.repo_path(*segments)

    @classmethod
    def create(cls, path: str | Path) -> "Repository":
        """Create a new repository at path. The metadata directory must be absent or empty."""
        repo = cls(path, force=True)
        if repo.worktree.exists():
            if not repo.worktree.is_dir():
                raise NotADirectoryError(f"not a directory: {repo.worktree}")
            if repo.git_dir.exists() and any(repo.git_dir.iterdir()):
                raise GitcoreError(f"{repo.git_dir} is not empty")
        else:
            repo.worktree.mkdir(parents=True)

        repo.repo_dir("branches", mkdir=True)
        repo.repo_dir(OBJECTS_DIR, mkdir=True)
        repo.repo_dir("refs", "tags", mkdir=True)
        repo.repo_dir("refs", "heads", mkdir=True)

        write_text_atomic(repo.repo_file("description"), DESCRIPTION)
        write_head_ref(repo.git_dir, REF_HEADS_PREFIX + DEFAULT_BRANCH)
        save_config(repo.git_dir, default_config())
        logger.info("initialized empty repository in %s", repo.git_dir)
        return repo

    def write_object(self, obj: GitObject, persist: bool = True) -> str:
        """Hash (and by default store) obj; return full hash."""
        return self.odb.write(obj, persist)

    def read_object(self, sha: str) -> GitObject:
        """Load object by full hash."""
        return self.odb.read(sha)


def find_repository(path: str | Path = ".", required: bool = True) -> Optional[Repository]:
    """Walk up from path to the first directory holding .git."""
    current = Path(path).resolve()
    while True:
        if (current / GIT_DIR_NAME).is_dir():
            return Repository(current)
        if current.parent == current:
            if required:
                raise NotARepositoryError(f"no git directory found from {Path(path).resolve()}")
            return None
        current = current.parent
