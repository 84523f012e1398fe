"""Repository configuration: the INI file at .git/config."""

from __future__ import annotations

import configparser
import io
import logging
from pathlib import Path
from typing import TYPE_CHECKING, Optional, Tuple

from .constants import REPOSITORY_FORMAT_VERSION
from .errors import InvalidConfigKeyError, UnsupportedRepositoryFormatError
from .util import write_text_atomic

if TYPE_CHECKING:
    from .repo import Repository

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "config"


def config_path(git_dir: Path) -> Path:
    return git_dir / CONFIG_FILENAME


def default_config() -> configparser.ConfigParser:
    """Config written by Repository.create; a new parser on every call."""
    cfg = configparser.ConfigParser()
    cfg["core"] = {
        "repositoryformatversion": str(REPOSITORY_FORMAT_VERSION),
        "filemode": "false",
        "bare": "false",
    }
    return cfg


def split_key(key: str) -> Tuple[str, str]:
    """'user.name' -> ('user', 'name'). Anything but exactly one dot between two names is invalid."""
    section, dot, option = key.partition(".")
    section, option = section.strip(), option.strip()
    if not dot or not section or not option or "." in option:
        raise InvalidConfigKeyError(f"invalid config key: {key!r} (expected section.option)")
    return section, option


def load_config(git_dir: Path) -> configparser.ConfigParser:
    """Parse <git_dir>/config; a missing file gives an empty parser. Parse errors propagate."""
    cfg = configparser.ConfigParser()
    path = config_path(git_dir)
    if path.is_file():
        cfg.read_string(path.read_text(encoding="utf-8"), source=str(path))
    return cfg


def save_config(git_dir: Path, cfg: configparser.ConfigParser) -> None:
    out = io.StringIO()
    cfg.write(out)
    write_text_atomic(config_path(git_dir), out.getvalue())


def check_format_version(cfg: configparser.ConfigParser) -> None:
    """Only core.repositoryformatversion = 0 is understood."""
    version = cfg.get("core", "repositoryformatversion", fallback=None)
    if version is None or version.strip() != str(REPOSITORY_FORMAT_VERSION):
        raise UnsupportedRepositoryFormatError(str(version))


def get_value(repo: "Repository", key: str) -> Optional[str]:
    section, option = split_key(key)
    return load_config(repo.git_dir).get(section, option, fallback=None)


def set_value(repo: "Repository", key: str, value: str) -> None:
    """Store key = value, adding the section when it is new."""
    section, option = split_key(key)
    cfg = load_config(repo.git_dir)
    if not cfg.has_section(section):
        cfg.add_section(section)
    cfg.set(section, option, value)
    save_config(repo.git_dir, cfg)
    logger.debug("config %s = %r", key, value)


def get_user_identity(repo: "Repository") -> Optional[str]:
    """'Name <email>' from user.name and user.email; None unless both are set."""
    cfg = load_config(repo.git_dir)
    name = cfg.get("user", "name", fallback=None)
    email = cfg.get("user", "email", fallback=None)
    if name is None or email is None:
        return None
    return f"{name} <{email}>"
