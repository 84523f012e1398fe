"""Constants for gitcore: repository layout, object types, file modes, ref paths."""

from __future__ import annotations

# Metadata directory inside the worktree
GIT_DIR_NAME = ".git"

# Default branch name written to HEAD on init
DEFAULT_BRANCH = "main"

# Identity used when no user.name/user.email is configured
DEFAULT_IDENTITY = "gitcore user <user@gitcore.local>"

# Git file modes
MODE_FILE_EXECUTABLE = "100755"

# Ref paths under .git
REFS_DIR = "refs"
REF_HEADS_PREFIX = "refs/heads/"
REF_TAGS_PREFIX = "refs/tags/"
HEAD_FILE = "HEAD"
SYMREF_PREFIX = "ref: "

# Object types
OBJ_BLOB = "blob"
OBJ_TREE = "tree"
OBJ_COMMIT = "commit"
OBJ_TAG = "tag"

OBJECTS_DIR = "objects"

# Minimum prefix length for abbreviated hashes (git uses 4)
MIN_PREFIX_LEN = 4

# SHA-1 widths
SHA1_HEX_LEN = 40
SHA1_RAW_LEN = 20

# Only repository format understood by this store
REPOSITORY_FORMAT_VERSION = 0
