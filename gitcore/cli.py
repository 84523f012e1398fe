"""CLI: argparse and command dispatch."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from .config import get_value, set_value
from .constants import OBJ_BLOB, OBJ_COMMIT, OBJ_TAG, OBJ_TREE
from .errors import GitcoreError
from .logging_config import setup_logging
from .plumbing import cat_file, cat_file_type, find_object, hash_object, ls_tree, show_ref
from .porcelain import checkout, create_tag, list_tags
from .repo import Repository, find_repository

logger = logging.getLogger(__name__)

OBJECT_TYPES = [OBJ_BLOB, OBJ_COMMIT, OBJ_TAG, OBJ_TREE]


def _repo(args: argparse.Namespace) -> Repository:
    return find_repository(args.repo_path or Path.cwd())


def _write_bytes(data: bytes) -> None:
    out = getattr(sys.stdout, "buffer", None)
    if out is None:
        # stdout replaced by a text stream (tests, some embedders)
        sys.stdout.write(data.decode("utf-8", "replace"))
        return
    sys.stdout.flush()
    out.write(data)
    out.flush()


def cmd_init(args: argparse.Namespace) -> int:
    base = Path(args.repo_path or Path.cwd())
    path = base / args.path if args.path else base
    repo = Repository.create(path)
    print(f"Initialized empty repository in {repo.git_dir}")
    return 0


def cmd_cat_file(args: argparse.Namespace) -> int:
    repo = _repo(args)
    if args.type_only:
        print(cat_file_type(repo, args.object))
        return 0
    if args.object_type == OBJ_TREE or (args.object_type is None and cat_file_type(repo, args.object) == OBJ_TREE):
        ls_tree(repo, args.object)
        return 0
    _write_bytes(cat_file(repo, args.object, args.object_type))
    return 0


def cmd_hash_object(args: argparse.Namespace) -> int:
    repo = _repo(args) if args.write else None
    print(hash_object(args.path, type_name=args.type, repo=repo, write=args.write))
    return 0


def cmd_ls_tree(args: argparse.Namespace) -> int:
    ls_tree(_repo(args), args.tree_ish, recursive=args.recursive)
    return 0


def cmd_show_ref(args: argparse.Namespace) -> int:
    show_ref(_repo(args), with_hash=not args.name_only)
    return 0


def cmd_tag(args: argparse.Namespace) -> int:
    repo = _repo(args)
    if not args.name:
        for name in list_tags(repo):
            print(name)
        return 0
    annotated = args.annotated or args.message is not None
    create_tag(
        repo,
        args.name,
        target=args.object or "HEAD",
        annotated=annotated,
        message=args.message or "",
        force=args.force,
    )
    return 0


def cmd_checkout(args: argparse.Namespace) -> int:
    checkout(_repo(args), args.commit, args.path)
    return 0


def cmd_rev_parse(args: argparse.Namespace) -> int:
    print(find_object(_repo(args), args.name, args.peel_type))
    return 0


def cmd_config(args: argparse.Namespace) -> int:
    repo = _repo(args)
    if args.value is not None:
        set_value(repo, args.key, args.value)
        return 0
    value = get_value(repo, args.key)
    if value is None:
        return 1
    print(value)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="gitcore",
        description="Git-compatible loose object store (init, cat-file, hash-object, ls-tree, tag, checkout).",
    )
    parser.add_argument("-C", dest="repo_path", type=Path, default=None, help="Run as if started in this directory")
    parser.add_argument("-v", "--verbose", action="count", default=0, help="More logging (-v info, -vv debug)")
    sub = parser.add_subparsers(dest="command", help="Commands")

    # init
    p_init = sub.add_parser("init", help="Initialize a new, empty repository")
    p_init.add_argument("path", nargs="?", default=None, help="Where to create the repository")

    # cat-file
    p_cat = sub.add_parser("cat-file", help="Show object type or content")
    mode = p_cat.add_mutually_exclusive_group()
    mode.add_argument("-t", dest="type_only", action="store_true", help="Show type only")
    mode.add_argument("-p", dest="pretty", action="store_true", help="Show content (default)")
    p_cat.add_argument("object_type", nargs="?", choices=OBJECT_TYPES, default=None, help="Peel object to this type")
    p_cat.add_argument("object", help="Object (hash, ref, tag or branch)")

    # hash-object
    p_ho = sub.add_parser("hash-object", help="Compute object hash from a file (optionally write)")
    p_ho.add_argument("-t", dest="type", choices=OBJECT_TYPES, default=OBJ_BLOB, help="Object type (default: blob)")
    p_ho.add_argument("-w", dest="write", action="store_true", help="Write object to the database")
    p_ho.add_argument("path", help="Path to file")

    # ls-tree
    p_ls = sub.add_parser("ls-tree", help="List tree contents")
    p_ls.add_argument("-r", dest="recursive", action="store_true", help="Recurse into subtrees")
    p_ls.add_argument("tree_ish", help="Tree, commit, tag or branch")

    # show-ref
    p_sr = sub.add_parser("show-ref", help="List references")
    p_sr.add_argument("--name-only", action="store_true", help="Print ref names without hashes")

    # tag
    p_tag = sub.add_parser("tag", help="List or create tags")
    p_tag.add_argument("-a", dest="annotated", action="store_true", help="Create an annotated tag object")
    p_tag.add_argument("-m", "--message", default=None, help="Tag message (implies -a)")
    p_tag.add_argument("-f", "--force", action="store_true", help="Replace an existing tag")
    p_tag.add_argument("name", nargs="?", help="Tag name")
    p_tag.add_argument("object", nargs="?", default=None, help="Object the tag points to (default: HEAD)")

    # checkout
    p_co = sub.add_parser("checkout", help="Write a commit's tree into an empty directory")
    p_co.add_argument("commit", help="Commit or tree to check out")
    p_co.add_argument("path", help="Empty or missing directory")

    # rev-parse
    p_rp = sub.add_parser("rev-parse", help="Resolve a name to a full hash")
    p_rp.add_argument("--type", dest="peel_type", choices=OBJECT_TYPES, default=None, help="Peel to this type")
    p_rp.add_argument("name", help="Name to resolve")

    # config
    p_config = sub.add_parser("config", help="Read or write .git/config")
    p_config.add_argument("key", help="Config key (section.option)")
    p_config.add_argument("value", nargs="?", default=None, help="New value")

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.verbose:
        setup_logging("DEBUG" if args.verbose > 1 else "INFO")
    if not args.command:
        parser.print_help()
        return 0

    handlers = {
        "init": cmd_init,
        "cat-file": cmd_cat_file,
        "hash-object": cmd_hash_object,
        "ls-tree": cmd_ls_tree,
        "show-ref": cmd_show_ref,
        "tag": cmd_tag,
        "checkout": cmd_checkout,
        "rev-parse": cmd_rev_parse,
        "config": cmd_config,
    }
    handler = handlers.get(args.command)
    if not handler:
        parser.print_help()
        return 1
    try:
        return handler(args) or 0
    except (GitcoreError, NotADirectoryError) as e:
        logger.debug("%s failed", args.command, exc_info=True)
        print(f"Error: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
