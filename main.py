#!/usr/bin/env python3
"""Thin wrapper: run the gitcore CLI. Usage: python main.py <cmd> ...."""

import sys

if __name__ == "__main__":
    from gitcore.cli import main
    sys.exit(main())
