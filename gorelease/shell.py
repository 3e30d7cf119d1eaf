"""Shell and git utilities.

Provides a thin wrapper around subprocess calls to the git executable, plus
the output helpers used for progress reporting. Progress goes to stderr so
that stdout stays clean for dry-run output.
"""

from __future__ import annotations

import os
import subprocess
import sys
from collections.abc import Mapping
from pathlib import Path


def git(
    *args: str,
    cwd: Path | str | None = None,
    env: Mapping[str, str] | None = None,
    check: bool = True,
) -> subprocess.CompletedProcess[str]:
    """Run a git command and return the completed process.

    Args:
        *args: Arguments to pass to git (e.g., "status", "--porcelain").
        cwd: Directory to run git in; defaults to the current directory.
        env: Extra environment variables layered over os.environ.
        check: If True (default), raise CalledProcessError on non-zero exit.
               Set to False for commands that may legitimately fail (e.g., push).

    Returns:
        CompletedProcess with captured text stdout/stderr.
    """
    full_env = None
    if env:
        full_env = {**os.environ, **env}
    return subprocess.run(
        ["git", *args],
        cwd=cwd,
        env=full_env,
        capture_output=True,
        text=True,
        check=check,
    )


def step(msg: str) -> None:
    """Print a visually distinct step header."""
    print(f"\n{'─' * 60}\n{msg}\n{'─' * 60}", file=sys.stderr)


def log(msg: str) -> None:
    """Print a progress line."""
    print(f"  {msg}", file=sys.stderr)


def warn(msg: str) -> None:
    """Print a warning that does not stop the release."""
    print(f"WARNING: {msg}", file=sys.stderr)


def error(msg: str) -> None:
    """Print an error message. Exiting is left to the caller."""
    print(f"ERROR: {msg}", file=sys.stderr)
