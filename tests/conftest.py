"""Shared test fixtures."""

from __future__ import annotations

import shutil
import subprocess
from pathlib import Path

import pytest

LICENSE_TEXT = """\
Copyright (c) 2020,  someone@example.com

Permission to use, copy, modify, and/or distribute this software for any
purpose with or without fee is hereby granted.
"""


def run_git(cwd: Path, *args: str) -> str:
    """Run git for test setup and return stripped stdout."""
    result = subprocess.run(
        ["git", *args], cwd=cwd, capture_output=True, text=True, check=True
    )
    return result.stdout.strip()


@pytest.fixture
def isolated_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point HOME at an empty directory so no real SSH key or git config leaks in."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("GIT_CONFIG_NOSYSTEM", "1")
    for var in ("GIT_DIR", "GIT_WORK_TREE", "GIT_SSH_COMMAND"):
        monkeypatch.delenv(var, raising=False)
    return home


@pytest.fixture
def origin_repo(tmp_path: Path, isolated_home: Path) -> Path:
    """A bare repository acting as the origin remote."""
    if shutil.which("git") is None:
        pytest.skip("git is not installed")
    origin = tmp_path / "origin.git"
    run_git(tmp_path, "init", "--bare", "--quiet", str(origin))
    return origin


@pytest.fixture
def git_repo(
    tmp_path: Path, origin_repo: Path, monkeypatch: pytest.MonkeyPatch
) -> Path:
    """A clean working repository with LICENSE.md and go.mod, tracking origin.

    The current directory is changed to the repository root.
    """
    work = tmp_path / "work"
    run_git(tmp_path, "init", "--quiet", str(work))
    run_git(work, "config", "user.name", "Fixture User")
    run_git(work, "config", "user.email", "fixture@example.com")
    run_git(work, "config", "commit.gpgsign", "false")
    run_git(work, "config", "tag.gpgsign", "false")

    (work / "LICENSE.md").write_text(LICENSE_TEXT)
    (work / "go.mod").write_text("module example.com/foo\n\ngo 1.21\n")
    run_git(work, "add", ".")
    run_git(work, "commit", "--quiet", "-m", "initial")
    run_git(work, "remote", "add", "origin", str(origin_repo))
    run_git(work, "push", "--quiet", "-u", "origin", "HEAD")

    monkeypatch.chdir(work)
    return work
