"""Tests for gorelease.models."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from gorelease.models import FileStatus, ReleaseConfig, ReleaseOutcome


class TestReleaseConfig:
    def test_defaults(self) -> None:
        config = ReleaseConfig()
        assert not config.dirty
        assert not config.dry_run
        assert not config.verbose
        assert config.output == "gen/version/version.go"
        assert config.license_files == ("LICENSE.md",)

    def test_frozen(self) -> None:
        config = ReleaseConfig()
        with pytest.raises(ValidationError):
            config.dirty = True  # type: ignore[misc]


class TestFileStatus:
    def test_untracked(self) -> None:
        assert FileStatus(staging="?", worktree="?").untracked

    def test_modified_is_not_untracked(self) -> None:
        assert not FileStatus(staging=" ", worktree="M").untracked

    def test_added_is_not_untracked(self) -> None:
        assert not FileStatus(staging="A", worktree=" ").untracked


class TestReleaseOutcome:
    def test_defaults(self) -> None:
        outcome = ReleaseOutcome()
        assert outcome.exit_code == 0
        assert outcome.tag is None
        assert outcome.warnings == []
