"""Data models for gorelease.

These Pydantic models represent the values passed between the release
driver and the repository gateway.
"""

from __future__ import annotations

from datetime import datetime
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field

from .config import DEFAULT_OUTPUT, LICENSE_FILES, NORMAL_EXIT


class ReleaseConfig(BaseModel):
    """Options for a single release run, fixed once parsed.

    Attributes:
        dirty: Downgrade precondition failures to warnings.
        dry_run: Print the generated source and skip every mutation.
        output: Destination of the generated source, relative to the repo root.
        verbose: Print git's error output when a push fails.
        license_files: Candidate license files; the first existing one is used.
    """

    model_config = ConfigDict(frozen=True)

    dirty: bool = False
    dry_run: bool = False
    output: str = DEFAULT_OUTPUT
    verbose: bool = False
    license_files: tuple[str, ...] = tuple(LICENSE_FILES.split())


class FileStatus(BaseModel):
    """Status codes of one path, as in `git status --porcelain`.

    Attributes:
        staging: Index code ("?" for untracked, " " for unmodified).
        worktree: Worktree code ("?" for untracked, " " for unmodified).
    """

    model_config = ConfigDict(frozen=True)

    staging: str
    worktree: str

    @property
    def untracked(self) -> bool:
        return self.staging == "?" and self.worktree == "?"


class Signature(BaseModel):
    """Author or tagger identity. Email is intentionally left empty."""

    model_config = ConfigDict(frozen=True)

    name: str
    when: datetime

    def as_env(self, role: str) -> dict[str, str]:
        """Environment variables for git's `role` ("AUTHOR" or "COMMITTER").

        The date uses git's raw "<unix seconds> <+hhmm>" form.
        """
        when = self.when if self.when.tzinfo else self.when.astimezone()
        return {
            f"GIT_{role}_NAME": self.name,
            f"GIT_{role}_EMAIL": "",
            f"GIT_{role}_DATE": f"{int(when.timestamp())} {when.strftime('%z')}",
        }


class RemoteAuth(BaseModel):
    """SSH credential used for a retried push."""

    model_config = ConfigDict(frozen=True)

    key_path: Path


class PushResult(BaseModel):
    """Outcome of one push attempt."""

    ok: bool
    detail: str = ""


class ReleaseOutcome(BaseModel):
    """What a release run did, and the exit code it maps to.

    Attributes:
        tag: Canonical release tag, once the version was validated.
        exit_code: Process exit code for the CLI.
        error: Fatal error message, empty on success.
        dry_run: True when the run stopped after rendering.
        committed: True once the release commit exists.
        tagged: True once the release tag exists locally.
        pushed_tags: Final result of the tag push.
        pushed_branch: Final result of the branch push.
        warnings: Precondition warnings accepted under --dirty.
    """

    tag: str | None = None
    exit_code: int = NORMAL_EXIT
    error: str = ""
    dry_run: bool = False
    committed: bool = False
    tagged: bool = False
    pushed_tags: bool = False
    pushed_branch: bool = False
    warnings: list[str] = Field(default_factory=list)
