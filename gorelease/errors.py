"""Error kinds raised by the release driver.

Every fatal condition is a ReleaseError carrying the operation that failed
and the exit code the CLI should use. Push failures are deliberately absent:
they are reported and the release carries on.
"""

from __future__ import annotations

from .config import FATAL_EXIT, VERSION_CONFLICT_EXIT


class ReleaseError(RuntimeError):
    """Base class for fatal release errors."""

    exit_code = FATAL_EXIT

    def __init__(self, operation: str, detail: object = None) -> None:
        self.operation = operation
        self.detail = detail
        message = operation if detail is None else f"{operation}: {detail}"
        super().__init__(message)


class ConfigError(ReleaseError):
    """The configuration file could not be read or is malformed."""


class RepoNotFoundError(ReleaseError):
    """No git repository found walking upward from the start directory."""


class RepoIOError(ReleaseError):
    """Reading status, staging or committing failed."""


class PreconditionError(ReleaseError):
    """The worktree is not in the "release pending" state."""


class InvalidVersionError(ReleaseError):
    """The staged version is not a valid semantic version."""


class ModuleFileError(ReleaseError):
    """go.mod is missing or has no module declaration."""


class VersionConflictError(ReleaseError):
    """A v2+ tag whose module path lacks the matching /vN suffix."""

    exit_code = VERSION_CONFLICT_EXIT


class TagCreateError(ReleaseError):
    """The release tag already exists or could not be created."""


class FileSystemError(ReleaseError):
    """Writing the generated source or creating its directory failed."""
