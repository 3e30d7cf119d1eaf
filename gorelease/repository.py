"""Access to the working git repository.

All git interaction goes through the `git` executable via shell.git(). The
release driver owns one WorkingRepository per run and performs every
mutation through it.
"""

from __future__ import annotations

import getpass
import os
import shlex
import subprocess
from collections.abc import Sequence
from datetime import datetime
from pathlib import Path

from .config import REMOTE_NAME
from .errors import RepoIOError, RepoNotFoundError, TagCreateError
from .models import FileStatus, PushResult, RemoteAuth, Signature
from .shell import git

TAG_PREFIX = "refs/tags/"


class WorkingRepository:
    """Handle on a git working tree rooted at `root`."""

    def __init__(self, root: Path) -> None:
        self.root = root

    @classmethod
    def open(cls, path: Path | str = ".") -> WorkingRepository:
        """Find the repository containing `path` by walking upward to a `.git`.

        Raises:
            RepoNotFoundError: If no ancestor of `path` holds a `.git` entry.
        """
        start = Path(path).resolve()
        for candidate in (start, *start.parents):
            if (candidate / ".git").exists():
                return cls(candidate)
        raise RepoNotFoundError("opening repository", f"no .git found above {start}")

    def _git(
        self, operation: str, *args: str, env: dict[str, str] | None = None
    ) -> str:
        """Run git in the repository root, mapping failures to RepoIOError."""
        try:
            result = git(*args, cwd=self.root, env=env)
        except subprocess.CalledProcessError as exc:
            raise RepoIOError(operation, (exc.stderr or "").strip() or exc) from exc
        except OSError as exc:
            raise RepoIOError(operation, exc) from exc
        return result.stdout

    def status(self) -> dict[str, FileStatus]:
        """Map each changed or untracked path to its (staging, worktree) codes.

        Untracked directories are expanded to their files, so a new directory
        counts once per file it contains.
        """
        out = self._git(
            "repository status",
            "status",
            "--porcelain=v1",
            "-z",
            "--untracked-files=all",
        )
        status: dict[str, FileStatus] = {}
        entries = iter(out.split("\0"))
        for entry in entries:
            if len(entry) < 4:
                continue
            staging, worktree, path = entry[0], entry[1], entry[3:]
            # Renames and copies are followed by their source path.
            if staging in "RC":
                next(entries, None)
            status[path] = FileStatus(staging=staging, worktree=worktree)
        return status

    def add(self, path: str) -> None:
        """Stage a single path."""
        self._git(f"adding {path}", "add", "--", path)

    def commit(self, message: str, author: Signature) -> str:
        """Commit the index with `author` as author and committer.

        Returns:
            The new commit's hash.
        """
        env = {**author.as_env("AUTHOR"), **author.as_env("COMMITTER")}
        self._git("committing files", "commit", "--quiet", "-m", message, env=env)
        return self.head()

    def head(self) -> str:
        """Hash of the commit HEAD points at."""
        return self._git("reading HEAD", "rev-parse", "HEAD").strip()

    def tags(self) -> list[str]:
        """Full ref names of every tag, e.g. "refs/tags/v1.2.3"."""
        out = self._git(
            "listing tags", "for-each-ref", "--format=%(refname)", TAG_PREFIX
        )
        return out.splitlines()

    def tag_exists(self, tag: str) -> bool:
        """True if `refs/tags/<tag>` exists. Matching is exact."""
        return f"{TAG_PREFIX}{tag}" in self.tags()

    def create_tag(
        self, tag: str, head: str, message: str, tagger: Signature
    ) -> None:
        """Create an annotated tag on `head`.

        Raises:
            TagCreateError: If git refuses to create the tag.
        """
        try:
            self._git(
                "creating tag",
                "tag",
                "--annotate",
                "--message",
                message,
                tag,
                head,
                env=tagger.as_env("COMMITTER"),
            )
        except RepoIOError as exc:
            raise TagCreateError(f"unable to set tag {tag}", exc.detail) from exc

    def push(
        self, refspecs: Sequence[str] = (), auth: RemoteAuth | None = None
    ) -> PushResult:
        """Push to origin. No refspecs means git's default push.

        Never raises for a failed push; the caller decides what to do.
        """
        env = {"GIT_TERMINAL_PROMPT": "0"}
        if auth is not None:
            env["GIT_SSH_COMMAND"] = (
                f"ssh -i {shlex.quote(str(auth.key_path))} -o IdentitiesOnly=yes"
            )
        try:
            result = git(
                "push", REMOTE_NAME, *refspecs, cwd=self.root, env=env, check=False
            )
        except OSError as exc:
            return PushResult(ok=False, detail=str(exc))
        if result.returncode != 0:
            return PushResult(ok=False, detail=result.stderr.strip())
        return PushResult(ok=True)


def discover_auth() -> RemoteAuth | None:
    """Look for the user's SSH private key at ~/.ssh/id_rsa.

    Any problem (no home, no file, not a private key) yields None.
    """
    try:
        key_path = Path.home() / ".ssh" / "id_rsa"
        contents = key_path.read_bytes()
    except (OSError, RuntimeError):
        return None
    if b"PRIVATE KEY-----" not in contents:
        return None
    return RemoteAuth(key_path=key_path)


def current_user_name() -> str:
    """Full name of the OS user, falling back to the login name."""
    try:
        import pwd

        entry = pwd.getpwuid(os.getuid())
    except (ImportError, KeyError):
        return getpass.getuser()
    full_name = entry.pw_gecos.split(",", 1)[0].strip()
    return full_name or entry.pw_name


def current_user_signature() -> Signature:
    """Signature for the current OS user, stamped with the current time."""
    try:
        name = current_user_name()
    except (OSError, KeyError) as exc:
        raise RepoIOError("getting current user", exc) from exc
    return Signature(name=name, when=datetime.now().astimezone())
