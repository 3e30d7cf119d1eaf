"""Release pipeline: check → version → generate → commit → tag → push.

This module drives one release from "pending" (only `.version` is new in
the worktree) to "published" (tag and branch pushed to origin):
1. Check that `.version` is the only untracked change
2. Read, validate and canonicalize the version
3. Enforce the /vN module path rule for v2+ releases
4. Generate the version source (printed instead when dry-running)
5. Stage and commit `.version` and the generated file
6. Create the annotated release tag on HEAD
7. Push tags, then the branch

Fatal problems are raised as ReleaseError inside the pipeline and turned
into a ReleaseOutcome by run_release(). Push failures are not fatal: once the
tag exists locally the release is done, and the user is told how to finish
publishing it.
"""

from __future__ import annotations

import sys
from collections.abc import Sequence
from pathlib import Path

from .codegen import write_version_source
from .config import DOT_VERSION_FILE, MODULE_FILE, REMOTE_NAME, TAG_REFSPEC
from .errors import (
    InvalidVersionError,
    ModuleFileError,
    PreconditionError,
    ReleaseError,
    TagCreateError,
)
from .models import ReleaseConfig, ReleaseOutcome
from .repository import WorkingRepository, current_user_signature, discover_auth
from .shell import log, step, warn
from .versions import (
    V2,
    canonicalize,
    enforce_major_module_rule,
    is_v2_or_later,
    validate,
)


def check_preconditions(repo: WorkingRepository, config: ReleaseConfig) -> list[str]:
    """Verify the worktree is exactly "one untracked .version file".

    With `config.dirty` every violation is only a warning.

    Returns:
        The violations that were downgraded to warnings.

    Raises:
        PreconditionError: On the first violation, unless dirty is allowed.
    """
    step("Checking release preconditions")
    status = repo.status()

    problems: list[str] = []
    if len(status) != 1:
        problems.append(
            f"incorrect file commit status, {len(status)} files, "
            f"expecting only {DOT_VERSION_FILE}"
        )
    entry = status.get(DOT_VERSION_FILE)
    if entry is None or not entry.untracked:
        problems.append(f"{DOT_VERSION_FILE} should be the only, untracked, change")

    for problem in problems:
        if not config.dirty:
            raise PreconditionError(problem)
        warn(problem)
    if not problems:
        log(f"{DOT_VERSION_FILE} is the only change")
    return problems


def read_version(root: Path) -> str:
    """Read `.version` and return the canonical release tag.

    Raises:
        InvalidVersionError: If the file is unreadable or not a semver.
    """
    step("Reading release version")
    try:
        content = (root / DOT_VERSION_FILE).read_text()
    except (OSError, UnicodeDecodeError) as exc:
        raise InvalidVersionError(f"reading {DOT_VERSION_FILE}", exc) from exc
    version_str = content.replace("\n", "")
    validate(version_str)
    tag = canonicalize(version_str)
    log(tag)
    return tag


def check_tag_available(
    repo: WorkingRepository, config: ReleaseConfig, tag: str
) -> None:
    """Refuse to release a version that has already been tagged.

    A dry run only warns, so the source can still be previewed.
    """
    if not repo.tag_exists(tag):
        return
    if config.dry_run:
        warn(f"tag {tag} already exists")
    else:
        raise TagCreateError(f"unable to set tag {tag}", "tag already exists")


def enforce_module_rule(tag: str, root: Path) -> None:
    """Apply the major-version module path rule against `go.mod`."""
    if not is_v2_or_later(tag):
        return
    warn(f"{tag} >= {V2}, checking {MODULE_FILE} module path")
    try:
        go_mod = (root / MODULE_FILE).read_bytes()
    except FileNotFoundError:
        go_mod = None
    except OSError as exc:
        raise ModuleFileError(f"unable to read {MODULE_FILE}", exc) from exc
    enforce_major_module_rule(tag, go_mod)


def generate_version_source(
    repo: WorkingRepository, config: ReleaseConfig, tag: str
) -> str:
    """Write (or, dry-running, print) the generated version source."""
    step(f"Generating {config.output}")
    return write_version_source(config, tag, repo.root)


def stage_files(repo: WorkingRepository, config: ReleaseConfig) -> None:
    """Stage the generated file and `.version`."""
    repo.add(config.output)
    repo.add(DOT_VERSION_FILE)


def commit_release(repo: WorkingRepository, tag: str) -> str:
    """Commit the staged release files as the current user."""
    step("Committing release")
    sha = repo.commit(f"Updated for release {tag}", current_user_signature())
    log(f"Committed {sha[:12]}")
    return sha


def create_release_tag(repo: WorkingRepository, tag: str) -> None:
    """Create the annotated release tag on HEAD.

    Raises:
        TagCreateError: If the tag exists or cannot be created.
    """
    step("Tagging release")
    if repo.tag_exists(tag):
        log(f"tag {tag} already exists")
        raise TagCreateError(f"unable to set tag {tag}", "tag already exists")
    log(f"Set tag {tag}")
    repo.create_tag(tag, repo.head(), f"Release {tag}", current_user_signature())


def push_with_retry(
    repo: WorkingRepository, refspecs: Sequence[str], verbose: bool
) -> bool:
    """Push, and retry once with the user's SSH key if the first push fails.

    Returns:
        True if either attempt succeeded.
    """
    result = repo.push(refspecs)
    if result.ok:
        return True
    if verbose and result.detail:
        log(result.detail)

    auth = discover_auth()
    if auth is None:
        return False
    log(f"Retrying with {auth.key_path}")
    result = repo.push(refspecs, auth)
    if not result.ok and verbose and result.detail:
        log(result.detail)
    return result.ok


def push_tags(repo: WorkingRepository, tag: str, verbose: bool) -> bool:
    """Push every local tag to origin. Failure only produces a hint."""
    step(f"Pushing tags to {REMOTE_NAME}")
    ok = push_with_retry(repo, [TAG_REFSPEC], verbose)
    if ok:
        log(f"Pushed {tag}")
    else:
        warn(f"Push failed, please: git push {REMOTE_NAME} {tag}; git push")
    return ok


def push_branch(repo: WorkingRepository, verbose: bool) -> bool:
    """Default push of the current branch, best effort."""
    step(f"Pushing branch to {REMOTE_NAME}")
    ok = push_with_retry(repo, [], verbose)
    if ok:
        log("Pushed branch")
    else:
        warn("Branch push failed, please: git push")
    return ok


def _release(
    config: ReleaseConfig, repo: WorkingRepository, outcome: ReleaseOutcome
) -> None:
    outcome.warnings = check_preconditions(repo, config)

    tag = read_version(repo.root)
    outcome.tag = tag
    enforce_module_rule(tag, repo.root)
    check_tag_available(repo, config, tag)

    generate_version_source(repo, config, tag)
    if config.dry_run:
        return

    stage_files(repo, config)
    commit_release(repo, tag)
    outcome.committed = True

    create_release_tag(repo, tag)
    outcome.tagged = True

    outcome.pushed_tags = push_tags(repo, tag, config.verbose)
    outcome.pushed_branch = push_branch(repo, config.verbose)


def run_release(
    config: ReleaseConfig,
    repo: WorkingRepository | None = None,
    start: Path | str = ".",
) -> ReleaseOutcome:
    """Execute the full release pipeline.

    Args:
        config: Options for this run.
        repo: Repository to release; discovered from `start` when omitted.
        start: Directory to begin the upward repository search from.

    Returns:
        The outcome, including the exit code the CLI should use.
    """
    outcome = ReleaseOutcome(dry_run=config.dry_run)
    if config.dry_run:
        log("Performing dry run.")
    try:
        if repo is None:
            repo = WorkingRepository.open(start)
        _release(config, repo, outcome)
    except ReleaseError as exc:
        outcome.exit_code = exc.exit_code
        outcome.error = str(exc)
        return outcome

    if config.dry_run:
        log("Dry run complete, nothing was changed.")
    else:
        print(f"\n{'=' * 60}\nReleased {outcome.tag}\n{'=' * 60}", file=sys.stderr)
    return outcome
