"""CLI entry point for gorelease."""

from __future__ import annotations

import sys
from pathlib import Path

import click

from gorelease.config import DEFAULT_OUTPUT
from gorelease.errors import ConfigError, RepoNotFoundError
from gorelease.models import ReleaseConfig
from gorelease.pipeline import run_release
from gorelease.repository import WorkingRepository
from gorelease.shell import error
from gorelease.toml import load_settings


def _config_dir() -> Path:
    """Directory holding .gorelease.toml: the repository root, else cwd.

    Outside a repository the release fails later with a clearer error, so
    the lookup falls back to the current directory here.
    """
    try:
        return WorkingRepository.open().root
    except RepoNotFoundError:
        return Path.cwd()


# Single-dash long flags are accepted alongside the double-dash forms.
@click.command()
@click.version_option(
    None,
    "-version",
    "--version",
    package_name="gorelease",
    message="version %(version)s",
)
@click.option(
    "-dirty",
    "--dirty",
    "dirty",
    is_flag=True,
    help="Allow a dirty repository with uncommitted files.",
)
@click.option(
    "-dry-run",
    "--dry-run",
    "dry_run",
    is_flag=True,
    help="Perform a dry run, no files changed or tags/files pushed.",
)
@click.option(
    "-output",
    "--output",
    "output",
    type=click.Path(dir_okay=False),
    default=None,
    help=f"Where to put the generated version file. [default: {DEFAULT_OUTPUT}]",
)
@click.option(
    "-verbose",
    "--verbose",
    "verbose",
    is_flag=True,
    help="Verbose mode, more info on some errors.",
)
def cli(dirty: bool, dry_run: bool, output: str | None, verbose: bool) -> None:
    """Release the version staged in .version: generate, commit, tag, push.

    Defaults for -output and the license files can be set in a [gorelease]
    table of .gorelease.toml at the repository root.
    """
    try:
        settings = load_settings(_config_dir())
    except ConfigError as exc:
        raise click.ClickException(str(exc)) from exc
    if output is not None:
        settings["output"] = output

    config = ReleaseConfig(dirty=dirty, dry_run=dry_run, verbose=verbose, **settings)
    outcome = run_release(config)
    if outcome.error:
        error(outcome.error)
    sys.exit(outcome.exit_code)

