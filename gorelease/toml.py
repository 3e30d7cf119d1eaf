"""Reading the optional .gorelease.toml configuration file.

Uses tomlkit, as for every TOML file this project touches. Only a
`[gorelease]` table is consulted:

    [gorelease]
    output = "internal/version/version.go"
    license-files = "LICENSE.md LICENSE"
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import tomlkit
from tomlkit.exceptions import TOMLKitError

from .config import CONFIG_FILE
from .errors import ConfigError


def load_config_file(path: Path) -> tomlkit.TOMLDocument | None:
    """Load and parse the configuration file, or None when it is absent."""
    if not path.is_file():
        return None
    try:
        return tomlkit.parse(path.read_text())
    except (OSError, TOMLKitError) as exc:
        raise ConfigError(f"reading {path.name}", exc) from exc


def get_settings(doc: tomlkit.TOMLDocument | None) -> dict[str, Any]:
    """Extract `[gorelease]` settings as plain Python values.

    `license-files` may be a whitespace separated string or an array of
    strings; either way it is normalized to a tuple of candidate paths.

    Returns:
        Dict with any of the keys "output" and "license_files".

    Raises:
        ConfigError: If a value has the wrong type.
    """
    if doc is None:
        return {}
    table = doc.unwrap().get("gorelease", {})
    if not isinstance(table, dict):
        raise ConfigError(f"{CONFIG_FILE}: [gorelease] must be a table")
    settings: dict[str, Any] = {}

    output = table.get("output")
    if output is not None:
        if not isinstance(output, str) or not output.strip():
            raise ConfigError(f"{CONFIG_FILE}: output must be a non-empty string")
        settings["output"] = output

    license_files = table.get("license-files")
    if license_files is not None:
        if isinstance(license_files, str):
            settings["license_files"] = tuple(license_files.split())
        elif isinstance(license_files, list) and all(
            isinstance(f, str) for f in license_files
        ):
            settings["license_files"] = tuple(license_files)
        else:
            raise ConfigError(
                f"{CONFIG_FILE}: license-files must be a string or a list of strings"
            )
    return settings


def load_settings(directory: Path) -> dict[str, Any]:
    """Read settings from `directory`/.gorelease.toml, if present."""
    return get_settings(load_config_file(directory / CONFIG_FILE))
