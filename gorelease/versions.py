"""Version parsing, canonicalization and the Go major-version module rule.

Versions are read as written by the developer in `.version`: with or without
a leading "v", and optionally in the shorthand forms "1" and "1.2", which are
padded with zeros the way Go's semver package does. Anything else must be a
strict SemVer 2.0.0 string.
"""

from __future__ import annotations

import re

import semver

from .config import MODULE_FILE
from .errors import InvalidVersionError, ModuleFileError, VersionConflictError

V2 = "v2.0.0"

_SHORTHAND = re.compile(r"^(0|[1-9]\d*)(\.(0|[1-9]\d*))?$")


def parse_version(version_str: str) -> semver.Version:
    """Parse a version string into a semver.Version object.

    Handles incomplete versions by padding with zeros:
    - "1" → "1.0.0"
    - "v1.2" → "1.2.0"
    - "1.2.3-rc.1+build.5" → "1.2.3-rc.1+build.5"

    Shorthand is only accepted without prerelease or build metadata.

    Raises:
        InvalidVersionError: If the string is not a valid semantic version.
    """
    raw = version_str.strip()
    body = raw[1:] if raw.startswith("v") else raw
    if _SHORTHAND.match(body):
        parts = body.split(".")
        while len(parts) < 3:
            parts.append("0")
        body = ".".join(parts)
    try:
        return semver.Version.parse(body)
    except (ValueError, TypeError) as exc:
        raise InvalidVersionError(f"invalid version {raw!r}") from exc


def validate(version_str: str) -> None:
    """Raise InvalidVersionError unless `version_str` is a semantic version."""
    parse_version(version_str)


def canonicalize(version_str: str) -> str:
    """Return the release tag: "v" + MAJOR.MINOR.PATCH[-pre][+build].

    Examples:
        "1.2.3" → "v1.2.3"
        "v2" → "v2.0.0"
        "1.0.0-beta+exp.sha.5114f85" → "v1.0.0-beta+exp.sha.5114f85"
    """
    return f"v{parse_version(version_str)}"


def major(tag: str) -> str:
    """Return the major-version prefix of a tag, e.g. "v2" for "v2.1.0"."""
    return f"v{parse_version(tag).major}"


def is_v2_or_later(tag: str) -> bool:
    """True when `tag` sorts at or after v2.0.0 in semver order.

    Prereleases of 2.0.0 sort before it, so "v2.0.0-rc.1" is not v2.
    """
    return parse_version(tag).compare(V2[1:]) >= 0


def parse_module_path(go_mod: str) -> str:
    """Extract the module path from the text of a go.mod file.

    Understands the forms the go command writes or accepts:

        module example.com/foo/v2
        module "example.com/foo/v2" // comment
        module (
            example.com/foo/v2
        )

    Raises:
        ModuleFileError: If there is no module declaration.
    """
    in_block = False
    for raw_line in go_mod.splitlines():
        line = raw_line.split("//", 1)[0].strip()
        if not line:
            continue
        if in_block:
            if line == ")":
                in_block = False
                continue
            return _unquote(line)
        keyword, *rest_parts = line.split(None, 1)
        if keyword != "module":
            continue
        rest = rest_parts[0].strip() if rest_parts else ""
        if rest == "(":
            in_block = True
            continue
        if rest:
            return _unquote(rest)
    raise ModuleFileError(f"parsing {MODULE_FILE}", "no module declaration found")


def _unquote(path: str) -> str:
    path = path.strip()
    if len(path) >= 2 and path[0] == path[-1] and path[0] in "\"`":
        return path[1:-1]
    return path


def module_path_matches(module_path: str, major_version: str) -> bool:
    """Check that a module path carries the given major-version suffix.

    The final path element must be the major version ("example.com/foo/v2").
    gopkg.in paths carry it after a dot instead ("gopkg.in/yaml.v2").
    """
    last = module_path.rstrip("/").rsplit("/", 1)[-1]
    if last == major_version:
        return True
    return module_path.startswith("gopkg.in/") and last.endswith(f".{major_version}")


def enforce_major_module_rule(tag: str, go_mod: bytes | None) -> None:
    """Require the /vN module path suffix for releases at or above v2.0.0.

    Args:
        tag: Canonical release tag.
        go_mod: Contents of go.mod, or None when the file does not exist.
                Only consulted when the rule applies.

    Raises:
        ModuleFileError: If go.mod is needed but missing or unparseable.
        VersionConflictError: If the module path lacks the major suffix.
    """
    if not is_v2_or_later(tag):
        return
    if go_mod is None:
        raise ModuleFileError(f"unable to read {MODULE_FILE}", "file not found")
    try:
        text = go_mod.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise ModuleFileError(f"unable to parse {MODULE_FILE}", exc) from exc
    module_path = parse_module_path(text)
    major_version = major(tag)
    if not module_path_matches(module_path, major_version):
        raise VersionConflictError(
            f"Major version specified ({major_version}) not found at end of "
            f"{MODULE_FILE} module {module_path}"
        )
