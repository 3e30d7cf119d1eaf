"""Rendering of the generated Go version source file.

The output is a pure function of (license text, package name, tag), so the
same inputs always produce byte-identical files.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from pathlib import Path, PurePath

from .errors import FileSystemError
from .models import ReleaseConfig
from .shell import log

TOOL_NAME = "gorelease"

VERSION_TEMPLATE = f"""$LICENSE$

package $PACKAGE$

// Code generated by {TOOL_NAME} DO NOT EDIT.

// Version number for official releases.
const Version = "$TAG$"
"""

_PLACEHOLDER = re.compile(r"\$(LICENSE|PACKAGE|TAG)\$")

# License files are carried through byte for byte, whatever their encoding.
_ENCODING = "utf-8"
_ERRORS = "surrogateescape"


def find_license(root: Path, candidates: Iterable[str]) -> str | None:
    """Return the text of the first readable candidate license file."""
    for candidate in candidates:
        try:
            return (root / candidate).read_bytes().decode(_ENCODING, _ERRORS)
        except OSError:
            continue
    return None


def license_block(text: str | None) -> str:
    """Wrap license text in a C-style block comment.

    Every newline in the text is followed by " *", and the whole is framed by
    "/*\\n *" and "\\n */\\n". No license gives an empty block.
    """
    if text is None:
        return ""
    return "/*\n *" + text.replace("\n", "\n *") + "\n */\n"


def package_name(output: str) -> str:
    """Go package name for `output`: the name of its parent directory.

    A file in the current directory belongs to package main.
    """
    name = PurePath(output).parent.name
    if name in ("", "."):
        return "main"
    return name


def render_version_source(license_text: str | None, package: str, tag: str) -> str:
    """Fill the version template.

    Substitution is a single pass, so placeholders appearing inside the
    license text are left alone.
    """
    values = {
        "LICENSE": license_block(license_text),
        "PACKAGE": package,
        "TAG": tag,
    }
    return _PLACEHOLDER.sub(lambda m: values[m.group(1)], VERSION_TEMPLATE)


def write_version_source(config: ReleaseConfig, tag: str, root: Path) -> str:
    """Render the version source and write it to `config.output`.

    Paths are resolved against the repository root. With `config.dry_run`
    the source is printed to stdout and nothing on disk is touched.

    Returns:
        The rendered source.

    Raises:
        FileSystemError: If the directory cannot be created or the file
            cannot be written.
    """
    source = render_version_source(
        find_license(root, config.license_files),
        package_name(config.output),
        tag,
    )
    if config.dry_run:
        print(source, end="")
        return source

    dest = root / config.output
    folder = dest.parent
    if not folder.is_dir():
        log(f"Folder {folder} does not exist - creating")
        try:
            folder.mkdir(mode=0o755, parents=True, exist_ok=True)
        except OSError as exc:
            raise FileSystemError(f"unable to create {folder}", exc) from exc

    try:
        dest.write_bytes(source.encode(_ENCODING, _ERRORS))
    except OSError as exc:
        raise FileSystemError(f"writing {config.output}", exc) from exc
    log(f"Wrote {config.output}")
    return source
