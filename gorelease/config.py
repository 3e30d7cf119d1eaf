"""Well-known file names, git constants and exit codes."""

from __future__ import annotations

DOT_VERSION_FILE = ".version"
MODULE_FILE = "go.mod"
# Whitespace separated; the first file that exists is used.
LICENSE_FILES = "LICENSE.md"
DEFAULT_OUTPUT = "gen/version/version.go"
CONFIG_FILE = ".gorelease.toml"

REMOTE_NAME = "origin"
TAG_REFSPEC = "refs/tags/*:refs/tags/*"

NORMAL_EXIT = 0
FATAL_EXIT = 1
# 2 is taken by click for usage errors.
VERSION_CONFLICT_EXIT = 3
