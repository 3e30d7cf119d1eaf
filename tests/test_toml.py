"""Tests for gorelease.toml."""

from __future__ import annotations

from pathlib import Path

import pytest
import tomlkit

from gorelease.errors import ConfigError
from gorelease.toml import get_settings, load_config_file, load_settings


class TestGetSettings:
    def test_no_document(self) -> None:
        assert get_settings(None) == {}

    def test_no_table(self) -> None:
        assert get_settings(tomlkit.parse('[other]\nkey = "value"\n')) == {}

    def test_output(self) -> None:
        doc = tomlkit.parse('[gorelease]\noutput = "internal/version/version.go"\n')
        assert get_settings(doc) == {"output": "internal/version/version.go"}

    def test_license_files_string(self) -> None:
        doc = tomlkit.parse('[gorelease]\nlicense-files = "LICENSE.md  COPYING"\n')
        assert get_settings(doc) == {"license_files": ("LICENSE.md", "COPYING")}

    def test_license_files_array(self) -> None:
        doc = tomlkit.parse('[gorelease]\nlicense-files = ["LICENSE", "COPYING"]\n')
        assert get_settings(doc) == {"license_files": ("LICENSE", "COPYING")}

    def test_values_are_plain_python(self) -> None:
        doc = tomlkit.parse('[gorelease]\noutput = "v.go"\n')
        assert type(get_settings(doc)["output"]) is str

    @pytest.mark.parametrize(
        "content",
        [
            "[gorelease]\noutput = 3\n",
            '[gorelease]\noutput = ""\n',
            "[gorelease]\nlicense-files = [1, 2]\n",
            'gorelease = "flat"\n',
        ],
    )
    def test_bad_values(self, content: str) -> None:
        with pytest.raises(ConfigError):
            get_settings(tomlkit.parse(content))


class TestLoad:
    def test_absent_file(self, tmp_path: Path) -> None:
        assert load_config_file(tmp_path / ".gorelease.toml") is None
        assert load_settings(tmp_path) == {}

    def test_reads_file(self, tmp_path: Path) -> None:
        (tmp_path / ".gorelease.toml").write_text('[gorelease]\noutput = "a/b.go"\n')
        assert load_settings(tmp_path) == {"output": "a/b.go"}

    def test_malformed_file(self, tmp_path: Path) -> None:
        (tmp_path / ".gorelease.toml").write_text("[gorelease\n")
        with pytest.raises(ConfigError, match="reading .gorelease.toml"):
            load_settings(tmp_path)
