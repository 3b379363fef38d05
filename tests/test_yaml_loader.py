"""Tests for packaged YAML access."""

from __future__ import annotations

import re
from pathlib import Path

import pytest

from taxplan.io.yaml_loader import load_yaml, match_package_files, package_path
from taxplan.utils.exceptions import ConfigError


class TestYamlLoader:
    def test_package_path(self) -> None:
        path = package_path("taxes/tables/tax_rules_2026.yaml")
        assert path.is_file()

    def test_match_package_files(self) -> None:
        matches = match_package_files("taxes/tables", re.compile(r"^tax_rules_(\d{4})\.yaml$"))
        assert [m.group(1) for m in matches][:2] == ["2025", "2026"]

    def test_invalid_yaml(self, tmp_path: Path) -> None:
        bad = tmp_path / "bad.yaml"
        bad.write_text("brackets: [1, 2\n")
        with pytest.raises(ConfigError, match="bad.yaml"):
            load_yaml(bad)

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            load_yaml(tmp_path / "nope.yaml")
