"""Access to YAML data files shipped inside the taxplan package."""

from __future__ import annotations

import re
from pathlib import Path
from typing import Any

import yaml

from taxplan.utils.exceptions import ConfigError


def load_yaml(path: Path) -> Any:
    """Parse a YAML file with ``yaml.safe_load``.

    Raises:
        FileNotFoundError: If the file does not exist.
        ConfigError: If the file is not valid YAML.
    """
    with open(path) as f:
        try:
            return yaml.safe_load(f)
        except yaml.YAMLError as exc:
            raise ConfigError(f"could not parse {path.name}: {exc}") from exc


def package_path(relative_path: str) -> Path:
    """Resolve ``relative_path`` against ``src/taxplan/``."""
    return Path(__file__).resolve().parent.parent / relative_path


def load_package_yaml(relative_path: str) -> Any:
    """Load a packaged YAML file, e.g. ``"taxes/tables/tax_rules_2026.yaml"``."""
    return load_yaml(package_path(relative_path))


def match_package_files(directory: str, pattern: re.Pattern[str]) -> list[re.Match[str]]:
    """Regex matches for the file names in a package directory, sorted by name."""
    matches = []
    for path in sorted(package_path(directory).iterdir()):
        match = pattern.match(path.name)
        if match:
            matches.append(match)
    return matches
