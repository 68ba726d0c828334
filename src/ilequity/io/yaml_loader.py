"""YAML data file loader for the bundled tax tables."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml

from ilequity.utils.exceptions import ConfigError

PACKAGE_ROOT = Path(__file__).resolve().parent.parent


def load_yaml(path: Path) -> Any:
    """Load and parse a YAML file.

    Raises:
        ConfigError: If the file is missing or is not valid YAML.
    """
    try:
        with open(path) as f:
            return yaml.safe_load(f)
    except FileNotFoundError as exc:
        raise ConfigError(f"Data file not found: {path}") from exc
    except yaml.YAMLError as exc:
        raise ConfigError(f"Malformed YAML in {path}: {exc}") from exc


def load_package_yaml(relative_path: str) -> Any:
    """Load a YAML file shipped inside the ilequity package.

    Args:
        relative_path: Path relative to ``src/ilequity/``,
            e.g. ``"taxes/tables/israel_2025.yaml"``.
    """
    return load_yaml(PACKAGE_ROOT / relative_path)
