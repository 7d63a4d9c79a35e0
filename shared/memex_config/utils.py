"""
Utility functions for configuration loading.

This module provides common utilities used by config classes:
- load_yaml_file: Parse YAML config files
- safe_int: Parse integers with fallback
- safe_bool: Parse booleans with fallback
- resolve_path: Resolve a possibly relative path against a base directory
"""

from pathlib import Path
from typing import Any

import yaml


def load_yaml_file(path: Path) -> dict[str, Any]:
    """Load a YAML file into a dictionary.

    Args:
        path: Path to the YAML file

    Returns:
        Dictionary from YAML content, or empty dict if the file is missing,
        unreadable, not valid YAML, or not a mapping at the top level
    """
    if not path.exists():
        return {}

    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except (OSError, UnicodeDecodeError, yaml.YAMLError):
        return {}

    return data if isinstance(data, dict) else {}


def safe_int(value: Any, default: int = 0) -> int:
    """Safely parse an integer.

    Args:
        value: String or number to parse (can be None)
        default: Default value if parsing fails

    Returns:
        Parsed integer or default value
    """
    if value is None or isinstance(value, bool):
        return default
    try:
        return int(value)
    except (ValueError, TypeError):
        return default


def safe_bool(value: Any, default: bool = False) -> bool:
    """Safely parse a boolean.

    Recognizes: true, false, yes, no, on, off, 1, 0 (case-insensitive)

    Args:
        value: String or bool to parse (can be None)
        default: Default value if parsing fails

    Returns:
        Parsed boolean or default value
    """
    if value is None:
        return default
    if isinstance(value, bool):
        return value

    value_lower = str(value).lower().strip()
    if value_lower in ("true", "yes", "1", "on"):
        return True
    if value_lower in ("false", "no", "0", "off"):
        return False
    return default


def resolve_path(value: str | Path, base: Path) -> Path:
    """Expand ``~`` and resolve ``value`` relative to ``base``."""
    path = Path(value).expanduser()
    if not path.is_absolute():
        path = base / path
    return path.resolve()
