"""
Reusable validation functions for configuration values.

Each validator returns ``(is_valid, error_message)``; ``error_message`` is
None when the value is valid.
"""

import os
from pathlib import Path
from typing import Any


def validate_positive_int(value: Any, name: str) -> tuple[bool, str | None]:
    """Validate that a value is an integer greater than zero.

    Args:
        value: The value to validate
        name: Field name used in the error message

    Returns:
        Tuple of (is_valid, error_message).
    """
    if isinstance(value, bool) or not isinstance(value, int):
        return False, f"{name} must be an integer, got {type(value).__name__}"
    if value <= 0:
        return False, f"{name} must be greater than 0, got {value}"
    return True, None


def validate_directory(path: Path | None, name: str) -> tuple[bool, str | None]:
    """Validate that a path is an existing, readable directory."""
    if path is None:
        return False, f"{name} is not set"
    if not path.exists():
        return False, f"{name} does not exist: {path}"
    if not path.is_dir():
        return False, f"{name} is not a directory: {path}"
    if not os.access(path, os.R_OK | os.X_OK):
        return False, f"{name} is not readable: {path}"
    return True, None


def validate_file(path: Path | None, name: str) -> tuple[bool, str | None]:
    """Validate that a path is an existing, readable regular file."""
    if path is None:
        return False, f"{name} is not set"
    if not path.exists():
        return False, f"{name} does not exist: {path}"
    if not path.is_file():
        return False, f"{name} is not a file: {path}"
    if not os.access(path, os.R_OK):
        return False, f"{name} is not readable: {path}"
    return True, None
