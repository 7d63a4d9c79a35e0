"""
Component-specific configuration classes.

Each config class inherits from BaseConfig and provides:
- validate(): Check configuration validity
- health_check(): Check configured resources
- to_dict(): Serialize for display
- from_env(): Load from environment and config files
"""

from .enricher import EnricherConfig, resolve_project_root


__all__ = [
    "EnricherConfig",
    "resolve_project_root",
]
