"""
Configuration framework for memex components.

This module provides:
- BaseConfig: Abstract base class for component configurations
- ValidationResult: Result of configuration validation
- HealthCheckResult: Result of a readiness check
- EnricherConfig: Settings for the context enricher hook
- Validators: Reusable validation functions

Usage:
    from memex_config import EnricherConfig

    config = EnricherConfig.from_env()
    result = config.validate()
    if not result.is_valid:
        print("Configuration errors found")
"""

from .base import (
    BaseConfig,
    ConfigStatus,
    HealthCheckResult,
    ValidationResult,
)
from .configs import EnricherConfig, resolve_project_root


__all__ = [
    "BaseConfig",
    "ConfigStatus",
    "EnricherConfig",
    "HealthCheckResult",
    "ValidationResult",
    "resolve_project_root",
]
