"""
Base classes and types for the configuration framework.

This module provides:
- ConfigStatus: Enum for validation states (VALID, INVALID, DEGRADED)
- ValidationResult: Result of config validation with errors/warnings
- HealthCheckResult: Result of a readiness check
- BaseConfig: Abstract base class for all config classes
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ConfigStatus(Enum):
    """Status of configuration validation."""

    VALID = "valid"
    INVALID = "invalid"
    DEGRADED = "degraded"  # Usable, but some documents or sections will not resolve


@dataclass
class ValidationResult:
    """Result of validating a configuration.

    Attributes:
        status: Overall validation status
        errors: List of validation errors
        warnings: List of validation warnings (config works but has issues)
    """

    status: ConfigStatus
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        """Return True if config is valid (no errors)."""
        return self.status == ConfigStatus.VALID

    @property
    def is_usable(self) -> bool:
        """Return True if config is usable (valid or degraded)."""
        return self.status in (ConfigStatus.VALID, ConfigStatus.DEGRADED)

    @classmethod
    def valid(cls, warnings: list[str] | None = None) -> "ValidationResult":
        """Create a valid result with optional warnings."""
        return cls(status=ConfigStatus.VALID, warnings=warnings or [])

    @classmethod
    def invalid(cls, errors: list[str], warnings: list[str] | None = None) -> "ValidationResult":
        """Create an invalid result with errors."""
        return cls(status=ConfigStatus.INVALID, errors=errors, warnings=warnings or [])

    @classmethod
    def degraded(cls, errors: list[str], warnings: list[str] | None = None) -> "ValidationResult":
        """Create a degraded result (partially valid)."""
        return cls(status=ConfigStatus.DEGRADED, errors=errors, warnings=warnings or [])

    def merge(self, other: "ValidationResult") -> "ValidationResult":
        """Combine two results; the worse status wins."""
        errors = self.errors + other.errors
        warnings = self.warnings + other.warnings
        statuses = {self.status, other.status}
        if ConfigStatus.INVALID in statuses:
            return ValidationResult.invalid(errors, warnings)
        if ConfigStatus.DEGRADED in statuses:
            return ValidationResult.degraded(errors, warnings)
        return ValidationResult.valid(warnings)


@dataclass
class HealthCheckResult:
    """Result of a readiness check.

    Attributes:
        healthy: Whether the component can serve requests
        service_name: Name of the component checked
        message: Human-readable status message
    """

    healthy: bool
    service_name: str
    message: str

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "healthy": self.healthy,
            "service": self.service_name,
            "message": self.message,
        }


class BaseConfig(ABC):
    """Abstract base class for component configurations.

    Config classes inherit from this and implement:
    - validate(): Check if the configuration is valid
    - health_check(): Check that the configured resources are reachable
    - to_dict(): Return config as a JSON-friendly dict
    - from_env(): Class method to load config from environment and files
    """

    @abstractmethod
    def validate(self) -> ValidationResult:
        """Validate the configuration.

        Returns:
            ValidationResult with status, errors, and warnings
        """
        ...

    @abstractmethod
    def health_check(self) -> HealthCheckResult:
        """Check that configured resources are present and readable."""
        ...

    @abstractmethod
    def to_dict(self) -> dict[str, Any]:
        """Return configuration as a dictionary."""
        ...

    @classmethod
    @abstractmethod
    def from_env(cls) -> "BaseConfig":
        """Load configuration from environment variables and config files.

        This method should:
        1. Check environment variables first
        2. Fall back to config files
        3. Apply defaults for optional values

        Returns:
            New instance of the config class
        """
        ...

    @property
    def service_name(self) -> str:
        """Return the name of the component this config is for.

        Default implementation returns the class name without 'Config' suffix.
        """
        name = self.__class__.__name__
        if name.endswith("Config"):
            name = name[:-6]
        return name.lower()
