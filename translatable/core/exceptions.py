# File: translatable/core/exceptions.py

from typing import Dict, Any, Optional
from datetime import datetime


class TranslatableException(Exception):
    """Base exception for all translatable errors."""

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        """
        Initialize a translatable exception.

        Args:
            message: Human-readable error message
            code: Optional machine-processable error code
            details: Additional error details
        """
        self.message = message
        self.code = code or "GENERIC_ERROR"
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert exception to dictionary for API responses.

        Returns:
            Dictionary representation of the exception
        """
        return {
            "code": self.code,
            "message": self.message,
            "details": self.details,
            "timestamp": datetime.now().isoformat(),
        }


# Domain-specific exceptions
class DomainException(TranslatableException):
    """Base exception for domain-related errors."""

    CODE_PREFIX = "DOMAIN_"


class EntityNotFoundException(DomainException):
    """Raised when a requested entity does not exist."""

    def __init__(self, entity_type: str, entity_id: Any):
        super().__init__(
            f"{entity_type} with ID {entity_id} not found",
            f"{self.CODE_PREFIX}001",
            {"entity_type": entity_type, "entity_id": entity_id},
        )


# Configuration exceptions
class ConfigurationException(TranslatableException):
    """Base exception for missing or inconsistent setup."""

    CODE_PREFIX = "CONFIG_"


class LocalesNotDefinedException(ConfigurationException):
    """Raised when the locale directory is empty but locales are required."""

    def __init__(
        self,
        message: str = (
            "No locales are defined. Make sure the languages table exists "
            "and is not empty."
        ),
    ):
        super().__init__(message, f"{self.CODE_PREFIX}001", {})


class TranslationModelNotFoundException(ConfigurationException):
    """Raised when an entity's translation model cannot be resolved."""

    def __init__(self, entity_type: str, model_name: str):
        super().__init__(
            f"Translation model '{model_name}' for {entity_type} is not registered",
            f"{self.CODE_PREFIX}002",
            {"entity_type": entity_type, "model_name": model_name},
        )


# Mass assignment
class MassAssignmentException(TranslatableException):
    """Raised when a guarded attribute is mass-assigned on a totally guarded model."""

    CODE_PREFIX = "MASS_ASSIGNMENT_"

    def __init__(self, key: Any):
        self.key = key
        super().__init__(
            f"Mass assignment rejected for key {key!r}",
            f"{self.CODE_PREFIX}001",
            {"key": key},
        )


# Database exceptions
class DatabaseException(TranslatableException):
    """Raised when a database read fails."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, "DATABASE_001", details or {})
