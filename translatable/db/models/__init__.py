# File: translatable/db/models/__init__.py
"""
Database models for translatable.
"""

from translatable.db.models.base import (
    AbstractBase,
    Base,
    MassAssignmentMixin,
    ModelRegistry,
    TimestampMixin,
    TranslatableMixin,
)
from translatable.db.models.language import Language

__all__ = [
    "AbstractBase",
    "Base",
    "Language",
    "MassAssignmentMixin",
    "ModelRegistry",
    "TimestampMixin",
    "TranslatableMixin",
]
