# File: translatable/db/models/base.py
"""
Base models and mixins for translatable entities.

This module provides the foundation for all database models, including:
- Base SQLAlchemy model class
- Model registry used to resolve translation models by name
- Mixins declaring timestamps, mass-assignment rules and translatable attributes
"""

from datetime import datetime, timezone
from typing import Any, ClassVar, Dict, Optional, Tuple, Type, Union
import re

from sqlalchemy import Column, DateTime, Integer, MetaData, event
from sqlalchemy import inspect as sa_inspect
from sqlalchemy.orm import declarative_base

from translatable.core.exceptions import TranslationModelNotFoundException

# Create the SQLAlchemy base
Base = declarative_base(metadata=MetaData())


class ModelRegistry:
    """
    Registry for tracking mapped model classes by class name.

    Translation models are looked up here when an entity does not name its
    translation model explicitly (Country -> CountryTranslation).
    """

    _models: Dict[str, Type[Any]] = {}

    @classmethod
    def register(cls, model_class: Type[Any]) -> None:
        """
        Register a model class in the registry.

        Args:
            model_class: The model class to register
        """
        cls._models[model_class.__name__] = model_class

    @classmethod
    def get_model(cls, name: str) -> Optional[Type[Any]]:
        """
        Get a model class by name.

        Args:
            name: The name of the model class

        Returns:
            The model class if found, None otherwise
        """
        return cls._models.get(name)

    @classmethod
    def get_all_models(cls) -> Dict[str, Type[Any]]:
        """
        Get all registered model classes.

        Returns:
            Dictionary mapping model names to model classes
        """
        return cls._models.copy()


def snake_case(name: str) -> str:
    """Convert a CamelCase class name to snake_case."""
    return re.sub(r"(?<!^)(?=[A-Z])", "_", name).lower()


class TimestampMixin:
    """
    Mixin providing automatic timestamp functionality.

    Adds created_at and updated_at timestamps that are automatically
    maintained when records are created or updated.
    """

    created_at = Column(DateTime, default=lambda: datetime.now(timezone.utc))
    updated_at = Column(
        DateTime,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )


class MassAssignmentMixin:
    """
    Mixin declaring which attributes may be bulk-assigned through fill().

    A key is fillable when listed in __fillable__. Otherwise it is rejected
    when guarded (listed in __guarded__, or __guarded__ is ("*",)), and
    accepted when __fillable__ is empty and the key is not private.
    __hidden__ columns are left out of dict conversions and projections.
    """

    __fillable__: ClassVar[Tuple[str, ...]] = ()
    __guarded__: ClassVar[Tuple[str, ...]] = ("*",)
    __hidden__: ClassVar[Tuple[str, ...]] = ()

    @classmethod
    def is_guarded(cls, key: str) -> bool:
        return key in cls.__guarded__ or tuple(cls.__guarded__) == ("*",)

    @classmethod
    def is_fillable(cls, key: str) -> bool:
        if not isinstance(key, str):
            return False
        if key in cls.__fillable__:
            return True
        if cls.is_guarded(key):
            return False
        return not cls.__fillable__ and not key.startswith("_")

    @classmethod
    def totally_guarded(cls) -> bool:
        return not cls.__fillable__ and tuple(cls.__guarded__) == ("*",)


class TranslatableMixin(MassAssignmentMixin):
    """
    Mixin declaring an entity's translatable attributes.

    The entity itself never stores translated values; they live on the
    translation model, one row per (entity, locale).

    Attributes:
        __translatable__: Names of the translatable attributes
        __translation_model__: Translation model class or class name
            (default: class name + TRANSLATION_SUFFIX)
        __translation_foreign_key__: Column on the translation table
            referencing this entity (default: "<snake_name>_<pk>")
        __locale_key__: Locale column on the translation table
            (default: settings.LOCALE_KEY)
        __use_translation_fallback__: Per-model override of the
            USE_TRANSLATION_FALLBACK setting
    """

    __translatable__: ClassVar[Tuple[str, ...]] = ()
    __translation_model__: ClassVar[Optional[Union[str, type]]] = None
    __translation_foreign_key__: ClassVar[Optional[str]] = None
    __locale_key__: ClassVar[Optional[str]] = None
    __use_translation_fallback__: ClassVar[Optional[bool]] = None

    @classmethod
    def translated_attributes(cls) -> Tuple[str, ...]:
        return tuple(cls.__translatable__)

    @classmethod
    def has_translated_attributes(cls) -> bool:
        return bool(cls.__translatable__)

    @classmethod
    def is_translated_attribute(cls, key: str) -> bool:
        return key in cls.__translatable__

    @classmethod
    def translation_model_name(cls, suffix: str) -> str:
        model = cls.__translation_model__
        if isinstance(model, type):
            return model.__name__
        return model or f"{cls.__name__}{suffix}"

    @classmethod
    def resolve_translation_model(cls, suffix: str) -> Type[Any]:
        """
        Resolve the translation model class.

        Raises:
            TranslationModelNotFoundException: If no such model is registered
        """
        if isinstance(cls.__translation_model__, type):
            return cls.__translation_model__

        model_name = cls.translation_model_name(suffix)
        model = ModelRegistry.get_model(model_name)
        if model is None:
            raise TranslationModelNotFoundException(cls.__name__, model_name)
        return model

    @classmethod
    def primary_key_name(cls) -> str:
        return sa_inspect(cls).primary_key[0].name

    @classmethod
    def translation_foreign_key(cls) -> str:
        return cls.__translation_foreign_key__ or f"{snake_case(cls.__name__)}_{cls.primary_key_name()}"

    @classmethod
    def locale_key(cls, default: str) -> str:
        return cls.__locale_key__ or default


class AbstractBase(Base):
    """
    Abstract base class for all model entities.

    Attributes:
        id: Primary key ID (auto-incremented)
    """

    __abstract__ = True

    id = Column(Integer, primary_key=True, autoincrement=True)

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert the model instance to a dictionary.

        Columns named in __hidden__ are left out.

        Returns:
            Dictionary representation of the model instance
        """
        hidden = getattr(self, "__hidden__", ())
        result = {}
        for column in self.__table__.columns:
            if column.name in hidden:
                continue
            value = getattr(self, column.key)
            if isinstance(value, datetime):
                value = value.isoformat()
            result[column.name] = value
        return result

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__}(id={self.id})>"


@event.listens_for(Base, "instrument_class", propagate=True)
def register_model(mapper, class_):
    """Register every mapped class so translation models can be found by name."""
    ModelRegistry.register(class_)
