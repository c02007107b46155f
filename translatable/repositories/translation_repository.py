# File: translatable/repositories/translation_repository.py

"""
Translation Repository

Loads and looks up the locale-scoped translation rows of one translation
model. The model is generic: any mapped class with a foreign key column to
its parent and a locale column qualifies.
"""

import logging
from typing import Any, List, Optional, Type

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from translatable.core.exceptions import DatabaseException
from translatable.repositories.base_repository import BaseRepository

logger = logging.getLogger(__name__)


class TranslationRepository(BaseRepository[Any]):
    """
    Repository for the translation rows of one entity type.

    Attributes:
        foreign_key: Column on the translation table referencing the parent
        locale_key: Column on the translation table holding the locale id
    """

    def __init__(self, session: Session, model: Type[Any], foreign_key: str, locale_key: str):
        """
        Initialize the translation repository.

        Args:
            session: SQLAlchemy database session
            model: Translation model class
            foreign_key: Name of the parent foreign key column
            locale_key: Name of the locale column
        """
        super().__init__(session, model)
        self.foreign_key = foreign_key
        self.locale_key = locale_key

    def _column(self, name: str):
        return getattr(self._get_model(), name)

    def load_children(self, parent_key: Any) -> List[Any]:
        """
        Load all translations of a parent, oldest first.

        Args:
            parent_key: Primary key of the parent entity

        Returns:
            List of translation instances

        Raises:
            DatabaseException: If database operation fails
        """
        model = self._get_model()
        stmt = (
            select(model)
            .where(self._column(self.foreign_key) == parent_key)
            .order_by(*model.__mapper__.primary_key)
        )
        try:
            translations = list(self.session.execute(stmt).scalars().all())
        except SQLAlchemyError as e:
            self.logger.error(f"Database error loading translations: {e}", exc_info=True)
            raise DatabaseException(f"Failed to load translations: {str(e)}")

        self.logger.debug(
            f"Loaded {len(translations)} {model.__name__} rows for parent {parent_key}"
        )
        return translations

    def find_for_locale(self, parent_key: Any, locale_id: int) -> Optional[Any]:
        """
        Find the translation of a parent in one locale.

        Args:
            parent_key: Primary key of the parent entity
            locale_id: Locale id

        Returns:
            Translation instance if found, None otherwise
        """
        stmt = select(self._get_model()).where(
            self._column(self.foreign_key) == parent_key,
            self._column(self.locale_key) == locale_id,
        )
        try:
            return self.session.execute(stmt).scalars().first()
        except SQLAlchemyError as e:
            self.logger.error(f"Database error finding translation: {e}", exc_info=True)
            raise DatabaseException(f"Failed to find translation: {str(e)}")

    def count_for_parent(self, parent_key: Any) -> int:
        """Number of stored translations of a parent."""
        stmt = select(func.count()).select_from(self._get_model()).where(
            self._column(self.foreign_key) == parent_key
        )
        try:
            return self.session.execute(stmt).scalar_one()
        except SQLAlchemyError as e:
            self.logger.error(f"Database error counting translations: {e}", exc_info=True)
            raise DatabaseException(f"Failed to count translations: {str(e)}")
