# File: translatable/repositories/language_repository.py

import logging
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from translatable.core.exceptions import DatabaseException
from translatable.db.models.language import Language
from translatable.repositories.base_repository import BaseRepository

logger = logging.getLogger(__name__)


class LanguageRepository(BaseRepository[Language]):
    """
    Locale directory backed by the languages table.

    Only active languages count as locales.
    """

    def __init__(self, session: Session):
        super().__init__(session, Language)

    def all_locale_ids(self) -> List[int]:
        """
        Ids of all active languages, in id order.

        Raises:
            DatabaseException: If database operation fails
        """
        stmt = select(Language.id).where(Language.is_active.is_(True)).order_by(Language.id)
        try:
            return list(self.session.execute(stmt).scalars().all())
        except SQLAlchemyError as e:
            self.logger.error(f"Database error listing languages: {e}", exc_info=True)
            raise DatabaseException(f"Failed to list languages: {str(e)}")

    def find_by_slug(self, slug: str) -> Optional[Language]:
        """Find an active language by its slug (case-insensitive)."""
        stmt = select(Language).where(
            Language.slug == slug.lower(),
            Language.is_active.is_(True),
        )
        try:
            return self.session.execute(stmt).scalars().first()
        except SQLAlchemyError as e:
            self.logger.error(f"Database error finding language '{slug}': {e}", exc_info=True)
            raise DatabaseException(f"Failed to find language: {str(e)}")

    def resolve_slug(self, slug: str) -> Optional[int]:
        language = self.find_by_slug(slug)
        return language.id if language else None

    def get_default(self) -> Optional[Language]:
        """The language flagged as default, if any."""
        stmt = select(Language).where(
            Language.is_default.is_(True),
            Language.is_active.is_(True),
        )
        try:
            return self.session.execute(stmt).scalars().first()
        except SQLAlchemyError as e:
            self.logger.error(f"Database error finding default language: {e}", exc_info=True)
            raise DatabaseException(f"Failed to find default language: {str(e)}")
