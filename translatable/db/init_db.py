# File: translatable/db/init_db.py
"""
Database initialization functions.

Creates the schema for all registered models and seeds the languages table
that backs the locale directory.
"""

import logging
from typing import Iterable, List, Optional

from sqlalchemy import select
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session

from translatable.core.config import settings
from translatable.db.models.base import Base
from translatable.db.models.language import Language

logger = logging.getLogger(__name__)


def init_db(bind: Engine, reset: bool = False) -> None:
    """
    Create all tables known to the model metadata.

    Args:
        bind: Engine to create the tables on
        reset: Drop existing tables first
    """
    if reset:
        logger.warning("Dropping all tables before initialization")
        Base.metadata.drop_all(bind=bind)
    Base.metadata.create_all(bind=bind)
    logger.info(f"Database schema initialized ({len(Base.metadata.tables)} tables)")


def seed_languages(
        session: Session,
        locales: Optional[Iterable[str]] = None,
        default_locale: Optional[str] = None,
) -> List[Language]:
    """
    Insert missing languages. Existing slugs are left untouched.

    Args:
        session: Database session
        locales: Locale slugs (default: settings.SUPPORTED_LOCALES)
        default_locale: Slug flagged as default (default: settings.DEFAULT_LOCALE)

    Returns:
        The newly created languages
    """
    locales = list(locales if locales is not None else settings.SUPPORTED_LOCALES)
    default_locale = default_locale or settings.DEFAULT_LOCALE

    existing = set(session.execute(select(Language.slug)).scalars().all())
    created = []
    for slug in locales:
        slug = slug.lower()
        if slug in existing:
            continue
        language = Language(slug=slug, title=slug.upper(), is_default=(slug == default_locale))
        session.add(language)
        created.append(language)
        existing.add(slug)

    session.flush()
    if created:
        logger.info(f"Seeded languages: {', '.join(lang.slug for lang in created)}")
    return created
