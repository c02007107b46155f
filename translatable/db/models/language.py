# File: translatable/db/models/language.py

"""
Language model backing the locale directory.

Translation rows reference languages by numeric id; the slug is what
requests and configuration use to name a locale.
"""

from sqlalchemy import Boolean, Column, String, Index

from translatable.db.models.base import AbstractBase, TimestampMixin


class Language(AbstractBase, TimestampMixin):
    """
    A locale known to the system.

    Attributes:
        id: Locale id stored on translation rows
        slug: Language code (e.g., 'en', 'de', 'fr-ca')
        title: Human-readable name
        is_default: Whether this is the fallback locale
        is_active: Inactive languages are not offered as locales
    """

    __tablename__ = "languages"

    slug = Column(String(10), unique=True, nullable=False)
    title = Column(String(100), nullable=False)
    is_default = Column(Boolean, default=False, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)

    __table_args__ = (
        Index("idx_language_active", "is_active"),
    )

    def __repr__(self) -> str:
        return f"<Language(id={self.id}, slug='{self.slug}', is_default={self.is_default})>"
