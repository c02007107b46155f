"""
translatable - locale-aware translations for SQLAlchemy models.
"""

__version__ = "0.1.0"
