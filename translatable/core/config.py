# File: translatable/core/config.py
"""
Configuration settings for translatable.

This module defines the package settings using Pydantic's BaseSettings,
which supports environment variable loading and validation. Every option
can be overridden with a ``TRANSLATABLE_`` prefixed environment variable
or an ``.env`` file.
"""

import json
from typing import List, Literal, Union

from pydantic import ValidationInfo, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Package settings loaded from environment variables.

    The translation options cover the suffix and mass-assignment bypass of
    the translatable models, plus the policy switches for the behaviours
    that callers may need to pin (fallback reads, dict conversion and the
    translated query projection).
    """

    model_config = SettingsConfigDict(
        env_prefix="TRANSLATABLE_",
        env_file=".env",
        case_sensitive=True,
        extra="ignore",
    )

    # Database
    DATABASE_URL: str = "sqlite:///translatable.db"
    DB_ECHO: bool = False

    # Logging
    LOG_LEVEL: str = "INFO"

    # ================================
    # Translation Configuration
    # ================================

    # Appended to the entity class name to find its translation model,
    # e.g. Country -> CountryTranslation
    TRANSLATION_SUFFIX: str = "Translation"

    # If true, translated attributes are always fillable.
    # WARNING: only enable this if you know what the security risks are.
    ALWAYS_FILLABLE: bool = False

    # Column on translation tables holding the locale id
    LOCALE_KEY: str = "language_id"

    # Retry the default locale when the current locale has no translation
    USE_TRANSLATION_FALLBACK: bool = False

    # Overlay translated attributes when converting an entity to a dict
    TO_DICT_WITH_TRANSLATIONS: bool = True

    # Columns auto-selected by the translated query scope
    TRANSLATED_SELECT_POLICY: Literal["fillable", "translated"] = "fillable"
    TRANSLATED_JOIN_ALIAS: str = "tt"

    # ================================
    # Localization Configuration
    # ================================

    # Locales seeded into the languages table by init_db
    SUPPORTED_LOCALES: List[str] = [
        "en",  # English
        "de",  # German
        "fr",  # French
        "es",  # Spanish
    ]

    # Default locale slug; must come after SUPPORTED_LOCALES for validation
    DEFAULT_LOCALE: str = "en"

    @field_validator("SUPPORTED_LOCALES", mode="before")
    @classmethod
    def validate_supported_locales(cls, v: Union[str, List[str]]) -> List[str]:
        """Parse supported locales given as a JSON or comma-separated string."""
        if isinstance(v, str):
            try:
                parsed = json.loads(v)
                if isinstance(parsed, list):
                    return parsed
            except json.JSONDecodeError:
                return [i.strip() for i in v.split(",") if i.strip()]
        return v or ["en"]

    @field_validator("DEFAULT_LOCALE")
    @classmethod
    def validate_default_locale(cls, v: str, info: ValidationInfo) -> str:
        """Ensure default locale is one of the supported locales."""
        supported_locales = info.data.get("SUPPORTED_LOCALES") or ["en"]
        if v not in supported_locales:
            return supported_locales[0]
        return v

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is a valid logging level."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        return v.upper() if v.upper() in valid_levels else "INFO"


# Create settings instance
settings = Settings()
