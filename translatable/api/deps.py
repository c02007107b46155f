# File: translatable/api/deps.py
"""
FastAPI dependencies for translatable.

Provides dependency functions for database sessions, the request-scoped
locale context and translatable service injection for API routes.

    CountryService = translatable_service(Country)

    @router.get("/countries/{country_id}")
    def read_country(country_id: int, service: TranslatableService = Depends(CountryService)):
        return service.get_or_fail(country_id).to_dict()
"""

import logging
from typing import Any, Callable, Optional, Type

from fastapi import Depends, Header, HTTPException, Query, status
from sqlalchemy.orm import Session

from translatable.core.config import settings
from translatable.core.events import EventBus, global_event_bus
from translatable.core.exceptions import LocalesNotDefinedException
from translatable.core.locale import LocaleContext, LocaleDirectory, build_locale_context, parse_accept_language

# Database session provider
from translatable.db.session import get_db

from translatable.repositories.language_repository import LanguageRepository
from translatable.services.translatable_service import TranslatableService

logger = logging.getLogger(__name__)


# --- Database Session Dependency ---
# get_db is imported from translatable.db.session


# --- Locale ---
def get_locale_directory(db: Session = Depends(get_db)) -> LocaleDirectory:
    """Locale directory backed by the languages table."""
    return LanguageRepository(db)


def get_locale_context(
        locale: Optional[str] = Query(None, description="Locale slug overriding Accept-Language"),
        accept_language: Optional[str] = Header(None),
        directory: LocaleDirectory = Depends(get_locale_directory),
) -> LocaleContext:
    """
    Build the locale context of the current request.

    The ?locale= query parameter wins over the Accept-Language header; when
    neither names a known locale the configured default locale is used.
    """
    requested = [locale] + parse_accept_language(accept_language)
    try:
        return build_locale_context(directory, requested, settings.DEFAULT_LOCALE)
    except LocalesNotDefinedException as e:
        logger.error(f"Cannot build locale context: {e.message}")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=e.to_dict(),
        )


# --- Events ---
def get_event_bus() -> EventBus:
    return global_event_bus


# --- Services ---
def translatable_service(model: Type[Any]) -> Callable[..., TranslatableService]:
    """
    Create a dependency providing a TranslatableService for a model.

    Args:
        model: Translatable model class

    Returns:
        Dependency function for use with Depends()
    """

    def get_service(
            db: Session = Depends(get_db),
            locale_context: LocaleContext = Depends(get_locale_context),
            directory: LocaleDirectory = Depends(get_locale_directory),
            event_bus: EventBus = Depends(get_event_bus),
    ) -> TranslatableService:
        return TranslatableService(
            db,
            model,
            locale_context,
            locale_directory=directory,
            event_bus=event_bus,
        )

    return get_service
