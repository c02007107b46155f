# File: translatable/services/translatable_service.py

from contextlib import contextmanager
from typing import Any, Dict, Generic, List, Mapping, Optional, Type, TypeVar
import logging

from sqlalchemy import Select, select
from sqlalchemy.orm import Session

from translatable.core.config import Settings, settings as default_settings
from translatable.core.events import EventBus
from translatable.core.exceptions import EntityNotFoundException
from translatable.core.locale import LocaleContext, LocaleDirectory
from translatable.repositories.base_repository import BaseRepository
from translatable.repositories.language_repository import LanguageRepository
from translatable.repositories.translated_query import TranslatedQueryBuilder
from translatable.repositories.translation_repository import TranslationRepository
from translatable.services.locale_resolver import LocaleResolver
from translatable.services.translatable_entity import Locale, TranslatableEntity

ModelT = TypeVar("ModelT")
logger = logging.getLogger(__name__)


class TranslatableService(Generic[ModelT]):
    """
    Entry point for working with one translatable model.

    Provides:
    - Wrapping of new and stored records as TranslatableEntity
    - Translated list queries
    - Transaction management around saves

    All locale decisions use the LocaleContext of the current request.
    """

    def __init__(
            self,
            session: Session,
            model: Type[ModelT],
            locale_context: LocaleContext,
            locale_directory: Optional[LocaleDirectory] = None,
            settings: Optional[Settings] = None,
            event_bus: Optional[EventBus] = None,
    ):
        """
        Initialize service with dependencies.

        Args:
            session: Database session for persistence operations
            model: Translatable model class (uses TranslatableMixin)
            locale_context: Current and default locale of the request
            locale_directory: Known locales (default: the languages table)
            settings: Settings (default: the module-level settings)
            event_bus: Optional event bus for publishing domain events

        Raises:
            TranslationModelNotFoundException: If the translation model
                cannot be resolved
        """
        self.session = session
        self.model = model
        self.settings = settings or default_settings
        self.event_bus = event_bus

        self.translation_model = model.resolve_translation_model(self.settings.TRANSLATION_SUFFIX)
        self.foreign_key = model.translation_foreign_key()
        self.locale_key = model.locale_key(self.settings.LOCALE_KEY)

        self.repository: BaseRepository[ModelT] = BaseRepository(session, model)
        self.translation_repository = TranslationRepository(
            session, self.translation_model, self.foreign_key, self.locale_key
        )
        self.resolver = LocaleResolver(locale_context, locale_directory or LanguageRepository(session))
        self.query_builder = TranslatedQueryBuilder(
            model,
            self.translation_model,
            self.foreign_key,
            self.locale_key,
            policy=self.settings.TRANSLATED_SELECT_POLICY,
            alias=self.settings.TRANSLATED_JOIN_ALIAS,
        )
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    @contextmanager
    def transaction(self):
        """
        Provide a transactional scope around operations.

        save() writes the entity and its translations one after another;
        wrap it in this scope to commit or roll back all of them together.

        Raises:
            Exception: Any exception that occurs during transaction execution
        """
        try:
            yield
            self.session.commit()
        except Exception as e:
            self.session.rollback()
            self.logger.error(f"Transaction failed: {str(e)}", exc_info=True)
            raise

    # ------------------------------------------------------------------
    # Entities
    # ------------------------------------------------------------------

    def wrap(self, record: ModelT) -> TranslatableEntity[ModelT, Any]:
        """Wrap a record of this service's model."""
        if not isinstance(record, self.model):
            raise TypeError(f"Expected {self.model.__name__}, got {type(record).__name__}")
        return TranslatableEntity(
            record,
            resolver=self.resolver,
            entity_repository=self.repository,
            translation_repository=self.translation_repository,
            settings=self.settings,
            event_bus=self.event_bus,
        )

    def new(self, attributes: Optional[Mapping[Any, Any]] = None) -> TranslatableEntity[ModelT, Any]:
        """
        Create an unsaved entity, optionally filled with attributes.

        Raises:
            MassAssignmentException: See TranslatableEntity.fill
        """
        entity = self.wrap(self.model())
        if attributes:
            entity.fill(attributes)
        return entity

    def get(self, entity_id: Any) -> Optional[TranslatableEntity[ModelT, Any]]:
        record = self.repository.get_by_id(entity_id)
        return self.wrap(record) if record is not None else None

    def get_or_fail(self, entity_id: Any) -> TranslatableEntity[ModelT, Any]:
        """
        Raises:
            EntityNotFoundException: If no such entity exists
        """
        entity = self.get(entity_id)
        if entity is None:
            raise EntityNotFoundException(self.model.__name__, entity_id)
        return entity

    def list(self, skip: int = 0, limit: int = 100, **filters) -> List[TranslatableEntity[ModelT, Any]]:
        return [self.wrap(record) for record in self.repository.list(skip=skip, limit=limit, **filters)]

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def translated_query(self, stmt: Optional[Select] = None, locale: Locale = None) -> Select:
        """
        Scope a query to the translations of a locale (current by default).

        Args:
            stmt: SELECT against the model (default: select(model))
            locale: Locale id or slug
        """
        stmt = stmt if stmt is not None else select(self.model)
        return self.query_builder.scope_translated(stmt, self.resolver.resolve(locale))

    def translated_rows(self, stmt: Optional[Select] = None, locale: Locale = None) -> List[Dict[str, Any]]:
        """Execute a translated query and return its rows as dicts."""
        rows = self.session.execute(self.translated_query(stmt, locale)).mappings().all()
        return [dict(row) for row in rows]

    def translated_in(self, locale: Locale = None, stmt: Optional[Select] = None) -> Select:
        """Scope a query to entities translated into a locale."""
        stmt = stmt if stmt is not None else select(self.model)
        return self.query_builder.scope_translated_in(stmt, self.resolver.resolve(locale))

    def with_translations(self, stmt: Optional[Select] = None) -> Select:
        """Scope a query to entities having any translation."""
        stmt = stmt if stmt is not None else select(self.model)
        return self.query_builder.scope_has_translations(stmt)
