# File: translatable/services/translatable_entity.py

"""
Translatable entity wrapper.

A TranslatableEntity pairs a stored entity record with its in-memory
translation collection. Translatable attributes are read from and written to
the translation of the current locale; every other attribute goes straight
to the record. Saving writes the record first and then only the translations
that actually changed.

    country = service.wrap(session.get(Country, 1))
    country.get_attribute("name")             # name in the current locale
    country.translate_or_new("de").name = "Rumänien"
    country.fill({"slug": "ro", 1: {"name": "Romania"}})
    country.save()
"""

import logging
from enum import Enum
from typing import Any, Dict, Generic, List, Mapping, Optional, Tuple, TypeVar, Union

from translatable.core.config import Settings, settings as default_settings
from translatable.core.events import EntitySavedEvent, EntityDeletedEvent, EventBus, TranslationSavedEvent
from translatable.core.exceptions import MassAssignmentException
from translatable.repositories.base_repository import BaseRepository
from translatable.repositories.translation_repository import TranslationRepository
from translatable.services.locale_resolver import LocaleResolver
from translatable.services.translation_collection import TranslationCollection

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT")
TranslationT = TypeVar("TranslationT")

Locale = Optional[Union[int, str]]


class PersistenceState(str, Enum):
    NEW = "new"
    PERSISTED_CLEAN = "persisted_clean"
    PERSISTED_DIRTY = "persisted_dirty"


class TranslatableEntity(Generic[ModelT, TranslationT]):
    """
    An entity record together with its translations.

    Attributes:
        record: The wrapped entity model instance
        translations: The entity's TranslationCollection
    """

    def __init__(
            self,
            record: ModelT,
            *,
            resolver: LocaleResolver,
            entity_repository: BaseRepository,
            translation_repository: TranslationRepository,
            settings: Optional[Settings] = None,
            event_bus: Optional[EventBus] = None,
    ):
        self.record = record
        self.resolver = resolver
        self.entity_repository = entity_repository
        self.translation_repository = translation_repository
        self.settings = settings or default_settings
        self.event_bus = event_bus
        self.model = type(record)
        self.locale_key = translation_repository.locale_key
        self.foreign_key = translation_repository.foreign_key
        self.translations: TranslationCollection[TranslationT] = TranslationCollection(
            translation_repository.model,
            self.locale_key,
            self._load_translations,
        )
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    def __repr__(self) -> str:
        return f"<TranslatableEntity({self.record!r}, state={self.state.value})>"

    def _load_translations(self) -> List[TranslationT]:
        if not self.entity_repository.has_identity(self.record):
            return []
        return self.translation_repository.load_children(self.key)

    @property
    def key(self) -> Any:
        return getattr(self.record, self.model.primary_key_name())

    @property
    def entity_type(self) -> str:
        return self.model.__name__

    # ------------------------------------------------------------------
    # Locale lookups
    # ------------------------------------------------------------------

    def _uses_fallback(self, with_fallback: Optional[bool]) -> bool:
        if with_fallback is not None:
            return with_fallback
        model_policy = getattr(self.model, "__use_translation_fallback__", None)
        if model_policy is not None:
            return model_policy
        return self.settings.USE_TRANSLATION_FALLBACK

    def get_translation(self, locale: Locale = None, with_fallback: Optional[bool] = None) -> Optional[TranslationT]:
        """
        Find the translation for a locale.

        Args:
            locale: Locale id or slug; the current locale when omitted
            with_fallback: Retry the default locale on a miss; defaults to
                the model's or the configured fallback policy

        Returns:
            The translation, or None
        """
        locale_id = self.resolver.resolve(locale)
        translation = self.translations.find_by_locale(locale_id)
        if translation is not None:
            return translation

        if self._uses_fallback(with_fallback):
            default_id = self.resolver.default_locale_id()
            if default_id != locale_id:
                return self.translations.find_by_locale(default_id)
        return None

    def translate(self, locale: Locale = None, with_fallback: Optional[bool] = None) -> Optional[TranslationT]:
        """Translation for the given (or current) locale; never creates one."""
        return self.get_translation(locale, with_fallback)

    def translate_or_new(self, locale: Locale = None) -> TranslationT:
        """Translation for the given (or current) locale, created in memory on a miss."""
        return self.translations.get_or_create(self.resolver.resolve(locale))

    def has_translation(self, locale: Locale = None) -> bool:
        return self.translations.find_by_locale(self.resolver.resolve(locale)) is not None

    # ------------------------------------------------------------------
    # Attribute routing
    # ------------------------------------------------------------------

    def is_translated_attribute(self, name: str) -> bool:
        return self.model.is_translated_attribute(name)

    def get_attribute(self, name: str) -> Any:
        """
        Read an attribute.

        Translatable attributes come from the current locale's translation
        (None when there is none); anything else from the record.

        Raises:
            AttributeError: If the record has no such attribute
        """
        if self.is_translated_attribute(name):
            translation = self.get_translation()
            return getattr(translation, name) if translation is not None else None
        return getattr(self.record, name)

    def set_attribute(self, name: str, value: Any) -> None:
        """
        Write an attribute.

        Translatable attributes go to the current locale's translation,
        which is created on demand; anything else to the record.

        Raises:
            AttributeError: If the model defines no such attribute
        """
        if self.is_translated_attribute(name):
            setattr(self.translate_or_new(), name, value)
            return
        if not hasattr(self.model, name):
            raise AttributeError(f"{self.entity_type} has no attribute '{name}'")
        setattr(self.record, name, value)

    def is_set(self, name: str) -> bool:
        if self.is_translated_attribute(name):
            return True
        return getattr(self.record, name, None) is not None

    def to_dict(self, with_translations: Optional[bool] = None) -> Dict[str, Any]:
        """
        Convert the entity to a plain mapping.

        Translated attributes of the current locale are laid over the
        record's columns; an attribute without a translation is left out.

        Args:
            with_translations: Overlay translations; defaults to the
                TO_DICT_WITH_TRANSLATIONS setting
        """
        attributes = self.record.to_dict()

        if with_translations is None:
            with_translations = self.settings.TO_DICT_WITH_TRANSLATIONS

        if with_translations and self.model.has_translated_attributes():
            translation = self.get_translation()
            if translation is not None:
                for field in self.model.translated_attributes():
                    attributes[field] = getattr(translation, field)

        return attributes

    # ------------------------------------------------------------------
    # Mass assignment
    # ------------------------------------------------------------------

    def _always_fillable(self) -> bool:
        return self.settings.ALWAYS_FILLABLE

    def fill(self, attributes: Mapping[Any, Any]) -> "TranslatableEntity[ModelT, TranslationT]":
        """
        Assign many attributes at once.

        Keys naming a locale id carry a mapping of translated values for
        that locale, e.g. {"slug": "ro", 1: {"name": "Romania"}}; all other
        keys are plain attributes. Guarded keys are skipped, or rejected when
        the model is totally guarded.

        Raises:
            MassAssignmentException: A guarded key on a totally guarded model
            LocalesNotDefinedException: The model is translatable but no
                locales exist
            ValueError: A locale key does not carry a mapping
        """
        remaining = dict(attributes)
        totally_guarded = self.model.totally_guarded()

        with self.translations.filling():
            if self.model.has_translated_attributes():
                locales = self.resolver.all_locale_ids()
                for key, values in attributes.items():
                    if not self.resolver.is_locale_key(key, locales):
                        continue
                    if not isinstance(values, Mapping):
                        raise ValueError(
                            f"Translations for locale {key!r} must be a mapping, got {type(values).__name__}"
                        )
                    locale_id = self.resolver.resolve(key)
                    for attribute, value in values.items():
                        if self._always_fillable() or self.model.is_fillable(attribute):
                            setattr(self.translations.get_or_create(locale_id), attribute, value)
                        elif totally_guarded:
                            raise MassAssignmentException(key)
                        else:
                            self.logger.debug(f"Skipped guarded translated attribute '{attribute}' for locale {key}")
                    del remaining[key]

            for key, value in remaining.items():
                if self.model.is_fillable(key):
                    self.set_attribute(key, value)
                elif totally_guarded:
                    raise MassAssignmentException(key)
                else:
                    self.logger.debug(f"Skipped guarded attribute '{key}'")

        return self

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    @property
    def state(self) -> PersistenceState:
        if not self.entity_repository.has_identity(self.record):
            return PersistenceState.NEW
        if self.entity_repository.get_dirty(self.record):
            return PersistenceState.PERSISTED_DIRTY
        return PersistenceState.PERSISTED_CLEAN

    @property
    def exists(self) -> bool:
        return self.state is not PersistenceState.NEW

    def is_translation_dirty(self, translation: TranslationT) -> bool:
        """Whether a translation has changed content; the locale column does not count."""
        dirty = self.translation_repository.get_dirty(translation)
        dirty.pop(self.locale_key, None)
        return bool(dirty)

    def _publish(self, event) -> None:
        if self.event_bus is not None:
            self.event_bus.publish(event)

    def save(self) -> bool:
        """
        Store the entity and its changed translations.

        A new or changed record is written first; its translations are
        written only if that succeeds. An unchanged record is not written
        again and only its translations are flushed.

        Changed stored translations are kept out of the session until their
        own write, so each of them succeeds or fails on its own.

        Returns:
            True if everything that needed writing was written

        Raises:
            DatabaseException: If unrelated work pending in the session
                fails to flush
        """
        state = self.state
        pending = self._detach_dirty_translations()
        try:
            if state is PersistenceState.PERSISTED_CLEAN:
                saved, written = self._flush_translations(pending)
                if saved and written:
                    self._publish(EntitySavedEvent(
                        entity_id=self.key, entity_type=self.entity_type, translations_only=True,
                    ))
                return saved

            if not self.entity_repository.persist(self.record):
                self.logger.warning(f"Saving {self.entity_type} failed ({state.value}); translations not written")
                return False

            self.logger.info(f"Saved {self.entity_type} #{self.key} ({state.value})")
            self._publish(EntitySavedEvent(entity_id=self.key, entity_type=self.entity_type))
            saved, _ = self._flush_translations(pending)
            return saved
        finally:
            self._reattach(pending)

    def save_translations(self) -> bool:
        """Write the changed translations. Requires a stored record."""
        pending = self._detach_dirty_translations()
        try:
            saved, _ = self._flush_translations(pending)
            return saved
        finally:
            self._reattach(pending)

    def _detach_dirty_translations(self) -> List[TranslationT]:
        pending = [t for t in self.translations if self.is_translation_dirty(t)]
        for translation in pending:
            self.translation_repository.detach(translation)
        return pending

    def _reattach(self, translations: List[TranslationT]) -> None:
        # stored translations left unwritten go back under session tracking
        for translation in translations:
            self.translation_repository.attach(translation)

    def _flush_translations(self, pending: List[TranslationT]) -> Tuple[bool, int]:
        written = 0
        for translation in pending:
            fields = sorted(set(self.translation_repository.get_dirty(translation)) - {self.locale_key})
            setattr(translation, self.foreign_key, self.key)
            if not self.translation_repository.persist(translation):
                self.logger.warning(
                    f"Saving {self.entity_type} #{self.key} translation for locale "
                    f"{self.translations.locale_of(translation)} failed; remaining translations skipped"
                )
                return False, written

            written += 1
            self._publish(TranslationSavedEvent(
                entity_id=self.key,
                entity_type=self.entity_type,
                locale_id=self.translations.locale_of(translation),
                fields=fields,
            ))

        if written:
            self.logger.debug(f"Wrote {written} translation(s) for {self.entity_type} #{self.key}")
        return True, written

    def delete(self) -> bool:
        """
        Delete the entity. Its translation rows go with it through the
        foreign key cascade.

        Returns:
            True if the entity was deleted
        """
        key = self.key
        if not self.entity_repository.delete_record(self.record):
            return False

        self.translations.reset(self._load_translations)
        self.logger.info(f"Deleted {self.entity_type} #{key}")
        self._publish(EntityDeletedEvent(entity_id=key, entity_type=self.entity_type))
        return True
