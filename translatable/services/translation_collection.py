# File: translatable/services/translation_collection.py

import logging
from contextlib import contextmanager
from enum import Enum
from typing import Any, Callable, Generic, Iterator, List, Optional, Type, TypeVar

logger = logging.getLogger(__name__)

TranslationT = TypeVar("TranslationT")


class CacheState(str, Enum):
    UNLOADED = "unloaded"
    LOADED = "loaded"


class TranslationCollection(Generic[TranslationT]):
    """
    In-memory translations of one entity, at most one per locale.

    The collection is loaded at most once through its loader and mutated in
    place afterwards. New translations are only ever appended here; writing
    them to storage is the entity's job.

    While a bulk fill is in progress the collection refuses to reload, so
    the translations touched by the fill are never replaced under it.
    """

    def __init__(
            self,
            translation_model: Type[TranslationT],
            locale_key: str,
            loader: Optional[Callable[[], List[TranslationT]]] = None,
    ):
        """
        Args:
            translation_model: Class instantiated for new translations
            locale_key: Attribute holding the locale id on translations
            loader: Fetches the stored translations; None for an entity that
                has never been stored, which starts out loaded and empty
        """
        self.translation_model = translation_model
        self.locale_key = locale_key
        self._loader = loader
        self._items: List[TranslationT] = []
        self._filling = False
        self.state = CacheState.UNLOADED if loader is not None else CacheState.LOADED

    @property
    def is_loaded(self) -> bool:
        return self.state is CacheState.LOADED

    @property
    def is_filling(self) -> bool:
        return self._filling

    def _ensure_loaded(self) -> None:
        if self.state is CacheState.LOADED:
            return
        self._items = list(self._loader())
        self.state = CacheState.LOADED
        logger.debug(f"Loaded {len(self._items)} {self.translation_model.__name__} rows")

    def items(self) -> List[TranslationT]:
        self._ensure_loaded()
        return list(self._items)

    def __iter__(self) -> Iterator[TranslationT]:
        return iter(self.items())

    def __len__(self) -> int:
        self._ensure_loaded()
        return len(self._items)

    def locale_of(self, translation: TranslationT) -> Any:
        return getattr(translation, self.locale_key)

    def locales(self) -> List[Any]:
        return [self.locale_of(t) for t in self.items()]

    def find_by_locale(self, locale: Any) -> Optional[TranslationT]:
        self._ensure_loaded()
        for translation in self._items:
            if self.locale_of(translation) == locale:
                return translation
        return None

    def add(self, translation: TranslationT) -> TranslationT:
        """
        Attach a translation.

        Raises:
            ValueError: If the collection already holds one for that locale
        """
        locale = self.locale_of(translation)
        existing = self.find_by_locale(locale)
        if existing is not None and existing is not translation:
            raise ValueError(f"A translation for locale {locale} is already attached")
        if existing is None:
            self._items.append(translation)
        return translation

    def get_or_create(self, locale: Any) -> TranslationT:
        """
        Return the translation for a locale, creating it in memory on a miss.

        Args:
            locale: Locale id

        Returns:
            The existing or newly attached translation
        """
        translation = self.find_by_locale(locale)
        if translation is None:
            translation = self.translation_model()
            setattr(translation, self.locale_key, locale)
            self._items.append(translation)
            logger.debug(f"Created {self.translation_model.__name__} for locale {locale}")
        return translation

    @contextmanager
    def filling(self) -> Iterator["TranslationCollection[TranslationT]"]:
        """Mark a bulk fill in progress for the duration of the block."""
        previous = self._filling
        self._filling = True
        try:
            yield self
        finally:
            self._filling = previous

    def refresh(self) -> None:
        """
        Drop the cached translations so the next access reloads them.

        Raises:
            RuntimeError: During a bulk fill
        """
        if self._filling:
            raise RuntimeError("Cannot reload translations while a fill is in progress")
        if self._loader is None:
            self._items = []
            return
        self._items = []
        self.state = CacheState.UNLOADED

    def reset(self, loader: Optional[Callable[[], List[TranslationT]]] = None) -> None:
        """Replace the loader and forget every attached translation."""
        if self._filling:
            raise RuntimeError("Cannot reset translations while a fill is in progress")
        self._loader = loader
        self._items = []
        self.state = CacheState.UNLOADED if loader is not None else CacheState.LOADED
