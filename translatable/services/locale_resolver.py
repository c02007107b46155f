# File: translatable/services/locale_resolver.py

import logging
from typing import Any, List, Optional, Sequence, Union

from translatable.core.exceptions import LocalesNotDefinedException
from translatable.core.locale import LocaleContext, LocaleDirectory, LocaleId

logger = logging.getLogger(__name__)


class LocaleResolver:
    """
    Turns whatever a caller passes as a locale into a locale id.

    Numeric ids pass through unchanged, slugs are looked up in the locale
    directory and anything missing falls back to the current locale of the
    request context.
    """

    def __init__(self, context: LocaleContext, directory: LocaleDirectory):
        self.context = context
        self.directory = directory

    def current_locale_id(self) -> LocaleId:
        return self.context.current_locale_id()

    def default_locale_id(self) -> LocaleId:
        return self.context.default_locale_id()

    def resolve(self, locale: Optional[Union[int, str]] = None) -> LocaleId:
        """
        Resolve an explicit locale, or the current locale when none is given.

        Args:
            locale: Locale id, digit string, slug or None

        Returns:
            The locale id
        """
        if locale is None or locale == "":
            return self.current_locale_id()

        if isinstance(locale, bool):
            raise TypeError(f"Invalid locale {locale!r}")

        if isinstance(locale, int):
            return locale

        if isinstance(locale, str):
            if locale.isdigit():
                return int(locale)

            locale_id = self.directory.resolve_slug(locale)
            if locale_id is None:
                logger.debug(f"Unknown locale slug '{locale}', using current locale")
                return self.current_locale_id()
            return locale_id

        raise TypeError(f"Invalid locale {locale!r}")

    def all_locale_ids(self) -> List[LocaleId]:
        """
        All known locale ids.

        Raises:
            LocalesNotDefinedException: If the directory has no locales
        """
        locales = self.directory.all_locale_ids()
        if not locales:
            raise LocalesNotDefinedException()
        return list(locales)

    def is_locale_key(self, key: Any, locales: Optional[Sequence[LocaleId]] = None) -> bool:
        """
        Whether a mapping key names a known locale.

        Only ints and digit strings are considered; slugs are not, so a
        locale slug can never shadow an attribute name. Pass `locales` to
        check many keys against one directory lookup.

        Raises:
            LocalesNotDefinedException: If the directory has no locales
        """
        if locales is None:
            locales = self.all_locale_ids()

        if isinstance(key, bool):
            return False
        if isinstance(key, str) and key.isdigit():
            key = int(key)
        return isinstance(key, int) and key in locales
