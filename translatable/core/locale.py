# File: translatable/core/locale.py
"""
Locale context and locale directory contracts.

The current locale is never a process-wide global: it lives in an immutable
LocaleContext built once per request (see translatable.api.deps) and handed to
every service that reads or writes translations.
"""

import logging
from dataclasses import dataclass
from typing import Dict, Iterable, List, Mapping, Optional, Protocol, runtime_checkable

from translatable.core.exceptions import LocalesNotDefinedException

logger = logging.getLogger(__name__)

LocaleId = int


@runtime_checkable
class LocaleDirectory(Protocol):
    """Lookup of the known locales."""

    def all_locale_ids(self) -> List[LocaleId]:
        ...

    def resolve_slug(self, slug: str) -> Optional[LocaleId]:
        ...


@dataclass(frozen=True)
class LocaleContext:
    """Request-scoped current and default locale ids."""

    current_id: LocaleId
    default_id: Optional[LocaleId] = None

    def current_locale_id(self) -> LocaleId:
        return self.current_id

    def default_locale_id(self) -> LocaleId:
        return self.default_id if self.default_id is not None else self.current_id

    def with_current(self, locale_id: LocaleId) -> "LocaleContext":
        """Return a copy of this context switched to another current locale."""
        return LocaleContext(current_id=locale_id, default_id=self.default_id)


class StaticLocaleDirectory:
    """
    In-memory locale directory backed by a slug to id mapping.

    Useful when locales come from configuration instead of the languages table.
    """

    def __init__(self, locales: Mapping[str, LocaleId]):
        self._locales: Dict[str, LocaleId] = {
            slug.lower(): locale_id for slug, locale_id in locales.items()
        }

    def all_locale_ids(self) -> List[LocaleId]:
        return list(dict.fromkeys(self._locales.values()))

    def resolve_slug(self, slug: str) -> Optional[LocaleId]:
        return self._locales.get(slug.lower())


def parse_accept_language(header: Optional[str]) -> List[str]:
    """
    Parse an Accept-Language header into locale slugs, best match first.

    Region subtags also yield their primary language, so "fr-CA" produces
    "fr-ca" followed by "fr". Wildcards and q=0 entries are dropped.

    Args:
        header: Raw header value, e.g. "fr-CA,fr;q=0.9,en;q=0.8"

    Returns:
        Lower-cased slugs without duplicates
    """
    if not header:
        return []

    weighted = []
    for position, part in enumerate(header.split(",")):
        pieces = [p.strip() for p in part.split(";")]
        tag = pieces[0].lower()
        if not tag or tag == "*":
            continue
        quality = 1.0
        for param in pieces[1:]:
            if param.startswith("q="):
                try:
                    quality = float(param[2:])
                except ValueError:
                    quality = 0.0
        if quality <= 0:
            continue
        weighted.append((-quality, position, tag))

    slugs: List[str] = []
    for _, _, tag in sorted(weighted):
        candidates = [tag]
        if "-" in tag:
            candidates.append(tag.split("-", 1)[0])
        for candidate in candidates:
            if candidate not in slugs:
                slugs.append(candidate)
    return slugs


def build_locale_context(
        directory: LocaleDirectory,
        requested: Iterable[Optional[str]] = (),
        default_slug: Optional[str] = None,
) -> LocaleContext:
    """
    Build a LocaleContext from requested slugs.

    The current locale is the first requested slug the directory knows, then
    the default slug, then the first known locale.

    Raises:
        LocalesNotDefinedException: If the directory has no locales at all
    """
    known = directory.all_locale_ids()
    if not known:
        raise LocalesNotDefinedException()

    default_id = directory.resolve_slug(default_slug) if default_slug else None
    if default_id is None:
        default_id = known[0]

    current_id = None
    for slug in requested:
        if not slug:
            continue
        current_id = directory.resolve_slug(slug)
        if current_id is not None:
            break

    if current_id is None:
        current_id = default_id

    logger.debug(f"Built locale context: current={current_id}, default={default_id}")
    return LocaleContext(current_id=current_id, default_id=default_id)
