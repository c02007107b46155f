# File: translatable/repositories/translated_query.py

"""
Translated query scopes.

List queries that need translated columns would otherwise load every
entity's translation collection one by one. The scopes here fold the
translation table into a single statement instead:

    builder = TranslatedQueryBuilder(Country, CountryTranslation, "country_id", "language_id")

    # all fillable columns plus every translated column, current locale
    stmt = builder.scope_translated(select(Country), locale_id)

    # explicit columns are kept as given; only the join is added
    tt = builder.translations
    stmt = builder.scope_translated(select(Country.id, tt.name), locale_id)

The scopes only build SELECT statements; they never touch records.
"""

import logging
from typing import Any, List, Type

from sqlalchemy import Select, and_, exists
from sqlalchemy.orm import aliased

logger = logging.getLogger(__name__)

SELECT_POLICIES = ("fillable", "translated")


class TranslatedQueryBuilder:
    """
    Builds translated scopes for one entity model.

    Attributes:
        model: The translatable entity model
        translation_model: The translation model
        translations: Aliased translation model used in joins (default alias "tt")
        policy: Columns auto-selected when a query selects the bare entity.
            "fillable": primary key, fillable non-hidden entity columns and
            all translated columns. "translated": primary key and all
            translated columns.
    """

    def __init__(
            self,
            model: Type[Any],
            translation_model: Type[Any],
            foreign_key: str,
            locale_key: str,
            policy: str = "fillable",
            alias: str = "tt",
    ):
        if policy not in SELECT_POLICIES:
            raise ValueError(f"Unknown translated select policy '{policy}', expected one of {SELECT_POLICIES}")

        self.model = model
        self.translation_model = translation_model
        self.foreign_key = foreign_key
        self.locale_key = locale_key
        self.policy = policy
        self.translations = aliased(translation_model, name=alias)

    @property
    def _primary_key(self):
        return getattr(self.model, self.model.primary_key_name())

    def _selects_bare_entity(self, stmt: Select) -> bool:
        descriptions = stmt.column_descriptions
        return len(descriptions) == 1 and descriptions[0].get("expr") is self.model

    def _projection(self) -> List[Any]:
        pk_name = self.model.primary_key_name()
        translated = self.model.translated_attributes()
        columns = [self._primary_key.label(pk_name)]

        if self.policy == "fillable":
            table_columns = self.model.__table__.columns
            hidden = set(self.model.__hidden__)
            for name in self.model.__fillable__:
                if name == pk_name or name in hidden or name in translated:
                    continue
                if name in table_columns:
                    columns.append(getattr(self.model, name).label(name))

        columns.extend(getattr(self.translations, attr).label(attr) for attr in translated)
        return columns

    def scope_translated(self, stmt: Select, locale_id: int) -> Select:
        """
        Left join the translations of one locale onto a query.

        If the query selects nothing but the entity itself, its columns are
        replaced according to the select policy.

        Args:
            stmt: SELECT against the entity model
            locale_id: Locale whose translations are joined

        Returns:
            The scoped statement
        """
        tt = self.translations
        onclause = and_(
            self._primary_key == getattr(tt, self.foreign_key),
            getattr(tt, self.locale_key) == locale_id,
        )

        if self._selects_bare_entity(stmt):
            stmt = stmt.with_only_columns(*self._projection())
            logger.debug(f"Auto-selected translated columns for {self.model.__name__} ({self.policy})")

        return stmt.join_from(self.model, tt, onclause, isouter=True)

    def scope_translated_in(self, stmt: Select, locale_id: int) -> Select:
        """Keep only entities that have a translation in the given locale."""
        translation = self.translation_model
        return stmt.where(
            exists().where(
                getattr(translation, self.foreign_key) == self._primary_key,
                getattr(translation, self.locale_key) == locale_id,
            )
        )

    def scope_has_translations(self, stmt: Select) -> Select:
        """Keep only entities that have at least one translation."""
        translation = self.translation_model
        return stmt.where(
            exists().where(getattr(translation, self.foreign_key) == self._primary_key)
        )
