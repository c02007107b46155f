# tests/test_translated_query.py
import pytest
from sqlalchemy import select

from translatable.repositories.translated_query import TranslatedQueryBuilder
from tests.models import Country, CountryTranslation, Post


@pytest.fixture()
def countries(make_country):
    romania = make_country("ro", en="Romania", de="Rumänien")
    moldova = make_country("md", fr="Moldavie")
    make_country("xx")
    return romania, moldova


def test_fillable_policy_selects_fillable_and_translated_columns(country_service, countries):
    romania, moldova = countries

    rows = country_service.translated_rows(select(Country).order_by(Country.id))

    assert list(rows[0].keys()) == ["id", "slug", "code", "name"]
    assert rows[0] == {"id": romania.key, "slug": "ro", "code": None, "name": "Romania"}
    assert rows[1] == {"id": moldova.key, "slug": "md", "code": None, "name": None}
    assert len(rows) == 3


def test_translated_policy_selects_only_translated_columns(make_service, countries):
    service = make_service(TRANSLATED_SELECT_POLICY="translated")

    rows = service.translated_rows(select(Country).order_by(Country.id), locale="de")

    assert [list(row.keys()) for row in rows] == [["id", "name"]] * 3
    assert [row["name"] for row in rows] == ["Rumänien", None, None]


def test_explicit_columns_are_kept(country_service, countries):
    tt = country_service.query_builder.translations
    stmt = select(Country.slug, tt.name).order_by(Country.slug)

    rows = country_service.translated_rows(stmt, locale="fr")

    assert rows == [
        {"slug": "md", "name": "Moldavie"},
        {"slug": "ro", "name": None},
        {"slug": "xx", "name": None},
    ]


def test_translated_query_joins_current_locale(country_service, countries):
    sql = str(country_service.translated_query())

    assert "LEFT OUTER JOIN country_translations AS tt" in sql
    assert "tt.language_id" in sql


def test_translated_query_does_not_touch_records(db, country_service, countries):
    country_service.translated_rows()

    assert not db.dirty
    assert not db.new


def test_translated_in(db, country_service, countries):
    romania, moldova = countries

    german = db.execute(country_service.translated_in("de")).scalars().all()
    french = db.execute(country_service.translated_in("fr")).scalars().all()
    english = db.execute(country_service.translated_in()).scalars().all()

    assert [c.slug for c in german] == ["ro"]
    assert [c.slug for c in french] == ["md"]
    assert [c.slug for c in english] == ["ro"]


def test_with_translations(db, country_service, countries):
    stmt = country_service.with_translations(select(Country).order_by(Country.slug))

    assert [c.slug for c in db.execute(stmt).scalars().all()] == ["md", "ro"]


def test_custom_names_and_alias(make_service, db):
    service = make_service(model=Post, TRANSLATED_JOIN_ALIAS="pc")
    post = service.wrap(Post(author="ann"))
    post.translate_or_new("en").title = "Hello"
    assert post.save()

    sql = str(service.translated_query())
    rows = service.translated_rows()

    assert "post_contents AS pc" in sql
    assert "pc.post_ref" in sql
    assert "pc.locale_id" in sql
    assert rows == [{"id": post.key, "title": "Hello", "body": None}]


def test_unknown_policy_rejected():
    with pytest.raises(ValueError):
        TranslatedQueryBuilder(Country, CountryTranslation, "country_id", "language_id", policy="everything")
