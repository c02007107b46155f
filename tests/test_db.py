# tests/test_db.py
import pytest
from sqlalchemy import text

from translatable.core.exceptions import DatabaseException
from translatable.db.init_db import seed_languages
from translatable.db.models.base import ModelRegistry, snake_case
from translatable.db.models.language import Language
from translatable.db.session import session_scope, verify_db_connection
from translatable.repositories.language_repository import LanguageRepository
from tests.conftest import engine
from tests.models import Continent, Country, CountryTranslation, Post


# --- Session ---

def test_verify_db_connection():
    assert verify_db_connection(engine)


def test_sqlite_foreign_keys_enabled(db):
    assert db.execute(text("PRAGMA foreign_keys")).scalar() == 1


def test_session_scope_commits(db):
    with session_scope(db) as session:
        session.add(Language(slug="it", title="IT"))

    assert LanguageRepository(db).find_by_slug("it") is not None


def test_session_scope_rolls_back(db):
    with pytest.raises(RuntimeError):
        with session_scope(db) as session:
            session.add(Language(slug="it", title="IT"))
            session.flush()
            raise RuntimeError("abort")

    assert LanguageRepository(db).find_by_slug("it") is None


# --- Seeding and the languages directory ---

def test_seed_languages(db):
    created = seed_languages(db, ["en", "DE", "fr"], "en")

    assert [language.slug for language in created] == ["en", "de", "fr"]
    assert [language.title for language in created] == ["EN", "DE", "FR"]
    assert seed_languages(db, ["en", "de", "es"], "en")[0].slug == "es"
    assert seed_languages(db, ["en"]) == []


def test_seed_languages_uses_settings(db, test_settings):
    created = seed_languages(db)

    assert [language.slug for language in created] == test_settings.SUPPORTED_LOCALES


def test_language_repository(db, languages):
    repository = LanguageRepository(db)

    assert repository.all_locale_ids() == [languages["en"], languages["de"], languages["fr"]]
    assert repository.resolve_slug("DE") == languages["de"]
    assert repository.resolve_slug("xx") is None
    assert repository.get_default().slug == "en"


def test_inactive_languages_are_not_locales(db, languages):
    german = db.get(Language, languages["de"])
    german.is_active = False
    db.flush()

    repository = LanguageRepository(db)

    assert repository.all_locale_ids() == [languages["en"], languages["fr"]]
    assert repository.resolve_slug("de") is None


# --- Models ---

def test_models_registered():
    models = ModelRegistry.get_all_models()

    for model in (Language, Country, CountryTranslation, Post, Continent):
        assert models[model.__name__] is model


def test_snake_case():
    assert snake_case("Country") == "country"
    assert snake_case("BlogPost") == "blog_post"


def test_translation_naming():
    assert Country.translation_model_name("Translation") == "CountryTranslation"
    assert Country.translation_model_name("Content") == "CountryContent"
    assert Post.translation_model_name("Translation") == "PostContent"
    assert Country.translation_foreign_key() == "country_id"
    assert Post.translation_foreign_key() == "post_ref"
    assert Country.locale_key("language_id") == "language_id"
    assert Post.locale_key("language_id") == "locale_id"


def test_mass_assignment_rules():
    assert Country.is_fillable("slug")
    assert not Country.is_fillable("secret")
    assert not Country.is_fillable(1)
    assert not Country.totally_guarded()
    assert Post.totally_guarded()
    assert not Post.is_fillable("author")


def test_to_dict_skips_hidden_columns():
    data = Country(slug="ro", secret="s").to_dict()

    assert data == {"id": None, "slug": "ro", "code": None}


# --- Repository writes ---

def test_persist_failed_update_rolls_back_only_the_record(db, languages):
    repository = LanguageRepository(db)
    german = db.get(Language, languages["de"])
    french = db.get(Language, languages["fr"])
    french.title = "Français"
    german.slug = "en"

    assert repository.persist(german) is False

    assert german.slug == "de"
    assert repository.persist(french)
    db.commit()
    assert db.get(Language, languages["fr"]).title == "Français"


def test_persist_raises_when_other_pending_work_fails(db, languages):
    repository = LanguageRepository(db)
    db.add(Language(slug="en", title="EN"))

    with pytest.raises(DatabaseException):
        repository.persist(Language(slug="it", title="IT"))

    db.rollback()
    assert repository.find_by_slug("it") is None
