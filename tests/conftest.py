# tests/conftest.py
import pytest
from sqlalchemy.orm import sessionmaker

from translatable.core.config import Settings
from translatable.core.events import EntityDeletedEvent, EntitySavedEvent, EventBus, TranslationSavedEvent
from translatable.core.locale import LocaleContext
from translatable.db.init_db import init_db, seed_languages
from translatable.db.models.base import Base
from translatable.db.session import create_engine_for
from translatable.services.translatable_service import TranslatableService
from tests.models import Country

TEST_DATABASE_URL = "sqlite://"

engine = create_engine_for(TEST_DATABASE_URL)
TestingSessionLocal = sessionmaker(autoflush=False, bind=engine)


@pytest.fixture()
def db():
    init_db(engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture()
def languages(db):
    """Seeded locales as a slug -> id mapping (en=1, de=2, fr=3)."""
    created = seed_languages(db, ["en", "de", "fr"], "en")
    return {language.slug: language.id for language in created}


@pytest.fixture()
def test_settings():
    return Settings()


@pytest.fixture()
def event_bus():
    return EventBus()


@pytest.fixture()
def events(event_bus):
    """Every event published on the test bus, in order."""
    received = []
    for event_type in (EntitySavedEvent, EntityDeletedEvent, TranslationSavedEvent):
        event_bus.subscribe(event_type, received.append)
    return received


@pytest.fixture()
def locale_context(languages):
    return LocaleContext(current_id=languages["en"], default_id=languages["en"])


@pytest.fixture()
def country_service(db, locale_context, test_settings, event_bus):
    return TranslatableService(db, Country, locale_context, settings=test_settings, event_bus=event_bus)


@pytest.fixture()
def make_service(db, languages, event_bus):
    """Build a service for another model, locale or settings."""

    def _make(model=Country, locale="en", default="en", **overrides):
        context = LocaleContext(current_id=languages[locale], default_id=languages[default])
        return TranslatableService(db, model, context, settings=Settings(**overrides), event_bus=event_bus)

    return _make


@pytest.fixture()
def make_country(country_service):
    """Create and save a country with names given per locale slug."""

    def _make(slug, **names):
        country = country_service.new({"slug": slug})
        for locale, name in names.items():
            country.translate_or_new(locale).name = name
        assert country.save()
        return country

    return _make


@pytest.fixture()
def stored_country(db, country_service, make_country):
    """A committed country (en + de names), freshly loaded."""
    country = make_country("ro", en="Romania", de="Rumänien")
    db.commit()
    key = country.key
    db.expunge_all()
    return country_service.get(key)
