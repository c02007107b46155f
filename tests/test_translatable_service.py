# tests/test_translatable_service.py
import pytest

from translatable.core.exceptions import EntityNotFoundException, TranslationModelNotFoundException
from translatable.core.locale import LocaleContext
from translatable.repositories.language_repository import LanguageRepository
from translatable.services.translatable_entity import TranslatableEntity
from translatable.services.translatable_service import TranslatableService
from tests.models import Continent, Country, CountryTranslation, Post, PostContent


def test_service_resolves_conventional_names(country_service):
    assert country_service.translation_model is CountryTranslation
    assert country_service.foreign_key == "country_id"
    assert country_service.locale_key == "language_id"
    assert isinstance(country_service.resolver.directory, LanguageRepository)


def test_service_resolves_custom_names(make_service):
    service = make_service(model=Post)

    assert service.translation_model is PostContent
    assert service.foreign_key == "post_ref"
    assert service.locale_key == "locale_id"


def test_custom_suffix(db, test_settings):
    settings = test_settings.model_copy(update={"TRANSLATION_SUFFIX": "Content"})

    with pytest.raises(TranslationModelNotFoundException) as exc_info:
        TranslatableService(db, Country, LocaleContext(current_id=1), settings=settings)

    assert exc_info.value.details["model_name"] == "CountryContent"


def test_missing_translation_model_raises(db, test_settings):
    with pytest.raises(TranslationModelNotFoundException) as exc_info:
        TranslatableService(db, Continent, LocaleContext(current_id=1), settings=test_settings)

    assert exc_info.value.details == {"entity_type": "Continent", "model_name": "ContinentTranslation"}


def test_wrap_rejects_other_models(country_service):
    with pytest.raises(TypeError):
        country_service.wrap(Post())


def test_get(country_service, stored_country):
    entity = country_service.get(stored_country.key)

    assert isinstance(entity, TranslatableEntity)
    assert entity.record is stored_country.record
    assert country_service.get(999) is None


def test_get_or_fail(country_service, languages):
    with pytest.raises(EntityNotFoundException) as exc_info:
        country_service.get_or_fail(999)

    assert exc_info.value.code == "DOMAIN_001"


def test_list_wraps_records(country_service, make_country):
    make_country("ro", en="Romania")
    make_country("md", en="Moldova")

    entities = country_service.list(slug="md")

    assert [e.get_attribute("name") for e in entities] == ["Moldova"]
    assert len(country_service.list()) == 2


def test_transaction_commits(db, country_service, languages):
    with country_service.transaction():
        country = country_service.new({"slug": "ro", languages["en"]: {"name": "Romania"}})
        assert country.save()

    db.expunge_all()
    assert country_service.get_or_fail(country.key).get_attribute("name") == "Romania"


def test_transaction_rolls_back_on_error(db, country_service, languages):
    db.commit()

    with pytest.raises(RuntimeError):
        with country_service.transaction():
            country = country_service.new({"slug": "ro", languages["en"]: {"name": "Romania"}})
            assert country.save()
            raise RuntimeError("abort")

    assert country_service.list() == []
    assert db.query(CountryTranslation).count() == 0
