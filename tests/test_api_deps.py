# tests/test_api_deps.py
import pytest
from fastapi import Depends, FastAPI
from fastapi.testclient import TestClient

from translatable.api.deps import get_db, get_event_bus, get_locale_context, translatable_service
from translatable.core.locale import LocaleContext
from translatable.services.translatable_service import TranslatableService
from tests.models import Country

app = FastAPI()
CountryService = translatable_service(Country)


@app.get("/locale")
def read_locale(context: LocaleContext = Depends(get_locale_context)):
    return {"current": context.current_locale_id(), "default": context.default_locale_id()}


@app.get("/countries/{country_id}")
def read_country(country_id: int, service: TranslatableService = Depends(CountryService)):
    return service.get_or_fail(country_id).to_dict()


@pytest.fixture()
def client(db, event_bus):
    app.dependency_overrides[get_db] = lambda: db
    app.dependency_overrides[get_event_bus] = lambda: event_bus
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


def test_locale_defaults_to_configured_default(client, languages):
    response = client.get("/locale")

    assert response.status_code == 200
    assert response.json() == {"current": languages["en"], "default": languages["en"]}


def test_locale_from_accept_language(client, languages):
    response = client.get("/locale", headers={"Accept-Language": "fr-CA,fr;q=0.9,en;q=0.8"})

    assert response.json()["current"] == languages["fr"]


def test_locale_query_parameter_wins(client, languages):
    response = client.get("/locale?locale=de", headers={"Accept-Language": "fr"})

    assert response.json()["current"] == languages["de"]


def test_unknown_locale_uses_default(client, languages):
    response = client.get("/locale?locale=xx", headers={"Accept-Language": "it"})

    assert response.json()["current"] == languages["en"]


def test_no_languages_is_service_unavailable(client):
    response = client.get("/locale")

    assert response.status_code == 503
    assert response.json()["detail"]["code"] == "CONFIG_001"


def test_service_dependency_translates_per_request(client, db, make_country):
    country = make_country("ro", en="Romania", de="Rumänien")
    db.commit()

    english = client.get(f"/countries/{country.key}")
    german = client.get(f"/countries/{country.key}", headers={"Accept-Language": "de-DE"})

    assert english.json()["name"] == "Romania"
    assert german.json()["name"] == "Rumänien"
    assert german.json()["slug"] == "ro"
