# tests/test_core.py
import logging

import pytest

from translatable.core.events import EntitySavedEvent, EventBus, TranslationSavedEvent
from translatable.core.exceptions import (
    ConfigurationException,
    DatabaseException,
    LocalesNotDefinedException,
    MassAssignmentException,
    TranslatableException,
    TranslationModelNotFoundException,
)
from translatable.core.logging_config import configure_logging


# --- Events ---

def test_event_bus_publishes_to_subscribers():
    bus = EventBus()
    received = []
    bus.subscribe(EntitySavedEvent, received.append)
    bus.subscribe("TranslationSavedEvent", received.append)

    saved = EntitySavedEvent(entity_id=1, entity_type="Country")
    translated = TranslationSavedEvent(entity_id=1, entity_type="Country", locale_id=2, fields=["name"])
    bus.publish(saved)
    bus.publish(translated)

    assert received == [saved, translated]


def test_event_bus_unsubscribe():
    bus = EventBus()
    received = []
    bus.subscribe(EntitySavedEvent, received.append)

    assert bus.unsubscribe(EntitySavedEvent, received.append)
    assert not bus.unsubscribe(EntitySavedEvent, received.append)
    bus.publish(EntitySavedEvent(entity_id=1))

    assert received == []


def test_event_bus_handler_errors_are_logged(caplog):
    bus = EventBus()
    received = []

    def failing_handler(event):
        raise RuntimeError("handler failed")

    bus.subscribe(EntitySavedEvent, failing_handler)
    bus.subscribe(EntitySavedEvent, received.append)

    with caplog.at_level(logging.ERROR, logger="translatable.core.events"):
        bus.publish(EntitySavedEvent(entity_id=1))

    assert len(received) == 1
    assert "failing_handler" in caplog.text


def test_event_to_dict():
    data = TranslationSavedEvent(entity_id=1, entity_type="Country", locale_id=2, fields=["name"]).to_dict()

    assert data["event_type"] == "TranslationSavedEvent"
    assert data["fields"] == ["name"]
    assert isinstance(data["timestamp"], str)


# --- Exceptions ---

def test_exception_hierarchy():
    assert issubclass(LocalesNotDefinedException, ConfigurationException)
    assert issubclass(TranslationModelNotFoundException, ConfigurationException)
    assert issubclass(MassAssignmentException, TranslatableException)
    assert issubclass(DatabaseException, TranslatableException)


def test_exception_to_dict():
    data = MassAssignmentException(1).to_dict()

    assert data["code"] == "MASS_ASSIGNMENT_001"
    assert data["details"] == {"key": 1}
    assert "1" in data["message"]


@pytest.mark.parametrize(
    "exc, code",
    [
        (LocalesNotDefinedException(), "CONFIG_001"),
        (TranslationModelNotFoundException("Country", "CountryTranslation"), "CONFIG_002"),
        (DatabaseException("boom"), "DATABASE_001"),
        (TranslatableException("boom"), "GENERIC_ERROR"),
    ],
)
def test_exception_codes(exc, code):
    assert exc.code == code


# --- Logging ---

def test_configure_logging_sets_package_level():
    logger = configure_logging("debug")
    try:
        assert logger.name == "translatable"
        assert logger.level == logging.DEBUG
    finally:
        logger.setLevel(logging.NOTSET)
