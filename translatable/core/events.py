# File: translatable/core/events.py

from typing import Dict, Any, Callable, List, Optional, Type, Union
from collections import defaultdict
from dataclasses import dataclass, field, asdict
from datetime import datetime
import uuid
import logging

logger = logging.getLogger(__name__)

EventHandler = Callable[["DomainEvent"], None]


# --- Base DomainEvent ---
@dataclass(eq=False)
class DomainEvent:
    event_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    timestamp: datetime = field(default_factory=datetime.now)

    def to_dict(self) -> Dict[str, Any]:
        result = asdict(self)
        result["timestamp"] = self.timestamp.isoformat()
        result["event_type"] = self.__class__.__name__
        return result


# --- Translatable Entity Event Definitions ---
@dataclass(eq=False)
class EntitySavedEvent(DomainEvent):
    """
    Fired after an entity save succeeds.

    translations_only is set when the entity itself had nothing to write and
    only its translations were flushed.
    """
    entity_id: Any = None
    entity_type: str = ""
    translations_only: bool = False


@dataclass(eq=False)
class EntityDeletedEvent(DomainEvent):
    entity_id: Any = None
    entity_type: str = ""


@dataclass(eq=False)
class TranslationSavedEvent(DomainEvent):
    entity_id: Any = None
    entity_type: str = ""
    locale_id: Optional[int] = None
    fields: List[str] = field(default_factory=list)


class EventBus:
    """
    Synchronous event bus for domain events.

    Handlers subscribe by event class (or event class name). Handler errors
    are caught and logged so a faulty subscriber never breaks a save.

    Usage:
        global_event_bus.subscribe(EntitySavedEvent, handle_saved)
        global_event_bus.publish(EntitySavedEvent(entity_id=1, entity_type="Country"))
    """

    def __init__(self):
        self.subscribers: Dict[str, List[EventHandler]] = defaultdict(list)

    @staticmethod
    def _event_type_name(event_type: Union[str, Type[DomainEvent]]) -> str:
        return event_type.__name__ if isinstance(event_type, type) else str(event_type)

    def publish(self, event: DomainEvent) -> None:
        """
        Publish an event to all registered handlers.

        Args:
            event: The domain event to publish
        """
        event_type = type(event).__name__
        logger.debug(f"Publishing event {event_type} ID {event.event_id}")
        for handler in list(self.subscribers.get(event_type, [])):
            try:
                handler(event)
            except Exception as e:
                logger.error(
                    f"Error in handler {getattr(handler, '__name__', repr(handler))} "
                    f"for {event_type} ID {event.event_id}: {e}",
                    exc_info=True,
                )

    def subscribe(self, event_type: Union[str, Type[DomainEvent]], handler: EventHandler) -> None:
        """
        Subscribe to an event type.

        Args:
            event_type: Event class or event type name string
            handler: Callable to handle the event
        """
        event_type_name = self._event_type_name(event_type)
        self.subscribers[event_type_name].append(handler)
        logger.debug(f"Subscribed handler {getattr(handler, '__name__', repr(handler))} to {event_type_name}")

    def unsubscribe(self, event_type: Union[str, Type[DomainEvent]], handler: EventHandler) -> bool:
        """
        Unsubscribe from an event type.

        Returns:
            True if handler was found and removed, False otherwise
        """
        event_type_name = self._event_type_name(event_type)
        if event_type_name in self.subscribers:
            try:
                self.subscribers[event_type_name].remove(handler)
                logger.debug(
                    f"Unsubscribed handler {getattr(handler, '__name__', repr(handler))} from {event_type_name}")
                return True
            except ValueError:
                return False
        return False


# Global event bus instance
global_event_bus = EventBus()
