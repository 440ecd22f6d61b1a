"""
Message Bus

Routes committed domain events to their handlers. Handlers are
registered by the booking and wallet apps in AppConfig.ready() and
typically enqueue Celery notification tasks.
"""

from typing import Callable, Dict, Iterable, List, Type
import logging

from shared.domain.base import DomainEvent

logger = logging.getLogger(__name__)

EventHandler = Callable[[DomainEvent], None]


class MessageBus:
    """
    In-process event dispatcher

    One event type may have several handlers; each runs independently.
    """

    def __init__(self):
        self._handlers: Dict[Type[DomainEvent], List[EventHandler]] = {}

    def register_event_handler(self, event_type: Type[DomainEvent], handler: EventHandler):
        """Subscribe ``handler`` to ``event_type``; subscribing twice is a no-op."""
        handlers = self._handlers.setdefault(event_type, [])
        if handler not in handlers:
            handlers.append(handler)
            logger.debug(f"Subscribed {handler.__name__} to {event_type.__name__}")

    def handlers_for(self, event_type: Type[DomainEvent]) -> List[EventHandler]:
        return list(self._handlers.get(event_type, []))

    def publish_events(self, events: Iterable[DomainEvent]):
        """
        Deliver each event to its handlers

        A failing handler is logged and skipped; the writes behind the
        event are already committed, so nothing is re-raised.
        """
        for event in events:
            name = type(event).__name__
            handlers = self.handlers_for(type(event))
            if not handlers:
                logger.debug(f"No handlers for {name}")
                continue

            logger.info(f"Dispatching {name} ({event.event_id}) to {len(handlers)} handler(s)")
            for handler in handlers:
                try:
                    handler(event)
                except Exception as exc:
                    logger.error(f"Handler {handler.__name__} failed on {name}: {exc}", exc_info=True)


message_bus = MessageBus()
