"""In-memory event bus implementation."""

from __future__ import annotations

import threading
from typing import Dict, List, Type

from fulfillment.shared.domain.bus import IEventBus, IEventHandler
from fulfillment.shared.domain.events import DomainEvent


class InMemoryEventBus(IEventBus):
    """Simple in-process event bus.

    Handlers run synchronously in the publishing thread.
    """

    def __init__(self) -> None:
        self._handlers: Dict[Type[DomainEvent], List[IEventHandler]] = {}
        self._lock = threading.Lock()

    def subscribe(self, event_class: Type[DomainEvent], handler: IEventHandler) -> None:
        with self._lock:
            handlers = self._handlers.setdefault(event_class, [])
            if handler not in handlers:
                handlers.append(handler)

    def publish(self, event: DomainEvent) -> None:
        with self._lock:
            handlers = list(self._handlers.get(type(event), []))
        for handler in handlers:
            handler.handle(event)
