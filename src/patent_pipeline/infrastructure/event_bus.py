"""Event bus infrastructure for the patent pipeline.

Provides a synchronous pub-sub bus and an in-memory event store for replay
and progress displays.  The bus catches and logs handler errors so that a
failing subscriber never breaks a pipeline stage.
"""

from __future__ import annotations

import logging
import threading
from collections import defaultdict
from collections.abc import Callable, Sequence

from patent_pipeline.domain.events import DomainEvent

logger = logging.getLogger(__name__)

Handler = Callable[[DomainEvent], None]


# ===================================================================== #
#  Event Bus                                                             #
# ===================================================================== #

class EventBus:
    """Thread-safe synchronous pub-sub for domain events.

    A handler subscribed to an event class also receives its subclasses, so
    subscribing to ``DomainEvent`` is equivalent to :meth:`subscribe_all`.
    Handlers run in registration order; one that raises is logged and
    skipped.

    Usage::

        bus = EventBus()
        bus.subscribe(StageFailed, on_failure)
        pipeline = PatentPipeline(sources, event_bus=bus)
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._handlers: dict[type[DomainEvent], list[Handler]] = defaultdict(list)
        self._global_handlers: list[Handler] = []

    # -- subscription -------------------------------------------------------

    def subscribe(self, event_type: type[DomainEvent], handler: Handler) -> None:
        """Register *handler* for *event_type* and its subclasses."""
        with self._lock:
            self._handlers[event_type].append(handler)

    def subscribe_all(self, handler: Handler) -> None:
        """Register *handler* to receive **every** published event."""
        with self._lock:
            self._global_handlers.append(handler)

    def unsubscribe(self, event_type: type[DomainEvent], handler: Handler) -> bool:
        """Remove *handler* from *event_type*. Returns ``True`` if found."""
        with self._lock:
            handlers = self._handlers.get(event_type, [])
            if handler in handlers:
                handlers.remove(handler)
                return True
            return False

    # -- publishing ---------------------------------------------------------

    def _matching(self, event: DomainEvent) -> list[Handler]:
        with self._lock:
            matched = list(self._global_handlers)
            for event_type, handlers in self._handlers.items():
                if isinstance(event, event_type):
                    matched.extend(handlers)
        return matched

    def publish(self, event: DomainEvent) -> None:
        """Deliver *event* to global handlers first, then typed handlers."""
        for handler in self._matching(event):
            try:
                handler(event)
            except Exception:
                logger.exception(
                    "Error in handler %r for %s", handler, type(event).__name__
                )

    def publish_many(self, events: Sequence[DomainEvent]) -> None:
        for event in events:
            self.publish(event)

    def handler_count(self) -> int:
        with self._lock:
            return len(self._global_handlers) + sum(
                len(hs) for hs in self._handlers.values()
            )

    def clear(self) -> None:
        with self._lock:
            self._handlers.clear()
            self._global_handlers.clear()


# ===================================================================== #
#  Event Store                                                           #
# ===================================================================== #

class EventStore:
    """Append-only record of published events.

    Wire it to a bus to keep a replayable trail of a run::

        store = EventStore()
        bus.subscribe_all(store.append)
    """

    def __init__(self, max_size: int = 0) -> None:
        self._events: list[DomainEvent] = []
        self._max_size = max_size
        self._lock = threading.Lock()

    def append(self, event: DomainEvent) -> None:
        with self._lock:
            self._events.append(event)
            if self._max_size > 0 and len(self._events) > self._max_size:
                self._events = self._events[-self._max_size:]

    def query(
        self,
        event_type: type[DomainEvent] | None = None,
        run_id: str | None = None,
    ) -> list[DomainEvent]:
        """Return stored events, optionally filtered by type and run id."""
        with self._lock:
            result = list(self._events)
        if event_type is not None:
            result = [e for e in result if isinstance(e, event_type)]
        if run_id is not None:
            result = [e for e in result if getattr(e, "run_id", None) == run_id]
        return result

    @property
    def latest(self) -> DomainEvent | None:
        with self._lock:
            return self._events[-1] if self._events else None

    def __len__(self) -> int:
        with self._lock:
            return len(self._events)

    def clear(self) -> None:
        with self._lock:
            self._events.clear()
