"""
Nawiri Event Bus - Subscriber Registry
=======================================
Who hears about which committed mutation.

- Event types are dotted names ('ledger.sale.added.v1') or the
  WILDCARD '*', which matches every type
- Any number of subscribers per type, one registration per handler
- In-memory, single writer, no locking
"""

import logging
from typing import Callable, Dict, List, NamedTuple

from core.events.errors import (
    DuplicateSubscriberError,
    EventBusError,
    InvalidEventTypeFormat,
)

logger = logging.getLogger("nawiri.events")

WILDCARD = "*"

Handler = Callable[..., None]


class Subscription(NamedTuple):
    handler: Handler
    subscriber: str


def _check_event_type(event_type: str) -> None:
    if not isinstance(event_type, str) or not event_type:
        raise InvalidEventTypeFormat(str(event_type or ""))
    if event_type == WILDCARD:
        return
    segments = event_type.strip().split(".")
    if len(segments) < 3 or "" in segments:
        raise InvalidEventTypeFormat(event_type)


class SubscriberRegistry:
    """Event type -> ordered subscriptions."""

    def __init__(self):
        self._by_type: Dict[str, List[Subscription]] = {}

    def register_subscriber(
        self,
        event_type: str,
        handler: Handler,
        subscriber_name: str,
    ) -> None:
        """
        Raises:
            InvalidEventTypeFormat:   event_type is malformed
            EventBusError:            handler is not callable
            DuplicateSubscriberError: handler already on this type
        """
        _check_event_type(event_type)
        if not callable(handler):
            raise EventBusError(
                f"Subscriber '{subscriber_name}' handler must be callable, "
                f"got {type(handler).__name__}."
            )

        handler_name = getattr(handler, "__qualname__", repr(handler))
        subscriptions = self._by_type.setdefault(event_type, [])
        if any(s.handler is handler for s in subscriptions):
            raise DuplicateSubscriberError(event_type, handler_name, subscriber_name)

        subscriptions.append(Subscription(handler, subscriber_name))
        logger.debug(f"{subscriber_name} subscribed to {event_type} via {handler_name}")

    def unregister_subscriber(self, event_type: str, handler: Handler) -> bool:
        """Drop one handler. False when it was never registered."""
        subscriptions = self._by_type.get(event_type, [])
        for position, subscription in enumerate(subscriptions):
            if subscription.handler is handler:
                del subscriptions[position]
                return True
        return False

    def get_subscribers(self, event_type: str) -> List[Subscription]:
        """Exact subscriptions first, then wildcard ones."""
        matched = list(self._by_type.get(event_type, ()))
        if event_type != WILDCARD:
            matched.extend(self._by_type.get(WILDCARD, ()))
        return matched

    def has_subscribers(self, event_type: str) -> bool:
        return bool(self.get_subscribers(event_type))

    def subscriber_count(self, event_type: str) -> int:
        return len(self.get_subscribers(event_type))
