"""
Nawiri Event Bus - Errors
==========================
Raised while wiring subscribers. Dispatch itself never raises.
"""


class EventBusError(Exception):
    """Base error for subscriber wiring."""


class InvalidEventTypeFormat(EventBusError):
    """Event type is neither the wildcard nor dotted engine.entity.action."""

    def __init__(self, event_type: str):
        self.event_type = event_type
        super().__init__(
            f"Cannot subscribe to '{event_type}': expected '*' or a dotted "
            f"name like 'ledger.sale.added.v1'."
        )


class DuplicateSubscriberError(EventBusError):
    def __init__(self, event_type: str, handler_name: str, subscriber_name: str = ""):
        self.event_type = event_type
        self.handler_name = handler_name
        self.subscriber_name = subscriber_name
        owner = f" (subscriber '{subscriber_name}')" if subscriber_name else ""
        super().__init__(
            f"{handler_name}{owner} is already subscribed to '{event_type}'."
        )
