"""
Nawiri Event Bus - Public API
==============================
The ledger commits first; subscribers hear about it afterwards.
"""

from core.events.dispatcher import DispatchReport, SubscriberFailure, dispatch
from core.events.errors import (
    DuplicateSubscriberError,
    EventBusError,
    InvalidEventTypeFormat,
)
from core.events.registry import WILDCARD, SubscriberRegistry, Subscription

__all__ = [
    "dispatch",
    "DispatchReport",
    "SubscriberFailure",
    "SubscriberRegistry",
    "Subscription",
    "WILDCARD",
    "EventBusError",
    "InvalidEventTypeFormat",
    "DuplicateSubscriberError",
]
