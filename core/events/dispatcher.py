"""
Nawiri Event Bus - Dispatcher
==============================
Tells subscribers about a mutation the ledger has already
committed and saved.

Handlers run in registration order (exact matches, then the
wildcard). A handler that raises is recorded in the report and
logged; the remaining handlers still run and the mutation is
never undone.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, List

from core.events.registry import SubscriberRegistry

logger = logging.getLogger("nawiri.events")


@dataclass(frozen=True)
class SubscriberFailure:
    handler: str
    subscriber: str
    error: str
    error_type: str


@dataclass
class DispatchReport:
    event_type: str
    event_id: str
    notified: int = 0
    failures: List[SubscriberFailure] = field(default_factory=list)

    @property
    def failed(self) -> int:
        return len(self.failures)

    @property
    def ok(self) -> bool:
        return not self.failures


def _handler_name(handler: Any) -> str:
    return getattr(handler, "__qualname__", repr(handler))


def dispatch(event: Any, registry: SubscriberRegistry) -> DispatchReport:
    """
    Deliver `event` (anything with event_type and event_id) to
    every matching subscriber. Never raises.
    """
    report = DispatchReport(event_type=event.event_type, event_id=str(event.event_id))

    for handler, subscriber_name in registry.get_subscribers(report.event_type):
        try:
            handler(event)
        except Exception as exc:
            report.failures.append(SubscriberFailure(
                handler=_handler_name(handler),
                subscriber=subscriber_name,
                error=str(exc),
                error_type=type(exc).__name__,
            ))
            logger.error(
                f"Subscriber '{subscriber_name}' raised on {report.event_type} "
                f"({report.event_id}): {exc}",
                exc_info=True,
            )
        else:
            report.notified += 1

    if report.notified or report.failures:
        logger.debug(
            f"{report.event_type} ({report.event_id}) delivered: "
            f"{report.notified} ok, {report.failed} failed"
        )
    return report
