"""
Events module.

Delivers structured outcome events (trials, sessions, payments) to an
analytics collector. Delivery is fire-and-forget and never fails the
request that produced the event.

Public API:
- IEventNotifier: Interface for emitting events
- EventName: Names of the events the backend emits
- HttpEventNotifier / LoggingEventNotifier: Implementations
"""

from .interfaces import IEventNotifier
from .models import Event, EventName
from .service import HttpEventNotifier, LoggingEventNotifier, create_event_notifier

__all__ = [
    # Interface
    "IEventNotifier",
    # Models
    "Event",
    "EventName",
    # Implementations
    "HttpEventNotifier",
    "LoggingEventNotifier",
    "create_event_notifier",
]
