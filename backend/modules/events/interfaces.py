"""
Events module interface.

Services depend on IEventNotifier so that tests can record events and
deployments without a collector can just log them.
"""

from typing import Any, Protocol, runtime_checkable

from .models import EventName


@runtime_checkable
class IEventNotifier(Protocol):
    """Fire-and-forget sink for outcome events."""

    def emit(self, event_name: EventName, payload: dict[str, Any]) -> None:
        """
        Queue an event for delivery.

        Must return immediately and must never raise; delivery failures
        are logged by the implementation.
        """
        ...

    async def aclose(self) -> None:
        """Wait for queued deliveries and release resources."""
        ...
