"""
Event notifier implementations.

HttpEventNotifier posts each event to an analytics collector
(`{events_url}/projects/{project_id}/events/{event name}`) from a
background task. LoggingEventNotifier is used when no collector is
configured.
"""

import asyncio
import logging
from typing import Any, Optional
from urllib.parse import quote

import httpx

from shared.config import Settings
from .models import Event, EventName

logger = logging.getLogger(__name__)


class LoggingEventNotifier:
    """Writes events to the log instead of a collector."""

    def emit(self, event_name: EventName, payload: dict[str, Any]) -> None:
        logger.info(f"event {event_name.value}: {payload}")

    async def aclose(self) -> None:
        return None


class HttpEventNotifier:
    """
    Delivers events to an HTTP collector without blocking the caller.

    emit() schedules a task on the running event loop and returns. Tasks
    are tracked so aclose() can drain them on shutdown.
    """

    def __init__(
        self,
        base_url: str,
        project_id: str,
        write_key: str,
        timeout: float = 5.0,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self._base_url = base_url.rstrip("/")
        self._project_id = project_id
        self._write_key = write_key
        self._client = client or httpx.AsyncClient(timeout=timeout)
        self._pending: set[asyncio.Task] = set()

    @property
    def pending(self) -> int:
        """Number of deliveries still in flight."""
        return len(self._pending)

    def emit(self, event_name: EventName, payload: dict[str, Any]) -> None:
        event = Event(name=event_name, payload=payload)
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.warning(f"No running event loop, dropping event {event_name.value}")
            return

        task = loop.create_task(self._deliver(event))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    def event_url(self, event_name: EventName) -> str:
        collection = quote(event_name.value, safe="")
        return f"{self._base_url}/projects/{self._project_id}/events/{collection}"

    async def _deliver(self, event: Event) -> None:
        try:
            response = await self._client.post(
                self.event_url(event.name),
                json=event.to_body(),
                headers={
                    "Authorization": self._write_key,
                    "Content-Type": "application/json",
                },
            )
            response.raise_for_status()
            logger.debug(f"Delivered event {event.name.value}")
        except httpx.HTTPError as e:
            logger.warning(f"Failed to deliver event {event.name.value}: {e}")

    async def aclose(self) -> None:
        if self._pending:
            await asyncio.gather(*self._pending, return_exceptions=True)
        await self._client.aclose()


def create_event_notifier(settings: Settings) -> HttpEventNotifier | LoggingEventNotifier:
    """Build the notifier the settings ask for."""
    if settings.events_url and settings.events_project_id:
        return HttpEventNotifier(
            base_url=settings.events_url,
            project_id=settings.events_project_id,
            write_key=settings.events_write_key,
            timeout=settings.events_timeout_seconds,
        )
    return LoggingEventNotifier()
