"""
Event module data models.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field


class EventName(str, Enum):
    """Outcome events emitted by the backend."""

    DEVELOPER_NEW = "developer new"
    TRIAL_NEW = "trial new"
    TRIAL_EXPIRED = "trial expired"
    SESSION_FOUND = "session found"
    SESSION_FAILED = "session failed"
    PAYMENT_NEW = "payment new"
    PAYMENT_RECURRED = "payment recurred"
    PAYMENT_FAILED = "payment failed"
    PAYMENT_UNRECORDED = "payment unrecorded"  # charged, but the store write failed


class Event(BaseModel):
    """A single event as delivered to the collector."""

    name: EventName
    payload: dict[str, Any] = Field(default_factory=dict)
    occurred_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    def to_body(self) -> dict[str, Any]:
        """JSON body posted to the collector."""
        return {
            **self.payload,
            "timestamp": self.occurred_at.isoformat(),
        }
