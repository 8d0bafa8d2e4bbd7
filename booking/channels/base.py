"""NotificationChannel ABC — one external integration a booking is relayed to.

The dispatcher hands every channel the same validated booking plus the
context it built for this submission (booking id, confirmation text,
receipt time).  Channels either return a NotificationOutcome or raise:

  ConfigurationError  → the channel is reported as ``skipped``
  anything else       → the channel is reported as ``failed``

A channel never needs to catch its own errors just to protect the other
channels; the dispatcher contains them.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any

from booking.models.booking import BookingRequest


class DeliveryStatus(str, Enum):
    DELIVERED = "delivered"
    FAILED = "failed"
    SKIPPED = "skipped"  # channel not configured
    PREPARED = "prepared"  # manual follow-up needed (wa.me link)


@dataclass
class DeliveryContext:
    """Per-submission data shared by all channels."""

    booking_id: str
    confirmation_text: str
    received_at: datetime


@dataclass
class NotificationOutcome:
    """What happened to one channel for one submission."""

    channel: str
    status: DeliveryStatus
    detail: str = ""
    data: dict[str, Any] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return self.status is DeliveryStatus.DELIVERED


class NotificationChannel(ABC):
    """Abstract notification channel (spreadsheet, email, messaging)."""

    name: str = "channel"

    @abstractmethod
    async def deliver(
        self, request: BookingRequest, context: DeliveryContext
    ) -> NotificationOutcome:
        """Relay one booking to the external service.

        Returns:
            The outcome on success (or on a handled fallback).

        Raises:
            ConfigurationError: credentials are missing; nothing was sent.
            DeliveryError: the service rejected the call.
        """
