"""SubmissionDispatcher — relays a validated booking to every channel.

All channels are started together and the dispatcher waits for every
one of them to settle.  A channel that raises, times out or is not
configured is recorded as an outcome and never affects the others or
the confirmation returned to the customer.

Outcomes are logged after all channels finish, in channel order
(spreadsheet, email, messaging), so the log reads the same regardless
of which call returned first.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Callable, Optional, Sequence

from booking.channels.base import (
    DeliveryContext,
    DeliveryStatus,
    NotificationChannel,
    NotificationOutcome,
)
from booking.config import Settings
from booking.errors import ConfigurationError
from booking.messages import BookingIdGenerator, format_confirmation
from booking.models.booking import BookingConfirmation, BookingRequest

log = logging.getLogger("booking.dispatcher")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class DispatchReport:
    """Confirmation plus one outcome per channel, in channel order."""

    confirmation: BookingConfirmation
    outcomes: list[NotificationOutcome] = field(default_factory=list)

    def outcome(self, channel: str) -> Optional[NotificationOutcome]:
        for o in self.outcomes:
            if o.channel == channel:
                return o
        return None

    @property
    def whatsapp_url(self) -> str:
        """Manual WhatsApp link, if the messaging channel fell back to one."""
        o = self.outcome("messaging")
        if o is not None and o.status is DeliveryStatus.PREPARED:
            return o.data.get("whatsapp_url", "")
        return ""


class SubmissionDispatcher:
    def __init__(
        self,
        settings: Settings,
        channels: Sequence[NotificationChannel],
        id_generator: Optional[BookingIdGenerator] = None,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._settings = settings
        self._channels = list(channels)
        self._ids = id_generator or BookingIdGenerator(settings.booking_id_prefix)
        self._clock = clock
        self._timeout = settings.channel_timeout_seconds

    @property
    def channels(self) -> list[NotificationChannel]:
        return list(self._channels)

    async def dispatch(self, request: BookingRequest) -> DispatchReport:
        """Relay one booking and build the customer confirmation."""
        booking_id = self._ids.next_id()
        text = format_confirmation(request, self._settings)
        context = DeliveryContext(
            booking_id=booking_id,
            confirmation_text=text,
            received_at=self._clock(),
        )
        log.info(
            "Booking %s received: %s, %s → %s (%s)",
            booking_id,
            request.name,
            request.start_point,
            request.end_point,
            request.trip_type.label,
        )

        outcomes = await asyncio.gather(
            *(self._deliver(channel, request, context) for channel in self._channels)
        )

        for outcome in outcomes:
            self._log_outcome(booking_id, outcome)

        return DispatchReport(
            confirmation=BookingConfirmation(booking_id=booking_id, message=text),
            outcomes=list(outcomes),
        )

    async def _deliver(
        self,
        channel: NotificationChannel,
        request: BookingRequest,
        context: DeliveryContext,
    ) -> NotificationOutcome:
        try:
            return await asyncio.wait_for(
                channel.deliver(request, context), timeout=self._timeout
            )
        except ConfigurationError as e:
            return NotificationOutcome(channel.name, DeliveryStatus.SKIPPED, str(e))
        except asyncio.TimeoutError:
            return NotificationOutcome(
                channel.name,
                DeliveryStatus.FAILED,
                f"Timed out after {self._timeout}s",
            )
        except Exception as e:
            log.debug("Channel %s raised", channel.name, exc_info=True)
            return NotificationOutcome(
                channel.name, DeliveryStatus.FAILED, str(e) or type(e).__name__
            )

    @staticmethod
    def _log_outcome(booking_id: str, outcome: NotificationOutcome) -> None:
        if outcome.status is DeliveryStatus.DELIVERED:
            log.info("[%s] %s delivered: %s", booking_id, outcome.channel, outcome.detail)
        elif outcome.status is DeliveryStatus.PREPARED:
            log.info("[%s] %s prepared (manual send): %s", booking_id, outcome.channel, outcome.detail)
        elif outcome.status is DeliveryStatus.SKIPPED:
            log.warning("[%s] %s skipped, not configured: %s", booking_id, outcome.channel, outcome.detail)
        else:
            log.error("[%s] %s failed: %s", booking_id, outcome.channel, outcome.detail)
