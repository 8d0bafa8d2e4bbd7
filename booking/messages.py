"""Customer-facing confirmation text and booking identifiers."""

from __future__ import annotations

import time
from typing import Callable

from booking.config import Settings
from booking.models.booking import BookingRequest


def format_confirmation(request: BookingRequest, settings: Settings) -> str:
    """Render the multi-line confirmation sent back to the customer.

    Optional fields are left out as whole lines when they are empty.
    """
    lines = [
        "🚗 *Booking Confirmation*",
        "",
        f"Thank you {request.name}! Your limousine booking request has been received.",
        "",
        "📋 *Booking Details:*",
        f"• Pick-up: {request.start_point}",
        f"• Drop-off: {request.end_point}",
        f"• Trip Type: {request.trip_type.label}",
        f"• Passengers: {request.passengers}",
        f"• Date: {request.pickup_date}",
        f"• Time: {request.pickup_time}",
    ]
    if request.special_requests:
        lines.append(f"• Special Requests: {request.special_requests}")
    if request.contact_number:
        lines.append(f"• Your Contact Number: {request.contact_number}")
    lines += [
        "",
        f"📞 We will contact you shortly at: {settings.company_phone_display}",
        "",
        f"{settings.company_name} - {settings.company_tagline}",
    ]
    return "\n".join(lines)


class BookingIdGenerator:
    """Display identifiers of the form ``<prefix><epoch ms>``.

    Ids are strictly increasing within one process: if the clock has not
    moved on since the last id, the previous value is bumped by one.
    """

    def __init__(
        self,
        prefix: str = "PC",
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._prefix = prefix
        self._clock = clock
        self._last = 0

    def next_id(self) -> str:
        millis = int(self._clock() * 1000)
        if millis <= self._last:
            millis = self._last + 1
        self._last = millis
        return f"{self._prefix}{millis}"
