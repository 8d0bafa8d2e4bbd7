"""Email channel — notifies the office mailbox about a new booking.

Message construction is deterministic for a given booking and receipt
time.  Transmission is delegated to a MailSender so the provider can be
swapped without touching the dispatcher:

  LogMailSender  — logs the message only (default)
  GmailSender    — Gmail SMTP via yagmail, when GMAIL_SENDER_EMAIL and
                   GMAIL_APP_PASSWORD are both set
"""

from __future__ import annotations

import asyncio
import html
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from functools import partial

import yagmail

from booking.channels.base import (
    DeliveryContext,
    DeliveryStatus,
    NotificationChannel,
    NotificationOutcome,
)
from booking.config import Settings
from booking.errors import DeliveryError
from booking.models.booking import BookingRequest

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EmailMessage:
    to: str
    subject: str
    html: str
    text: str


def _booking_fields(request: BookingRequest, received_at: datetime) -> list[tuple[str, str]]:
    fields = [
        ("Name", request.name),
        ("Pick-up Location", request.start_point),
        ("Drop-off Location", request.end_point),
        ("Trip Type", request.trip_type.label),
        ("Passengers", request.passengers),
        ("Date", request.pickup_date),
        ("Time", request.pickup_time),
    ]
    if request.contact_number:
        fields.append(("Contact Number", request.contact_number))
    if request.special_requests:
        fields.append(("Special Requests", request.special_requests))
    fields.append(("Booking Time", received_at.strftime("%Y-%m-%d %H:%M:%S %Z").strip()))
    return fields


def build_booking_email(
    request: BookingRequest, to: str, received_at: datetime
) -> EmailMessage:
    """Compose the admin notification for one booking."""
    fields = _booking_fields(request, received_at)

    html_lines = ["<h2>New Limousine Booking Request</h2>"]
    html_lines += [
        f"<p><strong>{label}:</strong> {html.escape(value)}</p>" for label, value in fields
    ]

    text_lines = ["New limousine booking received:", ""]
    text_lines += [f"- {label}: {value}" for label, value in fields]
    text_lines += ["", "Please contact the customer to confirm the booking."]

    return EmailMessage(
        to=to,
        subject=f"New Limousine Booking - {request.name}",
        html="\n".join(html_lines),
        text="\n".join(text_lines),
    )


class MailSender(ABC):
    """Pluggable transport for outgoing email."""

    @abstractmethod
    async def send(self, message: EmailMessage) -> None:
        """Send the message or raise DeliveryError."""


class LogMailSender(MailSender):
    """Logs the message instead of sending it."""

    async def send(self, message: EmailMessage) -> None:
        logger.info(
            "Email to be sent (no mail transport configured): to=%s subject=%r\n%s",
            message.to,
            message.subject,
            message.text,
        )


class GmailSender(MailSender):
    """Sends through Gmail SMTP with an app password."""

    def __init__(self, sender_email: str, app_password: str) -> None:
        self._sender_email = sender_email
        self._app_password = app_password

    def _send_sync(self, message: EmailMessage) -> None:
        client = yagmail.SMTP(user=self._sender_email, password=self._app_password)
        try:
            client.send(to=message.to, subject=message.subject, contents=message.html)
        finally:
            client.close()

    async def send(self, message: EmailMessage) -> None:
        loop = asyncio.get_running_loop()
        try:
            await loop.run_in_executor(None, partial(self._send_sync, message))
        except Exception as e:
            raise DeliveryError(f"Gmail SMTP send failed: {e}") from e
        logger.info("Email sent via Gmail to %s", message.to)


def build_mail_sender(settings: Settings) -> MailSender:
    """Pick the mail transport from configuration."""
    if settings.gmail_configured:
        return GmailSender(settings.gmail_sender_email, settings.gmail_app_password)
    return LogMailSender()


class EmailChannel(NotificationChannel):
    name = "email"

    def __init__(self, settings: Settings, sender: MailSender | None = None) -> None:
        self._to = settings.admin_email or "info@perfectcompany.com"
        self._sender = sender or build_mail_sender(settings)

    async def deliver(
        self, request: BookingRequest, context: DeliveryContext
    ) -> NotificationOutcome:
        message = build_booking_email(request, self._to, context.received_at)
        await self._sender.send(message)
        return NotificationOutcome(
            channel=self.name,
            status=DeliveryStatus.DELIVERED,
            detail=f"Notification for {context.booking_id} handed to {type(self._sender).__name__}",
            data={"to": message.to, "subject": message.subject},
        )
