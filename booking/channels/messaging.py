"""Messaging channel: sends the confirmation text over WhatsApp."""

from __future__ import annotations

import logging

from booking.channels.base import (
    DeliveryContext,
    DeliveryStatus,
    NotificationChannel,
    NotificationOutcome,
)
from booking.messaging.service import MessagingService
from booking.models.booking import BookingRequest

logger = logging.getLogger(__name__)


class MessagingChannel(NotificationChannel):
    """Adapts MessagingService to the dispatcher.

    A direct send is ``delivered``; the manual-link fallback is
    ``prepared`` and carries the link in ``data["whatsapp_url"]``.
    """

    name = "messaging"

    def __init__(self, service: MessagingService) -> None:
        self._service = service

    async def deliver(
        self, request: BookingRequest, context: DeliveryContext
    ) -> NotificationOutcome:
        result = await self._service.send(context.confirmation_text, request.contact_number)
        data = {"target_phone": result.target_phone, "provider": result.provider}

        if result.sent:
            data["message_id"] = result.message_id
            return NotificationOutcome(
                channel=self.name,
                status=DeliveryStatus.DELIVERED,
                detail=f"Sent via {result.provider}",
                data=data,
            )

        data["whatsapp_url"] = result.whatsapp_url
        return NotificationOutcome(
            channel=self.name,
            status=DeliveryStatus.PREPARED,
            detail=result.error or "Manual send required",
            data=data,
        )
