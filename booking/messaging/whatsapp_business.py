"""WhatsApp Business Cloud API provider (Meta Graph API, bearer token)."""

from __future__ import annotations

import logging

import httpx

from booking.messaging.base import MessagingProvider

logger = logging.getLogger(__name__)

GRAPH_API_BASE = "https://graph.facebook.com/v18.0"


class WhatsAppBusinessProvider(MessagingProvider):
    name = "whatsapp_business"

    def __init__(
        self,
        access_token: str,
        phone_number_id: str,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        super().__init__(timeout=timeout, transport=transport)
        self._access_token = access_token
        self._phone_number_id = phone_number_id

    async def send_text(self, to: str, body: str) -> str:
        # Graph API wants bare digits, no leading "+"
        recipient = "".join(ch for ch in to if ch.isdigit())
        result = await self._post(
            f"{GRAPH_API_BASE}/{self._phone_number_id}/messages",
            headers={"Authorization": f"Bearer {self._access_token}"},
            json={
                "messaging_product": "whatsapp",
                "to": recipient,
                "type": "text",
                "text": {"body": body},
            },
        )
        messages = result.get("messages") or [{}]
        message_id = messages[0].get("id", "")
        logger.info("Message sent via WhatsApp Business API: %s", message_id)
        return message_id
