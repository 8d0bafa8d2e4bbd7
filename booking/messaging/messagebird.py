"""MessageBird WhatsApp provider (Conversations API, AccessKey header)."""

from __future__ import annotations

import logging

import httpx

from booking.messaging.base import MessagingProvider, to_e164

logger = logging.getLogger(__name__)

MESSAGEBIRD_SEND_URL = "https://conversations.messagebird.com/v1/send"


class MessageBirdProvider(MessagingProvider):
    name = "messagebird"

    def __init__(
        self,
        api_key: str,
        from_number: str = "whatsapp:+14155238886",
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        super().__init__(timeout=timeout, transport=transport)
        self._api_key = api_key
        self._from_number = from_number

    async def send_text(self, to: str, body: str) -> str:
        result = await self._post(
            MESSAGEBIRD_SEND_URL,
            headers={"Authorization": f"AccessKey {self._api_key}"},
            json={
                "to": f"whatsapp:{to_e164(to)}",
                "from": self._from_number,
                "type": "text",
                "content": {"text": body},
            },
        )
        message_id = result.get("id", "")
        logger.info("Message sent via MessageBird: %s", message_id)
        return message_id
