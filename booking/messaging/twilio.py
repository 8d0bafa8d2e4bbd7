"""Twilio WhatsApp provider (Programmable Messaging API, basic auth)."""

from __future__ import annotations

import logging

import httpx

from booking.messaging.base import MessagingProvider, to_e164

logger = logging.getLogger(__name__)

TWILIO_API_BASE = "https://api.twilio.com/2010-04-01"


class TwilioWhatsAppProvider(MessagingProvider):
    name = "twilio"

    def __init__(
        self,
        account_sid: str,
        auth_token: str,
        from_number: str = "whatsapp:+14155238886",
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        super().__init__(timeout=timeout, transport=transport)
        self._account_sid = account_sid
        self._auth_token = auth_token
        self._from_number = from_number

    async def send_text(self, to: str, body: str) -> str:
        result = await self._post(
            f"{TWILIO_API_BASE}/Accounts/{self._account_sid}/Messages.json",
            auth=(self._account_sid, self._auth_token),
            data={
                "From": self._from_number,
                "To": f"whatsapp:{to_e164(to)}",
                "Body": body,
            },
        )
        sid = result.get("sid", "")
        logger.info("Message sent via Twilio: %s", sid)
        return sid
