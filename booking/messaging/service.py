"""WhatsApp delivery with a manual-link fallback.

One provider is chosen when the service is built.  A send is attempted
once through that provider; if there is no provider, or the provider
fails, the result carries a ``wa.me`` link that a person can open to send
the message by hand.  A failed provider is not followed by a second one.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional
from urllib.parse import quote

from booking.config import Settings
from booking.errors import DeliveryError
from booking.messaging.base import MessagingProvider

log = logging.getLogger("booking.messaging")

WHATSAPP_LINK_BASE = "https://wa.me"

# Same unreserved set as JavaScript's encodeURIComponent
_URI_SAFE = "-_.!~*'()"


def build_whatsapp_url(phone: str, message: str) -> str:
    """Click-to-chat link with the message pre-filled."""
    digits = "".join(ch for ch in phone if ch.isdigit())
    return f"{WHATSAPP_LINK_BASE}/{digits}?text={quote(message, safe=_URI_SAFE)}"


@dataclass
class MessagingResult:
    sent: bool
    target_phone: str
    provider: Optional[str] = None
    message_id: str = ""
    whatsapp_url: str = ""
    error: str = ""


class MessagingService:
    def __init__(
        self, settings: Settings, provider: Optional[MessagingProvider] = None
    ) -> None:
        self._default_phone = settings.company_whatsapp_number
        self._provider = provider

    @property
    def provider(self) -> Optional[MessagingProvider]:
        return self._provider

    def resolve_target(self, phone_number: Optional[str]) -> str:
        """Customer number when given, otherwise the company number."""
        return (phone_number or "").strip() or self._default_phone

    async def send(self, message: str, phone_number: Optional[str] = None) -> MessagingResult:
        target = self.resolve_target(phone_number)

        if self._provider is None:
            log.info("No WhatsApp service configured, preparing manual link for %s", target)
            return self._fallback(target, message, "No WhatsApp service configured")

        try:
            message_id = await self._provider.send_text(target, message)
        except DeliveryError as e:
            log.warning(
                "Direct WhatsApp send via %s failed, falling back to link: %s",
                self._provider.name,
                e,
            )
            return self._fallback(target, message, str(e))
        except Exception as e:
            log.exception(
                "Unexpected error from WhatsApp provider %s, falling back to link",
                self._provider.name,
            )
            return self._fallback(target, message, str(e) or type(e).__name__)

        return MessagingResult(
            sent=True,
            target_phone=target,
            provider=self._provider.name,
            message_id=message_id,
        )

    def _fallback(self, target: str, message: str, error: str) -> MessagingResult:
        return MessagingResult(
            sent=False,
            target_phone=target,
            provider=self._provider.name if self._provider else None,
            whatsapp_url=build_whatsapp_url(target, message),
            error=error,
        )
