"""WhatsApp provider abstractions and implementations."""

from __future__ import annotations

import logging
from typing import Optional

from booking.config import Settings

from .base import MessagingProvider
from .messagebird import MessageBirdProvider
from .service import MessagingResult, MessagingService, build_whatsapp_url
from .twilio import TwilioWhatsAppProvider
from .whatsapp_business import WhatsAppBusinessProvider

log = logging.getLogger("booking.messaging")

__all__ = [
    "MessageBirdProvider",
    "MessagingProvider",
    "MessagingResult",
    "MessagingService",
    "TwilioWhatsAppProvider",
    "WhatsAppBusinessProvider",
    "build_whatsapp_url",
    "select_provider",
]


def select_provider(settings: Settings) -> Optional[MessagingProvider]:
    """Pick the WhatsApp provider from the credentials that are present.

    Priority: Twilio, then MessageBird, then WhatsApp Business.
    Returns None when none is configured.
    """
    timeout = settings.http_timeout_seconds

    if settings.twilio_account_sid and settings.twilio_auth_token:
        provider: MessagingProvider = TwilioWhatsAppProvider(
            settings.twilio_account_sid,
            settings.twilio_auth_token,
            from_number=settings.twilio_whatsapp_number,
            timeout=timeout,
        )
    elif settings.messagebird_api_key:
        provider = MessageBirdProvider(
            settings.messagebird_api_key,
            from_number=settings.messagebird_whatsapp_number,
            timeout=timeout,
        )
    elif settings.whatsapp_business_token and settings.whatsapp_business_phone_id:
        provider = WhatsAppBusinessProvider(
            settings.whatsapp_business_token,
            settings.whatsapp_business_phone_id,
            timeout=timeout,
        )
    else:
        log.info("No WhatsApp provider configured; manual wa.me links will be used")
        return None

    log.info("WhatsApp provider selected: %s", provider.name)
    return provider
