"""Abstract base class for WhatsApp messaging providers.

Every provider does the same job (send one text message to one
recipient) over its own REST API.  Subclasses only describe the request;
the HTTP plumbing, timeout and error mapping live here.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any

import httpx

from booking.errors import DeliveryError

logger = logging.getLogger(__name__)


def to_e164(phone: str) -> str:
    """``201200272020`` / ``+20 120 027 2020`` → ``+201200272020``."""
    digits = "".join(ch for ch in phone if ch.isdigit())
    return f"+{digits}"


class MessagingProvider(ABC):
    """Abstract WhatsApp backend."""

    name: str = "provider"

    def __init__(
        self,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._timeout = timeout
        self._transport = transport

    async def _post(self, url: str, **kwargs: Any) -> dict:
        """POST to the provider and return the decoded JSON body.

        Raises:
            DeliveryError: on a non-2xx status, a transport failure or a reply
                that is not a JSON object.
        """
        try:
            async with httpx.AsyncClient(
                timeout=self._timeout, transport=self._transport
            ) as client:
                resp = await client.post(url, **kwargs)
        except httpx.TimeoutException as exc:
            raise DeliveryError(f"{self.name} timed out after {self._timeout}s") from exc
        except httpx.RequestError as exc:
            raise DeliveryError(f"{self.name} unreachable: {exc}") from exc

        if resp.is_error:
            logger.warning(
                "%s rejected message (%d): %s", self.name, resp.status_code, resp.text[:500]
            )
            raise DeliveryError(f"{self.name} error: {resp.reason_phrase or resp.status_code}")

        try:
            payload = resp.json()
        except ValueError:
            return {}
        if not isinstance(payload, dict):
            raise DeliveryError(f"{self.name} returned an unexpected response body")
        return payload

    @abstractmethod
    async def send_text(self, to: str, body: str) -> str:
        """Send ``body`` to the phone number ``to``.

        Returns:
            The provider's message identifier (may be empty).

        Raises:
            DeliveryError: if the provider did not accept the message.
        """
