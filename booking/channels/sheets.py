"""Google Sheets channel — appends each booking as a row.

Uses the Sheets API v4 through google-api-python-client.  Authentication
is an OAuth access token read from ``GOOGLE_ACCESS_TOKEN`` and sent as a
bearer credential; the sheet is identified by ``GOOGLE_SHEET_ID``.

Row layout (columns A–K):

  Timestamp | Name | Contact Number | Pick-up Location | Drop-off Location |
  Trip Type | Passengers | Pick-up Date | Pick-up Time | Special Requests | Status
"""

from __future__ import annotations

import asyncio
import json
import logging
from datetime import datetime
from functools import partial
from typing import Any

import httplib2
from google.oauth2.credentials import Credentials
from google_auth_httplib2 import AuthorizedHttp
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError

from booking.channels.base import (
    DeliveryContext,
    DeliveryStatus,
    NotificationChannel,
    NotificationOutcome,
)
from booking.config import Settings
from booking.errors import ConfigurationError, DeliveryError
from booking.models.booking import BookingRequest

logger = logging.getLogger(__name__)

HEADERS = [
    "Timestamp",
    "Name",
    "Contact Number",
    "Pick-up Location",
    "Drop-off Location",
    "Trip Type",
    "Passengers",
    "Pick-up Date",
    "Pick-up Time",
    "Special Requests",
    "Status",
]

NEW_STATUS = "New"


def booking_row(request: BookingRequest, received_at: datetime) -> list[str]:
    """Build the spreadsheet row for a booking, in HEADERS order."""
    return [
        received_at.isoformat(),
        request.name,
        request.contact_number or "",
        request.start_point,
        request.end_point,
        request.trip_type.label,
        request.passengers,
        request.pickup_date,
        request.pickup_time,
        request.special_requests or "",
        NEW_STATUS,
    ]


def _error_message(exc: HttpError) -> str:
    """Pull the API's own error text out of an HttpError."""
    try:
        payload = json.loads(exc.content.decode("utf-8"))
        return payload["error"]["message"]
    except (ValueError, KeyError, TypeError, AttributeError):
        return getattr(exc, "reason", "") or str(exc)


class GoogleSheetsChannel(NotificationChannel):
    """NotificationChannel backed by a Google Sheet."""

    name = "spreadsheet"

    def __init__(self, settings: Settings) -> None:
        self._settings = settings
        self._sheet_name = settings.google_sheet_name
        self._service: Any = None

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    @property
    def _header_range(self) -> str:
        return f"{self._sheet_name}!A1:K1"

    @property
    def _data_range(self) -> str:
        return f"{self._sheet_name}!A:K"

    def _build_service(self) -> Any:
        """Create an authorized Sheets client. No network call is made."""
        if not self._settings.google_access_token:
            raise ConfigurationError(
                "Google access token is required. "
                "Set GOOGLE_ACCESS_TOKEN in your environment variables."
            )
        if not self._settings.google_sheet_id:
            raise ConfigurationError(
                "Google Sheet ID is required. Set GOOGLE_SHEET_ID in your environment variables."
            )
        credentials = Credentials(token=self._settings.google_access_token)
        http = AuthorizedHttp(
            credentials,
            http=httplib2.Http(timeout=self._settings.http_timeout_seconds),
        )
        return build("sheets", "v4", http=http, cache_discovery=False)

    async def _get_service(self) -> Any:
        """Build the Sheets client on first use and reuse it afterwards."""
        if self._service is None:
            self._service = await self._run_in_executor(self._build_service)
        return self._service

    async def _run_in_executor(self, func, *args, **kwargs) -> Any:
        """Run a synchronous Google API call in the default thread pool."""
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, partial(func, *args, **kwargs))

    async def _ensure_headers(self, service: Any) -> None:
        """Write the header row unless it is already there.

        Purely advisory: any failure is logged and the caller goes on to
        append the booking anyway.
        """
        sheet_id = self._settings.google_sheet_id
        values = service.spreadsheets().values()
        try:
            current = await self._run_in_executor(
                values.get(spreadsheetId=sheet_id, range=self._header_range).execute
            )
            existing = (current.get("values") or [[]])[0]
            if len(existing) >= len(HEADERS) and all(
                str(existing[i]).lower() == header.lower()
                for i, header in enumerate(HEADERS)
            ):
                logger.debug("Sheet headers already present")
                return

            logger.info("Creating/updating header row in sheet %s", sheet_id)
            await self._run_in_executor(
                values.update(
                    spreadsheetId=sheet_id,
                    range=self._header_range,
                    valueInputOption="USER_ENTERED",
                    body={"values": [HEADERS]},
                ).execute
            )
        except Exception as e:
            logger.warning(
                "Could not verify/create sheet headers, continuing with append: %s", e
            )

    # ------------------------------------------------------------------
    # NotificationChannel interface
    # ------------------------------------------------------------------

    async def deliver(
        self, request: BookingRequest, context: DeliveryContext
    ) -> NotificationOutcome:
        """Append the booking as a new row with status "New"."""
        service = await self._get_service()
        await self._ensure_headers(service)

        row = booking_row(request, context.received_at)
        try:
            result = await self._run_in_executor(
                service.spreadsheets()
                .values()
                .append(
                    spreadsheetId=self._settings.google_sheet_id,
                    range=self._data_range,
                    valueInputOption="USER_ENTERED",
                    body={"values": [row]},
                )
                .execute
            )
        except HttpError as exc:
            raise DeliveryError(
                f"Failed to send to Google Sheets: {_error_message(exc)}"
            ) from exc
        except (OSError, httplib2.HttpLib2Error) as exc:
            raise DeliveryError(f"Google Sheets unreachable: {exc}") from exc

        updated_range = (result or {}).get("updates", {}).get("updatedRange", "")
        logger.info(
            "Booking %s appended to sheet %s (%s)",
            context.booking_id,
            self._settings.google_sheet_id,
            updated_range or "range unknown",
        )
        return NotificationOutcome(
            channel=self.name,
            status=DeliveryStatus.DELIVERED,
            detail="Row appended",
            data={"updated_range": updated_range},
        )

    async def list_bookings(self) -> list[dict[str, str]]:
        """Return every booking row as a dict keyed by the header row."""
        service = await self._get_service()
        try:
            result = await self._run_in_executor(
                service.spreadsheets()
                .values()
                .get(spreadsheetId=self._settings.google_sheet_id, range=self._data_range)
                .execute
            )
        except HttpError as exc:
            raise DeliveryError(
                f"Failed to read Google Sheets: {_error_message(exc)}"
            ) from exc
        except (OSError, httplib2.HttpLib2Error) as exc:
            raise DeliveryError(f"Google Sheets unreachable: {exc}") from exc

        rows: list[list[Any]] = (result or {}).get("values", [])
        if not rows:
            return []

        header, *data = rows
        bookings = []
        for row in data:
            padded = list(row) + [""] * (len(header) - len(row))
            bookings.append({str(h): str(v) for h, v in zip(header, padded)})
        return bookings
