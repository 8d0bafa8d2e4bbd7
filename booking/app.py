"""FastAPI application — HTTP endpoints for the booking relay.

Endpoints:

  POST /api/booking     Validate a booking form and relay it to all channels
  POST /api/whatsapp    Send a WhatsApp message (or prepare a wa.me link)
  GET  /api/bookings    Admin: list bookings from the spreadsheet
  GET  /health          Health check

The booking flow:
  1. Browser posts the raw form as JSON to /api/booking
  2. validate_booking() accepts it or returns 400 with every field error
  3. SubmissionDispatcher writes the sheet row, emails the office and
     sends the WhatsApp confirmation, each failure contained
  4. The customer always gets a 200 once the form itself was valid
"""

from __future__ import annotations

# Load .env into os.environ before Settings is built
from dotenv import load_dotenv
load_dotenv()

import logging
import time
from dataclasses import dataclass
from typing import Optional

# Configure root logger early so all app loggers (booking.dispatcher, etc.)
# have a handler and are visible when run via `uvicorn booking.app:app`.
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(name)-20s %(levelname)-7s %(message)s",
)

from fastapi import Depends, FastAPI, Request
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from booking.auth import require_admin_token
from booking.channels.email import EmailChannel
from booking.channels.messaging import MessagingChannel
from booking.channels.sheets import GoogleSheetsChannel
from booking.config import Settings, settings as default_settings
from booking.dispatcher import SubmissionDispatcher
from booking.errors import BookingValidationError, ConfigurationError, DeliveryError
from booking.messaging import MessagingService, select_provider
from booking.models.relay import WhatsAppRelayRequest
from booking.validation import validate_booking

log = logging.getLogger("booking.app")

_START_TIME = time.time()


@dataclass
class Services:
    """Long-lived collaborators built once per app from one Settings object."""

    dispatcher: SubmissionDispatcher
    messaging: MessagingService
    sheets: GoogleSheetsChannel


def build_services(settings: Settings) -> Services:
    """Wire channels and providers from configuration.

    The WhatsApp provider is chosen here, once, not per request.
    """
    sheets = GoogleSheetsChannel(settings)
    messaging = MessagingService(settings, select_provider(settings))
    dispatcher = SubmissionDispatcher(
        settings,
        channels=[sheets, EmailChannel(settings), MessagingChannel(messaging)],
    )
    return Services(dispatcher=dispatcher, messaging=messaging, sheets=sheets)


def create_app(
    settings: Optional[Settings] = None,
    services: Optional[Services] = None,
) -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = settings or default_settings
    services = services or build_services(settings)

    for warning in settings.validate_startup():
        log.warning(warning)

    app = FastAPI(
        title="Limousine Booking Relay",
        description="Booking form validation and notification relay",
        version="0.1.0",
    )
    app.state.settings = settings
    app.state.services = services

    # ── Health check ───────────────────────────────────────────

    @app.get("/health")
    async def health() -> JSONResponse:
        """Lightweight health check that confirms the event loop is responsive."""
        uptime = round(time.time() - _START_TIME, 1)
        return JSONResponse({"status": "ok", "uptime": uptime})

    # ── Booking submission ─────────────────────────────────────

    @app.post("/api/booking")
    async def create_booking(request: Request) -> JSONResponse:
        """Validate the booking form and relay it to every channel.

        Channel failures never change the response: once the form is
        valid the customer gets a confirmation.
        """
        try:
            payload = await request.json()
            booking = validate_booking(payload)
            report = await services.dispatcher.dispatch(booking)
        except BookingValidationError as e:
            log.info("Booking rejected: %s", e)
            return JSONResponse(
                {
                    "error": e.first_error,
                    "errors": [v.to_dict() for v in e.violations],
                },
                status_code=400,
            )
        except Exception:
            log.exception("Booking API error")
            return JSONResponse({"error": "Internal server error"}, status_code=500)

        confirmation = report.confirmation
        body = {
            "success": confirmation.success,
            "message": "Booking request received successfully",
            "bookingId": confirmation.booking_id,
            "confirmationText": confirmation.message,
        }
        if report.whatsapp_url:
            body["whatsappUrl"] = report.whatsapp_url
        return JSONResponse(body)

    # ── WhatsApp relay ─────────────────────────────────────────

    @app.post("/api/whatsapp")
    async def send_whatsapp(request: Request) -> JSONResponse:
        """Send a message directly, or hand back a wa.me link to send by hand."""
        try:
            data = WhatsAppRelayRequest.model_validate(await request.json())
        except (ValueError, ValidationError) as e:
            log.error("WhatsApp API error: %s", e)
            return JSONResponse(
                {"error": "Failed to send WhatsApp message"}, status_code=500
            )

        log.info(
            "WhatsApp relay: customer phone %s, target %s",
            data.phone_number or "None",
            services.messaging.resolve_target(data.phone_number),
        )
        result = await services.messaging.send(data.message, data.phone_number)

        if result.sent:
            return JSONResponse(
                {
                    "success": True,
                    "message": "WhatsApp message sent successfully",
                    "targetPhone": result.target_phone,
                    "sent": True,
                }
            )
        return JSONResponse(
            {
                "success": True,
                "whatsappUrl": result.whatsapp_url,
                "targetPhone": result.target_phone,
                "message": "WhatsApp message prepared (manual send required)",
                "sent": False,
            }
        )

    # ── Admin API ──────────────────────────────────────────────

    @app.get("/api/bookings", dependencies=[Depends(require_admin_token)])
    async def list_bookings() -> JSONResponse:
        """Return every booking row currently in the spreadsheet."""
        try:
            bookings = await services.sheets.list_bookings()
        except ConfigurationError as e:
            return JSONResponse({"error": str(e)}, status_code=503)
        except DeliveryError as e:
            log.error("Could not read bookings: %s", e)
            return JSONResponse({"error": str(e)}, status_code=502)
        return JSONResponse({"success": True, "bookings": bookings})

    return app


# ── Module-level app instance for uvicorn ──────────────────────

app = create_app()


if __name__ == "__main__":
    import uvicorn

    log_config = uvicorn.config.LOGGING_CONFIG
    log_config["formatters"]["default"]["fmt"] = (
        "%(asctime)s %(name)-12s %(levelname)-8s %(message)s"
    )

    uvicorn.run(
        "booking.app:app",
        host=default_settings.host,
        port=default_settings.port,
        reload=default_settings.debug,
        log_config=log_config,
    )
