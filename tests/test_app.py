"""Tests for the HTTP endpoints (FastAPI TestClient, channels mocked)."""

from unittest.mock import AsyncMock, MagicMock
from urllib.parse import quote

import httpx
import pytest
from fastapi.testclient import TestClient

from booking.app import Services, create_app
from booking.channels.base import DeliveryStatus, NotificationOutcome
from booking.channels.messaging import MessagingChannel
from booking.dispatcher import SubmissionDispatcher
from booking.errors import ConfigurationError, DeliveryError
from booking.messaging import MessagingService, TwilioWhatsAppProvider

from conftest import make_settings


def _channel(name, side_effect=None):
    channel = MagicMock()
    channel.name = name
    channel.deliver = AsyncMock(
        return_value=NotificationOutcome(name, DeliveryStatus.DELIVERED, "ok"),
        side_effect=side_effect,
    )
    return channel


def _client(settings=None, channels=None, provider=None, sheets=None):
    settings = settings or make_settings()
    messaging = MessagingService(settings, provider)
    if channels is None:
        channels = [_channel("spreadsheet"), _channel("email"), MessagingChannel(messaging)]
    services = Services(
        dispatcher=SubmissionDispatcher(settings, channels),
        messaging=messaging,
        sheets=sheets or MagicMock(),
    )
    return TestClient(create_app(settings=settings, services=services))


# ── Health ──────────────────────────────────────────────────────────


def test_health():
    resp = _client().get("/health")
    assert resp.status_code == 200
    assert resp.json()["status"] == "ok"


# ── POST /api/booking ───────────────────────────────────────────────


class TestBookingEndpoint:
    def test_valid_booking(self, valid_payload):
        resp = _client().post("/api/booking", json=valid_payload)

        assert resp.status_code == 200
        body = resp.json()
        assert body["success"] is True
        assert body["message"] == "Booking request received successfully"
        assert body["bookingId"].startswith("PC")
        assert "One Way" in body["confirmationText"]
        assert "• Passengers: 2" in body["confirmationText"]
        assert "Special Requests" not in body["confirmationText"]

    def test_special_requests_in_confirmation(self, valid_payload):
        valid_payload["specialRequests"] = "Need a child seat"
        body = _client().post("/api/booking", json=valid_payload).json()
        assert "• Special Requests: Need a child seat" in body["confirmationText"]

    def test_manual_whatsapp_link_returned(self, valid_payload):
        body = _client().post("/api/booking", json=valid_payload).json()
        assert body["whatsappUrl"].startswith("https://wa.me/201200272020?text=")

    @pytest.mark.parametrize(
        "field",
        ["name", "startPoint", "endPoint", "tripType", "passengers", "pickupDate", "pickupTime"],
    )
    def test_missing_required_field(self, valid_payload, field):
        del valid_payload[field]
        resp = _client().post("/api/booking", json=valid_payload)
        assert resp.status_code == 400
        assert resp.json()["error"] == f"{field} is required"

    def test_all_errors_listed(self, valid_payload):
        valid_payload["contactNumber"] = "abc"
        valid_payload["tripType"] = "3-way"
        resp = _client().post("/api/booking", json=valid_payload)

        assert resp.status_code == 400
        fields = [e["field"] for e in resp.json()["errors"]]
        assert fields == ["tripType", "contactNumber"]
        assert resp.json()["error"] == "Please select a trip type"

    def test_invalid_input_makes_no_channel_calls(self, valid_payload):
        channels = [_channel("spreadsheet"), _channel("email"), _channel("messaging")]
        del valid_payload["name"]
        _client(channels=channels).post("/api/booking", json=valid_payload)
        for channel in channels:
            channel.deliver.assert_not_called()

    def test_unparsable_body(self):
        resp = _client().post(
            "/api/booking",
            content="{not json",
            headers={"Content-Type": "application/json"},
        )
        assert resp.status_code == 500
        assert resp.json() == {"error": "Internal server error"}

    def test_non_object_body(self):
        resp = _client().post("/api/booking", json=["Ahmed Hassan"])
        assert resp.status_code == 500
        assert resp.json() == {"error": "Internal server error"}

    def test_spreadsheet_failure_still_succeeds(self, valid_payload):
        sheet = _channel("spreadsheet", side_effect=DeliveryError("quota exceeded"))
        email = _channel("email")
        messaging = _channel("messaging")

        resp = _client(channels=[sheet, email, messaging]).post("/api/booking", json=valid_payload)

        assert resp.status_code == 200
        assert resp.json()["success"] is True
        assert email.deliver.await_count == 1
        assert messaging.deliver.await_count == 1

    def test_unexpected_provider_reply_keeps_manual_link(self, valid_payload):
        transport = httpx.MockTransport(lambda request: httpx.Response(200, json=["unexpected"]))
        provider = TwilioWhatsAppProvider("AC1", "secret", transport=transport)

        resp = _client(provider=provider).post("/api/booking", json=valid_payload)

        assert resp.status_code == 200
        assert resp.json()["whatsappUrl"].startswith("https://wa.me/201200272020?text=")

    def test_distinct_ids_per_submission(self, valid_payload):
        client = _client()
        first = client.post("/api/booking", json=valid_payload).json()["bookingId"]
        second = client.post("/api/booking", json=valid_payload).json()["bookingId"]
        assert first != second


# ── POST /api/whatsapp ──────────────────────────────────────────────


class TestWhatsAppEndpoint:
    def test_no_provider_returns_link(self):
        message = "New booking: Ahmed Hassan, 2 passengers"
        resp = _client().post("/api/whatsapp", json={"message": message})

        assert resp.status_code == 200
        body = resp.json()
        assert body["success"] is True
        assert body["sent"] is False
        assert body["targetPhone"] == "201200272020"
        assert quote(message, safe="-_.!~*'()") in body["whatsappUrl"]

    def test_customer_phone_used(self):
        body = _client().post(
            "/api/whatsapp", json={"message": "hi", "phoneNumber": "+201234567890"}
        ).json()
        assert body["targetPhone"] == "+201234567890"
        assert body["whatsappUrl"] == "https://wa.me/201234567890?text=hi"

    def test_direct_send(self):
        provider = MagicMock()
        provider.name = "twilio"
        provider.send_text = AsyncMock(return_value="SM1")

        body = _client(provider=provider).post("/api/whatsapp", json={"message": "hi"}).json()

        assert body == {
            "success": True,
            "message": "WhatsApp message sent successfully",
            "targetPhone": "201200272020",
            "sent": True,
        }
        provider.send_text.assert_awaited_once_with("201200272020", "hi")

    def test_provider_failure_falls_back(self):
        provider = MagicMock()
        provider.name = "twilio"
        provider.send_text = AsyncMock(side_effect=DeliveryError("twilio error: Unauthorized"))

        resp = _client(provider=provider).post("/api/whatsapp", json={"message": "hi"})

        assert resp.status_code == 200
        assert resp.json()["sent"] is False
        assert resp.json()["whatsappUrl"] == "https://wa.me/201200272020?text=hi"

    def test_unexpected_provider_reply_falls_back(self):
        transport = httpx.MockTransport(lambda request: httpx.Response(200, json=["unexpected"]))
        provider = TwilioWhatsAppProvider("AC1", "secret", transport=transport)

        resp = _client(provider=provider).post("/api/whatsapp", json={"message": "hi"})

        assert resp.status_code == 200
        assert resp.json()["success"] is True
        assert resp.json()["sent"] is False
        assert resp.json()["whatsappUrl"] == "https://wa.me/201200272020?text=hi"

    def test_blank_phone_number_uses_company_number(self):
        body = _client().post(
            "/api/whatsapp", json={"message": "hi", "phoneNumber": "   "}
        ).json()
        assert body["targetPhone"] == "201200272020"
        assert body["whatsappUrl"] == "https://wa.me/201200272020?text=hi"

    def test_missing_message(self):
        resp = _client().post("/api/whatsapp", json={"phoneNumber": "+201234567890"})
        assert resp.status_code == 500
        assert resp.json() == {"error": "Failed to send WhatsApp message"}

    def test_unparsable_body(self):
        resp = _client().post(
            "/api/whatsapp", content="nope", headers={"Content-Type": "application/json"}
        )
        assert resp.status_code == 500


# ── GET /api/bookings (admin) ───────────────────────────────────────


class TestBookingsEndpoint:
    @pytest.fixture
    def sheets(self):
        sheets = MagicMock()
        sheets.list_bookings = AsyncMock(return_value=[{"Name": "Ahmed Hassan", "Status": "New"}])
        return sheets

    def test_requires_token(self, sheets):
        client = _client(settings=make_settings(admin_api_key="secret"), sheets=sheets)
        assert client.get("/api/bookings").status_code == 401
        sheets.list_bookings.assert_not_called()

    def test_wrong_token(self, sheets):
        client = _client(settings=make_settings(admin_api_key="secret"), sheets=sheets)
        resp = client.get("/api/bookings", headers={"Authorization": "Bearer nope"})
        assert resp.status_code == 401

    def test_lists_bookings(self, sheets):
        client = _client(settings=make_settings(admin_api_key="secret"), sheets=sheets)
        resp = client.get("/api/bookings", headers={"Authorization": "Bearer secret"})
        assert resp.status_code == 200
        assert resp.json() == {
            "success": True,
            "bookings": [{"Name": "Ahmed Hassan", "Status": "New"}],
        }

    def test_locked_without_key_in_production(self, sheets):
        client = _client(settings=make_settings(admin_api_key=""), sheets=sheets)
        assert client.get("/api/bookings").status_code == 403

    def test_sheet_not_configured(self, sheets):
        sheets.list_bookings.side_effect = ConfigurationError("GOOGLE_SHEET_ID missing")
        client = _client(settings=make_settings(admin_api_key="", debug=True), sheets=sheets)
        resp = client.get("/api/bookings")
        assert resp.status_code == 503
        assert "GOOGLE_SHEET_ID" in resp.json()["error"]

    def test_sheet_read_failure(self, sheets):
        sheets.list_bookings.side_effect = DeliveryError("Failed to read Google Sheets: 403")
        client = _client(settings=make_settings(admin_api_key="", debug=True), sheets=sheets)
        assert client.get("/api/bookings").status_code == 502
