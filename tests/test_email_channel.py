"""Tests for the email channel and its mail senders."""

from datetime import datetime, timezone
from unittest.mock import AsyncMock, patch

import pytest

from booking.channels.base import DeliveryContext, DeliveryStatus
from booking.channels.email import (
    EmailChannel,
    EmailMessage,
    GmailSender,
    LogMailSender,
    build_booking_email,
    build_mail_sender,
)
from booking.errors import DeliveryError
from booking.validation import validate_booking

from conftest import make_settings

RECEIVED_AT = datetime(2025, 2, 20, 9, 30, tzinfo=timezone.utc)


class TestBuildBookingEmail:
    def test_subject_and_fields(self, valid_payload):
        msg = build_booking_email(validate_booking(valid_payload), "ops@example.com", RECEIVED_AT)

        assert msg.to == "ops@example.com"
        assert msg.subject == "New Limousine Booking - Ahmed Hassan"
        assert "- Pick-up Location: Cairo Airport" in msg.text
        assert "- Drop-off Location: Nile Hotel" in msg.text
        assert "- Trip Type: One Way" in msg.text
        assert "- Passengers: 2" in msg.text
        assert "- Booking Time: 2025-02-20 09:30:00 UTC" in msg.text
        assert "<strong>Trip Type:</strong> One Way" in msg.html
        assert "Special Requests" not in msg.text
        assert "Special Requests" not in msg.html

    def test_optional_fields_included(self, valid_payload):
        valid_payload.update(contactNumber="+201234567890", specialRequests="Need a child seat")
        msg = build_booking_email(validate_booking(valid_payload), "ops@example.com", RECEIVED_AT)
        assert "- Special Requests: Need a child seat" in msg.text
        assert "- Contact Number: +201234567890" in msg.text

    def test_html_is_escaped(self, valid_payload):
        valid_payload["specialRequests"] = "<script>alert(1)</script>"
        msg = build_booking_email(validate_booking(valid_payload), "ops@example.com", RECEIVED_AT)
        assert "<script>" not in msg.html
        assert "&lt;script&gt;" in msg.html

    def test_deterministic(self, valid_payload):
        booking = validate_booking(valid_payload)
        first = build_booking_email(booking, "ops@example.com", RECEIVED_AT)
        second = build_booking_email(booking, "ops@example.com", RECEIVED_AT)
        assert first == second


class TestEmailChannel:
    @pytest.fixture
    def context(self):
        return DeliveryContext(booking_id="PC1", confirmation_text="", received_at=RECEIVED_AT)

    async def test_hands_message_to_sender(self, valid_payload, context):
        sender = AsyncMock()
        channel = EmailChannel(make_settings(admin_email="office@limo.example"), sender=sender)

        outcome = await channel.deliver(validate_booking(valid_payload), context)

        assert outcome.status is DeliveryStatus.DELIVERED
        sender.send.assert_awaited_once()
        message = sender.send.call_args.args[0]
        assert isinstance(message, EmailMessage)
        assert message.to == "office@limo.example"

    async def test_default_recipient(self, valid_payload, context):
        sender = AsyncMock()
        channel = EmailChannel(make_settings(admin_email=""), sender=sender)
        await channel.deliver(validate_booking(valid_payload), context)
        assert sender.send.call_args.args[0].to == "info@perfectcompany.com"

    async def test_sender_error_propagates(self, valid_payload, context):
        sender = AsyncMock()
        sender.send.side_effect = DeliveryError("smtp down")
        channel = EmailChannel(make_settings(), sender=sender)
        with pytest.raises(DeliveryError):
            await channel.deliver(validate_booking(valid_payload), context)


class TestMailSenders:
    def test_log_sender_by_default(self):
        assert isinstance(build_mail_sender(make_settings()), LogMailSender)

    def test_gmail_when_configured(self):
        sender = build_mail_sender(
            make_settings(gmail_sender_email="bot@gmail.com", gmail_app_password="app-pass")
        )
        assert isinstance(sender, GmailSender)

    def test_gmail_needs_both_credentials(self):
        sender = build_mail_sender(make_settings(gmail_sender_email="bot@gmail.com"))
        assert isinstance(sender, LogMailSender)

    async def test_log_sender_never_fails(self):
        await LogMailSender().send(EmailMessage("a@b.c", "subject", "<p>x</p>", "x"))

    async def test_gmail_sends_html(self):
        with patch("booking.channels.email.yagmail.SMTP") as mock_smtp:
            sender = GmailSender("bot@gmail.com", "app-pass")
            await sender.send(EmailMessage("a@b.c", "subject", "<p>x</p>", "x"))

        mock_smtp.assert_called_once_with(user="bot@gmail.com", password="app-pass")
        mock_smtp.return_value.send.assert_called_once_with(
            to="a@b.c", subject="subject", contents="<p>x</p>"
        )
        mock_smtp.return_value.close.assert_called_once()

    async def test_gmail_failure_is_delivery_error(self):
        with patch("booking.channels.email.yagmail.SMTP", side_effect=Exception("auth failed")):
            sender = GmailSender("bot@gmail.com", "wrong")
            with pytest.raises(DeliveryError, match="auth failed"):
                await sender.send(EmailMessage("a@b.c", "subject", "<p>x</p>", "x"))
