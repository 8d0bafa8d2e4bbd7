"""Application configuration via environment variables."""

from __future__ import annotations

import logging

from pydantic_settings import BaseSettings

log = logging.getLogger("booking.config")


class Settings(BaseSettings):
    # Google Sheets
    google_sheet_id: str = ""
    google_access_token: str = ""
    google_sheet_name: str = "Sheet1"

    # Email
    admin_email: str = "info@perfectcompany.com"
    gmail_sender_email: str = ""
    gmail_app_password: str = ""

    # Company details used in customer-facing messages
    company_name: str = "Perfect Limo Egypt"
    company_tagline: str = "Luxury Transportation in Egypt"
    company_phone_display: str = "+20 120 027 2020"
    company_whatsapp_number: str = "201200272020"

    # Twilio WhatsApp
    twilio_account_sid: str = ""
    twilio_auth_token: str = ""
    twilio_whatsapp_number: str = "whatsapp:+14155238886"

    # MessageBird WhatsApp
    messagebird_api_key: str = ""
    messagebird_whatsapp_number: str = "whatsapp:+14155238886"

    # WhatsApp Business (Meta Graph API)
    whatsapp_business_token: str = ""
    whatsapp_business_phone_id: str = ""

    # Admin auth
    admin_api_key: str = ""

    # Timeouts (seconds)
    http_timeout_seconds: float = 10.0
    channel_timeout_seconds: float = 20.0

    booking_id_prefix: str = "PC"

    # Server
    host: str = "127.0.0.1"
    port: int = 8080
    debug: bool = False

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}

    @property
    def sheets_configured(self) -> bool:
        return bool(self.google_sheet_id and self.google_access_token)

    @property
    def gmail_configured(self) -> bool:
        return bool(self.gmail_sender_email and self.gmail_app_password)

    def validate_startup(self) -> list[str]:
        """Validate configuration at startup. Returns warnings, raises on errors."""
        warnings: list[str] = []
        _placeholders = {"YOUR_GOOGLE_SHEET_ID_HERE", "AC...", "ya29..."}

        if self.channel_timeout_seconds <= 0 or self.http_timeout_seconds <= 0:
            raise ValueError("Timeouts must be positive numbers of seconds.")

        if not self.sheets_configured:
            warnings.append(
                "GOOGLE_SHEET_ID / GOOGLE_ACCESS_TOKEN not set. "
                "Bookings will not be written to the spreadsheet."
            )
        elif self.google_sheet_id in _placeholders:
            warnings.append("GOOGLE_SHEET_ID is a placeholder; spreadsheet writes will fail.")

        if not self.gmail_configured:
            warnings.append("Gmail credentials not set. Booking emails are logged only.")

        if not (
            (self.twilio_account_sid and self.twilio_auth_token)
            or self.messagebird_api_key
            or (self.whatsapp_business_token and self.whatsapp_business_phone_id)
        ):
            warnings.append(
                "No WhatsApp provider configured. Customers get a manual wa.me link."
            )
        elif self.twilio_account_sid in _placeholders:
            warnings.append("TWILIO_ACCOUNT_SID is a placeholder; WhatsApp sends will fail.")

        if not self.admin_api_key:
            if self.debug:
                warnings.append("ADMIN_API_KEY not set. Admin APIs are open (DEBUG=true).")
            else:
                warnings.append(
                    "ADMIN_API_KEY not set. Admin APIs are locked in production. "
                    "Set ADMIN_API_KEY in .env to enable admin access."
                )

        return warnings


settings = Settings()
