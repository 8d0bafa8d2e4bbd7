"""Shared fixtures for the booking tests."""

import os
import sys

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from booking.config import Settings


def make_settings(**overrides) -> Settings:
    """Settings isolated from .env and from any provider credentials in the shell."""
    values = {
        "google_sheet_id": "",
        "google_access_token": "",
        "admin_email": "ops@example.com",
        "gmail_sender_email": "",
        "gmail_app_password": "",
        "company_whatsapp_number": "201200272020",
        "twilio_account_sid": "",
        "twilio_auth_token": "",
        "messagebird_api_key": "",
        "whatsapp_business_token": "",
        "whatsapp_business_phone_id": "",
        "admin_api_key": "",
        "debug": False,
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


@pytest.fixture
def settings():
    return make_settings()


@pytest.fixture
def valid_payload():
    return {
        "name": "Ahmed Hassan",
        "startPoint": "Cairo Airport",
        "endPoint": "Nile Hotel",
        "tripType": "1-way",
        "passengers": "2",
        "pickupDate": "2025-03-01",
        "pickupTime": "14:00",
    }
