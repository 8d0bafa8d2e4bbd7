"""Pydantic models for booking requests and confirmations."""

from __future__ import annotations

import re
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, ValidationInfo, field_validator
from pydantic.alias_generators import to_camel
from pydantic_core import PydanticCustomError

PASSENGER_OPTIONS = ("1", "2", "3", "4", "5", "6+")

NAME_MIN_LENGTH = 2
NAME_MAX_LENGTH = 50
SPECIAL_REQUESTS_MAX_LENGTH = 500

_NAME_PATTERN = re.compile(r"[A-Za-z\s]+")
_PHONE_PATTERN = re.compile(r"\+?[1-9]\d{1,14}")

REQUIRED_FIELDS = (
    "name",
    "start_point",
    "end_point",
    "passengers",
    "pickup_date",
    "pickup_time",
)


class TripType(str, Enum):
    ONE_WAY = "1-way"
    ROUND_TRIP = "2-way"

    @property
    def label(self) -> str:
        """Human-readable form used in messages and spreadsheet rows."""
        return "One Way" if self is TripType.ONE_WAY else "Round Trip"


class BookingRequest(BaseModel):
    """A validated booking form submission.

    JSON uses camelCase (``startPoint``); attributes are snake_case.
    Constructing the model runs every field check, and pydantic collects
    all failures instead of stopping at the first one.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )

    name: str
    start_point: str
    end_point: str
    trip_type: TripType
    passengers: str
    pickup_date: str
    pickup_time: str
    contact_number: Optional[str] = None
    special_requests: Optional[str] = None

    @field_validator(*REQUIRED_FIELDS, mode="before")
    @classmethod
    def _require_value(cls, value: Any, info: ValidationInfo) -> Any:
        if isinstance(value, int) and not isinstance(value, bool):
            value = str(value)
        if value is None or (isinstance(value, str) and not value.strip()):
            raise PydanticCustomError(
                "missing",
                "{field} is required",
                {"field": to_camel(info.field_name)},
            )
        if isinstance(value, str):
            return value.strip()
        return value

    @field_validator("name")
    @classmethod
    def _check_name(cls, value: str) -> str:
        if len(value) < NAME_MIN_LENGTH:
            raise PydanticCustomError("name_too_short", "Name must be at least 2 characters")
        if len(value) > NAME_MAX_LENGTH:
            raise PydanticCustomError("name_too_long", "Name must be less than 50 characters")
        if not _NAME_PATTERN.fullmatch(value):
            raise PydanticCustomError(
                "name_format", "Name can only contain letters and spaces"
            )
        return value

    @field_validator("trip_type", mode="before")
    @classmethod
    def _check_trip_type(cls, value: Any) -> Any:
        if value is None or (isinstance(value, str) and not value.strip()):
            raise PydanticCustomError("missing", "tripType is required")
        if isinstance(value, TripType):
            return value
        if not isinstance(value, str) or value.strip() not in {t.value for t in TripType}:
            raise PydanticCustomError("trip_type", "Please select a trip type")
        return value.strip()

    @field_validator("passengers")
    @classmethod
    def _check_passengers(cls, value: str) -> str:
        if value not in PASSENGER_OPTIONS:
            raise PydanticCustomError(
                "passengers", "Please select number of passengers"
            )
        return value

    @field_validator("contact_number", mode="before")
    @classmethod
    def _check_contact_number(cls, value: Any) -> Optional[str]:
        if value is None:
            return None
        if not isinstance(value, str):
            raise PydanticCustomError(
                "phone_format", "Please enter a valid phone number (e.g., +1234567890)"
            )
        compact = re.sub(r"\s", "", value)
        if not compact:
            return None
        if not _PHONE_PATTERN.fullmatch(compact):
            raise PydanticCustomError(
                "phone_format", "Please enter a valid phone number (e.g., +1234567890)"
            )
        return compact

    @field_validator("special_requests", mode="before")
    @classmethod
    def _check_special_requests(cls, value: Any) -> Optional[str]:
        if value is None:
            return None
        if not isinstance(value, str):
            raise PydanticCustomError(
                "special_requests", "Special requests must be text"
            )
        if len(value) > SPECIAL_REQUESTS_MAX_LENGTH:
            raise PydanticCustomError(
                "special_requests_too_long",
                "Special requests must be less than 500 characters",
            )
        return value.strip() or None


class BookingConfirmation(BaseModel):
    """Result handed back to the customer once a booking is received."""

    booking_id: str
    message: str
    success: bool = True
