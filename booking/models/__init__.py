"""Data models for the booking layer."""

from .booking import BookingConfirmation, BookingRequest, PASSENGER_OPTIONS, TripType
from .relay import WhatsAppRelayRequest

__all__ = [
    "BookingConfirmation",
    "BookingRequest",
    "PASSENGER_OPTIONS",
    "TripType",
    "WhatsAppRelayRequest",
]
