"""Error taxonomy for the booking pipeline.

Validation errors stop the request and go back to the caller.
Configuration and delivery errors stay inside a single channel and are
turned into a NotificationOutcome by the dispatcher.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class FieldViolation:
    """One problem with one submitted field."""

    field: str  # JSON field name, e.g. "startPoint"
    code: str
    message: str

    def to_dict(self) -> dict[str, str]:
        return {"field": self.field, "code": self.code, "message": self.message}


class BookingError(Exception):
    """Base class for booking pipeline errors."""


class BookingValidationError(BookingError):
    """The submitted form was rejected. Carries every violation found."""

    def __init__(self, violations: list[FieldViolation]) -> None:
        self.violations = violations
        super().__init__("; ".join(v.message for v in violations))

    @property
    def first_error(self) -> str:
        """Message for single-error responses; missing fields win."""
        for v in self.violations:
            if v.code == "missing":
                return v.message
        return self.violations[0].message if self.violations else "Invalid booking"


class ConfigurationError(BookingError):
    """A channel is missing the credentials it needs. No network call was made."""


class DeliveryError(BookingError):
    """A configured channel rejected the call or could not be reached."""
