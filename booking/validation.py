"""Form validation for booking submissions.

Turns a raw JSON mapping into a ``BookingRequest`` or raises
``BookingValidationError`` listing every field that failed, so the form
can highlight all problems after a single round trip.
"""

from __future__ import annotations

from typing import Any, Mapping

from pydantic import ValidationError

from booking.errors import BookingValidationError, FieldViolation
from booking.models.booking import BookingRequest

# JSON field order, used to report violations in form order.
FIELD_ORDER = (
    "name",
    "startPoint",
    "endPoint",
    "tripType",
    "passengers",
    "pickupDate",
    "pickupTime",
    "contactNumber",
    "specialRequests",
)


def validate_booking(raw: Mapping[str, Any]) -> BookingRequest:
    """Validate a raw booking payload.

    Raises:
        BookingValidationError: if any field is missing or malformed.
        TypeError: if ``raw`` is not a mapping at all (a parse error, not
            a validation error).
    """
    if not isinstance(raw, Mapping):
        raise TypeError(f"Booking payload must be an object, got {type(raw).__name__}")

    try:
        return BookingRequest.model_validate(dict(raw))
    except ValidationError as exc:
        raise BookingValidationError(_to_violations(exc)) from None


def _to_violations(exc: ValidationError) -> list[FieldViolation]:
    violations: list[FieldViolation] = []
    for err in exc.errors():
        field = str(err["loc"][0]) if err["loc"] else "__root__"
        code = err["type"]
        message = err["msg"]
        if code == "missing":
            message = f"{field} is required"
        violations.append(FieldViolation(field=field, code=code, message=message))

    rank = {name: i for i, name in enumerate(FIELD_ORDER)}
    violations.sort(key=lambda v: rank.get(v.field, len(rank)))
    return violations
