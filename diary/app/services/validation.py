"""
Validation shared by the API handlers and the client form.

``validate_entry`` runs the payload through ``DiaryEntryCreate`` and never
raises; it returns a ``ValidationResult`` holding the field errors and, when
the payload is usable, the cleaned values. Pydantic reports errors in model
field order, which is also the form's order, so the first error is the one
the form shows.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from pydantic import ValidationError as PydanticValidationError

from diary.app.schemas.entries import (
    DATE_MESSAGE,
    GRATITUDE_TYPE_MESSAGE,
    MOOD_MAX,
    MOOD_MIN,
    MOOD_TYPE_MESSAGE,
    DiaryEntryCreate,
)

MISSING_MESSAGES = {
    "date": "Please choose a date",
    "mood": "Please rate your mood from 1 to 10",
    "learned": "Please enter what you learned today",
    "improvements": "Please enter what could be improved",
    "gratitude": "Please enter at least one thing you are grateful for",
    "lookingForward": "Please enter what you are looking forward to",
    "news": "Please enter today's news",
}

MOOD_RANGE_MESSAGE = f"Mood must be between {MOOD_MIN} and {MOOD_MAX}"

# Messages for pydantic's built-in error types, by field
INVALID_MESSAGES = {
    "date": DATE_MESSAGE,
    "mood": MOOD_TYPE_MESSAGE,
    "gratitude": GRATITUDE_TYPE_MESSAGE,
}

# Error types raised by DiaryEntryCreate's own validators carry their final message
CUSTOM_ERROR_TYPES = {"date_format", "mood_type", "gratitude_type", "gratitude_cap"}


@dataclass
class FieldError:
    field: str
    message: str
    missing: bool = False


@dataclass
class ValidationResult:
    errors: List[FieldError] = field(default_factory=list)
    cleaned: Dict[str, Any] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.errors

    @property
    def missing_fields(self) -> List[str]:
        return [err.field for err in self.errors if err.missing]

    @property
    def first_message(self) -> Optional[str]:
        return self.errors[0].message if self.errors else None


def _field_error(error: Dict[str, Any]) -> FieldError:
    loc = error.get("loc") or ()
    name = str(loc[0]) if loc else "body"
    kind = error["type"]

    if name == "body":
        return FieldError("body", "Entry payload must be a JSON object")
    if kind in ("missing", "blank"):
        return FieldError(name, MISSING_MESSAGES.get(name, error["msg"]), missing=True)
    if kind in CUSTOM_ERROR_TYPES:
        return FieldError(name, error["msg"])
    if name == "mood" and kind in ("greater_than_equal", "less_than_equal"):
        return FieldError(name, MOOD_RANGE_MESSAGE)
    return FieldError(name, INVALID_MESSAGES.get(name, f"{name} must be text"))


def validate_entry(payload: Dict[str, Any], max_gratitude: Optional[int] = 3) -> ValidationResult:
    """Validate a candidate entry payload (camelCase keys)."""
    try:
        entry = DiaryEntryCreate.model_validate(payload, context={"max_gratitude": max_gratitude})
    except PydanticValidationError as exc:
        errors: List[FieldError] = []
        for error in exc.errors():
            field_error = _field_error(error)
            # One message per field, the first pydantic reports
            if all(existing.field != field_error.field for existing in errors):
                errors.append(field_error)
        return ValidationResult(errors=errors)

    return ValidationResult(cleaned=entry.model_dump(by_alias=True))


def describe_errors(errors: List[FieldError]) -> str:
    """One line naming the missing fields, followed by any other problems."""
    missing = [err.field for err in errors if err.missing]
    parts = []
    if missing:
        parts.append(f"Missing required fields: {', '.join(missing)}")
    parts.extend(err.message for err in errors if not err.missing)
    return "; ".join(parts)
