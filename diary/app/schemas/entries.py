from pydantic import BaseModel, Field, TypeAdapter, ValidationInfo, field_validator
from pydantic import ValidationError as PydanticValidationError
from pydantic_core import PydanticCustomError
from typing import Any, List
import datetime as dt

MOOD_MIN = 1
MOOD_MAX = 10
DEFAULT_MAX_GRATITUDE = 3

DATE_MESSAGE = "Date must be an ISO-8601 date (YYYY-MM-DD)"
MOOD_TYPE_MESSAGE = "Mood must be a whole number"
GRATITUDE_TYPE_MESSAGE = "Gratitude must be a list of text items"

_DATE = TypeAdapter(dt.date)
_DATETIME = TypeAdapter(dt.datetime)

def parse_entry_date(value: Any) -> dt.date:
    """Accept a date, a datetime or an ISO-8601 string and return the calendar date."""
    if isinstance(value, dt.datetime):
        return value.date()
    if isinstance(value, dt.date):
        return value
    if not isinstance(value, str):
        raise ValueError(f"unsupported date value {value!r}")

    text = value.strip()
    try:
        return _DATE.validate_python(text)
    except PydanticValidationError:
        # Datetimes with a time of day are truncated to their date
        return _DATETIME.validate_python(text).date()

def clean_gratitude(items: List[Any]) -> List[str]:
    """Drop blank gratitude items, keeping the rest in order."""
    return [item for item in items if isinstance(item, str) and item.strip()]

def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())

def _blank() -> PydanticCustomError:
    return PydanticCustomError("blank", "Field is required")

class DiaryEntryBase(BaseModel):
    date: dt.date
    mood: int = Field(..., ge=MOOD_MIN, le=MOOD_MAX)
    learned: str
    improvements: str
    gratitude: List[str]
    looking_forward: str = Field(..., alias="lookingForward")
    news: str

class DiaryEntryCreate(DiaryEntryBase):
    """
    Request body for create and update.

    Pass ``context={"max_gratitude": n}`` to ``model_validate`` to change the
    gratitude cap; ``None`` disables it.
    """

    @field_validator("date", mode="before")
    @classmethod
    def coerce_date(cls, v: Any) -> dt.date:
        if _is_blank(v):
            raise _blank()
        try:
            return parse_entry_date(v)
        except ValueError:
            raise PydanticCustomError("date_format", DATE_MESSAGE)

    @field_validator("mood", mode="before")
    @classmethod
    def reject_non_numeric_mood(cls, v: Any) -> Any:
        if _is_blank(v):
            raise _blank()
        if isinstance(v, (bool, str)):
            raise PydanticCustomError("mood_type", MOOD_TYPE_MESSAGE)
        return v

    @field_validator("learned", "improvements", "looking_forward", "news", mode="before")
    @classmethod
    def require_text(cls, v: Any) -> Any:
        if _is_blank(v):
            raise _blank()
        return v

    @field_validator("gratitude", mode="before")
    @classmethod
    def clean_gratitude_items(cls, v: Any, info: ValidationInfo) -> List[str]:
        if v is None:
            raise _blank()
        if not isinstance(v, (list, tuple)):
            raise PydanticCustomError("gratitude_type", GRATITUDE_TYPE_MESSAGE)

        items = clean_gratitude(list(v))
        if not items:
            raise _blank()
        limit = (info.context or {}).get("max_gratitude", DEFAULT_MAX_GRATITUDE)
        if limit is not None and len(items) > limit:
            raise PydanticCustomError(
                "gratitude_cap",
                "Gratitude can list at most {max_items} items",
                {"max_items": limit},
            )
        return items

    class Config:
        populate_by_name = True

class DiaryEntryResponse(DiaryEntryBase):
    id: str
    created_at: dt.datetime = Field(..., alias="createdAt")
    updated_at: dt.datetime = Field(..., alias="updatedAt")

    class Config:
        from_attributes = True
        populate_by_name = True

class DeleteEntryResponse(BaseModel):
    message: str
    id: str

# Example body shown in the API docs for create/update
ENTRY_EXAMPLE = {
    "date": "2024-01-01",
    "mood": 7,
    "learned": "Small steps add up",
    "improvements": "Go to bed earlier",
    "gratitude": ["Morning coffee", "A call with an old friend"],
    "lookingForward": "Weekend hike",
    "news": "First snow of the year",
}
