"""
Entry form: keeps a draft, validates it the same way the API does and hands
a cleaned payload to the caller's save function.
"""

import logging
import threading
from datetime import date
from typing import Any, Callable, Dict, List, Optional

from diary.app.schemas.entries import clean_gratitude, parse_entry_date
from diary.app.services.validation import validate_entry

logger = logging.getLogger(__name__)

DEFAULT_MOOD = 5
DEFAULT_GRATITUDE_SLOTS = 3

EDITABLE_FIELDS = ["date", "mood", "learned", "improvements", "lookingForward", "news"]


class DiaryForm:
    def __init__(
        self,
        on_submit: Callable[[Dict[str, Any]], Any],
        initial: Optional[Dict[str, Any]] = None,
        max_gratitude: Optional[int] = 3,
    ):
        self.on_submit = on_submit
        self.max_gratitude = max_gratitude
        self.error: Optional[str] = None
        self._in_flight = False
        self._lock = threading.Lock()
        self.entry_id: Optional[str] = initial.get("id") if initial else None
        self.draft = self._draft_from(initial)

    @property
    def slots(self) -> int:
        return self.max_gratitude or DEFAULT_GRATITUDE_SLOTS

    @property
    def is_editing(self) -> bool:
        return self.entry_id is not None

    @property
    def is_submitting(self) -> bool:
        return self._in_flight

    def _draft_from(self, initial: Optional[Dict[str, Any]]) -> Dict[str, Any]:
        if not initial:
            return {
                "date": date.today().isoformat(),
                "mood": DEFAULT_MOOD,
                "learned": "",
                "improvements": "",
                "gratitude": [""] * self.slots,
                "lookingForward": "",
                "news": "",
            }

        draft = {name: initial.get(name, "") for name in EDITABLE_FIELDS}
        if draft["date"]:
            try:
                draft["date"] = parse_entry_date(draft["date"]).isoformat()
            except ValueError:
                pass
        gratitude: List[str] = list(initial.get("gratitude") or [])
        # Pad so every slot is editable
        draft["gratitude"] = gratitude + [""] * max(self.slots - len(gratitude), 0)
        return draft

    def set_field(self, name: str, value: Any) -> None:
        if name not in EDITABLE_FIELDS:
            raise KeyError(f"Unknown form field: {name}")
        self.draft[name] = value

    def set_gratitude(self, index: int, value: str) -> None:
        items = self.draft["gratitude"]
        if index >= len(items):
            items.extend([""] * (index + 1 - len(items)))
        items[index] = value

    def validate(self) -> Optional[str]:
        """Return the first problem with the draft, or None when it can be saved."""
        result = validate_entry(self.draft, self.max_gratitude)
        return result.first_message

    def payload(self) -> Dict[str, Any]:
        data = dict(self.draft)
        data["gratitude"] = clean_gratitude(self.draft["gratitude"])
        if self.entry_id:
            data["id"] = self.entry_id
        return data

    def submit(self) -> bool:
        """
        Validate and save the draft.

        Returns False without calling the save function when the draft is
        invalid or a previous save has not finished yet, and also when the save
        function itself returns False. Exceptions raised by the save function
        propagate after the in-flight flag is cleared.
        """
        with self._lock:
            if self._in_flight:
                logger.debug("Ignoring submit while a save is in flight")
                return False
            self.error = self.validate()
            if self.error:
                return False
            self._in_flight = True

        try:
            saved = self.on_submit(self.payload())
        finally:
            with self._lock:
                self._in_flight = False
        return saved is not False
