"""
Client-side state for the diary page: the cached entries, the entry being
edited, the in-flight flag and the error/success banners.
"""

import logging
from typing import Any, Callable, Dict, List, Optional

from diary.client.api_client import ApiError, DiaryApiClient
from diary.client.entry_list import DiaryList
from diary.client.form import DiaryForm
from diary.client.mood_chart import MoodChart

logger = logging.getLogger(__name__)


def _always_confirm(message: str) -> bool:
    return True


class DiaryPage:
    def __init__(
        self,
        client: DiaryApiClient,
        confirm: Callable[[str], bool] = _always_confirm,
        max_gratitude: Optional[int] = 3,
    ):
        self.client = client
        self.confirm = confirm
        self.max_gratitude = max_gratitude
        self.entries: List[Dict[str, Any]] = []
        self.editing_entry: Optional[Dict[str, Any]] = None
        self.is_loading = False
        self.is_mutating = False
        self.error: Optional[str] = None
        self.success: Optional[str] = None

    def load(self) -> List[Dict[str, Any]]:
        """Fetch entries. Failures leave an empty list and an error banner."""
        self.is_loading = True
        try:
            self.entries = self.client.list_entries()
            self.error = None
        except ApiError as exc:
            logger.error("Failed to load entries: %s", exc)
            self.entries = []
            self.error = f"Could not load entries: {exc.details or exc.error}"
        finally:
            self.is_loading = False
        return self.entries

    def save(self, payload: Dict[str, Any]) -> bool:
        if self.is_mutating:
            return False

        entry_id = payload.get("id") or (self.editing_entry or {}).get("id")
        body = {key: value for key, value in payload.items() if key != "id"}
        self.is_mutating = True
        try:
            if entry_id:
                self.client.update_entry(entry_id, body)
            else:
                self.client.create_entry(body)
        except ApiError as exc:
            logger.error("Failed to save entry: %s", exc)
            self.error = f"Could not save the entry: {exc.details or exc.error}"
            self.success = None
            return False
        finally:
            self.is_mutating = False

        self.editing_entry = None
        self.load()
        # Success only when the refetch worked too
        self.success = None if self.error else "Entry saved"
        return True

    def delete(self, entry_id: str) -> bool:
        if self.is_mutating or not self.confirm("Delete this entry?"):
            return False

        self.is_mutating = True
        try:
            self.client.delete_entry(entry_id)
        except ApiError as exc:
            logger.error("Failed to delete entry %s: %s", entry_id, exc)
            self.error = f"Could not delete the entry: {exc.details or exc.error}"
            self.success = None
            return False
        finally:
            self.is_mutating = False

        if self.editing_entry and self.editing_entry.get("id") == entry_id:
            self.editing_entry = None
        self.load()
        self.success = None if self.error else "Entry deleted"
        return True

    def start_edit(self, entry: Dict[str, Any]) -> None:
        self.editing_entry = entry
        self.error = None
        self.success = None

    def cancel_edit(self) -> None:
        self.editing_entry = None

    def dismiss_error(self) -> None:
        self.error = None

    def dismiss_success(self) -> None:
        self.success = None

    def form(self) -> DiaryForm:
        return DiaryForm(self.save, initial=self.editing_entry, max_gratitude=self.max_gratitude)

    def entry_list(self) -> DiaryList:
        return DiaryList(self.entries, self.start_edit, self.delete, disabled=self.is_mutating)

    def chart(self) -> MoodChart:
        return MoodChart(self.entries)
