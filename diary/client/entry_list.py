from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

from diary.app.schemas.entries import parse_entry_date

EMPTY_MESSAGE = "No diary entries yet."
DATE_FORMAT = "%A, %B %d, %Y"


@dataclass
class EntryCard:
    id: str
    date: str
    mood: int
    learned: str
    improvements: str
    gratitude: List[str] = field(default_factory=list)
    looking_forward: str = ""
    news: str = ""


def format_entry_date(value: Any) -> str:
    try:
        return parse_entry_date(value).strftime(DATE_FORMAT)
    except ValueError:
        return str(value)


class DiaryList:
    """Renders entries and forwards edit/delete requests to the page."""

    def __init__(
        self,
        entries: List[Dict[str, Any]],
        on_edit: Callable[[Dict[str, Any]], Any],
        on_delete: Callable[[str], Any],
        disabled: bool = False,
    ):
        self.entries = entries or []
        self.on_edit = on_edit
        self.on_delete = on_delete
        self.disabled = disabled

    @property
    def is_empty(self) -> bool:
        return not self.entries

    def cards(self) -> List[EntryCard]:
        return [
            EntryCard(
                id=entry.get("id", ""),
                date=format_entry_date(entry.get("date")),
                mood=entry.get("mood"),
                learned=entry.get("learned", ""),
                improvements=entry.get("improvements", ""),
                gratitude=list(entry.get("gratitude") or []),
                looking_forward=entry.get("lookingForward", ""),
                news=entry.get("news", ""),
            )
            for entry in self.entries
        ]

    def _find(self, entry_id: str) -> Optional[Dict[str, Any]]:
        return next((entry for entry in self.entries if entry.get("id") == entry_id), None)

    def edit(self, entry_id: str) -> bool:
        if self.disabled:
            return False
        entry = self._find(entry_id)
        if entry is None:
            return False
        self.on_edit(entry)
        return True

    def delete(self, entry_id: str) -> bool:
        if self.disabled or self._find(entry_id) is None:
            return False
        self.on_delete(entry_id)
        return True

    def render_text(self) -> str:
        if self.is_empty:
            return EMPTY_MESSAGE

        blocks = []
        for number, card in enumerate(self.cards(), start=1):
            lines = [
                f"[{number}] {card.date}  mood {card.mood}/10",
                f"    Learned:           {card.learned}",
                f"    Improvements:      {card.improvements}",
                "    Grateful for:",
            ]
            lines.extend(f"      - {item}" for item in card.gratitude)
            lines.append(f"    Looking forward:   {card.looking_forward}")
            lines.append(f"    News:              {card.news}")
            blocks.append("\n".join(lines))
        return "\n\n".join(blocks)
