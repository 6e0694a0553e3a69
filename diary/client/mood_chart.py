from datetime import date
from typing import Any, Dict, List, Tuple

from diary.app.schemas.entries import MOOD_MAX, MOOD_MIN, parse_entry_date

LABEL_FORMAT = "%m/%d"


class MoodChart:
    """Mood (y, fixed 1-10) over date (x, chronological) for the loaded entries."""

    title = "Mood trend"

    def __init__(self, entries: List[Dict[str, Any]]):
        self.entries = entries or []

    def points(self) -> List[Tuple[date, int]]:
        points = []
        for entry in self.entries:
            try:
                points.append((parse_entry_date(entry.get("date")), int(entry.get("mood"))))
            except (TypeError, ValueError):
                continue
        return sorted(points, key=lambda point: point[0])

    def labels(self) -> List[str]:
        return [day.strftime(LABEL_FORMAT) for day, _ in self.points()]

    @staticmethod
    def ticks() -> List[int]:
        return list(range(MOOD_MIN, MOOD_MAX + 1))

    def config(self) -> Dict[str, Any]:
        """Line-chart description: labels, one mood dataset and a fixed y axis."""
        return {
            "type": "line",
            "data": {
                "labels": self.labels(),
                "datasets": [
                    {"label": "Mood", "data": [mood for _, mood in self.points()]},
                ],
            },
            "options": {
                "plugins": {"title": {"display": True, "text": self.title}},
                "scales": {
                    "y": {"min": MOOD_MIN, "max": MOOD_MAX, "ticks": {"stepSize": 1}},
                },
            },
        }

    def render_text(self) -> str:
        points = self.points()
        if not points:
            return f"{self.title}: no data"

        labels = self.labels()
        width = max(len(label) for label in labels) + 1
        rows = [self.title]
        for level in reversed(self.ticks()):
            cells = "".join(
                ("*" if mood == level else " ").center(width) for _, mood in points
            )
            rows.append(f"{level:>2} |{cells}")
        rows.append("   +" + "-" * (width * len(points)))
        rows.append("    " + "".join(label.center(width) for label in labels))
        return "\n".join(rows)
