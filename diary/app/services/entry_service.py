import logging
from datetime import datetime
from typing import List, Optional, Dict, Any

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from diary.app.core.exceptions import NotFoundError, StoreError, ValidationError
from diary.app.models.models import DiaryEntry
from diary.app.services.validation import validate_entry

logger = logging.getLogger(__name__)


def _apply_fields(entry: DiaryEntry, cleaned: Dict[str, Any]) -> None:
    entry.date = cleaned["date"]
    entry.mood = cleaned["mood"]
    entry.learned = cleaned["learned"]
    entry.improvements = cleaned["improvements"]
    entry.gratitude = list(cleaned["gratitude"])
    entry.looking_forward = cleaned["lookingForward"]
    entry.news = cleaned["news"]


def _validated(payload: Dict[str, Any], max_gratitude: Optional[int], action: str) -> Dict[str, Any]:
    result = validate_entry(payload, max_gratitude)
    if not result.ok:
        logger.warning("Rejected entry %s: %s", action, [err.field for err in result.errors])
        raise ValidationError(f"Failed to {action} entry", result.errors)
    return result.cleaned


def _find(db: Session, entry_id: str) -> DiaryEntry:
    try:
        entry = db.query(DiaryEntry).filter(DiaryEntry.id == entry_id).first()
    except SQLAlchemyError as exc:
        logger.exception("Failed to look up entry %s", entry_id)
        raise StoreError("Failed to load entry", str(exc)) from exc

    if not entry:
        raise NotFoundError(entry_id)
    return entry


def _commit(db: Session, action: str) -> None:
    try:
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("Failed to %s entry", action)
        raise StoreError(f"Failed to {action} entry", str(exc)) from exc


def list_entries(db: Session) -> List[DiaryEntry]:
    """Get all entries, newest date first"""
    try:
        entries = (
            db.query(DiaryEntry)
            .order_by(DiaryEntry.date.desc(), DiaryEntry.created_at.desc())
            .all()
        )
    except SQLAlchemyError as exc:
        logger.exception("Failed to list entries")
        raise StoreError("Failed to list entries", str(exc)) from exc

    logger.info("Loaded %d diary entries", len(entries))
    return entries


def get_entry(db: Session, entry_id: str) -> DiaryEntry:
    """Get a specific entry by ID"""
    return _find(db, entry_id)


def create_entry(db: Session, payload: Dict[str, Any], max_gratitude: Optional[int] = 3) -> DiaryEntry:
    """Validate and insert a new entry. Nothing is written when validation fails."""
    cleaned = _validated(payload, max_gratitude, "create")

    entry = DiaryEntry()
    _apply_fields(entry, cleaned)
    db.add(entry)
    _commit(db, "create")
    db.refresh(entry)

    logger.info("Created diary entry %s for %s", entry.id, entry.date)
    return entry


def update_entry(
    db: Session, entry_id: str, payload: Dict[str, Any], max_gratitude: Optional[int] = 3
) -> DiaryEntry:
    """
    Replace all mutable fields of an existing entry.

    The lookup happens first, so an unknown id is reported as not found even
    when the payload is also invalid. ``id`` and ``createdAt`` in the body are
    ignored.
    """
    entry = _find(db, entry_id)
    cleaned = _validated(payload, max_gratitude, "update")

    _apply_fields(entry, cleaned)
    # onupdate only fires when a column changed
    entry.updated_at = datetime.utcnow()
    _commit(db, "update")
    db.refresh(entry)

    logger.info("Updated diary entry %s", entry.id)
    return entry


def delete_entry(db: Session, entry_id: str) -> Dict[str, Any]:
    """Delete an entry"""
    entry = _find(db, entry_id)

    db.delete(entry)
    _commit(db, "delete")

    logger.info("Deleted diary entry %s", entry_id)
    return {"message": "Entry deleted", "id": entry_id}
