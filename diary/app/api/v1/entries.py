import asyncio
from fastapi import APIRouter, Body, Depends
from sqlalchemy.orm import Session
from typing import List, Dict, Any

from diary.app.config import Settings
from diary.app.core.exceptions import StoreTimeoutError
from diary.app.schemas.entries import (
    DiaryEntryCreate,
    DiaryEntryResponse,
    DeleteEntryResponse,
    ENTRY_EXAMPLE
)
from diary.app.services.entry_service import (
    list_entries,
    get_entry,
    create_entry,
    update_entry,
    delete_entry
)
from diary.app.database import DiaryStore, get_store, get_app_settings, get_db_session

router = APIRouter()

# Request schema for the docs; DiaryEntryCreate runs in the service, after the
# id lookup on update
ENTRY_BODY = {
    "requestBody": {
        "content": {"application/json": {"schema": DiaryEntryCreate.model_json_schema()}}
    }
}

@router.get("", response_model=List[DiaryEntryResponse])
async def get_entries(
    store: DiaryStore = Depends(get_store),
    settings: Settings = Depends(get_app_settings)
):
    """
    Get all diary entries, newest date first.

    - Connecting and querying share one time budget (LIST_TIMEOUT_SECONDS)
    - An empty diary returns an empty list
    """
    def load():
        db = store.session()
        try:
            return [DiaryEntryResponse.model_validate(entry) for entry in list_entries(db)]
        finally:
            db.close()

    loop = asyncio.get_running_loop()
    try:
        return await asyncio.wait_for(
            loop.run_in_executor(None, load), timeout=settings.list_timeout_seconds
        )
    except asyncio.TimeoutError:
        raise StoreTimeoutError(
            "Timed out loading entries",
            f"The store did not answer within {settings.list_timeout_seconds:g} seconds",
        )

@router.post("", response_model=DiaryEntryResponse, status_code=201, openapi_extra=ENTRY_BODY)
async def create(
    payload: Dict[str, Any] = Body(..., examples=[ENTRY_EXAMPLE]),
    db: Session = Depends(get_db_session),
    settings: Settings = Depends(get_app_settings)
):
    """
    Create a new diary entry.

    - All seven fields are required; mood must be 1-10
    - Blank gratitude items are dropped before saving
    """
    return create_entry(db, payload, settings.gratitude_limit)

@router.get("/{entry_id}", response_model=DiaryEntryResponse)
async def get_one(
    entry_id: str,
    db: Session = Depends(get_db_session)
):
    """Get a specific diary entry by ID."""
    return get_entry(db, entry_id)

@router.put("/{entry_id}", response_model=DiaryEntryResponse, openapi_extra=ENTRY_BODY)
async def update(
    entry_id: str,
    payload: Dict[str, Any] = Body(..., examples=[ENTRY_EXAMPLE]),
    db: Session = Depends(get_db_session),
    settings: Settings = Depends(get_app_settings)
):
    """
    Replace an existing diary entry.

    - The id comes from the path; ids in the body are ignored
    - Runs the same validation as create
    """
    return update_entry(db, entry_id, payload, settings.gratitude_limit)

@router.delete("/{entry_id}", response_model=DeleteEntryResponse)
async def delete(
    entry_id: str,
    db: Session = Depends(get_db_session)
):
    """Delete a diary entry."""
    return delete_entry(db, entry_id)
