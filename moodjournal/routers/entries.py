# entries router: record, list, edit and delete daily journal entries
# one entry per profile per day: posting for an existing date replaces it

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, status, Query, Path

from moodjournal.models.entry import EntryCreate, EntryUpdate, JournalEntry
from moodjournal.services.entry_store import EntryStore
from moodjournal.dependencies import get_entry_store

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/profiles/{profile_id}/entries", tags=["entries"])

DATE_PATTERN = r"^\d{4}-\d{2}-\d{2}$"


@router.get("", response_model=list[JournalEntry])
async def list_entries(
    start: Optional[str] = Query(None, pattern=DATE_PATTERN),
    end: Optional[str] = Query(None, pattern=DATE_PATTERN),
    store: EntryStore = Depends(get_entry_store),
):
    """list entries in ascending date order, optionally limited to start..end (inclusive)"""
    if start is None and end is None:
        return list(store.snapshot())

    if start and end and start > end:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="start must not be after end",
        )
    return store.entries_in_range(start or "0000-01-01", end or "9999-12-31")


@router.get("/{date}", response_model=JournalEntry)
async def get_entry_for_date(
    date: str = Path(..., pattern=DATE_PATTERN),
    store: EntryStore = Depends(get_entry_store),
):
    entry = store.entry_for_date(date)
    if entry is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"No entry for {date}",
        )
    return entry


@router.post("", response_model=JournalEntry, status_code=status.HTTP_201_CREATED)
async def create_entry(
    body: EntryCreate,
    store: EntryStore = Depends(get_entry_store),
):
    """record a day, replaces any existing entry for the same date"""
    return await store.add_entry(body)


@router.patch("/{entry_id}", response_model=JournalEntry)
async def update_entry(
    body: EntryUpdate,
    entry_id: str = Path(...),
    store: EntryStore = Depends(get_entry_store),
):
    updated = await store.update_entry(entry_id, body)
    if updated is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Entry not found",
        )
    return updated


@router.delete("/{entry_id}")
async def delete_entry(
    entry_id: str = Path(...),
    store: EntryStore = Depends(get_entry_store),
):
    deleted = await store.delete_entry(entry_id)
    if not deleted:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Entry not found",
        )
    return {"message": "Entry deleted"}
