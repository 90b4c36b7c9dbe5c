# data router: export, import and wipe a profile's journal

import logging
from datetime import datetime
from typing import Any

from fastapi import APIRouter, Body, Depends, HTTPException, status

from moodjournal.services.entry_store import EntryStore, StoreError
from moodjournal.dependencies import get_entry_store, get_now

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/profiles/{profile_id}/data", tags=["data"])


@router.get("/export")
async def export_data(
    store: EntryStore = Depends(get_entry_store),
    now: datetime = Depends(get_now),
):
    return store.export_data(now)


@router.post("/import")
async def import_data(
    payload: Any = Body(...),
    store: EntryStore = Depends(get_entry_store),
):
    """replace all entries with the contents of an export"""
    try:
        imported = await store.import_data(payload)
    except StoreError as e:
        logger.warning(f"Rejected import for profile {store.profile_id}: {e}")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        )
    return {"imported": imported}


@router.delete("")
async def clear_data(store: EntryStore = Depends(get_entry_store)):
    """delete every entry and custom item of the profile"""
    await store.clear()
    return {"message": "All data deleted"}
