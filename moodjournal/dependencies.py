# fastapi dependency injection
# provides the current local time and the entry store for the profile in the path

from datetime import datetime
from zoneinfo import ZoneInfo

from fastapi import Depends, Path

from moodjournal.config import settings
from moodjournal.services.db import Database, get_db
from moodjournal.services.entry_store import EntryStore, StoreRegistry, get_store_registry

PROFILE_ID_PATTERN = r"^[A-Za-z0-9_-]{1,64}$"


def get_now() -> datetime:
    """current time in the configured timezone, entry dates are local days"""
    return datetime.now(ZoneInfo(settings.TIMEZONE))


async def get_entry_store(
    profile_id: str = Path(..., pattern=PROFILE_ID_PATTERN),
    db: Database = Depends(get_db),
    registry: StoreRegistry = Depends(get_store_registry),
) -> EntryStore:
    """load (once) and return the entry store for the profile"""
    return await registry.get(profile_id, db)
