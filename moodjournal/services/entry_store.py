# entry store: owns one profile's journal entries and custom catalog items
# loads from mongodb once, applies explicit mutations, writes through on every change
# the stats engine only ever sees a snapshot of frozen entries

import asyncio
import logging
from datetime import datetime, timezone
from typing import Any, Optional
from uuid import uuid4

from pydantic import BaseModel, ValidationError

from moodjournal.models.catalog import (
    Catalog,
    CustomActivityCreate,
    CustomActivityUpdate,
    CustomTriggerCreate,
    CustomTriggerUpdate,
)
from moodjournal.models.entry import (
    DEFAULT_ACTIVITIES,
    DEFAULT_SYMPTOMS,
    DEFAULT_TRIGGERS,
    Activity,
    EntryCreate,
    EntryUpdate,
    JournalEntry,
    Trigger,
)
from moodjournal.models.stats import StatsResult, TimeRange
from moodjournal.services import stats_engine
from moodjournal.services.db import Database

logger = logging.getLogger(__name__)

# fields an update may explicitly clear
_NULLABLE_FIELDS = {"weather", "ai_summary", "ai_advice", "ai_task"}

# custom item kind -> model, and the export key holding that kind
_CUSTOM_KINDS: dict[str, type[BaseModel]] = {"trigger": Trigger, "activity": Activity}
_EXPORT_KEYS = {"trigger": "customTriggers", "activity": "customActivities"}


class StoreError(ValueError):
    """raised when data handed to the store cannot be accepted"""


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class EntryStore:
    """in-memory entries for a single profile, persisted to the entries collection.
    every mutation holds the store lock from the first read to the last write."""

    def __init__(self, db: Database, profile_id: str):
        self.db = db
        self.profile_id = profile_id
        self.version = 0
        self._entries: dict[str, JournalEntry] = {}
        self._custom: dict[str, dict[str, BaseModel]] = {kind: {} for kind in _CUSTOM_KINDS}
        self._loaded = False
        self._lock = asyncio.Lock()
        self._stats_cache: dict[tuple, StatsResult] = {}

    async def load(self):
        """read persisted entries and custom items (once)"""
        if self._loaded:
            return

        entries: dict[str, JournalEntry] = {}
        async for doc in self.db.entries.find({"profile_id": self.profile_id}):
            entry = JournalEntry.model_validate(doc)
            entries[entry.id] = entry

        custom: dict[str, dict[str, BaseModel]] = {kind: {} for kind in _CUSTOM_KINDS}
        async for doc in self.db.custom_items.find({"profile_id": self.profile_id}):
            model = _CUSTOM_KINDS.get(doc.get("kind"))
            if model is None:
                logger.warning(f"Skipping custom item of unknown kind {doc.get('kind')!r}")
                continue
            item = model.model_validate(doc)
            custom[doc["kind"]][item.id] = item

        self._entries = entries
        self._custom = custom
        self._loaded = True
        logger.info(f"Loaded {len(entries)} entries for profile {self.profile_id}")

    # reads

    def snapshot(self) -> tuple[JournalEntry, ...]:
        """all entries ascending by date. entries are frozen, nested items included."""
        return tuple(sorted(self._entries.values(), key=lambda entry: entry.date))

    def __len__(self) -> int:
        return len(self._entries)

    def get(self, entry_id: str) -> Optional[JournalEntry]:
        return self._entries.get(entry_id)

    def entry_for_date(self, day: str) -> Optional[JournalEntry]:
        return stats_engine.entry_for_date(self._entries.values(), day)

    def entries_in_range(self, start: str, end: str) -> list[JournalEntry]:
        return stats_engine.entries_in_range(self._entries.values(), start, end)

    def stats(self, time_range: TimeRange | str, now: datetime) -> StatsResult:
        """aggregate stats, memoized per (time range, store version, day)"""
        time_range = TimeRange(time_range)
        today = now.date()
        key = (time_range, self.version, today)
        cached = self._stats_cache.get(key)
        if cached is not None:
            return cached

        result = stats_engine.get_stats(self.snapshot(), time_range, now)
        # results for earlier days can never be hit again
        self._stats_cache = {k: v for k, v in self._stats_cache.items() if k[2] == today}
        self._stats_cache[key] = result
        return result

    def custom_triggers(self) -> list[Trigger]:
        return list(self._custom["trigger"].values())

    def custom_activities(self) -> list[Activity]:
        return list(self._custom["activity"].values())

    def catalog(self) -> Catalog:
        """built-in symptoms, triggers and activities plus this profile's custom ones"""
        return Catalog(
            symptoms=DEFAULT_SYMPTOMS,
            triggers=DEFAULT_TRIGGERS + self.custom_triggers(),
            activities=DEFAULT_ACTIVITIES + self.custom_activities(),
        )

    # mutations

    def _touch(self):
        self.version += 1
        self._stats_cache.clear()

    def _to_doc(self, entry: JournalEntry) -> dict:
        doc = entry.model_dump()
        doc["profile_id"] = self.profile_id
        return doc

    async def add_entry(self, payload: EntryCreate, now: Optional[datetime] = None) -> JournalEntry:
        """record a day. an existing entry for the same date is replaced."""
        now = now or _utcnow()
        entry = JournalEntry(
            id=uuid4().hex,
            created_at=now,
            updated_at=now,
            **payload.model_dump(),
        )

        async with self._lock:
            existing = self.entry_for_date(entry.date)
            # one upsert on the day's slot replaces the previous document
            await self.db.entries.replace_one(
                {"profile_id": self.profile_id, "date": entry.date},
                self._to_doc(entry),
                upsert=True,
            )

            if existing is not None:
                del self._entries[existing.id]
            self._entries[entry.id] = entry
            self._touch()

        if existing is not None:
            logger.info(f"Replaced entry for {entry.date} (profile {self.profile_id})")
        else:
            logger.info(f"Added entry for {entry.date} (profile {self.profile_id})")
        return entry

    async def update_entry(
        self, entry_id: str, changes: EntryUpdate, now: Optional[datetime] = None,
    ) -> Optional[JournalEntry]:
        """apply a partial update. returns None if the entry does not exist."""
        async with self._lock:
            current = self._entries.get(entry_id)
            if current is None:
                return None

            fields = {
                key: value
                for key, value in changes.model_dump(exclude_unset=True).items()
                if value is not None or key in _NULLABLE_FIELDS
            }
            data = current.model_dump()
            data.update(fields)
            data["updated_at"] = now or _utcnow()
            updated = JournalEntry.model_validate(data)

            # moving an entry onto another day replaces that day's entry
            displaced = None
            if updated.date != current.date:
                displaced = self.entry_for_date(updated.date)
                if displaced is not None:
                    await self.db.entries.delete_one({"profile_id": self.profile_id, "id": displaced.id})

            try:
                await self.db.entries.replace_one(
                    {"profile_id": self.profile_id, "id": entry_id},
                    self._to_doc(updated),
                )
            except Exception as e:
                if displaced is not None:
                    logger.error(f"Update of entry {entry_id} failed, restoring entry for {displaced.date}: {e}")
                    await self.db.entries.insert_one(self._to_doc(displaced))
                raise

            if displaced is not None:
                del self._entries[displaced.id]
            self._entries[entry_id] = updated
            self._touch()

        logger.info(f"Updated entry {entry_id} (profile {self.profile_id})")
        return updated

    async def delete_entry(self, entry_id: str) -> bool:
        async with self._lock:
            if entry_id not in self._entries:
                return False

            await self.db.entries.delete_one({"profile_id": self.profile_id, "id": entry_id})
            del self._entries[entry_id]
            self._touch()

        logger.info(f"Deleted entry {entry_id} (profile {self.profile_id})")
        return True

    async def clear(self):
        """delete every entry and custom item of the profile"""
        async with self._lock:
            await self.db.entries.delete_many({"profile_id": self.profile_id})
            await self.db.custom_items.delete_many({"profile_id": self.profile_id})
            self._entries = {}
            self._custom = {kind: {} for kind in _CUSTOM_KINDS}
            self._touch()
        logger.info(f"Cleared all data for profile {self.profile_id}")

    # custom triggers and activities

    def _custom_doc(self, kind: str, item: BaseModel) -> dict:
        doc = item.model_dump()
        doc["profile_id"] = self.profile_id
        doc["kind"] = kind
        return doc

    async def _add_custom(self, kind: str, item: BaseModel):
        async with self._lock:
            await self.db.custom_items.insert_one(self._custom_doc(kind, item))
            self._custom[kind][item.id] = item
        logger.info(f"Added custom {kind} {item.name!r} (profile {self.profile_id})")
        return item

    async def _update_custom(self, kind: str, item_id: str, changes: BaseModel):
        async with self._lock:
            current = self._custom[kind].get(item_id)
            if current is None:
                return None

            fields = {
                key: value
                for key, value in changes.model_dump(exclude_unset=True).items()
                if value is not None
            }
            updated = _CUSTOM_KINDS[kind].model_validate({**current.model_dump(), **fields})
            await self.db.custom_items.replace_one(
                {"profile_id": self.profile_id, "kind": kind, "id": item_id},
                self._custom_doc(kind, updated),
            )
            self._custom[kind][item_id] = updated
        logger.info(f"Updated custom {kind} {item_id} (profile {self.profile_id})")
        return updated

    async def _delete_custom(self, kind: str, item_id: str) -> bool:
        async with self._lock:
            if item_id not in self._custom[kind]:
                return False

            await self.db.custom_items.delete_one(
                {"profile_id": self.profile_id, "kind": kind, "id": item_id}
            )
            del self._custom[kind][item_id]
        logger.info(f"Deleted custom {kind} {item_id} (profile {self.profile_id})")
        return True

    async def add_custom_trigger(self, payload: CustomTriggerCreate) -> Trigger:
        trigger = Trigger(id=uuid4().hex, is_custom=True, **payload.model_dump())
        return await self._add_custom("trigger", trigger)

    async def update_custom_trigger(self, trigger_id: str, changes: CustomTriggerUpdate) -> Optional[Trigger]:
        return await self._update_custom("trigger", trigger_id, changes)

    async def delete_custom_trigger(self, trigger_id: str) -> bool:
        return await self._delete_custom("trigger", trigger_id)

    async def add_custom_activity(self, payload: CustomActivityCreate) -> Activity:
        activity = Activity(id=uuid4().hex, is_custom=True, **payload.model_dump())
        return await self._add_custom("activity", activity)

    async def update_custom_activity(self, activity_id: str, changes: CustomActivityUpdate) -> Optional[Activity]:
        return await self._update_custom("activity", activity_id, changes)

    async def delete_custom_activity(self, activity_id: str) -> bool:
        return await self._delete_custom("activity", activity_id)

    # export / import

    def export_data(self, now: Optional[datetime] = None) -> dict[str, Any]:
        now = now or _utcnow()
        return {
            "profileId": self.profile_id,
            "entries": [entry.model_dump(mode="json", by_alias=True) for entry in self.snapshot()],
            "customTriggers": [t.model_dump(mode="json", by_alias=True) for t in self.custom_triggers()],
            "customActivities": [a.model_dump(mode="json", by_alias=True) for a in self.custom_activities()],
            "exportDate": now.isoformat(),
        }

    async def _replace_all(self, collection, query: dict, previous: list[dict], docs: list[dict]):
        """swap every document matching query for docs, putting previous back if the insert fails"""
        await collection.delete_many(query)
        try:
            if docs:
                await collection.insert_many(docs)
        except Exception as e:
            logger.error(f"Import write failed for profile {self.profile_id}, restoring {len(previous)} documents: {e}")
            await collection.delete_many(query)
            if previous:
                await collection.insert_many(previous)
            raise

    def _parse_import(self, payload: Any) -> tuple[dict[str, JournalEntry], dict[str, dict[str, BaseModel]]]:
        if not isinstance(payload, dict) or not isinstance(payload.get("entries"), list):
            raise StoreError("import payload must be an object with an 'entries' list")
        for key in _EXPORT_KEYS.values():
            if key in payload and not isinstance(payload[key], list):
                raise StoreError(f"'{key}' must be a list")

        try:
            parsed = [JournalEntry.model_validate(item) for item in payload["entries"]]
            custom = {
                kind: [_CUSTOM_KINDS[kind].model_validate(item) for item in payload[key]]
                for kind, key in _EXPORT_KEYS.items()
                if key in payload
            }
        except ValidationError as e:
            raise StoreError(f"invalid item in import payload: {e.error_count()} error(s)") from e

        # one entry per day, later entries for a date win
        by_date: dict[str, JournalEntry] = {}
        for entry in parsed:
            by_date[entry.date] = entry
        entries = {entry.id: entry for entry in by_date.values()}
        if len(entries) != len(by_date):
            raise StoreError("import payload contains duplicate entry ids")

        custom_by_id = {
            kind: {
                item.id: item for item in (
                    raw.model_copy(update={"is_custom": True, "id": raw.id or uuid4().hex}) for raw in items
                )
            }
            for kind, items in custom.items()
        }
        return entries, custom_by_id

    async def import_data(self, payload: Any) -> int:
        """replace every entry, and the custom items present in the payload, with an export's contents.
        returns the number of entries imported. raises StoreError on malformed data."""
        entries, custom = self._parse_import(payload)

        async with self._lock:
            await self._replace_all(
                self.db.entries,
                {"profile_id": self.profile_id},
                [self._to_doc(entry) for entry in self.snapshot()],
                [self._to_doc(entry) for entry in entries.values()],
            )
            self._entries = entries
            self._loaded = True
            self._touch()

            for kind, items in custom.items():
                await self._replace_all(
                    self.db.custom_items,
                    {"profile_id": self.profile_id, "kind": kind},
                    [self._custom_doc(kind, item) for item in self._custom[kind].values()],
                    [self._custom_doc(kind, item) for item in items.values()],
                )
                self._custom[kind] = items

        logger.info(f"Imported {len(entries)} entries for profile {self.profile_id}")
        return len(entries)


class StoreRegistry:
    """lazily creates and loads one EntryStore per profile"""

    def __init__(self):
        self._stores: dict[str, EntryStore] = {}
        self._lock = asyncio.Lock()

    async def get(self, profile_id: str, db: Database) -> EntryStore:
        async with self._lock:
            store = self._stores.get(profile_id)
            if store is None:
                store = EntryStore(db, profile_id)
                await store.load()
                self._stores[profile_id] = store
            return store

    def clear(self):
        self._stores.clear()


# singleton instance
stores = StoreRegistry()


async def get_store_registry() -> StoreRegistry:
    """dependency injection for the store registry"""
    return stores
