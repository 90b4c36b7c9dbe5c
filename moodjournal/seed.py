# seed script: fills a demo profile with the last 60 days of entries
# run once: python -m moodjournal.seed

import asyncio
import logging
import os
import random
from datetime import datetime, timedelta, timezone

from moodjournal.models.catalog import CustomTriggerCreate
from moodjournal.models.entry import (
    DEFAULT_SYMPTOMS,
    DEFAULT_TRIGGERS,
    Activity,
    EntryCreate,
    Mood,
)
from moodjournal.services.db import db
from moodjournal.services.entry_store import EntryStore

logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(levelname)s - %(message)s")
logger = logging.getLogger(__name__)

DEMO_PROFILE_ID = os.getenv("SEED_PROFILE_ID", "demo")
SEED_DAYS = 60
MOOD_EMOJI = {1: "😢", 2: "😟", 3: "😐", 4: "🙂", 5: "😄"}


def _demo_entry(day: str, rng: random.Random) -> EntryCreate:
    level = rng.randint(1, 5)
    symptoms = rng.sample(DEFAULT_SYMPTOMS, k=rng.randint(0, 3))
    triggers = rng.sample(DEFAULT_TRIGGERS, k=rng.randint(0, 2))
    return EntryCreate(
        date=day,
        mood=Mood(level=level, emoji=MOOD_EMOJI[level]),
        symptoms=[s.model_copy(update={"intensity": rng.randint(1, 7)}) for s in symptoms],
        triggers=triggers,
        activities=[
            Activity(id="sleep", name="Sonno", type="sleep", value=rng.choice([5, 6, 7, 8, 9]), unit="ore"),
            Activity(id="exercise", name="Esercizio fisico", type="exercise", value=rng.choice([0, 15, 30, 45]), unit="minuti"),
        ],
        screenTime=rng.randint(60, 360),
        dayRating=min(10, level * 2),
        notes="",
    )


async def seed():
    """write demo entries for the last SEED_DAYS days, skipping days that already have one"""
    await db.connect()

    store = EntryStore(db, DEMO_PROFILE_ID)
    await store.load()

    rng = random.Random(42)
    today = datetime.now(timezone.utc).date()
    created = 0
    for offset in range(SEED_DAYS):
        # skip roughly one day in five so the history has gaps
        if rng.random() < 0.2:
            continue
        day = (today - timedelta(days=offset)).isoformat()
        if store.entry_for_date(day) is not None:
            continue
        await store.add_entry(_demo_entry(day, rng))
        created += 1

    if not store.custom_triggers():
        await store.add_custom_trigger(CustomTriggerCreate(name="Traffico", category="environment"))

    logger.info(f"Seeded {created} entries for profile '{DEMO_PROFILE_ID}' ({len(store)} total)")
    await db.close()


if __name__ == "__main__":
    asyncio.run(seed())
