# catalog router: built-in symptoms, triggers and activities for entry forms
# profiles can add, rename and remove their own triggers and activities

from fastapi import APIRouter, Depends, HTTPException, status, Path

from moodjournal.models.catalog import (
    Catalog,
    CustomActivityCreate,
    CustomActivityUpdate,
    CustomTriggerCreate,
    CustomTriggerUpdate,
)
from moodjournal.models.entry import DEFAULT_ACTIVITIES, DEFAULT_SYMPTOMS, DEFAULT_TRIGGERS, Activity, Trigger
from moodjournal.services.entry_store import EntryStore
from moodjournal.dependencies import get_entry_store

router = APIRouter(tags=["catalog"])

PROFILE_CATALOG = "/profiles/{profile_id}/catalog"


def _not_found(kind: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail=f"Custom {kind} not found",
    )


@router.get("/catalog", response_model=Catalog)
async def get_catalog():
    return Catalog(
        symptoms=DEFAULT_SYMPTOMS,
        triggers=DEFAULT_TRIGGERS,
        activities=DEFAULT_ACTIVITIES,
    )


@router.get(PROFILE_CATALOG, response_model=Catalog)
async def get_profile_catalog(store: EntryStore = Depends(get_entry_store)):
    """built-in items followed by the profile's custom triggers and activities"""
    return store.catalog()


# custom triggers

@router.post(f"{PROFILE_CATALOG}/triggers", response_model=Trigger, status_code=status.HTTP_201_CREATED)
async def create_custom_trigger(
    body: CustomTriggerCreate,
    store: EntryStore = Depends(get_entry_store),
):
    return await store.add_custom_trigger(body)


@router.patch(f"{PROFILE_CATALOG}/triggers/{{trigger_id}}", response_model=Trigger)
async def update_custom_trigger(
    body: CustomTriggerUpdate,
    trigger_id: str = Path(...),
    store: EntryStore = Depends(get_entry_store),
):
    updated = await store.update_custom_trigger(trigger_id, body)
    if updated is None:
        raise _not_found("trigger")
    return updated


@router.delete(f"{PROFILE_CATALOG}/triggers/{{trigger_id}}")
async def delete_custom_trigger(
    trigger_id: str = Path(...),
    store: EntryStore = Depends(get_entry_store),
):
    if not await store.delete_custom_trigger(trigger_id):
        raise _not_found("trigger")
    return {"message": "Trigger deleted"}


# custom activities

@router.post(f"{PROFILE_CATALOG}/activities", response_model=Activity, status_code=status.HTTP_201_CREATED)
async def create_custom_activity(
    body: CustomActivityCreate,
    store: EntryStore = Depends(get_entry_store),
):
    return await store.add_custom_activity(body)


@router.patch(f"{PROFILE_CATALOG}/activities/{{activity_id}}", response_model=Activity)
async def update_custom_activity(
    body: CustomActivityUpdate,
    activity_id: str = Path(...),
    store: EntryStore = Depends(get_entry_store),
):
    updated = await store.update_custom_activity(activity_id, body)
    if updated is None:
        raise _not_found("activity")
    return updated


@router.delete(f"{PROFILE_CATALOG}/activities/{{activity_id}}")
async def delete_custom_activity(
    activity_id: str = Path(...),
    store: EntryStore = Depends(get_entry_store),
):
    if not await store.delete_custom_activity(activity_id):
        raise _not_found("activity")
    return {"message": "Activity deleted"}
