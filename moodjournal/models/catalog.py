# catalog models: payloads for a profile's custom triggers and activities
# symptoms are fixed and cannot be extended

from typing import Optional
from pydantic import BaseModel, Field

from moodjournal.models.entry import Activity, ActivityType, Symptom, Trigger, TriggerCategory


class CustomTriggerCreate(BaseModel):
    name: str = Field(..., min_length=1)
    category: TriggerCategory = "custom"


class CustomTriggerUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1)
    category: Optional[TriggerCategory] = None


class CustomActivityCreate(BaseModel):
    """value is the default shown in the entry form"""
    name: str = Field(..., min_length=1)
    type: ActivityType = "custom"
    value: float = Field(0, ge=0)
    unit: str = ""


class CustomActivityUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1)
    type: Optional[ActivityType] = None
    value: Optional[float] = Field(None, ge=0)
    unit: Optional[str] = None


class Catalog(BaseModel):
    """built-in items followed by the profile's custom ones"""
    symptoms: list[Symptom]
    triggers: list[Trigger]
    activities: list[Activity]
