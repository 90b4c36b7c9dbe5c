# journal entry models: one entry per profile per calendar day
# mood, symptoms, triggers, activities, weather, screen time and notes

from datetime import date as date_type, datetime
from typing import Literal, Optional
from pydantic import BaseModel, Field, field_validator


TriggerCategory = Literal["stress", "social", "work", "health", "environment", "custom"]
ActivityType = Literal["sleep", "exercise", "social", "nutrition", "custom"]


class Mood(BaseModel):
    """mood score for the day, 1 (very low) to 5 (great)"""
    level: int = Field(..., ge=1, le=5)
    emoji: str = ""
    timestamp: Optional[datetime] = None

    model_config = {"frozen": True}


class Symptom(BaseModel):
    """symptom with intensity on the fixed 1-7 scale"""
    id: str = ""
    name: str = Field(..., min_length=1)
    intensity: int = Field(1, ge=1, le=7)
    color: str = ""

    model_config = {"frozen": True}


class Trigger(BaseModel):
    id: str = ""
    name: str = Field(..., min_length=1)
    category: TriggerCategory = "custom"
    is_custom: bool = Field(False, alias="isCustom")

    model_config = {"populate_by_name": True, "frozen": True}


class Activity(BaseModel):
    """activity value, hours for sleep, minutes for exercise, etc."""
    id: str = ""
    name: str = ""
    type: ActivityType
    value: float = Field(0, ge=0)
    unit: str = ""
    is_custom: bool = Field(False, alias="isCustom")

    model_config = {"populate_by_name": True, "frozen": True}


class Weather(BaseModel):
    condition: str
    temperature: Optional[float] = None
    humidity: Optional[float] = None

    model_config = {"frozen": True}


def _check_iso_date(value: str) -> str:
    """entry dates must be fixed-width YYYY-MM-DD so string comparison orders them"""
    try:
        parsed = date_type.fromisoformat(value)
    except (TypeError, ValueError):
        raise ValueError(f"invalid date {value!r}, expected YYYY-MM-DD")
    if parsed.isoformat() != value:
        raise ValueError(f"invalid date {value!r}, expected YYYY-MM-DD")
    return value


class EntryCreate(BaseModel):
    """payload for recording a day, replaces any existing entry for the same date"""
    date: str
    mood: Mood
    symptoms: list[Symptom] = Field(default_factory=list)
    triggers: list[Trigger] = Field(default_factory=list)
    activities: list[Activity] = Field(default_factory=list)
    weather: Optional[Weather] = None
    screen_time: int = Field(0, ge=0, alias="screenTime", description="minutes")
    day_rating: int = Field(5, ge=1, le=10, alias="dayRating")
    notes: str = ""
    ai_summary: Optional[str] = Field(None, alias="aiSummary")
    ai_advice: Optional[str] = Field(None, alias="aiAdvice")
    ai_task: Optional[str] = Field(None, alias="aiTask")

    model_config = {"populate_by_name": True}

    @field_validator("date")
    @classmethod
    def _validate_date(cls, value: str) -> str:
        return _check_iso_date(value)


class EntryUpdate(BaseModel):
    """partial update, only fields that are set are applied"""
    date: Optional[str] = None
    mood: Optional[Mood] = None
    symptoms: Optional[list[Symptom]] = None
    triggers: Optional[list[Trigger]] = None
    activities: Optional[list[Activity]] = None
    weather: Optional[Weather] = None
    screen_time: Optional[int] = Field(None, ge=0, alias="screenTime")
    day_rating: Optional[int] = Field(None, ge=1, le=10, alias="dayRating")
    notes: Optional[str] = None
    ai_summary: Optional[str] = Field(None, alias="aiSummary")
    ai_advice: Optional[str] = Field(None, alias="aiAdvice")
    ai_task: Optional[str] = Field(None, alias="aiTask")

    model_config = {"populate_by_name": True}

    @field_validator("date")
    @classmethod
    def _validate_date(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return value
        return _check_iso_date(value)


class JournalEntry(EntryCreate):
    """stored journal entry, immutable all the way down"""
    id: str
    symptoms: tuple[Symptom, ...] = ()
    triggers: tuple[Trigger, ...] = ()
    activities: tuple[Activity, ...] = ()
    created_at: datetime = Field(..., alias="createdAt")
    updated_at: datetime = Field(..., alias="updatedAt")

    model_config = {"populate_by_name": True, "frozen": True}

    @property
    def mood_level(self) -> int:
        return self.mood.level

    def activity_value(self, activity_type: str) -> Optional[float]:
        """value of the first activity of the given type, None if not recorded"""
        for activity in self.activities:
            if activity.type == activity_type:
                return activity.value
        return None


# built-in catalogs, symptoms are fixed, triggers and activities can be extended by the user

DEFAULT_SYMPTOMS: list[Symptom] = [
    Symptom(id="anxiety", name="Ansia", color="#FEF3C7"),
    Symptom(id="depression", name="Tristezza", color="#DBEAFE"),
    Symptom(id="stress", name="Stress", color="#FED7D7"),
    Symptom(id="fatigue", name="Stanchezza", color="#E9D8FD"),
    Symptom(id="irritability", name="Irritabilità", color="#FDBA74"),
    Symptom(id="concentration", name="Difficoltà concentrazione", color="#A7F3D0"),
    Symptom(id="panic", name="Attacchi di panico", color="#F87171"),
    Symptom(id="mood-swings", name="Sbalzi d'umore", color="#C084FC"),
    Symptom(id="insomnia", name="Insonnia", color="#60A5FA"),
    Symptom(id="social-anxiety", name="Ansia sociale", color="#34D399"),
]

DEFAULT_TRIGGERS: list[Trigger] = [
    Trigger(id="work-stress", name="Stress lavorativo", category="work"),
    Trigger(id="social-interaction", name="Interazioni sociali", category="social"),
    Trigger(id="lack-sleep", name="Mancanza di sonno", category="health"),
    Trigger(id="family-issues", name="Problemi familiari", category="social"),
    Trigger(id="financial-worry", name="Preoccupazioni finanziarie", category="stress"),
    Trigger(id="relationship", name="Relazioni interpersonali", category="social"),
    Trigger(id="health-issues", name="Problemi di salute", category="health"),
    Trigger(id="change", name="Cambiamenti improvvisi", category="stress"),
]

DEFAULT_ACTIVITIES: list[Activity] = [
    Activity(id="sleep", name="Sonno", type="sleep", value=8, unit="ore"),
    Activity(id="exercise", name="Esercizio fisico", type="exercise", value=30, unit="minuti"),
    Activity(id="meditation", name="Meditazione", type="custom", value=15, unit="minuti"),
    Activity(id="social-time", name="Tempo sociale", type="social", value=2, unit="ore"),
]
