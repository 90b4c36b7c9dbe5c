# stats models: time ranges, trend classification and aggregate view models

from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field


class TimeRange(str, Enum):
    """trailing window anchored to "now", a week is the last 7 days, not mon-sun"""
    WEEK = "week"
    MONTH = "month"
    QUARTER = "quarter"
    YEAR = "year"

    @property
    def days(self) -> int:
        return _RANGE_DAYS[self]


_RANGE_DAYS = {
    TimeRange.WEEK: 7,
    TimeRange.MONTH: 30,
    TimeRange.QUARTER: 90,
    TimeRange.YEAR: 365,
}


class MoodTrend(str, Enum):
    IMPROVING = "improving"
    STABLE = "stable"
    DECLINING = "declining"


class FrequencyItem(BaseModel):
    """a symptom or trigger name and how many times it was recorded"""
    name: str
    count: int


class StatsResult(BaseModel):
    """aggregate stats for a time range"""
    mood_average: float = Field(0.0, alias="moodAverage")
    mood_trend: MoodTrend = Field(MoodTrend.STABLE, alias="moodTrend")
    top_symptoms: list[FrequencyItem] = Field(default_factory=list, alias="topSymptoms")
    top_triggers: list[FrequencyItem] = Field(default_factory=list, alias="topTriggers")
    consistency_score: int = Field(0, alias="consistencyScore")

    model_config = {"populate_by_name": True, "frozen": True}


class MoodTrendResponse(BaseModel):
    days: int
    trend: MoodTrend


class ChartPoint(BaseModel):
    """single day in the dashboard charts, mood is None on days without an entry"""
    date: str
    mood: Optional[int] = None
    symptoms: int = 0
    triggers: int = 0
    sleep: Optional[float] = None
    exercise: Optional[float] = None


class MonthSummary(BaseModel):
    """calendar month overview"""
    month: str
    days_recorded: int = Field(0, alias="daysRecorded")
    consistency_score: int = Field(0, alias="consistencyScore")
    mood_average: float = Field(0.0, alias="moodAverage")
    total_symptoms: int = Field(0, alias="totalSymptoms")

    model_config = {"populate_by_name": True}
