# stats router: aggregate stats, mood trend, chart series and month summary
# every endpoint reads a snapshot of the profile's entries; nothing here mutates

import logging
from datetime import datetime

from fastapi import APIRouter, Depends, Query, Path

from moodjournal.models.stats import (
    ChartPoint,
    MonthSummary,
    MoodTrendResponse,
    StatsResult,
    TimeRange,
)
from moodjournal.services import stats_engine
from moodjournal.services.entry_store import EntryStore
from moodjournal.dependencies import get_entry_store, get_now

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/profiles/{profile_id}/stats", tags=["stats"])


@router.get("", response_model=StatsResult)
async def get_stats(
    time_range: TimeRange = Query(TimeRange.WEEK, alias="range"),
    store: EntryStore = Depends(get_entry_store),
    now: datetime = Depends(get_now),
):
    """mood average, trend, top symptoms/triggers and consistency for a trailing range"""
    return store.stats(time_range, now)


@router.get("/mood-trend", response_model=MoodTrendResponse)
async def get_mood_trend(
    days: int = Query(7, ge=1, le=365),
    store: EntryStore = Depends(get_entry_store),
    now: datetime = Depends(get_now),
):
    trend = stats_engine.mood_trend(store.snapshot(), days, now)
    return MoodTrendResponse(days=days, trend=trend)


@router.get("/chart", response_model=list[ChartPoint])
async def get_chart(
    time_range: TimeRange = Query(TimeRange.WEEK, alias="range"),
    store: EntryStore = Depends(get_entry_store),
    now: datetime = Depends(get_now),
):
    """one point per day for the dashboard charts"""
    return stats_engine.chart_series(store.snapshot(), time_range, now)


@router.get("/month/{year}/{month}", response_model=MonthSummary)
async def get_month_summary(
    year: int = Path(..., ge=1, le=9999),
    month: int = Path(..., ge=1, le=12),
    store: EntryStore = Depends(get_entry_store),
):
    return stats_engine.month_summary(store.snapshot(), year, month)
