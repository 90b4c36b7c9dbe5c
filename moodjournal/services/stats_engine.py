# statistics engine: pure functions over a snapshot of journal entries
# window filtering, mood average and trend, symptom/trigger rankings, consistency
# no i/o and no clock reads: callers pass "now" explicitly

import calendar
import logging
import math
from collections import Counter
from datetime import date, datetime, timedelta
from typing import Iterable, Optional, Sequence, Union

from moodjournal.models.entry import JournalEntry
from moodjournal.models.stats import (
    ChartPoint,
    FrequencyItem,
    MonthSummary,
    MoodTrend,
    StatsResult,
    TimeRange,
)

logger = logging.getLogger(__name__)

# second-half minus first-half mood average needed to call a direction
TREND_THRESHOLD = 0.3
MIN_TREND_ENTRIES = 3
TOP_ITEMS_LIMIT = 5

Now = Union[datetime, date]


def _today(now: Now) -> date:
    if isinstance(now, datetime):
        return now.date()
    return now


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _trailing_window(days: int, now: Now) -> tuple[str, str]:
    """the last `days` calendar days, today included"""
    today = _today(now)
    return (today - timedelta(days=days - 1)).isoformat(), today.isoformat()


# window selection

def resolve_window(time_range: Union[TimeRange, str], now: Now) -> tuple[str, str]:
    """map a range selector to inclusive (start, end) iso dates ending today.
    raises ValueError for anything that is not week/month/quarter/year."""
    time_range = TimeRange(time_range)
    return _trailing_window(time_range.days, now)


def entries_in_range(entries: Iterable[JournalEntry], start: str, end: str) -> list[JournalEntry]:
    """entries dated start..end inclusive, ascending by date.
    iso dates are fixed width so string comparison is date order."""
    selected = [entry for entry in entries if start <= entry.date <= end]
    return sorted(selected, key=lambda entry: entry.date)


def entry_for_date(entries: Iterable[JournalEntry], day: str) -> Optional[JournalEntry]:
    for entry in entries:
        if entry.date == day:
            return entry
    return None


# mood

def mood_average(entries: Sequence[JournalEntry]) -> float:
    """mean mood level, 0.0 when there are no entries. not rounded."""
    if not entries:
        return 0.0
    return sum(entry.mood_level for entry in entries) / len(entries)


def trend_lookback_days(time_range: Union[TimeRange, str]) -> int:
    """trend looks back 7 days for week queries and 30 for everything else"""
    return 7 if TimeRange(time_range) == TimeRange.WEEK else 30


def mood_trend(entries: Iterable[JournalEntry], days: int, now: Now) -> MoodTrend:
    """compare the mean mood of the first and second half of the lookback.

    with n entries the first half is the first n // 2 of them, so the second
    half is the longer one when n is odd. fewer than 3 entries is always stable.
    """
    window = entries_in_range(entries, *_trailing_window(days, now))
    if len(window) < MIN_TREND_ENTRIES:
        return MoodTrend.STABLE

    mid = len(window) // 2
    first_avg = mood_average(window[:mid])
    second_avg = mood_average(window[mid:])
    delta = second_avg - first_avg

    if delta > TREND_THRESHOLD:
        return MoodTrend.IMPROVING
    if delta < -TREND_THRESHOLD:
        return MoodTrend.DECLINING
    return MoodTrend.STABLE


# frequency rankings

def rank_names(names: Iterable[str], limit: int = TOP_ITEMS_LIMIT) -> list[FrequencyItem]:
    """count names and return the most frequent first.
    ties keep the order in which names were first seen.
    never returns more than TOP_ITEMS_LIMIT items, a larger limit is clamped."""
    limit = min(limit, TOP_ITEMS_LIMIT)
    counts = Counter(names)
    # sorted() is stable and Counter keeps insertion order
    ranked = sorted(counts.items(), key=lambda item: item[1], reverse=True)
    return [FrequencyItem(name=name, count=count) for name, count in ranked[:limit]]


def _by_date(entries: Iterable[JournalEntry]) -> list[JournalEntry]:
    return sorted(entries, key=lambda entry: entry.date)


def top_symptoms(entries: Iterable[JournalEntry], limit: int = TOP_ITEMS_LIMIT) -> list[FrequencyItem]:
    # every occurrence counts, including a name repeated inside one entry
    return rank_names(
        (symptom.name for entry in _by_date(entries) for symptom in entry.symptoms),
        limit,
    )


def top_triggers(entries: Iterable[JournalEntry], limit: int = TOP_ITEMS_LIMIT) -> list[FrequencyItem]:
    return rank_names(
        (trigger.name for entry in _by_date(entries) for trigger in entry.triggers),
        limit,
    )


# consistency

def expected_days(time_range: Union[TimeRange, str]) -> int:
    """days expected to be logged in a window.
    only week is distinguished, quarter and year are measured against 30 days,
    so their score can exceed 100."""
    return 7 if TimeRange(time_range) == TimeRange.WEEK else 30


def consistency_score(entry_count: int, time_range: Union[TimeRange, str]) -> int:
    return _round_half_up(entry_count / expected_days(time_range) * 100)


# aggregate

def get_stats(
    entries: Iterable[JournalEntry],
    time_range: Union[TimeRange, str],
    now: Now,
    limit: int = TOP_ITEMS_LIMIT,
) -> StatsResult:
    """aggregate stats for a trailing time range. total over empty input."""
    time_range = TimeRange(time_range)
    entries = list(entries)
    window = entries_in_range(entries, *resolve_window(time_range, now))
    logger.debug(f"Computing {time_range.value} stats over {len(window)} of {len(entries)} entries")

    return StatsResult(
        moodAverage=mood_average(window),
        moodTrend=mood_trend(entries, trend_lookback_days(time_range), now),
        topSymptoms=top_symptoms(window, limit),
        topTriggers=top_triggers(window, limit),
        consistencyScore=consistency_score(len(window), time_range),
    )


# dashboard and calendar helpers

def chart_days(time_range: Union[TimeRange, str]) -> int:
    """charts show at most 90 days, so a year is charted like a quarter"""
    return min(TimeRange(time_range).days, 90)


def chart_series(
    entries: Iterable[JournalEntry],
    time_range: Union[TimeRange, str],
    now: Now,
) -> list[ChartPoint]:
    """one point per calendar day ending today. days without an entry have no mood."""
    days = chart_days(time_range)
    today = _today(now)
    first = today - timedelta(days=days - 1)
    by_date = {entry.date: entry for entry in entries_in_range(entries, first.isoformat(), today.isoformat())}

    points = []
    for offset in range(days):
        day = (first + timedelta(days=offset)).isoformat()
        entry = by_date.get(day)
        if entry is None:
            points.append(ChartPoint(date=day))
            continue
        points.append(ChartPoint(
            date=day,
            mood=entry.mood_level,
            symptoms=len(entry.symptoms),
            triggers=len(entry.triggers),
            sleep=entry.activity_value("sleep"),
            exercise=entry.activity_value("exercise"),
        ))
    return points


def month_summary(entries: Iterable[JournalEntry], year: int, month: int) -> MonthSummary:
    """days recorded, consistency against the month length, mean mood and symptom total"""
    if not 1 <= month <= 12:
        raise ValueError(f"invalid month {month}")
    prefix = f"{year:04d}-{month:02d}"
    in_month = [entry for entry in entries if entry.date.startswith(prefix)]
    days_in_month = calendar.monthrange(year, month)[1]

    return MonthSummary(
        month=prefix,
        daysRecorded=len(in_month),
        consistencyScore=_round_half_up(len(in_month) / days_in_month * 100),
        moodAverage=mood_average(in_month),
        totalSymptoms=sum(len(entry.symptoms) for entry in in_month),
    )
