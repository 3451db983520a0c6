"""Free/busy slot finder: enumerate open meeting starts over a bounded horizon."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from datetime import date, datetime, timedelta
from typing import Any

from agentda.errors import ParseError
from agentda.scheduling.models import BusyInterval, SlotQuery, TimeSlot

logger = logging.getLogger(__name__)

# Saturday and Sunday in datetime.weekday() numbering
WEEKEND_DAYS = {5, 6}


def group_busy_by_day(busy: Iterable[BusyInterval]) -> dict[str, list[BusyInterval]]:
    """Index busy intervals by the ISO date of their start.

    An interval that crosses midnight is only attributed to the day it
    starts on; callers that need both days must add a second interval.
    """
    by_day: dict[str, list[BusyInterval]] = {}
    for interval in busy:
        by_day.setdefault(interval.start.date().isoformat(), []).append(interval)
    return by_day


def _coerce_datetime(value: datetime | str) -> datetime:
    if isinstance(value, datetime):
        return value
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except (AttributeError, ValueError) as exc:
        raise ParseError(f"Invalid meeting date: {value!r}") from exc


def busy_intervals_from_meetings(meetings: Iterable[Mapping[str, Any]]) -> list[BusyInterval]:
    """Derive busy intervals from existing meeting records.

    Each record needs a ``date`` (datetime or ISO-8601 string) and a
    ``duration`` in minutes; the meeting occupies ``[date, date + duration)``.
    Records without a date are skipped.

    Raises:
        ParseError: If a date string is not ISO-8601.
    """
    intervals: list[BusyInterval] = []
    for meeting in meetings:
        raw_date = meeting.get("date")
        if raw_date is None:
            continue
        start = _coerce_datetime(raw_date)
        duration = int(meeting.get("duration") or 0)
        intervals.append(BusyInterval(start=start, end=start + timedelta(minutes=duration)))
    return intervals


def _is_free(slot_start: datetime, slot_end: datetime, day_busy: list[BusyInterval]) -> bool:
    # Half-open overlap: touching endpoints are not a conflict.
    return not any(slot_start < b.end and slot_end > b.start for b in day_busy)


def find_available_slots(
    busy: Iterable[BusyInterval],
    query: SlotQuery,
    now: datetime,
) -> list[TimeSlot]:
    """Enumerate free slots from today through ``now + horizon_days``.

    Args:
        busy: Occupied intervals (naive or aware, matching *now*).
        query: Working hours, slot length, horizon and weekend policy.
        now: Reference instant; only slots starting strictly after it count.

    Returns:
        Available slots in chronological order. An empty list is a valid result.

    Raises:
        ConfigurationError: If *query* is invalid.
    """
    query.validate()

    busy_by_day = group_busy_by_day(busy)
    interval = timedelta(minutes=query.interval_minutes)
    first_minute = query.work_start.hour * 60 + query.work_start.minute
    last_minute = query.work_end.hour * 60 + query.work_end.minute

    first_day: date = now.date()
    last_day: date = (now + timedelta(days=query.horizon_days)).date()

    slots: list[TimeSlot] = []
    day = first_day
    while day <= last_day:
        if query.exclude_weekends and day.weekday() in WEEKEND_DAYS:
            day += timedelta(days=1)
            continue

        day_busy = busy_by_day.get(day.isoformat(), [])
        midnight = datetime(day.year, day.month, day.day, tzinfo=now.tzinfo)

        for minute in range(first_minute, last_minute, query.interval_minutes):
            slot_start = midnight + timedelta(minutes=minute)
            if slot_start <= now:
                continue
            if _is_free(slot_start, slot_start + interval, day_busy):
                slots.append(TimeSlot(date=day, time=slot_start.time()))

        day += timedelta(days=1)

    logger.info(
        "Found %d available slots between %s and %s", len(slots), first_day, last_day
    )
    return slots
