"""Scheduling endpoint: find open meeting slots."""

from __future__ import annotations

from datetime import UTC, datetime

from fastapi import APIRouter, HTTPException

from agentda.api.models import SlotQueryIn, SlotsRequest, SlotsResponse, TimeSlotResponse
from agentda.config import settings
from agentda.errors import ConfigurationError
from agentda.scheduling.models import BusyInterval, SlotQuery, parse_clock
from agentda.scheduling.slots import busy_intervals_from_meetings, find_available_slots

router = APIRouter()


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def _build_query(overrides: SlotQueryIn | None) -> SlotQuery:
    defaults = SlotQuery.from_settings(settings)
    if overrides is None:
        return defaults
    return SlotQuery(
        horizon_days=(
            overrides.horizon_days
            if overrides.horizon_days is not None
            else defaults.horizon_days
        ),
        interval_minutes=(
            overrides.interval_minutes
            if overrides.interval_minutes is not None
            else defaults.interval_minutes
        ),
        work_start=parse_clock(overrides.work_start) if overrides.work_start else defaults.work_start,
        work_end=parse_clock(overrides.work_end) if overrides.work_end else defaults.work_end,
        exclude_weekends=(
            overrides.exclude_weekends
            if overrides.exclude_weekends is not None
            else defaults.exclude_weekends
        ),
    )


@router.post("/api/scheduling/slots", response_model=SlotsResponse)
async def available_slots(request: SlotsRequest) -> SlotsResponse:
    """List free slots given busy intervals and/or existing meetings.

    All times are handled in UTC; naive datetimes are assumed to be UTC.
    """
    busy = [BusyInterval(start=_as_utc(b.start), end=_as_utc(b.end)) for b in request.busy]
    busy += busy_intervals_from_meetings(
        {"date": _as_utc(m.date), "duration": m.duration} for m in request.meetings
    )
    now = _as_utc(request.now) if request.now else datetime.now(UTC)

    try:
        query = _build_query(request.query)
        slots = find_available_slots(busy, query, now)
    except ConfigurationError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc

    return SlotsResponse(
        slots=[TimeSlotResponse(**slot.as_dict()) for slot in slots],
        count=len(slots),
    )
