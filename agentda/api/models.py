"""Pydantic request/response schemas for the Agentda API."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ExistingAgendaItem(BaseModel):
    title: str = Field(min_length=1)
    duration: int | None = None


class AgendaRequest(BaseModel):
    """Request body for the /api/ai/agenda endpoint."""

    model_config = ConfigDict(populate_by_name=True)

    goals: str = Field(min_length=1)
    existing_items: list[ExistingAgendaItem] | None = Field(default=None, alias="existingItems")


class AgendaSuggestionResponse(BaseModel):
    title: str
    description: str | None = None
    duration: int | None = None
    order: int = 0
    status: str = "pending"


class AgendaResponse(BaseModel):
    """Response body for the /api/ai/agenda endpoint."""

    model_config = ConfigDict(populate_by_name=True)

    items: list[AgendaSuggestionResponse]
    estimated_duration: int = Field(alias="estimatedDuration")


class SummarizeItem(BaseModel):
    title: str = Field(min_length=1)
    description: str | None = None


class SummarizeRequest(BaseModel):
    """Request body for the /api/ai/summarize endpoint."""

    item: SummarizeItem
    notes: str = Field(min_length=1)


class SummarizeResponse(BaseModel):
    """Response body for the /api/ai/summarize endpoint."""

    model_config = ConfigDict(populate_by_name=True)

    summary: str
    action_items: list[str] = Field(alias="actionItems")


class MeetingSummaryRequest(BaseModel):
    """Request body for the /api/ai/meeting-summary endpoint."""

    title: str = Field(min_length=1)
    agenda: list[dict[str, Any]] = []
    notes: str = Field(min_length=1)


class ExtractedItemResponse(BaseModel):
    """A single extracted item in API responses."""

    id: str
    item_type: str
    text: str
    owner: str | None = None
    deadline: str | None = None


class TakeawayResponse(BaseModel):
    text: str
    category: str


class MeetingSummaryResponse(BaseModel):
    """Response body for the /api/ai/meeting-summary endpoint."""

    summary: str
    executive_summary: str = ""
    discussion_points: str = ""
    action_items: list[ExtractedItemResponse] = []
    decisions: list[ExtractedItemResponse] = []
    unresolved: list[ExtractedItemResponse] = []
    takeaways: list[TakeawayResponse] = []
    sentiment: float = 0.0


class BusyIntervalIn(BaseModel):
    start: datetime
    end: datetime


class MeetingIn(BaseModel):
    """An existing meeting; it occupies ``[date, date + duration)``."""

    date: datetime
    duration: int = Field(default=0, ge=0, le=7 * 24 * 60)


class SlotQueryIn(BaseModel):
    """Slot search parameters; omitted fields fall back to settings."""

    horizon_days: int | None = None
    interval_minutes: int | None = None
    work_start: str | None = None
    work_end: str | None = None
    exclude_weekends: bool | None = None


class SlotsRequest(BaseModel):
    """Request body for the /api/scheduling/slots endpoint.

    Naive datetimes are treated as UTC.
    """

    busy: list[BusyIntervalIn] = []
    meetings: list[MeetingIn] = []
    query: SlotQueryIn | None = None
    now: datetime | None = None


class TimeSlotResponse(BaseModel):
    date: str
    time: str


class SlotsResponse(BaseModel):
    slots: list[TimeSlotResponse]
    count: int


class CommentIn(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    text: str
    created_by: str | None = Field(default=None, alias="createdBy")
    created_at: str | None = Field(default=None, alias="createdAt")


class AgendaItemModel(BaseModel):
    """A stored agenda item; unknown fields are kept as-is."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    id: str
    title: str | None = None
    text: str | None = None
    description: str | None = None
    category: str | None = None
    duration: int | None = None
    order: int | None = None
    status: str | None = None
    created_by: str | None = Field(default=None, alias="createdBy")
    created_at: str | None = Field(default=None, alias="createdAt")
    votes: int = Field(default=0, ge=0)
    comments: list[CommentIn] = []


class MergeRequest(BaseModel):
    """Request body for the /api/agenda/merge endpoint."""

    extracted: list[dict[str, Any]]
    prior: list[AgendaItemModel] = []


class AgendaListResponse(BaseModel):
    items: list[dict[str, Any]]


class ConsensusRequest(BaseModel):
    items: list[AgendaItemModel]


class ConsensusItemResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    item_id: str = Field(alias="itemId")
    title: str | None = None
    consensus_score: int = Field(alias="consensusScore")
    has_disagreement: bool = Field(alias="hasDisagreement")


class ConsensusResponse(BaseModel):
    items: list[ConsensusItemResponse]


class RefineRequest(BaseModel):
    """Request body for /api/meetings/{id}/agenda/refine: the regenerated items."""

    items: list[dict[str, Any]]
