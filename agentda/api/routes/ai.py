"""AI endpoints: agenda suggestions and summaries."""

from __future__ import annotations

import logging

from anthropic import APIStatusError
from fastapi import APIRouter, Depends, HTTPException

from agentda.ai.generation import (
    generate_agenda_text,
    generate_meeting_summary_text,
    generate_summary_text,
)
from agentda.api.deps import enforce_rate_limit, require_llm_key
from agentda.api.models import (
    AgendaRequest,
    AgendaResponse,
    AgendaSuggestionResponse,
    ExtractedItemResponse,
    MeetingSummaryRequest,
    MeetingSummaryResponse,
    SummarizeRequest,
    SummarizeResponse,
    TakeawayResponse,
)
from agentda.extraction.agenda import estimated_duration, parse_agenda_suggestions
from agentda.extraction.models import ExtractedItem
from agentda.extraction.summary import parse_summary_response, process_summary

logger = logging.getLogger(__name__)

router = APIRouter(dependencies=[Depends(enforce_rate_limit), Depends(require_llm_key)])


def _llm_unavailable(exc: APIStatusError) -> HTTPException:
    # Upstream errors become a JSON 503 so CORS headers stay intact.
    return HTTPException(status_code=503, detail=f"LLM unavailable: {exc.message}")


def _item_response(item: ExtractedItem) -> ExtractedItemResponse:
    return ExtractedItemResponse(
        id=item.id,
        item_type=item.item_type.value,
        text=item.text,
        owner=item.owner,
        deadline=item.deadline,
    )


@router.post("/api/ai/agenda", response_model=AgendaResponse)
async def suggest_agenda(request: AgendaRequest) -> AgendaResponse:
    """Suggest an agenda for the meeting goals, with estimated durations."""
    existing = [item.model_dump() for item in request.existing_items or []]
    try:
        text = generate_agenda_text(request.goals, existing)
    except APIStatusError as exc:
        logger.exception("Agenda generation failed")
        raise _llm_unavailable(exc) from exc

    items = parse_agenda_suggestions(text)
    logger.info("Parsed %d agenda suggestions", len(items))
    return AgendaResponse(
        items=[
            AgendaSuggestionResponse(
                title=i.title,
                description=i.description,
                duration=i.duration,
                order=i.order,
                status=i.status,
            )
            for i in items
        ],
        estimated_duration=estimated_duration(items),
    )


@router.post("/api/ai/summarize", response_model=SummarizeResponse)
async def summarize_item(request: SummarizeRequest) -> SummarizeResponse:
    """Summarize the discussion of one agenda item and list its action items."""
    try:
        text = generate_summary_text(request.item.title, request.item.description, request.notes)
    except APIStatusError as exc:
        logger.exception("Agenda item summary failed")
        raise _llm_unavailable(exc) from exc

    summary, action_items = parse_summary_response(text)
    return SummarizeResponse(summary=summary, action_items=action_items)


@router.post("/api/ai/meeting-summary", response_model=MeetingSummaryResponse)
async def summarize_meeting(request: MeetingSummaryRequest) -> MeetingSummaryResponse:
    """Generate a post-meeting summary and extract its structured items."""
    try:
        text = generate_meeting_summary_text(request.title, request.agenda, request.notes)
    except APIStatusError as exc:
        logger.exception("Meeting summary failed")
        raise _llm_unavailable(exc) from exc

    result = process_summary(text)
    return MeetingSummaryResponse(
        summary=result.full_summary,
        executive_summary=result.executive_summary,
        discussion_points=result.discussion_points,
        action_items=[_item_response(i) for i in result.action_items],
        decisions=[_item_response(i) for i in result.decisions],
        unresolved=[_item_response(i) for i in result.unresolved],
        takeaways=[TakeawayResponse(text=t.text, category=t.category) for t in result.takeaways],
        sentiment=result.sentiment,
    )
