"""Agenda endpoints: merge regenerated items, score consensus, refine stored agendas."""

from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException

from agentda.api.models import (
    AgendaItemModel,
    AgendaListResponse,
    ConsensusItemResponse,
    ConsensusRequest,
    ConsensusResponse,
    MergeRequest,
    RefineRequest,
)
from agentda.extraction.agenda import agenda_item_from_dict, agenda_item_to_dict, merge_agenda_items
from agentda.extraction.consensus import analyze_consensus
from agentda.extraction.models import AgendaItem
from agentda.storage import MeetingNotFoundError, get_supabase_client, load_agenda, save_agenda

logger = logging.getLogger(__name__)

router = APIRouter()


def _to_item(model: AgendaItemModel) -> AgendaItem:
    return agenda_item_from_dict(model.model_dump(by_alias=True))


@router.post("/api/agenda/merge", response_model=AgendaListResponse)
async def merge_agenda(request: MergeRequest) -> AgendaListResponse:
    """Merge regenerated agenda items into the prior agenda, keeping votes and comments."""
    merged = merge_agenda_items(request.extracted, [_to_item(p) for p in request.prior])
    return AgendaListResponse(items=[agenda_item_to_dict(i) for i in merged])


@router.post("/api/agenda/consensus", response_model=ConsensusResponse)
async def agenda_consensus(request: ConsensusRequest) -> ConsensusResponse:
    """Score agreement on each agenda item from votes and comment sentiment."""
    results = analyze_consensus([_to_item(i) for i in request.items])
    return ConsensusResponse(
        items=[
            ConsensusItemResponse(
                item_id=r.item_id,
                title=r.title,
                consensus_score=r.consensus_score,
                has_disagreement=r.has_disagreement,
            )
            for r in results
        ]
    )


@router.post("/api/meetings/{meeting_id}/agenda/refine", response_model=AgendaListResponse)
async def refine_agenda(meeting_id: str, request: RefineRequest) -> AgendaListResponse:
    """Replace a meeting's stored agenda with refined items, preserving engagement."""
    client = get_supabase_client()
    try:
        prior = load_agenda(client, meeting_id)
    except MeetingNotFoundError as exc:
        raise HTTPException(status_code=404, detail="Meeting not found") from exc

    merged = merge_agenda_items(request.items, prior)
    save_agenda(client, meeting_id, merged)
    logger.info("Refined agenda for meeting %s (%d items)", meeting_id, len(merged))
    return AgendaListResponse(items=[agenda_item_to_dict(i) for i in merged])
