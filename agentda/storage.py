"""Supabase storage helpers for meeting agendas."""

from __future__ import annotations

from typing import Any, cast

from supabase import Client, create_client

from agentda.config import settings
from agentda.extraction.agenda import agenda_item_from_dict, agenda_item_to_dict
from agentda.extraction.models import AgendaItem


class MeetingNotFoundError(LookupError):
    """No meeting row exists for the requested id."""


def get_supabase_client() -> Client:
    """Create and return a Supabase client from the configured URL and key."""
    return create_client(settings.supabase_url, settings.supabase_key)


def load_agenda(client: Client, meeting_id: str) -> list[AgendaItem]:
    """Return the stored agenda for *meeting_id*.

    Raises:
        MeetingNotFoundError: If the meeting does not exist.
    """
    result = client.table("meetings").select("id, agenda").eq("id", meeting_id).execute()
    rows = cast(list[dict[str, Any]], result.data)
    if not rows:
        raise MeetingNotFoundError(meeting_id)
    return [agenda_item_from_dict(item) for item in rows[0].get("agenda") or []]


def save_agenda(client: Client, meeting_id: str, items: list[AgendaItem]) -> None:
    """Replace the stored agenda for *meeting_id* with *items*."""
    client.table("meetings").update(
        {"agenda": [agenda_item_to_dict(item) for item in items]}
    ).eq("id", meeting_id).execute()
