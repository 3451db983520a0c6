"""Claude-powered agenda suggestions and meeting summaries (raw text only)."""

from __future__ import annotations

import json
from collections.abc import Sequence
from typing import Any

from anthropic import Anthropic
from anthropic.types import TextBlock

from agentda.config import settings

AGENDA_SYSTEM_PROMPT = (
    "You are a professional meeting facilitator helping to structure effective meeting agendas."
)
ITEM_SUMMARY_SYSTEM_PROMPT = (
    "You are a professional meeting facilitator helping to summarize discussions "
    "and identify action items."
)
MEETING_SUMMARY_SYSTEM_PROMPT = (
    "You are an expert meeting facilitator who creates clear, actionable meeting summaries."
)


def _complete(system: str, prompt: str) -> str:
    """Send one user turn to Claude and return the text of the reply."""
    client = Anthropic(api_key=settings.anthropic_api_key)
    response = client.messages.create(
        model=settings.llm_model,
        max_tokens=settings.llm_max_tokens,
        system=system,
        messages=[{"role": "user", "content": prompt}],
    )

    # We always request plain text so the first block should be TextBlock.
    block = response.content[0]
    if not isinstance(block, TextBlock):
        raise ValueError(f"Expected TextBlock from Claude, got {type(block).__name__}")
    return block.text


def build_agenda_prompt(goals: str, existing_items: Sequence[dict[str, Any]] | None = None) -> str:
    existing = ""
    if existing_items:
        lines = [
            f"- {item['title']} ({item.get('duration') or 'unspecified'} minutes)"
            for item in existing_items
        ]
        existing = "Existing Agenda Items:\n" + "\n".join(lines)

    return (
        "Given the following meeting goals and any existing agenda items, suggest an "
        "improved agenda structure with estimated durations. Each item should include "
        "a clear title, description, and duration in minutes.\n\n"
        f"Meeting Goals:\n{goals}\n\n"
        f"{existing}\n\n"
        "Please provide suggestions in the following format:\n"
        "1. Title: [title]\n"
        "   Description: [description]\n"
        "   Duration: [duration in minutes]\n"
        "2. ..."
    )


def generate_agenda_text(goals: str, existing_items: Sequence[dict[str, Any]] | None = None) -> str:
    """Ask Claude for a numbered agenda suggestion list."""
    return _complete(AGENDA_SYSTEM_PROMPT, build_agenda_prompt(goals, existing_items))


def generate_summary_text(title: str, description: str | None, notes: str) -> str:
    """Ask Claude for a short summary and action items for one agenda item."""
    prompt = (
        "Given the following agenda item and discussion notes, provide a concise "
        "summary and extract key action items.\n\n"
        f"Agenda Item: {title}\n"
        f"Description: {description or 'N/A'}\n"
        f"Discussion Notes:\n{notes}\n\n"
        "Please provide:\n"
        "1. A brief summary of the discussion\n"
        "2. A list of action items in the format:\n"
        "   - [action item] (assigned to: [name])"
    )
    return _complete(ITEM_SUMMARY_SYSTEM_PROMPT, prompt)


def generate_meeting_summary_text(
    title: str,
    agenda: Sequence[dict[str, Any]],
    notes: str,
) -> str:
    """Ask Claude for a full markdown post-meeting summary.

    The reply uses ``##`` headings for the executive summary, key decisions,
    action items, discussion points and unresolved items.
    """
    prompt = (
        "You are generating a summary of a completed meeting. Your goal is to "
        "produce a clear, actionable summary.\n\n"
        f"MEETING TITLE: {title}\n\n"
        f"ORIGINAL AGENDA:\n{json.dumps(list(agenda), default=str)}\n\n"
        f"MEETING CONTENT:\n{notes}\n\n"
        "Generate a comprehensive meeting summary in markdown with these sections, "
        "each under its own '##' heading:\n\n"
        "## Executive Summary (2-3 sentence overview)\n"
        "## Key Decisions Made (what was decided and why)\n"
        "## Action Items (one '-' bullet each, owner in parentheses, 'by <deadline>')\n"
        "## Discussion Points (brief summary of main topics)\n"
        "## Unresolved Items (issues requiring further discussion)\n\n"
        "Use bullet points for skimmability. Be specific about responsibilities. "
        "Include only items explicitly discussed in the meeting."
    )
    return _complete(MEETING_SUMMARY_SYSTEM_PROMPT, prompt)
