"""Post-meeting summary processing: sections -> typed items."""

from __future__ import annotations

import logging

from agentda.extraction.agenda import generate_id
from agentda.extraction.consensus import analyze_sentiment
from agentda.extraction.line_items import parse_line_items
from agentda.extraction.models import ExtractedItem, ItemType, SummaryResult, Takeaway
from agentda.extraction.patterns import BULLET_RE, NUMBERED_MARKER_RE, SUMMARY_SECTIONS
from agentda.extraction.sections import extract_sections

logger = logging.getLogger(__name__)

# Checked in order; the first category with a keyword hit wins.
TAKEAWAY_CATEGORIES: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("decision", ("decide", "decision", "agreed", "agreement", "will be", "will not be")),
    ("next-step", ("next step", "follow up", "will follow", "will be done")),
    ("concern", ("concern", "issue", "problem", "challenge", "risk")),
    ("idea", ("idea", "suggestion", "propose", "consider")),
)


def categorize_takeaway(text: str) -> str:
    """Label a takeaway as decision, next-step, concern, idea or general."""
    lowered = text.lower()
    for category, keywords in TAKEAWAY_CATEGORIES:
        if any(keyword in lowered for keyword in keywords):
            return category
    return "general"


def process_key_takeaways(section_body: str) -> list[Takeaway]:
    takeaways: list[Takeaway] = []
    for line in section_body.splitlines():
        match = BULLET_RE.match(line.strip())
        if not match or not match.group("body").strip():
            continue
        text = match.group("body").strip()
        takeaways.append(Takeaway(text=text, category=categorize_takeaway(text)))
    return takeaways


def _items(section_body: str, item_type: ItemType) -> list[ExtractedItem]:
    return [
        ExtractedItem(
            item_type=item_type,
            text=line.text,
            owner=line.owner,
            deadline=line.deadline,
            id=generate_id(),
        )
        for line in parse_line_items(section_body)
    ]


def process_summary(markdown: str) -> SummaryResult:
    """Extract action items, decisions and unresolved items from a summary.

    Args:
        markdown: Model-generated summary with ``##`` section headings.

    Returns:
        A SummaryResult; sections the model left out simply yield no items.
    """
    sections = extract_sections(markdown, SUMMARY_SECTIONS)

    result = SummaryResult(
        full_summary=markdown,
        executive_summary=sections["executive_summary"],
        discussion_points=sections["discussion_points"],
        action_items=_items(sections["action_items"], ItemType.ACTION_ITEM),
        decisions=_items(sections["decisions"], ItemType.DECISION),
        unresolved=_items(sections["unresolved"], ItemType.UNRESOLVED),
        takeaways=process_key_takeaways(sections["decisions"]),
        sentiment=analyze_sentiment(
            [sections["executive_summary"], sections["discussion_points"]]
        ),
    )
    logger.info(
        "Processed summary: %d action items, %d decisions, %d unresolved",
        len(result.action_items),
        len(result.decisions),
        len(result.unresolved),
    )
    return result


def parse_summary_response(text: str) -> tuple[str, list[str]]:
    """Split a quick agenda-item summary into its summary and action items.

    The model is asked for ``1. <summary> 2. <action items>``. The text
    before the second numbered marker is the summary; dash lines after it are
    action items. Without two parts the whole text is the summary.
    """
    parts = [part for part in NUMBERED_MARKER_RE.split(text) if part]
    if len(parts) < 2:
        return text.strip(), []

    summary = parts[0].strip()
    action_items = [
        line.strip()[1:].strip()
        for line in parts[1].strip().splitlines()
        if line.strip().startswith("-")
    ]
    return summary, action_items
