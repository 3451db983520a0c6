"""Data models for agenda and summary extraction results."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any


class ItemType(StrEnum):
    """Kinds of records pulled out of a generated meeting summary."""

    ACTION_ITEM = "action_item"
    DECISION = "decision"
    UNRESOLVED = "unresolved"


@dataclass(frozen=True)
class SectionSpec:
    """A named markdown section located by its heading pattern."""

    name: str
    heading_pattern: re.Pattern[str]


@dataclass(frozen=True)
class LineItem:
    """One bullet line with its optional owner and deadline."""

    text: str
    owner: str | None = None
    deadline: str | None = None


@dataclass
class ExtractedItem:
    """A single extracted item (action item, decision, or unresolved item)."""

    item_type: ItemType
    text: str
    id: str
    owner: str | None = None
    deadline: str | None = None


@dataclass(frozen=True)
class Comment:
    """A participant comment on an agenda item."""

    text: str
    created_by: str | None = None
    created_at: str | None = None


@dataclass
class AgendaItem:
    """A persisted agenda item with stable identity and engagement state.

    ``title`` is the current field; older records only carry ``text``.
    ``extra`` keeps any further generated fields the model returned.
    """

    id: str
    title: str | None = None
    text: str | None = None
    description: str | None = None
    category: str | None = None
    duration: int | None = None
    order: int | None = None
    status: str | None = None
    created_by: str | None = None
    created_at: str | None = None
    votes: int = 0
    comments: list[Comment] = field(default_factory=list)
    extra: dict[str, Any] = field(default_factory=dict)

    @property
    def label(self) -> str | None:
        return self.title or self.text


@dataclass(frozen=True)
class AgendaSuggestion:
    """An agenda item proposed by the model before it has an identity."""

    title: str
    description: str | None = None
    duration: int | None = None
    order: int = 0
    status: str = "pending"
    category: str | None = None


@dataclass(frozen=True)
class Takeaway:
    """A key takeaway with its keyword category."""

    text: str
    category: str


@dataclass
class SummaryResult:
    """Structured view of a generated post-meeting summary."""

    full_summary: str
    executive_summary: str = ""
    discussion_points: str = ""
    action_items: list[ExtractedItem] = field(default_factory=list)
    decisions: list[ExtractedItem] = field(default_factory=list)
    unresolved: list[ExtractedItem] = field(default_factory=list)
    takeaways: list[Takeaway] = field(default_factory=list)
    sentiment: float = 0.0


@dataclass(frozen=True)
class ConsensusResult:
    """Consensus score for one agenda item."""

    item_id: str
    title: str | None
    consensus_score: int
    has_disagreement: bool
