"""Agenda suggestion parsing and identity-preserving agenda merge."""

from __future__ import annotations

import dataclasses
import logging
import secrets
from collections.abc import Callable, Mapping, Sequence
from datetime import UTC, datetime
from typing import Any

from agentda.extraction.models import AgendaItem, AgendaSuggestion, Comment
from agentda.extraction.patterns import AGENDA_SUGGESTION_RE

logger = logging.getLogger(__name__)

AI_AUTHOR = "AI Assistant"

# Fields a regenerated item may overwrite; everything else is identity or engagement.
_CONTENT_FIELDS = ("title", "text", "description", "category", "duration", "order", "status")
_ENGAGEMENT_KEYS = {
    "id",
    "created_by",
    "createdBy",
    "created_at",
    "createdAt",
    "votes",
    "comments",
}


def generate_id() -> str:
    """Return a random URL-safe identifier for a new agenda item."""
    return secrets.token_urlsafe(12)


def parse_agenda_suggestions(text: str) -> list[AgendaSuggestion]:
    """Parse numbered ``Title / Description / Duration`` blocks from model output.

    Blocks that do not carry all three fields are skipped.
    """
    items: list[AgendaSuggestion] = []
    for order, match in enumerate(AGENDA_SUGGESTION_RE.finditer(text or "")):
        items.append(
            AgendaSuggestion(
                title=match.group("title").strip(),
                description=match.group("description").strip(),
                duration=int(match.group("duration")),
                order=order,
            )
        )
    return items


def estimated_duration(items: Sequence[AgendaSuggestion | AgendaItem]) -> int:
    """Total minutes across *items*; items without a duration count as zero."""
    return sum(item.duration or 0 for item in items)


def _comment_from(raw: Comment | Mapping[str, Any] | str) -> Comment:
    if isinstance(raw, Comment):
        return raw
    if isinstance(raw, str):
        return Comment(text=raw)
    return Comment(
        text=str(raw.get("text", "")),
        created_by=raw.get("createdBy", raw.get("created_by")),
        created_at=raw.get("createdAt", raw.get("created_at")),
    )


def agenda_item_from_dict(data: Mapping[str, Any]) -> AgendaItem:
    """Build an AgendaItem from a stored record (camelCase or snake_case keys)."""
    known = set(_CONTENT_FIELDS) | _ENGAGEMENT_KEYS
    duration = data.get("duration")
    return AgendaItem(
        id=str(data["id"]),
        title=data.get("title"),
        text=data.get("text"),
        description=data.get("description"),
        category=data.get("category"),
        duration=int(duration) if duration is not None else None,
        order=data.get("order"),
        status=data.get("status"),
        created_by=data.get("createdBy", data.get("created_by")),
        created_at=data.get("createdAt", data.get("created_at")),
        votes=int(data.get("votes") or 0),
        comments=[_comment_from(c) for c in data.get("comments") or []],
        extra={k: v for k, v in data.items() if k not in known},
    )


def agenda_item_to_dict(item: AgendaItem) -> dict[str, Any]:
    """Serialise an AgendaItem to the stored camelCase record shape."""
    record: dict[str, Any] = dict(item.extra)
    for name in _CONTENT_FIELDS:
        value = getattr(item, name)
        if value is not None:
            record[name] = value
    record.update(
        {
            "id": item.id,
            "createdBy": item.created_by,
            "createdAt": item.created_at,
            "votes": item.votes,
            "comments": [
                {"text": c.text, "createdBy": c.created_by, "createdAt": c.created_at}
                for c in item.comments
            ],
        }
    )
    return record


def _content_of(item: AgendaSuggestion | Mapping[str, Any]) -> dict[str, Any]:
    if dataclasses.is_dataclass(item) and not isinstance(item, type):
        return dataclasses.asdict(item)
    return dict(item)  # type: ignore[arg-type]


def _find_prior(
    label: str | None, prior: Sequence[AgendaItem], claimed: set[str]
) -> AgendaItem | None:
    if not label:
        return None
    for candidate in prior:
        if candidate.id in claimed:
            continue
        if (candidate.title and candidate.title == label) or (
            candidate.text and candidate.text == label
        ):
            return candidate
    return None


def merge_agenda_items(
    extracted: Sequence[AgendaSuggestion | Mapping[str, Any]],
    prior: Sequence[AgendaItem],
    now: datetime | None = None,
    id_factory: Callable[[], str] = generate_id,
) -> list[AgendaItem]:
    """Reconcile a regenerated agenda with the previously stored one.

    Each extracted item whose title (or legacy text) exactly equals a prior
    item's title or text keeps that item's ``id``, ``created_by``,
    ``created_at``, ``votes`` and ``comments``; its content fields come from
    the new extraction. Each prior item is claimed at most once, so a
    repeated title matches the next unclaimed prior item or becomes new.
    Unmatched items are new AI-authored items. Prior items absent from
    *extracted* are dropped.

    Neither input is mutated; new AgendaItem objects are returned.
    """
    created_at = (now or datetime.now(UTC)).isoformat()
    merged: list[AgendaItem] = []
    matched_ids: set[str] = set()

    for raw in extracted:
        content = _content_of(raw)
        fields = {name: content.get(name) for name in _CONTENT_FIELDS}
        extra = {
            k: v
            for k, v in content.items()
            if k not in _CONTENT_FIELDS and k not in _ENGAGEMENT_KEYS
        }
        original = _find_prior(fields["title"] or fields["text"], prior, matched_ids)

        if original is not None:
            matched_ids.add(original.id)
            merged.append(
                AgendaItem(
                    **fields,
                    id=original.id,
                    created_by=original.created_by,
                    created_at=original.created_at,
                    votes=original.votes or 0,
                    comments=list(original.comments),
                    extra=extra,
                )
            )
        else:
            merged.append(
                AgendaItem(
                    **fields,
                    id=id_factory(),
                    created_by=AI_AUTHOR,
                    created_at=created_at,
                    votes=0,
                    comments=[],
                    extra=extra,
                )
            )

    logger.info(
        "Merged agenda: %d items, %d carried over, %d prior items dropped",
        len(merged),
        len(matched_ids),
        sum(1 for p in prior if p.id not in matched_ids),
    )
    return merged
