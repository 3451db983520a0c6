"""Bullet-list parsing: turn a section body into owner/deadline-tagged items."""

from __future__ import annotations

import re

from agentda.extraction.models import LineItem
from agentda.extraction.patterns import (
    BLANK_ITEM_RE,
    BULLET_RE,
    DEADLINE_LABEL_RE,
    DEADLINE_RE,
    EMPHASIS_RE,
    OWNER_LABEL_RE,
    OWNER_PAREN_RE,
    OWNER_PREFIX_RE,
)

_OWNER_RULES: tuple[re.Pattern[str], ...] = (OWNER_PAREN_RE, OWNER_LABEL_RE, OWNER_PREFIX_RE)
_DEADLINE_RULES: tuple[re.Pattern[str], ...] = (DEADLINE_RE, DEADLINE_LABEL_RE)

_TRAILING_JUNK_RE = re.compile(r"[\s,;:\-–—]+$")
_WHITESPACE_RE = re.compile(r"\s+")


def _first_match(rules: tuple[re.Pattern[str], ...], text: str) -> re.Match[str] | None:
    for rule in rules:
        match = rule.search(text)
        if match:
            return match
    return None


def _remove_spans(text: str, spans: list[tuple[int, int]]) -> str:
    kept: list[str] = []
    cursor = 0
    for start, end in sorted(spans):
        if start > cursor:
            kept.append(text[cursor:start])
        cursor = max(cursor, end)
    kept.append(text[cursor:])
    return " ".join(kept)


def _clean(text: str) -> str:
    text = _WHITESPACE_RE.sub(" ", text).strip()
    return _TRAILING_JUNK_RE.sub("", text)


def parse_line(body: str) -> LineItem:
    """Parse one bullet body (marker already removed) into a LineItem.

    Owner: ``(Name)`` first, then ``Owner: Name``, then a ``Name:`` prefix;
    one attempt per line, first match wins. Deadline: ``by <date>`` then
    ``Deadline: <date>``. Both are matched against the whole line, so
    ``(Bob, by March 3)`` yields owner ``Bob`` and deadline ``March 3``.
    Matched phrases are removed from the text.
    """
    text = EMPHASIS_RE.sub(lambda m: m.group("inner"), body).strip()
    owner_match = _first_match(_OWNER_RULES, text)
    deadline_match = _first_match(_DEADLINE_RULES, text)
    spans: list[tuple[int, int]] = []

    owner: str | None = None
    if owner_match:
        owner_text = owner_match.group("owner")
        if deadline_match and (
            owner_match.start("owner") <= deadline_match.start()
            and deadline_match.end() <= owner_match.end("owner")
        ):
            offset = owner_match.start("owner")
            owner_text = (
                owner_text[: deadline_match.start() - offset]
                + " "
                + owner_text[deadline_match.end() - offset :]
            )
        owner = _clean(owner_text) or None
        spans.append(owner_match.span())

    deadline: str | None = None
    if deadline_match:
        deadline = deadline_match.group("deadline").strip() or None
        spans.append(deadline_match.span())

    return LineItem(text=_clean(_remove_spans(text, spans)), owner=owner, deadline=deadline)


def parse_line_items(section_body: str, item_pattern: re.Pattern[str] = BULLET_RE) -> list[LineItem]:
    """Parse the bullet lines of a section body, preserving source order.

    Lines that are not bullets are dropped silently; generated sections
    routinely mix prose with lists.

    Args:
        section_body: Raw section text.
        item_pattern: Pattern selecting item lines; must expose a ``body`` group.

    Returns:
        One LineItem per bullet line with non-empty text.
    """
    items: list[LineItem] = []
    for line in (section_body or "").splitlines():
        match = item_pattern.match(line.strip())
        if not match:
            continue
        body = match.group("body")
        if BLANK_ITEM_RE.match(body):
            continue
        item = parse_line(body)
        if item.text:
            items.append(item)
    return items
