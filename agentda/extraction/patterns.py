"""Named extraction patterns.

Every rule used to pull structure out of generated text lives here as a
compiled pattern so it can be tested and swapped on its own.
"""

from __future__ import annotations

import re

from agentda.errors import ParseError
from agentda.extraction.models import SectionSpec

# A bullet line: optional indent, ``-`` or a single ``*``, then the item text.
# ``**bold**`` prose is not a bullet.
BULLET_RE = re.compile(r"^\s*(?:-|\*(?!\*))\s*(?P<body>.*)$")

# Horizontal rules and empty bullets carry no item.
BLANK_ITEM_RE = re.compile(r"^[-*_\s]*$")

# Markdown bold wrapper around an item, e.g. ``**Ship report**``.
EMPHASIS_RE = re.compile(r"\*\*(?P<inner>.+?)\*\*")

# Owner as a parenthetical: ``Ship report (Alice)``. Tried first.
OWNER_PAREN_RE = re.compile(r"\((?P<owner>[^)]+)\)")

# Owner as a ``Name:`` prefix of at most four words: ``Alice Smith: ship report``.
OWNER_PREFIX_RE = re.compile(r"^(?P<owner>[A-Za-z][A-Za-z.'-]*(?:[ \t]+[A-Za-z][A-Za-z.'-]*){0,3})[ \t]*:\s*")

# Labelled fields in the summary format: ``Owner: Bob`` / ``Deadline: March 3``.
OWNER_LABEL_RE = re.compile(
    r"\bOwner\s*:\s*(?P<owner>.+?)\s*(?=\bDeadline\s*:|$)", re.IGNORECASE
)
DEADLINE_LABEL_RE = re.compile(
    r"\bDeadline\s*:\s*(?P<deadline>.+?)\s*(?=\bOwner\s*:|$)", re.IGNORECASE
)

_WEEKDAY = r"(?:mon|tues|wednes|thurs|fri|satur|sun)day"
_MONTH = (
    r"(?:jan(?:uary)?|feb(?:ruary)?|mar(?:ch)?|apr(?:il)?|may|june?|july?|"
    r"aug(?:ust)?|sep(?:t(?:ember)?)?|oct(?:ober)?|nov(?:ember)?|dec(?:ember)?)"
)
_DATE_TOKEN = (
    r"\d{4}-\d{1,2}-\d{1,2}"
    r"|\d{1,2}[/-]\d{1,2}(?:[/-]\d{2,4})?"
    rf"|{_MONTH}\.?(?:\s+\d{{1,2}}(?:st|nd|rd|th)?)?(?:,?\s+\d{{4}})?"
    rf"|(?:next\s+|this\s+)?{_WEEKDAY}"
    r"|(?:next|this)\s+(?:week|month|quarter|year)"
    r"|end\s+of\s+(?:the\s+)?(?:day|week|month|quarter|year)"
    r"|eod|eow|eom|today|tonight|tomorrow|noon|q[1-4]"
)

# ``by <date-like token>``: ``by Friday``, ``by March 3``, ``by 3/14/2025``.
DEADLINE_RE = re.compile(rf"\bby\s+(?P<deadline>(?:{_DATE_TOKEN}))\b", re.IGNORECASE)

# Any markdown heading line (hashes followed by a space or the line end);
# used to find where a section ends. ``#1 priority`` is prose.
ANY_HEADING_RE = re.compile(r"^[ \t]{0,3}#{1,6}(?:[ \t].*)?$", re.MULTILINE)

# Numbered list marker (``1.``) used to split quick summaries.
NUMBERED_MARKER_RE = re.compile(r"\d+\.")

# Agenda suggestion blocks: ``1. Title: ... Description: ... Duration: 15``.
AGENDA_SUGGESTION_RE = re.compile(
    r"(?P<index>\d+)\.\s+Title:\s+(?P<title>.+?)\s+"
    r"Description:\s+(?P<description>.+?)\s+"
    r"Duration:\s+(?P<duration>\d+)",
    re.DOTALL,
)


def heading(title_regex: str) -> re.Pattern[str]:
    """Build a case-insensitive pattern matching a markdown heading line.

    Args:
        title_regex: Regex for the heading text, e.g. ``r"action\\s*items"``.

    Raises:
        ParseError: If *title_regex* is not a valid regular expression.
    """
    try:
        return re.compile(
            rf"^[ \t]{{0,3}}#{{1,6}}[ \t]+(?:\d+\.[ \t]*)?(?:{title_regex})\b.*$",
            re.IGNORECASE | re.MULTILINE,
        )
    except re.error as exc:
        raise ParseError(f"Invalid heading pattern {title_regex!r}: {exc}") from exc


EXECUTIVE_SUMMARY_SECTION = SectionSpec("executive_summary", heading(r"executive\s*summary"))
DECISIONS_SECTION = SectionSpec(
    "decisions", heading(r"key\s*decisions(?:\s*made)?|decisions|key\s*takeaways|key\s*points")
)
ACTION_ITEMS_SECTION = SectionSpec("action_items", heading(r"action\s*items"))
DISCUSSION_POINTS_SECTION = SectionSpec("discussion_points", heading(r"discussion\s*points"))
UNRESOLVED_SECTION = SectionSpec("unresolved", heading(r"unresolved\s*items|unresolved\s*issues"))

SUMMARY_SECTIONS: tuple[SectionSpec, ...] = (
    EXECUTIVE_SUMMARY_SECTION,
    DECISIONS_SECTION,
    ACTION_ITEMS_SECTION,
    DISCUSSION_POINTS_SECTION,
    UNRESOLVED_SECTION,
)
