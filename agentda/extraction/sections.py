"""Heading-delimited section extraction for generated markdown."""

from __future__ import annotations

import logging
import re
from collections.abc import Sequence

from agentda.errors import ParseError
from agentda.extraction.models import SectionSpec
from agentda.extraction.patterns import ANY_HEADING_RE

logger = logging.getLogger(__name__)


def _case_insensitive(pattern: re.Pattern[str] | str) -> re.Pattern[str]:
    """Return *pattern* compiled with ``re.IGNORECASE``.

    Raises:
        ParseError: If *pattern* is not a valid regular expression.
    """
    try:
        if isinstance(pattern, re.Pattern):
            if pattern.flags & re.IGNORECASE:
                return pattern
            return re.compile(pattern.pattern, pattern.flags | re.IGNORECASE)
        return re.compile(pattern, re.IGNORECASE | re.MULTILINE)
    except (re.error, TypeError) as exc:
        raise ParseError(f"Invalid section heading pattern: {pattern!r}") from exc


def extract_sections(markdown: str, section_specs: Sequence[SectionSpec]) -> dict[str, str]:
    """Split *markdown* into named sections.

    Each spec's body is everything between the first heading line matching
    its pattern and the next heading of any kind (or the end of the text).
    A missing section maps to ``""``, the same as a present but empty one.

    Args:
        markdown: Generated markdown text. May be empty.
        section_specs: Sections to look for, in caller order.

    Returns:
        A dict with one entry per spec name (always all of them).
    """
    sections: dict[str, str] = {spec.name: "" for spec in section_specs}

    patterns: dict[str, re.Pattern[str]] = {}
    for spec in section_specs:
        try:
            patterns[spec.name] = _case_insensitive(spec.heading_pattern)
        except ParseError:
            logger.warning("Skipping section %r: malformed heading pattern", spec.name)

    headings = list(ANY_HEADING_RE.finditer(markdown or ""))
    found: set[str] = set()

    for i, match in enumerate(headings):
        line = match.group(0)
        body_end = headings[i + 1].start() if i + 1 < len(headings) else len(markdown)
        for name, pattern in patterns.items():
            if name in found or not pattern.search(line):
                continue
            sections[name] = markdown[match.end() : body_end].strip()
            found.add(name)

    missing = [name for name in patterns if name not in found]
    if missing and markdown:
        logger.debug("Sections not present in generated text: %s", ", ".join(missing))
    return sections
