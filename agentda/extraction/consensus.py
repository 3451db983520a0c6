"""Keyword sentiment and vote-based consensus scoring for agenda items."""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from typing import Any

from agentda.extraction.models import AgendaItem, Comment, ConsensusResult

POSITIVE_KEYWORDS: tuple[str, ...] = (
    "agree",
    "good",
    "great",
    "yes",
    "support",
    "like",
    "approve",
    "excellent",
    "perfect",
    "awesome",
    "\N{THUMBS UP SIGN}",
    "+1",
)

NEGATIVE_KEYWORDS: tuple[str, ...] = (
    "disagree",
    "bad",
    "no",
    "don't",
    "oppose",
    "dislike",
    "reject",
    "poor",
    "waste",
    "unnecessary",
    "\N{THUMBS DOWN SIGN}",
    "-1",
)

NEUTRAL_SCORE = 50
VOTE_WEIGHT = 5
MAX_VOTE_POINTS = 30
SENTIMENT_WEIGHT = 20


def _text_of(comment: Comment | Mapping[str, Any] | str) -> str:
    if isinstance(comment, Comment):
        return comment.text
    if isinstance(comment, str):
        return comment
    return str(comment.get("text", ""))


def analyze_sentiment(texts: Iterable[str]) -> float:
    """Return a sentiment signal in ``[-1, 1]`` from keyword hits.

    Each keyword counts once per text it appears in (case-insensitive
    substring match). No hits at all gives ``0``.
    """
    positive = 0
    negative = 0
    for text in texts:
        lowered = text.lower()
        positive += sum(1 for keyword in POSITIVE_KEYWORDS if keyword in lowered)
        negative += sum(1 for keyword in NEGATIVE_KEYWORDS if keyword in lowered)

    if positive == 0 and negative == 0:
        return 0.0
    return (positive - negative) / (positive + negative)


def score_consensus(votes: int, comments: Sequence[Comment | Mapping[str, Any] | str]) -> int:
    """Score agreement on an agenda item from 0 to 100.

    ``50 + min(votes * 5, 30) + sentiment * 20``, clamped to ``[0, 100]`` and
    rounded to the nearest integer.

    Raises:
        ValueError: If *votes* is negative.
    """
    if votes < 0:
        raise ValueError(f"votes must be >= 0, got {votes}")

    sentiment = analyze_sentiment(_text_of(c) for c in comments)
    score = NEUTRAL_SCORE + min(votes * VOTE_WEIGHT, MAX_VOTE_POINTS) + sentiment * SENTIMENT_WEIGHT
    return int(round(min(max(score, 0), 100)))


def analyze_consensus(agenda: Sequence[AgendaItem]) -> list[ConsensusResult]:
    """Score every agenda item and flag the ones with net-negative comments."""
    results: list[ConsensusResult] = []
    for item in agenda:
        votes = max(item.votes or 0, 0)
        sentiment = analyze_sentiment(c.text for c in item.comments)
        results.append(
            ConsensusResult(
                item_id=item.id,
                title=item.label,
                consensus_score=score_consensus(votes, item.comments),
                has_disagreement=sentiment < 0,
            )
        )
    return results
