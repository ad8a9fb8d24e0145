"""
Ranking service: the externally visible recommendation list.

Usage flow
----------
1. rank(catalog, scores, eliminated)
   -> list[RankedCandidate]  (enabled, active, not eliminated; score desc)

2. ranking_confidence(ranked)
   -> int 0–100  (how clearly the leader stands out)

3. explain_candidate(candidate_id, history, matrix)
   -> list[Contribution]  (which confirmed signals raised this candidate)

``rank`` is callable at any point in a session, after every answer for live
feedback and after completion for the final result. It uses Python's stable
``sorted`` so candidates with equal scores keep their catalog order.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from typing import Any

from aesthetic_advisor.engine.scoring import DEFAULT_NEGATIVE_TOKENS, is_negative_response
from aesthetic_advisor.models.candidate import Candidate
from aesthetic_advisor.models.relation import RelationMatrix
from aesthetic_advisor.models.session import AnswerRecord


@dataclass(frozen=True)
class RankedCandidate:
    """One row of a ranking.

    Attributes:
        id:    Candidate id.
        name:  Candidate display name.
        score: Accumulated score (0.0 when no signal touched it).
    """

    id:    str
    name:  str
    score: float

    def as_dict(self) -> dict[str, Any]:
        return {"id": self.id, "name": self.name, "score": self.score}


@dataclass(frozen=True)
class Contribution:
    """A confirmed signal that raised a candidate's score."""

    signal_key: str
    answer:     str
    weight:     float


def rank(
    catalog:    Iterable[Candidate],
    scores:     Mapping[str, float],
    eliminated: Iterable[str],
) -> list[RankedCandidate]:
    """Filter and order the catalog by accumulated score.

    Args:
        catalog:    Candidates in catalog order.
        scores:     ``candidate_id → score``; missing ids score 0.
        eliminated: Candidate ids removed for this session.

    Returns:
        Rankable candidates, score descending, ties in catalog order.
    """
    excluded = set(eliminated)
    rows = [
        RankedCandidate(id=c.id, name=c.name, score=float(scores.get(c.id, 0.0) or 0.0))
        for c in catalog
        if c.enabled and c.active and c.id not in excluded
    ]
    return sorted(rows, key=lambda r: r.score, reverse=True)


def ranking_confidence(ranked: Sequence[RankedCandidate]) -> int:
    """Relative confidence (0–100) that the top candidate is the right one.

    With two or more candidates this is the lead of the first over the
    second as a share of the total absolute score, floored at 10. With a
    single candidate it is that candidate's share of the total. Zero when
    the ranking is empty or nothing has scored yet.
    """
    if not ranked:
        return 0
    total = sum(abs(r.score) for r in ranked)
    if total == 0:
        return 0
    top = ranked[0].score
    if len(ranked) > 1:
        lead = top - ranked[1].score
        return max(10, round(100 * lead / total))
    return round(100 * top / total)


def explain_candidate(
    candidate_id:    str,
    history:         Iterable[AnswerRecord],
    matrix:          RelationMatrix,
    negative_tokens: Iterable[str] = DEFAULT_NEGATIVE_TOKENS,
) -> list[Contribution]:
    """List the affirmative answers that added score to ``candidate_id``.

    Contributions are returned in answer order. Negative answers and
    signals unknown to the matrix contribute nothing.
    """
    tokens = tuple(negative_tokens)
    contributions: list[Contribution] = []
    for record in history:
        entry = matrix.get(record.context_key)
        if entry is None or is_negative_response(record.value, tokens):
            continue
        for link in entry.links:
            if link.candidate_id == candidate_id and link.weight:
                contributions.append(
                    Contribution(
                        signal_key=record.context_key,
                        answer=record.value,
                        weight=link.weight,
                    )
                )
    return contributions
