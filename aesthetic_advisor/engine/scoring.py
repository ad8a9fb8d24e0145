"""
Scoring / elimination: turns one answer into score and elimination deltas.

Rules
-----
    signal not in matrix          -> no effect
    negative answer ("Não ...")   -> every linked candidate is eliminated
    any other answer              -> every linked candidate += link weight

Negative detection
------------------
The answer is normalized (case-folded, accents stripped, trimmed) and
compared against each normalized negative token. It is negative when it
*equals* a token or *starts with* it:

    "Não"                     -> negative
    "Não tenho esse problema" -> negative
    "nao sei"                 -> negative
    "naotem"                  -> negative
    "Sim, muito"              -> positive

The defaults are ``("não", "nao")``. A bare ``"no"`` token would also catch
"Normal" and "Nova", so it is left to configurations that want it.

``apply_answer`` is pure: inputs are never mutated and the same inputs always
produce the same ``ScoreUpdate``. Scores only ever go up (weights are
non-negative) and eliminations only ever accumulate.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field

from aesthetic_advisor.models.relation import RelationMatrix
from aesthetic_advisor.utils.text import normalize_answer

DEFAULT_NEGATIVE_TOKENS: tuple[str, ...] = ("não", "nao")


@dataclass
class ScoreUpdate:
    """Result of applying one answer.

    Attributes:
        scores:           New ``candidate_id → score`` map (a copy).
        eliminated:       New eliminated set (a copy).
        added:            Score delta per candidate from this answer.
        newly_eliminated: Candidates eliminated by this answer that were not
                          eliminated before.
        negative:         Whether the answer was read as negative.
        matched:          Whether ``signal_key`` exists in the matrix.
    """

    scores:           dict[str, float]
    eliminated:       set[str]
    added:            dict[str, float] = field(default_factory=dict)
    newly_eliminated: set[str]         = field(default_factory=set)
    negative:         bool = False
    matched:          bool = False


def is_negative_response(
    raw_answer: object,
    negative_tokens: Iterable[str] = DEFAULT_NEGATIVE_TOKENS,
) -> bool:
    """Return True when ``raw_answer`` is a negative response."""
    answer = normalize_answer(raw_answer)
    if not answer:
        return False
    tokens = (normalize_answer(token) for token in negative_tokens)
    return any(token and answer.startswith(token) for token in tokens)


def apply_answer(
    scores:          Mapping[str, float],
    eliminated:      Iterable[str],
    signal_key:      str,
    raw_answer:      str,
    matrix:          RelationMatrix,
    negative_tokens: Iterable[str] = DEFAULT_NEGATIVE_TOKENS,
) -> ScoreUpdate:
    """Apply one answer to the current scores and eliminations.

    Args:
        scores:          Current accumulated scores.
        eliminated:      Current eliminated candidate ids.
        signal_key:      Context key of the answered question.
        raw_answer:      Answer as given by the user.
        matrix:          Relation matrix to look ``signal_key`` up in.
        negative_tokens: Tokens that mark a negative response.

    Returns:
        ``ScoreUpdate`` holding fresh ``scores`` / ``eliminated`` copies.
    """
    new_scores     = dict(scores)
    new_eliminated = set(eliminated)

    entry = matrix.get(signal_key)
    if entry is None:
        return ScoreUpdate(scores=new_scores, eliminated=new_eliminated)

    if is_negative_response(raw_answer, negative_tokens):
        linked = set(entry.candidate_ids())
        newly  = linked - new_eliminated
        new_eliminated |= linked
        return ScoreUpdate(
            scores=new_scores,
            eliminated=new_eliminated,
            newly_eliminated=newly,
            negative=True,
            matched=True,
        )

    added: dict[str, float] = {}
    for link in entry.links:
        weight = link.weight or 0.0
        new_scores[link.candidate_id] = new_scores.get(link.candidate_id, 0.0) + weight
        added[link.candidate_id] = added.get(link.candidate_id, 0.0) + weight

    return ScoreUpdate(
        scores=new_scores,
        eliminated=new_eliminated,
        added=added,
        matched=True,
    )
