"""
Session sequencer: question order and conditional redirection.

Sequence construction
---------------------
    sequence = [mandatory questions, bank order] ++ shuffle(optional questions)

The shuffle is ``random.Random.shuffle`` (Fisher–Yates). Pass a seeded
``random.Random`` for reproducible sessions; a fresh permutation is drawn on
every reset so repeated sessions vary while mandatory questions stay first.

Advancement rules (``advance``)
-------------------------------
    1. Record ``answers[context_key] = value``.
    2. Ask the current question for a branch target, with the new answer
       already visible.
    3. Target found at position p > current_index  -> jump to p.
    4. Anything else (no target, unknown id, target at or behind the current
       position) -> linear step: current_index + 1, or ``completed`` when
       the current question was the last one.

Backward targets are never followed, so a session cannot loop.
"""

from __future__ import annotations

import logging
import random
from typing import Optional

from aesthetic_advisor.models.question import Question, QuestionBank
from aesthetic_advisor.models.session import AnswerRecord, SessionState

logger = logging.getLogger(__name__)


def build_sequence(bank: QuestionBank, rng: Optional[random.Random] = None) -> list[str]:
    """Return the question id order for a new session.

    Args:
        bank: The question bank.
        rng:  Random source for the optional-question shuffle. Defaults to a
              fresh unseeded ``random.Random``.

    Returns:
        Mandatory ids in bank order followed by the shuffled optional ids.
    """
    rng = rng or random.Random()
    mandatory = [q.id for q in bank.mandatory()]
    optional  = [q.id for q in bank.optional()]
    rng.shuffle(optional)
    return mandatory + optional


def new_session_state(bank: QuestionBank, rng: Optional[random.Random] = None) -> SessionState:
    """Create a fresh ``SessionState`` with a newly drawn sequence.

    An empty bank yields a state that is already ``completed``.
    """
    sequence = build_sequence(bank, rng)
    return SessionState(sequence=sequence, completed=not sequence)


def current_question(bank: QuestionBank, state: SessionState) -> Optional[Question]:
    """Return the question at ``state.current_index``, or ``None`` when exhausted."""
    if state.completed or state.current_index >= len(state.sequence):
        return None
    return bank.get(state.sequence[state.current_index])


def record_answer(state: SessionState, question: Question, context_key: str, value: str) -> None:
    """Store an answer in ``state.answers`` and append it to the history."""
    state.answers[context_key] = value
    state.history.append(
        AnswerRecord(question_id=question.id, context_key=context_key, value=value)
    )


def resolve_next(bank: QuestionBank, state: SessionState, question: Question) -> None:
    """Move ``state`` past ``question`` following its branch, or linearly."""
    target_id = _safe_branch_target(bank, state, question)
    target_pos = _position_of(state, target_id)

    if target_pos is not None and target_pos > state.current_index:
        logger.debug(
            "Branch from '%s' to '%s' (index %d -> %d).",
            question.id, target_id, state.current_index, target_pos,
        )
        state.current_index = target_pos
        return

    if target_id is not None:
        logger.debug(
            "Ignoring branch target '%s' from '%s': not ahead of index %d.",
            target_id, question.id, state.current_index,
        )

    if state.current_index >= len(state.sequence) - 1:
        state.completed = True
        logger.debug("Sequence exhausted after '%s'.", question.id)
    else:
        state.current_index += 1


def advance(bank: QuestionBank, state: SessionState, context_key: str, value: str) -> SessionState:
    """Record an answer for the current question and move to the next one.

    No-op when the session is already complete or has no current question.

    Returns:
        The same ``state`` object, mutated in place.
    """
    question = current_question(bank, state)
    if question is None:
        return state

    record_answer(state, question, context_key, value)
    resolve_next(bank, state, question)
    return state


# ── Helpers ───────────────────────────────────────────────────────────────────

def _safe_branch_target(
    bank: QuestionBank,
    state: SessionState,
    question: Question,
) -> Optional[str]:
    try:
        return question.resolve_branch(dict(state.answers), bank)
    except Exception as exc:
        logger.warning(
            "Branch predicate of question '%s' failed (%s); advancing linearly.",
            question.id, exc,
        )
        return None


def _position_of(state: SessionState, question_id: Optional[str]) -> Optional[int]:
    if question_id is None:
        return None
    try:
        return state.sequence.index(question_id)
    except ValueError:
        return None
