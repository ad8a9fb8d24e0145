"""
DiagnosticSession — the public surface of the engine.

One ``DiagnosticSession`` owns one ``SessionState`` and the three static
inputs (question bank, relation matrix, candidate catalog). Each call runs to
completion synchronously; there is no I/O and no background work.

    session = DiagnosticSession(bank, matrix, catalog, seed=42)
    while (q := session.current_question()) is not None:
        session.submit_answer(q.context_key, ask_user(q))
        show(session.ranking())          # live feedback, same function
    final = session.ranking()

Errors are absorbed rather than raised mid-session: late answers are ignored,
unknown signals are recorded without effect, and branch or estimator
failures are logged and skipped.
"""

from __future__ import annotations

import logging
import random
from collections.abc import Iterable
from typing import TYPE_CHECKING, Optional

from aesthetic_advisor.engine import sequencer
from aesthetic_advisor.engine.estimator import EstimatorResult, estimate_profile
from aesthetic_advisor.engine.ranking import (
    Contribution,
    RankedCandidate,
    explain_candidate,
    rank,
    ranking_confidence,
)
from aesthetic_advisor.engine.scoring import DEFAULT_NEGATIVE_TOKENS, apply_answer
from aesthetic_advisor.models.candidate import Candidate
from aesthetic_advisor.models.question import Question, QuestionBank
from aesthetic_advisor.models.relation import RelationMatrix
from aesthetic_advisor.models.session import SessionState
from aesthetic_advisor.models.summary import SessionSummary

if TYPE_CHECKING:
    from aesthetic_advisor.config import AppConfig

logger = logging.getLogger(__name__)


class DiagnosticSession:
    """Interactive branching questionnaire with live candidate ranking.

    Args:
        bank:            Question bank.
        matrix:          Signal → candidate weight table.
        catalog:         Candidates in display order.
        negative_tokens: Answer prefixes read as "no".
        seed:            Seed for the optional-question shuffle. The same
                         seed yields the same sequence of permutations
                         across resets.
    """

    def __init__(
        self,
        bank:            QuestionBank,
        matrix:          RelationMatrix,
        catalog:         Iterable[Candidate],
        *,
        negative_tokens: Iterable[str] = DEFAULT_NEGATIVE_TOKENS,
        seed:            Optional[int] = None,
    ) -> None:
        self._bank            = bank
        self._matrix          = matrix
        self._catalog         = tuple(catalog)
        self._negative_tokens = tuple(negative_tokens)
        self._rng             = random.Random(seed)
        self._state           = sequencer.new_session_state(self._bank, self._rng)

    @classmethod
    def from_config(cls, config: "AppConfig", seed: Optional[int] = None) -> "DiagnosticSession":
        """Build a session from the data files and engine settings in ``config``."""
        from aesthetic_advisor.catalog.loader import load_all

        inputs = load_all(config.data)
        return cls(
            inputs.bank,
            inputs.matrix,
            inputs.catalog,
            negative_tokens=config.engine.negative_tokens,
            seed=seed if seed is not None else config.engine.shuffle_seed,
        )

    # ── Public surface ────────────────────────────────────────────────────────

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def bank(self) -> QuestionBank:
        return self._bank

    def current_question(self) -> Optional[Question]:
        return sequencer.current_question(self._bank, self._state)

    def submit_answer(self, context_key: str, value: str) -> None:
        """Record an answer, update scores/eliminations, and advance.

        Ignored once the session is complete.
        """
        state = self._state
        if state.completed or self.current_question() is None:
            logger.debug(
                "Ignoring answer for '%s': session already complete.", context_key,
                extra=self._log_extra(),
            )
            return

        update = apply_answer(
            state.scores,
            state.eliminated,
            context_key,
            value,
            self._matrix,
            self._negative_tokens,
        )
        state.scores     = update.scores
        state.eliminated = update.eliminated
        if update.newly_eliminated:
            logger.debug(
                "Answer '%s' to '%s' eliminated %s.",
                value, context_key, sorted(update.newly_eliminated),
                extra=self._log_extra(),
            )
        elif not update.matched:
            logger.debug(
                "No relation signal for '%s'; answer recorded only.", context_key,
                extra=self._log_extra(),
            )

        sequencer.advance(self._bank, state, context_key, value)

    def ranking(self) -> list[RankedCandidate]:
        return rank(self._catalog, self._state.scores, self._state.eliminated)

    def is_complete(self) -> bool:
        return self._state.completed

    def reset(self) -> None:
        """Discard the current state and start over with a fresh permutation."""
        self._state = sequencer.new_session_state(self._bank, self._rng)
        logger.info(
            "Session reset: %s with %d questions.",
            self._state.session_id, len(self._state.sequence),
            extra=self._log_extra(),
        )

    # ── Supplementary views ───────────────────────────────────────────────────

    def progress(self) -> int:
        """Percent of the sequence consumed; 100 once complete."""
        if self._state.completed or not self._state.sequence:
            return 100
        return round(100 * self._state.current_index / len(self._state.sequence))

    def confidence(self) -> int:
        return ranking_confidence(self.ranking())

    def explain(self, candidate_id: str) -> list[Contribution]:
        return explain_candidate(
            candidate_id, self._state.history, self._matrix, self._negative_tokens
        )

    def profile(self) -> EstimatorResult:
        return estimate_profile(self._state.answers)

    def summary(self) -> SessionSummary:
        """Snapshot the session for the caller to store or export."""
        ranked  = self.ranking()
        profile = self.profile()
        return SessionSummary(
            session_id=self._state.session_id,
            answers=dict(self._state.answers),
            history=list(self._state.history),
            ranking=[r.as_dict() for r in ranked],
            eliminated=sorted(self._state.eliminated),
            completed=self._state.completed,
            confidence=ranking_confidence(ranked),
            estimated_age=profile.estimated_age,
            age_bracket=profile.age_bracket,
            primary_concern=profile.primary_concern,
        )

    # ── Helpers ───────────────────────────────────────────────────────────────

    def _log_extra(self) -> dict[str, str]:
        return {"session_id": self._state.session_id}
