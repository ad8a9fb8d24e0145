"""
Per-session diagnostic state.

``SessionState`` is the **only** mutable model in the package. It is created
fresh by ``engine.sequencer.new_session_state()``, mutated exclusively by
``DiagnosticSession.submit_answer()``, and replaced wholesale (never patched)
on reset. The engine never persists it; callers that want to keep a finished
session export a ``SessionSummary`` instead.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field


def _new_session_id() -> str:
    return f"session_{uuid.uuid4().hex[:12]}"


class AnswerRecord(BaseModel):
    """One recorded answer, in submission order."""

    model_config = ConfigDict(frozen=True)

    question_id: str
    context_key: str
    value: str


class SessionState(BaseModel):
    """Mutable state of one diagnostic session.

    Attributes:
        session_id: Opaque identifier, regenerated on every reset.
        sequence: Ordered question ids for this session; fixed once built.
        current_index: Position in ``sequence``; only ever moves forward.
        answers: ``context_key → value`` of everything answered so far.
        history: Answers in submission order, with the question that asked.
        scores: ``candidate_id → accumulated score``; never decreases.
        eliminated: Candidate ids removed for the rest of the session.
        completed: True once the sequence is exhausted.
        started_at: UTC time the state was created.
    """

    # Not frozen: mutated by the sequencer and the scoring step
    model_config = ConfigDict(frozen=False)

    session_id: str = Field(default_factory=_new_session_id)
    sequence: list[str] = []
    current_index: int = 0
    answers: dict[str, str] = {}
    history: list[AnswerRecord] = []
    scores: dict[str, float] = {}
    eliminated: set[str] = set()
    completed: bool = False
    started_at: datetime = Field(default_factory=lambda: datetime.now(tz=timezone.utc))

    @property
    def remaining(self) -> int:
        """Questions left in the sequence, counting the current one."""
        if self.completed:
            return 0
        return max(0, len(self.sequence) - self.current_index)
