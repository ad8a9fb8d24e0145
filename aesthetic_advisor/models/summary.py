"""
Session summary — the hand-off record for the calling application.

The engine never persists anything. When a caller wants to keep the outcome
of a session (analytics, a PDF report, a CRM note) it asks the session for a
``SessionSummary`` and stores or exports that.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

from aesthetic_advisor.engine.estimator import PrimaryConcern
from aesthetic_advisor.models.session import AnswerRecord


class SessionSummary(BaseModel):
    """Frozen snapshot of a session at the time it was taken.

    Attributes:
        session_id: Identifier of the summarised session.
        answers: ``context_key → value`` map.
        history: Answers in submission order.
        ranking: Ranking rows as ``{"id", "name", "score"}`` dicts.
        eliminated: Sorted eliminated candidate ids.
        completed: Whether the questionnaire was finished.
        confidence: Ranking confidence 0–100.
        estimated_age: Auxiliary age estimate, if any.
        age_bracket: Display bracket for ``estimated_age``.
        primary_concern: First confirmed complaint, if any.
        generated_at: UTC time the snapshot was taken.
    """

    model_config = ConfigDict(frozen=True)

    session_id: str
    answers: dict[str, str]
    history: list[AnswerRecord]
    ranking: list[dict[str, Any]]
    eliminated: list[str]
    completed: bool
    confidence: int
    estimated_age: Optional[int] = None
    age_bracket: Optional[str] = None
    primary_concern: Optional[PrimaryConcern] = None
    generated_at: datetime = Field(default_factory=lambda: datetime.now(tz=timezone.utc))
