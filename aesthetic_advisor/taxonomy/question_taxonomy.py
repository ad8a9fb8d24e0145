"""
Question taxonomy for the diagnostic questionnaire.

Two small vocabularies describe the question bank:
  - ``QuestionKind``   — the *why*: what the question is trying to learn.
  - ``BranchOperator`` — the *how*: how a declarative branch rule compares a
    recorded answer against its expected value.

Usage example::

    from aesthetic_advisor.taxonomy.question_taxonomy import BranchOperator, QuestionKind

    kind = QuestionKind.DIAGNOSIS
    op   = BranchOperator.STARTSWITH

This module has NO imports from any other ``aesthetic_advisor`` package.
"""

from enum import StrEnum


class QuestionKind(StrEnum):
    """Purpose of a question within a diagnostic session."""

    PROFILE = "profile"
    """Who is answering (physician, aesthetics professional, end client)."""

    INTENTION = "intention"
    """What the user wants out of the session (solve, explore, compare)."""

    DIAGNOSIS = "diagnosis"
    """A concrete complaint; usually maps to a relation-matrix signal."""

    NOSTALGIA = "nostalgia"
    """Cultural memory cue used only by the age estimator."""

    TECHNICAL = "technical"
    """Experience, expectations and session preferences."""


class BranchOperator(StrEnum):
    """Comparison applied by a ``BranchRule`` to one recorded answer.

    All comparisons are case- and accent-insensitive. A missing answer never
    matches, except for ``EXISTS`` which is exactly a presence check.
    """

    EQUALS = "equals"
    NOT_EQUALS = "not_equals"
    STARTSWITH = "startswith"
    CONTAINS = "contains"
    IN = "in"
    EXISTS = "exists"
