"""
Question bank models.

A ``Question`` is one step of the diagnostic questionnaire. Its answer is
stored in the session under ``context_key``; that key may or may not be a
signal in the ``RelationMatrix`` (profile and nostalgia questions usually are
not).

Branching
---------
A question can redirect the session to a *later* question once answered.
Two ways to express this:

  - ``branch_rules`` — declarative ``BranchRule`` list, loadable from JSON.
    Rules are evaluated in order; the first match wins.
  - ``branch`` — a Python callable ``(answers, bank) -> question_id | None``
    for cases the rule vocabulary cannot express. Takes precedence over
    ``branch_rules`` when set.

Both receive the *cumulative* answer map (including the answer that was just
recorded) and return a question **id**, never an index. The sequencer
resolves that id against the current session's permutation.

``QuestionBank`` is the immutable, validated collection handed to the engine.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator, Mapping
from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from aesthetic_advisor.taxonomy.question_taxonomy import BranchOperator, QuestionKind
from aesthetic_advisor.utils.text import normalize_answer

BranchFunc = Callable[[Mapping[str, str], Any], Optional[str]]


class BranchRule(BaseModel):
    """Declarative redirection: if ``answers[context_key]`` matches, go to ``goto``.

    Attributes:
        context_key: Answer key inspected by the rule. Usually the owning
            question's own key, but any earlier answer may be used.
        operator: Comparison to apply (see ``BranchOperator``).
        value: Expected value. A list is required for ``in``; ignored for
            ``exists``.
        goto: Target question id.
    """

    model_config = ConfigDict(frozen=True)

    context_key: str
    operator: BranchOperator = BranchOperator.EQUALS
    value: Union[str, list[str], None] = None
    goto: str

    @model_validator(mode="after")
    def validate_value_for_operator(self) -> "BranchRule":
        if self.operator == BranchOperator.EXISTS:
            return self
        if self.value is None:
            raise ValueError(
                f"BranchRule on '{self.context_key}' with operator "
                f"'{self.operator}' requires a value."
            )
        if self.operator == BranchOperator.IN and not isinstance(self.value, list):
            raise ValueError(
                f"BranchRule on '{self.context_key}' with operator 'in' "
                "requires a list value."
            )
        return self

    def matches(self, answers: Mapping[str, str]) -> bool:
        """Return True if this rule fires for the given answers."""
        if self.context_key not in answers:
            return False
        if self.operator == BranchOperator.EXISTS:
            return True

        answer = normalize_answer(answers[self.context_key])
        if self.operator == BranchOperator.IN:
            return answer in {normalize_answer(v) for v in self.value or []}

        expected = normalize_answer(self.value)
        if self.operator == BranchOperator.EQUALS:
            return answer == expected
        if self.operator == BranchOperator.NOT_EQUALS:
            return answer != expected
        if self.operator == BranchOperator.STARTSWITH:
            return answer.startswith(expected)
        if self.operator == BranchOperator.CONTAINS:
            return expected in answer
        return False


class Question(BaseModel):
    """One question of the diagnostic questionnaire.

    Attributes:
        id: Unique identifier with no whitespace, e.g. ``"flacidez_facial"``.
        prompt_text: Text shown to the user.
        options: Ordered selectable answers. May be empty for free text.
        context_key: Key under which the answer is stored in the session.
        mandatory: Mandatory questions are always asked, first, in bank order.
        kind: ``QuestionKind`` used for display grouping.
        branch_rules: Declarative branch rules (first match wins).
        branch: Optional callable branch; overrides ``branch_rules``.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    prompt_text: str
    options: list[str] = []
    context_key: str
    mandatory: bool = False
    kind: QuestionKind = QuestionKind.DIAGNOSIS
    branch_rules: list[BranchRule] = []
    branch: Optional[BranchFunc] = Field(default=None, exclude=True, repr=False)

    @field_validator("id")
    @classmethod
    def validate_id_format(cls, v: str) -> str:
        if not v or any(ch.isspace() for ch in v):
            raise ValueError(f"Question id '{v}' must be non-empty with no whitespace.")
        return v

    @field_validator("prompt_text", "context_key")
    @classmethod
    def validate_not_empty(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("prompt_text and context_key must not be empty.")
        return v.strip()

    def resolve_branch(self, answers: Mapping[str, str], bank: "QuestionBank") -> Optional[str]:
        """Return the branch target id for ``answers``, or ``None``.

        Exceptions raised by a custom ``branch`` callable propagate; the
        sequencer decides how to absorb them.
        """
        if self.branch is not None:
            return self.branch(answers, bank)
        for rule in self.branch_rules:
            if rule.matches(answers):
                return rule.goto
        return None


class QuestionBank:
    """Immutable, ordered collection of questions with id lookup.

    Validation on construction:
      - Question ids are unique.
      - Every ``BranchRule.goto`` references a question in the bank.

    Callable branches cannot be checked up front; an unknown id returned at
    runtime is treated by the sequencer as "no branch".
    """

    def __init__(self, questions: Iterable[Question]) -> None:
        self._questions: tuple[Question, ...] = tuple(questions)
        self._by_id: dict[str, Question] = {}
        for i, q in enumerate(self._questions):
            if q.id in self._by_id:
                raise ValueError(f"Duplicate question id '{q.id}' at index {i}.")
            self._by_id[q.id] = q

        for q in self._questions:
            for rule in q.branch_rules:
                if rule.goto not in self._by_id:
                    raise ValueError(
                        f"Question '{q.id}' branches to unknown question '{rule.goto}'."
                    )

    def __iter__(self) -> Iterator[Question]:
        return iter(self._questions)

    def __len__(self) -> int:
        return len(self._questions)

    def __contains__(self, question_id: object) -> bool:
        return question_id in self._by_id

    def __repr__(self) -> str:
        return f"QuestionBank({len(self._questions)} questions)"

    def get(self, question_id: str) -> Optional[Question]:
        return self._by_id.get(question_id)

    def mandatory(self) -> list[Question]:
        """Mandatory questions in their fixed bank order."""
        return [q for q in self._questions if q.mandatory]

    def optional(self) -> list[Question]:
        """Non-mandatory questions in bank order (before shuffling)."""
        return [q for q in self._questions if not q.mandatory]

    def context_keys(self) -> set[str]:
        return {q.context_key for q in self._questions}
