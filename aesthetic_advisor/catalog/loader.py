"""
Engine input loader: JSON → validated QuestionBank / RelationMatrix / catalog.

Responsibilities
----------------
1. Load ``config/data/questions.json`` into a ``QuestionBank``.
2. Load ``config/data/relations.json`` into a ``RelationMatrix``.
3. Load ``config/data/candidates.json`` into a list of ``Candidate``.
4. Report relation links that reference candidates missing from the catalog
   (allowed, but logged so content editors notice).

File formats
------------
questions.json   — array of Question objects::

    [{"id": "perfil_tipo", "prompt_text": "...", "options": ["..."],
      "context_key": "perfil_tipo", "mandatory": true, "kind": "profile",
      "branch_rules": [{"context_key": "perfil_tipo", "operator": "startswith",
                        "value": "cliente", "goto": "area_foco"}]}]

relations.json   — object of signal → links::

    {"flacidez_facial": [{"candidate_id": "hipro", "weight": 16}]}

candidates.json  — array of Candidate objects (legacy ``nome``/``ativo``/
                   ``akinator_enabled`` keys accepted).

Validation rules
----------------
- Question and candidate ids are unique within their file.
- Branch rules target question ids present in the bank.
- Weights are non-negative; a missing weight reads as 0.
Every error message names the file and the offending record index or key.

Usage
-----
    from aesthetic_advisor.catalog.loader import load_all

    inputs = load_all(config.data)
    session = DiagnosticSession(inputs.bank, inputs.matrix, inputs.catalog)
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Any

from pydantic import ValidationError

from aesthetic_advisor.models.candidate import Candidate
from aesthetic_advisor.models.question import Question, QuestionBank
from aesthetic_advisor.models.relation import RelationEntry, RelationLink, RelationMatrix

if TYPE_CHECKING:
    from aesthetic_advisor.config import DataConfig

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class EngineInputs:
    """The three static inputs a diagnostic session needs."""

    bank:    QuestionBank
    matrix:  RelationMatrix
    catalog: list[Candidate]


# ── Helpers ───────────────────────────────────────────────────────────────────

def _read_json(path: Path) -> Any:
    if not path.exists():
        raise FileNotFoundError(f"Data file not found: {path}")
    try:
        with open(path, encoding="utf-8") as f:
            return json.load(f)
    except json.JSONDecodeError as exc:
        raise ValueError(f"{path.name}: invalid JSON ({exc})") from exc


# ── Loaders ───────────────────────────────────────────────────────────────────

def load_question_bank(path: Path) -> QuestionBank:
    """Load and validate the question bank.

    Raises:
        FileNotFoundError: If ``path`` does not exist.
        ValueError: On malformed JSON, invalid records, duplicate ids or
            branch rules targeting unknown questions.
    """
    path = Path(path)
    raw = _read_json(path)
    if not isinstance(raw, list):
        raise ValueError(f"{path.name}: questions file must contain an array.")

    questions: list[Question] = []
    for i, rec in enumerate(raw):
        try:
            questions.append(Question(**rec))
        except (ValidationError, TypeError) as exc:
            raise ValueError(f"{path.name}: question at index {i} is invalid: {exc}") from exc

    try:
        bank = QuestionBank(questions)
    except ValueError as exc:
        raise ValueError(f"{path.name}: {exc}") from exc

    log.info(
        "Loaded %d questions (%d mandatory) from %s.",
        len(bank), len(bank.mandatory()), path,
    )
    return bank


def load_relation_matrix(path: Path) -> RelationMatrix:
    """Load and validate the relation matrix.

    Raises:
        FileNotFoundError: If ``path`` does not exist.
        ValueError: On malformed JSON or invalid links.
    """
    path = Path(path)
    raw = _read_json(path)
    if not isinstance(raw, dict):
        raise ValueError(f"{path.name}: relations file must contain an object.")

    entries: list[RelationEntry] = []
    for signal, links in raw.items():
        if not isinstance(links, list):
            raise ValueError(f"{path.name}: signal '{signal}' must map to an array.")
        try:
            entries.append(
                RelationEntry(
                    signal_key=signal,
                    links=[RelationLink(**link) for link in links],
                )
            )
        except (ValidationError, TypeError) as exc:
            raise ValueError(f"{path.name}: signal '{signal}' is invalid: {exc}") from exc

    matrix = RelationMatrix(entries)
    log.info("Loaded %d relation signals from %s.", len(matrix), path)
    return matrix


def load_candidates(path: Path) -> list[Candidate]:
    """Load and validate the candidate catalog, preserving file order.

    Raises:
        FileNotFoundError: If ``path`` does not exist.
        ValueError: On malformed JSON, invalid records or duplicate ids.
    """
    path = Path(path)
    raw = _read_json(path)
    if not isinstance(raw, list):
        raise ValueError(f"{path.name}: candidates file must contain an array.")

    catalog: list[Candidate] = []
    seen: set[str] = set()
    for i, rec in enumerate(raw):
        try:
            candidate = Candidate(**rec)
        except (ValidationError, TypeError) as exc:
            raise ValueError(f"{path.name}: candidate at index {i} is invalid: {exc}") from exc
        if candidate.id in seen:
            raise ValueError(f"{path.name}: duplicate candidate id '{candidate.id}' at index {i}.")
        seen.add(candidate.id)
        catalog.append(candidate)

    rankable = sum(1 for c in catalog if c.is_rankable)
    log.info("Loaded %d candidates (%d rankable) from %s.", len(catalog), rankable, path)
    return catalog


def find_dangling_links(
    matrix:  RelationMatrix,
    catalog: list[Candidate],
) -> list[tuple[str, str]]:
    """Return ``(signal_key, candidate_id)`` pairs whose candidate is not in the catalog."""
    known = {c.id for c in catalog}
    return [
        (entry.signal_key, cid)
        for entry in matrix
        for cid in entry.candidate_ids()
        if cid not in known
    ]


def load_all(data: "DataConfig") -> EngineInputs:
    """Load all three engine inputs named by a ``DataConfig``."""
    bank    = load_question_bank(Path(data.questions_file))
    matrix  = load_relation_matrix(Path(data.relations_file))
    catalog = load_candidates(Path(data.candidates_file))

    for signal, cid in find_dangling_links(matrix, catalog):
        log.warning("Relation '%s' references unknown candidate '%s'; it will never rank.", signal, cid)

    return EngineInputs(bank=bank, matrix=matrix, catalog=catalog)
