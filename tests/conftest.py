"""
Shared pytest fixtures for the aesthetic advisor test suite.

Provides:
  - ``scenario_*``: the two-question bank / one-signal matrix / one-item
    catalog used for the basic scoring and elimination scenarios.
  - ``clinic_*``: a richer bank with a declarative branch, nostalgia and
    diagnosis questions, plus a catalog with disabled and inactive items.
  - ``data_dir`` / ``config_file``: the clinic inputs written to disk with a
    matching TOML config, for loader, config and CLI tests.
  - ``restore_root_logging``: undoes ``configure_logging`` side effects.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Generator

import pytest

from aesthetic_advisor.models.candidate import Candidate
from aesthetic_advisor.models.question import Question, QuestionBank
from aesthetic_advisor.models.relation import RelationMatrix
from aesthetic_advisor.taxonomy.question_taxonomy import QuestionKind

PROJECT_ROOT = Path(__file__).resolve().parent.parent


# ── Minimal scenario ──────────────────────────────────────────────────────────

@pytest.fixture
def scenario_bank() -> QuestionBank:
    return QuestionBank([
        Question(
            id="perfil_tipo",
            prompt_text="Quem é você?",
            context_key="perfil_tipo",
            mandatory=True,
            kind=QuestionKind.PROFILE,
        ),
        Question(
            id="flacidez_facial",
            prompt_text="Percebe flacidez no rosto?",
            options=["Sim", "Não"],
            context_key="flacidez_facial",
        ),
    ])


@pytest.fixture
def scenario_matrix() -> RelationMatrix:
    return RelationMatrix.from_mapping(
        {"flacidez_facial": [{"candidate_id": "hipro", "weight": 10}]}
    )


@pytest.fixture
def scenario_catalog() -> list[Candidate]:
    return [Candidate(id="hipro", name="Hipro")]


# ── Clinic data set ───────────────────────────────────────────────────────────

CLINIC_QUESTIONS: list[dict] = [
    {
        "id": "perfil_tipo",
        "prompt_text": "Quem é você no mundo da estética?",
        "options": ["Médico(a)", "Profissional de estética", "Cliente interessado(a)"],
        "context_key": "perfil_tipo",
        "mandatory": True,
        "kind": "profile",
    },
    {
        "id": "intencao_consulta",
        "prompt_text": "Qual é seu objetivo hoje?",
        "options": ["Resolver um problema", "Comparar equipamentos", "Apenas curiosidade"],
        "context_key": "intencao",
        "mandatory": True,
        "kind": "intention",
        "branch_rules": [
            {
                "context_key": "intencao",
                "operator": "startswith",
                "value": "apenas curiosidade",
                "goto": "finalizar",
            }
        ],
    },
    {
        "id": "flacidez_facial",
        "prompt_text": "Percebe flacidez no rosto?",
        "options": ["Sim", "Não"],
        "context_key": "flacidez_facial",
    },
    {
        "id": "gordura_localizada",
        "prompt_text": "Tem gordura localizada?",
        "options": ["Sim", "Não"],
        "context_key": "gordura_localizada",
    },
    {
        "id": "melasma_manchas",
        "prompt_text": "Possui manchas ou melasma?",
        "options": ["Sim", "Um pouco", "Não"],
        "context_key": "melasma_manchas",
    },
    {
        "id": "brasil_penta",
        "prompt_text": "Lembra do Brasil Pentacampeão?",
        "options": ["Sim", "Não"],
        "context_key": "brasil_penta",
        "kind": "nostalgia",
    },
    {
        "id": "finalizar",
        "prompt_text": "Quer ver a recomendação?",
        "options": ["Sim"],
        "context_key": "finalizar",
        "kind": "technical",
    },
]

CLINIC_RELATIONS: dict[str, list[dict]] = {
    "flacidez_facial":    [{"candidate_id": "hipro", "weight": 16},
                           {"candidate_id": "ultralift", "weight": 12}],
    "gordura_localizada": [{"candidate_id": "supreme", "weight": 17},
                           {"candidate_id": "hipro", "weight": 4}],
    "melasma_manchas":    [{"candidate_id": "focuskin", "weight": 18},
                           {"candidate_id": "reverso", "weight": 14}],
}

CLINIC_CANDIDATES: list[dict] = [
    {"id": "hipro",     "nome": "Hipro",     "tecnologia": "HIFU"},
    {"id": "ultralift", "nome": "Ultralift", "tecnologia": "Radiofrequência"},
    {"id": "supreme",   "nome": "Supreme",   "tecnologia": "Criolipólise"},
    {"id": "focuskin",  "nome": "Focuskin",  "tecnologia": "Laser"},
    {"id": "reverso",   "nome": "Reverso",   "ativo": False},
    {"id": "unyque",    "nome": "Unyque",    "akinator_enabled": False},
]

# Answers for a complete clinic session; keyed by context_key.
CLINIC_ANSWERS: dict[str, str] = {
    "perfil_tipo":        "Médico(a)",
    "intencao":           "Comparar equipamentos",
    "flacidez_facial":    "Sim",
    "gordura_localizada": "Não",
    "melasma_manchas":    "Um pouco",
    "brasil_penta":       "Sim",
    "finalizar":          "Sim",
}


@pytest.fixture
def clinic_bank() -> QuestionBank:
    return QuestionBank(Question(**rec) for rec in CLINIC_QUESTIONS)


@pytest.fixture
def clinic_matrix() -> RelationMatrix:
    return RelationMatrix.from_mapping(CLINIC_RELATIONS)


@pytest.fixture
def clinic_catalog() -> list[Candidate]:
    return [Candidate(**rec) for rec in CLINIC_CANDIDATES]


@pytest.fixture
def clinic_answers() -> dict[str, str]:
    return dict(CLINIC_ANSWERS)


@pytest.fixture
def linear_bank() -> QuestionBank:
    """Three mandatory questions a → b → c (fixed order, no branches)."""
    return QuestionBank([
        Question(id=qid, prompt_text=f"Pergunta {qid}?", context_key=qid, mandatory=True)
        for qid in ("a", "b", "c")
    ])


# ── On-disk inputs and config ─────────────────────────────────────────────────

def write_json(path: Path, payload: object) -> Path:
    path.write_text(json.dumps(payload, ensure_ascii=False), encoding="utf-8")
    return path


@pytest.fixture
def data_dir(tmp_path: Path) -> Path:
    """Directory holding questions.json / relations.json / candidates.json."""
    d = tmp_path / "data"
    d.mkdir()
    write_json(d / "questions.json", CLINIC_QUESTIONS)
    write_json(d / "relations.json", CLINIC_RELATIONS)
    write_json(d / "candidates.json", CLINIC_CANDIDATES)
    return d


@pytest.fixture
def config_file(tmp_path: Path, data_dir: Path) -> Path:
    """TOML config pointing at ``data_dir`` with reports and logs under tmp_path."""
    path = tmp_path / "advisor.toml"
    path.write_text(
        "\n".join([
            "[data]",
            f'questions_file  = "{(data_dir / "questions.json").as_posix()}"',
            f'relations_file  = "{(data_dir / "relations.json").as_posix()}"',
            f'candidates_file = "{(data_dir / "candidates.json").as_posix()}"',
            f'reports_dir     = "{(tmp_path / "reports").as_posix()}"',
            "",
            "[engine]",
            'negative_tokens = ["não", "nao"]',
            "shuffle_seed = 11",
            "",
            "[logging]",
            'level    = "WARNING"',
            f'log_file = "{(tmp_path / "logs" / "advisor.log").as_posix()}"',
            "",
        ]),
        encoding="utf-8",
    )
    return path


@pytest.fixture
def shipped_data_dir() -> Path:
    return PROJECT_ROOT / "config" / "data"


# ── Logging isolation ─────────────────────────────────────────────────────────

@pytest.fixture
def restore_root_logging() -> Generator[None, None, None]:
    """Put the root logger back the way it was after a test reconfigures it."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    for handler in list(root.handlers):
        if handler not in handlers:
            root.removeHandler(handler)
            handler.close()
    for handler in handlers:
        if handler not in root.handlers:
            root.addHandler(handler)
    root.setLevel(level)


@pytest.fixture(autouse=True)
def clean_advisor_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep AESTHETIC_ADVISOR_* variables from the host out of every test."""
    for name in (
        "AESTHETIC_ADVISOR_LOG_LEVEL",
        "AESTHETIC_ADVISOR_SHUFFLE_SEED",
        "AESTHETIC_ADVISOR_DATA_DIR",
        "AESTHETIC_ADVISOR_DEBUG",
    ):
        monkeypatch.delenv(name, raising=False)
