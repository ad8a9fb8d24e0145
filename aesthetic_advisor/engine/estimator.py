"""
Auxiliary estimator: secondary display attributes derived from answers.

Nothing here feeds back into scoring, elimination or ranking. Every public
entry point tolerates arbitrary answer maps, and ``estimate_profile`` absorbs
any internal failure into an empty result so a bad answer can never block
the main flow.

Age estimate
------------
Nostalgia questions ask whether the user remembers a cultural milestone.
The first affirmative answer, in the order below, decides the estimate:

    brasil_tricampeao (1994 World Cup)  -> 35
    brasil_penta      (2002 World Cup)  -> 25
    tv_colosso        (90s TV show)     -> 30
    xuxa              (80s-90s TV host) -> 35
    orkut             (2000s network)   -> 28

No affirmative nostalgia answer -> no estimate (``None``).

Primary concern
---------------
The first confirmed complaint among facial laxity, body laxity, localized fat
and melasma, together with the body area it concerns.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Optional

from pydantic import BaseModel, ConfigDict

from aesthetic_advisor.utils.text import normalize_answer, starts_with_token

logger = logging.getLogger(__name__)

_AGE_SIGNALS: tuple[tuple[str, int], ...] = (
    ("brasil_tricampeao", 35),
    ("brasil_penta",      25),
    ("tv_colosso",        30),
    ("xuxa",              35),
    ("orkut",             28),
)

_CONCERN_SIGNALS: tuple[tuple[str, str], ...] = (
    ("flacidez_facial",    "rosto"),
    ("flacidez_corporal",  "corpo"),
    ("gordura_localizada", "corpo"),
    ("melasma_manchas",    "rosto"),
)

# Upper bound (exclusive) → bracket label; evaluated in order.
_AGE_BRACKETS: tuple[tuple[int, str], ...] = (
    (25, "18-24"),
    (35, "25-34"),
    (45, "35-44"),
)


class PrimaryConcern(BaseModel):
    """The main complaint identified from the answers."""

    model_config = ConfigDict(frozen=True)

    signal_key: str
    area: str


class EstimatorResult(BaseModel):
    """Everything the estimator could derive; every field is optional."""

    model_config = ConfigDict(frozen=True)

    estimated_age: Optional[int] = None
    age_bracket: Optional[str] = None
    primary_concern: Optional[PrimaryConcern] = None


def _is_affirmative(value: object) -> bool:
    return starts_with_token(normalize_answer(value), "sim")


def estimate_age(answers: Mapping[str, str]) -> Optional[int]:
    """Return an approximate age from nostalgia answers, or ``None``."""
    for key, age in _AGE_SIGNALS:
        if _is_affirmative(answers.get(key)):
            return age
    return None


def age_bracket(age: Optional[int]) -> Optional[str]:
    """Map an age to a display bracket (``"25-34"``, ``"45+"``...)."""
    if age is None:
        return None
    for upper, label in _AGE_BRACKETS:
        if age < upper:
            return label
    return "45+"


def identify_primary_concern(answers: Mapping[str, str]) -> Optional[PrimaryConcern]:
    """Return the first confirmed complaint, or ``None``."""
    for key, area in _CONCERN_SIGNALS:
        if _is_affirmative(answers.get(key)):
            return PrimaryConcern(signal_key=key, area=area)
    return None


def estimate_profile(answers: Mapping[str, str]) -> EstimatorResult:
    """Run every estimator; never raises."""
    try:
        age = estimate_age(answers)
        return EstimatorResult(
            estimated_age=age,
            age_bracket=age_bracket(age),
            primary_concern=identify_primary_concern(answers),
        )
    except Exception as exc:
        logger.warning("Profile estimation failed: %s", exc)
        return EstimatorResult()
