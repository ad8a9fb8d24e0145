"""
Relation matrix models: diagnostic signal → weighted candidate effects.

Each ``RelationEntry`` says "when the user confirms ``signal_key``, raise
these candidates by these weights" (or, for a negative answer, eliminate
them). The matrix is authored outside the engine and is static for the life
of a session.

Weights are non-negative so that accumulated scores never decrease. A
missing weight is read as ``0``; candidate ids are not checked against the
catalog here (a dangling id simply never surfaces in a ranking).

JSON form (``config/data/relations.json``)::

    {
      "flacidez_facial": [
        {"candidate_id": "hipro", "weight": 16},
        {"candidate_id": "ultralift", "weight": 12}
      ]
    }
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, field_validator


class RelationLink(BaseModel):
    """One weighted effect of a signal on a candidate."""

    model_config = ConfigDict(frozen=True)

    candidate_id: str
    weight: float = 0.0

    @field_validator("weight", mode="before")
    @classmethod
    def default_missing_weight(cls, v: Any) -> Any:
        return 0.0 if v is None else v

    @field_validator("weight")
    @classmethod
    def validate_non_negative(cls, v: float) -> float:
        if v < 0.0:
            raise ValueError(f"weight must be >= 0, got {v}.")
        return v


class RelationEntry(BaseModel):
    """All candidate effects linked to a single diagnostic signal."""

    model_config = ConfigDict(frozen=True)

    signal_key: str
    links: list[RelationLink] = []

    @field_validator("signal_key")
    @classmethod
    def validate_signal_key(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("signal_key must not be empty.")
        return v.strip()

    def candidate_ids(self) -> list[str]:
        return [link.candidate_id for link in self.links]


class RelationMatrix:
    """Read-only lookup of ``RelationEntry`` by signal key."""

    def __init__(self, entries: Iterable[RelationEntry] = ()) -> None:
        self._entries: dict[str, RelationEntry] = {}
        for entry in entries:
            if entry.signal_key in self._entries:
                raise ValueError(f"Duplicate relation signal '{entry.signal_key}'.")
            self._entries[entry.signal_key] = entry

    @classmethod
    def from_mapping(cls, raw: Mapping[str, list[Mapping[str, Any]]]) -> "RelationMatrix":
        """Build a matrix from the ``{signal: [{candidate_id, weight}, ...]}`` form."""
        return cls(
            RelationEntry(
                signal_key=signal,
                links=[RelationLink(**link) for link in links],
            )
            for signal, links in raw.items()
        )

    def __contains__(self, signal_key: object) -> bool:
        return signal_key in self._entries

    def __iter__(self) -> Iterator[RelationEntry]:
        return iter(self._entries.values())

    def __len__(self) -> int:
        return len(self._entries)

    def get(self, signal_key: str) -> Optional[RelationEntry]:
        return self._entries.get(signal_key)

    def signals(self) -> list[str]:
        return list(self._entries)

    def candidate_ids(self) -> set[str]:
        """Every candidate id referenced anywhere in the matrix."""
        return {cid for entry in self._entries.values() for cid in entry.candidate_ids()}
