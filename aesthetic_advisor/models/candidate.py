"""
Candidate catalog model.

A ``Candidate`` is a recommendable piece of equipment. Only ``id``, ``name``
and the two availability flags influence the engine; every descriptive field
is carried for display.

Two flags gate ranking:
  - ``enabled`` — catalog-level switch ("show in the diagnostic at all").
    Accepts the legacy ``akinator_enabled`` key on load.
  - ``active``  — availability ("currently sold / supported").
    Accepts the legacy ``ativo`` key on load.
"""

from __future__ import annotations

from typing import Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


class Candidate(BaseModel):
    """A recommendable catalog item.

    Attributes:
        id: Unique identifier with no whitespace, e.g. ``"hipro"``.
        name: Display name.
        technology: Technology label (e.g. ``"Ultrassom microfocado"``).
        indications: Indications as free text items.
        application_areas: Body areas (e.g. ``["Facial", "Corporal"]``).
        description: Longer free-text description.
        enabled: Whether the item participates in diagnostics.
        active: Whether the item is currently available.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str
    name: str = Field(validation_alias=AliasChoices("name", "nome"))
    technology: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("technology", "tecnologia")
    )
    indications: list[str] = Field(
        default_factory=list, validation_alias=AliasChoices("indications", "indicacoes")
    )
    application_areas: list[str] = Field(
        default_factory=list,
        validation_alias=AliasChoices("application_areas", "area_aplicacao"),
    )
    description: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("description", "descricao")
    )
    enabled: bool = Field(
        default=True, validation_alias=AliasChoices("enabled", "akinator_enabled")
    )
    active: bool = Field(default=True, validation_alias=AliasChoices("active", "ativo"))

    @field_validator("id")
    @classmethod
    def validate_id_format(cls, v: str) -> str:
        if not v or any(ch.isspace() for ch in v):
            raise ValueError(f"Candidate id '{v}' must be non-empty with no whitespace.")
        return v

    @field_validator("indications", "application_areas", mode="before")
    @classmethod
    def coerce_single_string(cls, v: object) -> object:
        # Catalog exports store these either as a list or as one string.
        if isinstance(v, str):
            return [v] if v.strip() else []
        return v

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("Candidate name must not be empty.")
        return v.strip()

    @property
    def is_rankable(self) -> bool:
        """True when both catalog flags allow the item into a ranking."""
        return self.enabled and self.active
