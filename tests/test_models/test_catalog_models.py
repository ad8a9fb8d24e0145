"""Tests for Candidate and the relation matrix models."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from aesthetic_advisor.models.candidate import Candidate
from aesthetic_advisor.models.relation import RelationEntry, RelationLink, RelationMatrix


class TestCandidate:
    def test_minimal(self):
        c = Candidate(id="hipro", name="Hipro")
        assert c.enabled is True
        assert c.active is True
        assert c.is_rankable is True
        assert c.indications == []

    def test_legacy_keys(self):
        c = Candidate(**{
            "id": "reverso",
            "nome": "Reverso",
            "tecnologia": "Laser fracionado",
            "indicacoes": ["Melasma", "Cicatrizes"],
            "area_aplicacao": "Facial",
            "descricao": "Laser para manchas.",
            "ativo": False,
            "akinator_enabled": True,
        })
        assert c.name == "Reverso"
        assert c.technology == "Laser fracionado"
        assert c.indications == ["Melasma", "Cicatrizes"]
        assert c.application_areas == ["Facial"]
        assert c.description == "Laser para manchas."
        assert c.active is False
        assert c.is_rankable is False

    def test_disabled_not_rankable(self):
        assert Candidate(id="unyque", name="Unyque", enabled=False).is_rankable is False

    def test_blank_string_list_coerced_empty(self):
        assert Candidate(id="x", name="X", indications="  ").indications == []

    def test_mixed_case_id_kept(self):
        assert Candidate(id="HiPro", name="HiPro").id == "HiPro"

    @pytest.mark.parametrize("cid", ["", "hi pro"])
    def test_invalid_id_raises(self, cid):
        with pytest.raises(ValidationError, match="no whitespace"):
            Candidate(id=cid, name="Hipro")

    def test_blank_name_raises(self):
        with pytest.raises(ValidationError, match="name must not be empty"):
            Candidate(id="hipro", name=" ")


class TestRelationLink:
    def test_missing_weight_is_zero(self):
        assert RelationLink(candidate_id="hipro").weight == 0.0
        assert RelationLink(candidate_id="hipro", weight=None).weight == 0.0

    def test_negative_weight_raises(self):
        with pytest.raises(ValidationError, match="weight must be >= 0"):
            RelationLink(candidate_id="hipro", weight=-1)


class TestRelationMatrix:
    def test_from_mapping(self):
        matrix = RelationMatrix.from_mapping({
            "flacidez_facial": [{"candidate_id": "hipro", "weight": 16},
                                {"candidate_id": "ultralift", "weight": 12}],
            "depilacao": [{"candidate_id": "crystal", "weight": 18}],
        })
        assert len(matrix) == 2
        assert "depilacao" in matrix
        assert "orkut" not in matrix
        assert matrix.signals() == ["flacidez_facial", "depilacao"]
        assert matrix.get("flacidez_facial").candidate_ids() == ["hipro", "ultralift"]
        assert matrix.get("orkut") is None
        assert matrix.candidate_ids() == {"hipro", "ultralift", "crystal"}

    def test_duplicate_signal_raises(self):
        entry = RelationEntry(signal_key="x", links=[])
        with pytest.raises(ValueError, match="Duplicate relation signal 'x'"):
            RelationMatrix([entry, entry])

    def test_blank_signal_raises(self):
        with pytest.raises(ValidationError, match="signal_key must not be empty"):
            RelationEntry(signal_key=" ", links=[])

    def test_empty_matrix(self):
        matrix = RelationMatrix()
        assert len(matrix) == 0
        assert list(matrix) == []
