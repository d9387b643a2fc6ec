from __future__ import annotations
import pytest
from construction_dna.core.models import MaterialRecord
from construction_dna.core.relevance import QA_WEIGHTS, SEARCH_WEIGHTS, rank_materials, score_material


def _material(mid, chem_code, product, mfr="ACM"):
    return MaterialRecord.from_dict({
        "id": mid,
        "classification": {
            "manufacturer": {"code": mfr, "name": "Acme Roofing"},
            "product_variant": {"code": "P", "name": product},
        },
        "physical": {"base_chemistry": {"code": chem_code, "name": chem_code + " Membrane",
                                        "type": chem_code}},
    })


class TestQAScoring:
    def test_keyword_hit_worth_two(self):
        m = _material("a", "TPO", "Shield")
        assert score_material(m, ["shield"], QA_WEIGHTS) == 2

    def test_chemistry_entity_bonus(self):
        m = _material("a", "TPO", "Shield")
        # type and code both equal "TPO"
        assert score_material(m, [], QA_WEIGHTS, chemistries=["tpo"]) == 10

    def test_material_token_bonus(self):
        m = _material("a", "TPO", "Shield")
        assert score_material(m, [], QA_WEIGHTS, material_tokens=["Shield"]) == 3

    def test_manufacturer_code_not_searched(self):
        m = _material("a", "TPO", "Shield", mfr="XYZ")
        assert score_material(m, ["xyz"], QA_WEIGHTS) == 0


class TestSearchScoring:
    def test_short_keywords_ignored(self):
        m = _material("a", "TPO", "Shield")
        assert score_material(m, ["sh"], SEARCH_WEIGHTS) == 0

    def test_exact_code_bonuses(self):
        m = _material("a", "TPO", "Shield", mfr="GAF")
        assert score_material(m, ["tpo"], SEARCH_WEIGHTS) == 3
        assert score_material(m, ["gaf"], SEARCH_WEIGHTS) == 3


class TestRanking:
    def test_drops_zero_and_sorts(self):
        a = _material("a", "PVC", "Plain")
        b = _material("b", "TPO", "Shield")
        ranked = rank_materials([a, b], ["shield"], QA_WEIGHTS, chemistries=["tpo"])
        assert [m.id for m in ranked] == ["b"]

    def test_ties_keep_input_order(self):
        mats = [_material(str(i), "TPO", "Same") for i in range(4)]
        ranked = rank_materials(mats, ["same"], QA_WEIGHTS)
        assert [m.id for m in ranked] == ["0", "1", "2", "3"]

    def test_limit(self):
        mats = [_material(str(i), "TPO", "Same") for i in range(8)]
        assert len(rank_materials(mats, ["same"], QA_WEIGHTS, limit=5)) == 5
