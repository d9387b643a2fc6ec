from __future__ import annotations
import pytest
from construction_dna.core.models import Temperature
from construction_dna.plugins.engineering_qa.entity_extractor import (
    extract, extract_keywords, extract_temperatures,
)

class TestKeywords:
    def test_stop_words_and_punctuation(self):
        assert extract_keywords("Can I use EPDM at 25F?") == ["use", "epdm", "25f"]

    def test_deduplicated_in_order(self):
        assert extract_keywords("tpo TPO tpo seams") == ["tpo", "seams"]

    def test_empty(self):
        assert extract_keywords("") == []
        assert extract_keywords("?!") == []


class TestTemperatures:
    @pytest.mark.parametrize("text,expected", [
        ("at 25F", [Temperature(25, "F")]),
        ("at -10C", [Temperature(-10, "C")]),
        ("between 5 °F and 40f", [Temperature(5, "F"), Temperature(40, "F")]),
        ("no numbers here", []),
    ])
    def test_extract(self, text, expected):
        assert extract_temperatures(text) == expected


class TestEntities:
    def test_epdm_question(self):
        entities = extract("Can I use EPDM at 25F?")
        assert entities.chemistries == ["epdm"]
        assert entities.materials == ["EPDM"]
        assert entities.temperatures == [Temperature(25, "F")]
        assert entities.conditions == []

    def test_multiword_chemistry(self):
        entities = extract("Is modified bitumen ok?")
        assert entities.chemistries == ["bitumen", "modified bitumen"]

    def test_conditions_and_failures(self):
        entities = extract("Will EPDM blister when wet?")
        assert entities.conditions == ["wet"]
        assert entities.failures == ["blister"]

    def test_short_tokens_ignored(self):
        assert extract("Is PV ok?").materials == []
