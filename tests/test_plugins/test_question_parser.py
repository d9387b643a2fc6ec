from __future__ import annotations
import pytest
from construction_dna.core.models import Intent, QuestionEntities
from construction_dna.plugins.engineering_qa.question_parser import calculate_confidence, parse

class TestConfidence:
    def test_base(self):
        assert calculate_confidence(Intent.GENERAL, QuestionEntities()) == 0.5

    def test_each_signal_adds(self):
        entities = QuestionEntities(chemistries=["tpo"])
        assert calculate_confidence(Intent.GENERAL, entities) == 0.6
        assert calculate_confidence(Intent.COMPARISON, entities) == 0.7

    def test_capped(self):
        entities = QuestionEntities(chemistries=["a"], materials=["B"], conditions=["wet"],
                                    temperatures=[object()])
        assert calculate_confidence(Intent.TEMPERATURE_CHECK, entities) == 0.95


class TestParse:
    def test_epdm_temperature_question(self):
        parsed = parse("Can I use EPDM at 25F?")
        assert parsed.intent == Intent.TEMPERATURE_CHECK
        assert parsed.original == "Can I use EPDM at 25F?"
        assert parsed.confidence == 0.9
        assert "epdm" in parsed.keywords

    def test_general(self):
        parsed = parse("Hello there")
        assert parsed.intent == Intent.GENERAL
        assert parsed.confidence == 0.5

    @pytest.mark.parametrize("question", ["", None, "   ", "???"])
    def test_degenerate_input(self, question):
        parsed = parse(question)
        assert parsed.intent == Intent.GENERAL
        assert parsed.confidence == 0.5

    def test_deterministic(self):
        q = "What happens if EPDM gets wet at 20F in the SUN?"
        assert parse(q) == parse(q)
        assert parse(q).confidence == 0.95

    def test_reparse_original(self):
        parsed = parse("Will EPDM blister when wet at 30F?")
        assert parse(parsed.original) == parsed

    def test_to_dict(self):
        d = parse("Can I use EPDM at 25F?").to_dict()
        assert d["intent"] == "temperature-check"
        assert d["entities"]["temperatures"] == [{"value": 25, "unit": "F"}]
