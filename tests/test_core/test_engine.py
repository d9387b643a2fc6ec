from __future__ import annotations
import json
import os
import pytest
from construction_dna.core.engine import Engine
from construction_dna.core.models import CompatibilityStatus, EnvironmentConditions, Intent

class TestEngine:
    @pytest.fixture
    def engine(self, tmp_path):
        e = Engine(data_dir=str(tmp_path / "data"))
        e.initialize()
        yield e
        e.shutdown()

    def test_initialize(self, engine):
        assert engine.event_bus is not None
        assert engine.logger is not None
        assert engine.plugin_manager is not None
        names = {p["name"] for p in engine.plugin_manager.list_plugins() if p["active"]}
        assert names == {"reference_data", "material_store", "engineering_qa"}

    def test_sample_catalog_loaded(self, engine):
        assert engine.store.count() == 6
        assert engine.store.get("car-epdm-60").chemistry.type == "EPDM"

    def test_event_bus_accessible(self, engine):
        received = []
        engine.event_bus.subscribe("test", lambda d: received.append(d))
        engine.event_bus.emit("test", {"v": 1})
        assert len(received) == 1

    def test_ask_emits_event_and_logs(self, engine):
        received = []
        engine.event_bus.subscribe("question.answered", lambda d: received.append(d))
        answer = engine.ask("Can I use EPDM at 25F?")
        assert answer.intent == Intent.TEMPERATURE_CHECK
        assert received and received[0]["intent"] == "temperature-check"
        path = os.path.join(engine.logger.log_dir, "questions.jsonl")
        with open(path, encoding="utf-8") as f:
            record = json.loads(f.readline())
        assert record["question"] == "Can I use EPDM at 25F?"

    def test_parse_question(self, engine):
        parsed = engine.parse_question("Will EPDM blister when wet?")
        assert "epdm" in parsed.entities.chemistries

    def test_predict_failures(self, engine):
        preds = engine.predict_failures("car-epdm-60", EnvironmentConditions(temperature=-60))
        assert preds
        assert all(0 <= p.probability <= 0.95 for p in preds)

    def test_check_compatibility(self, engine):
        result = engine.check_compatibility("car-epdm-60", "iko-base-sheet")
        assert result.status == CompatibilityStatus.INCOMPATIBLE

    def test_search(self, engine):
        results = engine.search("tpo")
        assert results[0].id == "gaf-tpo-60"

    def test_get_stats(self, engine):
        stats = engine.get_stats()
        assert stats["materials"] == 6
        assert "EPDM" in stats["chemistries"]
        assert "CAR" in stats["manufacturers"]
        assert stats["version"] == "0.1.0"

    def test_custom_catalog(self, tmp_path):
        catalog = tmp_path / "catalog.yaml"
        catalog.write_text("materials:\n  - id: only-one\n    physical:\n      base_chemistry: TPO\n")
        e = Engine(data_dir=str(tmp_path / "data"), catalog_path=str(catalog))
        e.initialize()
        try:
            assert e.store.count() == 1
            assert e.store.get("only-one").chemistry.code == "TPO"
        finally:
            e.shutdown()

    def test_missing_catalog_raises(self, tmp_path):
        e = Engine(data_dir=str(tmp_path / "data"), catalog_path=str(tmp_path / "nope.yaml"))
        with pytest.raises(FileNotFoundError):
            e.initialize()
        e.shutdown()

    def test_not_initialized(self):
        with pytest.raises(RuntimeError):
            Engine().ask("hello")

    def test_event_history_bounded(self, tmp_path):
        config = tmp_path / "config.yaml"
        config.write_text("events:\n  history_limit: 5\n")
        e = Engine(config_path=str(config), data_dir=str(tmp_path / "data"))
        e.initialize()
        try:
            for _ in range(20):
                e.ask("Is EPDM compatible with asphalt?")
            history = e.event_bus.get_history()
            assert len(history) == 5
            assert all(h["event"] == "question.answered" for h in history)
        finally:
            e.shutdown()
