from __future__ import annotations
import json
import os
import pytest
from construction_dna.core.logger import StructuredLogger

class TestStructuredLogger:
    def test_log_operation(self, tmp_path):
        log_dir = str(tmp_path / "logs")
        logger = StructuredLogger(log_dir=log_dir)
        logger.log_operation(event_type="catalog.loaded", user_action="load",
                             data={"materials": 6})
        ops_file = os.path.join(log_dir, "operations.jsonl")
        assert os.path.exists(ops_file)
        with open(ops_file) as f:
            record = json.loads(f.readline())
        assert record["event_type"] == "catalog.loaded"
        assert record["data"]["materials"] == 6
        assert "timestamp" in record
        logger.close()

    def test_log_question(self, tmp_path):
        log_dir = str(tmp_path / "logs")
        logger = StructuredLogger(log_dir=log_dir)
        logger.log_question(question="Can I use EPDM at 25°F?", intent="temperature-check",
                            confidence=0.8, sources=["car-epdm-60"])
        with open(os.path.join(log_dir, "questions.jsonl"), encoding="utf-8") as f:
            record = json.loads(f.readline())
        assert record["question"] == "Can I use EPDM at 25°F?"
        assert record["intent"] == "temperature-check"
        assert record["sources"] == ["car-epdm-60"]
        assert record["warnings"] == []
        logger.close()

    def test_multiple_entries(self, tmp_path):
        log_dir = str(tmp_path / "logs")
        logger = StructuredLogger(log_dir=log_dir)
        for i in range(5):
            logger.log_operation(event_type="test", data={"i": i})
        with open(os.path.join(log_dir, "operations.jsonl")) as f:
            lines = f.readlines()
        assert len(lines) == 5
        logger.close()

    def test_app_log_file(self, tmp_path):
        log_dir = str(tmp_path / "logs")
        logger = StructuredLogger(log_dir=log_dir)
        logger.app.info("hello")
        logger.close()
        with open(os.path.join(log_dir, "app.log")) as f:
            assert "hello" in f.read()
