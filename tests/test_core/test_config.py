from __future__ import annotations
import pytest
from construction_dna.core.config import AppConfig

class TestConfig:
    def test_default_config(self):
        config = AppConfig()
        assert config.get("app.name") == "ConstructionDNA"
        assert config.get("app.version") == "0.1.0"

    def test_qa_defaults(self):
        config = AppConfig()
        assert config.get("qa.max_materials") == 5
        assert config.get("qa.failure_fallback_limit") == 3
        assert config.get("catalog.path") is None

    def test_load_from_file(self, tmp_path):
        cfg_file = tmp_path / "config.yaml"
        cfg_file.write_text("app:\n  name: TestApp\nqa:\n  max_materials: 2\n")
        config = AppConfig(str(cfg_file))
        assert config.get("app.name") == "TestApp"
        assert config.get("qa.max_materials") == 2
        # untouched siblings survive the merge
        assert config.get("qa.code_reference_limit") == 5
        assert config.get("app.version") == "0.1.0"

    def test_missing_file_uses_defaults(self, tmp_path):
        config = AppConfig(str(tmp_path / "absent.yaml"))
        assert config.get("app.name") == "ConstructionDNA"

    def test_get_with_default(self):
        config = AppConfig()
        assert config.get("nonexistent.key", "fallback") == "fallback"

    def test_set_value(self):
        config = AppConfig()
        config.set("custom.key", "hello")
        assert config.get("custom.key") == "hello"

    def test_instances_do_not_share_defaults(self):
        a = AppConfig()
        a.get("plugins.enabled").append("extra")
        a.set("qa.max_materials", 1)
        b = AppConfig()
        assert "extra" not in b.get("plugins.enabled")
        assert b.get("qa.max_materials") == 5

    def test_event_defaults(self):
        config = AppConfig()
        assert config.get("events.keep_history") is True
        assert config.get("events.history_limit") == 100
