"""Core engine - the microkernel that ties everything together."""
from __future__ import annotations

import os
from typing import Optional

from construction_dna import __version__
from construction_dna.core.config import AppConfig
from construction_dna.core.event_bus import EventBus
from construction_dna.core.logger import StructuredLogger
from construction_dna.core.models import (
    CompatibilityResult, EngineeringAnswer, EnvironmentConditions, ParsedQuestion, QuestionContext,
)
from construction_dna.core.plugin_manager import PluginManager


class Engine:
    def __init__(self, config_path: Optional[str] = None, data_dir: str = "data",
                 catalog_path: Optional[str] = None):
        self._config_path = config_path
        self._data_dir = data_dir
        self._catalog_path = catalog_path
        self.config: Optional[AppConfig] = None
        self.event_bus: Optional[EventBus] = None
        self.logger: Optional[StructuredLogger] = None
        self.plugin_manager: Optional[PluginManager] = None

    def initialize(self) -> None:
        os.makedirs(self._data_dir, exist_ok=True)

        self.config = AppConfig(self._config_path)
        if self._catalog_path:
            self.config.set("catalog.path", self._catalog_path)
        self.event_bus = EventBus(
            keep_history=self.config.get("events.keep_history", True),
            history_limit=self.config.get("events.history_limit", 100),
        )
        self.logger = StructuredLogger(
            log_dir=os.path.join(self._data_dir, self.config.get("logging.dir", "logs")),
            level=self.config.get("logging.level", "INFO"),
        )
        self.plugin_manager = PluginManager(
            config=self.config, event_bus=self.event_bus, logger=self.logger,
        )
        self._register_plugins()
        for name in self.config.get("plugins.enabled", []):
            self.plugin_manager.activate(name)
        self.logger.app.info("Engine initialized")
        self.logger.log_operation("engine.initialized", data={
            "materials": self.store.count() if self.plugin_manager.get_plugin("material_store") else 0,
        })

    def _register_plugins(self) -> None:
        from construction_dna.plugins.engineering_qa.plugin import EngineeringQAPlugin
        from construction_dna.plugins.material_store.plugin import MaterialStorePlugin
        from construction_dna.plugins.reference_data.plugin import ReferenceDataPlugin

        self.plugin_manager.register(ReferenceDataPlugin())
        self.plugin_manager.register(MaterialStorePlugin())
        self.plugin_manager.register(EngineeringQAPlugin())

    def _plugin(self, name: str):
        if self.plugin_manager is None:
            raise RuntimeError("Engine not initialized")
        plugin = self.plugin_manager.get_plugin(name)
        if plugin is None:
            raise RuntimeError(f"Plugin '{name}' is not active")
        return plugin

    @property
    def reference(self):
        return self._plugin("reference_data").tables

    @property
    def store(self):
        return self._plugin("material_store").store

    @property
    def qa(self):
        return self._plugin("engineering_qa")

    # -- shortcuts ----------------------------------------------------------

    def ask(self, question: str, context: Optional[QuestionContext] = None) -> EngineeringAnswer:
        return self.qa.answer(question, context)

    def parse_question(self, question: str) -> ParsedQuestion:
        return self.qa.engine.parse(question)

    def predict_failures(self, material_id: str,
                         conditions: Optional[EnvironmentConditions] = None) -> list:
        return self.qa.engine.predict_failures(material_id, conditions)

    def check_compatibility(self, material_id_1: str, material_id_2: str) -> CompatibilityResult:
        result = self.qa.engine.check_compatibility(material_id_1, material_id_2)
        self.logger.log_operation("compatibility.checked", data={
            "materials": result.materials, "status": result.status.value,
        })
        return result

    def search(self, query: str, limit: int = 20) -> list:
        return self.store.search(query, limit=limit)

    def get_stats(self) -> dict:
        materials = self.store.get_all()
        chemistries = {m.chemistry.type for m in materials if m.chemistry}
        manufacturers = {m.manufacturer.code for m in materials if m.manufacturer}
        return {
            "materials": len(materials),
            "chemistries": sorted(chemistries),
            "manufacturers": sorted(manufacturers),
            "version": __version__,
        }

    def shutdown(self) -> None:
        if self.plugin_manager:
            self.plugin_manager.deactivate_all()
        if self.logger:
            self.logger.app.info("Engine shutdown")
            self.logger.close()
