"""Thread-safe singleton wrapping the core Engine for web use."""
from __future__ import annotations

import logging
import threading
from typing import Optional

from construction_dna.core.engine import Engine
from construction_dna.core.models import (
    CompatibilityResult, EngineeringAnswer, EnvironmentConditions, ParsedQuestion, QuestionContext,
)

logger = logging.getLogger(__name__)


class EngineService:
    """Thread-safe singleton that manages the core Engine lifecycle."""

    _instance: Optional[EngineService] = None
    _lock = threading.Lock()

    def __init__(self, data_dir: str = "data", catalog_path: Optional[str] = None) -> None:
        self._data_dir = data_dir
        self._catalog_path = catalog_path
        self._engine: Optional[Engine] = None

    # ------------------------------------------------------------------
    # Singleton access
    # ------------------------------------------------------------------
    @classmethod
    def get_instance(cls, data_dir: str = "data", catalog_path: Optional[str] = None) -> EngineService:
        """Return (or create) the singleton EngineService."""
        if cls._instance is None:
            with cls._lock:
                if cls._instance is None:
                    cls._instance = cls(data_dir=data_dir, catalog_path=catalog_path)
        return cls._instance

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    def initialize(self) -> None:
        """Create the Engine and activate its plugins."""
        with self._lock:
            if self._engine is not None:
                return
            engine = Engine(data_dir=self._data_dir, catalog_path=self._catalog_path)
            engine.initialize()
            self._engine = engine
            logger.info("EngineService initialised (data_dir=%s)", self._data_dir)

    def shutdown(self) -> None:
        """Shutdown the engine and release the singleton."""
        with self._lock:
            if self._engine is not None:
                self._engine.shutdown()
                self._engine = None
            EngineService._instance = None
            logger.info("EngineService shut down")

    @property
    def engine(self) -> Engine:
        if self._engine is None:
            raise RuntimeError("EngineService not initialised")
        return self._engine

    # ------------------------------------------------------------------
    # Questions
    # ------------------------------------------------------------------
    def ask(self, question: str, context: Optional[QuestionContext] = None) -> EngineeringAnswer:
        return self.engine.ask(question, context)

    def parse(self, question: str) -> ParsedQuestion:
        return self.engine.parse_question(question)

    # ------------------------------------------------------------------
    # Material queries
    # ------------------------------------------------------------------
    def list_materials(self, chemistry: Optional[str] = None, manufacturer: Optional[str] = None,
                       category: Optional[str] = None, fire_class: Optional[str] = None,
                       query: Optional[str] = None) -> list:
        """Return material summaries, keyword-ranked when *query* is given."""
        store = self.engine.store
        if query:
            materials = store.search(query)
            filtered = {m.id for m in store.list_materials(chemistry, manufacturer, category, fire_class)}
            materials = [m for m in materials if m.id in filtered]
        else:
            materials = store.list_materials(chemistry, manufacturer, category, fire_class)
        return [m.summary() for m in materials]

    def get_material(self, material_id: str) -> Optional[dict]:
        material = self.engine.store.get(material_id)
        return material.to_dict() if material is not None else None

    def predict_failures(self, material_id: str,
                         conditions: Optional[EnvironmentConditions] = None) -> Optional[list]:
        """Return ranked predictions, or None when the material is unknown."""
        if self.engine.store.get(material_id) is None:
            return None
        return [p.to_dict() for p in self.engine.predict_failures(material_id, conditions)]

    def check_compatibility(self, material_id_1: str, material_id_2: str) -> CompatibilityResult:
        return self.engine.check_compatibility(material_id_1, material_id_2)

    def get_stats(self) -> dict:
        return self.engine.get_stats()
