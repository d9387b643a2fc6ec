"""In-memory material catalog keyed by material id."""
from __future__ import annotations

import logging
import os
import threading
from typing import Any, Optional

import yaml

from construction_dna.core.models import MaterialRecord
from construction_dna.core.plugin_api import MaterialSource
from construction_dna.core.relevance import SEARCH_WEIGHTS, rank_materials

logger = logging.getLogger(__name__)

SAMPLE_CATALOG = os.path.join(os.path.dirname(__file__), "catalog.yaml")


class MaterialStore(MaterialSource):
    def __init__(self, reference: Any = None):
        self._reference = reference
        self._materials: dict = {}
        self._lock = threading.Lock()

    def load_yaml(self, path: str) -> int:
        """Seed the store from a YAML catalog; returns the number of records loaded."""
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
        loaded = 0
        for item in data.get("materials", []):
            self.put(MaterialRecord.from_dict(item, reference=self._reference))
            loaded += 1
        logger.info("Loaded %d materials from %s", loaded, path)
        return loaded

    def put(self, material: MaterialRecord) -> None:
        with self._lock:
            self._materials[material.id] = material

    def remove(self, material_id: str) -> bool:
        with self._lock:
            return self._materials.pop(material_id, None) is not None

    def clear(self) -> None:
        with self._lock:
            self._materials.clear()

    def get(self, material_id: str) -> Optional[MaterialRecord]:
        """Look up by id, falling back to taxonomy code."""
        with self._lock:
            material = self._materials.get(material_id)
            if material is not None:
                return material
            for candidate in self._materials.values():
                if candidate.taxonomy_code and candidate.taxonomy_code == material_id:
                    return candidate
        return None

    def get_all(self) -> list:
        with self._lock:
            return list(self._materials.values())

    def count(self) -> int:
        with self._lock:
            return len(self._materials)

    def list_materials(self, chemistry: Optional[str] = None, manufacturer: Optional[str] = None,
                       category: Optional[str] = None, fire_class: Optional[str] = None) -> list:
        result = []
        for m in self.get_all():
            if chemistry and not _matches_chemistry(m, chemistry):
                continue
            if manufacturer and not (m.manufacturer and m.manufacturer.code.lower() == manufacturer.lower()):
                continue
            if category:
                cat = m.classification.category if m.classification else None
                if not (cat and cat.code.lower() == category.lower()):
                    continue
            if fire_class:
                fire = m.physical.fire_rating if m.physical else None
                if not (fire and fire.fire_class.lower() == fire_class.lower()):
                    continue
            result.append(m)
        return result

    def search(self, query: str, limit: int = 20) -> list:
        keywords = query.lower().split()
        return rank_materials(self.get_all(), keywords, SEARCH_WEIGHTS, limit=limit)


def _matches_chemistry(material: MaterialRecord, chemistry: str) -> bool:
    chem = material.chemistry
    if chem is None:
        return False
    wanted = chemistry.lower()
    return chem.type.lower() == wanted or chem.code.lower() == wanted
