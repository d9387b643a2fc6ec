"""Material store plugin."""
from __future__ import annotations

import os
from typing import Any, Optional

from construction_dna.core.plugin_api import PluginBase, PluginInfo
from construction_dna.plugins.material_store.store import SAMPLE_CATALOG, MaterialStore


class MaterialStorePlugin(PluginBase):
    def __init__(self):
        self._store: Optional[MaterialStore] = None

    def get_info(self) -> PluginInfo:
        return PluginInfo(
            name="material_store", version="1.0.0",
            description="In-memory 20-tier material catalog",
            author="ConstructionDNA", dependencies=["reference_data"],
        )

    def activate(self, context: Any) -> None:
        reference = context.get("reference_data") if isinstance(context, dict) else None
        config = context.get("config") if isinstance(context, dict) else None
        self._store = MaterialStore(reference=reference)

        catalog_path = config.get("catalog.path") if config else None
        load_sample = config.get("catalog.load_sample", True) if config else True
        if catalog_path:
            if not os.path.exists(catalog_path):
                raise FileNotFoundError(f"Material catalog not found: {catalog_path}")
            self._store.load_yaml(catalog_path)
        elif load_sample:
            self._store.load_yaml(SAMPLE_CATALOG)

    def deactivate(self) -> None:
        if self._store:
            self._store.clear()
        self._store = None

    @property
    def store(self) -> MaterialStore:
        if self._store is None:
            raise RuntimeError("material_store plugin is not active")
        return self._store
