"""Reference data plugin exposing chemistries, failure modes and compatibility rules."""
from __future__ import annotations

from typing import Any, Optional

from construction_dna.core.plugin_api import PluginBase, PluginInfo
from construction_dna.plugins.reference_data.tables import (
    DATA_DIR, ReferenceTables, load_reference_tables,
)


class ReferenceDataPlugin(PluginBase):
    def __init__(self, data_dir: str = DATA_DIR):
        self._data_dir = data_dir
        self._tables: Optional[ReferenceTables] = None

    def get_info(self) -> PluginInfo:
        return PluginInfo(
            name="reference_data", version="1.0.0",
            description="Failure modes, compatibility rules and chemistry profiles",
            author="ConstructionDNA", dependencies=[],
        )

    def activate(self, context: Any) -> None:
        self._tables = load_reference_tables(self._data_dir)

    def deactivate(self) -> None:
        self._tables = None

    @property
    def tables(self) -> ReferenceTables:
        if self._tables is None:
            raise RuntimeError("reference_data plugin is not active")
        return self._tables

    def __getattr__(self, name: str):
        # Lookups are delegated to the loaded tables.
        if name.startswith("_"):
            raise AttributeError(name)
        return getattr(self.tables, name)
