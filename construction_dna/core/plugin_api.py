"""Plugin standard interfaces (ABCs) for Construction DNA."""
from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Optional


@dataclass
class PluginInfo:
    name: str
    version: str
    description: str
    author: str
    dependencies: list = field(default_factory=list)


class PluginBase(ABC):
    @abstractmethod
    def get_info(self) -> PluginInfo:
        ...

    @abstractmethod
    def activate(self, context: Any) -> None:
        ...

    @abstractmethod
    def deactivate(self) -> None:
        ...

    def get_config_schema(self) -> Optional[dict]:
        return None


class MaterialSource(ABC):
    """Read-only view of the material catalog used by the Q&A engine."""

    @abstractmethod
    def get(self, material_id: str) -> Any:
        ...

    @abstractmethod
    def get_all(self) -> list:
        ...
