"""Engineering Q&A plugin."""
from __future__ import annotations

from typing import Any, Optional

from construction_dna.core.models import EngineeringAnswer, QuestionContext
from construction_dna.core.plugin_api import PluginBase, PluginInfo
from construction_dna.plugins.engineering_qa.answer_engine import EngineeringAnswerEngine
from construction_dna.plugins.engineering_qa.generators import QASettings


class EngineeringQAPlugin(PluginBase):
    def __init__(self):
        self._engine: Optional[EngineeringAnswerEngine] = None
        self._event_bus = None
        self._logger = None

    def get_info(self) -> PluginInfo:
        return PluginInfo(
            name="engineering_qa", version="1.0.0",
            description="Pattern-based engineering question answering over the material catalog",
            author="ConstructionDNA", dependencies=["reference_data", "material_store"],
        )

    def activate(self, context: Any) -> None:
        ctx = context if isinstance(context, dict) else {}
        self._event_bus = ctx.get("event_bus")
        self._logger = ctx.get("logger")
        store_plugin = ctx.get("material_store")
        if store_plugin is None:
            raise ValueError("engineering_qa requires the material_store plugin")
        self._engine = EngineeringAnswerEngine(
            source=store_plugin.store,
            reference=ctx.get("reference_data"),
            settings=QASettings.from_config(ctx.get("config")),
        )

    def deactivate(self) -> None:
        self._engine = None

    @property
    def engine(self) -> EngineeringAnswerEngine:
        if self._engine is None:
            raise RuntimeError("engineering_qa plugin is not active")
        return self._engine

    def answer(self, question: str, context: Optional[QuestionContext] = None) -> EngineeringAnswer:
        result = self.engine.answer(question, context)
        if self._logger is not None:
            self._logger.log_question(
                question=question,
                intent=result.intent.value,
                confidence=result.confidence,
                sources=result.sources,
                warnings=result.warnings,
            )
        if self._event_bus is not None:
            self._event_bus.emit("question.answered", {
                "question": question,
                "intent": result.intent.value,
                "confidence": result.confidence,
                "sources": list(result.sources),
            })
        return result
