"""Engineering answer engine: question text in, structured answer out."""
from __future__ import annotations

import logging
from typing import Any, Optional

from construction_dna.core.models import (
    CompatibilityResult, CompatibilityStatus, EngineeringAnswer, EnvironmentConditions,
    FailureCategory, FailurePrediction, ParsedQuestion, QuestionContext,
)
from construction_dna.core.relevance import QA_WEIGHTS, rank_materials
from construction_dna.plugins.engineering_qa.generators import GENERATORS, QASettings
from construction_dna.plugins.engineering_qa.question_parser import parse

logger = logging.getLogger(__name__)

BASE_PROBABILITY = 0.3
MAX_PROBABILITY = 0.95


def select_materials(parsed: ParsedQuestion, all_materials: list,
                     explicit_ids: Optional[list] = None, limit: int = 5) -> list:
    """Pick the materials an answer reasons about.

    Explicit ids win (by id or taxonomy code, order kept, misses and
    repeats dropped). When none resolve, or none are given, the top
    *limit* by relevance score are used.
    """
    if explicit_ids:
        by_key = {}
        for m in all_materials:
            by_key.setdefault(m.id, m)
            if m.taxonomy_code:
                by_key.setdefault(m.taxonomy_code, m)
        chosen, seen = [], set()
        for key in explicit_ids:
            m = by_key.get(key)
            if m is not None and m.id not in seen:
                seen.add(m.id)
                chosen.append(m)
        if chosen:
            return chosen
        logger.debug("No explicit material ids resolved: %s", explicit_ids)

    return rank_materials(
        all_materials, parsed.keywords, QA_WEIGHTS,
        chemistries=parsed.entities.chemistries,
        material_tokens=parsed.entities.materials,
        limit=limit,
    )


class EngineeringAnswerEngine:
    def __init__(self, source: Any, reference: Any = None, settings: Optional[QASettings] = None):
        self._source = source
        self._reference = reference
        self._settings = settings or QASettings()
        self._generators = {
            intent: cls(reference=reference, settings=self._settings)
            for intent, cls in GENERATORS.items()
        }

    def parse(self, question: str) -> ParsedQuestion:
        return parse(question)

    def answer(self, question: str, context: Optional[QuestionContext] = None) -> EngineeringAnswer:
        parsed = parse(question)
        snapshot = self._source.get_all()
        explicit = context.explicit_ids() if context is not None else None
        materials = select_materials(parsed, snapshot, explicit, self._settings.max_materials)
        logger.debug("Question intent=%s materials=%s", parsed.intent.value, [m.id for m in materials])
        return self._generators[parsed.intent].generate(parsed, materials, context)

    def predict_failures(self, material_id: str,
                         conditions: Optional[EnvironmentConditions] = None) -> list:
        material = self._source.get(material_id)
        if material is None:
            return []
        conditions = conditions or EnvironmentConditions()
        tr = material.temperature_range

        predictions = []
        for mode in material.failure_modes:
            probability = BASE_PROBABILITY
            risk_factors = []
            if conditions.temperature is not None and tr is not None:
                if conditions.temperature < tr.min_service_f:
                    probability += 0.2
                    risk_factors.append("Temperature below service range")
                if conditions.temperature > tr.max_service_f:
                    probability += 0.2
                    risk_factors.append("Temperature above service range")
            if conditions.moisture in ("wet", "submerged") and mode.category == FailureCategory.MOISTURE:
                probability += 0.3
                risk_factors.append("Wet conditions present")
            if conditions.exposure == "full" and mode.category == FailureCategory.UV:
                probability += 0.2
                risk_factors.append("Full UV exposure")

            predictions.append(FailurePrediction(
                failure_mode=mode,
                probability=round(min(probability, MAX_PROBABILITY), 2),
                risk_factors=risk_factors,
                prevention=list(mode.prevention[:3]),
            ))

        predictions.sort(key=lambda p: p.probability, reverse=True)
        return predictions

    def check_compatibility(self, material_id_1: str, material_id_2: str) -> CompatibilityResult:
        ids = [material_id_1, material_id_2]
        mat1 = self._source.get(material_id_1)
        mat2 = self._source.get(material_id_2)
        if mat1 is None or mat2 is None:
            return CompatibilityResult(
                compatible=False,
                status=CompatibilityStatus.INCOMPATIBLE,
                materials=ids,
                explanation="One or both materials not found.",
                found=False,
            )

        chem1 = mat1.chemistry.type if mat1.chemistry else None
        chem2 = mat2.chemistry.type if mat2.chemistry else None
        issues, requirements = [], []

        def add(entry) -> None:
            if entry is None or any(i.material_type == entry.material_type for i in issues):
                return
            issues.append(entry)
            if entry.status == CompatibilityStatus.CONDITIONAL and entry.requirement:
                requirements.append(entry.requirement)

        # A shared chemistry is never checked against itself.
        if chem1 and chem2 and chem1.lower() != chem2.lower():
            for subject, other in ((mat1, chem2), (mat2, chem1)):
                matrix = subject.compatibility_matrix
                if matrix is not None:
                    add(matrix.first_match(CompatibilityStatus.INCOMPATIBLE, other))
                    add(matrix.first_match(CompatibilityStatus.CONDITIONAL, other))
            if self._reference is not None:
                add(self._reference.check_rule(chem1, chem2))
                add(self._reference.check_rule(chem2, chem1))

        incompatible = [i for i in issues if i.status == CompatibilityStatus.INCOMPATIBLE]
        conditional = [i for i in issues if i.status == CompatibilityStatus.CONDITIONAL]
        if incompatible:
            status = CompatibilityStatus.INCOMPATIBLE
            explanation = f"{chem1} and {chem2} are incompatible: {incompatible[0].reason}"
        elif conditional:
            status = CompatibilityStatus.CONDITIONAL
            explanation = (f"{chem1} and {chem2} require precautions: "
                           f"{'; '.join(requirements) or 'See manufacturer data'}")
        else:
            status = CompatibilityStatus.COMPATIBLE
            explanation = f"{chem1 or 'Unknown'} and {chem2 or 'Unknown'} appear to be compatible."

        return CompatibilityResult(
            compatible=status != CompatibilityStatus.INCOMPATIBLE,
            status=status,
            materials=ids,
            issues=issues,
            requirements=requirements,
            explanation=explanation,
        )
