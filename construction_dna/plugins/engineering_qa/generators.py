"""Intent-specific answer generators.

Each generator turns a parsed question plus the materials selected for it
into an ``EngineeringAnswer``. Generators only read their inputs; a material
missing the tier an analysis needs is skipped for that analysis.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from construction_dna.core.models import (
    ApplicationConstraint, CompatibilityStatus, ConstraintViolation, EngineeringAnswer,
    FailureCategory, FailureSeverity, Intent, ParsedQuestion, QuestionContext, ViolationSeverity,
    format_number,
)


@dataclass
class QASettings:
    max_materials: int = 5
    failure_fallback_limit: int = 3
    guidance_constraint_limit: int = 5
    code_reference_limit: int = 5

    @classmethod
    def from_config(cls, config: Any) -> "QASettings":
        if config is None:
            return cls()
        return cls(
            max_materials=config.get("qa.max_materials", 5),
            failure_fallback_limit=config.get("qa.failure_fallback_limit", 3),
            guidance_constraint_limit=config.get("qa.guidance_constraint_limit", 5),
            code_reference_limit=config.get("qa.code_reference_limit", 5),
        )


def _unique(items: list) -> list:
    return list(dict.fromkeys(items))


class AnswerGenerator:
    intent: Optional[Intent] = None

    def __init__(self, reference: Any = None, settings: Optional[QASettings] = None):
        self._reference = reference
        self._settings = settings or QASettings()

    def generate(self, parsed: ParsedQuestion, materials: list,
                 context: Optional[QuestionContext] = None) -> EngineeringAnswer:
        raise NotImplementedError

    def _answer(self, parsed: ParsedQuestion, materials: list, answer: str,
                explanation: str, confidence: float, **extra) -> EngineeringAnswer:
        return EngineeringAnswer(
            question=parsed.original,
            intent=parsed.intent,
            answer=answer,
            explanation=explanation,
            materials=list(materials),
            confidence=confidence,
            sources=[m.source_id for m in materials],
            **extra,
        )


# Condition words and keywords that point at a failure category.
CONDITION_CATEGORIES = {
    "water": FailureCategory.MOISTURE,
    "moisture": FailureCategory.MOISTURE,
    "cold": FailureCategory.THERMAL,
    "heat": FailureCategory.THERMAL,
    "uv": FailureCategory.UV,
    "chemical": FailureCategory.CHEMICAL,
}
KEYWORD_CATEGORIES = {
    "puncture": FailureCategory.MECHANICAL,
    "wind": FailureCategory.MECHANICAL,
    "adhesion": FailureCategory.ADHESION,
    "seam": FailureCategory.ADHESION,
}


def requested_categories(parsed: ParsedQuestion) -> set:
    wanted = {CONDITION_CATEGORIES[c] for c in parsed.entities.conditions if c in CONDITION_CATEGORIES}
    wanted |= {KEYWORD_CATEGORIES[k] for k in parsed.keywords if k in KEYWORD_CATEGORIES}
    return wanted


class FailurePredictionGenerator(AnswerGenerator):
    intent = Intent.FAILURE_PREDICTION

    def generate(self, parsed, materials, context=None):
        wanted = requested_categories(parsed)
        found, seen = [], set()
        explanations, recommendations, warnings = [], [], []

        for material in materials:
            chem = material.chemistry
            relevant = [fm for fm in material.failure_modes if fm.category in wanted]
            if not relevant and chem is not None and self._reference is not None:
                fallback = self._reference.failure_modes_for_chemistry(chem.type)
                relevant = fallback[:self._settings.failure_fallback_limit]

            for mode in relevant:
                if mode.id in seen:
                    continue
                seen.add(mode.id)
                found.append(mode)
                explanations.append(
                    f"**{mode.name}** ({chem.code if chem else 'Unknown'} - {material.display_name}):\n"
                    f"- Causes: {'; '.join(mode.causes[:2])}\n"
                    f"- Symptoms: {'; '.join(mode.symptoms[:2])}\n"
                    f"- Time to failure: {mode.time_to_failure.value}\n"
                    f"- Severity: {mode.severity.value}"
                )
                recommendations.extend(mode.prevention[:2])
                if mode.severity in (FailureSeverity.STRUCTURAL, FailureSeverity.CATASTROPHIC):
                    warnings.append(
                        f"{mode.name} is a {mode.severity.value} failure - requires immediate attention")

        return self._answer(
            parsed, materials,
            answer=(f"Found {len(found)} potential failure mode(s) related to your question."
                    if found else "No specific failure modes found for this condition."),
            explanation="\n\n".join(explanations) or "Unable to determine specific failure modes.",
            confidence=0.85 if found else 0.5,
            failure_modes=found,
            recommendations=_unique(recommendations),
            warnings=warnings,
        )


class CompatibilityCheckGenerator(AnswerGenerator):
    intent = Intent.COMPATIBILITY_CHECK

    def generate(self, parsed, materials, context=None):
        issues, explanations, recommendations, warnings = [], [], [], []

        mentioned = list(parsed.entities.chemistries)
        chemistries, seen = [], set()
        for c in mentioned + [m.chemistry.type for m in materials if m.chemistry]:
            if c.lower() not in seen:
                seen.add(c.lower())
                chemistries.append(c)
        question_chems = _unique([c.lower() for c in mentioned])

        for material in materials:
            chem = material.chemistry
            if chem is None:
                continue
            own = {chem.type.lower(), chem.code.lower()}
            matrix = material.compatibility_matrix

            if matrix is not None:
                for other in chemistries:
                    if other.lower() in own:
                        continue
                    bad = matrix.first_match(CompatibilityStatus.INCOMPATIBLE, other)
                    if bad is not None:
                        issues.append(bad)
                        explanations.append(
                            f"**INCOMPATIBLE**: {chem.code} cannot be used with {other}.\n"
                            f"Reason: {bad.reason}")
                        warnings.append(f"Do not use {chem.code} in contact with {other}")
                    cond = matrix.first_match(CompatibilityStatus.CONDITIONAL, other)
                    if cond is not None:
                        issues.append(cond)
                        explanations.append(
                            f"**CONDITIONAL**: {chem.code} can be used with {other} IF:\n"
                            f"Requirement: {cond.requirement or cond.separator_required or 'See manufacturer guidelines'}")
                        recommendations.append(cond.requirement or "Follow manufacturer requirements")

            if self._reference is None:
                continue
            for other in question_chems:
                if other in own:
                    continue
                rule = self._reference.check_rule(chem.type, other)
                if rule is None or any(i.material_type == rule.material_type for i in issues):
                    continue
                issues.append(rule)
                if rule.status == CompatibilityStatus.INCOMPATIBLE:
                    warnings.append(f"{chem.code} is incompatible with {other}")
                elif rule.status == CompatibilityStatus.CONDITIONAL and rule.requirement:
                    recommendations.append(rule.requirement)

        statuses = {i.status for i in issues}
        if CompatibilityStatus.INCOMPATIBLE in statuses:
            answer = "These materials are NOT compatible."
        elif CompatibilityStatus.CONDITIONAL in statuses:
            answer = "These materials can be compatible with proper separation/primer."
        elif issues:
            answer = "Compatibility issues found - see details."
        else:
            answer = "No compatibility issues detected."

        return self._answer(
            parsed, materials,
            answer=answer,
            explanation="\n\n".join(explanations) or "No specific compatibility data found.",
            confidence=0.9 if issues else 0.6,
            compatibility_issues=issues,
            recommendations=_unique(recommendations),
            warnings=warnings,
        )


class TemperatureCheckGenerator(AnswerGenerator):
    intent = Intent.TEMPERATURE_CHECK

    @staticmethod
    def requested_temperature(parsed: ParsedQuestion,
                              context: Optional[QuestionContext]) -> Optional[float]:
        """First temperature in the question (as °F), else the context temperature."""
        if parsed.entities.temperatures:
            return parsed.entities.temperatures[0].to_fahrenheit()
        if context is not None and context.conditions is not None:
            return context.conditions.temperature
        return None

    def generate(self, parsed, materials, context=None):
        requested = self.requested_temperature(parsed, context)
        violations, explanations, recommendations, warnings = [], [], [], []

        for material in materials:
            name = material.display_name
            tr = material.temperature_range
            if tr is None:
                explanations.append(f"**{name}**: Temperature data not available.")
                continue
            lo, hi = format_number(tr.min_application_f), format_number(tr.max_application_f)

            if requested is None:
                explanations.append(
                    f"**{name}** temperature specifications:\n"
                    f"Application range: {lo}°F to {hi}°F\n"
                    f"Service range: {format_number(tr.min_service_f)}°F to {format_number(tr.max_service_f)}°F")
                continue

            t = format_number(requested)
            if requested < tr.min_application_f:
                violations.append(ConstraintViolation(
                    constraint=ApplicationConstraint(
                        id="temp-min", type="temperature",
                        description="Minimum application temperature",
                        min_value=tr.min_application_f, unit="°F",
                        consequence="Material may not adhere properly",
                        violation_severity=FailureSeverity.STRUCTURAL,
                    ),
                    actual_value=requested,
                    required_value=tr.min_application_f,
                    severity=ViolationSeverity.ERROR,
                    explanation=f"Temperature {t}°F is below minimum {lo}°F",
                ))
                explanations.append(
                    f"**{name}** cannot be applied at {t}°F.\n"
                    f"Minimum application temperature: {lo}°F\n"
                    f"Risk: Material may not adhere properly in cold conditions.")
                warnings.append(f"Temperature {t}°F is below minimum for {name}")
                recommendations.append(
                    f"Wait for temperature above {lo}°F or use cold-weather alternative")
            elif requested > tr.max_application_f:
                violations.append(ConstraintViolation(
                    constraint=ApplicationConstraint(
                        id="temp-max", type="temperature",
                        description="Maximum application temperature",
                        max_value=tr.max_application_f, unit="°F",
                        consequence="Material may be too soft",
                        violation_severity=FailureSeverity.FUNCTIONAL,
                    ),
                    actual_value=requested,
                    required_value=tr.max_application_f,
                    severity=ViolationSeverity.WARNING,
                    explanation=f"Temperature {t}°F exceeds maximum {hi}°F",
                ))
                explanations.append(
                    f"**{name}** may be difficult to apply at {t}°F.\n"
                    f"Maximum application temperature: {hi}°F\n"
                    f"Risk: Material may become too soft or pliable.")
                warnings.append(f"Temperature {t}°F is above maximum for {name}")
                recommendations.append("Apply in cooler part of day or provide temporary shade")
            else:
                explanations.append(
                    f"**{name}** can be applied at {t}°F.\n"
                    f"Application range: {lo}°F to {hi}°F")

        return self._answer(
            parsed, materials,
            answer=("Temperature constraint violation(s) found." if violations
                    else "Temperature is within acceptable range."),
            explanation="\n\n".join(explanations),
            confidence=0.95,
            constraint_violations=violations,
            recommendations=_unique(recommendations),
            warnings=warnings,
        )


class ApplicationGuidanceGenerator(AnswerGenerator):
    intent = Intent.APPLICATION_GUIDANCE

    def generate(self, parsed, materials, context=None):
        lines, recommendations = [], []
        for material in materials:
            lines.append(f"**{material.display_name}** Application Guidelines:")
            for constraint in material.application_constraints[:self._settings.guidance_constraint_limit]:
                lines.append(f"- {constraint.description}")
                rng = constraint.range_text()
                if rng:
                    lines.append(f"  Range: {rng}")
            guide = material.installation.guide_url if material.installation else None
            if not guide and material.product is not None:
                guide = material.product.install_guide_url or None
            if guide:
                recommendations.append(f"See installation guide: {guide}")

        return self._answer(
            parsed, materials,
            answer=f"Application guidance for {len(materials)} material(s).",
            explanation="\n".join(lines),
            confidence=0.8,
            recommendations=recommendations,
        )


def _yes_no(flag: bool) -> str:
    return "yes" if flag else "no"


class MaterialPropertiesGenerator(AnswerGenerator):
    intent = Intent.MATERIAL_PROPERTIES

    def generate(self, parsed, materials, context=None):
        blocks = []
        for material in materials:
            props = [f"**{material.display_name}** Properties:"]
            chem = material.chemistry
            perf = material.performance
            phys = material.physical
            if chem is not None:
                props.append(f"- Chemistry: {chem.name} ({chem.code})")
                props.append(f"  - Thermoplastic: {_yes_no(chem.is_thermoplastic)}")
                props.append(f"  - Elastomeric: {_yes_no(chem.is_elastomeric)}")
                props.append(f"  - Joining: {chem.joining_method}")
            if perf is not None and perf.perm_rating is not None:
                props.append(f"- Vapor Permeance: {format_number(perf.perm_rating.perms)} perms "
                             f"(Class {perf.perm_rating.perm_class})")
                props.append(f"  - Vapor Barrier: {_yes_no(perf.perm_rating.vapor_barrier)}")
            if perf is not None and perf.tensile_strength is not None:
                props.append(f"- Tensile Strength: {format_number(perf.tensile_strength.psi_md)} PSI (MD)")
            if perf is not None and perf.elongation is not None:
                props.append(f"- Elongation: {format_number(perf.elongation.percent_md)}% (MD)")
            if phys is not None and phys.thickness_class is not None:
                props.append(f"- Thickness: {format_number(phys.thickness_class.nominal_mils)} mils")
            if phys is not None and phys.fire_rating is not None:
                props.append(f"- Fire Rating: Class {phys.fire_rating.fire_class}")
            blocks.append("\n".join(props))

        return self._answer(
            parsed, materials,
            answer=f"Properties for {len(materials)} material(s).",
            explanation="\n\n".join(blocks),
            confidence=0.9,
        )


class CodeComplianceGenerator(AnswerGenerator):
    intent = Intent.CODE_COMPLIANCE

    def generate(self, parsed, materials, context=None):
        lines, warnings = [], []
        for material in materials:
            lines.append(f"**{material.display_name}** Code Compliance:")
            fire = material.physical.fire_rating if material.physical else None
            if fire is not None:
                lines.append(f"- Fire Rating: Class {fire.fire_class}")
                if fire.fm_approval:
                    lines.append(f"  - FM Approval: {fire.fm_approval}")
                if fire.ul_listing:
                    lines.append(f"  - UL Listing: {fire.ul_listing}")

            refs = material.code_references
            if not refs:
                lines.append("- No specific code references on file.")
                continue
            lines.append("- Code References:")
            for ref in refs[:self._settings.code_reference_limit]:
                mark = "✓" if ref.compliant else "✗"
                lines.append(f"  {mark} {ref.code} {ref.section}: {ref.requirement}")
                if not ref.compliant:
                    warnings.append(f"Does not comply with {ref.code} {ref.section}")

        return self._answer(
            parsed, materials,
            answer=f"Code compliance for {len(materials)} material(s).",
            explanation="\n".join(lines),
            confidence=0.85,
            warnings=warnings,
        )


class GeneralGenerator(AnswerGenerator):
    intent = Intent.GENERAL

    def generate(self, parsed, materials, context=None):
        lines = []
        for m in materials:
            name = m.product.name if m.product and m.product.name else "Unknown"
            chem = m.chemistry.code if m.chemistry else "Unknown"
            mfr = m.manufacturer.name if m.manufacturer else "Unknown"
            lines.append(f"**{name}** ({chem}) by {mfr}")

        return self._answer(
            parsed, materials,
            answer=(f"Found {len(materials)} relevant material(s)." if materials
                    else "No specific materials found matching your question."),
            explanation="\n".join(lines) or "Please provide more context or specify a material.",
            confidence=0.5,
        )


GENERATORS = {
    Intent.FAILURE_PREDICTION: FailurePredictionGenerator,
    Intent.COMPATIBILITY_CHECK: CompatibilityCheckGenerator,
    Intent.TEMPERATURE_CHECK: TemperatureCheckGenerator,
    Intent.APPLICATION_GUIDANCE: ApplicationGuidanceGenerator,
    Intent.MATERIAL_PROPERTIES: MaterialPropertiesGenerator,
    Intent.CODE_COMPLIANCE: CodeComplianceGenerator,
    Intent.TROUBLESHOOTING: GeneralGenerator,
    Intent.MATERIAL_SELECTION: GeneralGenerator,
    Intent.COMPARISON: GeneralGenerator,
    Intent.GENERAL: GeneralGenerator,
}
