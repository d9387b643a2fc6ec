"""Turn question text into a ParsedQuestion."""
from __future__ import annotations

from construction_dna.core.models import Intent, ParsedQuestion, QuestionEntities
from construction_dna.plugins.engineering_qa.entity_extractor import extract, extract_keywords
from construction_dna.plugins.engineering_qa.intent_classifier import classify

BASE_CONFIDENCE = 0.5
CONFIDENCE_STEP = 0.1
MAX_CONFIDENCE = 0.95


def calculate_confidence(intent: Intent, entities: QuestionEntities) -> float:
    found = sum(1 for group in (entities.chemistries, entities.materials,
                                entities.conditions, entities.temperatures) if group)
    if intent != Intent.GENERAL:
        found += 1
    return min(round(BASE_CONFIDENCE + CONFIDENCE_STEP * found, 2), MAX_CONFIDENCE)


def parse(question: str) -> ParsedQuestion:
    question = question or ""
    intent = classify(question)
    entities = extract(question)
    return ParsedQuestion(
        original=question,
        intent=intent,
        keywords=extract_keywords(question),
        entities=entities,
        confidence=calculate_confidence(intent, entities),
    )
