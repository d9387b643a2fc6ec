"""Pattern-count intent classification."""
from __future__ import annotations

import re

from construction_dna.core.models import Intent

# Declaration order doubles as the tie-break order.
INTENT_PATTERNS = {
    Intent.FAILURE_PREDICTION: [
        r"what happens if",
        r"what will happen",
        r"what goes wrong",
        r"what could go wrong",
        r"what (will|would) fail",
        r"failure mode",
        r"water gets behind",
        r"moisture (gets|enters)",
        r"if .* fails",
        r"risk of",
        r"what are the risks",
    ],
    Intent.COMPATIBILITY_CHECK: [
        r"compatible",
        r"incompatible",
        r"can i use .* with",
        r"can .* touch",
        r"can .* contact",
        r"next to",
        r"against",
        r"in contact with",
        r"use .* over",
        r"apply .* to",
        r"work with",
    ],
    Intent.TEMPERATURE_CHECK: [
        r"temperature",
        r"\d+\s*°?\s*[fFcC]",
        r"cold weather",
        r"hot weather",
        r"freeze",
        r"freezing",
        r"apply .* at",
        r"install .* at",
        r"minimum .* temp",
        r"maximum .* temp",
        r"too cold",
        r"too hot",
    ],
    Intent.APPLICATION_GUIDANCE: [
        r"how (do|to|should) i",
        r"how is .* (installed|applied)",
        r"installation",
        r"procedure",
        r"steps to",
        r"best way to",
        r"proper way",
        r"correct method",
        r"instructions",
    ],
    Intent.MATERIAL_PROPERTIES: [
        r"what is the .* of",
        r"what are the .* of",
        r"specifications",
        r"spec sheet",
        r"perm rating",
        r"tensile strength",
        r"elongation",
        r"thickness",
        r"properties of",
        r"characteristics",
    ],
    Intent.CODE_COMPLIANCE: [
        r"code",
        r"ibc",
        r"irc",
        r"iecc",
        r"astm",
        r"comply",
        r"compliant",
        r"requirement",
        r"fire rat",
        r"class [abc]",
        r"fm approval",
        r"ul listing",
    ],
    Intent.TROUBLESHOOTING: [
        r"why did .* fail",
        r"why is .* (failing|leaking)",
        r"troubleshoot",
        r"diagnose",
        r"what caused",
        r"root cause",
        r"problem with",
        r"issue with",
    ],
    Intent.MATERIAL_SELECTION: [
        r"what (should|would) i use",
        r"which .* (should|would)",
        r"best .* for",
        r"recommend",
        r"suggest",
        r"alternative",
        r"substitute",
        r"replacement for",
    ],
    Intent.COMPARISON: [
        r"compare",
        r"difference between",
        r"vs\.?",
        r"versus",
        r"better than",
        r"which is better",
        r"pros and cons",
        r".* or .*",
    ],
    Intent.GENERAL: [],
}

# The temperature-with-unit pattern is the only case-sensitive one.
_CASE_SENSITIVE = {r"\d+\s*°?\s*[fFcC]"}

_COMPILED = {
    intent: [re.compile(p) if p in _CASE_SENSITIVE else re.compile(p, re.IGNORECASE)
             for p in patterns]
    for intent, patterns in INTENT_PATTERNS.items()
}


def score_intents(question: str) -> dict:
    """Number of patterns of each intent that match anywhere in *question*."""
    return {
        intent: sum(1 for pattern in patterns if pattern.search(question))
        for intent, patterns in _COMPILED.items()
    }


def classify(question: str) -> Intent:
    best, best_score = Intent.GENERAL, 0
    for intent, score in score_intents(question).items():
        if score > best_score:
            best, best_score = intent, score
    return best
