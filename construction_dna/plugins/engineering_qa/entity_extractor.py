"""Keyword and entity extraction from engineering questions."""
from __future__ import annotations

import re

from construction_dna.core.models import QuestionEntities, Temperature

CHEMISTRY_KEYWORDS = [
    "epdm", "tpo", "pvc", "sbs", "app", "hdpe", "ldpe", "bitumen", "asphalt",
    "silicone", "polyurethane", "acrylic", "rubber", "thermoplastic", "thermoset",
    "modified bitumen", "mod bit", "single-ply", "single ply", "built-up", "bur",
    "fluid-applied", "self-adhered", "peel and stick",
]

CONDITION_KEYWORDS = [
    "water", "moisture", "wet", "rain", "ponding", "standing water",
    "uv", "ultraviolet", "sun", "exposure", "sunlight",
    "cold", "hot", "freeze", "heat", "thermal",
    "wind", "uplift", "traffic", "foot traffic", "walking",
    "chemical", "oil", "solvent", "grease", "petroleum", "acid", "alkali", "salt", "ozone",
]

FAILURE_KEYWORDS = [
    "leak", "leaking", "blister", "blistering", "crack", "cracking", "split", "splitting",
    "delamination", "delaminate", "peel", "peeling", "disbond", "adhesion", "seam",
    "separation", "puncture", "tear", "shrink", "shrinkage", "embrittle", "brittle",
    "soften", "swell", "uplift", "blow-off",
]

STOP_WORDS = frozenset([
    "a", "an", "the", "is", "are", "was", "were", "be", "been", "being",
    "have", "has", "had", "do", "does", "did", "will", "would", "could", "should",
    "may", "might", "must", "can", "to", "of", "in", "for", "on", "with", "at", "by",
    "from", "as", "into", "through", "during", "before", "after", "above", "below",
    "between", "under", "again", "then", "once", "here", "there", "when", "where",
    "why", "how", "all", "each", "few", "more", "most", "other", "some", "such",
    "no", "nor", "not", "only", "own", "same", "so", "than", "too", "very", "just",
    "and", "but", "if", "or", "because", "until", "while", "this", "that", "these",
    "those", "what", "which", "who", "whom", "i", "me", "my", "myself", "we", "our",
    "ours", "you", "your", "he", "him", "his", "she", "her", "it", "its", "they",
    "them", "their",
])

TEMPERATURE_RE = re.compile(r"(-?\d+)\s*°?\s*([fFcC])")
MATERIAL_TOKEN_RE = re.compile(r"[A-Z][A-Z0-9-]+")
_NON_WORD_RE = re.compile(r"[^\w\s°-]")


def extract_keywords(question: str) -> list:
    cleaned = _NON_WORD_RE.sub(" ", question.lower())
    seen = []
    for word in cleaned.split():
        if len(word) > 1 and word not in STOP_WORDS and word not in seen:
            seen.append(word)
    return seen


def extract_temperatures(question: str) -> list:
    return [Temperature(int(m.group(1)), m.group(2).upper())
            for m in TEMPERATURE_RE.finditer(question)]


def extract(question: str) -> QuestionEntities:
    lower = question.lower()
    return QuestionEntities(
        materials=[m for m in MATERIAL_TOKEN_RE.findall(question) if len(m) > 2],
        chemistries=[c for c in CHEMISTRY_KEYWORDS if c in lower],
        temperatures=extract_temperatures(question),
        conditions=[c for c in CONDITION_KEYWORDS if c in lower],
        failures=[f for f in FAILURE_KEYWORDS if f in lower],
    )
