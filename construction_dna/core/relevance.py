"""Keyword relevance scoring shared by catalog search and question answering."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional

from construction_dna.core.models import MaterialRecord


def _field_values(material: MaterialRecord) -> dict:
    chem = material.chemistry
    product = material.product
    mfr = material.manufacturer
    category = material.classification.category if material.classification else None
    return {
        "product_name": product.name if product else None,
        "product_full_name": product.full_name if product else None,
        "manufacturer_name": mfr.name if mfr else None,
        "manufacturer_code": mfr.code if mfr else None,
        "category": category.code if category else None,
        "chemistry_name": chem.name if chem else None,
        "chemistry_code": chem.code if chem else None,
        "chemistry_type": chem.type if chem else None,
        "taxonomy_code": material.taxonomy_code,
    }


@dataclass(frozen=True)
class FieldWeights:
    """Which fields are searched and what each kind of hit is worth."""
    fields: tuple
    keyword: int = 1
    min_keyword_length: int = 1
    chemistry_type: int = 0
    chemistry_code: int = 0
    material_token: int = 0
    exact_chemistry_code: int = 0
    exact_manufacturer_code: int = 0


QA_WEIGHTS = FieldWeights(
    fields=("product_name", "product_full_name", "manufacturer_name",
            "chemistry_name", "chemistry_code", "taxonomy_code"),
    keyword=2,
    chemistry_type=5,
    chemistry_code=5,
    material_token=3,
)

SEARCH_WEIGHTS = FieldWeights(
    fields=("product_name", "product_full_name", "manufacturer_name", "manufacturer_code",
            "category", "chemistry_name", "chemistry_code", "chemistry_type", "taxonomy_code"),
    keyword=1,
    min_keyword_length=3,
    exact_chemistry_code=2,
    exact_manufacturer_code=2,
)


def searchable_text(material: MaterialRecord, weights: FieldWeights) -> str:
    values = _field_values(material)
    return " ".join(str(values[f]) for f in weights.fields if values.get(f)).lower()


def score_material(
    material: MaterialRecord,
    keywords: Iterable[str],
    weights: FieldWeights,
    chemistries: Iterable[str] = (),
    material_tokens: Iterable[str] = (),
) -> int:
    values = _field_values(material)
    text = searchable_text(material, weights)
    chem_type = (values["chemistry_type"] or "").lower()
    chem_code = (values["chemistry_code"] or "").lower()
    mfr_code = (values["manufacturer_code"] or "").lower()

    score = 0
    for keyword in keywords:
        kw = keyword.lower()
        if len(kw) < weights.min_keyword_length or kw not in text:
            continue
        score += weights.keyword
        if chem_code and kw == chem_code:
            score += weights.exact_chemistry_code
        if mfr_code and kw == mfr_code:
            score += weights.exact_manufacturer_code

    for chem in chemistries:
        c = chem.lower()
        if chem_type and chem_type == c:
            score += weights.chemistry_type
        if chem_code and chem_code == c:
            score += weights.chemistry_code

    for token in material_tokens:
        if token.lower() in text:
            score += weights.material_token
    return score


def rank_materials(
    materials: Iterable[MaterialRecord],
    keywords: Iterable[str],
    weights: FieldWeights,
    chemistries: Iterable[str] = (),
    material_tokens: Iterable[str] = (),
    limit: Optional[int] = None,
) -> list:
    """Score, drop zeros and sort descending; ties keep input order."""
    keywords = list(keywords)
    chemistries = list(chemistries)
    material_tokens = list(material_tokens)
    scored = []
    for material in materials:
        score = score_material(material, keywords, weights, chemistries, material_tokens)
        if score > 0:
            scored.append((score, material))
    scored.sort(key=lambda pair: pair[0], reverse=True)
    ranked = [m for _, m in scored]
    return ranked[:limit] if limit is not None else ranked
