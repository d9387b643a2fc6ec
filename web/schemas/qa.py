"""Pydantic request/response models for the Q&A, material and compatibility endpoints."""
from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field

from construction_dna.core.models import EnvironmentConditions, QuestionContext


class ConditionsModel(BaseModel):
    """Environmental conditions; temperature in °F."""

    temperature: Optional[float] = None
    humidity: Optional[float] = Field(default=None, ge=0, le=100)
    moisture: Optional[str] = None  # dry, damp, wet, submerged
    exposure: Optional[str] = None  # full, partial, none
    climate_zone: Optional[str] = None

    def to_conditions(self) -> EnvironmentConditions:
        return EnvironmentConditions(**self.model_dump())


class AskRequest(BaseModel):
    question: str
    material_id: Optional[str] = None
    material_ids: list[str] = []
    conditions: Optional[ConditionsModel] = None

    def to_context(self) -> Optional[QuestionContext]:
        if not (self.material_id or self.material_ids or self.conditions):
            return None
        return QuestionContext(
            material_id=self.material_id,
            material_ids=list(self.material_ids),
            conditions=self.conditions.to_conditions() if self.conditions else None,
        )


class ParseRequest(BaseModel):
    question: str


class CompatibilityRequest(BaseModel):
    material_id_1: str
    material_id_2: str


# ---------------------------------------------------------------------------
# Responses
# ---------------------------------------------------------------------------

class HealthResponse(BaseModel):
    status: str
    service: str
    version: str


class MaterialSummary(BaseModel):
    """Catalog listing entry."""

    id: str
    taxonomy_code: Optional[str] = None
    name: Optional[str] = None
    manufacturer: Optional[str] = None
    chemistry: Optional[str] = None
    category: Optional[str] = None
    fire_class: Optional[str] = None


class MaterialListResponse(BaseModel):
    materials: list[MaterialSummary]
    count: int


class MaterialDetailResponse(BaseModel):
    """Full 20-tier record; each tier group is None when absent."""

    id: str
    taxonomy_code: Optional[str] = None
    classification: Optional[dict] = None
    physical: Optional[dict] = None
    performance: Optional[dict] = None
    engineering: Optional[dict] = None
    installation: Optional[dict] = None


class TemperatureModel(BaseModel):
    value: int
    unit: str  # F or C


class EntitiesModel(BaseModel):
    materials: list[str] = []
    chemistries: list[str] = []
    temperatures: list[TemperatureModel] = []
    conditions: list[str] = []
    failures: list[str] = []


class ParseResponse(BaseModel):
    original: str
    intent: str
    keywords: list[str]
    entities: EntitiesModel
    confidence: float


class AskResponse(BaseModel):
    """Structured engineering answer."""

    question: str
    intent: str
    answer: str
    explanation: str
    materials: list[MaterialSummary] = []
    failure_modes: list[dict] = []
    compatibility_issues: list[dict] = []
    constraint_violations: list[dict] = []
    recommendations: list[str] = []
    warnings: list[str] = []
    confidence: float
    sources: list[str] = []


class FailurePredictionModel(BaseModel):
    failure_mode: dict
    probability: float = Field(ge=0, le=1)
    risk_factors: list[str] = []
    prevention: list[str] = []


class FailurePredictionResponse(BaseModel):
    material_id: str
    predictions: list[FailurePredictionModel]


class CompatibilityResponse(BaseModel):
    compatible: bool
    status: str  # compatible, conditional, incompatible
    materials: list[str]
    issues: list[dict] = []
    requirements: list[str] = []
    explanation: str = ""
    found: bool = True
