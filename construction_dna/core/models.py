"""Core data models for Construction DNA."""
from __future__ import annotations

import enum
from dataclasses import MISSING, dataclass, field, fields, asdict
from typing import Any, NamedTuple, Optional


class Intent(str, enum.Enum):
    FAILURE_PREDICTION = "failure-prediction"
    COMPATIBILITY_CHECK = "compatibility-check"
    TEMPERATURE_CHECK = "temperature-check"
    APPLICATION_GUIDANCE = "application-guidance"
    MATERIAL_PROPERTIES = "material-properties"
    CODE_COMPLIANCE = "code-compliance"
    TROUBLESHOOTING = "troubleshooting"
    MATERIAL_SELECTION = "material-selection"
    COMPARISON = "comparison"
    GENERAL = "general"


class FailureCategory(str, enum.Enum):
    ADHESION = "adhesion"
    COHESION = "cohesion"
    MECHANICAL = "mechanical"
    THERMAL = "thermal"
    MOISTURE = "moisture"
    CHEMICAL = "chemical"
    UV = "uv"
    BIOLOGICAL = "biological"
    INSTALLATION = "installation"
    DESIGN = "design"


class FailureSeverity(str, enum.Enum):
    COSMETIC = "cosmetic"
    FUNCTIONAL = "functional"
    STRUCTURAL = "structural"
    CATASTROPHIC = "catastrophic"


class TimeToFailure(str, enum.Enum):
    IMMEDIATE = "immediate"
    WEEKS = "weeks"
    MONTHS = "months"
    YEARS = "years"
    DECADES = "decades"


class CompatibilityStatus(str, enum.Enum):
    COMPATIBLE = "compatible"
    INCOMPATIBLE = "incompatible"
    CONDITIONAL = "conditional"


class ViolationSeverity(str, enum.Enum):
    WARNING = "warning"
    ERROR = "error"


STABILITY_RATINGS = ("excellent", "good", "fair", "poor")


def _plain(pairs: list) -> dict:
    out = {}
    for key, value in pairs:
        if isinstance(value, enum.Enum):
            value = value.value
        elif isinstance(value, tuple):
            value = list(value)
        out[key] = value
    return out


def _known(cls, data: Optional[dict]) -> Optional[dict]:
    """Keep only the keys of *data* that are fields of dataclass *cls*."""
    if not data:
        return None
    names = {f.name for f in fields(cls)}
    return {k: v for k, v in data.items() if k in names}


def _construct(cls, values: dict):
    """Instantiate *cls*, reporting absent required fields as ``ValueError``."""
    missing = [f.name for f in fields(cls)
               if f.name not in values and f.default is MISSING and f.default_factory is MISSING]
    if missing:
        raise ValueError(f"{cls.__name__} is missing required field(s): {', '.join(missing)}")
    return cls(**values)


def _enum(enum_cls, value: Any, what: str):
    try:
        return enum_cls(value)
    except ValueError:
        allowed = ", ".join(m.value for m in enum_cls)
        raise ValueError(f"Unknown {what} '{value}' (expected one of: {allowed})") from None


# ---------------------------------------------------------------------------
# Reference records (immutable)
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class FailureMode:
    id: str
    name: str
    category: FailureCategory
    causes: tuple = ()
    symptoms: tuple = ()
    time_to_failure: TimeToFailure = TimeToFailure.YEARS
    severity: FailureSeverity = FailureSeverity.FUNCTIONAL
    prevention: tuple = ()
    inspection: tuple = ()
    repairability: str = ""
    repair_cost: str = ""
    early_warnings: tuple = ()
    affected_chemistries: tuple = ()
    risk_factors: tuple = ()

    @classmethod
    def from_dict(cls, data: dict) -> "FailureMode":
        return cls(
            id=data["id"],
            name=data["name"],
            category=_enum(FailureCategory, data.get("category"), "failure category"),
            causes=tuple(data.get("causes") or ()),
            symptoms=tuple(data.get("symptoms") or ()),
            time_to_failure=_enum(TimeToFailure, data.get("time_to_failure", "years"),
                                  "time to failure"),
            severity=_enum(FailureSeverity, data.get("severity", "functional"), "severity"),
            prevention=tuple(data.get("prevention") or ()),
            inspection=tuple(data.get("inspection") or ()),
            repairability=data.get("repairability", ""),
            repair_cost=data.get("repair_cost", ""),
            early_warnings=tuple(data.get("early_warnings") or ()),
            affected_chemistries=tuple(data.get("affected_chemistries") or ()),
            risk_factors=tuple(data.get("risk_factors") or ()),
        )

    def affects(self, chemistry_type: str) -> bool:
        return chemistry_type in self.affected_chemistries

    def to_dict(self) -> dict:
        return asdict(self, dict_factory=_plain)


@dataclass(frozen=True)
class CompatibilityEntry:
    material_type: str
    status: CompatibilityStatus
    reason: str
    chemistry_type: Optional[str] = None
    requirement: Optional[str] = None
    primer_required: Optional[str] = None
    separator_required: Optional[str] = None
    source: str = "manufacturer"
    reference: Optional[str] = None
    notes: Optional[str] = None
    verified: bool = False

    @classmethod
    def from_dict(cls, data: dict) -> "CompatibilityEntry":
        values = _known(cls, data)
        values["status"] = _enum(CompatibilityStatus, data.get("status"), "compatibility status")
        return _construct(cls, values)

    def matches(self, chemistry: str) -> bool:
        """Exact chemistry-type match or substring match on the material-type label."""
        needle = chemistry.lower()
        if self.chemistry_type and self.chemistry_type.lower() == needle:
            return True
        return needle in self.material_type.lower()

    def to_dict(self) -> dict:
        return asdict(self, dict_factory=_plain)


@dataclass(frozen=True)
class BaseChemistry:
    code: str
    name: str
    type: str
    primary_polymer: str = ""
    modifiers: tuple = ()
    is_thermoplastic: bool = False
    is_thermoset: bool = False
    is_elastomeric: bool = False
    uv_stability: str = "fair"
    chemical_resistance: tuple = ()
    aging_characteristics: str = ""
    joining_method: str = ""

    @classmethod
    def from_dict(cls, data: dict) -> "BaseChemistry":
        values = _known(cls, data)
        values["modifiers"] = tuple(data.get("modifiers") or ())
        # Stored as sorted pairs so the record stays hashable.
        values["chemical_resistance"] = tuple(sorted((data.get("chemical_resistance") or {}).items()))
        return _construct(cls, values)

    def resistance(self, agent: str) -> Optional[str]:
        return dict(self.chemical_resistance).get(agent)

    def to_dict(self) -> dict:
        d = asdict(self, dict_factory=_plain)
        d["chemical_resistance"] = dict(self.chemical_resistance)
        return d


# ---------------------------------------------------------------------------
# Material record tiers
# ---------------------------------------------------------------------------

@dataclass
class CodedItem:
    code: str
    name: str = ""
    description: str = ""


@dataclass
class Manufacturer:
    code: str
    name: str
    full_name: str = ""
    website: str = ""


@dataclass
class ProductVariant:
    code: str
    name: str
    full_name: str = ""
    sku: str = ""
    spec_sheet_url: str = ""
    install_guide_url: str = ""


@dataclass
class Classification:
    """Tiers 1-6."""
    division: Optional[CodedItem] = None
    category: Optional[CodedItem] = None
    assembly_type: Optional[CodedItem] = None
    condition: Optional[CodedItem] = None
    manufacturer: Optional[Manufacturer] = None
    product_variant: Optional[ProductVariant] = None

    @classmethod
    def from_dict(cls, data: Optional[dict]) -> Optional["Classification"]:
        if not data:
            return None
        return cls(
            division=_coded(data.get("division")),
            category=_coded(data.get("category")),
            assembly_type=_coded(data.get("assembly_type")),
            condition=_coded(data.get("condition")),
            manufacturer=_build(Manufacturer, data.get("manufacturer")),
            product_variant=_build(ProductVariant, data.get("product_variant")),
        )


@dataclass
class Reinforcement:
    code: str
    type: str = "none"
    orientation: str = "none"


@dataclass
class SurfaceTreatment:
    code: str
    type: str = "untreated"
    color: str = ""
    texture: str = "smooth"
    exposure_rated: bool = False


@dataclass
class ThicknessClass:
    code: str
    nominal_mils: float = 0.0
    nominal_mm: float = 0.0


@dataclass
class ColorReflectivity:
    code: str
    color_name: str = ""
    sri: Optional[float] = None
    meets_cool_roof: bool = False


@dataclass
class FireRating:
    code: str
    fire_class: str = "Unrated"
    fm_approval: Optional[str] = None
    ul_listing: Optional[str] = None


@dataclass
class PhysicalProperties:
    """Tiers 7-12."""
    base_chemistry: Optional[BaseChemistry] = None
    reinforcement: Optional[Reinforcement] = None
    surface_treatment: Optional[SurfaceTreatment] = None
    thickness_class: Optional[ThicknessClass] = None
    color_reflectivity: Optional[ColorReflectivity] = None
    fire_rating: Optional[FireRating] = None

    @classmethod
    def from_dict(cls, data: Optional[dict], reference: Any = None) -> Optional["PhysicalProperties"]:
        if not data:
            return None
        return cls(
            base_chemistry=_chemistry(data.get("base_chemistry"), reference),
            reinforcement=_build(Reinforcement, data.get("reinforcement")),
            surface_treatment=_build(SurfaceTreatment, data.get("surface_treatment")),
            thickness_class=_build(ThicknessClass, data.get("thickness_class")),
            color_reflectivity=_build(ColorReflectivity, data.get("color_reflectivity")),
            fire_rating=_build(FireRating, data.get("fire_rating")),
        )


@dataclass
class PermRating:
    code: str
    perm_class: str = ""
    perms: float = 0.0
    vapor_barrier: bool = False
    vapor_retarder: bool = False


@dataclass
class TensileStrength:
    code: str
    psi_md: float = 0.0
    psi_cd: float = 0.0


@dataclass
class Elongation:
    code: str
    percent_md: float = 0.0
    percent_cd: float = 0.0


@dataclass
class TemperatureRange:
    """Service and application limits in degrees Fahrenheit."""
    code: str
    min_service_f: float
    max_service_f: float
    min_application_f: float
    max_application_f: float
    brittle_point_f: Optional[float] = None
    soft_point_f: Optional[float] = None
    cold_weather_product: bool = False


@dataclass
class PerformanceMetrics:
    """Tiers 13-16."""
    perm_rating: Optional[PermRating] = None
    tensile_strength: Optional[TensileStrength] = None
    elongation: Optional[Elongation] = None
    temperature_range: Optional[TemperatureRange] = None

    @classmethod
    def from_dict(cls, data: Optional[dict]) -> Optional["PerformanceMetrics"]:
        if not data:
            return None
        return cls(
            perm_rating=_build(PermRating, data.get("perm_rating")),
            tensile_strength=_build(TensileStrength, data.get("tensile_strength")),
            elongation=_build(Elongation, data.get("elongation")),
            temperature_range=_build(TemperatureRange, data.get("temperature_range")),
        )


@dataclass
class CompatibilityMatrix:
    compatible: list = field(default_factory=list)
    incompatible: list = field(default_factory=list)
    conditional: list = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict) -> "CompatibilityMatrix":
        def entries(key: str, status: str) -> list:
            return [
                CompatibilityEntry.from_dict({"status": status, **item})
                for item in (data.get(key) or [])
            ]
        return cls(
            compatible=entries("compatible", "compatible"),
            incompatible=entries("incompatible", "incompatible"),
            conditional=entries("conditional", "conditional"),
        )

    def first_match(self, status: CompatibilityStatus, chemistry: str) -> Optional[CompatibilityEntry]:
        bucket = {
            CompatibilityStatus.COMPATIBLE: self.compatible,
            CompatibilityStatus.INCOMPATIBLE: self.incompatible,
            CompatibilityStatus.CONDITIONAL: self.conditional,
        }[status]
        for entry in bucket:
            if entry.matches(chemistry):
                return entry
        return None


@dataclass
class ApplicationConstraint:
    id: str
    type: str
    description: str
    min_value: Optional[float] = None
    max_value: Optional[float] = None
    unit: Optional[str] = None
    consequence: str = ""
    violation_severity: FailureSeverity = FailureSeverity.FUNCTIONAL
    source: str = "manufacturer"

    @classmethod
    def from_dict(cls, data: dict) -> "ApplicationConstraint":
        values = _known(cls, data)
        values["violation_severity"] = _enum(
            FailureSeverity, data.get("violation_severity", "functional"), "severity")
        return _construct(cls, values)

    def range_text(self) -> Optional[str]:
        unit = self.unit or ""
        if self.min_value is not None and self.max_value is not None:
            return f"{format_number(self.min_value)} - {format_number(self.max_value)} {unit}".rstrip()
        if self.min_value is not None:
            return f"Min: {format_number(self.min_value)} {unit}".rstrip()
        if self.max_value is not None:
            return f"Max: {format_number(self.max_value)} {unit}".rstrip()
        return None


@dataclass
class CodeReference:
    code: str
    section: str
    requirement: str
    compliant: bool = True
    full_name: str = ""
    edition: str = ""
    test_method: Optional[str] = None


@dataclass
class EngineeringData:
    """Tiers 17-20."""
    failure_modes: Optional[list] = None
    compatibility_matrix: Optional[CompatibilityMatrix] = None
    application_constraints: Optional[list] = None
    code_references: Optional[list] = None

    @classmethod
    def from_dict(cls, data: Optional[dict], chemistry_type: Optional[str] = None,
                  reference: Any = None) -> Optional["EngineeringData"]:
        if not data:
            return None
        modes = None
        if data.get("failure_modes") is not None:
            modes = []
            for item in data["failure_modes"]:
                if isinstance(item, str):
                    mode = reference.get_failure_mode(item) if reference is not None else None
                    if mode is not None:
                        modes.append(mode)
                else:
                    modes.append(FailureMode.from_dict(item))

        matrix = None
        raw_matrix = data.get("compatibility_matrix")
        if raw_matrix == "reference":
            if reference is not None and chemistry_type:
                matrix = reference.compatibility_matrix_for(chemistry_type)
        elif raw_matrix:
            matrix = CompatibilityMatrix.from_dict(raw_matrix)

        constraints = None
        if data.get("application_constraints") is not None:
            constraints = [ApplicationConstraint.from_dict(c) for c in data["application_constraints"]]
        refs = None
        if data.get("code_references") is not None:
            refs = [_construct(CodeReference, _known(CodeReference, r) or {})
                    for r in data["code_references"]]
        return cls(failure_modes=modes, compatibility_matrix=matrix,
                   application_constraints=constraints, code_references=refs)


@dataclass
class InstallationReference:
    guide_url: Optional[str] = None
    spec_section: Optional[str] = None
    quick_steps: list = field(default_factory=list)


@dataclass
class MaterialRecord:
    id: str
    taxonomy_code: Optional[str] = None
    classification: Optional[Classification] = None
    physical: Optional[PhysicalProperties] = None
    performance: Optional[PerformanceMetrics] = None
    engineering: Optional[EngineeringData] = None
    installation: Optional[InstallationReference] = None

    @classmethod
    def from_dict(cls, data: dict, reference: Any = None) -> "MaterialRecord":
        """Build a record from a plain mapping.

        *reference* resolves failure-mode ids, chemistry types given by name
        and ``compatibility_matrix: reference`` shortcuts.
        """
        if not data.get("id"):
            raise ValueError("Material record requires an 'id'")
        physical = PhysicalProperties.from_dict(data.get("physical"), reference)
        chem_type = physical.base_chemistry.type if physical and physical.base_chemistry else None
        return cls(
            id=str(data["id"]),
            taxonomy_code=data.get("taxonomy_code"),
            classification=Classification.from_dict(data.get("classification")),
            physical=physical,
            performance=PerformanceMetrics.from_dict(data.get("performance")),
            engineering=EngineeringData.from_dict(data.get("engineering"), chem_type, reference),
            installation=_build(InstallationReference, data.get("installation")),
        )

    # Convenience accessors; each returns None when the tier is absent.

    @property
    def chemistry(self) -> Optional[BaseChemistry]:
        return self.physical.base_chemistry if self.physical else None

    @property
    def product(self) -> Optional[ProductVariant]:
        return self.classification.product_variant if self.classification else None

    @property
    def manufacturer(self) -> Optional[Manufacturer]:
        return self.classification.manufacturer if self.classification else None

    @property
    def temperature_range(self) -> Optional[TemperatureRange]:
        return self.performance.temperature_range if self.performance else None

    @property
    def failure_modes(self) -> list:
        if self.engineering and self.engineering.failure_modes:
            return list(self.engineering.failure_modes)
        return []

    @property
    def compatibility_matrix(self) -> Optional[CompatibilityMatrix]:
        return self.engineering.compatibility_matrix if self.engineering else None

    @property
    def application_constraints(self) -> list:
        if self.engineering and self.engineering.application_constraints:
            return list(self.engineering.application_constraints)
        return []

    @property
    def code_references(self) -> list:
        if self.engineering and self.engineering.code_references:
            return list(self.engineering.code_references)
        return []

    @property
    def display_name(self) -> str:
        return self.product.name if self.product and self.product.name else "Material"

    @property
    def source_id(self) -> str:
        return self.taxonomy_code or self.id

    def to_dict(self) -> dict:
        d = asdict(self, dict_factory=_plain)
        if self.chemistry is not None:
            d["physical"]["base_chemistry"] = self.chemistry.to_dict()
        return d

    def summary(self) -> dict:
        chem = self.chemistry
        fire = self.physical.fire_rating if self.physical else None
        category = self.classification.category if self.classification else None
        return {
            "id": self.id,
            "taxonomy_code": self.taxonomy_code,
            "name": self.product.name if self.product else None,
            "manufacturer": self.manufacturer.code if self.manufacturer else None,
            "chemistry": chem.code if chem else None,
            "category": category.code if category else None,
            "fire_class": fire.fire_class if fire else None,
        }


def _build(cls, data: Optional[dict]):
    values = _known(cls, data)
    return _construct(cls, values) if values else None


def _coded(data: Any) -> Optional[CodedItem]:
    if isinstance(data, str):
        return CodedItem(code=data)
    return _build(CodedItem, data)


def _chemistry(data: Any, reference: Any) -> Optional[BaseChemistry]:
    if not data:
        return None
    if isinstance(data, str):
        return reference.get_chemistry(data) if reference is not None else None
    return BaseChemistry.from_dict(data)


def format_number(value: Any) -> str:
    """Render whole floats without a trailing ``.0``."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


# ---------------------------------------------------------------------------
# Question / answer models
# ---------------------------------------------------------------------------

class Temperature(NamedTuple):
    value: int
    unit: str

    def to_fahrenheit(self) -> float:
        if self.unit == "C":
            return round(self.value * 9 / 5 + 32, 1)
        return float(self.value)


@dataclass
class QuestionEntities:
    materials: list = field(default_factory=list)
    chemistries: list = field(default_factory=list)
    temperatures: list = field(default_factory=list)
    conditions: list = field(default_factory=list)
    failures: list = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "materials": list(self.materials),
            "chemistries": list(self.chemistries),
            "temperatures": [{"value": t.value, "unit": t.unit} for t in self.temperatures],
            "conditions": list(self.conditions),
            "failures": list(self.failures),
        }


@dataclass
class ParsedQuestion:
    original: str
    intent: Intent
    keywords: list
    entities: QuestionEntities
    confidence: float

    def to_dict(self) -> dict:
        return {
            "original": self.original,
            "intent": self.intent.value,
            "keywords": list(self.keywords),
            "entities": self.entities.to_dict(),
            "confidence": self.confidence,
        }


@dataclass
class EnvironmentConditions:
    temperature: Optional[float] = None
    humidity: Optional[float] = None
    moisture: Optional[str] = None
    exposure: Optional[str] = None
    climate_zone: Optional[str] = None


@dataclass
class QuestionContext:
    material_id: Optional[str] = None
    material_ids: list = field(default_factory=list)
    conditions: Optional[EnvironmentConditions] = None

    def explicit_ids(self) -> list:
        ids = [self.material_id] if self.material_id else []
        ids.extend(self.material_ids or [])
        return ids


@dataclass
class ConstraintViolation:
    constraint: ApplicationConstraint
    actual_value: Any
    required_value: Any
    severity: ViolationSeverity
    explanation: str

    def to_dict(self) -> dict:
        return asdict(self, dict_factory=_plain)


@dataclass
class EngineeringAnswer:
    question: str
    intent: Intent
    answer: str
    explanation: str
    materials: list = field(default_factory=list)
    failure_modes: list = field(default_factory=list)
    compatibility_issues: list = field(default_factory=list)
    constraint_violations: list = field(default_factory=list)
    recommendations: list = field(default_factory=list)
    warnings: list = field(default_factory=list)
    confidence: float = 0.5
    sources: list = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "question": self.question,
            "intent": self.intent.value,
            "answer": self.answer,
            "explanation": self.explanation,
            "materials": [m.summary() for m in self.materials],
            "failure_modes": [fm.to_dict() for fm in self.failure_modes],
            "compatibility_issues": [c.to_dict() for c in self.compatibility_issues],
            "constraint_violations": [v.to_dict() for v in self.constraint_violations],
            "recommendations": list(self.recommendations),
            "warnings": list(self.warnings),
            "confidence": self.confidence,
            "sources": list(self.sources),
        }


@dataclass
class FailurePrediction:
    failure_mode: FailureMode
    probability: float
    risk_factors: list = field(default_factory=list)
    prevention: list = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "failure_mode": self.failure_mode.to_dict(),
            "probability": self.probability,
            "risk_factors": list(self.risk_factors),
            "prevention": list(self.prevention),
        }


@dataclass
class CompatibilityResult:
    compatible: bool
    status: CompatibilityStatus
    materials: list
    issues: list = field(default_factory=list)
    requirements: list = field(default_factory=list)
    explanation: str = ""
    found: bool = True

    def to_dict(self) -> dict:
        return {
            "compatible": self.compatible,
            "status": self.status.value,
            "materials": list(self.materials),
            "issues": [i.to_dict() for i in self.issues],
            "requirements": list(self.requirements),
            "explanation": self.explanation,
            "found": self.found,
        }
