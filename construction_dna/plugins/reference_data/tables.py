"""Static reference tables: chemistries, failure modes, compatibility rules."""
from __future__ import annotations

import functools
import logging
import os
from typing import Optional

import yaml

from construction_dna.core.models import (
    BaseChemistry, CompatibilityEntry, CompatibilityMatrix, CompatibilityStatus,
    FailureCategory, FailureMode, FailureSeverity, STABILITY_RATINGS,
)

logger = logging.getLogger(__name__)

DATA_DIR = os.path.join(os.path.dirname(__file__), "data")


def _read_yaml(path: str) -> dict:
    with open(path, "r", encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


class ReferenceTables:
    """Read-only lookups over the reference tables.

    Records are frozen dataclasses held in tuples; nothing here mutates
    after construction, so a single instance is shared process-wide.
    """

    def __init__(self, chemistries: tuple, failure_modes: tuple, rules: tuple):
        self._chemistries = chemistries
        self._failure_modes = failure_modes
        self._rules = rules
        self._chem_by_key = {}
        for chem in chemistries:
            self._chem_by_key.setdefault(chem.type.lower(), chem)
            self._chem_by_key.setdefault(chem.code.lower(), chem)
        self._modes_by_id = {fm.id: fm for fm in failure_modes}

    @classmethod
    def from_directory(cls, data_dir: str = DATA_DIR) -> "ReferenceTables":
        chem_data = _read_yaml(os.path.join(data_dir, "chemistries.yaml")).get("chemistries", {})
        chemistries = tuple(
            BaseChemistry.from_dict({"type": chem_type, **record})
            for chem_type, record in chem_data.items()
        )
        modes = tuple(
            FailureMode.from_dict(item)
            for item in _read_yaml(os.path.join(data_dir, "failure_modes.yaml")).get("failure_modes", [])
        )
        rules = tuple(
            CompatibilityEntry.from_dict(item)
            for item in _read_yaml(os.path.join(data_dir, "compatibility.yaml")).get("rules", [])
        )
        logger.debug("Loaded %d chemistries, %d failure modes, %d compatibility rules",
                     len(chemistries), len(modes), len(rules))
        return cls(chemistries, modes, rules)

    # -- failure modes ------------------------------------------------------

    @property
    def failure_modes(self) -> tuple:
        return self._failure_modes

    def get_failure_mode(self, mode_id: str) -> Optional[FailureMode]:
        return self._modes_by_id.get(mode_id)

    def failure_modes_by_category(self, category) -> list:
        category = FailureCategory(category)
        return [fm for fm in self._failure_modes if fm.category == category]

    def failure_modes_for_chemistry(self, chemistry_type: str) -> list:
        """Modes listing *chemistry_type*; universal modes when none do."""
        specific = [fm for fm in self._failure_modes if fm.affects(chemistry_type)]
        if specific:
            return specific
        return [fm for fm in self._failure_modes if not fm.affected_chemistries]

    def failure_modes_by_severity(self, severity) -> list:
        severity = FailureSeverity(severity)
        return [fm for fm in self._failure_modes if fm.severity == severity]

    @staticmethod
    def failure_categories() -> list:
        return [c.value for c in FailureCategory]

    # -- chemistries --------------------------------------------------------

    @property
    def chemistries(self) -> tuple:
        return self._chemistries

    def get_chemistry(self, type_or_code: str) -> Optional[BaseChemistry]:
        return self._chem_by_key.get(type_or_code.lower())

    def thermoplastic_chemistries(self) -> list:
        return [c for c in self._chemistries if c.is_thermoplastic]

    def elastomeric_chemistries(self) -> list:
        return [c for c in self._chemistries if c.is_elastomeric]

    def chemistries_by_uv_stability(self, min_rating: str) -> list:
        if min_rating not in STABILITY_RATINGS:
            raise ValueError(f"Unknown stability rating '{min_rating}'")
        limit = STABILITY_RATINGS.index(min_rating)
        return [
            c for c in self._chemistries
            if c.uv_stability in STABILITY_RATINGS and STABILITY_RATINGS.index(c.uv_stability) <= limit
        ]

    # -- compatibility ------------------------------------------------------

    @property
    def rules(self) -> tuple:
        return self._rules

    def compatibility_matrix_for(self, chemistry_type: str) -> CompatibilityMatrix:
        rules = [r for r in self._rules if r.chemistry_type == chemistry_type]
        return CompatibilityMatrix(
            compatible=[r for r in rules if r.status == CompatibilityStatus.COMPATIBLE],
            incompatible=[r for r in rules if r.status == CompatibilityStatus.INCOMPATIBLE],
            conditional=[r for r in rules if r.status == CompatibilityStatus.CONDITIONAL],
        )

    def check_rule(self, chemistry_type: str, material_type: str) -> Optional[CompatibilityEntry]:
        """First rule for *chemistry_type* whose label contains *material_type*."""
        needle = material_type.lower()
        for rule in self._rules:
            if rule.chemistry_type == chemistry_type and needle in rule.material_type.lower():
                return rule
        return None

    def incompatibilities(self, chemistry_type: str) -> list:
        return [r for r in self._rules
                if r.chemistry_type == chemistry_type and r.status == CompatibilityStatus.INCOMPATIBLE]

    def conditional_compatibilities(self, chemistry_type: str) -> list:
        return [r for r in self._rules
                if r.chemistry_type == chemistry_type and r.status == CompatibilityStatus.CONDITIONAL]

    def search_rules(self, query: str) -> list:
        q = query.lower()
        return [
            r for r in self._rules
            if q in r.material_type.lower()
            or q in r.reason.lower()
            or (r.chemistry_type and q in r.chemistry_type.lower())
        ]


@functools.lru_cache(maxsize=None)
def _load_tables(data_dir: str) -> ReferenceTables:
    return ReferenceTables.from_directory(data_dir)


def load_reference_tables(data_dir: str = DATA_DIR) -> ReferenceTables:
    """Load the tables in *data_dir* once per process."""
    return _load_tables(os.path.realpath(data_dir))
