from __future__ import annotations
import os

import pytest
from construction_dna.core.models import CompatibilityStatus, FailureCategory, FailureSeverity
from construction_dna.plugins.reference_data.plugin import ReferenceDataPlugin
from construction_dna.plugins.reference_data.tables import DATA_DIR, ReferenceTables, load_reference_tables

class TestReferenceDataPlugin:
    @pytest.fixture
    def plugin(self):
        p = ReferenceDataPlugin()
        p.activate({})
        return p

    def test_get_info(self):
        info = ReferenceDataPlugin().get_info()
        assert info.name == "reference_data"
        assert info.dependencies == []

    def test_tables_shared(self, plugin):
        assert plugin.tables is load_reference_tables()

    def test_equivalent_paths_share_tables(self):
        alias = os.path.join(DATA_DIR, os.pardir, "data") + os.sep
        assert load_reference_tables(alias) is load_reference_tables()
        p = ReferenceDataPlugin(data_dir=alias)
        p.activate({})
        assert p.tables is load_reference_tables()

    def test_lookup_delegation(self, plugin):
        assert plugin.get_failure_mode("FM-007").name == "EPDM/Petroleum Incompatibility"

    def test_inactive_raises(self):
        with pytest.raises(RuntimeError):
            ReferenceDataPlugin().tables


class TestFailureModes:
    @pytest.fixture
    def tables(self):
        return load_reference_tables()

    def test_all_loaded(self, tables):
        assert len(tables.failure_modes) == 12
        assert tables.get_failure_mode("FM-999") is None

    def test_by_category(self, tables):
        ids = [fm.id for fm in tables.failure_modes_by_category("mechanical")]
        assert ids == ["FM-010", "FM-011"]
        assert tables.failure_modes_by_category(FailureCategory.UV)[0].id == "FM-009"

    def test_by_severity(self, tables):
        ids = [fm.id for fm in tables.failure_modes_by_severity(FailureSeverity.CATASTROPHIC)]
        assert ids == ["FM-011"]

    def test_for_chemistry(self, tables):
        ids = [fm.id for fm in tables.failure_modes_for_chemistry("EPDM")]
        assert ids == ["FM-002", "FM-006", "FM-007", "FM-010", "FM-011", "FM-012"]

    def test_unknown_chemistry_has_no_specific_modes(self, tables):
        # every bundled mode names its chemistries, so there is no universal fallback
        assert tables.failure_modes_for_chemistry("KEE") == []

    def test_categories(self, tables):
        cats = tables.failure_categories()
        assert len(cats) == 10
        assert "installation" in cats

    def test_prevention_present(self, tables):
        for fm in tables.failure_modes:
            assert fm.prevention, fm.id


class TestChemistries:
    @pytest.fixture
    def tables(self):
        return load_reference_tables()

    def test_lookup_by_type_or_code(self, tables):
        assert len(tables.chemistries) == 16
        assert tables.get_chemistry("epdm").name == "Ethylene Propylene Diene Monomer"
        assert tables.get_chemistry("Unobtainium") is None

    def test_thermoplastic_and_elastomeric(self, tables):
        thermo = {c.type for c in tables.thermoplastic_chemistries()}
        elastic = {c.type for c in tables.elastomeric_chemistries()}
        assert {"TPO", "PVC"} <= thermo
        assert {"EPDM", "SBS", "Silicone"} <= elastic
        assert not thermo & {"EPDM", "SBS"}

    def test_uv_stability(self, tables):
        excellent = {c.type for c in tables.chemistries_by_uv_stability("excellent")}
        assert excellent == {"TPO", "EPDM", "KEE", "Acrylic", "Silicone", "PMMA"}
        assert len(tables.chemistries_by_uv_stability("poor")) == 16

    def test_uv_stability_unknown_rating(self, tables):
        with pytest.raises(ValueError):
            tables.chemistries_by_uv_stability("amazing")


class TestCompatibilityRules:
    @pytest.fixture
    def tables(self):
        return load_reference_tables()

    def test_matrix_for_chemistry(self, tables):
        matrix = tables.compatibility_matrix_for("EPDM")
        assert len(matrix.incompatible) == 4
        assert len(matrix.compatible) == 1
        assert matrix.conditional == []

    def test_check_rule(self, tables):
        rule = tables.check_rule("EPDM", "bitumen")
        assert rule.status == CompatibilityStatus.INCOMPATIBLE
        assert rule.material_type == "Asphalt/Bitumen"
        assert tables.check_rule("TPO", "pvc") is None

    def test_incompatibilities_and_conditionals(self, tables):
        assert [r.material_type for r in tables.incompatibilities("PVC")] == ["Asphalt/Bitumen"]
        cond = tables.conditional_compatibilities("PVC")
        assert len(cond) == 3
        assert all(r.status == CompatibilityStatus.CONDITIONAL for r in cond)

    def test_search_rules(self, tables):
        hits = tables.search_rules("polystyrene")
        assert len(hits) == 5
        assert {r.chemistry_type for r in hits} == {"PVC", "TPO", "SBS"}


class TestMalformedTables:
    def test_unknown_category_raises(self, tmp_path):
        (tmp_path / "chemistries.yaml").write_text("chemistries: {}\n")
        (tmp_path / "compatibility.yaml").write_text("rules: []\n")
        (tmp_path / "failure_modes.yaml").write_text(
            "failure_modes:\n  - {id: FM-1, name: x, category: gremlins}\n")
        with pytest.raises(ValueError):
            ReferenceTables.from_directory(str(tmp_path))
