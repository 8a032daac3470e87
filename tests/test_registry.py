"""
Tests for the calculator registry and the executor entry point.
"""
import pytest

from clinscore import executor, registry
from clinscore.errors import UnknownCalculatorError

_EXPECTED_IDS = [
    "has_bled", "cha2ds2_vasc", "chads2", "qtc_bazett", "qtc_fridericia", "qtc_framingham",
    "qtc_hodges", "qtc_rautaharju", "gcs", "nihss", "apgar", "bishop", "estimated_due_date",
    "ckd_epi_gfr", "creatinine_clearance", "curb65", "wells_pe", "meld", "child_pugh",
    "qsofa", "sofa", "apache_ii", "psi", "scorad", "dlqi", "apfel", "aldrete", "oswestry",
    "harris_hip", "womac", "bmi", "ideal_body_weight", "mifflin_bmr", "harris_benedict",
]


class TestRegistry:
    def test_catalog_size(self):
        assert len(registry.CALCULATORS) == 77

    @pytest.mark.parametrize("calc_id", _EXPECTED_IDS)
    def test_registered(self, calc_id):
        assert calc_id in registry.CALCULATORS

    def test_every_definition_has_tiers(self):
        for cid, entry in registry.CALCULATORS.items():
            definition = entry["def"]
            assert definition.id == cid
            assert definition.scale.tiers, cid

    def test_list_by_tag(self):
        ids = [c["id"] for c in registry.list_calculators(tag="ecg")]
        assert ids == ["qtc_bazett", "qtc_fridericia", "qtc_framingham", "qtc_hodges", "qtc_rautaharju"]

    def test_list_entries(self):
        entry = next(c for c in registry.list_calculators() if c["id"] == "apgar")
        assert entry["specialty"] == "obstetrics"
        assert set(entry) == {"id", "title", "description", "version", "tags", "specialty"}

    @pytest.mark.parametrize("loose", ["HAS-BLED", "has bled", "Has_Bled"])
    def test_resolve_loose_ids(self, loose):
        assert registry.resolve_calc_id(loose) == "has_bled"

    def test_unknown_id_raises(self):
        with pytest.raises(UnknownCalculatorError) as exc_info:
            registry.get_definition("not_a_calculator")
        assert exc_info.value.to_dict()["error"] == "UNKNOWN_CALCULATOR"

    def test_calc_info_lists_enum_values(self):
        info = registry.calc_info("child_pugh")
        ascites = next(i for i in info.inputs if i["id"] == "ascites")
        assert ascites["type"] == "enum"
        assert ascites["constraints"]["allowed_values"] == ["absent", "slight", "moderate"]
        assert [t["tier"] for t in info.tiers] == ["Class A", "Class B", "Class C"]

    def test_calc_info_optional_boolean_default(self):
        info = registry.calc_info("has_bled")
        stroke = next(i for i in info.inputs if i["id"] == "stroke")
        assert stroke["required"] is False
        assert stroke["default"] is False

    def test_new_calculator_is_independent(self, has_bled_inputs):
        a = registry.new_calculator("has_bled")
        b = registry.new_calculator("has_bled")
        a.calculate(has_bled_inputs)
        assert b.result is None

    def test_new_calculator_honours_config(self):
        calculator = registry.new_calculator("has_bled", {"include_audit_trace": False})
        outcome = calculator.calculate({"serum_creatinine": 1.0, "age": 40})
        assert outcome.audit_trace is None


class TestExecutor:
    def test_success_payload(self, has_bled_inputs):
        response = executor.run("has_bled", has_bled_inputs)
        assert response["success"] is True
        assert response["errors"] == []
        outputs = response["outputs"]
        assert outputs["calc_id"] == "has_bled"
        assert outputs["total_score"] == 3
        assert outputs["tier"] == "High risk of major bleeding"
        assert response["audit_trace"]["log"]

    def test_units_reported(self):
        response = executor.run("qtc_bazett", {"qt_interval": 400, "heart_rate": 60})
        assert response["outputs"]["units"] == "ms"

    def test_unknown_calculator(self):
        response = executor.run("not_a_calculator", {})
        assert response["success"] is False
        assert response["outputs"] is None
        assert response["errors"][0]["error"] == "UNKNOWN_CALCULATOR"

    def test_validation_failure(self):
        response = executor.run("has_bled", {"age": 70})
        assert response["success"] is False
        assert response["errors"][0]["error"] == "MISSING_FIELD"

    def test_variables_must_be_a_mapping(self):
        response = executor.run("has_bled", ["age", 70])
        assert response["success"] is False
        assert response["errors"][0]["error"] == "PARSE_ERROR"
        assert response["errors"][0]["details"]["field"] == "variables"

    def test_oversized_integer_is_a_parse_error(self):
        response = executor.run("has_bled", {"serum_creatinine": 10 ** 400, "age": 70})
        assert response["success"] is False
        assert response["errors"][0]["error"] == "PARSE_ERROR"

    def test_no_variables(self):
        response = executor.run("bisap")
        assert response["success"] is True
        assert response["outputs"]["total_score"] == 0

    def test_advisory_range_is_a_warning(self):
        response = executor.run("teichholz_ef", {"lvid_diastole": 11.0, "lvid_systole": 5.0})
        assert response["success"] is True
        assert response["warnings"][0]["error"] == "RANGE_ERROR"

    def test_strict_config_blocks_advisory_range(self):
        response = executor.run("teichholz_ef", {"lvid_diastole": 11.0, "lvid_systole": 5.0},
                                {"strict_ranges": True})
        assert response["success"] is False
        assert response["errors"][0]["severity"] == "blocking"
