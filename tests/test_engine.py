"""
Tests for the Calculator pipeline: end-to-end scenarios, error handling,
state handling and the audit trace.
"""
import pytest

from clinscore.engine import Calculator, CalculatorState
from clinscore.errors import UnknownFieldError
from clinscore.registry import get_definition


class TestScenarios:
    """Reference cases with known results."""

    def test_has_bled(self, run_calc, has_bled_inputs):
        result = run_calc("has_bled", has_bled_inputs)
        assert result.total_score == 3
        assert result.tier == "High risk of major bleeding"

    def test_cha2ds2_vasc(self, run_calc):
        result = run_calc("cha2ds2_vasc", {"age": 76, "sex": "female", "chf": True})
        assert result.total_score == 4
        assert result.guidance_text == "High stroke risk; anticoagulation recommended."

    def test_apgar_all_two(self, run_calc):
        fields = ["appearance", "pulse", "grimace", "activity", "respiration"]
        result = run_calc("apgar", {f: 2 for f in fields})
        assert result.total_score == 10
        assert result.tier == "Normal (Healthy)"

    def test_apgar_all_one(self, run_calc):
        fields = ["appearance", "pulse", "grimace", "activity", "respiration"]
        result = run_calc("apgar", {f: 1 for f in fields})
        assert result.total_score == 5
        assert result.tier == "Moderately Depressed"


class TestErrors:
    def test_missing_required_field(self, calc):
        outcome = calc("has_bled").calculate({"hypertension": True, "age": 70})
        assert not outcome.success
        assert outcome.result is None
        assert [e["error"] for e in outcome.errors] == ["MISSING_FIELD"]

    def test_parse_error_blocks(self, calc):
        outcome = calc("has_bled").calculate({"serum_creatinine": "high", "age": 70})
        assert not outcome.success
        assert outcome.errors[0]["error"] == "PARSE_ERROR"

    def test_blocking_range_violation(self, calc):
        outcome = calc("has_bled").calculate({"serum_creatinine": 2.5, "age": 400})
        assert not outcome.success
        assert outcome.errors[0]["error"] == "RANGE_ERROR"
        assert outcome.errors[0]["severity"] == "blocking"

    def test_advisory_range_violation(self, toy_definition):
        outcome = Calculator(toy_definition).calculate({"count": 1, "dose": 25})
        assert outcome.success
        assert outcome.result.total_score == 1
        assert outcome.warnings[0]["error"] == "RANGE_ERROR"
        assert outcome.warnings[0]["severity"] == "advisory"

    def test_strict_ranges_escalate(self, toy_definition):
        outcome = Calculator(toy_definition, strict_ranges=True).calculate({"count": 1, "dose": 25})
        assert not outcome.success
        assert outcome.errors[0]["severity"] == "blocking"

    def test_cross_field_check(self, calc):
        outcome = calc("mean_arterial_pressure").calculate({"systolic_bp": 70, "diastolic_bp": 80})
        assert not outcome.success
        assert outcome.errors[0]["details"]["field"] == "systolic_bp"

    def test_unknown_field_warns_but_scores(self, calc, has_bled_inputs):
        outcome = calc("has_bled").calculate({**has_bled_inputs, "favourite_colour": "blue"})
        assert outcome.success
        assert outcome.warnings[0]["error"] == "UNKNOWN_FIELD"

    def test_error_dicts_are_structured(self, calc):
        outcome = calc("has_bled").calculate({})
        for err in outcome.errors:
            assert set(err) == {"error", "message", "severity", "details"}


class TestState:
    def test_deterministic(self, calc, has_bled_inputs):
        first = calc("has_bled").calculate(has_bled_inputs)
        second = calc("has_bled").calculate(has_bled_inputs)
        assert first == second

    def test_instances_do_not_share_state(self, calc, has_bled_inputs):
        a = calc("has_bled")
        b = calc("has_bled")
        a.calculate(has_bled_inputs)
        assert a.result is not None
        assert b.result is None
        assert b.state.fields == {}

    def test_injected_state(self, has_bled_inputs):
        state = CalculatorState()
        calculator = Calculator(get_definition("has_bled"), state=state)
        calculator.calculate(has_bled_inputs)
        assert state.result.total_score == 3
        assert state.fields["serum_creatinine"].parsed_value == 2.5

    def test_set_value_then_calculate(self, calc):
        calculator = calc("has_bled")
        calculator.set_value("htn", True)
        calculator.set_values({"serum_creatinine": 2.5, "age": 70})
        outcome = calculator.calculate()
        assert outcome.result.total_score == 3
        assert "hypertension" in calculator.state.fields

    def test_set_value_unknown_field(self, calc):
        with pytest.raises(UnknownFieldError):
            calc("has_bled").set_value("shoe_size", 42)

    def test_failure_clears_previous_result(self, calc, has_bled_inputs):
        calculator = calc("has_bled")
        calculator.calculate(has_bled_inputs)
        calculator.calculate({"age": 70})
        assert calculator.result is None

    def test_clear(self, calc, has_bled_inputs):
        calculator = calc("has_bled")
        calculator.calculate(has_bled_inputs)
        calculator.clear()
        assert calculator.result is None
        assert calculator.state.fields == {}

    def test_recalculation_replaces_inputs(self, calc, has_bled_inputs):
        calculator = calc("has_bled")
        calculator.calculate({**has_bled_inputs, "stroke": True})
        outcome = calculator.calculate(has_bled_inputs)
        assert outcome.result.total_score == 3


class TestAuditTrace:
    def test_trace_contents(self, calc, has_bled_inputs):
        outcome = calc("has_bled").calculate(has_bled_inputs)
        trace = outcome.audit_trace
        assert trace["inputs_used"]["serum_creatinine"] == "2.5 mg/dL"
        assert trace["inputs_used"]["hypertension"] == "yes"
        assert "Hypertension (+1)" in trace["log"]
        assert trace["log"][-1] == "Tier: High risk of major bleeding"

    def test_trace_disabled(self, calc, has_bled_inputs):
        outcome = calc("has_bled", include_audit_trace=False).calculate(has_bled_inputs)
        assert outcome.audit_trace is None
