"""
Catalog tests: cardiovascular calculators.
"""
import pytest

from clinscore import executor


def test_has_bled_zero(run_calc):
    result = run_calc("has_bled", {"serum_creatinine": 1.0, "age": 40})
    assert result.total_score == 0
    assert result.tier == "Low risk for major bleeding"


def test_has_bled_creatinine_in_umol(run_calc):
    result = run_calc("has_bled", {"serum_creatinine": {"value": 221, "unit": "umol/L"}, "age": 70,
                                   "htn": "yes"})
    assert result.total_score == 3


def test_cha2ds2_vasc_male_no_risk(run_calc):
    result = run_calc("cha2ds2_vasc", {"age": 50, "sex": "male"})
    assert result.total_score == 0
    assert result.tier == "Low"


def test_cha2ds2_vasc_age_65_band(run_calc):
    assert run_calc("cha2ds2_vasc", {"age": 65, "sex": "male"}).total_score == 1
    assert run_calc("cha2ds2_vasc", {"age": 75, "sex": "male"}).total_score == 2


def test_chads2_stroke_counts_double(run_calc):
    result = run_calc("chads2", {"age": 80, "stroke": True})
    assert result.total_score == 3
    assert result.tier == "Moderate-high risk (3.2%)"


def test_euroscore_baseline(run_calc):
    result = run_calc("euroscore_ii", {"age": 60, "sex": "male", "serum_creatinine": 1.0})
    assert result.total_score == 0
    assert result.details["predicted_mortality_pct"] == pytest.approx(0.5)
    assert result.tier == "Low risk"


def test_euroscore_classifies_on_mortality(run_calc):
    result = run_calc("euroscore_ii", {
        "age": 80, "sex": "female", "serum_creatinine": 2.5, "nyha": "IV",
        "lv_function": "poor", "urgency": "emergency", "critical_preoperative_state": True,
    })
    assert result.details["predicted_mortality_pct"] >= 10
    assert result.tier == "Very high risk"


def test_gorlin_aortic(run_calc):
    result = run_calc("gorlin_valve_area", {"cardiac_output": 5000, "heart_rate": 70,
                                            "ejection_period": 0.33, "mean_gradient": 50})
    assert result.total_score == pytest.approx(0.69, abs=0.01)
    assert result.tier == "Severe stenosis"


def test_gorlin_cardiac_output_in_litres(run_calc):
    litres = run_calc("gorlin_valve_area", {"cardiac_output": {"value": 5, "unit": "L/min"},
                                            "heart_rate": 70, "ejection_period": 0.33,
                                            "mean_gradient": 50})
    assert litres.total_score == pytest.approx(0.69, abs=0.01)


def test_teichholz(run_calc):
    result = run_calc("teichholz_ef", {"lvid_diastole": 5.0, "lvid_systole": 3.5})
    assert result.details == {"edv_ml": 118.24, "esv_ml": 50.87}
    assert result.total_score == pytest.approx(57.0, abs=0.1)
    assert result.tier == "Normal EF"


def test_teichholz_rejects_systole_larger(calc):
    outcome = calc("teichholz_ef").calculate({"lvid_diastole": 3.5, "lvid_systole": 5.0})
    assert not outcome.success


def test_mean_arterial_pressure(run_calc):
    result = run_calc("mean_arterial_pressure", {"sbp": 120, "dbp": 80})
    assert result.total_score == pytest.approx(93.3)
    assert result.tier == "Normal"


def test_shock_index_bound(run_calc):
    assert run_calc("shock_index", {"heart_rate": 91, "systolic_bp": 100}).tier == "Elevated"
    assert run_calc("shock_index", {"heart_rate": 90, "systolic_bp": 100}).tier == "Normal"


def test_fick_cardiac_output(run_calc):
    result = run_calc("fick_cardiac_output", {"vo2": 250, "cao2": 20, "cvo2": 15})
    assert result.total_score == 5.0
    assert result.tier == "Normal"


def test_svr(run_calc):
    result = run_calc("svr", {"map": 90, "cvp": 5, "co": 5})
    assert result.total_score == 1360
    assert result.tier == "High"


@pytest.mark.parametrize("diastole, systole", [(0.1, 0.05), (0.0, 0.0), (4.0, 0.2)])
def test_teichholz_rejects_unmeasurable_diameters(diastole, systole):
    response = executor.run("teichholz_ef", {"lvid_diastole": diastole, "lvid_systole": systole})
    assert response["success"] is False
    assert response["errors"][0]["error"] == "RANGE_ERROR"


def test_mean_arterial_pressure_high_boundary(run_calc):
    result = run_calc("mean_arterial_pressure", {"sbp": 160, "dbp": 70.8})
    assert result.total_score == pytest.approx(100.5)
    assert result.tier == "High"
    assert run_calc("mean_arterial_pressure", {"sbp": 150, "dbp": 75}).tier == "Normal"


def test_svr_rejects_cvp_above_map(calc):
    outcome = calc("svr").calculate({"map": 25, "cvp": 35, "co": 5})
    assert not outcome.success
    assert outcome.errors[0]["details"]["field"] == "central_venous_pressure"


def test_pvr(run_calc):
    result = run_calc("pvr", {"mpap": 40, "wedge": 10, "co": 5})
    assert result.total_score == 480
    assert result.tier == "Elevated"


def test_pvr_rejects_wedge_above_mpap(calc):
    outcome = calc("pvr").calculate({"mpap": 20, "wedge": 25, "co": 5})
    assert not outcome.success
    assert outcome.errors[0]["details"]["field"] == "pcwp"
