"""
Catalog tests: nephrology calculators.
"""
import pytest


def test_ckd_epi_2021(run_calc):
    result = run_calc("ckd_epi_gfr", {"serum_creatinine": 0.7, "age": 50, "sex": "female"})
    assert result.total_score == pytest.approx(105.3, abs=0.2)
    assert result.tier == "G1"


def test_ckd_epi_creatinine_in_umol(run_calc):
    mg = run_calc("ckd_epi_gfr", {"serum_creatinine": 1.0, "age": 50, "sex": "male"})
    umol = run_calc("ckd_epi_gfr", {"serum_creatinine": {"value": 88.4, "unit": "umol/L"},
                                    "age": 50, "sex": "male"})
    assert umol.total_score == pytest.approx(mg.total_score, abs=0.1)


@pytest.mark.parametrize("sex,expected", [("male", 80.0), ("female", 68.0)])
def test_cockcroft_gault(run_calc, sex, expected):
    result = run_calc("creatinine_clearance", {"age": 60, "weight": 72, "serum_creatinine": 1.0, "sex": sex})
    assert result.total_score == expected
    assert result.tier == "Mild"


def test_ckd_stage(run_calc):
    result = run_calc("ckd_stage", {"egfr": 50, "acr": 45})
    assert result.tier == "G3a"
    assert result.details == {"albuminuria_category": "A2", "kdigo_risk": "High"}


def test_ckd_stage_requires_albuminuria(calc):
    outcome = calc("ckd_stage").calculate({"egfr": 50})
    assert not outcome.success
    assert outcome.errors[0]["error"] == "MISSING_FIELD"


def test_upcr_nephrotic(run_calc):
    result = run_calc("upcr", {"urine_protein": 300, "urine_creatinine": 100})
    assert result.total_score == 3.0
    assert result.tier == "Severe proteinuria"
