"""
Catalog tests: obstetric calculators.
"""
import pytest


def test_apgar_severely_depressed(run_calc):
    result = run_calc("apgar", {"color": 0, "heart_rate": 1, "reflex": 0, "tone": 1, "breathing": 1})
    assert result.total_score == 3
    assert result.tier == "Severely Depressed"


def test_bishop_favourable(run_calc):
    result = run_calc("bishop", {"dilation_cm": 3, "effacement_pct": 60, "station": "0",
                                 "consistency": "soft", "position": "anterior"})
    assert result.total_score == 10
    assert result.tier == "Highly favorable"


def test_bishop_unfavourable(run_calc):
    result = run_calc("bishop", {"dilation_cm": 0, "effacement_pct": 30, "station": "-3",
                                 "consistency": "firm", "position": "posterior"})
    assert result.total_score == 0
    assert result.tier == "Unfavorable for induction"


def test_due_date(run_calc):
    result = run_calc("estimated_due_date", {"lmp": "2024-01-01", "assessment_date": "2024-03-01"})
    assert result.total_score == 8
    assert result.tier == "First trimester"
    assert result.details["estimated_due_date"] == "2024-10-07"
    assert result.details["gestational_age"] == "8w4d"
    assert result.details["milestones"]["end_of_first_trimester"] == "2024-03-25"


def test_due_date_term(run_calc):
    result = run_calc("estimated_due_date", {"lmp": "2024-01-01", "assessment_date": "2024-09-20"})
    assert result.tier == "Term"


def test_due_date_assessment_before_lmp(calc):
    outcome = calc("estimated_due_date").calculate({"lmp": "2024-03-01", "today": "2024-01-01"})
    assert not outcome.success
    assert outcome.errors[0]["details"]["field"] == "assessment_date"


def test_vbac_high(run_calc):
    result = run_calc("vbac", {"age_under_40": True, "vaginal_birth_history": "before_and_after",
                               "non_recurring_indication": True, "effacement": "high",
                               "dilation_4cm_or_more": True})
    assert result.total_score == 10
    assert result.details["success_probability_pct"] == 100
    assert result.tier == "High likelihood"


def test_vbac_defaults(run_calc):
    result = run_calc("vbac", {})
    assert result.total_score == 0
    assert result.tier == "Lower likelihood"


def test_amniotic_fluid_index(run_calc):
    result = run_calc("amniotic_fluid_index", {"quadrant_1": 3.0, "quadrant_2": 4.0,
                                               "quadrant_3": 2.5, "quadrant_4": 3.5})
    assert result.total_score == 13.0


def test_estimated_fetal_weight(run_calc):
    result = run_calc("estimated_fetal_weight", {"bpd": 9.0, "hc": 32.0, "ac": 30.0, "fl": 7.0})
    assert result.total_score == pytest.approx(2562, abs=5)
    assert result.tier == "Normal birth weight range"


def test_estimated_fetal_weight_in_mm(run_calc):
    result = run_calc("estimated_fetal_weight", {
        "bpd": {"value": 90, "unit": "mm"}, "hc": 32.0, "ac": 30.0, "fl": {"value": 70, "unit": "mm"},
    })
    assert result.total_score == pytest.approx(2562, abs=5)
