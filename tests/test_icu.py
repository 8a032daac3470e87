"""
Catalog tests: critical care calculators.
"""
import pytest

from clinscore import registry


def test_qsofa_positive(run_calc):
    result = run_calc("qsofa", {"respiratory_rate": 24, "systolic_bp": 95, "altered_mentation": True})
    assert result.total_score == 3
    assert result.tier == "High risk"


def test_qsofa_negative(run_calc):
    result = run_calc("qsofa", {"respiratory_rate": 22, "systolic_bp": 100})
    assert result.total_score == 0
    assert result.tier == "Low risk"


_SOFA_SYSTEMS = ["respiratory", "coagulation", "liver", "cardiovascular", "neurological", "renal"]


def test_sofa_all_one(run_calc):
    result = run_calc("sofa", {s: 1 for s in _SOFA_SYSTEMS})
    assert result.total_score == 6
    assert result.tier == "Low"
    assert result.details["failing_systems"] == []


def test_sofa_failing_system(run_calc):
    result = run_calc("sofa", {**{s: 1 for s in _SOFA_SYSTEMS}, "respiratory": 3})
    assert result.total_score == 8
    assert result.tier == "Moderate"
    assert result.details["failing_systems"] == ["respiratory"]


_APACHE_NORMAL = {
    "age": 40, "temperature": 37, "map": 90, "heart_rate": 80, "respiratory_rate": 16,
    "fio2": 0.21, "pao2": 90, "paco2": 40, "ph": 7.4, "sodium": 140, "potassium": 4.0,
    "serum_creatinine": 1.0, "hematocrit": 40, "wbc": 8, "gcs": 15,
}


def test_apache_ii_normal_physiology(run_calc):
    result = run_calc("apache_ii", _APACHE_NORMAL)
    assert result.total_score == 0
    assert result.tier == "Very low risk"
    assert result.details["aa_gradient_mmhg"] is None


def test_apache_ii_critically_ill(run_calc):
    result = run_calc("apache_ii", {
        "age": 70, "temperature": 39.5, "map": 60, "heart_rate": 125, "respiratory_rate": 30,
        "fio2": 0.6, "pao2": 70, "paco2": 40, "ph": 7.30, "sodium": 128, "potassium": 3.2,
        "serum_creatinine": 2.1, "acute_renal_failure": True, "hematocrit": 28, "wbc": 18,
        "gcs": 12, "chronic_health": "nonoperative",
    })
    assert result.total_score == 37
    assert result.tier == "Extreme risk"
    assert result.details["acute_physiology_score"] == 27
    assert result.details["aa_gradient_mmhg"] == pytest.approx(307.8)


@pytest.mark.parametrize("pao2, points", [(71, 0), (65, 1), (60, 3), (50, 4)])
def test_apache_ii_pao2_points(run_calc, pao2, points):
    assert run_calc("apache_ii", {**_APACHE_NORMAL, "pao2": pao2}).total_score == points


def test_apache_ii_is_not_a_sepsis_tool():
    ids = [entry["id"] for entry in registry.list_calculators("sepsis")]
    assert "apache_ii" not in ids
