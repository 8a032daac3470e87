"""
Catalog tests: neurology and mental-health calculators.
"""
import pytest

_MMSE_FULL = {
    "orientation_time": 5, "orientation_place": 5, "registration": 3, "attention": 5,
    "recall": 3, "naming": 2, "repetition": 1, "three_stage_command": 3, "reading": 1,
    "writing": 1, "copying": 1,
}


@pytest.mark.parametrize("eye,verbal,motor,score,tier", [
    (4, 5, 6, 15, "Normal"),
    (4, 4, 6, 14, "Mild impairment"),
    (2, 3, 4, 9, "Moderate impairment"),
    (1, 1, 1, 3, "Severe impairment"),
])
def test_gcs(run_calc, eye, verbal, motor, score, tier):
    result = run_calc("gcs", {"e": eye, "v": verbal, "m": motor})
    assert result.total_score == score
    assert result.tier == tier


def test_gcs_component_out_of_range(calc):
    outcome = calc("gcs").calculate({"eye": 0, "verbal": 5, "motor": 6})
    assert outcome.errors[0]["error"] == "RANGE_ERROR"


def test_abcd2(run_calc):
    result = run_calc("abcd2", {"age_60_or_older": True, "blood_pressure_elevated": True,
                                "clinical_features": "unilateral_weakness", "duration_minutes": 75})
    assert result.total_score == 6
    assert result.tier == "High Risk"


def test_abcd2_short_duration(run_calc):
    result = run_calc("abcd2", {"clinical_features": "other", "duration_minutes": 5})
    assert result.total_score == 0


def test_phq9_item9_alert(run_calc):
    inputs = {f"phq_{n}": 1 for n in range(1, 10)}
    result = run_calc("phq9", inputs)
    assert result.total_score == 9
    assert result.tier == "Mild depression"
    assert result.details["suicide_risk_alert"] is True


def test_phq9_no_alert(run_calc):
    inputs = {f"phq_{n}": 2 for n in range(1, 9)}
    inputs["phq_9"] = 0
    result = run_calc("phq9", inputs)
    assert result.total_score == 16
    assert result.details["suicide_risk_alert"] is False


def test_gad7_severe(run_calc):
    result = run_calc("gad7", {f"gad_{n}": 3 for n in range(1, 8)})
    assert result.total_score == 21
    assert result.tier == "Severe anxiety"


def test_mmse_full_marks(run_calc):
    result = run_calc("mmse", _MMSE_FULL)
    assert result.total_score == 30
    assert result.tier == "Normal cognition"
    assert result.details["education_adjustment"] == 0
    assert result.details["domains"]["orientation"] == 10


def test_mmse_education_adjustment(run_calc):
    result = run_calc("mmse", {**_MMSE_FULL, "recall": 0, "education": "under_8"})
    assert result.total_score == 27
    assert result.details["education_adjusted_score"] == 25


def test_phases(run_calc):
    result = run_calc("phases", {"population": "japanese", "hypertension": True,
                                 "size_mm": 8, "site": "mca"})
    assert result.total_score == 9
    assert result.details["five_year_rupture_risk_pct"] == 4.3
    assert result.tier == "Moderate Risk"


def test_tbi_mild(run_calc):
    result = run_calc("tbi_severity", {"gcs": 14, "loc": True, "pta_hours": 2})
    assert result.total_score == 3
    assert result.tier == "Mild TBI"


def test_tbi_severe(run_calc):
    result = run_calc("tbi_severity", {"gcs": 6, "pta_hours": 72})
    assert result.total_score == 0
    assert result.tier == "Severe TBI"


def test_nihss_maximum_is_42(run_calc):
    worst = {
        "consciousness": 3, "loc_questions": 2, "loc_commands": 2, "gaze": 2, "visual": 3,
        "facial_palsy": 3, "motor_arm_left": 4, "motor_arm_right": 4, "motor_leg_left": 4,
        "motor_leg_right": 4, "ataxia": 2, "sensory": 2, "language": 3, "dysarthria": 2,
        "extinction": 2,
    }
    result = run_calc("nihss", worst)
    assert result.total_score == 42
    assert result.tier == "Severe stroke"


def test_nihss_requires_loc_items(calc):
    items = {fid: 0 for fid in ("consciousness", "gaze", "visual", "facial_palsy", "motor_arm_left",
                                "motor_arm_right", "motor_leg_left", "motor_leg_right", "ataxia",
                                "sensory", "language", "dysarthria", "extinction")}
    outcome = calc("nihss").calculate(items)
    assert not outcome.success
    assert {e["details"]["field"] for e in outcome.errors} == {"loc_questions", "loc_commands"}
