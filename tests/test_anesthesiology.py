"""
Catalog tests: anaesthesia calculators.
"""
import pytest


def test_apfel_two_factors(run_calc):
    result = run_calc("apfel", {"female": True, "non_smoker": True})
    assert result.total_score == 2
    assert result.tier == "Moderate (~40%)"


@pytest.mark.parametrize("count,tier", [(0, "Low (~10%)"), (1, "Low (~20%)"), (4, "Very High (~80%)")])
def test_apfel_labels_per_score(run_calc, count, tier):
    factors = ["female", "non_smoker", "ponv_history", "postoperative_opioids"]
    result = run_calc("apfel", {f: True for f in factors[:count]})
    assert result.tier == tier


def test_aldrete_ready(run_calc):
    result = run_calc("aldrete", {"activity": 2, "respiration": 2, "circulation": 2,
                                  "consciousness": 2, "spo2": 2})
    assert result.total_score == 10
    assert result.tier == "Ready for discharge"


def test_aldrete_not_ready(run_calc):
    result = run_calc("aldrete", {"activity": 1, "respiration": 1, "circulation": 1,
                                  "consciousness": 1, "oxygen_saturation": 1})
    assert result.total_score == 5
    assert result.tier == "Not ready"
