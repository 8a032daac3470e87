"""
Tests for the QTc correction family.
"""
import pytest

from clinscore.calculators.cardiovascular import QTC_CORRECTIONS, QTcMethod


@pytest.mark.parametrize("calc_id,expected", [
    ("qtc_bazett", 447),       # 400 / 0.8^(1/2)
    ("qtc_fridericia", 431),   # 400 / 0.8^(1/3)
    ("qtc_framingham", 431),   # 400 + 154 x 0.2
    ("qtc_hodges", 426),       # 400 + 1.75 x 15
    ("qtc_rautaharju", 433),   # 400 x 195 / 180
])
def test_formulas_at_75_bpm(run_calc, calc_id, expected):
    result = run_calc(calc_id, {"qt_interval": 400, "heart_rate": 75})
    assert result.total_score == expected
    assert result.details["rr_interval_s"] == 0.8


@pytest.mark.parametrize("calc_id", [c.calc_id for c in QTC_CORRECTIONS])
def test_no_correction_at_60_bpm(run_calc, calc_id):
    result = run_calc(calc_id, {"qt_interval": 440, "heart_rate": 60})
    assert result.total_score == 440
    assert result.tier == "Normal"


def test_bazett_tachycardia(run_calc):
    result = run_calc("qtc_bazett", {"qt_interval": 500, "heart_rate": 100})
    assert result.total_score == 645
    assert result.tier == "Markedly prolonged"


@pytest.mark.parametrize("qt,tier", [(449, "Normal"), (450, "Prolonged"), (499, "Prolonged"),
                                     (500, "Markedly prolonged")])
def test_tier_bounds(run_calc, qt, tier):
    assert run_calc("qtc_bazett", {"qt_interval": qt, "heart_rate": 60}).tier == tier


def test_qt_in_seconds(run_calc):
    result = run_calc("qtc_fridericia", {"qt_interval": {"value": 0.44, "unit": "s"}, "heart_rate": 60})
    assert result.total_score == 440


def test_one_scorer_for_every_method():
    methods = {c.method for c in QTC_CORRECTIONS}
    assert methods == set(QTcMethod)
    bazett = next(c for c in QTC_CORRECTIONS if c.calc_id == "qtc_bazett")
    assert bazett.correct(400, 60) == pytest.approx(400)


def test_citation_per_method(run_calc):
    result = run_calc("qtc_hodges", {"qt_interval": 400, "heart_rate": 60})
    assert result.citation.startswith("Hodges")
