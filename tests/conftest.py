"""
Pytest configuration and fixtures

Shared fixtures for the scoring engine and catalog tests.
"""
import logging

import pytest

from clinscore.engine import Calculator, CalculatorDef
from clinscore.fields import ADVISORY, boolean, integer, number
from clinscore.registry import get_definition
from clinscore.scoring import RuleSet, flag, value_of
from clinscore.tiers import TierScale


@pytest.fixture
def toy_definition() -> CalculatorDef:
    """Small definition with one advisory-range field."""
    return CalculatorDef(
        id="toy",
        title="Toy Score",
        fields=(
            integer("count", "Count", min_value=0, max_value=5),
            boolean("flagged", "Flagged"),
            number("dose", "Dose", "mg", min_value=0, max_value=10, policy=ADVISORY,
                   required=False, default=0.0),
        ),
        rules=RuleSet([value_of("count"), flag("flagged", 2)]),
        scale=TierScale([
            (0, "Low", "Nothing to do."),
            (3, "High", "Act now."),
        ], citation="Toy reference"),
    )


@pytest.fixture
def calc():
    """Factory for fresh calculators by id."""
    def _make(calc_id: str, **kwargs) -> Calculator:
        return Calculator(get_definition(calc_id), **kwargs)
    return _make


@pytest.fixture
def run_calc(calc):
    """Run a calculator and return its ScoreResult, failing the test on errors."""
    def _run(calc_id: str, inputs: dict):
        outcome = calc(calc_id).calculate(inputs)
        assert outcome.success, outcome.errors
        return outcome.result
    return _run


@pytest.fixture
def has_bled_inputs() -> dict:
    return {"hypertension": True, "serum_creatinine": 2.5, "age": 70}


@pytest.fixture
def reset_logging():
    """Undo setup_logging so handlers never outlive a captured stream."""
    yield
    logger = logging.getLogger("clinscore")
    logger.handlers.clear()
    logger.propagate = True
    logger.setLevel(logging.NOTSET)
