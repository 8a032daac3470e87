"""
Unit tests for rule sets, rounding and tier classification.
"""
import pytest

from clinscore.calculators.cardiovascular import HAS_BLED
from clinscore.models import ThresholdBand
from clinscore.scoring import (
    RuleSet,
    banded,
    check_ascending,
    flag,
    formula,
    lookup,
    points_if,
    round_half_up,
    score,
    value_of,
)
from clinscore.tiers import TierScale, classify, interpret


class TestRuleSet:
    def test_sum_of_true_predicates(self):
        rules = RuleSet([
            flag("a"),
            flag("b", 2),
            points_if("c > 5", lambda v: v["c"] > 5, 3),
        ])
        assert score({"a": True, "b": False, "c": 6}, rules) == 4

    def test_fired_labels_skip_zero_points(self):
        rules = RuleSet([flag("a", label="A"), value_of("n", label="N")])
        total, fired = rules.evaluate({"a": True, "n": 0})
        assert total == 1
        assert fired == ["A (+1)"]

    def test_fractional_weights(self):
        rules = RuleSet([flag("a", 1.5), flag("b", 1.5)])
        total, fired = rules.evaluate({"a": True, "b": True})
        assert total == 3.0
        assert fired == ["a (+1.5)", "b (+1.5)"]

    def test_formula_rule(self):
        rules = RuleSet([formula("x squared", lambda v: v["x"] ** 2)])
        assert score({"x": 3}, rules) == 9

    def test_lookup_rule(self):
        rules = RuleSet([lookup("grade", {"low": 0, "high": 2})])
        assert score({"grade": "high"}, rules) == 2

    def test_empty_rule_set_rejected(self):
        with pytest.raises(ValueError):
            RuleSet([])

    def test_rules_are_ordered_and_immutable(self):
        rules = RuleSet([flag("a"), flag("b")])
        assert [r.label for r in rules] == ["a", "b"]
        with pytest.raises(AttributeError):
            next(iter(rules)).weight = 5


class TestBanded:
    rule = banded("x", [(10, 1), (60, 2)], below=0)

    @pytest.mark.parametrize("x,points", [(0, 0), (9.99, 0), (10, 1), (59, 1), (60, 2), (1440, 2)])
    def test_closed_lower_bounds(self, x, points):
        assert self.rule.points({"x": x}) == points

    def test_unsorted_bands_rejected(self):
        with pytest.raises(ValueError):
            banded("x", [(60, 2), (10, 1)])


class TestRoundHalfUp:
    @pytest.mark.parametrize("value,places,expected", [
        (2.5, 0, 3),
        (3.5, 0, 4),
        (-2.5, 0, -3),
        (0.125, 2, 0.13),
        (1.005, 2, 1.0),  # binary 1.00499...
        (645.497, 0, 645),
        (22.857142, 2, 22.86),
    ])
    def test_values(self, value, places, expected):
        assert round_half_up(value, places) == expected

    def test_zero_places_gives_int(self):
        assert isinstance(round_half_up(5.4, 0), int)


class TestClassify:
    bands = (
        ThresholdBand(lower_bound=0, tier="Low"),
        ThresholdBand(lower_bound=2, tier="Moderate"),
        ThresholdBand(lower_bound=6.5, tier="High"),
    )

    def test_bound_is_closed(self):
        assert classify(2, self.bands) == "Moderate"
        assert classify(6.5, self.bands) == "High"

    def test_just_below_bound(self):
        assert classify(1.999, self.bands) == "Low"

    def test_below_first_band(self):
        assert classify(-1, self.bands) == "Low"

    def test_monotonic(self):
        order = [b.tier for b in self.bands]
        ranks = [order.index(classify(s / 2, self.bands)) for s in range(0, 30)]
        assert ranks == sorted(ranks)

    def test_check_ascending(self):
        check_ascending([0, 1, 2], "ok")
        with pytest.raises(ValueError):
            check_ascending([0, 2, 2], "dup")


class TestTierScale:
    def test_interpret(self):
        interp = interpret("High risk of major bleeding", HAS_BLED.scale)
        assert interp.guidance_text.startswith("5.8-8.9%")
        assert interp.citation.startswith("Pisters")

    def test_unsorted_rejected(self):
        with pytest.raises(ValueError):
            TierScale([(5, "B", "b"), (0, "A", "a")])

    def test_empty_rejected(self):
        with pytest.raises(ValueError):
            TierScale([])

    def test_conflicting_guidance_rejected(self):
        with pytest.raises(ValueError):
            TierScale([(0, "A", "one"), (5, "A", "two")])

    def test_public_table(self):
        table = TierScale([(0, "A", "a"), (5, "B", "b")]).public()
        assert table == [
            {"lower_bound": 0, "tier": "A", "guidance": "a"},
            {"lower_bound": 5, "tier": "B", "guidance": "b"},
        ]
