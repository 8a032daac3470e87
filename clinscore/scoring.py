"""
Rule sets and the scorer.

A calculator's score is the sum of the weights of its true predicates,
evaluated in declaration order. A continuous formula is a one-rule set whose
predicate always holds and whose weight is the formula output.
"""
from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Callable, Iterable, List, Mapping, Optional, Sequence, Tuple, Union

Inputs = Mapping[str, Any]
Predicate = Callable[[Inputs], bool]
Weight = Union[int, float, Callable[[Inputs], Union[int, float]]]


def _always(_: Inputs) -> bool:
    return True


@dataclass(frozen=True)
class Rule:
    """One (predicate, weight) pair."""

    label: str
    predicate: Predicate
    weight: Weight

    def applies(self, inputs: Inputs) -> bool:
        return bool(self.predicate(inputs))

    def points(self, inputs: Inputs) -> Union[int, float]:
        return self.weight(inputs) if callable(self.weight) else self.weight


class RuleSet:
    """Ordered, immutable sequence of rules."""

    __slots__ = ("_rules",)

    def __init__(self, rules: Iterable[Rule]):
        self._rules: Tuple[Rule, ...] = tuple(rules)
        if not self._rules:
            raise ValueError("a RuleSet needs at least one rule")

    def __iter__(self):
        return iter(self._rules)

    def __len__(self) -> int:
        return len(self._rules)

    def __repr__(self) -> str:
        return f"RuleSet({[r.label for r in self._rules]!r})"

    def evaluate(self, inputs: Inputs) -> Tuple[Union[int, float], List[str]]:
        """Return the total and the labels of rules that contributed."""
        total: Union[int, float] = 0
        fired: List[str] = []
        for rule in self._rules:
            if not rule.applies(inputs):
                continue
            pts = rule.points(inputs)
            total += pts
            if pts:
                fired.append(f"{rule.label} ({_fmt(pts)})")
        return total, fired


def score(inputs: Inputs, rules: RuleSet) -> Union[int, float]:
    """Sum the weights of all rules whose predicate holds."""
    return rules.evaluate(inputs)[0]


# ── Rule builders ────────────────────────────────────────────────────────────

def points_if(label: str, predicate: Predicate, weight: Weight = 1) -> Rule:
    return Rule(label, predicate, weight)


def flag(field: str, weight: Weight = 1, label: Optional[str] = None) -> Rule:
    """Points when a boolean field is true."""
    return Rule(label or field, lambda v: bool(v[field]), weight)


def flags(*fields: str, weight: Weight = 1) -> List[Rule]:
    return [flag(f, weight) for f in fields]


def value_of(field: str, label: Optional[str] = None) -> Rule:
    """The field's own value counts as points (component sub-scores)."""
    return Rule(label or field, _always, lambda v: v[field])


def values_of(*fields: str) -> List[Rule]:
    return [value_of(f) for f in fields]


def formula(label: str, fn: Callable[[Inputs], Union[int, float]]) -> Rule:
    """A continuous formula as a single always-true rule."""
    return Rule(label, _always, fn)


def lookup(field: str, table: Mapping[Any, Union[int, float]], label: Optional[str] = None) -> Rule:
    """Points taken from a table keyed by the field's (enum) value."""
    return Rule(label or field, _always, lambda v: table[v[field]])


def banded(field: str, bands: Sequence[Tuple[float, Union[int, float]]],
           label: Optional[str] = None, below: Union[int, float] = 0) -> Rule:
    """
    Points from ascending (lower_bound, points) bands over a numeric field.

    Uses the same closed-lower-bound convention as tier classification;
    values under the first bound score ``below``.
    """
    ordered = tuple(bands)
    check_ascending([b for b, _ in ordered], field)

    def _points(v: Inputs) -> Union[int, float]:
        pts = below
        for lower, band_pts in ordered:
            if v[field] >= lower:
                pts = band_pts
            else:
                break
        return pts

    return Rule(label or field, _always, _points)


# ── Rounding ─────────────────────────────────────────────────────────────────

def round_half_up(value: float, places: int) -> Union[int, float]:
    """
    Round like JavaScript ``Number.toFixed``: half away from zero on the exact
    binary value, so ``round_half_up(1.005, 2) == 1.0``.
    """
    quantum = Decimal(1).scaleb(-places)
    rounded = Decimal(value).quantize(quantum, rounding=ROUND_HALF_UP)
    return int(rounded) if places == 0 else float(rounded)


def check_ascending(bounds: Sequence[float], name: str) -> None:
    if any(prev >= nxt for prev, nxt in zip(bounds, bounds[1:])):
        raise ValueError(f"{name}: bounds must be strictly ascending, got {list(bounds)}")


def _fmt(pts: Union[int, float]) -> str:
    if isinstance(pts, float) and not pts.is_integer():
        return f"{pts:+g}"
    return f"{int(pts):+d}"
