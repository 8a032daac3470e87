"""
Calculator definitions and instances.

A ``CalculatorDef`` is the immutable description of one score (fields, rules,
tier scale). A ``Calculator`` pairs a definition with its own
``CalculatorState`` and runs the pipeline:

    validate -> score -> classify -> interpret
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Tuple, Union

from .errors import CalculatorError, UnknownFieldError
from .models import CalculationResult, FieldSpec, FieldValue, ScoreResult
from .scoring import Inputs, RuleSet, round_half_up
from .tiers import TierScale
from .validator import ValidatedInputs, resolve_keys, validate

logger = logging.getLogger(__name__)

Number = Union[int, float]
Check = Callable[[Inputs], Optional[CalculatorError]]
DetailsFn = Callable[[Inputs, Number], Dict[str, Any]]
ClassifyOn = Callable[[Number, Dict[str, Any]], Number]


@dataclass(frozen=True, eq=False)
class CalculatorDef:
    """Immutable definition of one clinical calculator."""

    id: str
    title: str
    fields: Tuple[FieldSpec, ...]
    rules: RuleSet
    scale: TierScale
    description: str = ""
    tags: Tuple[str, ...] = ()
    precision: Optional[int] = None  # decimal places of total_score
    units: str = ""
    details: Optional[DetailsFn] = None
    classify_on: Optional[ClassifyOn] = None  # classify a derived value instead of the score
    checks: Tuple[Check, ...] = ()  # cross-field checks, run once all fields are valid
    version: str = "1.0"

    def __post_init__(self):
        object.__setattr__(self, "fields", tuple(self.fields))
        object.__setattr__(self, "tags", tuple(self.tags))
        object.__setattr__(self, "checks", tuple(self.checks))
        ids = [f.id for f in self.fields]
        if len(ids) != len(set(ids)):
            raise ValueError(f"{self.id}: duplicate field ids")

    def field(self, field_id: str) -> FieldSpec:
        for spec in self.fields:
            if spec.id == field_id:
                return spec
        raise KeyError(field_id)

    def public_schema(self) -> Dict[str, Any]:
        """Schema as exposed through calc_info."""
        return {
            "calc_id": self.id,
            "title": self.title,
            "description": self.description,
            "version": self.version,
            "tags": list(self.tags),
            "inputs": [spec.public() for spec in self.fields],
            "tiers": self.scale.public(),
            "citation": self.scale.citation,
        }


@dataclass
class CalculatorState:
    """Per-instance input and result state; never shared between calculators."""

    fields: Dict[str, FieldValue] = field(default_factory=dict)
    result: Optional[ScoreResult] = None


class Calculator:
    """
    One calculator instance.

    Holds the current field values and the last result. ``calculate`` replaces
    the result on every call; a failed calculation clears it.
    """

    def __init__(self, definition: CalculatorDef, state: Optional[CalculatorState] = None,
                 strict_ranges: bool = False, include_audit_trace: bool = True):
        self.definition = definition
        self.state = state if state is not None else CalculatorState()
        self.strict_ranges = strict_ranges
        self.include_audit_trace = include_audit_trace

    def __repr__(self) -> str:
        return f"Calculator({self.definition.id!r})"

    @property
    def result(self) -> Optional[ScoreResult]:
        return self.state.result

    # ── State editing ─────────────────────────────────────────────────────

    def set_value(self, name: str, raw: Any) -> FieldValue:
        """Replace one field's raw value. Raises UnknownFieldError for unknown names."""
        resolved, unknown = resolve_keys({name: raw}, self.definition.fields)
        if unknown:
            raise UnknownFieldError(name)
        fid = next(iter(resolved))
        value = FieldValue(name=fid, kind=self.definition.field(fid).kind, raw_value=raw)
        self.state.fields[fid] = value
        return value

    def set_values(self, raw_inputs: Mapping[str, Any]) -> None:
        for name, raw in raw_inputs.items():
            self.set_value(name, raw)

    def clear(self) -> None:
        self.state.fields.clear()
        self.state.result = None

    # ── Pipeline ──────────────────────────────────────────────────────────

    def calculate(self, raw_inputs: Optional[Mapping[str, Any]] = None) -> CalculationResult:
        """
        Validate, score, classify and interpret.

        With ``raw_inputs`` the state's field values are replaced by them;
        without, the values set through ``set_value`` are used. Bad input never
        raises: it comes back as ``errors`` on a result with ``success=False``.
        """
        defn = self.definition
        if raw_inputs is not None:
            source: Mapping[str, Any] = raw_inputs
            self.state.fields.clear()
            resolved, _ = resolve_keys(raw_inputs, defn.fields)
            for fid, raw in resolved.items():
                self.state.fields[fid] = FieldValue(name=fid, kind=defn.field(fid).kind, raw_value=raw)
        else:
            source = {name: fv.raw_value for name, fv in self.state.fields.items()}

        report = validate(source, defn.fields, strict_ranges=self.strict_ranges)
        for name, fv in self.state.fields.items():
            fv.parsed_value = report.inputs.get(name)

        if report.ok:
            for check in defn.checks:
                issue = check(report.inputs)
                if issue is not None:
                    report.add(issue)

        warnings = [w.to_dict() for w in report.warnings]
        if not report.ok:
            self.state.result = None
            logger.debug("%s: calculation refused (%s)", defn.id,
                         ", ".join(e.code for e in report.errors))
            return CalculationResult(
                calc_id=defn.id, success=False,
                errors=[e.to_dict() for e in report.errors], warnings=warnings,
            )

        result, log = self._score(report.inputs)
        self.state.result = result
        logger.debug("%s: score=%s tier=%r", defn.id, result.total_score, result.tier)
        audit = None
        if self.include_audit_trace:
            audit = {"inputs_used": _inputs_used(defn.fields, report.inputs), "log": log}
        return CalculationResult(
            calc_id=defn.id, success=True, result=result, warnings=warnings, audit_trace=audit,
        )

    def _score(self, inputs: ValidatedInputs) -> Tuple[ScoreResult, List[str]]:
        defn = self.definition
        total, fired = defn.rules.evaluate(inputs)
        if defn.precision is not None:
            total = round_half_up(total, defn.precision)
        details = defn.details(inputs, total) if defn.details else {}
        value = defn.classify_on(total, details) if defn.classify_on else total
        tier = defn.scale.classify(value)
        interpretation = defn.scale.interpret(tier)
        log = fired + [f"{defn.title} = {total}{' ' + defn.units if defn.units else ''}",
                       f"Tier: {tier}"]
        return ScoreResult(
            total_score=total,
            tier=tier,
            guidance_text=interpretation.guidance_text,
            citation=interpretation.citation,
            details=details,
        ), log


def _display(spec: FieldSpec, value: Any) -> str:
    if isinstance(value, Enum):
        return str(value.value)
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, bool):
        return "yes" if value else "no"
    if isinstance(value, (int, float)):
        return f"{value:g} {spec.canonical_unit}".strip()
    return str(value)


def _inputs_used(fields: Sequence[FieldSpec], inputs: ValidatedInputs) -> Dict[str, str]:
    return {spec.id: _display(spec, inputs[spec.id]) for spec in fields if spec.id in inputs}
