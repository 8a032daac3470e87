"""
Validates raw calculator inputs against a field schema.

Raw values may be plain (``70``, ``"70"``, ``True``, ``"female"``) or
``{"value": ..., "unit": ...}`` dicts; numeric values given in a non-canonical
unit are converted through ``_UNIT_CONVERSIONS``.
"""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

from .errors import (
    ADVISORY,
    BLOCKING,
    CalculatorError,
    MissingFieldError,
    ParseError,
    RangeError,
    UnknownFieldError,
)
from .models import FieldKind, FieldSpec, RangePolicy

logger = logging.getLogger(__name__)

ValidatedInputs = Dict[str, Any]

_MISSING = object()

_TRUE_STRINGS = frozenset({"true", "t", "yes", "y", "1", "on"})
_FALSE_STRINGS = frozenset({"false", "f", "no", "n", "0", "off"})


# ── Unit conversion ─────────────────────────────────────────────────────────
# analyte -> {unit (lower case): factor to canonical unit}

_UNIT_CONVERSIONS: Dict[str, Dict[str, float]] = {
    "height":      {"m": 100, "mm": 0.1, "in": 2.54, "inches": 2.54, "ft": 30.48, "feet": 30.48},
    "weight":      {"lb": 1 / 2.20462, "lbs": 1 / 2.20462, "pounds": 1 / 2.20462, "g": 0.001},
    "creatinine":  {"µmol/l": 1 / 88.4, "umol/l": 1 / 88.4, "μmol/l": 1 / 88.4, "micromol/l": 1 / 88.4},
    "glucose":     {"mmol/l": 18.0182},
    "bilirubin":   {"µmol/l": 1 / 17.1, "umol/l": 1 / 17.1, "μmol/l": 1 / 17.1},
    "albumin":     {"g/l": 0.1},
    "bun":         {"mmol/l": 2.8011},
    "urea":        {"mg/dl": 1 / 6.006},
    "hemoglobin":  {"g/l": 0.1, "mmol/l": 1.611},
    "calcium":     {"mmol/l": 4.008},
    "pressure":    {"kpa": 7.50062},
    "interval_ms": {"s": 1000, "sec": 1000, "seconds": 1000},
    "interval_s":  {"ms": 0.001, "msec": 0.001},
    "length_cm":   {"mm": 0.1, "m": 100},
    "length_mm":   {"cm": 10},
    "flow_l_min":  {"ml/min": 0.001},
    "flow_ml_min": {"l/min": 1000},
    "cells_10e9":  {"/µl": 0.001, "/ul": 0.001, "cells/µl": 0.001, "cells/ul": 0.001,
                    "/mm^3": 0.001, "mm^3": 0.001, "µl": 0.001, "ul": 0.001},
    "fraction_pct": {"fraction": 100},
    "temperature": {"c": 1, "celsius": 1, "degc": 1},
}


def _split(raw: Any) -> Tuple[Any, str]:
    """Separate a {value, unit} dict into its parts."""
    if isinstance(raw, Mapping):
        return raw.get("value"), str(raw.get("unit") or "").strip()
    return raw, ""


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _to_float(spec: FieldSpec, value: Any) -> float:
    if isinstance(value, bool):
        raise ParseError(spec.id, value, "a number")
    if isinstance(value, (int, float)):
        try:
            num = float(value)
        except OverflowError:
            raise ParseError(spec.id, value, "a finite number") from None
    elif isinstance(value, str):
        try:
            num = float(value.strip())
        except ValueError:
            raise ParseError(spec.id, value, "a number") from None
    else:
        raise ParseError(spec.id, value, "a number")
    if not math.isfinite(num):
        raise ParseError(spec.id, value, "a finite number")
    return num


def _convert(spec: FieldSpec, num: float, unit: str) -> float:
    """Convert ``num`` from ``unit`` to the field's canonical unit."""
    if not unit:
        return num
    unit_lower = unit.lower()
    canonical_lower = spec.canonical_unit.lower()
    if unit_lower == canonical_lower:
        return num

    # Temperature: F -> C
    if spec.analyte == "temperature" and unit_lower in ("f", "°f", "fahrenheit"):
        return (num - 32) * 5 / 9

    factor = _UNIT_CONVERSIONS.get(spec.analyte, {}).get(unit_lower)
    if factor is None:
        expected = f"a value in {spec.canonical_unit}" if spec.canonical_unit else "a unitless value"
        raise ParseError(spec.id, f"{num} {unit}", expected)
    return num * factor


def _parse_number(spec: FieldSpec, raw: Any) -> float:
    value, unit = _split(raw)
    num = _convert(spec, _to_float(spec, value), unit)
    if not math.isfinite(num):
        raise ParseError(spec.id, raw, "a finite number")
    return num


def _parse_integer(spec: FieldSpec, raw: Any) -> int:
    num = _parse_number(spec, raw)
    if not float(num).is_integer():
        raise ParseError(spec.id, raw, "a whole number")
    return int(num)


def _parse_bool(spec: FieldSpec, raw: Any) -> bool:
    value, _ = _split(raw)
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)) and value in (0, 1):
        return bool(value)
    if isinstance(value, str):
        text = value.strip().lower()
        if text in _TRUE_STRINGS:
            return True
        if text in _FALSE_STRINGS:
            return False
    raise ParseError(spec.id, value, "true or false")


def _parse_enum(spec: FieldSpec, raw: Any) -> Enum:
    value, _ = _split(raw)
    choices = spec.choices
    if isinstance(value, choices):
        return value
    if isinstance(value, bool):
        raise ParseError(spec.id, value, "one of " + ", ".join(spec.allowed_values))
    text = str(value).strip().lower()
    for member in choices:
        if text == str(member.value).lower() or text == member.name.lower():
            return member
    raise ParseError(spec.id, value, "one of " + ", ".join(spec.allowed_values))


def _parse_date(spec: FieldSpec, raw: Any) -> date:
    value, _ = _split(raw)
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return date.fromisoformat(value.strip())
        except ValueError:
            pass
    raise ParseError(spec.id, value, "a date (YYYY-MM-DD)")


_PARSERS = {
    FieldKind.NUMBER: _parse_number,
    FieldKind.INTEGER: _parse_integer,
    FieldKind.BOOLEAN: _parse_bool,
    FieldKind.ENUM: _parse_enum,
    FieldKind.DATE: _parse_date,
}


def parse_field(spec: FieldSpec, raw: Any) -> Any:
    """Parse one raw value; raises ParseError."""
    return _PARSERS[spec.kind](spec, raw)


def check_range(spec: FieldSpec, value: Any, strict: bool = False) -> Optional[RangeError]:
    """Return a RangeError if ``value`` violates the field's declared bounds."""
    if spec.kind not in (FieldKind.NUMBER, FieldKind.INTEGER):
        return None
    lo, hi = spec.min_value, spec.max_value
    if (lo is None or value >= lo) and (hi is None or value <= hi):
        return None

    unit = f" {spec.canonical_unit}" if spec.canonical_unit else ""
    if lo is not None and hi is not None:
        bounds = f"between {lo:g} and {hi:g}{unit}"
    elif lo is not None:
        bounds = f"at least {lo:g}{unit}"
    else:
        bounds = f"at most {hi:g}{unit}"
    severity = BLOCKING if spec.range_policy is RangePolicy.BLOCKING or strict else ADVISORY
    return RangeError(
        spec.id, value, f"{spec.label} must be {bounds} (got {value:g})",
        severity=severity, min_value=lo, max_value=hi,
    )


@dataclass
class ValidationReport:
    """Outcome of validate(): parsed inputs plus collected errors and warnings."""

    inputs: ValidatedInputs = field(default_factory=dict)
    errors: List[CalculatorError] = field(default_factory=list)
    warnings: List[CalculatorError] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors

    def add(self, issue: CalculatorError) -> None:
        if issue.blocking:
            self.errors.append(issue)
        else:
            self.warnings.append(issue)


def resolve_keys(raw_inputs: Mapping[str, Any],
                 schema: Iterable[FieldSpec]) -> Tuple[Dict[str, Any], List[str]]:
    """
    Map raw keys (field ids or synonyms, case-insensitive) to field ids.

    An exact id wins over a synonym for the same field. Returns the resolved
    mapping and the list of keys that matched nothing.
    """
    by_name: Dict[str, str] = {}
    ids = set()
    for spec in schema:
        ids.add(spec.id)
        by_name[spec.id.lower()] = spec.id
        for syn in spec.synonyms:
            by_name.setdefault(syn.lower(), spec.id)

    exact: Dict[str, Any] = {}
    via_synonym: Dict[str, Any] = {}
    unknown: List[str] = []
    for key, value in raw_inputs.items():
        fid = by_name.get(str(key).strip().lower())
        if fid is None:
            unknown.append(key)
        elif key in ids:
            exact[fid] = value
        else:
            via_synonym[fid] = value
    return {**via_synonym, **exact}, unknown


def validate(raw_inputs: Mapping[str, Any], schema: Iterable[FieldSpec],
             strict_ranges: bool = False) -> ValidationReport:
    """
    Validate ``raw_inputs`` against ``schema``.

    Never raises for bad input: parse, range and missing-field problems are
    collected on the report. Re-validating ``report.inputs`` yields the same
    inputs.
    """
    schema = list(schema)
    report = ValidationReport()
    resolved, unknown = resolve_keys(raw_inputs, schema)
    for key in unknown:
        report.add(UnknownFieldError(str(key)))

    for spec in schema:
        raw = resolved.get(spec.id, _MISSING)
        value = _split(raw)[0] if raw is not _MISSING else _MISSING
        if value is _MISSING or _is_blank(value):
            if spec.required:
                report.add(MissingFieldError(spec.id, spec.label))
            else:
                report.inputs[spec.id] = spec.default
            continue

        try:
            parsed = parse_field(spec, raw)
        except ParseError as exc:
            report.add(exc)
            continue

        range_issue = check_range(spec, parsed, strict=strict_ranges)
        if range_issue is not None:
            report.add(range_issue)
            if range_issue.blocking:
                continue
            logger.warning(range_issue.message)
        report.inputs[spec.id] = parsed

    logger.debug("validated %d field(s): %d error(s), %d warning(s)",
                 len(report.inputs), len(report.errors), len(report.warnings))
    return report
