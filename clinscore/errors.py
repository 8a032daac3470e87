"""
Error hierarchy for clinscore.

Validation errors are collected and returned as structured dicts rather than
raised; only programmatic lookups (unknown calculator ids) raise.
"""
from __future__ import annotations

from enum import Enum
from typing import Any, Dict, Optional

BLOCKING = "blocking"
ADVISORY = "advisory"


class CalculatorError(Exception):
    """Base exception for all calculator errors."""

    severity: str = BLOCKING

    def __init__(
        self,
        message: str,
        code: str = "CALCULATOR_ERROR",
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or {}

    @property
    def blocking(self) -> bool:
        return self.severity == BLOCKING

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a dict for result payloads."""
        return {
            "error": self.code,
            "message": self.message,
            "severity": self.severity,
            "details": self.details,
        }

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CalculatorError):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def __hash__(self) -> int:
        return hash((self.code, self.message, self.severity))


class ParseError(CalculatorError):
    """A raw value could not be converted to the field's declared kind."""

    def __init__(self, field: str, raw: Any, expected: str):
        super().__init__(
            message=f"Could not parse {field!r}: expected {expected}, got {raw!r}",
            code="PARSE_ERROR",
            details={"field": field, "raw": _jsonable(raw), "expected": expected},
        )
        self.field = field


class RangeError(CalculatorError):
    """A parsed value falls outside its clinically plausible range."""

    def __init__(
        self,
        field: str,
        value: Any,
        message: str,
        severity: str = BLOCKING,
        min_value: Optional[float] = None,
        max_value: Optional[float] = None,
    ):
        super().__init__(
            message=message,
            code="RANGE_ERROR",
            details={
                "field": field,
                "value": _jsonable(value),
                "min_value": min_value,
                "max_value": max_value,
            },
        )
        self.field = field
        self.severity = severity


class MissingFieldError(CalculatorError):
    """A required field has no value at calculation time."""

    def __init__(self, field: str, label: str = ""):
        super().__init__(
            message=f"Missing required field: {field}" + (f" ({label})" if label else ""),
            code="MISSING_FIELD",
            details={"field": field},
        )
        self.field = field


class UnknownFieldError(CalculatorError):
    """An input key matches no field or synonym; the value is ignored."""

    severity = ADVISORY

    def __init__(self, field: str):
        super().__init__(
            message=f"Unrecognised field ignored: {field}",
            code="UNKNOWN_FIELD",
            details={"field": field},
        )
        self.field = field


class UnknownCalculatorError(CalculatorError):
    """No calculator is registered under the requested id."""

    def __init__(self, calc_id: str):
        super().__init__(
            message=f"Unknown calculator: {calc_id}",
            code="UNKNOWN_CALCULATOR",
            details={"calc_id": calc_id},
        )
        self.calc_id = calc_id


def _jsonable(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if value is None or isinstance(value, (bool, int, float, str)):
        return value
    if isinstance(value, dict):
        return {str(k): _jsonable(v) for k, v in value.items()}
    return str(value)
