"""Pydantic models for clinscore."""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, List, Optional, Type, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator


class FieldKind(str, Enum):
    """Semantic type of a calculator input."""

    NUMBER = "number"
    INTEGER = "integer"
    BOOLEAN = "boolean"
    ENUM = "enum"
    DATE = "date"


class RangePolicy(str, Enum):
    """What an out-of-range value does to the calculation."""

    BLOCKING = "blocking"  # calculation refused
    ADVISORY = "advisory"  # calculation proceeds with a warning


class FieldSpec(BaseModel):
    """Declaration of one calculator input."""

    model_config = ConfigDict(frozen=True)

    id: str
    label: str
    kind: FieldKind = FieldKind.NUMBER
    required: bool = True
    default: Any = None
    canonical_unit: str = ""
    analyte: str = ""  # key into the unit conversion table
    min_value: Optional[float] = None
    max_value: Optional[float] = None
    range_policy: RangePolicy = RangePolicy.BLOCKING
    choices: Optional[Type[Enum]] = None
    synonyms: List[str] = []
    description: str = ""

    @model_validator(mode="after")
    def _check_declaration(self) -> "FieldSpec":
        if self.kind is FieldKind.ENUM and self.choices is None:
            raise ValueError(f"enum field {self.id!r} declares no choices")
        if not self.required and self.default is None:
            raise ValueError(f"optional field {self.id!r} needs an explicit default")
        return self

    @property
    def allowed_values(self) -> List[str]:
        if self.choices is None:
            return []
        return [str(member.value) for member in self.choices]

    def public(self) -> Dict[str, Any]:
        """Schema entry as exposed through calc_info."""
        constraints: Dict[str, Any] = {}
        if self.min_value is not None:
            constraints["min"] = self.min_value
        if self.max_value is not None:
            constraints["max"] = self.max_value
        if self.min_value is not None or self.max_value is not None:
            constraints["range_policy"] = self.range_policy.value
        if self.choices is not None:
            constraints["allowed_values"] = self.allowed_values
        entry: Dict[str, Any] = {
            "id": self.id,
            "label": self.label,
            "type": self.kind.value,
            "required": self.required,
            "canonical_unit": self.canonical_unit,
            "synonyms": list(self.synonyms),
            "constraints": constraints,
        }
        if not self.required:
            default = self.default
            entry["default"] = default.value if isinstance(default, Enum) else default
        if self.description:
            entry["description"] = self.description
        return entry


class FieldValue(BaseModel):
    """One input datum as held in a calculator's state."""

    name: str
    kind: FieldKind
    raw_value: Any = None
    parsed_value: Any = None  # None until validated


class ThresholdBand(BaseModel):
    """Closed lower bound of a tier."""

    model_config = ConfigDict(frozen=True)

    lower_bound: float
    tier: str


class Interpretation(BaseModel):
    """Guidance text and citation attached to a tier."""

    model_config = ConfigDict(frozen=True)

    guidance_text: str
    citation: Optional[str] = None


class ScoreResult(BaseModel):
    """Outcome of one successful calculation."""

    total_score: Union[int, float]
    tier: str
    guidance_text: str
    citation: Optional[str] = None
    details: Dict[str, Any] = {}


class CalculationResult(BaseModel):
    """Result of Calculator.calculate: a ScoreResult or structured errors."""

    calc_id: str
    success: bool
    result: Optional[ScoreResult] = None
    errors: List[Dict[str, Any]] = []
    warnings: List[Dict[str, Any]] = []
    audit_trace: Optional[Dict[str, Any]] = None

    def error_messages(self) -> List[str]:
        """Get error messages as strings."""
        return [e.get("message", str(e)) for e in self.errors]

    def warning_messages(self) -> List[str]:
        return [w.get("message", str(w)) for w in self.warnings]


class CalcInfoResult(BaseModel):
    """Result from calc_info."""

    calc_id: str
    title: str
    description: Optional[str] = None
    version: str
    tags: List[str] = []
    inputs: List[Dict[str, Any]]
    tiers: List[Dict[str, Any]] = []
    citation: Optional[str] = None


class ExecuteCalcResult(BaseModel):
    """Result from execute_calc."""

    success: bool
    outputs: Optional[Dict[str, Any]] = None
    errors: List[Any] = []  # strings or error dicts
    warnings: List[Any] = []
    audit_trace: Optional[Dict[str, Any]] = None

    def error_messages(self) -> List[str]:
        """Get error messages as strings."""
        msgs = []
        for e in self.errors:
            if isinstance(e, str):
                msgs.append(e)
            elif isinstance(e, dict):
                msgs.append(e.get("message", str(e)))
            else:
                msgs.append(str(e))
        return msgs


class ToolCall(BaseModel):
    """A function call addressed to ToolHandler."""

    tool_name: str
    arguments: Dict[str, Any] = Field(default_factory=dict)
