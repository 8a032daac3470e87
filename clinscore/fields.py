"""
Field builders and shared field vocabulary.

Boolean criteria are optional with an explicit ``False`` default (an
unticked criterion); numeric and enum inputs are required unless a
definition says otherwise.
"""
from __future__ import annotations

from enum import Enum
from typing import Any, Iterable, Optional, Type

from .models import FieldKind, FieldSpec, RangePolicy

BLOCKING = RangePolicy.BLOCKING
ADVISORY = RangePolicy.ADVISORY


def number(id: str, label: str, unit: str = "", analyte: str = "",
           min_value: Optional[float] = None, max_value: Optional[float] = None,
           policy: RangePolicy = BLOCKING, synonyms: Iterable[str] = (),
           required: bool = True, default: Any = None, description: str = "") -> FieldSpec:
    return FieldSpec(
        id=id, label=label, kind=FieldKind.NUMBER, canonical_unit=unit, analyte=analyte,
        min_value=min_value, max_value=max_value, range_policy=policy,
        synonyms=list(synonyms), required=required, default=default, description=description,
    )


def integer(id: str, label: str, min_value: Optional[float] = None,
            max_value: Optional[float] = None, policy: RangePolicy = BLOCKING,
            unit: str = "", synonyms: Iterable[str] = (), required: bool = True,
            default: Any = None, description: str = "") -> FieldSpec:
    return FieldSpec(
        id=id, label=label, kind=FieldKind.INTEGER, canonical_unit=unit,
        min_value=min_value, max_value=max_value, range_policy=policy,
        synonyms=list(synonyms), required=required, default=default, description=description,
    )


def component(id: str, label: str, max_value: int, min_value: int = 0,
              synonyms: Iterable[str] = ()) -> FieldSpec:
    """A required integer sub-score such as one APGAR or GCS component."""
    return integer(id, label, min_value=min_value, max_value=max_value, synonyms=synonyms)


def boolean(id: str, label: str, synonyms: Iterable[str] = (), description: str = "") -> FieldSpec:
    return FieldSpec(
        id=id, label=label, kind=FieldKind.BOOLEAN, required=False, default=False,
        synonyms=list(synonyms), description=description,
    )


def choice(id: str, label: str, choices: Type[Enum], default: Optional[Enum] = None,
           synonyms: Iterable[str] = (), description: str = "") -> FieldSpec:
    return FieldSpec(
        id=id, label=label, kind=FieldKind.ENUM, choices=choices,
        required=default is None, default=default,
        synonyms=list(synonyms), description=description,
    )


def date_field(id: str, label: str, synonyms: Iterable[str] = ()) -> FieldSpec:
    return FieldSpec(id=id, label=label, kind=FieldKind.DATE, synonyms=list(synonyms))


# ── Shared vocabulary ────────────────────────────────────────────────────────

class Sex(str, Enum):
    MALE = "male"
    FEMALE = "female"


def age(min_value: float = 0, max_value: float = 120, policy: RangePolicy = BLOCKING) -> FieldSpec:
    return number("age", "Age", "years", min_value=min_value, max_value=max_value,
                  policy=policy, synonyms=["age_years"])


def sex() -> FieldSpec:
    return choice("sex", "Sex", Sex, synonyms=["gender"])


def heart_rate(min_value: float = 20, max_value: float = 300) -> FieldSpec:
    return number("heart_rate", "Heart rate", "beats/min", min_value=min_value,
                  max_value=max_value, synonyms=["hr", "pulse"])


def systolic_bp(min_value: float = 30, max_value: float = 300) -> FieldSpec:
    return number("systolic_bp", "Systolic blood pressure", "mmHg", "pressure",
                  min_value=min_value, max_value=max_value, synonyms=["sbp"])


def diastolic_bp(min_value: float = 10, max_value: float = 200) -> FieldSpec:
    return number("diastolic_bp", "Diastolic blood pressure", "mmHg", "pressure",
                  min_value=min_value, max_value=max_value, synonyms=["dbp"])


def creatinine(id: str = "serum_creatinine", label: str = "Serum creatinine") -> FieldSpec:
    return number(id, label, "mg/dL", "creatinine", min_value=0.1, max_value=25,
                  synonyms=["creatinine", "cr", "scr"])


def weight() -> FieldSpec:
    return number("weight", "Weight", "kg", "weight", min_value=0.5, max_value=400, synonyms=["wt"])


def height() -> FieldSpec:
    return number("height", "Height", "cm", "height", min_value=30, max_value=250, synonyms=["ht"])


def respiratory_rate() -> FieldSpec:
    return number("respiratory_rate", "Respiratory rate", "breaths/min", min_value=0, max_value=80,
                  synonyms=["rr"])


def temperature() -> FieldSpec:
    return number("temperature", "Temperature", "°C", "temperature", min_value=25, max_value=45,
                  synonyms=["temp"])


def platelets(id: str = "platelet_count") -> FieldSpec:
    return number(id, "Platelet count", "10^9/L", "cells_10e9", min_value=1, max_value=2000,
                  synonyms=["platelets", "plt"])


def bilirubin(id: str = "serum_bilirubin") -> FieldSpec:
    return number(id, "Total bilirubin", "mg/dL", "bilirubin", min_value=0.1, max_value=60,
                  synonyms=["bilirubin", "bili"])
