"""
Critical care calculators: sepsis screening, organ failure and ICU
severity of illness.
"""

from enum import Enum
from typing import List

from ..engine import CalculatorDef
from ..fields import (
    age,
    boolean,
    choice,
    component,
    creatinine,
    heart_rate,
    number,
    respiratory_rate,
    systolic_bp,
    temperature,
)
from ..scoring import RuleSet, banded, flag, formula, lookup, points_if, round_half_up, values_of
from ..tiers import TierScale

SEPSIS3_CITATION = "Singer M, et al. JAMA 2016;315(8):801-810"


# 1. qSOFA ────────────────────────────────────────────────────────────────────
QSOFA = CalculatorDef(
    id="qsofa",
    title="qSOFA (Quick SOFA)",
    description="Bedside screen for poor outcome in suspected infection.",
    tags=("icu", "sepsis"),
    fields=(
        respiratory_rate(),
        systolic_bp(),
        boolean("altered_mentation", "Altered mentation (GCS < 15)", synonyms=["altered_mental_status"]),
    ),
    rules=RuleSet([
        points_if("Respiratory rate > 22", lambda v: v["respiratory_rate"] > 22),
        points_if("Systolic BP < 100", lambda v: v["systolic_bp"] < 100),
        flag("altered_mentation", label="Altered mentation"),
    ]),
    scale=TierScale([
        (0, "Low risk", "qSOFA negative; continue to monitor and reassess if clinically indicated."),
        (2, "High risk", "qSOFA positive; assess for organ dysfunction and consider escalation of care."),
    ], citation=SEPSIS3_CITATION),
)


# 2. SOFA ─────────────────────────────────────────────────────────────────────

_SOFA_SYSTEMS = [
    ("respiratory", "Respiration (PaO2/FiO2)"),
    ("coagulation", "Coagulation (platelets)"),
    ("liver", "Liver (bilirubin)"),
    ("cardiovascular", "Cardiovascular (MAP or vasopressors)"),
    ("neurological", "Central nervous system (GCS)"),
    ("renal", "Renal (creatinine or urine output)"),
]

SOFA = CalculatorDef(
    id="sofa",
    title="SOFA Score",
    description="Sequential organ failure assessment; six organ subscores of 0-4.",
    tags=("icu", "sepsis"),
    fields=tuple(component(fid, label, 4) for fid, label in _SOFA_SYSTEMS),
    rules=RuleSet(values_of(*(fid for fid, _ in _SOFA_SYSTEMS))),
    details=lambda v, total: {
        "failing_systems": [fid for fid, _ in _SOFA_SYSTEMS if v[fid] >= 3],
    },
    scale=TierScale([
        (0, "Low", "Predicted mortality under 10%."),
        (7, "Moderate", "Predicted mortality 15-20%."),
        (10, "High", "Predicted mortality 40-50%."),
        (13, "Very high", "Predicted mortality over 50%."),
    ], citation="Vincent JL, et al. Intensive Care Med 1996;22(7):707-710"),
)


# 3. APACHE II ────────────────────────────────────────────────────────────────

class ChronicHealth(str, Enum):
    NONE = "none"
    ELECTIVE_POSTOP = "elective_postop"
    NONOPERATIVE = "nonoperative"  # or emergency post-operative


def _aa_gradient(v) -> float:
    # alveolar gas equation at sea level, respiratory quotient 0.8
    return v["fio2"] * 713 - v["paco2"] / 0.8 - v["pao2"]


def _oxygenation_points(v) -> int:
    if v["fio2"] >= 0.5:
        gradient = _aa_gradient(v)
        if gradient >= 500:
            return 4
        if gradient >= 350:
            return 3
        return 2 if gradient >= 200 else 0
    pao2 = v["pao2"]
    if pao2 > 70:
        return 0
    if pao2 > 60:
        return 1
    return 3 if pao2 >= 55 else 4


_CREATININE_BANDS = banded("serum_creatinine", [(0.6, 0), (1.5, 2), (2, 3), (3.5, 4)], below=2)


def _creatinine_points(v) -> int:
    points = _CREATININE_BANDS.points(v)
    return points * 2 if v["acute_renal_failure"] else points


_APACHE_AGE = banded("age", [(45, 2), (55, 3), (65, 5), (75, 6)], label="Age")
_APACHE_CHRONIC = lookup("chronic_health", {
    ChronicHealth.NONE: 0, ChronicHealth.ELECTIVE_POSTOP: 2, ChronicHealth.NONOPERATIVE: 5,
}, label="Chronic health")


def _apache_details(v, total):
    physiology = total - _APACHE_AGE.points(v) - _APACHE_CHRONIC.points(v)
    return {
        "acute_physiology_score": physiology,
        "aa_gradient_mmhg": round_half_up(_aa_gradient(v), 1) if v["fio2"] >= 0.5 else None,
    }



APACHE_II = CalculatorDef(
    id="apache_ii",
    title="APACHE II",
    description="Acute physiology, age and chronic health evaluation on the worst values of the first ICU day.",
    tags=("icu", "critical care"),
    fields=(
        age(),
        temperature(),
        number("mean_arterial_pressure", "Mean arterial pressure", "mmHg", "pressure", min_value=20,
               max_value=250, synonyms=["map"]),
        heart_rate(min_value=0),
        respiratory_rate(),
        number("fio2", "Fraction of inspired oxygen", min_value=0.21, max_value=1.0),
        number("pao2", "Arterial PaO2", "mmHg", "pressure", min_value=20, max_value=700),
        number("paco2", "Arterial PaCO2", "mmHg", "pressure", min_value=5, max_value=150),
        number("arterial_ph", "Arterial pH", min_value=6.5, max_value=8.0, synonyms=["ph"]),
        number("sodium", "Serum sodium", "mmol/L", min_value=90, max_value=220, synonyms=["na"]),
        number("potassium", "Serum potassium", "mmol/L", min_value=1, max_value=12, synonyms=["k"]),
        creatinine(),
        boolean("acute_renal_failure", "Acute renal failure", synonyms=["arf"]),
        number("hematocrit", "Haematocrit", "%", min_value=5, max_value=80, synonyms=["hct"]),
        number("wbc", "White cell count", "10^9/L", "cells_10e9", min_value=0, max_value=300,
               synonyms=["white_cell_count"]),
        component("gcs", "Glasgow Coma Scale", 15, min_value=3, synonyms=["glasgow_coma_scale"]),
        choice("chronic_health", "Severe organ insufficiency or immunocompromise", ChronicHealth,
               default=ChronicHealth.NONE),
    ),
    rules=RuleSet([
        banded("temperature", [(30, 3), (32, 2), (34, 1), (36, 0), (38.5, 1), (39, 3), (41, 4)],
               label="Temperature", below=4),
        banded("mean_arterial_pressure", [(50, 2), (70, 0), (110, 2), (130, 3), (160, 4)],
               label="Mean arterial pressure", below=4),
        banded("heart_rate", [(40, 3), (55, 2), (70, 0), (110, 2), (140, 3), (180, 4)],
               label="Heart rate", below=4),
        banded("respiratory_rate", [(6, 2), (10, 1), (12, 0), (25, 1), (35, 3), (50, 4)],
               label="Respiratory rate", below=4),
        formula("Oxygenation (A-a gradient if FiO2 >= 0.5, else PaO2)", _oxygenation_points),
        banded("arterial_ph", [(7.15, 3), (7.25, 2), (7.33, 0), (7.5, 1), (7.6, 3), (7.7, 4)],
               label="Arterial pH", below=4),
        banded("sodium", [(111, 3), (120, 2), (130, 0), (150, 1), (155, 2), (160, 3), (180, 4)],
               label="Sodium", below=4),
        banded("potassium", [(2.5, 2), (3, 1), (3.5, 0), (5.5, 1), (6, 3), (7, 4)],
               label="Potassium", below=4),
        formula("Creatinine (double points in acute renal failure)", _creatinine_points),
        banded("hematocrit", [(20, 2), (30, 0), (46, 1), (50, 2), (60, 4)], label="Haematocrit", below=4),
        banded("wbc", [(1, 2), (3, 0), (15, 1), (20, 2), (40, 4)], label="White cell count", below=4),
        formula("15 - GCS", lambda v: 15 - v["gcs"]),
        _APACHE_AGE,
        _APACHE_CHRONIC,
    ]),
    details=_apache_details,
    scale=TierScale([
        (0, "Very low risk", "Estimated hospital mortality about 4%."),
        (5, "Low risk", "Estimated hospital mortality about 8%."),
        (10, "Moderate risk", "Estimated hospital mortality about 15%."),
        (15, "Moderately high risk", "Estimated hospital mortality about 25%."),
        (20, "High risk", "Estimated hospital mortality about 40%."),
        (25, "Very high risk", "Estimated hospital mortality about 55%."),
        (30, "Severe risk", "Estimated hospital mortality about 75%."),
        (35, "Extreme risk", "Estimated hospital mortality about 85%."),
    ], citation="Knaus WA, et al. Crit Care Med 1985;13(10):818-829"),
)


DEFINITIONS: List[CalculatorDef] = [QSOFA, SOFA, APACHE_II]
