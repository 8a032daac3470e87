"""
Gastroenterology and hepatology calculators.
"""

import math
from enum import Enum
from typing import List

from ..engine import CalculatorDef
from ..fields import (
    Sex,
    age,
    bilirubin,
    boolean,
    choice,
    creatinine,
    heart_rate,
    number,
    platelets,
    sex,
    systolic_bp,
    temperature,
)
from ..scoring import RuleSet, banded, flag, flags, formula, lookup, points_if
from ..tiers import TierScale


def _ast():
    return number("ast", "AST", "IU/L", min_value=1, max_value=10000)


def _alt():
    return number("alt", "ALT", "IU/L", min_value=1, max_value=10000)


def _inr():
    return number("inr", "INR", min_value=0.5, max_value=20)


def _bun():
    return number("bun", "Blood urea nitrogen", "mg/dL", "bun", min_value=1, max_value=300, synonyms=["urea"])


# 1. Alvarado score ───────────────────────────────────────────────────────────
ALVARADO = CalculatorDef(
    id="alvarado",
    title="Alvarado Score for Appendicitis",
    description="MANTRELS criteria for acute appendicitis.",
    tags=("gastroenterology", "surgery"),
    fields=(
        boolean("migratory_pain", "Migration of pain to the right lower quadrant"),
        boolean("anorexia", "Anorexia"),
        boolean("nausea_vomiting", "Nausea or vomiting", synonyms=["nausea"]),
        boolean("rlq_tenderness", "Tenderness in the right lower quadrant"),
        boolean("rebound_tenderness", "Rebound tenderness"),
        temperature(),
        boolean("leukocytosis", "Leukocytosis (WBC > 10 x 10^9/L)", synonyms=["leucocytosis"]),
        boolean("left_shift", "Shift to the left (neutrophils > 75%)"),
    ),
    rules=RuleSet([
        flag("migratory_pain", label="Migratory pain"),
        flag("anorexia", label="Anorexia"),
        flag("nausea_vomiting", label="Nausea/vomiting"),
        flag("rlq_tenderness", 2, label="RLQ tenderness"),
        flag("rebound_tenderness", label="Rebound tenderness"),
        points_if("Temperature > 37.3 °C", lambda v: v["temperature"] > 37.3),
        flag("leukocytosis", 2, label="Leukocytosis"),
        flag("left_shift", label="Left shift"),
    ]),
    scale=TierScale([
        (0, "Appendicitis unlikely", "Consider discharge with safety-net advice or observation."),
        (5, "Possible appendicitis", "Observe, repeat examination and consider imaging."),
        (7, "Probable appendicitis", "Surgical consultation recommended."),
        (9, "Very probable appendicitis", "Surgical consultation; appendicectomy likely indicated."),
    ], citation="Alvarado A. Ann Emerg Med 1986;15(5):557-564"),
)


# 2. BISAP ────────────────────────────────────────────────────────────────────
BISAP = CalculatorDef(
    id="bisap",
    title="BISAP Score for Pancreatitis Mortality",
    description="Bedside index of severity in acute pancreatitis.",
    tags=("gastroenterology", "pancreatitis"),
    fields=(
        boolean("bun_above_25", "BUN > 25 mg/dL"),
        boolean("impaired_mental_status", "Impaired mental status", synonyms=["mental_status"]),
        boolean("sirs", ">= 2 SIRS criteria"),
        boolean("age_above_60", "Age > 60 years"),
        boolean("pleural_effusion", "Pleural effusion on imaging"),
    ),
    rules=RuleSet(flags("bun_above_25", "impaired_mental_status", "sirs", "age_above_60", "pleural_effusion")),
    scale=TierScale([
        (0, "Minimal risk", "Less than 1% mortality risk. Consider outpatient management."),
        (1, "Low risk", "Approximately 1.9% mortality risk. Inpatient admission recommended."),
        (3, "High risk", "Significantly elevated mortality risk (>15%). Consider ICU admission."),
    ], citation="Wu BU, et al. Gut 2008;57(12):1698-1703"),
)


# 3. Glasgow-Blatchford ───────────────────────────────────────────────────────

def _gbs_hemoglobin(v) -> int:
    hgb = v["hemoglobin"]
    if hgb < 10:
        return 6
    if v["sex"] is Sex.FEMALE:
        return 1 if hgb < 12 else 0
    if hgb < 12:
        return 3
    return 1 if hgb < 13 else 0


GLASGOW_BLATCHFORD = CalculatorDef(
    id="glasgow_blatchford",
    title="Glasgow-Blatchford Bleeding Score",
    description="Need for intervention in upper GI bleeding.",
    tags=("gastroenterology", "bleeding"),
    fields=(
        _bun(),
        number("hemoglobin", "Haemoglobin", "g/dL", "hemoglobin", min_value=1, max_value=25, synonyms=["hgb", "hb"]),
        sex(),
        systolic_bp(),
        heart_rate(),
        boolean("melena", "Melena present", synonyms=["melena_present"]),
        boolean("syncope", "Presented with syncope"),
        boolean("hepatic_disease", "History of hepatic disease", synonyms=["hepatic_disease_history"]),
        boolean("cardiac_failure", "Cardiac failure present"),
    ),
    rules=RuleSet([
        banded("bun", [(18.2, 2), (22.4, 3), (28, 4), (70, 6)], label="BUN"),
        formula("Haemoglobin", _gbs_hemoglobin),
        banded("systolic_bp", [(90, 2), (100, 1), (110, 0)], label="Systolic BP", below=3),
        points_if("Heart rate >= 100", lambda v: v["heart_rate"] >= 100),
        flag("melena", label="Melena"),
        flag("syncope", 2, label="Syncope"),
        flag("hepatic_disease", 2, label="Hepatic disease"),
        flag("cardiac_failure", 2, label="Cardiac failure"),
    ]),
    scale=TierScale([
        (0, "Low risk", "Very low risk of needing intervention; consider outpatient management."),
        (1, "Moderate risk", "May need intervention; admit for endoscopy."),
        (6, "High risk", "High likelihood of needing transfusion or endoscopic intervention."),
    ], citation="Blatchford O, et al. Lancet 2000;356(9238):1318-1321"),
)


# 4. MELD ─────────────────────────────────────────────────────────────────────

def _meld(v) -> float:
    cr = 4.0 if v["dialysis"] else min(max(v["serum_creatinine"], 1.0), 4.0)
    bili = max(v["serum_bilirubin"], 1.0)
    inr = max(v["inr"], 1.0)
    raw = 9.57 * math.log(inr) + 3.78 * math.log(bili) + 11.2 * math.log(cr) + 6.43
    return max(6, min(40, raw))


MELD = CalculatorDef(
    id="meld",
    title="MELD Score",
    description="Model for end-stage liver disease; 3-month mortality.",
    tags=("gastroenterology", "hepatology"),
    fields=(
        creatinine(),
        bilirubin(),
        _inr(),
        boolean("dialysis", "Dialysis at least twice in the past week", synonyms=["dialysis_twice"]),
    ),
    rules=RuleSet([formula("9.57 ln(INR) + 3.78 ln(bilirubin) + 11.2 ln(creatinine) + 6.43", _meld)]),
    precision=0,
    scale=TierScale([
        (6, "Low risk", "3-month mortality 1.9%."),
        (10, "Moderate risk", "3-month mortality 6.0%."),
        (20, "High risk", "3-month mortality 19.6%; consider transplant evaluation."),
        (30, "Very high risk", "3-month mortality 52.6%; urgent transplant evaluation."),
        (40, "Extremely high risk", "3-month mortality 71.3%."),
    ], citation="Kamath PS, et al. Hepatology 2001;33(2):464-470"),
)


# 5. Ranson's criteria ────────────────────────────────────────────────────────
RANSON = CalculatorDef(
    id="ranson",
    title="Ranson's Criteria for Pancreatitis",
    description="Admission values plus criteria developing over the first 48 hours.",
    tags=("gastroenterology", "pancreatitis"),
    fields=(
        age(),
        number("wbc", "White blood cell count", "10^9/L", "cells_10e9", min_value=0.1, max_value=200,
               synonyms=["white_cell_count"]),
        number("glucose", "Blood glucose", "mg/dL", "glucose", min_value=10, max_value=2000),
        number("ldh", "LDH", "IU/L", min_value=1, max_value=20000),
        _ast(),
        boolean("hematocrit_drop", "Haematocrit fall > 10% within 48 h"),
        boolean("bun_rise", "BUN rise > 5 mg/dL within 48 h"),
        boolean("calcium_low", "Serum calcium < 8 mg/dL within 48 h"),
        boolean("po2_low", "PaO2 < 60 mmHg within 48 h"),
        boolean("base_deficit", "Base deficit > 4 mEq/L within 48 h"),
        boolean("fluid_sequestration", "Fluid sequestration > 6 L within 48 h"),
    ),
    rules=RuleSet([
        points_if("Age > 55", lambda v: v["age"] > 55),
        points_if("WBC > 16 x 10^9/L", lambda v: v["wbc"] > 16),
        points_if("Glucose > 200 mg/dL", lambda v: v["glucose"] > 200),
        points_if("LDH > 350 IU/L", lambda v: v["ldh"] > 350),
        points_if("AST > 250 IU/L", lambda v: v["ast"] > 250),
        *flags("hematocrit_drop", "bun_rise", "calcium_low", "po2_low", "base_deficit", "fluid_sequestration"),
    ]),
    details=lambda v, total: {"admission_points": sum([
        v["age"] > 55, v["wbc"] > 16, v["glucose"] > 200, v["ldh"] > 350, v["ast"] > 250,
    ])},
    scale=TierScale([
        (0, "Low mortality", "Predicted mortality 0-3%."),
        (3, "Moderate mortality", "Predicted mortality about 15%; consider high-dependency care."),
        (5, "High mortality", "Predicted mortality about 40%; ICU care recommended."),
        (7, "Very high mortality", "Predicted mortality approaching 100%."),
    ], citation="Ranson JH, et al. Surg Gynecol Obstet 1974;139(1):69-81"),
)


# 6. Rockall ──────────────────────────────────────────────────────────────────

class Comorbidity(str, Enum):
    NONE = "none"
    MINOR = "minor"  # any comorbidity except renal/liver failure or malignancy
    MAJOR = "major"


class BleedDiagnosis(str, Enum):
    MALLORY_WEISS = "mallory_weiss"
    OTHER = "other"
    MALIGNANCY = "malignancy"


class Stigmata(str, Enum):
    NONE = "none"  # or dark spot only
    BLOOD = "blood"
    CLOT = "clot"
    VESSEL = "vessel"


ROCKALL = CalculatorDef(
    id="rockall",
    title="Rockall Score",
    description="Mortality and rebleeding after upper GI bleeding (post-endoscopy).",
    tags=("gastroenterology", "bleeding"),
    fields=(
        age(),
        systolic_bp(),
        heart_rate(),
        choice("comorbidity", "Comorbidity", Comorbidity, default=Comorbidity.NONE),
        choice("diagnosis", "Endoscopic diagnosis", BleedDiagnosis),
        choice("stigmata", "Stigmata of recent haemorrhage", Stigmata, default=Stigmata.NONE),
    ),
    rules=RuleSet([
        banded("age", [(60, 1), (80, 2)], label="Age"),
        points_if("Tachycardia (HR > 100, SBP >= 100)",
                  lambda v: v["systolic_bp"] >= 100 and v["heart_rate"] > 100),
        points_if("Hypotension (SBP < 100)", lambda v: v["systolic_bp"] < 100, 2),
        lookup("comorbidity", {Comorbidity.NONE: 0, Comorbidity.MINOR: 2, Comorbidity.MAJOR: 3},
               label="Comorbidity"),
        lookup("diagnosis", {BleedDiagnosis.MALLORY_WEISS: 0, BleedDiagnosis.OTHER: 1,
                             BleedDiagnosis.MALIGNANCY: 2}, label="Diagnosis"),
        lookup("stigmata", {Stigmata.NONE: 0, Stigmata.BLOOD: 2, Stigmata.CLOT: 2, Stigmata.VESSEL: 2},
               label="Stigmata"),
    ]),
    scale=TierScale([
        (0, "Very Low", "Mortality 0%, rebleeding 4.9%."),
        (1, "Low", "Mortality 0.2%, rebleeding 5.3%."),
        (3, "Moderate", "Mortality 5.3%, rebleeding 14.1%."),
        (5, "High", "Mortality 24.6%, rebleeding 24.1%."),
    ], citation="Rockall TA, et al. Gut 1996;38(3):316-321"),
)


# 7. FIB-4 ────────────────────────────────────────────────────────────────────
FIB4 = CalculatorDef(
    id="fib4",
    title="FIB-4 Index for Liver Fibrosis",
    description="FIB-4 = (age x AST) / (platelets x sqrt(ALT)).",
    tags=("gastroenterology", "hepatology"),
    fields=(age(min_value=18, max_value=120), _ast(), _alt(), platelets()),
    rules=RuleSet([formula("(age x AST) / (platelets x sqrt(ALT))", lambda v: (
        v["age"] * v["ast"] / (v["platelet_count"] * math.sqrt(v["alt"]))))]),
    precision=2,
    scale=TierScale([
        (0, "Low Risk", "NPV 90% for advanced fibrosis. Consider medical management."),
        (1.45, "Intermediate Risk", "Indeterminate result requiring further assessment (e.g. elastography)."),
        (3.26, "High Risk", "PPV 65% for advanced fibrosis. Hepatology referral recommended."),
    ], citation="Sterling RK, et al. Hepatology 2006;43(6):1317-1325"),
)


# 8. Child-Pugh ───────────────────────────────────────────────────────────────

class Ascites(str, Enum):
    ABSENT = "absent"
    SLIGHT = "slight"
    MODERATE = "moderate"


class Encephalopathy(str, Enum):
    NONE = "none"
    GRADE_1_2 = "grade_1_2"
    GRADE_3_4 = "grade_3_4"


def _bilirubin_points(v) -> int:
    bili = v["serum_bilirubin"]
    if bili < 2:
        return 1
    return 2 if bili <= 3 else 3


def _inr_points(v) -> int:
    inr = v["inr"]
    if inr < 1.7:
        return 1
    return 2 if inr <= 2.3 else 3


def _albumin_points(v) -> int:
    alb = v["serum_albumin"]
    if alb > 3.5:
        return 1
    return 2 if alb >= 2.8 else 3


CHILD_PUGH = CalculatorDef(
    id="child_pugh",
    title="Child-Pugh Score",
    description="Severity of chronic liver disease.",
    tags=("gastroenterology", "hepatology"),
    fields=(
        bilirubin(),
        number("serum_albumin", "Serum albumin", "g/dL", "albumin", min_value=0.5, max_value=7,
               synonyms=["albumin"]),
        _inr(),
        choice("ascites", "Ascites", Ascites),
        choice("encephalopathy", "Hepatic encephalopathy", Encephalopathy),
    ),
    rules=RuleSet([
        formula("Bilirubin", _bilirubin_points),
        formula("Albumin", _albumin_points),
        formula("INR", _inr_points),
        lookup("ascites", {Ascites.ABSENT: 1, Ascites.SLIGHT: 2, Ascites.MODERATE: 3}, label="Ascites"),
        lookup("encephalopathy", {Encephalopathy.NONE: 1, Encephalopathy.GRADE_1_2: 2,
                                  Encephalopathy.GRADE_3_4: 3}, label="Encephalopathy"),
    ]),
    scale=TierScale([
        (5, "Class A", "Well-compensated disease; 1-year survival 100%."),
        (7, "Class B", "Significant functional compromise; 1-year survival 80%."),
        (10, "Class C", "Decompensated disease; 1-year survival 45%."),
    ], citation="Pugh RN, et al. Br J Surg 1973;60(8):646-649"),
)


DEFINITIONS: List[CalculatorDef] = [
    ALVARADO, BISAP, GLASGOW_BLATCHFORD, MELD, RANSON, ROCKALL, FIB4, CHILD_PUGH,
]
