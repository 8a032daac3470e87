"""
Pulmonary calculators: pneumonia severity, pulmonary embolism, COPD and
asthma assessment, spirometry and peak flow.
"""

from enum import Enum
from typing import List

from ..engine import CalculatorDef
from ..errors import RangeError
from ..fields import (
    ADVISORY,
    Sex,
    age,
    boolean,
    choice,
    component,
    diastolic_bp,
    heart_rate,
    height,
    integer,
    number,
    respiratory_rate,
    sex,
    systolic_bp,
    temperature,
)
from ..scoring import RuleSet, banded, flag, formula, points_if, round_half_up, values_of
from ..tiers import TierScale


# 1. CURB-65 ──────────────────────────────────────────────────────────────────
CURB65 = CalculatorDef(
    id="curb65",
    title="CURB-65",
    description="30-day mortality in community-acquired pneumonia.",
    tags=("pulmonary", "infection"),
    fields=(
        boolean("confusion", "New confusion"),
        number("bun", "Blood urea nitrogen", "mg/dL", "bun", min_value=1, max_value=300, synonyms=["urea"]),
        respiratory_rate(),
        systolic_bp(),
        diastolic_bp(),
        age(),
    ),
    rules=RuleSet([
        flag("confusion", label="Confusion"),
        points_if("BUN > 19 mg/dL", lambda v: v["bun"] > 19),
        points_if("Respiratory rate >= 30", lambda v: v["respiratory_rate"] >= 30),
        points_if("SBP < 90 or DBP <= 60", lambda v: v["systolic_bp"] < 90 or v["diastolic_bp"] <= 60),
        points_if("Age >= 65", lambda v: v["age"] >= 65),
    ]),
    scale=TierScale([
        (0, "Low Risk", "0.6-2.7% 30-day mortality. Consider outpatient treatment with reliable follow-up."),
        (2, "Moderate Risk", "9.2% 30-day mortality. Consider short inpatient admission or observation."),
        (3, "High Risk", "14.5% 30-day mortality. Inpatient admission required."),
        (4, "Severe Risk", "40% 30-day mortality. ICU admission consideration required."),
        (5, "Very Severe Risk", "57% 30-day mortality. ICU admission strongly recommended."),
    ], citation="Lim WS, et al. Thorax 2003;58(5):377-382"),
)


# 2. PERC rule ────────────────────────────────────────────────────────────────
PERC = CalculatorDef(
    id="perc",
    title="PERC Rule for Pulmonary Embolism",
    description="Counts PERC criteria; zero criteria rules out PE when pre-test probability is low.",
    tags=("pulmonary", "vte"),
    fields=(
        age(),
        heart_rate(),
        number("o2_saturation", "Oxygen saturation", "%", "fraction_pct", min_value=50, max_value=100,
               synonyms=["spo2", "sao2"]),
        boolean("hemoptysis", "Haemoptysis"),
        boolean("estrogen_use", "Exogenous estrogen use", synonyms=["hormonal_use"]),
        boolean("prior_vte", "Prior DVT or PE", synonyms=["previous_pe", "previous_dvt"]),
        boolean("recent_surgery_or_trauma", "Surgery or trauma requiring hospitalisation within 4 weeks"),
        boolean("unilateral_leg_swelling", "Unilateral leg swelling"),
    ),
    rules=RuleSet([
        points_if("Age >= 50", lambda v: v["age"] >= 50),
        points_if("Heart rate >= 100", lambda v: v["heart_rate"] >= 100),
        points_if("SaO2 < 95%", lambda v: v["o2_saturation"] < 95),
        flag("hemoptysis", label="Haemoptysis"),
        flag("estrogen_use", label="Estrogen use"),
        flag("prior_vte", label="Prior DVT/PE"),
        flag("recent_surgery_or_trauma", label="Recent surgery or trauma"),
        flag("unilateral_leg_swelling", label="Unilateral leg swelling"),
    ]),
    scale=TierScale([
        (0, "PERC negative", "No criteria present; PE can be ruled out without D-dimer if clinical gestalt is low."),
        (1, "PERC positive", "PE cannot be ruled out by PERC; proceed with D-dimer or imaging."),
    ], citation="Kline JA, et al. J Thromb Haemost 2004;2(8):1247-1255"),
)


# 3. Wells' criteria for PE ───────────────────────────────────────────────────
WELLS_PE = CalculatorDef(
    id="wells_pe",
    title="Wells' Criteria for Pulmonary Embolism",
    description="Pre-test probability of pulmonary embolism.",
    tags=("pulmonary", "vte"),
    fields=(
        boolean("clinical_dvt", "Clinical signs and symptoms of DVT"),
        boolean("pe_most_likely", "PE is the most likely diagnosis", synonyms=["pe_number_one"]),
        heart_rate(),
        boolean("immobilization_or_surgery", "Immobilisation >= 3 days or surgery in the previous 4 weeks",
                synonyms=["immobilization", "recent_surgery"]),
        boolean("previous_vte", "Previous PE or DVT", synonyms=["previous_pe", "previous_dvt"]),
        boolean("hemoptysis", "Haemoptysis"),
        boolean("malignancy", "Malignancy with treatment within 6 months or palliative"),
    ),
    rules=RuleSet([
        flag("clinical_dvt", 3, label="Clinical signs of DVT"),
        flag("pe_most_likely", 3, label="PE most likely diagnosis"),
        points_if("Heart rate > 100", lambda v: v["heart_rate"] > 100, 1.5),
        flag("immobilization_or_surgery", 1.5, label="Immobilisation or recent surgery"),
        flag("previous_vte", 1.5, label="Previous PE/DVT"),
        flag("hemoptysis", 1, label="Haemoptysis"),
        flag("malignancy", 1, label="Malignancy"),
    ]),
    scale=TierScale([
        (0, "Low", "Consider D-dimer testing or PERC rule to rule out PE. "
                   "If D-dimer negative, consider stopping workup."),
        (2, "Moderate", "Consider high-sensitivity D-dimer testing or CTA. "
                        "If D-dimer negative, consider stopping workup."),
        (6.5, "High", "CTA recommended. D-dimer testing not recommended at this risk level."),
    ], citation="Wells PS, et al. Thromb Haemost 2000;83(3):416-420"),
)


# 4. BODE index ───────────────────────────────────────────────────────────────
BODE = CalculatorDef(
    id="bode",
    title="BODE Index",
    description="Four-year survival in COPD from BMI, obstruction, dyspnoea and exercise capacity.",
    tags=("pulmonary", "copd"),
    fields=(
        number("bmi", "Body mass index", "kg/m²", min_value=10, max_value=80),
        number("fev1_pct_predicted", "FEV1 % predicted", "%", min_value=5, max_value=150,
               synonyms=["fev1"]),
        integer("mmrc", "mMRC dyspnoea grade", 0, 4, synonyms=["dyspnea"]),
        number("six_minute_walk", "Six-minute walk distance", "m",
               min_value=0, max_value=1000, policy=ADVISORY,
               synonyms=["6mwd", "walk_distance"]),
    ),
    rules=RuleSet([
        points_if("BMI <= 21", lambda v: v["bmi"] <= 21),
        banded("fev1_pct_predicted", [(36, 2), (50, 1), (65, 0)], label="FEV1", below=3),
        banded("mmrc", [(2, 1), (3, 2), (4, 3)], label="mMRC dyspnoea"),
        banded("six_minute_walk", [(150, 2), (250, 1), (350, 0)], label="6-minute walk", below=3),
    ]),
    scale=TierScale([
        (0, "Quartile 1", "Approximately 80% four-year survival."),
        (3, "Quartile 2", "Approximately 67% four-year survival."),
        (5, "Quartile 3", "Approximately 57% four-year survival."),
        (7, "Quartile 4", "Approximately 18% four-year survival; consider referral for advanced therapies."),
    ], citation="Celli BR, et al. N Engl J Med 2004;350(10):1005-1012"),
)


# 5. FEV1/FVC ratio ───────────────────────────────────────────────────────────

def _fev1_not_above_fvc(v):
    if v["fev1"] > v["fvc"]:
        return RangeError("fev1", v["fev1"], "FEV1 cannot exceed FVC")
    return None


FEV1_FVC = CalculatorDef(
    id="fev1_fvc",
    title="FEV1/FVC Ratio",
    description="Forced expiratory volume in one second as a percentage of forced vital capacity.",
    tags=("pulmonary", "spirometry"),
    fields=(
        number("fev1", "FEV1", "L", min_value=0.1, max_value=10),
        number("fvc", "FVC", "L", min_value=0.1, max_value=12),
    ),
    rules=RuleSet([formula("FEV1 / FVC x 100", lambda v: v["fev1"] / v["fvc"] * 100)]),
    precision=2,
    units="%",
    checks=(_fev1_not_above_fvc,),
    scale=TierScale([
        (0, "Obstructive pattern", "Ratio below 70% suggests airflow obstruction; grade severity by FEV1."),
        (70, "Normal", "No airflow obstruction; a low FVC may indicate restriction."),
    ], citation="GOLD 2024 Report. Global Initiative for Chronic Obstructive Lung Disease"),
)


# 6. mMRC dyspnoea scale ──────────────────────────────────────────────────────
MMRC = CalculatorDef(
    id="mmrc",
    title="mMRC Dyspnoea Scale",
    description="Grade 0-4 breathlessness with activity.",
    tags=("pulmonary", "copd"),
    fields=(integer("grade", "mMRC grade", 0, 4, synonyms=["mmrc", "dyspnea"]),),
    rules=RuleSet(values_of("grade")),
    scale=TierScale([
        (0, "Minimal impact", "Breathless only with strenuous exercise."),
        (1, "Mild", "Short of breath when hurrying or walking up a slight hill."),
        (2, "Moderate", "Walks slower than peers or stops for breath at own pace."),
        (3, "Severe respiratory limitation", "Stops for breath after about 100 m or a few minutes."),
        (4, "Very severe impact", "Too breathless to leave the house or breathless when dressing."),
    ], citation="Bestall JC, et al. Thorax 1999;54(7):581-586"),
)


# 7. Asthma Control Test ──────────────────────────────────────────────────────

_ACT_ITEMS = [f"act_{n}" for n in range(1, 6)]

ACT = CalculatorDef(
    id="asthma_control_test",
    title="Asthma Control Test",
    description="Five questions on the past four weeks, each scored 1-5.",
    tags=("pulmonary", "asthma", "allergy"),
    fields=tuple(component(fid, f"Question {n}", 5, min_value=1, synonyms=[f"q{n}"])
                 for n, fid in enumerate(_ACT_ITEMS, 1)),
    rules=RuleSet(values_of(*_ACT_ITEMS)),
    scale=TierScale([
        (5, "Poor Control", "Urgent review of management plan recommended. Schedule follow-up appointment."),
        (20, "Reasonably Controlled",
         "Consider reviewing current management plan. May benefit from treatment adjustment."),
        (25, "Well Controlled",
         "Asthma appears to be under control. Continue current management plan. Schedule routine follow-up."),
    ], citation="Nathan RA, et al. J Allergy Clin Immunol 2004;113(1):59-65"),
)


# 8. COPD Assessment Test ─────────────────────────────────────────────────────

_CAT_ITEMS = [
    ("cough", "Cough"),
    ("phlegm", "Phlegm"),
    ("chest_tightness", "Chest tightness"),
    ("breathlessness", "Breathlessness on stairs or hills"),
    ("activities", "Limitation of home activities"),
    ("confidence", "Confidence leaving home"),
    ("sleep", "Sleep"),
    ("energy", "Energy"),
]

CAT = CalculatorDef(
    id="copd_assessment_test",
    title="COPD Assessment Test (CAT)",
    description="Eight items, each scored 0-5.",
    tags=("pulmonary", "copd"),
    fields=tuple(component(fid, label, 5) for fid, label in _CAT_ITEMS),
    rules=RuleSet(values_of(*(fid for fid, _ in _CAT_ITEMS))),
    scale=TierScale([
        (0, "Low impact", "Most days are good; COPD stops some activities."),
        (11, "Medium impact", "COPD is one of the most important problems; review treatment."),
        (21, "High impact", "COPD stops most desired activities; room for substantial improvement."),
        (31, "Very high impact", "Condition stops everything; refer for specialist review."),
    ], citation="Jones PW, et al. Eur Respir J 2009;34(3):648-654"),
)


# 9. Peak expiratory flow ─────────────────────────────────────────────────────

class Ethnicity(str, Enum):
    CAUCASIAN = "caucasian"
    AFRICAN_AMERICAN = "african_american"
    MEXICAN_AMERICAN = "mexican_american"
    OTHER = "other"


_PEFR_CONSTANT = {
    Ethnicity.CAUCASIAN: 2.3,
    Ethnicity.AFRICAN_AMERICAN: 1.8,
    Ethnicity.MEXICAN_AMERICAN: 2.1,
    Ethnicity.OTHER: 2.1,
}


def _expected_pefr(v) -> float:
    return (-0.0517 * v["age"] + 0.0332 * v["height"] + _PEFR_CONSTANT[v["ethnicity"]]) * 60


def _expected_positive(v):
    if _expected_pefr(v) <= 0:
        return RangeError("age", v["age"], "Predicted peak flow is not positive for this age and height")
    return None


PEFR = CalculatorDef(
    id="pefr",
    title="Peak Expiratory Flow (% predicted)",
    description="Measured peak flow as a percentage of the predicted value.",
    tags=("pulmonary", "asthma"),
    fields=(
        age(min_value=5, max_value=100),
        height(),
        choice("ethnicity", "Ethnicity", Ethnicity, synonyms=["race"]),
        number("measured_pefr", "Measured peak flow", "L/min",
               min_value=30, max_value=1000, policy=ADVISORY,
               synonyms=["pefr", "actual_pefr"]),
    ),
    rules=RuleSet([formula("Measured / predicted x 100", lambda v: v["measured_pefr"] / _expected_pefr(v) * 100)]),
    precision=1,
    units="%",
    checks=(_expected_positive,),
    details=lambda v, total: {"predicted_pefr_l_min": round_half_up(_expected_pefr(v), 1)},
    scale=TierScale([
        (0, "Red Zone", "Severe exacerbation - Medical Alert. Use reliever and seek urgent care."),
        (50, "Yellow Zone", "Partial Control: moderate exacerbation. Follow the asthma action plan."),
        (80, "Green Zone", "Well Controlled: good asthma control. Continue current treatment."),
    ], citation="Hankinson JL, et al. Am J Respir Crit Care Med 1999;159(1):179-187"),
)


# 10. Pneumonia Severity Index ────────────────────────────────────────────────

_PSI_COMORBIDITIES = [
    ("neoplastic_disease", "Neoplastic disease", 30),
    ("liver_disease", "Liver disease", 20),
    ("heart_failure", "Congestive heart failure", 10),
    ("cerebrovascular_disease", "Cerebrovascular disease", 10),
    ("renal_disease", "Renal disease", 10),
]

_PSI_CLASSES = {1: "I", 2: "II", 3: "III", 4: "IV", 5: "V"}


def _psi_exam_abnormal(v) -> bool:
    return (v["altered_mental_status"] or v["respiratory_rate"] >= 30 or v["systolic_bp"] < 90
            or v["temperature"] < 35 or v["temperature"] >= 40 or v["heart_rate"] >= 125)


def _psi_class(v, total) -> int:
    # class I is assigned before any points are counted
    comorbid = any(v[fid] for fid, _, _ in _PSI_COMORBIDITIES)
    if v["age"] <= 50 and not comorbid and not _psi_exam_abnormal(v):
        return 1
    if total <= 70:
        return 2
    if total <= 90:
        return 3
    return 4 if total <= 130 else 5


def _psi_details(v, total):
    risk_class = _psi_class(v, total)
    return {"risk_class": risk_class, "risk_class_label": _PSI_CLASSES[risk_class]}


PSI = CalculatorDef(
    id="psi",
    title="Pneumonia Severity Index (PORT)",
    description="Risk class and 30-day mortality in community-acquired pneumonia.",
    tags=("pulmonary", "infection"),
    fields=(
        age(min_value=18),
        sex(),
        boolean("nursing_home", "Nursing home resident"),
        *(boolean(fid, label) for fid, label, _ in _PSI_COMORBIDITIES),
        boolean("altered_mental_status", "Altered mental status", synonyms=["confusion"]),
        respiratory_rate(),
        systolic_bp(),
        temperature(),
        heart_rate(),
        number("arterial_ph", "Arterial pH", min_value=6.5, max_value=8.0, synonyms=["ph"]),
        number("bun", "Blood urea nitrogen", "mg/dL", "bun", min_value=1, max_value=300, synonyms=["urea"]),
        number("sodium", "Serum sodium", "mmol/L", min_value=90, max_value=220, synonyms=["na"]),
        number("glucose", "Serum glucose", "mg/dL", "glucose", min_value=10, max_value=2000),
        number("hematocrit", "Haematocrit", "%", min_value=5, max_value=80, synonyms=["hct"]),
        boolean("hypoxaemia", "PaO2 < 60 mmHg or SpO2 < 90%", synonyms=["hypoxemia"]),
        boolean("pleural_effusion", "Pleural effusion on imaging"),
    ),
    rules=RuleSet([
        formula("Age (women: age - 10)",
                lambda v: v["age"] - 10 if v["sex"] is Sex.FEMALE else v["age"]),
        flag("nursing_home", 10, label="Nursing home resident"),
        *(flag(fid, pts, label=label) for fid, label, pts in _PSI_COMORBIDITIES),
        flag("altered_mental_status", 20, label="Altered mental status"),
        points_if("Respiratory rate >= 30", lambda v: v["respiratory_rate"] >= 30, 20),
        points_if("Systolic BP < 90", lambda v: v["systolic_bp"] < 90, 20),
        points_if("Temperature < 35 or >= 40 °C",
                  lambda v: v["temperature"] < 35 or v["temperature"] >= 40, 15),
        points_if("Pulse >= 125", lambda v: v["heart_rate"] >= 125, 10),
        points_if("Arterial pH < 7.35", lambda v: v["arterial_ph"] < 7.35, 30),
        points_if("BUN >= 30 mg/dL", lambda v: v["bun"] >= 30, 20),
        points_if("Sodium < 130 mmol/L", lambda v: v["sodium"] < 130, 20),
        points_if("Glucose >= 250 mg/dL", lambda v: v["glucose"] >= 250, 10),
        points_if("Haematocrit < 30%", lambda v: v["hematocrit"] < 30, 10),
        flag("hypoxaemia", 10, label="Hypoxaemia"),
        flag("pleural_effusion", 10, label="Pleural effusion"),
    ]),
    details=_psi_details,
    classify_on=lambda total, details: details["risk_class"],
    scale=TierScale([
        (1, "Class I", "30-day mortality 0.1%; outpatient treatment."),
        (2, "Class II", "30-day mortality 0.6%; outpatient treatment."),
        (3, "Class III", "30-day mortality 0.9-2.8%; outpatient or brief observation admission."),
        (4, "Class IV", "30-day mortality 8.2-9.3%; inpatient admission."),
        (5, "Class V", "30-day mortality 27-31%; inpatient admission, consider ICU."),
    ], citation="Fine MJ, et al. N Engl J Med 1997;336(4):243-250"),
)


DEFINITIONS: List[CalculatorDef] = [CURB65, PERC, WELLS_PE, BODE, FEV1_FVC, MMRC, ACT, CAT, PEFR, PSI]
