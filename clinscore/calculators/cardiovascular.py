"""
Cardiovascular calculators: anticoagulation and bleeding risk, ACS risk,
QTc correction, cardiac surgery risk, haemodynamics and echo.
"""

import math
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List

from ..engine import CalculatorDef
from ..errors import RangeError
from ..fields import (
    ADVISORY,
    Sex,
    age,
    boolean,
    choice,
    creatinine,
    diastolic_bp,
    heart_rate,
    integer,
    number,
    sex,
    systolic_bp,
)
from ..scoring import RuleSet, flag, flags, formula, lookup, points_if, round_half_up, score
from ..tiers import TierScale


def _sbp_above_dbp(v):
    if v["systolic_bp"] <= v["diastolic_bp"]:
        return RangeError("systolic_bp", v["systolic_bp"],
                          "Systolic blood pressure must be greater than diastolic blood pressure")
    return None


# 1. HAS-BLED ──────────────────────────────────────────────────────────────────
HAS_BLED = CalculatorDef(
    id="has_bled",
    title="HAS-BLED Score",
    description="One-year risk of major bleeding in patients with atrial fibrillation on anticoagulation.",
    tags=("cardiovascular", "risk"),
    fields=(
        boolean("hypertension", "Uncontrolled hypertension (SBP > 160 mmHg)", synonyms=["htn"]),
        creatinine(),
        boolean("stroke", "Prior stroke"),
        boolean("bleeding_history", "Prior major bleeding or predisposition", synonyms=["bleeding"]),
        age(min_value=1),
        boolean("drugs", "Antiplatelet agents or NSAIDs"),
        boolean("alcohol", "Alcohol use (>= 8 drinks/week)"),
    ),
    rules=RuleSet([
        flag("hypertension", label="Hypertension"),
        points_if("Abnormal renal function (creatinine > 2 mg/dL)", lambda v: v["serum_creatinine"] > 2),
        flag("stroke", label="Stroke"),
        flag("bleeding_history", label="Bleeding history"),
        points_if("Elderly (age >= 65)", lambda v: v["age"] >= 65),
        flag("drugs", label="Drugs"),
        flag("alcohol", label="Alcohol"),
    ]),
    scale=TierScale([
        (0, "Low risk for major bleeding", "0.9% annual bleeding risk; anticoagulation is favoured when indicated."),
        (1, "Moderate risk for major bleeding", "3.4% annual bleeding risk; anticoagulation is reasonable when indicated."),
        (2, "Moderate to high risk for major bleeding", "4.1% annual bleeding risk; address modifiable bleeding risk factors."),
        (3, "High risk of major bleeding", "5.8-8.9% annual bleeding risk; use anticoagulation with caution and review regularly."),
        (5, "Very high risk of major bleeding", "Over 9% annual bleeding risk; consider alternatives to anticoagulation."),
    ], citation="Pisters R, et al. Chest 2010;138(5):1093-1100"),
)


# 2. CHA2DS2-VASc ─────────────────────────────────────────────────────────────
CHA2DS2_VASC = CalculatorDef(
    id="cha2ds2_vasc",
    title="CHA2DS2-VASc Score",
    description="Stroke risk in non-valvular atrial fibrillation.",
    tags=("cardiovascular", "risk"),
    fields=(
        age(),
        sex(),
        boolean("chf", "Congestive heart failure", synonyms=["heart_failure"]),
        boolean("hypertension", "Hypertension", synonyms=["htn"]),
        boolean("stroke", "Prior stroke, TIA or thromboembolism", synonyms=["tia"]),
        boolean("vascular_disease", "Vascular disease (prior MI, PAD, aortic plaque)", synonyms=["vascular"]),
        boolean("diabetes", "Diabetes mellitus"),
    ),
    rules=RuleSet([
        points_if("Age >= 75", lambda v: v["age"] >= 75, 2),
        points_if("Age 65-74", lambda v: 65 <= v["age"] < 75),
        points_if("Female sex", lambda v: v["sex"] is Sex.FEMALE),
        flag("chf", label="CHF"),
        flag("hypertension", label="Hypertension"),
        flag("stroke", 2, label="Stroke/TIA"),
        flag("vascular_disease", label="Vascular disease"),
        flag("diabetes", label="Diabetes"),
    ]),
    scale=TierScale([
        (0, "Low", "Low stroke risk; anticoagulation may not be needed."),
        (1, "Moderate", "Moderate stroke risk; consider anticoagulation."),
        (2, "High", "High stroke risk; anticoagulation recommended."),
    ], citation="Lip GYH, et al. Chest 2010;137(2):263-272"),
)


# 3. CHADS2 ───────────────────────────────────────────────────────────────────
CHADS2 = CalculatorDef(
    id="chads2",
    title="CHADS2 Score",
    description="Annual stroke risk in atrial fibrillation.",
    tags=("cardiovascular", "risk"),
    fields=(
        boolean("chf", "Congestive heart failure"),
        boolean("hypertension", "Hypertension", synonyms=["htn"]),
        age(),
        boolean("diabetes", "Diabetes mellitus"),
        boolean("stroke", "Prior stroke or TIA", synonyms=["tia"]),
    ),
    rules=RuleSet([
        flag("chf", label="CHF"),
        flag("hypertension", label="Hypertension"),
        points_if("Age >= 75", lambda v: v["age"] >= 75),
        flag("diabetes", label="Diabetes"),
        flag("stroke", 2, label="Stroke/TIA"),
    ]),
    scale=TierScale([
        (0, "Low risk (0%)", "Annual stroke risk about 0%; anticoagulation generally not required."),
        (1, "Low-moderate risk (1.3%)", "Annual stroke risk 1.3%; consider anticoagulation."),
        (2, "Moderate risk (2.2%)", "Annual stroke risk 2.2%; anticoagulation recommended."),
        (3, "Moderate-high risk (3.2%)", "Annual stroke risk 3.2%; anticoagulation recommended."),
        (4, "High risk (4.0%)", "Annual stroke risk 4.0%; anticoagulation recommended."),
        (5, "Very high risk (6.7%)", "Annual stroke risk 6.7%; anticoagulation recommended."),
        (6, "Extremely high risk (9.8%)", "Annual stroke risk 9.8%; anticoagulation recommended."),
    ], citation="Gage BF, et al. JAMA 2001;285(22):2864-2870"),
)


# 4. HEMORR2HAGES ─────────────────────────────────────────────────────────────
HEMORR2HAGES = CalculatorDef(
    id="hemorr2hages",
    title="HEMORR2HAGES Score",
    description="Bleeding risk in elderly patients with atrial fibrillation.",
    tags=("cardiovascular", "risk"),
    fields=(
        boolean("hepatic_renal_disease", "Hepatic or renal disease"),
        boolean("ethanol_abuse", "Ethanol abuse"),
        boolean("malignancy", "Malignancy"),
        age(min_value=1),
        boolean("reduced_platelets", "Reduced platelet count or function"),
        boolean("rebleeding_risk", "Rebleeding risk (prior bleed)"),
        boolean("hypertension", "Uncontrolled hypertension"),
        boolean("anemia", "Anemia"),
        boolean("genetic_factors", "Genetic factors (CYP2C9)"),
        boolean("fall_risk", "Excessive fall risk"),
        boolean("stroke", "Stroke"),
    ),
    rules=RuleSet(
        flags("hepatic_renal_disease", "ethanol_abuse", "malignancy")
        + [points_if("Older age (> 75)", lambda v: v["age"] > 75)]
        + [flag("reduced_platelets"), flag("rebleeding_risk", 2)]
        + flags("hypertension", "anemia", "genetic_factors", "fall_risk", "stroke")
    ),
    scale=TierScale([
        (0, "Low risk", "Low bleeding risk on anticoagulation."),
        (2, "Intermediate risk", "Intermediate bleeding risk; weigh benefit of anticoagulation carefully."),
        (4, "High risk", "High bleeding risk; consider alternatives and close monitoring."),
    ], citation="Gage BF, et al. Am Heart J 2006;151(3):713-719"),
)


# 5. ORBIT ────────────────────────────────────────────────────────────────────
ORBIT = CalculatorDef(
    id="orbit",
    title="ORBIT Bleeding Risk Score",
    description="Major bleeding risk in atrial fibrillation patients on anticoagulation.",
    tags=("cardiovascular", "risk"),
    fields=(
        age(min_value=1),
        boolean("anemia", "Reduced haemoglobin/haematocrit or anemia"),
        boolean("bleeding_history", "Bleeding history"),
        number("egfr", "eGFR", "mL/min/1.73m²", min_value=0.1, max_value=200, synonyms=["gfr"]),
        boolean("antiplatelet", "Treatment with antiplatelet agents"),
    ),
    rules=RuleSet([
        points_if("Older age (>= 75)", lambda v: v["age"] >= 75),
        flag("anemia", 2, label="Anemia"),
        flag("bleeding_history", 2, label="Bleeding history"),
        points_if("Insufficient kidney function (eGFR < 60)", lambda v: v["egfr"] < 60),
        flag("antiplatelet", label="Antiplatelet treatment"),
    ]),
    scale=TierScale([
        (0, "Low risk", "2.4 bleeds per 100 patient-years."),
        (3, "Medium risk", "4.7 bleeds per 100 patient-years."),
        (4, "High risk", "8.1 bleeds per 100 patient-years."),
    ], citation="O'Brien EC, et al. Eur Heart J 2015;36(46):3258-3264"),
)


# 6. TIMI UA/NSTEMI ───────────────────────────────────────────────────────────
TIMI = CalculatorDef(
    id="timi_ua_nstemi",
    title="TIMI Risk Score for UA/NSTEMI",
    description="14-day risk of death, MI or urgent revascularisation.",
    tags=("cardiovascular", "risk"),
    fields=(
        boolean("age_65_or_older", "Age >= 65"),
        integer("cad_risk_factors", "Number of CAD risk factors", min_value=0, max_value=5,
                synonyms=["risk_factors"],
                description="Family history, hypertension, hypercholesterolaemia, diabetes, current smoker"),
        boolean("known_cad", "Known CAD (stenosis >= 50%)"),
        boolean("aspirin_use", "Aspirin use in past 7 days"),
        boolean("severe_angina", "Severe angina (>= 2 episodes in 24 h)"),
        boolean("st_deviation", "ST deviation >= 0.5 mm"),
        boolean("positive_marker", "Elevated cardiac marker"),
    ),
    rules=RuleSet([
        flag("age_65_or_older", label="Age >= 65"),
        points_if(">= 3 CAD risk factors", lambda v: v["cad_risk_factors"] >= 3),
        flag("known_cad", label="Known CAD"),
        flag("aspirin_use", label="Aspirin use"),
        flag("severe_angina", label="Severe angina"),
        flag("st_deviation", label="ST deviation"),
        flag("positive_marker", label="Positive cardiac marker"),
    ]),
    scale=TierScale([
        (0, "Low risk", "4.7-8.3% 14-day event rate; consider early conservative strategy."),
        (3, "Intermediate risk", "13.2-19.9% 14-day event rate; consider early invasive strategy."),
        (5, "High risk", "26.2-40.9% 14-day event rate; early invasive strategy recommended."),
    ], citation="Antman EM, et al. JAMA 2000;284(7):835-842"),
)


# 7. HEART Score ──────────────────────────────────────────────────────────────
HEART = CalculatorDef(
    id="heart_score",
    title="HEART Score",
    description="Major adverse cardiac event risk in emergency department chest pain.",
    tags=("cardiovascular", "risk"),
    fields=(
        integer("history", "History (0 slightly, 1 moderately, 2 highly suspicious)", 0, 2),
        integer("ecg", "ECG (0 normal, 1 non-specific repolarisation, 2 significant ST deviation)", 0, 2,
                synonyms=["ekg", "electrocardiogram"]),
        integer("age_points", "Age (0 < 45, 1 45-64, 2 >= 65)", 0, 2),
        integer("risk_factors", "Risk factors (0 none, 1 one or two, 2 three or more or atherosclerosis)", 0, 2),
        integer("troponin", "Troponin (0 normal, 1 1-3x, 2 > 3x upper limit)", 0, 2),
    ),
    rules=RuleSet([
        formula("History", lambda v: v["history"]),
        formula("ECG", lambda v: v["ecg"]),
        formula("Age", lambda v: v["age_points"]),
        formula("Risk factors", lambda v: v["risk_factors"]),
        formula("Troponin", lambda v: v["troponin"]),
    ]),
    scale=TierScale([
        (0, "Low risk", "0.9-1.7% MACE risk; consider discharge."),
        (4, "Moderate risk", "12-16.6% MACE risk; admit for observation and further testing."),
        (7, "High risk", "50-65% MACE risk; early invasive measures."),
    ], citation="Six AJ, et al. Neth Heart J 2008;16(6):191-196"),
)


# 8. Revised Cardiac Risk Index (Lee) ─────────────────────────────────────────
RCRI = CalculatorDef(
    id="rcri",
    title="Revised Cardiac Risk Index (Lee)",
    description="Risk of major cardiac complications after non-cardiac surgery.",
    tags=("cardiovascular", "anesthesiology", "risk"),
    fields=(
        boolean("high_risk_surgery", "High-risk surgery (intraperitoneal, intrathoracic, suprainguinal vascular)"),
        boolean("ischemic_heart_disease", "History of ischaemic heart disease"),
        boolean("heart_failure", "History of congestive heart failure", synonyms=["chf"]),
        boolean("cerebrovascular_disease", "History of cerebrovascular disease"),
        boolean("insulin_treatment", "Pre-operative insulin treatment"),
        creatinine("pre_operative_creatinine", "Pre-operative creatinine"),
    ),
    rules=RuleSet(
        flags("high_risk_surgery", "ischemic_heart_disease", "heart_failure",
              "cerebrovascular_disease", "insulin_treatment")
        + [points_if("Creatinine > 2.0 mg/dL", lambda v: v["pre_operative_creatinine"] > 2.0)]
    ),
    scale=TierScale([
        (0, "Class I", "0.4% risk of major cardiac complications."),
        (1, "Class II", "0.9% risk of major cardiac complications."),
        (2, "Class III", "7% risk of major cardiac complications."),
        (3, "Class IV", "11% risk of major cardiac complications."),
    ], citation="Lee TH, et al. Circulation 1999;100(10):1043-1049"),
)


# 9-13. QTc correction family ─────────────────────────────────────────────────

class QTcMethod(str, Enum):
    POWER = "power"            # QT / RR^exponent
    LINEAR_RR = "linear_rr"    # QT + coefficient * (1 - RR)
    LINEAR_HR = "linear_hr"    # QT + coefficient * (HR - 60)
    RATE_RATIO = "rate_ratio"  # QT * (coefficient + HR) / 180


@dataclass(frozen=True)
class QTcCorrection:
    """One member of the QTc family; RR is 60 / HR in seconds."""

    calc_id: str
    name: str
    method: QTcMethod
    parameter: float
    citation: str

    def correct(self, qt: float, hr: float) -> float:
        rr = 60 / hr
        if self.method is QTcMethod.POWER:
            return qt / rr ** self.parameter
        if self.method is QTcMethod.LINEAR_RR:
            return qt + self.parameter * (1 - rr)
        if self.method is QTcMethod.LINEAR_HR:
            return qt + self.parameter * (hr - 60)
        return qt * (self.parameter + hr) / 180

    def definition(self) -> CalculatorDef:
        return CalculatorDef(
            id=self.calc_id,
            title=f"QTc ({self.name})",
            description=f"Heart-rate corrected QT interval using the {self.name} formula.",
            tags=("cardiovascular", "ecg"),
            fields=(
                number("qt_interval", "QT interval", "ms", "interval_ms",
                       min_value=100, max_value=1000, synonyms=["qt"]),
                heart_rate(),
            ),
            rules=RuleSet([
                formula(f"{self.name} correction", lambda v: self.correct(v["qt_interval"], v["heart_rate"])),
            ]),
            precision=0,
            units="ms",
            details=lambda v, total: {"rr_interval_s": round_half_up(60 / v["heart_rate"], 3)},
            scale=TierScale(_QTC_BANDS, citation=self.citation),
        )


# bands shared by every QTc formula
_QTC_BANDS = [
    (0, "Normal", "QTc within normal limits."),
    (450, "Prolonged", "Prolonged QTc; review QT-prolonging drugs and electrolytes (K, Mg, Ca)."),
    (500, "Markedly prolonged",
     "QTc >= 500 ms: high risk of torsades de pointes. Stop QT-prolonging drugs, "
     "correct electrolytes and monitor on telemetry."),
]

QTC_CORRECTIONS: List[QTcCorrection] = [
    QTcCorrection("qtc_bazett", "Bazett", QTcMethod.POWER, 1 / 2,
                  "Bazett HC. Heart 1920;7:353-370"),
    QTcCorrection("qtc_fridericia", "Fridericia", QTcMethod.POWER, 1 / 3,
                  "Fridericia LS. Acta Med Scand 1920;53:469-486"),
    QTcCorrection("qtc_framingham", "Framingham", QTcMethod.LINEAR_RR, 154,
                  "Sagie A, et al. Am J Cardiol 1992;70(7):797-801"),
    QTcCorrection("qtc_hodges", "Hodges", QTcMethod.LINEAR_HR, 1.75,
                  "Hodges M, et al. J Am Coll Cardiol 1983;1:694"),
    QTcCorrection("qtc_rautaharju", "Rautaharju", QTcMethod.RATE_RATIO, 120,
                  "Rautaharju PM, et al. J Am Coll Cardiol 2009;53(11):982-991"),
]


# 14. EuroSCORE II ────────────────────────────────────────────────────────────

class LungDisease(str, Enum):
    NONE = "none"
    MODERATE = "moderate"
    SEVERE = "severe"


class Diabetes(str, Enum):
    NONE = "none"
    NON_INSULIN = "non_insulin"
    INSULIN = "insulin"


class NYHAClass(str, Enum):
    I = "I"
    II = "II"
    III = "III"
    IV = "IV"


class LVFunction(str, Enum):
    GOOD = "good"
    MODERATE = "moderate"
    POOR = "poor"
    VERY_POOR = "very_poor"


class PulmonaryHypertension(str, Enum):
    NONE = "none"
    MODERATE = "moderate"
    SEVERE = "severe"


class Urgency(str, Enum):
    ELECTIVE = "elective"
    URGENT = "urgent"
    EMERGENCY = "emergency"
    SALVAGE = "salvage"


class ProcedureWeight(str, Enum):
    ISOLATED_CABG = "isolated_cabg"
    SINGLE_NON_CABG = "single_non_cabg"
    TWO_PROCEDURES = "two_procedures"
    THREE_PROCEDURES = "three_procedures"


class ValveProcedure(str, Enum):
    NONE = "none"
    AORTIC = "aortic"
    MITRAL = "mitral"


_EURO_RULES = RuleSet([
    points_if("Age over 60", lambda v: v["age"] >= 60, lambda v: (v["age"] - 60) * 0.07),
    points_if("Female", lambda v: v["sex"] is Sex.FEMALE, 0.22),
    points_if("Creatinine > 2.0 mg/dL", lambda v: v["serum_creatinine"] > 2.0, 0.64),
    flag("extracardiac_arteriopathy", 0.43, label="Extracardiac arteriopathy"),
    flag("poor_mobility", 0.85, label="Poor mobility"),
    flag("previous_cardiac_surgery", 1.0, label="Previous cardiac surgery"),
    lookup("chronic_lung_disease", {LungDisease.NONE: 0, LungDisease.MODERATE: 0.41,
                                    LungDisease.SEVERE: 0.89}, label="Chronic lung disease"),
    flag("active_endocarditis", 0.61, label="Active endocarditis"),
    flag("critical_preoperative_state", 1.13, label="Critical pre-operative state"),
    points_if("Insulin-dependent diabetes", lambda v: v["diabetes"] is Diabetes.INSULIN, 0.67),
    lookup("nyha", {NYHAClass.I: 0, NYHAClass.II: 0.85, NYHAClass.III: 1.10, NYHAClass.IV: 1.35},
           label="NYHA class"),
    flag("ccs_class_4", 0.39, label="CCS class 4 angina"),
    lookup("lv_function", {LVFunction.GOOD: 0, LVFunction.MODERATE: 0.62, LVFunction.POOR: 0.93,
                           LVFunction.VERY_POOR: 1.28}, label="LV function"),
    lookup("pulmonary_hypertension", {PulmonaryHypertension.NONE: 0, PulmonaryHypertension.MODERATE: 0.45,
                                      PulmonaryHypertension.SEVERE: 0.92}, label="Pulmonary hypertension"),
    lookup("urgency", {Urgency.ELECTIVE: 0, Urgency.URGENT: 0.55, Urgency.EMERGENCY: 1.10,
                       Urgency.SALVAGE: 1.61}, label="Urgency"),
    lookup("procedure_weight", {ProcedureWeight.ISOLATED_CABG: 0, ProcedureWeight.SINGLE_NON_CABG: 0.42,
                                ProcedureWeight.TWO_PROCEDURES: 0.59,
                                ProcedureWeight.THREE_PROCEDURES: 0.74}, label="Weight of intervention"),
    lookup("valve_procedure", {ValveProcedure.NONE: 0, ValveProcedure.AORTIC: 0.17,
                               ValveProcedure.MITRAL: 0.25}, label="Valve surgery"),
])


def _euroscore_details(v, total) -> Dict[str, Any]:
    # mortality uses the unrounded sum
    x = score(v, _EURO_RULES) - 5.324
    mortality = math.exp(x) / (1 + math.exp(x)) * 100
    return {"predicted_mortality_pct": round_half_up(mortality, 1)}


EUROSCORE_II = CalculatorDef(
    id="euroscore_ii",
    title="EuroSCORE II",
    description="Predicted in-hospital mortality after adult cardiac surgery.",
    tags=("cardiovascular", "surgery", "risk"),
    fields=(
        age(min_value=18),
        sex(),
        creatinine(),
        boolean("extracardiac_arteriopathy", "Extracardiac arteriopathy"),
        boolean("poor_mobility", "Poor mobility"),
        boolean("previous_cardiac_surgery", "Previous cardiac surgery"),
        choice("chronic_lung_disease", "Chronic lung disease", LungDisease, default=LungDisease.NONE),
        boolean("active_endocarditis", "Active endocarditis"),
        boolean("critical_preoperative_state", "Critical pre-operative state"),
        choice("diabetes", "Diabetes", Diabetes, default=Diabetes.NONE),
        choice("nyha", "NYHA class", NYHAClass, default=NYHAClass.I),
        boolean("ccs_class_4", "CCS class 4 angina"),
        choice("lv_function", "LV function", LVFunction, default=LVFunction.GOOD),
        choice("pulmonary_hypertension", "Pulmonary hypertension", PulmonaryHypertension,
               default=PulmonaryHypertension.NONE),
        choice("urgency", "Urgency", Urgency, default=Urgency.ELECTIVE),
        choice("procedure_weight", "Weight of the intervention", ProcedureWeight,
               default=ProcedureWeight.ISOLATED_CABG),
        choice("valve_procedure", "Valve surgery", ValveProcedure, default=ValveProcedure.NONE),
    ),
    rules=_EURO_RULES,
    precision=2,
    details=_euroscore_details,
    classify_on=lambda total, details: details["predicted_mortality_pct"],
    scale=TierScale([
        (0, "Low risk", "Predicted mortality under 2%."),
        (2, "Intermediate risk", "Predicted mortality 2-5%; optimise modifiable risk factors before surgery."),
        (5, "High risk", "Predicted mortality 5-10%; heart team review of surgical versus alternative options."),
        (10, "Very high risk", "Predicted mortality 10% or more; consider transcatheter or non-surgical options."),
    ], citation="Nashef SAM, et al. Eur J Cardiothorac Surg 2012;41(4):734-745"),
)


# 15. Gorlin valve area ───────────────────────────────────────────────────────

class Valve(str, Enum):
    AORTIC = "aortic"
    MITRAL = "mitral"


# Gorlin constant 44.3, times the empirical 0.85 for the mitral valve
_GORLIN_VALVE_FACTOR = {Valve.AORTIC: 1.0, Valve.MITRAL: 0.85}

GORLIN = CalculatorDef(
    id="gorlin_valve_area",
    title="Gorlin Valve Area",
    description="Stenotic valve orifice area from catheterisation haemodynamics.",
    tags=("cardiovascular", "haemodynamics"),
    fields=(
        number("cardiac_output", "Cardiac output", "mL/min", "flow_ml_min", min_value=500, max_value=20000,
               synonyms=["co"]),
        heart_rate(),
        number("ejection_period", "Systolic ejection (or diastolic filling) period", "s", "interval_s",
               min_value=0.05, max_value=1.0, synonyms=["sep"]),
        number("mean_gradient", "Mean transvalvular gradient", "mmHg", "pressure",
               min_value=1, max_value=200, synonyms=["mg"]),
        choice("valve", "Valve", Valve, default=Valve.AORTIC),
    ),
    rules=RuleSet([
        formula("CO / (HR x SEP x 44.3 x k x sqrt(gradient))", lambda v: v["cardiac_output"] / (
            v["heart_rate"] * v["ejection_period"] * 44.3 * _GORLIN_VALVE_FACTOR[v["valve"]]
            * math.sqrt(v["mean_gradient"]))),
    ]),
    precision=2,
    units="cm²",
    scale=TierScale([
        (0, "Severe stenosis", "Valve area under 1.0 cm²; evaluate for valve intervention."),
        (1.0, "Moderate stenosis", "Valve area 1.0-1.5 cm²; clinical and echocardiographic follow-up."),
        (1.51, "Mild stenosis", "Valve area over 1.5 cm²; routine surveillance."),
    ], citation="Gorlin R, Gorlin SG. Am Heart J 1951;41(1):1-29"),
)


# 16. Teichholz ejection fraction ─────────────────────────────────────────────

def _teichholz_volume(d: float) -> float:
    return round_half_up(7 * d ** 3 / (2.4 + d), 2)


def _teichholz_ef(v) -> float:
    edv = _teichholz_volume(v["lvid_diastole"])
    esv = _teichholz_volume(v["lvid_systole"])
    return (edv - esv) / edv * 100


def _diameters_measurable(v):
    if v["lvid_diastole"] < 1:
        return RangeError("lvid_diastole", v["lvid_diastole"],
                          "LV diastolic diameter under 1 cm cannot be used for a volume estimate")
    if v["lvid_systole"] < 0.5:
        return RangeError("lvid_systole", v["lvid_systole"],
                          "LV systolic diameter under 0.5 cm cannot be used for a volume estimate")
    return None


def _systole_below_diastole(v):
    if v["lvid_systole"] >= v["lvid_diastole"]:
        return RangeError("lvid_systole", v["lvid_systole"],
                          "LV systolic diameter must be smaller than the diastolic diameter")
    return None


TEICHHOLZ = CalculatorDef(
    id="teichholz_ef",
    title="Teichholz Ejection Fraction",
    description="LV volumes and ejection fraction from M-mode internal diameters.",
    tags=("cardiovascular", "echo"),
    fields=(
        number("lvid_diastole", "LV internal diameter in diastole", "cm", "length_cm",
               min_value=1, max_value=10, policy=ADVISORY,
               synonyms=["lvidd", "edd"]),
        number("lvid_systole", "LV internal diameter in systole", "cm", "length_cm",
               min_value=0.5, max_value=10, policy=ADVISORY,
               synonyms=["lvids", "esd"]),
    ),
    rules=RuleSet([formula("(EDV - ESV) / EDV x 100", _teichholz_ef)]),
    precision=1,
    units="%",
    checks=(_diameters_measurable, _systole_below_diastole),
    details=lambda v, total: {
        "edv_ml": _teichholz_volume(v["lvid_diastole"]),
        "esv_ml": _teichholz_volume(v["lvid_systole"]),
    },
    scale=TierScale([
        (0, "Reduced EF", "Reduced EF; consider further cardiac evaluation."),
        (50, "Normal EF", "Normal EF; monitor as needed."),
    ], citation="Teichholz LE, et al. Am J Cardiol 1976;37(1):7-11"),
)


# 17. Shock Index ─────────────────────────────────────────────────────────────
SHOCK_INDEX = CalculatorDef(
    id="shock_index",
    title="Shock Index",
    description="Heart rate divided by systolic blood pressure.",
    tags=("cardiovascular", "critical care"),
    fields=(heart_rate(), systolic_bp()),
    rules=RuleSet([formula("HR / SBP", lambda v: v["heart_rate"] / v["systolic_bp"])]),
    precision=2,
    scale=TierScale([
        (0, "Normal", "Normal shock index; monitor as needed."),
        (0.91, "Elevated", "Elevated shock index; assess for shock or hemodynamic instability."),
    ], citation="Allgöwer M, Burri C. Dtsch Med Wochenschr 1967;92(43):1947-1950"),
)


# 18. Mean Arterial Pressure ──────────────────────────────────────────────────
MEAN_ARTERIAL_PRESSURE = CalculatorDef(
    id="mean_arterial_pressure",
    title="Mean Arterial Pressure (MAP)",
    description="MAP = (2 x DBP + SBP) / 3.",
    tags=("cardiovascular", "haemodynamics"),
    fields=(systolic_bp(), diastolic_bp()),
    rules=RuleSet([formula("(2 x DBP + SBP) / 3", lambda v: (2 * v["diastolic_bp"] + v["systolic_bp"]) / 3)]),
    precision=1,
    units="mmHg",
    checks=(_sbp_above_dbp,),
    scale=TierScale([
        (0, "Low", "MAP under 65 mmHg; inadequate organ perfusion likely, assess and treat hypotension."),
        (65, "Normal", "MAP adequate for organ perfusion."),
        (100.1, "High", "MAP over 100 mmHg; evaluate for hypertension."),
    ]),
)


# 19. Pulse Pressure ──────────────────────────────────────────────────────────
PULSE_PRESSURE = CalculatorDef(
    id="pulse_pressure",
    title="Pulse Pressure",
    description="Systolic minus diastolic blood pressure.",
    tags=("cardiovascular", "haemodynamics"),
    fields=(systolic_bp(), diastolic_bp()),
    rules=RuleSet([formula("SBP - DBP", lambda v: v["systolic_bp"] - v["diastolic_bp"])]),
    precision=0,
    units="mmHg",
    checks=(_sbp_above_dbp,),
    scale=TierScale([
        (0, "Narrow", "Pulse pressure under 25 mmHg; consider low stroke volume, tamponade or aortic stenosis."),
        (25, "Normal", "Normal pulse pressure."),
        (61, "Wide", "Pulse pressure over 60 mmHg; associated with arterial stiffness and aortic regurgitation."),
    ]),
)


# 20. Fick Cardiac Output ─────────────────────────────────────────────────────

def _o2_difference_positive(v):
    if v["arterial_o2_content"] <= v["venous_o2_content"]:
        return RangeError("arterial_o2_content", v["arterial_o2_content"],
                          "Arterial O2 content must exceed venous O2 content")
    return None


FICK_CARDIAC_OUTPUT = CalculatorDef(
    id="fick_cardiac_output",
    title="Fick Cardiac Output",
    description="CO = VO2 / ((CaO2 - CvO2) x 10); contents in mL/dL, VO2 in mL/min.",
    tags=("cardiovascular", "haemodynamics"),
    fields=(
        number("vo2", "Oxygen consumption (VO2)", "mL/min", min_value=50, max_value=2000),
        number("arterial_o2_content", "Arterial O2 content (CaO2)", "mL/dL", min_value=1, max_value=30,
               synonyms=["cao2"]),
        number("venous_o2_content", "Mixed venous O2 content (CvO2)", "mL/dL", min_value=1, max_value=30,
               synonyms=["cvo2"]),
    ),
    rules=RuleSet([formula("VO2 / ((CaO2 - CvO2) x 10)", lambda v: v["vo2"] / (
        (v["arterial_o2_content"] - v["venous_o2_content"]) * 10))]),
    precision=2,
    units="L/min",
    checks=(_o2_difference_positive,),
    scale=TierScale([
        (0, "Low", "Low CO; evaluate for heart failure or shock"),
        (4.0, "Normal", "Normal CO; monitor as needed."),
        (8.01, "High", "High CO; consider hyperdynamic states."),
    ], citation="Fick A. Sitzungsberichte der Physikalisch-Medizinischen Gesellschaft zu Würzburg 1870"),
)


# 21. Systemic Vascular Resistance ────────────────────────────────────────────

def _cvp_below_map(v):
    if v["central_venous_pressure"] >= v["mean_arterial_pressure"]:
        return RangeError("central_venous_pressure", v["central_venous_pressure"],
                          "CVP must be lower than the mean arterial pressure")
    return None


SVR = CalculatorDef(
    id="svr",
    title="Systemic Vascular Resistance",
    description="SVR = (MAP - CVP) x 80 / CO.",
    tags=("cardiovascular", "haemodynamics"),
    fields=(
        number("mean_arterial_pressure", "Mean arterial pressure", "mmHg", "pressure", min_value=20,
               max_value=200, synonyms=["map"]),
        number("central_venous_pressure", "Central venous pressure", "mmHg", "pressure", min_value=-5,
               max_value=40, synonyms=["cvp"]),
        number("cardiac_output", "Cardiac output", "L/min", "flow_l_min", min_value=0.5, max_value=20,
               synonyms=["co"]),
    ),
    rules=RuleSet([formula("(MAP - CVP) x 80 / CO", lambda v: (
        v["mean_arterial_pressure"] - v["central_venous_pressure"]) * 80 / v["cardiac_output"])]),
    precision=0,
    units="dyn·s/cm⁵",
    checks=(_cvp_below_map,),
    scale=TierScale([
        (0, "Low", "Low SVR; consider vasodilatory states such as sepsis."),
        (800, "Normal", "SVR within 800-1200 dyn·s/cm⁵."),
        (1201, "High", "High SVR; consider vasoconstriction, hypovolaemia or cardiogenic shock."),
    ]),
)


# 22. Pulmonary Vascular Resistance ───────────────────────────────────────────

def _pcwp_below_mpap(v):
    if v["pcwp"] >= v["mean_pap"]:
        return RangeError("pcwp", v["pcwp"], "PCWP must be lower than the mean pulmonary artery pressure")
    return None


PVR = CalculatorDef(
    id="pvr",
    title="Pulmonary Vascular Resistance",
    description="PVR = (mPAP - PCWP) x 80 / CO.",
    tags=("cardiovascular", "haemodynamics"),
    fields=(
        number("mean_pap", "Mean pulmonary artery pressure", "mmHg", "pressure", min_value=5,
               max_value=120, synonyms=["mpap"]),
        number("pcwp", "Pulmonary capillary wedge pressure", "mmHg", "pressure", min_value=0,
               max_value=60, synonyms=["wedge"]),
        number("cardiac_output", "Cardiac output", "L/min", "flow_l_min", min_value=0.5, max_value=20,
               synonyms=["co"]),
    ),
    rules=RuleSet([formula("(mPAP - PCWP) x 80 / CO", lambda v: (
        v["mean_pap"] - v["pcwp"]) * 80 / v["cardiac_output"])]),
    precision=0,
    units="dyn·s/cm⁵",
    checks=(_pcwp_below_mpap,),
    scale=TierScale([
        (0, "Normal", "PVR within normal limits."),
        (241, "Elevated", "PVR above 3 Wood units; consider pre-capillary pulmonary hypertension."),
    ]),
)


DEFINITIONS: List[CalculatorDef] = [
    HAS_BLED,
    CHA2DS2_VASC,
    CHADS2,
    HEMORR2HAGES,
    ORBIT,
    TIMI,
    HEART,
    RCRI,
    *[c.definition() for c in QTC_CORRECTIONS],
    EUROSCORE_II,
    GORLIN,
    TEICHHOLZ,
    SHOCK_INDEX,
    MEAN_ARTERIAL_PRESSURE,
    PULSE_PRESSURE,
    FICK_CARDIAC_OUTPUT,
    SVR,
    PVR,
]
