"""
Obstetric calculators: newborn assessment, induction readiness, hypertensive
disorders of pregnancy, fetal growth, dating and trial of labour.
"""

from datetime import timedelta
from enum import Enum
from typing import List

from ..engine import CalculatorDef
from ..errors import RangeError
from ..fields import age, boolean, choice, component, date_field, diastolic_bp, number, systolic_bp
from ..scoring import RuleSet, banded, flag, formula, lookup, points_if, round_half_up, values_of
from ..tiers import TierScale


# 1. APGAR ────────────────────────────────────────────────────────────────────

_APGAR_ITEMS = [
    ("appearance", "Appearance (skin colour)", ["color", "colour"]),
    ("pulse", "Pulse (heart rate)", ["heart_rate"]),
    ("grimace", "Grimace (reflex irritability)", ["reflex"]),
    ("activity", "Activity (muscle tone)", ["tone"]),
    ("respiration", "Respiration (breathing effort)", ["breathing"]),
]

APGAR = CalculatorDef(
    id="apgar",
    title="APGAR Score",
    description="Newborn condition at 1 and 5 minutes; each component 0-2.",
    tags=("obstetrics", "neonatal"),
    fields=tuple(component(fid, label, 2, synonyms=syn) for fid, label, syn in _APGAR_ITEMS),
    rules=RuleSet(values_of(*(fid for fid, _, _ in _APGAR_ITEMS))),
    scale=TierScale([
        (0, "Severely Depressed", "Immediate resuscitation required."),
        (4, "Moderately Depressed", "May require some resuscitative measures; reassess at 5 minutes."),
        (7, "Normal (Healthy)", "Routine post-delivery care."),
    ], citation="Apgar V. Curr Res Anesth Analg 1953;32(4):260-267"),
)


# 2. Bishop score ─────────────────────────────────────────────────────────────

class Station(str, Enum):
    MINUS_3 = "-3"
    MINUS_2 = "-2"
    MINUS_1 = "-1"
    ZERO = "0"
    PLUS_1 = "+1"
    PLUS_2 = "+2"


class CervixConsistency(str, Enum):
    FIRM = "firm"
    MEDIUM = "medium"
    SOFT = "soft"


class CervixPosition(str, Enum):
    POSTERIOR = "posterior"
    MID = "mid"
    ANTERIOR = "anterior"


BISHOP = CalculatorDef(
    id="bishop",
    title="Bishop Score",
    description="Cervical readiness for induction of labour.",
    tags=("obstetrics",),
    fields=(
        number("dilation_cm", "Cervical dilation", "cm", "length_cm", min_value=0, max_value=10,
               synonyms=["dilation"]),
        number("effacement_pct", "Cervical effacement", "%", "fraction_pct", min_value=0, max_value=100,
               synonyms=["effacement"]),
        choice("station", "Fetal station", Station),
        choice("consistency", "Cervical consistency", CervixConsistency),
        choice("position", "Cervical position", CervixPosition),
    ),
    rules=RuleSet([
        banded("dilation_cm", [(1, 1), (3, 2), (5, 3)], label="Dilation"),
        banded("effacement_pct", [(40, 1), (60, 2), (80, 3)], label="Effacement"),
        lookup("station", {Station.MINUS_3: 0, Station.MINUS_2: 1, Station.MINUS_1: 2, Station.ZERO: 2,
                           Station.PLUS_1: 3, Station.PLUS_2: 3}, label="Station"),
        lookup("consistency", {CervixConsistency.FIRM: 0, CervixConsistency.MEDIUM: 1,
                               CervixConsistency.SOFT: 2}, label="Consistency"),
        lookup("position", {CervixPosition.POSTERIOR: 0, CervixPosition.MID: 1,
                            CervixPosition.ANTERIOR: 2}, label="Position"),
    ]),
    scale=TierScale([
        (0, "Unfavorable for induction", "Success rate <50%. Consider cervical ripening."),
        (6, "Moderately favorable", "Success rate 65-85%"),
        (9, "Highly favorable", "Success rate >85%"),
    ], citation="Bishop EH. Obstet Gynecol 1964;24:266-268"),
)


# 3. Preeclampsia risk ────────────────────────────────────────────────────────
PREECLAMPSIA = CalculatorDef(
    id="preeclampsia_risk",
    title="Preeclampsia Risk",
    description="Weighted clinical risk factors for preeclampsia.",
    tags=("obstetrics", "risk"),
    fields=(
        age(min_value=10, max_value=60),
        number("bmi", "Body mass index", "kg/m²", min_value=10, max_value=80),
        systolic_bp(),
        diastolic_bp(),
        boolean("previous_preeclampsia", "History of preeclampsia", synonyms=["history"]),
        boolean("multiple_pregnancy", "Multiple pregnancy", synonyms=["twins"]),
    ),
    rules=RuleSet([
        points_if("Age > 35", lambda v: v["age"] > 35, 2),
        points_if("BMI >= 30", lambda v: v["bmi"] >= 30, 2),
        points_if("BP >= 140/90", lambda v: v["systolic_bp"] >= 140 or v["diastolic_bp"] >= 90, 3),
        flag("previous_preeclampsia", 4, label="History of preeclampsia"),
        flag("multiple_pregnancy", 5, label="Multiple pregnancy"),
    ]),
    scale=TierScale([
        (0, "Low Risk", "Routine antenatal care."),
        (4, "Moderate Risk", "Closer blood pressure monitoring; consider low-dose aspirin."),
        (8, "High Risk", "Low-dose aspirin from 12 weeks and specialist antenatal care recommended."),
    ], citation="ACOG Practice Bulletin No. 222. Obstet Gynecol 2020;135(6):e237-e260"),
)


# 4. HELLP syndrome risk ──────────────────────────────────────────────────────
HELLP = CalculatorDef(
    id="hellp_risk",
    title="HELLP Syndrome Risk",
    description="Laboratory criteria for haemolysis, elevated liver enzymes and low platelets.",
    tags=("obstetrics", "risk"),
    fields=(
        number("platelet_count", "Platelet count", "/mm³", min_value=1000, max_value=1500000,
               synonyms=["platelets", "plt"]),
        number("ast", "AST", "IU/L", min_value=1, max_value=10000),
        number("alt", "ALT", "IU/L", min_value=1, max_value=10000),
        number("ldh", "LDH", "IU/L", min_value=1, max_value=20000),
    ),
    rules=RuleSet([
        points_if("Platelets < 100,000/mm³", lambda v: v["platelet_count"] < 100000, 3),
        points_if("AST or ALT > 70 IU/L", lambda v: v["ast"] > 70 or v["alt"] > 70, 2),
        points_if("LDH > 600 IU/L", lambda v: v["ldh"] > 600, 2),
    ]),
    scale=TierScale([
        (0, "Low Risk for HELLP Syndrome", "Continue routine monitoring."),
        (3, "Moderate Risk for HELLP Syndrome", "Repeat laboratory tests and monitor closely."),
        (5, "High Risk for HELLP Syndrome", "Urgent obstetric review; consider delivery planning."),
    ], citation="Sibai BM. Obstet Gynecol 2004;103(5):981-991"),
)


# 5. Amniotic Fluid Index ─────────────────────────────────────────────────────
AFI = CalculatorDef(
    id="amniotic_fluid_index",
    title="Amniotic Fluid Index",
    description="Sum of the deepest vertical pocket in four uterine quadrants.",
    tags=("obstetrics", "ultrasound"),
    fields=tuple(
        number(f"quadrant_{n}", f"Quadrant {n} deepest pocket", "cm", "length_cm",
               min_value=0, max_value=20, synonyms=[f"q{n}"])
        for n in range(1, 5)
    ),
    rules=RuleSet([formula("Q1 + Q2 + Q3 + Q4", lambda v: sum(v[f"quadrant_{n}"] for n in range(1, 5)))]),
    precision=1,
    units="cm",
    scale=TierScale([
        (0, "Oligohydramnios (Low Amniotic Fluid Level)", "AFI below 5 cm; evaluate fetal wellbeing and membranes."),
        (5, "Normal Amniotic Fluid Level", "AFI 5-24 cm; routine care."),
        (24.1, "Polyhydramnios (High Amniotic Fluid Level)",
         "AFI above 24 cm; screen for diabetes and fetal anomalies."),
    ], citation="Phelan JP, et al. J Reprod Med 1987;32(7):540-542"),
)


# 6. Estimated fetal weight (Hadlock) ─────────────────────────────────────────

def _hadlock(v) -> float:
    bpd, hc, ac, fl = v["bpd"], v["hc"], v["ac"], v["fl"]
    log_efw = (1.3596 - 0.00386 * ac * fl + 0.0064 * hc + 0.00061 * bpd * ac
               + 0.0424 * ac + 0.174 * fl)
    return 10 ** log_efw


EFW = CalculatorDef(
    id="estimated_fetal_weight",
    title="Estimated Fetal Weight (Hadlock)",
    description="Fetal weight from BPD, HC, AC and FL, all in centimetres.",
    tags=("obstetrics", "ultrasound"),
    fields=(
        number("bpd", "Biparietal diameter", "cm", "length_cm", min_value=1, max_value=12,
               synonyms=["biparietal_diameter"]),
        number("hc", "Head circumference", "cm", "length_cm", min_value=5, max_value=45,
               synonyms=["head_circumference"]),
        number("ac", "Abdominal circumference", "cm", "length_cm", min_value=5, max_value=50,
               synonyms=["abdominal_circumference"]),
        number("fl", "Femur length", "cm", "length_cm", min_value=0.5, max_value=9,
               synonyms=["femur_length"]),
    ),
    rules=RuleSet([formula("Hadlock BPD-HC-AC-FL equation", _hadlock)]),
    precision=2,
    units="g",
    scale=TierScale([
        (0, "Low birth weight range", "Estimated weight under 2500 g; correlate with gestational age."),
        (2500, "Normal birth weight range", "Estimated weight 2500-4000 g."),
        (4000, "Macrosomia range", "Estimated weight 4000 g or more; consider delivery planning."),
    ], citation="Hadlock FP, et al. Am J Obstet Gynecol 1985;151(3):333-337"),
)


# 7. Estimated due date (Naegele) ─────────────────────────────────────────────

def _gestation_days(v) -> int:
    return (v["assessment_date"] - v["lmp"]).days


def _assessment_after_lmp(v):
    days = _gestation_days(v)
    if not 0 <= days <= 320:
        return RangeError("assessment_date", days,
                          "Assessment date must fall 0-320 days after the last menstrual period")
    return None


def _due_date_details(v, total):
    lmp = v["lmp"]
    days = _gestation_days(v)
    milestones = {
        "end_of_first_trimester": 84,
        "anatomy_scan": 140,
        "glucose_screening": 168,
        "end_of_second_trimester": 182,
        "tdap_vaccine": 189,
        "gbs_screening": 252,
    }
    return {
        "estimated_due_date": (lmp + timedelta(days=280)).isoformat(),
        "gestational_age": f"{days // 7}w{days % 7}d",
        "milestones": {name: (lmp + timedelta(days=n)).isoformat() for name, n in milestones.items()},
    }


DUE_DATE = CalculatorDef(
    id="estimated_due_date",
    title="Estimated Due Date",
    description="Naegele's rule: LMP + 280 days. The score is gestational age in completed weeks.",
    tags=("obstetrics", "dating"),
    fields=(
        date_field("lmp", "First day of last menstrual period", synonyms=["last_menstrual_period"]),
        date_field("assessment_date", "Assessment date", synonyms=["today", "as_of"]),
    ),
    rules=RuleSet([formula("Completed weeks since LMP", lambda v: _gestation_days(v) // 7)]),
    units="weeks",
    checks=(_assessment_after_lmp,),
    details=_due_date_details,
    scale=TierScale([
        (0, "First trimester", "Offer dating ultrasound and first-trimester screening."),
        (14, "Second trimester", "Anatomy scan at 18-22 weeks; glucose screening at 24-28 weeks."),
        (28, "Third trimester", "Tdap at 27-36 weeks; GBS screening at 36-37 weeks."),
        (37, "Term", "Term pregnancy."),
        (42, "Post-term", "Post-term; discuss induction of labour."),
    ], citation="Naegele FC. Lehrbuch der Geburtshülfe, 1830"),
)


# 8. VBAC success ─────────────────────────────────────────────────────────────

class VaginalBirthHistory(str, Enum):
    NONE = "none"
    BEFORE_ONLY = "before_only"
    AFTER_ONLY = "after_only"
    BEFORE_AND_AFTER = "before_and_after"


class Effacement(str, Enum):
    LOW = "low"        # < 25%
    MEDIUM = "medium"  # 25-75%
    HIGH = "high"      # > 75%


def _vbac_probability(total: int) -> int:
    return min(round_half_up(total / 10 * 100, 0), 100)


VBAC = CalculatorDef(
    id="vbac",
    title="VBAC Success Likelihood",
    description="Likelihood of vaginal birth after caesarean.",
    tags=("obstetrics",),
    fields=(
        boolean("age_under_40", "Maternal age under 40"),
        choice("vaginal_birth_history", "Vaginal birth before/after the caesarean", VaginalBirthHistory,
               default=VaginalBirthHistory.NONE),
        boolean("non_recurring_indication", "Previous caesarean for a non-recurring indication",
                description="Any reason other than failure to progress"),
        choice("effacement", "Cervical effacement on admission", Effacement, default=Effacement.LOW),
        boolean("dilation_4cm_or_more", "Cervical dilation >= 4 cm on admission"),
    ),
    rules=RuleSet([
        flag("age_under_40", 2, label="Age under 40"),
        lookup("vaginal_birth_history", {VaginalBirthHistory.NONE: 0, VaginalBirthHistory.BEFORE_ONLY: 1,
                                         VaginalBirthHistory.AFTER_ONLY: 2,
                                         VaginalBirthHistory.BEFORE_AND_AFTER: 4},
               label="Vaginal birth history"),
        flag("non_recurring_indication", label="Non-recurring indication"),
        lookup("effacement", {Effacement.LOW: 0, Effacement.MEDIUM: 1, Effacement.HIGH: 2}, label="Effacement"),
        flag("dilation_4cm_or_more", label="Dilation >= 4 cm"),
    ]),
    details=lambda v, total: {"success_probability_pct": _vbac_probability(total)},
    classify_on=lambda total, details: details["success_probability_pct"],
    scale=TierScale([
        (0, "Lower likelihood", "Lower likelihood of successful VBAC. Consider scheduled C-section."),
        (50, "Moderate likelihood", "Moderate likelihood of successful VBAC. Close monitoring required."),
        (70, "High likelihood", "High likelihood of successful VBAC. Proceed with careful monitoring."),
    ], citation="Flamm BL, Geiger AM. Obstet Gynecol 1997;90(6):907-910"),
)


DEFINITIONS: List[CalculatorDef] = [APGAR, BISHOP, PREECLAMPSIA, HELLP, AFI, EFW, DUE_DATE, VBAC]
