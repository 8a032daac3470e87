"""
Neurology and psychiatry calculators: stroke/TIA, coma and injury scales,
screening questionnaires and aneurysm rupture risk.
"""

from enum import Enum
from typing import List

from ..engine import CalculatorDef
from ..fields import boolean, choice, component, integer, number
from ..scoring import RuleSet, banded, flag, formula, lookup, values_of
from ..tiers import TierScale


# 1. ABCD2 ────────────────────────────────────────────────────────────────────

class TIAFeatures(str, Enum):
    UNILATERAL_WEAKNESS = "unilateral_weakness"
    SPEECH_DISTURBANCE = "speech_disturbance"
    OTHER = "other"


ABCD2 = CalculatorDef(
    id="abcd2",
    title="ABCD2 Score",
    description="Early stroke risk after a transient ischaemic attack.",
    tags=("neurology", "risk"),
    fields=(
        boolean("age_60_or_older", "Age >= 60 years"),
        boolean("blood_pressure_elevated", "BP >= 140/90 mmHg at first assessment"),
        choice("clinical_features", "Clinical features of the TIA", TIAFeatures),
        number("duration_minutes", "Duration of symptoms", "min", min_value=0, max_value=1440,
               synonyms=["duration"]),
        boolean("diabetes", "Diabetes mellitus"),
    ),
    rules=RuleSet([
        flag("age_60_or_older", label="Age >= 60"),
        flag("blood_pressure_elevated", label="Blood pressure >= 140/90"),
        lookup("clinical_features", {TIAFeatures.UNILATERAL_WEAKNESS: 2, TIAFeatures.SPEECH_DISTURBANCE: 1,
                                     TIAFeatures.OTHER: 0}, label="Clinical features"),
        banded("duration_minutes", [(10, 1), (60, 2)], label="Duration"),
        flag("diabetes", label="Diabetes"),
    ]),
    scale=TierScale([
        (0, "Low Risk", "2-day stroke risk 1.0%, 7-day 1.2%, 90-day 3.1%."),
        (4, "Moderate Risk", "2-day stroke risk 4.1%, 7-day 5.9%, 90-day 9.8%."),
        (6, "High Risk", "2-day stroke risk 8.1%, 7-day 11.7%, 90-day 17.8%."),
    ], citation="Johnston SC, et al. Lancet 2007;369(9558):283-292"),
)


# 2. Glasgow Coma Scale ───────────────────────────────────────────────────────
GCS = CalculatorDef(
    id="gcs",
    title="Glasgow Coma Scale",
    description="Level of consciousness from eye, verbal and motor responses.",
    tags=("neurology", "critical care"),
    fields=(
        component("eye", "Eye opening (1-4)", 4, min_value=1, synonyms=["e"]),
        component("verbal", "Verbal response (1-5)", 5, min_value=1, synonyms=["v"]),
        component("motor", "Motor response (1-6)", 6, min_value=1, synonyms=["m"]),
    ),
    rules=RuleSet(values_of("eye", "verbal", "motor")),
    scale=TierScale([
        (3, "Severe impairment", "Severe impairment. Immediate intervention required."),
        (9, "Moderate impairment", "Moderate impairment present. Requires close monitoring."),
        (14, "Mild impairment", "Alert with mild neurological impairment. Further evaluation needed."),
        (15, "Normal", "Fully alert and oriented. No neurological impairment."),
    ], citation="Teasdale G, Jennett B. Lancet 1974;2(7872):81-84"),
)


# 3. NIH Stroke Scale ─────────────────────────────────────────────────────────

_NIHSS_ITEMS = [
    ("consciousness", "1a. Level of consciousness", 3),
    ("loc_questions", "1b. LOC questions", 2),
    ("loc_commands", "1c. LOC commands", 2),
    ("gaze", "Best gaze", 2),
    ("visual", "Visual fields", 3),
    ("facial_palsy", "Facial palsy", 3),
    ("motor_arm_left", "Motor arm, left", 4),
    ("motor_arm_right", "Motor arm, right", 4),
    ("motor_leg_left", "Motor leg, left", 4),
    ("motor_leg_right", "Motor leg, right", 4),
    ("ataxia", "Limb ataxia", 2),
    ("sensory", "Sensory", 2),
    ("language", "Best language", 3),
    ("dysarthria", "Dysarthria", 2),
    ("extinction", "Extinction and inattention", 2),
]

NIHSS = CalculatorDef(
    id="nihss",
    title="NIH Stroke Scale",
    description="Stroke severity from a standardised neurological examination.",
    tags=("neurology",),
    fields=tuple(component(fid, label, hi) for fid, label, hi in _NIHSS_ITEMS),
    rules=RuleSet(values_of(*(fid for fid, _, _ in _NIHSS_ITEMS))),
    scale=TierScale([
        (0, "No stroke symptoms", "No measurable deficit."),
        (1, "Minor stroke", "Minor deficit; assess eligibility for reperfusion if disabling."),
        (5, "Moderate stroke", "Moderate deficit; urgent stroke team assessment."),
        (16, "Moderate to severe stroke", "Substantial deficit; evaluate for thrombolysis and thrombectomy."),
        (21, "Severe stroke", "Severe deficit; high risk of poor outcome and haemorrhagic transformation."),
    ], citation="Brott T, et al. Stroke 1989;20(7):864-870"),
)


# 4. PHQ-9 ────────────────────────────────────────────────────────────────────

_PHQ9_ITEMS = [f"phq_{n}" for n in range(1, 10)]

PHQ9 = CalculatorDef(
    id="phq9",
    title="PHQ-9 Depression Severity",
    description="Nine-item depression questionnaire; each item 0 (not at all) to 3 (nearly every day).",
    tags=("neurology", "psychiatry", "screening"),
    fields=tuple(component(fid, f"Item {n}", 3, synonyms=[f"q{n}"])
                 for n, fid in enumerate(_PHQ9_ITEMS, 1)),
    rules=RuleSet(values_of(*_PHQ9_ITEMS)),
    # any answer above zero on item 9 needs a same-day safety assessment
    details=lambda v, total: {"suicide_risk_alert": v["phq_9"] >= 1},
    scale=TierScale([
        (0, "Minimal depression", "Monitor; may not require treatment."),
        (5, "Mild depression", "Watchful waiting; repeat PHQ-9 at follow-up."),
        (10, "Moderate depression", "Consider counselling, follow-up and/or pharmacotherapy."),
        (15, "Moderately severe depression", "Active treatment with pharmacotherapy and/or psychotherapy."),
        (20, "Severe depression", "Immediate initiation of pharmacotherapy; refer to mental health specialist."),
    ], citation="Kroenke K, et al. J Gen Intern Med 2001;16(9):606-613"),
)


# 5. GAD-7 ────────────────────────────────────────────────────────────────────

_GAD7_ITEMS = [f"gad_{n}" for n in range(1, 8)]

GAD7 = CalculatorDef(
    id="gad7",
    title="GAD-7 Anxiety Severity",
    description="Seven-item generalised anxiety questionnaire; each item 0-3.",
    tags=("neurology", "psychiatry", "screening"),
    fields=tuple(component(fid, f"Item {n}", 3, synonyms=[f"q{n}"])
                 for n, fid in enumerate(_GAD7_ITEMS, 1)),
    rules=RuleSet(values_of(*_GAD7_ITEMS)),
    scale=TierScale([
        (0, "Minimal anxiety", "No treatment usually required."),
        (5, "Mild anxiety", "Monitor and reassess."),
        (10, "Moderate anxiety", "Further evaluation recommended; consider treatment."),
        (15, "Severe anxiety", "Active treatment warranted."),
    ], citation="Spitzer RL, et al. Arch Intern Med 2006;166(10):1092-1097"),
)


# 6. MMSE ─────────────────────────────────────────────────────────────────────

class Education(str, Enum):
    NOT_RECORDED = "not_recorded"
    UNDER_8_YEARS = "under_8"
    YEARS_8_TO_12 = "8_to_12"
    YEARS_13_TO_16 = "13_to_16"
    OVER_16_YEARS = "over_16"


_EDUCATION_ADJUSTMENT = {
    Education.NOT_RECORDED: 0,
    Education.UNDER_8_YEARS: -2,
    Education.YEARS_8_TO_12: -1,
    Education.YEARS_13_TO_16: 0,
    Education.OVER_16_YEARS: 1,
}

_MMSE_ITEMS = [
    ("orientation_time", "Orientation to time", 5),
    ("orientation_place", "Orientation to place", 5),
    ("registration", "Registration of three objects", 3),
    ("attention", "Attention and calculation (serial 7s)", 5),
    ("recall", "Recall of three objects", 3),
    ("naming", "Naming", 2),
    ("repetition", "Repetition", 1),
    ("three_stage_command", "Three-stage command", 3),
    ("reading", "Reading", 1),
    ("writing", "Writing", 1),
    ("copying", "Copying", 1),
]


def _mmse_details(v, total):
    adjustment = _EDUCATION_ADJUSTMENT[v["education"]]
    return {
        "education_adjustment": adjustment,
        "education_adjusted_score": total + adjustment,
        "domains": {
            "orientation": v["orientation_time"] + v["orientation_place"],
            "memory": v["registration"] + v["recall"],
            "attention": v["attention"],
            "language": v["naming"] + v["repetition"] + v["writing"],
            "visual_spatial": v["copying"],
            "executive_function": v["three_stage_command"] + v["reading"],
        },
    }


MMSE = CalculatorDef(
    id="mmse",
    title="Mini-Mental State Examination",
    description="Cognitive screening out of 30 points, with an education-adjusted score.",
    tags=("neurology", "screening"),
    fields=tuple(component(fid, label, hi) for fid, label, hi in _MMSE_ITEMS)
    + (choice("education", "Years of education", Education, default=Education.NOT_RECORDED),),
    rules=RuleSet(values_of(*(fid for fid, _, _ in _MMSE_ITEMS))),
    details=_mmse_details,
    scale=TierScale([
        (0, "Severe cognitive impairment", "Severe impairment; assess for safety, capacity and care needs."),
        (10, "Moderate cognitive impairment", "Moderate impairment; specialist assessment recommended."),
        (19, "Mild cognitive impairment", "Mild impairment; further cognitive testing recommended."),
        (24, "Normal to Mild cognitive impairment", "Borderline; interpret with education and repeat over time."),
        (27, "Normal cognition", "No cognitive impairment detected."),
    ], citation="Folstein MF, et al. J Psychiatr Res 1975;12(3):189-198"),
)


# 7. PHASES ───────────────────────────────────────────────────────────────────

class Population(str, Enum):
    NORTH_AMERICAN_EUROPEAN = "north_american_european"
    JAPANESE = "japanese"
    FINNISH = "finnish"


class AneurysmSite(str, Enum):
    ICA = "ica"
    MCA = "mca"
    ACA_PCOMM_POSTERIOR = "aca_pcomm_posterior"


# 5-year rupture risk (%) by total score
_PHASES_RUPTURE_RISK = {0: 0.4, 1: 0.4, 2: 0.4, 3: 0.7, 4: 0.9, 5: 1.3, 6: 1.7,
                        7: 2.4, 8: 3.2, 9: 4.3, 10: 5.3, 11: 7.2}


def _phases_risk(total: int) -> float:
    return _PHASES_RUPTURE_RISK.get(total, 17.8)


PHASES = CalculatorDef(
    id="phases",
    title="PHASES Aneurysm Rupture Risk",
    description="Five-year rupture risk of an unruptured intracranial aneurysm.",
    tags=("neurology", "risk"),
    fields=(
        choice("population", "Population", Population),
        boolean("hypertension", "Hypertension", synonyms=["htn"]),
        boolean("age_70_or_older", "Age >= 70 years"),
        number("size_mm", "Aneurysm size", "mm", "length_mm", min_value=1, max_value=60, synonyms=["size"]),
        boolean("earlier_sah", "Earlier subarachnoid haemorrhage from another aneurysm"),
        choice("site", "Site of aneurysm", AneurysmSite),
    ),
    rules=RuleSet([
        lookup("population", {Population.NORTH_AMERICAN_EUROPEAN: 0, Population.JAPANESE: 3,
                              Population.FINNISH: 5}, label="Population"),
        flag("hypertension", label="Hypertension"),
        flag("age_70_or_older", label="Age >= 70"),
        banded("size_mm", [(7, 3), (10, 6), (20, 10)], label="Size"),
        flag("earlier_sah", label="Earlier SAH"),
        lookup("site", {AneurysmSite.ICA: 0, AneurysmSite.MCA: 2, AneurysmSite.ACA_PCOMM_POSTERIOR: 4},
               label="Site"),
    ]),
    details=lambda v, total: {"five_year_rupture_risk_pct": _phases_risk(total)},
    classify_on=lambda total, details: details["five_year_rupture_risk_pct"],
    scale=TierScale([
        (0, "Low Risk", "Low rupture risk; conservative management with imaging follow-up is reasonable."),
        (3, "Moderate Risk", "Individual risk assessment needed; weigh patient factors and treatment risk."),
        (7, "High Risk", "High rupture risk; consider preventive treatment."),
    ], citation="Greving JP, et al. Lancet Neurol 2014;13(1):59-66"),
)


# 8. TBI severity ─────────────────────────────────────────────────────────────
TBI_SEVERITY = CalculatorDef(
    id="tbi_severity",
    title="Traumatic Brain Injury Severity",
    description="Counts mild-injury criteria: GCS 13-15, brief loss of consciousness, PTA within 24 hours.",
    tags=("neurology", "trauma"),
    fields=(
        integer("gcs", "Glasgow Coma Scale", 3, 15, synonyms=["glasgow"]),
        boolean("brief_loss_of_consciousness", "Loss of consciousness under 30 minutes",
                synonyms=["loss_of_consciousness", "loc"]),
        number("pta_hours", "Post-traumatic amnesia", "h", min_value=0, max_value=2000, synonyms=["pta"]),
    ),
    rules=RuleSet([
        formula("GCS >= 13", lambda v: 1 if v["gcs"] >= 13 else 0),
        flag("brief_loss_of_consciousness", label="Brief loss of consciousness"),
        formula("PTA <= 24 h", lambda v: 1 if v["pta_hours"] <= 24 else 0),
    ]),
    scale=TierScale([
        (0, "Severe TBI", "Severe injury; immediate neurosurgical and critical care evaluation."),
        (2, "Moderate TBI", "Moderate injury; CT imaging and admission for observation."),
        (3, "Mild TBI", "Mild injury; observe and give head-injury advice."),
    ], citation="Malec JF, et al. J Neurotrauma 2007;24(9):1417-1424"),
)


DEFINITIONS: List[CalculatorDef] = [ABCD2, GCS, NIHSS, PHQ9, GAD7, MMSE, PHASES, TBI_SEVERITY]
