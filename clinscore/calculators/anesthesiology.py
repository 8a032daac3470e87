"""
Perioperative calculators: PONV risk and PACU discharge readiness.
"""

from typing import List

from ..engine import CalculatorDef
from ..fields import boolean, component
from ..scoring import RuleSet, flags, values_of
from ..tiers import TierScale


# 1. Apfel simplified PONV score ──────────────────────────────────────────────
APFEL = CalculatorDef(
    id="apfel",
    title="Apfel Score (PONV Risk)",
    description="Four risk factors for postoperative nausea and vomiting after general anaesthesia.",
    tags=("anesthesiology",),
    fields=(
        boolean("female", "Female sex", synonyms=["female_gender"]),
        boolean("non_smoker", "Non-smoker", synonyms=["nonsmoker"]),
        boolean("ponv_history", "History of PONV or motion sickness",
                synonyms=["motion_sickness", "history_of_ponv"]),
        boolean("postoperative_opioids", "Postoperative opioids anticipated", synonyms=["opioids"]),
    ),
    rules=RuleSet(flags("female", "non_smoker", "ponv_history", "postoperative_opioids")),
    scale=TierScale([
        (0, "Low (~10%)", "No prophylaxis recommended unless other clinical factors suggest increased risk."),
        (1, "Low (~20%)",
         "Consider single-agent prophylaxis (e.g., ondansetron 4 mg IV) for moderate-risk procedures."),
        (2, "Moderate (~40%)",
         "Administer single or dual-agent prophylaxis (e.g., ondansetron 4 mg IV + dexamethasone 4-8 mg IV)."),
        (3, "High (~60%)",
         "Administer dual-agent prophylaxis (e.g., ondansetron 4 mg IV + dexamethasone 4-8 mg IV) "
         "and consider non-pharmacologic measures."),
        (4, "Very High (~80%)",
         "Administer multimodal prophylaxis (e.g., ondansetron 4 mg IV, dexamethasone 4-8 mg IV, "
         "and scopolamine patch) and optimize anesthesia technique (e.g., TIVA)."),
    ], citation="Apfel CC, et al. Anesthesiology 1999;91(3):693-700"),
)


# 2. Aldrete recovery score ───────────────────────────────────────────────────

_ALDRETE_ITEMS = [
    ("activity", "Activity (2 moves 4 limbs, 1 moves 2, 0 none)"),
    ("respiration", "Respiration (2 breathes deeply, 1 dyspnoea, 0 apnoeic)"),
    ("circulation", "Circulation (2 BP within 20%, 1 within 20-50%, 0 beyond 50%)"),
    ("consciousness", "Consciousness (2 fully awake, 1 arousable, 0 not responding)"),
    ("oxygen_saturation", "SpO2 (2 > 92% on air, 1 needs O2, 0 < 90% with O2)"),
]

ALDRETE = CalculatorDef(
    id="aldrete",
    title="Aldrete Score",
    description="Post-anaesthesia recovery; five items scored 0-2.",
    tags=("anesthesiology",),
    fields=(
        *(component(fid, label, 2) for fid, label in _ALDRETE_ITEMS[:4]),
        component("oxygen_saturation", _ALDRETE_ITEMS[4][1], 2, synonyms=["o2_saturation", "spo2"]),
    ),
    rules=RuleSet(values_of(*(fid for fid, _ in _ALDRETE_ITEMS))),
    scale=TierScale([
        (0, "Not ready", "Patient requires continued PACU monitoring and intervention."),
        (7, "Borderline", "Patient may require additional monitoring before discharge."),
        (9, "Ready for discharge",
         "Patient meets criteria for discharge from PACU to a less intensive care setting."),
    ], citation="Aldrete JA. J Clin Anesth 1995;7(1):89-91"),
)


DEFINITIONS: List[CalculatorDef] = [APFEL, ALDRETE]
