"""
Orthopaedic outcome questionnaires.

Oswestry and WOMAC report a percentage of the maximum possible score; Harris
Hip reports points out of 100.
"""

from typing import List

from ..engine import CalculatorDef
from ..fields import boolean, component, integer
from ..scoring import RuleSet, flag, formula, values_of
from ..tiers import TierScale


# 1. Oswestry Disability Index ────────────────────────────────────────────────

_ODI_SECTIONS = [
    "pain_intensity", "personal_care", "lifting", "walking", "sitting",
    "standing", "sleeping", "sex_life", "social_life", "travelling",
]

OSWESTRY = CalculatorDef(
    id="oswestry",
    title="Oswestry Disability Index",
    description="Ten sections scored 0-5; reported as a percentage of 50.",
    tags=("orthopedics", "spine"),
    fields=tuple(component(fid, fid.replace("_", " ").capitalize(), 5, synonyms=[f"odi_{n}"])
                 for n, fid in enumerate(_ODI_SECTIONS, 1)),
    rules=RuleSet([formula("Total / 50 x 100", lambda v: sum(v[s] for s in _ODI_SECTIONS) / 50 * 100)]),
    precision=2,
    units="%",
    scale=TierScale([
        (0, "Minimal disability", "Can cope with most daily activities; advice on lifting, posture and exercise."),
        (21, "Moderate disability",
         "More pain and difficulty with sitting, lifting and standing; conservative management."),
        (41, "Severe disability", "Pain is the main problem; detailed investigation is indicated."),
        (61, "Crippling disability", "Back pain impinges on all aspects of life; positive intervention required."),
        (81, "Bed-bound", "Bed-bound or exaggerating symptoms; careful clinical evaluation needed."),
    ], citation="Fairbank JC, Pynsent PB. Spine 2000;25(22):2940-2952"),
)


# 2. Harris Hip Score ─────────────────────────────────────────────────────────
HARRIS_HIP = CalculatorDef(
    id="harris_hip",
    title="Harris Hip Score",
    description="Pain (0-44), function (0-47), absence of deformity (4) and range of motion (0-5).",
    tags=("orthopedics", "hip"),
    fields=(
        integer("pain", "Pain (0-44)", min_value=0, max_value=44),
        integer("function", "Function: gait and activities (0-47)", min_value=0, max_value=47,
                synonyms=["function_score"]),
        boolean("absence_of_deformity", "Absence of deformity (all four criteria met)",
                synonyms=["no_deformity"]),
        component("range_of_motion", "Range of motion (0-5)", 5, synonyms=["rom"]),
    ),
    rules=RuleSet([
        *values_of("pain", "function"),
        flag("absence_of_deformity", weight=4, label="Absence of deformity"),
        *values_of("range_of_motion"),
    ]),
    scale=TierScale([
        (0, "Poor", "Poor hip function; consider further evaluation or surgical review."),
        (70, "Fair", "Fair hip function; rehabilitation and follow-up recommended."),
        (80, "Good", "Good hip function."),
        (90, "Excellent", "Excellent hip function."),
    ], citation="Harris WH. J Bone Joint Surg Am 1969;51(4):737-755"),
)


# 3. WOMAC ────────────────────────────────────────────────────────────────────

_WOMAC_SUBSCALES = {
    "pain": [f"pain_{n}" for n in range(1, 6)],
    "stiffness": [f"stiffness_{n}" for n in range(1, 4)],
    "function": [f"function_{n}" for n in range(1, 17)],
}
_WOMAC_ITEMS = [item for items in _WOMAC_SUBSCALES.values() for item in items]
_WOMAC_MAX = 4 * len(_WOMAC_ITEMS)

WOMAC = CalculatorDef(
    id="womac",
    title="WOMAC Osteoarthritis Index",
    description="24 items scored 0-4 across pain, stiffness and physical function; "
                "reported as a percentage of 96.",
    tags=("orthopedics", "osteoarthritis"),
    fields=tuple(component(item, item.replace("_", " ").capitalize(), 4) for item in _WOMAC_ITEMS),
    rules=RuleSet([formula(f"Total / {_WOMAC_MAX} x 100",
                           lambda v: sum(v[i] for i in _WOMAC_ITEMS) / _WOMAC_MAX * 100)]),
    precision=2,
    units="%",
    details=lambda v, total: {
        name: sum(v[i] for i in items) for name, items in _WOMAC_SUBSCALES.items()
    },
    scale=TierScale([
        (0, "Scored", "Higher scores indicate worse symptoms; use to track progress or treatment effect."),
    ], citation="Bellamy N, et al. J Rheumatol 1988;15(12):1833-1840"),
)


DEFINITIONS: List[CalculatorDef] = [OSWESTRY, HARRIS_HIP, WOMAC]
