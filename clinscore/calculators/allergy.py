"""
Allergy and dermatology calculators.
"""

from typing import List

from ..engine import CalculatorDef
from ..fields import ADVISORY, component, number
from ..scoring import RuleSet, formula, values_of
from ..tiers import TierScale


# 1. Urticaria Activity Score ─────────────────────────────────────────────────
URTICARIA = CalculatorDef(
    id="urticaria_activity",
    title="Urticaria Activity Score (UAS)",
    description="Daily wheal count and pruritus intensity, each 0-3.",
    tags=("allergy", "dermatology"),
    fields=(
        component("wheals", "Wheals (0 none, 1 < 20, 2 20-50, 3 > 50 in 24 h)", 3),
        component("pruritus", "Pruritus (0 none to 3 intense)", 3, synonyms=["itch"]),
    ),
    rules=RuleSet(values_of("wheals", "pruritus")),
    scale=TierScale([
        (0, "None", "No urticaria activity; continue monitoring and current management."),
        (1, "Mild", "Mild urticaria; non-sedating antihistamines typically sufficient."),
        (3, "Moderate", "Moderate urticaria; consider up-dosing antihistamines or specialist referral."),
        (5, "Severe", "Severe urticaria; urgent specialist consultation and possible systemic therapy required."),
    ], citation="Zuberbier T, et al. Allergy 2018;73(7):1393-1414"),
)


# 2. Dermatology Life Quality Index ───────────────────────────────────────────

_DLQI_ITEMS = [f"dlqi_{n}" for n in range(1, 11)]

DLQI = CalculatorDef(
    id="dlqi",
    title="Dermatology Life Quality Index",
    description="Ten questions on the last week, each 0 (not at all) to 3 (very much).",
    tags=("allergy", "dermatology"),
    fields=tuple(component(fid, f"Question {n}", 3, synonyms=[f"q{n}"])
                 for n, fid in enumerate(_DLQI_ITEMS, 1)),
    rules=RuleSet(values_of(*_DLQI_ITEMS)),
    scale=TierScale([
        (0, "No effect", "No effect on quality of life; minimal intervention needed."),
        (2, "Small effect", "Small effect on quality of life; consider topical treatments and counseling."),
        (6, "Moderate effect",
         "Moderate effect on quality of life; specialist referral and targeted therapy recommended."),
        (11, "Very large effect",
         "Very large effect on quality of life; systemic therapy and psychological support may be required."),
        (21, "Extremely large effect",
         "Extremely large effect on quality of life; urgent specialist intervention and "
         "comprehensive management needed."),
    ], citation="Finlay AY, Khan GK. Clin Exp Dermatol 1994;19(3):210-216"),
)


# 3. SCORAD ───────────────────────────────────────────────────────────────────

_SCORAD_INTENSITY = ["erythema", "edema", "oozing", "excoriation", "lichenification", "dryness"]


def _scorad(v) -> float:
    extent = v["extent_pct"] / 5
    intensity = sum(v[item] for item in _SCORAD_INTENSITY) * 2
    subjective = v["pruritus"] + v["sleep_loss"]
    return extent + intensity + subjective


SCORAD = CalculatorDef(
    id="scorad",
    title="SCORAD (Scoring Atopic Dermatitis)",
    description="A/5 + 2B + C: extent, six intensity items of 0-3, and two 0-10 symptom scales.",
    tags=("allergy", "dermatology"),
    fields=(
        number("extent_pct", "Body surface area affected", "%", "fraction_pct", min_value=0, max_value=100,
               synonyms=["extent"]),
        *(component(item, item.capitalize(), 3) for item in _SCORAD_INTENSITY),
        component("pruritus", "Pruritus (0-10)", 10, synonyms=["itch"]),
        component("sleep_loss", "Sleep loss (0-10)", 10, synonyms=["sleeplessness"]),
    ),
    rules=RuleSet([formula("A/5 + 2B + C", _scorad)]),
    precision=1,
    scale=TierScale([
        (0, "Mild", "Mild atopic dermatitis; topical emollients and low-potency corticosteroids are "
                    "typically sufficient."),
        (25, "Moderate", "Moderate atopic dermatitis; consider moderate-potency corticosteroids and "
                         "specialist referral."),
        (50.1, "Severe", "Severe atopic dermatitis; systemic therapy and urgent dermatology consultation "
                         "may be required."),
    ], citation="European Task Force on Atopic Dermatitis. Dermatology 1993;186(1):23-31"),
)


# 4. Eosinophil count ─────────────────────────────────────────────────────────
EOSINOPHIL_COUNT = CalculatorDef(
    id="eosinophil_count",
    title="Absolute Eosinophil Count",
    description="Grades eosinophilia from the absolute count in 10^9/L.",
    tags=("allergy", "haematology"),
    fields=(
        number("eosinophils", "Absolute eosinophil count", "10^9/L", "cells_10e9",
               min_value=0, max_value=100, policy=ADVISORY,
               synonyms=["aec", "eosinophil_count"]),
    ),
    rules=RuleSet([formula("Absolute eosinophil count", lambda v: v["eosinophils"])]),
    precision=2,
    units="10^9/L",
    scale=TierScale([
        (0, "Normal", "Normal eosinophil count (under 0.5 x 10^9/L)"),
        (0.5, "Mild eosinophilia",
         "Possible causes: allergies, asthma, atopic dermatitis, drug reactions"),
        (1.5, "Moderate eosinophilia",
         "Possible causes: parasitic infections, autoimmune diseases, some malignancies"),
        (5, "Severe eosinophilia",
         "Possible causes: hypereosinophilic syndrome, eosinophilic leukemia, parasitic infections"),
    ], citation="Valent P, et al. J Allergy Clin Immunol 2012;130(3):607-612"),
)


DEFINITIONS: List[CalculatorDef] = [URTICARIA, DLQI, SCORAD, EOSINOPHIL_COUNT]
