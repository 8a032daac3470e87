"""
Nephrology calculators: proteinuria, GFR estimating equations and CKD staging.
"""

from typing import List, Optional

from ..engine import CalculatorDef
from ..fields import Sex, age, boolean, creatinine, number, sex, weight
from ..scoring import RuleSet, formula
from ..tiers import TierScale

KDIGO_CITATION = "KDIGO 2012 Clinical Practice Guideline for CKD. Kidney Int Suppl 2013;3(1):1-150"


def gfr_scale(citation: Optional[str] = KDIGO_CITATION) -> TierScale:
    """KDIGO GFR categories, shared by the estimating equations and CKD staging."""
    return TierScale([
        (0, "G5", "Kidney failure; consider renal replacement therapy and palliative care discussion."),
        (15, "G4", "Severe reduction in GFR; plan renal replacement therapy and vascular access."),
        (30, "G3b", "Moderate to severe reduction; regular nephrology care and medication dose review."),
        (45, "G3a", "Mild to moderate reduction; monitor for anaemia, bone disease and acidosis."),
        (60, "G2", "Mild reduction in GFR; manage blood pressure and cardiovascular risk."),
        (90, "G1", "Normal or high GFR; CKD only with other markers of kidney damage."),
    ], citation=citation)


# 1. Urine protein to creatinine ratio ────────────────────────────────────────
UPCR = CalculatorDef(
    id="upcr",
    title="Urine Protein to Creatinine Ratio",
    description="Spot urine protein divided by urine creatinine (both mg/dL).",
    tags=("nephrology",),
    fields=(
        number("urine_protein", "Urine protein", "mg/dL", min_value=0, max_value=5000,
               synonyms=["protein"]),
        number("urine_creatinine", "Urine creatinine", "mg/dL", "creatinine", min_value=1, max_value=1000,
               synonyms=["creatinine"]),
    ),
    rules=RuleSet([formula("Protein / creatinine", lambda v: v["urine_protein"] / v["urine_creatinine"])]),
    precision=2,
    units="mg/mg",
    scale=TierScale([
        (0, "Normal range", "No significant proteinuria."),
        (0.2, "Mild proteinuria", "Repeat to confirm; evaluate blood pressure and renal function."),
        (0.5, "Moderate proteinuria", "Evaluate for kidney disease; consider ACE inhibitor or ARB."),
        (3.0, "Severe proteinuria", "Nephrotic-range proteinuria; nephrology referral."),
    ], citation="Ginsberg JM, et al. N Engl J Med 1983;309(25):1543-1546"),
)


# 2. MDRD GFR ─────────────────────────────────────────────────────────────────

def _mdrd(v) -> float:
    gfr = 175 * v["serum_creatinine"] ** -1.154 * v["age"] ** -0.203
    if v["sex"] is Sex.FEMALE:
        gfr *= 0.742
    if v["black_race"]:
        gfr *= 1.212
    return gfr


MDRD = CalculatorDef(
    id="mdrd_gfr",
    title="MDRD GFR",
    description="GFR = 175 x Cr^-1.154 x age^-0.203 (x 0.742 female, x 1.212 black).",
    tags=("nephrology", "gfr"),
    fields=(creatinine(), age(min_value=18), sex(), boolean("black_race", "Black race", synonyms=["is_black"])),
    rules=RuleSet([formula("MDRD equation", _mdrd)]),
    precision=2,
    units="mL/min/1.73m²",
    scale=gfr_scale("Levey AS, et al. Ann Intern Med 2006;145(4):247-254"),
)


# 3. CKD-EPI 2021 ─────────────────────────────────────────────────────────────

def _ckd_epi_2021(v) -> float:
    cr = v["serum_creatinine"]
    if v["sex"] is Sex.FEMALE:
        kappa, alpha, sex_coeff = 0.7, -0.241, 1.012
    else:
        kappa, alpha, sex_coeff = 0.9, -0.302, 1.0
    ratio = cr / kappa
    return (142 * min(ratio, 1) ** alpha * max(ratio, 1) ** -1.2
            * 0.9938 ** v["age"] * sex_coeff)


CKD_EPI = CalculatorDef(
    id="ckd_epi_gfr",
    title="CKD-EPI GFR (2021)",
    description="Race-free 2021 CKD-EPI creatinine equation.",
    tags=("nephrology", "gfr"),
    fields=(creatinine(), age(min_value=18), sex()),
    rules=RuleSet([formula("CKD-EPI 2021 creatinine equation", _ckd_epi_2021)]),
    precision=1,
    units="mL/min/1.73m²",
    scale=gfr_scale("Inker LA, et al. N Engl J Med 2021;385(19):1737-1749"),
)


# 4. Cockcroft-Gault creatinine clearance ─────────────────────────────────────

def _cockcroft_gault(v) -> float:
    crcl = (140 - v["age"]) * v["weight"] / (72 * v["serum_creatinine"])
    if v["sex"] is Sex.FEMALE:
        crcl *= 0.85
    return crcl


COCKCROFT_GAULT = CalculatorDef(
    id="creatinine_clearance",
    title="Creatinine Clearance (Cockcroft-Gault)",
    description="CrCl = (140 - age) x weight / (72 x Cr), x 0.85 if female.",
    tags=("nephrology", "anesthesiology", "dosing"),
    fields=(age(min_value=18, max_value=110), weight(), creatinine(), sex()),
    rules=RuleSet([formula("Cockcroft-Gault equation", _cockcroft_gault)]),
    precision=1,
    units="mL/min",
    scale=TierScale([
        (0, "Kidney Failure", "Avoid elective surgery; avoid renally cleared drugs; dialysis planning."),
        (15, "Severe", "High perioperative renal risk; major dose reductions and invasive monitoring."),
        (30, "Moderate", "Significant dose reductions for renally cleared drugs; monitor urine output."),
        (60, "Mild", "Mild dose adjustments; avoid nephrotoxic agents."),
        (90, "Normal", "Normal clearance; standard dosing."),
    ], citation="Cockcroft DW, Gault MH. Nephron 1976;16(1):31-41"),
)


# 5. CKD stage ────────────────────────────────────────────────────────────────

# KDIGO heat map: GFR category -> albuminuria category -> risk
_KDIGO_RISK = {
    "G1": {"A1": "Low", "A2": "Moderate", "A3": "High"},
    "G2": {"A1": "Low", "A2": "Moderate", "A3": "High"},
    "G3a": {"A1": "Moderate", "A2": "High", "A3": "Very High"},
    "G3b": {"A1": "High", "A2": "Very High", "A3": "Very High"},
    "G4": {"A1": "Very High", "A2": "Very High", "A3": "Very High"},
    "G5": {"A1": "Very High", "A2": "Very High", "A3": "Very High"},
}

_CKD_SCALE = gfr_scale()


def _albuminuria_category(acr: float) -> str:
    if acr < 30:
        return "A1"
    if acr <= 300:
        return "A2"
    return "A3"


def _ckd_stage_details(v, total):
    g = _CKD_SCALE.classify(total)
    a = _albuminuria_category(v["albuminuria"])
    return {"albuminuria_category": a, "kdigo_risk": _KDIGO_RISK[g][a]}


CKD_STAGE = CalculatorDef(
    id="ckd_stage",
    title="Chronic Kidney Disease Stage",
    description="KDIGO GFR category with albuminuria category and combined risk.",
    tags=("nephrology",),
    fields=(
        number("egfr", "eGFR", "mL/min/1.73m²", min_value=0, max_value=200, synonyms=["gfr"]),
        number("albuminuria", "Urine albumin-to-creatinine ratio", "mg/g", min_value=0, max_value=10000,
               synonyms=["acr", "uacr"]),
    ),
    rules=RuleSet([formula("eGFR", lambda v: v["egfr"])]),
    units="mL/min/1.73m²",
    details=_ckd_stage_details,
    scale=_CKD_SCALE,
)


DEFINITIONS: List[CalculatorDef] = [UPCR, MDRD, CKD_EPI, COCKCROFT_GAULT, CKD_STAGE]
