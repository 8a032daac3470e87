"""
Anthropometric and metabolic calculators.
"""

from enum import Enum
from typing import List

from ..engine import CalculatorDef
from ..fields import Sex, age, choice, height, sex, weight
from ..scoring import RuleSet, formula, round_half_up
from ..tiers import TierScale


# 1. BMI ──────────────────────────────────────────────────────────────────────
BMI = CalculatorDef(
    id="bmi",
    title="Body Mass Index",
    description="BMI = weight / height^2 (kg/m²).",
    tags=("general",),
    fields=(weight(), height()),
    rules=RuleSet([formula("BMI = weight / height^2", lambda v: v["weight"] / (v["height"] / 100) ** 2)]),
    precision=2,
    units="kg/m²",
    scale=TierScale([
        (0, "Underweight", "Assess nutritional status and underlying causes of low weight."),
        (18.5, "Normal weight", "Healthy weight range; maintain current lifestyle."),
        (25, "Overweight", "Lifestyle advice on diet and physical activity."),
        (30, "Obesity class I", "Weight management programme; screen for comorbidities."),
        (35, "Obesity class II", "Intensive weight management; consider pharmacotherapy."),
        (40, "Obesity class III", "Consider referral for bariatric assessment."),
    ], citation="WHO Technical Report Series 894, 2000"),
)


# 2. Ideal body weight (Devine) ───────────────────────────────────────────────

def _devine(v) -> float:
    base = 45.5 if v["sex"] is Sex.FEMALE else 50.0
    return base + 2.3 * (v["height"] / 2.54 - 60)


IDEAL_BODY_WEIGHT = CalculatorDef(
    id="ideal_body_weight",
    title="Ideal Body Weight (Devine)",
    description="50 kg (male) or 45.5 kg (female) + 2.3 kg per inch over 5 feet.",
    tags=("general", "dosing"),
    fields=(height(), sex()),
    rules=RuleSet([formula("Devine formula", _devine)]),
    precision=2,
    units="kg",
    scale=TierScale([
        (0, "Calculated", "Use for drug dosing and ventilator tidal volume targets."),
    ], citation="Devine BJ. Drug Intell Clin Pharm 1974;8:650-655"),
)


# 3. Basal metabolic rate (Mifflin-St Jeor) ───────────────────────────────────

def _mifflin(v) -> float:
    bmr = 10 * v["weight"] + 6.25 * v["height"] - 5 * v["age"]
    return bmr - 161 if v["sex"] is Sex.FEMALE else bmr + 5


MIFFLIN_BMR = CalculatorDef(
    id="mifflin_bmr",
    title="Basal Metabolic Rate (Mifflin-St Jeor)",
    description="10 x weight + 6.25 x height - 5 x age, +5 (male) or -161 (female).",
    tags=("general", "nutrition"),
    fields=(weight(), height(), age(), sex()),
    rules=RuleSet([formula("Mifflin-St Jeor equation", _mifflin)]),
    precision=2,
    units="kcal/day",
    scale=TierScale([
        (0, "Calculated", "Resting energy expenditure; multiply by an activity factor for daily needs."),
    ], citation="Mifflin MD, et al. Am J Clin Nutr 1990;51(2):241-247"),
)



# 4. Basal metabolic rate (Harris-Benedict, revised) ──────────────────────────

class ActivityLevel(str, Enum):
    SEDENTARY = "sedentary"
    LIGHT = "light"
    MODERATE = "moderate"
    VERY_ACTIVE = "very_active"
    EXTRA_ACTIVE = "extra_active"


_ACTIVITY_FACTORS = {
    ActivityLevel.SEDENTARY: 1.2,
    ActivityLevel.LIGHT: 1.375,
    ActivityLevel.MODERATE: 1.55,
    ActivityLevel.VERY_ACTIVE: 1.725,
    ActivityLevel.EXTRA_ACTIVE: 1.9,
}


def _harris_benedict(v) -> float:
    if v["sex"] is Sex.FEMALE:
        return 447.593 + 9.247 * v["weight"] + 3.098 * v["height"] - 4.330 * v["age"]
    return 88.362 + 13.397 * v["weight"] + 4.799 * v["height"] - 5.677 * v["age"]


HARRIS_BENEDICT = CalculatorDef(
    id="harris_benedict",
    title="Basal Metabolic Rate (Harris-Benedict)",
    description="Revised Harris-Benedict equation; daily needs scale the BMR by an activity factor.",
    tags=("general", "nutrition"),
    fields=(weight(), height(), age(), sex(),
            choice("activity", "Activity level", ActivityLevel, default=ActivityLevel.SEDENTARY)),
    rules=RuleSet([formula("Harris-Benedict equation", _harris_benedict)]),
    precision=2,
    units="kcal/day",
    details=lambda v, total: {
        "daily_needs_kcal": round_half_up(_harris_benedict(v) * _ACTIVITY_FACTORS[v["activity"]], 1),
    },
    scale=TierScale([
        (0, "Calculated", "Resting energy expenditure; daily_needs_kcal applies the activity factor."),
    ], citation="Roza AM, Shizgal HM. Am J Clin Nutr 1984;40(1):168-182"),
)


DEFINITIONS: List[CalculatorDef] = [BMI, IDEAL_BODY_WEIGHT, MIFFLIN_BMR, HARRIS_BENEDICT]
