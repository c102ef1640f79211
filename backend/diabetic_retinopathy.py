# diabetic_retinopathy.py
"""
Diabetic retinopathy risk (systemic risk factors) and staging (fundus lesions).

The risk engine sums one banded contribution per factor plus flat add-ons, then maps
the total through the level table. ``annual_risk`` interpolates linearly inside each
level band; the very-high band is capped at 85%.
"""
from typing import List

from logger import get_logger
from models import (
    DiabeticRiskAssessment,
    DiabeticRiskInput,
    RetinopathyLesionInput,
    RetinopathyStaging,
    ScoreLineItem,
)
from scoring import Band, always, at_most, below, first_match, banded

logger = get_logger(__name__)

DURATION_BANDS = [
    Band(below(5), 1),
    Band(below(10), 3),
    Band(below(15), 5),
    Band(below(20), 7),
    Band(always, 10),
]

HBA1C_BANDS = [
    Band(below(7), 1, "Excellent glycemic control. Maintain current diabetes management."),
    Band(below(8), 3, "Good glycemic control. Minor optimization toward HbA1c < 7% may help."),
    Band(below(9), 5, "Suboptimal glycemic control. Intensify diabetes management."),
    Band(below(10), 7, "Poor glycemic control. Urgent review of diabetes treatment plan."),
    Band(always, 10, "Very poor glycemic control. Immediate endocrinology referral recommended."),
]

MEAN_BP_BANDS = [
    Band(below(93), 1),
    Band(below(100), 2),
    Band(below(110), 4, "Blood pressure elevated. Optimize antihypertensive therapy."),
    Band(always, 6, "Blood pressure markedly elevated. Urgent hypertension management required."),
]

CHOLESTEROL_BANDS = [
    Band(below(200), 1),
    Band(below(240), 2),
    Band(always, 4),
]

SMOKING_POINTS = 3
TYPE_1_POINTS = 2
AGE_OVER_65_POINTS = 1
SMOKING_RECOMMENDATION = "Smoking cessation strongly recommended to reduce retinopathy progression."

# (level, annual risk formula, screening interval months, level recommendation)
RISK_LEVEL_BANDS = [
    Band(at_most(8), ("low", lambda s: 2 + 0.5 * s, 24),
         "Low risk. Continue routine diabetic eye screening every 2 years."),
    Band(at_most(15), ("moderate", lambda s: 6 + 1.5 * (s - 8), 12),
         "Moderate risk. Annual dilated fundus examination recommended."),
    Band(at_most(22), ("high", lambda s: 17 + 2 * (s - 15), 6),
         "High risk. Retinal examination every 6 months with fundus photography."),
    Band(always, ("very_high", lambda s: min(45 + 2.5 * (s - 22), 85), 3),
         "Very high risk. Retina specialist review every 3 months."),
]

GENERAL_RECOMMENDATIONS = (
    "Keep HbA1c below 7% where safely achievable.",
    "Keep blood pressure below 130/80 mmHg.",
    "Report any sudden change in vision immediately.",
)


def mean_blood_pressure(systolic: float, diastolic: float) -> float:
    return (systolic + 2 * diastolic) / 3


def risk_level_for_score(score: float) -> str:
    return first_match(RISK_LEVEL_BANDS, score).value[0]


def annual_risk(score: float) -> float:
    _, formula, _ = first_match(RISK_LEVEL_BANDS, score).value
    return formula(score)


def screening_interval(score: float) -> int:
    return first_match(RISK_LEVEL_BANDS, score).value[2]


def calculate_diabetic_retinopathy_risk(inp: DiabeticRiskInput) -> DiabeticRiskAssessment:
    recommendations: List[str] = []
    items: List[ScoreLineItem] = []
    mean_bp = mean_blood_pressure(inp.systolic_bp, inp.diastolic_bp)

    for label, bands, value in (
        (f"Diabetes duration ({inp.duration_years:g} years)", DURATION_BANDS, inp.duration_years),
        (f"HbA1c ({inp.hba1c:g}%)", HBA1C_BANDS, inp.hba1c),
        (f"Mean blood pressure ({mean_bp:.1f} mmHg)", MEAN_BP_BANDS, mean_bp),
        (f"Total cholesterol ({inp.cholesterol:g} mg/dL)", CHOLESTEROL_BANDS, inp.cholesterol),
    ):
        items.append(ScoreLineItem(label=label, points=banded(bands, value, recommendations)))

    if inp.smoking:
        items.append(ScoreLineItem(label="Current smoker", points=SMOKING_POINTS))
        recommendations.append(SMOKING_RECOMMENDATION)
    if inp.diabetes_type == 1:
        items.append(ScoreLineItem(label="Type 1 diabetes", points=TYPE_1_POINTS))
    if inp.age > 65:
        items.append(ScoreLineItem(label=f"Age over 65 ({inp.age:g})", points=AGE_OVER_65_POINTS))

    score = sum(it.points for it in items)
    level_band = first_match(RISK_LEVEL_BANDS, score)
    level, formula, interval = level_band.value
    recommendations.append(level_band.recommendation)
    recommendations.extend(GENERAL_RECOMMENDATIONS)

    logger.debug("DR risk score=%s level=%s", score, level)

    return DiabeticRiskAssessment(
        risk_score=score,
        risk_level=level,
        annual_risk=round(formula(score), 1),
        mean_bp=round(mean_bp, 1),
        score_items=tuple(items),
        recommendations=tuple(recommendations),
        screening_interval=interval,
    )


# --------------------------------------------------
# Lesion-based staging
# --------------------------------------------------

LESION_WEIGHTS = {
    "microaneurysms": 0.1,
    "hemorrhages": 0.2,
    "hard_exudates": 0.15,
    "cotton_wool_spots": 0.3,
}
VENOUS_BEADING_POINTS = 2.0
IRMA_POINTS = 2.5
NEOVASCULARIZATION_POINTS = 5.0

STAGE_BANDS = [
    Band(at_most(0), ("none", 12, ("No diabetic retinopathy detected. Continue annual screening.",))),
    Band(below(2), ("mild", 12, (
        "Mild non-proliferative diabetic retinopathy. Annual dilated examination.",
        "Optimize glycemic and blood pressure control.",
    ))),
    Band(below(5), ("moderate", 6, (
        "Moderate non-proliferative diabetic retinopathy. Re-examine in 6 months.",
        "Consider fundus photography to document progression.",
    ))),
    Band(below(8), ("severe", 3, (
        "Severe non-proliferative diabetic retinopathy. Retina specialist referral.",
        "Evaluate for panretinal photocoagulation.",
    ))),
    Band(always, ("proliferative", 1, (
        "Proliferative diabetic retinopathy. Urgent retina specialist referral.",
        "Panretinal photocoagulation or anti-VEGF therapy indicated.",
    ))),
]

MACULAR_EDEMA_RECOMMENDATION = "Macular edema present. Anti-VEGF injection therapy recommended."


def lesion_score(inp: RetinopathyLesionInput) -> float:
    score = sum(getattr(inp, field) * weight for field, weight in LESION_WEIGHTS.items())
    if inp.venous_beading:
        score += VENOUS_BEADING_POINTS
    if inp.irma:
        score += IRMA_POINTS
    if inp.neovascularization:
        score += NEOVASCULARIZATION_POINTS
    return score


def stage_diabetic_retinopathy(inp: RetinopathyLesionInput) -> RetinopathyStaging:
    score = lesion_score(inp)
    stage, follow_up, stage_recs = first_match(STAGE_BANDS, score).value
    recommendations = list(stage_recs)

    if inp.macular_edema:
        recommendations.append(MACULAR_EDEMA_RECOMMENDATION)
        follow_up = min(follow_up, 1)

    logger.debug("DR stage score=%.2f stage=%s edema=%s", score, stage, inp.macular_edema)

    return RetinopathyStaging(
        stage=stage,
        macular_edema=inp.macular_edema,
        risk_score=round(score, 2),
        recommendations=tuple(recommendations),
        follow_up_interval=follow_up,
    )
