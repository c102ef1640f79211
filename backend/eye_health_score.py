# eye_health_score.py
"""
Comprehensive eye-health score.

This is a coarse screening heuristic with its own thresholds and weights. It does
not call the dedicated calculators (visual_acuity, iop, retinal_thickness,
glaucoma, diabetic_retinopathy) and its constants must not be merged with theirs.

Raw deductions accumulate first; overall, component and per-condition scores are
clamped to [0, 100] in a single final step. The category is read from the clamped
score; reported numbers are then rounded to one decimal.
"""
from typing import Dict, List

from logger import get_logger
from models import ComponentScores, ConditionRisks, EyeHealthInput, EyeHealthScore
from scoring import Band, always, at_least, first_match

logger = get_logger(__name__)

VA_THRESHOLD = 0.8
VA_DEDUCTION_PER_UNIT = 125.0
VISION_WEIGHT = 0.3

IOP_THRESHOLD = 21.0
IOP_DEDUCTION_PER_MMHG = 5.0
PRESSURE_WEIGHT = 0.25

CENTRAL_THICKNESS_RANGE = (200.0, 300.0)
THICKNESS_DEDUCTION_PER_UM = 0.5
STRUCTURE_WEIGHT = 0.2

MD_THRESHOLD = -2.0
MD_DEDUCTION_PER_DB = 5.0
FUNCTION_WEIGHT = 0.25

PSD_INSIGHT_THRESHOLD = 3.0

AGE_THRESHOLD = 60
AGE_DEDUCTION_PER_YEAR = 0.5
AGE_AMD_RISK_PER_YEAR = 1.5
AGE_GLAUCOMA_RISK_PER_YEAR = 1.0

CATEGORY_BANDS = [
    Band(at_least(90), "excellent",
         "Overall eye health is excellent. Maintain routine comprehensive examinations."),
    Band(at_least(75), "good"),
    Band(at_least(60), "fair"),
    Band(at_least(40), "poor"),
    Band(always, "critical",
         "Multiple significant findings detected. Comprehensive ophthalmologic evaluation strongly advised."),
]


def _clamp_score(x: float) -> float:
    return max(0.0, min(100.0, x))


def _reported(x: float) -> float:
    return round(_clamp_score(x), 1)


def calculate_eye_health_score(inp: EyeHealthInput) -> EyeHealthScore:
    overall = 100.0
    components: Dict[str, float] = {"vision": 100.0, "pressure": 100.0, "structure": 100.0, "function": 100.0}
    risks: Dict[str, float] = {"glaucoma": 0.0, "amd": 0.0, "diabetic_retinopathy": 0.0}
    recommendations: List[str] = []
    insights: List[str] = []

    avg_va = (inp.visual_acuity.left + inp.visual_acuity.right) / 2
    if avg_va < VA_THRESHOLD:
        deduction = (VA_THRESHOLD - avg_va) * VA_DEDUCTION_PER_UNIT
        components["vision"] -= deduction
        overall -= deduction * VISION_WEIGHT
        recommendations.append("Consider vision correction or further refractive evaluation")
        insights.append(f"Average visual acuity {avg_va:.2f} is below the {VA_THRESHOLD} functional threshold")

    avg_iop = (inp.iop.left + inp.iop.right) / 2
    if avg_iop > IOP_THRESHOLD:
        deduction = (avg_iop - IOP_THRESHOLD) * IOP_DEDUCTION_PER_MMHG
        components["pressure"] -= deduction
        overall -= deduction * PRESSURE_WEIGHT
        recommendations.append("Monitor intraocular pressure closely")
        insights.append(f"Average IOP {avg_iop:.1f} mmHg exceeds the {IOP_THRESHOLD:g} mmHg upper normal limit")

    central = inp.retinal_thickness.central
    lo, hi = CENTRAL_THICKNESS_RANGE
    if central < lo or central > hi:
        deviation = lo - central if central < lo else central - hi
        deduction = deviation * THICKNESS_DEDUCTION_PER_UM
        components["structure"] -= deduction
        overall -= deduction * STRUCTURE_WEIGHT
        recommendations.append("OCT follow-up for abnormal macular thickness")
        insights.append(f"Central retinal thickness {central:g} um is outside the {lo:g}-{hi:g} um normal range")

    md = inp.visual_field.md
    if md < MD_THRESHOLD:
        deduction = (MD_THRESHOLD - md) * MD_DEDUCTION_PER_DB
        components["function"] -= deduction
        overall -= deduction * FUNCTION_WEIGHT
        recommendations.append("Repeat visual field testing to confirm functional loss")
        insights.append(f"Visual field mean deviation {md:g} dB indicates functional loss")
    if inp.visual_field.psd > PSD_INSIGHT_THRESHOLD:
        insights.append(f"Pattern standard deviation {inp.visual_field.psd:g} dB suggests localized field loss")

    rf = inp.risk_factors
    if rf.diabetes:
        overall -= 10
        risks["diabetic_retinopathy"] = 35.0
        if inp.age > 50:
            risks["diabetic_retinopathy"] += 15
        recommendations.append("Annual diabetic retinopathy screening required")
    if rf.hypertension:
        overall -= 5
        risks["glaucoma"] += 10
        recommendations.append("Monitor for hypertensive retinopathy")
    if rf.smoking:
        overall -= 8
        risks["amd"] = 25.0
        if inp.age > 60:
            risks["amd"] += 20
        recommendations.append("Smoking cessation strongly recommended")
    if rf.family_history:
        overall -= 5
        risks["glaucoma"] += 15
        recommendations.append("Genetic counseling and enhanced screening may be beneficial")
    if rf.myopia > 6:
        overall -= 3
        risks["glaucoma"] += 8
        recommendations.append("High myopia: annual dilated retinal examination advised")

    if inp.age > AGE_THRESHOLD:
        years = inp.age - AGE_THRESHOLD
        overall -= years * AGE_DEDUCTION_PER_YEAR
        risks["amd"] += years * AGE_AMD_RISK_PER_YEAR
        risks["glaucoma"] += years * AGE_GLAUCOMA_RISK_PER_YEAR
        recommendations.append("Increase frequency of comprehensive eye exams")

    # Category is decided on the clamped score before rounding for display.
    overall = _clamp_score(overall)
    category_band = first_match(CATEGORY_BANDS, overall)
    if category_band.recommendation:
        insights.append(category_band.recommendation)

    logger.debug("Eye health overall=%s category=%s components=%s", overall, category_band.value, components)

    return EyeHealthScore(
        overall_score=_reported(overall),
        category=category_band.value,
        component_scores=ComponentScores(**{k: _reported(v) for k, v in components.items()}),
        recommendations=tuple(recommendations),
        ai_insights=tuple(insights),
        risk_assessment=ConditionRisks(**{k: _reported(v) for k, v in risks.items()}),
    )
