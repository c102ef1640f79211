# amd.py
from typing import List

from logger import get_logger
from models import AMDClassification, AMDInput, AMDLifestyleInput, ScoreLineItem, ScreeningRisk
from scoring import Band, above, always, first_match, percent_of

logger = get_logger(__name__)

EARLY_MAX_DRUSEN_AREA = 125.0
INTERMEDIATE_MAX_LARGE_DRUSEN_AREA = 250.0


def _classify_type(inp: AMDInput):
    """Priority order: exudative signs, then atrophy, then dry. Returns (type, threat, urgency)."""
    if inp.neovascularization or inp.subretinal_fluid:
        return "wet", True, "emergent"
    if inp.geographic_atrophy:
        return "geographic_atrophy", True, "urgent"
    return "dry", False, "routine"


def classify_amd(inp: AMDInput) -> AMDClassification:
    amd_type, threat, urgency = _classify_type(inp)

    if inp.drusen_size == "small" and inp.drusen_area < EARLY_MAX_DRUSEN_AREA:
        stage = "early"
    elif inp.drusen_size == "medium" or (
        inp.drusen_size == "large" and inp.drusen_area < INTERMEDIATE_MAX_LARGE_DRUSEN_AREA
    ):
        stage = "intermediate"
        if inp.pigment_changes:
            threat = True
    else:
        stage = "advanced"
        threat = True
        if urgency == "routine":
            urgency = "urgent"

    logger.debug("AMD type=%s stage=%s urgency=%s", amd_type, stage, urgency)

    return AMDClassification(
        amd_type=amd_type,
        stage=stage,
        drusen_size=inp.drusen_size,
        pigment_changes=inp.pigment_changes,
        neovascularization=inp.neovascularization,
        central_vision_threat=threat,
        treatment_urgency=urgency,
    )


# --------------------------------------------------
# Lifestyle risk (percentage)
# --------------------------------------------------

LIFESTYLE_MAX_POINTS = 18.0
LIFESTYLE_AGE_BANDS = [Band(above(75), 5), Band(above(65), 4), Band(above(55), 3), Band(above(45), 2), Band(always, 0)]
DIET_POINTS = {"poor": 2, "average": 1, "good": 0}
SUN_EXPOSURE_POINTS = {"high": 2, "moderate": 1, "low": 0}


def calculate_amd_lifestyle_risk(inp: AMDLifestyleInput) -> ScreeningRisk:
    items: List[ScoreLineItem] = []

    age_points = first_match(LIFESTYLE_AGE_BANDS, inp.age).value
    if age_points:
        items.append(ScoreLineItem(label=f"Age ({inp.age:g})", points=age_points))
    if inp.smoking:
        items.append(ScoreLineItem(label="Current smoker", points=4))
    if inp.family_history:
        items.append(ScoreLineItem(label="Family history of AMD", points=3))
    if DIET_POINTS[inp.diet]:
        items.append(ScoreLineItem(label=f"Diet ({inp.diet})", points=DIET_POINTS[inp.diet]))
    if not inp.supplements:
        items.append(ScoreLineItem(label="No AREDS supplements", points=1))
    if SUN_EXPOSURE_POINTS[inp.sun_exposure]:
        items.append(ScoreLineItem(label=f"Sun exposure ({inp.sun_exposure})", points=SUN_EXPOSURE_POINTS[inp.sun_exposure]))

    score = sum(it.points for it in items)
    return ScreeningRisk(
        risk_score=score,
        risk_percent=round(percent_of(score, LIFESTYLE_MAX_POINTS), 1),
        score_items=tuple(items),
    )
