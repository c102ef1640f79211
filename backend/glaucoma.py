# glaucoma.py
from typing import List, Optional, Sequence

from logger import get_logger
from models import (
    GlaucomaAssessment,
    GlaucomaInput,
    GlaucomaScreeningInput,
    ScoreLineItem,
    ScreeningRisk,
)
from scoring import Band, above, always, below, first_match, percent_of

logger = get_logger(__name__)

IOP_BANDS = [Band(above(28), 3), Band(above(24), 2), Band(above(21), 1), Band(always, 0)]
CUP_DISC_BANDS = [Band(above(0.8), 3), Band(above(0.6), 2), Band(above(0.5), 1), Band(always, 0)]
# Thinner RNFL is worse.
RNFL_BANDS = [Band(below(60), 3), Band(below(70), 2), Band(below(80), 1), Band(always, 0)]
VISUAL_FIELD_DEFECT_MD = -2.0
VISUAL_FIELD_BANDS = [Band(below(-12), 3), Band(below(-6), 2), Band(always, 1)]
AGE_BANDS = [Band(above(70), 2), Band(above(60), 1), Band(always, 0)]
FAMILY_HISTORY_POINTS = 2
ETHNICITY_POINTS = {"african": 2, "hispanic": 1}

# (level, progression rate) with the treatment target recommendation.
RISK_LEVEL_BANDS = [
    Band(below(3), ("low", 0.1),
         "No treatment required. Routine monitoring with annual IOP and optic nerve review."),
    Band(below(6), ("moderate", 0.3),
         "Consider treatment. Target IOP reduction of 20% from baseline."),
    Band(below(10), ("high", 0.6),
         "Initiate treatment. Target IOP reduction of 30% from baseline."),
    Band(always, ("severe", 1.0),
         "Aggressive treatment required. Target IOP reduction of 40% or more; consider surgical intervention."),
]


def _item(items: List[ScoreLineItem], label: str, bands: Sequence[Band], value: float) -> None:
    points = first_match(bands, value).value
    if points:
        items.append(ScoreLineItem(label=label, points=points))


def assess_glaucoma(inp: GlaucomaInput) -> GlaucomaAssessment:
    items: List[ScoreLineItem] = []
    _item(items, f"IOP ({inp.iop:g} mmHg)", IOP_BANDS, inp.iop)
    _item(items, f"Cup-to-disc ratio ({inp.cup_disc_ratio:g})", CUP_DISC_BANDS, inp.cup_disc_ratio)
    _item(items, f"RNFL thickness ({inp.rnfl_thickness:g} um)", RNFL_BANDS, inp.rnfl_thickness)

    visual_field_defects = inp.visual_field_md < VISUAL_FIELD_DEFECT_MD
    if visual_field_defects:
        _item(items, f"Visual field MD ({inp.visual_field_md:g} dB)", VISUAL_FIELD_BANDS, inp.visual_field_md)

    _item(items, f"Age ({inp.age:g})", AGE_BANDS, inp.age)
    if inp.family_history:
        items.append(ScoreLineItem(label="Family history of glaucoma", points=FAMILY_HISTORY_POINTS))
    ethnicity_points = ETHNICITY_POINTS.get(inp.ethnicity, 0)
    if ethnicity_points:
        items.append(ScoreLineItem(label=f"Ethnicity ({inp.ethnicity})", points=ethnicity_points))

    score = sum(it.points for it in items)
    level_band = first_match(RISK_LEVEL_BANDS, score)
    level, progression_rate = level_band.value

    logger.debug("Glaucoma score=%s level=%s", score, level)

    return GlaucomaAssessment(
        risk_level=level,
        risk_score=score,
        cup_disc_ratio=inp.cup_disc_ratio,
        rnfl_thickness=inp.rnfl_thickness,
        visual_field_defects=visual_field_defects,
        iop=inp.iop,
        progression_rate=progression_rate,
        treatment_recommendation=level_band.recommendation,
        score_items=tuple(items),
    )


# --------------------------------------------------
# Population screening risk (percentage)
# --------------------------------------------------

SCREENING_MAX_POINTS = 20.0
SCREENING_AGE_BANDS = [Band(above(60), 3), Band(above(40), 2), Band(above(30), 1), Band(always, 0)]
SCREENING_IOP_BANDS = [Band(above(25), 4), Band(above(21), 3), Band(above(18), 2), Band(above(15), 1), Band(always, 0)]
SCREENING_CUP_DISC_BANDS = [Band(above(0.7), 4), Band(above(0.5), 3), Band(above(0.3), 2), Band(always, 0)]
SCREENING_MYOPIA_BANDS = [Band(above(6), 2), Band(above(3), 1), Band(always, 0)]
SCREENING_FAMILY_HISTORY_POINTS = 3


def calculate_glaucoma_screening_risk(inp: GlaucomaScreeningInput) -> ScreeningRisk:
    items: List[ScoreLineItem] = []
    _item(items, f"Age ({inp.age:g})", SCREENING_AGE_BANDS, inp.age)
    _item(items, f"IOP ({inp.iop:g} mmHg)", SCREENING_IOP_BANDS, inp.iop)
    _item(items, f"Cup-to-disc ratio ({inp.cup_disc_ratio:g})", SCREENING_CUP_DISC_BANDS, inp.cup_disc_ratio)
    if inp.family_history:
        items.append(ScoreLineItem(label="Family history of glaucoma", points=SCREENING_FAMILY_HISTORY_POINTS))
    ethnicity_points: Optional[int] = ETHNICITY_POINTS.get(inp.ethnicity)
    if ethnicity_points:
        items.append(ScoreLineItem(label=f"Ethnicity ({inp.ethnicity})", points=ethnicity_points))
    _item(items, f"Myopia ({inp.myopia:g} D)", SCREENING_MYOPIA_BANDS, inp.myopia)

    score = sum(it.points for it in items)
    return ScreeningRisk(
        risk_score=score,
        risk_percent=round(percent_of(score, SCREENING_MAX_POINTS), 1),
        score_items=tuple(items),
    )
