# color_vision.py
from logger import get_logger
from models import ColorVisionInput, ColorVisionResult
from scoring import Band, above, always, at_least, first_match

logger = get_logger(__name__)

SEVERITY_RANK = {"none": 0, "mild": 1, "moderate": 2, "severe": 3}

COLOR_VISION_PROFILES = {
    "none": ColorVisionResult(
        deficiency_type="normal",
        severity="none",
        recommendation="Normal color vision. No further testing required.",
        occupational_impact=(),
    ),
    "mild": ColorVisionResult(
        deficiency_type="deuteranomaly",
        severity="mild",
        recommendation="Mild red-green deficiency. Confirm with Farnsworth D-15 if occupationally relevant.",
        occupational_impact=("Occasional difficulty with color-coded charts and indicators",),
    ),
    "moderate": ColorVisionResult(
        deficiency_type="deuteranomaly",
        severity="moderate",
        recommendation="Moderate red-green deficiency. Diagnostic testing and career counseling advised.",
        occupational_impact=(
            "May not meet aviation or maritime color vision standards",
            "Difficulty with electrical wiring color codes",
        ),
    ),
    "severe": ColorVisionResult(
        deficiency_type="deuteranopia",
        severity="severe",
        recommendation="Severe red-green deficiency. Occupational guidance and color-aid tools recommended.",
        occupational_impact=(
            "Excluded from commercial pilot and train driver roles",
            "Unsuitable for electrician work requiring color-code identification",
            "Consider color-identification apps or filtered lenses",
        ),
    ),
}

ISHIHARA_BANDS = [
    Band(at_least(13), "none"),
    Band(at_least(9), "mild"),
    Band(at_least(5), "moderate"),
    Band(always, "severe"),
]

FARNSWORTH_BANDS = [
    Band(above(2.0), "severe"),
    Band(above(1.5), "moderate"),
    Band(always, "none"),
]


def assess_color_vision(inp: ColorVisionInput) -> ColorVisionResult:
    severity = first_match(ISHIHARA_BANDS, inp.ishihara_score).value

    # Farnsworth only escalates the Ishihara floor.
    if inp.test_type == "diagnostic" and inp.farnsworth_score > 0:
        farnsworth_severity = first_match(FARNSWORTH_BANDS, inp.farnsworth_score).value
        if SEVERITY_RANK[farnsworth_severity] > SEVERITY_RANK[severity]:
            severity = farnsworth_severity

    logger.debug("Color vision ishihara=%s farnsworth=%s severity=%s",
                 inp.ishihara_score, inp.farnsworth_score, severity)

    return COLOR_VISION_PROFILES[severity]
