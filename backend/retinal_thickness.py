# retinal_thickness.py
import statistics
from typing import List, Sequence

from logger import get_logger
from models import RetinalThicknessAnalysis, RetinalThicknessInput

logger = get_logger(__name__)

# gender -> (central intercept, central slope, average intercept, average slope), per year past 40
NORMATIVE_THICKNESS = {
    "male": (270.0, 0.5, 290.0, 0.3),
    "female": (260.0, 0.4, 280.0, 0.3),
}
ATROPHY_VARIABILITY = 20.0


def expected_thickness(age: float, gender: str):
    c0, c_slope, a0, a_slope = NORMATIVE_THICKNESS[gender]
    return c0 - (age - 40) * c_slope, a0 - (age - 40) * a_slope


def volume_variability(volumes: Sequence[float]) -> float:
    if not volumes:
        return 0.0
    return statistics.pstdev(volumes)


def analyze_retinal_thickness(inp: RetinalThicknessInput) -> RetinalThicknessAnalysis:
    expected_central, expected_average = expected_thickness(inp.age, inp.gender)
    variability = volume_variability(inp.volume_data)
    central = inp.central_thickness

    if central > expected_central + 100:
        status, confidence = "edema", 0.95
        recommendation = "Macular edema detected. Urgent anti-VEGF evaluation required."
    elif central > expected_central + 50:
        status, confidence = "thick", 0.90
        recommendation = "Retinal thickening observed. Follow-up OCT within 3 months."
    elif central < expected_central - 50 and variability > ATROPHY_VARIABILITY:
        status, confidence = "atrophy", 0.85
        recommendation = "Pattern consistent with retinal atrophy. Refer for retina specialist assessment."
    elif central < expected_central - 30:
        status, confidence = "thin", 0.88
        recommendation = "Retinal thinning noted. Consider additional testing for atrophy."
    else:
        status, confidence = "normal", 0.98
        recommendation = "Retinal thickness within normal limits. Continue routine monitoring."

    risk_factors: List[str] = []
    if inp.age > 65:
        risk_factors.append("Age over 65: increased risk of age-related macular changes")
    if inp.gender == "female" and inp.age > 50:
        risk_factors.append("Female over 50: increased risk of macular thinning")

    logger.debug("Retinal thickness central=%s expected=%.1f variability=%.2f status=%s",
                 central, expected_central, variability, status)

    return RetinalThicknessAnalysis(
        status=status,
        recommendation=recommendation,
        ai_confidence=confidence,
        risk_factors=tuple(risk_factors),
        expected_central=round(expected_central, 1),
        expected_average=round(expected_average, 1),
        volume_variability=round(variability, 3),
    )
