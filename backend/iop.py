# iop.py
from logger import get_logger
from models import IOPAssessment, IOPInput
from scoring import Band, always, at_most, first_match

logger = get_logger(__name__)

REFERENCE_CORNEAL_THICKNESS_UM = 550.0
CORNEAL_CORRECTION_MMHG_PER_UM = 0.007


def corrected_pressure(pressure: float, corneal_thickness: float) -> float:
    return pressure + (corneal_thickness - REFERENCE_CORNEAL_THICKNESS_UM) * CORNEAL_CORRECTION_MMHG_PER_UM


def age_adjusted_normal(age: float) -> float:
    return 16 + (age - 40) * 0.1


def _risk_bands(normal: float):
    return [
        Band(at_most(normal), "low", "Normal pressure. Continue regular eye exams."),
        Band(at_most(normal + 5), "moderate", "Slightly elevated. Monitor closely and consider additional testing."),
        Band(at_most(normal + 10), "high", "Elevated pressure. Comprehensive glaucoma evaluation recommended."),
        Band(always, "very_high", "Significantly elevated. Urgent ophthalmologic consultation required."),
    ]


def assess_iop(inp: IOPInput) -> IOPAssessment:
    corrected = corrected_pressure(inp.pressure, inp.corneal_thickness)
    normal = age_adjusted_normal(inp.age)
    band = first_match(_risk_bands(normal), corrected)

    logger.debug("IOP raw=%.1f corrected=%.2f normal=%.2f risk=%s", inp.pressure, corrected, normal, band.value)

    return IOPAssessment(
        corrected_pressure=corrected,
        age_adjusted_normal=normal,
        risk=band.value,
        recommendation=band.recommendation,
    )
