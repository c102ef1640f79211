# visual_acuity.py
import math

from logger import get_logger
from models import VisualAcuityInput, VisualAcuityResult
from scoring import Band, InvalidMeasurementError, always, at_least, first_match

logger = get_logger(__name__)

# Decimal acuity, closed-open bands, descending.
ACUITY_CATEGORY_BANDS = [
    Band(at_least(0.8), "normal"),
    Band(at_least(0.3), "mild_impairment"),
    Band(at_least(0.1), "moderate_impairment"),
    Band(at_least(0.05), "severe_impairment"),
    Band(always, "blindness"),
]


def _fmt_distance(x: float) -> str:
    return f"{x:g}"


def calculate_visual_acuity(inp: VisualAcuityInput) -> VisualAcuityResult:
    if not (math.isfinite(inp.denominator) and math.isfinite(inp.test_distance)):
        raise InvalidMeasurementError(
            f"Snellen fraction must be finite, got {inp.test_distance}/{inp.denominator}"
        )
    if inp.denominator <= 0:
        raise InvalidMeasurementError(f"Snellen denominator must be > 0, got {inp.denominator}")
    if inp.test_distance <= 0:
        raise InvalidMeasurementError(f"Test distance must be > 0, got {inp.test_distance}")

    decimal = inp.test_distance / inp.denominator
    log_mar = math.log10(inp.denominator / inp.test_distance)
    category = first_match(ACUITY_CATEGORY_BANDS, decimal).value

    logger.debug("VA %s/%s decimal=%.3f logMAR=%.3f category=%s",
                 inp.test_distance, inp.denominator, decimal, log_mar, category)

    return VisualAcuityResult(
        decimal=decimal,
        snellen=f"{_fmt_distance(inp.test_distance)}/{_fmt_distance(inp.denominator)}",
        log_mar=log_mar,
        category=category,
    )
