# normalizer.py
"""
Physiological range clamping for input records.

Out-of-range numbers are clamped silently (a WARNING is logged), never rejected.
Booleans, enum strings and un-ranged fields pass through unchanged.
"""
from typing import Any, Dict, Tuple

from pydantic import BaseModel

from logger import get_logger

logger = get_logger(__name__)

Range = Tuple[float, float]

PHYSIOLOGICAL_RANGES: Dict[str, Dict[str, Range]] = {
    "IOPInput": {
        "pressure": (0.0, 80.0),
        "age": (0.0, 120.0),
        "corneal_thickness": (350.0, 750.0),
    },
    "DiabeticRiskInput": {
        "duration_years": (0.0, 80.0),
        "hba1c": (3.0, 20.0),
        "systolic_bp": (60.0, 260.0),
        "diastolic_bp": (30.0, 160.0),
        "cholesterol": (50.0, 600.0),
        "age": (0.0, 120.0),
    },
    "RetinopathyLesionInput": {
        "microaneurysms": (0, 500),
        "hemorrhages": (0, 500),
        "hard_exudates": (0, 500),
        "cotton_wool_spots": (0, 100),
    },
    "GlaucomaInput": {
        "iop": (0.0, 80.0),
        "cup_disc_ratio": (0.0, 1.0),
        "rnfl_thickness": (0.0, 200.0),
        "visual_field_md": (-35.0, 5.0),
        "age": (0.0, 120.0),
    },
    "GlaucomaScreeningInput": {
        "age": (0.0, 120.0),
        "iop": (0.0, 80.0),
        "cup_disc_ratio": (0.0, 1.0),
        "myopia": (0.0, 30.0),
    },
    "AMDInput": {
        "drusen_area": (0.0, 10000.0),
        "age": (0.0, 120.0),
    },
    "AMDLifestyleInput": {
        "age": (0.0, 120.0),
    },
    "RetinalThicknessInput": {
        "central_thickness": (0.0, 1000.0),
        "average_thickness": (0.0, 1000.0),
        "volume_data": (0.0, 1000.0),
        "age": (0.0, 120.0),
    },
    "ColorVisionInput": {
        "ishihara_score": (0, 38),
        "farnsworth_score": (0.0, 10.0),
    },
    "PediatricInput": {
        "age_months": (0.0, 216.0),
    },
    "EyeHealthInput": {
        "visual_acuity.left": (0.0, 2.0),
        "visual_acuity.right": (0.0, 2.0),
        "iop.left": (0.0, 80.0),
        "iop.right": (0.0, 80.0),
        "retinal_thickness.central": (0.0, 1000.0),
        "retinal_thickness.average": (0.0, 1000.0),
        "visual_field.md": (-35.0, 5.0),
        "visual_field.psd": (0.0, 20.0),
        "age": (0.0, 120.0),
        "risk_factors.myopia": (0.0, 30.0),
    },
}


def clamp(value: float, lo: float, hi: float) -> float:
    return max(lo, min(value, hi))


def _clamp_number(path: str, value: Any, bounds: Range) -> Any:
    clamped = clamp(value, *bounds)
    if clamped != value:
        logger.warning("Clamped %s from %s to %s (range %s..%s)", path, value, clamped, *bounds)
    return clamped


def _normalize_model(model: BaseModel, ranges: Dict[str, Range], prefix: str) -> BaseModel:
    updates: Dict[str, Any] = {}
    for name, value in model:
        path = f"{prefix}{name}"
        if isinstance(value, BaseModel):
            nested = _normalize_model(value, ranges, f"{path}.")
            if nested is not value:
                updates[name] = nested
            continue
        bounds = ranges.get(path)
        # bool is an int subclass; flags are never clamped
        if bounds is None or isinstance(value, (bool, str)):
            continue
        if isinstance(value, tuple):
            clamped = tuple(_clamp_number(f"{path}[{i}]", v, bounds) for i, v in enumerate(value))
        else:
            clamped = _clamp_number(path, value, bounds)
        if clamped != value:
            updates[name] = clamped
    if not updates:
        return model
    return model.model_copy(update=updates)


def normalize(record: BaseModel) -> BaseModel:
    """Return ``record`` with every ranged numeric field clamped; unchanged records are returned as-is."""
    ranges = PHYSIOLOGICAL_RANGES.get(type(record).__name__, {})
    return _normalize_model(record, ranges, "")
