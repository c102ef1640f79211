# registry.py
from typing import Any, Callable, Dict, List, NamedTuple, Type

from pydantic import BaseModel

from amd import calculate_amd_lifestyle_risk, classify_amd
from color_vision import assess_color_vision
from diabetic_retinopathy import calculate_diabetic_retinopathy_risk, stage_diabetic_retinopathy
from eye_health_score import calculate_eye_health_score
from glaucoma import assess_glaucoma, calculate_glaucoma_screening_risk
from iop import assess_iop
from models import (
    AMDInput,
    AMDLifestyleInput,
    CalculatorInfo,
    ColorVisionInput,
    DiabeticRiskInput,
    EyeHealthInput,
    GlaucomaInput,
    GlaucomaScreeningInput,
    IOPInput,
    PediatricInput,
    RetinalThicknessInput,
    RetinopathyLesionInput,
    VisualAcuityInput,
)
from pediatric import assess_pediatric_vision
from retinal_thickness import analyze_retinal_thickness
from visual_acuity import calculate_visual_acuity


class Calculator(NamedTuple):
    title: str
    description: str
    input_model: Type[BaseModel]
    run: Callable[[Any], BaseModel]


CALCULATORS: Dict[str, Calculator] = {
    "visual_acuity": Calculator(
        "Visual Acuity", "Snellen, decimal and LogMAR acuity with impairment category",
        VisualAcuityInput, calculate_visual_acuity,
    ),
    "iop": Calculator(
        "IOP Assessment", "Corneal-thickness-corrected intraocular pressure evaluation",
        IOPInput, assess_iop,
    ),
    "diabetic_risk": Calculator(
        "Diabetic Retinopathy Risk", "Systemic risk factors to risk level and screening interval",
        DiabeticRiskInput, calculate_diabetic_retinopathy_risk,
    ),
    "diabetic_staging": Calculator(
        "Diabetic Retinopathy Staging", "Lesion-based staging with macular edema flag",
        RetinopathyLesionInput, stage_diabetic_retinopathy,
    ),
    "glaucoma": Calculator(
        "Glaucoma Assessment", "Structural, functional and demographic glaucoma evaluation",
        GlaucomaInput, assess_glaucoma,
    ),
    "glaucoma_screening": Calculator(
        "Glaucoma Screening Risk", "Population screening risk percentage",
        GlaucomaScreeningInput, calculate_glaucoma_screening_risk,
    ),
    "amd": Calculator(
        "AMD Classification", "Drusen and exudative signs to AMD type, stage and urgency",
        AMDInput, classify_amd,
    ),
    "amd_lifestyle": Calculator(
        "AMD Lifestyle Risk", "Lifestyle and demographic AMD risk percentage",
        AMDLifestyleInput, calculate_amd_lifestyle_risk,
    ),
    "retinal_thickness": Calculator(
        "Retinal Analysis", "Age and gender normalized OCT thickness analysis",
        RetinalThicknessInput, analyze_retinal_thickness,
    ),
    "color_vision": Calculator(
        "Color Vision", "Ishihara and Farnsworth D-15 deficiency assessment",
        ColorVisionInput, assess_color_vision,
    ),
    "pediatric": Calculator(
        "Pediatric Vision Milestones", "Age-gated reflex and visual behavior checklist",
        PediatricInput, assess_pediatric_vision,
    ),
    "comprehensive": Calculator(
        "Eye Health Score", "Overall eye health score with per-condition risk estimates",
        EyeHealthInput, calculate_eye_health_score,
    ),
}


def list_calculators() -> List[CalculatorInfo]:
    return [CalculatorInfo(id=cid, title=c.title, description=c.description) for cid, c in CALCULATORS.items()]
