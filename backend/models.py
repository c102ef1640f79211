from pydantic import BaseModel, ConfigDict, Field
from typing import Literal, Optional, Tuple


class Record(BaseModel):
    model_config = ConfigDict(frozen=True)


class ClinicalDefaults(Record):
    """Named defaults for optional measurements."""

    corneal_thickness_um: float = 550.0
    diabetes_type: Literal[1, 2] = 2
    age_years: float = 50.0
    reference_distance_ft: float = 20.0


DEFAULTS = ClinicalDefaults()


class ScoreLineItem(Record):
    label: str
    points: float


# --------------------------------------------------
# Visual acuity / IOP
# --------------------------------------------------

class VisualAcuityInput(Record):
    denominator: float
    test_distance: float = DEFAULTS.reference_distance_ft


class VisualAcuityResult(Record):
    decimal: float
    snellen: str
    log_mar: float
    category: Literal["normal", "mild_impairment", "moderate_impairment", "severe_impairment", "blindness"]


class IOPInput(Record):
    pressure: float
    age: float
    corneal_thickness: float = DEFAULTS.corneal_thickness_um


class IOPAssessment(Record):
    corrected_pressure: float
    age_adjusted_normal: float
    risk: Literal["low", "moderate", "high", "very_high"]
    recommendation: str


# --------------------------------------------------
# Diabetic retinopathy
# --------------------------------------------------

class DiabeticRiskInput(Record):
    duration_years: float
    hba1c: float
    systolic_bp: float
    diastolic_bp: float
    cholesterol: float
    smoking: bool = False
    diabetes_type: Literal[1, 2] = DEFAULTS.diabetes_type
    age: float = DEFAULTS.age_years


class DiabeticRiskAssessment(Record):
    risk_score: float
    risk_level: Literal["low", "moderate", "high", "very_high"]
    annual_risk: float
    mean_bp: float
    score_items: Tuple[ScoreLineItem, ...]
    recommendations: Tuple[str, ...]
    screening_interval: int


class RetinopathyLesionInput(Record):
    microaneurysms: int = 0
    hemorrhages: int = 0
    hard_exudates: int = 0
    cotton_wool_spots: int = 0
    venous_beading: bool = False
    irma: bool = False
    neovascularization: bool = False
    macular_edema: bool = False


class RetinopathyStaging(Record):
    stage: Literal["none", "mild", "moderate", "severe", "proliferative"]
    macular_edema: bool
    risk_score: float
    recommendations: Tuple[str, ...]
    follow_up_interval: int


# --------------------------------------------------
# Glaucoma
# --------------------------------------------------

Ethnicity = Literal["caucasian", "african", "hispanic", "asian", "other"]


class GlaucomaInput(Record):
    iop: float
    cup_disc_ratio: float
    rnfl_thickness: float
    visual_field_md: float
    age: float
    family_history: bool = False
    ethnicity: Ethnicity = "other"


class GlaucomaAssessment(Record):
    risk_level: Literal["low", "moderate", "high", "severe"]
    risk_score: float
    cup_disc_ratio: float
    rnfl_thickness: float
    visual_field_defects: bool
    iop: float
    progression_rate: float
    treatment_recommendation: str
    score_items: Tuple[ScoreLineItem, ...]


class GlaucomaScreeningInput(Record):
    age: float
    iop: float
    cup_disc_ratio: float
    family_history: bool = False
    ethnicity: Ethnicity = "other"
    myopia: float = 0.0


class ScreeningRisk(Record):
    risk_score: float
    risk_percent: float
    score_items: Tuple[ScoreLineItem, ...]


# --------------------------------------------------
# AMD
# --------------------------------------------------

DrusenSize = Literal["none", "small", "medium", "large"]


class AMDInput(Record):
    drusen_size: DrusenSize
    drusen_area: float = 0.0
    pigment_changes: bool = False
    geographic_atrophy: bool = False
    neovascularization: bool = False
    subretinal_fluid: bool = False
    age: float = DEFAULTS.age_years


class AMDClassification(Record):
    amd_type: Literal["dry", "wet", "geographic_atrophy"]
    stage: Literal["early", "intermediate", "advanced"]
    drusen_size: DrusenSize
    pigment_changes: bool
    neovascularization: bool
    central_vision_threat: bool
    treatment_urgency: Literal["routine", "urgent", "emergent"]


class AMDLifestyleInput(Record):
    age: float
    smoking: bool = False
    family_history: bool = False
    diet: Literal["poor", "average", "good"] = "average"
    supplements: bool = False
    sun_exposure: Literal["low", "moderate", "high"] = "moderate"


# --------------------------------------------------
# Retinal thickness / color vision / pediatric
# --------------------------------------------------

class RetinalThicknessInput(Record):
    central_thickness: float
    average_thickness: float
    volume_data: Tuple[float, ...] = ()
    age: float
    gender: Literal["male", "female"]


class RetinalThicknessAnalysis(Record):
    status: Literal["normal", "thin", "thick", "edema", "atrophy"]
    recommendation: str
    ai_confidence: float
    risk_factors: Tuple[str, ...]
    expected_central: float
    expected_average: float
    volume_variability: float


class ColorVisionInput(Record):
    ishihara_score: int
    farnsworth_score: float = 0.0
    test_type: Literal["screening", "diagnostic"] = "screening"


class ColorVisionResult(Record):
    deficiency_type: Literal["normal", "deuteranomaly", "deuteranopia"]
    severity: Literal["none", "mild", "moderate", "severe"]
    recommendation: str
    occupational_impact: Tuple[str, ...]


class VisualBehavior(Record):
    fixation: bool = False
    following: bool = False
    reaching: bool = False
    social_smiling: bool = False


class Reflexes(Record):
    pupillary: bool = False
    blink: bool = False
    optokinetic: bool = False


class PediatricInput(Record):
    age_months: float
    visual_behavior: VisualBehavior = VisualBehavior()
    reflexes: Reflexes = Reflexes()


class PediatricAssessment(Record):
    development_status: Literal["normal", "delayed", "concerning"]
    milestones: Tuple[str, ...]
    recommendations: Tuple[str, ...]
    follow_up_interval: int


# --------------------------------------------------
# Aggregate eye-health score
# --------------------------------------------------

class EyePair(Record):
    left: float
    right: float


class ThicknessPair(Record):
    central: float
    average: float


class VisualField(Record):
    md: float
    psd: float = 0.0


class RiskFactors(Record):
    diabetes: bool = False
    hypertension: bool = False
    smoking: bool = False
    family_history: bool = False
    myopia: float = 0.0


class EyeHealthInput(Record):
    visual_acuity: EyePair
    iop: EyePair
    retinal_thickness: ThicknessPair
    visual_field: VisualField
    age: float
    risk_factors: RiskFactors = RiskFactors()


class ComponentScores(Record):
    vision: float = 100.0
    pressure: float = 100.0
    structure: float = 100.0
    function: float = 100.0


class ConditionRisks(Record):
    glaucoma: float = 0.0
    amd: float = 0.0
    diabetic_retinopathy: float = 0.0


class EyeHealthScore(Record):
    overall_score: float
    category: Literal["excellent", "good", "fair", "poor", "critical"]
    component_scores: ComponentScores
    recommendations: Tuple[str, ...]
    ai_insights: Tuple[str, ...]
    risk_assessment: ConditionRisks


# --------------------------------------------------
# Service envelopes
# --------------------------------------------------

class CalculatorInfo(Record):
    id: str
    title: str
    description: str


class EyeHealthResponse(Record):
    api_version: str
    score_engine_version: str
    assessment: EyeHealthScore
    disclaimer: str


class ReportRequest(Record):
    patient_name: Optional[str] = Field(default=None, max_length=60)
    assessment: EyeHealthInput
