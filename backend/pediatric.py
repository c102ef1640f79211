# pediatric.py
"""
Age-gated pediatric visual milestone checks.

Gates run in age order. A failed gate may only raise the development status
(normal < delayed < concerning) and may only shorten the follow-up interval.
"""
from typing import List, NamedTuple, Optional

from logger import get_logger
from models import PediatricAssessment, PediatricInput

logger = get_logger(__name__)

STATUS_RANK = {"normal": 0, "delayed": 1, "concerning": 2}


class MilestoneGate(NamedTuple):
    min_age_months: float
    behavior: str
    milestone: str
    failed_status: str
    recommendations: tuple
    follow_up_interval: int


REFLEX_GATE_AGE_MONTHS = 2
REFLEX_FAILURE_RECOMMENDATIONS = (
    "Absent pupillary or blink reflex. Urgent pediatric ophthalmology referral.",
    "Neurological evaluation recommended.",
)

BEHAVIOR_GATES = [
    MilestoneGate(6, "fixation", "Steady fixation on faces and objects", "delayed", (
        "Fixation not established. Vision therapy evaluation recommended.",
        "Check refraction and rule out media opacity.",
    ), 3),
    MilestoneGate(12, "following", "Smooth tracking of moving objects", "delayed", (
        "Visual following delayed. Begin eye-tracking exercises.",
        "Orthoptic assessment for strabismus.",
    ), 3),
    MilestoneGate(18, "reaching", "Visually guided reaching", "delayed", (
        "Visually guided reaching delayed. Occupational therapy referral.",
    ), 6),
    MilestoneGate(24, "social_smiling", "Responsive social smiling", "concerning", (
        "Absent social visual engagement. Developmental pediatrics referral.",
        "Consider evaluation for cortical visual impairment.",
    ), 3),
]


def _escalate(current: str, candidate: str) -> str:
    return candidate if STATUS_RANK[candidate] > STATUS_RANK[current] else current


def _shorter(current: Optional[int], candidate: int) -> int:
    return candidate if current is None else min(current, candidate)


def assess_pediatric_vision(inp: PediatricInput) -> PediatricAssessment:
    status = "normal"
    milestones: List[str] = []
    recommendations: List[str] = []
    follow_up: Optional[int] = None

    if inp.age_months >= REFLEX_GATE_AGE_MONTHS:
        if not (inp.reflexes.pupillary and inp.reflexes.blink):
            status = _escalate(status, "concerning")
            recommendations.extend(REFLEX_FAILURE_RECOMMENDATIONS)
            follow_up = _shorter(follow_up, 1)
        else:
            milestones.append("Pupillary and blink reflexes present")
        if inp.reflexes.optokinetic:
            milestones.append("Optokinetic nystagmus present")

    for gate in BEHAVIOR_GATES:
        if inp.age_months < gate.min_age_months:
            break
        if getattr(inp.visual_behavior, gate.behavior):
            milestones.append(gate.milestone)
            continue
        status = _escalate(status, gate.failed_status)
        recommendations.extend(gate.recommendations)
        follow_up = _shorter(follow_up, gate.follow_up_interval)

    if follow_up is None:
        follow_up = 6 if inp.age_months < 36 else 12

    logger.debug("Pediatric age=%s months status=%s follow_up=%s", inp.age_months, status, follow_up)

    return PediatricAssessment(
        development_status=status,
        milestones=tuple(milestones),
        recommendations=tuple(recommendations),
        follow_up_interval=follow_up,
    )
