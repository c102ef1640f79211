# scoring.py
"""
Shared rule-table machinery for the eye-health calculators.

A table is an ordered list of ``Band`` rows. Within one table the first row whose
predicate holds wins. Cumulative engines (diabetic risk, glaucoma) sum the winning
rows of several tables and then look the total up in a final level table;
categorical calculators (visual acuity, IOP) use a single first-match lookup.
"""
from typing import Any, Callable, List, NamedTuple, Optional, Sequence

SCORE_ENGINE_VERSION = "2026.10.19.1"


class InvalidMeasurementError(ValueError):
    """A measurement for which the formula is undefined (e.g. Snellen denominator 0)."""


class Band(NamedTuple):
    test: Callable[[float], bool]
    value: Any
    recommendation: Optional[str] = None


def below(limit: float) -> Callable[[float], bool]:
    return lambda x: x < limit


def at_most(limit: float) -> Callable[[float], bool]:
    return lambda x: x <= limit


def above(limit: float) -> Callable[[float], bool]:
    return lambda x: x > limit


def at_least(limit: float) -> Callable[[float], bool]:
    return lambda x: x >= limit


def always(_: float) -> bool:
    return True


def first_match(bands: Sequence[Band], x: float) -> Band:
    for band in bands:
        if band.test(x):
            return band
    raise LookupError(f"No band matched value {x!r}")


def banded(bands: Sequence[Band], x: float, recommendations: Optional[List[str]] = None) -> Any:
    band = first_match(bands, x)
    if band.recommendation and recommendations is not None:
        recommendations.append(band.recommendation)
    return band.value


def percent_of(score: float, max_score: float) -> float:
    return min(score / max_score * 100.0, 100.0)
