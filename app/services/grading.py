# app/services/grading.py
"""
Letter grades from percentages.

The grading table is a list of bands, each covering an inclusive
percentage range. ``grade_for`` never raises: a percentage that no band
covers falls back to ``F`` / 0.0 so a half-configured table cannot break
result processing.
"""
from dataclasses import dataclass
from typing import List, Sequence

from sqlalchemy.orm import Session

from app.core.errors import ValidationError
from app.db.models.exam import GradeBand

FALLBACK_GRADE = "F"
FALLBACK_GRADE_POINT = 0.0


@dataclass(frozen=True)
class GradeOutcome:
    grade: str
    grade_point: float


def grade_for(percentage: float, bands: Sequence[GradeBand]) -> GradeOutcome:
    """Return the first band (in the given order) whose range contains ``percentage``.

    ``bands`` must already be sorted by descending grade point; see ``load_bands``.
    """
    for band in bands:
        if band.min_percentage <= percentage <= band.max_percentage:
            return GradeOutcome(band.grade, float(band.grade_point))
    return GradeOutcome(FALLBACK_GRADE, FALLBACK_GRADE_POINT)


def load_bands(db: Session) -> List[GradeBand]:
    return (
        db.query(GradeBand)
        .filter(GradeBand.is_active == True)  # noqa: E712
        .order_by(GradeBand.grade_point.desc())
        .all()
    )


def validate_bands(bands: Sequence) -> None:
    """Reject a grading table that overlaps or leaves holes in [0, 100].

    Works on anything with ``min_percentage`` / ``max_percentage`` / ``grade``
    attributes, so request schemas can be checked before they are saved.
    """
    if not bands:
        raise ValidationError("Grading table must contain at least one band")

    errors = {}
    for band in bands:
        if band.min_percentage > band.max_percentage:
            errors[band.grade] = "min_percentage is greater than max_percentage"
        elif band.min_percentage < 0 or band.max_percentage > 100:
            errors[band.grade] = "range must lie within 0-100"
    if errors:
        raise ValidationError("Invalid grade bands", errors=errors)

    ordered = sorted(bands, key=lambda b: b.min_percentage)
    if ordered[0].min_percentage > 0:
        errors[ordered[0].grade] = "no band starts at 0"
    if ordered[-1].max_percentage < 100:
        errors[ordered[-1].grade] = "no band reaches 100"

    for lower, upper in zip(ordered, ordered[1:]):
        if upper.min_percentage <= lower.max_percentage:
            errors[upper.grade] = f"overlaps with {lower.grade}"
        # Bands are stored with two decimals, so 32.99 -> 33 is contiguous
        elif upper.min_percentage - lower.max_percentage > 0.01 + 1e-9:
            errors[upper.grade] = f"gap after {lower.grade}"
    if errors:
        raise ValidationError("Invalid grade bands", errors=errors)


def replace_bands(db: Session, bands: Sequence) -> List[GradeBand]:
    validate_bands(bands)
    db.query(GradeBand).delete()
    for band in bands:
        db.add(GradeBand(
            name=band.name,
            min_percentage=band.min_percentage,
            max_percentage=band.max_percentage,
            grade=band.grade,
            grade_point=band.grade_point,
        ))
    db.commit()
    return load_bands(db)


DEFAULT_BANDS = [
    {"name": "A+", "min_percentage": 90, "max_percentage": 100, "grade": "A+", "grade_point": 5.0},
    {"name": "A", "min_percentage": 80, "max_percentage": 89.99, "grade": "A", "grade_point": 4.0},
    {"name": "A-", "min_percentage": 70, "max_percentage": 79.99, "grade": "A-", "grade_point": 3.5},
    {"name": "B", "min_percentage": 60, "max_percentage": 69.99, "grade": "B", "grade_point": 3.0},
    {"name": "C", "min_percentage": 50, "max_percentage": 59.99, "grade": "C", "grade_point": 2.5},
    {"name": "D", "min_percentage": 40, "max_percentage": 49.99, "grade": "D", "grade_point": 2.0},
    {"name": "F", "min_percentage": 0, "max_percentage": 39.99, "grade": "F", "grade_point": 0.0},
]


def ensure_default_bands(db: Session) -> List[GradeBand]:
    """Seed the standard table the first time grading is used."""
    if db.query(GradeBand).count() == 0:
        for band in DEFAULT_BANDS:
            db.add(GradeBand(**band))
        db.commit()
    return load_bands(db)
