from types import SimpleNamespace

import pytest

from app.core.errors import ValidationError
from app.db.models.exam import GradeBand
from app.services.grading import DEFAULT_BANDS, ensure_default_bands, grade_for, load_bands, validate_bands


@pytest.fixture
def bands():
    return sorted((GradeBand(**b) for b in DEFAULT_BANDS), key=lambda b: -b.grade_point)


@pytest.mark.parametrize(
    "percentage, grade, point",
    [
        (100, "A+", 5.0),
        (90, "A+", 5.0),
        (89.99, "A", 4.0),
        (75.5, "A-", 3.5),
        (40, "D", 2.0),
        (39.99, "F", 0.0),
        (0, "F", 0.0),
    ],
)
def test_grade_for_uses_inclusive_bands(bands, percentage, grade, point):
    outcome = grade_for(percentage, bands)
    assert (outcome.grade, outcome.grade_point) == (grade, point)


@pytest.mark.parametrize("percentage", [-5, 150])
def test_grade_for_falls_back_to_f_outside_every_band(bands, percentage):
    outcome = grade_for(percentage, bands)
    assert outcome.grade == "F"
    assert outcome.grade_point == 0.0


def test_grade_for_with_empty_table_is_f():
    assert grade_for(75, []).grade == "F"


def test_grade_points_never_decrease_as_percentage_rises(bands):
    points = [grade_for(p / 2, bands).grade_point for p in range(0, 201)]
    assert points == sorted(points)


def test_first_matching_band_wins_on_overlap():
    overlapping = [
        SimpleNamespace(min_percentage=50, max_percentage=100, grade="P", grade_point=1.0),
        SimpleNamespace(min_percentage=0, max_percentage=60, grade="F", grade_point=0.0),
    ]
    assert grade_for(55, overlapping).grade == "P"


def test_default_table_is_valid(bands):
    validate_bands(bands)


def _band(grade, low, high, point=1.0):
    return SimpleNamespace(name=grade, grade=grade, min_percentage=low, max_percentage=high, grade_point=point)


def test_validate_bands_rejects_overlap():
    with pytest.raises(ValidationError) as exc:
        validate_bands([_band("F", 0, 50), _band("P", 45, 100)])
    assert "P" in exc.value.errors


def test_validate_bands_rejects_gap():
    with pytest.raises(ValidationError) as exc:
        validate_bands([_band("F", 0, 40), _band("P", 50, 100)])
    assert exc.value.errors == {"P": "gap after F"}


def test_validate_bands_requires_full_range():
    with pytest.raises(ValidationError) as exc:
        validate_bands([_band("P", 10, 90)])
    assert exc.value.errors["P"] in ("no band starts at 0", "no band reaches 100")


def test_ensure_default_bands_seeds_once(db):
    first = ensure_default_bands(db)
    second = ensure_default_bands(db)
    assert len(first) == len(second) == len(DEFAULT_BANDS)
    assert [b.grade for b in load_bands(db)][0] == "A+"
