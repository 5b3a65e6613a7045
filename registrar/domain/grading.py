"""
Grading Engine

Pure conversion pipeline: grade scale -> letter grade -> grade points -> GPA.

Boundaries are inclusive on the lower end, so a scale of exactly 90 is an
A- and not a B+. The sentinel scale -1 means "ungraded": it has no letter
grade and no grade points, and is left out of GPA aggregation entirely.
"""

from collections.abc import Iterable
from typing import TYPE_CHECKING

from registrar.domain.exceptions import InvalidArgumentError

if TYPE_CHECKING:
    from registrar.domain.entities import Enrollment

UNGRADED = -1.0

# Highest boundary first; the first boundary not exceeding the scale wins.
GRADE_BOUNDARIES: tuple[tuple[float, str], ...] = (
    (98.0, "A+"),
    (93.0, "A"),
    (90.0, "A-"),
    (88.0, "B+"),
    (83.0, "B"),
    (80.0, "B-"),
    (78.0, "C+"),
    (73.0, "C"),
    (70.0, "C-"),
    (68.0, "D+"),
    (63.0, "D"),
    (60.0, "D-"),
)

FAILING_GRADE = "F"

GRADE_POINTS: dict[str, float] = {
    "A+": 4.00,
    "A": 4.00,
    "A-": 3.67,
    "B+": 3.33,
    "B": 3.00,
    "B-": 2.67,
    "C+": 2.33,
    "C": 2.00,
    "C-": 1.67,
    "D+": 1.33,
    "D": 1.00,
    "D-": 0.67,
    "F": 0.00,
}


def is_ungraded(grade_scale: float) -> bool:
    """Check if a grade scale is the ungraded sentinel."""
    return grade_scale == UNGRADED


def letter_grade(grade_scale: float) -> str:
    """
    Convert a numeric grade scale to a letter grade.

    Args:
        grade_scale: Score, normally 0-100, or -1 for ungraded

    Returns:
        str: Letter grade, or "" when ungraded
    """
    if is_ungraded(grade_scale):
        return ""

    for boundary, letter in GRADE_BOUNDARIES:
        if grade_scale >= boundary:
            return letter
    return FAILING_GRADE


def grade_points(letter: str) -> float | None:
    """
    Look up the grade points for a letter grade.

    Args:
        letter: Letter grade as produced by letter_grade()

    Returns:
        float | None: Grade points, or None for the empty (ungraded) letter

    Raises:
        InvalidArgumentError: If the letter is not a known grade
    """
    if letter == "":
        return None
    try:
        return GRADE_POINTS[letter]
    except KeyError:
        raise InvalidArgumentError(
            f"Invalid letter grade: {letter}", field="letter_grade", value=letter
        ) from None


def scale_to_points(grade_scale: float) -> float | None:
    """Convert a grade scale straight to grade points."""
    return grade_points(letter_grade(grade_scale))


def calculate_gpa(enrollments: Iterable["Enrollment"]) -> float:
    """
    Mean grade points across graded enrollments.

    Ungraded enrollments count towards neither the sum nor the count.
    With nothing graded the GPA is 0.0.
    """
    points = [
        p for p in (scale_to_points(e.grade_scale) for e in enrollments) if p is not None
    ]
    if not points:
        return 0.0
    return sum(points) / len(points)
