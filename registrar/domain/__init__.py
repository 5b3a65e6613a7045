"""
Academic Records Domain

Entity model, grading engine and domain exceptions.
"""

from registrar.domain.entities import (
    AbstractEntity,
    Course,
    Department,
    DisplayRecord,
    Enrollment,
    Person,
    Professor,
    RenderLevel,
    Student,
)
from registrar.domain.exceptions import (
    DomainException,
    DuplicateKeyError,
    ErrorCode,
    IllegalStateError,
    InvalidArgumentError,
    NotFoundError,
)
from registrar.domain.grading import UNGRADED, calculate_gpa, grade_points, letter_grade

__all__ = [
    # Entities
    "AbstractEntity",
    "Person",
    "Department",
    "Course",
    "Professor",
    "Student",
    "Enrollment",
    "RenderLevel",
    "DisplayRecord",
    # Grading
    "UNGRADED",
    "letter_grade",
    "grade_points",
    "calculate_gpa",
    # Exceptions
    "ErrorCode",
    "DomainException",
    "NotFoundError",
    "DuplicateKeyError",
    "InvalidArgumentError",
    "IllegalStateError",
]
