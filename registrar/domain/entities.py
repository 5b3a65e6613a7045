"""
Academic Entity Model

Departments, courses, professors, students and enrollments.

Composition Relationships:
- Department owns its Course and Professor lists (append-only back-references)
- Student owns its Enrollment list
- Enrollment references Student, Course and Professor without owning them

Dependent entities (Course, Professor, Enrollment) link themselves to their
parent inside the constructor: the reference and the parent's collection
are both in place before construction returns, or neither is.
"""

import math
from abc import ABC, abstractmethod
from datetime import date
from enum import Enum
from typing import Any, ClassVar

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr

from registrar.domain import grading
from registrar.domain.exceptions import IllegalStateError, InvalidArgumentError

DEFAULT_GRADE_SCALE_MIN = 0.0
DEFAULT_GRADE_SCALE_MAX = 100.0


class RenderLevel(str, Enum):
    """Detail level for entity display records."""

    SUMMARY = "summary"
    DETAILED = "detailed"


class DisplayRecord(BaseModel):
    """
    Structured, presentation-free view of an entity.

    Column formatting is left entirely to the caller.
    """

    model_config = ConfigDict(frozen=True)

    kind: str = Field(..., description="Entity kind (e.g., 'Course')")
    id: str = Field(..., description="Entity identifier")
    name: str = Field(..., description="Display name")
    columns: dict[str, Any] = Field(default_factory=dict)
    related: dict[str, list["DisplayRecord"]] = Field(default_factory=dict)


class AbstractEntity(BaseModel, ABC):
    """
    Base class for every academic entity.

    Provides identity-based equality and the shared display contract:
    a stable string identifier, a display name and two render levels.
    """

    model_config = ConfigDict(
        validate_assignment=True,
        arbitrary_types_allowed=True,
    )

    entity_kind: ClassVar[str] = "Entity"

    def __hash__(self) -> int:
        """Hash based on entity kind and ID for set/dict usage."""
        return hash((type(self).__name__, self.entity_id))

    def __eq__(self, other: object) -> bool:
        """Equality based on entity ID and type."""
        if not isinstance(other, AbstractEntity):
            return NotImplemented
        return isinstance(other, type(self)) and self.entity_id == other.entity_id

    @property
    @abstractmethod
    def entity_id(self) -> str:
        """Stable identifier as a string."""

    @property
    @abstractmethod
    def display_name(self) -> str:
        """Human-readable name."""

    @abstractmethod
    def _summary_columns(self) -> dict[str, Any]:
        """Columns shown at every render level."""

    def _detail_columns(self) -> dict[str, Any]:
        """Extra columns shown only in detailed records."""
        return {}

    def _related_records(self) -> dict[str, list[DisplayRecord]]:
        """Related entities included in detailed records."""
        return {}

    def render(self, level: RenderLevel = RenderLevel.SUMMARY) -> DisplayRecord:
        """
        Render this entity as a display record.

        Args:
            level: SUMMARY for the entity alone, DETAILED to include
                extra columns and related entities

        Returns:
            DisplayRecord: Structured view of the entity
        """
        columns = self._summary_columns()
        related: dict[str, list[DisplayRecord]] = {}
        if level == RenderLevel.DETAILED:
            columns = {**columns, **self._detail_columns()}
            related = self._related_records()

        return DisplayRecord(
            kind=self.entity_kind,
            id=self.entity_id,
            name=self.display_name,
            columns=columns,
            related=related,
        )


class Department(AbstractEntity):
    """Academic department; the parent of courses and professors."""

    entity_kind: ClassVar[str] = "Department"

    id: str = Field(..., min_length=1, frozen=True, description="Caller-assigned code")
    name: str = Field(..., min_length=1, max_length=200)
    description: str = Field(default="", max_length=2000)

    _courses: list["Course"] = PrivateAttr(default_factory=list)
    _professors: list["Professor"] = PrivateAttr(default_factory=list)

    @property
    def entity_id(self) -> str:
        return self.id

    @property
    def display_name(self) -> str:
        return self.name

    @property
    def courses(self) -> list["Course"]:
        """Courses offered by this department, in creation order."""
        return list(self._courses)

    @property
    def professors(self) -> list["Professor"]:
        """Professors belonging to this department, in creation order."""
        return list(self._professors)

    def attach_course(self, course: "Course") -> None:
        """
        Append a course to this department.

        Only a course whose own department reference is this department
        may be attached.
        """
        if course.department is not self:
            raise IllegalStateError(
                f"Course {course.name} is not in the department {self.name}",
                rule_name="course_department_backlink",
            )
        if any(c is course for c in self._courses):
            return
        self._courses.append(course)

    def attach_professor(self, professor: "Professor") -> None:
        """Append a professor to this department."""
        if professor.department is not self:
            raise IllegalStateError(
                f"Professor {professor.name} is not in the department {self.name}",
                rule_name="professor_department_backlink",
            )
        if any(p is professor for p in self._professors):
            return
        self._professors.append(professor)

    def _summary_columns(self) -> dict[str, Any]:
        return {"description": self.description}

    def _related_records(self) -> dict[str, list[DisplayRecord]]:
        for course in self._courses:
            if course.department is not self:
                raise IllegalStateError(
                    f"Course {course.name} is not in the department {self.name}",
                    rule_name="course_department_backlink",
                )
        for professor in self._professors:
            if professor.department is not self:
                raise IllegalStateError(
                    f"Professor {professor.name} is not in the department {self.name}",
                    rule_name="professor_department_backlink",
                )

        return {
            "courses": [c.render() for c in self._courses],
            "professors": [p.render() for p in self._professors],
        }


class Course(AbstractEntity):
    """
    Course offered by a department.

    The owning department is required and fixed at construction; the
    course appends itself to the department's course list.
    """

    entity_kind: ClassVar[str] = "Course"

    id: str = Field(..., min_length=1, frozen=True, description="Caller-assigned code")
    name: str = Field(..., min_length=1, max_length=200)
    description: str = Field(default="", max_length=2000)
    department: Department | None = Field(default=None, frozen=True, repr=False)

    def model_post_init(self, context: Any) -> None:
        if self.department is None:
            raise InvalidArgumentError("Course requires a department", field="department")
        self.department.attach_course(self)

    @property
    def entity_id(self) -> str:
        return self.id

    @property
    def display_name(self) -> str:
        return self.name

    def _summary_columns(self) -> dict[str, Any]:
        return {"department": self.department.name}

    def _detail_columns(self) -> dict[str, Any]:
        return {"description": self.description}

    def _related_records(self) -> dict[str, list[DisplayRecord]]:
        return {"department": [self.department.render()]}


class Person(AbstractEntity, ABC):
    """Common fields for professors and students."""

    name: str = Field(..., min_length=1, max_length=200)
    birth_date: date = Field(...)

    def age(self, today: date | None = None) -> int:
        """Age in whole years."""
        today = today or date.today()
        years = today.year - self.birth_date.year
        if (today.month, today.day) < (self.birth_date.month, self.birth_date.day):
            years -= 1
        return years

    def full_description(self, today: date | None = None) -> str:
        """Name with age, e.g. 'Ada Lovelace - 36 years old'."""
        return f"{self.name} - {self.age(today)} years old"

    @property
    def display_name(self) -> str:
        return self.name


class Professor(Person):
    """
    Professor belonging to exactly one department.

    The id comes from the record store's professor counter.
    """

    entity_kind: ClassVar[str] = "Professor"

    id: int = Field(..., ge=1, frozen=True)
    department: Department | None = Field(default=None, frozen=True, repr=False)

    def model_post_init(self, context: Any) -> None:
        if self.department is None:
            raise InvalidArgumentError("Professor requires a department", field="department")
        self.department.attach_professor(self)

    @property
    def entity_id(self) -> str:
        return str(self.id)

    def _summary_columns(self) -> dict[str, Any]:
        return {"age": self.age(), "department": self.department.name}

    def _detail_columns(self) -> dict[str, Any]:
        return {"birth_date": self.birth_date}

    def _related_records(self) -> dict[str, list[DisplayRecord]]:
        return {"department": [self.department.render()]}


class Student(Person):
    """
    Student with an owned list of enrollments.

    The id comes from the record store's student counter. Students are the
    only entities that can be deleted.
    """

    entity_kind: ClassVar[str] = "Student"

    id: int = Field(..., ge=1, frozen=True)

    _enrollments: list["Enrollment"] = PrivateAttr(default_factory=list)

    @property
    def entity_id(self) -> str:
        return str(self.id)

    @property
    def enrollments(self) -> list["Enrollment"]:
        """Enrollments of this student, in enrollment order."""
        return list(self._enrollments)

    @property
    def gpa(self) -> float:
        """Mean grade points over graded enrollments (0.0 if none)."""
        return grading.calculate_gpa(self._enrollments)

    def get_enrollment(self, course: Course) -> "Enrollment | None":
        """Find this student's enrollment in a course."""
        for enrollment in self._enrollments:
            if enrollment.course.id == course.id:
                return enrollment
        return None

    def is_enrolled(self, course: Course) -> bool:
        """Check if the student is enrolled in a course."""
        return self.get_enrollment(course) is not None

    def attach_enrollment(self, enrollment: "Enrollment") -> None:
        """Append an enrollment that references this student."""
        if enrollment.student is not self:
            raise IllegalStateError(
                f"Enrollment {enrollment.entity_id} does not belong to student {self.name}",
                rule_name="enrollment_student_backlink",
            )
        if self.is_enrolled(enrollment.course):
            raise IllegalStateError(
                f"Student {self.name} is already enrolled in the course {enrollment.course.name}",
                rule_name="single_enrollment_per_course",
            )
        self._enrollments.append(enrollment)

    def enroll(
        self,
        course: Course,
        professor: Professor,
        enrollment_date: date | None = None,
    ) -> "Enrollment":
        """
        Enroll this student in a course taught by a professor.

        Args:
            course: Course to enroll in
            professor: Professor teaching the course
            enrollment_date: Start date (default: today)

        Returns:
            Enrollment: The new, ungraded enrollment

        Raises:
            IllegalStateError: If already enrolled in the course
            InvalidArgumentError: If course or professor is missing
        """
        if course is not None and self.is_enrolled(course):
            raise IllegalStateError(
                f"Student {self.name} is already enrolled in the course {course.name}",
                rule_name="single_enrollment_per_course",
            )
        return Enrollment(
            student=self,
            course=course,
            professor=professor,
            enrollment_date=enrollment_date or date.today(),
        )

    def set_grade_scale(
        self,
        course: Course,
        grade_scale: float,
        minimum: float = DEFAULT_GRADE_SCALE_MIN,
        maximum: float = DEFAULT_GRADE_SCALE_MAX,
    ) -> "Enrollment":
        """
        Record the grade scale for this student's enrollment in a course.

        Raises:
            IllegalStateError: If the student is not enrolled in the course
            InvalidArgumentError: If the grade scale is malformed
        """
        enrollment = self.get_enrollment(course)
        if enrollment is None:
            raise IllegalStateError(
                f"Student {self.name} is not enrolled in the course {course.name}",
                rule_name="grade_requires_enrollment",
            )
        enrollment.set_grade_scale(grade_scale, minimum=minimum, maximum=maximum)
        return enrollment

    def _summary_columns(self) -> dict[str, Any]:
        return {"age": self.age(), "gpa": self.gpa}

    def _detail_columns(self) -> dict[str, Any]:
        return {"birth_date": self.birth_date}

    def _related_records(self) -> dict[str, list[DisplayRecord]]:
        return {"enrollments": [e.render() for e in self._enrollments]}


class Enrollment(AbstractEntity):
    """
    A student taking a course under a professor from a given date.

    The id is the composite "<student id>_<course id>". A new enrollment is
    ungraded (grade scale -1) until set_grade_scale() is called.
    """

    entity_kind: ClassVar[str] = "Enrollment"

    student: Student | None = Field(default=None, frozen=True, repr=False)
    course: Course | None = Field(default=None, frozen=True, repr=False)
    professor: Professor | None = Field(default=None, frozen=True, repr=False)
    enrollment_date: date | None = Field(default=None, frozen=True)

    _grade_scale: float = PrivateAttr(default=grading.UNGRADED)

    def model_post_init(self, context: Any) -> None:
        for field_name in ("student", "course", "professor", "enrollment_date"):
            if getattr(self, field_name) is None:
                raise InvalidArgumentError(
                    f"Enrollment requires a {field_name.replace('_', ' ')}", field=field_name
                )
        self.student.attach_enrollment(self)

    @property
    def entity_id(self) -> str:
        return f"{self.student.entity_id}_{self.course.entity_id}"

    @property
    def display_name(self) -> str:
        return f"{self.student.name} enroll {self.course.name}"

    @property
    def grade_scale(self) -> float:
        return self._grade_scale

    @property
    def is_graded(self) -> bool:
        return not grading.is_ungraded(self._grade_scale)

    @property
    def letter_grade(self) -> str:
        return grading.letter_grade(self._grade_scale)

    @property
    def grade_points(self) -> float | None:
        return grading.grade_points(self.letter_grade)

    def set_grade_scale(
        self,
        grade_scale: float,
        minimum: float = DEFAULT_GRADE_SCALE_MIN,
        maximum: float = DEFAULT_GRADE_SCALE_MAX,
    ) -> None:
        """
        Assign the grade scale, replacing any previous value.

        Accepts the ungraded sentinel -1 or a finite number in
        [minimum, maximum].

        Raises:
            InvalidArgumentError: If the value is not an accepted grade scale
        """
        if isinstance(grade_scale, bool):
            raise InvalidArgumentError(
                "Grade scale must be a number", field="grade_scale", value=grade_scale
            )
        try:
            value = float(grade_scale)
        except (TypeError, ValueError):
            raise InvalidArgumentError(
                "Grade scale must be a number", field="grade_scale", value=grade_scale
            ) from None

        if not grading.is_ungraded(value):
            if not math.isfinite(value) or not (minimum <= value <= maximum):
                raise InvalidArgumentError(
                    f"Grade scale must be between {minimum:g} and {maximum:g}",
                    field="grade_scale",
                    value=grade_scale,
                )
        self._grade_scale = value

    def _summary_columns(self) -> dict[str, Any]:
        return {
            "student": self.student.name,
            "course": self.course.name,
            "professor": self.professor.name,
            "enrollment_date": self.enrollment_date,
            "grade_scale": self._grade_scale if self.is_graded else None,
            "letter_grade": self.letter_grade,
        }

    def _detail_columns(self) -> dict[str, Any]:
        return {"grade_points": self.grade_points}


Department.model_rebuild()
Course.model_rebuild()
Professor.model_rebuild()
Student.model_rebuild()
Enrollment.model_rebuild()
