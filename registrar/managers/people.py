"""
Professor and Student Managers

Professor and student ids come from the record store's counters, so their
field sets are the same for create and update.

StudentManager is the only manager with capabilities beyond the generic
operation set: enrolling, grading and deleting.
"""

from collections.abc import Mapping
from datetime import date
from typing import ClassVar

from registrar.domain.entities import AbstractEntity, Course, Enrollment, Professor, Student
from registrar.domain.exceptions import DomainException, ErrorCode, NotFoundError
from registrar.logging_config import get_logger
from registrar.managers.base import Capability, OperationResult, RecordManager
from registrar.managers.schemas import PersonFields
from registrar.store.record_store import EntityKind

logger = get_logger(__name__)

class ProfessorManager(RecordManager[Professor]):
    """Manages professors; each belongs to one department."""

    kind: ClassVar[EntityKind] = EntityKind.PROFESSOR
    create_schema = PersonFields
    update_schema = PersonFields
    related_kinds = {"department": EntityKind.DEPARTMENT}

    def build(self, fields: PersonFields, related: Mapping[str, AbstractEntity]) -> Professor:
        return Professor(
            id=self.store.next_id(self.kind),
            name=fields.name,
            birth_date=fields.birth_date,
            department=related["department"],
        )

    def apply_update(self, entity: Professor, fields: PersonFields) -> None:
        entity.name = fields.name
        entity.birth_date = fields.birth_date

class StudentManager(RecordManager[Student]):
    """Manages students, their enrollments and their grades."""

    kind: ClassVar[EntityKind] = EntityKind.STUDENT
    create_schema = PersonFields
    update_schema = PersonFields
    capabilities = frozenset({Capability.ENROLL, Capability.GRADE, Capability.DELETE})

    def build(self, fields: PersonFields, related: Mapping[str, AbstractEntity]) -> Student:
        return Student(
            id=self.store.next_id(self.kind),
            name=fields.name,
            birth_date=fields.birth_date,
        )

    def apply_update(self, entity: Student, fields: PersonFields) -> None:
        entity.name = fields.name
        entity.birth_date = fields.birth_date

    def list_enrollments(self, student: Student | None = None) -> list[Enrollment]:
        """Enrollment records in the store, optionally for one student."""
        enrollments = self.store.get_all(EntityKind.ENROLLMENT)
        if student is None:
            return enrollments
        return [e for e in enrollments if e.student is student]

    def enroll(
        self,
        student: Student,
        course: Course,
        professor: Professor,
        enrollment_date: date | None = None,
    ) -> OperationResult:
        """
        Enroll a student in a course under a professor.

        Args:
            student: Live student
            course: Live course
            professor: Live professor
            enrollment_date: Start date (default: today)

        Returns:
            OperationResult: Success carrying the enrollment, or
            INVALID_ARGUMENT / NOT_FOUND / ILLEGAL_STATE / DUPLICATE_KEY
        """
        rejected = self._check_live(
            (EntityKind.STUDENT, student),
            (EntityKind.COURSE, course),
            (EntityKind.PROFESSOR, professor),
        )
        if rejected is not None:
            return self._reject("enroll", rejected)

        enrollment_id = f"{student.entity_id}_{course.entity_id}"
        try:
            with self.store.locked():
                if self.store.get_by_id(EntityKind.ENROLLMENT, enrollment_id) is not None:
                    return self._reject(
                        "enroll",
                        OperationResult.failure(
                            f"Student {student.name} is already enrolled in the course {course.name}",
                            ErrorCode.DUPLICATE_KEY,
                            {"entity_type": "Enrollment", "entity_id": enrollment_id},
                        ),
                    )
                enrollment = student.enroll(course, professor, enrollment_date)
                self.store.add(EntityKind.ENROLLMENT, enrollment)
        except DomainException as exc:
            return self._reject("enroll", OperationResult.from_exception(exc))

        logger.info(
            "Student enrolled",
            student_id=student.entity_id,
            course_id=course.entity_id,
            professor_id=professor.entity_id,
        )
        return OperationResult.ok(
            f"Student enrolled in {course.name} successfully", enrollment
        )

    def set_grade(self, student: Student, course: Course, grade_scale: float) -> OperationResult:
        """
        Set the grade scale of a student's enrollment in a course.

        The accepted range comes from the store settings; -1 resets the
        enrollment to ungraded.

        Returns:
            OperationResult: Success carrying the enrollment, or
            INVALID_ARGUMENT / NOT_FOUND / ILLEGAL_STATE
        """
        rejected = self._check_live((EntityKind.STUDENT, student), (EntityKind.COURSE, course))
        if rejected is not None:
            return self._reject("grade", rejected)

        settings = self.store.settings
        try:
            with self.store.locked():
                enrollment = student.set_grade_scale(
                    course,
                    grade_scale,
                    minimum=settings.grade_scale_min,
                    maximum=settings.grade_scale_max,
                )
        except DomainException as exc:
            return self._reject("grade", OperationResult.from_exception(exc))

        logger.info(
            "Grade set",
            student_id=student.entity_id,
            course_id=course.entity_id,
            grade_scale=enrollment.grade_scale,
            letter_grade=enrollment.letter_grade,
        )
        return OperationResult.ok(
            f"Grade set successfully for {student.name} in {course.name}", enrollment
        )

    def delete(self, student_id: str | int) -> OperationResult:
        """
        Delete a student.

        Deleting an absent student is a NOT_FOUND outcome, not an error.
        The student's enrollment records stay in the store until
        RecordStore.purge_orphaned_enrollments() is called.
        """
        with self.store.locked():
            student = self.find_by_id(student_id)
            removed = self.store.remove_student(student_id)

        if not removed:
            return self._reject(
                "delete",
                OperationResult.failure(
                    f"Invalid {self.description} ID",
                    ErrorCode.NOT_FOUND,
                    {"entity_type": self.description, "entity_id": str(student_id)},
                ),
            )
        return OperationResult.ok(f"{self.description} deleted successfully", student)

    def gpa(self, student: Student) -> float:
        """GPA of a student (0.0 with no graded enrollment)."""
        return student.gpa

    def _check_live(self, *targets: tuple[EntityKind, AbstractEntity | None]) -> OperationResult | None:
        for kind, entity in targets:
            if entity is None:
                return OperationResult.failure(
                    f"{kind.label} is required",
                    ErrorCode.INVALID_ARGUMENT,
                    {"field": kind.value},
                )
            if not isinstance(entity, kind.entity_class):
                return OperationResult.failure(
                    f"Expected a {kind.label}, got {type(entity).__name__}",
                    ErrorCode.INVALID_ARGUMENT,
                    {"field": kind.value},
                )
            if not self.store.contains(kind, entity):
                return OperationResult.from_exception(NotFoundError(kind.label, entity.entity_id))
        return None
