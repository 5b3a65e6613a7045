"""Tests for entity construction, linking, grading and rendering."""

import math
from datetime import date

import pytest
from pydantic import ValidationError

from registrar.domain.entities import (
    Course,
    Department,
    Enrollment,
    Professor,
    RenderLevel,
    Student,
)
from registrar.domain.exceptions import ErrorCode, IllegalStateError, InvalidArgumentError


@pytest.fixture
def department():
    return Department(id="MATH", name="Mathematics", description="Department of Mathematics")


@pytest.fixture
def course(department):
    return Course(id="MATH1211", name="Calculus", description="Intro", department=department)


@pytest.fixture
def professor(department):
    return Professor(id=1, name="Emmy Noether", birth_date=date(1882, 3, 23), department=department)


@pytest.fixture
def student():
    return Student(id=1, name="Ada Lovelace", birth_date=date(2000, 12, 10))


class TestLinking:
    def test_course_attaches_itself_to_department(self, department, course):
        assert [c.id for c in department.courses] == ["MATH1211"]
        assert course.department is department
        assert course.department.id == "MATH"

    def test_professor_attaches_itself_to_department(self, department, professor):
        assert department.professors == [professor]
        assert professor.department is department

    def test_course_without_department_is_rejected(self, department):
        with pytest.raises(InvalidArgumentError) as exc_info:
            Course(id="MATH1211", name="Calculus", description="Intro", department=None)

        assert exc_info.value.error_code == ErrorCode.INVALID_ARGUMENT
        assert exc_info.value.context["field"] == "department"
        assert department.courses == []

    def test_professor_without_department_is_rejected(self):
        with pytest.raises(InvalidArgumentError):
            Professor(id=1, name="Emmy Noether", birth_date=date(1882, 3, 23))

    def test_department_lists_are_read_only_copies(self, department, course):
        department.courses.append(course)
        assert len(department.courses) == 1

    def test_foreign_course_cannot_be_attached(self, course):
        other = Department(id="CS", name="Computer Science")
        with pytest.raises(IllegalStateError):
            other.attach_course(course)
        assert other.courses == []

    def test_identifier_is_immutable(self, course):
        with pytest.raises(ValidationError):
            course.id = "MATH9999"
        assert course.id == "MATH1211"

    def test_department_reference_is_immutable(self, course):
        with pytest.raises(ValidationError):
            course.department = Department(id="CS", name="Computer Science")

    def test_descriptive_fields_are_mutable(self, course):
        course.name = "Calculus I"
        assert course.name == "Calculus I"


class TestEnrollment:
    def test_enroll_links_enrollment_to_student(self, student, course, professor):
        enrollment = student.enroll(course, professor, date(2024, 9, 1))

        assert student.is_enrolled(course)
        assert student.enrollments == [enrollment]
        assert enrollment.entity_id == "1_MATH1211"
        assert enrollment.display_name == "Ada Lovelace enroll Calculus"
        assert enrollment.enrollment_date == date(2024, 9, 1)

    def test_enroll_defaults_to_today(self, student, course, professor):
        enrollment = student.enroll(course, professor)
        assert enrollment.enrollment_date == date.today()

    def test_second_enrollment_in_same_course_is_rejected(self, student, course, professor):
        student.enroll(course, professor)
        with pytest.raises(IllegalStateError):
            student.enroll(course, professor)
        assert len(student.enrollments) == 1

    def test_missing_reference_is_rejected_before_linking(self, student, course):
        with pytest.raises(InvalidArgumentError) as exc_info:
            Enrollment(student=student, course=course, professor=None, enrollment_date=date.today())

        assert exc_info.value.context["field"] == "professor"
        assert student.enrollments == []

    def test_new_enrollment_is_ungraded(self, student, course, professor):
        enrollment = student.enroll(course, professor)

        assert enrollment.grade_scale == -1
        assert not enrollment.is_graded
        assert enrollment.letter_grade == ""
        assert enrollment.grade_points is None

    def test_set_grade_scale(self, student, course, professor):
        student.enroll(course, professor)
        enrollment = student.set_grade_scale(course, 90)

        assert enrollment.is_graded
        assert enrollment.letter_grade == "A-"
        assert enrollment.grade_points == 3.67

    def test_grade_can_be_reset_to_ungraded(self, student, course, professor):
        student.enroll(course, professor)
        student.set_grade_scale(course, 75)
        enrollment = student.set_grade_scale(course, -1)
        assert not enrollment.is_graded

    def test_grading_requires_enrollment(self, student, course):
        with pytest.raises(IllegalStateError):
            student.set_grade_scale(course, 80)

    @pytest.mark.parametrize("value", [100.5, -0.5, math.nan, math.inf, "eighty", True, None])
    def test_malformed_grade_scale_is_rejected(self, student, course, professor, value):
        enrollment = student.enroll(course, professor)
        with pytest.raises(InvalidArgumentError):
            enrollment.set_grade_scale(value)
        assert not enrollment.is_graded

    def test_gpa(self, student, department, course, professor):
        algebra = Course(id="MATH1201", name="College Algebra", department=department)
        statistics = Course(id="MATH1280", name="Statistics", department=department)
        student.enroll(course, professor)
        student.enroll(algebra, professor)
        student.enroll(statistics, professor)

        assert student.gpa == 0.0

        student.set_grade_scale(course, 95.7)
        student.set_grade_scale(algebra, 85.0)
        assert student.gpa == pytest.approx(3.50)


class TestPerson:
    def test_age_counts_whole_years(self):
        person = Student(id=3, name="Grace Hopper", birth_date=date(2000, 6, 15))
        assert person.age(today=date(2024, 6, 14)) == 23
        assert person.age(today=date(2024, 6, 15)) == 24

    def test_full_description(self):
        person = Student(id=3, name="Grace Hopper", birth_date=date(2000, 6, 15))
        assert person.full_description(today=date(2024, 7, 1)) == "Grace Hopper - 24 years old"

    def test_birth_date_accepts_iso_strings(self):
        person = Student(id=3, name="Grace Hopper", birth_date="2000-06-15")
        assert person.birth_date == date(2000, 6, 15)

    def test_generated_ids_are_strings_for_callers(self, professor, student):
        assert professor.entity_id == "1"
        assert student.entity_id == "1"


class TestRendering:
    def test_summary_record(self, course):
        record = course.render()

        assert record.kind == "Course"
        assert record.id == "MATH1211"
        assert record.name == "Calculus"
        assert record.columns == {"department": "Mathematics"}
        assert record.related == {}

    def test_detailed_department_includes_courses_and_professors(self, department, course, professor):
        record = department.render(RenderLevel.DETAILED)

        assert [r.id for r in record.related["courses"]] == ["MATH1211"]
        assert [r.id for r in record.related["professors"]] == ["1"]

    def test_student_detailed_includes_enrollments(self, student, course, professor):
        student.enroll(course, professor)
        student.set_grade_scale(course, 85)

        record = student.render(RenderLevel.DETAILED)

        assert record.columns["gpa"] == pytest.approx(3.00)
        assert record.columns["birth_date"] == date(2000, 12, 10)
        (enrollment,) = record.related["enrollments"]
        assert enrollment.id == "1_MATH1211"
        assert enrollment.columns["letter_grade"] == "B"
        assert enrollment.columns["professor"] == "Emmy Noether"

    def test_ungraded_enrollment_renders_without_scale(self, student, course, professor):
        enrollment = student.enroll(course, professor)
        record = enrollment.render()
        assert record.columns["grade_scale"] is None
        assert record.columns["letter_grade"] == ""


def test_equality_is_by_kind_and_id():
    first = Department(id="CS", name="Computer Science")
    second = Department(id="CS", name="Comp Sci")

    assert first == second
    assert hash(first) == hash(second)
    assert first != Student(id=1, name="CS", birth_date=date(2000, 1, 1))
