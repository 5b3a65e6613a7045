"""Tests for the authoritative record store."""

from datetime import date

import pytest

from registrar.config import Settings
from registrar.domain.entities import Course, Department, Professor, Student
from registrar.domain.exceptions import DuplicateKeyError, InvalidArgumentError
from registrar.store import EntityKind, RecordStore


def _student(store: RecordStore, name: str = "Ada Lovelace") -> Student:
    student = Student(id=store.next_id(EntityKind.STUDENT), name=name, birth_date=date(2000, 1, 1))
    store.add(EntityKind.STUDENT, student)
    return student


def test_add_and_get_by_id(store):
    department = Department(id="CS", name="Computer Science")
    store.add(EntityKind.DEPARTMENT, department)

    assert store.get_by_id(EntityKind.DEPARTMENT, "CS") is department
    assert store.get_all(EntityKind.DEPARTMENT) == [department]
    assert store.count(EntityKind.DEPARTMENT) == 1


def test_missing_id_is_not_an_error(store):
    assert store.get_by_id(EntityKind.DEPARTMENT, "NOPE") is None


def test_duplicate_department_is_rejected_without_overwriting(store):
    first = Department(id="CS", name="Computer Science")
    second = Department(id="CS", name="Cognitive Science")
    store.add(EntityKind.DEPARTMENT, first)

    with pytest.raises(DuplicateKeyError) as exc_info:
        store.add(EntityKind.DEPARTMENT, second)

    assert exc_info.value.context == {"entity_type": "Department", "entity_id": "CS"}
    assert store.get_by_id(EntityKind.DEPARTMENT, "CS") is first
    assert store.count(EntityKind.DEPARTMENT) == 1


def test_entity_must_match_kind(store):
    with pytest.raises(InvalidArgumentError):
        store.add(EntityKind.COURSE, Department(id="CS", name="Computer Science"))


def test_ids_are_unique_per_kind_only(store):
    department = Department(id="1", name="One")
    store.add(EntityKind.DEPARTMENT, department)
    student = _student(store)
    assert student.entity_id == "1"
    assert store.get_by_id(EntityKind.DEPARTMENT, "1") is department
    assert store.get_by_id(EntityKind.STUDENT, "1") is student


def test_counters_are_monotonic_and_independent(store):
    assert store.next_id(EntityKind.PROFESSOR) == 1
    assert store.next_id(EntityKind.PROFESSOR) == 2
    assert store.next_id(EntityKind.STUDENT) == 1


def test_counters_start_from_settings():
    store = RecordStore(Settings(_env_file=None, first_generated_id=100))
    assert store.next_id(EntityKind.STUDENT) == 100


def test_counters_belong_to_the_store_instance(store):
    store.next_id(EntityKind.STUDENT)
    assert RecordStore(Settings(_env_file=None)).next_id(EntityKind.STUDENT) == 1


def test_caller_assigned_kinds_have_no_counter(store):
    with pytest.raises(InvalidArgumentError):
        store.next_id(EntityKind.DEPARTMENT)


def test_integer_and_string_ids_address_the_same_record(store):
    student = _student(store)
    assert store.get_by_id(EntityKind.STUDENT, 1) is student
    assert store.get_by_id(EntityKind.STUDENT, "1") is student


def test_remove_student(store):
    student = _student(store)
    assert store.remove_student(student.id) is True
    assert store.get_all(EntityKind.STUDENT) == []
    assert store.get_by_id(EntityKind.STUDENT, student.id) is None
    assert store.remove_student(student.id) is False


def test_removed_student_ids_are_not_reused(store):
    student = _student(store)
    store.remove_student(student.id)
    assert _student(store).id == student.id + 1


def test_contains_checks_identity(store):
    department = Department(id="CS", name="Computer Science")
    store.add(EntityKind.DEPARTMENT, department)

    assert store.contains(EntityKind.DEPARTMENT, department)
    assert not store.contains(EntityKind.DEPARTMENT, Department(id="CS", name="Impostor"))


def test_find_by_name_ignores_case(store):
    department = Department(id="CS", name="Computer Science")
    store.add(EntityKind.DEPARTMENT, department)

    assert store.find_by_name(EntityKind.DEPARTMENT, "computer SCIENCE") is department
    assert store.find_by_name(EntityKind.DEPARTMENT, "Physics") is None


def test_duplicate_enrollment_is_rejected(store):
    department = Department(id="CS", name="Computer Science")
    course = Course(id="CS1101", name="Programming Fundamentals", department=department)
    student = _student(store)
    professor = Professor(id=1, name="Alan Turing", birth_date=date(1912, 6, 23), department=department)
    enrollment = student.enroll(course, professor)
    store.add(EntityKind.ENROLLMENT, enrollment)

    with pytest.raises(DuplicateKeyError, match="already enrolled"):
        store.add(EntityKind.ENROLLMENT, enrollment)


def test_removal_leaves_enrollments_until_purged(store):
    department = Department(id="CS", name="Computer Science")
    course = Course(id="CS1101", name="Programming Fundamentals", department=department)
    professor = Professor(id=1, name="Alan Turing", birth_date=date(1912, 6, 23), department=department)
    leaving = _student(store, "Leaving Student")
    staying = _student(store, "Staying Student")
    store.add(EntityKind.ENROLLMENT, leaving.enroll(course, professor))
    kept = staying.enroll(course, professor)
    store.add(EntityKind.ENROLLMENT, kept)

    store.remove_student(leaving.id)

    assert store.count(EntityKind.ENROLLMENT) == 2
    assert [e.student for e in store.orphaned_enrollments()] == [leaving]

    assert store.purge_orphaned_enrollments() == 1
    assert store.get_all(EntityKind.ENROLLMENT) == [kept]
    assert store.purge_orphaned_enrollments() == 0


def test_lock_is_reentrant(store):
    with store.locked():
        with store.locked():
            _student(store)
    assert store.count(EntityKind.STUDENT) == 1


def test_rejection_carries_structured_error(store):
    store.add(EntityKind.DEPARTMENT, Department(id="CS", name="Computer Science"))

    with pytest.raises(DuplicateKeyError) as exc_info:
        store.add(EntityKind.DEPARTMENT, Department(id="CS", name="Computer Science"))

    assert exc_info.value.to_dict() == {
        "error": "DUPLICATE_KEY",
        "message": "Department ID CS already exists",
        "type": "DuplicateKeyError",
        "context": {"entity_type": "Department", "entity_id": "CS"},
    }


def test_direct_insert_moves_the_counter_past_its_id(store):
    store.add(EntityKind.STUDENT, Student(id=5, name="Grace Hopper", birth_date=date(1906, 12, 9)))
    store.add(EntityKind.STUDENT, Student(id=3, name="Ada Lovelace", birth_date=date(1815, 12, 10)))

    assert store.next_id(EntityKind.STUDENT) == 6
    assert store.next_id(EntityKind.PROFESSOR) == 1
