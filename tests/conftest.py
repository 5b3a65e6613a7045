"""Shared fixtures for the academic records tests."""

from datetime import date

import pytest

from registrar.config import Settings
from registrar.managers import create_managers
from registrar.store import EntityKind, RecordStore


@pytest.fixture
def settings() -> Settings:
    """Settings isolated from any local .env file."""
    return Settings(_env_file=None)


@pytest.fixture
def store(settings: Settings) -> RecordStore:
    return RecordStore(settings)


@pytest.fixture
def managers(store: RecordStore):
    return create_managers(store)


@pytest.fixture
def department_manager(managers):
    return managers[EntityKind.DEPARTMENT]


@pytest.fixture
def course_manager(managers):
    return managers[EntityKind.COURSE]


@pytest.fixture
def professor_manager(managers):
    return managers[EntityKind.PROFESSOR]


@pytest.fixture
def student_manager(managers):
    return managers[EntityKind.STUDENT]


@pytest.fixture
def math(department_manager):
    """Live Mathematics department."""
    result = department_manager.create(
        {"id": "MATH", "name": "Mathematics", "description": "Department of Mathematics"}
    )
    assert result.success, result.reason
    return result.entity


@pytest.fixture
def calculus(course_manager, math):
    """Live Calculus course in the Mathematics department."""
    result = course_manager.create(
        {"id": "MATH1211", "name": "Calculus", "description": "Introduction to Calculus"},
        {"department": math},
    )
    assert result.success, result.reason
    return result.entity


@pytest.fixture
def algebra(course_manager, math):
    result = course_manager.create(
        {"id": "MATH1201", "name": "College Algebra", "description": "Introduction to College Algebra"},
        {"department": math},
    )
    assert result.success, result.reason
    return result.entity


@pytest.fixture
def professor(professor_manager, math):
    result = professor_manager.create(
        {"name": "Emmy Noether", "birth_date": date(1882, 3, 23)},
        {"department": math},
    )
    assert result.success, result.reason
    return result.entity


@pytest.fixture
def student(student_manager):
    result = student_manager.create({"name": "Ada Lovelace", "birth_date": date(2000, 12, 10)})
    assert result.success, result.reason
    return result.entity
