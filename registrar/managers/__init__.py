"""
Record Managers

Generic create/read/update managers, one per entity kind.
"""

from registrar.managers.base import Capability, OperationResult, RecordManager
from registrar.managers.departments import CourseManager, DepartmentManager
from registrar.managers.people import ProfessorManager, StudentManager
from registrar.store.record_store import EntityKind, RecordStore


def create_managers(store: RecordStore) -> dict[EntityKind, RecordManager]:
    """
    Build one manager per managed entity kind around a shared store.

    Args:
        store: Record store the managers operate on

    Returns:
        dict: EntityKind -> manager
    """
    managers: list[RecordManager] = [
        DepartmentManager(store),
        CourseManager(store),
        ProfessorManager(store),
        StudentManager(store),
    ]
    return {manager.kind: manager for manager in managers}


__all__ = [
    "Capability",
    "OperationResult",
    "RecordManager",
    "DepartmentManager",
    "CourseManager",
    "ProfessorManager",
    "StudentManager",
    "create_managers",
]
