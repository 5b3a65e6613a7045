"""
Record Store

Authoritative keyed storage for every entity kind.

An entity is live if and only if it is reachable from the store. Department
course lists and student enrollment lists are secondary indexes that point
at the same objects. Id counters for professors and students are state of
the store instance, not of the entity classes.
"""

import threading
from collections.abc import Iterator
from contextlib import contextmanager
from enum import Enum

from registrar.config import Settings
from registrar.domain.entities import (
    AbstractEntity,
    Course,
    Department,
    Enrollment,
    Professor,
    Student,
)
from registrar.domain.exceptions import DuplicateKeyError, InvalidArgumentError
from registrar.logging_config import get_logger

logger = get_logger(__name__)

class EntityKind(str, Enum):
    """Kinds of entity held by the record store."""

    DEPARTMENT = "department"
    COURSE = "course"
    PROFESSOR = "professor"
    STUDENT = "student"
    ENROLLMENT = "enrollment"

    @property
    def entity_class(self) -> type[AbstractEntity]:
        """Entity class stored under this kind."""
        return _ENTITY_CLASSES[self]

    @property
    def label(self) -> str:
        """Human-readable kind name (e.g., 'Course')."""
        return self.entity_class.entity_kind

_ENTITY_CLASSES: dict[EntityKind, type[AbstractEntity]] = {
    EntityKind.DEPARTMENT: Department,
    EntityKind.COURSE: Course,
    EntityKind.PROFESSOR: Professor,
    EntityKind.STUDENT: Student,
    EntityKind.ENROLLMENT: Enrollment,
}

# Kinds whose ids come from a store counter instead of the caller.
GENERATED_ID_KINDS = frozenset({EntityKind.PROFESSOR, EntityKind.STUDENT})

class RecordStore:
    """
    In-memory store keyed by entity kind and id.

    Mutations run under one store-wide re-entrant lock, so the uniqueness
    and referential invariants hold even if callers share the store across
    threads.
    """

    def __init__(self, settings: Settings | None = None):
        """
        Initialize an empty store.

        Args:
            settings: Settings for id counters and grade bounds
                (default: Settings from the environment)
        """
        self.settings = settings or Settings()
        self._records: dict[EntityKind, dict[str, AbstractEntity]] = {
            kind: {} for kind in EntityKind
        }
        self._last_ids: dict[EntityKind, int] = {
            kind: self.settings.first_generated_id - 1 for kind in GENERATED_ID_KINDS
        }
        self._lock = threading.RLock()

    @contextmanager
    def locked(self) -> Iterator["RecordStore"]:
        """Hold the store-wide mutation lock for the duration of the block."""
        with self._lock:
            yield self

    def next_id(self, kind: EntityKind) -> int:
        """
        Issue the next id for a counter-backed kind.

        Counters are monotonic and independent per kind, so Student 1 and
        Professor 1 can coexist. add() moves a counter past any id inserted
        directly, so an issued id is always free.

        Raises:
            InvalidArgumentError: If the kind uses caller-assigned ids
        """
        if kind not in GENERATED_ID_KINDS:
            raise InvalidArgumentError(
                f"{kind.label} ids are assigned by the caller", field="kind", value=kind.value
            )
        with self._lock:
            self._last_ids[kind] += 1
            return self._last_ids[kind]

    def get_all(self, kind: EntityKind) -> list[AbstractEntity]:
        """All entities of a kind, in insertion order."""
        return list(self._records[kind].values())

    def get_by_id(self, kind: EntityKind, entity_id: str | int) -> AbstractEntity | None:
        """
        Look up an entity by id.

        Args:
            kind: Entity kind
            entity_id: Identifier; integers are compared in decimal form

        Returns:
            The entity, or None if there is none with this id
        """
        return self._records[kind].get(str(entity_id))

    def count(self, kind: EntityKind) -> int:
        """Number of live entities of a kind."""
        return len(self._records[kind])

    def contains(self, kind: EntityKind, entity: AbstractEntity) -> bool:
        """Check if this exact entity object is live in the store."""
        return self._records[kind].get(entity.entity_id) is entity

    def find_by_name(self, kind: EntityKind, name: str) -> AbstractEntity | None:
        """First entity of a kind whose display name matches, ignoring case."""
        wanted = name.casefold()
        for entity in self._records[kind].values():
            if entity.display_name.casefold() == wanted:
                return entity
        return None

    def add(self, kind: EntityKind, entity: AbstractEntity) -> None:
        """
        Insert an entity.

        Never overwrites: a second entity with the same id is rejected and
        the store is left as it was.

        Raises:
            InvalidArgumentError: If the entity is not of the kind's class
            DuplicateKeyError: If the id is already taken for this kind
        """
        if not isinstance(entity, kind.entity_class):
            raise InvalidArgumentError(
                f"Expected a {kind.label}, got {type(entity).__name__}",
                field="entity",
            )

        with self._lock:
            records = self._records[kind]
            if entity.entity_id in records:
                if kind == EntityKind.ENROLLMENT:
                    raise DuplicateKeyError(
                        kind.label,
                        entity.entity_id,
                        message=(
                            f"Student {entity.student.name} is already enrolled "
                            f"in the course {entity.course.name}"
                        ),
                    )
                raise DuplicateKeyError(kind.label, entity.entity_id)
            records[entity.entity_id] = entity
            if kind in GENERATED_ID_KINDS:
                # next_id() must never hand out an id inserted directly
                self._last_ids[kind] = max(self._last_ids[kind], entity.id)

        logger.debug("Record added", kind=kind.value, entity_id=entity.entity_id)

    def remove_student(self, student_id: str | int) -> bool:
        """
        Remove a student.

        The student's enrollment records are not removed; see
        orphaned_enrollments() and purge_orphaned_enrollments().

        Returns:
            bool: True if a student existed and was removed
        """
        with self._lock:
            removed = self._records[EntityKind.STUDENT].pop(str(student_id), None)

        if removed is None:
            return False
        logger.info("Student removed", student_id=str(student_id))
        return True

    def orphaned_enrollments(self) -> list[Enrollment]:
        """Enrollment records whose student is no longer live."""
        return [
            e
            for e in self._records[EntityKind.ENROLLMENT].values()
            if not self.contains(EntityKind.STUDENT, e.student)
        ]

    def purge_orphaned_enrollments(self) -> int:
        """
        Remove enrollment records whose student is no longer live.

        Returns:
            int: Number of enrollment records removed
        """
        with self._lock:
            orphans = self.orphaned_enrollments()
            for enrollment in orphans:
                del self._records[EntityKind.ENROLLMENT][enrollment.entity_id]

        if orphans:
            logger.info("Orphaned enrollments purged", count=len(orphans))
        return len(orphans)
