"""
Generic Record Manager

One operation set {list, find, create, update, render} shared by every
entity kind. Concrete managers only supply their field schemas, their
required relations, and how to build and update their entity; the control
flow is identical for all kinds.

Recoverable failures are returned as OperationResult values, never raised.
"""

from abc import ABC, abstractmethod
from collections.abc import Mapping
from enum import Enum
from typing import Any, ClassVar, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from registrar.domain.entities import AbstractEntity, DisplayRecord, RenderLevel
from registrar.domain.exceptions import (
    DomainException,
    DuplicateKeyError,
    ErrorCode,
    NotFoundError,
)
from registrar.logging_config import get_logger
from registrar.managers.schemas import FieldSchema
from registrar.store.record_store import EntityKind, RecordStore

logger = get_logger(__name__)

EntityT = TypeVar("EntityT", bound=AbstractEntity)


class Capability(str, Enum):
    """Optional operations a manager may support beyond the generic set."""

    ENROLL = "enroll"
    GRADE = "grade"
    DELETE = "delete"


class OperationResult(BaseModel):
    """Outcome of a manager operation."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    success: bool = Field(..., description="Whether the operation took effect")
    reason: str = Field(..., description="Human-readable reason")
    error_code: ErrorCode | None = Field(default=None)
    entity: Any = Field(default=None, repr=False, description="Affected entity, if any")
    context: dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def ok(cls, reason: str, entity: Any = None) -> "OperationResult":
        """Successful outcome."""
        return cls(success=True, reason=reason, entity=entity)

    @classmethod
    def failure(
        cls,
        reason: str,
        error_code: ErrorCode,
        context: dict[str, Any] | None = None,
    ) -> "OperationResult":
        """Failed outcome naming the violated rule."""
        return cls(success=False, reason=reason, error_code=error_code, context=context or {})

    @classmethod
    def from_exception(cls, exc: DomainException) -> "OperationResult":
        """Failed outcome built from a domain exception."""
        return cls.failure(exc.message, exc.error_code, dict(exc.context))

    @classmethod
    def from_validation_error(cls, exc: ValidationError) -> "OperationResult":
        """Failed outcome built from a pydantic validation error."""
        errors = [
            {"field": ".".join(str(part) for part in err["loc"]), "message": err["msg"]}
            for err in exc.errors()
        ]
        reason = "; ".join(
            f"{e['field']}: {e['message']}" if e["field"] else e["message"] for e in errors
        )
        return cls.failure(reason, ErrorCode.INVALID_ARGUMENT, {"errors": errors})


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


class RecordManager(ABC, Generic[EntityT]):
    """
    Generic create/read/update manager for one entity kind.

    Subclasses declare:
    - kind: the EntityKind they manage
    - create_schema / update_schema: field sets for create and update
    - related_kinds: required relations, by name
    - capabilities: optional extra operations they implement
    """

    kind: ClassVar[EntityKind]
    create_schema: ClassVar[type[FieldSchema]]
    update_schema: ClassVar[type[FieldSchema]]
    related_kinds: ClassVar[dict[str, EntityKind]] = {}
    capabilities: ClassVar[frozenset[Capability]] = frozenset()

    def __init__(self, store: RecordStore):
        """
        Initialize manager.

        Args:
            store: Record store holding the managed entities
        """
        self.store = store

    @property
    def description(self) -> str:
        """Human-readable kind name (e.g., 'Course')."""
        return self.kind.label

    def has_capability(self, capability: Capability) -> bool:
        """Check if this manager supports an optional operation."""
        return capability in self.capabilities

    def list_fields(self, is_updating: bool) -> list[str]:
        """
        Ordered field names to collect from the caller.

        The identifier field appears only when creating: ids are
        immutable after creation.
        """
        schema = self.update_schema if is_updating else self.create_schema
        return list(schema.model_fields)

    def related_fields(self) -> list[str]:
        """Relations that must be chosen before collecting fields."""
        return list(self.related_kinds)

    def resolve_related(
        self, selections: Mapping[str, str | int | None] | None = None
    ) -> dict[str, AbstractEntity | None]:
        """
        Map each required relation to the live entity with the selected id.

        Args:
            selections: Relation name -> chosen entity id

        Returns:
            dict: Relation name -> entity, or None where nothing matched
        """
        selections = selections or {}
        resolved: dict[str, AbstractEntity | None] = {}
        for name, kind in self.related_kinds.items():
            selected_id = selections.get(name)
            resolved[name] = (
                None if selected_id is None else self.store.get_by_id(kind, selected_id)
            )
        return resolved

    def list_all(self) -> list[EntityT]:
        """All live entities of this kind."""
        return self.store.get_all(self.kind)

    def find_by_id(self, entity_id: str | int) -> EntityT | None:
        """Find an entity by id; None if absent."""
        return self.store.get_by_id(self.kind, entity_id)

    def render(
        self, entity: EntityT, level: RenderLevel = RenderLevel.SUMMARY
    ) -> DisplayRecord:
        """Render one entity as a display record."""
        return entity.render(level)

    def render_all(self, level: RenderLevel = RenderLevel.SUMMARY) -> list[DisplayRecord]:
        """Render every live entity of this kind."""
        return [entity.render(level) for entity in self.list_all()]

    @abstractmethod
    def build(self, fields: FieldSchema, related: Mapping[str, AbstractEntity]) -> EntityT:
        """Construct a new entity, linking it to its related entities."""

    @abstractmethod
    def apply_update(self, entity: EntityT, fields: FieldSchema) -> None:
        """Assign the mutable fields of an existing entity."""

    def create(
        self,
        field_values: Mapping[str, Any],
        related: Mapping[str, AbstractEntity | None] | None = None,
    ) -> OperationResult:
        """
        Validate, construct and insert a new entity.

        Args:
            field_values: Field name -> value, for every create field
            related: Relation name -> already-resolved entity

        Returns:
            OperationResult: Success carrying the entity, or the reason
            it was rejected (INVALID_ARGUMENT, NOT_FOUND, DUPLICATE_KEY)
        """
        missing = [f for f in self.list_fields(is_updating=False) if _is_blank(field_values.get(f))]
        if missing:
            return self._reject(
                "create",
                OperationResult.failure(
                    f"Missing required fields: {', '.join(missing)}",
                    ErrorCode.INVALID_ARGUMENT,
                    {"fields": missing},
                ),
            )

        related = dict(related or {})
        for name, kind in self.related_kinds.items():
            target = related.get(name)
            if target is None:
                return self._reject(
                    "create",
                    OperationResult.failure(
                        f"{self.description} requires a {kind.label}",
                        ErrorCode.INVALID_ARGUMENT,
                        {"field": name},
                    ),
                )
            if not isinstance(target, kind.entity_class):
                return self._reject(
                    "create",
                    OperationResult.failure(
                        f"{name} must be a resolved {kind.label}, got {type(target).__name__}",
                        ErrorCode.INVALID_ARGUMENT,
                        {"field": name},
                    ),
                )
            if not self.store.contains(kind, target):
                return self._reject(
                    "create",
                    OperationResult.from_exception(NotFoundError(kind.label, target.entity_id)),
                )

        try:
            fields = self.create_schema.model_validate(dict(field_values))
            with self.store.locked():
                self._check_available(fields)
                entity = self.build(fields, related)
                self.store.add(self.kind, entity)
        except ValidationError as exc:
            return self._reject("create", OperationResult.from_validation_error(exc))
        except DomainException as exc:
            return self._reject("create", OperationResult.from_exception(exc))

        logger.info(
            f"{self.description} created",
            kind=self.kind.value,
            entity_id=entity.entity_id,
        )
        return OperationResult.ok(
            f"{self.description} {entity.display_name} added successfully", entity
        )

    def update(self, entity: EntityT, field_values: Mapping[str, Any]) -> OperationResult:
        """
        Update the mutable descriptive fields of an entity.

        Identifiers and relational references are never touched, even if
        present in field_values.

        Returns:
            OperationResult: Success carrying the entity, or the reason
            it was rejected (INVALID_ARGUMENT, NOT_FOUND)
        """
        missing = [f for f in self.list_fields(is_updating=True) if _is_blank(field_values.get(f))]
        if missing:
            return self._reject(
                "update",
                OperationResult.failure(
                    f"Missing required fields: {', '.join(missing)}",
                    ErrorCode.INVALID_ARGUMENT,
                    {"fields": missing},
                ),
            )

        if entity is not None and not isinstance(entity, self.kind.entity_class):
            return self._reject(
                "update",
                OperationResult.failure(
                    f"Expected a {self.description}, got {type(entity).__name__}",
                    ErrorCode.INVALID_ARGUMENT,
                    {"field": "entity"},
                ),
            )

        if entity is None or not self.store.contains(self.kind, entity):
            entity_id = entity.entity_id if entity is not None else None
            return self._reject(
                "update",
                OperationResult.failure(
                    f"Invalid {self.description} ID",
                    ErrorCode.NOT_FOUND,
                    {"entity_type": self.description, "entity_id": entity_id},
                ),
            )

        try:
            fields = self.update_schema.model_validate(dict(field_values))
            with self.store.locked():
                self.apply_update(entity, fields)
        except ValidationError as exc:
            return self._reject("update", OperationResult.from_validation_error(exc))
        except DomainException as exc:
            return self._reject("update", OperationResult.from_exception(exc))

        logger.info(
            f"{self.description} updated",
            kind=self.kind.value,
            entity_id=entity.entity_id,
        )
        return OperationResult.ok(
            f"{self.description} {entity.display_name} updated successfully", entity
        )

    def _check_available(self, fields: FieldSchema) -> None:
        """Reject a caller-assigned id that is already taken."""
        entity_id = getattr(fields, "id", None)
        if entity_id is not None and self.store.get_by_id(self.kind, entity_id) is not None:
            raise DuplicateKeyError(self.description, entity_id)

    def _reject(self, operation: str, result: OperationResult) -> OperationResult:
        logger.warning(
            f"{self.description} {operation} rejected",
            kind=self.kind.value,
            error_code=result.error_code.value if result.error_code else None,
            reason=result.reason,
        )
        return result
