"""Department and course managers."""

from collections.abc import Mapping
from typing import ClassVar

from registrar.domain.entities import AbstractEntity, Course, Department
from registrar.managers.base import RecordManager
from registrar.managers.schemas import CodedFields, DescriptiveFields
from registrar.store.record_store import EntityKind


class DepartmentManager(RecordManager[Department]):
    """Manages departments. Ids are caller-assigned codes."""

    kind: ClassVar[EntityKind] = EntityKind.DEPARTMENT
    create_schema = CodedFields
    update_schema = DescriptiveFields

    def build(self, fields: CodedFields, related: Mapping[str, AbstractEntity]) -> Department:
        return Department(id=fields.id, name=fields.name, description=fields.description)

    def apply_update(self, entity: Department, fields: DescriptiveFields) -> None:
        entity.name = fields.name
        entity.description = fields.description


class CourseManager(RecordManager[Course]):
    """
    Manages courses.

    A department must be chosen before the course fields; the new course
    attaches itself to that department.
    """

    kind: ClassVar[EntityKind] = EntityKind.COURSE
    create_schema = CodedFields
    update_schema = DescriptiveFields
    related_kinds = {"department": EntityKind.DEPARTMENT}

    def build(self, fields: CodedFields, related: Mapping[str, AbstractEntity]) -> Course:
        return Course(
            id=fields.id,
            name=fields.name,
            description=fields.description,
            department=related["department"],
        )

    def apply_update(self, entity: Course, fields: DescriptiveFields) -> None:
        entity.name = fields.name
        entity.description = fields.description
