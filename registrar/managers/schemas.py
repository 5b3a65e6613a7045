"""
Manager Field Schemas

Field sets collected from the caller when creating or updating entities.
Field order is the order callers should prompt in.
"""

from datetime import date

from pydantic import BaseModel, ConfigDict, Field


class FieldSchema(BaseModel):
    """Base for validated field values handed to a manager."""

    model_config = ConfigDict(str_strip_whitespace=True, extra="ignore", frozen=True)


class CodedFields(FieldSchema):
    """Fields for creating departments and courses (caller-assigned id)."""

    id: str = Field(..., min_length=1, max_length=50, description="Unique code (e.g., MATH1211)")
    name: str = Field(..., min_length=1, max_length=200)
    description: str = Field(..., min_length=1, max_length=2000)


class DescriptiveFields(FieldSchema):
    """Mutable fields of departments and courses."""

    name: str = Field(..., min_length=1, max_length=200)
    description: str = Field(..., min_length=1, max_length=2000)


class PersonFields(FieldSchema):
    """Fields of professors and students; ids are generated by the store."""

    name: str = Field(..., min_length=1, max_length=200)
    birth_date: date = Field(..., description="Already-resolved birth date")
