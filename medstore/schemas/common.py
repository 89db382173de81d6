# FILE: medstore/schemas/common.py
from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, ValidationInfo, field_validator
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """
    Wire format is camelCase (what the web client sends);
    snake_case field names are accepted on input too.
    """
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class FieldError(BaseModel):
    field: str
    message: str


class ApiError(BaseModel):
    message: str
    error: Optional[str] = None
    errors: Optional[List[FieldError]] = None


class MessageOut(BaseModel):
    message: str


def not_null(*fields: str):
    """
    Before-validator for partial-update models: a field may be omitted,
    but an explicit null is rejected since the column is NOT NULL.
    """
    def _check(cls, v, info: ValidationInfo):
        if v is None:
            raise ValueError(f"{info.field_name} cannot be null")
        return v

    return field_validator(*fields, mode="before")(classmethod(_check))
