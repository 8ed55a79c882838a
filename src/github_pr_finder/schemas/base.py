"""Base schema class with ORM conversion helpers."""

from typing import Any, Self

from pydantic import BaseModel, ConfigDict


class SchemaBase(BaseModel):
    """Base class for schemas that are read from or written to ORM rows.

    Strings are kept verbatim: PR bodies and diffs carry meaningful
    leading and trailing whitespace.
    """

    model_config = ConfigDict(from_attributes=True)

    @classmethod
    def from_orm(cls, obj: Any) -> Self:
        """Create a schema instance from a SQLAlchemy model instance."""
        return cls.model_validate(obj)

    @classmethod
    def from_orm_list(cls, objs: list[Any]) -> list[Self]:
        """Create schema instances from a list of SQLAlchemy model instances."""
        return [cls.from_orm(obj) for obj in objs]
