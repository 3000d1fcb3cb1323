"""Base schema class for validated input and ORM-backed read models."""

from typing import Any, Self

from pydantic import BaseModel, ConfigDict


class SchemaBase(BaseModel):
    """Base class for all Pydantic schemas with ORM conversion support.

    Strings are stripped on input so logins and track labels typed on the
    command line compare equal to the ones GitHub returns.
    """

    model_config = ConfigDict(
        from_attributes=True,
        str_strip_whitespace=True,
    )

    @classmethod
    def from_model(cls, obj: Any) -> Self:
        """Create a schema instance from a SQLAlchemy model instance."""
        return cls.model_validate(obj)

    @classmethod
    def from_models(cls, objs: list[Any]) -> list[Self]:
        """Create schema instances from a list of SQLAlchemy model instances."""
        return [cls.from_model(obj) for obj in objs]

    def to_json_dict(self) -> dict[str, Any]:
        """Dump to a JSON-compatible dict (datetimes as ISO strings)."""
        return self.model_dump(mode="json")
