from typing import Any, Dict, Type, TypeVar, Union

from pydantic import BaseModel, ConfigDict

S = TypeVar("S", bound="SchemaBase")


class SchemaBase(BaseModel):
    """
    Base class for every gate and page-audit model.

    Unknown fields are rejected so a misspelled key in a YAML input fails
    loudly instead of being silently ignored.
    """

    model_config = ConfigDict(extra="forbid")

    @classmethod
    def coerce(cls: Type[S], value: Union[S, Dict[str, Any]]) -> S:
        """Accept either an instance or a plain dict (validated)."""
        if isinstance(value, cls):
            return value
        return cls.model_validate(value)

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", exclude_none=True)


class FrozenSchema(SchemaBase):
    """Caller-owned context that must never change during an evaluation."""

    model_config = ConfigDict(extra="forbid", frozen=True)
