"""
Shared base for partial-update (PATCH) bodies.
"""

from __future__ import annotations

from typing import Any, ClassVar, Tuple

from pydantic import BaseModel, ConfigDict, model_validator


class PartialUpdate(BaseModel):
    """A PATCH body whose fields may be omitted.

    Fields listed in ``non_nullable`` back NOT NULL columns: they may be left
    out of the body but an explicit ``null`` is rejected with a validation
    error instead of reaching the database.
    """

    model_config = ConfigDict(use_enum_values=True, validate_default=True)

    non_nullable: ClassVar[Tuple[str, ...]] = ()

    @model_validator(mode="before")
    @classmethod
    def _reject_explicit_nulls(cls, data: Any) -> Any:
        if isinstance(data, dict):
            nulls = [name for name in cls.non_nullable if name in data and data[name] is None]
            if nulls:
                raise ValueError(f"{', '.join(nulls)} cannot be null")
        return data
