"""Immutable pydantic base model shared by every container in the package."""

from typing import Any, Self

from pydantic import BaseModel, ConfigDict


class StrictBaseModel(BaseModel):
    """
    A strict, frozen pydantic model.

    Instances are hashable and compare by value, which is what digests,
    paths and parameters need: two objects built from the same inputs
    must be interchangeable.
    """

    model_config = ConfigDict(
        extra="forbid",
        frozen=True,
        strict=True,
        validate_default=True,
        arbitrary_types_allowed=True,
    )

    def copy(self: Self, **kwargs: Any) -> Self:
        """Create a validated copy of the model with some fields replaced."""
        return self.__class__(**(dict(self) | kwargs))
