"""Shared schema building blocks: camelCase base model and response envelopes."""

from typing import Annotated, ClassVar, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field, StringConstraints, model_validator
from pydantic.alias_generators import to_camel

T = TypeVar("T")

# Largest value a NUMERIC(10, 2) column holds
MAX_QUANTITY = 99_999_999.99

Name = Annotated[str, StringConstraints(strip_whitespace=True, min_length=2, max_length=255)]
Label = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=255)]
Unit = Annotated[str, StringConstraints(strip_whitespace=True, max_length=50)]

Quantity = Annotated[float, Field(ge=0, le=MAX_QUANTITY, allow_inf_nan=False)]
PositiveQuantity = Annotated[float, Field(gt=0, le=MAX_QUANTITY, allow_inf_nan=False)]


class CamelModel(BaseModel):
    """Base model that speaks camelCase on the wire and accepts either casing."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


class PatchModel(CamelModel):
    """Partial update. Fields named in not_nullable may be omitted but not sent as null."""

    not_nullable: ClassVar[tuple[str, ...]] = ()

    @model_validator(mode="after")
    def reject_nulls(self):
        for name in self.not_nullable:
            if name in self.model_fields_set and getattr(self, name) is None:
                raise ValueError(f"{to_camel(name)} cannot be null")
        return self

    def changes(self) -> dict:
        """Fields the client actually sent."""
        return self.model_dump(exclude_unset=True)


class Envelope(BaseModel, Generic[T]):
    """Success envelope: {"data": ...}."""

    data: T


class Page(CamelModel, Generic[T]):
    """Paginated list."""

    items: list[T]
    page: int
    page_size: int
    total: int


class ItemList(CamelModel, Generic[T]):
    """Unpaginated list."""

    items: list[T]


class ErrorDetail(BaseModel):
    code: str
    message: str


class ErrorResponse(BaseModel):
    """Failure envelope: {"error": {"code": ..., "message": ...}}."""

    error: ErrorDetail
