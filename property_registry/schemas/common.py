"""Response envelope and paging containers shared by every service."""

from __future__ import annotations

import math
from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field, computed_field
from pydantic.alias_generators import to_camel

T = TypeVar("T")


class CamelModel(BaseModel):
    """Base model serialized with camelCase aliases.

    Inputs are accepted under either the field name or its alias.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class ApiResponse(CamelModel, Generic[T]):
    """Uniform result envelope; ``data`` is always ``None`` on failure."""

    success: bool
    message: str = ""
    data: T | None = None
    errors: list[str] | None = None
    status_code: int = 200

    @classmethod
    def success_response(cls, data: T, message: str = "Success") -> ApiResponse[T]:
        return cls(success=True, message=message, data=data, status_code=200)

    @classmethod
    def error_response(
        cls,
        message: str,
        status_code: int = 400,
        errors: list[str] | None = None,
    ) -> ApiResponse[T]:
        return cls(
            success=False,
            message=message,
            data=None,
            errors=errors,
            status_code=status_code,
        )


class PagedResult(CamelModel, Generic[T]):
    items: list[T] = Field(default_factory=list)
    total_count: int = 0
    page_number: int = 1
    page_size: int = 10

    @computed_field
    @property
    def total_pages(self) -> int:
        if self.page_size <= 0:
            return 0
        return math.ceil(self.total_count / self.page_size)

    @computed_field
    @property
    def has_next_page(self) -> bool:
        return self.page_number < self.total_pages

    @computed_field
    @property
    def has_previous_page(self) -> bool:
        return self.page_number > 1
