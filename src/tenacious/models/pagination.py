"""Pagination envelope returned by v3 search endpoints."""

from typing import Any

from pydantic import BaseModel, Field, field_validator


class Pagination(BaseModel):
    """Pagination descriptor.

    When ``next`` is not empty it must be sent back as the body of the
    following request to get the next page.
    """

    next: str = Field(default="", description="Cursor for the next page, empty on the last page")
    limit: int = Field(default=0)
    total: int = Field(default=0)

    @field_validator("next", mode="before")
    @classmethod
    def null_cursor_is_last_page(cls, v: Any) -> Any:
        """Treat a null cursor as the end of the results."""
        return "" if v is None else v

    @field_validator("limit", "total", mode="before")
    @classmethod
    def null_count_is_zero(cls, v: Any) -> Any:
        return 0 if v is None else v

    @property
    def has_next(self) -> bool:
        return self.next != ""
