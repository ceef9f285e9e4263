"""Envelope and pagination models shared by every endpoint."""

from __future__ import annotations

from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from jobchat.domain.entities import Page

T = TypeVar("T")


class ApiModel(BaseModel):
    """Base model rendering camelCase field names while accepting snake_case input."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Envelope(ApiModel, Generic[T]):
    """Response envelope ``{success, data?, error?, message?}``."""

    success: bool = True
    data: T | None = None
    error: str | None = None
    message: str | None = None


class PaginationRead(ApiModel):
    current_page: int
    total_pages: int
    total_items: int
    has_next_page: bool
    has_prev_page: bool

    @classmethod
    def from_page(cls, page: Page[Any]) -> "PaginationRead":
        return cls(
            current_page=page.page,
            total_pages=page.total_pages,
            total_items=page.total,
            has_next_page=page.has_next,
            has_prev_page=page.has_prev,
        )


__all__ = ["ApiModel", "Envelope", "PaginationRead"]
