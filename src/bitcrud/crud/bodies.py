"""
Default request bodies for the CRUD handlers.

Handlers that need extra fields extend a base body by subclassing it and
register the subclass with `set_body`:

    class NameBody(FindOneBody):
        name: str

The handler keeps reading `where` / `order` / `updates` from the base
fields while query transforms read the custom ones.
"""

from typing import Any, Dict, List

from pydantic import Field, field_validator

from ..core.config import settings
from ..core.schema_base import BodyModel
from .conditions import Conditions, Orders, parse_condition


class WhereBody(BodyModel):
    """Body carrying a list of `[field, operator, value]` conditions."""

    where: Conditions = Field(default_factory=list)

    @field_validator("where")
    @classmethod
    def validate_where(cls, v: List[List[Any]]) -> List[List[Any]]:
        for raw in v:
            parse_condition(raw)
        return v


class FindOneBody(WhereBody):
    order: Orders = Field(default_factory=dict)


class FindManyBody(WhereBody):
    order: Orders = Field(default_factory=dict)


class Pagination(BodyModel):
    index: int = Field(default=1, ge=1)
    limit: int = Field(default_factory=lambda: settings.pagination.default_limit, ge=1)

    @field_validator("limit")
    @classmethod
    def cap_limit(cls, v: int) -> int:
        if v > settings.pagination.max_limit:
            raise ValueError(f"limit must be <= {settings.pagination.max_limit}")
        return v

    @property
    def offset(self) -> int:
        return (self.index - 1) * self.limit


class FindPageBody(WhereBody):
    order: Orders = Field(default_factory=dict)
    page: Pagination = Field(default_factory=Pagination)


class UpdateBody(WhereBody):
    updates: Dict[str, Any]

    @field_validator("updates")
    @classmethod
    def validate_updates(cls, v: Dict[str, Any]) -> Dict[str, Any]:
        if not v:
            raise ValueError("updates must not be empty")
        return v


class DeleteBody(WhereBody):
    pass
