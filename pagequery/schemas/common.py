from typing import Generic, TypeVar, List

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

T = TypeVar("T")


class PageMeta(BaseModel):
    """Pagination metadata, echoing the filter and order tokens that were honored."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    total_count: int
    page: int
    limit: int
    last_page: int
    order_by: List[str] = []
    filter: dict[str, List[str]] = {}


class PaginatedResponse(BaseModel, Generic[T]):
    """Generic paginated response."""

    records: List[T]
    meta: PageMeta


class ErrorResponse(BaseModel):
    """Standard error response."""

    error: dict

    @classmethod
    def create(cls, code: str, message: str, details: dict = None):
        """Create error response with standard format."""
        return cls(
            error={"code": code, "message": message, "details": details or {}}
        )
