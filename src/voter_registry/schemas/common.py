"""Common Pydantic v2 schemas shared across the API.

Every JSON response uses the ``{success, data}`` / ``{success, error}``
envelope.
"""

from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field

T = TypeVar("T")


class ApiResponse(BaseModel, Generic[T]):
    """Successful response envelope."""

    success: bool = Field(default=True, description="Always true for successful responses")
    data: T = Field(description="Response payload")


class MessageResponse(ApiResponse[T], Generic[T]):
    """Successful response envelope with a human-readable message."""

    message: str = Field(description="Outcome description")


class PaginationMeta(BaseModel):
    """Pagination metadata included in paginated responses."""

    model_config = ConfigDict(populate_by_name=True)

    page: int = Field(description="Current page number")
    limit: int = Field(description="Items per page")
    total: int = Field(description="Total number of matching items")
    total_pages: int = Field(alias="totalPages", description="Total number of pages")


class PaginatedResponse(ApiResponse[T], Generic[T]):
    """Successful response envelope for a page of items."""

    pagination: PaginationMeta


class ErrorResponse(BaseModel):
    """Standard error response body."""

    success: bool = Field(default=False, description="Always false for errors")
    error: str = Field(description="Human-readable error message")


class HealthResponse(BaseModel):
    """Liveness probe response."""

    status: str = "ok"
    timestamp: str = Field(description="Server time in ISO 8601")
