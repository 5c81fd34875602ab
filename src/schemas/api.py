"""API response schemas shared by the dashboard endpoints."""

from __future__ import annotations

from typing import Any, Generic, TypeVar

from pydantic import BaseModel

T = TypeVar("T")


class ApiResponse(BaseModel, Generic[T]):
    """Standard API response wrapper.

    Attributes:
        success: Whether the dashboard request itself was served. A mutating
            call that reached the baker backend and failed there is still a
            successful dashboard request; the failure lives in `data`.
        data: The response payload.
        message: A human-readable message about the response.
        error: Error details (when success is False).
    """

    success: bool = True
    data: T | None = None
    message: str = "Operation completed successfully"
    error: dict[str, Any] | None = None


class ErrorResponse(ApiResponse[None]):
    """Error API response, always with ``success=False``."""

    success: bool = False
    message: str = "An error occurred"
    error: dict[str, Any] | None = None
