"""Shared HTTP exception classes for the suggestion service.

Preset status codes and details; the shared error envelope renders them.
"""
from fastapi import HTTPException, status


class NotFoundError(HTTPException):
    def __init__(self, resource: str = "Resource") -> None:
        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"{resource} not found.",
        )


class ServiceUnavailableError(HTTPException):
    """Upstream dependency failed; the request is safe to retry."""

    def __init__(
        self,
        detail: str = "Suggestions are temporarily unavailable. Please retry.",
        retry_after_s: int = 5,
    ) -> None:
        super().__init__(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=detail,
            headers={"Retry-After": str(retry_after_s)},
        )
