"""Custom exception hierarchy for the Pocket Money API."""

from __future__ import annotations

from typing import Any


class AppError(Exception):
    """Base application error with a stable machine-readable code."""

    def __init__(self, message: str, code: str, status_code: int = 400) -> None:
        self.message = message
        self.code = code
        self.status_code = status_code
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        """Serialize the error in the API standard shape."""
        return {"success": False, "error": self.message, "code": self.code}


class NotFoundError(AppError):
    """Raised when a requested resource does not exist."""

    def __init__(self, resource: str) -> None:
        super().__init__(message=f"{resource} not found", code="NOT_FOUND", status_code=404)


class InvalidInputError(AppError):
    """Raised for bad amounts, descriptions and other request payload issues."""

    def __init__(self, reason: str) -> None:
        super().__init__(message=reason, code="INVALID_INPUT", status_code=400)


class InsufficientFundsError(AppError):
    """Raised when a withdrawal exceeds the current balance."""

    def __init__(self, requested: float, available: float) -> None:
        self.requested = requested
        self.available = available
        super().__init__(
            message="Insufficient funds",
            code="INSUFFICIENT_FUNDS",
        )


class BackendError(AppError):
    """Raised when the data store rejects a request.

    The backend message is passed through verbatim.
    """

    def __init__(self, message: str, backend_code: str | None = None) -> None:
        self.backend_code = backend_code
        super().__init__(message=message, code="BACKEND_FAILURE", status_code=500)


class UnauthorizedError(AppError):
    """Raised when the caller is not authenticated."""

    def __init__(self, reason: str = "Unauthorized") -> None:
        super().__init__(message=reason, code="UNAUTHORIZED", status_code=401)


class ForbiddenError(AppError):
    """Raised when the user lacks permission for the action."""

    def __init__(self, reason: str = "You don't have permission") -> None:
        super().__init__(message=reason, code="FORBIDDEN", status_code=403)
