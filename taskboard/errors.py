"""Domain errors raised by the task store and API layer.

Each error carries the HTTP status it maps to; the handlers registered in
``main.py`` turn them into JSON responses.
"""

from typing import Dict, List, Optional

from fastapi import Request, status
from fastapi.responses import JSONResponse


class TaskboardError(Exception):
    """Base class for all application errors."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> Dict:
        return {"detail": self.message}


class ValidationError(TaskboardError):
    """Client input failed validation.

    Attributes:
        errors: One ``{"field", "message"}`` entry per violated field
    """

    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, errors: List[Dict[str, str]], message: str = "Validation failed"):
        super().__init__(message)
        self.errors = errors

    @classmethod
    def single(cls, field: str, message: str) -> "ValidationError":
        return cls([{"field": field, "message": message}], message=message)

    def to_dict(self) -> Dict:
        return {"detail": self.message, "errors": self.errors}


class AuthorizationError(TaskboardError):
    """The caller is not authenticated."""

    status_code = status.HTTP_401_UNAUTHORIZED

    def __init__(self, message: str = "Not authenticated"):
        super().__init__(message)


class TaskNotFoundError(TaskboardError):
    """The task does not exist or belongs to another user."""

    status_code = status.HTTP_404_NOT_FOUND

    def __init__(self, task_id: Optional[int] = None):
        super().__init__("Task not found")
        self.task_id = task_id


class ConflictError(TaskboardError):
    status_code = status.HTTP_409_CONFLICT


class PersistenceError(TaskboardError):
    """A database write failed and was rolled back."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


async def taskboard_error_handler(request: Request, exc: TaskboardError) -> JSONResponse:
    headers = None
    if isinstance(exc, AuthorizationError):
        headers = {"WWW-Authenticate": "Bearer"}
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict(), headers=headers)
