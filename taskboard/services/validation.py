"""Explicit input validation.

Every check runs before any mutation and collects all violations into a
single ValidationError instead of stopping at the first one.
"""

import json
from typing import Dict, List, Optional

from ..errors import ValidationError

TITLE_MAX_LENGTH = 200
DESCRIPTION_MAX_LENGTH = 1000
USERNAME_MIN_LENGTH = 3
USERNAME_MAX_LENGTH = 50
PASSWORD_MIN_LENGTH = 8
ALLOWED_IMAGE_TYPES = ("image/jpeg", "image/png", "image/gif", "image/webp")

_UNSET = object()


def validate_task_fields(title=_UNSET, description=_UNSET) -> Dict[str, Optional[str]]:
    """Validate task text fields and return their cleaned values.

    Only the fields that are passed are checked, so the same function serves
    creation (title required) and partial updates.

    Args:
        title: Task title; stripped, must be 1-200 characters
        description: Optional description, at most 1000 characters

    Returns:
        Mapping of the passed field names to cleaned values

    Raises:
        ValidationError: Listing every violated field
    """
    errors: List[Dict[str, str]] = []
    cleaned: Dict[str, Optional[str]] = {}

    if title is not _UNSET:
        value = (title or "").strip()
        if not value:
            errors.append({"field": "title", "message": "Title is required"})
        elif len(value) > TITLE_MAX_LENGTH:
            errors.append({
                "field": "title",
                "message": f"Title cannot exceed {TITLE_MAX_LENGTH} characters",
            })
        cleaned["title"] = value

    if description is not _UNSET:
        value = description.strip() if description else None
        if value and len(value) > DESCRIPTION_MAX_LENGTH:
            errors.append({
                "field": "description",
                "message": f"Description cannot exceed {DESCRIPTION_MAX_LENGTH} characters",
            })
        cleaned["description"] = value or None

    if errors:
        raise ValidationError(errors)
    return cleaned


def validate_credentials(username: str, password: str) -> str:
    """Check registration credentials and return the stripped username."""
    errors: List[Dict[str, str]] = []
    username = (username or "").strip()

    if not USERNAME_MIN_LENGTH <= len(username) <= USERNAME_MAX_LENGTH:
        errors.append({
            "field": "username",
            "message": f"Username must be {USERNAME_MIN_LENGTH}-{USERNAME_MAX_LENGTH} characters",
        })
    if len(password or "") < PASSWORD_MIN_LENGTH:
        errors.append({
            "field": "password",
            "message": f"Password must be at least {PASSWORD_MIN_LENGTH} characters",
        })

    if errors:
        raise ValidationError(errors)
    return username


def parse_order_payload(body: bytes) -> List[int]:
    """Decode a reorder request body into a list of task ids.

    The body must be a JSON array whose elements are all integers. JSON
    booleans and floats are rejected even though Python treats ``True`` as
    an int.

    Raises:
        ValidationError: If the body is not a JSON array of integers
    """
    try:
        data = json.loads(body or b"")
    except (json.JSONDecodeError, UnicodeDecodeError, RecursionError):
        raise ValidationError.single("body", "Body must be a JSON array of task ids")

    if not isinstance(data, list):
        raise ValidationError.single("body", "Body must be a JSON array of task ids")

    errors = [
        {"field": f"body[{index}]", "message": "Task id must be an integer"}
        for index, item in enumerate(data)
        if isinstance(item, bool) or not isinstance(item, int)
    ]
    if errors:
        raise ValidationError(errors, message="Task ids must be integers")
    return data


def validate_image(content_type: Optional[str], data: bytes, max_bytes: int) -> str:
    """Check an uploaded image and return its normalised content type."""
    errors: List[Dict[str, str]] = []
    content_type = (content_type or "").split(";")[0].strip().lower()

    if content_type not in ALLOWED_IMAGE_TYPES:
        errors.append({
            "field": "image",
            "message": f"Unsupported image type '{content_type or 'unknown'}'",
        })
    if not data:
        errors.append({"field": "image", "message": "Image file is empty"})
    elif len(data) > max_bytes:
        errors.append({
            "field": "image",
            "message": f"Image cannot exceed {max_bytes} bytes",
        })

    if errors:
        raise ValidationError(errors)
    return content_type
